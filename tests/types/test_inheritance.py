"""Tests for inheritance resolution, the registry and lazy proxies."""

import pytest

from ramlcore.exceptions import (
    CyclicInheritanceError,
    IncompatibleTypeInheritanceError,
    InvalidTypeDefinitionError,
    TypeNotFoundError,
)
from ramlcore.loader import RamlParser
from ramlcore.types import LazyProxyType, ObjectType, StringType, TypeRegistry


def messages(errors):
    return [str(error) for error in errors]


class TestTypeRegistry:
    """Test registration and lookup of named types."""

    def test_register_and_lookup(self, registry):
        node = StringType("Name")
        registry.register(node)
        assert registry.get_by_name("Name") is node
        assert registry.has_by_name("Name")
        assert not registry.has_by_name("Other")
        assert len(registry) == 1

    def test_lookup_of_unknown_name(self, registry):
        registry.register(StringType("Name"))
        registry.register(StringType("Code"))
        with pytest.raises(TypeNotFoundError) as exc_info:
            registry.get_by_name("Missing")
        assert str(exc_info.value) == 'No type found for name "Missing", list: [Name, Code]'

    def test_first_registered_wins(self, registry):
        first = StringType("Name")
        registry.register(first)
        registry.register(StringType("Name"))
        assert registry.get_by_name("Name") is first

    def test_remove(self, registry):
        node = StringType("Name")
        registry.register(node)
        registry.remove(node)
        assert len(registry) == 0
        with pytest.raises(ValueError):
            registry.remove(node)

    def test_clear(self, factory, registry):
        factory.declare("Name", "string")
        factory.declare("Alias", "Name")
        registry.clear()
        assert len(registry) == 0
        assert registry.pending == []

    def test_registries_are_independent(self, factory):
        factory.declare("Name", "string")
        assert not TypeRegistry().has_by_name("Name")

    def test_to_dict(self, factory, registry):
        factory.declare("Name", {"type": "string", "maxLength": 5})
        assert registry.to_dict() == {"Name": {"type": "string", "maxLength": 5}}


class TestInheritance:
    """Test facet merging between parents and children."""

    def test_child_overrides_parent_facets(self, simple_api):
        short = simple_api.get_type("ShortName").resolved_object()
        assert isinstance(short, StringType)
        assert short.min_length == 1
        assert short.max_length == 3
        assert messages(short.check("abcd")) == ["ShortName (Maximum allowed length: 3, got 4)"]

    def test_parent_is_not_modified(self, simple_api):
        simple_api.get_type("ShortName").resolved_object()
        assert simple_api.get_type("Name").check("abcd") == []

    def test_object_properties_are_inherited(self, complex_api):
        manager = complex_api.get_type("Manager").resolved_object()
        assert list(manager.properties) == [
            "kind",
            "firstname",
            "lastname",
            "age",
            "phone",
            "reports",
        ]
        person = complex_api.get_type("Person")
        assert "reports" not in person.properties

    def test_child_property_replaces_parent_property(self, complex_api):
        admin = complex_api.get_type("AlertableAdmin").resolved_object()
        assert list(admin.properties) == [
            "kind",
            "firstname",
            "lastname",
            "age",
            "phone",
            "clearanceLevel",
        ]
        assert admin.get_property_by_name("phone").required is True
        person = complex_api.get_type("Person")
        assert person.get_property_by_name("phone").required is False

    def test_multi_level_inheritance(self, complex_api):
        admin = complex_api.get_type("AlertableAdmin").resolved_object()
        value = {
            "kind": "AlertableAdmin",
            "firstname": "Al",
            "lastname": "Admin",
            "age": 33,
            "clearanceLevel": "medium",
            "phone": "555-1234",
        }
        assert messages(admin.check(value)) == [
            'clearanceLevel (Expected any of [low, high], got (str) "medium")'
        ]

    def test_resolution_is_idempotent(self, factory, registry):
        factory.declare("Name", {"type": "string", "maxLength": 5})
        alias = factory.declare("Alias", {"type": "Name", "minLength": 2})
        registry.apply_inheritance()
        first = alias.resolved_object()
        registry.apply_inheritance()
        assert alias.resolved_object() is first
        assert first.min_length == 2
        assert first.max_length == 5

    def test_resolution_is_lazy(self, factory):
        factory.declare("Name", {"type": "string", "maxLength": 5})
        alias = factory.declare("Alias", "Name")
        assert isinstance(alias, LazyProxyType)
        assert not alias.is_resolved
        assert messages(alias.check("toolong")) == ["Alias (Maximum allowed length: 5, got 7)"]
        assert alias.is_resolved

    def test_declared_alias_gets_its_own_name(self, factory, registry):
        factory.declare("Name", "string")
        alias = factory.declare("Alias", "Name")
        registry.apply_inheritance()
        node = alias.resolved_object()
        assert node.name == "Alias"
        assert node.type_name == "Alias"
        assert registry.get_by_name("Name").name == "Name"

    def test_property_reference_keeps_type_name(self, complex_api):
        org = complex_api.get_type("Org")
        head = org.get_property_by_name("Head").resolved_object()
        assert head.name == "Head"
        assert head.type_name == "Person"

    def test_cycle(self, factory, registry):
        factory.declare("A", "B")
        factory.declare("B", "A")
        with pytest.raises(CyclicInheritanceError, match="A -> B -> A"):
            registry.apply_inheritance()

    def test_self_reference(self, factory, registry):
        factory.declare("Loop", {"type": "Loop", "minLength": 1})
        with pytest.raises(CyclicInheritanceError, match="Loop -> Loop"):
            registry.apply_inheritance()

    def test_union_cycle(self, factory, registry):
        factory.declare("A", "B | string")
        factory.declare("B", "A")
        with pytest.raises(CyclicInheritanceError, match="A -> B"):
            registry.apply_inheritance()

    def test_optional_self_reference(self, factory, registry):
        factory.declare("A", "A?")
        with pytest.raises(CyclicInheritanceError, match="A -> A"):
            registry.apply_inheritance()

    def test_union_cycle_in_document(self):
        document = "#%RAML 1.0\ntitle: Loop\ntypes:\n  A: B | string\n  B: A\n"
        with pytest.raises(CyclicInheritanceError):
            RamlParser().parse_string(document)

    def test_recursive_object_is_allowed(self, factory, registry):
        factory.declare(
            "Node",
            {"properties": {"name": "string", "children?": "Node[]", "next?": "Node?"}},
        )
        registry.apply_inheritance()
        node = registry.get_by_name("Node")
        tree = {"name": "root", "children": [{"name": "leaf", "next": None}]}
        assert node.check(tree) == []
        assert messages(node.check({"name": "root", "children": [{"next": {"name": "x"}}]})) == [
            "name (Missing required property)"
        ]

    def test_incompatible_facets(self, factory, registry):
        factory.declare("Count", "number")
        factory.declare("Broken", {"type": "Count", "minLength": 2})
        with pytest.raises(IncompatibleTypeInheritanceError) as exc_info:
            registry.apply_inheritance()
        assert str(exc_info.value) == (
            "Inheritance not possible because of incompatible types, "
            "child is instance of StringType and parent is instance of NumberType"
        )

    def test_enum_on_object_parent(self, factory, registry):
        factory.declare("Thing", {"type": "object"})
        factory.declare("Broken", {"type": "Thing", "enum": ["a"]})
        with pytest.raises(IncompatibleTypeInheritanceError):
            registry.apply_inheritance()

    def test_unknown_parent(self, factory, registry):
        factory.declare("Orphan", "Missing")
        with pytest.raises(TypeNotFoundError, match='No type found for name "Missing"'):
            registry.apply_inheritance()

    def test_multiple_inheritance_is_rejected(self, factory):
        with pytest.raises(InvalidTypeDefinitionError, match="multiple inheritance"):
            factory.declare("Both", {"type": ["A", "B"]})

    def test_enum_on_object_is_rejected(self, factory):
        with pytest.raises(InvalidTypeDefinitionError, match="enum is only allowed on scalar"):
            factory.declare("Broken", {"type": "object", "enum": [1]})

    def test_required_facet_is_parsed(self, factory):
        assert factory.create("nickname", {"type": "string", "required": "false"}).required is False
        assert factory.create("title", {"type": "string", "required": "true"}).required is True

    def test_question_mark_wins_over_required_facet(self, factory):
        assert factory.create("nickname?", {"type": "string", "required": True}).required is False

    def test_invalid_facet_value(self, factory):
        with pytest.raises(InvalidTypeDefinitionError, match='Invalid declaration of type "Bad"'):
            factory.declare("Bad", {"type": "string", "minLength": -1})

    def test_definition_recursive(self, complex_api):
        merged = complex_api.get_type("Manager").definition_recursive()
        assert merged["type"] == "object"
        assert merged["discriminator"] == "kind"
        assert {"firstname", "reports"} <= set(merged["properties"])


class TestDiscriminator:
    """Test discriminator based member selection."""

    def test_discriminator_defaults_to_type_name(self, complex_api):
        manager = complex_api.get_type("Manager").resolved_object()
        assert manager.discriminate({"kind": "Manager"})
        assert not manager.discriminate({"kind": "Person"})
        assert manager.discriminate({"firstname": "Ann"})

    def test_explicit_discriminator_value(self, factory, registry):
        factory.declare(
            "Shape", {"type": "object", "discriminator": "shape", "properties": {"shape": "string"}}
        )
        circle = factory.declare("Circle", {"type": "Shape", "discriminatorValue": "circle"})
        registry.apply_inheritance()
        node = circle.resolved_object()
        assert isinstance(node, ObjectType)
        assert node.discriminate({"shape": "circle"})
        assert not node.discriminate({"shape": "Circle"})

    def test_proxy_skips_values_for_other_types(self, complex_api):
        manager = complex_api.get_type("Manager")
        assert manager.check({"kind": "Person"}) == []
        assert len(manager.check({"kind": "Manager"})) > 0
