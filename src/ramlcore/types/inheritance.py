"""Inheritance resolution and facet merging.

Every proxy created for a named type is resolved exactly once: its parent is
looked up (and resolved first when it is itself a proxy), then the proxy's own
facets are applied to a copy of the parent. Which facets a variant accepts and
how they combine is spelled out per variant by ``merge_facets``.
"""

import logging
from functools import singledispatch
from typing import TYPE_CHECKING, Any

from ramlcore.exceptions import (
    CyclicInheritanceError,
    IncompatibleTypeInheritanceError,
    InvalidTypeDefinitionError,
)
from ramlcore.types.array import ArrayType
from ramlcore.types.base import Type
from ramlcore.types.dates import DateTimeType
from ramlcore.types.enums import EnumType
from ramlcore.types.models import TypeDeclaration
from ramlcore.types.object import ObjectType
from ramlcore.types.proxy import LazyProxyType
from ramlcore.types.registry import TypeRegistry
from ramlcore.types.scalars import FileType, NumberType, StringType
from ramlcore.types.union import UnionType

if TYPE_CHECKING:
    from ramlcore.types.factory import TypeFactory

logger = logging.getLogger(__name__)

# Variant a facet belongs to, used to name the child kind in inheritance errors.
FACET_OWNERS: dict[str, str] = {
    "pattern": StringType.__name__,
    "min_length": StringType.__name__,
    "max_length": StringType.__name__,
    "minimum": NumberType.__name__,
    "maximum": NumberType.__name__,
    "multiple_of": NumberType.__name__,
    "format": NumberType.__name__,
    "file_types": FileType.__name__,
    "items": ArrayType.__name__,
    "min_items": ArrayType.__name__,
    "max_items": ArrayType.__name__,
    "unique_items": ArrayType.__name__,
    "properties": ObjectType.__name__,
    "min_properties": ObjectType.__name__,
    "max_properties": ObjectType.__name__,
    "additional_properties": ObjectType.__name__,
    "discriminator": ObjectType.__name__,
    "discriminator_value": ObjectType.__name__,
    "enum": EnumType.__name__,
}


def _apply_annotations(node: Type, declaration: TypeDeclaration) -> None:
    fields = declaration.model_fields_set
    if "display_name" in fields:
        node.display_name = declaration.display_name
    if "description" in fields:
        node.description = declaration.description
    if "default" in fields:
        node.default = declaration.default
    if "examples" in fields and declaration.examples is not None:
        examples = declaration.examples
        node.examples = list(examples.values()) if isinstance(examples, dict) else list(examples)
    elif "example" in fields:
        node.examples = [declaration.example]


@singledispatch
def merge_facets(node: Type, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    """Apply the variant-specific facets of ``declaration`` to ``node``.

    Facets set in the declaration replace the node's values; facets left
    unset keep whatever the node (typically a copy of the parent) has.
    """


@merge_facets.register(StringType)
def _(node: StringType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    if declaration.pattern is not None:
        node.pattern = declaration.pattern
    if declaration.min_length is not None:
        node.min_length = declaration.min_length
    if declaration.max_length is not None:
        node.max_length = declaration.max_length


@merge_facets.register(NumberType)
def _(node: NumberType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    if declaration.minimum is not None:
        node.minimum = declaration.minimum
    if declaration.maximum is not None:
        node.maximum = declaration.maximum
    if declaration.multiple_of is not None:
        node.multiple_of = declaration.multiple_of
    if declaration.format is not None:
        node.format = declaration.format


@merge_facets.register(DateTimeType)
def _(node: DateTimeType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    if declaration.format is not None:
        node.format = declaration.format


@merge_facets.register(FileType)
def _(node: FileType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    if declaration.file_types is not None:
        node.file_types = list(declaration.file_types)
    if declaration.min_length is not None:
        node.min_length = declaration.min_length
    if declaration.max_length is not None:
        node.max_length = declaration.max_length


@merge_facets.register(ArrayType)
def _(node: ArrayType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    if declaration.items is not None:
        node.items = factory.create_items(declaration.items)
    if declaration.min_items is not None:
        node.min_items = declaration.min_items
    if declaration.max_items is not None:
        node.max_items = declaration.max_items
    if declaration.unique_items is not None:
        node.unique_items = declaration.unique_items


@merge_facets.register(ObjectType)
def _(node: ObjectType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    # parent properties first, same-named child properties replace them in place
    for prop_name, prop_definition in (declaration.properties or {}).items():
        node.add_property(factory.create(prop_name, prop_definition))
    if declaration.min_properties is not None:
        node.min_properties = declaration.min_properties
    if declaration.max_properties is not None:
        node.max_properties = declaration.max_properties
    if declaration.additional_properties is not None:
        node.additional_properties = declaration.additional_properties
    if declaration.discriminator is not None:
        node.discriminator = declaration.discriminator
    if declaration.discriminator_value is not None:
        node.discriminator_value = declaration.discriminator_value


@merge_facets.register(UnionType)
def _(node: UnionType, declaration: TypeDeclaration, factory: "TypeFactory") -> None:
    for prop_name, prop_definition in (declaration.properties or {}).items():
        node.add_property(factory.create(prop_name, prop_definition))


def apply_facets(node: Type, declaration: TypeDeclaration, factory: "TypeFactory") -> Type:
    """Apply a declaration to a node and return the resulting node.

    A scalar node receiving an ``enum`` facet is wrapped in an ``EnumType``,
    so the returned node may differ from the one passed in.
    """
    _apply_annotations(node, declaration)
    if isinstance(node, EnumType):
        merge_facets(node.base, declaration, factory)
        if declaration.enum is not None:
            node.values = list(declaration.enum)
        return node

    merge_facets(node, declaration, factory)
    if declaration.enum is None:
        return node
    if not node.is_scalar:
        raise InvalidTypeDefinitionError(
            f'Type "{node.name}": enum is only allowed on scalar types, not {node.kind}'
        )
    enum = EnumType(node.name, node, declaration.enum, node.definition, node.required)
    enum.type_name = node.type_name
    enum.display_name = node.display_name
    enum.description = node.description
    enum.default = node.default
    enum.examples = node.examples
    return enum


class InheritanceResolver:
    """Resolves ``LazyProxyType`` nodes of one registry.

    Parents are resolved before children. The chain of proxies currently
    being resolved is tracked so that a parent chain looping back on itself
    fails with ``CyclicInheritanceError`` instead of recursing forever.
    """

    def __init__(self, registry: TypeRegistry, factory: "TypeFactory"):
        self.registry = registry
        self.factory = factory
        self._chain: list[LazyProxyType] = []

    def resolve(self, proxy: LazyProxyType) -> Type:
        if proxy.is_resolved:
            return proxy.resolved_object()
        if any(active is proxy for active in self._chain):
            names = [active.name for active in self._chain] + [proxy.name]
            raise CyclicInheritanceError(names)

        self._chain.append(proxy)
        try:
            parent = proxy.get_parent()
            if isinstance(parent, LazyProxyType):
                parent = self.resolve(parent)
            node = self._derive(proxy, parent)
        finally:
            self._chain.pop()

        proxy.set_resolved(node)
        logger.debug(
            f"Resolved {proxy.name!r} -> {proxy.original_type!r} as {type(node).__name__}"
        )
        return node

    def _derive(self, proxy: LazyProxyType, parent: Type) -> Type:
        declaration = proxy.declaration
        own_facets = declaration.constraint_facets()
        type_name = proxy.name if proxy.declared else parent.type_name
        changes: dict[str, Any] = {
            "name": proxy.name,
            "required": proxy.required,
            "type_name": type_name,
        }

        if not own_facets and not proxy.declared:
            # pure reference: the parent itself, relabelled when needed
            if all(getattr(parent, attr) == value for attr, value in changes.items()):
                return parent
            return parent.clone(**changes)

        self._check_compatible(own_facets, parent)
        node = parent.clone(definition=proxy.definition, **changes)
        if isinstance(node, ObjectType):
            node.discriminator_value = None
        return apply_facets(node, declaration, self.factory)

    @staticmethod
    def _check_compatible(own_facets: set[str], parent: Type) -> None:
        for facet in sorted(own_facets):
            if facet == "enum":
                allowed = parent.is_scalar
            else:
                allowed = facet in parent.facet_names
            if not allowed:
                raise IncompatibleTypeInheritanceError(
                    FACET_OWNERS.get(facet, "Type"), type(parent).__name__
                )
