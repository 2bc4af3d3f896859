"""Construction of type nodes from RAML declarations."""

import logging
from typing import Any

from ramlcore.exceptions import InvalidTypeDefinitionError
from ramlcore.schema.definitions import JsonSchemaDefinition, XmlSchemaDefinition
from ramlcore.types.array import ArrayType
from ramlcore.types.base import AnyType, Type
from ramlcore.types.dates import DateOnlyType, DateTimeOnlyType, DateTimeType, TimeOnlyType
from ramlcore.types.inheritance import InheritanceResolver, apply_facets
from ramlcore.types.models import TypeDeclaration
from ramlcore.types.object import ObjectType
from ramlcore.types.proxy import LazyProxyType
from ramlcore.types.registry import TypeRegistry
from ramlcore.types.scalars import (
    BooleanType,
    FileType,
    IntegerType,
    NilType,
    NumberType,
    StringType,
)
from ramlcore.types.schema import JsonType, XmlType
from ramlcore.types.union import UnionType, split_union

logger = logging.getLogger(__name__)

BUILTIN_TYPES: dict[str, type[Type]] = {
    "any": AnyType,
    "string": StringType,
    "number": NumberType,
    "integer": IntegerType,
    "boolean": BooleanType,
    "nil": NilType,
    "date-only": DateOnlyType,
    "time-only": TimeOnlyType,
    "datetime-only": DateTimeOnlyType,
    "datetime": DateTimeType,
    "file": FileType,
    "array": ArrayType,
    "object": ObjectType,
}


def normalize_definition(definition: Any) -> dict[str, Any]:
    """Turn the shorthand forms of a declaration into a mapping.

    ``"Person[]"`` becomes ``{"type": "Person[]"}``, an empty declaration
    becomes ``{}``, and the deprecated ``schema`` key is read as ``type``.
    """
    if definition is None:
        return {}
    if isinstance(definition, str):
        return {"type": definition}
    if not isinstance(definition, dict):
        raise InvalidTypeDefinitionError(
            f"Type declaration must be a string or a mapping, got {type(definition).__name__}"
        )
    raw = dict(definition)
    if "schema" in raw and "type" not in raw:
        raw["type"] = raw.pop("schema")
    return raw


def _strip_parentheses(expression: str) -> str:
    expression = expression.strip()
    while expression.startswith("(") and expression.endswith(")"):
        depth = 0
        for index, char in enumerate(expression):
            depth += char == "("
            depth -= char == ")"
            if depth == 0 and index < len(expression) - 1:
                return expression
        expression = expression[1:-1].strip()
    return expression


class TypeFactory:
    """Builds type nodes for one registry.

    ``declare`` is used for the named types of a document; ``create`` builds
    anonymous and property types. Every reference to a non built-in type
    becomes a ``LazyProxyType`` that is queued in the registry for
    inheritance resolution.

    Args:
        registry: The registry of the parse session
        source_uri: Location of the document, used to resolve schema references
        allow_remote: Whether JSON schemas may reference http(s) documents
    """

    def __init__(
        self,
        registry: TypeRegistry,
        source_uri: str | None = None,
        allow_remote: bool = False,
    ):
        self.registry = registry
        self.source_uri = source_uri
        self.allow_remote = allow_remote
        self.resolver = InheritanceResolver(registry, self)

    def declare(self, name: str, definition: Any) -> Type:
        """Create a named type and register it."""
        node = self.create(name, definition, declared=True)
        self.registry.register(node)
        return node

    def create(self, name: str, definition: Any, declared: bool = False) -> Type:
        """Create a type node.

        A trailing ``?`` on ``name`` marks the node as not required.
        """
        raw = normalize_definition(definition)
        optional = name.endswith("?")
        if optional:
            name = name[:-1]
        return self._build(name, raw, not optional, declared)

    def create_items(self, items: Any) -> Type:
        """Create the item type of an array from its ``items`` facet."""
        if isinstance(items, str):
            return self._build(items.strip(), {"type": items}, True, False)
        raw = normalize_definition(items)
        name = raw["type"] if isinstance(raw.get("type"), str) else "item"
        return self._build(name, raw, True, False)

    def _build(self, name: str, raw: dict[str, Any], required: bool, declared: bool) -> Type:
        declaration = TypeDeclaration.parse(name, raw)
        if required and declaration.required is not None:
            required = declaration.required
        expression = declaration.type
        if isinstance(expression, list):
            if len(expression) != 1:
                raise InvalidTypeDefinitionError(
                    f'Type "{name}": multiple inheritance is not supported'
                )
            expression = expression[0]
        if expression is None:
            if declaration.properties is not None:
                expression = "object"
            elif declaration.items is not None:
                expression = "array"
            else:
                expression = "string"
        if not isinstance(expression, str):
            raise InvalidTypeDefinitionError(f'Type "{name}": invalid type expression')

        source_uri = getattr(raw.get("type"), "source_uri", None) or self.source_uri
        node = self._from_expression(
            name, expression.strip(), declaration, raw, required, declared, source_uri
        )
        logger.debug(f"Created {type(node).__name__} for {name!r} ({expression.strip()!r})")
        return node

    def _from_expression(
        self,
        name: str,
        expression: str,
        declaration: TypeDeclaration,
        raw: dict[str, Any],
        required: bool,
        declared: bool,
        source_uri: str | None = None,
    ) -> Type:
        if expression.startswith("{"):
            schema = JsonSchemaDefinition(expression, source_uri, self.allow_remote)
            return JsonType(name, schema, raw, required)
        if expression.startswith("<"):
            return XmlType(name, XmlSchemaDefinition(expression, source_uri), raw, required)

        expression = _strip_parentheses(expression)
        if expression == "":
            expression = "any"

        members = split_union(expression)
        if len(members) > 1:
            node: Type = UnionType(name, raw, required)
            node.possible_types = [self._member(member) for member in members]
        elif expression.endswith("[]"):
            node = ArrayType(name, raw, required)
            node.items = self._member(expression[:-2])
        elif expression.endswith("?"):
            node = UnionType(name, raw, required)
            node.possible_types = [self._member(expression[:-1]), NilType("nil")]
        elif expression in BUILTIN_TYPES:
            node = BUILTIN_TYPES[expression](name, raw, required)
        else:
            proxy = LazyProxyType(
                name,
                expression,
                declaration,
                self.registry,
                self.resolver,
                definition=raw,
                required=required,
                declared=declared,
            )
            self.registry.add_pending_inheritance(proxy)
            return proxy

        return apply_facets(node, declaration, self)

    def _member(self, expression: str) -> Type:
        expression = _strip_parentheses(expression)
        return self._build(expression, {"type": expression}, True, False)
