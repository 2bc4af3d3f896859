"""Type nodes wrapping inline JSON and XML schemas."""

from typing import Any

from ramlcore.schema.definitions import JsonSchemaDefinition, XmlSchemaDefinition
from ramlcore.types.base import Type
from ramlcore.types.errors import TypeValidationError


class JsonType(Type):
    """A RAML type whose ``type`` is a JSON schema document."""

    kind = "json"

    def __init__(
        self,
        name: str,
        schema: JsonSchemaDefinition,
        definition: dict[str, Any] | None = None,
        required: bool = True,
    ):
        super().__init__(name, definition, required)
        self.schema = schema

    def _check(self, value: Any) -> list[TypeValidationError]:
        return self.schema.check(value)


class XmlType(Type):
    """A RAML type whose ``type`` is an XML schema document."""

    kind = "xml"

    def __init__(
        self,
        name: str,
        schema: XmlSchemaDefinition,
        definition: dict[str, Any] | None = None,
        required: bool = True,
    ):
        super().__init__(name, definition, required)
        self.schema = schema

    def _check(self, value: Any) -> list[TypeValidationError]:
        return self.schema.check(value)
