"""Schema parsers: turn schema text into schema definitions."""

import json
from abc import ABC, abstractmethod
from typing import Any

from ramlcore.exceptions import InvalidJsonError
from ramlcore.schema.definitions import JsonSchemaDefinition, XmlSchemaDefinition
from ramlcore.types.base import ValidatorInterface


class SchemaParser(ABC):
    """Base class of schema parsers.

    A parser knows the content types its schemas apply to and the URI the
    schema text was read from (used to resolve relative references).
    """

    default_content_types: tuple[str, ...] = ()

    def __init__(self, source_uri: str | None = None):
        self.source_uri = source_uri
        self._content_types = list(self.default_content_types)

    def get_compatible_content_types(self) -> list[str]:
        return list(self._content_types)

    def add_compatible_content_type(self, content_type: str) -> None:
        if content_type not in self._content_types:
            self._content_types.append(content_type)

    def is_compatible(self, content_type: str) -> bool:
        return content_type.split(";", 1)[0].strip().lower() in self._content_types

    @abstractmethod
    def create_schema_definition(self, schema: str) -> ValidatorInterface:
        """Compile schema text."""


class JsonSchemaParser(SchemaParser):
    default_content_types = ("application/json", "text/json")

    def __init__(
        self, source_uri: str | None = None, allow_remote: bool = False, timeout: float = 10.0
    ):
        super().__init__(source_uri)
        self.allow_remote = allow_remote
        self.timeout = timeout

    def create_schema_definition(self, schema: str | dict[str, Any]) -> JsonSchemaDefinition:
        if isinstance(schema, str):
            try:
                schema = json.loads(schema)
            except json.JSONDecodeError as e:
                raise InvalidJsonError(f"Invalid JSON in schema: {e}") from e
        return JsonSchemaDefinition(
            schema, self.source_uri, allow_remote=self.allow_remote, timeout=self.timeout
        )


class XmlSchemaParser(SchemaParser):
    default_content_types = ("application/xml", "text/xml", "application/soap+xml")

    def create_schema_definition(self, schema: str) -> XmlSchemaDefinition:
        return XmlSchemaDefinition(schema, self.source_uri)


def parser_for_text(
    schema: str, source_uri: str | None = None, allow_remote: bool = False
) -> SchemaParser | None:
    """Pick a parser by sniffing schema text: JSON starts with ``{``, XSD with ``<``."""
    text = schema.lstrip()
    if text.startswith("{"):
        return JsonSchemaParser(source_uri, allow_remote=allow_remote)
    if text.startswith("<"):
        return XmlSchemaParser(source_uri)
    return None
