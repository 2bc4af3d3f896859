"""JSON Schema and XML Schema support."""

from ramlcore.schema.definitions import JsonSchemaDefinition, XmlSchemaDefinition
from ramlcore.schema.parsers import (
    JsonSchemaParser,
    SchemaParser,
    XmlSchemaParser,
    parser_for_text,
)

__all__ = [
    "JsonSchemaDefinition",
    "JsonSchemaParser",
    "SchemaParser",
    "XmlSchemaDefinition",
    "XmlSchemaParser",
    "parser_for_text",
]
