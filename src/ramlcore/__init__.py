"""ramlcore - RAML type system and validation.

Parses RAML 0.8/1.0 documents into an ``ApiDefinition`` whose named types
form a graph of validators, and validates values, HTTP requests and HTTP
responses against it.

Example:
    >>> from ramlcore import RamlParser
    >>>
    >>> api = RamlParser().parse("api.raml")
    >>> person = api.get_type("Person")
    >>> [str(error) for error in person.check({"name": "Ann", "age": 17})]
    ['age (Minimum allowed value: 18, got 17)']
"""

# The type system must be importable before the schema and API layers
from ramlcore.types import Type, TypeFactory, TypeRegistry, TypeValidationError, ValidatorInterface
from ramlcore.schema import JsonSchemaDefinition, XmlSchemaDefinition
from ramlcore.api import ApiDefinition
from ramlcore.config import ParseConfiguration
from ramlcore.exceptions import (
    RamlError,
    RamlParseError,
    RequestValidationError,
    ResponseValidationError,
    TypeNotFoundError,
    ValidationError,
)
from ramlcore.loader import RamlParser
from ramlcore.validator import HttpRequest, HttpResponse, Validator

__version__ = "0.1.0"

__all__ = [
    "ApiDefinition",
    "HttpRequest",
    "HttpResponse",
    "JsonSchemaDefinition",
    "ParseConfiguration",
    "RamlError",
    "RamlParseError",
    "RamlParser",
    "RequestValidationError",
    "ResponseValidationError",
    "Type",
    "TypeFactory",
    "TypeNotFoundError",
    "TypeRegistry",
    "TypeValidationError",
    "ValidationError",
    "Validator",
    "ValidatorInterface",
    "XmlSchemaDefinition",
]
