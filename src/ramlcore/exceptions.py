"""Exceptions raised by ramlcore.

Two kinds of failure exist. Structural errors (unknown type names, broken
inheritance, malformed schemas or documents) derive from ``RamlError`` and
abort the operation that hit them. Constraint violations found while walking a
value are never raised by the type graph; they are returned as lists of
``TypeValidationError`` records (see ``ramlcore.types.errors``). Only the
request/response boundary and the legacy named-parameter checks turn them into
a ``ValidationError``.
"""

from typing import Any


class RamlError(Exception):
    """Base class for structural errors."""


class RamlParseError(RamlError):
    """Raised when a RAML document cannot be loaded."""


class TypeNotFoundError(RamlError):
    """Raised when a type name is not present in the registry."""

    def __init__(self, name: str, candidates: list[str]):
        self.name = name
        self.candidates = candidates
        super().__init__(
            f'No type found for name "{name}", list: [{", ".join(candidates)}]'
        )


class InvalidTypeDefinitionError(RamlError):
    """Raised when a type declaration is malformed."""


class IncompatibleTypeInheritanceError(RamlError):
    """Raised when a child type cannot inherit from its parent."""

    def __init__(self, child: str, parent: str):
        self.child = child
        self.parent = parent
        super().__init__(
            "Inheritance not possible because of incompatible types, "
            f"child is instance of {child} and parent is instance of {parent}"
        )


class CyclicInheritanceError(RamlError):
    """Raised when a chain of parent references loops back on itself."""

    def __init__(self, chain: list[str]):
        self.chain = chain
        super().__init__(f"Cyclic type inheritance: {' -> '.join(chain)}")


class InvalidSchemaError(RamlError):
    """Raised when a JSON or XML schema document is itself invalid."""


class InvalidJsonError(RamlError):
    """Raised when JSON text cannot be decoded."""


class InvalidXmlError(RamlError):
    """Raised when XML text cannot be parsed."""


class InvalidParameterTypeError(RamlError):
    """Raised when a named parameter declares an unsupported type."""


class InvalidParameterDefinitionError(RamlError):
    """Raised when a named parameter facet does not fit its type."""


class ResourceNotFoundError(RamlError):
    """Raised when no resource matches a path or URI."""


class MethodNotFoundError(RamlError):
    """Raised when a resource does not declare a method."""


class BodyNotFoundError(RamlError):
    """Raised when a response or method has no body for a media type."""


class SchemaNotFoundError(RamlError):
    """Raised when the API definition has no schema for a request or response part."""


class SecuritySchemeNotFoundError(RamlError):
    """Raised when ``securedBy`` names a security scheme that is not declared."""


class ValidationError(ValueError):
    """Exception for validation failures at the API boundary.

    Attributes:
        code: Optional numeric code identifying the failed rule
        errors: The individual constraint violations, when available
    """

    def __init__(self, message: str, code: int | None = None, errors: list[Any] | None = None):
        super().__init__(message)
        self.code = code
        self.errors = errors or []


class RequestValidationError(ValidationError):
    """Raised when an HTTP request does not match the API definition."""


class ResponseValidationError(ValidationError):
    """Raised when an HTTP response does not match the API definition."""
