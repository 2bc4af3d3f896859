"""Request/response validation against a parsed API definition."""

from ramlcore.validator.converters import ContentConverter
from ramlcore.validator.core import (
    HttpRequest,
    HttpResponse,
    Validator,
    format_errors,
    negotiate_media_type,
)
from ramlcore.validator.helper import ValidatorSchemaHelper

__all__ = [
    "ContentConverter",
    "HttpRequest",
    "HttpResponse",
    "Validator",
    "ValidatorSchemaHelper",
    "format_errors",
    "negotiate_media_type",
]
