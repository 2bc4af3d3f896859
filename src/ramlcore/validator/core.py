"""Validation of HTTP requests and responses against an API definition."""

import logging
from typing import Any
from urllib.parse import parse_qs, urlparse

from pydantic import Field

from ramlcore.api.body import WebFormBody
from ramlcore.api.definition import ApiDefinition
from ramlcore.exceptions import (
    RequestValidationError,
    ResponseValidationError,
    ValidationError,
)
from ramlcore.models import RamlBaseModel
from ramlcore.types.errors import TypeValidationError
from ramlcore.validator.converters import ContentConverter
from ramlcore.validator.helper import ValidatorSchemaHelper

logger = logging.getLogger(__name__)

# Methods whose request body is not validated.
BODYLESS_METHODS = ("GET", "DELETE")


class HttpRequest(RamlBaseModel):
    """An HTTP request to validate.

    Attributes:
        method: HTTP verb
        uri: Request URI or path, optionally with a query string
        headers: Header values keyed by name (case-insensitive)
        query: Query parameters; parsed from ``uri`` when not given
        body: Raw body text
    """

    method: str
    uri: str
    headers: dict[str, str] = Field(default_factory=dict)
    query: dict[str, Any] | None = None
    body: str | bytes | None = None

    @property
    def path(self) -> str:
        return urlparse(self.uri).path or "/"

    @property
    def content_type(self) -> str:
        return _header(self.headers, "content-type") or ""

    @property
    def accept(self) -> str:
        return _header(self.headers, "accept") or ""

    def query_parameters(self) -> dict[str, Any]:
        if self.query is not None:
            return dict(self.query)
        parsed = parse_qs(urlparse(self.uri).query, keep_blank_values=True)
        return {key: values[0] if len(values) == 1 else values for key, values in parsed.items()}


class HttpResponse(RamlBaseModel):
    """An HTTP response to validate."""

    status_code: int
    headers: dict[str, str | list[str]] = Field(default_factory=dict)
    body: str | bytes | None = None

    @property
    def content_type(self) -> str:
        value = _header(self.headers, "content-type")
        return value[0] if isinstance(value, list) else value or ""


def _header(headers: dict[str, Any], name: str) -> Any:
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def format_errors(errors: list[TypeValidationError]) -> str:
    """Render violations as ``prop (constraint), prop (constraint)``."""
    return ", ".join(str(error) for error in errors)


def _media_ranges(accept: str) -> list[tuple[str, float]]:
    ranges = []
    for part in accept.split(","):
        media_range, *params = [item.strip() for item in part.split(";")]
        if not media_range:
            continue
        quality = 1.0
        for param in params:
            key, _, value = param.partition("=")
            if key.strip().lower() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        ranges.append((media_range.lower(), quality))
    return ranges


def negotiate_media_type(accept: str, available: list[str]) -> str | None:
    """The available media type an ``Accept`` header prefers, if any is acceptable.

    The most specific media range matching a media type gives its quality;
    a quality of 0 excludes it. An empty header accepts everything.
    """
    ranges = _media_ranges(accept) or [("*/*", 1.0)]
    best, best_quality = None, 0.0
    for media_type in available:
        candidate = media_type.split(";", 1)[0].strip().lower()
        main_type = candidate.split("/", 1)[0]
        quality, specificity = 0.0, -1
        for media_range, range_quality in ranges:
            if candidate == "*/*" or media_range == "*/*":
                rank = 0
            elif media_range == f"{main_type}/*":
                rank = 1
            elif media_range == candidate:
                rank = 2
            else:
                continue
            if rank > specificity:
                quality, specificity = range_quality, rank
        if quality > best_quality:
            best, best_quality = media_type, quality
    return best


class Validator:
    """Checks requests and responses against the API definition.

    Failures raise ``RequestValidationError`` / ``ResponseValidationError``;
    the message names the method and path and lists every violation found
    in the body. The ``Accept`` header of a request must match a media type
    the method responds with. Request bodies of GET and DELETE are not
    checked; a body sent with a content type the method does not declare
    raises ``SchemaNotFoundError``.
    """

    def __init__(self, helper: ValidatorSchemaHelper):
        self.helper = helper

    @classmethod
    def for_api(cls, api: ApiDefinition) -> "Validator":
        return cls(ValidatorSchemaHelper(api))

    def validate_value(self, type_name: str, value: Any) -> list[TypeValidationError]:
        """Validate native data (pandas/numpy values included) against a named type."""
        node = self.helper.api.get_type(type_name)
        return node.check(ContentConverter.to_native(value))

    # Requests

    def validate_request(self, request: HttpRequest) -> None:
        self._assert_acceptable_media_type(request)
        self._assert_no_missing_parameters(request)
        self._assert_valid_parameters(request)
        if request.method.upper() not in BODYLESS_METHODS:
            self._assert_valid_request_body(request)
        logger.debug(f"Request {request.method.upper()} {request.path} is valid")

    def _assert_acceptable_media_type(self, request: HttpRequest) -> None:
        available = self.helper.get_response_media_types(request.method, request.path)
        if not available:
            return
        if negotiate_media_type(request.accept, available) is None:
            raise RequestValidationError(
                f"Invalid media type for `{request.method.upper()} {request.path}`: "
                f"Accept {request.accept} matches none of {', '.join(available)}"
            )

    def _assert_no_missing_parameters(self, request: HttpRequest) -> None:
        required = self.helper.get_query_parameters(request.method, request.path, True)
        given = request.query_parameters()
        missing = [key for key in required if key not in given]
        if missing:
            raise RequestValidationError(
                "Missing request parameters required by the schema for "
                f"`{request.method.upper()} {request.path}`: {', '.join(missing)}"
            )

    def _assert_valid_parameters(self, request: HttpRequest) -> None:
        given = request.query_parameters()
        for key, parameter in self.helper.get_query_parameters(request.method, request.path).items():
            if key not in given:
                continue
            values = given[key] if isinstance(given[key], list) else [given[key]]
            for value in values:
                try:
                    parameter.validate(value)
                except ValidationError as e:
                    raise RequestValidationError(
                        "Request parameter does not match schema for "
                        f"`{request.method.upper()} {request.path}`: {e}",
                        code=e.code,
                    ) from e

    def _assert_valid_request_body(self, request: HttpRequest) -> None:
        if not self.helper.get_method(request.method, request.path).bodies:
            logger.debug(f"No request body declared for {request.method.upper()} {request.path}")
            return
        body = self.helper.get_request_body(request.method, request.path, request.content_type)
        if body.validator is None and not (isinstance(body, WebFormBody) and body.parameters):
            return

        value = self._decode(request.body, request.content_type)
        errors = body.check(value)
        if errors:
            raise RequestValidationError(
                f"Request body for {request.method.upper()} {request.path} with content type "
                f"{request.content_type} does not match schema: {format_errors(errors)}",
                errors=errors,
            )

    # Responses

    def validate_response(self, request: HttpRequest, response: HttpResponse) -> None:
        self._assert_no_missing_headers(request, response)
        self._assert_valid_headers(request, response)
        self._assert_valid_response_body(request, response)
        logger.debug(
            f"Response {response.status_code} for {request.method.upper()} {request.path} is valid"
        )

    def _assert_no_missing_headers(self, request: HttpRequest, response: HttpResponse) -> None:
        required = self.helper.get_response_headers(
            request.method, request.path, response.status_code, True
        )
        missing = [key for key in required if _header(response.headers, key.lower()) is None]
        if missing:
            raise ResponseValidationError(
                "Missing response headers required by the schema for "
                f"{request.method.upper()} {request.path} with status code "
                f"{response.status_code}: {', '.join(missing)}"
            )

    def _assert_valid_headers(self, request: HttpRequest, response: HttpResponse) -> None:
        headers = self.helper.get_response_headers(
            request.method, request.path, response.status_code
        )
        for key, parameter in headers.items():
            value = _header(response.headers, key.lower())
            if value is None:
                continue
            for header_value in value if isinstance(value, list) else [value]:
                try:
                    parameter.validate(header_value)
                except ValidationError as e:
                    raise ResponseValidationError(
                        f'Response header {key} with value "{header_value}" for '
                        f"{request.method.upper()} {request.path} with status code "
                        f"{response.status_code} does not match schema: {e}",
                        code=e.code,
                    ) from e

    def _assert_valid_response_body(self, request: HttpRequest, response: HttpResponse) -> None:
        if not self.helper.get_response(request.method, request.path, response.status_code).bodies:
            return
        body = self.helper.get_response_body(
            request.method, request.path, response.status_code, response.content_type
        )
        if body.validator is None:
            return
        value = self._decode(response.body, response.content_type)
        errors = body.check(value)
        if errors:
            raise ResponseValidationError(
                f"Response body for {request.method.upper()} {request.path} with status code "
                f"{response.status_code} and content type {response.content_type} "
                f"does not match schema: {format_errors(errors)}",
                errors=errors,
            )

    @staticmethod
    def _decode(body: str | bytes | None, content_type: str) -> Any:
        if body is None or body == "" or body == b"":
            return None
        return ContentConverter.convert_string_by_content_type(body, content_type)
