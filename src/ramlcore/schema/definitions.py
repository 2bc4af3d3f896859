"""Validators for legacy JSON Schema and XML Schema declarations.

Both definitions implement ``ValidatorInterface`` so bodies and the
request/response validator can treat them exactly like RAML type nodes.
Schema-mismatch is reported through the error list; only a malformed schema
or malformed XML text raises.
"""

import json
import logging
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlparse

import httpx
from jsonschema import Draft4Validator
from jsonschema.exceptions import SchemaError
from jsonschema.validators import validator_for
from lxml import etree
from referencing import Registry, Resource
from referencing.exceptions import NoSuchResource, Unresolvable
from referencing.jsonschema import DRAFT4

from ramlcore.exceptions import InvalidSchemaError, InvalidXmlError
from ramlcore.types.base import ValidatorInterface
from ramlcore.types.errors import TypeValidationError

logger = logging.getLogger(__name__)


def _source_base(source_uri: str | None) -> str:
    if not source_uri:
        return Path.cwd().as_uri() + "/"
    if urlparse(source_uri).scheme in ("http", "https", "file"):
        return source_uri
    return Path(source_uri).resolve().as_uri()


def _format_path(path: Any) -> str:
    rendered = ""
    for part in path:
        if isinstance(part, int):
            rendered += f"[{part}]"
        else:
            rendered += f".{part}" if rendered else str(part)
    return rendered


class JsonSchemaDefinition(ValidatorInterface):
    """A compiled JSON Schema.

    The draft is taken from ``$schema`` and defaults to Draft 4. ``$ref``s to
    other files are resolved relative to ``source_uri``; http(s) references are
    only fetched when ``allow_remote`` is set.
    """

    def __init__(
        self,
        schema: dict[str, Any] | str,
        source_uri: str | None = None,
        allow_remote: bool = False,
        timeout: float = 10.0,
    ):
        if isinstance(schema, str):
            try:
                schema = json.loads(schema)
            except json.JSONDecodeError as e:
                raise InvalidSchemaError(f"Invalid Schema. {e}") from e
        if not isinstance(schema, dict):
            raise InvalidSchemaError("Invalid Schema. A JSON schema must be an object")

        self.schema = schema
        self.source_uri = source_uri
        self.allow_remote = allow_remote
        self.timeout = timeout
        self._base = _source_base(source_uri)
        self._errors: list[TypeValidationError] = []

        validator_class = validator_for(schema, default=Draft4Validator)
        try:
            validator_class.check_schema(schema)
        except SchemaError as e:
            raise InvalidSchemaError(f"Invalid Schema. {e.message}") from e
        self._validator = validator_class(schema, registry=Registry(retrieve=self._retrieve))
        logger.debug(f"Compiled JSON schema from {source_uri or '<inline>'}")

    def _retrieve(self, uri: str) -> Resource:
        target = urljoin(self._base, uri)
        parsed = urlparse(target)
        try:
            if parsed.scheme == "file":
                contents = json.loads(Path(parsed.path).read_text(encoding="utf-8"))
            elif parsed.scheme in ("http", "https") and self.allow_remote:
                logger.debug(f"Fetching remote JSON schema {target}")
                response = httpx.get(target, timeout=self.timeout, follow_redirects=True)
                response.raise_for_status()
                contents = response.json()
            else:
                raise NoSuchResource(ref=uri)
        except (OSError, ValueError, httpx.HTTPError) as e:
            raise NoSuchResource(ref=uri) from e
        return Resource.from_contents(contents, default_specification=DRAFT4)

    def _to_error(self, error: Any) -> TypeValidationError:
        path = list(error.absolute_path)
        if error.validator == "required" and isinstance(error.instance, dict):
            missing = [name for name in error.validator_value if name not in error.instance]
            if missing:
                path.append(missing[0])
        prop = _format_path(path) or self.schema.get("title") or "value"
        return TypeValidationError(str(prop), error.message)

    def check(self, value: Any) -> list[TypeValidationError]:
        """Validate a decoded JSON value without recording the result.

        Raises:
            InvalidSchemaError: If a ``$ref`` of the schema cannot be resolved
        """
        try:
            errors = sorted(
                self._validator.iter_errors(value),
                key=lambda error: [str(part) for part in error.absolute_path],
            )
        except Unresolvable as e:
            raise InvalidSchemaError(f"Invalid Schema. Unresolvable reference: {e}") from e
        return [self._to_error(error) for error in errors]

    def to_dict(self) -> dict[str, Any]:
        return dict(self.schema)


class XmlSchemaDefinition(ValidatorInterface):
    """A compiled XML Schema (XSD)."""

    def __init__(self, schema: str | bytes, source_uri: str | None = None):
        raw = schema.encode("utf-8") if isinstance(schema, str) else schema
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            document = etree.fromstring(raw, parser, base_url=source_uri)
            self._schema = etree.XMLSchema(document)
        except (etree.XMLSyntaxError, etree.XMLSchemaParseError) as e:
            raise InvalidSchemaError(f"Invalid Schema. {e}") from e
        self.schema = raw.decode("utf-8")
        self.source_uri = source_uri
        self._errors: list[TypeValidationError] = []
        logger.debug(f"Compiled XML schema from {source_uri or '<inline>'}")

    @staticmethod
    def parse_document(value: str | bytes) -> Any:
        """Parse XML text into an element tree.

        Raises:
            InvalidXmlError: If the text is not well-formed XML
        """
        raw = value.encode("utf-8") if isinstance(value, str) else value
        parser = etree.XMLParser(resolve_entities=False, no_network=True)
        try:
            return etree.fromstring(raw, parser).getroottree()
        except etree.XMLSyntaxError as e:
            raise InvalidXmlError(f"Invalid Xml. {e}") from e

    def check(self, value: Any) -> list[TypeValidationError]:
        """Validate an XML document (text or lxml tree) without recording the result."""
        if isinstance(value, (str, bytes)):
            value = self.parse_document(value)
        if not isinstance(value, (etree._Element, etree._ElementTree)):
            return [TypeValidationError.xml_validation_failed("Expected value of type XML document")]

        if self._schema.validate(value):
            return []
        return [
            TypeValidationError.xml_validation_failed(entry.message, prop=f"line {entry.line}")
            for entry in self._schema.error_log
        ]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.schema}
