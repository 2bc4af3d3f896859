"""Loading RAML documents into an ``ApiDefinition``.

The loader reads YAML (with ``!include`` support) and merges the ``uses``
libraries under their namespace. It then declares the document's named types
and schemas into a fresh ``TypeRegistry``, builds the security schemes and the
resource tree, and finally resolves type inheritance. Traits and resource types
are not expanded.
"""

import logging
import re
from pathlib import Path
from typing import Any
from urllib.parse import urljoin, urlparse

import httpx
import yaml

from ramlcore.api.body import Body, WebFormBody
from ramlcore.api.definition import ApiDefinition
from ramlcore.api.method import VALID_METHODS, Method
from ramlcore.api.parameters import BaseUriParameter, NamedParameter
from ramlcore.api.resource import Resource
from ramlcore.api.response import Response
from ramlcore.api.security import SecurityScheme, SecuritySchemeDescribedBy
from ramlcore.config import ParseConfiguration
from ramlcore.exceptions import RamlParseError
from ramlcore.schema.parsers import parser_for_text
from ramlcore.types.base import ValidatorInterface
from ramlcore.types.factory import BUILTIN_TYPES, TypeFactory
from ramlcore.types.registry import TypeRegistry
from ramlcore.types.schema import JsonType, XmlType

logger = logging.getLogger(__name__)

SUPPORTED_VERSIONS = ("0.8", "1.0")
YAML_SUFFIXES = (".raml", ".yaml", ".yml")
DEFAULT_MEDIA_TYPE = "application/json"

# Sections a library contributes to the document using it, under "namespace.name".
LIBRARY_SECTIONS = (
    "types",
    "schemas",
    "traits",
    "resourceTypes",
    "securitySchemes",
    "annotationTypes",
)
TYPE_NAME = re.compile(r"[A-Za-z_][\w.-]*")


class IncludedText(str):
    """Text pulled in with ``!include``, remembering where it came from."""

    source_uri: str | None = None

    @classmethod
    def create(cls, text: str, source_uri: str) -> "IncludedText":
        included = cls(text)
        included.source_uri = source_uri
        return included


class RamlYamlLoader(yaml.SafeLoader):
    """SafeLoader with an ``!include`` tag resolved by the owning parser."""

    def __init__(self, stream: str, parser: "RamlParser", current_dir: Path):
        super().__init__(stream)
        self.parser = parser
        self.current_dir = current_dir


def _construct_include(loader: RamlYamlLoader, node: yaml.Node) -> Any:
    target = loader.construct_scalar(node)  # type: ignore[arg-type]
    return loader.parser.include(str(target), loader.current_dir)


RamlYamlLoader.add_constructor("!include", _construct_include)


def _media_type_keys(data: dict[str, Any]) -> bool:
    return bool(data) and all("/" in str(key) for key in data)


def namespace_expression(namespace: str, expression: str) -> str:
    """Prefix the named types of a type expression with a library namespace.

    ``"Person[] | nil"`` in library ``lib`` becomes ``"lib.Person[] | nil"``.
    Built-in types and inline schemas are left alone.
    """
    if expression.lstrip().startswith(("{", "<")):
        return expression

    def prefix(match: re.Match[str]) -> str:
        name = match.group(0)
        return name if name in BUILTIN_TYPES else f"{namespace}.{name}"

    return TYPE_NAME.sub(prefix, expression)


def namespace_definition(namespace: str, definition: Any) -> Any:
    """Prefix the type references of a library type declaration."""
    if isinstance(definition, str):
        return namespace_expression(namespace, definition)
    if not isinstance(definition, dict):
        return definition

    namespaced = dict(definition)
    for key in ("type", "schema", "items"):
        value = namespaced.get(key)
        if isinstance(value, list):
            namespaced[key] = [namespace_definition(namespace, item) for item in value]
        elif value is not None:
            namespaced[key] = namespace_definition(namespace, value)
    if isinstance(namespaced.get("properties"), dict):
        namespaced["properties"] = {
            name: namespace_definition(namespace, prop)
            for name, prop in namespaced["properties"].items()
        }
    return namespaced


class RamlParser:
    """Parses RAML 0.8 and 1.0 documents.

    Args:
        config: Loading switches; defaults to ``ParseConfiguration()``
    """

    def __init__(self, config: ParseConfiguration | None = None):
        self.config = config or ParseConfiguration()
        self._root_dir: Path = Path.cwd()
        self._source_uri: str | None = None

    # Loading

    def parse(self, path: str | Path) -> ApiDefinition:
        """Parse a RAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            RamlParseError: If the document is not valid RAML
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"RAML file not found: {path}")
        logger.info(f"Parsing RAML document {path}")
        text = path.read_text(encoding="utf-8")
        return self.parse_string(text, base_dir=path.parent, source_uri=str(path.resolve()))

    def parse_string(
        self, text: str, base_dir: str | Path | None = None, source_uri: str | None = None
    ) -> ApiDefinition:
        """Parse RAML text; relative includes are resolved against ``base_dir``."""
        self._check_header(text)
        self._root_dir = Path(base_dir or Path.cwd()).resolve()
        data = self._load_yaml(text, self._root_dir)
        if not isinstance(data, dict):
            raise RamlParseError("RAML document must be a mapping")
        data = self._merge_libraries(data, self._root_dir)
        self._source_uri = source_uri or str(self._root_dir / "api.raml")
        return self._build_api(data, self._source_uri)

    @staticmethod
    def _check_header(text: str) -> None:
        first_line = text.lstrip("\ufeff").split("\n", 1)[0].strip()
        if not first_line.startswith("#%RAML"):
            raise RamlParseError("Document is not a RAML document: missing #%RAML header")
        version = first_line[len("#%RAML") :].strip().split(" ", 1)[0]
        if version not in SUPPORTED_VERSIONS:
            raise RamlParseError(f'Unsupported RAML version "{version}"')

    def _load_yaml(self, text: str, current_dir: Path) -> Any:
        loader = RamlYamlLoader(text, self, current_dir)
        try:
            return loader.get_single_data()
        except yaml.YAMLError as e:
            raise RamlParseError(f"Failed to parse YAML: {e}") from e
        finally:
            loader.dispose()

    def include(self, target: str, current_dir: Path) -> Any:
        """Resolve an ``!include`` relative to the including file."""
        if urlparse(target).scheme in ("http", "https"):
            return self._include_remote(target)

        path = (current_dir / target).resolve()
        if not self.config.allow_directory_traversal and not path.is_relative_to(self._root_dir):
            raise RamlParseError(f"Including {target} is not allowed: outside of {self._root_dir}")
        if not path.exists():
            raise RamlParseError(f"Included file not found: {path}")

        logger.debug(f"Including {path}")
        text = path.read_text(encoding="utf-8")
        if path.suffix.lower() in YAML_SUFFIXES:
            return self._load_yaml(text, path.parent)
        return IncludedText.create(text, str(path))

    def _include_remote(self, url: str) -> Any:
        if not self.config.remote_file_inclusion:
            raise RamlParseError(f"Including remote file {url} is not allowed")
        logger.debug(f"Fetching remote include {url}")
        try:
            response = httpx.get(url, timeout=self.config.include_timeout, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise RamlParseError(f"Failed to fetch {url}: {e}") from e
        if urlparse(url).path.lower().endswith(YAML_SUFFIXES):
            try:
                return yaml.safe_load(response.text)
            except yaml.YAMLError as e:
                raise RamlParseError(f"Failed to parse YAML from {url}: {e}") from e
        return IncludedText.create(response.text, url)

    def _merge_libraries(self, data: dict[str, Any], location: Path | str) -> dict[str, Any]:
        """Add the declarations of the ``uses`` libraries under their namespace.

        ``location`` is the directory (or, for a remote library, the URL) that
        library paths are relative to. Libraries may use other libraries.
        """
        uses = data.get("uses")
        if not uses:
            return data
        if not isinstance(uses, dict):
            raise RamlParseError('"uses" must map namespaces to library paths')

        merged = dict(data)
        for namespace, target in uses.items():
            namespace = str(namespace)
            library, library_location = self._load_library(str(target), location)
            library = self._merge_libraries(library, library_location)
            for section in LIBRARY_SECTIONS:
                items = self._named_items(library.get(section))
                if not items:
                    continue
                section_items = dict(self._named_items(merged.get(section)))
                for name, definition in items:
                    if section == "types":
                        definition = namespace_definition(namespace, definition)
                    section_items[f"{namespace}.{name}"] = definition
                merged[section] = section_items
            logger.debug(f"Merged library {target} as {namespace!r}")
        return merged

    def _load_library(self, target: str, location: Path | str) -> tuple[dict[str, Any], Path | str]:
        if isinstance(location, str):
            target = urljoin(location, target)
        if urlparse(target).scheme in ("http", "https"):
            library, library_location = self._include_remote(target), target
        else:
            current_dir = Path(location)
            library = self.include(target, current_dir)
            library_location = (current_dir / target).resolve().parent
        if not isinstance(library, dict):
            raise RamlParseError(f"Library {target} is not a RAML library")
        return library, library_location

    # Building

    def _build_api(self, data: dict[str, Any], source_uri: str) -> ApiDefinition:
        if not data.get("title"):
            raise RamlParseError('RAML document requires a "title"')

        registry = TypeRegistry()
        factory = TypeFactory(
            registry, source_uri=source_uri, allow_remote=self.config.remote_file_inclusion
        )
        api = ApiDefinition(
            title=str(data["title"]),
            version=str(data["version"]) if data.get("version") is not None else None,
            base_uri=data.get("baseUri"),
            base_uri_parameters=self._parameters(data.get("baseUriParameters"), BaseUriParameter),
            protocols=[str(p).upper() for p in data.get("protocols") or []],
            media_type=data.get("mediaType"),
            documentation={
                str(item.get("title")): str(item.get("content"))
                for item in data.get("documentation") or []
                if isinstance(item, dict)
            },
            registry=registry,
        )

        for key in ("traits", "resourceTypes"):
            if data.get(key):
                logger.debug(f"Ignoring {key}: not expanded")

        self._declare_schemas(api, factory, data.get("schemas"), source_uri)
        for name, definition in self._named_items(data.get("types")):
            factory.declare(name, definition)
        for key, scheme_data in self._named_items(data.get("securitySchemes")):
            api.add_security_scheme(
                self._build_security_scheme(api, factory, str(key), scheme_data or {})
            )
        api.secured_by = self._secured_by(api, data.get("securedBy"))

        for key, value in data.items():
            if str(key).startswith("/"):
                api.add_resource(
                    self._build_resource(api, factory, key, value or {}, "", api.secured_by)
                )

        registry.apply_inheritance()
        logger.info(f"Parsed API {api.title!r}: {len(registry)} types")
        return api

    @staticmethod
    def _named_items(items: Any) -> list[tuple[str, Any]]:
        """Entries of a mapping, or of a RAML 0.8 list of single-entry mappings."""
        if not items:
            return []
        if isinstance(items, dict):
            return list(items.items())
        if isinstance(items, list):
            return [pair for item in items if isinstance(item, dict) for pair in item.items()]
        raise RamlParseError(f"Expected a mapping or list of mappings, got {type(items).__name__}")

    def _declare_schemas(
        self, api: ApiDefinition, factory: TypeFactory, schemas: Any, source_uri: str
    ) -> None:
        for name, definition in self._named_items(schemas):
            if not isinstance(definition, str):
                factory.declare(name, definition)
                continue
            schema_source = getattr(definition, "source_uri", None) or source_uri
            parser = parser_for_text(definition, schema_source, self.config.remote_file_inclusion)
            if parser is None:
                factory.declare(name, definition)
                continue
            if not self.config.parse_schemas:
                api.schemas[name] = str(definition)
                continue
            schema = parser.create_schema_definition(str(definition))
            api.schemas[name] = schema
            node_class = JsonType if definition.lstrip().startswith("{") else XmlType
            api.registry.register(node_class(name, schema, {"type": str(definition)}))

    @staticmethod
    def _parameters(declarations: Any, parameter_class: type[NamedParameter]) -> dict[str, Any]:
        return {
            str(key): parameter_class.from_dict(str(key), value if isinstance(value, dict) else {})
            for key, value in (declarations or {}).items()
        }

    def _build_resource(
        self,
        api: ApiDefinition,
        factory: TypeFactory,
        path: str,
        data: dict[str, Any],
        parent_uri: str,
        inherited_schemes: list[SecurityScheme],
    ) -> Resource:
        resource = Resource(
            uri=parent_uri + path,
            path=path,
            display_name=data.get("displayName") or path,
            description=data.get("description"),
            uri_parameters=self._parameters(data.get("uriParameters"), NamedParameter),
            base_uri_parameters=self._parameters(data.get("baseUriParameters"), BaseUriParameter),
        )
        for parameter in resource.uri_parameters.values():
            parameter.required = True
        if data.get("type") or data.get("is"):
            logger.debug(f"Resource {resource.uri}: resource types and traits are not applied")
        schemes = (
            self._secured_by(api, data["securedBy"]) if "securedBy" in data else inherited_schemes
        )
        for scheme in schemes:
            resource.add_security_scheme(scheme)

        for key, value in data.items():
            key = str(key)
            if key.startswith("/"):
                resource.add_resource(
                    self._build_resource(
                        api, factory, key, value or {}, resource.uri, list(schemes)
                    )
                )
            elif key.upper() in VALID_METHODS:
                resource.add_method(self._build_method(api, factory, key, value or {}))
        return resource

    def _build_method(
        self, api: ApiDefinition, factory: TypeFactory, verb: str, data: dict[str, Any]
    ) -> Method:
        method = Method(
            type=verb,
            description=data.get("description"),
            display_name=data.get("displayName"),
            headers=self._parameters(data.get("headers"), NamedParameter),
            query_parameters=self._parameters(data.get("queryParameters"), NamedParameter),
            base_uri_parameters=self._parameters(data.get("baseUriParameters"), BaseUriParameter),
            protocols=[str(p).upper() for p in data.get("protocols") or []],
        )
        for body in self._build_bodies(api, factory, data.get("body")):
            method.add_body(body)
        for code, response_data in (data.get("responses") or {}).items():
            method.add_response(self._build_response(api, factory, code, response_data or {}))
        for scheme in self._secured_by(api, data.get("securedBy")):
            method.add_security_scheme(scheme)
        return method

    def _build_response(
        self, api: ApiDefinition, factory: TypeFactory, code: Any, data: dict[str, Any]
    ) -> Response:
        try:
            status_code = int(code)
        except (TypeError, ValueError) as e:
            raise RamlParseError(f'Invalid response status code "{code}"') from e
        response = Response(
            status_code=status_code,
            description=data.get("description"),
            headers=self._parameters(data.get("headers"), NamedParameter),
        )
        for body in self._build_bodies(api, factory, data.get("body")):
            response.add_body(body)
        return response

    def _build_security_scheme(
        self, api: ApiDefinition, factory: TypeFactory, key: str, data: dict[str, Any]
    ) -> SecurityScheme:
        described_by = None
        if isinstance(data.get("describedBy"), dict):
            described = data["describedBy"]
            described_by = SecuritySchemeDescribedBy(
                headers=self._parameters(described.get("headers"), NamedParameter),
                query_parameters=self._parameters(described.get("queryParameters"), NamedParameter),
            )
            for code, response_data in (described.get("responses") or {}).items():
                response = self._build_response(api, factory, code, response_data or {})
                described_by.responses[response.status_code] = response
        settings = data.get("settings") or {}
        if not isinstance(settings, dict):
            raise RamlParseError(f'Settings of security scheme "{key}" must be a mapping')
        logger.debug(f"Declared security scheme {key!r} ({data.get('type')})")
        return SecurityScheme(
            key=key,
            type=data.get("type"),
            description=data.get("description"),
            described_by=described_by,
            settings=dict(settings),
        )

    @staticmethod
    def _secured_by(api: ApiDefinition, entries: Any) -> list[SecurityScheme]:
        """Schemes named by ``securedBy``: names, ``null``, or ``{name: settings}``."""
        if entries is None:
            return []
        if not isinstance(entries, list):
            entries = [entries]
        schemes = []
        for entry in entries:
            if entry is None:
                schemes.append(SecurityScheme.anonymous())
            elif isinstance(entry, dict):
                for key, overrides in entry.items():
                    schemes.append(api.get_security_scheme(str(key)).with_settings(overrides or {}))
            else:
                schemes.append(api.get_security_scheme(str(entry)))
        return schemes

    def _build_bodies(self, api: ApiDefinition, factory: TypeFactory, data: Any) -> list[Body]:
        if data is None:
            return []
        if isinstance(data, dict) and _media_type_keys(data):
            return [
                self._build_body(api, factory, str(media_type), value)
                for media_type, value in data.items()
            ]
        return [self._build_body(api, factory, api.media_type or DEFAULT_MEDIA_TYPE, data)]

    def _build_body(
        self, api: ApiDefinition, factory: TypeFactory, media_type: str, data: Any
    ) -> Body:
        media_type = media_type.lower()
        if data is None:
            return Body(media_type)
        if isinstance(data, str):
            data = {"type": data}

        examples = []
        if data.get("example") is not None:
            examples.append(data["example"])
        if isinstance(data.get("examples"), dict):
            examples.extend(data["examples"].values())

        if WebFormBody.is_web_form(media_type) and "formParameters" in data:
            return WebFormBody(
                media_type,
                description=data.get("description"),
                examples=examples,
                parameters=self._parameters(data.get("formParameters"), NamedParameter),
            )

        body_class = WebFormBody if WebFormBody.is_web_form(media_type) else Body
        body = body_class(media_type, description=data.get("description"), examples=examples)
        if "schema" in data and "type" not in data:
            self._attach_schema(api, body, data["schema"])
        elif "type" in data or "properties" in data:
            expression = data.get("type")
            name = "body"
            if isinstance(expression, str) and not expression.lstrip().startswith(("{", "<")):
                name = expression.strip()
            body.type = factory.create(name, data)
        return body

    def _attach_schema(self, api: ApiDefinition, body: Body, schema: Any) -> None:
        if not isinstance(schema, str):
            raise RamlParseError(f"Invalid schema for body {body.media_type}")
        if schema in api.schemas:
            body.schema = api.schemas[schema]
            return
        if api.registry.has_by_name(schema):
            body.type = api.registry.get_by_name(schema)
            return
        if not self.config.parse_schemas:
            body.schema = str(schema)
            return
        source = getattr(schema, "source_uri", None) or self._source_uri
        parser = parser_for_text(schema, source, self.config.remote_file_inclusion)
        if parser is None:
            raise RamlParseError(f'Schema "{schema}" is not declared')
        definition: ValidatorInterface = parser.create_schema_definition(str(schema))
        body.schema = definition
