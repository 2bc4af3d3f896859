"""The root of a parsed RAML document."""

import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urlparse

from ramlcore.api.parameters import BaseUriParameter
from ramlcore.api.resource import Resource
from ramlcore.api.security import SecurityScheme
from ramlcore.exceptions import ResourceNotFoundError, SecuritySchemeNotFoundError
from ramlcore.types.base import Type, ValidatorInterface
from ramlcore.types.registry import TypeRegistry

logger = logging.getLogger(__name__)


@dataclass
class ApiDefinition:
    """A parsed API: metadata, named types and schemas, and the resource tree."""

    title: str
    version: str | None = None
    base_uri: str | None = None
    base_uri_parameters: dict[str, BaseUriParameter] = field(default_factory=dict)
    protocols: list[str] = field(default_factory=list)
    media_type: str | None = None
    documentation: dict[str, str] = field(default_factory=dict)
    registry: TypeRegistry = field(default_factory=TypeRegistry)
    schemas: dict[str, ValidatorInterface | str] = field(default_factory=dict)
    resources: dict[str, Resource] = field(default_factory=dict)
    security_schemes: dict[str, SecurityScheme] = field(default_factory=dict)
    secured_by: list[SecurityScheme] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.protocols and self.base_uri:
            scheme = urlparse(self.base_uri.replace("{", "").replace("}", "")).scheme
            if scheme:
                self.protocols = [scheme.upper()]

    def add_resource(self, resource: Resource) -> None:
        self.resources[resource.path] = resource

    def get_type(self, name: str) -> Type:
        return self.registry.get_by_name(name)

    def add_security_scheme(self, scheme: SecurityScheme) -> None:
        self.security_schemes[scheme.key] = scheme

    def get_security_scheme(self, key: str) -> SecurityScheme:
        """The scheme declared as ``key``; ``null`` is the anonymous scheme."""
        if key == "null":
            return SecurityScheme.anonymous()
        try:
            return self.security_schemes[key]
        except KeyError:
            raise SecuritySchemeNotFoundError(
                f'No security scheme found for name "{key}", list: '
                f"[{', '.join(self.security_schemes)}]"
            ) from None

    def get_resources_as_uri(self) -> dict[str, Resource]:
        """Every resource in the tree, keyed by its full URI."""
        found: dict[str, Resource] = {}
        stack = list(self.resources.values())
        while stack:
            resource = stack.pop(0)
            found[resource.uri] = resource
            stack.extend(resource.resources.values())
        return found

    def get_resource_by_path(self, path: str) -> Resource:
        """The resource declared at ``path`` (e.g. ``/songs/{songId}``)."""
        resources = self.get_resources_as_uri()
        if path in resources:
            return resources[path]
        raise ResourceNotFoundError(f'Resource not found for path "{path}"')

    def get_resource_by_uri(self, uri: str) -> Resource:
        """The resource whose URI template matches a concrete URI.

        Query strings and the base URI path are ignored; literal matches win
        over template matches.
        """
        path = uri.split("?", 1)[0]
        if self.base_uri:
            base_path = urlparse(self.base_uri).path.rstrip("/")
            if base_path and "{" not in base_path and path.startswith(base_path + "/"):
                path = path[len(base_path) :]
        path = "/" + path.strip("/") if path.strip("/") else "/"

        resources = self.get_resources_as_uri()
        if path in resources:
            return resources[path]
        for resource in resources.values():
            if resource.get_match_pattern().match(path):
                logger.debug(f"URI {uri} matched resource {resource.uri}")
                return resource
        raise ResourceNotFoundError(f'Resource not found for uri "{uri}"')

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "version": self.version,
            "baseUri": self.base_uri,
            "protocols": self.protocols,
            "mediaType": self.media_type,
            "securitySchemes": sorted(self.security_schemes),
            "types": self.registry.to_dict(),
            "resources": sorted(self.get_resources_as_uri()),
        }
