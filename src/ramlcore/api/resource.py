"""Resources of an API definition."""

import re
from dataclasses import dataclass, field

from ramlcore.api.method import Method
from ramlcore.api.parameters import BaseUriParameter, NamedParameter
from ramlcore.api.security import SecurityScheme
from ramlcore.exceptions import MethodNotFoundError

URI_PARAMETER = re.compile(r"\{([^}]+)\}")


@dataclass
class Resource:
    """A resource: its full ``uri`` (relative to the base URI) and own ``path`` segment."""

    uri: str
    path: str
    display_name: str | None = None
    description: str | None = None
    methods: dict[str, Method] = field(default_factory=dict)
    resources: dict[str, "Resource"] = field(default_factory=dict)
    uri_parameters: dict[str, NamedParameter] = field(default_factory=dict)
    base_uri_parameters: dict[str, BaseUriParameter] = field(default_factory=dict)
    security_schemes: dict[str, SecurityScheme] = field(default_factory=dict)

    def add_method(self, method: Method) -> None:
        """Add a method; one without its own security schemes gets the resource's."""
        if not method.security_schemes:
            for scheme in self.security_schemes.values():
                method.add_security_scheme(scheme)
        self.methods[method.type] = method

    def add_security_scheme(self, scheme: SecurityScheme) -> None:
        self.security_schemes[scheme.key] = scheme

    def get_method(self, method: str) -> Method:
        try:
            return self.methods[method.upper()]
        except KeyError:
            raise MethodNotFoundError(
                f'Method "{method.upper()}" not found for resource "{self.uri}"'
            ) from None

    def add_resource(self, resource: "Resource") -> None:
        self.resources[resource.path] = resource

    def get_match_pattern(self) -> re.Pattern[str]:
        """Regular expression matching concrete URIs of this resource."""
        pattern, position = "", 0
        for match in URI_PARAMETER.finditer(self.uri):
            pattern += re.escape(self.uri[position : match.start()])
            name = match.group(1)
            parameter = self.uri_parameters.get(name)
            value_pattern = parameter.get_match_pattern() if parameter else "([^/]+)"
            value_pattern = value_pattern.removeprefix("^").removesuffix("$")
            group = re.sub(r"\W", "_", name)
            pattern += f"(?P<{group}>{value_pattern})"
            position = match.end()
        pattern += re.escape(self.uri[position:])
        return re.compile(f"^{pattern}/?$")
