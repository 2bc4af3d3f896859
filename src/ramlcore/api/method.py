"""HTTP methods of a resource."""

from dataclasses import dataclass, field

from ramlcore.api.body import Body
from ramlcore.api.parameters import BaseUriParameter, NamedParameter
from ramlcore.api.response import Response
from ramlcore.api.security import SecurityScheme
from ramlcore.exceptions import BodyNotFoundError, RamlParseError

VALID_METHODS = ("GET", "HEAD", "POST", "PUT", "DELETE", "PATCH", "OPTIONS")
VALID_PROTOCOLS = ("HTTP", "HTTPS")


@dataclass
class Method:
    type: str
    description: str | None = None
    display_name: str | None = None
    bodies: dict[str, Body] = field(default_factory=dict)
    responses: dict[int, Response] = field(default_factory=dict)
    headers: dict[str, NamedParameter] = field(default_factory=dict)
    query_parameters: dict[str, NamedParameter] = field(default_factory=dict)
    base_uri_parameters: dict[str, BaseUriParameter] = field(default_factory=dict)
    protocols: list[str] = field(default_factory=list)
    security_schemes: dict[str, SecurityScheme] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.type = self.type.upper()
        if self.type not in VALID_METHODS:
            raise RamlParseError(f'"{self.type}" is not a valid HTTP method')
        for protocol in self.protocols:
            if protocol.upper() not in VALID_PROTOCOLS:
                raise RamlParseError(f'"{protocol}" is not a valid protocol')

    def add_body(self, body: Body) -> None:
        self.bodies[body.media_type] = body

    def get_body_by_type(self, media_type: str) -> Body:
        media_type = media_type.split(";", 1)[0].strip().lower()
        if media_type in self.bodies:
            return self.bodies[media_type]
        if "*/*" in self.bodies:
            return self.bodies["*/*"]
        raise BodyNotFoundError(f'No body found for type "{media_type}"')

    def add_response(self, response: Response) -> None:
        self.responses[response.status_code] = response

    def get_response(self, status_code: int) -> Response | None:
        return self.responses.get(status_code)

    def add_security_scheme(self, scheme: SecurityScheme, merge: bool = True) -> None:
        """Secure the method with a scheme.

        With ``merge`` the headers, query parameters and responses the scheme
        describes are added to the method. Parts the method declares itself
        are kept.
        """
        self.security_schemes[scheme.key] = scheme
        if not merge or scheme.described_by is None:
            return
        for key, header in scheme.described_by.headers.items():
            self.headers.setdefault(key, header)
        for key, parameter in scheme.described_by.query_parameters.items():
            self.query_parameters.setdefault(key, parameter)
        for status_code, response in scheme.described_by.responses.items():
            self.responses.setdefault(status_code, response)
