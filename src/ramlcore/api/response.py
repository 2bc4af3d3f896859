"""Responses of a method."""

from dataclasses import dataclass, field

from ramlcore.api.body import Body
from ramlcore.api.parameters import NamedParameter
from ramlcore.exceptions import BodyNotFoundError


@dataclass
class Response:
    status_code: int
    description: str | None = None
    bodies: dict[str, Body] = field(default_factory=dict)
    headers: dict[str, NamedParameter] = field(default_factory=dict)

    def add_body(self, body: Body) -> None:
        self.bodies[body.media_type] = body

    def get_types(self) -> list[str]:
        return list(self.bodies)

    def get_body_by_type(self, media_type: str) -> Body:
        """The body for a media type, falling back to a ``*/*`` body.

        Raises:
            BodyNotFoundError: If neither is declared
        """
        media_type = media_type.split(";", 1)[0].strip().lower()
        if media_type in self.bodies:
            return self.bodies[media_type]
        if "*/*" in self.bodies:
            return self.bodies["*/*"]
        raise BodyNotFoundError(f'No body found for type "{media_type}"')
