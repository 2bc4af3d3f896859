"""Lookups of the API definition parts needed to validate a request or response."""

from ramlcore.api.body import Body
from ramlcore.api.definition import ApiDefinition
from ramlcore.api.method import Method
from ramlcore.api.parameters import NamedParameter
from ramlcore.api.resource import Resource
from ramlcore.api.response import Response
from ramlcore.exceptions import (
    BodyNotFoundError,
    MethodNotFoundError,
    ResourceNotFoundError,
    SchemaNotFoundError,
)


class ValidatorSchemaHelper:
    """Finds methods, parameters, bodies and responses for a method and path.

    Every lookup failure is reported as ``SchemaNotFoundError``.
    """

    def __init__(self, api: ApiDefinition):
        self.api = api

    def get_query_parameters(
        self, method: str, path: str, required_only: bool = False
    ) -> dict[str, NamedParameter]:
        parameters = self.get_method(method, path).query_parameters
        return {
            key: parameter
            for key, parameter in parameters.items()
            if parameter.required or not required_only
        }

    def get_request_body(self, method: str, path: str, content_type: str) -> Body:
        return self._get_body(self.get_method(method, path), method, path, content_type)

    def get_response(self, method: str, path: str, status_code: int) -> Response:
        response = self.get_method(method, path).get_response(status_code)
        if response is None:
            raise SchemaNotFoundError(
                f"Schema for {method.upper()} {path} with status code {status_code} "
                "was not found in API definition"
            )
        return response

    def get_response_body(
        self, method: str, path: str, status_code: int, content_type: str
    ) -> Body:
        response = self.get_response(method, path, status_code)
        return self._get_body(response, method, path, content_type)

    def get_response_media_types(self, method: str, path: str) -> list[str]:
        """Media types the method can respond with.

        Falls back to the default media type of the API when no response
        declares a body.
        """
        media_types: list[str] = []
        for response in self.get_method(method, path).responses.values():
            media_types.extend(
                media_type for media_type in response.get_types() if media_type not in media_types
            )
        if media_types:
            return media_types
        default = self.api.media_type
        if isinstance(default, list):
            return [str(media_type) for media_type in default]
        return [default] if default else []

    def get_response_headers(
        self, method: str, path: str, status_code: int, required_only: bool = False
    ) -> dict[str, NamedParameter]:
        headers = self.get_response(method, path, status_code).headers
        return {
            key: header for key, header in headers.items() if header.required or not required_only
        }

    def get_resource(self, path: str) -> Resource:
        try:
            return self.api.get_resource_by_uri(path)
        except ResourceNotFoundError as e:
            raise SchemaNotFoundError(f"Schema for URI {path} was not found in API definition") from e

    def get_method(self, method: str, path: str) -> Method:
        resource = self.get_resource(path)
        try:
            return resource.get_method(method)
        except MethodNotFoundError as e:
            raise SchemaNotFoundError(
                f"Schema for {method.upper()} {path} was not found in API definition"
            ) from e

    @staticmethod
    def _get_body(schema: Method | Response, method: str, path: str, content_type: str) -> Body:
        try:
            return schema.get_body_by_type(content_type)
        except BodyNotFoundError as e:
            raise SchemaNotFoundError(
                f"Schema for {method.upper()} {path} with content type {content_type} "
                "was not found in API definition"
            ) from e
