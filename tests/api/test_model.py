"""Tests for the API description model."""

import pytest

from ramlcore.api import ApiDefinition, Body, Method, Resource, Response, WebFormBody
from ramlcore.api.parameters import NamedParameter
from ramlcore.exceptions import (
    BodyNotFoundError,
    MethodNotFoundError,
    RamlParseError,
    ResourceNotFoundError,
)
from ramlcore.types import StringType


class TestMethodAndResponse:
    """Test methods, responses and body lookup."""

    def test_method_type_is_normalized(self):
        assert Method("get").type == "GET"

    def test_invalid_method(self):
        with pytest.raises(RamlParseError, match='"FETCH" is not a valid HTTP method'):
            Method("fetch")

    def test_invalid_protocol(self):
        with pytest.raises(RamlParseError, match="not a valid protocol"):
            Method("get", protocols=["FTP"])

    def test_body_lookup(self):
        response = Response(200)
        response.add_body(Body("application/json"))
        assert response.get_types() == ["application/json"]
        assert response.get_body_by_type("application/json; charset=utf-8").media_type == (
            "application/json"
        )
        with pytest.raises(BodyNotFoundError, match='No body found for type "text/plain"'):
            response.get_body_by_type("text/plain")

    def test_wildcard_body(self):
        method = Method("post")
        method.add_body(Body("*/*"))
        assert method.get_body_by_type("text/csv").media_type == "*/*"

    def test_response_lookup(self):
        method = Method("get")
        method.add_response(Response(200))
        assert method.get_response(200).status_code == 200
        assert method.get_response(404) is None


class TestBody:
    """Test body validators."""

    def test_body_uses_type(self):
        body = Body("application/json", type=StringType("body"))
        assert body.validator is body.type
        assert len(body.check(1)) == 1

    def test_body_without_validator(self):
        body = Body("text/plain", schema="raw schema text")
        assert body.validator is None
        assert body.check("anything") == []

    def test_web_form_parameters(self):
        body = WebFormBody(
            "application/x-www-form-urlencoded",
            parameters={"title": NamedParameter.from_dict("title", {"required": True})},
        )
        assert WebFormBody.is_web_form("multipart/form-data")
        assert body.check({"title": "x"}) == []
        assert [str(error) for error in body.check({})] == ["title (title is required)"]


class TestResourceTree:
    """Test resource lookup by path and URI."""

    @pytest.fixture
    def api(self):
        api = ApiDefinition("Test", base_uri="https://example.com/v1")
        songs = Resource("/songs", "/songs")
        song = Resource(
            "/songs/{songId}",
            "/{songId}",
            uri_parameters={"songId": NamedParameter.from_dict("songId", {"type": "integer"})},
        )
        latest = Resource("/songs/latest", "/latest")
        songs.add_resource(song)
        songs.add_resource(latest)
        song.add_method(Method("get"))
        api.add_resource(songs)
        return api

    def test_protocols_from_base_uri(self, api):
        assert api.protocols == ["HTTPS"]

    def test_resources_as_uri(self, api):
        assert sorted(api.get_resources_as_uri()) == ["/songs", "/songs/latest", "/songs/{songId}"]

    def test_resource_by_path(self, api):
        assert api.get_resource_by_path("/songs/{songId}").path == "/{songId}"
        with pytest.raises(ResourceNotFoundError):
            api.get_resource_by_path("/albums")

    def test_resource_by_uri(self, api):
        assert api.get_resource_by_uri("/songs/12").uri == "/songs/{songId}"
        assert api.get_resource_by_uri("/v1/songs/12?full=true").uri == "/songs/{songId}"
        assert api.get_resource_by_uri("/songs/latest").uri == "/songs/latest"
        with pytest.raises(ResourceNotFoundError):
            api.get_resource_by_uri("/songs/abc")

    def test_match_pattern(self, api):
        song = api.get_resource_by_path("/songs/{songId}")
        match = song.get_match_pattern().match("/songs/42")
        assert match is not None
        assert match.group("songId") == "42"

    def test_method_lookup(self, api):
        song = api.get_resource_by_path("/songs/{songId}")
        assert song.get_method("get").type == "GET"
        with pytest.raises(MethodNotFoundError):
            song.get_method("delete")
