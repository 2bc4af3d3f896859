"""Tests for loading RAML documents."""

import textwrap

import pydantic
import pytest

from ramlcore import ParseConfiguration, RamlParser
from ramlcore.api import WebFormBody
from ramlcore.exceptions import RamlParseError, TypeNotFoundError
from ramlcore.loader import namespace_expression
from ramlcore.schema import JsonSchemaDefinition, XmlSchemaDefinition
from ramlcore.types import ArrayType, JsonType, ObjectType, XmlType


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(text).lstrip())
    return path


class TestRamlParser:
    """Test parsing RAML 1.0 documents."""

    def test_metadata(self, songs_api):
        assert songs_api.title == "Songs API"
        assert songs_api.version == "v1"
        assert songs_api.base_uri == "https://api.example.com/{version}"
        assert songs_api.protocols == ["HTTPS"]
        assert songs_api.media_type == "application/json"

    def test_declared_types(self, songs_api):
        assert [node.name for node in songs_api.registry] == ["Song", "Playlist"]
        assert isinstance(songs_api.get_type("Song"), ObjectType)
        assert isinstance(songs_api.get_type("Playlist"), ArrayType)

    def test_unknown_type(self, songs_api):
        with pytest.raises(TypeNotFoundError, match='No type found for name "Album"'):
            songs_api.get_type("Album")

    def test_resource_tree(self, songs_api):
        resources = songs_api.get_resources_as_uri()
        assert sorted(resources) == ["/songs", "/songs/{songId}"]
        songs = resources["/songs"]
        assert songs.display_name == "Songs"
        assert sorted(songs.methods) == ["GET", "POST"]

    def test_query_parameters(self, songs_api):
        method = songs_api.get_resource_by_path("/songs").get_method("get")
        genre = method.query_parameters["genre"]
        assert genre.required is True
        assert genre.enum == ["rock", "jazz"]
        assert method.query_parameters["limit"].required is False

    def test_uri_parameters_are_required(self, songs_api):
        song = songs_api.get_resource_by_path("/songs/{songId}")
        assert song.uri_parameters["songId"].required is True

    def test_bodies(self, songs_api):
        post = songs_api.get_resource_by_path("/songs").get_method("post")
        json_body = post.get_body_by_type("application/json")
        assert json_body.type is not None
        assert json_body.type.resolved_object() is songs_api.get_type("Song")
        form = post.get_body_by_type("application/x-www-form-urlencoded")
        assert isinstance(form, WebFormBody)
        assert list(form.parameters) == ["title"]

    def test_responses(self, songs_api):
        get = songs_api.get_resource_by_path("/songs").get_method("get")
        response = get.get_response(200)
        assert response.headers["X-Total-Count"].required is True
        assert isinstance(response.get_body_by_type("application/json").type, ArrayType)
        assert songs_api.get_resource_by_path("/songs").get_method("post").get_response(201).bodies == {}

    def test_included_xml_schema(self, songs_api):
        get = songs_api.get_resource_by_path("/songs/{songId}").get_method("get")
        body = get.get_response(200).get_body_by_type("application/xml")
        assert isinstance(body.schema, XmlSchemaDefinition)

    def test_to_dict(self, songs_api):
        data = songs_api.to_dict()
        assert data["title"] == "Songs API"
        assert sorted(data["types"]) == ["Playlist", "Song"]
        assert data["resources"] == ["/songs", "/songs/{songId}"]

    def test_parse_string(self):
        api = RamlParser().parse_string(
            textwrap.dedent(
                """\
                #%RAML 1.0
                title: Inline
                types:
                  Id: integer
                """
            )
        )
        assert api.get_type("Id").check(1) == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            RamlParser().parse(tmp_path / "missing.raml")

    def test_missing_header(self):
        with pytest.raises(RamlParseError, match="missing #%RAML header"):
            RamlParser().parse_string("title: No header\n")

    def test_unsupported_version(self):
        with pytest.raises(RamlParseError, match='Unsupported RAML version "2.0"'):
            RamlParser().parse_string("#%RAML 2.0\ntitle: Future\n")

    def test_missing_title(self):
        with pytest.raises(RamlParseError, match='requires a "title"'):
            RamlParser().parse_string("#%RAML 1.0\nversion: v1\n")

    def test_invalid_yaml(self):
        with pytest.raises(RamlParseError, match="Failed to parse YAML"):
            RamlParser().parse_string("#%RAML 1.0\ntitle: [unclosed\n")

    def test_byte_order_mark(self):
        api = RamlParser().parse_string("\ufeff#%RAML 1.0\ntitle: With BOM\n")
        assert api.title == "With BOM"


class TestLegacyDocuments:
    """Test RAML 0.8 documents with JSON and XML schemas."""

    def test_schemas_are_compiled(self, legacy_api):
        assert isinstance(legacy_api.schemas["Song"], JsonSchemaDefinition)
        assert isinstance(legacy_api.schemas["SongXml"], XmlSchemaDefinition)
        assert isinstance(legacy_api.get_type("Song"), JsonType)
        assert isinstance(legacy_api.get_type("SongXml"), XmlType)

    def test_schema_references_resolve_relative_to_include(self, legacy_api):
        errors = legacy_api.get_type("Song").check({"title": "Hey", "artist": {}})
        assert [error.property for error in errors] == ["artist.name"]

    def test_bodies_use_declared_schemas(self, legacy_api):
        post = legacy_api.get_resource_by_path("/songs").get_method("post")
        assert post.get_body_by_type("application/json").schema is legacy_api.schemas["Song"]
        assert post.get_body_by_type("text/xml").schema is legacy_api.schemas["SongXml"]

    def test_inline_schema(self, legacy_api):
        post = legacy_api.get_resource_by_path("/songs").get_method("post")
        body = post.get_response(200).get_body_by_type("application/json")
        assert isinstance(body.schema, JsonSchemaDefinition)
        assert [error.property for error in body.check({})] == ["id"]

    def test_schema_parsing_disabled(self, fixtures_dir):
        config = ParseConfiguration(parse_schemas=False)
        api = RamlParser(config).parse(fixtures_dir / "legacy.raml")
        assert isinstance(api.schemas["Song"], str)
        post = api.get_resource_by_path("/songs").get_method("post")
        assert post.get_body_by_type("application/json").validator is None


class TestIncludes:
    """Test the !include tag."""

    def test_include_yaml_fragment(self, tmp_path):
        write(tmp_path / "types" / "person.raml", "type: object\nproperties:\n  name: string\n")
        root = write(
            tmp_path / "api.raml",
            """
            #%RAML 1.0
            title: Included
            types:
              Person: !include types/person.raml
            """,
        )
        api = RamlParser().parse(root)
        assert [str(error) for error in api.get_type("Person").check({})] == [
            "name (Missing required property)"
        ]

    def test_directory_traversal_is_blocked(self, tmp_path):
        write(tmp_path / "secret.raml", "type: string\n")
        root = write(
            tmp_path / "api" / "api.raml",
            """
            #%RAML 1.0
            title: Traversal
            types:
              Secret: !include ../secret.raml
            """,
        )
        with pytest.raises(RamlParseError, match="is not allowed"):
            RamlParser().parse(root)

        api = RamlParser(ParseConfiguration(allow_directory_traversal=True)).parse(root)
        assert api.get_type("Secret").check("x") == []

    def test_missing_include(self, tmp_path):
        root = write(
            tmp_path / "api.raml",
            """
            #%RAML 1.0
            title: Missing
            types:
              Gone: !include gone.raml
            """,
        )
        with pytest.raises(RamlParseError, match="Included file not found"):
            RamlParser().parse(root)

    def test_remote_include_is_blocked(self):
        text = "#%RAML 1.0\ntitle: Remote\ntypes: !include https://example.com/types.raml\n"
        with pytest.raises(RamlParseError, match="Including remote file .* is not allowed"):
            RamlParser().parse_string(text)


class TestLibraries:
    """Test RAML 1.0 libraries pulled in with ``uses``."""

    @pytest.fixture
    def library_api(self, tmp_path):
        write(
            tmp_path / "libs" / "geo.raml",
            """
            #%RAML 1.0 Library
            types:
              Address:
                properties:
                  city:
                    type: string
                    minLength: 2
            """,
        )
        write(
            tmp_path / "libs" / "people.raml",
            """
            #%RAML 1.0 Library
            uses:
              geo: geo.raml
            types:
              Person:
                properties:
                  name: string
                  home?: geo.Address
              Admin:
                type: Person
                properties:
                  level: integer
              Staff: Person[]
            securitySchemes:
              token:
                type: Pass Through
                describedBy:
                  headers:
                    X-Token:
                      type: string
            """,
        )
        root = write(
            tmp_path / "api.raml",
            """
            #%RAML 1.0
            title: With libraries
            uses:
              people: libs/people.raml
            types:
              Team:
                properties:
                  lead: people.Admin
            /team:
              securedBy: [people.token]
              get:
            """,
        )
        return RamlParser().parse(root)

    def test_types_are_namespaced(self, library_api):
        assert sorted(node.name for node in library_api.registry) == [
            "Team",
            "people.Admin",
            "people.Person",
            "people.Staff",
            "people.geo.Address",
        ]

    def test_references_inside_library(self, library_api):
        admin = library_api.get_type("people.Admin")
        assert admin.check({"name": "Ann", "level": 1}) == []
        assert [str(error) for error in admin.check({"level": 1})] == [
            "name (Missing required property)"
        ]
        staff = library_api.get_type("people.Staff")
        assert staff.check([{"name": "Ann"}]) == []

    def test_nested_library(self, library_api):
        person = library_api.get_type("people.Person")
        assert person.check({"name": "Ann", "home": {"city": "Oslo"}}) == []
        assert person.check({"name": "Ann", "home": {"city": "O"}}) != []

    def test_document_uses_library_types(self, library_api):
        team = library_api.get_type("Team")
        assert team.check({"lead": {"name": "Ann", "level": 2}}) == []
        assert team.check({"lead": {"name": "Ann"}}) != []

    def test_library_security_scheme(self, library_api):
        get = library_api.get_resource_by_path("/team").get_method("get")
        assert list(get.security_schemes) == ["people.token"]
        assert "X-Token" in get.headers

    def test_missing_library(self, tmp_path):
        root = write(
            tmp_path / "api.raml",
            """
            #%RAML 1.0
            title: Missing library
            uses:
              gone: gone.raml
            """,
        )
        with pytest.raises(RamlParseError, match="Included file not found"):
            RamlParser().parse(root)

    def test_library_must_be_a_mapping(self, tmp_path):
        write(tmp_path / "notes.txt", "just text\n")
        root = write(
            tmp_path / "api.raml",
            """
            #%RAML 1.0
            title: Bad library
            uses:
              notes: notes.txt
            """,
        )
        with pytest.raises(RamlParseError, match="is not a RAML library"):
            RamlParser().parse(root)

    def test_namespace_expression(self):
        assert namespace_expression("lib", "Person[] | nil") == "lib.Person[] | nil"
        assert namespace_expression("lib", "(A | date-only)?") == "(lib.A | date-only)?"
        assert namespace_expression("lib", '{"type": "object"}') == '{"type": "object"}'


class TestParseConfiguration:
    """Test configuration from the environment."""

    def test_defaults(self):
        config = ParseConfiguration.from_env()
        assert config.allow_directory_traversal is False
        assert config.parse_schemas is True
        assert config.remote_file_inclusion is False

    def test_environment_flags(self, monkeypatch):
        monkeypatch.setenv("RAMLCORE_ALLOW_DIRECTORY_TRAVERSAL", "yes")
        monkeypatch.setenv("RAMLCORE_PARSE_SCHEMAS", "0")
        monkeypatch.setenv("RAMLCORE_ALLOW_REMOTE_INCLUDES", "true")
        config = ParseConfiguration.from_env()
        assert config.allow_directory_traversal is True
        assert config.parse_schemas is False
        assert config.remote_file_inclusion is True

    def test_configuration_is_frozen(self):
        config = ParseConfiguration()
        with pytest.raises(pydantic.ValidationError):
            config.parse_schemas = False
