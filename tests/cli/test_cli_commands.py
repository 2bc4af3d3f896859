"""Tests for the ramlcore command line interface."""

import json

import click
import pytest
from click.testing import CliRunner

from ramlcore.__main__ import cli
from ramlcore.cli.utils import format_error, format_violation, output_result
from ramlcore.exceptions import RequestValidationError
from ramlcore.types.errors import TypeValidationError

VALID_PERSON = {"kind": "Person", "firstname": "Ann", "lastname": "Lee", "age": 40}


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def complex_raml(fixtures_dir):
    return str(fixtures_dir / "complex_types.raml")


class TestTypesCommand:
    """Test the types command."""

    def test_lists_types(self, runner, complex_raml):
        result = runner.invoke(cli, ["types", complex_raml])
        assert result.exit_code == 0
        assert "Complex types" in result.output
        for name in ("Person", "Manager", "Alertable", "Org"):
            assert name in result.output

    def test_json_output(self, runner, complex_raml):
        result = runner.invoke(cli, ["types", complex_raml, "--json-output"])
        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["status"] == "ok"
        described = {entry["name"]: entry for entry in payload["result"]}
        assert described["Manager"] == {"name": "Manager", "kind": "object", "type_name": "Manager"}
        assert described["Alertable"]["kind"] == "union"
        assert described["ClearanceLevels"]["kind"] == "string"

    def test_invalid_document(self, runner, tmp_path):
        document = tmp_path / "broken.raml"
        document.write_text("title: no header\n")
        result = runner.invoke(cli, ["types", str(document), "--json-output"])
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["status"] == "error"
        assert "missing #%RAML header" in payload["error"]


class TestValidateCommand:
    """Test the validate command."""

    def test_valid_payload_file(self, runner, complex_raml, tmp_path):
        payload = tmp_path / "person.json"
        payload.write_text(json.dumps(VALID_PERSON))
        result = runner.invoke(cli, ["validate", complex_raml, "Person", str(payload)])
        assert result.exit_code == 0
        assert "Validation passed" in result.output

    def test_invalid_payload_from_stdin(self, runner, complex_raml):
        person = dict(VALID_PERSON, age=17)
        result = runner.invoke(cli, ["validate", complex_raml, "Person", "-"], input=json.dumps(person))
        assert result.exit_code == 1
        assert "Validation failed" in result.output
        assert "age: Minimum allowed value: 18, got 17" in result.output

    def test_yaml_payload(self, runner, complex_raml):
        yaml_payload = "kind: Person\nfirstname: Ann\nlastname: Lee\nage: 40\n"
        result = runner.invoke(cli, ["validate", complex_raml, "Person"], input=yaml_payload)
        assert result.exit_code == 0

    def test_json_output(self, runner, complex_raml):
        person = dict(VALID_PERSON, lastname="L")
        result = runner.invoke(
            cli,
            ["validate", complex_raml, "Person", "-", "--json-output"],
            input=json.dumps(person),
        )
        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload == {
            "status": "ok",
            "result": {
                "valid": False,
                "errors": [
                    {"property": "lastname", "constraint": "Minimum allowed length: 2, got 1"}
                ],
            },
        }

    def test_missing_payload_file(self, runner, complex_raml, tmp_path):
        result = runner.invoke(cli, ["validate", complex_raml, "Person", str(tmp_path / "nope.json")])
        assert result.exit_code == 2
        assert "nope.json" in result.output

    def test_unknown_type(self, runner, complex_raml):
        result = runner.invoke(cli, ["validate", complex_raml, "Robot", "-"], input="{}")
        assert result.exit_code == 1
        assert 'No type found for name "Robot"' in result.output

    def test_debug_includes_traceback(self, runner, complex_raml):
        result = runner.invoke(
            cli, ["validate", complex_raml, "Robot", "-", "--json-output", "--debug"], input="{}"
        )
        payload = json.loads(result.stdout)
        assert payload["type"] == "TypeNotFoundError"
        assert "Traceback" in payload["traceback"]


class TestCliGroup:
    """Test the command group."""

    def test_help_without_command(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "types" in result.output
        assert "validate" in result.output


class TestOutputHelpers:
    """Test the shared output helpers."""

    def test_format_error_lists_violations(self):
        violation = TypeValidationError("age", "Minimum allowed value: 18, got 17")
        error = RequestValidationError("Invalid body", code=7, errors=[violation])
        info = format_error(error)
        assert info == {
            "error": "Invalid body",
            "code": 7,
            "violations": [{"property": "age", "constraint": "Minimum allowed value: 18, got 17"}],
        }

    def test_format_error_plain_exception(self):
        assert format_error(RuntimeError("boom")) == {"error": "boom"}

    def test_format_violation(self):
        line = click.unstyle(format_violation(TypeValidationError("name", "Required property")))
        assert line == "  ✗ name: Required property"

    def test_output_result_renders_violations(self):
        @click.command()
        def show():
            output_result(["header", TypeValidationError("age", "too young")])

        result = CliRunner().invoke(show, [])
        assert result.output.splitlines() == ["header", "  ✗ age: too young"]

    def test_output_result_json_serializes_violations(self):
        @click.command()
        def show():
            output_result({"errors": [TypeValidationError("age", "too young")]}, json_output=True)

        result = CliRunner().invoke(show, [])
        assert json.loads(result.stdout) == {
            "status": "ok",
            "result": {"errors": [{"property": "age", "constraint": "too young"}]},
        }
