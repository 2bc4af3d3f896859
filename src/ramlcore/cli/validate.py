import sys
from typing import IO, Any

import click
import yaml

from ramlcore.cli.utils import configure_logging, output_error, output_result
from ramlcore.config import ParseConfiguration
from ramlcore.exceptions import RamlParseError
from ramlcore.loader import RamlParser
from ramlcore.validator.core import Validator


def _read_payload(payload: IO[str]) -> Any:
    try:
        return yaml.safe_load(payload.read())
    except yaml.YAMLError as e:
        raise RamlParseError(f"Payload is neither JSON nor YAML: {e}") from e


@click.command(name="validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.argument("type_name", metavar="TYPE")
@click.argument(
    "payload", type=click.File("r", encoding="utf-8"), default="-", required=False
)
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def validate(
    file: str, type_name: str, payload: IO[str], json_output: bool, debug: bool
) -> None:
    """Validate a JSON or YAML payload against a type declared in a RAML document.

    The payload is read from PAYLOAD, or from stdin when it is omitted or "-".
    Exits with status 1 when the payload is invalid.

    \b
    Examples:
        ramlcore validate api.raml Person person.json
        cat person.yml | ramlcore validate api.raml Person -
        ramlcore validate api.raml Person person.json --json-output
    """
    configure_logging(debug)
    try:
        api = RamlParser(ParseConfiguration.from_env()).parse(file)
        value = _read_payload(payload)
        errors = Validator.for_api(api).validate_value(type_name, value)

        if json_output:
            output_result({"valid": not errors, "errors": errors}, json_output, debug)
        elif errors:
            click.echo(
                f"{click.style('❌ Validation failed!', fg='red', bold=True)} "
                f"Value is not a valid {type_name}"
            )
            output_result(errors)
        else:
            click.echo(
                f"{click.style('✅ Validation passed!', fg='green', bold=True)} "
                f"Value is a valid {type_name}"
            )

        if errors:
            sys.exit(1)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
