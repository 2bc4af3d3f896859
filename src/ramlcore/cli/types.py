import click

from ramlcore.cli.utils import configure_logging, output_error, output_result
from ramlcore.config import ParseConfiguration
from ramlcore.loader import RamlParser
from ramlcore.types.base import Type


def _describe(node: Type) -> dict[str, str]:
    resolved = node.resolved_object()
    return {
        "name": node.name,
        "kind": resolved.kind,
        "type_name": resolved.type_name,
    }


@click.command(name="types")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def list_types(file: str, json_output: bool, debug: bool) -> None:
    """List the named types and schemas declared by a RAML document.

    \b
    Examples:
        ramlcore types api.raml                # List declared types
        ramlcore types api.raml --json-output  # Output in JSON format
    """
    configure_logging(debug)
    try:
        api = RamlParser(ParseConfiguration.from_env()).parse(file)
        described = [_describe(node) for node in api.registry]

        if json_output:
            output_result(described, json_output, debug)
        elif not described:
            click.echo(click.style("ℹ️  No types declared", fg="blue"))
        else:
            click.echo(f"\n{click.style('📋 Types in', fg='cyan', bold=True)} {api.title}")
            for entry in described:
                kind = click.style(entry["kind"], fg="yellow")
                click.echo(f"  • {entry['name']} ({kind})")
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
