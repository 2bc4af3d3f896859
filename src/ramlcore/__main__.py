import click

from ramlcore.cli.types import list_types
from ramlcore.cli.validate import validate


@click.group(invoke_without_command=True)
@click.pass_context
def cli(ctx: click.Context) -> None:
    """RAML type validation CLI"""
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


cli.add_command(list_types)
cli.add_command(validate)


if __name__ == "__main__":
    cli()
