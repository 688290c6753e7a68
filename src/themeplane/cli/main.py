"""ThemePlane CLI - tpl command."""

import click

from themeplane import __version__
from themeplane.cli.context import context_command
from themeplane.cli.search import search_command
from themeplane.cli.validate import validate_command
from themeplane.core.logging import configure_logging, set_request_id


@click.group()
@click.version_option(version=__version__, prog_name="tpl")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """ThemePlane - context assembly and change validation for theme agents."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")
    set_request_id()


cli.add_command(search_command, name="search")
cli.add_command(context_command, name="context")
cli.add_command(validate_command, name="validate")


if __name__ == "__main__":
    cli()
