"""sqlprep CLI - sqlprep command."""

from pathlib import Path

import click

from sqlprep import __version__
from sqlprep.cli.generate import generate_command
from sqlprep.cli.list_queries import list_command
from sqlprep.config.loader import load_config
from sqlprep.core.errors import ConfigError
from sqlprep.core.logging import configure_logging


@click.group()
@click.version_option(version=__version__, prog_name="sqlprep")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """sqlprep - collect SQL queries from a Go package for statement preparation."""
    ctx.ensure_object(dict)
    try:
        config = load_config(Path.cwd())
    except ConfigError as e:
        raise click.ClickException(str(e)) from e
    if verbose:
        config.logging.level = "DEBUG"
    ctx.obj["config"] = config
    configure_logging(config=config.logging)


cli.add_command(generate_command, name="generate")
cli.add_command(list_command, name="list")


if __name__ == "__main__":
    cli()
