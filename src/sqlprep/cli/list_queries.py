"""sqlprep list command - show every resolved query call."""

import json

import click

from sqlprep.config.models import SqlPrepConfig
from sqlprep.core.errors import SqlPrepError
from sqlprep.ops import find_queries, load


@click.command()
@click.option(
    "-f",
    "--package",
    "target",
    required=True,
    help="Source package import path or directory",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_command(ctx: click.Context, target: str, as_json: bool) -> None:
    """List resolved queries in traversal order, duplicates included."""
    config: SqlPrepConfig = ctx.obj["config"]
    try:
        package = load(target, config)
        finder = find_queries(package)
    except SqlPrepError as e:
        raise click.ClickException(str(e)) from e

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"path": s.path, "line": s.line, "method": s.method, "query": s.value}
                    for s in finder.sites
                ],
                indent=2,
            )
        )
        return

    for site in finder.sites:
        click.echo(f"{site.path}:{site.line}\t{site.method}\t{site.value}")
