"""sqlprep generate command - write the prepared statements file."""

from pathlib import Path

import click

from sqlprep.config.models import SqlPrepConfig
from sqlprep.core.errors import SqlPrepError
from sqlprep.core.progress import pluralize, status
from sqlprep.ops import prepare


@click.command()
@click.option(
    "-f",
    "--package",
    "target",
    required=True,
    help="Source package import path (i.e. github.com/my/package) or directory",
)
@click.option(
    "-o",
    "--output",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Output file (default: prepared_statements.go in the package directory)",
)
@click.option("--dry-run", is_flag=True, help="Print the generated code instead of writing it")
@click.pass_context
def generate_command(
    ctx: click.Context, target: str, output: Path | None, dry_run: bool
) -> None:
    """Generate the list of statements to prepare for a Go package."""
    config: SqlPrepConfig = ctx.obj["config"]
    try:
        result = prepare(target, config, output=output, dry_run=dry_run)
    except SqlPrepError as e:
        raise click.ClickException(str(e)) from e

    if dry_run:
        click.echo(result.code)
        return

    status(
        f"Wrote {pluralize(len(result.queries), 'statement')} to {result.output_path}",
        style="success",
    )
