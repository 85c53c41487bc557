"""Extraction operations: load a package, find its queries, emit the list.

One call is one run. The constant table built for a run is handed to that
run's QueryFinder and is never shared with another run.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from sqlprep.config.models import SqlPrepConfig
from sqlprep.core.logging import get_logger, set_run_id
from sqlprep.emit.codegen import generate_code, unique_strings, write_code
from sqlprep.extract.constants import build_constant_table
from sqlprep.extract.finder import QueryFinder
from sqlprep.load.package import GoPackage, load_package, resolve_package_dir

log = get_logger("ops")


@dataclass
class PrepareResult:
    """Outcome of one prepare run."""

    package: GoPackage
    queries: list[str]  # deduplicated and sorted
    output_path: Path
    code: str
    written: bool


def find_queries(package: GoPackage) -> QueryFinder:
    """Build the constant table and walk every file of ``package`` once.

    Raises:
        ExtractionError: a query argument names an ambiguous constant
    """
    finder = QueryFinder(build_constant_table(package))
    for source in package.files:
        finder.walk(source.root_node, str(source.path))
    log.debug("queries_found", package=package.name, count=len(finder.queries))
    return finder


def load(target: str, config: SqlPrepConfig | None = None) -> GoPackage:
    """Resolve ``target`` (directory or import path) and load the package."""
    config = config or SqlPrepConfig()
    directory, import_path = resolve_package_dir(target, config.loader.go_binary)
    return load_package(
        directory,
        import_path,
        include_tests=config.loader.include_tests,
        max_file_size_mb=config.loader.max_file_size_mb,
    )


def prepare(
    target: str,
    config: SqlPrepConfig | None = None,
    *,
    output: Path | None = None,
    dry_run: bool = False,
) -> PrepareResult:
    """Generate the prepared statements file for the package at ``target``.

    Args:
        target: Package directory or Go import path
        config: Resolved configuration (defaults if None)
        output: Output file, default ``<package dir>/<config.output.filename>``
        dry_run: Generate the code without writing it

    Raises:
        LoadError: package cannot be resolved or parsed
        ExtractionError: a query argument names an ambiguous constant
        EmitError: the output file cannot be written
    """
    config = config or SqlPrepConfig()
    set_run_id()
    log.info("prepare_start", target=target)

    package = load(target, config)
    finder = find_queries(package)
    queries = unique_strings(finder.queries)
    code = generate_code(package.name, package.import_path, queries, config.output.var_name)

    output_path = output or package.directory / config.output.filename
    if not dry_run:
        write_code(output_path, code)

    log.info(
        "prepare_done",
        package=package.name,
        statements=len(queries),
        output=str(output_path),
        written=not dry_run,
    )
    return PrepareResult(
        package=package,
        queries=queries,
        output_path=output_path,
        code=code,
        written=not dry_run,
    )
