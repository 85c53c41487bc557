"""Generated Go source for the prepared statement list."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from sqlprep.core.errors import EmitError
from sqlprep.core.logging import get_logger

log = get_logger("emit")

GENERATE_COMMAND = "sqlprep generate -f"
DEFAULT_VAR_NAME = "prepStatements"


def unique_strings(values: Iterable[str]) -> list[str]:
    """Sorted list of the distinct values."""
    return sorted(set(values))


def generate_code(
    package_name: str,
    import_path: str,
    queries: list[str],
    var_name: str = DEFAULT_VAR_NAME,
) -> str:
    """Go source that assigns ``queries`` to ``var_name`` in an init function."""
    header = f"//go:generate {GENERATE_COMMAND} {import_path}\n\npackage {package_name}\n\n"
    if not queries:
        return header + f"func init() {{\n\t{var_name} = []string{{}}\n}}"

    items = ",\n\t\t".join(queries)
    return header + f"func init() {{\n\t{var_name} = []string{{\n\t\t{items},\n\t}}\n}}"


def write_code(path: Path, code: str) -> None:
    """Write generated code to ``path``.

    Raises:
        EmitError: the file cannot be written
    """
    try:
        path.write_text(code, encoding="utf-8")
    except OSError as e:
        raise EmitError.write_failed(str(path), str(e)) from e
    log.debug("code_written", path=str(path), size=len(code))
