"""Go package resolution and loading.

A package is the set of ``.go`` files directly inside one directory that
declare the same package clause. Files are parsed with tree-sitter and kept
in sorted filename order so every traversal of the package is reproducible.
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from sqlprep.core.errors import LoadError
from sqlprep.core.logging import get_logger
from sqlprep.load.parser import GoParser, ParseResult, node_text

log = get_logger("load")

_GO_LIST_TIMEOUT_SEC = 60


@dataclass
class GoSourceFile:
    """A parsed Go source file."""

    path: Path
    package_name: str
    parse: ParseResult

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_test(self) -> bool:
        return self.path.name.endswith("_test.go")

    @property
    def root_node(self) -> Any:
        return self.parse.root_node


@dataclass
class GoPackage:
    """One Go package: its name, location and parsed files."""

    name: str
    directory: Path
    import_path: str
    files: list[GoSourceFile] = field(default_factory=list)


def _go_list(go_binary: str, args: list[str], cwd: Path | None = None) -> str:
    """Run ``go list`` and return stripped stdout.

    Raises:
        OSError: go binary missing or not executable
        subprocess.SubprocessError: non-zero exit or timeout
    """
    result = subprocess.run(
        [go_binary, "list", *args],
        cwd=str(cwd) if cwd else None,
        capture_output=True,
        text=True,
        timeout=_GO_LIST_TIMEOUT_SEC,
    )
    if result.returncode != 0:
        raise subprocess.CalledProcessError(
            result.returncode, result.args, result.stdout, result.stderr
        )
    return result.stdout.strip()


def resolve_package_dir(target: str, go_binary: str = "go") -> tuple[Path, str]:
    """Resolve a package target to (directory, import path).

    ``target`` is either a directory on disk or a Go import path. For a
    directory the import path is asked from ``go list`` and falls back to
    ``target`` itself when the go tool is unavailable.

    Raises:
        LoadError: import path cannot be located
    """
    candidate = Path(target).expanduser()
    if candidate.is_dir():
        directory = candidate.resolve()
        try:
            import_path = _go_list(go_binary, ["-f", "{{.ImportPath}}", "."], cwd=directory)
        except (OSError, subprocess.SubprocessError) as e:
            log.debug("import_path_fallback", directory=str(directory), reason=str(e))
            import_path = target
        return directory, import_path or target

    try:
        output = _go_list(go_binary, ["-find", "-f", "{{.Dir}}", target])
    except subprocess.CalledProcessError as e:
        reason = (e.stderr or "").strip() or f"go list exited with {e.returncode}"
        raise LoadError.package_not_found(target, reason) from e
    except (OSError, subprocess.SubprocessError) as e:
        raise LoadError.package_not_found(target, str(e)) from e

    if not output:
        raise LoadError.package_not_found(target, "go list returned no directory")
    return Path(output).resolve(), target


def _package_clause(root: Any) -> str | None:
    for child in root.children:
        if child.type == "package_clause":
            for ident in child.named_children:
                if ident.type == "package_identifier":
                    return node_text(ident)
    return None


def load_package(
    directory: Path,
    import_path: str | None = None,
    *,
    include_tests: bool = True,
    max_file_size_mb: int = 10,
    parser: GoParser | None = None,
) -> GoPackage:
    """Parse every Go file of the package in ``directory``.

    Raises:
        LoadError: no Go files, a syntax error, or more than one package
    """
    parser = parser or GoParser()
    max_bytes = max_file_size_mb * 1024 * 1024

    paths = sorted(p for p in directory.glob("*.go") if p.is_file())
    if not include_tests:
        paths = [p for p in paths if not p.name.endswith("_test.go")]
    if not paths:
        raise LoadError.no_source_files(str(directory))

    parsed: list[GoSourceFile] = []
    for path in paths:
        size = path.stat().st_size
        if size > max_bytes:
            log.warning("file_skipped_too_large", path=str(path), size=size)
            continue
        result = parser.parse(path)
        if result.has_errors:
            raise LoadError.parse_error(str(path), result.first_error_line or 0, result.error_count)
        name = _package_clause(result.root_node)
        if name is None:
            raise LoadError.parse_error(str(path), 1, 1)
        parsed.append(GoSourceFile(path=path, package_name=name, parse=result))

    package_name = _select_package_name(directory, parsed)
    files = [f for f in parsed if f.package_name == package_name]
    for f in parsed:
        if f.package_name != package_name:
            log.debug("file_excluded", path=str(f.path), package=f.package_name)

    log.debug(
        "package_loaded",
        package=package_name,
        directory=str(directory),
        files=len(files),
    )
    return GoPackage(
        name=package_name,
        directory=directory,
        import_path=import_path or str(directory),
        files=files,
    )


def _select_package_name(directory: Path, parsed: list[GoSourceFile]) -> str:
    names = sorted({f.package_name for f in parsed if not f.is_test})
    if not names:
        # Test-only directory: external test packages carry a _test suffix
        names = sorted(
            {f.package_name for f in parsed if not f.package_name.endswith("_test")}
        )
    if not names:
        raise LoadError.no_source_files(str(directory))
    if len(names) > 1:
        raise LoadError.multiple_packages(str(directory), names)
    return names[0]
