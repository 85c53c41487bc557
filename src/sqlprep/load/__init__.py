"""Package loading: locate a Go package and parse its files with tree-sitter."""

from sqlprep.load.package import (
    GoPackage,
    GoSourceFile,
    load_package,
    resolve_package_dir,
)
from sqlprep.load.parser import GO_GRAMMAR, GoParser, GrammarSpec, ParseResult

__all__ = [
    "GO_GRAMMAR",
    "GoPackage",
    "GoParser",
    "GoSourceFile",
    "GrammarSpec",
    "ParseResult",
    "load_package",
    "resolve_package_dir",
]
