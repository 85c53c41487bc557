"""Tree-sitter parsing of Go source files.

The grammar is resolved through importlib from its wheel module
(``tree_sitter_go``) and loaded once per parser instance.
"""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tree_sitter

from sqlprep.core.errors import LoadError


@dataclass(frozen=True)
class GrammarSpec:
    """Install and load metadata for a tree-sitter grammar."""

    name: str  # grammar key ("go")
    package: str  # PyPI package ("tree-sitter-go")
    module: str  # Python import ("tree_sitter_go")
    min_version: str
    language_func: str = "language"


GO_GRAMMAR = GrammarSpec(
    name="go",
    package="tree-sitter-go",
    module="tree_sitter_go",
    min_version="0.23.0",
)


@dataclass
class ParseResult:
    """Result of parsing a file."""

    tree: Any  # Tree-sitter Tree (not serializable)
    error_count: int
    total_nodes: int
    root_node: Any  # Tree-sitter Node
    first_error_line: int | None = None  # 1-based

    @property
    def has_errors(self) -> bool:
        return self.error_count > 0


@dataclass
class GoParser:
    """
    Tree-sitter parser for Go sources.

    Usage::

        parser = GoParser()
        result = parser.parse(Path("queries.go"))
        if result.has_errors:
            ...
    """

    grammar: GrammarSpec = GO_GRAMMAR
    _parser: Any = field(default=None, repr=False)
    _language: Any = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self._parser = tree_sitter.Parser()
        self._language = None

    def _get_language(self) -> Any:
        """Get or load the tree-sitter language for the grammar."""
        if self._language is not None:
            return self._language
        try:
            mod = importlib.import_module(self.grammar.module)
            lang_fn = getattr(mod, self.grammar.language_func)
        except (ImportError, AttributeError) as err:
            raise LoadError.grammar_unavailable(self.grammar.module) from err
        self._language = tree_sitter.Language(lang_fn())
        return self._language

    def parse(self, path: Path, content: bytes | None = None) -> ParseResult:
        """
        Parse a file with Tree-sitter.

        Args:
            path: Path to file
            content: File content as bytes. If None, reads from path.

        Returns:
            ParseResult with tree and error info.
        """
        if content is None:
            content = path.read_bytes()

        self._parser.language = self._get_language()
        tree = self._parser.parse(content)

        error_count = 0
        total_nodes = 0
        first_error_line: int | None = None

        stack = [tree.root_node]
        while stack:
            node = stack.pop()
            total_nodes += 1
            if node.type == "ERROR" or node.is_missing:
                error_count += 1
                line = node.start_point[0] + 1
                if first_error_line is None or line < first_error_line:
                    first_error_line = line
            stack.extend(node.children)

        return ParseResult(
            tree=tree,
            error_count=error_count,
            total_nodes=total_nodes,
            root_node=tree.root_node,
            first_error_line=first_error_line,
        )


def node_text(node: Any) -> str:
    """Decode a node's source text."""
    return node.text.decode("utf-8", errors="replace") if node.text else ""


def node_line(node: Any) -> int:
    """1-based line of a node's start."""
    return int(node.start_point[0]) + 1
