"""Query-call visitor.

Walks Go syntax trees pre-order and collects the query argument of every
``receiver.Method(...)`` call whose method is listed in QUERY_ARG_INDEX.
A literal argument contributes its exact source text, quotes included; an
identifier contributes the exact value of the constant it names. Anything
else (variables, concatenations, function calls) contributes nothing.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from sqlprep.core.logging import get_logger
from sqlprep.extract.constants import ConstantTable
from sqlprep.extract.methods import QUERY_ARG_INDEX
from sqlprep.load.parser import node_line, node_text

log = get_logger("finder")

LITERAL_NODE_TYPES = frozenset(
    {
        "interpreted_string_literal",
        "raw_string_literal",
        "int_literal",
        "float_literal",
        "imaginary_literal",
        "rune_literal",
    }
)


@dataclass(frozen=True, slots=True)
class QuerySite:
    """A resolved query and the call it came from."""

    value: str
    method: str
    path: str
    line: int


@dataclass
class QueryFinder:
    """Collects resolved query values from the files of one package.

    Usage::

        finder = QueryFinder(build_constant_table(package))
        for source in package.files:
            finder.walk(source.root_node, str(source.path))
        finder.queries  # ['"SELECT 1"', ...]
    """

    constants: ConstantTable
    methods: Mapping[str, int] = field(default=QUERY_ARG_INDEX)
    queries: list[str] = field(default_factory=list)
    sites: list[QuerySite] = field(default_factory=list)

    def walk(self, root: Any, path: str = "") -> None:
        """Visit ``root`` and its descendants pre-order."""
        stack = [root]
        while stack:
            node = stack.pop()
            if self.visit(node, path):
                stack.extend(reversed(node.children))

    def visit(self, node: Any, path: str = "") -> bool:
        """Process one node. Returns False when its subtree is already handled."""
        if node.type != "call_expression":
            return True

        function = node.child_by_field_name("function")
        if function is None or function.type != "selector_expression":
            return True

        field_node = function.child_by_field_name("field")
        if field_node is None:
            return True
        method = node_text(field_node)
        index = self.methods.get(method)
        if index is None:
            return True

        arg = self._argument(node, index)
        if arg is None:
            log.warning(
                "query_argument_missing",
                method=method,
                index=index,
                path=path,
                line=node_line(node),
            )
            return False

        query = self.process_query(arg)
        if query is not None:
            self.queries.append(query)
            self.sites.append(QuerySite(value=query, method=method, path=path, line=node_line(node)))
            log.debug("query_found", method=method, path=path, line=node_line(node))
        elif arg.type == "identifier" and node_text(arg) in self.constants:
            log.warning(
                "constant_value_unknown",
                name=node_text(arg),
                method=method,
                path=path,
                line=node_line(node),
            )
        else:
            log.debug("query_unresolved", method=method, path=path, line=node_line(node))
        return False

    @staticmethod
    def _argument(call: Any, index: int) -> Any:
        arguments = call.child_by_field_name("arguments")
        if arguments is None:
            return None
        args = [c for c in arguments.named_children if c.type != "comment"]
        if index >= len(args):
            return None
        arg = args[index]
        if arg.type == "variadic_argument":
            return None
        return arg

    def process_query(self, arg: Any) -> str | None:
        """Literal text of ``arg`` or the value of the constant it names.

        Raises:
            ExtractionError: ``arg`` names an ambiguous constant
        """
        if arg.type == "raw_string_literal":
            # Carriage returns are not part of a raw string's value
            return node_text(arg).replace("\r", "")
        if arg.type in LITERAL_NODE_TYPES:
            return node_text(arg)
        if arg.type == "identifier":
            return self.constants.resolve(node_text(arg))
        return None
