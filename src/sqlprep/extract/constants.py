"""Constant table: every constant declared in a package and its exact value.

Every name bound by a ``const`` spec anywhere in the package (package level
or inside a function body) is a declaration. A name declared more than once
is ambiguous; its value is never handed out and resolving it fails the run.

Values are evaluated the way the Go compiler folds constants and rendered
like ``constant.Value.ExactString``: strings as double-quoted Go literals,
integers and runes in decimal, booleans as ``true``/``false``.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from sqlprep.core.errors import ExtractionError
from sqlprep.core.logging import get_logger
from sqlprep.extract.literals import (
    LiteralError,
    parse_int,
    quote,
    rune_to_bytes,
    unquote_rune,
    unquote_string,
)
from sqlprep.load.parser import node_line, node_text

if TYPE_CHECKING:
    from sqlprep.load.package import GoPackage, GoSourceFile

log = get_logger("constants")

_BLANK = "_"

_STRING_LITERALS = frozenset({"interpreted_string_literal", "raw_string_literal"})
_FLOAT_LITERALS = frozenset({"float_literal", "imaginary_literal"})

_INT_TYPES = frozenset(
    {
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "byte",
        "rune",
    }
)
_FLOAT_TYPES = frozenset({"float32", "float64", "complex64", "complex128"})

_COMPARISONS = frozenset({"==", "!=", "<", "<=", ">", ">="})


@dataclass(frozen=True, slots=True)
class GoFloat:
    """Float or imaginary constant, kept as its literal text."""

    text: str


ConstValue = bytes | bool | int | GoFloat


@dataclass(frozen=True, slots=True)
class ConstantSite:
    """Where a constant name is declared."""

    name: str
    path: str
    line: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


@dataclass(frozen=True, slots=True)
class ConstantEntry:
    """A declared constant name.

    ``exact_value`` is None when the name is ambiguous or its value could not
    be evaluated.
    """

    name: str
    exact_value: str | None
    ambiguous: bool = False
    sites: tuple[ConstantSite, ...] = ()


class ConstantTable:
    """Read-only mapping from constant name to ConstantEntry."""

    def __init__(self, entries: Mapping[str, ConstantEntry]) -> None:
        self._entries: Mapping[str, ConstantEntry] = MappingProxyType(dict(entries))

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def get(self, name: str) -> ConstantEntry | None:
        return self._entries.get(name)

    @property
    def ambiguous_names(self) -> frozenset[str]:
        return frozenset(name for name, entry in self._entries.items() if entry.ambiguous)

    def resolve(self, name: str) -> str | None:
        """Exact value of constant ``name``, or None if it is not a known constant.

        Raises:
            ExtractionError: ``name`` is declared more than once
        """
        entry = self._entries.get(name)
        if entry is None:
            return None
        if entry.ambiguous:
            raise ExtractionError.ambiguous_constant(name, [str(s) for s in entry.sites])
        return entry.exact_value


# Nodes that open a lexical block for constants declared inside them
_BLOCK_NODES = frozenset(
    {"block", "expression_case", "type_case", "default_case", "communication_case"}
)

Scope = tuple[tuple[str, int], ...]  # enclosing blocks as (path, start byte), outermost first


@dataclass(frozen=True, slots=True)
class _Declaration:
    site: ConstantSite
    expr: Any  # tree-sitter Node, None for a spec without a value
    iota: int
    scope: Scope = ()  # () for package level
    offset: int = 0  # local constants are visible from the end of their spec


def exact_string(value: ConstValue) -> str:
    """Render a constant value the way the Go toolchain prints it."""
    if isinstance(value, bytes):
        return quote(value)
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, GoFloat):
        return value.text
    return str(value)


class _DeclarationCollector:
    """Collects const specs and declared type names from parsed files."""

    def __init__(self) -> None:
        self.declarations: dict[str, list[_Declaration]] = {}
        self.type_names: set[str] = set()

    def collect(self, source: GoSourceFile) -> None:
        path = str(source.path)
        stack: list[tuple[Any, Scope]] = [(source.root_node, ())]
        while stack:
            node, scope = stack.pop()
            if node.type == "const_declaration":
                self._collect_const_declaration(node, path, scope)
            elif node.type in ("type_spec", "type_alias"):
                name_node = node.child_by_field_name("name")
                if name_node is not None:
                    self.type_names.add(node_text(name_node))
            if node.type in _BLOCK_NODES:
                scope = (*scope, (path, node.start_byte))
            stack.extend((child, scope) for child in reversed(node.children))

    def _collect_const_declaration(self, node: Any, path: str, scope: Scope) -> None:
        # Specs without a value repeat the previous spec's expressions
        previous: list[Any] = []
        specs = [c for c in node.named_children if c.type == "const_spec"]
        for iota, spec in enumerate(specs):
            value_node = spec.child_by_field_name("value")
            if value_node is not None:
                previous = [c for c in value_node.named_children if c.type != "comment"]
            for idx, name_node in enumerate(spec.children_by_field_name("name")):
                name = node_text(name_node)
                if name == _BLANK:
                    continue
                expr = previous[idx] if idx < len(previous) else None
                site = ConstantSite(name=name, path=path, line=node_line(name_node))
                self.declarations.setdefault(name, []).append(
                    _Declaration(
                        site=site,
                        expr=expr,
                        iota=iota,
                        scope=scope,
                        offset=spec.end_byte,
                    )
                )


class ConstantEvaluator:
    """Folds constant expressions over the package's declarations.

    Names used inside a constant expression resolve lexically: the innermost
    declaration in the same or an enclosing block wins, and package-level code
    only sees package-level declarations.
    """

    def __init__(
        self,
        declarations: Mapping[str, list[_Declaration]],
        type_names: set[str] | frozenset[str] = frozenset(),
    ) -> None:
        self._declarations = declarations
        self._type_names = frozenset(type_names)
        self._cache: dict[tuple[ConstantSite, Scope], ConstValue | None] = {}
        self._in_progress: set[tuple[ConstantSite, Scope]] = set()

    def value_of(self, name: str) -> ConstValue | None:
        """Value of a uniquely declared constant, None if unknown or unevaluable."""
        decls = self._declarations.get(name)
        if not decls or len(decls) != 1:
            return None
        return self._value(decls[0])

    def lookup(self, name: str, scope: Scope = (), offset: int = 0) -> _Declaration | None:
        """Declaration of ``name`` visible at ``offset`` inside ``scope``."""
        visible = [
            d
            for d in self._declarations.get(name, ())
            if d.scope == scope[: len(d.scope)] and (not d.scope or d.offset <= offset)
        ]
        if not visible:
            return None
        depth = max(len(d.scope) for d in visible)
        innermost = [d for d in visible if len(d.scope) == depth]
        # Two package-level declarations of one name do not compile
        return innermost[0] if len(innermost) == 1 else None

    def _value(self, decl: _Declaration) -> ConstValue | None:
        key = (decl.site, decl.scope)
        if key in self._cache:
            return self._cache[key]
        if key in self._in_progress:
            log.debug("constant_cycle", name=decl.site.name, site=str(decl.site))
            return None

        self._in_progress.add(key)
        try:
            value = (
                self.evaluate(decl.expr, decl.iota, decl.scope)
                if decl.expr is not None
                else None
            )
        finally:
            self._in_progress.discard(key)
        self._cache[key] = value
        return value

    def evaluate(self, node: Any, iota: int, scope: Scope = ()) -> ConstValue | None:
        kind = node.type
        try:
            if kind in _STRING_LITERALS:
                return unquote_string(node_text(node))
            if kind == "int_literal":
                return parse_int(node_text(node))
            if kind == "rune_literal":
                return unquote_rune(node_text(node))
        except LiteralError as e:
            log.debug("literal_invalid", text=node_text(node), line=node_line(node), reason=str(e))
            return None
        if kind in _FLOAT_LITERALS:
            return GoFloat(node_text(node))
        if kind == "true":
            return True
        if kind == "false":
            return False
        if kind == "iota":
            return iota
        if kind == "identifier":
            decl = self.lookup(node_text(node), scope, node.start_byte)
            if decl is None:
                return iota if node_text(node) == "iota" else None
            return self._value(decl)
        if kind == "parenthesized_expression":
            inner = _first_expression(node)
            return self.evaluate(inner, iota, scope) if inner is not None else None
        if kind == "unary_expression":
            return self._unary(node, iota, scope)
        if kind == "binary_expression":
            return self._binary(node, iota, scope)
        if kind == "call_expression":
            return self._call(node, iota, scope)
        if kind == "type_conversion_expression":
            type_node = node.child_by_field_name("type")
            operand = node.child_by_field_name("operand")
            if type_node is None or operand is None:
                return None
            return self._convert(node_text(type_node), self.evaluate(operand, iota, scope))
        return None

    def _unary(self, node: Any, iota: int, scope: Scope) -> ConstValue | None:
        operator = node.child_by_field_name("operator")
        operand = node.child_by_field_name("operand")
        if operator is None or operand is None:
            return None
        value = self.evaluate(operand, iota, scope)
        op = operator.type
        if isinstance(value, bool):
            return (not value) if op == "!" else None
        if not isinstance(value, int):
            return None
        if op == "-":
            return -value
        if op == "+":
            return value
        if op == "^":
            return ~value
        return None

    def _binary(self, node: Any, iota: int, scope: Scope) -> ConstValue | None:
        left = node.child_by_field_name("left")
        operator = node.child_by_field_name("operator")
        right = node.child_by_field_name("right")
        if left is None or operator is None or right is None:
            return None
        a = self.evaluate(left, iota, scope)
        if a is None:
            return None
        b = self.evaluate(right, iota, scope)
        if b is None:
            return None
        return _fold(operator.type, a, b)

    def _call(self, node: Any, iota: int, scope: Scope) -> ConstValue | None:
        function = node.child_by_field_name("function")
        arguments = node.child_by_field_name("arguments")
        if function is None or arguments is None or function.type != "identifier":
            return None
        args = [c for c in arguments.named_children if c.type != "comment"]
        if len(args) != 1:
            return None
        value = self.evaluate(args[0], iota, scope)
        name = node_text(function)
        if name == "len":
            return len(value) if isinstance(value, bytes) else None
        return self._convert(name, value)

    def _convert(self, type_name: str, value: ConstValue | None) -> ConstValue | None:
        if value is None:
            return None
        if type_name in self._type_names:
            # Named types keep the value of their operand
            return value
        if type_name == "string":
            if isinstance(value, bytes):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return rune_to_bytes(value)
            return None
        if type_name == "bool":
            return value if isinstance(value, bool) else None
        if type_name in _INT_TYPES:
            return value if isinstance(value, int) and not isinstance(value, bool) else None
        if type_name in _FLOAT_TYPES:
            if isinstance(value, GoFloat):
                return value
            if isinstance(value, int) and not isinstance(value, bool):
                return value
        return None


def _first_expression(node: Any) -> Any:
    for child in node.named_children:
        if child.type != "comment":
            return child
    return None


def _fold(op: str, a: ConstValue, b: ConstValue) -> ConstValue | None:
    """Apply a binary operator to two constant values."""
    if isinstance(a, GoFloat) or isinstance(b, GoFloat):
        return None

    if isinstance(a, bool) or isinstance(b, bool):
        if not (isinstance(a, bool) and isinstance(b, bool)):
            return None
        if op == "&&":
            return a and b
        if op == "||":
            return a or b
        if op == "==":
            return a == b
        if op == "!=":
            return a != b
        return None

    if isinstance(a, bytes) or isinstance(b, bytes):
        if not (isinstance(a, bytes) and isinstance(b, bytes)):
            return None
        if op == "+":
            return a + b
        if op in _COMPARISONS:
            return _compare(op, a, b)
        return None

    if op in _COMPARISONS:
        return _compare(op, a, b)
    return _fold_int(op, a, b)


def _compare(op: str, a: Any, b: Any) -> bool:
    if op == "==":
        return bool(a == b)
    if op == "!=":
        return bool(a != b)
    if op == "<":
        return bool(a < b)
    if op == "<=":
        return bool(a <= b)
    if op == ">":
        return bool(a > b)
    return bool(a >= b)


def _fold_int(op: str, a: int, b: int) -> int | None:
    if op == "+":
        return a + b
    if op == "-":
        return a - b
    if op == "*":
        return a * b
    if op in ("/", "%"):
        if b == 0:
            return None
        # Go truncates toward zero
        quotient = abs(a) // abs(b)
        if (a < 0) != (b < 0):
            quotient = -quotient
        return quotient if op == "/" else a - b * quotient
    if op in ("<<", ">>"):
        if b < 0:
            return None
        return a << b if op == "<<" else a >> b
    if op == "&":
        return a & b
    if op == "|":
        return a | b
    if op == "^":
        return a ^ b
    if op == "&^":
        return a & ~b
    return None


def build_constant_table(package: GoPackage) -> ConstantTable:
    """Collect every constant declared in ``package`` into a ConstantTable."""
    collector = _DeclarationCollector()
    for source in package.files:
        collector.collect(source)

    evaluator = ConstantEvaluator(collector.declarations, collector.type_names)
    entries: dict[str, ConstantEntry] = {}
    for name, decls in collector.declarations.items():
        sites = tuple(d.site for d in decls)
        if len(decls) > 1:
            log.debug("constant_ambiguous", name=name, sites=[str(s) for s in sites])
            entries[name] = ConstantEntry(name=name, exact_value=None, ambiguous=True, sites=sites)
            continue
        value = evaluator.value_of(name)
        entries[name] = ConstantEntry(
            name=name,
            exact_value=exact_string(value) if value is not None else None,
            sites=sites,
        )

    log.debug(
        "constant_table_built",
        package=package.name,
        constants=len(entries),
        ambiguous=sum(1 for e in entries.values() if e.ambiguous),
    )
    return ConstantTable(entries)
