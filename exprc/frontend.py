"""Front-end — lowers a tree-sitter parse of infix sum text into an Expr tree."""

from __future__ import annotations

import logging
from typing import Callable

from . import constants
from .errors import UnsupportedSyntaxError
from .expr import Const, Expr, Sum, Var
from .parser import Parser

logger = logging.getLogger(__name__)

_NOISE_TYPES: frozenset[str] = frozenset({"comment"})
_NESTING_TYPES: frozenset[str] = frozenset(
    {constants.BINARY_OPERATOR, constants.PARENTHESIZED_EXPRESSION}
)


class ExprFrontend:
    """Accepts non-negative integer literals, identifiers, binary ``+`` and parentheses."""

    def __init__(self, parser: Parser | None = None):
        self._parser = parser or Parser()
        self._source: bytes = b""
        self._nesting: int = 0
        self._EXPR_DISPATCH: dict[str, Callable] = {
            constants.INTEGER_LITERAL: self._lower_integer,
            constants.IDENTIFIER: self._lower_identifier,
            constants.BINARY_OPERATOR: self._lower_binop,
            constants.PARENTHESIZED_EXPRESSION: self._lower_paren,
        }

    # ── helpers ──────────────────────────────────────────────────

    def _node_text(self, node) -> str:
        return self._source[node.start_byte : node.end_byte].decode("utf-8")

    def _source_loc(self, node) -> str:
        line, col = node.start_point
        return f"{line + 1}:{col}"

    def _reject(self, node, what: str = "") -> UnsupportedSyntaxError:
        return UnsupportedSyntaxError(
            what or f"{node.type} '{self._node_text(node)}'", self._source_loc(node)
        )

    def _first_error(self, node):
        stack = [node]
        while stack:
            current = stack.pop()
            if current.type == "ERROR" or current.is_missing:
                return current
            stack.extend(reversed(current.children))
        return None

    # ── entry point ──────────────────────────────────────────────

    def lower(self, source: str) -> Expr:
        self._source = source.encode("utf-8")
        self._nesting = 0
        root = self._parser.parse(source).root_node
        if root.has_error:
            bad = self._first_error(root) or root
            raise self._reject(bad, f"syntax error near '{self._node_text(bad)}'")

        statements = [c for c in root.named_children if c.type not in _NOISE_TYPES]
        if len(statements) != 1:
            raise UnsupportedSyntaxError(
                f"expected exactly one expression, found {len(statements)} statement(s)"
            )
        stmt = statements[0]
        if stmt.type != constants.EXPRESSION_STATEMENT:
            raise self._reject(stmt)
        parts = [c for c in stmt.named_children if c.type not in _NOISE_TYPES]
        if len(parts) != 1:
            raise self._reject(stmt, f"expression list '{self._node_text(stmt)}'")

        expr = self._lower_expr(parts[0])
        logger.debug("Lowered %r to %s", source, expr)
        return expr

    # ── dispatchers ──────────────────────────────────────────────

    def _lower_expr(self, node) -> Expr:
        handler = self._EXPR_DISPATCH.get(node.type)
        if handler is None:
            raise self._reject(node)
        if node.type not in _NESTING_TYPES:
            return handler(node)
        if self._nesting >= constants.MAX_NESTING_DEPTH:
            raise self._reject(
                node, f"expression nested deeper than {constants.MAX_NESTING_DEPTH}"
            )
        self._nesting += 1
        try:
            return handler(node)
        finally:
            self._nesting -= 1

    def _lower_integer(self, node) -> Expr:
        text = self._node_text(node)
        try:
            value = int(text.replace("_", ""), 0)
        except ValueError:
            raise self._reject(node, f"integer literal '{text}'") from None
        return Const(value)

    def _lower_identifier(self, node) -> Expr:
        return Var(self._node_text(node))

    def _lower_paren(self, node) -> Expr:
        inner = [c for c in node.named_children if c.type not in _NOISE_TYPES]
        if len(inner) != 1:
            raise self._reject(node)
        return self._lower_expr(inner[0])

    def _lower_binop(self, node) -> Expr:
        op = node.child_by_field_name("operator")
        if op is None or self._node_text(op) != constants.SUM_OPERATOR:
            raise self._reject(node, f"operator '{self._node_text(op) if op else '?'}'")
        left = self._lower_expr(node.child_by_field_name("left"))
        right = self._lower_expr(node.child_by_field_name("right"))
        return Sum(left, right)


def parse_expr(source: str, parser: Parser | None = None) -> Expr:
    """Parse a single sum expression from *source*."""
    return ExprFrontend(parser).lower(source)
