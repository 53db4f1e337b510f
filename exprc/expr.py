"""Expression model — source-language AST and its evaluator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Union

# ── AST nodes ────────────────────────────────────────────────────


@dataclass(frozen=True)
class Const:
    value: int

    def __post_init__(self):
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Constant must be an int, got {self.value!r}")
        if self.value < 0:
            raise ValueError(f"Constant must be non-negative, got {self.value}")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Var:
    name: str

    def __post_init__(self):
        if not self.name:
            raise ValueError("Variable name must be non-empty")

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Sum:
    left: Expr
    right: Expr

    def __str__(self) -> str:
        return f"({self.left} + {self.right})"


Expr = Union[Const, Var, Sum]


# ── Semantics ────────────────────────────────────────────────────


def evaluate(expr: Expr, env: Mapping[str, int]) -> int:
    """Compute the value of *expr* with identifiers looked up in *env*."""
    if isinstance(expr, Const):
        return expr.value
    if isinstance(expr, Var):
        return env[expr.name]
    return evaluate(expr.left, env) + evaluate(expr.right, env)


# ── Structural helpers ───────────────────────────────────────────
# Iterative walks: these run before any nesting bound is checked.


def _preorder(expr: Expr):
    """Yield (node, nesting level) pairs left-to-right, without recursion."""
    stack: list[tuple[Expr, int]] = [(expr, 0)]
    while stack:
        node, level = stack.pop()
        yield node, level
        if isinstance(node, Sum):
            stack.append((node.right, level + 1))
            stack.append((node.left, level + 1))


def identifiers(expr: Expr) -> list[str]:
    """Distinct identifiers of *expr* in left-to-right first-occurrence order."""
    seen: dict[str, None] = {}
    for node, _ in _preorder(expr):
        if isinstance(node, Var):
            seen.setdefault(node.name, None)
    return list(seen)


def depth(expr: Expr) -> int:
    """Sum nesting depth: leaves are 0, each Sum adds one."""
    return max(
        (level + 1 for node, level in _preorder(expr) if isinstance(node, Sum)),
        default=0,
    )


def size(expr: Expr) -> int:
    return sum(1 for _ in _preorder(expr))
