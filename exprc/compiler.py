"""Compiler — expressions to accumulator-machine code with bump-allocated temporaries."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from . import constants
from .errors import PreconditionViolation
from .expr import Const, Expr, Var, depth
from .isa import Instruction, add, load, load_immediate, store
from .variable_map import VariableMap

logger = logging.getLogger(__name__)


def compile_expr(vmap: Mapping[str, int], expr: Expr, watermark: int) -> list[Instruction]:
    """Emit code leaving the value of *expr* in the accumulator.

    The left operand of a Sum is spilled to register *watermark*; the right
    operand is compiled one register higher so it cannot clobber the spill.
    Only registers at or above *watermark* are ever written.

    No validation happens here: every identifier of *expr* must be in *vmap*
    (see ``checked_compile`` for the validating entry point).
    """
    if isinstance(expr, Const):
        return [load_immediate(expr.value)]
    if isinstance(expr, Var):
        return [load(vmap[expr.name])]
    return (
        compile_expr(vmap, expr.left, watermark)
        + [store(watermark)]
        + compile_expr(vmap, expr.right, watermark + 1)
        + [add(watermark)]
    )


def registers_required(expr: Expr, watermark: int) -> int:
    """Size of register file the compiled program can touch: one temporary per nesting level."""
    return watermark + depth(expr)


def require_nesting_within(expr: Expr, limit: int = constants.MAX_NESTING_DEPTH) -> int:
    """Return the Sum nesting depth of *expr*, raising PreconditionViolation past *limit*."""
    nesting = depth(expr)
    if nesting > limit:
        raise PreconditionViolation(f"Expression nested {nesting} deep, limit is {limit}")
    return nesting


def checked_compile(vmap: VariableMap, expr: Expr, watermark: int) -> list[Instruction]:
    """Validate the compilation preconditions, then compile.

    Raises:
        ConfigurationError: *vmap* has no register for some identifier of *expr*.
        PreconditionViolation: *watermark* is negative or not above every
            variable register used by *expr*, or *expr* nests deeper than
            MAX_NESTING_DEPTH.
    """
    nesting = require_nesting_within(expr)
    vmap.require_total(expr)
    vmap.require_below(watermark, expr)
    if not vmap.is_injective_over(expr):
        logger.warning("Variable map aliases registers: %s", vmap.aliases(expr))
    instructions = compile_expr(vmap, expr, watermark)
    logger.info(
        "Compiled expression (depth %d) at watermark %d into %d instructions",
        nesting,
        watermark,
        len(instructions),
    )
    return instructions
