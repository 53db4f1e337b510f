"""Shared builders for expression, map and state fixtures."""

import itertools
import random

from exprc.expr import Const, Expr, Sum, Var
from exprc.isa import Instruction, add, load, load_immediate, store
from exprc.machine_types import MachineState

NAMES = ("a", "b", "c", "x", "y", "z")


def acceptance_expr() -> Expr:
    """(x + 3) + (x + (y + 2))"""
    return Sum(
        Sum(Var("x"), Const(3)),
        Sum(Var("x"), Sum(Var("y"), Const(2))),
    )


def random_expr(rng: random.Random, max_depth: int, names=NAMES, max_const: int = 50) -> Expr:
    """Random expression whose Sum nesting depth is at most *max_depth*."""
    if max_depth == 0 or rng.random() < 0.3:
        if rng.random() < 0.5:
            return Const(rng.randint(0, max_const))
        return Var(rng.choice(names))
    return Sum(
        random_expr(rng, max_depth - 1, names, max_const),
        random_expr(rng, max_depth - 1, names, max_const),
    )


def all_exprs(max_depth: int, leaves: list[Expr]) -> list[Expr]:
    """Every expression over *leaves* with Sum nesting depth at most *max_depth*."""
    if max_depth == 0:
        return list(leaves)
    smaller = all_exprs(max_depth - 1, leaves)
    return list(leaves) + [Sum(l, r) for l, r in itertools.product(smaller, smaller)]


def random_env(rng: random.Random, names=NAMES, max_value: int = 1000) -> dict[str, int]:
    return {name: rng.randint(0, max_value) for name in names}


def random_injective_bindings(rng: random.Random, names=NAMES, span: int = 20) -> dict[str, int]:
    return dict(zip(names, rng.sample(range(span), len(names))))


def random_state(rng: random.Random, size: int, max_value: int = 1000) -> MachineState:
    return MachineState(
        accumulator=rng.randint(0, max_value),
        registers=tuple(rng.randint(0, max_value) for _ in range(size)),
    )


def random_program(rng: random.Random, length: int, registers: int = 8) -> list[Instruction]:
    makers = (load, store, add)
    program = []
    for _ in range(length):
        if rng.random() < 0.25:
            program.append(load_immediate(rng.randint(0, 100)))
        else:
            program.append(rng.choice(makers)(rng.randrange(registers)))
    return program


def left_chain(levels: int, leaf: Expr = Const(1)) -> Expr:
    """((leaf + 1) + 1) ... with *levels* nested Sums, built without recursion."""
    expr = leaf
    for _ in range(levels):
        expr = Sum(expr, Const(1))
    return expr


def chain_source(terms: int) -> str:
    """Source text '1 + 1 + ... + 1' with *terms* literals."""
    return " + ".join(["1"] * terms)
