"""Correctness contract — partial state equivalence and the compile/run postcondition.

For a map M, expression e, environment env, initial state s and watermark t,
if s holds env's value of every identifier of e in register M(x), and every
such M(x) lies below t, then running compile_expr(M, e, t) from s ends with
the accumulator equal to evaluate(e, env) and registers below t untouched.
Registers at or above t are temporaries whose final values are unspecified.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from .compiler import compile_expr, require_nesting_within
from .errors import PreconditionViolation
from .expr import Expr, evaluate, identifiers
from .isa import Instruction
from .machine import run
from .machine_types import MachineState
from .variable_map import VariableMap

logger = logging.getLogger(__name__)


# ── Partial state equivalence ────────────────────────────────────


def disturbed_registers(before: MachineState, after: MachineState, watermark: int) -> list[int]:
    """Registers below *watermark* whose values differ between the two states."""
    # past both stored prefixes every register reads as zero
    bound = min(watermark, max(len(before.registers), len(after.registers)))
    return [r for r in range(bound) if before.read(r) != after.read(r)]


def agree_below(s1: MachineState, s2: MachineState, watermark: int) -> bool:
    return not disturbed_registers(s1, s2, watermark)


def agree_on_accumulator(s1: MachineState, s2: MachineState) -> bool:
    return s1.accumulator == s2.accumulator


# ── Preconditions ────────────────────────────────────────────────


def consistent_with(
    state: MachineState, vmap: Mapping[str, int], env: Mapping[str, int], expr: Expr
) -> bool:
    """True if every identifier of *expr* has its environment value in its register."""
    return all(state.read(vmap[x]) == env[x] for x in identifiers(expr))


def initial_state_for(
    vmap: Mapping[str, int],
    env: Mapping[str, int],
    expr: Expr,
    accumulator: int = 0,
) -> MachineState:
    """Build a state pre-loaded with *env* through *vmap* for the identifiers of *expr*.

    Raises:
        PreconditionViolation: two aliased identifiers carry different values,
            so no single state can satisfy the consistency precondition.
    """
    registers: dict[int, int] = {}
    owner: dict[int, str] = {}
    for name in identifiers(expr):
        reg, value = vmap[name], env[name]
        if reg in registers and registers[reg] != value:
            raise PreconditionViolation(
                f"Identifiers '{owner[reg]}' and '{name}' share r{reg} "
                f"but have different values ({registers[reg]} != {value})",
                offending={owner[reg]: reg, name: reg},
            )
        registers[reg] = value
        owner.setdefault(reg, name)
    return MachineState.from_registers(registers, accumulator=accumulator)


# ── Postcondition ────────────────────────────────────────────────


@dataclass(frozen=True)
class ContractReport:
    """Outcome of running compiled code against the evaluator."""

    expected: int
    actual: int
    watermark: int
    program: list[Instruction] = field(default_factory=list)
    initial_state: MachineState = field(default_factory=MachineState)
    final_state: MachineState = field(default_factory=MachineState)
    disturbed: list[int] = field(default_factory=list)

    @property
    def accumulator_matches(self) -> bool:
        return self.expected == self.actual

    @property
    def holds(self) -> bool:
        return self.accumulator_matches and not self.disturbed

    def summary(self) -> str:
        if self.holds:
            return f"contract holds: accumulator={self.actual}, registers below r{self.watermark} preserved"
        problems = []
        if not self.accumulator_matches:
            problems.append(f"accumulator {self.actual} != expected {self.expected}")
        if self.disturbed:
            problems.append(f"disturbed registers {self.disturbed}")
        return "contract VIOLATED: " + "; ".join(problems)


def verify_postcondition(
    expr: Expr,
    env: Mapping[str, int],
    program: list[Instruction],
    state: MachineState,
    watermark: int,
    final_state: MachineState | None = None,
) -> ContractReport:
    """Compare running *program* from *state* against the evaluator, no precondition checks.

    *final_state* skips re-execution when the caller already ran the program.
    """
    final = final_state if final_state is not None else run(program, state)
    return ContractReport(
        expected=evaluate(expr, env),
        actual=final.accumulator,
        watermark=watermark,
        program=list(program),
        initial_state=state,
        final_state=final,
        disturbed=disturbed_registers(state, final, watermark),
    )


def check_contract(
    vmap: VariableMap,
    expr: Expr,
    env: Mapping[str, int],
    state: MachineState,
    watermark: int,
) -> ContractReport:
    """Check both preconditions, compile, run and report on the postcondition.

    Raises:
        ConfigurationError: *vmap* misses an identifier of *expr*.
        PreconditionViolation: the watermark overlaps variable storage, the
            expression nests deeper than MAX_NESTING_DEPTH, or
            *state* does not hold *env*'s values in the mapped registers.
    """
    require_nesting_within(expr)
    vmap.require_total(expr)
    vmap.require_below(watermark, expr)
    if not consistent_with(state, vmap, env, expr):
        raise PreconditionViolation(
            "Initial state is not consistent with the environment under the variable map",
            watermark,
            {x: vmap[x] for x in identifiers(expr) if state.read(vmap[x]) != env[x]},
        )
    report = verify_postcondition(
        expr, env, compile_expr(vmap, expr, watermark), state, watermark
    )
    if report.holds:
        logger.debug("%s", report.summary())
    else:
        logger.error("%s for %s", report.summary(), expr)
    return report
