"""Target machine — single-step semantics and sequential program execution."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from functools import reduce

from .isa import Instruction, Opcode
from .machine_types import MachineState
from .trace_types import ExecutionTrace, TraceStep

logger = logging.getLogger(__name__)


def _load_immediate(operand: int, state: MachineState) -> MachineState:
    return state.with_accumulator(operand)


def _load(operand: int, state: MachineState) -> MachineState:
    return state.with_accumulator(state.read(operand))


def _store(operand: int, state: MachineState) -> MachineState:
    return state.write(operand, state.accumulator)


def _add(operand: int, state: MachineState) -> MachineState:
    # register operand first, accumulator second
    return state.with_accumulator(state.read(operand) + state.accumulator)


_STEP_DISPATCH = {
    Opcode.LOAD_IMMEDIATE: _load_immediate,
    Opcode.LOAD: _load,
    Opcode.STORE: _store,
    Opcode.ADD: _add,
}


def step(instruction: Instruction, state: MachineState) -> MachineState:
    """Execute one instruction, returning the successor state."""
    return _STEP_DISPATCH[instruction.opcode](instruction.operand, state)


def run(instructions: Iterable[Instruction], state: MachineState) -> MachineState:
    """Fold ``step`` left-to-right over *instructions*, starting from *state*."""
    return reduce(lambda s, inst: step(inst, s), instructions, state)


def run_traced(
    instructions: Iterable[Instruction], state: MachineState
) -> ExecutionTrace:
    """Execute like ``run`` but keep every intermediate state.

    Returns:
        An ExecutionTrace whose ``final_state`` equals ``run(instructions, state)``.
    """
    steps: list[TraceStep] = []
    current = state
    for index, instruction in enumerate(instructions):
        current = step(instruction, current)
        steps.append(TraceStep(step_index=index, instruction=instruction, state=current))
    logger.debug("Traced %d instructions, accumulator=%d", len(steps), current.accumulator)
    return ExecutionTrace(initial_state=state, steps=steps)
