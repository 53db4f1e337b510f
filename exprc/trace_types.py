"""Trace data types for step-by-step execution replay."""

from __future__ import annotations

from dataclasses import dataclass, field

from .isa import Instruction
from .machine_types import MachineState


@dataclass(frozen=True)
class TraceStep:
    """A single executed instruction and the machine state it produced."""

    step_index: int
    instruction: Instruction
    state: MachineState


@dataclass(frozen=True)
class ExecutionTrace:
    """Initial state plus one TraceStep per executed instruction."""

    initial_state: MachineState = field(default_factory=MachineState)
    steps: list[TraceStep] = field(default_factory=list)

    @property
    def final_state(self) -> MachineState:
        if self.steps:
            return self.steps[-1].state
        return self.initial_state

    def format(self) -> str:
        lines = [f"  [init] {_format_state(self.initial_state)}"]
        for s in self.steps:
            lines.append(f"  [{s.step_index:>4}] {str(s.instruction):<22} {_format_state(s.state)}")
        return "\n".join(lines)


def _format_state(state: MachineState) -> str:
    regs = ", ".join(f"r{r}={v}" for r, v in enumerate(state.registers) if v)
    return f"acc={state.accumulator}" + (f"  {regs}" if regs else "")
