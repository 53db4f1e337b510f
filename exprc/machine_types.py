"""Target machine — data types (pure data, no business logic)."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .constants import ZERO_WORD


@dataclass(frozen=True)
class MachineState:
    """Accumulator plus a register file that reads as zero past its stored prefix.

    Trailing zero registers are trimmed on construction, so two states compare
    equal exactly when they agree on the accumulator and on every register index.
    """

    accumulator: int = ZERO_WORD
    registers: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self):
        if self.accumulator < 0:
            raise ValueError(f"Accumulator must be non-negative, got {self.accumulator}")
        regs = tuple(self.registers)
        if any(v < 0 for v in regs):
            raise ValueError(f"Register values must be non-negative, got {regs}")
        end = len(regs)
        while end and regs[end - 1] == ZERO_WORD:
            end -= 1
        object.__setattr__(self, "registers", regs[:end])

    @classmethod
    def from_registers(
        cls, registers: Mapping[int, int], accumulator: int = ZERO_WORD
    ) -> MachineState:
        """Build a state from a sparse ``{register: value}`` mapping."""
        if any(r < 0 for r in registers):
            raise ValueError(f"Register indices must be non-negative, got {sorted(registers)}")
        size = max(registers, default=-1) + 1
        regs = [ZERO_WORD] * size
        for r, v in registers.items():
            regs[r] = v
        return cls(accumulator=accumulator, registers=tuple(regs))

    def read(self, register: int) -> int:
        if register < len(self.registers):
            return self.registers[register]
        return ZERO_WORD

    def write(self, register: int, value: int) -> MachineState:
        regs = list(self.registers)
        if register >= len(regs):
            regs.extend([ZERO_WORD] * (register + 1 - len(regs)))
        regs[register] = value
        return MachineState(accumulator=self.accumulator, registers=tuple(regs))

    def with_accumulator(self, value: int) -> MachineState:
        return MachineState(accumulator=value, registers=self.registers)

    def to_dict(self) -> dict[str, Any]:
        return {
            "accumulator": self.accumulator,
            "registers": {
                str(r): v for r, v in enumerate(self.registers) if v != ZERO_WORD
            },
        }
