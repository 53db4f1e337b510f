"""Pure functions for computing statistics over target instruction lists."""

from __future__ import annotations

from collections import Counter

from exprc.isa import Instruction, Opcode


def count_opcodes(instructions: list[Instruction]) -> dict[str, int]:
    """Return a frequency map of opcode names in the given instruction list.

    Args:
        instructions: A list of target instructions.

    Returns:
        A dict mapping opcode name strings to their occurrence counts.
        Empty dict for an empty input list.
    """
    return dict(Counter(inst.opcode.value for inst in instructions))


def registers_written(instructions: list[Instruction]) -> set[int]:
    return {inst.operand for inst in instructions if inst.opcode == Opcode.STORE}


def registers_read(instructions: list[Instruction]) -> set[int]:
    return {
        inst.operand
        for inst in instructions
        if inst.opcode in (Opcode.LOAD, Opcode.ADD)
    }


def format_program(instructions: list[Instruction]) -> str:
    """One instruction per line, indexed."""
    return "\n".join(f"  {i:>4}  {inst}" for i, inst in enumerate(instructions))
