"""Instruction set of the accumulator-register target machine."""

from __future__ import annotations

from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, StrictInt


class Opcode(str, Enum):
    # Accumulator producers
    LOAD_IMMEDIATE = "LOAD_IMMEDIATE"
    LOAD = "LOAD"
    ADD = "ADD"
    # Register writers
    STORE = "STORE"


class Instruction(BaseModel):
    """One target instruction; *operand* is a word for LOAD_IMMEDIATE, a register otherwise."""

    model_config = ConfigDict(frozen=True)

    opcode: Opcode
    operand: Annotated[StrictInt, Field(ge=0)]

    @property
    def register(self) -> int | None:
        if self.opcode == Opcode.LOAD_IMMEDIATE:
            return None
        return self.operand

    def __str__(self) -> str:
        if self.opcode == Opcode.LOAD_IMMEDIATE:
            return f"load_immediate {self.operand}"
        return f"{self.opcode.value.lower()} r{self.operand}"


def load_immediate(value: int) -> Instruction:
    return Instruction(opcode=Opcode.LOAD_IMMEDIATE, operand=value)


def load(register: int) -> Instruction:
    return Instruction(opcode=Opcode.LOAD, operand=register)


def store(register: int) -> Instruction:
    return Instruction(opcode=Opcode.STORE, operand=register)


def add(register: int) -> Instruction:
    return Instruction(opcode=Opcode.ADD, operand=register)
