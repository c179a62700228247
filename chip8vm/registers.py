"""Register file and call stack of the CHIP-8 core."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

from .constants import FLAG_REGISTER, NUM_REGISTERS, PROGRAM_START, STACK_LEVELS
from .errors import StackOverflow, StackUnderflow


@dataclass
class RegisterFile:
    """V0..VF, the address register ``i``, ``pc`` and the return stack."""

    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0
    pc: int = PROGRAM_START
    sp: int = 0
    stack: List[int] = field(default_factory=lambda: [0] * STACK_LEVELS)

    def __getitem__(self, index: int) -> int:
        if 0 <= index < NUM_REGISTERS:
            return self.v[index]
        raise IndexError(f"Invalid register index V{index:X}")

    def __setitem__(self, index: int, value: int) -> None:
        if 0 <= index < NUM_REGISTERS:
            self.v[index] = value & 0xFF
        else:
            raise IndexError(f"Invalid register index V{index:X}")

    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    def set_i(self, value: int) -> None:
        self.i = value & 0xFFFF

    def push(self, address: int) -> None:
        if self.sp >= STACK_LEVELS:
            raise StackOverflow(pc=self.pc, depth=self.sp)
        self.stack[self.sp] = address & 0xFFFF
        self.sp += 1

    def pop(self) -> int:
        if self.sp == 0:
            raise StackUnderflow(pc=self.pc)
        self.sp -= 1
        return self.stack[self.sp]

    def call_stack(self) -> List[int]:
        """Return the live return addresses, innermost last."""
        return list(self.stack[: self.sp])

    def reset(self) -> None:
        self.v[:] = [0] * NUM_REGISTERS
        self.stack[:] = [0] * STACK_LEVELS
        self.i = 0
        self.sp = 0
        self.pc = PROGRAM_START


__all__ = ["RegisterFile"]
