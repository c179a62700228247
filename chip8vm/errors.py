"""Exception hierarchy raised by the CHIP-8 interpreter."""

from __future__ import annotations

from typing import Optional


class EmulationError(Exception):
    """Base class for faults that stop the instruction stream."""


class InvalidOpcode(EmulationError):
    def __init__(self, opcode: int, pc: Optional[int] = None) -> None:
        self.opcode = opcode & 0xFFFF
        self.pc = pc
        where = f" at 0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Unknown opcode 0x{self.opcode:04X}{where}")


class StackOverflow(EmulationError):
    def __init__(self, pc: Optional[int] = None, depth: int = 0) -> None:
        self.pc = pc
        self.depth = depth
        where = f" at 0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Call stack overflow (depth {depth}){where}")


class StackUnderflow(EmulationError):
    def __init__(self, pc: Optional[int] = None) -> None:
        self.pc = pc
        where = f" at 0x{pc:03X}" if pc is not None else ""
        super().__init__(f"Return with empty call stack{where}")


class ImageTooLarge(EmulationError):
    def __init__(self, size: int, limit: int) -> None:
        self.size = size
        self.limit = limit
        super().__init__(
            f"Program image is {size} bytes; at most {limit} bytes fit in memory"
        )


class AddressOutOfRange(EmulationError):
    """Raised instead of reading or writing past a backing array."""

    def __init__(self, address: int, size: int, what: str = "memory") -> None:
        self.address = address
        self.size = size
        self.what = what
        super().__init__(
            f"{what} access at 0x{address:04X} outside range 0x0000-0x{size - 1:04X}"
        )


__all__ = [
    "EmulationError",
    "InvalidOpcode",
    "StackOverflow",
    "StackUnderflow",
    "ImageTooLarge",
    "AddressOutOfRange",
]
