"""Instruction field decoding and disassembly."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Instruction:
    """A fetched 16-bit opcode split into its standard fields."""

    opcode: int

    @property
    def family(self) -> int:
        return (self.opcode & 0xF000) >> 12

    @property
    def addr(self) -> int:
        return self.opcode & 0x0FFF

    @property
    def x(self) -> int:
        return (self.opcode & 0x0F00) >> 8

    @property
    def y(self) -> int:
        return (self.opcode & 0x00F0) >> 4

    @property
    def n(self) -> int:
        return self.opcode & 0x000F

    @property
    def kk(self) -> int:
        return self.opcode & 0x00FF

    def __str__(self) -> str:
        return disassemble(self.opcode)


_ALU_MNEMONICS = {
    0x0: "LD",
    0x1: "OR",
    0x2: "AND",
    0x3: "XOR",
    0x4: "ADD",
    0x5: "SUB",
    0x6: "SHR",
    0x7: "SUBN",
    0xE: "SHL",
}

_F_FORMATS = {
    0x07: "LD V{x:X}, DT",
    0x0A: "LD V{x:X}, K",
    0x15: "LD DT, V{x:X}",
    0x18: "LD ST, V{x:X}",
    0x1E: "ADD I, V{x:X}",
    0x29: "LD F, V{x:X}",
    0x33: "LD B, V{x:X}",
    0x55: "LD [I], V{x:X}",
    0x65: "LD V{x:X}, [I]",
}


def disassemble(opcode: int, jump_uses_vx: bool = False) -> str:
    """Render an opcode in the conventional Cowgod-style mnemonic syntax.

    Words are decoded by the same slots the dispatcher uses, so ``0x0120``
    reads as ``CLS``.  Words landing in an empty slot render as a ``DW``
    data word.
    """
    ins = Instruction(opcode & 0xFFFF)
    family, x, y, n, kk, addr = ins.family, ins.x, ins.y, ins.n, ins.kk, ins.addr

    if family == 0x0 and n == 0x0:
        return "CLS"
    if family == 0x0 and n == 0xE:
        return "RET"
    if family == 0x1:
        return f"JP 0x{addr:03X}"
    if family == 0x2:
        return f"CALL 0x{addr:03X}"
    if family == 0x3:
        return f"SE V{x:X}, 0x{kk:02X}"
    if family == 0x4:
        return f"SNE V{x:X}, 0x{kk:02X}"
    if family == 0x5:
        return f"SE V{x:X}, V{y:X}"
    if family == 0x6:
        return f"LD V{x:X}, 0x{kk:02X}"
    if family == 0x7:
        return f"ADD V{x:X}, 0x{kk:02X}"
    if family == 0x8 and n in _ALU_MNEMONICS:
        return f"{_ALU_MNEMONICS[n]} V{x:X}, V{y:X}"
    if family == 0x9:
        return f"SNE V{x:X}, V{y:X}"
    if family == 0xA:
        return f"LD I, 0x{addr:03X}"
    if family == 0xB:
        return f"JP V{(x if jump_uses_vx else 0):X}, 0x{addr:03X}"
    if family == 0xC:
        return f"RND V{x:X}, 0x{kk:02X}"
    if family == 0xD:
        return f"DRW V{x:X}, V{y:X}, {n}"
    if family == 0xE and n == 0xE:
        return f"SKP V{x:X}"
    if family == 0xE and n == 0x1:
        return f"SKNP V{x:X}"
    if family == 0xF and kk in _F_FORMATS:
        return _F_FORMATS[kk].format(x=x)
    return f"DW 0x{ins.opcode:04X}"


__all__ = ["Instruction", "disassemble"]
