"""Two-level opcode dispatch.

The leading nibble selects a slot in a 16-entry primary table.  Most slots
hold a handler directly; the 0, 8, E and F families share their leading
nibble between several instructions and defer to a secondary table keyed on
the low nibble (0/8/E) or the low byte (F).

A word is resolved by its slot alone: ``0x0120`` lands in the same family-0
slot as ``0x00E0`` and clears the screen, while ``0x0123`` hits an empty
slot and is rejected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple

from . import opcodes as ops
from .errors import InvalidOpcode
from .instructions import Instruction
from .opcodes import Handler


@dataclass(frozen=True)
class OpcodeEntry:
    """A named handler occupying one table slot."""

    name: str
    handler: Handler


class OpcodeDispatcher:
    """Decode a fetched opcode and invoke the matching semantic handler."""

    SECONDARY_FAMILIES = (0x0, 0x8, 0xE, 0xF)

    def __init__(self) -> None:
        self.table: List[Optional[OpcodeEntry]] = [None] * 0x10
        self.table0: List[Optional[OpcodeEntry]] = [None] * 0x10
        self.table8: List[Optional[OpcodeEntry]] = [None] * 0x10
        self.tableE: List[Optional[OpcodeEntry]] = [None] * 0x10
        self.tableF: List[Optional[OpcodeEntry]] = [None] * 0x100
        self._tabulate_opcodes()

    def _tabulate_opcodes(self) -> None:
        table = self.table
        table[0x1] = OpcodeEntry("1NNN", ops.op_1nnn)
        table[0x2] = OpcodeEntry("2NNN", ops.op_2nnn)
        table[0x3] = OpcodeEntry("3XKK", ops.op_3xkk)
        table[0x4] = OpcodeEntry("4XKK", ops.op_4xkk)
        table[0x5] = OpcodeEntry("5XY0", ops.op_5xy0)
        table[0x6] = OpcodeEntry("6XKK", ops.op_6xkk)
        table[0x7] = OpcodeEntry("7XKK", ops.op_7xkk)
        table[0x9] = OpcodeEntry("9XY0", ops.op_9xy0)
        table[0xA] = OpcodeEntry("ANNN", ops.op_annn)
        table[0xB] = OpcodeEntry("BNNN", ops.op_bnnn)
        table[0xC] = OpcodeEntry("CXKK", ops.op_cxkk)
        table[0xD] = OpcodeEntry("DXYN", ops.op_dxyn)
        # 0x0, 0x8, 0xE and 0xF are resolved through the secondary tables.

        self.table0[0x0] = OpcodeEntry("00E0", ops.op_00e0)
        self.table0[0xE] = OpcodeEntry("00EE", ops.op_00ee)

        for low, name, handler in (
            (0x0, "8XY0", ops.op_8xy0),
            (0x1, "8XY1", ops.op_8xy1),
            (0x2, "8XY2", ops.op_8xy2),
            (0x3, "8XY3", ops.op_8xy3),
            (0x4, "8XY4", ops.op_8xy4),
            (0x5, "8XY5", ops.op_8xy5),
            (0x6, "8XY6", ops.op_8xy6),
            (0x7, "8XY7", ops.op_8xy7),
            (0xE, "8XYE", ops.op_8xye),
        ):
            self.table8[low] = OpcodeEntry(name, handler)

        self.tableE[0xE] = OpcodeEntry("EX9E", ops.op_ex9e)
        self.tableE[0x1] = OpcodeEntry("EXA1", ops.op_exa1)

        for low, name, handler in (
            (0x07, "FX07", ops.op_fx07),
            (0x0A, "FX0A", ops.op_fx0a),
            (0x15, "FX15", ops.op_fx15),
            (0x18, "FX18", ops.op_fx18),
            (0x1E, "FX1E", ops.op_fx1e),
            (0x29, "FX29", ops.op_fx29),
            (0x33, "FX33", ops.op_fx33),
            (0x55, "FX55", ops.op_fx55),
            (0x65, "FX65", ops.op_fx65),
        ):
            self.tableF[low] = OpcodeEntry(name, handler)

    def lookup(self, opcode: int) -> Optional[OpcodeEntry]:
        """Return the entry that would execute ``opcode``, or None."""

        ins = Instruction(opcode & 0xFFFF)
        family = ins.family
        if family == 0x0:
            return self.table0[ins.n]
        if family == 0x8:
            return self.table8[ins.n]
        if family == 0xE:
            return self.tableE[ins.n]
        if family == 0xF:
            return self.tableF[ins.kk]
        return self.table[family]

    def dispatch(self, vm, ins: Instruction, pc: Optional[int] = None) -> OpcodeEntry:
        """Execute ``ins`` against ``vm``; raise InvalidOpcode when unassigned."""

        entry = self.lookup(ins.opcode)
        if entry is None:
            raise InvalidOpcode(ins.opcode, pc)
        entry.handler(vm, ins)
        return entry

    def iter_entries(self) -> Iterator[Tuple[str, OpcodeEntry]]:
        for source in (self.table, self.table0, self.table8, self.tableE, self.tableF):
            for entry in source:
                if entry is not None:
                    yield entry.name, entry

    def assigned_opcodes(self) -> Dict[str, OpcodeEntry]:
        """Map every assigned instruction pattern (e.g. ``"8XY4"``) to its entry."""
        return dict(self.iter_entries())


__all__ = ["OpcodeDispatcher", "OpcodeEntry"]
