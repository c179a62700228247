"""Semantic handlers for every CHIP-8 instruction.

Each handler receives the owning interpreter and the decoded instruction.
The program counter has already been advanced past the instruction, so
jumps, calls, returns and skips overwrite or bump it directly.

https://en.wikipedia.org/wiki/CHIP-8#Opcode_table
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

from .constants import NUM_KEYS
from .errors import AddressOutOfRange
from .instructions import Instruction

if TYPE_CHECKING:
    from .interpreter import Interpreter

Handler = Callable[["Interpreter", Instruction], None]


def _skip(vm: "Interpreter") -> None:
    vm.regs.pc += 2


def _key_index(vm: "Interpreter", ins: Instruction) -> int:
    key = vm.regs[ins.x]
    if key >= NUM_KEYS:
        raise AddressOutOfRange(key, NUM_KEYS, what="keypad")
    return key


# --------------------------------------------------------------------- #
# Display
# --------------------------------------------------------------------- #
def op_00e0(vm: "Interpreter", ins: Instruction) -> None:
    """CLS: clear the screen."""
    vm.framebuffer.clear()


def op_dxyn(vm: "Interpreter", ins: Instruction) -> None:
    """DRW Vx, Vy, n: XOR an n-row sprite read from I onto the screen.

    VF becomes 1 if any lit pixel is switched off, 0 otherwise.  I is
    unchanged.
    """
    rows = vm.memory.read_block(vm.regs.i, ins.n)
    collision = vm.framebuffer.draw_sprite(
        vm.regs[ins.x], vm.regs[ins.y], rows, edge=vm.quirks.draw_edge
    )
    vm.regs.vf = 1 if collision else 0


# --------------------------------------------------------------------- #
# Flow
# --------------------------------------------------------------------- #
def op_00ee(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs.pc = vm.regs.pop()


def op_1nnn(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs.pc = ins.addr


def op_2nnn(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs.push(vm.regs.pc)
    vm.regs.pc = ins.addr


def op_bnnn(vm: "Interpreter", ins: Instruction) -> None:
    """JP V0, addr (or JP Vx, addr with the CHIP-48 quirk)."""
    offset = vm.regs[ins.x] if vm.quirks.jump_uses_vx else vm.regs[0]
    vm.regs.pc = ins.addr + offset


# --------------------------------------------------------------------- #
# Conditionals
# --------------------------------------------------------------------- #
def op_3xkk(vm: "Interpreter", ins: Instruction) -> None:
    if vm.regs[ins.x] == ins.kk:
        _skip(vm)


def op_4xkk(vm: "Interpreter", ins: Instruction) -> None:
    if vm.regs[ins.x] != ins.kk:
        _skip(vm)


def op_5xy0(vm: "Interpreter", ins: Instruction) -> None:
    if vm.regs[ins.x] == vm.regs[ins.y]:
        _skip(vm)


def op_9xy0(vm: "Interpreter", ins: Instruction) -> None:
    if vm.regs[ins.x] != vm.regs[ins.y]:
        _skip(vm)


def op_ex9e(vm: "Interpreter", ins: Instruction) -> None:
    if vm.keypad.is_pressed(_key_index(vm, ins)):
        _skip(vm)


def op_exa1(vm: "Interpreter", ins: Instruction) -> None:
    if not vm.keypad.is_pressed(_key_index(vm, ins)):
        _skip(vm)


# --------------------------------------------------------------------- #
# Arithmetic
#
# Flag-producing instructions write VF after the result so VF holds the
# flag even when VF is also the destination.
# --------------------------------------------------------------------- #
def op_6xkk(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = ins.kk


def op_7xkk(vm: "Interpreter", ins: Instruction) -> None:
    # No carry flag.
    vm.regs[ins.x] = vm.regs[ins.x] + ins.kk


def op_8xy0(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = vm.regs[ins.y]


def op_8xy1(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = vm.regs[ins.x] | vm.regs[ins.y]


def op_8xy2(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = vm.regs[ins.x] & vm.regs[ins.y]


def op_8xy3(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = vm.regs[ins.x] ^ vm.regs[ins.y]


def op_8xy4(vm: "Interpreter", ins: Instruction) -> None:
    total = vm.regs[ins.x] + vm.regs[ins.y]
    vm.regs[ins.x] = total & 0xFF
    vm.regs.vf = 1 if total > 0xFF else 0


def op_8xy5(vm: "Interpreter", ins: Instruction) -> None:
    vx, vy = vm.regs[ins.x], vm.regs[ins.y]
    vm.regs[ins.x] = (vx - vy) & 0xFF
    vm.regs.vf = 1 if vx > vy else 0


def op_8xy6(vm: "Interpreter", ins: Instruction) -> None:
    source = vm.regs[ins.y] if vm.quirks.shift_uses_vy else vm.regs[ins.x]
    vm.regs[ins.x] = source >> 1
    vm.regs.vf = source & 0x01


def op_8xy7(vm: "Interpreter", ins: Instruction) -> None:
    vx, vy = vm.regs[ins.x], vm.regs[ins.y]
    vm.regs[ins.x] = (vy - vx) & 0xFF
    vm.regs.vf = 1 if vy > vx else 0


def op_8xye(vm: "Interpreter", ins: Instruction) -> None:
    source = vm.regs[ins.y] if vm.quirks.shift_uses_vy else vm.regs[ins.x]
    vm.regs[ins.x] = (source << 1) & 0xFF
    vm.regs.vf = (source & 0x80) >> 7


def op_cxkk(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = vm.rng.getrandbits(8) & ins.kk


# --------------------------------------------------------------------- #
# Timers and input
# --------------------------------------------------------------------- #
def op_fx07(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs[ins.x] = vm.timers.delay


def op_fx0a(vm: "Interpreter", ins: Instruction) -> None:
    """LD Vx, K: wait for a key press.

    With nothing pressed the PC is rolled back so the same instruction is
    fetched again on the next cycle; the host loop keeps running meanwhile.
    """
    key = vm.keypad.first_pressed()
    if key is None:
        vm.regs.pc -= 2
        return
    vm.regs[ins.x] = key


def op_fx15(vm: "Interpreter", ins: Instruction) -> None:
    vm.timers.set_delay(vm.regs[ins.x])


def op_fx18(vm: "Interpreter", ins: Instruction) -> None:
    vm.timers.set_sound(vm.regs[ins.x])


# --------------------------------------------------------------------- #
# Memory
# --------------------------------------------------------------------- #
def op_annn(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs.set_i(ins.addr)


def op_fx1e(vm: "Interpreter", ins: Instruction) -> None:
    # VF is not affected.
    vm.regs.set_i(vm.regs.i + vm.regs[ins.x])


def op_fx29(vm: "Interpreter", ins: Instruction) -> None:
    vm.regs.set_i(vm.memory.glyph_address(vm.regs[ins.x]))


def op_fx33(vm: "Interpreter", ins: Instruction) -> None:
    value = vm.regs[ins.x]
    vm.memory.write_block(vm.regs.i, (value // 100, (value // 10) % 10, value % 10))


def op_fx55(vm: "Interpreter", ins: Instruction) -> None:
    count = ins.x + 1
    vm.memory.write_block(vm.regs.i, vm.regs.v[:count])
    if vm.quirks.load_store_increments_i:
        vm.regs.set_i(vm.regs.i + count)


def op_fx65(vm: "Interpreter", ins: Instruction) -> None:
    count = ins.x + 1
    for index, value in enumerate(vm.memory.read_block(vm.regs.i, count)):
        vm.regs[index] = value
    if vm.quirks.load_store_increments_i:
        vm.regs.set_i(vm.regs.i + count)


__all__ = [
    "Handler",
    "op_00e0",
    "op_dxyn",
    "op_00ee",
    "op_1nnn",
    "op_2nnn",
    "op_bnnn",
    "op_3xkk",
    "op_4xkk",
    "op_5xy0",
    "op_9xy0",
    "op_ex9e",
    "op_exa1",
    "op_6xkk",
    "op_7xkk",
    "op_8xy0",
    "op_8xy1",
    "op_8xy2",
    "op_8xy3",
    "op_8xy4",
    "op_8xy5",
    "op_8xy6",
    "op_8xy7",
    "op_8xye",
    "op_cxkk",
    "op_fx07",
    "op_fx0a",
    "op_fx15",
    "op_fx18",
    "op_annn",
    "op_fx1e",
    "op_fx29",
    "op_fx33",
    "op_fx55",
    "op_fx65",
]
