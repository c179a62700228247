"""Canonical interpreter state snapshots and diff utilities."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from .interpreter import Interpreter


@dataclass(frozen=True)
class CPUState:
    """Registers, stack and execution counter."""

    registers: Dict[str, int]
    i: int
    pc: int
    sp: int
    stack: Tuple[int, ...]
    cycles: int


@dataclass(frozen=True)
class MemoryState:
    ram: bytes


@dataclass(frozen=True)
class TimerState:
    delay: int
    sound: int


@dataclass(frozen=True)
class KeypadState:
    pressed_keys: Tuple[int, ...]


@dataclass(frozen=True)
class DisplayState:
    """Row-major copy of the framebuffer plus its dirty flag."""

    pixels: Tuple[Tuple[int, ...], ...]
    dirty: bool


@dataclass(frozen=True)
class EmulatorState:
    """Composite immutable snapshot of interpreter subsystems."""

    cpu: CPUState
    memory: MemoryState
    timers: TimerState
    keypad: KeypadState
    display: DisplayState


@dataclass(frozen=True)
class FieldDiff:
    """Difference for a single named field."""

    name: str
    before: object
    after: object


@dataclass(frozen=True)
class StateDiff:
    """Aggregated differences between two interpreter states."""

    cpu: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    memory: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    timers: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    keypad: Tuple[FieldDiff, ...] = field(default_factory=tuple)
    display_changed: bool = False

    def is_empty(self) -> bool:
        """Return True when no differences were recorded."""

        return (
            not self.cpu
            and not self.memory
            and not self.timers
            and not self.keypad
            and not self.display_changed
        )


def empty_state_diff() -> StateDiff:
    """Return a reusable empty diff instance."""

    return StateDiff()


def capture_state(interp: Interpreter) -> EmulatorState:
    """Capture the current interpreter state as canonical snapshot."""

    regs = interp.regs
    cpu = CPUState(
        registers={f"v{index:x}": value for index, value in enumerate(regs.v)},
        i=regs.i,
        pc=regs.pc,
        sp=regs.sp,
        stack=tuple(regs.call_stack()),
        cycles=interp.cycle_count,
    )
    grid = interp.framebuffer.get_display_buffer()
    return EmulatorState(
        cpu=cpu,
        memory=MemoryState(ram=interp.memory.snapshot()),
        timers=TimerState(delay=interp.timers.delay, sound=interp.timers.sound),
        keypad=KeypadState(pressed_keys=interp.keypad.pressed_keys()),
        display=DisplayState(
            pixels=tuple(tuple(int(cell) for cell in row) for row in grid),
            dirty=interp.framebuffer.dirty,
        ),
    )


def diff_states(before: Optional[EmulatorState], after: EmulatorState) -> StateDiff:
    """Compute structured differences between two interpreter states."""

    if before is None:
        return empty_state_diff()

    return StateDiff(
        cpu=_diff_cpu(before.cpu, after.cpu),
        memory=_diff_memory(before.memory, after.memory),
        timers=_diff_timers(before.timers, after.timers),
        keypad=_diff_keypad(before.keypad, after.keypad),
        display_changed=before.display.pixels != after.display.pixels,
    )


def _diff_cpu(before: CPUState, after: CPUState) -> Tuple[FieldDiff, ...]:
    diffs: list[FieldDiff] = []
    diffs.extend(_diff_mapping("registers", before.registers, after.registers))
    for name in ("i", "pc", "sp", "stack", "cycles"):
        previous, current = getattr(before, name), getattr(after, name)
        if previous != current:
            diffs.append(FieldDiff(name, previous, current))
    return tuple(diffs)


def _diff_memory(before: MemoryState, after: MemoryState) -> Tuple[FieldDiff, ...]:
    diffs: list[FieldDiff] = []
    for address, (previous, current) in enumerate(zip(before.ram, after.ram)):
        if previous != current:
            diffs.append(FieldDiff(f"ram[0x{address:03X}]", previous, current))
    return tuple(diffs)


def _diff_timers(before: TimerState, after: TimerState) -> Tuple[FieldDiff, ...]:
    diffs: list[FieldDiff] = []
    if before.delay != after.delay:
        diffs.append(FieldDiff("delay", before.delay, after.delay))
    if before.sound != after.sound:
        diffs.append(FieldDiff("sound", before.sound, after.sound))
    return tuple(diffs)


def _diff_keypad(before: KeypadState, after: KeypadState) -> Tuple[FieldDiff, ...]:
    if before.pressed_keys != after.pressed_keys:
        return (FieldDiff("pressed_keys", before.pressed_keys, after.pressed_keys),)
    return ()


def _diff_mapping(
    prefix: str, before: Dict[str, int], after: Dict[str, int]
) -> Iterable[FieldDiff]:
    for key in sorted(set(before.keys()) | set(after.keys())):
        previous = before.get(key)
        current = after.get(key)
        if previous != current:
            yield FieldDiff(f"{prefix}.{key}", previous, current)


__all__ = [
    "CPUState",
    "MemoryState",
    "TimerState",
    "KeypadState",
    "DisplayState",
    "EmulatorState",
    "FieldDiff",
    "StateDiff",
    "capture_state",
    "diff_states",
    "empty_state_diff",
]
