"""CHIP-8 virtual machine interpreter package."""

from .config import DrawEdge, MachineConfig, Quirks, TimerMode
from .errors import (
    AddressOutOfRange,
    EmulationError,
    ImageTooLarge,
    InvalidOpcode,
    StackOverflow,
    StackUnderflow,
)
from .interpreter import Interpreter
from .state_model import (
    CPUState,
    DisplayState,
    EmulatorState,
    FieldDiff,
    KeypadState,
    MemoryState,
    StateDiff,
    TimerState,
    capture_state,
    diff_states,
    empty_state_diff,
)

__all__ = [
    "Interpreter",
    "MachineConfig",
    "Quirks",
    "DrawEdge",
    "TimerMode",
    "EmulationError",
    "InvalidOpcode",
    "StackOverflow",
    "StackUnderflow",
    "ImageTooLarge",
    "AddressOutOfRange",
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
