"""CHIP-8 interpreter: owns the machine state and runs fetch-decode-execute."""

from __future__ import annotations

import logging
import random
from collections import deque
from pathlib import Path
from typing import Any, Deque, Dict, Optional, Tuple

from .config import MachineConfig, Quirks, TimerMode
from .config.machine_config import _env_flag
from .constants import MAX_PROGRAM_SIZE
from .dispatcher import OpcodeDispatcher
from .display import Framebuffer
from .errors import EmulationError, ImageTooLarge
from .instructions import Instruction, disassemble
from .keypad import Keypad
from .memory import Memory
from .registers import RegisterFile
from .timers import Clock, TimerClock, Timers

logger = logging.getLogger(__name__)

INSTRUCTION_HISTORY_LIMIT = 32


class Interpreter:
    """A single CHIP-8 machine.

    The instance owns memory, registers, timers, keypad and framebuffer for
    its whole lifetime.  ``cycle()`` is the only mutating entry point during
    execution and is not safe to call concurrently; hosts drive it from one
    thread, writing the keypad and reading the framebuffer between calls.
    """

    def __init__(
        self,
        config: Optional[MachineConfig] = None,
        *,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config if config is not None else MachineConfig()
        self.rng = rng if rng is not None else random.Random(self.config.seed)

        self.memory = Memory()
        self.regs = RegisterFile()
        self.timers = Timers()
        self.keypad = Keypad()
        self.framebuffer = Framebuffer()
        self.dispatcher = OpcodeDispatcher()
        if clock is not None:
            self.timer_clock = TimerClock(hz=self.config.timer_hz, clock=clock)
        else:
            self.timer_clock = TimerClock(hz=self.config.timer_hz)

        self.trace_enabled = self.config.trace or _env_flag("CHIP8_TRACE")
        self.opcode = 0
        self.cycle_count = 0
        self.instruction_history: Deque[Tuple[int, int]] = deque(
            maxlen=INSTRUCTION_HISTORY_LIMIT
        )
        self.reset()

    @property
    def quirks(self) -> Quirks:
        return self.config.quirks

    @property
    def sound_active(self) -> bool:
        """True while the host should be sounding the buzzer."""
        return self.timers.sound_active

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #
    def reset(self) -> None:
        """Zero all machine state and reload the glyph table."""

        self.memory.clear()
        self.memory.load_font()
        self.regs.reset()
        self.timers.reset()
        self.keypad.clear()
        self.framebuffer.reset()
        self.timer_clock.reset()
        self.opcode = 0
        self.cycle_count = 0
        self.instruction_history.clear()
        logger.debug("Machine reset")

    def load(self, image: bytes) -> None:
        """Reset the machine and copy ``image`` to the program region.

        Raises ImageTooLarge before touching any state when the image does
        not fit.
        """

        image = bytes(image)
        if len(image) > MAX_PROGRAM_SIZE:
            raise ImageTooLarge(len(image), MAX_PROGRAM_SIZE)
        self.reset()
        self.memory.load_image(image)
        logger.debug("Loaded %d-byte program image", len(image))

    def load_file(self, path: str | Path) -> None:
        rom_path = Path(path)
        self.load(rom_path.read_bytes())
        logger.info("Loaded ROM %s", rom_path.name)

    # ------------------------------------------------------------------ #
    # Execution
    # ------------------------------------------------------------------ #
    def cycle(self) -> None:
        """Fetch, advance PC, dispatch, then tick the timers.

        On a fault the PC is rewound to the failing instruction and the
        error propagates; the instruction has not mutated any other state.
        """

        pc = self.regs.pc
        try:
            opcode = self.memory.read_word(pc)
            self.opcode = opcode
            self.regs.pc = pc + 2
            if self.trace_enabled:
                logger.debug(
                    "%03X: %04X  %s",
                    pc,
                    opcode,
                    disassemble(opcode, self.quirks.jump_uses_vx),
                )
            self.dispatcher.dispatch(self, Instruction(opcode), pc)
        except EmulationError as exc:
            self.regs.pc = pc
            self._report_fault(exc)
            raise

        self.instruction_history.append((pc, opcode))
        self.cycle_count += 1
        self._tick_timers()

    def run(self, max_cycles: Optional[int] = None) -> int:
        """Run ``cycle()`` repeatedly; returns the number of cycles executed.

        Without ``max_cycles`` this only returns by raising.
        """

        count = 0
        while max_cycles is None or count < max_cycles:
            self.cycle()
            count += 1
        return count

    def _tick_timers(self) -> None:
        if self.config.timer_mode is TimerMode.PER_CYCLE:
            self.timers.tick()
            return
        self.timer_clock.advance()
        if self.timer_clock.consume(1):
            self.timers.tick()

    def _report_fault(self, exc: EmulationError) -> None:
        recent = ", ".join(
            f"{pc:03X}:{opcode:04X}" for pc, opcode in self.instruction_history
        )
        logger.error(
            "Execution stopped at PC=0x%03X after %d cycles: %s (recent: %s)",
            self.regs.pc,
            self.cycle_count,
            exc,
            recent or "none",
        )

    # ------------------------------------------------------------------ #
    # Inspection
    # ------------------------------------------------------------------ #
    def get_cpu_state(self) -> Dict[str, Any]:
        return {
            "pc": self.regs.pc,
            "i": self.regs.i,
            "sp": self.regs.sp,
            "v": list(self.regs.v),
            "stack": self.regs.call_stack(),
            "delay_timer": self.timers.delay,
            "sound_timer": self.timers.sound,
            "opcode": self.opcode,
            "cycles": self.cycle_count,
        }

    def current_instruction(self) -> str:
        """Disassemble the instruction at PC without executing it."""
        opcode = self.memory.read_word(self.regs.pc)
        return disassemble(opcode, self.quirks.jump_uses_vx)


__all__ = ["Interpreter", "INSTRUCTION_HISTORY_LIMIT"]
