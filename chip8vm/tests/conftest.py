"""Shared pytest fixtures for CHIP-8 interpreter tests."""

from __future__ import annotations

import random
from typing import Callable, Optional

import pytest

from chip8vm import Interpreter, MachineConfig, TimerMode

from .helpers import FakeClock, assemble

MakeInterpreter = Callable[..., Interpreter]


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def make_interpreter(fake_clock: FakeClock) -> MakeInterpreter:
    """Build an interpreter with a frozen clock and a seeded RNG.

    ``make_interpreter(0x6005, 0x7003)`` loads the given opcodes at 0x200.
    """

    def _make(
        *words: int,
        config: Optional[MachineConfig] = None,
        seed: int = 1234,
    ) -> Interpreter:
        interp = Interpreter(
            config if config is not None else MachineConfig(),
            rng=random.Random(seed),
            clock=fake_clock,
        )
        if words:
            interp.load(assemble(words))
        return interp

    return _make


@pytest.fixture
def per_cycle_config() -> MachineConfig:
    return MachineConfig(timer_mode=TimerMode.PER_CYCLE)
