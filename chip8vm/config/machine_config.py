"""Machine configuration and behavioural quirks for the CHIP-8 interpreter."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from ..constants import TIMER_HZ


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().casefold()
    return normalized not in {"0", "false", "off", ""}


class DrawEdge(Enum):
    """What happens to sprite pixels that land past the screen edge."""

    CLIP = "clip"  # dropped
    WRAP = "wrap"  # wrap around to the opposite edge


class TimerMode(Enum):
    WALL_CLOCK = "wall_clock"  # 60 Hz from elapsed time
    PER_CYCLE = "per_cycle"  # one decrement per executed instruction


@dataclass(frozen=True)
class Quirks:
    """Points where historical interpreters disagree.

    Defaults: shifts operate on VX in place, sprites clip at the edges,
    FX55/FX65 leave I unchanged and BNNN adds V0.
    """

    shift_uses_vy: bool = False
    draw_edge: DrawEdge = DrawEdge.CLIP
    load_store_increments_i: bool = False
    jump_uses_vx: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "shift_uses_vy": self.shift_uses_vy,
            "draw_edge": self.draw_edge.value,
            "load_store_increments_i": self.load_store_increments_i,
            "jump_uses_vx": self.jump_uses_vx,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Quirks":
        return cls(
            shift_uses_vy=bool(data.get("shift_uses_vy", False)),
            draw_edge=DrawEdge(data.get("draw_edge", DrawEdge.CLIP.value)),
            load_store_increments_i=bool(data.get("load_store_increments_i", False)),
            jump_uses_vx=bool(data.get("jump_uses_vx", False)),
        )


@dataclass
class MachineConfig:
    """CHIP-8 machine configuration."""

    name: str = "CHIP-8"
    cycles_per_second: int = 500  # pacing hint for hosts
    timer_hz: int = TIMER_HZ
    timer_mode: TimerMode = TimerMode.WALL_CLOCK
    seed: Optional[int] = None
    trace: bool = False
    quirks: Quirks = field(default_factory=Quirks)

    def __post_init__(self) -> None:
        if isinstance(self.timer_mode, str):
            self.timer_mode = TimerMode(self.timer_mode)

    def with_quirks(self, **changes: Any) -> "MachineConfig":
        """Return a copy with some quirks overridden."""
        return replace(self, quirks=replace(self.quirks, **changes))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "cycles_per_second": self.cycles_per_second,
            "timer_hz": self.timer_hz,
            "timer_mode": self.timer_mode.value,
            "seed": self.seed,
            "trace": self.trace,
            "quirks": self.quirks.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MachineConfig":
        return cls(
            name=data.get("name", "CHIP-8"),
            cycles_per_second=int(data.get("cycles_per_second", 500)),
            timer_hz=int(data.get("timer_hz", TIMER_HZ)),
            timer_mode=TimerMode(data.get("timer_mode", TimerMode.WALL_CLOCK.value)),
            seed=data.get("seed"),
            trace=bool(data.get("trace", False)),
            quirks=Quirks.from_dict(data.get("quirks", {})),
        )

    def save(self, path: str | Path) -> None:
        """Save configuration to JSON file."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def load(cls, path: str | Path) -> "MachineConfig":
        """Load configuration from JSON file."""
        with open(path, "r") as f:
            data = json.load(f)
        return cls.from_dict(data)

    @classmethod
    def for_variant(cls, variant: str) -> "MachineConfig":
        """Get configuration for a known interpreter variant."""
        configs = {
            "chip8": cls(),
            "cosmac-vip": cls(
                name="COSMAC VIP",
                quirks=Quirks(
                    shift_uses_vy=True,
                    draw_edge=DrawEdge.CLIP,
                    load_store_increments_i=True,
                ),
            ),
            "chip48": cls(
                name="CHIP-48",
                quirks=Quirks(
                    shift_uses_vy=False,
                    draw_edge=DrawEdge.WRAP,
                    jump_uses_vx=True,
                ),
            ),
        }
        if variant not in configs:
            raise ValueError(
                f"Unknown variant '{variant}' (expected one of: {sorted(configs)})"
            )
        return configs[variant]

    def load_env_overrides(self) -> "MachineConfig":
        """Apply ``CHIP8_TRACE`` / ``CHIP8_SEED`` from the environment."""
        seed = os.getenv("CHIP8_SEED")
        return replace(
            self,
            trace=_env_flag("CHIP8_TRACE", default=self.trace),
            seed=int(seed, 0) if seed else self.seed,
        )


VARIANTS = ("chip8", "cosmac-vip", "chip48")

__all__ = ["DrawEdge", "MachineConfig", "Quirks", "TimerMode", "VARIANTS"]
