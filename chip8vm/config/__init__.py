"""Configuration system for the CHIP-8 interpreter."""

from .machine_config import VARIANTS, DrawEdge, MachineConfig, Quirks, TimerMode

__all__ = ["DrawEdge", "MachineConfig", "Quirks", "TimerMode", "VARIANTS"]
