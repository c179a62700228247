"""Hexadecimal keypad state.

The host input layer owns the mapping from physical keys to the sixteen
logical keys and writes them here; the core only reads them.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from .constants import NUM_KEYS


class Keypad:
    """Sixteen boolean key states indexed 0x0-0xF."""

    def __init__(self) -> None:
        self._state: List[bool] = [False] * NUM_KEYS

    @staticmethod
    def _check(key: int) -> int:
        if not 0 <= key < NUM_KEYS:
            raise ValueError(f"Key index out of range: {key}")
        return key

    def press(self, key: int) -> None:
        self._state[self._check(key)] = True

    def release(self, key: int) -> None:
        self._state[self._check(key)] = False

    def set(self, key: int, pressed: bool) -> None:
        self._state[self._check(key)] = bool(pressed)

    def is_pressed(self, key: int) -> bool:
        return self._state[self._check(key)]

    def pressed_keys(self) -> Tuple[int, ...]:
        return tuple(k for k, down in enumerate(self._state) if down)

    def first_pressed(self) -> Optional[int]:
        """Return the lowest-indexed pressed key, if any."""
        for key, down in enumerate(self._state):
            if down:
                return key
        return None

    def clear(self) -> None:
        self._state[:] = [False] * NUM_KEYS

    def __len__(self) -> int:
        return NUM_KEYS


__all__ = ["Keypad"]
