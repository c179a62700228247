"""Flat 4 KiB memory with bounds-checked access."""

from __future__ import annotations

from typing import Iterable

from .constants import (
    FONT_SET,
    FONT_SET_SIZE,
    FONT_START,
    GLYPH_HEIGHT,
    MAX_PROGRAM_SIZE,
    PROGRAM_START,
    RAM_SIZE,
)
from .errors import AddressOutOfRange, ImageTooLarge


class Memory:
    """Byte-addressable RAM with the glyph table preloaded."""

    def __init__(self, size: int = RAM_SIZE):
        self.size = size
        self.data = bytearray(size)

    def contains(self, address: int, length: int = 1) -> bool:
        """Check that ``length`` bytes starting at ``address`` are mapped."""
        return 0 <= address and address + length <= self.size

    def check_range(self, address: int, length: int = 1) -> None:
        if not self.contains(address, length):
            bad = address if address < 0 or address >= self.size else self.size
            raise AddressOutOfRange(bad, self.size)

    def read_byte(self, address: int) -> int:
        self.check_range(address)
        return self.data[address]

    def write_byte(self, address: int, value: int) -> None:
        self.check_range(address)
        self.data[address] = value & 0xFF

    def read_word(self, address: int) -> int:
        """Read a 16-bit word (big-endian)."""
        self.check_range(address, 2)
        return (self.data[address] << 8) | self.data[address + 1]

    def read_block(self, address: int, length: int) -> bytes:
        self.check_range(address, length)
        return bytes(self.data[address : address + length])

    def write_block(self, address: int, values: Iterable[int]) -> None:
        """Write consecutive bytes; the whole range is checked before any write."""
        payload = bytes(v & 0xFF for v in values)
        self.check_range(address, len(payload))
        self.data[address : address + len(payload)] = payload

    def clear(self) -> None:
        self.data[:] = bytes(self.size)

    def load_font(self) -> None:
        """Copy the built-in hex glyphs to their reserved low region."""
        self.data[FONT_START : FONT_START + FONT_SET_SIZE] = FONT_SET

    @staticmethod
    def glyph_address(digit: int) -> int:
        return FONT_START + (digit & 0xF) * GLYPH_HEIGHT

    def load_image(self, image: bytes) -> None:
        if len(image) > MAX_PROGRAM_SIZE:
            raise ImageTooLarge(len(image), MAX_PROGRAM_SIZE)
        self.data[PROGRAM_START : PROGRAM_START + len(image)] = image

    def snapshot(self) -> bytes:
        return bytes(self.data)

    def dump(self, start: int = PROGRAM_START, length: int = 64) -> str:
        """Return a hex dump of a memory window, 16 bytes per line."""
        lines = []
        end = min(start + length, self.size)
        for row in range(start, end, 16):
            chunk = self.data[row : min(row + 16, end)]
            lines.append(f"{row:03X}: " + " ".join(f"{b:02X}" for b in chunk))
        return "\n".join(lines)


__all__ = ["Memory"]
