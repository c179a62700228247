"""Monochrome framebuffer with a pull-based dirty flag."""

from __future__ import annotations

from typing import Sequence

import numpy as np

from ..config import DrawEdge
from ..constants import DISPLAY_HEIGHT, DISPLAY_WIDTH, SPRITE_WIDTH
from ..errors import AddressOutOfRange


class Framebuffer:
    """64x32 bit grid mutated only by the clear and draw instructions.

    Any mutation sets ``dirty``; the renderer reads the grid and calls
    ``acknowledge()`` once it has presented it.
    """

    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self.width = width
        self.height = height

        # Display buffer (1 byte per pixel, 0 or 1)
        self.display_buffer = np.zeros((height, width), dtype=np.uint8)
        self._dirty = False

    @property
    def dirty(self) -> bool:
        return self._dirty

    def acknowledge(self) -> None:
        """Clear the dirty flag after the consumer has rendered the grid."""
        self._dirty = False

    def reset(self) -> None:
        self.display_buffer.fill(0)
        self._dirty = False

    def clear(self) -> None:
        """Clear the display buffer."""
        self.display_buffer.fill(0)
        self._dirty = True

    def get_display_buffer(self) -> np.ndarray:
        """Get a copy of the current display buffer."""
        return self.display_buffer.copy()

    def _check(self, x: int, y: int) -> None:
        if not 0 <= x < self.width:
            raise AddressOutOfRange(x, self.width, what="framebuffer column")
        if not 0 <= y < self.height:
            raise AddressOutOfRange(y, self.height, what="framebuffer row")

    def get_pixel(self, x: int, y: int) -> int:
        self._check(x, y)
        return int(self.display_buffer[y, x])

    def set_pixel(self, x: int, y: int, value: int) -> None:
        self._check(x, y)
        self.display_buffer[y, x] = 1 if value else 0
        self._dirty = True

    def lit_pixels(self) -> int:
        return int(self.display_buffer.sum())

    def draw_sprite(
        self,
        x: int,
        y: int,
        rows: Sequence[int],
        edge: DrawEdge = DrawEdge.CLIP,
    ) -> bool:
        """XOR an 8-pixel-wide sprite onto the grid at (x, y).

        Returns True when any lit pixel was switched off.  Pixels landing
        beyond the grid are dropped under ``DrawEdge.CLIP`` and wrapped to the
        opposite edge under ``DrawEdge.WRAP``.
        """

        collision = False
        for row, sprite_byte in enumerate(rows):
            py = y + row
            if edge is DrawEdge.WRAP:
                py %= self.height
            elif not 0 <= py < self.height:
                continue
            for col in range(SPRITE_WIDTH):
                if not sprite_byte & (0x80 >> col):
                    continue
                px = x + col
                if edge is DrawEdge.WRAP:
                    px %= self.width
                elif not 0 <= px < self.width:
                    continue
                if self.display_buffer[py, px]:
                    collision = True
                self.display_buffer[py, px] ^= 1
        self._dirty = True
        return collision


__all__ = ["Framebuffer"]
