"""Pillow and text renderings of a framebuffer snapshot.

These are debugging aids for headless runs; window presentation belongs to
the host.
"""

from __future__ import annotations

from pathlib import Path
from typing import Tuple

import numpy as np
from PIL import Image

from .framebuffer import Framebuffer

Color = Tuple[int, int, int]


def framebuffer_to_image(
    framebuffer: Framebuffer,
    zoom: int = 1,
    on_color: Color = (255, 255, 255),
    off_color: Color = (0, 0, 0),
) -> Image.Image:
    """Get the framebuffer as an RGB PIL image scaled by ``zoom``."""
    if zoom < 1:
        raise ValueError(f"Zoom must be >= 1, got {zoom}")

    grid = framebuffer.get_display_buffer().astype(bool)
    rgb = np.empty(grid.shape + (3,), dtype=np.uint8)
    rgb[grid] = on_color
    rgb[~grid] = off_color
    if zoom > 1:
        rgb = rgb.repeat(zoom, axis=0).repeat(zoom, axis=1)
    return Image.fromarray(rgb)


def save_png(framebuffer: Framebuffer, path: str | Path, zoom: int = 8) -> Path:
    target = Path(path)
    framebuffer_to_image(framebuffer, zoom=zoom).save(target)
    return target


def framebuffer_to_ascii(
    framebuffer: Framebuffer, on: str = "#", off: str = "."
) -> str:
    grid = framebuffer.get_display_buffer()
    return "\n".join("".join(on if cell else off for cell in row) for row in grid)


__all__ = ["framebuffer_to_ascii", "framebuffer_to_image", "save_png"]
