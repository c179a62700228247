"""Display subsystem for the CHIP-8 interpreter."""

from .framebuffer import Framebuffer
from .image import framebuffer_to_ascii, framebuffer_to_image, save_png

__all__ = [
    "Framebuffer",
    "framebuffer_to_ascii",
    "framebuffer_to_image",
    "save_png",
]
