"""Shared architecture constants for the CHIP-8 interpreter.

This module centralizes the fixed machine dimensions used across the
interpreter, the display helpers and tests.
"""

# Total addressable memory: 4 KiB of byte-addressable RAM.
RAM_SIZE = 4096

# The interpreter historically occupied 0x000-0x1FF; programs are loaded
# and start executing at 0x200.
PROGRAM_START = 0x200
MAX_PROGRAM_SIZE = RAM_SIZE - PROGRAM_START  # 3584 bytes

# Built-in hexadecimal glyph table.
FONT_START = 0x50
GLYPH_COUNT = 16
GLYPH_HEIGHT = 5
FONT_SET_SIZE = GLYPH_COUNT * GLYPH_HEIGHT

NUM_REGISTERS = 16
FLAG_REGISTER = 0xF
STACK_LEVELS = 16
NUM_KEYS = 16

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8

# Timers count down at 60 Hz regardless of instruction throughput.
TIMER_HZ = 60

# Each row is one byte; only the high four bits are drawn.
FONT_SET = bytes(
    [
        0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
        0x20, 0x60, 0x20, 0x20, 0x70,  # 1
        0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
        0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
        0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
        0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
        0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
        0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
        0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
        0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
        0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
        0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
        0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
        0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
        0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
        0xF0, 0x80, 0xF0, 0x80, 0x80,  # F
    ]
)
