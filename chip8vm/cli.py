#!/usr/bin/env python3
"""Headless CHIP-8 runner: execute a ROM for N cycles and dump the screen."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from typing import List, Optional, Tuple

from .config import VARIANTS, DrawEdge, MachineConfig, TimerMode
from .display import framebuffer_to_ascii, save_png
from .errors import EmulationError
from .interpreter import Interpreter

logger = logging.getLogger(__name__)


def parse_keys(value: str) -> Tuple[int, ...]:
    """Parse a string of hex digits such as ``"5F"`` into key indices."""
    try:
        return tuple(int(digit, 16) for digit in value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"keys must be hex digits 0-F, got '{value}'"
        ) from None


def build_config(args: argparse.Namespace) -> MachineConfig:
    if args.config:
        config = MachineConfig.load(args.config)
    else:
        config = MachineConfig.for_variant(args.variant)
    config = config.load_env_overrides()

    if args.seed is not None:
        config.seed = args.seed
    if args.trace:
        config.trace = True
    if args.per_cycle_timers:
        config.timer_mode = TimerMode.PER_CYCLE
    if args.shift_uses_vy:
        config = config.with_quirks(shift_uses_vy=True)
    if args.wrap:
        config = config.with_quirks(draw_edge=DrawEdge.WRAP)
    return config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="CHIP-8 interpreter (headless)")
    parser.add_argument("rom", type=str, help="Program image to load at 0x200")
    parser.add_argument(
        "--cycles", type=int, default=5000, help="Number of instructions to execute"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for RND")
    parser.add_argument(
        "--variant",
        choices=VARIANTS,
        default="chip8",
        help="Quirk preset (ignored when --config is given)",
    )
    parser.add_argument("--config", type=str, help="Machine configuration JSON")
    parser.add_argument(
        "--shift-uses-vy", action="store_true", help="8XY6/8XYE shift VY into VX"
    )
    parser.add_argument(
        "--wrap", action="store_true", help="Wrap sprites at the screen edges"
    )
    parser.add_argument(
        "--per-cycle-timers",
        action="store_true",
        help="Decrement timers once per instruction instead of at 60 Hz",
    )
    parser.add_argument(
        "--keys",
        type=parse_keys,
        default=(),
        help="Hex keys held down for the whole run, e.g. '5F'",
    )
    parser.add_argument("--save-png", type=str, help="Write the final screen as PNG")
    parser.add_argument("--zoom", type=int, default=8, help="PNG scale factor")
    parser.add_argument(
        "--ascii", action="store_true", help="Print the final screen as text"
    )
    parser.add_argument("--trace", action="store_true", help="Log every instruction")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if (args.verbose or args.trace) else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = build_config(args)
    interp = Interpreter(config)
    try:
        interp.load_file(args.rom)
    except OSError as exc:
        logger.error("Cannot read %s: %s", args.rom, exc)
        return 2
    except EmulationError as exc:
        logger.error("%s", exc)
        return 2

    for key in args.keys:
        interp.keypad.press(key)

    start = time.perf_counter()
    status = 0
    try:
        interp.run(args.cycles)
    except EmulationError as exc:
        print(f"Emulation error: {exc}", file=sys.stderr)
        status = 1
    elapsed = time.perf_counter() - start

    ips = interp.cycle_count / elapsed if elapsed > 0 else 0.0
    print(
        f"cycles={interp.cycle_count} pc=0x{interp.regs.pc:03X} "
        f"lit={interp.framebuffer.lit_pixels()} elapsed={elapsed:.3f}s ips={ips:,.0f}"
    )
    if args.ascii:
        print(framebuffer_to_ascii(interp.framebuffer))
    if args.save_png:
        path = save_png(interp.framebuffer, args.save_png, zoom=args.zoom)
        print(f"Saved {path}")
    return status


if __name__ == "__main__":
    sys.exit(main())
