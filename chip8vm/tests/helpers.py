"""Program assembly and clock helpers shared by the test modules."""

from __future__ import annotations

from typing import Iterable


def assemble(words: Iterable[int]) -> bytes:
    """Pack 16-bit opcodes big-endian into a program image."""
    return b"".join((word & 0xFFFF).to_bytes(2, "big") for word in words)


class FakeClock:
    """Manually advanced replacement for ``time.perf_counter``."""

    def __init__(self, start: float = 0.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds
