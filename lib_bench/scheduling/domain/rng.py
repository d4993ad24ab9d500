"""Seeded pseudo-random source for reproducible scheduling.

The generator is mulberry32 over 32-bit state, so a seed reproduces the same
sequence on every platform and across runs.
"""

from collections.abc import Callable

type RandomSource = Callable[[], float]

_MASK_32 = 0xFFFFFFFF
_INCREMENT = 0x6D2B79F5
_TWO_POW_32 = 4294967296


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK_32


def seeded_random(seed: int) -> RandomSource:
    """Return an independent generator of floats in [0, 1) for the given seed."""
    state = seed & _MASK_32

    def next_float() -> float:
        nonlocal state
        state = (state + _INCREMENT) & _MASK_32
        t = _imul(state ^ (state >> 15), 1 | state)
        t = ((t + _imul(t ^ (t >> 7), 61 | t)) & _MASK_32) ^ t
        return ((t ^ (t >> 14)) & _MASK_32) / _TWO_POW_32

    return next_float
