"""Signed 64-bit machine words."""

from __future__ import annotations

WORD_BITS = 64
MASK64 = (1 << WORD_BITS) - 1
SIGN64 = 1 << (WORD_BITS - 1)
WORD_MIN = -SIGN64
WORD_MAX = SIGN64 - 1


def u64(v: int) -> int:
    """Mask to unsigned 64 bits."""
    return v & MASK64


def s64(v: int) -> int:
    """Wrap ``v`` to a signed 64-bit value (two's complement)."""
    v = u64(v)
    return v - (1 << WORD_BITS) if v >= SIGN64 else v


def in_word_range(v: int) -> bool:
    return WORD_MIN <= v <= WORD_MAX


__all__ = ["MASK64", "SIGN64", "WORD_BITS", "WORD_MAX", "WORD_MIN", "in_word_range", "s64", "u64"]
