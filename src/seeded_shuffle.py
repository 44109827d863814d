"""Seeded permutation used to give generated sessions varied titles.

The order must be reproducible on every rerun and reload without being
stored anywhere, so the generator is seeded from a 32-bit FNV-1a hash of a
string built from the payment and its schedule.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Sequence, TypeVar

from .timeutils import iso_z

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619
# Replaces a zero hash; xorshift never leaves the all-zero state.
FALLBACK_SEED = 123456789


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a hash over the code points of ``text``."""
    h = FNV_OFFSET_BASIS
    for ch in text:
        h ^= ord(ch)
        h = (h * FNV_PRIME) & _MASK32
    return h


class XorShift32:
    """xorshift32 generator yielding floats in ``[0, 1)``."""

    def __init__(self, seed: int) -> None:
        self.state = (seed & _MASK32) or FALLBACK_SEED

    def next_float(self) -> float:
        x = self.state
        x ^= (x << 13) & _MASK32
        x ^= x >> 17
        x ^= (x << 5) & _MASK32
        self.state = x
        return x / 4294967296


def seeded_permutation(items: Sequence[T], seed: str) -> List[T]:
    """Return a Fisher-Yates shuffle of ``items`` driven by ``seed``.

    The input sequence is left untouched.
    """
    shuffled = list(items)
    rng = XorShift32(fnv1a_32(seed))
    for i in range(len(shuffled) - 1, 0, -1):
        j = int(rng.next_float() * (i + 1))
        shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
    return shuffled


def schedule_seed(payment_id: str, start: datetime, program_id: str, level: str) -> str:
    return f"{payment_id}-{iso_z(start)}-{program_id}-{level}"


__all__ = [
    "FALLBACK_SEED",
    "fnv1a_32",
    "XorShift32",
    "seeded_permutation",
    "schedule_seed",
]
