"""Seeded shuffling that is stable across processes and platforms."""
from __future__ import annotations

import zlib
from random import Random
from typing import MutableSequence, TypeVar

T_co = TypeVar("T_co")


def stable_seed(key: str, salt: int = 0) -> int:
    """Return a seed derived from ``key`` that is identical across processes."""
    return (zlib.crc32(key.encode("utf-8")) * 31 + salt) & 0xFFFFFFFF


class RNG:
    """Wrapper around random.Random seeded from string keys."""

    def __init__(self, seed: int) -> None:
        self._random = Random(seed)

    @classmethod
    def for_key(cls, key: str, salt: int = 0) -> "RNG":
        """Build an RNG seeded from a string key, e.g. an area id plus reset counter."""
        return cls(stable_seed(key, salt))

    def shuffle(self, seq: MutableSequence[T_co]) -> None:
        """Shuffle the sequence in-place."""
        self._random.shuffle(seq)
