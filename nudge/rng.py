"""
A seedable pseudorandom number generator for mutation sessions.

`Rng` is a thin wrapper over `random.Random` that exposes only the draws the
mutators need. Identical seeds and identical call sequences always produce
identical outputs. Not cryptographically secure.
"""

from __future__ import annotations

import itertools
import random
import struct
from typing import Sequence, TypeVar

T = TypeVar("T")

MAX_UNICODE = 0x10FFFF
SURROGATE_START = 0xD800
SURROGATE_END = 0xDFFF
_SURROGATE_COUNT = SURROGATE_END - SURROGATE_START + 1

# Unseeded generators take consecutive seeds so that default sessions differ
# from one another but a whole process run is still reproducible.
_default_seeds = itertools.count()


def to_f32(x: float) -> float:
    """Round a Python float to the nearest IEEE 754 single-precision value."""
    return struct.unpack("<f", struct.pack("<f", x))[0]


class Rng:
    """A pseudorandom number generator."""

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = next(_default_seeds)
        self.seed = seed
        self._random = random.Random(seed)

    def __repr__(self) -> str:
        return f"Rng(seed={self.seed!r})"

    def index(self, length: int) -> int | None:
        """Return a uniform index in `[0, length)`, or None if `length` is 0."""
        if length <= 0:
            return None
        return self._random.randrange(length)

    def choose(self, items: Sequence[T]) -> T | None:
        """Return a uniformly chosen element, or None for an empty sequence."""
        i = self.index(len(items))
        if i is None:
            return None
        return items[i]

    def int_in_range(self, lo: int, hi: int) -> int:
        """Return a uniform integer in the inclusive range `[lo, hi]`."""
        if lo > hi:
            raise ValueError(f"empty range: {lo} > {hi}")
        return lo + self._random.randrange(hi - lo + 1)

    def unsigned(self, bits: int) -> int:
        return self._random.getrandbits(bits)

    def signed(self, bits: int) -> int:
        raw = self._random.getrandbits(bits)
        if raw >= 1 << (bits - 1):
            raw -= 1 << bits
        return raw

    def u8(self) -> int:
        return self.unsigned(8)

    def u16(self) -> int:
        return self.unsigned(16)

    def u32(self) -> int:
        return self.unsigned(32)

    def u64(self) -> int:
        return self.unsigned(64)

    def u128(self) -> int:
        return self.unsigned(128)

    def i8(self) -> int:
        return self.signed(8)

    def i16(self) -> int:
        return self.signed(16)

    def i32(self) -> int:
        return self.signed(32)

    def i64(self) -> int:
        return self.signed(64)

    def i128(self) -> int:
        return self.signed(128)

    def boolean(self) -> bool:
        return self._random.getrandbits(1) == 1

    def unit_float(self) -> float:
        """Return a uniform double in `[0, 1)`."""
        return self._random.random()

    def f32_unit(self) -> float:
        """Return a uniform single-precision value in `[0, 1)`."""
        return self._random.getrandbits(24) / float(1 << 24)

    def randbytes(self, n: int) -> bytes:
        return self._random.randbytes(n)

    def fill_bytes(self, buf: bytearray | memoryview) -> None:
        """Overwrite every byte of `buf` with random data."""
        buf[:] = self._random.randbytes(len(buf))

    def char(self) -> str:
        """Return a uniformly chosen Unicode scalar value."""
        return self.char_in_range("\0", chr(MAX_UNICODE))

    def char_in_range(self, lo: str, hi: str) -> str:
        """Return a uniform scalar value in `[lo, hi]`, skipping surrogates."""
        start, end = ord(lo), ord(hi)
        if start > end:
            raise ValueError(f"empty range: {lo!r} > {hi!r}")
        overlap = max(0, min(end, SURROGATE_END) - max(start, SURROGATE_START) + 1)
        span = end - start + 1 - overlap
        if span <= 0:
            raise ValueError(f"range {lo!r}..={hi!r} holds only surrogates")
        code = start + self._random.randrange(span)
        if overlap and code >= SURROGATE_START:
            code += overlap
        return chr(code)
