"""Random sources the tests can draw bits from."""

import os
from abc import ABC, abstractmethod
from typing import Optional

import numpy as np

from .errors import RngFailed


class RandomSource(ABC):
    """A source of 32-bit random words."""

    @abstractmethod
    def next_u32(self) -> int:
        """Return the next 32-bit unsigned value."""
        pass

    def fill_bytes(self, buf: bytearray) -> None:
        """Fill ``buf`` in place, four bytes per word, little-endian."""
        view = memoryview(buf).cast("B")
        for i in range(0, len(view), 4):
            chunk = self.next_u32().to_bytes(4, "little")
            n = min(4, len(view) - i)
            view[i:i + n] = chunk[:n]


class OsRandom(RandomSource):
    """Operating system entropy via ``os.urandom``."""

    def _urandom(self, n: int) -> bytes:
        try:
            return os.urandom(n)
        except NotImplementedError as e:
            raise RngFailed(f"no OS randomness source: {e}") from e

    def next_u32(self) -> int:
        return int.from_bytes(self._urandom(4), "little")

    def fill_bytes(self, buf: bytearray) -> None:
        view = memoryview(buf).cast("B")
        view[:] = self._urandom(len(view))


class SeededRandom(RandomSource):
    """Deterministic source backed by a numpy ``Generator``."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._gen = np.random.default_rng(seed)

    def next_u32(self) -> int:
        return int(self._gen.integers(0, 0xFFFFFFFF, endpoint=True, dtype=np.uint32))

    def fill_bytes(self, buf: bytearray) -> None:
        view = memoryview(buf).cast("B")
        view[:] = self._gen.bytes(len(view))


def fetch_sample(rng: RandomSource, n_bytes: int = 100) -> bytes:
    """Fetch ``n_bytes`` random bytes, checking the source actually wrote them.

    The buffer starts out as 0xFF; if both the first two and the last two bytes
    are still 0xFF after the fill the source is assumed to have no-op'ed.
    """
    if n_bytes < 4:
        raise ValueError("n_bytes must be >= 4")
    buf = bytearray(b"\xff" * n_bytes)
    rng.fill_bytes(buf)

    if buf[:2] == b"\xff\xff" and buf[-2:] == b"\xff\xff":
        raise RngFailed("RNG seems to have no-op'ed")

    return bytes(buf)
