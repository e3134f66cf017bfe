"""Bit-wise iteration helpers.

Both iterators yield ``bool`` values least-significant bit first and can be
passed anywhere the tests in :mod:`rngcheck.nist` expect a bit sequence.
"""

from typing import Iterator, Union

Buffer = Union[bytes, bytearray, memoryview]


class BitIter:
    """Iterate over the bits of a byte buffer, bit 0 of each byte first.

    The buffer is wrapped in a ``memoryview`` and never copied or modified, so
    building a second ``BitIter`` over the same buffer replays the same bits.
    """

    def __init__(self, buff: Buffer):
        self._view = memoryview(buff).cast("B")
        self._i = 0
        self._j = 0

    def __iter__(self) -> Iterator[bool]:
        return self

    def __next__(self) -> bool:
        if self._i >= len(self._view):
            raise StopIteration

        v = bool(self._view[self._i] & (1 << self._j))

        if self._j < 7:
            self._j += 1
        else:
            self._i += 1
            self._j = 0

        return v

    def __length_hint__(self) -> int:
        return max(0, (len(self._view) - self._i) * 8 - self._j)


class RngBitIter:
    """Iterate over ``count`` bits drawn from a 32-bit random source.

    ``rng`` is any object with a ``next_u32()`` method. One word is buffered at
    a time and a new word is requested only when a bit is about to be yielded
    and none remain, so exactly ``ceil(count / 32)`` words are consumed.
    """

    def __init__(self, rng, count: int):
        if count < 0:
            raise ValueError("count must be >= 0")
        self._rng = rng
        self._remaining = int(count)
        self._word = 0
        self._bits = 0

    def __iter__(self) -> Iterator[bool]:
        return self

    def __next__(self) -> bool:
        if self._remaining == 0:
            raise StopIteration

        if self._bits == 0:
            self._word = int(self._rng.next_u32()) & 0xFFFFFFFF
            self._bits = 32

        v = bool(self._word & 1)
        self._word >>= 1
        self._bits -= 1
        self._remaining -= 1
        return v

    def __length_hint__(self) -> int:
        return self._remaining
