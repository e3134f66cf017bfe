"""Bit sequence wrappers shared by the built-in plugins."""

from itertools import islice
from typing import Any, Dict, Iterable, Iterator


class CountingBits:
    """Pass bits through unchanged while counting how many were consumed."""

    def __init__(self, bits: Iterable[bool]):
        self._it = iter(bits)
        self.count = 0

    def __iter__(self) -> Iterator[bool]:
        return self

    def __next__(self) -> bool:
        v = next(self._it)
        self.count += 1
        return v


def limit_bits(bits: Iterable[bool], params: Dict[str, Any]) -> Iterable[bool]:
    """Apply the optional ``max_bits`` parameter."""
    max_bits = params.get("max_bits")
    if max_bits is None:
        return bits
    max_bits = int(max_bits)
    if max_bits < 0:
        raise ValueError("max_bits must be >= 0")
    return islice(bits, max_bits)
