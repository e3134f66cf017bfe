"""NIST SP 800-22 frequency tests.

Both tests consume any iterable of bits in a single pass; see
:class:`rngcheck.helpers.BitIter` for use with buffers and
:class:`rngcheck.helpers.RngBitIter` for use with a live source.
"""

import math
import numbers
from itertools import islice
from typing import Iterable, Tuple

from .errors import BadPValue, InsufficientSampleSize
from .special import igamma

P_VALUE_THRESHOLD = 0.01
MONOBIT_MIN_BITS = 100


def check_p_value(p: float) -> float:
    # Inverted comparison so that NaN is rejected
    if not (p >= P_VALUE_THRESHOLD):
        raise BadPValue(p)
    return p


def nist_freq_monobit(data: Iterable[bool]) -> float:
    """Frequency (Monobit) test over an iterable of N bits.

    Raises InsufficientSampleSize when fewer than 100 bits are supplied and
    BadPValue when the p-value is below 0.01.
    """
    v = 0
    n = 0

    # Sum 0/1 as -1/+1
    for d in data:
        n += 1
        if d:
            v += 1
        else:
            v -= 1

    if n < MONOBIT_MIN_BITS:
        raise InsufficientSampleSize(n)

    s = abs(v) / math.sqrt(n)
    p = math.erfc(s / math.sqrt(2.0))

    return check_p_value(p)


def block_frequency_statistic(data: Iterable[bool], block_len: int) -> Tuple[int, float]:
    """Return ``(num_blocks, chi_square)`` for the block frequency test.

    The sequence is cut into ``block_len``-bit blocks; a trailing partial
    block is discarded.
    """
    if not isinstance(block_len, numbers.Integral) or block_len <= 0:
        raise ValueError("block_len must be a positive integer")
    block_len = int(block_len)

    it = iter(data)
    num_blocks = 0
    x2_partial = 0.0

    while True:
        block_n = 0
        block_v = 0
        for bit in islice(it, block_len):
            block_n += 1
            if bit:
                block_v += 1

        if block_n < block_len:
            break

        block_p = block_v / block_len - 0.5
        x2_partial += block_p ** 2
        num_blocks += 1

    return num_blocks, 4.0 * block_len * x2_partial


def block_frequency_p_value(num_blocks: int, x2: float) -> float:
    """Convert the block chi-square statistic into a p-value."""
    return 1.0 - nist_igamma(num_blocks / 2.0, x2 / 2.0)


def nist_freq_block(data: Iterable[bool], block_len: int) -> float:
    """Frequency Test within a Block over an iterable of bits.

    Raises ValueError for a block length that is not a positive integer and
    BadPValue when the p-value is below 0.01.
    """
    num_blocks, x2 = block_frequency_statistic(data, block_len)
    return check_p_value(block_frequency_p_value(num_blocks, x2))



def nist_igamma(a: float, x: float) -> float:
    """Regularized lower incomplete gamma P(a, x) used by the block test."""
    return igamma(a, x)
