"""Block Frequency test plugin (NIST SP 800-22 Frequency Test within a Block)."""

from typing import Iterable

from ..errors import BadPValue
from ..nist import block_frequency_p_value, block_frequency_statistic, check_p_value
from ..plugin_api import TestPlugin, TestResult, failed_result
from .counting import CountingBits, limit_bits

DEFAULT_BLOCK_SIZE = 128


class BlockFrequencyTest(TestPlugin):
    """Block Frequency test.

    Splits the bit sequence into blocks of ``block_size`` bits, measures the
    proportion of ones in each and converts the chi-square statistic into a
    p-value with the incomplete gamma function. A trailing partial block is
    discarded.
    """

    def describe(self) -> str:
        return "Frequency Test within a Block (NIST SP 800-22)"

    def run(self, bits: Iterable[bool], params: dict) -> TestResult:
        # Validated by block_frequency_statistic; non-integral sizes are rejected
        block_size = params.get("block_size", DEFAULT_BLOCK_SIZE)

        counted = CountingBits(limit_bits(bits, params))
        num_blocks, chi_square = block_frequency_statistic(counted, block_size)
        metrics = {
            "total_bits": counted.count,
            "block_size": int(block_size),
            "block_count": num_blocks,
            "discarded_bits": counted.count - num_blocks * int(block_size),
            "chi_square": chi_square,
        }

        try:
            p = check_p_value(block_frequency_p_value(num_blocks, chi_square))
        except BadPValue as e:
            self.logger.debug("block_frequency rejected: p=%r blocks=%d", e.p_value, num_blocks)
            return failed_result("block_frequency", e, metrics)

        return TestResult(
            test_name="block_frequency",
            passed=True,
            p_value=p,
            metrics=metrics,
            bits_processed=counted.count,
        )
