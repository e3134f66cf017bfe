"""Monobit test plugin."""

from typing import Iterable

from ..errors import BadPValue
from ..nist import nist_freq_monobit
from ..plugin_api import TestPlugin, TestResult, failed_result
from .counting import CountingBits, limit_bits


class MonobitTest(TestPlugin):
    """NIST SP 800-22 Frequency (Monobit) test plugin."""

    def describe(self) -> str:
        return "Frequency (Monobit) test (NIST SP 800-22)"

    def run(self, bits: Iterable[bool], params: dict) -> TestResult:
        counted = CountingBits(limit_bits(bits, params))
        try:
            p = nist_freq_monobit(counted)
        except BadPValue as e:
            self.logger.debug("monobit rejected: p=%r n=%d", e.p_value, counted.count)
            return failed_result("monobit", e, {"total_bits": counted.count})

        return TestResult(
            test_name="monobit",
            passed=True,
            p_value=p,
            metrics={"total_bits": counted.count},
            bits_processed=counted.count,
        )
