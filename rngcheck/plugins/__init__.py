"""Built-in test plugins."""

from .block_frequency import BlockFrequencyTest
from .monobit import MonobitTest

__all__ = ["BlockFrequencyTest", "MonobitTest"]
