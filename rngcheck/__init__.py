"""rngcheck - runtime randomness checks for random number generators.

A subset of the NIST SP 800-22 tests (Frequency / Monobit and Frequency
within a Block) over lazy bit sequences.
"""

__version__ = "0.1.0"

# Expose a package-level logger; the Engine attaches handlers when run with
# a `log_path`. Core test functions never log.
import logging
logger = logging.getLogger("rngcheck")
# Provide a NullHandler by default to avoid "No handler found" warnings if not configured.
logger.addHandler(logging.NullHandler())

from .errors import BadPValue, InsufficientSampleSize, RngCheckError, RngFailed
from .helpers import BitIter, RngBitIter
from .nist import nist_freq_block, nist_freq_monobit, nist_igamma
from .special import igamma
from .sources import OsRandom, RandomSource, SeededRandom, fetch_sample
from .engine import Engine

__all__ = [
    "BadPValue",
    "BitIter",
    "Engine",
    "InsufficientSampleSize",
    "OsRandom",
    "RandomSource",
    "RngBitIter",
    "RngCheckError",
    "RngFailed",
    "SeededRandom",
    "fetch_sample",
    "igamma",
    "nist_freq_block",
    "nist_freq_monobit",
    "nist_igamma",
]
