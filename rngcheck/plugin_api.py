"""Plugin API definitions for rngcheck."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional
import logging
import math

from .errors import BadPValue, InsufficientSampleSize


@dataclass
class TestResult:
    """Test result container.

    Observability fields:
      - time_ms: duration of the test execution in milliseconds (float or None)
      - bits_processed: number of bits the test consumed (int or None)
    """
    __test__ = False
    test_name: str
    passed: bool
    p_value: Optional[float]
    category: str = "statistical"
    flags: List[str] = field(default_factory=list)
    metrics: Dict[str, Any] = field(default_factory=dict)
    evidence: Optional[str] = None

    # Observability fields
    time_ms: Optional[float] = None
    bits_processed: Optional[int] = None

    def __post_init__(self):
        # Allow None for p_value (no usable p-value), otherwise enforce [0.0, 1.0]
        if self.p_value is not None:
            if not (0.0 <= self.p_value <= 1.0):
                raise ValueError("p_value must be between 0 and 1 or None")
        if self.time_ms is not None:
            try:
                self.time_ms = float(self.time_ms)
            except (TypeError, ValueError):
                raise ValueError("time_ms must be a number (milliseconds) or None")
        if self.bits_processed is not None:
            try:
                self.bits_processed = int(self.bits_processed)
            except (TypeError, ValueError):
                raise ValueError("bits_processed must be an integer or None")


def serialize_testresult(result: TestResult) -> Dict[str, Any]:
    """Serialize a TestResult into a JSON-compatible dict."""
    return {
        "test_name": result.test_name,
        "passed": result.passed,
        "p_value": result.p_value,
        "category": result.category,
        "flags": result.flags or [],
        "metrics": dict(result.metrics or {}),
        "evidence": result.evidence,
        "time_ms": result.time_ms,
        "bits_processed": result.bits_processed,
    }


def failed_result(test_name: str, err: BadPValue, metrics: Dict[str, Any]) -> TestResult:
    """Build the TestResult for a test whose p-value was rejected."""
    p = err.p_value
    flags: List[str] = []
    if math.isnan(p):
        flags.append("nan_p_value")
        p = None
    return TestResult(
        test_name=test_name,
        passed=False,
        p_value=p,
        flags=flags,
        metrics=metrics,
        evidence=str(err),
        bits_processed=metrics.get("total_bits"),
    )


class TestPlugin(ABC):
    """Base class for statistical test plugins."""

    __test__ = False
    # Replaced by the engine with a per-plugin logger on registration
    logger = logging.getLogger("rngcheck.plugins")

    @abstractmethod
    def describe(self) -> str:
        """Return plugin description."""
        pass

    @abstractmethod
    def run(self, bits: Iterable[bool], params: Dict[str, Any]) -> TestResult:
        """Run statistical test over a bit sequence."""
        pass

    def safe_run(self, bits: Iterable[bool], params: Dict[str, Any]):
        """Execute the test and convert exceptions into a structured dict.

        Returns:
            TestResult when the test completes, or
            dict {"status": "skipped", "reason": ...} when the sample is too small, or
            dict {"status": "error", "reason": ...} for any other exception.
        """
        try:
            return self.run(bits, params)
        except InsufficientSampleSize as e:
            return {"status": "skipped", "reason": str(e), "total_bits": e.n}
        except Exception as e:
            return {"status": "error", "reason": str(e)}
