"""Error taxonomy shared by the rngcheck tests."""


class RngCheckError(Exception):
    """Base class for all rngcheck test failures."""


class RngFailed(RngCheckError):
    """The random source could not produce output."""

    def __init__(self, reason: str = "RNG failed"):
        super().__init__(reason)
        self.reason = reason


class InsufficientSampleSize(RngCheckError):
    """Too few bits were available for the statistic to be meaningful."""

    def __init__(self, n: int):
        super().__init__(f"insufficient sample size: {n} bits")
        self.n = n


class BadPValue(RngCheckError):
    """The computed p-value is below the pass threshold (or NaN)."""

    def __init__(self, p_value: float):
        super().__init__(f"p-value {p_value!r} outside required bounds")
        self.p_value = p_value
