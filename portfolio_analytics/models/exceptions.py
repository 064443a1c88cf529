"""
Custom exception classes for the analytics core.

This module defines domain-specific exceptions that give clear error
semantics for the different failure modes of the analytics engines.

All exceptions carry a descriptive message and optional context data to
aid in debugging and in building caller-facing error responses.
"""


class AnalyticsError(Exception):
    """
    Base class for all analytics errors.

    Attributes:
        message: Human-readable error description.
        context: Optional dictionary with additional error context.
    """

    def __init__(self, message: str, context: dict | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class InputError(AnalyticsError):
    """
    Raised when a request cannot be served with the data supplied.

    This exception is fatal for the request and is surfaced verbatim to the
    caller, for example:
    - Portfolio has no holdings
    - Fewer than two equity/ETF holdings with price history
    - Fewer than 50 price points for a backtest

    Attributes:
        message: Human-readable error description.
        hint: Optional remediation hint for the caller.

    Examples:
        >>> raise InputError(
        ...     "Insufficient price data for AAPL (12 records)",
        ...     hint="Sync price history first",
        ... )
        Traceback (most recent call last):
        ...
        InputError: Insufficient price data for AAPL (12 records). Sync price history first.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        context: dict | None = None,
    ):
        super().__init__(message, context=context)
        self.hint = hint

    def __str__(self) -> str:
        """Return string representation including the remediation hint."""
        text = super().__str__()
        if self.hint:
            return f"{text}. {self.hint}."
        return text


class DataGapError(AnalyticsError):
    """
    Raised when a single ticker lacks enough price history.

    Engines recover from this locally by excluding the ticker from the
    aggregate computation and logging a warning.

    Examples:
        >>> raise DataGapError("Insufficient price history", ticker="XYZ", points=1)
        Traceback (most recent call last):
        ...
        DataGapError: Insufficient price history [ticker: XYZ, points: 1]
    """

    def __init__(self, message: str, ticker: str | None = None, points: int | None = None):
        super().__init__(message)
        self.ticker = ticker
        self.points = points

    def __str__(self) -> str:
        parts = []
        if self.ticker:
            parts.append(f"ticker: {self.ticker}")
        if self.points is not None:
            parts.append(f"points: {self.points}")
        if parts:
            return f"{self.message} [{', '.join(parts)}]"
        return self.message


class AccessError(AnalyticsError):
    """
    Raised by a collaborator when the caller may not read a portfolio.

    The analytics core never raises this itself; it propagates it unchanged
    so the surrounding service can map it to an authorization failure.
    """


class DataIntegrityError(AnalyticsError):
    """
    Raised when price data violates its structural invariants.

    This exception indicates issues with market data quality, such as:
    - Dates that are not strictly increasing
    - Duplicate dates
    - Column arrays of different lengths

    Examples:
        >>> raise DataIntegrityError(
        ...     "Price dates must be strictly increasing",
        ...     context={"ticker": "AAPL", "index": 4}
        ... )
        Traceback (most recent call last):
        ...
        DataIntegrityError: Price dates must be strictly increasing (ticker=AAPL, index=4)
    """
