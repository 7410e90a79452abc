"""
Exception hierarchy for the analytics engine.

Failures are either a clean neutral numeric result (handled inside the
calculators) or one of these exceptions propagated to the caller.

Classes:
    AnalyticsError: Base for all analytics errors
    DataUnavailableError: Market data fetch failed or timed out (retryable)
    CacheStoreError: Cache read or write failed
"""

from typing import Optional


class AnalyticsError(Exception):
    """Base exception for analytics errors."""

    pass


class DataUnavailableError(AnalyticsError):
    """
    Raised when the market data provider cannot deliver data.

    The failure is transient from the caller's point of view: the same
    request may succeed if retried. Analytics components never retry.

    Attributes:
        market_id: Market whose fetch failed, if known.
        message: Error message describing what went wrong.
        cause: Original exception that caused the error, if any.
        retryable: Always True.
    """

    retryable = True

    def __init__(
        self,
        market_id: Optional[str],
        message: str,
        cause: Optional[BaseException] = None,
    ):
        self.market_id = market_id
        self.message = message
        self.cause = cause
        super().__init__(f"{message} (market_id={market_id})" if market_id else message)


class CacheStoreError(AnalyticsError):
    """Raised when a cache store operation fails."""

    pass
