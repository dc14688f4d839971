"""
Domain error taxonomy.

Validation and precondition failures are raised to the caller (for event
driven paths the consumer naks the message and routes it to the DLQ).
"Decided not to trade" outcomes are never errors, see trading.engine.TradeOutcome.
"""


class EnduranceError(Exception):
    """Base class for all domain errors."""


class ValidationError(EnduranceError, ValueError):
    """Bad symbol, timestamp, OHLCV value or entity field."""


class InsufficientDataError(EnduranceError):
    """Not enough points to compute an indicator family (or no data at all)."""

    def __init__(self, family: str = None, required: int = None, available: int = None):
        self.family = family
        self.required = required
        self.available = available
        if family:
            msg = f"insufficient data for {family} calculation: requires {required} points, got {available}"
        else:
            msg = "insufficient market data"
        super().__init__(msg)


class StaleDataError(EnduranceError):
    """Latest market data point is older than the freshness window."""


class NotFoundError(EnduranceError, LookupError):
    """No holding, preference, order or candle matched."""


class ConversionDriftExceeded(EnduranceError):
    """Quoted conversion deviates from ticker-implied value beyond the limit."""

    def __init__(self, drift: float, limit: float):
        self.drift = drift
        self.limit = limit
        super().__init__(f"conversion drift {drift:.4%} exceeds limit {limit:.2%}")


class QuoteExpiredError(EnduranceError):
    """Conversion quote is no longer valid."""


class InsufficientBalanceError(EnduranceError):
    """Exchange reports insufficient balance for the operation."""


class ExchangeUnavailableError(EnduranceError):
    """Any other exchange failure."""
