# exchange/errors.py
import logging

from models.errors import (
    EnduranceError, InsufficientBalanceError, QuoteExpiredError,
    ExchangeUnavailableError, ValidationError,
)

logger = logging.getLogger(__name__)

# Substring of the upstream message -> domain error
_KNOWN_ERRORS = (
    ("insufficient balance", InsufficientBalanceError),
    ("expired", QuoteExpiredError),
    ("invalid symbol", ValidationError),
    ("invalid amount", ValidationError),
)


def wrap_exchange_error(exc: Exception) -> EnduranceError:
    """
    Map an exchange client exception into the domain error taxonomy.
    Domain errors pass through unchanged; unrecognized failures become
    ExchangeUnavailableError.
    """
    if isinstance(exc, EnduranceError):
        return exc
    message = str(exc).lower()
    for needle, error_cls in _KNOWN_ERRORS:
        if needle in message:
            return error_cls(str(exc))
    logger.error("Unrecognized exchange error: %s", exc)
    return ExchangeUnavailableError(str(exc))
