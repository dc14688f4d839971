from .base import Exchange, Ticker, Balance, ConversionQuote, ConversionOrder
from .paper import PaperExchange
from .errors import wrap_exchange_error

__all__ = [
    "Exchange", "Ticker", "Balance", "ConversionQuote", "ConversionOrder",
    "PaperExchange", "wrap_exchange_error",
]
