"""
Unified import interface for all indicator categories.

You can import indicators either from a specific category:
    from features.indicators.trend import sma, ema, macd
or directly from this package:
    from features.indicators import sma, ema, macd, rsi, atr, obv

Each submodule implements a family of indicators:
- trend.py          → SMA, EMA, MACD, ADX (+DI / -DI)
- volatility.py     → True Range, ATR, Bollinger Bands
- momentum.py       → RSI
- volume.py         → OBV
"""

# --- Trend-based indicators ---
from .trend import sma, ema, macd, adx

# --- Volatility-based indicators ---
from .volatility import true_range, atr, bollinger_bands

# --- Momentum-based indicators ---
from .momentum import rsi

# --- Volume-based indicators ---
from .volume import obv

__all__ = [
    # Trend
    "sma", "ema", "macd", "adx",
    # Volatility
    "true_range", "atr", "bollinger_bands",
    # Momentum
    "rsi",
    # Volume
    "obv",
]
