"""
Implements volatility-based indicators:
- ATR (Average True Range, Wilder smoothing)
- Bollinger Bands (Upper, Middle, Lower, Width)

Each function takes a DataFrame with price columns (default: "close")
and returns a Series or DataFrame aligned with the input index.
"""

import pandas as pd


def true_range(df: pd.DataFrame) -> pd.Series:
    """True Range = max(high - low, |high - prev close|, |low - prev close|)."""
    high = df["high"].ffill().bfill()
    low = df["low"].ffill().bfill()
    close = df["close"].ffill().bfill()
    return pd.concat([
        high - low,
        (high - close.shift()).abs(),
        (low - close.shift()).abs()
    ], axis=1).max(axis=1).fillna(0)  # Handle shift-induced NaN


def atr(df: pd.DataFrame, window: int = 14) -> pd.Series:
    """
    Average True Range (ATR) for price volatility.
    Args:
        df: DataFrame with 'high', 'low', 'close' columns.
        window: Lookback period (default: 14), alpha = 1 / window.
    Returns:
        Series of ATR values (non-negative).
    Raises:
        ValueError: If required columns missing, window <= 0, or df is empty.
    """
    required_cols = ["high", "low", "close"]
    if not all(col in df for col in required_cols):
        raise ValueError(f"DataFrame must contain {required_cols}")
    if window <= 0:
        raise ValueError("Window must be positive")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")
    if (df[required_cols] < 0).any().any():
        raise ValueError("Prices cannot be negative")
    if (df["low"] > df["high"]).any():
        raise ValueError("Low prices cannot exceed high prices")
    return true_range(df).ewm(alpha=1.0 / window, adjust=False).mean()


def bollinger_bands(df: pd.DataFrame,
                    column: str = "close",
                    window: int = 20,
                    num_std: float = 2.0) -> pd.DataFrame:
    """
    Bollinger Bands for volatility and reversal signals.
    Args:
        df: DataFrame with price data.
        column: Price column name (default: "close").
        window: Lookback period (default: 20).
        num_std: Number of standard deviations (default: 2.0).
    Returns:
        DataFrame with 'Upper', 'Middle', 'Lower' bands and 'Width' (Upper - Lower).
    Raises:
        ValueError: If column not in df, window <= 0, num_std < 0, or df is empty.
    """
    if column not in df:
        raise ValueError(f"Column {column} not found in DataFrame")
    if window <= 0:
        raise ValueError("Window must be positive")
    if num_std < 0:
        raise ValueError("num_std cannot be negative")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")
    prices = df[column].ffill().bfill()
    if (prices < 0).any():
        raise ValueError("Prices cannot be negative")
    ma = prices.rolling(window=window, min_periods=1).mean()
    std = prices.rolling(window=window, min_periods=1).std(ddof=0).fillna(0)
    upper = ma + num_std * std
    lower = ma - num_std * std
    return pd.DataFrame({
        "Upper": upper,
        "Middle": ma,
        "Lower": lower,
        "Width": upper - lower,
    })
