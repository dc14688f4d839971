"""
Implements momentum-based indicators:
- RSI (Relative Strength Index)

Each function takes a DataFrame with price columns (default: "close")
and returns a Series aligned with the input index.
"""

import pandas as pd


def rsi(df: pd.DataFrame, column: str = "close", window: int = 14) -> pd.Series:
    """
    Relative Strength Index (RSI), a momentum oscillator.
    RS is the ratio of the mean gain to the mean loss over the trailing window.
    Args:
        df: DataFrame with price data.
        column: Price column name (default: "close").
        window: Lookback period (default: 14).
    Returns:
        Series of RSI values (0 to 100, >70 overbought, <30 oversold).
    Raises:
        ValueError: If column not in df, window <= 0, or df is empty.
    """
    if column not in df:
        raise ValueError(f"Column {column} not found in DataFrame")
    if window <= 0:
        raise ValueError("Window must be positive")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")
    prices = df[column].ffill().bfill()
    if (prices < 0).any():
        raise ValueError("Prices cannot be negative")
    delta = prices.diff().fillna(0)
    gain = delta.clip(lower=0)
    loss = -delta.clip(upper=0)
    avg_gain = gain.rolling(window=window, min_periods=1).mean()
    avg_loss = loss.rolling(window=window, min_periods=1).mean()
    rs = avg_gain / (avg_loss + 1e-10)
    rsi = 100 - (100 / (1 + rs))
    return rsi.clip(lower=0, upper=100)  # Ensure valid range
