"""
Implements volume-based indicators:
- OBV (On-Balance Volume)

Takes a DataFrame with 'close' and 'volume' columns and returns a Series
aligned with the input index.
"""

import pandas as pd
import numpy as np


def obv(df: pd.DataFrame) -> pd.Series:
    """
    On-Balance Volume (OBV) for trend confirmation.
    Args:
        df: DataFrame with 'close' and 'volume' columns.
    Returns:
        Series of cumulative OBV values.
    Raises:
        ValueError: If required columns missing or df is empty.
    """
    required_cols = ["close", "volume"]
    if not all(col in df for col in required_cols):
        raise ValueError(f"DataFrame must contain {required_cols}")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")
    close = df["close"].ffill().bfill()
    volume = df["volume"].ffill().bfill()
    if (close < 0).any():
        raise ValueError("Close prices cannot be negative")
    if (volume < 0).any():
        raise ValueError("Volume cannot be negative")
    direction = np.sign(close.diff().fillna(0))
    return (direction * volume).cumsum()
