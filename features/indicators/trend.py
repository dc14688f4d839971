"""
Implements trend-based indicators:
- SMA (Simple Moving Average)
- EMA (Exponential Moving Average)
- MACD (Moving Average Convergence Divergence)
- ADX (Average Directional Index, with +DI / -DI)

Each function takes a DataFrame with price columns (default: "close")
and returns a Series or DataFrame aligned with the input index.
"""

import pandas as pd
import numpy as np


def _check_frame(df: pd.DataFrame, columns, window: int = 1):
    if not all(col in df for col in columns):
        raise ValueError(f"DataFrame must contain {list(columns)}")
    if window <= 0:
        raise ValueError("Window must be positive")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")


def sma(df: pd.DataFrame, column: str = "close", window: int = 20) -> pd.Series:
    """
    Simple Moving Average (SMA) for trend identification.
    Args:
        df: DataFrame with price data.
        column: Price column name (default: "close").
        window: Lookback period (default: 20).
    Returns:
        Series of SMA values.
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
    return prices.rolling(window=window, min_periods=1).mean()


def ema(df: pd.DataFrame, column: str = "close", span: int = 20) -> pd.Series:
    """
    Exponential Moving Average (EMA) seeded with the first value.
    Args:
        df: DataFrame with price data.
        column: Price column name (default: "close").
        span: Smoothing period (default: 20), alpha = 2 / (span + 1).
    Returns:
        Series of EMA values.
    Raises:
        ValueError: If column not in df, span <= 0, or df is empty.
    """
    if column not in df:
        raise ValueError(f"Column {column} not found in DataFrame")
    if span <= 0:
        raise ValueError("Span must be positive")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")
    prices = df[column].ffill().bfill()
    if (prices < 0).any():
        raise ValueError("Prices cannot be negative")
    return prices.ewm(span=span, adjust=False).mean()


def macd(df: pd.DataFrame,
         column: str = "close",
         short_span: int = 12,
         long_span: int = 26,
         signal_span: int = 9) -> pd.DataFrame:
    """
    Moving Average Convergence Divergence (MACD) for trend signals.
    Args:
        df: DataFrame with price data.
        column: Price column name (default: "close").
        short_span: Short EMA period (default: 12).
        long_span: Long EMA period (default: 26).
        signal_span: Signal line period (default: 9).
    Returns:
        DataFrame with 'MACD', 'Signal', and 'Histogram' columns.
    Raises:
        ValueError: If column not in df, spans <= 0, or df is empty.
    """
    if column not in df:
        raise ValueError(f"Column {column} not found in DataFrame")
    if short_span <= 0 or long_span <= 0 or signal_span <= 0:
        raise ValueError("Spans must be positive")
    if df.empty:
        raise ValueError("DataFrame cannot be empty")
    prices = df[column].ffill().bfill()
    if (prices < 0).any():
        raise ValueError("Prices cannot be negative")
    ema_short = prices.ewm(span=short_span, adjust=False).mean()
    ema_long = prices.ewm(span=long_span, adjust=False).mean()
    macd_line = ema_short - ema_long
    signal_line = macd_line.ewm(span=signal_span, adjust=False).mean()
    histogram = macd_line - signal_line
    return pd.DataFrame({
        "MACD": macd_line,
        "Signal": signal_line,
        "Histogram": histogram
    })


def adx(df: pd.DataFrame, window: int = 14, smoothed: bool = False) -> pd.DataFrame:
    """
    Average Directional Index (ADX) with directional indicators.

    True Range and directional moves are computed from the second bar on,
    each series is smoothed with an EMA(window) seeded with its first value,
    and DX = |+DI - -DI| / (+DI + -DI) * 100.

    Args:
        df: DataFrame with 'high', 'low', 'close' columns.
        window: Smoothing period (default: 14).
        smoothed: If False (default) ADX is the raw DX of each bar;
            if True ADX is the rolling mean of DX over ``window`` bars.
    Returns:
        DataFrame with 'ADX', '+DI' and '-DI' columns (0 to 100).
        The first bar has no previous close and is reported as 0.
    Raises:
        ValueError: If required columns missing, window <= 0, or df is empty.
    """
    _check_frame(df, ["high", "low", "close"], window)
    high = df["high"].ffill().bfill()
    low = df["low"].ffill().bfill()
    close = df["close"].ffill().bfill()
    if (high < 0).any() or (low < 0).any() or (close < 0).any():
        raise ValueError("Prices cannot be negative")
    if (low > high).any():
        raise ValueError("Low prices cannot exceed high prices")

    up_move = high.diff()
    down_move = -low.diff()
    plus_dm = pd.Series(np.where((up_move > down_move) & (up_move > 0), up_move, 0.0), index=df.index)
    minus_dm = pd.Series(np.where((down_move > up_move) & (down_move > 0), down_move, 0.0), index=df.index)
    tr = pd.concat([
        high - low,
        (high - close.shift()).abs(),
        (low - close.shift()).abs()
    ], axis=1).max(axis=1)

    # Bar 0 has no predecessor: smoothing starts at bar 1
    atr_s = tr.iloc[1:].ewm(span=window, adjust=False).mean()
    plus_s = plus_dm.iloc[1:].ewm(span=window, adjust=False).mean()
    minus_s = minus_dm.iloc[1:].ewm(span=window, adjust=False).mean()

    with np.errstate(divide="ignore", invalid="ignore"):
        plus_di = (100 * plus_s / atr_s).replace([np.inf, -np.inf], np.nan).fillna(0.0)
        minus_di = (100 * minus_s / atr_s).replace([np.inf, -np.inf], np.nan).fillna(0.0)
        dx = (100 * (plus_di - minus_di).abs() / (plus_di + minus_di)).replace([np.inf, -np.inf], np.nan).fillna(0.0)

    adx_line = dx.rolling(window=window, min_periods=1).mean() if smoothed else dx
    result = pd.DataFrame({
        "ADX": adx_line,
        "+DI": plus_di,
        "-DI": minus_di,
    }).reindex(df.index).fillna(0.0)
    return result.clip(lower=0, upper=100)
