import pandas as pd
import numpy as np
import pytest
from features.indicators.trend import sma, ema, macd, adx


def test_sma_exact():
    """SMA should match the manual rolling mean calculation."""
    df = pd.DataFrame({"close": [1, 2, 3, 4, 5]})
    result = sma(df, "close", window=3).round(3).tolist()
    expected = [1.0, 1.5, 2.0, 3.0, 4.0]
    assert result == expected, f"Expected {expected}, got {result}"


def test_ema_exact():
    """EMA(3) should match the known recursive formula."""
    df = pd.DataFrame({"close": [1, 2, 3, 4, 5]})
    # α = 2/(3+1) = 0.5
    # EMA = [1.0, 1.5, 2.25, 3.125, 4.0625]
    result = ema(df, "close", span=3).round(4).tolist()
    expected = [1.0, 1.5, 2.25, 3.125, 4.0625]
    np.testing.assert_allclose(result, expected, rtol=1e-4)


def test_macd_structure_and_range():
    """MACD output must include MACD, Signal, and Histogram columns."""
    df = pd.DataFrame({"close": np.linspace(1, 10, 20)})
    macd_df = macd(df, short_span=3, long_span=6, signal_span=3)

    assert set(["MACD", "Signal", "Histogram"]).issubset(macd_df.columns), \
        "MACD output missing expected columns"
    assert macd_df["MACD"].notna().all(), "MACD contains NaN values"
    np.testing.assert_allclose(macd_df["Histogram"], macd_df["MACD"] - macd_df["Signal"])


def test_macd_positive_in_uptrend():
    """Short EMA leads the long EMA in a rising market."""
    df = pd.DataFrame({"close": np.linspace(100, 200, 60)})
    assert macd(df).iloc[-1]["MACD"] > 0


def test_adx_range():
    """ADX, +DI and -DI values should always lie between 0 and 100."""
    rng = np.random.default_rng(7)
    close = 100 + rng.normal(0, 1, 80).cumsum()
    df = pd.DataFrame({
        "high": close + rng.uniform(0.1, 1.0, 80),
        "low": close - rng.uniform(0.1, 1.0, 80),
        "close": close,
    })
    for smoothed in (False, True):
        result = adx(df, window=14, smoothed=smoothed)
        assert ((result >= 0) & (result <= 100)).all().all(), "ADX out of valid [0, 100] range"


def test_adx_uptrend_direction():
    """+DI dominates -DI when highs keep rising and lows never fall."""
    df = pd.DataFrame({
        "high": np.arange(11, 41, dtype=float),
        "low": np.arange(9, 39, dtype=float),
        "close": np.arange(10, 40, dtype=float),
    })
    last = adx(df, window=14).iloc[-1]
    assert last["+DI"] > last["-DI"]
    assert last["-DI"] == 0.0
    # Only upward movement: DX is 100
    assert last["ADX"] == pytest.approx(100.0)


def test_adx_first_bar_is_zero():
    df = pd.DataFrame({"high": [10, 11, 12], "low": [9, 10, 11], "close": [9.5, 10.5, 11.5]})
    assert adx(df, window=2).iloc[0].tolist() == [0.0, 0.0, 0.0]


def test_adx_rejects_inverted_bars():
    df = pd.DataFrame({"high": [10, 11], "low": [12, 10], "close": [11, 10.5]})
    with pytest.raises(ValueError):
        adx(df)


def test_sma_rejects_bad_input():
    with pytest.raises(ValueError):
        sma(pd.DataFrame({"open": [1, 2]}), "close", window=2)
    with pytest.raises(ValueError):
        sma(pd.DataFrame({"close": [1, 2]}), "close", window=0)
    with pytest.raises(ValueError):
        sma(pd.DataFrame({"close": [1, -2]}), "close", window=2)
