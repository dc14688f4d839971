import pytest

from scoring.components import (
    macd_score, rsi_score, sma_score, bollinger_score,
    volume_score, trend_score, volatility_score,
)


# ============================================================
# MACD
# ============================================================

def test_macd_score_bullish_strong():
    # crossover 30 + histogram 20 + strength 25
    assert macd_score(0.8, 0.5, 0.3) == pytest.approx(0.75)


def test_macd_score_bearish_weak():
    # 10 + 0 + 0
    assert macd_score(0.1, 0.2, -0.1) == pytest.approx(0.10)


def test_macd_score_small_histogram_earns_nothing():
    # 30 + 0 (0 < hist < 0.1) + 15
    assert macd_score(0.3, 0.25, 0.05) == pytest.approx(0.45)


# ============================================================
# RSI
# ============================================================

@pytest.mark.parametrize("r6, r12, r24, expected", [
    (25, 30, 35, 0.60),   # strong oversold 50 + short below long 10
    (80, 70, 65, 0.30),   # strong overbought 0 + 30
    (35, 40, 50, 0.35),   # mild oversold 25 + 10
    (65, 58, 50, 0.40),   # mild overbought 10 + 30
    (50, 50, 50, 0.40),   # neutral 20 + mixed 20
])
def test_rsi_score_bands(r6, r12, r24, expected):
    assert rsi_score(r6, r12, r24) == pytest.approx(expected)


# ============================================================
# SMA
# ============================================================

def test_sma_score_above_all_golden_cross():
    # 40 + 30 + distance: (5 + 10 + 20) / 3 / 105 ≈ 0.111 → 20
    assert sma_score(105, 100, 95, 85) == pytest.approx(0.90)


def test_sma_score_below_all_death_cross_close_to_means():
    # 5 + 10 + distance ≈ 0.01 → 5
    assert sma_score(99, 99.5, 100, 100.5) == pytest.approx(0.20)


def test_sma_score_zero_close():
    assert 0 <= sma_score(0, 1, 2, 3) <= 1


# ============================================================
# Bollinger
# ============================================================

def test_bollinger_score_near_lower_band_with_squeeze():
    # position 0.1 → 40; width/close 0.01 → 10; squeeze 20
    assert bollinger_score(100.1, 101, 100, 1.0) == pytest.approx(0.70)


def test_bollinger_score_middle_wide():
    # position 0.5 → 25; width/close 0.2 → 30
    assert bollinger_score(100, 110, 90, 20) == pytest.approx(0.55)


def test_bollinger_score_degenerate_range():
    # no position points; width 0 → 10 + squeeze 20
    assert bollinger_score(100, 100, 100, 0) == pytest.approx(0.30)


# ============================================================
# Volume / trend / volatility
# ============================================================

def test_volume_score_tiers():
    assert volume_score(5000, 1500) == pytest.approx(0.75)
    assert volume_score(-5000, 600) == pytest.approx(0.45)
    assert volume_score(0, 10) == pytest.approx(0.35)


def test_trend_score_tiers():
    assert trend_score(30, 30, 10) == pytest.approx(0.90)
    assert trend_score(22, 20, 14) == pytest.approx(0.70)
    assert trend_score(10, 10, 12) == pytest.approx(0.30)


def test_volatility_score_tiers():
    assert volatility_score(5, 100) == pytest.approx(0.80)
    assert volatility_score(2.6, 100) == pytest.approx(0.65)
    assert volatility_score(0.5, 100) == pytest.approx(0.40)


@pytest.mark.parametrize("fn, args", [
    (macd_score, (99.0, -99.0, 99.0)),
    (rsi_score, (99.0, 99.0, 99.0)),
    (trend_score, (99.0, 99.0, 0.0)),
    (volatility_score, (99.0, 1.0)),
    (bollinger_score, (0.0, 1e9, 0.0, 1e9)),
])
def test_sub_scores_stay_in_unit_interval(fn, args):
    assert 0.0 <= fn(*args) <= 1.0
