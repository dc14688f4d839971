from datetime import timedelta

import pytest

from data.repositories import MarketDataRepository
from models.errors import InsufficientDataError, StaleDataError
from models.market_data import CandlePoint
from scoring.opportunity import (
    WEIGHTS, ScoreService, SymbolScore, calculate_opportunity_score, component_scores, rank_scores,
)
from utils.timeutils import utc_now


def _point(**fields):
    base = dict(correlation_id="c", symbol="BTCUSDT", timestamp=utc_now(),
                open=100, high=101, low=99, close=100, volume=1500)
    base.update(fields)
    return CandlePoint(**base)


# ============================================================
# 1️⃣ Composite score
# ============================================================

def test_weights_sum_to_one():
    assert sum(WEIGHTS.values()) == pytest.approx(1.0)


def test_no_indicators_scores_zero():
    point = calculate_opportunity_score(_point())
    assert point.score == 0.0


def test_missing_sub_scores_are_omitted():
    """Only the volume sub-score is available: the composite equals it."""
    point = _point(obv=5000.0, volume=1500)
    calculate_opportunity_score(point)
    assert list(component_scores(point)) == ["volume"]
    assert point.score == pytest.approx(75.0)


def test_weighted_mean_of_two_sub_scores():
    point = _point(obv=5000.0, atr=5.0)   # volume 0.75, volatility 0.80, both weight 0.10
    calculate_opportunity_score(point)
    assert point.score == pytest.approx(77.5)


def test_extreme_inputs_are_clamped():
    point = _point(
        macd=99.0, macd_signal=-99.0, macd_hist=99.0,
        rsi6=99.0, rsi12=99.0, rsi24=99.0,
        sma20=1.0, sma50=1.0, sma200=1.0,
        bollinger_bands=1.0, bollinger_bands_upper=1e6, bollinger_bands_lower=-1e6,
        bollinger_bands_width=2e6,
        obv=1e12, adx=99.0, adx_positive=99.0, adx_negative=0.0, atr=1e6,
    )
    calculate_opportunity_score(point)
    assert 0.0 <= point.score <= 100.0


# ============================================================
# 2️⃣ Ranking
# ============================================================

def test_rank_scores_descending_and_stable():
    scores = [SymbolScore("AUSDT", 50), SymbolScore("BUSDT", 80),
              SymbolScore("CUSDT", 50), SymbolScore("DUSDT", 90)]
    ranked = rank_scores(scores)
    assert [s.symbol for s in ranked] == ["DUSDT", "BUSDT", "AUSDT", "CUSDT"]
    assert [s.rank for s in ranked] == [1, 2, 3, 4]


# ============================================================
# 3️⃣ Freshness-gated lookups
# ============================================================

@pytest.fixture
def service(session_factory):
    return ScoreService(MarketDataRepository(session_factory))


def _store(session_factory, symbol, ts, score):
    repo = MarketDataRepository(session_factory)
    return repo.create(_point(symbol=symbol, timestamp=ts, score=score, correlation_id=f"{symbol}-{ts}"))


def test_get_symbol_score_fresh(service, session_factory):
    now = utc_now()
    _store(session_factory, "BTCUSDT", now - timedelta(seconds=30), 62.5)
    result = service.get_symbol_score("BTCUSDT", now=now)
    assert result.symbol == "BTCUSDT"
    assert result.score == 62.5


def test_get_symbol_score_stale(service, session_factory):
    now = utc_now()
    _store(session_factory, "BTCUSDT", now - timedelta(minutes=5), 62.5)
    with pytest.raises(StaleDataError):
        service.get_symbol_score("BTCUSDT", now=now)


def test_get_symbol_score_missing(service):
    with pytest.raises(InsufficientDataError):
        service.get_symbol_score("BTCUSDT")


def test_get_symbol_score_unscored(service, session_factory):
    now = utc_now()
    _store(session_factory, "BTCUSDT", now, None)
    with pytest.raises(InsufficientDataError):
        service.get_symbol_score("BTCUSDT", now=now)


def test_get_scores_ranks_watchlist(service, session_factory):
    now = utc_now()
    for symbol, score in [("BTCUSDT", 40.0), ("ETHUSDT", 70.0), ("SOLUSDT", 55.0)]:
        _store(session_factory, symbol, now, score)

    ranked = service.get_scores(["BTCUSDT", "ETHUSDT", "SOLUSDT"], now=now)

    assert [(s.symbol, s.rank) for s in ranked] == [("ETHUSDT", 1), ("SOLUSDT", 2), ("BTCUSDT", 3)]
    assert all(a.score > b.score for a, b in zip(ranked, ranked[1:]))


def test_get_scores_fails_on_any_stale_symbol(service, session_factory):
    now = utc_now()
    _store(session_factory, "BTCUSDT", now, 40.0)
    _store(session_factory, "ETHUSDT", now - timedelta(minutes=10), 70.0)
    with pytest.raises(StaleDataError):
        service.get_scores(["BTCUSDT", "ETHUSDT"], now=now)
