"""
Opportunity score
-----------------
Weighted reduction of the sub-scores into a single 0-100 value, plus the
freshness-gated lookups and cross-symbol ranking used by the decision engine.
"""

import logging
from dataclasses import dataclass

from data.repositories import MarketDataRepository
from models.errors import InsufficientDataError, StaleDataError
from scoring.components import (
    macd_score, rsi_score, sma_score, bollinger_score,
    volume_score, trend_score, volatility_score,
)
from utils.timeutils import is_older_than

logger = logging.getLogger(__name__)

WEIGHTS = {
    "macd": 0.20,
    "rsi": 0.15,
    "sma": 0.20,
    "bollinger": 0.15,
    "volume": 0.10,
    "trend": 0.10,
    "volatility": 0.10,
}

DEFAULT_FRESHNESS_MINUTES = 2


@dataclass
class SymbolScore:
    symbol: str
    score: float
    rank: int = 0


def _present(*values) -> bool:
    return all(v is not None for v in values)


def component_scores(point) -> dict:
    """Sub-scores whose inputs are present on ``point``; missing ones are omitted."""
    scores = {}
    if _present(point.macd, point.macd_signal, point.macd_hist):
        scores["macd"] = macd_score(point.macd, point.macd_signal, point.macd_hist)
    if _present(point.rsi6, point.rsi12, point.rsi24):
        scores["rsi"] = rsi_score(point.rsi6, point.rsi12, point.rsi24)
    if _present(point.sma20, point.sma50, point.sma200):
        scores["sma"] = sma_score(point.close, point.sma20, point.sma50, point.sma200)
    if _present(point.bollinger_bands_upper, point.bollinger_bands_lower, point.bollinger_bands_width):
        scores["bollinger"] = bollinger_score(point.close, point.bollinger_bands_upper,
                                              point.bollinger_bands_lower, point.bollinger_bands_width)
    if _present(point.obv):
        scores["volume"] = volume_score(point.obv, point.volume)
    if _present(point.adx, point.adx_positive, point.adx_negative):
        scores["trend"] = trend_score(point.adx, point.adx_positive, point.adx_negative)
    if _present(point.atr):
        scores["volatility"] = volatility_score(point.atr, point.close)
    return scores


def calculate_opportunity_score(point):
    """
    Set ``point.score`` to the weighted mean of the available sub-scores,
    scaled to 0-100 and clamped. Returns the same point.
    """
    scores = component_scores(point)
    total_weight = sum(WEIGHTS[name] for name in scores)
    score = 0.0
    if total_weight > 0:
        score = sum(value * WEIGHTS[name] for name, value in scores.items()) / total_weight * 100
    point.score = min(max(score, 0.0), 100.0)
    return point


def rank_scores(scores: list) -> list:
    """Sort descending by score (stable, input order breaks ties) and assign ranks 1..N."""
    ranked = sorted(scores, key=lambda s: s.score, reverse=True)
    for i, item in enumerate(ranked, start=1):
        item.rank = i
    return ranked


class ScoreService:
    """Freshness-gated score lookups over persisted market data."""

    def __init__(self, market_data: MarketDataRepository = None,
                 freshness_minutes: int = DEFAULT_FRESHNESS_MINUTES):
        self.market_data = market_data or MarketDataRepository()
        self.freshness_minutes = freshness_minutes

    def get_latest(self, symbol: str, now=None):
        """Latest point of ``symbol``; it must be no older than the freshness window."""
        point = self.market_data.get_latest(symbol)
        if point is None:
            raise InsufficientDataError()
        if is_older_than(point.timestamp, self.freshness_minutes, now=now):
            raise StaleDataError(f"market data for {symbol} too old: {point.timestamp}")
        return point

    def get_symbol_score(self, symbol: str, now=None) -> SymbolScore:
        point = self.get_latest(symbol, now=now)
        if point.score is None:
            raise InsufficientDataError()
        return SymbolScore(symbol=symbol, score=point.score)

    def get_scores(self, symbols: list, now=None) -> list:
        """
        Ranked scores for a watchlist. Any failing lookup fails the whole ranking.
        """
        scores = [self.get_symbol_score(symbol, now=now) for symbol in symbols]
        ranked = rank_scores(scores)
        logger.debug("Ranked scores: %s", [(s.symbol, round(s.score, 2), s.rank) for s in ranked])
        return ranked
