"""
Opportunity scoring.

    from scoring import calculate_opportunity_score, ScoreService
"""

from .components import (
    macd_score, rsi_score, sma_score, bollinger_score,
    volume_score, trend_score, volatility_score,
)
from .opportunity import WEIGHTS, SymbolScore, ScoreService, calculate_opportunity_score, rank_scores

__all__ = [
    "macd_score", "rsi_score", "sma_score", "bollinger_score",
    "volume_score", "trend_score", "volatility_score",
    "WEIGHTS", "SymbolScore", "ScoreService", "calculate_opportunity_score", "rank_scores",
]
