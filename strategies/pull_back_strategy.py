# strategies/pull_back_strategy.py
import logging

from models.constants import RiskLevel, TradeSignal
from strategies.base_strategy import BaseStrategy

logger = logging.getLogger(__name__)

# Minimum unrealised profit (%) before a deteriorating position is released
DEFAULT_PROFIT_THRESHOLDS = {
    RiskLevel.LOW.value: 5.0,
    RiskLevel.MEDIUM.value: 10.0,
    RiskLevel.HIGH.value: 13.0,
}


class PullBackStrategy(BaseStrategy):
    """
    Pull-back exit rule:
      • score has not deteriorated since entry  → HOLD
      • score deteriorated, profit above tier   → SELL
      • otherwise                               → HOLD
    """

    def __init__(self, config: dict = None):
        super().__init__(config)
        self.thresholds = dict(DEFAULT_PROFIT_THRESHOLDS)
        self.thresholds.update(self.config.get("profit_thresholds", {}))

    def signal(self, holding, current_score: float, price: float, risk_level) -> TradeSignal:
        if current_score >= holding.entry_score:
            return TradeSignal.HOLD

        risk = RiskLevel(risk_level).value
        profit_pct = self.profit_percentage(holding, price)
        threshold = self.thresholds[risk]
        logger.debug("%s score %.2f < entry %.2f, profit %.2f%% vs %s threshold %.2f%%",
                     holding.symbol, current_score, holding.entry_score, profit_pct, risk, threshold)

        if profit_pct > threshold:
            return TradeSignal.SELL
        return TradeSignal.HOLD
