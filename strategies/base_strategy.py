# strategies/base_strategy.py
import abc

from models.constants import RiskLevel, TradeSignal


class BaseStrategy(abc.ABC):
    """
    Abstract base class for position-exit strategies.
    ------------------------------------------------
    A strategy looks at one open holding, its current opportunity score and
    the live ticker price, and decides whether the position should be left
    alone or released for rotation.
    """

    def __init__(self, config: dict = None):
        self.config = config or {}

    # --------------------------------------------------
    # Utility: unrealised profit of a holding
    # --------------------------------------------------
    @staticmethod
    def profit_percentage(holding, price: float) -> float:
        """
        Unrealised profit as a percentage of the position's current value.
        Returns 0.0 when the position has no value.
        """
        current_value = price * holding.quantity
        if current_value == 0:
            return 0.0
        profit = (price - holding.entry_price) * holding.quantity
        return profit / current_value * 100

    @abc.abstractmethod
    def signal(self, holding, current_score: float, price: float, risk_level: RiskLevel) -> TradeSignal:
        """
        Parameters
        ----------
        holding : Holding
            The open position under evaluation.
        current_score : float
            Latest opportunity score of the held symbol.
        price : float
            Current ticker price of the held symbol.
        risk_level : RiskLevel
            Risk tier of the position owner.

        Returns
        -------
        TradeSignal
            HOLD or SELL.
        """
        raise NotImplementedError("Subclasses must implement signal()")
