"""
Trading Engine
--------------
Decision engine for open positions:

    pull-back signal → watchlist ranking → attractiveness gate
        → rotation (execute_trade) or stop-loss (execute_stop_loss)

"Decided not to trade" results are TradeOutcome values; failures to decide
or execute are raised as models.errors exceptions.
"""

import importlib
import logging
import re
import time
from dataclasses import dataclass
from enum import Enum

from data.repositories import HoldingRepository, MarketDataRepository
from exchange.base import Exchange, Ticker
from exchange.errors import wrap_exchange_error
from models.constants import QUOTE_ASSET, OrderType, RiskLevel, TradeSignal
from models.errors import EnduranceError
from models.trade import Holding, TradingPreference
from notifications.messages import trade_message, stop_loss_message
from notifications.notifier import Notifier, LogNotifier
from scoring.opportunity import ScoreService
from trading.config.trading_config import load_trading_config
from trading.ledger import SettlementLedger
from utils.timeutils import utc_now

logger = logging.getLogger(__name__)


class TradeOutcome(str, Enum):
    HOLD = "hold"
    ALREADY_OPTIMAL = "already_optimal"
    NOT_ATTRACTIVE = "not_attractive"
    OPERATE_DISABLED = "operate_disabled"
    ROTATED = "rotated"
    STOPPED_OUT = "stopped_out"


@dataclass
class TradingPosition:
    holding: Holding
    preference: TradingPreference


class TradingService:
    """
    Parameters
    ----------
    exchange : Exchange
        Balances, tickers and conversion quotes.
    notifier : Notifier
        Receives trade / stop-loss messages (LogNotifier by default).
    scores : ScoreService
        Freshness-gated score lookups.
    config : dict
        Trading configuration (see trading.config.trading_config).
    clock : callable
        Returns "now" for freshness checks (utc_now by default).
    """

    def __init__(self, exchange: Exchange, notifier: Notifier = None, scores: ScoreService = None,
                 holdings: HoldingRepository = None, ledger: SettlementLedger = None,
                 config: dict = None, clock=None, session_factory=None):
        self.cfg = config or load_trading_config()
        self.exchange = exchange
        self.notifier = notifier or LogNotifier()
        self.scores = scores or ScoreService(
            MarketDataRepository(session_factory),
            freshness_minutes=self.cfg["market_data"]["freshness_minutes"])
        self.holdings = holdings or HoldingRepository(session_factory)
        self.ledger = ledger or SettlementLedger(session_factory)
        self.clock = clock or utc_now
        self._strategies = {}

    # ------------------------------------------------------
    def _load_strategy_class(self, strategy_name):
        module_name = re.sub(r"(?<!^)(?=[A-Z])", "_", strategy_name).lower()
        module = importlib.import_module(f"strategies.{module_name}")
        return getattr(module, strategy_name)

    def _strategy_for(self, preference):
        name = self.cfg["strategies"][preference.algorithm]
        if name not in self._strategies:
            strategy_cls = self._load_strategy_class(name)
            self._strategies[name] = strategy_cls(
                {"profit_thresholds": self.cfg["risk"]["profit_thresholds"]})
        return self._strategies[name]

    # ------------------------------------------------------
    def _exchange_call(self, method, *args, **kwargs):
        """Call the exchange, mapping unknown client errors into the domain taxonomy."""
        try:
            return method(*args, **kwargs)
        except EnduranceError:
            raise
        except Exception as exc:
            raise wrap_exchange_error(exc) from exc

    # ------------------------------------------------------
    # Positions
    # ------------------------------------------------------
    def get_open_positions_for_symbol(self, symbol: str) -> list:
        """Open holdings of ``symbol`` whose owner has operating enabled."""
        return [TradingPosition(holding, preference)
                for holding, preference in self.holdings.get_open_positions(symbol)]

    # ------------------------------------------------------
    # Decision
    # ------------------------------------------------------
    def pull_back_trade_signal(self, position: TradingPosition) -> TradeSignal:
        holding = position.holding
        current = self.scores.get_symbol_score(holding.symbol, now=self.clock())
        ticker = self._exchange_call(self.exchange.get_ticker, holding.symbol)
        strategy = self._strategy_for(position.preference)
        return strategy.signal(holding, current.score, ticker.price, position.preference.risk_level)

    def is_attractive_symbol(self, position: TradingPosition, point) -> bool:
        """Rank-1 candidate's stored score must exceed the risk-tier gate."""
        if point.score is None:
            return False
        risk = RiskLevel(position.preference.risk_level).value
        gate = self.cfg["risk"]["attractiveness_gates"][risk]
        return point.score > gate

    def pull_back_trade(self, position: TradingPosition) -> TradeOutcome:
        holding, preference = position.holding, position.preference

        signal = self.pull_back_trade_signal(position)
        if signal == TradeSignal.HOLD:
            logger.info("No pull back trade signal. Holding position %s for user %s",
                        holding.id, holding.user_id)
            return TradeOutcome.HOLD

        ranked = self.scores.get_scores(preference.watchlist, now=self.clock())
        if not ranked or ranked[0].symbol == holding.symbol:
            logger.info("%s is the best performing asset in the watchlist", holding.symbol)
            return TradeOutcome.ALREADY_OPTIMAL

        target_symbol = ranked[0].symbol
        target_point = self.scores.get_latest(target_symbol, now=self.clock())
        if not self.is_attractive_symbol(position, target_point):
            logger.info("%s does not meet the %s risk level criteria", target_symbol, preference.risk_level)
            if preference.stop_loss_enabled:
                return self.execute_stop_loss(position)
            return TradeOutcome.NOT_ATTRACTIVE

        return self.execute_trade(position, target_symbol, target_point)

    # ------------------------------------------------------
    # Execution
    # ------------------------------------------------------
    def _convert(self, position: TradingPosition, to_asset: str, to_ticker: Ticker,
                 entry_score: float, trade_type: OrderType):
        """
        Quote → drift check → pending order → accept → settle.
        Nothing is written before the drift check passes.
        """
        holding, preference = position.holding, position.preference
        execution = self.cfg["execution"]

        balance = self._exchange_call(self.exchange.get_balance, holding.asset)
        from_ticker = self._exchange_call(self.exchange.get_ticker, holding.symbol)
        quote = self._exchange_call(
            self.exchange.get_conversion_quote, holding.asset, to_asset, balance.free,
            preference.wallet_type or execution["wallet_type"],
        )
        quote.validate_drift(from_ticker.price * balance.free, to_ticker.price,
                             limit=execution["drift_limit"])

        to_symbol = QUOTE_ASSET if to_asset == QUOTE_ASSET else f"{to_asset}{QUOTE_ASSET}"
        order = self.ledger.open_order(
            holding,
            symbol=to_symbol,
            quantity=quote.to_amount,
            price=quote.to_amount * to_ticker.price,
            trade_type=trade_type,
            quote_id=quote.id,
            exit_price=from_ticker.price,
            entry_price=to_ticker.price,
            entry_score=entry_score,
        )
        try:
            self._exchange_call(self.exchange.accept_conversion_quote, quote.id)
        except EnduranceError:
            self.ledger.cancel(order)
            raise
        order = self.ledger.mark_accepted(order)
        return self.ledger.settle(order)

    def execute_trade(self, position: TradingPosition, to_symbol: str, to_point) -> TradeOutcome:
        """Rotate the whole free balance of the held asset into ``to_symbol``."""
        if not position.preference.operate:
            logger.info("Trading preference of user %s is not active", position.holding.user_id)
            return TradeOutcome.OPERATE_DISABLED

        to_ticker = self._exchange_call(self.exchange.get_ticker, to_symbol)
        to_asset = to_symbol[: -len(QUOTE_ASSET)]
        settlement = self._convert(position, to_asset, to_ticker,
                                   entry_score=to_point.score or 0.0,
                                   trade_type=OrderType.TAKE_PROFIT)

        closed = settlement.closed_holding
        self.notifier.send_message(trade_message(
            closed.symbol, to_symbol, closed.exit_price,
            settlement.profit, settlement.profit_percentage,
        ))
        return TradeOutcome.ROTATED

    def execute_stop_loss(self, position: TradingPosition) -> TradeOutcome:
        """Convert the whole free balance of the held asset into the quote asset."""
        if not position.preference.operate:
            logger.info("Trading preference of user %s is not active", position.holding.user_id)
            return TradeOutcome.OPERATE_DISABLED

        settlement = self._convert(position, QUOTE_ASSET, Ticker(symbol=QUOTE_ASSET, price=1.0),
                                   entry_score=position.holding.entry_score,
                                   trade_type=OrderType.STOP_LOSS)

        closed = settlement.closed_holding
        self.notifier.send_message(stop_loss_message(
            closed.symbol, closed.exit_price, settlement.profit, settlement.profit_percentage,
        ))
        return TradeOutcome.STOPPED_OUT

    # ------------------------------------------------------
    # Recovery / batch
    # ------------------------------------------------------
    def recover_accepted_orders(self) -> list:
        """Settle orders left in ``accepted`` state by an interrupted execution."""
        settlements = []
        for order in self.ledger.accepted_orders():
            logger.warning("Recovering accepted order %s (%s)", order.id, order.symbol)
            settlements.append(self.ledger.settle(order))
        return settlements

    def run_for_symbol(self, symbol: str) -> dict:
        """
        Evaluate every open position of ``symbol``.
        Returns:
            dict[holding_id, TradeOutcome | Exception]
        """
        t0 = time.perf_counter()
        results = {}
        for position in self.get_open_positions_for_symbol(symbol):
            try:
                results[position.holding.id] = self.pull_back_trade(position)
            except EnduranceError as exc:
                logger.error("Decision failed for holding %s: %s", position.holding.id, exc)
                results[position.holding.id] = exc
            except Exception as exc:
                logger.exception("Unexpected failure for holding %s", position.holding.id)
                results[position.holding.id] = exc
        logger.info("Evaluated %d positions of %s in %.3fs",
                    len(results), symbol, time.perf_counter() - t0)
        return results
