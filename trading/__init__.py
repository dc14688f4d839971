# trading/__init__.py
import logging

from data.repositories import MarketDataRepository
from exchange.paper import PaperExchange
from notifications.notifier import build_notifier
from scoring.opportunity import ScoreService
from trading.config.trading_config import load_trading_config
from trading.engine import TradingService, TradeOutcome, TradingPosition

logger = logging.getLogger(__name__)


def init_trading_environment(config_path=None, exchange=None, session_factory=None):
    """
    Initialize the exchange and TradingService from configuration file.
    Without an explicit exchange a PaperExchange is built from the
    ``paper_exchange`` section.
    Returns: (service, exchange, cfg)
    """
    cfg = load_trading_config(config_path)

    # --- init exchange ---
    if exchange is None:
        px_cfg = cfg["paper_exchange"]
        exchange = PaperExchange(
            fee_type=px_cfg.get("fee_type", "rate"),
            fee_rate=px_cfg.get("fee_rate", 0.001),
            fixed_fee=px_cfg.get("fixed_fee", 0.0),
            slippage=px_cfg.get("slippage", 0.0005),
            quote_valid_seconds=px_cfg.get("quote_valid_seconds", 10),
        )

    # --- init service ---
    scores = ScoreService(MarketDataRepository(session_factory),
                          freshness_minutes=cfg["market_data"]["freshness_minutes"])
    service = TradingService(
        exchange,
        notifier=build_notifier(),
        scores=scores,
        config=cfg,
        session_factory=session_factory,
    )

    logger.info("Trading environment initialized: exchange=%s, drift limit=%.2f%%",
                type(exchange).__name__, cfg["execution"]["drift_limit"] * 100)
    return service, exchange, cfg


__all__ = ["TradingService", "TradeOutcome", "TradingPosition", "init_trading_environment"]
