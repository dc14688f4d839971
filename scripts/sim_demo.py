# python -m scripts.sim_demo
"""
Run synthetic candles for a small watchlist through the whole pipeline
(gate → indicators → score → decision) on an in-memory database and a
paper exchange.
"""

from datetime import timedelta

import numpy as np
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.db_config import Base
from config.logging_config import setup_logging
from config.settings import settings
from exchange.paper import PaperExchange
from ingestion import init_ingestion_pipeline
from ingestion.events import MarketDataPushedEvent
from models.trade import TradingPreference, Holding
from notifications.notifier import LogNotifier
from data.repositories import MarketDataRepository, TradingPreferenceRepository, HoldingRepository
from scoring.opportunity import ScoreService
from trading.config.trading_config import load_trading_config
from trading.engine import TradingService
from utils.timeutils import utc_now

N_CANDLES = 260
WATCHLIST = {"BTCUSDT": (60000.0, -0.0004), "ETHUSDT": (3000.0, 0.0008), "SOLUSDT": (150.0, 0.0)}


def synthetic_events(symbol, start_price, drift, end, seed=37):
    rng = np.random.default_rng(seed)
    price = start_price
    for i in range(N_CANDLES):
        ts = end - timedelta(minutes=N_CANDLES - 1 - i)
        open_ = price
        price = price * (1 + drift + rng.normal(0, 0.002))
        high = max(open_, price) * (1 + abs(rng.normal(0, 0.001)))
        low = min(open_, price) * (1 - abs(rng.normal(0, 0.001)))
        yield MarketDataPushedEvent(
            symbol=symbol, data_timestamp=ts, open=open_, high=high, low=low,
            close=price, volume=float(rng.uniform(200, 2000)), candle_close=True,
        )


def main():
    setup_logging("WARNING")
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    cfg = load_trading_config()

    # --- Ingest ---
    end = utc_now().replace(second=0, microsecond=0)
    consumer, bus = init_ingestion_pipeline(session_factory=session_factory, market_data_cfg=cfg["market_data"])
    last_prices = {}
    for symbol, (start_price, drift) in WATCHLIST.items():
        for event in synthetic_events(symbol, start_price, drift, end):
            bus.publish(settings.MARKET_DATA_SUBJECT, event)
            last_prices[symbol] = event.close
        bus.drain()

    print(f"Published {len(bus.messages(settings.MARKET_DATA_SUBJECT))} messages, "
          f"{len(bus.messages(bus.dlq_subject))} dead-lettered (windows below 200 candles)")

    scores = ScoreService(MarketDataRepository(session_factory), cfg["market_data"]["freshness_minutes"])
    for item in scores.get_scores(list(WATCHLIST), now=end):
        print(f"  #{item.rank} {item.symbol:<8} {item.score:6.2f}")

    # --- Position ---
    btc_score = scores.get_symbol_score("BTCUSDT", now=end).score
    TradingPreferenceRepository(session_factory).create(TradingPreference(
        user_id="demo-user", watchlist=list(WATCHLIST), operate=True,
        stop_loss_enabled=True, risk_level="high",
    ))
    entry_price = last_prices["BTCUSDT"] * 0.8
    HoldingRepository(session_factory).create(Holding(
        user_id="demo-user", symbol="BTCUSDT", quantity=0.1,
        entry_price=entry_price, entry_score=btc_score + 10,
    ))

    exchange = PaperExchange(balances={"BTC": 0.1}, prices=last_prices, slippage=0.0, fee_rate=0.0)
    notifier = LogNotifier()
    service = TradingService(exchange, notifier=notifier, scores=scores, config=cfg,
                             clock=lambda: end, session_factory=session_factory)

    # --- Decide ---
    for holding_id, outcome in service.run_for_symbol("BTCUSDT").items():
        print(f"Holding {holding_id}: {outcome.value if hasattr(outcome, 'value') else outcome}")
    for message in notifier.sent:
        print(message)
    print(exchange.trades_df())


if __name__ == "__main__":
    main()
