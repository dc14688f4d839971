"""
Global pytest configuration.
- Automatically loads environment variables from .env.dev (or user-specified file).
- Points the application at an in-memory SQLite database unless DATABASE_URL is set.
- Silences SQLAlchemy logging to keep test output clean.
- Provides shared fixtures: isolated session factory, candle and event builders.
Example:
    pytest -v
    pytest -v --env=prod
"""

import os

# config.db_config builds its engine at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")

import logging
from datetime import datetime, timedelta

import pytest
import pytz
from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.db_config import Base
from ingestion.events import MarketDataPushedEvent
from models.market_data import CandlePoint, ProcessedEvent  # noqa: F401
from models.trade import TradingPreference, Holding, Order  # noqa: F401


def pytest_addoption(parser):
    """
    Add a custom command-line option to select environment file.
    Example:
        pytest --env=prod
    """
    parser.addoption(
        "--env",
        action="store",
        default="dev",
        help="Select environment configuration: dev / test / prod",
    )


@pytest.fixture(scope="session", autouse=True)
def setup_environment(request):
    """
    Automatically load environment variables before all tests.
    Also silences SQLAlchemy logs globally.
    """
    # ---- Determine environment file ----
    env_name = request.config.getoption("--env")
    env_file = f".env.{env_name}"
    env_path = os.path.join(os.getcwd(), env_file)

    if os.path.exists(env_path):
        load_dotenv(env_path)

    # ---- Silence noisy loggers ----
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.dialects").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.ERROR)

    yield


# ============================================================
# Database
# ============================================================

@pytest.fixture
def session_factory():
    """Fresh in-memory SQLite schema per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


# ============================================================
# Builders
# ============================================================

START = datetime(2025, 1, 1, tzinfo=pytz.UTC)


@pytest.fixture
def make_candles():
    """
    Build minute-spaced CandlePoints with strictly rising closes (for step > 0).
    Closes carry a small periodic wiggle and lows alternate, so both
    directional movements occur.
        make_candles(250, symbol="BTCUSDT", start_price=100.0, step=1.0)
    """
    def _make(n, symbol="BTCUSDT", start_price=100.0, step=1.0, start=START, volume=1500.0):
        points = []
        for i in range(n):
            close = start_price + step * i + 0.3 * step * (i % 4)
            points.append(CandlePoint(
                correlation_id=f"{symbol}-{i}",
                symbol=symbol,
                timestamp=start + timedelta(minutes=i),
                open=close - step / 2,
                high=close + 1.0,
                low=max(close - 1.5 - 3.0 * (i % 2), 0.0),
                close=close,
                volume=volume + (i % 7) * 10,
            ))
        return points
    return _make


@pytest.fixture
def candle_event():
    """Build a closed-candle MarketDataPushedEvent."""
    def _make(symbol="BTCUSDT", ts=START, close=100.0, event_id=None, candle_close=True, **overrides):
        fields = dict(
            symbol=symbol,
            data_timestamp=ts,
            open=close - 0.5,
            high=close + 1.0,
            low=close - 1.0,
            close=close,
            volume=1000.0,
            candle_close=candle_close,
        )
        fields.update(overrides)
        if event_id is not None:
            fields["id"] = event_id
        return MarketDataPushedEvent(**fields)
    return _make
