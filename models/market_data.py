# models/market_data.py
import uuid

from sqlalchemy import Column, String, Float, DateTime, Index

from config.db_config import Base
from models.constants import QUOTE_ASSET
from models.errors import ValidationError
from utils.timeutils import utc_now, to_utc

# Indicator columns written by the indicator engine (order matches the
# engine's family order). adx_index mirrors adx.
INDICATOR_FIELDS = (
    "macd", "macd_signal", "macd_hist",
    "rsi6", "rsi12", "rsi24",
    "sma20", "sma50", "sma200",
    "atr",
    "bollinger_bands", "bollinger_bands_upper", "bollinger_bands_lower", "bollinger_bands_width",
    "obv",
    "adx", "adx_index", "adx_positive", "adx_negative",
)

OHLCV_FIELDS = ("open", "high", "low", "close", "volume")


def _new_id() -> str:
    return str(uuid.uuid4())


class CandlePoint(Base):
    """One closed one-minute candle for a symbol plus its derived indicators and score."""
    __tablename__ = "market_data"

    id = Column(String(36), primary_key=True, default=_new_id)
    correlation_id = Column(String(64), nullable=False, index=True)
    symbol = Column(String(20), nullable=False, index=True)
    timestamp = Column(DateTime(timezone=True), nullable=False, index=True)

    open = Column(Float, nullable=False)
    high = Column(Float, nullable=False)
    low = Column(Float, nullable=False)
    close = Column(Float, nullable=False)
    volume = Column(Float, nullable=False)

    # --- Trend / momentum ---
    macd = Column(Float)
    macd_signal = Column(Float)
    macd_hist = Column(Float)
    rsi6 = Column(Float)
    rsi12 = Column(Float)
    rsi24 = Column(Float)
    sma20 = Column(Float)
    sma50 = Column(Float)
    sma200 = Column(Float)

    # --- Volatility ---
    atr = Column(Float)
    bollinger_bands = Column(Float)
    bollinger_bands_upper = Column(Float)
    bollinger_bands_lower = Column(Float)
    bollinger_bands_width = Column(Float)

    # --- Volume / directional ---
    obv = Column(Float)
    adx = Column(Float)
    adx_index = Column(Float)
    adx_positive = Column(Float)
    adx_negative = Column(Float)

    score = Column(Float)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("ix_market_data_symbol_timestamp", "symbol", "timestamp"),
    )

    def __init__(self, **kwargs):
        kwargs.setdefault("id", _new_id())
        now = utc_now()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        super().__init__(**kwargs)

    def __repr__(self):
        return f"<CandlePoint {self.symbol} {self.timestamp} close={self.close} score={self.score}>"

    @classmethod
    def from_event(cls, event):
        """Build an unsaved point from a MarketDataPushed event."""
        return cls(
            correlation_id=str(event.id),
            symbol=event.symbol,
            timestamp=to_utc(event.data_timestamp) if event.data_timestamp is not None else None,
            open=event.open,
            high=event.high,
            low=event.low,
            close=event.close,
            volume=event.volume,
        )

    def validate(self):
        """Raise ValidationError on a bad symbol, timestamp or negative OHLCV value."""
        if not self.symbol or not self.symbol.endswith(QUOTE_ASSET):
            raise ValidationError(f"invalid market data symbol: {self.symbol!r}")
        if self.timestamp is None or to_utc(self.timestamp).timestamp() == 0:
            raise ValidationError("invalid market data timestamp")
        for field in OHLCV_FIELDS:
            value = getattr(self, field)
            if value is None or value < 0:
                raise ValidationError(f"invalid market data {field}: {value!r}")

    def merge_from(self, other: "CandlePoint"):
        """
        Overwrite market values with those of a newer write to the same bucket.
        Identity, correlation id and created_at are preserved.
        """
        self.timestamp = other.timestamp
        for field in OHLCV_FIELDS + INDICATOR_FIELDS + ("score",):
            setattr(self, field, getattr(other, field))
        self.updated_at = utc_now()
        return self

    def indicators(self) -> dict:
        return {field: getattr(self, field) for field in INDICATOR_FIELDS}


class ProcessedEvent(Base):
    """Correlation id of every candle event that reached the store, with the point it landed on."""
    __tablename__ = "processed_events"

    correlation_id = Column(String(64), primary_key=True)
    datapoint_id = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
