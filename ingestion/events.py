"""
Domain events of the market-data pipeline.

Wire format: one flat JSON object per event carrying the base fields
(id, domain, type, timestamp) plus the event's own fields.
"""

import json
import uuid
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from models.errors import ValidationError
from utils.timeutils import utc_now, to_utc

MARKET_DATA_DOMAIN = "market_data"


class EventType(str, Enum):
    MARKET_DATA_PUSHED = "market_data_pushed"
    PARTIAL_MARKET_DATA = "partial_market_data"


def _new_id() -> str:
    return str(uuid.uuid4())


_TRUE_FLAGS = {"true", "1", "yes", "y", "t"}
_FALSE_FLAGS = {"false", "0", "no", "n", "f", ""}


def _parse_flag(name: str, raw) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, (int, float)) and raw in (0, 1):
        return bool(raw)
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in _TRUE_FLAGS:
            return True
        if value in _FALSE_FLAGS:
            return False
    raise ValidationError(f"invalid market {name}: {raw!r}")


class DomainEvent(BaseModel):
    id: str = Field(default_factory=_new_id)
    domain: str = MARKET_DATA_DOMAIN
    type: EventType
    timestamp: datetime = Field(default_factory=utc_now)

    def encode(self) -> bytes:
        return self.model_dump_json().encode("utf-8")


class MarketDataPushedEvent(DomainEvent):
    """A candle pushed by the exchange feed. ``id`` is the correlation id."""
    type: EventType = EventType.MARKET_DATA_PUSHED
    symbol: str
    data_timestamp: Optional[datetime] = None
    open: float
    high: float
    low: float
    close: float
    volume: float
    candle_close: bool = False

    @classmethod
    def from_raw(cls, symbol: str, data_timestamp, open: str, high: str, low: str,
                 close: str, volume: str, candle_close, event_id: str = None):
        """
        Build an event from string OHLCV values as delivered by exchange websockets.
        Raises:
            ValidationError: naming the first field that is not a number, or a
                ``candle_close`` flag that is neither true nor false.
        """
        values = {}
        for name, raw in (("open", open), ("high", high), ("low", low),
                          ("close", close), ("volume", volume)):
            try:
                values[name] = float(raw)
            except (TypeError, ValueError):
                raise ValidationError(f"invalid market {name}: {raw!r}") from None
        return cls(
            id=event_id or _new_id(),
            symbol=symbol,
            data_timestamp=to_utc(data_timestamp) if data_timestamp is not None else None,
            candle_close=_parse_flag("candle_close", candle_close),
            **values,
        )


class PartialMarketDataEvent(DomainEvent):
    """Self-emitted after a candle is stored; triggers indicator recomputation."""
    type: EventType = EventType.PARTIAL_MARKET_DATA
    datapoint_id: str


EVENT_MODELS = {
    EventType.MARKET_DATA_PUSHED: MarketDataPushedEvent,
    EventType.PARTIAL_MARKET_DATA: PartialMarketDataEvent,
}


class UnknownEventType(ValueError):
    pass


def decode_event(raw) -> DomainEvent:
    """
    Decode a JSON payload into its typed event.
    Raises:
        ValueError: malformed JSON or fields (pydantic.ValidationError is a ValueError).
        UnknownEventType: ``type`` is not a known EventType.
    """
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode("utf-8")
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("event payload must be a JSON object")
    try:
        event_type = EventType(data.get("type"))
    except ValueError:
        raise UnknownEventType(f"unknown event type: {data.get('type')!r}") from None
    return EVENT_MODELS[event_type].model_validate(data)
