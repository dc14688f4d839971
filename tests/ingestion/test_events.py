import json

import pytest

from ingestion.events import (
    EventType, MarketDataPushedEvent, PartialMarketDataEvent, UnknownEventType, decode_event,
)
from models.errors import ValidationError


def test_encode_decode_market_data_event(candle_event):
    event = candle_event(close=123.45, event_id="corr-1")
    decoded = decode_event(event.encode())
    assert isinstance(decoded, MarketDataPushedEvent)
    assert decoded.id == "corr-1"
    assert decoded.type == EventType.MARKET_DATA_PUSHED
    assert decoded.close == 123.45
    assert decoded.data_timestamp == event.data_timestamp


def test_decode_partial_event():
    raw = json.dumps({"type": "partial_market_data", "datapoint_id": "abc"})
    decoded = decode_event(raw)
    assert isinstance(decoded, PartialMarketDataEvent)
    assert decoded.datapoint_id == "abc"


def test_decode_unknown_type():
    with pytest.raises(UnknownEventType):
        decode_event(json.dumps({"type": "order_book", "bids": []}))


@pytest.mark.parametrize("raw", [b"not json", b"[1, 2]", b'{"type": "partial_market_data"}'])
def test_decode_malformed(raw):
    with pytest.raises(ValueError):
        decode_event(raw)


def test_from_raw_parses_string_ohlcv():
    event = MarketDataPushedEvent.from_raw(
        "BTCUSDT", 1735689600000, "100.5", "101", "99.5", "100.7", "12.5", True,
    )
    assert event.open == 100.5
    assert event.volume == 12.5
    assert event.candle_close is True
    assert event.data_timestamp.year == 2025
    assert event.id


def test_from_raw_names_bad_field():
    with pytest.raises(ValidationError, match="invalid market high"):
        MarketDataPushedEvent.from_raw("BTCUSDT", 1735689600, "100", "abc", "99", "100", "1", True)


@pytest.mark.parametrize("flag, expected", [
    ("false", False), ("False", False), ("0", False), ("", False),
    ("true", True), ("TRUE", True), ("1", True), (True, True), (0, False),
])
def test_from_raw_parses_candle_close_flag(flag, expected):
    event = MarketDataPushedEvent.from_raw("BTCUSDT", 1735689600, "100", "101", "99", "100", "1", flag)
    assert event.candle_close is expected


def test_from_raw_rejects_unknown_flag():
    with pytest.raises(ValidationError, match="invalid market candle_close"):
        MarketDataPushedEvent.from_raw("BTCUSDT", 1735689600, "100", "101", "99", "100", "1", "maybe")
