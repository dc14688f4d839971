"""
Ingestion & Idempotency Gate
----------------------------
• handle_market_data_pushed: dedupe by processed correlation ids, drop unclosed candles,
  validate, upsert into the symbol's minute bucket, then publish a
  PartialMarketDataEvent for the stored point
• handle_partial_market_data: recompute indicators and the opportunity
  score over the trailing window and persist them on the point
• EventRegistry dispatches decoded events by EventType
• EventConsumer acks on success, naks and dead-letters on failure
"""

import logging

from config.settings import settings
from data.repositories import MarketDataRepository
from features.engine import IndicatorEngine
from features.feature_loader import load_window, DEFAULT_WINDOW_DAYS, DEFAULT_WINDOW_LIMIT
from ingestion.bus import EventBus, Message
from ingestion.events import (
    EventType, MarketDataPushedEvent, PartialMarketDataEvent, UnknownEventType, decode_event,
)
from models.market_data import CandlePoint
from scoring.opportunity import calculate_opportunity_score

logger = logging.getLogger(__name__)


class MarketDataEventHandler:

    def __init__(self, bus: EventBus, market_data: MarketDataRepository = None,
                 engine: IndicatorEngine = None, subject: str = None,
                 window_days: int = DEFAULT_WINDOW_DAYS, window_limit: int = DEFAULT_WINDOW_LIMIT):
        self.bus = bus
        self.market_data = market_data or MarketDataRepository()
        self.engine = engine or IndicatorEngine()
        self.subject = subject or settings.MARKET_DATA_SUBJECT
        self.window_days = window_days
        self.window_limit = window_limit

    # --------------------------
    # Candle intake
    # --------------------------
    def handle_market_data_pushed(self, event: MarketDataPushedEvent):
        """
        Returns:
            CandlePoint | None: the stored point, or None when the event was
            a duplicate or an unclosed candle.
        Raises:
            ValidationError: bad symbol, timestamp or OHLCV value.
        """
        if self.market_data.is_processed(event.id):
            logger.info("Market data event %s already processed", event.id)
            return None

        if not event.candle_close:
            logger.debug("Dropping unclosed candle %s for %s", event.id, event.symbol)
            return None

        point = CandlePoint.from_event(event)
        point.validate()

        stored = self.market_data.upsert_in_bucket(point, event.id)
        if stored is point:
            logger.debug("Stored %s candle %s (point %s)", stored.symbol, stored.timestamp, stored.id)
        else:
            logger.debug("Updated %s bucket %s (point %s)", stored.symbol, stored.timestamp, stored.id)

        self.bus.publish(self.subject, PartialMarketDataEvent(datapoint_id=stored.id))
        return stored

    # --------------------------
    # Recomputation
    # --------------------------
    def handle_partial_market_data(self, event: PartialMarketDataEvent):
        """
        Raises:
            NotFoundError: the datapoint does not exist.
            InsufficientDataError: empty window or a family lacking points.
        """
        point = self.market_data.get_by_id(event.datapoint_id)
        window = load_window(point, days=self.window_days, limit=self.window_limit,
                             session_factory=self.market_data.session_factory)

        latest = self.engine.compute_general_indicators(window)
        if latest.id != point.id:
            logger.warning("Window for %s ends at point %s, not %s", point.symbol, latest.id, point.id)
        calculate_opportunity_score(latest)

        stored = self.market_data.update(latest)
        logger.info("%s %s score=%.2f", stored.symbol, stored.timestamp, stored.score)
        return stored


class EventRegistry:
    """Handlers keyed by EventType."""

    def __init__(self, handlers: dict = None):
        self.handlers = dict(handlers or {})

    @classmethod
    def for_market_data(cls, handler: MarketDataEventHandler):
        return cls({
            EventType.MARKET_DATA_PUSHED: handler.handle_market_data_pushed,
            EventType.PARTIAL_MARKET_DATA: handler.handle_partial_market_data,
        })

    def register(self, event_type: EventType, handler):
        self.handlers[EventType(event_type)] = handler

    def handle_event(self, raw):
        """
        Decode and dispatch one payload. Undecodable payloads and unknown
        event types are logged and skipped; handler errors propagate.
        """
        try:
            event = decode_event(raw)
        except UnknownEventType as exc:
            logger.warning("Skipping event: %s", exc)
            return None
        except ValueError as exc:
            logger.warning("Skipping undecodable event: %s", exc)
            return None

        handler = self.handlers.get(event.type)
        if handler is None:
            logger.warning("No handler registered for %s", event.type.value)
            return None
        return handler(event)


class EventConsumer:

    def __init__(self, registry: EventRegistry, bus: EventBus):
        self.registry = registry
        self.bus = bus

    def process(self, message: Message) -> bool:
        """Ack on success; nak and dead-letter the raw payload on failure."""
        try:
            self.registry.handle_event(message.data)
        except Exception as exc:
            logger.error("Error processing message on %s: %s", message.subject, exc)
            message.nak()
            self.bus.send_to_dlq(message.data)
            return False
        message.ack()
        return True
