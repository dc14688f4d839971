# ingestion/__init__.py
import logging

from config.settings import settings
from data.repositories import MarketDataRepository
from features.engine import IndicatorEngine
from features.feature_utils import get_max_window
from features.indicator_config import IndicatorConfig
from ingestion.bus import EventBus, InMemoryEventBus, Message
from ingestion.events import EventType, MarketDataPushedEvent, PartialMarketDataEvent, decode_event
from ingestion.gate import MarketDataEventHandler, EventRegistry, EventConsumer

logger = logging.getLogger(__name__)


def init_ingestion_pipeline(bus: EventBus = None, session_factory=None, market_data_cfg: dict = None):
    """
    Wire handler, registry and consumer onto the market-data subject.
    ``market_data_cfg`` is the ``market_data`` section of the trading config.
    Returns: (consumer, bus)
    Raises:
        ValueError: window_limit is below the longest indicator lookback.
    """
    cfg = market_data_cfg or {}
    bus = bus or InMemoryEventBus()

    indicator_config = IndicatorConfig()
    indicator_config.adx["smoothed"] = cfg.get("adx_smoothed", False)

    window_limit = cfg.get("window_limit", 1000)
    required = get_max_window(indicator_config.to_dict())
    if window_limit < required:
        raise ValueError(f"window_limit {window_limit} is below the {required} points "
                         f"the indicator families require")

    handler = MarketDataEventHandler(
        bus,
        market_data=MarketDataRepository(session_factory),
        engine=IndicatorEngine(indicator_config),
        window_days=cfg.get("window_days", 15),
        window_limit=window_limit,
    )
    consumer = EventConsumer(EventRegistry.for_market_data(handler), bus)
    bus.subscribe(settings.MARKET_DATA_SUBJECT, consumer.process)

    logger.info("Ingestion pipeline subscribed to %s (window %d days / %d points)",
                settings.MARKET_DATA_SUBJECT, cfg.get("window_days", 15), window_limit)
    return consumer, bus


__all__ = [
    "EventBus", "InMemoryEventBus", "Message",
    "EventType", "MarketDataPushedEvent", "PartialMarketDataEvent", "decode_event",
    "MarketDataEventHandler", "EventRegistry", "EventConsumer", "init_ingestion_pipeline",
]
