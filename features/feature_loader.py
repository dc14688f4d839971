"""
Feature Loader
--------------
Loads the trailing window of candle points that indicator recomputation
runs over. The window ends at the triggering point's timestamp, spans a
number of days back, and is capped at a maximum number of rows.
"""

import logging
from datetime import timedelta

from config.db_config import SessionLocal
from models.market_data import CandlePoint
from models.errors import InsufficientDataError
from utils.timeutils import to_utc

logger = logging.getLogger(__name__)

DEFAULT_WINDOW_DAYS = 15
DEFAULT_WINDOW_LIMIT = 1000


def load_window(point, days: int = DEFAULT_WINDOW_DAYS, limit: int = DEFAULT_WINDOW_LIMIT,
                session_factory=None) -> list:
    """
    Load candle points of ``point.symbol`` with timestamp in [ts - days, ts].

    Parameters
    ----------
    point : CandlePoint
        The point that triggered recomputation.
    days : int
        How many days to look back (default=15).
    limit : int
        Maximum number of rows (default=1000); the most recent rows are kept.

    Returns
    -------
    list[CandlePoint]
        Ordered by timestamp ascending.

    Raises
    ------
    InsufficientDataError
        If no rows match.
    """
    end = to_utc(point.timestamp)
    start = end - timedelta(days=days)
    session = (session_factory or SessionLocal)()
    try:
        rows = (
            session.query(CandlePoint)
            .filter(CandlePoint.symbol == point.symbol)
            .filter(CandlePoint.timestamp >= start)
            .filter(CandlePoint.timestamp <= end)
            .order_by(CandlePoint.timestamp.desc())
            .limit(limit)
            .all()
        )
    finally:
        session.close()
    rows.reverse()

    if not rows:
        raise InsufficientDataError()

    logger.debug("Loaded %d points for %s (%s → %s)", len(rows), point.symbol, start, end)
    return rows
