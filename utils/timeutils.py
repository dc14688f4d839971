from datetime import datetime, timedelta
import pytz

MINUTE = timedelta(minutes=1)


def to_utc(ts) -> datetime:
    """
    Normalize a timestamp to a timezone-aware UTC datetime.
    Args:
        ts: datetime (naive values are treated as UTC), or epoch seconds/milliseconds.
    Returns:
        datetime in UTC.
    """
    if isinstance(ts, (int, float)):
        # Exchange feeds push epoch milliseconds
        seconds = ts / 1000.0 if ts > 1e11 else float(ts)
        return datetime.fromtimestamp(seconds, tz=pytz.utc)
    if ts.tzinfo is None:
        return pytz.utc.localize(ts)
    return ts.astimezone(pytz.utc)


def utc_now() -> datetime:
    return datetime.now(tz=pytz.utc)


def minute_bucket(ts):
    """
    Half-open one-minute bucket containing ts.
    Returns:
        tuple[datetime, datetime]: (floor(ts, 1min), floor(ts, 1min) + 1min)
    Example:
        minute_bucket(datetime(2025, 1, 1, 12, 30, 45)) -> (12:30:00, 12:31:00)
    """
    ts = to_utc(ts)
    lower = ts.replace(second=0, microsecond=0)
    return lower, lower + MINUTE


def is_older_than(ts, minutes: int, now=None) -> bool:
    now = to_utc(now) if now is not None else utc_now()
    return to_utc(ts) < now - timedelta(minutes=minutes)
