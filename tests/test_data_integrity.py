import pandas as pd

from data.repositories import MarketDataRepository
from features.feature_utils import points_to_frame


def test_symbol_data_integrity(session_factory, make_candles):
    """Verify data quality of a stored candle window."""
    symbol = "BTCUSDT"
    repo = MarketDataRepository(session_factory)
    points = make_candles(300, symbol=symbol)
    for point in points:
        repo.create(point)

    rows = repo.get_window(symbol, points[0].timestamp, points[-1].timestamp, limit=1000)
    assert rows, f"No data found for {symbol}"

    df = points_to_frame(rows)
    assert isinstance(df, pd.DataFrame)
    assert len(df) == 300

    # check NaN
    assert not df[["open", "high", "low", "close", "volume"]].isnull().values.any(), \
        "Data contains null values"

    # check low ≤ open, close ≤ high
    invalid_rows = df[
        (df["high"] < df["low"]) |
        (df["open"] > df["high"]) |
        (df["close"] > df["high"]) |
        (df["close"] < df["low"])
    ]
    assert invalid_rows.empty, "Detected invalid OHLC relationships"

    # check timestamp ASC
    assert df["timestamp"].is_monotonic_increasing, "Timestamps not sorted ascending"
