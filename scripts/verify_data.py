# python -m scripts.verify_data BTCUSDT
import sys

import pandas as pd
from sqlalchemy import func

from config.db_config import SessionLocal
from models.market_data import CandlePoint, INDICATOR_FIELDS


def verify_symbol(symbol: str, rows: int = 10):
    """Print row counts, time range and the latest points with their indicator coverage."""
    session = SessionLocal()

    try:
        # --- Basic info ---
        total = session.query(func.count(CandlePoint.id)).filter(CandlePoint.symbol == symbol).scalar()
        min_dt = session.query(func.min(CandlePoint.timestamp)).filter(CandlePoint.symbol == symbol).scalar()
        max_dt = session.query(func.max(CandlePoint.timestamp)).filter(CandlePoint.symbol == symbol).scalar()
        scored = (
            session.query(func.count(CandlePoint.id))
            .filter(CandlePoint.symbol == symbol, CandlePoint.score.isnot(None))
            .scalar()
        )

        print(f"\nSymbol: {symbol}")
        print(f"Total rows: {total:,} ({scored:,} scored)")
        print(f"Time range: {min_dt} → {max_dt}")

        points = (
            session.query(CandlePoint)
            .filter(CandlePoint.symbol == symbol)
            .order_by(CandlePoint.timestamp.desc())
            .limit(rows)
            .all()
        )

        if not points:
            print("No data found.")
            return

        df = pd.DataFrame(
            [{
                "timestamp": p.timestamp,
                "close": p.close,
                "volume": p.volume,
                "indicators": sum(getattr(p, f) is not None for f in INDICATOR_FIELDS),
                "score": p.score,
            } for p in points]
        ).sort_values("timestamp")

        print(f"\nLatest {len(df)} points (indicators populated out of {len(INDICATOR_FIELDS)}):")
        print(df.to_string(index=False))

    finally:
        session.close()


if __name__ == "__main__":
    verify_symbol(sys.argv[1] if len(sys.argv) > 1 else "BTCUSDT")
