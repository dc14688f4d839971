# init_db.py
from config.db_config import Base, engine
from models.market_data import CandlePoint, ProcessedEvent  # noqa: F401
from models.trade import TradingPreference, Holding, Order  # noqa: F401

print("Creating database tables...")
Base.metadata.create_all(bind=engine)
print("Done.")
