"""
Repositories
------------
Session-per-operation persistence for market data and trading entities.
Each repository receives a session factory (``SessionLocal`` by default) so
tests can swap in an in-memory SQLite engine.
"""

from config.db_config import SessionLocal
from data.filtering import apply_filters
from models.constants import HoldingStatus, OrderStatus
from models.errors import NotFoundError
from models.market_data import CandlePoint, ProcessedEvent
from models.trade import Holding, Order, TradingPreference
from utils.timeutils import minute_bucket


class BaseRepository:
    model = None

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal

    def get_by_id(self, entity_id):
        session = self.session_factory()
        try:
            entity = session.get(self.model, entity_id)
        finally:
            session.close()
        if entity is None:
            raise NotFoundError(f"{self.model.__name__} {entity_id} not found")
        return entity

    def get_all(self, filters: dict = None, order_by: str = "created_at",
                direction: str = "desc", page: int = 1, page_size: int = None) -> list:
        session = self.session_factory()
        try:
            query = apply_filters(session.query(self.model), self.model, filters,
                                  order_by=order_by, direction=direction,
                                  page=page, page_size=page_size)
            return query.all()
        finally:
            session.close()

    def first(self, filters: dict = None, order_by: str = "created_at", direction: str = "desc"):
        rows = self.get_all(filters, order_by=order_by, direction=direction, page_size=1)
        return rows[0] if rows else None

    def create(self, entity):
        if hasattr(entity, "validate"):
            entity.validate()
        return self._save(entity)

    def update(self, entity):
        if hasattr(entity, "validate"):
            entity.validate()
        session = self.session_factory()
        try:
            if session.get(self.model, entity.id) is None:
                raise NotFoundError(f"{self.model.__name__} {entity.id} not found")
            merged = session.merge(entity)
            session.commit()
            return merged
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete(self, entity_id):
        session = self.session_factory()
        try:
            entity = session.get(self.model, entity_id)
            if entity is None:
                raise NotFoundError(f"{self.model.__name__} {entity_id} not found")
            session.delete(entity)
            session.commit()
        finally:
            session.close()

    def _save(self, entity):
        session = self.session_factory()
        try:
            session.add(entity)
            session.commit()
            return entity
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()


class MarketDataRepository(BaseRepository):
    model = CandlePoint

    def get_by_correlation_id(self, correlation_id):
        return self.first({"correlation_id": str(correlation_id)})

    def get_latest(self, symbol: str):
        return self.first({"symbol": symbol})

    def is_processed(self, correlation_id) -> bool:
        """True if a candle event with this correlation id was already stored or merged."""
        session = self.session_factory()
        try:
            if session.get(ProcessedEvent, str(correlation_id)) is not None:
                return True
        finally:
            session.close()
        return self.get_by_correlation_id(correlation_id) is not None

    def upsert_in_bucket(self, point, correlation_id):
        """
        Merge ``point`` into the latest point of its minute bucket, or insert
        it, and record ``correlation_id`` as processed in the same commit.
        Returns:
            CandlePoint: the stored point.
        """
        point.validate()
        lower, upper = minute_bucket(point.timestamp)
        session = self.session_factory()
        try:
            existing = apply_filters(
                session.query(CandlePoint), CandlePoint,
                {"symbol": point.symbol, "timestamp__gte": lower, "timestamp__lt": upper},
            ).first()
            if existing is not None:
                stored = existing.merge_from(point)
            else:
                session.add(point)
                stored = point
            session.add(ProcessedEvent(correlation_id=str(correlation_id), datapoint_id=stored.id))
            session.commit()
            return stored
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def get_window(self, symbol: str, start, end, limit: int = 1000) -> list:
        return self.get_all(
            {"symbol": symbol, "timestamp__gte": start, "timestamp__lte": end},
            order_by="timestamp", direction="asc", page_size=limit,
        )


class TradingPreferenceRepository(BaseRepository):
    model = TradingPreference

    def get_by_user_id(self, user_id):
        preference = self.first({"user_id": user_id})
        if preference is None:
            raise NotFoundError(f"trading preference for user {user_id} not found")
        return preference

    def create(self, entity):
        if self.first({"user_id": entity.user_id}) is not None:
            raise ValueError(f"trading preference already exists for user {entity.user_id}")
        return super().create(entity)


class HoldingRepository(BaseRepository):
    model = Holding

    def get_by_symbol_and_status(self, symbol: str, status=HoldingStatus.OPEN, limit: int = 1000):
        return self.get_all({"symbol": symbol, "status": status}, page_size=limit)

    def get_by_order_id(self, order_id):
        return self.first({"order_id": order_id})

    def get_open_positions(self, symbol: str) -> list:
        """
        Open holdings of ``symbol`` paired with their owner's operating preference.
        Returns:
            list[tuple[Holding, TradingPreference]]
        """
        session = self.session_factory()
        try:
            rows = (
                session.query(Holding, TradingPreference)
                .join(TradingPreference, TradingPreference.user_id == Holding.user_id)
                .filter(Holding.symbol == symbol)
                .filter(Holding.status == HoldingStatus.OPEN.value)
                .filter(TradingPreference.operate.is_(True))
                .order_by(Holding.created_at.desc())
                .all()
            )
            return [(holding, preference) for holding, preference in rows]
        finally:
            session.close()


class OrderRepository(BaseRepository):
    model = Order

    def get_accepted(self) -> list:
        return self.get_all({"status": OrderStatus.ACCEPTED}, direction="asc")
