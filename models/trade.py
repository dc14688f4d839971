# models/trade.py
import uuid

from sqlalchemy import Column, String, Float, Boolean, DateTime, JSON, Index

from config.db_config import Base
from models.constants import (
    QUOTE_ASSET, Algorithm, RiskLevel, HoldingStatus, OrderStatus, OrderType,
)
from models.errors import ValidationError
from utils.timeutils import utc_now


def _new_id() -> str:
    return str(uuid.uuid4())


def _values(enum_cls):
    return {member.value for member in enum_cls}


class _Timestamped:
    def __init__(self, **kwargs):
        kwargs.setdefault("id", _new_id())
        now = utc_now()
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        # Scalar column defaults are applied on construction so validate() sees them
        for column in self.__table__.columns:
            if column.default is not None and column.default.is_scalar:
                kwargs.setdefault(column.key, column.default.arg)
        super().__init__(**kwargs)


class TradingPreference(_Timestamped, Base):
    __tablename__ = "trading_preferences"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, unique=True, index=True)
    algorithm = Column(String(20), nullable=False, default=Algorithm.SWING_TRADING.value)
    watchlist = Column(JSON, nullable=False, default=list)
    operate = Column(Boolean, nullable=False, default=False, index=True)
    stop_loss_enabled = Column(Boolean, nullable=False, default=False)
    risk_level = Column(String(10), nullable=False, default=RiskLevel.LOW.value)
    wallet_type = Column(String(10), nullable=False, default="spot")

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def validate(self):
        if self.algorithm not in _values(Algorithm):
            raise ValidationError(f"invalid algorithm: {self.algorithm!r}")
        if self.risk_level not in _values(RiskLevel):
            raise ValidationError(f"invalid risk level: {self.risk_level!r}")
        for symbol in self.watchlist or []:
            if not symbol.endswith(QUOTE_ASSET):
                raise ValidationError(f"invalid watchlist element: {symbol!r}")


class Holding(_Timestamped, Base):
    __tablename__ = "holdings"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    symbol = Column(String(20), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    entry_price = Column(Float, nullable=False, default=0.0)
    exit_price = Column(Float, nullable=False, default=0.0)
    profit = Column(Float, nullable=False, default=0.0)
    entry_score = Column(Float, nullable=False, default=0.0)
    status = Column(String(10), nullable=False, default=HoldingStatus.OPEN.value)
    # Order that opened this holding through a rotation, if any
    order_id = Column(String(36), index=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    __table_args__ = (
        Index("ix_holdings_symbol_status", "symbol", "status"),
    )

    @property
    def asset(self) -> str:
        """Base asset of the held symbol ("BTCUSDT" -> "BTC", "USDT" -> "USDT")."""
        if self.symbol == QUOTE_ASSET:
            return QUOTE_ASSET
        return self.symbol.split(QUOTE_ASSET)[0]

    @property
    def is_open(self) -> bool:
        return self.status == HoldingStatus.OPEN.value

    def validate(self):
        if self.status not in _values(HoldingStatus):
            raise ValidationError(f"invalid holding status: {self.status!r}")
        if not self.symbol or not self.symbol.endswith(QUOTE_ASSET):
            raise ValidationError(f"invalid holding symbol: {self.symbol!r}")
        if self.quantity < 0:
            raise ValidationError("invalid holding quantity")
        if self.entry_price < 0:
            raise ValidationError("invalid holding entry price")
        if self.exit_price < 0:
            raise ValidationError("invalid holding exit price")
        if self.entry_score < 0:
            raise ValidationError("invalid holding entry score")


class Order(_Timestamped, Base):
    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(String(36), nullable=False, index=True)
    symbol = Column(String(20), nullable=False)
    quantity = Column(Float, nullable=False, default=0.0)
    price = Column(Float, nullable=False, default=0.0)
    status = Column(String(10), nullable=False, default=OrderStatus.OPEN.value, index=True)
    trade_type = Column(String(20), nullable=False)

    # Settlement data, so an accepted order can be settled again after a crash
    quote_id = Column(String(64))
    source_holding_id = Column(String(36))
    exit_price = Column(Float)
    entry_price = Column(Float)
    entry_score = Column(Float)

    created_at = Column(DateTime(timezone=True), nullable=False, default=utc_now)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utc_now, onupdate=utc_now)

    def validate(self):
        if self.status not in _values(OrderStatus):
            raise ValidationError(f"invalid order status: {self.status!r}")
        if self.trade_type not in _values(OrderType):
            raise ValidationError(f"invalid order type: {self.trade_type!r}")
        if self.quantity < 0:
            raise ValidationError("invalid order quantity")
        if self.price < 0:
            raise ValidationError("invalid order price")
        if not self.symbol or not self.symbol.endswith(QUOTE_ASSET):
            raise ValidationError(f"invalid order symbol: {self.symbol!r}")
