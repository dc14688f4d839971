"""
Settlement Ledger
-----------------
Order / Holding bookkeeping for conversions, run as a recoverable saga:

    open  --accept ok-->  accepted  --settle-->  filled
    open  --accept failed-->  cancelled

Settlement is keyed by the Order id and every step is idempotent:
  • the source holding is closed only while it is still open
  • the destination holding is created only if no holding references the order
  • the order is marked filled last
so an order stuck in ``accepted`` (crash after the exchange accepted the
quote) can be settled again with recover_accepted_orders().
"""

import logging
from dataclasses import dataclass

from config.db_config import SessionLocal
from data.repositories import OrderRepository
from models.constants import HoldingStatus, OrderStatus
from models.errors import NotFoundError, ValidationError
from models.trade import Holding, Order
from utils.timeutils import utc_now

logger = logging.getLogger(__name__)


@dataclass
class Settlement:
    order: Order
    closed_holding: Holding
    new_holding: Holding

    @property
    def profit(self) -> float:
        return self.closed_holding.profit

    @property
    def profit_percentage(self) -> float:
        value = self.closed_holding.exit_price * self.closed_holding.quantity
        if value == 0:
            return 0.0
        return self.closed_holding.profit / value * 100


class SettlementLedger:

    def __init__(self, session_factory=None):
        self.session_factory = session_factory or SessionLocal
        self.orders = OrderRepository(self.session_factory)

    # --------------------------
    # Order lifecycle
    # --------------------------
    def open_order(self, holding, symbol: str, quantity: float, price: float, trade_type,
                   quote_id: str, exit_price: float, entry_price: float, entry_score: float) -> Order:
        """Persist a pending order carrying everything settlement needs."""
        order = Order(
            user_id=holding.user_id,
            symbol=symbol,
            quantity=quantity,
            price=price,
            status=OrderStatus.OPEN.value,
            trade_type=trade_type.value,
            quote_id=quote_id,
            source_holding_id=holding.id,
            exit_price=exit_price,
            entry_price=entry_price,
            entry_score=entry_score,
        )
        return self.orders.create(order)

    def mark_accepted(self, order: Order) -> Order:
        order.status = OrderStatus.ACCEPTED.value
        return self.orders.update(order)

    def cancel(self, order: Order) -> Order:
        order.status = OrderStatus.CANCELLED.value
        logger.warning("Order %s cancelled", order.id)
        return self.orders.update(order)

    # --------------------------
    # Settlement
    # --------------------------
    def settle(self, order: Order) -> Settlement:
        """
        Close the source holding, open the destination holding and mark the
        order filled, in one transaction. Safe to call repeatedly.

        Raises:
            NotFoundError: order or source holding missing.
            ValidationError: order was never accepted.
        """
        session = self.session_factory()
        try:
            order = session.get(Order, order.id)
            if order is None:
                raise NotFoundError("order not found")
            if order.status not in (OrderStatus.ACCEPTED.value, OrderStatus.FILLED.value):
                raise ValidationError(f"order {order.id} is {order.status}, cannot settle")

            source = session.get(Holding, order.source_holding_id)
            if source is None:
                raise NotFoundError(f"holding {order.source_holding_id} not found")

            # --- Close source holding ---
            if source.is_open:
                source.exit_price = order.exit_price
                source.profit = (source.exit_price - source.entry_price) * source.quantity
                source.status = HoldingStatus.CLOSED.value
                source.updated_at = utc_now()

            # --- Open destination holding ---
            new_holding = session.query(Holding).filter(Holding.order_id == order.id).first()
            if new_holding is None:
                new_holding = Holding(
                    user_id=order.user_id,
                    symbol=order.symbol,
                    quantity=order.quantity,
                    entry_price=order.entry_price,
                    entry_score=order.entry_score or 0.0,
                    status=HoldingStatus.OPEN.value,
                    order_id=order.id,
                )
                new_holding.validate()
                session.add(new_holding)

            # --- Fill order ---
            order.status = OrderStatus.FILLED.value
            order.updated_at = utc_now()

            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

        logger.info("Order %s settled: %s closed, %s opened", order.id, source.symbol, new_holding.symbol)
        return Settlement(order=order, closed_holding=source, new_holding=new_holding)

    def accepted_orders(self) -> list:
        return self.orders.get_accepted()
