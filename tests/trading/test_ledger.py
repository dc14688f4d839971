import pytest

from data.repositories import HoldingRepository, OrderRepository
from models.constants import HoldingStatus, OrderStatus, OrderType
from models.errors import ValidationError
from models.trade import Holding
from trading.ledger import SettlementLedger


@pytest.fixture
def ledger(session_factory):
    return SettlementLedger(session_factory)


@pytest.fixture
def holding(session_factory):
    return HoldingRepository(session_factory).create(Holding(
        user_id="u1", symbol="BTCUSDT", quantity=2.0, entry_price=100.0, entry_score=70.0))


def _open(ledger, holding):
    return ledger.open_order(holding, symbol="ETHUSDT", quantity=40.0, price=220.0,
                             trade_type=OrderType.TAKE_PROFIT, quote_id="q-1",
                             exit_price=110.0, entry_price=5.5, entry_score=88.0)


def test_open_order_is_pending(ledger, holding):
    order = _open(ledger, holding)
    assert order.status == OrderStatus.OPEN.value
    assert order.source_holding_id == holding.id


def test_cannot_settle_unaccepted_order(ledger, holding):
    order = _open(ledger, holding)
    with pytest.raises(ValidationError):
        ledger.settle(order)


def test_settle_is_idempotent(ledger, holding, session_factory):
    order = ledger.mark_accepted(_open(ledger, holding))

    first = ledger.settle(order)
    second = ledger.settle(order)

    assert first.new_holding.id == second.new_holding.id
    assert first.profit == pytest.approx(20.0)
    assert first.profit_percentage == pytest.approx(20.0 / 220.0 * 100)

    holdings = HoldingRepository(session_factory).get_all()
    assert len(holdings) == 2
    assert HoldingRepository(session_factory).get_by_order_id(order.id).entry_score == 88.0
    assert OrderRepository(session_factory).get_by_id(order.id).status == OrderStatus.FILLED.value
    assert HoldingRepository(session_factory).get_by_id(holding.id).status == HoldingStatus.CLOSED.value


def test_cancel(ledger, holding, session_factory):
    ledger.cancel(_open(ledger, holding))
    assert OrderRepository(session_factory).get_accepted() == []
    assert OrderRepository(session_factory).get_all()[0].status == OrderStatus.CANCELLED.value
