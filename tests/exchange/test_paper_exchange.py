# pytest -v tests/exchange/test_paper_exchange.py
from datetime import timedelta

import pytest

from exchange.base import ConversionQuote
from exchange.errors import wrap_exchange_error
from exchange.paper import PaperExchange
from models.errors import (
    ConversionDriftExceeded, InsufficientBalanceError, QuoteExpiredError,
    ExchangeUnavailableError, ValidationError, NotFoundError,
)
from utils.timeutils import utc_now


@pytest.fixture
def exchange():
    """Exchange with no fee and no slippage."""
    return PaperExchange(balances={"BTC": 1.0}, prices={"BTCUSDT": 60000, "ETHUSDT": 3000},
                         fee_rate=0.0, slippage=0.0)


# ============================================================
# 1️⃣ Tickers and balances
# ============================================================

def test_ticker_and_quote_asset(exchange):
    assert exchange.get_ticker("BTCUSDT").price == 60000
    assert exchange.get_ticker("USDT").price == 1.0
    with pytest.raises(NotFoundError):
        exchange.get_ticker("DOGEUSDT")


def test_balance_defaults_to_zero(exchange):
    assert exchange.get_balance("BTC").free == 1.0
    assert exchange.get_balance("ETH").free == 0.0


# ============================================================
# 2️⃣ Conversion quotes
# ============================================================

def test_quote_and_accept_moves_balances(exchange):
    quote = exchange.get_conversion_quote("BTC", "ETH", 0.5)
    assert quote.to_amount == pytest.approx(10.0)
    assert quote.ratio == pytest.approx(20.0)

    order = exchange.accept_conversion_quote(quote.id)
    assert order.status == "SUCCESS"
    assert exchange.get_balance("BTC").free == pytest.approx(0.5)
    assert exchange.get_balance("ETH").free == pytest.approx(10.0)
    assert len(exchange.trades_df()) == 1


def test_fee_and_slippage_reduce_destination_amount():
    exchange = PaperExchange(balances={"BTC": 1.0}, prices={"BTCUSDT": 60000},
                             fee_rate=0.001, slippage=0.0005)
    quote = exchange.get_conversion_quote("BTC", "USDT", 1.0)
    value = 60000 * (1 - 0.0005)
    assert quote.fee == pytest.approx(value * 0.001)
    assert quote.to_amount == pytest.approx(value * 0.999)


def test_quote_insufficient_balance(exchange):
    with pytest.raises(InsufficientBalanceError):
        exchange.get_conversion_quote("BTC", "ETH", 2.0)


def test_quote_requires_positive_amount(exchange):
    with pytest.raises(ValidationError):
        exchange.get_conversion_quote("BTC", "ETH", 0.0)


def test_expired_quote_is_rejected():
    now = [utc_now()]
    exchange = PaperExchange(balances={"BTC": 1.0}, prices={"BTCUSDT": 60000},
                             quote_valid_seconds=10, clock=lambda: now[0])
    quote = exchange.get_conversion_quote("BTC", "USDT", 1.0)
    now[0] = now[0] + timedelta(seconds=11)
    with pytest.raises(QuoteExpiredError):
        exchange.accept_conversion_quote(quote.id)
    assert exchange.get_balance("BTC").free == 1.0


def test_quote_cannot_be_accepted_twice(exchange):
    quote = exchange.get_conversion_quote("BTC", "ETH", 0.1)
    exchange.accept_conversion_quote(quote.id)
    with pytest.raises(NotFoundError):
        exchange.accept_conversion_quote(quote.id)


# ============================================================
# 3️⃣ Drift
# ============================================================

def _quote(to_amount):
    return ConversionQuote(id="q", from_asset="BTC", to_asset="ETH", from_amount=0.5,
                           to_amount=to_amount, ratio=to_amount / 0.5, inverse_ratio=0.5 / to_amount)


def test_drift_within_limit():
    assert _quote(10.05).validate_drift(30000, 3000) == pytest.approx(0.005)


def test_drift_above_limit():
    with pytest.raises(ConversionDriftExceeded) as exc:
        _quote(10.5).validate_drift(30000, 3000)
    assert exc.value.drift == pytest.approx(0.05)


def test_drift_requires_prices():
    with pytest.raises(ValidationError):
        _quote(10).validate_drift(0, 3000)


# ============================================================
# 4️⃣ Error wrapping
# ============================================================

@pytest.mark.parametrize("message, expected", [
    ("APIError(code=-2010): Insufficient balance", InsufficientBalanceError),
    ("quote expired", QuoteExpiredError),
    ("invalid symbol", ValidationError),
    ("connection reset by peer", ExchangeUnavailableError),
])
def test_wrap_exchange_error(message, expected):
    assert isinstance(wrap_exchange_error(RuntimeError(message)), expected)


def test_wrap_passes_domain_errors_through():
    err = QuoteExpiredError("x")
    assert wrap_exchange_error(err) is err
