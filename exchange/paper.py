import logging
import uuid
from datetime import timedelta

import pandas as pd

from exchange.base import Exchange, Ticker, Balance, ConversionQuote, ConversionOrder
from models.constants import QUOTE_ASSET
from models.errors import (
    InsufficientBalanceError, QuoteExpiredError, ValidationError, NotFoundError,
)
from utils.timeutils import utc_now, to_utc

logger = logging.getLogger(__name__)


class PaperExchange(Exchange):
    """
    Simulated Exchange
    ------------------
    In-memory balances and tickers with conversion quotes.

    Features:
    - Tickers keyed by full symbol ("BTCUSDT"); the quote asset is priced at 1.0
    - Supports 'rate' or 'fixed' conversion fees, charged in quote-asset terms
    - Supports slippage on the quoted destination amount
    - Quotes expire after ``quote_valid_seconds``
    - Accepted conversions move balances and are logged in ``trades``
    """

    def __init__(self, balances: dict = None, prices: dict = None,
                 fee_type: str = "rate",
                 fee_rate: float = 0.001,
                 fixed_fee: float = 0.0,
                 slippage: float = 0.0005,
                 quote_valid_seconds: int = 10,
                 clock=None):
        self.balances = {asset: float(amount) for asset, amount in (balances or {}).items()}
        self.prices = {symbol: float(price) for symbol, price in (prices or {}).items()}
        self.fee_type = fee_type.lower()
        self.fee_rate = fee_rate
        self.fixed_fee = fixed_fee
        self.slippage = slippage
        self.quote_valid_seconds = quote_valid_seconds
        self.clock = clock or utc_now
        self.quotes = {}
        self.trades = []

    # --------------------------
    # Market state
    # --------------------------
    def set_price(self, symbol: str, price: float):
        if price <= 0:
            raise ValueError("Price must be positive.")
        self.prices[symbol] = float(price)

    def deposit(self, asset: str, amount: float):
        if amount <= 0:
            raise ValueError("Deposit amount must be positive.")
        self.balances[asset] = self.balances.get(asset, 0.0) + amount

    def _asset_price(self, asset: str) -> float:
        if asset == QUOTE_ASSET:
            return 1.0
        return self.get_ticker(f"{asset}{QUOTE_ASSET}").price

    # --------------------------
    # Fee computation
    # --------------------------
    def _calc_fee(self, value: float) -> float:
        """Conversion fee in quote-asset terms."""
        if self.fee_type == "rate":
            return value * self.fee_rate
        elif self.fee_type == "fixed":
            return min(self.fixed_fee, value)
        else:
            raise ValueError(f"Invalid fee_type '{self.fee_type}', must be 'rate' or 'fixed'.")

    # --------------------------
    # Exchange interface
    # --------------------------
    def get_balance(self, asset: str) -> Balance:
        return Balance(asset=asset, free=self.balances.get(asset, 0.0))

    def get_ticker(self, symbol: str) -> Ticker:
        if symbol == QUOTE_ASSET:
            return Ticker(symbol=symbol, price=1.0)
        if symbol not in self.prices:
            raise NotFoundError(f"no ticker for {symbol}")
        return Ticker(symbol=symbol, price=self.prices[symbol])

    def get_conversion_quote(self, from_asset: str, to_asset: str, amount: float,
                             wallet_type: str = "spot") -> ConversionQuote:
        if amount <= 0:
            raise ValidationError("invalid amount: conversion amount must be positive")
        if self.balances.get(from_asset, 0.0) < amount:
            raise InsufficientBalanceError(f"insufficient balance of {from_asset} in {wallet_type} wallet")

        from_price = self._asset_price(from_asset)
        to_price = self._asset_price(to_asset)

        # --- Value in quote asset, net of slippage and fee ---
        value = amount * from_price * (1 - self.slippage)
        fee = self._calc_fee(value)
        to_amount = (value - fee) / to_price

        quote = ConversionQuote(
            id=uuid.uuid4().hex,
            from_asset=from_asset,
            to_asset=to_asset,
            from_amount=amount,
            to_amount=to_amount,
            ratio=to_amount / amount,
            inverse_ratio=amount / to_amount,
            valid_time=self.quote_valid_seconds,
            fee=fee,
            created_at=self.clock(),
        )
        quote.validate()
        self.quotes[quote.id] = quote
        return quote

    def accept_conversion_quote(self, quote_id: str) -> ConversionOrder:
        quote = self.quotes.pop(quote_id, None)
        if quote is None:
            raise NotFoundError(f"conversion quote {quote_id} not found")

        now = to_utc(self.clock())
        if now > to_utc(quote.created_at) + timedelta(seconds=quote.valid_time):
            raise QuoteExpiredError(f"conversion quote {quote_id} expired")

        if self.balances.get(quote.from_asset, 0.0) < quote.from_amount:
            raise InsufficientBalanceError(f"insufficient balance of {quote.from_asset}")

        # --- Move balances ---
        self.balances[quote.from_asset] -= quote.from_amount
        self.balances[quote.to_asset] = self.balances.get(quote.to_asset, 0.0) + quote.to_amount

        order = ConversionOrder(order_id=uuid.uuid4().hex, status="SUCCESS", created_at=now)
        self.trades.append({
            "timestamp": now,
            "order_id": order.order_id,
            "from_asset": quote.from_asset,
            "to_asset": quote.to_asset,
            "from_amount": round(quote.from_amount, 8),
            "to_amount": round(quote.to_amount, 8),
            "fee": round(quote.fee, 8),
        })
        logger.info("Converted %.8f %s -> %.8f %s | Fee=%.4f %s",
                    quote.from_amount, quote.from_asset, quote.to_amount, quote.to_asset,
                    quote.fee, QUOTE_ASSET)
        return order

    # --------------------------
    # Export helpers
    # --------------------------
    def trades_df(self):
        """Return executed conversions as DataFrame."""
        if not self.trades:
            return pd.DataFrame(columns=["timestamp", "order_id", "from_asset", "to_asset",
                                         "from_amount", "to_amount", "fee"])
        return pd.DataFrame(self.trades)
