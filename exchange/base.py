# exchange/base.py
import abc
from dataclasses import dataclass, field
from datetime import datetime

from models.errors import ConversionDriftExceeded, ValidationError
from utils.timeutils import utc_now

DEFAULT_DRIFT_LIMIT = 0.01


@dataclass
class Ticker:
    symbol: str
    price: float
    volume: float = 0.0
    price_percentage_change: float = 0.0


@dataclass
class Balance:
    asset: str
    free: float
    locked: float = 0.0


@dataclass
class ConversionQuote:
    id: str
    from_asset: str
    to_asset: str
    from_amount: float
    to_amount: float
    ratio: float
    inverse_ratio: float
    valid_time: int = 10          # seconds
    fee: float = 0.0
    created_at: datetime = field(default_factory=utc_now)

    def validate(self):
        if not self.id:
            raise ValidationError("conversion quote id is empty")
        if self.from_amount <= 0 or self.to_amount <= 0:
            raise ValidationError("conversion quote amounts must be positive")
        if self.ratio <= 0 or self.inverse_ratio <= 0:
            raise ValidationError("conversion quote ratios must be positive")

    def drift(self, origin_value: float, destination_price: float) -> float:
        """
        Relative deviation of the quoted destination value from the
        ticker-implied origin value, both in quote-asset terms.
        """
        if origin_value <= 0 or destination_price <= 0:
            raise ValidationError("ticker prices must be positive to compute conversion drift")
        destination_value = destination_price * self.to_amount
        return (destination_value - origin_value) / origin_value

    def validate_drift(self, origin_value: float, destination_price: float,
                       limit: float = DEFAULT_DRIFT_LIMIT):
        """
        Raises:
            ConversionDriftExceeded: if the drift is above ``limit``.
        """
        drift = self.drift(origin_value, destination_price)
        if drift > limit:
            raise ConversionDriftExceeded(drift, limit)
        return drift


@dataclass
class ConversionOrder:
    order_id: str
    status: str
    created_at: datetime = field(default_factory=utc_now)


class Exchange(abc.ABC):
    """
    Exchange collaborator used by the decision engine.
    Implementations map their own failures into models.errors
    (see exchange.errors.wrap_exchange_error).
    """

    @abc.abstractmethod
    def get_balance(self, asset: str) -> Balance:
        raise NotImplementedError("Subclasses must implement get_balance()")

    @abc.abstractmethod
    def get_ticker(self, symbol: str) -> Ticker:
        raise NotImplementedError("Subclasses must implement get_ticker()")

    @abc.abstractmethod
    def get_conversion_quote(self, from_asset: str, to_asset: str, amount: float,
                             wallet_type: str = "spot") -> ConversionQuote:
        raise NotImplementedError("Subclasses must implement get_conversion_quote()")

    @abc.abstractmethod
    def accept_conversion_quote(self, quote_id: str) -> ConversionOrder:
        raise NotImplementedError("Subclasses must implement accept_conversion_quote()")
