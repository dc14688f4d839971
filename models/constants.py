from enum import Enum

QUOTE_ASSET = "USDT"


class RiskLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Algorithm(str, Enum):
    SWING_TRADING = "swing_trading"
    SCALPING = "scalping"
    DAY_TRADING = "day_trading"


class HoldingStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class OrderStatus(str, Enum):
    OPEN = "open"            # created, quote not yet accepted
    ACCEPTED = "accepted"    # quote accepted on the exchange, settlement pending
    FILLED = "filled"
    CANCELLED = "cancelled"


class OrderType(str, Enum):
    STOP_LOSS = "stop_loss"
    TAKE_PROFIT = "take_profit"


class TradeSignal(str, Enum):
    HOLD = "hold"
    SELL = "sell"
