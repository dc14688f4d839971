from .notifier import Notifier, TelegramNotifier, LogNotifier, build_notifier
from .messages import trade_message, stop_loss_message

__all__ = [
    "Notifier", "TelegramNotifier", "LogNotifier", "build_notifier",
    "trade_message", "stop_loss_message",
]
