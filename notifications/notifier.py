import abc
import logging

import requests

from config.settings import settings

logger = logging.getLogger(__name__)


class Notifier(abc.ABC):
    """Delivers operator messages. Delivery failures are logged, never raised."""

    @abc.abstractmethod
    def send_message(self, text: str) -> bool:
        raise NotImplementedError("Subclasses must implement send_message()")


class LogNotifier(Notifier):
    """Writes messages to the log and keeps them in ``sent`` (used by tests and demos)."""

    def __init__(self):
        self.sent = []

    def send_message(self, text: str) -> bool:
        self.sent.append(text)
        logger.info("Notification: %s", text.replace("\n", " | "))
        return True


class TelegramNotifier(Notifier):
    API_URL = "https://api.telegram.org/bot{token}/sendMessage"

    def __init__(self, bot_token: str, chat_id: str, timeout: int = 10):
        self.bot_token = bot_token.strip()
        self.chat_id = str(chat_id).strip()
        self.timeout = timeout

    def send_message(self, text: str) -> bool:
        if not self.bot_token or not self.chat_id:
            logger.warning("Telegram credentials missing, message dropped")
            return False
        url = self.API_URL.format(token=self.bot_token)
        try:
            response = requests.post(url, json={"chat_id": self.chat_id, "text": text},
                                     timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as exc:
            logger.warning("Telegram notification failed: %s", exc)
            return False
        logger.info("Telegram message sent to chat %s", self.chat_id)
        return True


def build_notifier() -> Notifier:
    """Telegram when credentials are configured, log output otherwise."""
    if settings.TELEGRAM_BOT_TOKEN and settings.TELEGRAM_CHAT_ID:
        return TelegramNotifier(settings.TELEGRAM_BOT_TOKEN, settings.TELEGRAM_CHAT_ID)
    return LogNotifier()
