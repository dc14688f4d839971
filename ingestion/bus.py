"""
Event bus
---------
Publish/subscribe with manual acknowledgement and a dead-letter subject.
InMemoryEventBus queues published messages and delivers them on drain(),
so a handler publishing a follow-up event never re-enters itself.
"""

import abc
import logging
from collections import deque
from dataclasses import dataclass, field

from config.settings import settings

logger = logging.getLogger(__name__)


@dataclass
class Message:
    subject: str
    data: bytes
    acked: bool = False
    nacked: bool = False

    def ack(self):
        self.acked = True

    def nak(self):
        self.nacked = True


class EventBus(abc.ABC):

    @abc.abstractmethod
    def publish(self, subject: str, event) -> Message:
        raise NotImplementedError("Subclasses must implement publish()")

    @abc.abstractmethod
    def subscribe(self, subject: str, handler):
        raise NotImplementedError("Subclasses must implement subscribe()")

    @abc.abstractmethod
    def send_to_dlq(self, payload: bytes) -> Message:
        raise NotImplementedError("Subclasses must implement send_to_dlq()")


class InMemoryEventBus(EventBus):

    def __init__(self, dlq_subject: str = None):
        self.dlq_subject = dlq_subject or settings.DLQ_SUBJECT
        self.subscribers = {}
        self.queue = deque()
        self.published = []      # every message ever published, in order

    def publish(self, subject: str, event) -> Message:
        data = event if isinstance(event, (bytes, bytearray)) else event.encode()
        message = Message(subject=subject, data=bytes(data))
        self.queue.append(message)
        self.published.append(message)
        return message

    def subscribe(self, subject: str, handler):
        self.subscribers.setdefault(subject, []).append(handler)

    def send_to_dlq(self, payload: bytes) -> Message:
        logger.warning("Message routed to dead-letter subject %s", self.dlq_subject)
        return self.publish(self.dlq_subject, payload)

    def messages(self, subject: str) -> list:
        return [m for m in self.published if m.subject == subject]

    def drain(self, max_messages: int = None) -> int:
        """Deliver queued messages to subscribers. Returns the number delivered."""
        delivered = 0
        while self.queue and (max_messages is None or delivered < max_messages):
            message = self.queue.popleft()
            for handler in self.subscribers.get(message.subject, []):
                handler(message)
            delivered += 1
        return delivered
