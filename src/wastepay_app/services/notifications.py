"""SMS gateway abstraction used for reminders, receipts and login codes."""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass

from wastepay_app.core.crypto import mask_phone
from wastepay_app.core.errors import DeliveryError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SmsMessage:
    phone: str
    body: str


class SmsGateway(ABC):
    """Delivers one text message; raises DeliveryError when it cannot."""

    @abstractmethod
    def send(self, phone: str, body: str) -> None:
        """Send ``body`` to ``phone``."""


class LoggingSmsGateway(SmsGateway):
    """Stand-in gateway that logs and keeps an outbox instead of sending.

    Numbers listed in ``unreachable`` fail with DeliveryError, which lets
    callers exercise their partial-failure handling.
    """

    def __init__(self, unreachable: set[str] | None = None):
        self.unreachable = set(unreachable or ())
        self.outbox: list[SmsMessage] = []
        self._lock = threading.Lock()

    def send(self, phone: str, body: str) -> None:
        if phone in self.unreachable:
            raise DeliveryError(f"Recipient unreachable: {mask_phone(phone)}")
        with self._lock:
            self.outbox.append(SmsMessage(phone=phone, body=body))
        logger.info("SMS to %s: %s", mask_phone(phone), body)

    def messages_for(self, phone: str) -> list[SmsMessage]:
        with self._lock:
            return [message for message in self.outbox if message.phone == phone]
