"""Payment reminder batches."""

from __future__ import annotations

import json
import logging
from typing import Iterable

from wastepay_app.core.config import BillingConfig
from wastepay_app.core.crypto import mask_phone
from wastepay_app.core.errors import DeliveryError
from wastepay_app.models.household import Household, PaymentStatus
from wastepay_app.repositories.audit_repository import AuditRepository
from wastepay_app.repositories.latency import SimulatedLatency
from wastepay_app.services.notifications import SmsGateway

logger = logging.getLogger(__name__)


class ReminderService:
    """Sends reminders to Due households; one failed recipient never stops the batch."""

    def __init__(
        self,
        sms_gateway: SmsGateway,
        audit_repo: AuditRepository,
        billing: BillingConfig,
        latency: SimulatedLatency,
    ):
        self._sms_gateway = sms_gateway
        self._audit_repo = audit_repo
        self._billing = billing
        self._latency = latency

    async def send_reminders(self, households: Iterable[Household]) -> int:
        """Return how many reminders were delivered."""
        await self._latency()
        attempted = 0
        delivered = 0
        for household in households:
            if household.status is not PaymentStatus.DUE:
                continue
            attempted += 1
            body = (
                f"Dear {household.name}, your waste collection fee of "
                f"Rs.{self._billing.household_fee} is due. Please pay at the earliest."
            )
            try:
                self._sms_gateway.send(household.phone, body)
            except DeliveryError as error:
                logger.warning(
                    "Reminder for household %s to %s failed: %s",
                    household.id,
                    mask_phone(household.phone),
                    error,
                )
                continue
            delivered += 1

        self._audit_repo.add_log(
            "NOTIFY",
            "household",
            None,
            json.dumps(
                {"event": "payment reminders", "attempted": attempted, "delivered": delivered},
                ensure_ascii=False,
            ),
        )
        logger.info("Reminders delivered: %d of %d", delivered, attempted)
        return delivered
