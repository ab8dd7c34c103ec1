"""Household service with validation, payment status changes and audit logs."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable

from wastepay_app.core.config import BillingConfig
from wastepay_app.core.crypto import mask_phone
from wastepay_app.core.errors import ConflictError, DeliveryError, NotFoundError
from wastepay_app.core.validation import (
    UNASSIGNED_ROUTE,
    validate_phone,
    validate_required_text,
    validate_route,
)
from wastepay_app.models.household import (
    Household,
    HouseholdCreate,
    Payment,
    PaymentStatus,
    period_label,
)
from wastepay_app.repositories.audit_repository import AuditRepository
from wastepay_app.repositories.household_repository import HouseholdRepository
from wastepay_app.services.notifications import SmsGateway

logger = logging.getLogger(__name__)


def apply_payment_status(
    household: Household,
    status: PaymentStatus,
    now: datetime,
    fee: int,
) -> Household:
    """Return a copy of ``household`` moved to ``status`` for the period of ``now``.

    Paid prepends one payment for the current period unless one is already
    recorded. Due removes only the current period's entries.
    """
    month = period_label(now)
    history = list(household.payment_history)

    if status is PaymentStatus.PAID:
        if not household.has_payment_for(month):
            history.insert(
                0,
                Payment(
                    id=f"receipt-{household.id}-{int(now.timestamp() * 1000)}",
                    date=now,
                    amount=fee,
                    month=month,
                ),
            )
        return replace(
            household,
            status=PaymentStatus.PAID,
            payment_history=history,
            last_collection_date=now,
        )

    return replace(
        household,
        status=PaymentStatus.DUE,
        payment_history=[payment for payment in history if payment.month != month],
    )


class HouseholdService:
    """Coordinates household use cases."""

    def __init__(
        self,
        household_repo: HouseholdRepository,
        audit_repo: AuditRepository,
        sms_gateway: SmsGateway,
        billing: BillingConfig,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._household_repo = household_repo
        self._audit_repo = audit_repo
        self._sms_gateway = sms_gateway
        self._billing = billing
        self._clock = clock

    @staticmethod
    def _validate(payload: HouseholdCreate) -> HouseholdCreate:
        return HouseholdCreate(
            name=validate_required_text(payload.name, "Name"),
            address=validate_required_text(payload.address, "Address"),
            phone=validate_phone(payload.phone),
            assigned_route=validate_route(payload.assigned_route),
        )

    def current_period(self) -> str:
        return period_label(self._clock())

    async def list_households(self) -> list[Household]:
        return await self._household_repo.fetch_households()

    async def get_household(self, household_id: int) -> Household:
        household = await self._household_repo.fetch_household(household_id)
        if household is None:
            raise NotFoundError(f"Household not found: id={household_id}")
        return household

    async def get_household_by_phone(self, phone: str) -> Household | None:
        """Look up by phone as registration stores it; malformed numbers match nothing."""
        try:
            normalized = validate_phone(phone)
        except ValueError:
            return None
        return await self._household_repo.fetch_household_by_phone(normalized)

    async def add_household(self, payload: HouseholdCreate) -> Household:
        """Validate, reject duplicate phones, persist and audit a new household."""
        normalized = self._validate(payload)
        if await self._household_repo.fetch_household_by_phone(normalized.phone) is not None:
            raise ConflictError("Phone number already registered.")
        household = await self._household_repo.insert_household(normalized)
        self._audit_repo.add_log(
            "CREATE",
            "household",
            household.id,
            json.dumps(
                {"event": "household created", "after": self._snapshot(household)},
                ensure_ascii=False,
            ),
        )
        return household

    async def register_household(
        self,
        name: str,
        address: str,
        phone: str,
        assigned_route: str = UNASSIGNED_ROUTE,
    ) -> Household:
        """Household self-registration."""
        normalized = self._validate(
            HouseholdCreate(name=name, address=address, phone=phone, assigned_route=assigned_route)
        )
        household = await self._household_repo.register_household(
            name=normalized.name,
            address=normalized.address,
            phone=normalized.phone,
            assigned_route=normalized.assigned_route,
        )
        self._audit_repo.add_log(
            "CREATE",
            "household",
            household.id,
            json.dumps(
                {"event": "household registered", "after": self._snapshot(household)},
                ensure_ascii=False,
            ),
        )
        logger.info("Household %s registered", household.id)
        return household

    async def update_household(self, household_id: int, payload: HouseholdCreate) -> Household:
        """Merge edited fields into the stored record and replace it."""
        before = await self.get_household(household_id)
        normalized = self._validate(payload)
        owner = await self._household_repo.fetch_household_by_phone(normalized.phone)
        if owner is not None and owner.id != household_id:
            raise ConflictError("Phone number already registered.")

        merged = replace(
            before,
            name=normalized.name,
            address=normalized.address,
            phone=normalized.phone,
            assigned_route=normalized.assigned_route,
        )
        saved = await self._household_repo.update_household(merged)
        self._audit_repo.add_log(
            "UPDATE",
            "household",
            household_id,
            json.dumps(
                {
                    "event": "household updated",
                    "changes": self._diff(
                        self._snapshot(before, masked=False),
                        self._snapshot(saved, masked=False),
                    ),
                },
                ensure_ascii=False,
            ),
        )
        return saved

    async def set_payment_status(self, household_id: int, status: PaymentStatus) -> Household:
        """Mark the current period Paid or Due and send a receipt for new payments."""
        before = await self.get_household(household_id)
        now = self._clock()
        updated = apply_payment_status(before, status, now, self._billing.household_fee)
        saved = await self._household_repo.update_household(updated)

        added = len(saved.payment_history) - len(before.payment_history)
        self._audit_repo.add_log(
            "UPDATE",
            "household",
            household_id,
            json.dumps(
                {
                    "event": f"payment marked {status.value}",
                    "period": period_label(now),
                    "changes": self._diff(
                        self._snapshot(before, masked=False),
                        self._snapshot(saved, masked=False),
                    ),
                },
                ensure_ascii=False,
            ),
        )
        if status is PaymentStatus.PAID and added > 0:
            self._send_receipt(saved, saved.payment_history[0])
        return saved

    def _send_receipt(self, household: Household, payment: Payment) -> None:
        body = (
            f"Payment of Rs.{payment.amount} received for {payment.month}. "
            f"Receipt {payment.id}. Thank you, {household.name}."
        )
        try:
            self._sms_gateway.send(household.phone, body)
        except DeliveryError as error:
            logger.warning(
                "Receipt for household %s to %s not delivered: %s",
                household.id,
                mask_phone(household.phone),
                error,
            )

    @staticmethod
    def _snapshot(household: Household, masked: bool = True) -> dict[str, str]:
        """Build a snapshot for audit logs; phones are masked unless ``masked`` is False."""
        return {
            "name": household.name,
            "address": household.address,
            "phone": mask_phone(household.phone) if masked else household.phone,
            "assigned_route": household.assigned_route,
            "status": household.status.value,
            "payments": str(len(household.payment_history)),
        }

    @staticmethod
    def _diff(before: dict[str, str], after: dict[str, str]) -> dict[str, dict[str, str]]:
        """Return changed fields for audit logs, comparing raw values and masking phones."""
        changes: dict[str, dict[str, str]] = {}
        for key in sorted(set(before) | set(after)):
            old = before.get(key, "")
            new = after.get(key, "")
            if old != new:
                if key == "phone":
                    old, new = mask_phone(old), mask_phone(new)
                changes[key] = {"before": old, "after": new}
        return changes
