"""Household repository over the entity store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from wastepay_app.core.crypto import mask_phone
from wastepay_app.core.errors import ConflictError, NotFoundError
from wastepay_app.models.household import Household, HouseholdCreate, PaymentStatus
from wastepay_app.repositories.latency import SimulatedLatency
from wastepay_app.repositories.store import Collection, EntityStore

logger = logging.getLogger(__name__)


class HouseholdRepository:
    """Async household reads and writes with simulated latency."""

    def __init__(
        self,
        store: EntityStore,
        latency: SimulatedLatency,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._store = store
        self._latency = latency
        self._clock = clock

    async def fetch_households(self) -> list[Household]:
        """Return a snapshot of all households in insertion order."""
        await self._latency()
        return self._store.list_records(Collection.HOUSEHOLDS)

    async def fetch_household(self, household_id: int) -> Household | None:
        await self._latency()
        return self._store.find(Collection.HOUSEHOLDS, lambda h: h.id == household_id)

    async def fetch_household_by_phone(self, phone: str) -> Household | None:
        await self._latency()
        return self._find_by_phone(phone)

    def _find_by_phone(self, phone: str) -> Household | None:
        return self._store.find(Collection.HOUSEHOLDS, lambda h: h.phone == phone)

    async def insert_household(self, payload: HouseholdCreate) -> Household:
        """Insert a new household as Due with an empty history."""
        now = self._clock()
        household = self._store.insert(
            Collection.HOUSEHOLDS,
            lambda new_id: Household(
                id=new_id,
                name=payload.name,
                address=payload.address,
                phone=payload.phone,
                last_collection_date=now,
                status=PaymentStatus.DUE,
                assigned_route=payload.assigned_route,
                payment_history=[],
            ),
        )
        logger.debug("Inserted household id=%s", household.id)
        await self._latency()
        return household

    async def update_household(self, household: Household) -> Household:
        """Replace the stored household with the same id and echo it back."""
        if not self._store.replace(Collection.HOUSEHOLDS, household):
            raise NotFoundError(f"Household not found: id={household.id}")
        await self._latency()
        return household

    async def register_household(
        self,
        name: str,
        address: str,
        phone: str,
        assigned_route: str,
    ) -> Household:
        """Self-registration: insert unless the phone is already registered."""
        if self._find_by_phone(phone) is not None:
            logger.info("Registration rejected for phone %s", mask_phone(phone))
            raise ConflictError("Phone number already registered.")
        return await self.insert_household(
            HouseholdCreate(name=name, address=address, phone=phone, assigned_route=assigned_route)
        )
