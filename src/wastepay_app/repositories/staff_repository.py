"""Driver and helper repository; every call is scoped by an explicit role."""

from __future__ import annotations

import logging

from wastepay_app.core.errors import NotFoundError
from wastepay_app.models.staff import Admin, Driver, Helper, StaffCreate, StaffMember, StaffRole
from wastepay_app.repositories.latency import SimulatedLatency
from wastepay_app.repositories.store import Collection, EntityStore

logger = logging.getLogger(__name__)


def build_staff(staff_id: int, payload: StaffCreate, role: StaffRole) -> StaffMember:
    """Create the record variant selected by ``role``."""
    if role is StaffRole.DRIVER:
        return Driver(
            id=staff_id,
            name=payload.name,
            phone=payload.phone,
            salary=payload.salary,
            assigned_route=payload.assigned_route,
            vehicle_details=payload.vehicle_details,
        )
    if role is StaffRole.HELPER:
        return Helper(
            id=staff_id,
            name=payload.name,
            phone=payload.phone,
            salary=payload.salary,
            assigned_route=payload.assigned_route,
        )
    raise ValueError(f"Unsupported staff role: {role!r}")


class StaffRepository:
    """Async staff reads and writes with simulated latency."""

    def __init__(self, store: EntityStore, latency: SimulatedLatency):
        self._store = store
        self._latency = latency

    async def fetch_drivers(self) -> list[Driver]:
        return await self.fetch_staff(StaffRole.DRIVER)

    async def fetch_helpers(self) -> list[Helper]:
        return await self.fetch_staff(StaffRole.HELPER)

    async def fetch_staff(self, role: StaffRole) -> list[StaffMember]:
        await self._latency()
        return self._store.list_records(Collection.for_role(role))

    async def fetch_driver_by_phone(self, phone: str) -> Driver | None:
        await self._latency()
        return self._store.find(Collection.DRIVERS, lambda d: d.phone == phone)

    async def insert_staff(self, payload: StaffCreate, role: StaffRole) -> StaffMember:
        """Insert into the role's collection, using that role's id sequence."""
        member = self._store.insert(
            Collection.for_role(role),
            lambda new_id: build_staff(new_id, payload, role),
        )
        logger.debug("Inserted %s id=%s", role.value.lower(), member.id)
        await self._latency()
        return member

    async def update_staff(self, member: StaffMember, role: StaffRole) -> StaffMember:
        """Replace the stored record with the same id in the role's collection."""
        if member.role is not role:
            raise ValueError(f"Record role {member.role.value} does not match {role.value}.")
        if not self._store.replace(Collection.for_role(role), member):
            raise NotFoundError(f"Staff not found: role={role.value} id={member.id}")
        await self._latency()
        return member


class AdminRepository:
    """Read-only access to the admin credential."""

    def __init__(self, store: EntityStore, latency: SimulatedLatency):
        self._store = store
        self._latency = latency

    async def fetch_admin(self) -> Admin | None:
        await self._latency()
        return self._store.get_admin()
