"""Tests for household, staff and admin repositories."""

from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from wastepay_app.core.errors import ConflictError, NotFoundError, RepositoryError
from wastepay_app.models.household import HouseholdCreate, PaymentStatus
from wastepay_app.models.staff import StaffCreate, StaffRole
from wastepay_app.repositories.household_repository import HouseholdRepository
from wastepay_app.repositories.latency import SimulatedLatency
from wastepay_app.repositories.staff_repository import AdminRepository, StaffRepository
from wastepay_app.repositories.store import InMemoryEntityStore

NOW = datetime(2024, 7, 15, 10, 30)


class RecordingSleep:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


def build_repositories(sleep=None):
    store = InMemoryEntityStore()
    latency = SimulatedLatency(0.2, sleep=sleep) if sleep else SimulatedLatency(0)
    return (
        HouseholdRepository(store, latency, clock=lambda: NOW),
        StaffRepository(store, latency),
        AdminRepository(store, latency),
    )


def _payload(phone: str = "9123456780") -> HouseholdCreate:
    return HouseholdCreate(
        name="Asha Rao", address="12 Lake Road", phone=phone, assigned_route="Route A"
    )


def test_insert_household_starts_due_with_empty_history() -> None:
    households, _, _ = build_repositories()

    household = asyncio.run(households.insert_household(_payload()))

    assert household.id == 1001
    assert household.status is PaymentStatus.DUE
    assert household.payment_history == []
    assert household.last_collection_date == NOW


def test_fetch_households_returns_snapshot() -> None:
    households, _, _ = build_repositories()
    asyncio.run(households.insert_household(_payload()))

    snapshot = asyncio.run(households.fetch_households())
    snapshot[0].name = "Edited locally"

    assert asyncio.run(households.fetch_household(1001)).name == "Asha Rao"


def test_fetch_by_phone_returns_none_when_missing() -> None:
    households, staff, _ = build_repositories()

    assert asyncio.run(households.fetch_household_by_phone("9000000000")) is None
    assert asyncio.run(staff.fetch_driver_by_phone("9000000000")) is None


def test_update_unknown_household_raises_and_leaves_collection() -> None:
    households, _, _ = build_repositories()
    created = asyncio.run(households.insert_household(_payload()))
    created.id = 9999

    with pytest.raises(NotFoundError):
        asyncio.run(households.update_household(created))

    stored = asyncio.run(households.fetch_households())
    assert [h.id for h in stored] == [1001]


def test_update_household_echoes_record() -> None:
    households, _, _ = build_repositories()
    created = asyncio.run(households.insert_household(_payload()))
    created.status = PaymentStatus.PAID

    saved = asyncio.run(households.update_household(created))

    assert saved == created
    assert asyncio.run(households.fetch_household(1001)).status is PaymentStatus.PAID


def test_register_duplicate_phone_raises_conflict_without_insert() -> None:
    households, _, _ = build_repositories()
    asyncio.run(
        households.register_household("Asha Rao", "12 Lake Road", "9123456780", "Route A")
    )

    with pytest.raises(ConflictError) as error:
        asyncio.run(
            households.register_household("Other", "1 Hill Road", "9123456780", "Route B")
        )

    assert isinstance(error.value, RepositoryError)
    assert len(asyncio.run(households.fetch_households())) == 1


def test_staff_ids_grow_per_role() -> None:
    _, staff, _ = build_repositories()
    driver_payload = StaffCreate("Ramesh Kumar", "6006540930", 10000, "Route A", "MH-12 AB-1234")
    helper_payload = StaffCreate("Gopal Verma", "8877665544", 7000, "Route A")

    first_driver = asyncio.run(staff.insert_staff(driver_payload, StaffRole.DRIVER))
    second_driver = asyncio.run(staff.insert_staff(driver_payload, StaffRole.DRIVER))
    helper = asyncio.run(staff.insert_staff(helper_payload, StaffRole.HELPER))

    assert (first_driver.id, second_driver.id, helper.id) == (1, 2, 1)
    assert first_driver.role is StaffRole.DRIVER
    assert helper.role is StaffRole.HELPER
    assert [d.id for d in asyncio.run(staff.fetch_drivers())] == [1, 2]
    assert [h.id for h in asyncio.run(staff.fetch_helpers())] == [1]


def test_update_staff_checks_id_and_role() -> None:
    _, staff, _ = build_repositories()
    driver = asyncio.run(
        staff.insert_staff(
            StaffCreate("Ramesh Kumar", "6006540930", 10000, "Route A", "MH-12 AB-1234"),
            StaffRole.DRIVER,
        )
    )

    driver.salary = 12000
    assert asyncio.run(staff.update_staff(driver, StaffRole.DRIVER)).salary == 12000

    with pytest.raises(ValueError):
        asyncio.run(staff.update_staff(driver, StaffRole.HELPER))

    driver.id = 77
    with pytest.raises(NotFoundError):
        asyncio.run(staff.update_staff(driver, StaffRole.DRIVER))


def test_fetch_admin_is_none_before_seeding() -> None:
    _, _, admins = build_repositories()

    assert asyncio.run(admins.fetch_admin()) is None


def test_every_operation_awaits_latency() -> None:
    sleep = RecordingSleep()
    households, _, _ = build_repositories(sleep=sleep)

    created = asyncio.run(households.insert_household(_payload()))
    asyncio.run(households.fetch_households())
    asyncio.run(households.fetch_household_by_phone("9123456780"))
    asyncio.run(households.update_household(created))

    assert sleep.calls == [0.2, 0.2, 0.2, 0.2]
