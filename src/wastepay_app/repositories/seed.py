"""Startup seed data for the in-memory store."""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Callable

from wastepay_app.core.config import AppConfig
from wastepay_app.core.crypto import hash_password
from wastepay_app.models.household import Household, Payment, PaymentStatus, period_label
from wastepay_app.models.staff import Admin, StaffCreate, StaffRole
from wastepay_app.repositories.staff_repository import build_staff
from wastepay_app.repositories.store import Collection, EntityStore

logger = logging.getLogger(__name__)

FIRST_NAMES = [
    "Aarav", "Vivaan", "Aditya", "Vihaan", "Arjun", "Sai", "Reyansh", "Ayaan", "Krishna", "Ishaan",
    "Saanvi", "Aadhya", "Kiara", "Diya", "Pari", "Ananya", "Riya", "Aarohi", "Amaira", "Myra",
]
SURNAMES = ["Patel", "Sharma", "Singh", "Kumar", "Gupta", "Verma", "Yadav", "Shah", "Mehta", "Joshi"]
BUILDINGS = [
    "Rose Villa", "Sunshine Apartments", "Greenwood Park", "Riverdale Complex", "Hilltop View",
    "Ocean Breeze", "Orchid Tower", "Maple Street", "Pinecrest Manor", "Cedar Avenue",
]
ROUTES = ["Route A", "Route B"]
PHONE_PREFIX = "987654"
MAX_SYNTHETIC_HOUSEHOLDS = 8999

DEMO_HOUSEHOLD_PHONE = "9876541001"

SEED_DRIVERS = [
    StaffCreate("Ramesh Kumar", "6006540930", 10000, "Route A", "MH-12 AB-1234"),
    StaffCreate("Suresh Patel", "9988776656", 10000, "Route B", "MH-14 CD-5678"),
]
SEED_HELPERS = [
    StaffCreate("Gopal Verma", "8877665544", 7000, "Route A"),
    StaffCreate("Manoj Singh", "8877665545", 7000, "Route B"),
]


def _previous_period_day(now: datetime, day: int) -> datetime:
    last_of_previous = now.replace(day=1) - timedelta(days=1)
    return last_of_previous.replace(day=min(day, last_of_previous.day))


def _demo_household(household_id: int, now: datetime, fee: int) -> Household:
    current = now.replace(day=min(5, now.day))
    previous = _previous_period_day(now, 4)
    return Household(
        id=household_id,
        name="Test User",
        address="123 Test Street",
        phone=DEMO_HOUSEHOLD_PHONE,
        last_collection_date=current,
        status=PaymentStatus.PAID,
        assigned_route="Route A",
        payment_history=[
            Payment(
                id=f"receipt-{household_id}-1",
                date=current,
                amount=fee,
                month=period_label(current),
            ),
            Payment(
                id=f"receipt-{household_id}-2",
                date=previous,
                amount=fee,
                month=period_label(previous),
            ),
        ],
    )


def _synthetic_household(
    household_id: int,
    now: datetime,
    fee: int,
    paid_ratio: float,
    rng: random.Random,
) -> Household:
    has_paid = rng.random() < paid_ratio
    history: list[Payment] = []
    if has_paid:
        paid_on = now.replace(day=min(rng.randint(1, 15), now.day))
        history.append(
            Payment(
                id=f"receipt-{household_id}-1",
                date=paid_on,
                amount=fee,
                month=period_label(now),
            )
        )
    return Household(
        id=household_id,
        name=f"{rng.choice(FIRST_NAMES)} {rng.choice(SURNAMES)}",
        address=f"{rng.randint(1, 100)} {rng.choice(BUILDINGS)}",
        phone=f"{PHONE_PREFIX}{household_id:04d}",
        last_collection_date=now - timedelta(days=rng.randint(0, 4)),
        status=PaymentStatus.PAID if has_paid else PaymentStatus.DUE,
        assigned_route=rng.choice(ROUTES),
        payment_history=history,
    )


def seed_store(
    store: EntityStore,
    config: AppConfig,
    admin_password: str,
    clock: Callable[[], datetime] = datetime.now,
) -> None:
    """Populate households, drivers, helpers and the admin credential.

    Household 1001 is always the fixed demo record (phone 9876541001, Paid,
    two history entries); the rest are generated from ``config.seed``.
    """
    count = config.seed.household_count
    if count < 1 or count > MAX_SYNTHETIC_HOUSEHOLDS:
        raise ValueError(f"seed.household_count must be between 1 and {MAX_SYNTHETIC_HOUSEHOLDS}.")

    now = clock()
    fee = config.billing.household_fee
    rng = random.Random(config.seed.random_seed)

    store.insert(Collection.HOUSEHOLDS, lambda new_id: _demo_household(new_id, now, fee))
    for _ in range(count - 1):
        store.insert(
            Collection.HOUSEHOLDS,
            lambda new_id: _synthetic_household(new_id, now, fee, config.seed.paid_ratio, rng),
        )

    for payload in SEED_DRIVERS:
        store.insert(Collection.DRIVERS, lambda new_id: build_staff(new_id, payload, StaffRole.DRIVER))
    for payload in SEED_HELPERS:
        store.insert(Collection.HELPERS, lambda new_id: build_staff(new_id, payload, StaffRole.HELPER))

    store.set_admin(
        Admin(username=config.auth.admin_username, password_hash=hash_password(admin_password))
    )
    logger.info(
        "Seeded %d households, %d drivers, %d helpers",
        count,
        len(SEED_DRIVERS),
        len(SEED_HELPERS),
    )
