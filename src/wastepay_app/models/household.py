"""Household and payment domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class PaymentStatus(str, Enum):
    PAID = "Paid"
    DUE = "Due"


MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def period_label(moment: datetime) -> str:
    """Return the billing period key for a timestamp, e.g. 'July 2024'.

    Month names are fixed English so the key never follows the process locale.
    """
    return f"{MONTH_NAMES[moment.month - 1]} {moment.year}"


@dataclass
class Payment:
    """One captured monthly fee."""

    id: str
    date: datetime
    amount: int
    month: str


@dataclass
class HouseholdCreate:
    """Input model for creating a household; id, status and history are assigned."""

    name: str
    address: str
    phone: str
    assigned_route: str


@dataclass
class Household:
    """A billed residential unit.

    ``payment_history`` is kept newest first. ``status`` is Paid for the
    current period exactly when the history holds an entry for that period.
    """

    id: int
    name: str
    address: str
    phone: str
    last_collection_date: datetime
    status: PaymentStatus
    assigned_route: str
    payment_history: list[Payment] = field(default_factory=list)

    def has_payment_for(self, month: str) -> bool:
        return any(payment.month == month for payment in self.payment_history)
