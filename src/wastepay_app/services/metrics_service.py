"""Dashboard financial metrics derived from the household collection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Sequence

from wastepay_app.core.config import BillingConfig
from wastepay_app.models.household import Household, PaymentStatus
from wastepay_app.models.staff import StaffMember


@dataclass(frozen=True)
class BillingMetrics:
    total_households: int
    paid_count: int
    due_count: int
    household_collections: int
    total_collections: int
    pending_amount: int
    total_expenses: int
    net_profit: int
    paid_percentage: int


def compute_metrics(
    households: Sequence[Household],
    billing: BillingConfig,
    staff: Iterable[StaffMember] = (),
) -> BillingMetrics:
    """Recompute every figure from scratch.

    Expenses are the configured ``total_salaries`` unless ``salary_source``
    is ``staff``, in which case the salaries of ``staff`` are summed.
    """
    total = len(households)
    paid_count = sum(1 for household in households if household.status is PaymentStatus.PAID)
    due_count = total - paid_count

    household_collections = paid_count * billing.household_fee
    total_collections = household_collections + billing.commercial_income
    pending_amount = due_count * billing.household_fee

    if billing.salary_source == "staff":
        total_expenses = sum(member.salary for member in staff)
    else:
        total_expenses = billing.total_salaries

    return BillingMetrics(
        total_households=total,
        paid_count=paid_count,
        due_count=due_count,
        household_collections=household_collections,
        total_collections=total_collections,
        pending_amount=pending_amount,
        total_expenses=total_expenses,
        net_profit=total_collections - total_expenses,
        paid_percentage=round(paid_count * 100 / total) if total else 0,
    )
