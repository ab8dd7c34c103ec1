"""Seed, register and sign-in flow through the service container."""

from __future__ import annotations

import asyncio
import re

import pytest

from wastepay_app.core.errors import ConflictError
from wastepay_app.models.household import PaymentStatus
from wastepay_app.services.metrics_service import compute_metrics
from wastepay_app.services.table_query import SortState, query_households


def test_register_then_duplicate_registration(container) -> None:
    households = container.household_service
    seeded = asyncio.run(households.list_households())
    demo = seeded[0]

    assert (demo.id, demo.phone, demo.status) == (1001, "9876541001", PaymentStatus.PAID)
    assert len(demo.payment_history) == 2

    created = asyncio.run(households.register_household("Meera Iyer", "7 Park Lane", "9811122233"))
    after_register = asyncio.run(households.list_households())

    assert created.id == max(h.id for h in seeded) + 1
    assert after_register[-1] == created
    assert created.status is PaymentStatus.DUE
    assert created.payment_history == []

    with pytest.raises(ConflictError):
        asyncio.run(households.register_household("Meera Iyer", "7 Park Lane", "9811122233"))
    assert len(asyncio.run(households.list_households())) == len(after_register)


def test_registered_household_can_sign_in_and_pay(container, gateway) -> None:
    created = asyncio.run(
        container.household_service.register_household("Meera Iyer", "7 Park Lane", "9811122233")
    )
    asyncio.run(container.auth_service.request_household_code("9811122233"))
    code = re.search(r"\b(\d{6})\b", gateway.messages_for("9811122233")[-1].body).group(1)

    signed_in = asyncio.run(container.auth_service.verify_household_code("9811122233", code))
    paid = asyncio.run(container.household_service.set_payment_status(created.id, PaymentStatus.PAID))

    assert signed_in.id == created.id
    assert [p.month for p in paid.payment_history] == ["July 2024"]


def test_dashboard_view_of_seeded_data(container) -> None:
    households = asyncio.run(container.household_service.list_households())
    metrics = compute_metrics(households, container.config.billing)

    paid = sum(1 for h in households if h.status is PaymentStatus.PAID)
    assert metrics.total_collections == paid * 100 + 50000
    assert metrics.pending_amount == (len(households) - paid) * 100

    due_view = query_households(households, status_filter="Due", sort=SortState("name"))
    assert all(h.status is PaymentStatus.DUE for h in due_view)
    assert len(due_view) == len(households) - paid
