"""Tests for reminder batches."""

from __future__ import annotations

import asyncio
import json

from wastepay_app.models.household import PaymentStatus


def test_reminders_only_target_due_households(container, gateway) -> None:
    households = asyncio.run(container.household_service.list_households())
    due = [h for h in households if h.status is PaymentStatus.DUE]

    delivered = asyncio.run(container.reminder_service.send_reminders(households))

    assert delivered == len(due)
    assert {message.phone for message in gateway.outbox} == {h.phone for h in due}
    assert gateway.messages_for("9876541001") == []


def test_partial_failure_reduces_count(container, gateway) -> None:
    service = container.household_service
    due = [
        asyncio.run(service.set_payment_status(household_id, PaymentStatus.DUE))
        for household_id in (1002, 1003, 1004)
    ]
    gateway.unreachable.add(due[0].phone)

    delivered = asyncio.run(container.reminder_service.send_reminders(due))

    assert delivered == len(due) - 1
    assert gateway.messages_for(due[0].phone) == []
    assert len(gateway.messages_for(due[-1].phone)) == 1

    log = container.audit_repo.list_logs(action="NOTIFY")[0]
    assert json.loads(log["detail"]) == {
        "event": "payment reminders",
        "attempted": len(due),
        "delivered": len(due) - 1,
    }


def test_no_due_households_sends_nothing(container, gateway) -> None:
    demo = asyncio.run(container.household_service.get_household(1001))

    assert asyncio.run(container.reminder_service.send_reminders([demo])) == 0
    assert gateway.outbox == []
