"""Tests for role-based sign-in."""

from __future__ import annotations

import asyncio
import re
from datetime import timedelta

import pytest

from wastepay_app.core.errors import AuthenticationError, NotFoundError

DEMO_PHONE = "9876541001"


def _issued_code(gateway, phone: str) -> str:
    body = gateway.messages_for(phone)[-1].body
    return re.search(r"\b(\d{6})\b", body).group(1)


def test_admin_login(container, admin_password) -> None:
    auth = container.auth_service

    admin = asyncio.run(auth.login_admin("Anzar24", admin_password))

    assert admin.username == "Anzar24"
    assert admin_password not in admin.password_hash
    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        asyncio.run(auth.login_admin("Anzar24", "wrong"))
    with pytest.raises(AuthenticationError):
        asyncio.run(auth.login_admin("someone", admin_password))


def test_driver_login_by_phone(container) -> None:
    driver = asyncio.run(container.auth_service.login_driver(" 6006540930 "))

    assert driver.name == "Ramesh Kumar"
    with pytest.raises(AuthenticationError):
        asyncio.run(container.auth_service.login_driver("8877665544"))


def test_household_code_flow_is_single_use(container, gateway) -> None:
    auth = container.auth_service
    asyncio.run(auth.request_household_code(DEMO_PHONE))
    code = _issued_code(gateway, DEMO_PHONE)

    household = asyncio.run(auth.verify_household_code(DEMO_PHONE, code))

    assert household.id == 1001
    with pytest.raises(AuthenticationError, match="No active code"):
        asyncio.run(auth.verify_household_code(DEMO_PHONE, code))


def test_unregistered_phone_cannot_request_code(container, gateway) -> None:
    with pytest.raises(NotFoundError):
        asyncio.run(container.auth_service.request_household_code("9000000000"))
    assert gateway.outbox == []


def test_code_expires(container, gateway, clock) -> None:
    auth = container.auth_service
    asyncio.run(auth.request_household_code(DEMO_PHONE))
    code = _issued_code(gateway, DEMO_PHONE)

    clock.now += timedelta(seconds=301)

    with pytest.raises(AuthenticationError, match="expired"):
        asyncio.run(auth.verify_household_code(DEMO_PHONE, code))


def test_invalid_attempts_are_limited(container, gateway) -> None:
    auth = container.auth_service
    asyncio.run(auth.request_household_code(DEMO_PHONE))
    code = _issued_code(gateway, DEMO_PHONE)
    wrong = "000000" if code != "000000" else "111111"

    for _ in range(2):
        with pytest.raises(AuthenticationError, match="Invalid OTP"):
            asyncio.run(auth.verify_household_code(DEMO_PHONE, wrong))
    with pytest.raises(AuthenticationError, match="Too many"):
        asyncio.run(auth.verify_household_code(DEMO_PHONE, wrong))
    with pytest.raises(AuthenticationError, match="No active code"):
        asyncio.run(auth.verify_household_code(DEMO_PHONE, code))


def test_new_request_replaces_previous_code(container, gateway) -> None:
    auth = container.auth_service
    asyncio.run(auth.request_household_code(DEMO_PHONE))
    first = _issued_code(gateway, DEMO_PHONE)
    asyncio.run(auth.request_household_code(DEMO_PHONE))
    second = _issued_code(gateway, DEMO_PHONE)

    if first != second:
        with pytest.raises(AuthenticationError):
            asyncio.run(auth.verify_household_code(DEMO_PHONE, first))
    assert asyncio.run(auth.verify_household_code(DEMO_PHONE, second)).id == 1001


def test_household_signs_in_with_the_phone_format_used_at_registration(container, gateway) -> None:
    asyncio.run(
        container.household_service.register_household("Meera Iyer", "7 Park Lane", "98111-22233")
    )
    auth = container.auth_service

    asyncio.run(auth.request_household_code("98111-22233"))
    code = _issued_code(gateway, "9811122233")
    household = asyncio.run(auth.verify_household_code(" 98111 22233 ", code))

    assert household.phone == "9811122233"
    found = asyncio.run(container.household_service.get_household_by_phone("98111-22233"))
    assert found.id == household.id


def test_driver_login_ignores_separators(container) -> None:
    assert asyncio.run(container.auth_service.login_driver("60065-40930")).name == "Ramesh Kumar"


def test_malformed_phone_is_rejected(container, gateway) -> None:
    auth = container.auth_service

    with pytest.raises(AuthenticationError):
        asyncio.run(auth.login_driver("12345"))
    with pytest.raises(NotFoundError):
        asyncio.run(auth.request_household_code("98-76"))
    with pytest.raises(AuthenticationError):
        asyncio.run(auth.verify_household_code("abc", "123456"))
    assert asyncio.run(container.household_service.get_household_by_phone("12345")) is None
    assert gateway.outbox == []
