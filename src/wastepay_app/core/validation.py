"""Input validation rules for household and staff records."""

from __future__ import annotations

import re

PHONE_PATTERN = re.compile(r"^\d{10}$")
NON_DIGIT_PATTERN = re.compile(r"[^\d]")
MAX_SALARY = 10_000_000
UNASSIGNED_ROUTE = "Unassigned"


def validate_required_text(value: str, field_name: str) -> str:
    """Validate non-empty text fields."""
    normalized = (value or "").strip()
    if not normalized:
        raise ValueError(f"{field_name} is required.")
    return normalized


def validate_phone(phone: str) -> str:
    """Validate a 10-digit mobile number, ignoring spaces and dashes."""
    digits = NON_DIGIT_PATTERN.sub("", (phone or "").strip())
    if not PHONE_PATTERN.match(digits):
        raise ValueError("Phone number must have exactly 10 digits.")
    return digits


def validate_route(route: str) -> str:
    """Validate a route label; blank input falls back to Unassigned."""
    normalized = (route or "").strip()
    return normalized or UNASSIGNED_ROUTE


def validate_salary(salary: int) -> int:
    """Validate monthly salary range."""
    try:
        value = int(salary)
    except (TypeError, ValueError) as error:
        raise ValueError("Salary must be a whole number.") from error
    if value <= 0:
        raise ValueError("Salary must be positive.")
    if value > MAX_SALARY:
        raise ValueError(f"Salary exceeds the limit ({MAX_SALARY:,}).")
    return value
