"""Staff service."""

from __future__ import annotations

import json
from dataclasses import asdict

from wastepay_app.core.crypto import mask_phone
from wastepay_app.core.errors import ConflictError, NotFoundError
from wastepay_app.core.validation import (
    validate_phone,
    validate_required_text,
    validate_route,
    validate_salary,
)
from wastepay_app.models.staff import StaffCreate, StaffMember, StaffRole
from wastepay_app.repositories.audit_repository import AuditRepository
from wastepay_app.repositories.staff_repository import StaffRepository, build_staff


class StaffService:
    """Coordinates driver and helper use cases."""

    def __init__(self, staff_repo: StaffRepository, audit_repo: AuditRepository):
        self._staff_repo = staff_repo
        self._audit_repo = audit_repo

    @staticmethod
    def _validate(payload: StaffCreate, role: StaffRole) -> StaffCreate:
        vehicle_details = ""
        if role is StaffRole.DRIVER:
            vehicle_details = validate_required_text(payload.vehicle_details, "Vehicle details")
        return StaffCreate(
            name=validate_required_text(payload.name, "Name"),
            phone=validate_phone(payload.phone),
            salary=validate_salary(payload.salary),
            assigned_route=validate_route(payload.assigned_route),
            vehicle_details=vehicle_details,
        )

    async def _ensure_driver_phone_free(self, phone: str, staff_id: int | None = None) -> None:
        """Driver sign-in is by phone, so two drivers may not share one."""
        owner = await self._staff_repo.fetch_driver_by_phone(phone)
        if owner is not None and owner.id != staff_id:
            raise ConflictError("Phone number already assigned to another driver.")

    async def list_staff(self, role: StaffRole) -> list[StaffMember]:
        return await self._staff_repo.fetch_staff(role)

    async def add_staff(self, payload: StaffCreate, role: StaffRole) -> StaffMember:
        """Validate, persist and audit a new driver or helper."""
        normalized = self._validate(payload, role)
        if role is StaffRole.DRIVER:
            await self._ensure_driver_phone_free(normalized.phone)
        member = await self._staff_repo.insert_staff(normalized, role)
        self._audit_repo.add_log(
            "CREATE",
            role.value.lower(),
            member.id,
            json.dumps({"event": "staff created", "after": self._snapshot(member)}, ensure_ascii=False),
        )
        return member

    async def update_staff(self, staff_id: int, payload: StaffCreate, role: StaffRole) -> StaffMember:
        """Replace a driver or helper record with the edited values."""
        existing = {member.id: member for member in await self._staff_repo.fetch_staff(role)}
        before = existing.get(staff_id)
        if before is None:
            raise NotFoundError(f"Staff not found: role={role.value} id={staff_id}")

        normalized = self._validate(payload, role)
        if role is StaffRole.DRIVER:
            await self._ensure_driver_phone_free(normalized.phone, staff_id)
        updated = build_staff(staff_id, normalized, role)
        saved = await self._staff_repo.update_staff(updated, role)
        self._audit_repo.add_log(
            "UPDATE",
            role.value.lower(),
            staff_id,
            json.dumps(
                {
                    "event": "staff updated",
                    "changes": self._diff(
                        self._snapshot(before, masked=False),
                        self._snapshot(saved, masked=False),
                    ),
                },
                ensure_ascii=False,
            ),
        )
        return saved

    @staticmethod
    def _snapshot(member: StaffMember, masked: bool = True) -> dict[str, str]:
        data = {key: str(value) for key, value in asdict(member).items() if key != "role"}
        if masked:
            data["phone"] = mask_phone(member.phone)
        return data

    @staticmethod
    def _diff(before: dict[str, str], after: dict[str, str]) -> dict[str, dict[str, str]]:
        """Return changed fields for audit logs, comparing raw values and masking phones."""
        changes: dict[str, dict[str, str]] = {}
        for key in sorted(set(before) | set(after)):
            old = before.get(key, "")
            new = after.get(key, "")
            if old != new:
                if key == "phone":
                    old, new = mask_phone(old), mask_phone(new)
                changes[key] = {"before": old, "after": new}
        return changes
