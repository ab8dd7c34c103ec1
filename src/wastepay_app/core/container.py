"""Application dependency container."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable

from wastepay_app.core.config import AppConfig, ensure_admin_password, load_config
from wastepay_app.repositories.audit_repository import AuditRepository
from wastepay_app.repositories.household_repository import HouseholdRepository
from wastepay_app.repositories.latency import SimulatedLatency
from wastepay_app.repositories.seed import seed_store
from wastepay_app.repositories.staff_repository import AdminRepository, StaffRepository
from wastepay_app.repositories.store import EntityStore, InMemoryEntityStore
from wastepay_app.services.auth_service import AuthService
from wastepay_app.services.household_service import HouseholdService
from wastepay_app.services.notifications import LoggingSmsGateway, SmsGateway
from wastepay_app.services.reminder_service import ReminderService
from wastepay_app.services.staff_service import StaffService


@dataclass
class ServiceContainer:
    """Wires store, repositories and services."""

    config: AppConfig
    store: EntityStore
    household_service: HouseholdService
    staff_service: StaffService
    reminder_service: ReminderService
    auth_service: AuthService
    audit_repo: AuditRepository
    sms_gateway: SmsGateway


def build_container(
    config: AppConfig | None = None,
    admin_password: str | None = None,
    store: EntityStore | None = None,
    latency: SimulatedLatency | None = None,
    sms_gateway: SmsGateway | None = None,
    clock: Callable[[], datetime] = datetime.now,
) -> ServiceContainer:
    """Build dependencies and seed the store."""
    config = config or load_config()
    store = store or InMemoryEntityStore()
    latency = latency or SimulatedLatency.from_config(config)
    sms_gateway = sms_gateway or LoggingSmsGateway()

    if admin_password is None:
        admin_password = ensure_admin_password(config.auth.admin_password_env)
    seed_store(store, config, admin_password, clock=clock)

    audit_repo = AuditRepository(clock=clock)
    household_repo = HouseholdRepository(store, latency, clock=clock)
    staff_repo = StaffRepository(store, latency)
    admin_repo = AdminRepository(store, latency)

    return ServiceContainer(
        config=config,
        store=store,
        household_service=HouseholdService(
            household_repo, audit_repo, sms_gateway, config.billing, clock=clock
        ),
        staff_service=StaffService(staff_repo, audit_repo),
        reminder_service=ReminderService(sms_gateway, audit_repo, config.billing, latency),
        auth_service=AuthService(
            admin_repo, staff_repo, household_repo, sms_gateway, config.auth, clock=clock
        ),
        audit_repo=audit_repo,
        sms_gateway=sms_gateway,
    )
