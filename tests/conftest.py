from __future__ import annotations

from datetime import datetime

import pytest

from wastepay_app.core.config import (
    AppConfig,
    AuthConfig,
    BillingConfig,
    LoggingConfig,
    RepositoryConfig,
    SeedConfig,
)
from wastepay_app.core.container import build_container
from wastepay_app.repositories.latency import SimulatedLatency
from wastepay_app.services.notifications import LoggingSmsGateway

NOW = datetime(2024, 7, 15, 10, 30)
ADMIN_PASSWORD = "s3cret-pass"


class FixedClock:
    """Manually advanced clock for time-dependent services."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def make_config(household_count: int = 20) -> AppConfig:
    return AppConfig(
        billing=BillingConfig(
            household_fee=100,
            commercial_income=50000,
            total_salaries=34000,
            salary_source="fixed",
        ),
        repository=RepositoryConfig(latency_ms=0),
        seed=SeedConfig(household_count=household_count, paid_ratio=0.7, random_seed=7),
        auth=AuthConfig(
            admin_username="Anzar24",
            admin_password_env="WASTEPAY_ADMIN_PASSWORD",
            otp_ttl_seconds=300,
            otp_max_attempts=3,
        ),
        logging=LoggingConfig(level="INFO"),
    )


@pytest.fixture
def config() -> AppConfig:
    return make_config()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def gateway() -> LoggingSmsGateway:
    return LoggingSmsGateway()


@pytest.fixture
def container(config, clock, gateway):
    return build_container(
        config,
        admin_password=ADMIN_PASSWORD,
        latency=SimulatedLatency(0),
        sms_gateway=gateway,
        clock=clock,
    )


@pytest.fixture
def admin_password() -> str:
    return ADMIN_PASSWORD
