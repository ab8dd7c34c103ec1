"""Role-based sign-in: admin password, driver phone, household one-time code."""

from __future__ import annotations

import logging
import secrets
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable

from wastepay_app.core.config import AuthConfig
from wastepay_app.core.crypto import CodeSigner, mask_phone, verify_password
from wastepay_app.core.errors import AuthenticationError, NotFoundError
from wastepay_app.core.validation import validate_phone
from wastepay_app.models.household import Household
from wastepay_app.models.staff import Admin, Driver
from wastepay_app.repositories.household_repository import HouseholdRepository
from wastepay_app.repositories.staff_repository import AdminRepository, StaffRepository
from wastepay_app.services.notifications import SmsGateway

logger = logging.getLogger(__name__)

CODE_DIGITS = 6


def _normalize_phone(phone: str, error: Exception) -> str:
    """Clean a typed phone the way registration stores it; raise ``error`` if malformed."""
    try:
        return validate_phone(phone)
    except ValueError as invalid:
        raise error from invalid


@dataclass
class _PendingCode:
    digest: bytes
    expires_at: datetime
    attempts_left: int


class AuthService:
    """Validates sign-in for the three roles."""

    def __init__(
        self,
        admin_repo: AdminRepository,
        staff_repo: StaffRepository,
        household_repo: HouseholdRepository,
        sms_gateway: SmsGateway,
        config: AuthConfig,
        signer: CodeSigner | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._admin_repo = admin_repo
        self._staff_repo = staff_repo
        self._household_repo = household_repo
        self._sms_gateway = sms_gateway
        self._config = config
        self._signer = signer or CodeSigner.generate()
        self._clock = clock
        self._pending: dict[str, _PendingCode] = {}
        self._lock = threading.Lock()

    async def login_admin(self, username: str, password: str) -> Admin:
        admin = await self._admin_repo.fetch_admin()
        if (
            admin is None
            or username.strip() != admin.username
            or not verify_password(password, admin.password_hash)
        ):
            logger.info("Admin sign-in rejected")
            raise AuthenticationError("Invalid credentials. Please try again.")
        logger.info("Admin %s signed in", admin.username)
        return admin

    async def login_driver(self, phone: str) -> Driver:
        phone = _normalize_phone(phone, AuthenticationError("Invalid credentials. Please try again."))
        driver = await self._staff_repo.fetch_driver_by_phone(phone)
        if driver is None:
            logger.info("Driver sign-in rejected for %s", mask_phone(phone))
            raise AuthenticationError("Invalid credentials. Please try again.")
        return driver

    async def request_household_code(self, phone: str) -> None:
        """Issue a one-time code to a registered household phone."""
        phone = _normalize_phone(
            phone, NotFoundError("Phone number not registered. Please sign up.")
        )
        if await self._household_repo.fetch_household_by_phone(phone) is None:
            raise NotFoundError("Phone number not registered. Please sign up.")

        code = f"{secrets.randbelow(10**CODE_DIGITS):0{CODE_DIGITS}d}"
        with self._lock:
            self._pending[phone] = _PendingCode(
                digest=self._signer.digest(phone, code),
                expires_at=self._clock() + timedelta(seconds=self._config.otp_ttl_seconds),
                attempts_left=self._config.otp_max_attempts,
            )
        self._sms_gateway.send(
            phone,
            f"Your sign-in code is {code}. It expires in "
            f"{self._config.otp_ttl_seconds // 60 or 1} minute(s).",
        )

    async def verify_household_code(self, phone: str, code: str) -> Household:
        """Consume a one-time code and return the household it signs in."""
        phone = _normalize_phone(phone, AuthenticationError("No active code. Request a new one."))
        self._check_code(phone, code.strip())
        household = await self._household_repo.fetch_household_by_phone(phone)
        if household is None:
            raise AuthenticationError("Phone number not registered. Please sign up.")
        logger.info("Household %s signed in", household.id)
        return household

    def _check_code(self, phone: str, code: str) -> None:
        with self._lock:
            pending = self._pending.get(phone)
            if pending is None:
                raise AuthenticationError("No active code. Request a new one.")
            if self._clock() >= pending.expires_at:
                del self._pending[phone]
                raise AuthenticationError("Code expired. Request a new one.")
            if not self._signer.matches(phone, code, pending.digest):
                pending.attempts_left -= 1
                if pending.attempts_left <= 0:
                    del self._pending[phone]
                    raise AuthenticationError("Too many invalid attempts. Request a new code.")
                raise AuthenticationError("Invalid OTP. Please try again.")
            del self._pending[phone]
