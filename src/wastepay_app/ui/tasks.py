"""Background worker tasks used by the GUI windows."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from PySide6.QtCore import QObject, QRunnable, Signal

from wastepay_app.models.staff import StaffRole

if TYPE_CHECKING:
    from wastepay_app.models.household import Household, HouseholdCreate, PaymentStatus
    from wastepay_app.models.staff import StaffCreate
    from wastepay_app.services.auth_service import AuthService
    from wastepay_app.services.household_service import HouseholdService
    from wastepay_app.services.reminder_service import ReminderService
    from wastepay_app.services.staff_service import StaffService


class ResultSignals(QObject):
    """Signals for background service calls."""

    done = Signal(object)
    error = Signal(str)


class _ServiceTask(QRunnable):
    """Runs one service coroutine on a pool thread and reports through signals."""

    def __init__(self):
        super().__init__()
        self.signals = ResultSignals()

    async def call(self) -> Any:
        raise NotImplementedError

    def run(self) -> None:
        try:
            result = asyncio.run(self.call())
            self.signals.done.emit(result)
        except Exception as error:  # pylint: disable=broad-except
            # Worker boundary: convert any failure to a user-visible message.
            self.signals.error.emit(str(error))


class LoadDashboardTask(_ServiceTask):
    """Load households, drivers and helpers together."""

    def __init__(self, household_service: HouseholdService, staff_service: StaffService):
        super().__init__()
        self.household_service = household_service
        self.staff_service = staff_service

    async def call(self) -> dict[str, list]:
        households, drivers, helpers = await asyncio.gather(
            self.household_service.list_households(),
            self.staff_service.list_staff(StaffRole.DRIVER),
            self.staff_service.list_staff(StaffRole.HELPER),
        )
        return {"households": households, "drivers": drivers, "helpers": helpers}


class LoadHouseholdsTask(_ServiceTask):
    def __init__(self, household_service: HouseholdService):
        super().__init__()
        self.household_service = household_service

    async def call(self) -> list:
        return await self.household_service.list_households()


class SaveHouseholdTask(_ServiceTask):
    """Add a household, or update one when ``household_id`` is given."""

    def __init__(
        self,
        household_service: HouseholdService,
        payload: HouseholdCreate,
        household_id: int | None = None,
    ):
        super().__init__()
        self.household_service = household_service
        self.payload = payload
        self.household_id = household_id

    async def call(self) -> Household:
        if self.household_id is None:
            return await self.household_service.add_household(self.payload)
        return await self.household_service.update_household(self.household_id, self.payload)


class UpdatePaymentStatusTask(_ServiceTask):
    def __init__(
        self,
        household_service: HouseholdService,
        household_id: int,
        status: PaymentStatus,
    ):
        super().__init__()
        self.household_service = household_service
        self.household_id = household_id
        self.status = status

    async def call(self) -> Household:
        return await self.household_service.set_payment_status(self.household_id, self.status)


class SaveStaffTask(_ServiceTask):
    """Add a driver/helper, or update one when ``staff_id`` is given."""

    def __init__(
        self,
        staff_service: StaffService,
        payload: StaffCreate,
        role: StaffRole,
        staff_id: int | None = None,
    ):
        super().__init__()
        self.staff_service = staff_service
        self.payload = payload
        self.role = role
        self.staff_id = staff_id

    async def call(self) -> Any:
        if self.staff_id is None:
            return await self.staff_service.add_staff(self.payload, self.role)
        return await self.staff_service.update_staff(self.staff_id, self.payload, self.role)


class SendRemindersTask(_ServiceTask):
    def __init__(self, reminder_service: ReminderService, households: list[Household]):
        super().__init__()
        self.reminder_service = reminder_service
        self.households = households

    async def call(self) -> int:
        return await self.reminder_service.send_reminders(self.households)


class AdminSignInTask(_ServiceTask):
    def __init__(self, auth_service: AuthService, username: str, password: str):
        super().__init__()
        self.auth_service = auth_service
        self.username = username
        self.password = password

    async def call(self) -> Any:
        return await self.auth_service.login_admin(self.username, self.password)


class DriverSignInTask(_ServiceTask):
    def __init__(self, auth_service: AuthService, phone: str):
        super().__init__()
        self.auth_service = auth_service
        self.phone = phone

    async def call(self) -> Any:
        return await self.auth_service.login_driver(self.phone)


class RequestCodeTask(_ServiceTask):
    def __init__(self, auth_service: AuthService, phone: str):
        super().__init__()
        self.auth_service = auth_service
        self.phone = phone

    async def call(self) -> str:
        await self.auth_service.request_household_code(self.phone)
        return self.phone


class VerifyCodeTask(_ServiceTask):
    def __init__(self, auth_service: AuthService, phone: str, code: str):
        super().__init__()
        self.auth_service = auth_service
        self.phone = phone
        self.code = code

    async def call(self) -> Any:
        return await self.auth_service.verify_household_code(self.phone, self.code)


class RegisterHouseholdTask(_ServiceTask):
    def __init__(self, household_service: HouseholdService, name: str, address: str, phone: str):
        super().__init__()
        self.household_service = household_service
        self.name = name
        self.address = address
        self.phone = phone

    async def call(self) -> Any:
        return await self.household_service.register_household(self.name, self.address, self.phone)


class LoadHouseholdTask(_ServiceTask):
    def __init__(self, household_service: HouseholdService, household_id: int):
        super().__init__()
        self.household_service = household_service
        self.household_id = household_id

    async def call(self) -> Household:
        return await self.household_service.get_household(self.household_id)
