"""Staff (driver and helper) and admin domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class StaffRole(str, Enum):
    DRIVER = "DRIVER"
    HELPER = "HELPER"


@dataclass
class StaffCreate:
    """Input model for staff data. ``vehicle_details`` only applies to drivers."""

    name: str
    phone: str
    salary: int
    assigned_route: str
    vehicle_details: str = ""


@dataclass
class Driver:
    id: int
    name: str
    phone: str
    salary: int
    assigned_route: str
    vehicle_details: str
    role: StaffRole = field(default=StaffRole.DRIVER, init=False)


@dataclass
class Helper:
    id: int
    name: str
    phone: str
    salary: int
    assigned_route: str
    role: StaffRole = field(default=StaffRole.HELPER, init=False)


StaffMember = Union[Driver, Helper]


@dataclass(frozen=True)
class Admin:
    """Singleton administrator credential."""

    username: str
    password_hash: str
