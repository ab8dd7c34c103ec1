"""Entity store interface and the in-memory implementation."""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Callable, TypeVar

from wastepay_app.models.staff import Admin, StaffRole

T = TypeVar("T")


class Collection(str, Enum):
    HOUSEHOLDS = "households"
    DRIVERS = "drivers"
    HELPERS = "helpers"

    @classmethod
    def for_role(cls, role: StaffRole) -> "Collection":
        if role is StaffRole.DRIVER:
            return cls.DRIVERS
        if role is StaffRole.HELPER:
            return cls.HELPERS
        raise ValueError(f"Unsupported staff role: {role!r}")


SEED_IDS = {
    Collection.HOUSEHOLDS: 1001,
    Collection.DRIVERS: 1,
    Collection.HELPERS: 1,
}


class EntityStore(ABC):
    """Storage contract used by the repositories.

    Records handed in or out are copies; callers never share references
    with the stored state.
    """

    @abstractmethod
    def list_records(self, collection: Collection) -> list[Any]:
        """Return copies of every record in insertion order."""

    @abstractmethod
    def find(self, collection: Collection, predicate: Callable[[Any], bool]) -> Any | None:
        """Return a copy of the first matching record."""

    @abstractmethod
    def next_id(self, collection: Collection) -> int:
        """Return the id the next insert into the collection would receive."""

    @abstractmethod
    def insert(self, collection: Collection, build: Callable[[int], T]) -> T:
        """Assign an id, store build(id) and return a copy of it."""

    @abstractmethod
    def replace(self, collection: Collection, record: Any) -> bool:
        """Replace the record with the same id; False when the id is unknown."""

    @abstractmethod
    def get_admin(self) -> Admin | None:
        """Return the admin credential."""

    @abstractmethod
    def set_admin(self, admin: Admin) -> None:
        """Install the admin credential at seed time."""


class InMemoryEntityStore(EntityStore):
    """Volatile store backed by plain lists, guarded by one re-entrant lock."""

    def __init__(self):
        self._records: dict[Collection, list[Any]] = {collection: [] for collection in Collection}
        self._admin: Admin | None = None
        self._lock = threading.RLock()

    def list_records(self, collection: Collection) -> list[Any]:
        with self._lock:
            return copy.deepcopy(self._records[collection])

    def find(self, collection: Collection, predicate: Callable[[Any], bool]) -> Any | None:
        with self._lock:
            for record in self._records[collection]:
                if predicate(record):
                    return copy.deepcopy(record)
        return None

    def next_id(self, collection: Collection) -> int:
        with self._lock:
            records = self._records[collection]
            if not records:
                return SEED_IDS[collection]
            return max(record.id for record in records) + 1

    def insert(self, collection: Collection, build: Callable[[int], T]) -> T:
        with self._lock:
            record = build(self.next_id(collection))
            self._records[collection].append(copy.deepcopy(record))
            return copy.deepcopy(record)

    def replace(self, collection: Collection, record: Any) -> bool:
        with self._lock:
            records = self._records[collection]
            for index, existing in enumerate(records):
                if existing.id == record.id:
                    records[index] = copy.deepcopy(record)
                    return True
        return False

    def get_admin(self) -> Admin | None:
        with self._lock:
            return self._admin

    def set_admin(self, admin: Admin) -> None:
        with self._lock:
            self._admin = admin
