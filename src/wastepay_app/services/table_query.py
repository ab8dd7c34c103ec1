"""Filter, sort and route selection for household tables."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Sequence, Union

from wastepay_app.models.household import Household, PaymentStatus

ALL_STATUSES = "all"
ASCENDING = "asc"
DESCENDING = "desc"

StatusFilter = Union[PaymentStatus, str]

SORT_KEYS: dict[str, Callable[[Household], Any]] = {
    "id": lambda household: household.id,
    "name": lambda household: household.name,
    "address": lambda household: household.address,
    "phone": lambda household: household.phone,
    "assigned_route": lambda household: household.assigned_route,
    "status": lambda household: household.status.value,
}


@dataclass(frozen=True)
class SortState:
    """Current sort column and direction of a table."""

    key: str = "id"
    direction: str = ASCENDING

    def toggle(self, key: str) -> "SortState":
        """Clicking the active column flips direction; a new column starts ascending."""
        if key not in SORT_KEYS:
            raise ValueError(f"Unsupported sort key: {key}")
        if key == self.key and self.direction == ASCENDING:
            return SortState(key=key, direction=DESCENDING)
        return SortState(key=key, direction=ASCENDING)


def _normalize_status(status_filter: StatusFilter) -> PaymentStatus | None:
    if isinstance(status_filter, PaymentStatus):
        return status_filter
    if not status_filter or status_filter == ALL_STATUSES:
        return None
    return PaymentStatus(status_filter)


def matches_query(household: Household, query: str) -> bool:
    """True when ``query`` is a case-insensitive substring of a searchable field."""
    needle = query.lower()
    return any(
        needle in value.lower()
        for value in (
            household.name,
            household.phone,
            household.address,
            str(household.id),
            household.assigned_route,
        )
    )


def filter_households(
    households: Sequence[Household],
    query: str = "",
    status_filter: StatusFilter = ALL_STATUSES,
) -> list[Household]:
    status = _normalize_status(status_filter)
    return [
        household
        for household in households
        if (status is None or household.status is status) and matches_query(household, query)
    ]


def sort_households(households: Sequence[Household], sort: SortState | None) -> list[Household]:
    """Stable sort; equal keys keep their incoming order in both directions."""
    if sort is None:
        return list(households)
    if sort.key not in SORT_KEYS:
        raise ValueError(f"Unsupported sort key: {sort.key}")
    return sorted(households, key=SORT_KEYS[sort.key], reverse=sort.direction == DESCENDING)


def query_households(
    households: Sequence[Household],
    query: str = "",
    status_filter: StatusFilter = ALL_STATUSES,
    sort: SortState | None = SortState(),
) -> list[Household]:
    """Filter then sort, as the household table displays it."""
    return sort_households(filter_households(households, query, status_filter), sort)


def households_on_route(households: Sequence[Household], route: str) -> list[Household]:
    return [household for household in households if household.assigned_route == route]
