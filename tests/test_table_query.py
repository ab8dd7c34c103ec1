"""Tests for household table filtering and sorting."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime

import pytest

from wastepay_app.models.household import Household, PaymentStatus
from wastepay_app.repositories.seed import seed_store
from wastepay_app.repositories.store import Collection, InMemoryEntityStore
from wastepay_app.services.table_query import (
    ASCENDING,
    DESCENDING,
    SortState,
    filter_households,
    households_on_route,
    query_households,
    sort_households,
)


def _household(household_id: int, name: str, route: str, status: PaymentStatus) -> Household:
    return Household(
        id=household_id,
        name=name,
        address=f"{household_id} Lake Road",
        phone=f"9000{household_id:06d}",
        last_collection_date=datetime(2024, 7, 1),
        status=status,
        assigned_route=route,
    )


@pytest.fixture
def households() -> list[Household]:
    return [
        _household(1001, "Asha Rao", "Route A", PaymentStatus.PAID),
        _household(1002, "Ravi Shah", "Route B", PaymentStatus.DUE),
        _household(1003, "asha mehta", "Route B", PaymentStatus.DUE),
        _household(1004, "Kiran Joshi", "Route A", PaymentStatus.PAID),
    ]


def test_query_matches_case_insensitive_fields(households) -> None:
    assert [h.id for h in filter_households(households, "ASHA")] == [1001, 1003]
    assert [h.id for h in filter_households(households, "route b")] == [1002, 1003]
    assert [h.id for h in filter_households(households, "1004")] == [1004]
    assert filter_households(households, "nobody") == []


def test_status_filter(households) -> None:
    assert [h.id for h in filter_households(households, status_filter="Due")] == [1002, 1003]
    assert [h.id for h in filter_households(households, status_filter=PaymentStatus.PAID)] == [1001, 1004]
    assert len(filter_households(households, status_filter="all")) == 4


def test_sort_toggle_reverses_order(households) -> None:
    ascending = query_households(households, sort=SortState())
    descending = query_households(households, sort=SortState().toggle("id"))

    assert [h.id for h in ascending] == [1001, 1002, 1003, 1004]
    assert [h.id for h in descending] == [1004, 1003, 1002, 1001]


def test_sort_is_stable_for_equal_keys(households) -> None:
    by_route = sort_households(households, SortState("assigned_route", ASCENDING))
    by_route_desc = sort_households(households, SortState("assigned_route", DESCENDING))

    assert [h.id for h in by_route] == [1001, 1004, 1002, 1003]
    assert [h.id for h in by_route_desc] == [1002, 1003, 1001, 1004]


def test_toggle_semantics() -> None:
    state = SortState()

    assert state.toggle("id") == SortState("id", DESCENDING)
    assert state.toggle("id").toggle("id") == SortState("id", ASCENDING)
    assert state.toggle("id").toggle("name") == SortState("name", ASCENDING)
    with pytest.raises(ValueError):
        state.toggle("salary")


def test_households_on_route(households) -> None:
    assert [h.id for h in households_on_route(households, "Route A")] == [1001, 1004]


def test_demo_phone_finds_one_household_in_full_seed(config) -> None:
    store = InMemoryEntityStore()
    config = replace(config, seed=replace(config.seed, household_count=2500))
    seed_store(store, config, "pw", clock=lambda: datetime(2024, 7, 15, 10, 30))
    seeded = store.list_records(Collection.HOUSEHOLDS)

    matches = query_households(seeded, query="9876541001")

    assert len(seeded) == 2500
    assert [h.id for h in matches] == [1001]
    assert matches[0].status is PaymentStatus.PAID


def test_filter_does_not_mutate_input(households) -> None:
    original = [replace(h) for h in households]

    query_households(households, query="asha", sort=SortState("name", DESCENDING))

    assert households == original
