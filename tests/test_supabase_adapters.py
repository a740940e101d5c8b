"""Tests for the Supabase analysis repository."""

from dataclasses import dataclass, field
from datetime import date
from uuid import uuid4

import pytest

from pantry_insights.adapters.supabase_analysis_repository import (
    SupabaseAnalysisRepository,
)
from pantry_insights.domain.errors import UnknownUnitError
from pantry_insights.domain.models import FoodCategory, MealSlot
from pantry_insights.domain.units import UnitType


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": []}
    )
    last_columns: str = ""
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None
    negate_next: bool = False

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, columns: str) -> "FakeTable":
        self._action = "select"
        self.last_columns = columns
        return self

    def eq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def gte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}>=", value))
        return self

    def lte(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((f"{column}<=", value))
        return self

    @property
    def not_(self) -> "FakeTable":
        self.negate_next = True
        return self

    def is_(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        prefix = "not " if self.negate_next else ""
        self.negate_next = False
        self.last_filters.append((f"{prefix}{column} is", value))
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def test_get_profile_parses_row() -> None:
    client = FakeSupabaseClient()
    user_id = uuid4()
    client.table("user_profiles").queue(
        "select",
        [
            {
                "user_id": str(user_id),
                "calories_per_day": 1800,
                "protein_pct": 30,
                "household_size": 3,
                "budget": "75.50",
                "weekly_budget": True,
                "dietary_restrictions": ["vegetarian"],
                "avoided_ingredients": None,
                "city": "Cape Town",
                "country": "South Africa",
            }
        ],
    )

    profile = SupabaseAnalysisRepository(client).get_profile(user_id)

    assert profile is not None
    assert profile.calories_per_day == 1800
    assert profile.macro_targets.protein == 30
    assert profile.macro_targets.carbs == 45
    assert profile.budget == 75.5
    assert profile.weekly_budget
    assert profile.dietary_restrictions == ("vegetarian",)
    assert profile.avoided_ingredients == ()
    assert profile.location.label == "Cape Town, South Africa"
    assert client.table("user_profiles").last_filters == [("user_id", str(user_id))]


def test_get_profile_missing_user() -> None:
    assert SupabaseAnalysisRepository(FakeSupabaseClient()).get_profile(uuid4()) is None


def test_list_inventory_expiring_only() -> None:
    client = FakeSupabaseClient()
    table = client.table("inventory")
    item_id = uuid4()
    table.queue(
        "select",
        [
            {
                "id": str(item_id),
                "item_name": "Milk",
                "category": "Dairy",
                "quantity": 1,
                "unit": "gal",
                "unit_cost": 3.5,
                "expiration_date": "2024-07-17T00:00:00+00:00",
                "created_at": "2024-07-10T08:00:00+00:00",
            }
        ],
    )

    records = SupabaseAnalysisRepository(client).list_inventory(uuid4(), expiring_only=True)

    record = records[0]
    assert record.id == item_id
    assert record.category == FoodCategory.DAIRY
    assert record.base_unit == UnitType.VOLUME
    assert record.base_quantity == pytest.approx(3785.41)
    assert record.expiration_date == date(2024, 7, 17)
    assert ("not expiration_date is", "null") in table.last_filters
    assert table.last_order == ("expiration_date", False)


def test_list_inventory_rejects_unknown_unit() -> None:
    client = FakeSupabaseClient()
    client.table("inventory").queue(
        "select",
        [{"id": str(uuid4()), "item_name": "Nuts", "quantity": 2, "unit": "handful"}],
    )

    with pytest.raises(UnknownUnitError):
        SupabaseAnalysisRepository(client).list_inventory(uuid4())


def test_list_catalog_defaults() -> None:
    client = FakeSupabaseClient()
    table = client.table("food_catalog")
    table.queue("select", [{"name": "Lentils", "category": "proteins", "unit_cost": 1.8}])

    options = SupabaseAnalysisRepository(client).list_catalog(25)

    assert options[0].category == FoodCategory.PROTEIN
    assert options[0].shelf_life_days == 7
    assert options[0].unit == "pieces"
    assert table.last_limit == 25


def test_list_consumption_filters_inclusive_range() -> None:
    client = FakeSupabaseClient()
    table = client.table("consumption_entries")
    table.queue(
        "select",
        [
            {
                "item_name": "Oats",
                "category": "grain",
                "quantity": 80,
                "unit": "g",
                "meal_type": "brunch",
                "consumed_on": "2024-07-14",
                "calories": 300,
                "protein_g": None,
            }
        ],
    )
    user_id = uuid4()

    entries = SupabaseAnalysisRepository(client).list_consumption(
        user_id, date(2024, 7, 1), date(2024, 7, 15)
    )

    entry = entries[0]
    assert entry.category == FoodCategory.GRAINS
    assert entry.meal_slot == MealSlot.SNACK
    assert entry.consumed_on == date(2024, 7, 14)
    assert entry.calories == 300
    assert entry.protein_g is None
    assert table.last_filters == [
        ("user_id", str(user_id)),
        ("consumed_on>=", "2024-07-01"),
        ("consumed_on<=", "2024-07-15"),
    ]
