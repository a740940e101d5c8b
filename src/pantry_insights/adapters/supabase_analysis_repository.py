"""Supabase repository for analysis inputs."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from pantry_insights.domain.models import (
    CatalogOption,
    ConsumptionEntry,
    FoodCategory,
    InventoryRecord,
    Location,
    MacroTargets,
    MealSlot,
    UserProfile,
)
from pantry_insights.services.aggregator import AnalysisRepository

_INVENTORY_COLUMNS = (
    "id, item_name, category, quantity, unit, unit_cost, expiration_date, created_at"
)
_CONSUMPTION_COLUMNS = (
    "item_name, category, quantity, unit, meal_type, consumed_on, calories, protein_g, "
    "carbs_g, fats_g, fiber_g, sugar_g, sodium_mg"
)


@dataclass
class SupabaseAnalysisRepository(AnalysisRepository):
    """Supabase implementation for profile, inventory, catalog and consumption reads."""

    client: Client

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        response = (
            self.client.table("user_profiles")
            .select("*")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_profile(user_id, response.data[0])

    def list_inventory(
        self, user_id: UUID, *, expiring_only: bool = False
    ) -> list[InventoryRecord]:
        """Return inventory records, soonest expiration first."""
        query = (
            self.client.table("inventory")
            .select(_INVENTORY_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if expiring_only:
            query = query.not_.is_("expiration_date", "null")
        response = query.order("expiration_date", desc=False).execute()
        return [_parse_inventory(row) for row in response.data or []]

    def list_catalog(self, limit: int) -> list[CatalogOption]:
        response = (
            self.client.table("food_catalog")
            .select("name, category, unit_cost, shelf_life_days, unit")
            .order("name", desc=False)
            .limit(limit)
            .execute()
        )
        return [_parse_catalog(row) for row in response.data or []]

    def list_consumption(
        self, user_id: UUID, start: date, end: date
    ) -> list[ConsumptionEntry]:
        """Return entries with start <= consumed_on <= end."""
        response = (
            self.client.table("consumption_entries")
            .select(_CONSUMPTION_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("consumed_on", start.isoformat())
            .lte("consumed_on", end.isoformat())
            .order("consumed_on", desc=False)
            .execute()
        )
        return [_parse_consumption(row) for row in response.data or []]


def _to_float(value: object, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _optional_float(value: object) -> float | None:
    if value is None:
        return None
    return float(value)


def _parse_date(value: object) -> date | None:
    if isinstance(value, str) and value:
        return date.fromisoformat(value[:10])
    return None


def _parse_datetime(value: object) -> datetime:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.min


def _parse_profile(user_id: UUID, row: dict[str, object]) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        calories_per_day=_to_float(row.get("calories_per_day"), 2000.0),
        macro_targets=MacroTargets(
            protein=_to_float(row.get("protein_pct"), 25.0),
            carbs=_to_float(row.get("carbs_pct"), 45.0),
            fats=_to_float(row.get("fats_pct"), 30.0),
        ),
        household_size=int(row.get("household_size") or 1),
        budget=_to_float(row.get("budget")),
        weekly_budget=bool(row.get("weekly_budget", False)),
        dietary_restrictions=tuple(row.get("dietary_restrictions") or ()),
        avoided_ingredients=tuple(row.get("avoided_ingredients") or ()),
        location=Location(
            city=str(row.get("city") or "Unknown"),
            country=str(row.get("country") or "Unknown"),
        ),
    )


def _parse_inventory(row: dict[str, object]) -> InventoryRecord:
    return InventoryRecord.create(
        id=UUID(str(row["id"])),
        name=str(row.get("item_name", "")),
        category=FoodCategory.parse(row.get("category")),
        quantity=_to_float(row.get("quantity")),
        unit=str(row.get("unit") or "pieces"),
        unit_cost=_to_float(row.get("unit_cost")),
        created_at=_parse_datetime(row.get("created_at")),
        expiration_date=_parse_date(row.get("expiration_date")),
    )


def _parse_catalog(row: dict[str, object]) -> CatalogOption:
    return CatalogOption(
        name=str(row.get("name", "")),
        category=FoodCategory.parse(row.get("category")),
        unit_cost=_to_float(row.get("unit_cost")),
        shelf_life_days=int(row.get("shelf_life_days") or 7),
        unit=str(row.get("unit") or "pieces"),
    )


def _parse_consumption(row: dict[str, object]) -> ConsumptionEntry:
    return ConsumptionEntry(
        item_name=str(row.get("item_name", "")),
        category=FoodCategory.parse(row.get("category")),
        quantity=_to_float(row.get("quantity")),
        unit=str(row.get("unit") or "servings"),
        meal_slot=MealSlot.parse(row.get("meal_type")),
        consumed_on=_parse_date(row.get("consumed_on")) or date.min,
        calories=_optional_float(row.get("calories")),
        protein_g=_optional_float(row.get("protein_g")),
        carbs_g=_optional_float(row.get("carbs_g")),
        fats_g=_optional_float(row.get("fats_g")),
        fiber_g=_optional_float(row.get("fiber_g")),
        sugar_g=_optional_float(row.get("sugar_g")),
        sodium_mg=_optional_float(row.get("sodium_mg")),
    )
