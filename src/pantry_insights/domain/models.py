"""Domain records consumed by the analysis pipelines."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from uuid import UUID

from pantry_insights.domain.units import UnitType, to_base

_CATEGORY_ALIASES = {
    "fruit": "fruits",
    "vegetable": "vegetables",
    "veggies": "vegetables",
    "grain": "grains",
    "beverage": "beverages",
    "drink": "beverages",
    "drinks": "beverages",
    "snack": "snacks",
    "proteins": "protein",
}


class FoodCategory(str, Enum):
    """Closed set of food categories shared by every pipeline."""

    FRUITS = "fruits"
    VEGETABLES = "vegetables"
    DAIRY = "dairy"
    GRAINS = "grains"
    PROTEIN = "protein"
    BEVERAGES = "beverages"
    SNACKS = "snacks"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | None) -> "FoodCategory":
        """Parse a category string, mapping unknown values to OTHER."""
        if not raw:
            return cls.OTHER
        cleaned = raw.strip().lower()
        cleaned = _CATEGORY_ALIASES.get(cleaned, cleaned)
        try:
            return cls(cleaned)
        except ValueError:
            return cls.OTHER


class MealSlot(str, Enum):
    """Meal slot a consumption entry was logged under."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"
    BEVERAGE = "beverage"

    @classmethod
    def parse(cls, raw: str | None) -> "MealSlot":
        """Parse a meal slot, defaulting to SNACK."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.SNACK


class RiskTier(str, Enum):
    """Expiration risk tier."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class UrgencyTier(str, Enum):
    """Purchase urgency used for budget allocation order."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def rank(self) -> int:
        return {"high": 3, "medium": 2, "low": 1}[self.value]


class Severity(str, Enum):
    """Nutrient deficiency severity."""

    OPTIMAL = "optimal"
    MILD = "mild"
    MODERATE = "moderate"
    SEVERE = "severe"


class Trend(str, Enum):
    """Direction of change between two halves of a period."""

    INCREASING = "increasing"
    DECREASING = "decreasing"
    STABLE = "stable"


class Season(str, Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


class TemperatureBand(str, Enum):
    WARM = "warm"
    MODERATE = "moderate"
    COLD = "cold"


class Nutrient(str, Enum):
    """Nutrients tracked against daily targets."""

    CALORIES = "calories"
    PROTEIN = "protein"
    CARBS = "carbs"
    FATS = "fats"
    FIBER = "fiber"


@dataclass(frozen=True)
class InventoryRecord:
    """A food item held by the user.

    ``base_quantity`` is always derived from ``quantity`` and ``unit``; build
    records through ``create`` or ``with_quantity``.
    """

    id: UUID
    name: str
    category: FoodCategory
    quantity: float
    unit: str
    base_quantity: float
    base_unit: UnitType
    unit_cost: float
    expiration_date: date | None
    created_at: datetime

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        *,
        id: UUID,  # noqa: A002
        name: str,
        category: FoodCategory,
        quantity: float,
        unit: str,
        unit_cost: float,
        created_at: datetime,
        expiration_date: date | None = None,
    ) -> "InventoryRecord":
        """Create a record with its base quantity computed from the unit."""
        base_quantity, base_unit = to_base(quantity, unit)
        return cls(
            id=id,
            name=name,
            category=category,
            quantity=quantity,
            unit=unit,
            base_quantity=base_quantity,
            base_unit=base_unit,
            unit_cost=unit_cost,
            expiration_date=expiration_date,
            created_at=created_at,
        )

    def with_quantity(self, quantity: float, unit: str | None = None) -> "InventoryRecord":
        """Return a copy with a new quantity and a recomputed base quantity."""
        resolved_unit = unit or self.unit
        base_quantity, base_unit = to_base(quantity, resolved_unit)
        return replace(
            self,
            quantity=quantity,
            unit=resolved_unit,
            base_quantity=base_quantity,
            base_unit=base_unit,
        )

    @property
    def estimated_value(self) -> float:
        return self.quantity * self.unit_cost


@dataclass(frozen=True)
class CatalogOption:
    """Reference food option available for purchase."""

    name: str
    category: FoodCategory
    unit_cost: float
    shelf_life_days: int
    unit: str = "pieces"


@dataclass(frozen=True)
class ConsumptionEntry:
    """A logged consumption of a food item."""

    item_name: str
    category: FoodCategory
    quantity: float
    unit: str
    meal_slot: MealSlot
    consumed_on: date
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fats_g: float | None = None
    fiber_g: float | None = None
    sugar_g: float | None = None
    sodium_mg: float | None = None

    @property
    def base_quantity(self) -> tuple[float, UnitType]:
        return to_base(self.quantity, self.unit)


@dataclass(frozen=True)
class DailyNutrientTotals:
    """Nutrient totals for one day; a pure sum over that day's entries."""

    day: date
    calories: float
    protein_g: float
    carbs_g: float
    fats_g: float
    fiber_g: float
    sugar_g: float
    sodium_mg: float
    entry_count: int

    def value(self, nutrient: Nutrient) -> float:
        """Return the total for a tracked nutrient."""
        return {
            Nutrient.CALORIES: self.calories,
            Nutrient.PROTEIN: self.protein_g,
            Nutrient.CARBS: self.carbs_g,
            Nutrient.FATS: self.fats_g,
            Nutrient.FIBER: self.fiber_g,
        }[nutrient]


def daily_totals(entries: list[ConsumptionEntry]) -> list[DailyNutrientTotals]:
    """Sum entries per day, ordered by day ascending."""
    grouped: dict[date, list[ConsumptionEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.consumed_on, []).append(entry)
    return [
        DailyNutrientTotals(
            day=day,
            calories=sum(entry.calories or 0.0 for entry in day_entries),
            protein_g=sum(entry.protein_g or 0.0 for entry in day_entries),
            carbs_g=sum(entry.carbs_g or 0.0 for entry in day_entries),
            fats_g=sum(entry.fats_g or 0.0 for entry in day_entries),
            fiber_g=sum(entry.fiber_g or 0.0 for entry in day_entries),
            sugar_g=sum(entry.sugar_g or 0.0 for entry in day_entries),
            sodium_mg=sum(entry.sodium_mg or 0.0 for entry in day_entries),
            entry_count=len(day_entries),
        )
        for day, day_entries in sorted(grouped.items())
    ]


MAX_MACRO_PERCENT = 100.0


@dataclass(frozen=True)
class MacroTargets:
    """Macro targets as percentages of daily calories."""

    protein: float = 25.0
    carbs: float = 45.0
    fats: float = 30.0

    def __post_init__(self) -> None:
        for name in ("protein", "carbs", "fats"):
            value = getattr(self, name)
            if not 0 <= value <= MAX_MACRO_PERCENT:
                raise ValueError(f"Macro target {name} must be within 0-100")


@dataclass(frozen=True)
class Location:
    city: str = "Unknown"
    country: str = "Unknown"

    @property
    def label(self) -> str:
        return f"{self.city}, {self.country}"


@dataclass(frozen=True)
class UserProfile:
    """User goals and constraints used by the pipelines."""

    user_id: UUID
    calories_per_day: float = 2000.0
    macro_targets: MacroTargets = field(default_factory=MacroTargets)
    household_size: int = 1
    budget: float = 0.0
    weekly_budget: bool = False
    dietary_restrictions: tuple[str, ...] = ()
    avoided_ingredients: tuple[str, ...] = ()
    location: Location = field(default_factory=Location)


@dataclass(frozen=True)
class Recommendation:
    """Candidate purchase produced by the advisory or fallback path."""

    name: str
    category: FoodCategory
    quantity: float
    unit: str
    unit_cost: float
    total_cost: float
    urgency: UrgencyTier
    priority: int = 0
    reason: str = ""
    nutritional_value: str = ""
    alternative_options: tuple[str, ...] = ()

    @property
    def cost_per_quantity(self) -> float:
        if self.quantity <= 0:
            return float("inf")
        return self.total_cost / self.quantity


@dataclass(frozen=True)
class LocalPrice:
    """Price of one item at a nearby store."""

    item_name: str
    price: float
    store: str
