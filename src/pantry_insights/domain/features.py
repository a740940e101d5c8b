"""Deterministic features derived from aggregated records."""

from dataclasses import dataclass, field
from datetime import date

from pantry_insights.domain.models import (
    CatalogOption,
    DailyNutrientTotals,
    FoodCategory,
    InventoryRecord,
    MealSlot,
    Nutrient,
    RiskTier,
    Season,
    Severity,
    TemperatureBand,
    Trend,
)
from pantry_insights.domain.units import UnitType


@dataclass(frozen=True)
class SeasonalAdjustment:
    multiplier: float
    reason: str


@dataclass(frozen=True)
class SeasonalContext:
    """Season, temperature band and per-category risk multipliers."""

    season: Season
    temperature: TemperatureBand
    humidity_factor: float
    adjustments: dict[FoodCategory, SeasonalAdjustment]

    def multiplier_for(self, category: FoodCategory) -> float:
        adjustment = self.adjustments.get(category)
        return adjustment.multiplier if adjustment else 1.0

    def reason_for(self, category: FoodCategory) -> str:
        adjustment = self.adjustments.get(category)
        return adjustment.reason if adjustment else "Normal seasonal conditions"


@dataclass(frozen=True)
class ItemExpiry:
    """Expiration features for one inventory record.

    ``days_until_expiration`` is -1 for records without an expiration date.
    """

    record: InventoryRecord
    days_until_expiration: int
    age_days: int
    estimated_value: float
    tier: RiskTier
    seasonal_multiplier: float


@dataclass(frozen=True)
class ExpirationFeatures:
    season: SeasonalContext
    items: list[ItemExpiry]


@dataclass(frozen=True)
class NutrientStatus:
    """Daily average intake of one nutrient against its target."""

    nutrient: Nutrient
    current_intake: float
    recommended_intake: float
    deficiency_percentage: float
    severity: Severity
    trend: Trend
    days_deficient: int


@dataclass(frozen=True)
class NutrientGapFeatures:
    statuses: list[NutrientStatus]
    daily: list[DailyNutrientTotals]
    logged_days: int
    window_days: int
    start: date
    end: date
    data_completeness: float

    @property
    def deficient(self) -> list[NutrientStatus]:
        return [status for status in self.statuses if status.severity != Severity.OPTIMAL]


@dataclass(frozen=True)
class CategoryUsage:
    """Consumption of one category, with totals kept per base unit type."""

    category: FoodCategory
    base_totals: dict[UnitType, float]
    daily_averages: dict[UnitType, float]
    frequency: float
    servings_per_day: float
    entry_count: int
    trend: Trend


@dataclass(frozen=True)
class WeekdayTrend:
    weekday: str
    day_count: int
    average_calories: float
    average_items: float
    meal_distribution: dict[MealSlot, int]


@dataclass(frozen=True)
class ItemWasteRisk:
    """Likelihood that an inventory record is wasted before it is eaten."""

    record: InventoryRecord
    days_until_expiration: int
    daily_consumption_base: float
    days_to_consume: float
    probability: float
    tier: RiskTier
    consumption_rate_needed: float
    predicted_waste_date: date | None


@dataclass(frozen=True)
class PatternFeatures:
    start: date
    end: date
    window_days: int
    logged_days: int
    entry_count: int
    categories: list[CategoryUsage]
    weekdays: list[WeekdayTrend]
    meal_distribution: dict[MealSlot, int]
    calorie_distribution: dict[MealSlot, float]
    dietary_diversity: float
    average_daily_calories: float
    average_protein_g: float
    average_fiber_g: float
    protein_target_g: float
    fiber_target_g: float
    meals_per_day: float
    snacks_per_day: float
    regularity_score: float
    data_completeness: float
    waste_risks: list[ItemWasteRisk] = field(default_factory=list)


@dataclass(frozen=True)
class PeriodMetrics:
    """Nutrition, waste and consumption metrics for one period."""

    start: date
    end: date
    logged_days: int
    total_calories: float
    average_daily_calories: float
    protein_intake: float
    fiber_intake: float
    dietary_diversity: float
    nutrition_adequacy: float
    waste_item_count: int
    total_waste_value: float
    waste_reduction_rate: float
    sustainability_score: float
    total_items: int
    average_items_per_day: float
    category_distribution: dict[FoodCategory, int]
    meal_regularity: float


@dataclass(frozen=True)
class ImpactFeatures:
    current: PeriodMetrics
    comparison: PeriodMetrics
    weeks: list[PeriodMetrics]
    estimated_waste_rate: float
    calorie_target: float
    protein_target_g: float
    fiber_target_g: float


@dataclass(frozen=True)
class OptimizerFeatures:
    total_budget: float
    household_size: int
    inventory_by_category: dict[FoodCategory, list[InventoryRecord]]
    inventory_value: float
    catalog_by_category: dict[FoodCategory, list[CatalogOption]]
    stock_levels: dict[FoodCategory, int]
    category_gaps: list[FoodCategory]
