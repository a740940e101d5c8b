"""Tests for deterministic feature derivation."""

from datetime import date, timedelta

import pytest

from pantry_insights.domain.categories import DEFAULT_CATEGORY_PROFILES
from pantry_insights.domain.models import (
    FoodCategory,
    Location,
    MealSlot,
    Nutrient,
    RiskTier,
    Season,
    Severity,
    TemperatureBand,
    Trend,
    UserProfile,
)
from pantry_insights.domain.units import UnitType
from pantry_insights.services.features import (
    DEFAULT_WASTE_RATE,
    category_usage,
    days_until,
    deficiency_percentage,
    dietary_diversity,
    estimated_waste_rate,
    expiration_features,
    meal_regularity,
    nutrient_gap_features,
    optimizer_features,
    period_metrics,
    season_for,
    seasonal_context,
    severity_for,
    sustainability_score,
    temperature_for,
    tier_for_days,
    total_budget,
    trend_for,
    waste_reduction_rate,
    waste_risks,
)
from tests.conftest import TODAY, make_entry, make_record

USA = Location(city="Austin", country="USA")


def test_season_flips_in_southern_hemisphere() -> None:
    july = date(2024, 7, 1)

    assert season_for(july, USA) == Season.SUMMER
    assert season_for(july, Location(city="Sydney", country="Australia")) == Season.WINTER


@pytest.mark.parametrize(
    ("month", "season"),
    [
        (1, Season.WINTER),
        (3, Season.SPRING),
        (5, Season.SPRING),
        (6, Season.SUMMER),
        (8, Season.SUMMER),
        (9, Season.FALL),
        (11, Season.FALL),
        (12, Season.WINTER),
    ],
)
def test_season_boundaries(month: int, season: Season) -> None:
    assert season_for(date(2024, month, 15), USA) == season


def test_temperature_bands() -> None:
    assert temperature_for(Season.SUMMER, USA) == TemperatureBand.WARM
    assert temperature_for(Season.SPRING, USA) == TemperatureBand.MODERATE
    assert temperature_for(Season.SPRING, Location(country="Brazil")) == TemperatureBand.WARM
    assert temperature_for(Season.WINTER, USA) == TemperatureBand.COLD


def test_moderate_temperature_uses_cold_multipliers() -> None:
    context = seasonal_context(date(2024, 10, 1), USA, DEFAULT_CATEGORY_PROFILES)

    assert context.temperature == TemperatureBand.MODERATE
    assert context.multiplier_for(FoodCategory.DAIRY) == 0.9


def test_tier_table() -> None:
    assert tier_for_days(-1) == RiskTier.LOW
    assert tier_for_days(0) == RiskTier.CRITICAL
    assert tier_for_days(3) == RiskTier.CRITICAL
    assert tier_for_days(4) == RiskTier.HIGH
    assert tier_for_days(7) == RiskTier.HIGH
    assert tier_for_days(14) == RiskTier.MEDIUM
    assert tier_for_days(15) == RiskTier.LOW


def test_days_until_floors_expired_items() -> None:
    assert days_until(None, TODAY) == -1
    assert days_until(TODAY - timedelta(days=3), TODAY) == 0
    assert days_until(TODAY + timedelta(days=5), TODAY) == 5


def test_summer_milk_is_critical() -> None:
    milk = make_record("Milk", FoodCategory.DAIRY, 1, "l", unit_cost=1.2, expires_in=2)
    season = seasonal_context(TODAY, USA, DEFAULT_CATEGORY_PROFILES)

    features = expiration_features([milk], TODAY, season)

    item = features.items[0]
    assert item.days_until_expiration == 2
    assert item.tier == RiskTier.CRITICAL
    assert item.seasonal_multiplier == 1.4
    assert item.estimated_value == pytest.approx(1.2)


def test_deficiency_percentage_is_clamped() -> None:
    assert deficiency_percentage(250, 125) == 0
    assert deficiency_percentage(0, 125) == 100
    assert deficiency_percentage(50, 100) == 50
    assert deficiency_percentage(10, 0) == 0


def test_severity_thresholds() -> None:
    assert severity_for(19.9) == Severity.OPTIMAL
    assert severity_for(20) == Severity.MILD
    assert severity_for(40) == Severity.MILD
    assert severity_for(41) == Severity.MODERATE
    assert severity_for(61) == Severity.SEVERE


def test_trend_compares_halves() -> None:
    assert trend_for([1, 1, 2, 2]) == Trend.INCREASING
    assert trend_for([2, 2, 1, 1]) == Trend.DECREASING
    assert trend_for([10, 10.2]) == Trend.STABLE
    assert trend_for([5]) == Trend.STABLE


def test_nutrient_gap_features_average_logged_days(user_id) -> None:
    profile = UserProfile(user_id=user_id)
    entries = [
        make_entry("Pasta", FoodCategory.GRAINS, TODAY, calories=800, protein_g=25),
        make_entry("Bread", FoodCategory.GRAINS, TODAY, calories=200),
        make_entry(
            "Chicken",
            FoodCategory.PROTEIN,
            TODAY - timedelta(days=1),
            calories=1000,
            protein_g=125,
        ),
    ]

    features = nutrient_gap_features(profile, entries, 7, TODAY)

    statuses = {status.nutrient: status for status in features.statuses}
    assert features.logged_days == 2
    assert statuses[Nutrient.CALORIES].current_intake == 1000
    assert statuses[Nutrient.CALORIES].deficiency_percentage == 50
    assert statuses[Nutrient.PROTEIN].current_intake == 75
    assert statuses[Nutrient.PROTEIN].days_deficient == 1
    assert statuses[Nutrient.FIBER].severity == Severity.SEVERE
    assert features.data_completeness == pytest.approx(2 / 7 * 100)


def test_category_usage_sums_in_base_units() -> None:
    entries = [
        make_entry("Apples", FoodCategory.FRUITS, TODAY, quantity=1.5, unit="kg"),
        make_entry(
            "Apples", FoodCategory.FRUITS, TODAY - timedelta(days=1), quantity=500, unit="g"
        ),
        make_entry("Juice", FoodCategory.FRUITS, TODAY, quantity=1, unit="cup"),
    ]

    usage = category_usage(entries)

    fruits = usage[0]
    assert fruits.base_totals[UnitType.MASS] == 2000
    assert fruits.base_totals[UnitType.VOLUME] == pytest.approx(236.588)
    assert fruits.daily_averages[UnitType.MASS] == 1000
    assert fruits.frequency == 100


def test_diversity_and_regularity() -> None:
    entries = [
        make_entry("Oats", FoodCategory.GRAINS, TODAY, meal_slot=MealSlot.BREAKFAST),
        make_entry("Apple", FoodCategory.FRUITS, TODAY, meal_slot=MealSlot.LUNCH),
        make_entry("Beef", FoodCategory.PROTEIN, TODAY, meal_slot=MealSlot.DINNER),
        make_entry(
            "Rice", FoodCategory.GRAINS, TODAY - timedelta(days=1), meal_slot=MealSlot.LUNCH
        ),
    ]

    assert dietary_diversity(entries) == 2
    assert meal_regularity(entries) == pytest.approx((100 + 100 / 3) / 2)


def test_waste_risk_uses_shelf_life_without_observed_consumption() -> None:
    yogurt = make_record("Yogurt", FoodCategory.DAIRY, 10, "pieces", expires_in=1)

    risks = waste_risks([yogurt], [], TODAY, DEFAULT_CATEGORY_PROFILES)

    risk = risks[0]
    assert risk.days_to_consume == pytest.approx(14)
    assert risk.probability == pytest.approx(13 / 14 * 100)
    assert risk.tier == RiskTier.CRITICAL
    assert risk.predicted_waste_date == yogurt.expiration_date


def test_waste_rate_and_scores() -> None:
    assert estimated_waste_rate([]) == DEFAULT_WASTE_RATE
    assert waste_reduction_rate(0.15) == pytest.approx(40)
    assert waste_reduction_rate(1.0) == -100
    assert sustainability_score(40) == 100
    assert sustainability_score(-100) == 0


def test_empty_period_metrics_are_zero() -> None:
    metrics = period_metrics([], TODAY, TODAY, {}, DEFAULT_WASTE_RATE)

    assert metrics.logged_days == 0
    assert metrics.sustainability_score == 0
    assert metrics.category_distribution == {}


def test_optimizer_budget_resolution(user_id) -> None:
    profile = UserProfile(user_id=user_id, budget=25, weekly_budget=True, household_size=0)
    milk = make_record("Milk", FoodCategory.DAIRY, 2, "l", unit_cost=1.2)

    features = optimizer_features(profile, [milk], [])

    assert total_budget(50, False) == 50
    assert features.total_budget == 100
    assert features.household_size == 1
    assert features.stock_levels[FoodCategory.DAIRY] == 1
    assert FoodCategory.DAIRY not in features.category_gaps
    assert FoodCategory.OTHER not in features.category_gaps

    overridden = optimizer_features(profile, [], [], budget=30, weekly_budget=False)
    assert overridden.total_budget == 30
