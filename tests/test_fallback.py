"""Tests for deterministic fallbacks."""

from datetime import timedelta

import pytest

from pantry_insights.domain.advice import (
    Availability,
    ImpactAdvice,
    ImpactTrend,
    NutrientAdvice,
    PatternAdvice,
    RiskAdvice,
    SeasonalityRisk,
    ShoppingAdvice,
)
from pantry_insights.domain.categories import DEFAULT_CATEGORY_PROFILES
from pantry_insights.domain.features import CategoryUsage
from pantry_insights.domain.models import (
    CatalogOption,
    FoodCategory,
    Location,
    Nutrient,
    RiskTier,
    Severity,
    Trend,
    UrgencyTier,
    UserProfile,
)
from pantry_insights.domain.units import UnitType
from pantry_insights.services.fallback import (
    consumption_priority,
    detect_imbalances,
    fallback_impact,
    fallback_nutrients,
    fallback_patterns,
    fallback_risk,
    fallback_shopping,
    food_suggestions,
    impact_trend,
    risk_score,
)
from pantry_insights.services.features import (
    expiration_features,
    impact_features,
    nutrient_gap_features,
    optimizer_features,
    pattern_features,
    seasonal_context,
)
from tests.conftest import TODAY, make_entry, make_record


def _usage(category: FoodCategory, servings_per_day: float) -> CategoryUsage:
    return CategoryUsage(
        category=category,
        base_totals={UnitType.COUNT: servings_per_day},
        daily_averages={UnitType.COUNT: servings_per_day},
        frequency=100,
        servings_per_day=servings_per_day,
        entry_count=1,
        trend=Trend.STABLE,
    )


def test_risk_score_and_priority() -> None:
    assert risk_score(-1, 1.4) == 0
    assert risk_score(2, 1.4) == 100
    assert risk_score(50, 1.0) == 50
    assert consumption_priority(0) == 1
    assert consumption_priority(55) == 6
    assert consumption_priority(100) == 10


def test_fallback_risk_predicts_every_item(profile: UserProfile) -> None:
    milk = make_record("Milk", FoodCategory.DAIRY, 1, "l", expires_in=2)
    rice = make_record("Rice", FoodCategory.GRAINS, 1, "kg", expires_in=30)
    season = seasonal_context(TODAY, profile.location, DEFAULT_CATEGORY_PROFILES)
    features = expiration_features([milk, rice], TODAY, season)

    advice = fallback_risk(features, DEFAULT_CATEGORY_PROFILES)

    by_name = {prediction.item_name: prediction for prediction in advice.predictions}
    assert by_name["Milk"].risk_tier == RiskTier.CRITICAL
    assert by_name["Milk"].consumption_priority == 10
    assert by_name["Milk"].seasonality_risk == SeasonalityRisk.INCREASED
    assert by_name["Milk"].consume_by == (TODAY + timedelta(days=2)).isoformat()
    assert by_name["Rice"].risk_tier == RiskTier.LOW
    assert by_name["Rice"].risk_score == 70
    assert RiskAdvice.model_validate(advice.model_dump()) == advice


def test_food_suggestions_skip_avoided_and_prefer_inventory(user_id) -> None:
    profile = UserProfile(user_id=user_id, avoided_ingredients=("peanut",))
    oats = make_record("Oats", FoodCategory.GRAINS, 1, "kg", unit_cost=2)
    catalog = [
        CatalogOption("Peanut Butter", FoodCategory.PROTEIN, 3.0, 90),
        CatalogOption("Brown Rice", FoodCategory.GRAINS, 1.5, 180, unit="kg"),
        CatalogOption("Soda", FoodCategory.BEVERAGES, 1.0, 180),
    ]
    deficient = {Nutrient.FATS: Severity.SEVERE, Nutrient.CARBS: Severity.MILD}

    suggestions = food_suggestions(
        deficient, [oats], catalog, profile, DEFAULT_CATEGORY_PROFILES
    )

    names = [suggestion.item_name for suggestion in suggestions]
    assert names == ["Oats", "Brown Rice"]
    assert suggestions[0].availability == Availability.IN_INVENTORY
    assert suggestions[0].priority == UrgencyTier.MEDIUM
    assert suggestions[1].target_nutrients == [Nutrient.CARBS]


def test_fallback_nutrients_scores_from_features(profile: UserProfile) -> None:
    entries = [
        make_entry(
            "Chicken", FoodCategory.PROTEIN, TODAY, calories=2000, protein_g=125, fiber_g=20
        )
    ]
    features = nutrient_gap_features(profile, entries, 7, TODAY)

    advice = fallback_nutrients(features, profile, [], [], DEFAULT_CATEGORY_PROFILES)

    severities = {assessment.nutrient: assessment.severity for assessment in advice.nutrients}
    assert severities[Nutrient.CALORIES] == Severity.OPTIMAL
    assert severities[Nutrient.CARBS] == Severity.SEVERE
    assert advice.overall_score == pytest.approx(60)
    assert advice.key_findings[0].startswith("Carbs intake is 100% below target")
    assert NutrientAdvice.model_validate(advice.model_dump()) == advice


def test_detect_imbalances_flags_low_and_high_categories() -> None:
    profiles = {
        FoodCategory.FRUITS: DEFAULT_CATEGORY_PROFILES[FoodCategory.FRUITS],
        FoodCategory.SNACKS: DEFAULT_CATEGORY_PROFILES[FoodCategory.SNACKS],
        FoodCategory.GRAINS: DEFAULT_CATEGORY_PROFILES[FoodCategory.GRAINS],
    }
    usage = [
        _usage(FoodCategory.FRUITS, 0.5),
        _usage(FoodCategory.SNACKS, 3.0),
        _usage(FoodCategory.GRAINS, 3.0),
    ]

    imbalances = detect_imbalances(usage, profiles)

    assert [imbalance.category for imbalance in imbalances] == [
        FoodCategory.FRUITS,
        FoodCategory.SNACKS,
    ]
    assert imbalances[0].variance == pytest.approx(-75)
    assert imbalances[0].severity == Severity.SEVERE
    assert imbalances[0].priority == UrgencyTier.HIGH
    assert imbalances[1].variance == pytest.approx(50)
    assert imbalances[1].severity == Severity.MODERATE


def test_fallback_patterns_matches_schema(profile: UserProfile) -> None:
    entries = [
        make_entry("Apples", FoodCategory.FRUITS, TODAY, quantity=300, unit="g"),
        make_entry("Rice", FoodCategory.GRAINS, TODAY - timedelta(days=1)),
    ]
    yogurt = make_record("Yogurt", FoodCategory.DAIRY, 10, "pieces", expires_in=1)
    features = pattern_features(
        profile, entries, [yogurt], 7, TODAY, DEFAULT_CATEGORY_PROFILES
    )

    advice = fallback_patterns(features, DEFAULT_CATEGORY_PROFILES)

    fruits = next(
        row for row in advice.category_consumption if row.category == FoodCategory.FRUITS
    )
    assert fruits.unit == "g"
    assert fruits.total_consumed == 300
    assert advice.waste_predictions[0].item_name == "Yogurt"
    assert advice.eating_frequency is not None
    assert 0 <= advice.health_score <= 100
    assert "Log more detailed data for better insights" in advice.recommendations
    assert PatternAdvice.model_validate(advice.model_dump()) == advice


def test_impact_trend_dead_band() -> None:
    assert impact_trend(110, 100) == ImpactTrend.IMPROVING
    assert impact_trend(104, 100) == ImpactTrend.STABLE
    assert impact_trend(90, 100) == ImpactTrend.DECLINING
    assert impact_trend(5, 0) == ImpactTrend.IMPROVING
    assert impact_trend(0, 0) == ImpactTrend.STABLE


def test_fallback_impact_without_comparison_is_stable(profile: UserProfile) -> None:
    entries = [
        make_entry("Oats", FoodCategory.GRAINS, TODAY, calories=2000, protein_g=125, fiber_g=20)
    ]
    window = (TODAY - timedelta(days=7), TODAY)
    comparison = (TODAY - timedelta(days=14), TODAY - timedelta(days=8))
    features = impact_features(
        profile, entries, [], [], window, comparison, TODAY, DEFAULT_CATEGORY_PROFILES
    )

    advice = fallback_impact(features)

    assert set(advice.sdg2.trends.values()) == {ImpactTrend.STABLE}
    assert set(advice.sdg12.trends.values()) == {ImpactTrend.STABLE}
    assert advice.sdg2.food_security == 100
    assert advice.personal_score == pytest.approx(
        round((advice.sdg2.overall + advice.sdg12.overall) / 2)
    )
    assert ImpactAdvice.model_validate(advice.model_dump()) == advice


def test_fallback_shopping_uses_staples_and_respects_avoidance(user_id) -> None:
    profile = UserProfile(
        user_id=user_id,
        household_size=2,
        avoided_ingredients=("chicken",),
        location=Location(city="Austin", country="USA"),
    )
    milk = make_record("Milk", FoodCategory.DAIRY, 2, "l")
    catalog = [
        CatalogOption("Bananas", FoodCategory.FRUITS, 0.3, 7),
        CatalogOption("Apples", FoodCategory.FRUITS, 0.5, 21),
        CatalogOption("Mangoes", FoodCategory.FRUITS, 1.5, 7),
    ]
    features = optimizer_features(profile, [milk], catalog, budget=100)

    advice = fallback_shopping(features, profile, DEFAULT_CATEGORY_PROFILES)

    names = [suggestion.name for suggestion in advice.recommendations]
    assert names == ["Bananas", "Apples", "Mixed Vegetables", "Rice"]
    assert advice.recommendations[0].quantity == 4
    assert advice.recommendations[0].alternative_options == ["Mangoes"]
    assert advice.recommendations[0].urgency == UrgencyTier.HIGH
    assert ShoppingAdvice.model_validate(advice.model_dump()) == advice
