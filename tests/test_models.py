"""Tests for domain records."""

from datetime import date
from uuid import uuid4

import pytest

from pantry_insights.domain.advice import ItemRiskPrediction, NutrientAssessment
from pantry_insights.domain.models import (
    FoodCategory,
    MacroTargets,
    MealSlot,
    Nutrient,
    Recommendation,
    Severity,
    UrgencyTier,
    daily_totals,
)
from pantry_insights.domain.units import UnitType
from tests.conftest import make_entry, make_record


def test_food_category_parse_aliases_and_unknowns() -> None:
    assert FoodCategory.parse("Veggies") == FoodCategory.VEGETABLES
    assert FoodCategory.parse(" fruit ") == FoodCategory.FRUITS
    assert FoodCategory.parse("candy") == FoodCategory.OTHER
    assert FoodCategory.parse(None) == FoodCategory.OTHER


def test_meal_slot_parse_defaults_to_snack() -> None:
    assert MealSlot.parse("Dinner") == MealSlot.DINNER
    assert MealSlot.parse("brunch") == MealSlot.SNACK


def test_inventory_record_base_quantity_follows_unit() -> None:
    record = make_record("Flour", FoodCategory.GRAINS, 1.5, "kg")

    assert record.base_quantity == 1500.0
    assert record.base_unit == UnitType.MASS

    resized = record.with_quantity(250, "g")

    assert resized.base_quantity == 250.0
    assert resized.unit == "g"
    assert resized.id == record.id


def test_macro_targets_reject_out_of_range() -> None:
    with pytest.raises(ValueError):
        MacroTargets(protein=120)


def test_daily_totals_sum_per_day() -> None:
    entries = [
        make_entry("Toast", FoodCategory.GRAINS, date(2024, 7, 2), calories=200),
        make_entry("Eggs", FoodCategory.PROTEIN, date(2024, 7, 1), protein_g=12),
        make_entry("Rice", FoodCategory.GRAINS, date(2024, 7, 2), calories=300),
    ]

    totals = daily_totals(entries)

    assert [day.day for day in totals] == [date(2024, 7, 1), date(2024, 7, 2)]
    assert totals[1].calories == 500
    assert totals[1].entry_count == 2
    assert totals[0].value(Nutrient.PROTEIN) == 12


def test_recommendation_cost_per_quantity() -> None:
    recommendation = Recommendation(
        name="Rice",
        category=FoodCategory.GRAINS,
        quantity=0,
        unit="kg",
        unit_cost=2.5,
        total_cost=0,
        urgency=UrgencyTier.HIGH,
    )

    assert recommendation.cost_per_quantity == float("inf")


def test_scores_are_clamped_on_validation() -> None:
    assessment = NutrientAssessment(
        nutrient=Nutrient.FIBER,
        current_intake=5,
        recommended_intake=20,
        deficiency_percentage=140,
        severity=Severity.SEVERE,
    )

    assert assessment.deficiency_percentage == 100


def test_advice_category_accepts_free_text() -> None:
    prediction = ItemRiskPrediction(
        item_id=str(uuid4()),
        item_name="Milk",
        category="Drinks",
        risk_score=-5,
        risk_tier="low",
        consumption_urgency="flexible",
        consumption_priority=1,
        consume_by="2024-07-20",
        alert_level="green",
        primary_reason="Expires in 5 days",
    )

    assert prediction.category == FoodCategory.BEVERAGES
    assert prediction.risk_score == 0
