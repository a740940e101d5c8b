"""Tests for result assembly helpers."""

from dataclasses import replace
from datetime import date

from pantry_insights.domain.advice import ImpactAdvice, Sdg2Score, Sdg12Score
from pantry_insights.domain.results import Ranking
from pantry_insights.services.assembler import (
    achievements,
    analysis_period,
    impact_metrics,
    intake_adequacy,
    ranking_for,
)
from pantry_insights.services.features import DEFAULT_WASTE_RATE, period_metrics


def test_ranking_thresholds() -> None:
    assert ranking_for(81) == Ranking.EXCELLENT
    assert ranking_for(80) == Ranking.GOOD
    assert ranking_for(61) == Ranking.GOOD
    assert ranking_for(41) == Ranking.MODERATE
    assert ranking_for(40) == Ranking.NEEDS_IMPROVEMENT


def test_intake_adequacy() -> None:
    assert intake_adequacy(70, 100).adequacy == "deficient"
    assert intake_adequacy(100, 100).adequacy == "adequate"
    assert intake_adequacy(151, 100).adequacy == "excessive"
    assert intake_adequacy(5, 0).adequacy == "adequate"


def test_analysis_period_days() -> None:
    period = analysis_period(date(2024, 6, 15), date(2024, 7, 15))

    assert period.total_days == 30


def test_impact_metrics_from_prevented_waste() -> None:
    empty = period_metrics([], date(2024, 7, 1), date(2024, 7, 7), {}, DEFAULT_WASTE_RATE)
    previous = replace(empty, waste_item_count=6)
    current = replace(empty, waste_item_count=2, total_items=40)

    metrics = impact_metrics(current, previous)

    assert metrics.waste_prevented == 4
    assert metrics.co2_reduction_kg == 10.0
    assert metrics.water_saved_liters == 4000.0
    assert metrics.hunger_contribution == 4.0
    assert impact_metrics(previous, current).waste_prevented == 0


def _impact_advice(personal: float, sdg2: float, sdg12: float) -> ImpactAdvice:
    return ImpactAdvice(
        sdg2=Sdg2Score(
            overall=sdg2,
            food_security=sdg2,
            nutrition_quality=sdg2,
            sustainable_consumption=sdg2,
            dietary_diversity=sdg2,
        ),
        sdg12=Sdg12Score(
            overall=sdg12,
            waste_reduction=sdg12,
            sustainable_consumption=sdg12,
            awareness=sdg12,
        ),
        personal_score=personal,
    )


def test_achievements_follow_score_thresholds() -> None:
    current = period_metrics([], date(2024, 7, 1), date(2024, 7, 7), {}, DEFAULT_WASTE_RATE)

    earned = achievements(_impact_advice(80, 75, 60), current)

    assert earned.badges == ["SDG Champion", "Nutrition Achiever"]
    assert earned.milestones == [
        "Reached Moderate SDG Performance",
        "Achieved Good SDG Performance",
    ]
    assert earned.streaks["sustainable_living"] == 27
    assert achievements(_impact_advice(49, 10, 10), current).milestones == []
