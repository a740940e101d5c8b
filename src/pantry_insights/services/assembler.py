"""Merge features, advice and allocations into response aggregates."""

from collections import Counter
from datetime import date, datetime

from pantry_insights.domain.advice import (
    EatingFrequency,
    ImpactAdvice,
    NutrientAdvice,
    PatternAdvice,
    RiskAdvice,
    SeasonalityRisk,
    Sdg2Score,
    Sdg12Score,
)
from pantry_insights.domain.features import (
    ExpirationFeatures,
    ImpactFeatures,
    NutrientGapFeatures,
    OptimizerFeatures,
    PatternFeatures,
    PeriodMetrics,
    SeasonalContext,
)
from pantry_insights.domain.models import (
    FoodCategory,
    InventoryRecord,
    RiskTier,
    Severity,
    TemperatureBand,
    UrgencyTier,
    UserProfile,
)
from pantry_insights.domain.results import (
    Achievements,
    ActionableStep,
    AdviceSource,
    AnalysisPeriod,
    BudgetImpact,
    CategoryShare,
    ExpirationRiskResult,
    ImpactMetrics,
    ImpactResult,
    ImpactSummary,
    IntakeAdequacy,
    InventorySnapshot,
    MealTiming,
    NutrientGapResult,
    NutrientInsights,
    NutrientSummary,
    NutritionInsights,
    OverallRiskLevel,
    PatternResult,
    PatternSummary,
    PreferredCategories,
    PriorityEntry,
    Ranking,
    RiskInsights,
    RiskSummary,
    ShoppingInsights,
    ShoppingLine,
    ShoppingPlanResult,
    ShoppingSummary,
    WeekdayTrendView,
    WeeklyInsight,
)
from pantry_insights.domain.units import format_quantity
from pantry_insights.services.allocator import AllocatedPurchase, Allocation
from pantry_insights.services.fallback import sdg_scores

TOP_PRIORITY_ITEMS = 10
TOP_CATEGORIES = 3
MODERATE_RISK_MEDIUM_ITEMS = 3
HIGH_VALUE_ITEM = 10.0
HIGH_VALUE_RISK_SCORE = 50.0
CATEGORY_FOCUS_SCORE = 60.0
CO2_KG_PER_WASTED_ITEM = 2.5
WATER_LITERS_PER_WASTED_ITEM = 1000.0
HUNGER_CONTRIBUTION_PER_ITEM = 0.1
MAX_STREAK_DAYS = 30
LOW_LOGGING_DAYS = 5
DEFICIENT_INTAKE_RATIO = 0.8
EXCESSIVE_INTAKE_RATIO = 1.5
WELL_USED_BUDGET_PERCENT = 80.0
LARGE_HOUSEHOLD = 2
MANY_URGENT_ITEMS = 3
LARGE_INVENTORY = 15
EXCELLENT_SCORE = 81.0
GOOD_SCORE = 61.0
MODERATE_SCORE = 41.0
CHAMPION_SCORE = 80.0
GOAL_ACHIEVER_SCORE = 75.0
SUSTAINABLE_REDUCTION_RATE = 50.0
MET_TARGETS_ADEQUACY = 75.0
LOW_WEEKLY_DIVERSITY = 3.0
SCORE_MILESTONES = (
    (50.0, "Reached Moderate SDG Performance"),
    (75.0, "Achieved Good SDG Performance"),
    (90.0, "Excellence in Sustainability"),
)


def analysis_period(start: date, end: date) -> AnalysisPeriod:
    return AnalysisPeriod(start_date=start, end_date=end, total_days=(end - start).days)


# Expiration risk


def overall_risk_level(advice: RiskAdvice) -> OverallRiskLevel:
    tiers = Counter(prediction.risk_tier for prediction in advice.predictions)
    if tiers[RiskTier.CRITICAL]:
        return OverallRiskLevel.CRITICAL
    if tiers[RiskTier.HIGH]:
        return OverallRiskLevel.HIGH
    if tiers[RiskTier.MEDIUM] > MODERATE_RISK_MEDIUM_ITEMS:
        return OverallRiskLevel.MODERATE
    return OverallRiskLevel.LOW


def seasonal_alerts(season: SeasonalContext, advice: RiskAdvice) -> list[str]:
    alerts = []
    if season.temperature == TemperatureBand.WARM:
        alerts += [
            "Warm weather alert: fruits and vegetables are spoiling faster",
            "Dairy products need extra attention; keep them properly refrigerated",
            "Meat and fish need prompt consumption or freezing",
        ]
    elif season.temperature == TemperatureBand.COLD:
        alerts += [
            "Cold weather: most foods will last longer",
            "Citrus fruits are in season and stay fresh longer",
        ]
    increased = sum(
        1
        for prediction in advice.predictions
        if prediction.seasonality_risk == SeasonalityRisk.INCREASED
    )
    if increased:
        alerts.append(f"{increased} items at increased risk due to seasonal conditions")
    return alerts


def consumption_tips(advice: RiskAdvice, values: dict[str, float]) -> list[str]:
    tips = []
    critical = [p for p in advice.predictions if p.risk_tier == RiskTier.CRITICAL]
    if critical:
        tips.append(f"Consume {len(critical)} items in the next 3 days")
        tips.append("Consider batch cooking to use up ingredients quickly")
    high_value = [
        prediction.item_name
        for prediction in advice.predictions
        if values.get(prediction.item_id, 0.0) > HIGH_VALUE_ITEM
        and prediction.risk_score > HIGH_VALUE_RISK_SCORE
    ]
    if high_value:
        tips.append(f"High-value items at risk: prioritize {', '.join(high_value)}")
    tips.append("Plan meals around expiration dates rather than preferences")
    tips.append('Use a "first in, first out" system for pantry management')
    return tips


def waste_prevention_strategies(advice: RiskAdvice) -> list[str]:
    strategies = [
        "Run a weekly inventory audit to find at-risk items",
        'Keep an "eat me first" box in the refrigerator for high-risk items',
        "Freeze items that will not be eaten in time",
        "Share excess food with family, friends or neighbors",
    ]
    focus = []
    for prediction in advice.predictions:
        if prediction.risk_score > CATEGORY_FOCUS_SCORE and prediction.category not in focus:
            focus.append(prediction.category)
    if focus:
        strategies.append(
            f"Focus on {', '.join(category.value for category in focus)} this week"
        )
    return strategies


def assemble_risk(
    profile: UserProfile,
    features: ExpirationFeatures,
    advice: RiskAdvice,
    source: AdviceSource,
    now: datetime,
) -> ExpirationRiskResult:
    values = {str(item.record.id): item.estimated_value for item in features.items}
    tiers = Counter(prediction.risk_tier for prediction in advice.predictions)
    potential_loss = sum(
        values.get(prediction.item_id, 0.0)
        for prediction in advice.predictions
        if prediction.risk_tier in (RiskTier.CRITICAL, RiskTier.HIGH)
    )
    ranked = sorted(
        advice.predictions,
        key=lambda prediction: (-prediction.consumption_priority, -prediction.risk_score),
    )
    return ExpirationRiskResult(
        summary=RiskSummary(
            total_items_at_risk=len(advice.predictions),
            critical_items=tiers[RiskTier.CRITICAL],
            high_risk_items=tiers[RiskTier.HIGH],
            estimated_potential_loss=round(potential_loss, 2),
            user_location=profile.location.label,
            current_season=features.season.season.value,
            temperature=features.season.temperature.value,
            analysis_date=now,
        ),
        predictions=ranked,
        consumption_priority=[
            PriorityEntry(
                item_name=prediction.item_name,
                priority=prediction.consumption_priority,
                reason=prediction.primary_reason,
                alert_level=prediction.alert_level,
            )
            for prediction in ranked[:TOP_PRIORITY_ITEMS]
        ],
        insights=RiskInsights(
            overall_risk_level=overall_risk_level(advice),
            seasonal_alerts=seasonal_alerts(features.season, advice),
            consumption_tips=consumption_tips(advice, values),
            waste_prevention_strategies=waste_prevention_strategies(advice),
        ),
        source=source,
    )


def empty_risk(
    profile: UserProfile, season: SeasonalContext, now: datetime
) -> ExpirationRiskResult:
    return ExpirationRiskResult(
        summary=RiskSummary(
            total_items_at_risk=0,
            critical_items=0,
            high_risk_items=0,
            estimated_potential_loss=0.0,
            user_location=profile.location.label,
            current_season=season.season.value,
            temperature=season.temperature.value,
            analysis_date=now,
        ),
        predictions=[],
        consumption_priority=[],
        insights=RiskInsights(overall_risk_level=OverallRiskLevel.LOW),
        source=AdviceSource.NONE,
    )


# Nutrient gaps


def assemble_nutrients(
    profile: UserProfile,
    features: NutrientGapFeatures,
    advice: NutrientAdvice,
    source: AdviceSource,
) -> NutrientGapResult:
    deficient = [n for n in advice.nutrients if n.severity != Severity.OPTIMAL]
    return NutrientGapResult(
        summary=NutrientSummary(
            analysis_period=analysis_period(features.start, features.end),
            overall_nutrition_score=advice.overall_score,
            total_deficiencies=len(deficient),
            severe_deficiencies=sum(1 for n in deficient if n.severity == Severity.SEVERE),
            data_completeness=features.data_completeness,
            calories_per_day=profile.calories_per_day,
            dietary_restrictions=list(profile.dietary_restrictions),
            avoided_ingredients=list(profile.avoided_ingredients),
        ),
        nutrients=advice.nutrients,
        food_suggestions=sorted(
            advice.food_suggestions, key=lambda suggestion: -suggestion.priority.rank
        ),
        insights=NutrientInsights(
            key_findings=advice.key_findings,
            recommendations=advice.recommendations,
            priority_actions=advice.priority_actions,
            preventive_measures=advice.preventive_measures,
        ),
        source=source,
    )


def empty_nutrients(profile: UserProfile, features: NutrientGapFeatures) -> NutrientGapResult:
    return assemble_nutrients(
        profile,
        features,
        NutrientAdvice(
            nutrients=[],
            food_suggestions=[],
            overall_score=0.0,
            key_findings=["No consumption data logged in this period"],
            recommendations=["Start logging meals to receive nutrient insights"],
        ),
        AdviceSource.NONE,
    )


# Consumption patterns


def intake_adequacy(current: float, recommended: float) -> IntakeAdequacy:
    if recommended > 0 and current < recommended * DEFICIENT_INTAKE_RATIO:
        adequacy = "deficient"
    elif recommended > 0 and current > recommended * EXCESSIVE_INTAKE_RATIO:
        adequacy = "excessive"
    else:
        adequacy = "adequate"
    return IntakeAdequacy(
        current=round(current, 1), recommended=round(recommended, 1), adequacy=adequacy
    )


def preferred_categories(features: PatternFeatures) -> PreferredCategories:
    if not features.entry_count:
        return PreferredCategories()
    shares = [
        CategoryShare(
            category=usage.category,
            percentage=round(usage.entry_count / features.entry_count * 100, 1),
        )
        for usage in features.categories
    ]
    ordered = sorted(shares, key=lambda share: -share.percentage)
    return PreferredCategories(
        most_consumed=ordered[:TOP_CATEGORIES],
        least_consumed=list(reversed(ordered))[:TOP_CATEGORIES],
    )


def assemble_patterns(
    features: PatternFeatures, advice: PatternAdvice, source: AdviceSource
) -> PatternResult:
    eating_frequency = advice.eating_frequency
    if eating_frequency is None:
        eating_frequency = EatingFrequency(
            average_meals_per_day=features.meals_per_day,
            average_snacks_per_day=features.snacks_per_day,
            regularity_score=features.regularity_score,
        )
    return PatternResult(
        summary=PatternSummary(
            analysis_period=analysis_period(features.start, features.end),
            overall_health_score=advice.health_score,
            key_insights=advice.key_insights,
            recommendations=advice.recommendations,
            data_completeness=features.data_completeness,
        ),
        weekly_trends=[
            WeekdayTrendView(
                day_of_week=trend.weekday,
                average_calories=round(trend.average_calories, 1),
                average_items=round(trend.average_items, 1),
                meal_distribution=trend.meal_distribution,
            )
            for trend in features.weekdays
        ],
        category_consumption=advice.category_consumption,
        imbalances=advice.imbalances,
        waste_predictions=advice.waste_predictions,
        meal_timing=MealTiming(),
        eating_frequency=eating_frequency,
        preferred_categories=preferred_categories(features),
        nutrition_insights=NutritionInsights(
            protein_intake=intake_adequacy(features.average_protein_g, features.protein_target_g),
            fiber_intake=intake_adequacy(features.average_fiber_g, features.fiber_target_g),
            calorie_distribution={
                slot: round(share, 1) for slot, share in features.calorie_distribution.items()
            },
        ),
        source=source,
    )


def empty_patterns(features: PatternFeatures) -> PatternResult:
    return assemble_patterns(
        features,
        PatternAdvice(
            category_consumption=[],
            imbalances=[],
            waste_predictions=[],
            health_score=0.0,
            key_insights=["No consumption data logged in this period"],
            recommendations=["Start logging meals to discover your eating patterns"],
        ),
        AdviceSource.NONE,
    )


# Sustainability impact


def ranking_for(score: float) -> Ranking:
    if score >= EXCELLENT_SCORE:
        return Ranking.EXCELLENT
    if score >= GOOD_SCORE:
        return Ranking.GOOD
    if score >= MODERATE_SCORE:
        return Ranking.MODERATE
    return Ranking.NEEDS_IMPROVEMENT


_STEP_TEMPLATES = {
    "nutrition": (
        "Increase protein intake by 25g daily through lean proteins and legumes",
        ["SDG 2.2", "SDG 2.1"],
        "medium",
        "week",
    ),
    "waste_reduction": (
        "Plan meals for the week to reduce food waste by 10%",
        ["SDG 12.3", "SDG 12.5"],
        "low",
        "immediate",
    ),
    "dietary_diversity": (
        "Add 2 new food categories to your weekly diet",
        ["SDG 2.5", "SDG 2.2"],
        "medium",
        "week",
    ),
    "sustainable_consumption": (
        "Choose local and seasonal foods for better sustainability",
        ["SDG 12.8", "SDG 2.4"],
        "low",
        "immediate",
    ),
}
_STEP_IMPACT = {
    "nutrition": 15.0,
    "waste_reduction": 20.0,
    "dietary_diversity": 10.0,
    "sustainable_consumption": 8.0,
}


def actionable_steps(sdg2: Sdg2Score, sdg12: Sdg12Score) -> list[ActionableStep]:
    """One step for each of the three lowest-scoring areas, weakest first."""
    areas = sorted(
        [
            ("nutrition", sdg2.nutrition_quality),
            ("waste_reduction", sdg12.waste_reduction),
            ("dietary_diversity", sdg2.dietary_diversity),
            ("sustainable_consumption", sdg12.sustainable_consumption),
        ],
        key=lambda area: area[1],
    )
    steps = []
    for index, (area, _score) in enumerate(areas[:3]):
        description, targets, effort, timeframe = _STEP_TEMPLATES[area]
        steps.append(
            ActionableStep(
                category=area,
                priority=UrgencyTier.HIGH if index == 0 else UrgencyTier.MEDIUM,
                impact=max(_STEP_IMPACT[area] - index * 2, 1.0),
                effort=effort,
                description=description,
                sdg_targets=targets,
                timeframe=timeframe,
            )
        )
    return steps


def impact_metrics(current: PeriodMetrics, comparison: PeriodMetrics) -> ImpactMetrics:
    prevented = max(0, comparison.waste_item_count - current.waste_item_count)
    return ImpactMetrics(
        co2_reduction_kg=prevented * CO2_KG_PER_WASTED_ITEM,
        water_saved_liters=prevented * WATER_LITERS_PER_WASTED_ITEM,
        hunger_contribution=round(current.total_items * HUNGER_CONTRIBUTION_PER_ITEM, 1),
        waste_prevented=prevented,
    )


def achievements(
    advice: ImpactAdvice, current: PeriodMetrics
) -> Achievements:
    badges = []
    if advice.personal_score >= CHAMPION_SCORE:
        badges.append("SDG Champion")
    if advice.sdg2.overall >= GOAL_ACHIEVER_SCORE:
        badges.append("Nutrition Achiever")
    if advice.sdg12.overall >= GOAL_ACHIEVER_SCORE:
        badges.append("Waste Warrior")
    if current.waste_reduction_rate >= SUSTAINABLE_REDUCTION_RATE:
        badges.append("Sustainable Consumer")
    milestones = [
        milestone
        for threshold, milestone in SCORE_MILESTONES
        if advice.personal_score >= threshold
    ]
    return Achievements(
        badges=badges,
        milestones=milestones,
        streaks={
            "waste_reduction": min(MAX_STREAK_DAYS, round(advice.sdg12.waste_reduction / 3)),
            "healthy_eating": min(MAX_STREAK_DAYS, round(advice.sdg2.nutrition_quality / 3)),
            "sustainable_living": min(MAX_STREAK_DAYS, round(advice.personal_score / 3)),
        },
    )


def weekly_insights(features: ImpactFeatures) -> list[WeeklyInsight]:
    """Score each run of seven logged days with the deterministic SDG formulas."""
    insights = []
    previous: float | None = None
    for index, week in enumerate(features.weeks, start=1):
        sdg2, sdg12, personal = sdg_scores(week, features)
        improvements = []
        if previous is not None and personal > previous:
            improvements.append(f"Personal score up {personal - previous:.0f} points")
        if week.nutrition_adequacy >= MET_TARGETS_ADEQUACY:
            improvements.append("Met most nutrition targets")
        challenges = []
        if week.logged_days < LOW_LOGGING_DAYS:
            challenges.append("Low food logging frequency")
        if week.dietary_diversity < LOW_WEEKLY_DIVERSITY:
            challenges.append("Limited variety of food categories")
        insights.append(
            WeeklyInsight(
                week=f"Week {index}",
                sdg2_score=sdg2.overall,
                sdg12_score=sdg12.overall,
                personal_score=personal,
                improvements=improvements,
                challenges=challenges,
            )
        )
        previous = personal
    return insights


def assemble_impact(
    features: ImpactFeatures, advice: ImpactAdvice, source: AdviceSource
) -> ImpactResult:
    if features.comparison.logged_days:
        _, _, previous = sdg_scores(features.comparison, features)
    else:
        previous = advice.personal_score
    current = features.current
    return ImpactResult(
        summary=ImpactSummary(
            current_period=analysis_period(current.start, current.end),
            comparison_period=analysis_period(
                features.comparison.start, features.comparison.end
            ),
            personal_sdg_score=advice.personal_score,
            previous_period_score=previous,
            score_change=round(advice.personal_score - previous, 1),
            ranking=ranking_for(advice.personal_score),
        ),
        sdg2=advice.sdg2,
        sdg12=advice.sdg12,
        weekly_insights=weekly_insights(features),
        actionable_steps=actionable_steps(advice.sdg2, advice.sdg12),
        impact_metrics=impact_metrics(current, features.comparison),
        achievements=achievements(advice, current),
        key_insights=[
            *advice.key_insights,
            *(f"Strength: {area}" for area in advice.strengths),
            *(f"Focus area: {area}" for area in advice.improvement_areas),
        ],
        source=source,
    )


def empty_impact(features: ImpactFeatures) -> ImpactResult:
    zero2 = Sdg2Score(
        overall=0,
        food_security=0,
        nutrition_quality=0,
        sustainable_consumption=0,
        dietary_diversity=0,
    )
    zero12 = Sdg12Score(overall=0, waste_reduction=0, sustainable_consumption=0, awareness=0)
    current = features.current
    return ImpactResult(
        summary=ImpactSummary(
            current_period=analysis_period(current.start, current.end),
            comparison_period=analysis_period(
                features.comparison.start, features.comparison.end
            ),
            personal_sdg_score=0,
            previous_period_score=0,
            score_change=0,
            ranking=Ranking.NEEDS_IMPROVEMENT,
        ),
        sdg2=zero2,
        sdg12=zero12,
        weekly_insights=[],
        actionable_steps=[],
        impact_metrics=ImpactMetrics(),
        achievements=Achievements(),
        key_insights=["No consumption data logged in this period"],
        source=AdviceSource.NONE,
    )


# Shopping


def priority_categories(allocation: Allocation) -> list[FoodCategory]:
    counts = Counter(purchase.recommendation.category for purchase in allocation.purchases)
    return [category for category, _ in counts.most_common(TOP_CATEGORIES)]


def budget_optimization(allocation: Allocation) -> str:
    if allocation.total_budget <= 0 or not allocation.purchases:
        return "No purchases fit the current budget."
    used = allocation.allocated / allocation.total_budget * 100
    average = allocation.allocated / len(allocation.purchases)
    verdict = (
        "Budget is well utilized with strategic selections."
        if used > WELL_USED_BUDGET_PERCENT
        else "There is room to add more items or increase quantities."
    )
    return (
        f"You're utilizing {used:.1f}% of your ${allocation.total_budget:.2f} budget. "
        f"The average cost per recommended item is ${average:.2f}. {verdict}"
    )


def nutritional_focus(allocation: Allocation, features: OptimizerFeatures) -> str:
    planned = []
    for purchase in allocation.purchases:
        if purchase.recommendation.category not in planned:
            planned.append(purchase.recommendation.category)
    covered = set(planned) | set(features.inventory_by_category)
    gaps = [
        category
        for category in FoodCategory
        if category != FoodCategory.OTHER and category not in covered
    ]
    focus = (
        f"Your shopping plan focuses on {', '.join(c.value for c in planned)}."
        if planned
        else "Your shopping plan is empty."
    )
    if gaps:
        return f"{focus} Consider adding {', '.join(c.value for c in gaps)} for complete nutrition."
    return f"{focus} Good balance across food groups for optimal nutrition."


def cost_saving_tips(allocation: Allocation, household_size: int) -> list[str]:
    tips = [
        "Buy in bulk for non-perishable items to save 15-30%",
        "Consider seasonal produce for better prices and freshness",
        "Compare unit prices to find best value",
        "Store brands often offer the same quality at 20-30% less cost",
    ]
    if household_size > LARGE_HOUSEHOLD:
        tips.append("Family packs offer better value for larger households")
    urgent = sum(
        1
        for purchase in allocation.purchases
        if purchase.recommendation.urgency == UrgencyTier.HIGH
    )
    if urgent > MANY_URGENT_ITEMS:
        tips.append(
            "Buy high-priority items first and spread other purchases across trips"
        )
    return tips


def meal_planning_suggestions(
    allocation: Allocation, inventory: list[InventoryRecord]
) -> list[str]:
    suggestions = [
        "Plan 3-4 days worth of meals to reduce food waste",
        "Prep ingredients in batches for efficient cooking",
        "Use similar ingredients across multiple meals",
    ]
    categories = {purchase.recommendation.category for purchase in allocation.purchases}
    if {FoodCategory.PROTEIN, FoodCategory.GRAINS} <= categories:
        suggestions.append("Combine grains with proteins for balanced, filling meals")
    if len(inventory) > LARGE_INVENTORY:
        suggestions.append("Use existing inventory first to minimize waste and save money")
    return suggestions


def shopping_line(purchase: AllocatedPurchase) -> ShoppingLine:
    recommendation = purchase.recommendation
    return ShoppingLine(
        name=recommendation.name,
        category=recommendation.category,
        quantity=recommendation.quantity,
        unit=recommendation.unit,
        display_quantity=format_quantity(recommendation.quantity, recommendation.unit),
        unit_cost=recommendation.unit_cost,
        total_cost=purchase.cost,
        urgency=recommendation.urgency,
        reason=recommendation.reason,
        nutritional_value=recommendation.nutritional_value,
        alternative_options=list(recommendation.alternative_options),
        adjusted_for_budget=purchase.adjusted,
        budget_impact=BudgetImpact(
            cost=purchase.cost,
            remaining_budget=purchase.remaining_budget,
            percentage_used=purchase.percentage_of_budget,
        ),
    )


def inventory_snapshot(
    inventory: list[InventoryRecord], features: OptimizerFeatures
) -> InventorySnapshot:
    return InventorySnapshot(
        total_items=len(inventory),
        total_value=round(features.inventory_value, 2),
        categories={
            category: len(records)
            for category, records in features.inventory_by_category.items()
        },
    )


def assemble_shopping(
    profile: UserProfile,
    features: OptimizerFeatures,
    inventory: list[InventoryRecord],
    allocation: Allocation,
    source: AdviceSource,
) -> ShoppingPlanResult:
    return ShoppingPlanResult(
        summary=ShoppingSummary(
            total_budget=allocation.total_budget,
            allocated_budget=allocation.allocated,
            remaining_budget=allocation.remaining,
            items_recommended=len(allocation.purchases),
            skipped_count=allocation.skipped_count,
            priority_categories=priority_categories(allocation),
            user_location=profile.location.label,
        ),
        recommendations=[shopping_line(purchase) for purchase in allocation.purchases],
        insights=ShoppingInsights(
            budget_optimization=budget_optimization(allocation),
            nutritional_focus=nutritional_focus(allocation, features),
            cost_saving_tips=cost_saving_tips(allocation, features.household_size),
            meal_planning_suggestions=meal_planning_suggestions(allocation, inventory),
        ),
        current_inventory=inventory_snapshot(inventory, features),
        source=source,
    )


def empty_shopping(
    profile: UserProfile, features: OptimizerFeatures, inventory: list[InventoryRecord]
) -> ShoppingPlanResult:
    return assemble_shopping(
        profile,
        features,
        inventory,
        Allocation(total_budget=features.total_budget),
        AdviceSource.NONE,
    )
