"""Deterministic fallbacks that mirror the advisory schemas.

Each function uses only derived features and the category profile table, and
returns an instance of the schema the advisory path is validated against.
"""

import math
from collections.abc import Mapping

from pantry_insights.domain.advice import (
    AlertLevel,
    Availability,
    Balance,
    CategoryConsumption,
    ConsumptionUrgency,
    EatingFrequency,
    FoodSuggestion,
    Imbalance,
    ImpactAdvice,
    ImpactTrend,
    ItemRiskPrediction,
    NutrientAdvice,
    NutrientAssessment,
    PatternAdvice,
    RiskAdvice,
    SeasonalityRisk,
    Sdg2Score,
    Sdg12Score,
    ShoppingAdvice,
    ShoppingSuggestion,
    WastePrediction,
)
from pantry_insights.domain.categories import CategoryProfile, profile_for
from pantry_insights.domain.features import (
    CategoryUsage,
    ExpirationFeatures,
    ImpactFeatures,
    ItemExpiry,
    NutrientGapFeatures,
    OptimizerFeatures,
    PatternFeatures,
    PeriodMetrics,
)
from pantry_insights.domain.models import (
    CatalogOption,
    FoodCategory,
    InventoryRecord,
    Nutrient,
    RiskTier,
    Severity,
    UrgencyTier,
    UserProfile,
)
from pantry_insights.domain.units import BASE_UNITS, UnitType, format_quantity
from pantry_insights.services.features import clamp, severity_for

MAX_FOOD_SUGGESTIONS = 5
CATALOG_OPTIONS_PER_CATEGORY = 2
FULL_DIVERSITY_CATEGORIES = 8
TARGET_DIVERSITY_PER_DAY = 5
DEFAULT_AWARENESS = 50.0
IMPACT_TREND_THRESHOLD_PERCENT = 5.0
STRENGTH_THRESHOLD = 70.0
LOW_DATA_COMPLETENESS = 50.0
CORE_CATEGORIES = (
    FoodCategory.FRUITS,
    FoodCategory.VEGETABLES,
    FoodCategory.DAIRY,
    FoodCategory.PROTEIN,
    FoodCategory.GRAINS,
)

URGENCY_BY_TIER = {
    RiskTier.CRITICAL: ConsumptionUrgency.IMMEDIATE,
    RiskTier.HIGH: ConsumptionUrgency.SOON,
    RiskTier.MEDIUM: ConsumptionUrgency.MODERATE,
    RiskTier.LOW: ConsumptionUrgency.FLEXIBLE,
}
ALERT_BY_TIER = {
    RiskTier.CRITICAL: AlertLevel.RED,
    RiskTier.HIGH: AlertLevel.ORANGE,
    RiskTier.MEDIUM: AlertLevel.YELLOW,
    RiskTier.LOW: AlertLevel.GREEN,
}
_PRIORITY_BY_SEVERITY = {
    Severity.SEVERE: UrgencyTier.HIGH,
    Severity.MODERATE: UrgencyTier.HIGH,
    Severity.MILD: UrgencyTier.MEDIUM,
    Severity.OPTIMAL: UrgencyTier.LOW,
}
_IMBALANCE_PRIORITY = {
    Severity.SEVERE: UrgencyTier.HIGH,
    Severity.MODERATE: UrgencyTier.MEDIUM,
    Severity.MILD: UrgencyTier.LOW,
}
NUTRIENT_IMPLICATIONS: dict[Nutrient, tuple[str, ...]] = {
    Nutrient.CALORIES: ("Fatigue and low energy", "Difficulty maintaining weight"),
    Nutrient.PROTEIN: ("Reduced muscle maintenance", "Lower satiety levels"),
    Nutrient.CARBS: ("Low energy levels", "Reduced exercise performance"),
    Nutrient.FATS: (
        "Poor absorption of fat-soluble vitamins",
        "Reduced hormone production",
    ),
    Nutrient.FIBER: ("Irregular digestion", "Less stable blood sugar"),
}
CATEGORY_IMPLICATIONS: dict[FoodCategory, tuple[str, ...]] = {
    FoodCategory.FRUITS: ("Lower vitamin C intake", "Fewer antioxidants"),
    FoodCategory.VEGETABLES: ("Lower fiber and mineral intake",),
    FoodCategory.DAIRY: ("Lower calcium intake",),
    FoodCategory.PROTEIN: ("Reduced muscle maintenance",),
    FoodCategory.GRAINS: ("Less sustained energy",),
    FoodCategory.BEVERAGES: ("Excess sugar from drinks",),
    FoodCategory.SNACKS: ("Excess sodium and added sugar",),
}


# Expiration risk


def risk_score(days: int, multiplier: float) -> float:
    """Linear risk from days until expiration scaled by the seasonal multiplier."""
    if days < 0:
        return 0.0
    return clamp((100 - days) * multiplier)


def consumption_priority(score: float) -> int:
    return int(clamp(math.ceil(score / 10), 1, 10))


def seasonality_risk(multiplier: float) -> SeasonalityRisk:
    if multiplier > 1:
        return SeasonalityRisk.INCREASED
    if multiplier < 1:
        return SeasonalityRisk.DECREASED
    return SeasonalityRisk.NORMAL


def predict_item_risk(
    item: ItemExpiry,
    features: ExpirationFeatures,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> ItemRiskPrediction:
    record = item.record
    profile = profile_for(profiles, record.category)
    score = risk_score(item.days_until_expiration, item.seasonal_multiplier)
    if item.days_until_expiration < 0:
        primary_reason = "No expiration date recorded"
    else:
        primary_reason = f"Expires in {item.days_until_expiration} days"
    return ItemRiskPrediction(
        item_id=str(record.id),
        item_name=record.name,
        category=record.category,
        risk_score=score,
        risk_tier=item.tier,
        consumption_urgency=URGENCY_BY_TIER[item.tier],
        seasonality_risk=seasonality_risk(item.seasonal_multiplier),
        consumption_priority=consumption_priority(score),
        consume_by=record.expiration_date.isoformat() if record.expiration_date else "ASAP",
        storage_tips=list(profile.storage_tips),
        alternative_uses=list(profile.alternative_uses),
        alert_level=ALERT_BY_TIER[item.tier],
        primary_reason=primary_reason,
        contributing_factors=[
            f"Seasonal multiplier: {item.seasonal_multiplier}x",
            f"Value at risk: ${item.estimated_value:.2f}",
        ],
        seasonality_impact=features.season.reason_for(record.category),
    )


def fallback_risk(
    features: ExpirationFeatures, profiles: Mapping[FoodCategory, CategoryProfile]
) -> RiskAdvice:
    return RiskAdvice(
        predictions=[predict_item_risk(item, features, profiles) for item in features.items]
    )


# Nutrient gaps


def _is_avoided(name: str, profile: UserProfile) -> bool:
    lowered = name.lower()
    terms = (*profile.avoided_ingredients, *profile.dietary_restrictions)
    return any(term.strip() and term.strip().lower() in lowered for term in terms)


def _covered_nutrients(
    category: FoodCategory,
    deficient: dict[Nutrient, Severity],
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> list[Nutrient]:
    key_nutrients = profile_for(profiles, category).key_nutrients
    return [nutrient for nutrient in key_nutrients if nutrient in deficient]


def _suggestion_priority(
    nutrients: list[Nutrient], deficient: dict[Nutrient, Severity]
) -> UrgencyTier:
    ranked = sorted(
        (_PRIORITY_BY_SEVERITY[deficient[nutrient]] for nutrient in nutrients),
        key=lambda tier: tier.rank,
        reverse=True,
    )
    return ranked[0] if ranked else UrgencyTier.LOW


def food_suggestions(
    deficient: dict[Nutrient, Severity],
    inventory: list[InventoryRecord],
    catalog: list[CatalogOption],
    profile: UserProfile,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> list[FoodSuggestion]:
    """Inventory items first, then the cheapest catalog options, covering gaps."""
    if not deficient:
        return []
    suggestions: list[FoodSuggestion] = []
    for record in inventory:
        covered = _covered_nutrients(record.category, deficient, profiles)
        if not covered or _is_avoided(record.name, profile):
            continue
        suggestions.append(
            FoodSuggestion(
                item_name=record.name,
                category=record.category,
                quantity=1.0,
                unit=record.unit,
                availability=Availability.IN_INVENTORY,
                reason=f"Already in inventory and helps with {_join_nutrients(covered)}",
                priority=_suggestion_priority(covered, deficient),
                estimated_cost=record.unit_cost,
                target_nutrients=covered,
            )
        )
    for option in sorted(catalog, key=lambda candidate: candidate.unit_cost):
        covered = _covered_nutrients(option.category, deficient, profiles)
        if not covered or _is_avoided(option.name, profile):
            continue
        suggestions.append(
            FoodSuggestion(
                item_name=option.name,
                category=option.category,
                quantity=1.0,
                unit=option.unit,
                availability=Availability.IN_CATALOG,
                reason=f"Affordable source of {_join_nutrients(covered)}",
                priority=_suggestion_priority(covered, deficient),
                estimated_cost=option.unit_cost,
                target_nutrients=covered,
            )
        )
    return suggestions[:MAX_FOOD_SUGGESTIONS]


def _join_nutrients(nutrients: list[Nutrient]) -> str:
    return ", ".join(nutrient.value for nutrient in nutrients)


def fallback_nutrients(
    features: NutrientGapFeatures,
    profile: UserProfile,
    inventory: list[InventoryRecord],
    catalog: list[CatalogOption],
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> NutrientAdvice:
    assessments = [
        NutrientAssessment(
            nutrient=status.nutrient,
            current_intake=status.current_intake,
            recommended_intake=status.recommended_intake,
            deficiency_percentage=status.deficiency_percentage,
            severity=status.severity,
            trend=status.trend,
            days_deficient=status.days_deficient,
            health_implications=(
                list(NUTRIENT_IMPLICATIONS[status.nutrient])
                if status.severity != Severity.OPTIMAL
                else []
            ),
        )
        for status in features.statuses
    ]
    deficient = {status.nutrient: status.severity for status in features.deficient}
    mean_deficiency = sum(status.deficiency_percentage for status in features.statuses)
    if features.statuses:
        mean_deficiency /= len(features.statuses)
    worst = sorted(
        features.deficient, key=lambda status: status.deficiency_percentage, reverse=True
    )

    key_findings = [
        f"{status.nutrient.value.capitalize()} intake is "
        f"{status.deficiency_percentage:.0f}% below target ({status.severity.value})"
        for status in worst
    ] or ["All tracked nutrients are within 20% of target"]
    recommendations = [
        f"Add foods rich in {status.nutrient.value} to daily meals" for status in worst
    ]
    recommendations += ["Increase variety in diet", "Track consumption more consistently"]
    priority_actions = [
        f"Review daily {status.nutrient.value} intake" for status in worst[:2]
    ] or ["Maintain current intake"]
    return NutrientAdvice(
        nutrients=assessments,
        food_suggestions=food_suggestions(deficient, inventory, catalog, profile, profiles),
        overall_score=clamp(100 - mean_deficiency),
        key_findings=key_findings,
        recommendations=recommendations,
        priority_actions=priority_actions,
        preventive_measures=[
            "Maintain balanced diet",
            "Plan meals around nutrients that run low",
        ],
    )


# Consumption patterns


def dominant_unit_type(usage: CategoryUsage) -> UnitType:
    for unit_type in (UnitType.MASS, UnitType.VOLUME, UnitType.COUNT):
        if unit_type in usage.base_totals:
            return unit_type
    return UnitType.COUNT


def _balance(servings: float, profile: CategoryProfile) -> Balance:
    if profile.recommended_servings > 0 and servings < profile.recommended_servings * 0.8:
        return Balance.DEFICIENT
    if profile.max_servings > 0 and servings > profile.max_servings:
        return Balance.EXCESSIVE
    return Balance.OPTIMAL


def category_consumption(
    usage: list[CategoryUsage], profiles: Mapping[FoodCategory, CategoryProfile]
) -> list[CategoryConsumption]:
    rows = []
    for item in usage:
        profile = profile_for(profiles, item.category)
        unit_type = dominant_unit_type(item)
        rows.append(
            CategoryConsumption(
                category=item.category,
                total_consumed=item.base_totals.get(unit_type, 0.0),
                average_daily=item.daily_averages.get(unit_type, 0.0),
                unit=BASE_UNITS[unit_type],
                frequency=item.frequency,
                trend=item.trend,
                balance=_balance(item.servings_per_day, profile),
                recommended_intake=profile.recommended_servings,
            )
        )
    return rows


def detect_imbalances(
    usage: list[CategoryUsage], profiles: Mapping[FoodCategory, CategoryProfile]
) -> list[Imbalance]:
    """Compare servings per day with each category's recommended range."""
    servings = {item.category: item.servings_per_day for item in usage}
    imbalances = []
    for category, profile in profiles.items():
        current = servings.get(category, 0.0)
        implications = list(CATEGORY_IMPLICATIONS.get(category, ()))
        if profile.recommended_servings > 0 and current < profile.recommended_servings:
            recommended = profile.recommended_servings
            variance = (current - recommended) / recommended * 100
            suggestion = (
                f"Add {recommended - current:.1f} more daily servings of {category.value}"
            )
        elif profile.max_servings > 0 and current > profile.max_servings:
            recommended = profile.max_servings
            variance = (current - recommended) / recommended * 100
            suggestion = f"Limit {category.value} to {recommended:g} servings per day"
        else:
            continue
        severity = severity_for(clamp(abs(variance)))
        if severity == Severity.OPTIMAL:
            continue
        imbalances.append(
            Imbalance(
                category=category,
                current_intake=current,
                recommended_intake=recommended,
                variance=variance,
                severity=severity,
                health_implications=implications,
                suggestions=[suggestion],
                priority=_IMBALANCE_PRIORITY[severity],
            )
        )
    imbalances.sort(key=lambda imbalance: abs(imbalance.variance), reverse=True)
    return imbalances


def waste_predictions(
    features: PatternFeatures, profiles: Mapping[FoodCategory, CategoryProfile]
) -> list[WastePrediction]:
    predictions = []
    for risk in sorted(features.waste_risks, key=lambda item: item.probability, reverse=True):
        if risk.probability <= 0:
            continue
        record = risk.record
        profile = profile_for(profiles, record.category)
        predictions.append(
            WastePrediction(
                item_id=str(record.id),
                item_name=record.name,
                category=record.category,
                probability=risk.probability,
                risk_tier=risk.tier,
                predicted_waste_date=risk.predicted_waste_date,
                consumption_rate_needed=risk.consumption_rate_needed,
                unit=record.unit,
                days_of_consumption=max(risk.days_until_expiration, 0),
                recommendations=[
                    "Eat about "
                    f"{format_quantity(risk.consumption_rate_needed, record.unit)}"
                    " per day to finish it in time",
                    *profile.alternative_uses[:1],
                ],
            )
        )
    return predictions


def health_score(features: PatternFeatures, imbalances: list[Imbalance]) -> float:
    """Mean of meal regularity, diversity and the share of balanced core categories."""
    imbalanced = {imbalance.category for imbalance in imbalances}
    balanced_share = (
        sum(1 for category in CORE_CATEGORIES if category not in imbalanced)
        / len(CORE_CATEGORIES)
        * 100
    )
    diversity = clamp(features.dietary_diversity / TARGET_DIVERSITY_PER_DAY * 100)
    return clamp((features.regularity_score + diversity + balanced_share) / 3)


def fallback_patterns(
    features: PatternFeatures, profiles: Mapping[FoodCategory, CategoryProfile]
) -> PatternAdvice:
    imbalances = detect_imbalances(features.categories, profiles)
    predictions = waste_predictions(features, profiles)
    insights = []
    if features.categories:
        top = features.categories[0]
        insights.append(
            f"{top.category.value.capitalize()} is your most frequently logged category "
            f"({top.frequency:.0f}% of days)"
        )
    insights.append(
        f"You eat {features.dietary_diversity:.1f} food categories per day on average"
    )
    if predictions:
        insights.append(f"{len(predictions)} inventory items may be wasted before use")
    recommendations = [
        suggestion for imbalance in imbalances for suggestion in imbalance.suggestions
    ]
    if features.data_completeness < LOW_DATA_COMPLETENESS:
        recommendations.append("Log more detailed data for better insights")
    return PatternAdvice(
        category_consumption=category_consumption(features.categories, profiles),
        imbalances=imbalances,
        waste_predictions=predictions,
        eating_frequency=EatingFrequency(
            average_meals_per_day=features.meals_per_day,
            average_snacks_per_day=features.snacks_per_day,
            regularity_score=features.regularity_score,
        ),
        health_score=health_score(features, imbalances),
        key_insights=insights,
        recommendations=recommendations,
    )


# Sustainability impact


def _ratio(actual: float, target: float) -> float:
    return actual / target if target > 0 else 1.0


def sdg_scores(
    metrics: PeriodMetrics, features: ImpactFeatures
) -> tuple[Sdg2Score, Sdg12Score, float]:
    """SDG 2 and SDG 12 sub-scores plus the personal score for one period."""
    sdg2 = Sdg2Score(
        overall=round(metrics.nutrition_adequacy),
        food_security=clamp(
            _ratio(metrics.average_daily_calories, features.calorie_target) * 100
        ),
        nutrition_quality=clamp(
            (
                _ratio(metrics.protein_intake, features.protein_target_g)
                + _ratio(metrics.fiber_intake, features.fiber_target_g)
            )
            * 50
        ),
        sustainable_consumption=round(metrics.sustainability_score),
        dietary_diversity=clamp(
            round(metrics.dietary_diversity / FULL_DIVERSITY_CATEGORIES * 100)
        ),
    )
    sdg12 = Sdg12Score(
        overall=round(metrics.sustainability_score),
        waste_reduction=clamp(metrics.waste_reduction_rate),
        sustainable_consumption=round(metrics.meal_regularity),
        awareness=DEFAULT_AWARENESS if metrics.logged_days else 0.0,
    )
    personal = round((sdg2.overall + sdg12.overall) / 2)
    return sdg2, sdg12, float(personal)


def impact_trend(current: float, previous: float) -> ImpactTrend:
    """Direction of change with a 5% dead band."""
    if previous <= 0:
        return ImpactTrend.IMPROVING if current > 0 else ImpactTrend.STABLE
    change = (current - previous) / previous * 100
    if change > IMPACT_TREND_THRESHOLD_PERCENT:
        return ImpactTrend.IMPROVING
    if change < -IMPACT_TREND_THRESHOLD_PERCENT:
        return ImpactTrend.DECLINING
    return ImpactTrend.STABLE


_SDG2_FIELDS = (
    "food_security",
    "nutrition_quality",
    "sustainable_consumption",
    "dietary_diversity",
)
_SDG12_FIELDS = ("waste_reduction", "sustainable_consumption", "awareness")


def fallback_impact(features: ImpactFeatures) -> ImpactAdvice:
    sdg2, sdg12, personal = sdg_scores(features.current, features)
    if features.comparison.logged_days:
        previous2, previous12, _ = sdg_scores(features.comparison, features)
        sdg2.trends = {
            name: impact_trend(getattr(sdg2, name), getattr(previous2, name))
            for name in _SDG2_FIELDS
        }
        sdg12.trends = {
            name: impact_trend(getattr(sdg12, name), getattr(previous12, name))
            for name in _SDG12_FIELDS
        }
    else:
        sdg2.trends = {name: ImpactTrend.STABLE for name in _SDG2_FIELDS}
        sdg12.trends = {name: ImpactTrend.STABLE for name in _SDG12_FIELDS}

    areas = {
        "Nutrition quality": sdg2.nutrition_quality,
        "Food security": sdg2.food_security,
        "Dietary diversity": sdg2.dietary_diversity,
        "Waste reduction": sdg12.waste_reduction,
        "Meal regularity": sdg12.sustainable_consumption,
    }
    ranked = sorted(areas.items(), key=lambda item: item[1])
    return ImpactAdvice(
        sdg2=sdg2,
        sdg12=sdg12,
        personal_score=personal,
        improvement_areas=[name for name, _ in ranked[:2]],
        strengths=[name for name, score in ranked if score >= STRENGTH_THRESHOLD],
        key_insights=[
            f"Personal SDG score is {personal:.0f}/100",
            f"Estimated waste rate is {features.estimated_waste_rate * 100:.0f}% "
            "against a 25% baseline",
        ],
    )


# Shopping


def _stock_urgency(stock: int) -> UrgencyTier:
    return UrgencyTier.HIGH if stock == 0 else UrgencyTier.MEDIUM


def fallback_shopping(
    features: OptimizerFeatures,
    profile: UserProfile,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> ShoppingAdvice:
    """Candidates for under-stocked categories from the catalog or built-in staples."""
    suggestions: list[ShoppingSuggestion] = []
    for category, category_profile in profiles.items():
        stock = features.stock_levels.get(category, 0)
        if category_profile.min_stock <= 0 or stock >= category_profile.min_stock:
            continue
        urgency = _stock_urgency(stock)
        reason = f"{category.value.capitalize()} stock is {'empty' if stock == 0 else 'low'}"
        nutritional_value = ", ".join(
            nutrient.value for nutrient in category_profile.key_nutrients
        )
        options = sorted(
            (
                option
                for option in features.catalog_by_category.get(category, [])
                if not _is_avoided(option.name, profile)
            ),
            key=lambda option: option.unit_cost,
        )
        if options:
            quantity = max(1.0, category_profile.recommended_servings * features.household_size)
            chosen = options[:CATALOG_OPTIONS_PER_CATEGORY]
            alternatives = [option.name for option in options[CATALOG_OPTIONS_PER_CATEGORY:]][:3]
            for option in chosen:
                suggestions.append(
                    ShoppingSuggestion(
                        name=option.name,
                        category=category,
                        quantity=quantity,
                        unit=option.unit,
                        unit_cost=option.unit_cost,
                        total_cost=round(quantity * option.unit_cost, 2),
                        urgency=urgency,
                        reason=reason,
                        nutritional_value=nutritional_value,
                        alternative_options=alternatives,
                    )
                )
        elif category_profile.staple and not _is_avoided(category_profile.staple.name, profile):
            staple = category_profile.staple
            suggestions.append(
                ShoppingSuggestion(
                    name=staple.name,
                    category=category,
                    quantity=staple.quantity,
                    unit=staple.unit,
                    unit_cost=staple.unit_cost,
                    total_cost=staple.total_cost,
                    urgency=urgency,
                    reason=staple.reason,
                    nutritional_value=staple.nutritional_value,
                )
            )
    return ShoppingAdvice(recommendations=suggestions)
