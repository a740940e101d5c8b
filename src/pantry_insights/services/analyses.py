"""The five analyses expressed as strategies over the shared pipeline."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from pantry_insights.domain.advice import (
    EatingFrequency,
    ImpactAdvice,
    NutrientAdvice,
    NutrientAssessment,
    PatternAdvice,
    RiskAdvice,
    ShoppingAdvice,
)
from pantry_insights.domain.categories import DEFAULT_CATEGORY_PROFILES, CategoryProfile
from pantry_insights.domain.features import (
    ExpirationFeatures,
    ImpactFeatures,
    NutrientGapFeatures,
    OptimizerFeatures,
    PatternFeatures,
    PeriodMetrics,
)
from pantry_insights.domain.models import (
    FoodCategory,
    Recommendation,
    Severity,
    UserProfile,
)
from pantry_insights.domain.results import (
    AdviceSource,
    ExpirationRiskResult,
    ImpactResult,
    NutrientGapResult,
    PatternResult,
    ShoppingPlanResult,
)
from pantry_insights.services import assembler
from pantry_insights.services import fallback as heuristics
from pantry_insights.services.advisory import AdvisoryRequest
from pantry_insights.services.aggregator import (
    COMPARISON_WINDOW,
    IMPACT_WINDOW,
    NUTRIENT_GAP_WINDOW,
    PATTERN_WINDOW,
    AnalysisInput,
    AnalysisQuery,
    clamp_window,
)
from pantry_insights.services.allocator import allocate, exclude_stocked
from pantry_insights.services.features import (
    expiration_features,
    impact_features,
    nutrient_gap_features,
    optimizer_features,
    pattern_features,
    seasonal_context,
)
from pantry_insights.services.pipeline import AnalysisPipeline
from pantry_insights.services.price_comparison import PriceComparisonService

Profiles = Mapping[FoodCategory, CategoryProfile]


def profile_payload(profile: UserProfile) -> dict[str, object]:
    return {
        "calories_per_day": profile.calories_per_day,
        "macro_targets": {
            "protein": profile.macro_targets.protein,
            "carbs": profile.macro_targets.carbs,
            "fats": profile.macro_targets.fats,
        },
        "household_size": profile.household_size,
        "budget": profile.budget,
        "weekly_budget": profile.weekly_budget,
        "dietary_restrictions": list(profile.dietary_restrictions),
        "avoided_ingredients": list(profile.avoided_ingredients),
        "location": profile.location.label,
    }


# Expiration risk


@dataclass
class ExpirationRiskStrategy:
    profiles: Profiles = field(default_factory=lambda: DEFAULT_CATEGORY_PROFILES)
    kind: str = "expiration_risk"
    schema: type[RiskAdvice] = RiskAdvice

    def query(self) -> AnalysisQuery:
        return AnalysisQuery(include_inventory=True, expiring_only=True)

    def derive(self, data: AnalysisInput) -> ExpirationFeatures:
        season = seasonal_context(data.today, data.profile.location, self.profiles)
        return expiration_features(data.inventory, data.today, season)

    def is_empty(self, data: AnalysisInput, features: ExpirationFeatures) -> bool:
        return not features.items

    def empty_result(
        self, data: AnalysisInput, features: ExpirationFeatures, now: datetime
    ) -> ExpirationRiskResult:
        return assembler.empty_risk(data.profile, features.season, now)

    def build_request(
        self, data: AnalysisInput, features: ExpirationFeatures
    ) -> AdvisoryRequest:
        season = features.season
        items = [
            {
                "item_id": str(item.record.id),
                "item_name": item.record.name,
                "category": item.record.category.value,
                "quantity": item.record.quantity,
                "unit": item.record.unit,
                "days_until_expiration": item.days_until_expiration,
                "age_days": item.age_days,
                "estimated_value": round(item.estimated_value, 2),
                "risk_tier": item.tier.value,
                "seasonal_multiplier": item.seasonal_multiplier,
            }
            for item in features.items
        ]
        return AdvisoryRequest(
            kind=self.kind,
            instructions=(
                "You are a food waste prevention analyst. Predict the expiration risk "
                "of each inventory item and recommend how to use it in time."
            ),
            profile=profile_payload(data.profile),
            features={
                "season": season.season.value,
                "temperature": season.temperature.value,
                "humidity_factor": season.humidity_factor,
                "items": items,
            },
            summary=f"{len(items)} dated items in inventory during {season.season.value}.",
            guidelines=(
                "Return one prediction per item_id given in the features",
                "Use the provided risk_tier; critical means 3 days or less",
                "consumption_priority is 1 (can wait) to 10 (eat now)",
            ),
        )

    def fallback(self, data: AnalysisInput, features: ExpirationFeatures) -> RiskAdvice:
        return heuristics.fallback_risk(features, self.profiles)

    def reconcile(
        self, data: AnalysisInput, features: ExpirationFeatures, advice: RiskAdvice
    ) -> RiskAdvice:
        """Keep one prediction per inventory item with the tier fixed by its dates."""
        items = {str(item.record.id): item for item in features.items}
        predictions = {}
        for prediction in advice.predictions:
            item = items.get(prediction.item_id)
            if item is None or prediction.item_id in predictions:
                continue
            predictions[prediction.item_id] = prediction.model_copy(
                update={
                    "item_name": item.record.name,
                    "category": item.record.category,
                    "risk_tier": item.tier,
                    "consumption_urgency": heuristics.URGENCY_BY_TIER[item.tier],
                    "alert_level": heuristics.ALERT_BY_TIER[item.tier],
                }
            )
        for item_id, item in items.items():
            if item_id not in predictions:
                predictions[item_id] = heuristics.predict_item_risk(item, features, self.profiles)
        return RiskAdvice(predictions=list(predictions.values()))

    def assemble(  # noqa: PLR0913
        self,
        data: AnalysisInput,
        features: ExpirationFeatures,
        advice: RiskAdvice,
        source: AdviceSource,
        now: datetime,
    ) -> ExpirationRiskResult:
        return assembler.assemble_risk(data.profile, features, advice, source, now)


# Nutrient gaps


@dataclass
class NutrientGapStrategy:
    window_days: int = NUTRIENT_GAP_WINDOW.default
    profiles: Profiles = field(default_factory=lambda: DEFAULT_CATEGORY_PROFILES)
    kind: str = "nutrient_gaps"
    schema: type[NutrientAdvice] = NutrientAdvice

    def query(self) -> AnalysisQuery:
        return AnalysisQuery(
            window_days=self.window_days,
            include_inventory=True,
            include_catalog=True,
            include_consumption=True,
        )

    def derive(self, data: AnalysisInput) -> NutrientGapFeatures:
        return nutrient_gap_features(
            data.profile, data.consumption, data.window_days, data.today
        )

    def is_empty(self, data: AnalysisInput, features: NutrientGapFeatures) -> bool:
        return not data.consumption

    def empty_result(
        self, data: AnalysisInput, features: NutrientGapFeatures, now: datetime
    ) -> NutrientGapResult:
        return assembler.empty_nutrients(data.profile, features)

    def build_request(
        self, data: AnalysisInput, features: NutrientGapFeatures
    ) -> AdvisoryRequest:
        return AdvisoryRequest(
            kind=self.kind,
            instructions=(
                "You are a nutrition analyst. Assess nutrient gaps from the daily "
                "averages and suggest foods, preferring items already in inventory."
            ),
            profile=profile_payload(data.profile),
            features={
                "logged_days": features.logged_days,
                "window_days": features.window_days,
                "nutrients": [
                    {
                        "nutrient": status.nutrient.value,
                        "current_intake": round(status.current_intake, 1),
                        "recommended_intake": round(status.recommended_intake, 1),
                        "deficiency_percentage": round(status.deficiency_percentage, 1),
                        "severity": status.severity.value,
                        "trend": status.trend.value,
                        "days_deficient": status.days_deficient,
                    }
                    for status in features.statuses
                ],
                "inventory": sorted({record.name for record in data.inventory}),
                "catalog": [
                    {
                        "name": option.name,
                        "category": option.category.value,
                        "unit_cost": option.unit_cost,
                    }
                    for option in data.catalog
                ],
            },
            summary=(
                f"{len(features.deficient)} of {len(features.statuses)} nutrients "
                f"below target over {features.logged_days} logged days."
            ),
            guidelines=(
                "Respect dietary restrictions and avoided ingredients",
                "Severity: optimal under 20%, mild to 40%, moderate to 60%, else severe",
            ),
        )

    def fallback(self, data: AnalysisInput, features: NutrientGapFeatures) -> NutrientAdvice:
        return heuristics.fallback_nutrients(
            features, data.profile, data.inventory, data.catalog, self.profiles
        )

    def reconcile(
        self, data: AnalysisInput, features: NutrientGapFeatures, advice: NutrientAdvice
    ) -> NutrientAdvice:
        """Numbers come from the features; advisory text is kept."""
        by_nutrient = {assessment.nutrient: assessment for assessment in advice.nutrients}
        nutrients = []
        for status in features.statuses:
            advised = by_nutrient.get(status.nutrient)
            implications = advised.health_implications if advised else []
            if not implications and status.severity != Severity.OPTIMAL:
                implications = list(heuristics.NUTRIENT_IMPLICATIONS[status.nutrient])
            nutrients.append(
                NutrientAssessment(
                    nutrient=status.nutrient,
                    current_intake=status.current_intake,
                    recommended_intake=status.recommended_intake,
                    deficiency_percentage=status.deficiency_percentage,
                    severity=status.severity,
                    trend=status.trend,
                    days_deficient=status.days_deficient,
                    health_implications=implications,
                )
            )
        return advice.model_copy(update={"nutrients": nutrients})

    def assemble(  # noqa: PLR0913
        self,
        data: AnalysisInput,
        features: NutrientGapFeatures,
        advice: NutrientAdvice,
        source: AdviceSource,
        now: datetime,
    ) -> NutrientGapResult:
        return assembler.assemble_nutrients(data.profile, features, advice, source)


# Consumption patterns


@dataclass
class ConsumptionPatternStrategy:
    window_days: int = PATTERN_WINDOW.default
    include_waste_prediction: bool = True
    profiles: Profiles = field(default_factory=lambda: DEFAULT_CATEGORY_PROFILES)
    kind: str = "consumption_patterns"
    schema: type[PatternAdvice] = PatternAdvice

    def query(self) -> AnalysisQuery:
        return AnalysisQuery(
            window_days=self.window_days,
            include_inventory=self.include_waste_prediction,
            include_consumption=True,
        )

    def derive(self, data: AnalysisInput) -> PatternFeatures:
        return pattern_features(
            data.profile,
            data.consumption,
            data.inventory,
            data.window_days,
            data.today,
            self.profiles,
        )

    def is_empty(self, data: AnalysisInput, features: PatternFeatures) -> bool:
        return not data.consumption

    def empty_result(
        self, data: AnalysisInput, features: PatternFeatures, now: datetime
    ) -> PatternResult:
        return assembler.empty_patterns(features)

    def build_request(self, data: AnalysisInput, features: PatternFeatures) -> AdvisoryRequest:
        return AdvisoryRequest(
            kind=self.kind,
            instructions=(
                "You are a dietary pattern analyst. Identify category imbalances, "
                "eating habits and likely food waste."
            ),
            profile=profile_payload(data.profile),
            features={
                "logged_days": features.logged_days,
                "entry_count": features.entry_count,
                "dietary_diversity": round(features.dietary_diversity, 2),
                "regularity_score": round(features.regularity_score, 1),
                "meal_distribution": {
                    slot.value: count for slot, count in features.meal_distribution.items()
                },
                "categories": [
                    {
                        "category": usage.category.value,
                        "servings_per_day": round(usage.servings_per_day, 2),
                        "frequency": round(usage.frequency, 1),
                        "trend": usage.trend.value,
                        "totals": {
                            unit_type.value: round(total, 1)
                            for unit_type, total in usage.base_totals.items()
                        },
                    }
                    for usage in features.categories
                ],
                "waste_risks": [
                    {
                        "item_id": str(risk.record.id),
                        "item_name": risk.record.name,
                        "category": risk.record.category.value,
                        "unit": risk.record.unit,
                        "days_until_expiration": risk.days_until_expiration,
                        "probability": round(risk.probability, 1),
                    }
                    for risk in features.waste_risks
                ],
            },
            summary=(
                f"{features.entry_count} entries over {features.logged_days} logged days."
            ),
            guidelines=(
                "Only predict waste for item_ids listed in waste_risks",
                "Quantities are in base units: g, ml or pieces",
            ),
        )

    def fallback(self, data: AnalysisInput, features: PatternFeatures) -> PatternAdvice:
        return heuristics.fallback_patterns(features, self.profiles)

    def reconcile(
        self, data: AnalysisInput, features: PatternFeatures, advice: PatternAdvice
    ) -> PatternAdvice:
        known = {str(risk.record.id) for risk in features.waste_risks}
        predictions = [
            prediction
            for prediction in advice.waste_predictions
            if self.include_waste_prediction and prediction.item_id in known
        ]
        frequency = advice.eating_frequency or EatingFrequency(
            average_meals_per_day=features.meals_per_day,
            average_snacks_per_day=features.snacks_per_day,
            regularity_score=features.regularity_score,
        )
        return advice.model_copy(
            update={"waste_predictions": predictions, "eating_frequency": frequency}
        )

    def assemble(  # noqa: PLR0913
        self,
        data: AnalysisInput,
        features: PatternFeatures,
        advice: PatternAdvice,
        source: AdviceSource,
        now: datetime,
    ) -> PatternResult:
        return assembler.assemble_patterns(features, advice, source)


# Sustainability impact


@dataclass
class SustainabilityImpactStrategy:
    window_days: int = IMPACT_WINDOW.default
    comparison_days: int = COMPARISON_WINDOW.default
    profiles: Profiles = field(default_factory=lambda: DEFAULT_CATEGORY_PROFILES)
    kind: str = "sustainability_impact"
    schema: type[ImpactAdvice] = ImpactAdvice

    def query(self) -> AnalysisQuery:
        return AnalysisQuery(
            window_days=self.window_days,
            comparison_days=self.comparison_days,
            include_inventory=True,
            include_consumption=True,
        )

    def derive(self, data: AnalysisInput) -> ImpactFeatures:
        return impact_features(
            data.profile,
            data.consumption,
            data.comparison,
            data.inventory,
            (data.window_start, data.today),
            (data.comparison_start, data.comparison_end),
            data.today,
            self.profiles,
        )

    def is_empty(self, data: AnalysisInput, features: ImpactFeatures) -> bool:
        return not data.consumption

    def empty_result(
        self, data: AnalysisInput, features: ImpactFeatures, now: datetime
    ) -> ImpactResult:
        return assembler.empty_impact(features)

    def build_request(self, data: AnalysisInput, features: ImpactFeatures) -> AdvisoryRequest:
        current = features.current
        comparison = features.comparison
        return AdvisoryRequest(
            kind=self.kind,
            instructions=(
                "You are a sustainability analyst. Score the user's food habits "
                "against SDG 2 (zero hunger) and SDG 12 (responsible consumption)."
            ),
            profile=profile_payload(data.profile),
            features={
                "current_period": _period_payload(current),
                "comparison_period": _period_payload(comparison),
                "estimated_waste_rate": round(features.estimated_waste_rate, 3),
                "targets": {
                    "calories": features.calorie_target,
                    "protein_g": round(features.protein_target_g, 1),
                    "fiber_g": features.fiber_target_g,
                },
            },
            summary=(
                f"{current.total_items} items over {current.logged_days} logged days; "
                f"{comparison.total_items} items in the comparison period."
            ),
            guidelines=(
                "All scores are 0-100",
                "Trends compare the current period with the comparison period",
            ),
        )

    def fallback(self, data: AnalysisInput, features: ImpactFeatures) -> ImpactAdvice:
        return heuristics.fallback_impact(features)

    def reconcile(
        self, data: AnalysisInput, features: ImpactFeatures, advice: ImpactAdvice
    ) -> ImpactAdvice:
        if advice.sdg2.trends and advice.sdg12.trends:
            return advice
        derived = heuristics.fallback_impact(features)
        return advice.model_copy(
            update={
                "sdg2": advice.sdg2.model_copy(
                    update={"trends": advice.sdg2.trends or derived.sdg2.trends}
                ),
                "sdg12": advice.sdg12.model_copy(
                    update={"trends": advice.sdg12.trends or derived.sdg12.trends}
                ),
            }
        )

    def assemble(  # noqa: PLR0913
        self,
        data: AnalysisInput,
        features: ImpactFeatures,
        advice: ImpactAdvice,
        source: AdviceSource,
        now: datetime,
    ) -> ImpactResult:
        return assembler.assemble_impact(features, advice, source)


def _period_payload(metrics: PeriodMetrics) -> dict[str, object]:
    return {
        "start": metrics.start.isoformat(),
        "end": metrics.end.isoformat(),
        "logged_days": metrics.logged_days,
        "average_daily_calories": round(metrics.average_daily_calories, 1),
        "protein_intake_g": round(metrics.protein_intake, 1),
        "fiber_intake_g": round(metrics.fiber_intake, 1),
        "dietary_diversity": round(metrics.dietary_diversity, 2),
        "nutrition_adequacy": round(metrics.nutrition_adequacy, 1),
        "waste_reduction_rate": round(metrics.waste_reduction_rate, 1),
        "sustainability_score": round(metrics.sustainability_score, 1),
        "meal_regularity": round(metrics.meal_regularity, 1),
        "category_distribution": {
            category.value: count for category, count in metrics.category_distribution.items()
        },
    }


# Shopping


@dataclass
class ShoppingPlanStrategy:
    budget: float | None = None
    weekly_budget: bool | None = None
    profiles: Profiles = field(default_factory=lambda: DEFAULT_CATEGORY_PROFILES)
    kind: str = "shopping_plan"
    schema: type[ShoppingAdvice] = ShoppingAdvice

    def query(self) -> AnalysisQuery:
        return AnalysisQuery(include_inventory=True, include_catalog=True)

    def derive(self, data: AnalysisInput) -> OptimizerFeatures:
        return optimizer_features(
            data.profile,
            data.inventory,
            data.catalog,
            budget=self.budget,
            weekly_budget=self.weekly_budget,
        )

    def is_empty(self, data: AnalysisInput, features: OptimizerFeatures) -> bool:
        return features.total_budget <= 0

    def empty_result(
        self, data: AnalysisInput, features: OptimizerFeatures, now: datetime
    ) -> ShoppingPlanResult:
        return assembler.empty_shopping(data.profile, features, data.inventory)

    def build_request(
        self, data: AnalysisInput, features: OptimizerFeatures
    ) -> AdvisoryRequest:
        return AdvisoryRequest(
            kind=self.kind,
            instructions=(
                "You are a budget-aware meal planner. Recommend purchases that fill "
                "nutritional gaps in the household's inventory."
            ),
            profile=profile_payload(data.profile),
            features={
                "total_budget": features.total_budget,
                "household_size": features.household_size,
                "stock_levels": {
                    category.value: count for category, count in features.stock_levels.items()
                },
                "category_gaps": [category.value for category in features.category_gaps],
                "inventory": [
                    {
                        "name": record.name,
                        "category": record.category.value,
                        "quantity": record.quantity,
                        "unit": record.unit,
                    }
                    for record in data.inventory
                ],
                "catalog": [
                    {
                        "name": option.name,
                        "category": option.category.value,
                        "unit_cost": option.unit_cost,
                        "unit": option.unit,
                    }
                    for option in data.catalog
                ],
            },
            summary=(
                f"Budget ${features.total_budget:.2f} for {features.household_size} people; "
                f"{len(features.category_gaps)} empty categories."
            ),
            guidelines=(
                "urgency is high, medium or low",
                "total_cost must equal quantity times unit_cost",
                "Respect dietary restrictions and avoided ingredients",
            ),
        )

    def fallback(self, data: AnalysisInput, features: OptimizerFeatures) -> ShoppingAdvice:
        return heuristics.fallback_shopping(features, data.profile, self.profiles)

    def reconcile(
        self, data: AnalysisInput, features: OptimizerFeatures, advice: ShoppingAdvice
    ) -> ShoppingAdvice:
        """Recompute line totals from quantity and unit cost."""
        return ShoppingAdvice(
            recommendations=[
                suggestion.model_copy(
                    update={"total_cost": round(suggestion.quantity * suggestion.unit_cost, 2)}
                )
                for suggestion in advice.recommendations
            ]
        )

    def assemble(  # noqa: PLR0913
        self,
        data: AnalysisInput,
        features: OptimizerFeatures,
        advice: ShoppingAdvice,
        source: AdviceSource,
        now: datetime,
    ) -> ShoppingPlanResult:
        candidates = [
            Recommendation(
                name=suggestion.name,
                category=suggestion.category,
                quantity=suggestion.quantity,
                unit=suggestion.unit,
                unit_cost=suggestion.unit_cost,
                total_cost=suggestion.total_cost,
                urgency=suggestion.urgency,
                priority=rank,
                reason=suggestion.reason,
                nutritional_value=suggestion.nutritional_value,
                alternative_options=tuple(suggestion.alternative_options),
            )
            for rank, suggestion in enumerate(advice.recommendations, start=1)
        ]
        allocation = allocate(
            exclude_stocked(candidates, data.inventory), features.total_budget
        )
        return assembler.assemble_shopping(
            data.profile, features, data.inventory, allocation, source
        )


@dataclass
class InsightsService:
    """Entry points for the five analyses."""

    pipeline: AnalysisPipeline
    profiles: Profiles = field(default_factory=lambda: DEFAULT_CATEGORY_PROFILES)
    price_comparison: PriceComparisonService | None = None

    async def predict_expiration_risks(
        self, user_id: UUID, *, now: datetime | None = None
    ) -> ExpirationRiskResult:
        return await self.pipeline.run(ExpirationRiskStrategy(self.profiles), user_id, now)

    async def predict_nutrient_gaps(
        self, user_id: UUID, days: int | None = None, *, now: datetime | None = None
    ) -> NutrientGapResult:
        strategy = NutrientGapStrategy(
            window_days=clamp_window(days, NUTRIENT_GAP_WINDOW), profiles=self.profiles
        )
        return await self.pipeline.run(strategy, user_id, now)

    async def analyze_consumption_patterns(
        self,
        user_id: UUID,
        days: int | None = None,
        *,
        include_waste_prediction: bool = True,
        now: datetime | None = None,
    ) -> PatternResult:
        strategy = ConsumptionPatternStrategy(
            window_days=clamp_window(days, PATTERN_WINDOW),
            include_waste_prediction=include_waste_prediction,
            profiles=self.profiles,
        )
        return await self.pipeline.run(strategy, user_id, now)

    async def score_sustainability_impact(
        self,
        user_id: UUID,
        days: int | None = None,
        comparison_days: int | None = None,
        *,
        now: datetime | None = None,
    ) -> ImpactResult:
        strategy = SustainabilityImpactStrategy(
            window_days=clamp_window(days, IMPACT_WINDOW),
            comparison_days=clamp_window(comparison_days, COMPARISON_WINDOW),
            profiles=self.profiles,
        )
        return await self.pipeline.run(strategy, user_id, now)

    async def optimize_shopping(  # noqa: PLR0913
        self,
        user_id: UUID,
        *,
        budget: float | None = None,
        weekly_budget: bool | None = None,
        compare_prices: bool = False,
        now: datetime | None = None,
    ) -> ShoppingPlanResult:
        strategy = ShoppingPlanStrategy(
            budget=budget, weekly_budget=weekly_budget, profiles=self.profiles
        )
        result = await self.pipeline.run(strategy, user_id, now)
        if compare_prices and self.price_comparison and result.recommendations:
            lines = await self.price_comparison.compare(
                result.recommendations, result.summary.user_location
            )
            result = result.model_copy(update={"recommendations": lines})
        return result
