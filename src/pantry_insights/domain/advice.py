"""Schemas shared by advisory responses and their deterministic fallbacks."""

from datetime import date
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, BeforeValidator, Field

from pantry_insights.domain.models import (
    FoodCategory,
    Nutrient,
    RiskTier,
    Severity,
    Trend,
    UrgencyTier,
)


def clamp_score(value: float) -> float:
    """Clamp a score into [0, 100]."""
    return max(0.0, min(100.0, value))


Score = Annotated[float, AfterValidator(clamp_score)]
NonNegative = Annotated[float, Field(ge=0)]


def _parse_category(value: object) -> object:
    if isinstance(value, str):
        return FoodCategory.parse(value)
    return value


Category = Annotated[FoodCategory, BeforeValidator(_parse_category)]


class ConsumptionUrgency(str, Enum):
    IMMEDIATE = "immediate"
    SOON = "soon"
    MODERATE = "moderate"
    FLEXIBLE = "flexible"


class AlertLevel(str, Enum):
    RED = "red"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"


class SeasonalityRisk(str, Enum):
    INCREASED = "increased"
    NORMAL = "normal"
    DECREASED = "decreased"


class Availability(str, Enum):
    IN_INVENTORY = "in_inventory"
    IN_CATALOG = "in_catalog"
    SUGGESTED_PURCHASE = "suggested_purchase"


class Balance(str, Enum):
    OPTIMAL = "optimal"
    DEFICIENT = "deficient"
    EXCESSIVE = "excessive"


class ImpactTrend(str, Enum):
    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class ItemRiskPrediction(BaseModel):
    """Expiration risk for one inventory item."""

    item_id: str
    item_name: str
    category: Category
    risk_score: Score
    risk_tier: RiskTier
    consumption_urgency: ConsumptionUrgency
    seasonality_risk: SeasonalityRisk = SeasonalityRisk.NORMAL
    consumption_priority: int = Field(ge=1, le=10)
    consume_by: str
    storage_tips: list[str] = Field(default_factory=list)
    alternative_uses: list[str] = Field(default_factory=list)
    alert_level: AlertLevel
    primary_reason: str
    contributing_factors: list[str] = Field(default_factory=list)
    seasonality_impact: str = ""


class RiskAdvice(BaseModel):
    predictions: list[ItemRiskPrediction]


class NutrientAssessment(BaseModel):
    nutrient: Nutrient
    current_intake: NonNegative
    recommended_intake: NonNegative
    deficiency_percentage: Score
    severity: Severity
    trend: Trend = Trend.STABLE
    days_deficient: int = Field(default=0, ge=0)
    health_implications: list[str] = Field(default_factory=list)


class FoodSuggestion(BaseModel):
    item_name: str
    category: Category
    quantity: NonNegative
    unit: str
    availability: Availability
    reason: str
    priority: UrgencyTier
    estimated_cost: NonNegative | None = None
    target_nutrients: list[Nutrient] = Field(default_factory=list)


class NutrientAdvice(BaseModel):
    """Nutrient gap synthesis."""

    nutrients: list[NutrientAssessment]
    food_suggestions: list[FoodSuggestion]
    overall_score: Score
    key_findings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    priority_actions: list[str] = Field(default_factory=list)
    preventive_measures: list[str] = Field(default_factory=list)


class CategoryConsumption(BaseModel):
    category: Category
    total_consumed: NonNegative
    average_daily: NonNegative
    unit: str
    frequency: Score
    trend: Trend = Trend.STABLE
    balance: Balance
    recommended_intake: NonNegative


class Imbalance(BaseModel):
    category: Category
    current_intake: NonNegative
    recommended_intake: NonNegative
    variance: float
    severity: Severity
    health_implications: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    priority: UrgencyTier


class WastePrediction(BaseModel):
    item_id: str
    item_name: str
    category: Category
    probability: Score
    risk_tier: RiskTier
    predicted_waste_date: date | None = None
    consumption_rate_needed: NonNegative
    unit: str
    days_of_consumption: int = Field(ge=0)
    recommendations: list[str] = Field(default_factory=list)


class EatingFrequency(BaseModel):
    average_meals_per_day: NonNegative
    average_snacks_per_day: NonNegative
    regularity_score: Score


class PatternAdvice(BaseModel):
    """Consumption pattern synthesis."""

    category_consumption: list[CategoryConsumption]
    imbalances: list[Imbalance]
    waste_predictions: list[WastePrediction]
    eating_frequency: EatingFrequency | None = None
    health_score: Score
    key_insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)


class Sdg2Score(BaseModel):
    overall: Score
    food_security: Score
    nutrition_quality: Score
    sustainable_consumption: Score
    dietary_diversity: Score
    trends: dict[str, ImpactTrend] = Field(default_factory=dict)


class Sdg12Score(BaseModel):
    overall: Score
    waste_reduction: Score
    sustainable_consumption: Score
    awareness: Score
    trends: dict[str, ImpactTrend] = Field(default_factory=dict)


class ImpactAdvice(BaseModel):
    """SDG 2 / SDG 12 impact scoring."""

    sdg2: Sdg2Score
    sdg12: Sdg12Score
    personal_score: Score
    improvement_areas: list[str] = Field(default_factory=list)
    strengths: list[str] = Field(default_factory=list)
    key_insights: list[str] = Field(default_factory=list)


class ShoppingSuggestion(BaseModel):
    name: str
    category: Category
    quantity: float = Field(gt=0)
    unit: str
    unit_cost: NonNegative
    total_cost: NonNegative
    urgency: UrgencyTier
    reason: str = ""
    nutritional_value: str = ""
    alternative_options: list[str] = Field(default_factory=list)


class ShoppingAdvice(BaseModel):
    recommendations: list[ShoppingSuggestion]
