"""Response aggregates returned by the analysis pipelines."""

from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from pantry_insights.domain.advice import (
    AlertLevel,
    CategoryConsumption,
    EatingFrequency,
    FoodSuggestion,
    Imbalance,
    ItemRiskPrediction,
    NutrientAssessment,
    Score,
    Sdg2Score,
    Sdg12Score,
    WastePrediction,
)
from pantry_insights.domain.models import FoodCategory, MealSlot, UrgencyTier


class AdviceSource(str, Enum):
    """Which path produced the judgment-level part of a result."""

    ADVISORY = "advisory"
    FALLBACK = "fallback"
    NONE = "none"


class OverallRiskLevel(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class Ranking(str, Enum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    NEEDS_IMPROVEMENT = "needs_improvement"


class PriceStatus(str, Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class AnalysisPeriod(BaseModel):
    start_date: date
    end_date: date
    total_days: int


class RiskSummary(BaseModel):
    total_items_at_risk: int
    critical_items: int
    high_risk_items: int
    estimated_potential_loss: float
    user_location: str
    current_season: str
    temperature: str
    analysis_date: datetime


class PriorityEntry(BaseModel):
    item_name: str
    priority: int
    reason: str
    alert_level: AlertLevel


class RiskInsights(BaseModel):
    overall_risk_level: OverallRiskLevel
    seasonal_alerts: list[str] = Field(default_factory=list)
    consumption_tips: list[str] = Field(default_factory=list)
    waste_prevention_strategies: list[str] = Field(default_factory=list)


class ExpirationRiskResult(BaseModel):
    summary: RiskSummary
    predictions: list[ItemRiskPrediction]
    consumption_priority: list[PriorityEntry]
    insights: RiskInsights
    source: AdviceSource


class NutrientSummary(BaseModel):
    analysis_period: AnalysisPeriod
    overall_nutrition_score: Score
    total_deficiencies: int
    severe_deficiencies: int
    data_completeness: Score
    calories_per_day: float
    dietary_restrictions: list[str] = Field(default_factory=list)
    avoided_ingredients: list[str] = Field(default_factory=list)


class NutrientInsights(BaseModel):
    key_findings: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    priority_actions: list[str] = Field(default_factory=list)
    preventive_measures: list[str] = Field(default_factory=list)


class NutrientGapResult(BaseModel):
    summary: NutrientSummary
    nutrients: list[NutrientAssessment]
    food_suggestions: list[FoodSuggestion]
    insights: NutrientInsights
    source: AdviceSource


class PatternSummary(BaseModel):
    analysis_period: AnalysisPeriod
    overall_health_score: Score
    key_insights: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    data_completeness: Score


class WeekdayTrendView(BaseModel):
    day_of_week: str
    average_calories: float
    average_items: float
    meal_distribution: dict[MealSlot, int]


class MealTiming(BaseModel):
    breakfast_time: str = "08:00"
    lunch_time: str = "12:30"
    dinner_time: str = "19:00"
    snack_times: list[str] = Field(default_factory=lambda: ["10:30", "15:30"])


class CategoryShare(BaseModel):
    category: FoodCategory
    percentage: Score


class PreferredCategories(BaseModel):
    most_consumed: list[CategoryShare] = Field(default_factory=list)
    least_consumed: list[CategoryShare] = Field(default_factory=list)


class IntakeAdequacy(BaseModel):
    current: float
    recommended: float
    adequacy: str


class NutritionInsights(BaseModel):
    protein_intake: IntakeAdequacy
    fiber_intake: IntakeAdequacy
    calorie_distribution: dict[MealSlot, float]


class PatternResult(BaseModel):
    summary: PatternSummary
    weekly_trends: list[WeekdayTrendView]
    category_consumption: list[CategoryConsumption]
    imbalances: list[Imbalance]
    waste_predictions: list[WastePrediction]
    meal_timing: MealTiming
    eating_frequency: EatingFrequency
    preferred_categories: PreferredCategories
    nutrition_insights: NutritionInsights
    source: AdviceSource


class ImpactSummary(BaseModel):
    current_period: AnalysisPeriod
    comparison_period: AnalysisPeriod
    personal_sdg_score: Score
    previous_period_score: Score
    score_change: float
    ranking: Ranking


class WeeklyInsight(BaseModel):
    week: str
    sdg2_score: Score
    sdg12_score: Score
    personal_score: Score
    improvements: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)


class ActionableStep(BaseModel):
    category: str
    priority: UrgencyTier
    impact: float
    effort: str
    description: str
    sdg_targets: list[str]
    timeframe: str


class ImpactMetrics(BaseModel):
    co2_reduction_kg: float = 0.0
    water_saved_liters: float = 0.0
    hunger_contribution: float = 0.0
    waste_prevented: int = 0


class Achievements(BaseModel):
    badges: list[str] = Field(default_factory=list)
    milestones: list[str] = Field(default_factory=list)
    streaks: dict[str, int] = Field(default_factory=dict)


class ImpactResult(BaseModel):
    summary: ImpactSummary
    sdg2: Sdg2Score
    sdg12: Sdg12Score
    weekly_insights: list[WeeklyInsight]
    actionable_steps: list[ActionableStep]
    impact_metrics: ImpactMetrics
    achievements: Achievements
    key_insights: list[str] = Field(default_factory=list)
    source: AdviceSource


class BudgetImpact(BaseModel):
    cost: float
    remaining_budget: float
    percentage_used: Score


class PriceQuote(BaseModel):
    status: PriceStatus
    local_price: float | None = None
    store: str | None = None
    difference: float | None = None


class ShoppingLine(BaseModel):
    name: str
    category: FoodCategory
    quantity: float
    unit: str
    display_quantity: str
    unit_cost: float
    total_cost: float
    urgency: UrgencyTier
    reason: str
    nutritional_value: str = ""
    alternative_options: list[str] = Field(default_factory=list)
    adjusted_for_budget: bool = False
    budget_impact: BudgetImpact
    price: PriceQuote | None = None


class ShoppingSummary(BaseModel):
    total_budget: float
    allocated_budget: float
    remaining_budget: float
    items_recommended: int
    skipped_count: int
    priority_categories: list[FoodCategory]
    user_location: str = ""


class ShoppingInsights(BaseModel):
    budget_optimization: str
    nutritional_focus: str
    cost_saving_tips: list[str] = Field(default_factory=list)
    meal_planning_suggestions: list[str] = Field(default_factory=list)


class InventorySnapshot(BaseModel):
    total_items: int
    total_value: float
    categories: dict[FoodCategory, int]


class ShoppingPlanResult(BaseModel):
    summary: ShoppingSummary
    recommendations: list[ShoppingLine]
    insights: ShoppingInsights
    current_inventory: InventorySnapshot
    source: AdviceSource
