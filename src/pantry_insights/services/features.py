"""Deterministic feature derivation shared by the pipelines.

Every quantity is summed in base units via the unit normalizer, and every score
is clamped into its documented range before it leaves this module.
"""

from collections import Counter
from collections.abc import Iterable, Mapping
from datetime import date, timedelta

from pantry_insights.domain.categories import CategoryProfile, profile_for
from pantry_insights.domain.features import (
    CategoryUsage,
    ExpirationFeatures,
    ImpactFeatures,
    ItemExpiry,
    ItemWasteRisk,
    NutrientGapFeatures,
    NutrientStatus,
    OptimizerFeatures,
    PatternFeatures,
    PeriodMetrics,
    SeasonalAdjustment,
    SeasonalContext,
    WeekdayTrend,
)
from pantry_insights.domain.models import (
    CatalogOption,
    ConsumptionEntry,
    FoodCategory,
    InventoryRecord,
    Location,
    MealSlot,
    Nutrient,
    RiskTier,
    Season,
    Severity,
    TemperatureBand,
    Trend,
    UserProfile,
    daily_totals,
)
from pantry_insights.domain.units import UnitType, from_base, to_base

FIBER_TARGET_G = 20.0
DEFICIENT_DAY_RATIO = 0.8
TREND_THRESHOLD_PERCENT = 5.0
DEFAULT_WASTE_RATE = 0.15
BASELINE_WASTE_RATE = 0.25
AVERAGE_ITEM_VALUE = 2.5
TARGET_MEALS_PER_DAY = 3
BASELINE_ITEMS_PER_DAY = 3
DEFAULT_BUDGET = 200.0
WEEKS_PER_MONTH = 4
CRITICAL_DAYS = 3
HIGH_RISK_DAYS = 7
MEDIUM_RISK_DAYS = 14
OPTIMAL_MAX_PERCENT = 20.0
MILD_MAX_PERCENT = 40.0
MODERATE_MAX_PERCENT = 60.0
MIN_TREND_POINTS = 2
CRITICAL_WASTE_PROBABILITY = 75.0
HIGH_WASTE_PROBABILITY = 50.0
MEDIUM_WASTE_PROBABILITY = 25.0

DEFAULT_CALORIE_DISTRIBUTION: dict[MealSlot, float] = {
    MealSlot.BREAKFAST: 25.0,
    MealSlot.LUNCH: 35.0,
    MealSlot.DINNER: 30.0,
    MealSlot.SNACK: 10.0,
    MealSlot.BEVERAGE: 0.0,
}

SOUTHERN_HEMISPHERE_COUNTRIES = frozenset(
    {
        "argentina",
        "australia",
        "bolivia",
        "botswana",
        "chile",
        "lesotho",
        "namibia",
        "new zealand",
        "paraguay",
        "south africa",
        "uruguay",
        "zimbabwe",
    }
)
TROPICAL_COUNTRIES = frozenset(
    {
        "brazil",
        "colombia",
        "ghana",
        "india",
        "indonesia",
        "kenya",
        "malaysia",
        "nigeria",
        "philippines",
        "singapore",
        "sri lanka",
        "thailand",
        "vietnam",
    }
)
_SEASON_BY_MONTH = (
    Season.WINTER,
    Season.WINTER,
    Season.SPRING,
    Season.SPRING,
    Season.SPRING,
    Season.SUMMER,
    Season.SUMMER,
    Season.SUMMER,
    Season.FALL,
    Season.FALL,
    Season.FALL,
    Season.WINTER,
)

_HUMIDITY_FACTORS = {
    TemperatureBand.WARM: 1.2,
    TemperatureBand.MODERATE: 1.0,
    TemperatureBand.COLD: 0.8,
}
_MAIN_MEALS = frozenset({MealSlot.BREAKFAST, MealSlot.LUNCH, MealSlot.DINNER})
_WEEKDAYS = (
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
)


def clamp(value: float, low: float = 0.0, high: float = 100.0) -> float:
    """Clamp a value into [low, high]."""
    return max(low, min(high, value))


def _mean(values: Iterable[float]) -> float:
    collected = list(values)
    if not collected:
        return 0.0
    return sum(collected) / len(collected)


# Seasonal context


def _normalized_country(location: Location) -> str:
    return location.country.strip().lower()


def season_for(day: date, location: Location) -> Season:
    """Return the meteorological season for a date at a location."""
    month_index = day.month - 1
    if _normalized_country(location) in SOUTHERN_HEMISPHERE_COUNTRIES:
        month_index = (month_index + 6) % 12
    return _SEASON_BY_MONTH[month_index]


def is_tropical(location: Location) -> bool:
    country = _normalized_country(location)
    return "tropic" in country or country in TROPICAL_COUNTRIES


def temperature_for(season: Season, location: Location) -> TemperatureBand:
    """Map a season to a temperature band."""
    if season == Season.SUMMER:
        return TemperatureBand.WARM
    if season == Season.SPRING:
        return TemperatureBand.WARM if is_tropical(location) else TemperatureBand.MODERATE
    if season == Season.WINTER:
        return TemperatureBand.COLD
    return TemperatureBand.MODERATE


def seasonal_context(
    today: date,
    location: Location,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> SeasonalContext:
    """Build per-category seasonal risk multipliers for today."""
    season = season_for(today, location)
    temperature = temperature_for(season, location)
    warm = temperature == TemperatureBand.WARM
    adjustments = {
        category: SeasonalAdjustment(
            multiplier=profile.warm_multiplier if warm else profile.cold_multiplier,
            reason=profile.warm_reason if warm else profile.cold_reason,
        )
        for category, profile in profiles.items()
    }
    return SeasonalContext(
        season=season,
        temperature=temperature,
        humidity_factor=_HUMIDITY_FACTORS[temperature],
        adjustments=adjustments,
    )


# Expiration


def days_until(expiration_date: date | None, today: date) -> int:
    """Days until expiration floored at 0, or -1 when there is no date."""
    if expiration_date is None:
        return -1
    return max(0, (expiration_date - today).days)


def tier_for_days(days: int) -> RiskTier:
    """Fixed expiration tier table; undated items (days < 0) are low risk."""
    if days < 0:
        return RiskTier.LOW
    if days <= CRITICAL_DAYS:
        return RiskTier.CRITICAL
    if days <= HIGH_RISK_DAYS:
        return RiskTier.HIGH
    if days <= MEDIUM_RISK_DAYS:
        return RiskTier.MEDIUM
    return RiskTier.LOW


def expiration_features(
    inventory: list[InventoryRecord], today: date, season: SeasonalContext
) -> ExpirationFeatures:
    items = []
    for record in inventory:
        days = days_until(record.expiration_date, today)
        items.append(
            ItemExpiry(
                record=record,
                days_until_expiration=days,
                age_days=max(0, (today - record.created_at.date()).days),
                estimated_value=record.estimated_value,
                tier=tier_for_days(days),
                seasonal_multiplier=season.multiplier_for(record.category),
            )
        )
    return ExpirationFeatures(season=season, items=items)


# Nutrient gaps


def nutrient_targets(profile: UserProfile) -> dict[Nutrient, float]:
    """Daily targets derived from the calorie goal and macro split."""
    calories = profile.calories_per_day
    macros = profile.macro_targets
    return {
        Nutrient.CALORIES: calories,
        Nutrient.PROTEIN: calories * macros.protein / 100 / 4,
        Nutrient.CARBS: calories * macros.carbs / 100 / 4,
        Nutrient.FATS: calories * macros.fats / 100 / 9,
        Nutrient.FIBER: FIBER_TARGET_G,
    }


def deficiency_percentage(actual: float, target: float) -> float:
    """Shortfall against target as a percentage in [0, 100]."""
    if target <= 0:
        return 0.0
    return clamp(max(0.0, (target - actual) / target * 100))


def severity_for(percentage: float) -> Severity:
    if percentage < OPTIMAL_MAX_PERCENT:
        return Severity.OPTIMAL
    if percentage <= MILD_MAX_PERCENT:
        return Severity.MILD
    if percentage <= MODERATE_MAX_PERCENT:
        return Severity.MODERATE
    return Severity.SEVERE


def trend_for(values: list[float]) -> Trend:
    """Compare the mean of the first half of a series with the second half."""
    if len(values) < MIN_TREND_POINTS:
        return Trend.STABLE
    middle = len(values) // 2
    first = _mean(values[:middle])
    second = _mean(values[middle:])
    if first == 0:
        return Trend.INCREASING if second > 0 else Trend.STABLE
    change = (second - first) / first * 100
    if change > TREND_THRESHOLD_PERCENT:
        return Trend.INCREASING
    if change < -TREND_THRESHOLD_PERCENT:
        return Trend.DECREASING
    return Trend.STABLE


def nutrient_gap_features(
    profile: UserProfile,
    consumption: list[ConsumptionEntry],
    window_days: int,
    today: date,
) -> NutrientGapFeatures:
    daily = daily_totals(consumption)
    logged_days = len(daily)
    statuses = []
    for nutrient, target in nutrient_targets(profile).items():
        values = [totals.value(nutrient) for totals in daily]
        current = sum(values) / logged_days if logged_days else 0.0
        percentage = deficiency_percentage(current, target)
        statuses.append(
            NutrientStatus(
                nutrient=nutrient,
                current_intake=current,
                recommended_intake=target,
                deficiency_percentage=percentage,
                severity=severity_for(percentage),
                trend=trend_for(values),
                days_deficient=sum(
                    1 for value in values if value < target * DEFICIENT_DAY_RATIO
                ),
            )
        )
    completeness = clamp(logged_days / window_days * 100) if window_days else 0.0
    return NutrientGapFeatures(
        statuses=statuses,
        daily=daily,
        logged_days=logged_days,
        window_days=window_days,
        start=today - timedelta(days=window_days),
        end=today,
        data_completeness=completeness,
    )


# Consumption patterns


def _entries_by_day(entries: list[ConsumptionEntry]) -> dict[date, list[ConsumptionEntry]]:
    grouped: dict[date, list[ConsumptionEntry]] = {}
    for entry in entries:
        grouped.setdefault(entry.consumed_on, []).append(entry)
    return dict(sorted(grouped.items()))


def dietary_diversity(entries: list[ConsumptionEntry]) -> float:
    """Distinct categories consumed per logged day, averaged."""
    return _mean(
        len({entry.category for entry in day_entries})
        for day_entries in _entries_by_day(entries).values()
    )


def meal_regularity(entries: list[ConsumptionEntry]) -> float:
    """Distinct meal slots per day against three meals, averaged and scaled to 100."""
    return _mean(
        clamp(len({entry.meal_slot for entry in day_entries}) / TARGET_MEALS_PER_DAY * 100)
        for day_entries in _entries_by_day(entries).values()
    )


def category_usage(entries: list[ConsumptionEntry]) -> list[CategoryUsage]:
    """Per-category totals in base units, ordered by how often they are eaten."""
    by_day = _entries_by_day(entries)
    logged_days = len(by_day)
    if not logged_days:
        return []
    categories: dict[FoodCategory, list[ConsumptionEntry]] = {}
    for entry in entries:
        categories.setdefault(entry.category, []).append(entry)

    usages = []
    for category, category_entries in categories.items():
        totals: dict[UnitType, float] = {}
        for entry in category_entries:
            base_quantity, base_type = to_base(entry.quantity, entry.unit)
            totals[base_type] = totals.get(base_type, 0.0) + base_quantity
        days_present = {entry.consumed_on for entry in category_entries}
        per_day_servings = [
            float(sum(1 for entry in day_entries if entry.category == category))
            for day_entries in by_day.values()
        ]
        usages.append(
            CategoryUsage(
                category=category,
                base_totals=totals,
                daily_averages={
                    base_type: total / logged_days for base_type, total in totals.items()
                },
                frequency=clamp(len(days_present) / logged_days * 100),
                servings_per_day=len(category_entries) / logged_days,
                entry_count=len(category_entries),
                trend=trend_for(per_day_servings),
            )
        )
    order = list(FoodCategory)
    usages.sort(key=lambda usage: (-usage.entry_count, order.index(usage.category)))
    return usages


def weekday_trends(entries: list[ConsumptionEntry]) -> list[WeekdayTrend]:
    grouped: dict[str, list[ConsumptionEntry]] = {}
    for entry in entries:
        grouped.setdefault(_WEEKDAYS[entry.consumed_on.weekday()], []).append(entry)
    trends = []
    for weekday in _WEEKDAYS:
        weekday_entries = grouped.get(weekday)
        if not weekday_entries:
            continue
        day_count = len({entry.consumed_on for entry in weekday_entries})
        slots = Counter(entry.meal_slot for entry in weekday_entries)
        trends.append(
            WeekdayTrend(
                weekday=weekday,
                day_count=day_count,
                average_calories=sum(entry.calories or 0.0 for entry in weekday_entries)
                / day_count,
                average_items=len(weekday_entries) / day_count,
                meal_distribution={slot: slots.get(slot, 0) for slot in MealSlot},
            )
        )
    return trends


def calorie_distribution(entries: list[ConsumptionEntry]) -> dict[MealSlot, float]:
    """Share of calories per meal slot, in percent."""
    total = sum(entry.calories or 0.0 for entry in entries)
    if total <= 0:
        return dict(DEFAULT_CALORIE_DISTRIBUTION)
    per_slot: dict[MealSlot, float] = {slot: 0.0 for slot in MealSlot}
    for entry in entries:
        per_slot[entry.meal_slot] += entry.calories or 0.0
    return {slot: calories / total * 100 for slot, calories in per_slot.items()}


def waste_tier(probability: float) -> RiskTier:
    if probability >= CRITICAL_WASTE_PROBABILITY:
        return RiskTier.CRITICAL
    if probability >= HIGH_WASTE_PROBABILITY:
        return RiskTier.HIGH
    if probability >= MEDIUM_WASTE_PROBABILITY:
        return RiskTier.MEDIUM
    return RiskTier.LOW


def waste_risks(
    inventory: list[InventoryRecord],
    usage: list[CategoryUsage],
    today: date,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> list[ItemWasteRisk]:
    """Compare each record's quantity with how fast its category gets eaten.

    Observed daily consumption (same base unit type) is preferred; otherwise
    the record is modeled as eaten evenly over its category's shelf life.
    """
    usage_by_category = {item.category: item for item in usage}
    risks = []
    for record in inventory:
        days = days_until(record.expiration_date, today)
        observed = usage_by_category.get(record.category)
        rate = observed.daily_averages.get(record.base_unit, 0.0) if observed else 0.0
        if rate <= 0:
            rate = record.base_quantity / profile_for(profiles, record.category).shelf_life_days
        days_to_consume = record.base_quantity / rate if rate > 0 else 0.0
        if days < 0 or days_to_consume <= 0:
            probability = 0.0
        else:
            probability = clamp((days_to_consume - days) / days_to_consume * 100)
        risks.append(
            ItemWasteRisk(
                record=record,
                days_until_expiration=days,
                daily_consumption_base=rate,
                days_to_consume=days_to_consume,
                probability=probability,
                tier=waste_tier(probability),
                consumption_rate_needed=from_base(
                    record.base_quantity / max(days, 1), record.unit
                ),
                predicted_waste_date=record.expiration_date if probability > 0 else None,
            )
        )
    return risks


def pattern_features(  # noqa: PLR0913
    profile: UserProfile,
    consumption: list[ConsumptionEntry],
    inventory: list[InventoryRecord],
    window_days: int,
    today: date,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> PatternFeatures:
    daily = daily_totals(consumption)
    by_day = _entries_by_day(consumption)
    logged_days = len(daily)
    usage = category_usage(consumption)
    slots = Counter(entry.meal_slot for entry in consumption)
    targets = nutrient_targets(profile)
    meals_per_day = _mean(
        len({entry.meal_slot for entry in day_entries} & _MAIN_MEALS)
        for day_entries in by_day.values()
    )
    snacks_per_day = _mean(
        sum(1 for entry in day_entries if entry.meal_slot not in _MAIN_MEALS)
        for day_entries in by_day.values()
    )
    completeness = 0.0
    if window_days:
        completeness = clamp(
            len(consumption) / (window_days * BASELINE_ITEMS_PER_DAY) * 100
        )
    return PatternFeatures(
        start=today - timedelta(days=window_days),
        end=today,
        window_days=window_days,
        logged_days=logged_days,
        entry_count=len(consumption),
        categories=usage,
        weekdays=weekday_trends(consumption),
        meal_distribution={slot: slots.get(slot, 0) for slot in MealSlot},
        calorie_distribution=calorie_distribution(consumption),
        dietary_diversity=dietary_diversity(consumption),
        average_daily_calories=_mean(totals.calories for totals in daily),
        average_protein_g=_mean(totals.protein_g for totals in daily),
        average_fiber_g=_mean(totals.fiber_g for totals in daily),
        protein_target_g=targets[Nutrient.PROTEIN],
        fiber_target_g=targets[Nutrient.FIBER],
        meals_per_day=meals_per_day,
        snacks_per_day=snacks_per_day,
        regularity_score=meal_regularity(consumption),
        data_completeness=completeness,
        waste_risks=waste_risks(inventory, usage, today, profiles),
    )


# Waste and sustainability


def estimated_waste_rate(risks: list[ItemWasteRisk]) -> float:
    """Value-weighted waste probability, or the default rate without inventory."""
    total_value = sum(risk.record.estimated_value for risk in risks)
    if total_value <= 0:
        return DEFAULT_WASTE_RATE
    wasted = sum(risk.record.estimated_value * risk.probability / 100 for risk in risks)
    return clamp(wasted / total_value, 0.0, 1.0)


def waste_reduction_rate(waste_rate: float) -> float:
    """Improvement over the baseline waste rate, in percent."""
    return clamp(
        (BASELINE_WASTE_RATE - waste_rate) / BASELINE_WASTE_RATE * 100, -100.0, 100.0
    )


def sustainability_score(reduction_rate: float) -> float:
    return clamp(reduction_rate * 2 + 50)


def _ratio_percent(actual: float, target: float) -> float:
    if target <= 0:
        return 100.0
    return clamp(actual / target * 100)


def period_metrics(
    entries: list[ConsumptionEntry],
    start: date,
    end: date,
    targets: Mapping[Nutrient, float],
    waste_rate: float,
) -> PeriodMetrics:
    """Summarize one period; an empty period yields all-zero metrics."""
    daily = daily_totals(entries)
    logged_days = len(daily)
    if not logged_days:
        return PeriodMetrics(
            start=start,
            end=end,
            logged_days=0,
            total_calories=0.0,
            average_daily_calories=0.0,
            protein_intake=0.0,
            fiber_intake=0.0,
            dietary_diversity=0.0,
            nutrition_adequacy=0.0,
            waste_item_count=0,
            total_waste_value=0.0,
            waste_reduction_rate=0.0,
            sustainability_score=0.0,
            total_items=0,
            average_items_per_day=0.0,
            category_distribution={},
            meal_regularity=0.0,
        )
    total_calories = sum(totals.calories for totals in daily)
    average_calories = total_calories / logged_days
    protein = sum(totals.protein_g for totals in daily) / logged_days
    fiber = sum(totals.fiber_g for totals in daily) / logged_days
    adequacy = _mean(
        [
            _ratio_percent(average_calories, targets[Nutrient.CALORIES]),
            _ratio_percent(protein, targets[Nutrient.PROTEIN]),
            _ratio_percent(fiber, targets[Nutrient.FIBER]),
        ]
    )
    waste_items = round(len(entries) * waste_rate)
    reduction = waste_reduction_rate(waste_rate)
    return PeriodMetrics(
        start=start,
        end=end,
        logged_days=logged_days,
        total_calories=total_calories,
        average_daily_calories=average_calories,
        protein_intake=protein,
        fiber_intake=fiber,
        dietary_diversity=dietary_diversity(entries),
        nutrition_adequacy=adequacy,
        waste_item_count=waste_items,
        total_waste_value=waste_items * AVERAGE_ITEM_VALUE,
        waste_reduction_rate=reduction,
        sustainability_score=sustainability_score(reduction),
        total_items=len(entries),
        average_items_per_day=len(entries) / logged_days,
        category_distribution=dict(Counter(entry.category for entry in entries)),
        meal_regularity=meal_regularity(entries),
    )


def weekly_slices(entries: list[ConsumptionEntry]) -> list[list[ConsumptionEntry]]:
    """Split entries into consecutive runs of seven logged days."""
    days = list(_entries_by_day(entries).values())
    return [
        [entry for day_entries in days[index : index + 7] for entry in day_entries]
        for index in range(0, len(days), 7)
    ]


def impact_features(  # noqa: PLR0913
    profile: UserProfile,
    consumption: list[ConsumptionEntry],
    comparison: list[ConsumptionEntry],
    inventory: list[InventoryRecord],
    window: tuple[date, date],
    comparison_window: tuple[date, date],
    today: date,
    profiles: Mapping[FoodCategory, CategoryProfile],
) -> ImpactFeatures:
    targets = nutrient_targets(profile)
    usage = category_usage(consumption)
    waste_rate = estimated_waste_rate(waste_risks(inventory, usage, today, profiles))
    weeks = []
    for week_entries in weekly_slices(consumption):
        week_days = sorted({entry.consumed_on for entry in week_entries})
        weeks.append(
            period_metrics(week_entries, week_days[0], week_days[-1], targets, waste_rate)
        )
    return ImpactFeatures(
        current=period_metrics(consumption, *window, targets, waste_rate),
        comparison=period_metrics(comparison, *comparison_window, targets, waste_rate),
        weeks=weeks,
        estimated_waste_rate=waste_rate,
        calorie_target=targets[Nutrient.CALORIES],
        protein_target_g=targets[Nutrient.PROTEIN],
        fiber_target_g=targets[Nutrient.FIBER],
    )


# Shopping optimizer


def total_budget(budget: float, weekly: bool) -> float:
    """Budget for one allocation run; weekly budgets cover four weeks."""
    return budget * WEEKS_PER_MONTH if weekly else budget


def optimizer_features(
    profile: UserProfile,
    inventory: list[InventoryRecord],
    catalog: list[CatalogOption],
    *,
    budget: float | None = None,
    weekly_budget: bool | None = None,
) -> OptimizerFeatures:
    resolved_budget = budget if budget is not None else (profile.budget or DEFAULT_BUDGET)
    weekly = profile.weekly_budget if weekly_budget is None else weekly_budget
    inventory_by_category: dict[FoodCategory, list[InventoryRecord]] = {}
    for record in inventory:
        inventory_by_category.setdefault(record.category, []).append(record)
    catalog_by_category: dict[FoodCategory, list[CatalogOption]] = {}
    for option in catalog:
        catalog_by_category.setdefault(option.category, []).append(option)
    stock_levels = {
        category: len(inventory_by_category.get(category, [])) for category in FoodCategory
    }
    gaps = [
        category
        for category in FoodCategory
        if category != FoodCategory.OTHER and stock_levels[category] == 0
    ]
    return OptimizerFeatures(
        total_budget=max(0.0, total_budget(resolved_budget, weekly)),
        household_size=max(1, profile.household_size),
        inventory_by_category=inventory_by_category,
        inventory_value=sum(record.estimated_value for record in inventory),
        catalog_by_category=catalog_by_category,
        stock_levels=stock_levels,
        category_gaps=gaps,
    )
