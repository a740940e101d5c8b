"""Category-keyed reference data used by the feature deriver and fallbacks."""

from collections.abc import Mapping
from dataclasses import dataclass

from pantry_insights.domain.models import FoodCategory, Nutrient, UrgencyTier


@dataclass(frozen=True)
class StapleItem:
    """Built-in purchase candidate used when no catalog option exists."""

    name: str
    quantity: float
    unit: str
    unit_cost: float
    urgency: UrgencyTier
    reason: str
    nutritional_value: str

    @property
    def total_cost(self) -> float:
        return round(self.quantity * self.unit_cost, 2)


@dataclass(frozen=True)
class CategoryProfile:
    """Reference values for one food category."""

    shelf_life_days: int
    consumption_frequency: str
    warm_multiplier: float
    cold_multiplier: float
    warm_reason: str
    cold_reason: str
    storage_tips: tuple[str, ...]
    alternative_uses: tuple[str, ...]
    key_nutrients: tuple[Nutrient, ...] = ()
    recommended_servings: float = 0.0
    max_servings: float = 0.0
    min_stock: int = 0
    staple: StapleItem | None = None


_NORMAL_REASON = "Normal seasonal conditions"

DEFAULT_CATEGORY_PROFILES: dict[FoodCategory, CategoryProfile] = {
    FoodCategory.FRUITS: CategoryProfile(
        shelf_life_days=7,
        consumption_frequency="daily",
        warm_multiplier=1.3,
        cold_multiplier=1.0,
        warm_reason="Fruits spoil faster in warm weather due to increased ripening",
        cold_reason="Normal fruit spoilage rate",
        storage_tips=(
            "Store in refrigerator crisper drawer",
            "Keep away from ethylene-producing foods",
            "Check daily for spoilage",
        ),
        alternative_uses=(
            "Make smoothies",
            "Create fruit salads",
            "Use in baked goods",
            "Freeze for later use",
        ),
        key_nutrients=(Nutrient.FIBER, Nutrient.CARBS),
        recommended_servings=2.0,
        max_servings=5.0,
        min_stock=2,
        staple=StapleItem(
            name="Seasonal Fruit",
            quantity=2.0,
            unit="kg",
            unit_cost=3.5,
            urgency=UrgencyTier.MEDIUM,
            reason="Daily fruit for vitamins and fiber",
            nutritional_value="Vitamin C, fiber, natural sugars",
        ),
    ),
    FoodCategory.VEGETABLES: CategoryProfile(
        shelf_life_days=10,
        consumption_frequency="daily",
        warm_multiplier=1.2,
        cold_multiplier=1.0,
        warm_reason="Vegetables wilt faster in warm conditions",
        cold_reason="Normal vegetable spoilage rate",
        storage_tips=(
            "Store in high humidity drawer",
            "Keep away from fruits that produce ethylene",
            "Use within recommended timeframe",
        ),
        alternative_uses=(
            "Make soups or stews",
            "Create stir-fry dishes",
            "Use in salads",
            "Roast or grill",
        ),
        key_nutrients=(Nutrient.FIBER,),
        recommended_servings=3.0,
        max_servings=8.0,
        min_stock=2,
        staple=StapleItem(
            name="Mixed Vegetables",
            quantity=3.0,
            unit="kg",
            unit_cost=3.0,
            urgency=UrgencyTier.HIGH,
            reason="Essential vitamins and minerals",
            nutritional_value="Vitamins, fiber, minerals",
        ),
    ),
    FoodCategory.DAIRY: CategoryProfile(
        shelf_life_days=14,
        consumption_frequency="daily",
        warm_multiplier=1.4,
        cold_multiplier=0.9,
        warm_reason="Dairy products spoil faster in warm temperatures",
        cold_reason="Dairy lasts longer in cooler conditions",
        storage_tips=(
            "Keep in coldest part of refrigerator",
            "Store in original container",
            "Check expiration dates regularly",
        ),
        alternative_uses=(
            "Use in cooking or baking",
            "Make sauces or dips",
            "Add to beverages",
            "Freeze if appropriate",
        ),
        key_nutrients=(Nutrient.PROTEIN, Nutrient.FATS),
        recommended_servings=2.0,
        max_servings=4.0,
        min_stock=1,
        staple=StapleItem(
            name="Milk",
            quantity=2.0,
            unit="l",
            unit_cost=1.2,
            urgency=UrgencyTier.MEDIUM,
            reason="Calcium and protein for daily meals",
            nutritional_value="Calcium, protein, vitamin D",
        ),
    ),
    FoodCategory.PROTEIN: CategoryProfile(
        shelf_life_days=21,
        consumption_frequency="weekly",
        warm_multiplier=1.5,
        cold_multiplier=0.8,
        warm_reason="Meat and fish spoil much faster in warm weather",
        cold_reason="Protein stays fresh longer in cool conditions",
        storage_tips=(
            "Store in coldest part of refrigerator",
            "Use within 2-3 days or freeze",
            "Keep away from other foods to prevent cross-contamination",
        ),
        alternative_uses=(
            "Cook and freeze portions",
            "Make casseroles or stews",
            "Use in meal prep",
            "Create different recipes",
        ),
        key_nutrients=(Nutrient.PROTEIN, Nutrient.FATS),
        recommended_servings=2.0,
        max_servings=4.0,
        min_stock=1,
        staple=StapleItem(
            name="Chicken Breast",
            quantity=2.0,
            unit="kg",
            unit_cost=6.0,
            urgency=UrgencyTier.HIGH,
            reason="Lean protein source, versatile",
            nutritional_value="High protein, low fat",
        ),
    ),
    FoodCategory.GRAINS: CategoryProfile(
        shelf_life_days=60,
        consumption_frequency="weekly",
        warm_multiplier=1.0,
        cold_multiplier=1.0,
        warm_reason=_NORMAL_REASON,
        cold_reason=_NORMAL_REASON,
        storage_tips=(
            "Store in airtight containers",
            "Keep in cool, dry place",
            "Protect from moisture and pests",
        ),
        alternative_uses=(
            "Make grain bowls",
            "Use in soups",
            "Create side dishes",
            "Add to salads",
        ),
        key_nutrients=(Nutrient.CARBS, Nutrient.FIBER, Nutrient.CALORIES),
        recommended_servings=3.0,
        max_servings=8.0,
        min_stock=1,
        staple=StapleItem(
            name="Rice",
            quantity=5.0,
            unit="kg",
            unit_cost=2.5,
            urgency=UrgencyTier.HIGH,
            reason="Essential staple, versatile for many meals",
            nutritional_value="Carbohydrates for energy",
        ),
    ),
    FoodCategory.BEVERAGES: CategoryProfile(
        shelf_life_days=30,
        consumption_frequency="occasional",
        warm_multiplier=1.0,
        cold_multiplier=1.0,
        warm_reason=_NORMAL_REASON,
        cold_reason=_NORMAL_REASON,
        storage_tips=(
            "Store according to label instructions",
            "Refrigerate after opening",
            "Use clean utensils to prevent contamination",
        ),
        alternative_uses=(
            "Use in cooking or baking",
            "Create cocktails or mocktails",
            "Freeze in ice cube trays",
        ),
        max_servings=6.0,
    ),
    FoodCategory.SNACKS: CategoryProfile(
        shelf_life_days=45,
        consumption_frequency="occasional",
        warm_multiplier=1.0,
        cold_multiplier=1.0,
        warm_reason=_NORMAL_REASON,
        cold_reason=_NORMAL_REASON,
        storage_tips=(
            "Store in airtight containers",
            "Keep in cool, dry place",
            "Check for freshness dates",
        ),
        alternative_uses=(
            "Use as toppings",
            "Create trail mixes",
            "Add to baked goods",
            "Serve with dips",
        ),
        key_nutrients=(Nutrient.CALORIES,),
        max_servings=2.0,
    ),
    FoodCategory.OTHER: CategoryProfile(
        shelf_life_days=30,
        consumption_frequency="occasional",
        warm_multiplier=1.0,
        cold_multiplier=1.0,
        warm_reason=_NORMAL_REASON,
        cold_reason=_NORMAL_REASON,
        storage_tips=(
            "Follow storage instructions on packaging",
            "Keep in appropriate conditions",
            "Monitor regularly",
        ),
        alternative_uses=(
            "Check for alternative recipes",
            "Use in meal planning",
            "Share with others if appropriate",
        ),
    ),
}


def profile_for(
    profiles: Mapping[FoodCategory, CategoryProfile], category: FoodCategory
) -> CategoryProfile:
    """Return the profile for a category, falling back to OTHER."""
    return profiles.get(category) or profiles[FoodCategory.OTHER]
