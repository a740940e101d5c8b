"""Greedy budget allocation over purchase candidates."""

import math
from dataclasses import dataclass, field, replace

from pantry_insights.domain.models import InventoryRecord, Recommendation
from pantry_insights.domain.units import are_compatible, is_known_unit, to_base

MIN_PURCHASE_QUANTITY = 0.5


@dataclass(frozen=True)
class AllocatedPurchase:
    """One accepted candidate with its final quantity and cost."""

    recommendation: Recommendation
    cost: float
    remaining_budget: float
    percentage_of_budget: float
    adjusted: bool = False


@dataclass(frozen=True)
class Allocation:
    total_budget: float
    purchases: list[AllocatedPurchase] = field(default_factory=list)
    skipped_count: int = 0

    @property
    def allocated(self) -> float:
        return round(sum(purchase.cost for purchase in self.purchases), 2)

    @property
    def remaining(self) -> float:
        return round(max(0.0, self.total_budget - self.allocated), 2)


def sort_candidates(candidates: list[Recommendation]) -> list[Recommendation]:
    """Urgency first (high before low), then cheapest per unit of quantity."""
    return sorted(
        candidates,
        key=lambda candidate: (-candidate.urgency.rank, candidate.cost_per_quantity),
    )


def _reduced_quantity(remaining: float, unit_cost: float) -> float:
    return math.floor(remaining / unit_cost * 10) / 10


def allocate(candidates: list[Recommendation], total_budget: float) -> Allocation:
    """Accept candidates in priority order until the budget runs out.

    A candidate that no longer fits is shrunk to what the remaining budget
    buys (one decimal place). A shrunk line is kept only if it reaches
    ``MIN_PURCHASE_QUANTITY``, and the run stops after it. Candidates that are
    never accepted are counted in ``skipped_count``.
    """
    remaining = max(0.0, total_budget)
    purchases: list[AllocatedPurchase] = []
    ordered = sort_candidates(candidates)
    for candidate in ordered:
        if remaining <= 0:
            break
        if candidate.total_cost <= remaining:
            remaining = round(remaining - candidate.total_cost, 2)
            purchases.append(
                _purchase(candidate, candidate.total_cost, remaining, total_budget)
            )
            continue
        if candidate.unit_cost <= 0:
            continue
        quantity = _reduced_quantity(remaining, candidate.unit_cost)
        if quantity < MIN_PURCHASE_QUANTITY:
            continue
        cost = min(round(quantity * candidate.unit_cost, 2), remaining)
        remaining = round(remaining - cost, 2)
        adjusted = replace(candidate, quantity=quantity, total_cost=cost)
        purchases.append(_purchase(adjusted, cost, remaining, total_budget, adjusted=True))
        break
    return Allocation(
        total_budget=total_budget,
        purchases=purchases,
        skipped_count=len(ordered) - len(purchases),
    )


def _purchase(
    recommendation: Recommendation,
    cost: float,
    remaining: float,
    total_budget: float,
    *,
    adjusted: bool = False,
) -> AllocatedPurchase:
    percentage = cost / total_budget * 100 if total_budget > 0 else 0.0
    return AllocatedPurchase(
        recommendation=recommendation,
        cost=cost,
        remaining_budget=remaining,
        percentage_of_budget=round(percentage, 1),
        adjusted=adjusted,
    )


def _names_match(candidate: str, stocked: str) -> bool:
    candidate_name = candidate.strip().lower()
    stocked_name = stocked.strip().lower()
    if not candidate_name or not stocked_name:
        return False
    return candidate_name in stocked_name or stocked_name in candidate_name


def is_stocked(candidate: Recommendation, inventory: list[InventoryRecord]) -> bool:
    """True when matching inventory records together hold the candidate's quantity."""
    if not is_known_unit(candidate.unit):
        return False
    needed, _ = to_base(candidate.quantity, candidate.unit)
    held = sum(
        record.base_quantity
        for record in inventory
        if _names_match(candidate.name, record.name)
        and are_compatible(candidate.unit, record.unit)
    )
    return held >= needed


def exclude_stocked(
    candidates: list[Recommendation], inventory: list[InventoryRecord]
) -> list[Recommendation]:
    """Drop candidates already covered by inventory."""
    return [candidate for candidate in candidates if not is_stocked(candidate, inventory)]
