"""Insights API endpoints, one per analysis."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID  # noqa: TC003

from fastapi import APIRouter, Request

from pantry_insights.api.models import ShoppingPlanRequest  # noqa: TC001
from pantry_insights.domain.results import (
    ExpirationRiskResult,
    ImpactResult,
    NutrientGapResult,
    PatternResult,
    ShoppingPlanResult,
)

if TYPE_CHECKING:
    from pantry_insights.containers import AppContainer

router = APIRouter(prefix="/users/{user_id}", tags=["insights"])


@router.get("/expiration-risk")
async def expiration_risk(user_id: UUID, request: Request) -> ExpirationRiskResult:
    """Predict which inventory items are likely to expire before use."""
    container: AppContainer = request.app.state.container
    return await container.insights_service.predict_expiration_risks(user_id)


@router.get("/nutrient-gaps")
async def nutrient_gaps(
    user_id: UUID, request: Request, days: int | None = None
) -> NutrientGapResult:
    """Compare average nutrient intake with the user's targets."""
    container: AppContainer = request.app.state.container
    return await container.insights_service.predict_nutrient_gaps(user_id, days)


@router.get("/consumption-patterns")
async def consumption_patterns(
    user_id: UUID,
    request: Request,
    days: int | None = None,
    include_waste_prediction: bool = True,
) -> PatternResult:
    """Summarize eating patterns and likely waste."""
    container: AppContainer = request.app.state.container
    return await container.insights_service.analyze_consumption_patterns(
        user_id, days, include_waste_prediction=include_waste_prediction
    )


@router.get("/sdg-impact")
async def sdg_impact(
    user_id: UUID,
    request: Request,
    days: int | None = None,
    comparison_days: int | None = None,
) -> ImpactResult:
    """Score SDG 2 and SDG 12 impact against the previous period."""
    container: AppContainer = request.app.state.container
    return await container.insights_service.score_sustainability_impact(
        user_id, days, comparison_days
    )


@router.post("/shopping-plan")
async def shopping_plan(
    user_id: UUID, payload: ShoppingPlanRequest, request: Request
) -> ShoppingPlanResult:
    """Build a budget-constrained shopping plan."""
    container: AppContainer = request.app.state.container
    return await container.insights_service.optimize_shopping(
        user_id,
        budget=payload.budget,
        weekly_budget=payload.weekly_budget,
        compare_prices=payload.compare_prices,
    )
