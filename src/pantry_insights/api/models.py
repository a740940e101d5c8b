"""Request payloads accepted by the insights API."""

from pydantic import BaseModel, Field


class ShoppingPlanRequest(BaseModel):
    budget: float | None = Field(default=None, ge=0)
    weekly_budget: bool | None = None
    compare_prices: bool = False
