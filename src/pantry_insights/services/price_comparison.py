"""Local price enrichment for shopping plans."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from pantry_insights.domain.errors import PriceLookupError
from pantry_insights.domain.models import LocalPrice
from pantry_insights.domain.results import PriceQuote, PriceStatus, ShoppingLine

_logger = logging.getLogger(__name__)


class PriceSource(Protocol):
    """Interface for a local price lookup."""

    async def lookup(self, item_name: str, location: str) -> LocalPrice:
        """Return the local price for an item or raise PriceLookupError."""


@dataclass
class PriceComparisonService:
    """Looks up local prices one item at a time with a fixed pause between calls."""

    source: PriceSource
    delay_seconds: float = 1.0
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep

    async def compare(self, lines: list[ShoppingLine], location: str) -> list[ShoppingLine]:
        enriched = []
        for index, line in enumerate(lines):
            if index and self.delay_seconds > 0:
                await self.sleep(self.delay_seconds)
            quote = await self._quote(line, location)
            enriched.append(line.model_copy(update={"price": quote}))
        return enriched

    async def _quote(self, line: ShoppingLine, location: str) -> PriceQuote:
        try:
            local = await self.source.lookup(line.name, location)
        except (PriceLookupError, KeyError, TypeError, ValueError) as exc:
            _logger.warning("Price lookup failed for %s: %s", line.name, exc)
            return PriceQuote(status=PriceStatus.UNAVAILABLE)
        return PriceQuote(
            status=PriceStatus.AVAILABLE,
            local_price=local.price,
            store=local.store,
            difference=price_difference(local.price, line.unit_cost),
        )


def price_difference(local_price: float, unit_cost: float) -> float | None:
    """Percentage difference of the local price against the planned unit cost."""
    if unit_cost <= 0:
        return None
    return round((local_price - unit_cost) / unit_cost * 100, 1)
