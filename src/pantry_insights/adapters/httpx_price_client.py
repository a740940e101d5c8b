"""HTTP local price lookup client."""

from dataclasses import dataclass

import httpx

from pantry_insights.domain.errors import PriceLookupError
from pantry_insights.domain.models import LocalPrice
from pantry_insights.services.price_comparison import PriceSource


@dataclass
class HttpxPriceClient(PriceSource):
    """HTTPX-backed price source."""

    base_url: str
    http_client: httpx.AsyncClient
    timeout_seconds: float = 15.0

    @classmethod
    def create(cls, base_url: str) -> "HttpxPriceClient":
        """Create a price client with a managed httpx session."""
        return cls(base_url=base_url.rstrip("/"), http_client=httpx.AsyncClient())

    async def lookup(self, item_name: str, location: str) -> LocalPrice:
        """Fetch the lowest local price for an item."""
        try:
            response = await self.http_client.get(
                f"{self.base_url}/prices",
                params={"item": item_name, "location": location},
                timeout=self.timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise PriceLookupError(f"Price lookup failed for {item_name}: {exc}") from exc
        payload = response.json()
        return LocalPrice(
            item_name=item_name,
            price=float(payload["price"]),
            store=str(payload.get("store", "")),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
