"""Shared test fixtures."""

import json
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from pantry_insights.config import Settings
from pantry_insights.containers import AppContainer
from pantry_insights.domain.errors import AdvisoryUnavailableError, PriceLookupError
from pantry_insights.domain.models import (
    CatalogOption,
    ConsumptionEntry,
    FoodCategory,
    InventoryRecord,
    LocalPrice,
    Location,
    MealSlot,
    UserProfile,
)
from pantry_insights.services.advisory import AdvisoryClient, AdvisoryService
from pantry_insights.services.aggregator import AnalysisRepository, DomainAggregator
from pantry_insights.services.analyses import InsightsService
from pantry_insights.services.pipeline import AnalysisPipeline
from pantry_insights.services.price_comparison import (
    PriceComparisonService,
    PriceSource,
)

TODAY = date(2024, 7, 15)
NOW = datetime(2024, 7, 15, 12, 0, tzinfo=UTC)


@dataclass
class InMemoryAnalysisRepository(AnalysisRepository):
    """In-memory analysis repository for tests."""

    profiles: dict[UUID, UserProfile] = field(default_factory=dict)
    inventory: dict[UUID, list[InventoryRecord]] = field(default_factory=dict)
    catalog: list[CatalogOption] = field(default_factory=list)
    consumption: dict[UUID, list[ConsumptionEntry]] = field(default_factory=dict)
    consumption_queries: list[tuple[date, date]] = field(default_factory=list)

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        return self.profiles.get(user_id)

    def list_inventory(
        self, user_id: UUID, *, expiring_only: bool = False
    ) -> list[InventoryRecord]:
        records = self.inventory.get(user_id, [])
        if expiring_only:
            return [record for record in records if record.expiration_date is not None]
        return list(records)

    def list_catalog(self, limit: int) -> list[CatalogOption]:
        return self.catalog[:limit]

    def list_consumption(
        self, user_id: UUID, start: date, end: date
    ) -> list[ConsumptionEntry]:
        self.consumption_queries.append((start, end))
        return [
            entry
            for entry in self.consumption.get(user_id, [])
            if start <= entry.consumed_on <= end
        ]


@dataclass
class FakeAdvisoryClient(AdvisoryClient):
    """Fake advisory client returning queued payloads."""

    responses: list[str] = field(default_factory=list)
    calls: list[dict[str, object]] = field(default_factory=list)

    def queue(self, payload: object) -> None:
        self.responses.append(payload if isinstance(payload, str) else json.dumps(payload))

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> str:
        self.calls.append(
            {
                "model": model,
                "temperature": temperature,
                "prompt": prompt,
                "schema_name": schema_name,
                "schema": schema,
            }
        )
        if not self.responses:
            raise AdvisoryUnavailableError("No response queued")
        return self.responses.pop(0)


@dataclass
class FailingAdvisoryClient(AdvisoryClient):
    """Advisory client that always times out."""

    calls: int = 0

    async def complete(  # noqa: PLR0913
        self,
        *,
        model: str,
        temperature: float,
        max_output_tokens: int,
        prompt: str,
        schema_name: str,
        schema: dict[str, object],
    ) -> str:
        self.calls += 1
        raise AdvisoryUnavailableError("Request timed out")


@dataclass
class FakePriceSource(PriceSource):
    """Price source with fixed prices; unknown items fail."""

    prices: dict[str, float] = field(default_factory=dict)
    lookups: list[tuple[str, str]] = field(default_factory=list)

    async def lookup(self, item_name: str, location: str) -> LocalPrice:
        self.lookups.append((item_name, location))
        if item_name not in self.prices:
            raise PriceLookupError(f"No price for {item_name}")
        return LocalPrice(item_name=item_name, price=self.prices[item_name], store="Corner Market")


def make_record(  # noqa: PLR0913
    name: str,
    category: FoodCategory,
    quantity: float,
    unit: str,
    *,
    unit_cost: float = 1.0,
    expires_in: int | None = None,
    today: date = TODAY,
) -> InventoryRecord:
    return InventoryRecord.create(
        id=uuid4(),
        name=name,
        category=category,
        quantity=quantity,
        unit=unit,
        unit_cost=unit_cost,
        created_at=datetime(2024, 7, 1, tzinfo=UTC),
        expiration_date=today + timedelta(days=expires_in) if expires_in is not None else None,
    )


def make_entry(  # noqa: PLR0913
    name: str,
    category: FoodCategory,
    consumed_on: date,
    *,
    quantity: float = 1.0,
    unit: str = "servings",
    meal_slot: MealSlot = MealSlot.LUNCH,
    calories: float | None = None,
    protein_g: float | None = None,
    fiber_g: float | None = None,
) -> ConsumptionEntry:
    return ConsumptionEntry(
        item_name=name,
        category=category,
        quantity=quantity,
        unit=unit,
        meal_slot=meal_slot,
        consumed_on=consumed_on,
        calories=calories,
        protein_g=protein_g,
        fiber_g=fiber_g,
    )


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        openai_api_key="openai-key",
    )


@pytest.fixture
def user_id() -> UUID:
    return uuid4()


@pytest.fixture
def profile(user_id: UUID) -> UserProfile:
    return UserProfile(
        user_id=user_id,
        household_size=2,
        budget=50.0,
        location=Location(city="Austin", country="USA"),
    )


@pytest.fixture
def repository(profile: UserProfile) -> InMemoryAnalysisRepository:
    return InMemoryAnalysisRepository(profiles={profile.user_id: profile})


@pytest.fixture
def advisory_client() -> FakeAdvisoryClient:
    return FakeAdvisoryClient()


@pytest.fixture
def price_source() -> FakePriceSource:
    return FakePriceSource()


@pytest.fixture
def insights_service(
    repository: InMemoryAnalysisRepository,
    advisory_client: FakeAdvisoryClient,
    price_source: FakePriceSource,
) -> InsightsService:
    return build_insights_service(repository, advisory_client, price_source)


def build_insights_service(
    repository: AnalysisRepository,
    advisory_client: AdvisoryClient,
    price_source: PriceSource | None = None,
) -> InsightsService:
    async def no_sleep(_seconds: float) -> None:
        return None

    pipeline = AnalysisPipeline(
        aggregator=DomainAggregator(repository),
        advisory=AdvisoryService(client=advisory_client, model="test-model"),
        clock=lambda: NOW,
    )
    price_comparison = None
    if price_source is not None:
        price_comparison = PriceComparisonService(source=price_source, sleep=no_sleep)
    return InsightsService(pipeline=pipeline, price_comparison=price_comparison)


@pytest.fixture
def container(settings: Settings, insights_service: InsightsService) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        insights_service=insights_service,
        close_resources=close_resources,
    )
