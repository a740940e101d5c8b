"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from pantry_insights.adapters.httpx_price_client import HttpxPriceClient
from pantry_insights.adapters.openai_advisory_client import OpenAIAdvisoryClient
from pantry_insights.adapters.supabase_analysis_repository import (
    SupabaseAnalysisRepository,
)
from pantry_insights.config import Settings
from pantry_insights.services.advisory import AdvisoryService
from pantry_insights.services.aggregator import DomainAggregator
from pantry_insights.services.analyses import InsightsService
from pantry_insights.services.pipeline import AnalysisPipeline
from pantry_insights.services.price_comparison import PriceComparisonService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    insights_service: InsightsService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    repository = SupabaseAnalysisRepository(supabase_client)
    aggregator = DomainAggregator(
        repository=repository,
        catalog_sample_size=resolved_settings.catalog_sample_size,
    )
    advisory_client = OpenAIAdvisoryClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.advisory_timeout_seconds,
        store=resolved_settings.openai_store,
    )
    advisory_service = AdvisoryService(
        client=advisory_client,
        model=resolved_settings.openai_model,
        temperature=resolved_settings.advisory_temperature,
        max_output_tokens=resolved_settings.advisory_max_output_tokens,
    )
    price_client = None
    price_comparison = None
    if resolved_settings.price_api_base_url:
        price_client = HttpxPriceClient.create(resolved_settings.price_api_base_url)
        price_comparison = PriceComparisonService(
            source=price_client,
            delay_seconds=resolved_settings.price_lookup_delay_seconds,
        )
    insights_service = InsightsService(
        pipeline=AnalysisPipeline(aggregator=aggregator, advisory=advisory_service),
        price_comparison=price_comparison,
    )

    async def close_resources() -> None:
        await advisory_client.close()
        if price_client is not None:
            await price_client.close()

    return AppContainer(
        settings=resolved_settings,
        insights_service=insights_service,
        close_resources=close_resources,
    )
