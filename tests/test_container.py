"""Tests for container wiring."""

import asyncio

from pantry_insights.containers import build_container


def test_build_container_creates_services(settings) -> None:
    container = build_container(settings)
    assert container.insights_service is not None
    assert container.insights_service.price_comparison is None
    asyncio.run(container.close_resources())


def test_build_container_with_price_api(settings) -> None:
    settings.price_api_base_url = "https://prices.example"
    settings.price_lookup_delay_seconds = 0.5

    container = build_container(settings)

    price_comparison = container.insights_service.price_comparison
    assert price_comparison is not None
    assert price_comparison.delay_seconds == 0.5
    asyncio.run(container.close_resources())
