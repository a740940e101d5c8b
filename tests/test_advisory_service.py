"""Tests for the advisory service."""

import asyncio

import pytest

from pantry_insights.domain.advice import ShoppingAdvice
from pantry_insights.domain.errors import AdvisoryParseError
from pantry_insights.services.advisory import (
    AdvisoryRequest,
    AdvisoryService,
    parse_advice,
    render_prompt,
    strip_code_fences,
)
from tests.conftest import FakeAdvisoryClient

_ADVICE = (
    '{"recommendations": [{"name": "Rice", "category": "grain", "quantity": 2, '
    '"unit": "kg", "unit_cost": 2.5, "total_cost": 5, "urgency": "high"}]}'
)


def _request() -> AdvisoryRequest:
    return AdvisoryRequest(
        kind="shopping_plan",
        instructions="Plan purchases.",
        profile={"household_size": 2},
        features={"total_budget": 50},
        summary="Budget $50.00",
        guidelines=("urgency is high, medium or low",),
    )


def test_strip_code_fences() -> None:
    assert strip_code_fences('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_code_fences('```\n{"a": 1}```') == '{"a": 1}'
    assert strip_code_fences('  {"a": 1}  ') == '{"a": 1}'


def test_parse_advice_accepts_fenced_json() -> None:
    advice = parse_advice(f"```json\n{_ADVICE}\n```", ShoppingAdvice)

    assert advice.recommendations[0].name == "Rice"
    assert advice.recommendations[0].category.value == "grains"


@pytest.mark.parametrize(
    ("raw", "message"),
    [
        ("", "empty"),
        ("not json", "not valid JSON"),
        ("[1, 2]", "not a JSON object"),
        ("{}", "missing keys: recommendations"),
        ('{"recommendations": [{"name": "Rice"}]}', "failed validation"),
    ],
)
def test_parse_advice_rejects_bad_output(raw: str, message: str) -> None:
    with pytest.raises(AdvisoryParseError, match=message):
        parse_advice(raw, ShoppingAdvice)


def test_render_prompt_includes_sections() -> None:
    prompt = render_prompt(_request())

    assert prompt.startswith("Plan purchases.")
    assert "USER PROFILE:" in prompt
    assert '"total_budget": 50' in prompt
    assert "SUMMARY:\nBudget $50.00" in prompt
    assert "- urgency is high, medium or low" in prompt


def test_advise_sends_schema_and_validates() -> None:
    client = FakeAdvisoryClient()
    client.queue(_ADVICE)
    service = AdvisoryService(client=client, model="test-model", temperature=0.2)

    advice = asyncio.run(service.advise(_request(), ShoppingAdvice))

    call = client.calls[0]
    assert call["model"] == "test-model"
    assert call["temperature"] == 0.2
    assert call["schema_name"] == "shopping_plan"
    assert "recommendations" in call["schema"]["properties"]
    assert advice.recommendations[0].total_cost == 5
