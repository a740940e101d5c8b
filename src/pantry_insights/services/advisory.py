"""Advisory synthesis via an external inference service."""

import json
import logging
import re
from dataclasses import dataclass, field
from typing import Protocol, TypeVar

from pydantic import BaseModel, ValidationError

from pantry_insights.domain.errors import AdvisoryParseError

_logger = logging.getLogger(__name__)

AdviceT = TypeVar("AdviceT", bound=BaseModel)

_FENCE_PATTERN = re.compile(r"^```[A-Za-z0-9_-]*\s*\n?(?P<body>.*?)\n?\s*```$", re.DOTALL)


class AdvisoryClient(Protocol):
    """Interface for the inference endpoint."""

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
        """Return the raw text produced for the prompt."""


@dataclass(frozen=True)
class AdvisoryRequest:
    """One structured request: profile, derived features and a text summary."""

    kind: str
    instructions: str
    profile: dict[str, object]
    features: dict[str, object]
    summary: str = ""
    guidelines: tuple[str, ...] = field(default_factory=tuple)


@dataclass
class AdvisoryService:
    """Builds advisory prompts and validates the structured response."""

    client: AdvisoryClient
    model: str
    temperature: float = 0.3
    max_output_tokens: int = 6000

    async def advise(self, request: AdvisoryRequest, schema: type[AdviceT]) -> AdviceT:
        """Request a synthesis and validate it against ``schema``.

        Raises AdvisoryUnavailableError (from the client) or AdvisoryParseError.
        """
        raw = await self.client.complete(
            model=self.model,
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
            prompt=render_prompt(request),
            schema_name=request.kind,
            schema=schema.model_json_schema(),
        )
        advice = parse_advice(raw, schema)
        _logger.info("Advisory %s response validated", request.kind)
        return advice


def render_prompt(request: AdvisoryRequest) -> str:
    """Render a request into a single prompt string."""
    sections = [
        request.instructions.strip(),
        "USER PROFILE:\n" + json.dumps(request.profile, indent=2, default=str),
        "DERIVED FEATURES:\n" + json.dumps(request.features, indent=2, default=str),
    ]
    if request.summary:
        sections.append("SUMMARY:\n" + request.summary.strip())
    if request.guidelines:
        sections.append(
            "RULES:\n" + "\n".join(f"- {guideline}" for guideline in request.guidelines)
        )
    sections.append("Respond with a single JSON object matching the provided schema.")
    return "\n\n".join(sections)


def strip_code_fences(raw: str) -> str:
    """Remove a surrounding markdown code fence, if present."""
    text = raw.strip()
    match = _FENCE_PATTERN.match(text)
    if match:
        return match.group("body").strip()
    return text


def parse_advice(raw: str, schema: type[AdviceT]) -> AdviceT:
    """Parse advisory text into ``schema`` or raise AdvisoryParseError."""
    text = strip_code_fences(raw or "")
    if not text:
        raise AdvisoryParseError("Advisory response was empty")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise AdvisoryParseError(f"Advisory response is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise AdvisoryParseError("Advisory response is not a JSON object")
    missing = [
        name
        for name, model_field in schema.model_fields.items()
        if model_field.is_required() and name not in payload
    ]
    if missing:
        raise AdvisoryParseError(
            f"Advisory response is missing keys: {', '.join(sorted(missing))}"
        )
    try:
        return schema.model_validate(payload)
    except ValidationError as exc:
        raise AdvisoryParseError(
            f"Advisory response failed validation: {exc.error_count()} errors"
        ) from exc
