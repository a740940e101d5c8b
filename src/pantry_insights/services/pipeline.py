"""Generic analysis pipeline shared by every analysis."""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol, TypeVar
from uuid import UUID

from pydantic import BaseModel

from pantry_insights.domain.errors import AdvisoryError
from pantry_insights.domain.results import AdviceSource
from pantry_insights.services.advisory import AdvisoryRequest, AdvisoryService
from pantry_insights.services.aggregator import (
    AnalysisInput,
    AnalysisQuery,
    DomainAggregator,
)

_logger = logging.getLogger(__name__)

FeaturesT = TypeVar("FeaturesT")
AdviceT = TypeVar("AdviceT", bound=BaseModel)
ResultT = TypeVar("ResultT", bound=BaseModel)


class AnalysisStrategy(Protocol[FeaturesT, AdviceT, ResultT]):
    """Per-analysis hooks plugged into the shared pipeline."""

    kind: str
    schema: type[AdviceT]

    def query(self) -> AnalysisQuery:
        """Describe which records the analysis needs."""

    def derive(self, data: AnalysisInput) -> FeaturesT:
        """Compute deterministic features from the collected records."""

    def is_empty(self, data: AnalysisInput, features: FeaturesT) -> bool:
        """Return True when there is nothing to analyze."""

    def empty_result(
        self, data: AnalysisInput, features: FeaturesT, now: datetime
    ) -> ResultT:
        """Return the well-formed result for an empty input."""

    def build_request(self, data: AnalysisInput, features: FeaturesT) -> AdvisoryRequest:
        """Build the advisory request."""

    def fallback(self, data: AnalysisInput, features: FeaturesT) -> AdviceT:
        """Produce advice without the advisory service."""

    def reconcile(
        self, data: AnalysisInput, features: FeaturesT, advice: AdviceT
    ) -> AdviceT:
        """Align validated advisory output with the derived features."""

    def assemble(  # noqa: PLR0913
        self,
        data: AnalysisInput,
        features: FeaturesT,
        advice: AdviceT,
        source: AdviceSource,
        now: datetime,
    ) -> ResultT:
        """Merge features and advice into the response aggregate."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class AnalysisPipeline:
    """Aggregate, derive, advise (or fall back) and assemble."""

    aggregator: DomainAggregator
    advisory: AdvisoryService
    clock: Callable[[], datetime] = _utcnow

    async def run(
        self,
        strategy: AnalysisStrategy[FeaturesT, AdviceT, ResultT],
        user_id: UUID,
        now: datetime | None = None,
    ) -> ResultT:
        now = now or self.clock()
        data = self.aggregator.collect(user_id, strategy.query(), now.date())
        features = strategy.derive(data)
        if strategy.is_empty(data, features):
            _logger.info("No data for %s analysis of %s", strategy.kind, user_id)
            return strategy.empty_result(data, features, now)

        try:
            advice = await self.advisory.advise(
                strategy.build_request(data, features), strategy.schema
            )
        except AdvisoryError as exc:
            _logger.warning(
                "Advisory %s unavailable for %s, using fallback: %s",
                strategy.kind,
                user_id,
                exc,
            )
            advice = strategy.fallback(data, features)
            source = AdviceSource.FALLBACK
        else:
            advice = strategy.reconcile(data, features, advice)
            source = AdviceSource.ADVISORY
        return strategy.assemble(data, features, advice, source, now)
