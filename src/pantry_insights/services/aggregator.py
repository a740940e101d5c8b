"""Domain aggregation: fetch the records one analysis needs."""

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID

from pantry_insights.domain.errors import UserNotFoundError
from pantry_insights.domain.models import (
    CatalogOption,
    ConsumptionEntry,
    InventoryRecord,
    UserProfile,
)
from pantry_insights.domain.units import unit_type

_logger = logging.getLogger(__name__)


class AnalysisRepository(Protocol):
    """Read-only persistence interface for analysis inputs."""

    def get_profile(self, user_id: UUID) -> UserProfile | None:
        """Return the user's profile, or None when the user does not exist."""

    def list_inventory(
        self, user_id: UUID, *, expiring_only: bool = False
    ) -> list[InventoryRecord]:
        """Return inventory records, optionally only those with an expiration date."""

    def list_catalog(self, limit: int) -> list[CatalogOption]:
        """Return up to ``limit`` catalog options."""

    def list_consumption(
        self, user_id: UUID, start: date, end: date
    ) -> list[ConsumptionEntry]:
        """Return consumption entries with start <= consumed_on <= end."""


@dataclass(frozen=True)
class WindowBounds:
    default: int
    minimum: int
    maximum: int


NUTRIENT_GAP_WINDOW = WindowBounds(default=30, minimum=7, maximum=90)
PATTERN_WINDOW = WindowBounds(default=30, minimum=7, maximum=365)
IMPACT_WINDOW = WindowBounds(default=30, minimum=7, maximum=90)
COMPARISON_WINDOW = WindowBounds(default=7, minimum=3, maximum=30)


def clamp_window(days: int | None, bounds: WindowBounds) -> int:
    """Clamp a requested window length into the pipeline's bounds."""
    if days is None:
        return bounds.default
    return max(bounds.minimum, min(bounds.maximum, int(days)))


@dataclass(frozen=True)
class AnalysisQuery:
    """What one pipeline needs from the data store."""

    window_days: int = 0
    comparison_days: int = 0
    include_inventory: bool = True
    expiring_only: bool = False
    include_catalog: bool = False
    include_consumption: bool = False


@dataclass(frozen=True)
class AnalysisInput:
    """Records collected for one analysis request."""

    profile: UserProfile
    today: date
    window_days: int = 0
    inventory: list[InventoryRecord] = field(default_factory=list)
    catalog: list[CatalogOption] = field(default_factory=list)
    consumption: list[ConsumptionEntry] = field(default_factory=list)
    comparison: list[ConsumptionEntry] = field(default_factory=list)
    comparison_days: int = 0

    @property
    def window_start(self) -> date:
        return self.today - timedelta(days=self.window_days)

    @property
    def comparison_start(self) -> date:
        return self.window_start - timedelta(days=self.comparison_days)

    @property
    def comparison_end(self) -> date:
        return self.window_start - timedelta(days=1)


@dataclass
class DomainAggregator:
    """Collects profile, inventory, catalog and consumption for a user."""

    repository: AnalysisRepository
    catalog_sample_size: int = 50

    def collect(self, user_id: UUID, query: AnalysisQuery, today: date) -> AnalysisInput:
        """Fetch everything ``query`` asks for; missing data yields empty lists."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            raise UserNotFoundError(user_id)

        inventory: list[InventoryRecord] = []
        if query.include_inventory:
            inventory = self.repository.list_inventory(
                user_id, expiring_only=query.expiring_only
            )
        catalog: list[CatalogOption] = []
        if query.include_catalog:
            catalog = self.repository.list_catalog(self.catalog_sample_size)[
                : self.catalog_sample_size
            ]

        consumption: list[ConsumptionEntry] = []
        comparison: list[ConsumptionEntry] = []
        if query.include_consumption and query.window_days > 0:
            window_start = today - timedelta(days=query.window_days)
            consumption = _sorted_entries(
                self.repository.list_consumption(user_id, window_start, today)
            )
            if query.comparison_days > 0:
                comparison = _sorted_entries(
                    self.repository.list_consumption(
                        user_id,
                        window_start - timedelta(days=query.comparison_days),
                        window_start - timedelta(days=1),
                    )
                )
            _check_units(consumption)
            _check_units(comparison)
        _logger.info(
            "Collected %s inventory, %s catalog and %s consumption records for %s",
            len(inventory),
            len(catalog),
            len(consumption),
            user_id,
        )
        return AnalysisInput(
            profile=profile,
            today=today,
            window_days=query.window_days,
            inventory=inventory,
            catalog=catalog,
            consumption=consumption,
            comparison=comparison,
            comparison_days=query.comparison_days,
        )


def _sorted_entries(entries: list[ConsumptionEntry]) -> list[ConsumptionEntry]:
    return sorted(entries, key=lambda entry: entry.consumed_on)


def _check_units(entries: list[ConsumptionEntry]) -> None:
    """Raise ``UnknownUnitError`` for the first entry with an unknown unit."""
    for entry in entries:
        unit_type(entry.unit)
