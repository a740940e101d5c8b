"""Error types raised by the analysis core."""

from uuid import UUID


class PantryInsightsError(Exception):
    """Base error for pantry insights."""


class UnknownUnitError(PantryInsightsError, ValueError):
    """Raised when a quantity uses a unit without a conversion entry."""

    def __init__(self, unit: str) -> None:
        super().__init__(f"Unknown unit: {unit!r}")
        self.unit = unit


class UserNotFoundError(PantryInsightsError):
    """Raised when no profile exists for the requested user."""

    def __init__(self, user_id: UUID) -> None:
        super().__init__(f"User not found: {user_id}")
        self.user_id = user_id


class AdvisoryError(PantryInsightsError):
    """Base error for the external advisory service."""


class AdvisoryUnavailableError(AdvisoryError):
    """Raised on timeouts, connection failures and non-2xx responses."""


class AdvisoryParseError(AdvisoryError):
    """Raised when advisory output cannot be parsed or fails validation."""


class PriceLookupError(PantryInsightsError):
    """Raised when a price source cannot answer for an item."""
