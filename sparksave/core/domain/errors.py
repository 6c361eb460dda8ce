"""
Recommendation errors.

Each error carries a user-facing message; the HTTP layer maps them to 4xx
responses.
"""


class RecommendationError(Exception):
    """Base class for failures reported to the caller of the recommendation engine."""


class InvalidUsageDataError(RecommendationError, ValueError):
    """Usage history does not yield a positive annual cost and consumption."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Invalid usage data: missing cost or kWh information. Please add usage data first."
        )


class NoEligiblePlansError(RecommendationError):
    """Every candidate plan was removed before scoring."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "No plans found that meet your budget constraints. Please adjust your preferences."
        )


class MissingUserDataError(RecommendationError, LookupError):
    """The memory bank has no usage data or preferences for a user."""


class ExplanationServiceError(RecommendationError):
    """The explanation service failed or returned unusable output."""


class StoreNotConfiguredError(RecommendationError):
    """A per-user operation needs a memory bank or plan catalog that is not configured."""

    def __init__(self, message: str | None = None):
        super().__init__(
            message
            or "Stored recommendations are unavailable: no memory bank is configured. "
            "Send usage, preferences and plans with the request instead."
        )


class InvalidRequestError(RecommendationError, ValueError):
    """A request parameter is out of range."""
