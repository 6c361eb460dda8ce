"""
ExplanationService Port - Interface for natural-language plan explanations.
"""

from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import RecommendationHistoryEntry
from sparksave.core.domain.usage import AggregatedStats, UsagePattern


class PlanFacts(BaseModel):
    """Numeric facts about one ranked plan, as handed to the explainer."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    rank: int
    plan_id: str
    supplier_name: str
    plan_name: str
    rate_per_kwh: float
    contract_type: str
    contract_length_months: int | None = None
    annual_savings: float
    monthly_savings: float
    percentage_savings: float
    payback_period_months: int | None = None
    risk_flags: list[str] = Field(default_factory=list)
    risk_score: float


class ExplanationRequest(BaseModel):
    """Everything the explainer may use to justify the top plans."""

    annual_kwh: float
    current_annual_cost: float
    usage_stats: AggregatedStats
    preferences: Preferences
    plans: list[PlanFacts]
    usage_patterns: list[UsagePattern] = Field(default_factory=list)
    recent_history: list[RecommendationHistoryEntry] = Field(default_factory=list)


class ExplanationService(BaseModel, ABC):
    """
    Abstract interface for plan explanation generation.
    Also serves as a Pydantic Model for configuration validation.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    @abstractmethod
    async def explain(self, request: ExplanationRequest) -> dict[str, str]:
        """
        Generate a short justification for each plan in the request.

        Args:
            request: Ranked plan facts plus usage and preference context

        Returns:
            Mapping of plan_id to explanation text. Plans may be missing.

        Raises:
            ExplanationServiceError: if the service is unreachable or its
                output cannot be parsed
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the explanation service is reachable."""
        ...

    async def close(self) -> None:
        """Release any held connections."""
        return None


def describe_request(request: ExplanationRequest) -> dict[str, Any]:
    """JSON-ready view of a request, with camelCase keys."""
    return {
        "annualKwh": request.annual_kwh,
        "currentAnnualCost": request.current_annual_cost,
        "usageStats": request.usage_stats.model_dump(by_alias=True),
        "preferences": request.preferences.model_dump(by_alias=True, mode="json"),
        "plans": [p.model_dump(by_alias=True) for p in request.plans],
        "usagePatterns": [p.model_dump(by_alias=True) for p in request.usage_patterns],
        "recentHistory": [h.model_dump(by_alias=True, mode="json") for h in request.recent_history],
    }
