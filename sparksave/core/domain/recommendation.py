"""
Recommendation Domain Models - Derived scoring results and the ranked output.

Internal, per-pass results are plain dataclasses; anything that crosses the
API or the memory bank is a Pydantic model.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.usage import UsageProfile


@dataclass(frozen=True)
class Baseline:
    """The household's current annualized cost and consumption."""

    current_annual_cost: float
    annual_kwh: float


@dataclass(frozen=True)
class Savings:
    """Positive values mean the candidate plan is cheaper than the current one."""

    annual_savings: float
    monthly_savings: float
    percentage_savings: float


@dataclass(frozen=True)
class RiskAssessment:
    """Qualitative flags plus a bounded 0-100 risk score."""

    risk_flags: list[str] = field(default_factory=list)
    risk_score: float = 0.0


@dataclass(frozen=True)
class ScoreBreakdown:
    """Per-component contributions to a plan's score."""

    savings_component: float
    risk_component: float
    preference_component: float

    @property
    def total(self) -> float:
        return self.savings_component + self.risk_component + self.preference_component


@dataclass(frozen=True)
class ScoredPlan:
    """A candidate plan with everything the ranker and explainer need."""

    plan: CandidatePlan
    score: float
    savings: Savings
    risk: RiskAssessment
    projected_annual_cost: float
    breakdown: ScoreBreakdown
    payback_period_months: int | None = None


class Recommendation(BaseModel):
    """One ranked, explained plan recommendation."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plan_id: str
    rank: int = Field(ge=1)
    annual_savings: float
    monthly_savings: float
    percentage_savings: float
    payback_period_months: int | None = None
    explanation: str = Field(min_length=1)
    risk_flags: list[str] = Field(default_factory=list)
    risk_score: float = Field(ge=0, le=100)

    @property
    def projected_savings(self) -> float:
        return self.annual_savings

    def to_response(self) -> dict:
        """Serialize with the legacy ``projectedSavings`` field clients still read."""
        data = self.model_dump(by_alias=True)
        data["projectedSavings"] = self.projected_savings
        return data


class RankedRecommendations(BaseModel):
    """Final output of a recommendation run."""

    recommendations: list[Recommendation]
    current_annual_cost: float
    annual_kwh: float
    eligible_plan_count: int
    explanation_source: Literal["service", "template", "mixed"] = "template"


class RecommendationHistoryEntry(BaseModel):
    """A recommendation as remembered in the memory bank."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str
    recommendation_id: str
    plan_id: str
    rank: int
    projected_savings: float
    explanation: str
    selected: bool = False
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RecommendationRequest(BaseModel):
    """Stateless recommendation request body."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str | None = None
    usage_data: UsageProfile
    preferences: Preferences
    available_plans: list[CandidatePlan]
    top_n: int | None = Field(default=None, ge=1)
