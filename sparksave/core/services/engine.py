"""
Recommendation Engine - The core of SparkSave.

A single linear pass over the candidate plans:
1. Resolve the baseline (current annual cost and consumption)
2. Drop plans that break the budget
3. Score every remaining plan (savings, risk, payback, preference match)
4. Rank by score and keep the top N
5. Attach explanations
"""

import logging

from sparksave.core.domain.errors import InvalidRequestError, NoEligiblePlansError
from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import Baseline, RankedRecommendations, ScoredPlan
from sparksave.core.domain.usage import UsageProfile
from sparksave.core.ports.explanation_service import ExplanationService
from sparksave.core.services.baseline import calculate_baseline
from sparksave.core.services.explanations import ExplanationAssembler, ExplanationContext
from sparksave.core.services.scoring import score_plan
from sparksave.core.services.selection import filter_by_budget, rank_plans
from sparksave.core.services.usage_summary import with_aggregates

logger = logging.getLogger(__name__)

DEFAULT_TOP_N = 3


def _check_top_n(top_n: int) -> int:
    if top_n < 1:
        raise InvalidRequestError(f"top_n must be at least 1, got {top_n}")
    return top_n


class RecommendationEngine:
    """
    Scores, ranks and explains candidate plans for one household.

    Holds no per-request state; one instance can serve concurrent requests.
    """

    def __init__(
        self,
        explainer: ExplanationService | None = None,
        top_n: int = DEFAULT_TOP_N,
    ):
        """
        Args:
            explainer: Port to the explanation service (optional)
            top_n: Default number of recommendations to return
        """
        self.assembler = ExplanationAssembler(explainer)
        self.top_n = _check_top_n(top_n)

    async def close(self) -> None:
        """Release the explanation service client."""
        if self.assembler.explainer is not None:
            await self.assembler.explainer.close()

    def _limit(self, top_n: int | None) -> int:
        return self.top_n if top_n is None else _check_top_n(top_n)

    def evaluate(
        self,
        profile: UsageProfile,
        preferences: Preferences,
        plans: list[CandidatePlan],
    ) -> tuple[Baseline, list[ScoredPlan]]:
        """
        Score and rank every eligible plan.

        Returns:
            The baseline and all eligible plans, best first

        Raises:
            InvalidUsageDataError: if the usage history has no positive baseline
            NoEligiblePlansError: if no plan survives the budget filter
        """
        baseline = calculate_baseline(profile)

        eligible = filter_by_budget(plans, baseline.annual_kwh, preferences.budget_constraints)
        if not eligible:
            logger.warning(f"No eligible plans out of {len(plans)} candidates")
            raise NoEligiblePlansError()

        scored = [score_plan(plan, baseline, preferences, profile) for plan in eligible]
        return baseline, rank_plans(scored)

    def score_and_rank(
        self,
        profile: UsageProfile,
        preferences: Preferences,
        plans: list[CandidatePlan],
        top_n: int | None = None,
    ) -> list[ScoredPlan]:
        """
        Score and rank plans without explanations.

        Args:
            profile: Usage history
            preferences: User preferences
            plans: Candidate plans in catalog order
            top_n: Number of plans to keep (engine default when None)
        """
        limit = self._limit(top_n)
        _, ranked = self.evaluate(profile, preferences, plans)
        return ranked[:limit]

    async def recommend(
        self,
        profile: UsageProfile,
        preferences: Preferences,
        plans: list[CandidatePlan],
        top_n: int | None = None,
        context: ExplanationContext | None = None,
    ) -> RankedRecommendations:
        """
        Produce the ranked, explained recommendation list.

        Args:
            profile: Usage history
            preferences: User preferences
            plans: Candidate plans in catalog order
            top_n: Number of recommendations (engine default when None)
            context: Memory-bank context forwarded to the explainer

        Returns:
            RankedRecommendations with dense ranks 1..N
        """
        limit = self._limit(top_n)
        baseline, ranked = self.evaluate(profile, preferences, plans)
        top = ranked[:limit]

        logger.info(
            f"Ranked {len(ranked)} eligible plans; explaining top {len(top)} "
            f"(baseline ${baseline.current_annual_cost:.2f}/year, {baseline.annual_kwh:.0f} kWh)"
        )
        recommendations, source = await self.assembler.assemble(
            top, baseline, with_aggregates(profile), preferences, context
        )

        return RankedRecommendations(
            recommendations=recommendations,
            current_annual_cost=baseline.current_annual_cost,
            annual_kwh=baseline.annual_kwh,
            eligible_plan_count=len(ranked),
            explanation_source=source,
        )
