"""
Explanation Assembler - Turns ranked plans into explained recommendations.

Explanations come from the explanation service when one is configured and
returns usable text; otherwise a deterministic template is used, so every
recommendation always carries an explanation.
"""

import logging
from dataclasses import dataclass, field

from sparksave.core.domain.errors import ExplanationServiceError
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import (
    Baseline,
    Recommendation,
    RecommendationHistoryEntry,
    ScoredPlan,
)
from sparksave.core.domain.usage import UsagePattern, UsageProfile
from sparksave.core.ports.explanation_service import (
    ExplanationRequest,
    ExplanationService,
    PlanFacts,
)

logger = logging.getLogger(__name__)


@dataclass
class ExplanationContext:
    """Optional memory-bank context for the explainer."""

    usage_patterns: list[UsagePattern] = field(default_factory=list)
    recent_history: list[RecommendationHistoryEntry] = field(default_factory=list)


def template_explanation(scored: ScoredPlan) -> str:
    """Deterministic fallback explanation."""
    return (
        f"This {scored.plan.contract_type} plan from {scored.plan.supplier_name} offers "
        f"{scored.savings.percentage_savings:.1f}% annual savings "
        f"(${scored.savings.annual_savings:.2f}/year)."
    )


def plan_facts(scored: ScoredPlan, rank: int) -> PlanFacts:
    return PlanFacts(
        rank=rank,
        plan_id=scored.plan.plan_id,
        supplier_name=scored.plan.supplier_name,
        plan_name=scored.plan.plan_name,
        rate_per_kwh=scored.plan.rate_per_kwh,
        contract_type=scored.plan.contract_type,
        contract_length_months=scored.plan.contract_length_months,
        annual_savings=scored.savings.annual_savings,
        monthly_savings=scored.savings.monthly_savings,
        percentage_savings=scored.savings.percentage_savings,
        payback_period_months=scored.payback_period_months,
        risk_flags=list(scored.risk.risk_flags),
        risk_score=scored.risk.risk_score,
    )


class ExplanationAssembler:
    """
    Builds the final recommendation list for the top ranked plans.
    """

    def __init__(self, explainer: ExplanationService | None = None):
        """
        Args:
            explainer: Port to the explanation service; None disables it
        """
        self.explainer = explainer

    async def assemble(
        self,
        ranked: list[ScoredPlan],
        baseline: Baseline,
        profile: UsageProfile,
        preferences: Preferences,
        context: ExplanationContext | None = None,
    ) -> tuple[list[Recommendation], str]:
        """
        Attach explanations and dense 1-based ranks to the ranked plans.

        Args:
            ranked: Plans already sorted and truncated to the top N
            baseline: Current annual cost and consumption
            profile: Usage history (aggregates go to the explainer)
            preferences: User preferences (go to the explainer)
            context: Optional usage patterns and recommendation history

        Returns:
            Recommendations in rank order, and where their explanations came
            from: "service", "template" or "mixed"
        """
        generated = await self._generate(ranked, baseline, profile, preferences, context)

        recommendations = []
        used_service = 0
        for index, scored in enumerate(ranked):
            text = generated.get(scored.plan.plan_id)
            if isinstance(text, str) and text.strip():
                explanation = text.strip()
                used_service += 1
            else:
                explanation = template_explanation(scored)

            recommendations.append(Recommendation(
                plan_id=scored.plan.plan_id,
                rank=index + 1,
                annual_savings=scored.savings.annual_savings,
                monthly_savings=scored.savings.monthly_savings,
                percentage_savings=scored.savings.percentage_savings,
                payback_period_months=scored.payback_period_months,
                explanation=explanation,
                risk_flags=list(scored.risk.risk_flags),
                risk_score=scored.risk.risk_score,
            ))

        if used_service == 0:
            source = "template"
        elif used_service == len(ranked):
            source = "service"
        else:
            source = "mixed"
        return recommendations, source

    async def _generate(
        self,
        ranked: list[ScoredPlan],
        baseline: Baseline,
        profile: UsageProfile,
        preferences: Preferences,
        context: ExplanationContext | None,
    ) -> dict[str, str]:
        if self.explainer is None or not ranked:
            return {}

        context = context or ExplanationContext()
        request = ExplanationRequest(
            annual_kwh=baseline.annual_kwh,
            current_annual_cost=baseline.current_annual_cost,
            usage_stats=profile.aggregated_stats,
            preferences=preferences,
            plans=[plan_facts(scored, i + 1) for i, scored in enumerate(ranked)],
            usage_patterns=context.usage_patterns,
            recent_history=context.recent_history,
        )

        try:
            generated = await self.explainer.explain(request)
        except ExplanationServiceError as e:
            logger.warning(f"Explanation service failed, using template explanations: {e}")
            return {}
        except Exception as e:
            logger.error(f"Unexpected explanation service error, using template explanations: {e}")
            return {}

        if not isinstance(generated, dict):
            logger.warning("Explanation service returned an unusable result, using template explanations")
            return {}
        return generated
