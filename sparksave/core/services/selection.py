"""
Budget Filter and Ranker.
"""

import logging

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import BudgetConstraints
from sparksave.core.domain.recommendation import ScoredPlan
from sparksave.core.services.costs import MONTHS_PER_YEAR, project_annual_cost

logger = logging.getLogger(__name__)


def within_budget(plan: CandidatePlan, annual_kwh: float, constraints: BudgetConstraints) -> bool:
    annual_cost = project_annual_cost(plan, annual_kwh)
    monthly_cost = annual_cost / MONTHS_PER_YEAR

    if constraints.max_annual_cost and annual_cost > constraints.max_annual_cost:
        return False
    if constraints.max_monthly_cost and monthly_cost > constraints.max_monthly_cost:
        return False
    return True


def filter_by_budget(
    plans: list[CandidatePlan],
    annual_kwh: float,
    constraints: BudgetConstraints | None,
) -> list[CandidatePlan]:
    """
    Drop plans whose projected cost breaks a hard budget cap.

    Plan order is preserved. With no constraints every plan is kept.
    """
    if constraints is None:
        return list(plans)

    eligible = [p for p in plans if within_budget(p, annual_kwh, constraints)]
    excluded = len(plans) - len(eligible)
    if excluded:
        logger.info(f"Budget filter excluded {excluded} of {len(plans)} plans")
    return eligible


def rank_plans(scored: list[ScoredPlan], top_n: int | None = None) -> list[ScoredPlan]:
    """
    Order plans by score, highest first.

    The sort is stable, so plans with equal scores keep their catalog order.

    Args:
        scored: Scored plans in catalog order
        top_n: Keep only the first N plans (all when None)
    """
    ranked = sorted(scored, key=lambda s: s.score, reverse=True)
    if top_n is not None:
        ranked = ranked[:top_n]
    return ranked
