"""
Plan cost projection, savings and payback.
"""

import math

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.recommendation import Savings

MONTHS_PER_YEAR = 12


def project_annual_cost(plan: CandidatePlan, annual_kwh: float) -> float:
    """Energy charge plus twelve months of fixed fees."""
    return plan.rate_per_kwh * annual_kwh + (plan.monthly_fee or 0.0) * MONTHS_PER_YEAR


def calculate_savings(current_annual_cost: float, plan_annual_cost: float) -> Savings:
    """Savings against the baseline. Negative values mean the plan costs more."""
    annual_savings = current_annual_cost - plan_annual_cost
    percentage_savings = (
        annual_savings / current_annual_cost * 100 if current_annual_cost > 0 else 0.0
    )
    return Savings(
        annual_savings=annual_savings,
        monthly_savings=annual_savings / MONTHS_PER_YEAR,
        percentage_savings=percentage_savings,
    )


def calculate_payback_period(upfront_costs: float, monthly_savings: float) -> int | None:
    """
    Months until monthly savings recoup an upfront cost, rounded up.

    Returns None when there is nothing to recoup or savings never recoup it.
    """
    if upfront_costs <= 0 or monthly_savings <= 0:
        return None
    return math.ceil(upfront_costs / monthly_savings)
