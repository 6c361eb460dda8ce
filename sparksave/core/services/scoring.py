"""
Plan Scorer - Combines savings, risk and preference match into one score.

Score components:
1. SAVINGS: up to ``savings_weight`` points, normalized against a dynamic
   maximum (half the current annual cost, at least 2000). Plans that cost
   more take a bounded penalty of at most 10 points.
2. RISK: ``-(risk_score / 100) * risk_weight``, never positive.
3. PREFERENCES: ``preference_weight / 4`` for each of four matched preferences.

Weights depend on the user's cost-savings priority and always sum to 100.
Scores have no fixed range and are only meaningful relative to each other.
"""

from dataclasses import dataclass

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import CostSavingsPriority, Preferences
from sparksave.core.domain.recommendation import (
    Baseline,
    RiskAssessment,
    Savings,
    ScoreBreakdown,
    ScoredPlan,
)
from sparksave.core.domain.usage import UsageProfile
from sparksave.core.services.costs import (
    calculate_payback_period,
    calculate_savings,
    project_annual_cost,
)
from sparksave.core.services.risk import assess_risk

MIN_POTENTIAL_SAVINGS = 2000.0
POTENTIAL_SAVINGS_SHARE = 0.5
MAX_COST_PENALTY = 10.0
PREFERENCE_CHECKS = 4


@dataclass(frozen=True)
class ScoringWeights:
    """Point budget per score component."""

    savings_weight: float
    risk_weight: float

    @property
    def preference_weight(self) -> float:
        return 100 - self.savings_weight - self.risk_weight


WEIGHT_PROFILES: dict[str, ScoringWeights] = {
    "high": ScoringWeights(savings_weight=60, risk_weight=25),
    "medium": ScoringWeights(savings_weight=50, risk_weight=30),
    "low": ScoringWeights(savings_weight=40, risk_weight=30),
}


def weights_for(priority: CostSavingsPriority) -> ScoringWeights:
    """Weight profile for a cost-savings priority."""
    return WEIGHT_PROFILES[priority]


def savings_component(annual_savings: float, current_annual_cost: float, weights: ScoringWeights) -> float:
    max_potential_savings = max(current_annual_cost * POTENTIAL_SAVINGS_SHARE, MIN_POTENTIAL_SAVINGS)
    if annual_savings > 0:
        return min(annual_savings / max_potential_savings * weights.savings_weight, weights.savings_weight)
    if annual_savings < 0:
        return max(annual_savings / max_potential_savings * MAX_COST_PENALTY, -MAX_COST_PENALTY)
    return 0.0


def risk_component(risk: RiskAssessment, weights: ScoringWeights) -> float:
    return -(risk.risk_score / 100) * weights.risk_weight


def preference_component(plan: CandidatePlan, preferences: Preferences, weights: ScoringWeights) -> float:
    points_per_match = weights.preference_weight / PREFERENCE_CHECKS
    fee = plan.early_termination_fee

    matches = [
        bool(preferences.contract_type_preference)
        and plan.contract_type == preferences.contract_type_preference,
        bool(plan.renewable_percentage)
        and plan.renewable_percentage >= preferences.renewable_energy_preference,
        bool(plan.supplier_rating)
        and plan.supplier_rating >= preferences.supplier_rating_preference,
        not fee or fee <= preferences.early_termination_fee_tolerance,
    ]
    return points_per_match * sum(matches)


def score_plan(
    plan: CandidatePlan,
    baseline: Baseline,
    preferences: Preferences,
    profile: UsageProfile,
) -> ScoredPlan:
    """
    Project, assess and score a single plan.

    Args:
        plan: Candidate plan (already past the budget filter)
        baseline: Current annual cost and consumption
        preferences: User preferences
        profile: Usage history (for the risk assessor)

    Returns:
        ScoredPlan with savings, risk, payback and the score breakdown
    """
    weights = weights_for(preferences.cost_savings_priority)

    plan_annual_cost = project_annual_cost(plan, baseline.annual_kwh)
    savings: Savings = calculate_savings(baseline.current_annual_cost, plan_annual_cost)
    risk = assess_risk(plan, preferences, profile)

    # Switching cost is the termination fee
    upfront_costs = plan.early_termination_fee or 0.0
    payback = calculate_payback_period(upfront_costs, savings.monthly_savings)

    breakdown = ScoreBreakdown(
        savings_component=savings_component(savings.annual_savings, baseline.current_annual_cost, weights),
        risk_component=risk_component(risk, weights),
        preference_component=preference_component(plan, preferences, weights),
    )

    return ScoredPlan(
        plan=plan,
        score=breakdown.total,
        savings=savings,
        risk=risk,
        projected_annual_cost=plan_annual_cost,
        breakdown=breakdown,
        payback_period_months=payback,
    )
