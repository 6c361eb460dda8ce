"""
Risk Assessor - Qualitative risk flags and a bounded risk score per plan.

Rules are additive and independent except for the two termination-fee rules,
which are mutually exclusive: the tolerance rule only applies when the fee is
not already high relative to the household's annual cost.
"""

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import RiskAssessment
from sparksave.core.domain.usage import UsageProfile

VARIABLE_RATE = "variable_rate"
HIGH_TERMINATION_FEE = "high_termination_fee"
TERMINATION_FEE_ABOVE_TOLERANCE = "termination_fee_above_tolerance"
LOW_SUPPLIER_RATING = "low_supplier_rating"
CONTRACT_TYPE_MISMATCH = "contract_type_mismatch"
RENEWABLE_ENERGY_MISMATCH = "renewable_energy_mismatch"
INFLEXIBLE_CONTRACT = "inflexible_contract"

RISK_POINTS = {
    VARIABLE_RATE: 30,
    HIGH_TERMINATION_FEE: 25,
    TERMINATION_FEE_ABOVE_TOLERANCE: 15,
    LOW_SUPPLIER_RATING: 20,
    CONTRACT_TYPE_MISMATCH: 10,
    RENEWABLE_ENERGY_MISMATCH: 5,
    INFLEXIBLE_CONTRACT: 15,
}

MAX_RISK_SCORE = 100
# Fee above this share of annual cost counts as high
HIGH_FEE_RATIO = 0.10


def _termination_fee_ratio(fee: float, average_monthly_cost: float) -> float:
    annual_cost = average_monthly_cost * 12
    if annual_cost <= 0:
        return float("inf")
    return fee / annual_cost


def assess_risk(
    plan: CandidatePlan,
    preferences: Preferences,
    profile: UsageProfile,
) -> RiskAssessment:
    """
    Apply every matching risk rule and cap the total at 100.

    Args:
        plan: Candidate plan
        preferences: User preferences
        profile: Usage history; only the average monthly cost is used

    Returns:
        RiskAssessment with flags in rule order
    """
    flags: list[str] = []
    fee = plan.early_termination_fee or 0.0

    if plan.contract_type == "variable":
        flags.append(VARIABLE_RATE)

    if fee:
        ratio = _termination_fee_ratio(fee, profile.aggregated_stats.average_monthly_cost)
        if ratio > HIGH_FEE_RATIO:
            flags.append(HIGH_TERMINATION_FEE)
        elif fee > preferences.early_termination_fee_tolerance:
            flags.append(TERMINATION_FEE_ABOVE_TOLERANCE)

    if plan.supplier_rating and plan.supplier_rating < preferences.supplier_rating_preference:
        flags.append(LOW_SUPPLIER_RATING)

    if (
        preferences.contract_type_preference
        and plan.contract_type != preferences.contract_type_preference
    ):
        flags.append(CONTRACT_TYPE_MISMATCH)

    if preferences.renewable_energy_preference > 0 and (
        not plan.renewable_percentage
        or plan.renewable_percentage < preferences.renewable_energy_preference
    ):
        flags.append(RENEWABLE_ENERGY_MISMATCH)

    if (
        plan.contract_length_months
        and plan.contract_length_months > preferences.flexibility_preference
        and fee > 0
    ):
        flags.append(INFLEXIBLE_CONTRACT)

    score = min(sum(RISK_POINTS[flag] for flag in flags), MAX_RISK_SCORE)
    return RiskAssessment(risk_flags=flags, risk_score=float(score))
