import pytest

from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import Baseline, RiskAssessment
from sparksave.core.services.scoring import (
    WEIGHT_PROFILES,
    preference_component,
    risk_component,
    savings_component,
    score_plan,
    weights_for,
)

BASELINE = Baseline(current_annual_cost=2400, annual_kwh=12000)


@pytest.mark.parametrize("priority", ["high", "medium", "low"])
def test_weights_sum_to_100(priority):
    weights = weights_for(priority)
    assert weights.savings_weight + weights.risk_weight + weights.preference_weight == 100


def test_weight_profiles():
    assert (WEIGHT_PROFILES["high"].savings_weight, WEIGHT_PROFILES["high"].risk_weight) == (60, 25)
    assert (WEIGHT_PROFILES["medium"].savings_weight, WEIGHT_PROFILES["medium"].risk_weight) == (50, 30)
    assert (WEIGHT_PROFILES["low"].savings_weight, WEIGHT_PROFILES["low"].risk_weight) == (40, 30)
    assert WEIGHT_PROFILES["high"].preference_weight == 15
    assert WEIGHT_PROFILES["medium"].preference_weight == 20
    assert WEIGHT_PROFILES["low"].preference_weight == 30


def test_savings_component_uses_minimum_potential():
    # max(2400 * 0.5, 2000) = 2000
    assert savings_component(1200, 2400, weights_for("high")) == pytest.approx(36)


def test_savings_component_uses_half_of_large_baseline():
    # max(10000 * 0.5, 2000) = 5000
    assert savings_component(1000, 10000, weights_for("medium")) == pytest.approx(10)


def test_savings_component_is_capped():
    assert savings_component(5000, 2400, weights_for("high")) == 60


def test_cost_penalty_is_bounded():
    weights = weights_for("low")
    assert savings_component(-200, 2400, weights) == pytest.approx(-1)
    assert savings_component(-50000, 2400, weights) == -10


def test_zero_savings_scores_zero():
    assert savings_component(0, 2400, weights_for("medium")) == 0


def test_risk_component():
    risk = RiskAssessment(risk_flags=["variable_rate"], risk_score=30)
    assert risk_component(risk, weights_for("high")) == pytest.approx(-7.5)
    assert risk_component(RiskAssessment(), weights_for("high")) == 0


def test_preference_component_counts_matches(make_plan):
    prefs = Preferences(
        contract_type_preference="fixed",
        renewable_energy_preference=50,
        supplier_rating_preference=4,
        early_termination_fee_tolerance=100,
    )
    weights = weights_for("low")  # 30 / 4 = 7.5 per match

    all_match = make_plan(renewable_percentage=60, supplier_rating=4.5, early_termination_fee=50)
    none_match = make_plan(
        contract_type="variable",
        renewable_percentage=10,
        supplier_rating=3,
        early_termination_fee=150,
    )

    assert preference_component(all_match, prefs, weights) == pytest.approx(30)
    assert preference_component(none_match, prefs, weights) == 0


def test_preference_component_neutral_preferences(make_plan, neutral_preferences):
    weights = weights_for("medium")
    # Only the no-fee check matches for a bare plan
    assert preference_component(make_plan(), neutral_preferences, weights) == pytest.approx(5)
    # Any set renewable share and rating satisfy zero preferences
    plan = make_plan(renewable_percentage=10, supplier_rating=2)
    assert preference_component(plan, neutral_preferences, weights) == pytest.approx(15)


def test_score_plan(make_plan, baseline_profile):
    prefs = Preferences(cost_savings_priority="high")
    plan = make_plan(rate_per_kwh=0.08, contract_type="variable")

    scored = score_plan(plan, BASELINE, prefs, baseline_profile)

    assert scored.projected_annual_cost == pytest.approx(960)
    assert scored.savings.annual_savings == pytest.approx(1440)
    assert scored.breakdown.savings_component == pytest.approx(43.2)
    assert scored.breakdown.risk_component == pytest.approx(-7.5)
    assert scored.breakdown.preference_component == pytest.approx(3.75)
    assert scored.score == pytest.approx(39.45)
    assert scored.payback_period_months is None


def test_score_plan_payback_from_termination_fee(make_plan, baseline_profile, neutral_preferences):
    # 12000 kWh at 0.15 = 1800, saving 600/year = 50/month
    plan = make_plan(rate_per_kwh=0.15, early_termination_fee=600)
    scored = score_plan(plan, BASELINE, neutral_preferences, baseline_profile)

    assert scored.savings.monthly_savings == pytest.approx(50)
    assert scored.payback_period_months == 12


def test_score_plan_no_payback_when_plan_costs_more(make_plan, baseline_profile, neutral_preferences):
    plan = make_plan(rate_per_kwh=0.30, early_termination_fee=100)
    scored = score_plan(plan, BASELINE, neutral_preferences, baseline_profile)

    assert scored.savings.monthly_savings < 0
    assert scored.payback_period_months is None


@pytest.mark.parametrize("priority", ["high", "medium", "low"])
@pytest.mark.parametrize("contract_type", ["fixed", "variable"])
def test_cheaper_rate_never_scores_lower(make_plan, baseline_profile, priority, contract_type):
    prefs = Preferences(cost_savings_priority=priority)
    for cheaper_rate, pricier_rate in [(0.05, 0.06), (0.15, 0.25), (0.19, 0.21)]:
        cheaper = score_plan(
            make_plan(rate_per_kwh=cheaper_rate, contract_type=contract_type), BASELINE, prefs, baseline_profile
        )
        pricier = score_plan(
            make_plan(rate_per_kwh=pricier_rate, contract_type=contract_type), BASELINE, prefs, baseline_profile
        )
        assert cheaper.savings.annual_savings > pricier.savings.annual_savings
        assert cheaper.score >= pricier.score
