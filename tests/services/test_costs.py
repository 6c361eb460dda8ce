import pytest

from sparksave.core.services.costs import (
    calculate_payback_period,
    calculate_savings,
    project_annual_cost,
)


def test_project_annual_cost_without_fee(make_plan):
    plan = make_plan(rate_per_kwh=0.10)
    assert project_annual_cost(plan, 12000) == pytest.approx(1200)


def test_project_annual_cost_adds_monthly_fee(make_plan):
    plan = make_plan(rate_per_kwh=0.10, monthly_fee=10)
    assert project_annual_cost(plan, 12000) == pytest.approx(1320)


def test_savings_positive_when_plan_is_cheaper():
    savings = calculate_savings(2400, 1200)
    assert savings.annual_savings == 1200
    assert savings.monthly_savings == 100
    assert savings.percentage_savings == 50


def test_savings_negative_when_plan_costs_more():
    savings = calculate_savings(1000, 1100)
    assert savings.annual_savings == -100
    assert savings.percentage_savings == pytest.approx(-10)


def test_savings_percentage_zero_without_baseline_cost():
    savings = calculate_savings(0, 500)
    assert savings.percentage_savings == 0


def test_payback_rounds_up():
    assert calculate_payback_period(600, 50) == 12
    assert calculate_payback_period(601, 50) == 13
    assert calculate_payback_period(10, 100) == 1


@pytest.mark.parametrize("upfront, monthly", [(0, 50), (600, 0), (600, -25), (-5, 50)])
def test_payback_undefined(upfront, monthly):
    assert calculate_payback_period(upfront, monthly) is None
