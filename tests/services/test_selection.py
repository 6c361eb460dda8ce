from sparksave.core.domain.preferences import BudgetConstraints, Preferences
from sparksave.core.domain.recommendation import Baseline
from sparksave.core.services.scoring import score_plan
from sparksave.core.services.selection import filter_by_budget, rank_plans, within_budget


def test_no_constraints_keeps_every_plan(make_plan):
    plans = [make_plan("a"), make_plan("b", rate_per_kwh=5)]
    assert filter_by_budget(plans, 12000, None) == plans


def test_annual_cap_excludes_plan(make_plan):
    # 12000 kWh at 0.10 = 1200 > 1000
    plans = [make_plan("over", rate_per_kwh=0.10), make_plan("under", rate_per_kwh=0.08)]
    eligible = filter_by_budget(plans, 12000, BudgetConstraints(max_annual_cost=1000))

    assert [p.plan_id for p in eligible] == ["under"]


def test_monthly_cap_excludes_plan(make_plan):
    # 2880 kWh at 0.25 = 720/year = 60/month
    plan = make_plan(rate_per_kwh=0.25)
    assert not within_budget(plan, 2880, BudgetConstraints(max_monthly_cost=50))
    assert within_budget(plan, 2880, BudgetConstraints(max_monthly_cost=60))


def test_monthly_fee_counts_toward_budget(make_plan):
    plan = make_plan(rate_per_kwh=0.25, monthly_fee=20)
    # 2400 * 0.25 + 240 = 840/year = 70/month
    assert within_budget(plan, 2400, BudgetConstraints(max_monthly_cost=70))
    assert not within_budget(plan, 2400, BudgetConstraints(max_monthly_cost=69.99))


def test_filter_preserves_order(make_plan):
    plans = [make_plan(str(i), rate_per_kwh=0.05 + i * 0.01) for i in range(5)]
    eligible = filter_by_budget(plans, 10000, BudgetConstraints(max_annual_cost=750))
    assert [p.plan_id for p in eligible] == ["0", "1", "2"]


def test_rank_orders_by_score_descending(make_plan, baseline_profile, neutral_preferences):
    baseline = Baseline(current_annual_cost=2400, annual_kwh=12000)
    scored = [
        score_plan(make_plan(pid, rate_per_kwh=rate), baseline, neutral_preferences, baseline_profile)
        for pid, rate in [("mid", 0.12), ("best", 0.08), ("worst", 0.18)]
    ]

    ranked = rank_plans(scored)

    assert [s.plan.plan_id for s in ranked] == ["best", "mid", "worst"]
    assert ranked[0].score >= ranked[1].score >= ranked[2].score


def test_rank_ties_keep_catalog_order(make_plan, baseline_profile, neutral_preferences):
    baseline = Baseline(current_annual_cost=2400, annual_kwh=12000)
    scored = [
        score_plan(make_plan(pid, supplier_name=pid.upper()), baseline, neutral_preferences, baseline_profile)
        for pid in ["first", "second", "third"]
    ]

    ranked = rank_plans(scored)

    assert len({s.score for s in ranked}) == 1
    assert [s.plan.plan_id for s in ranked] == ["first", "second", "third"]


def test_rank_truncates_to_top_n(make_plan, baseline_profile):
    baseline = Baseline(current_annual_cost=2400, annual_kwh=12000)
    prefs = Preferences()
    scored = [
        score_plan(make_plan(str(i), rate_per_kwh=0.05 + i * 0.01), baseline, prefs, baseline_profile)
        for i in range(6)
    ]
    assert [s.plan.plan_id for s in rank_plans(scored, top_n=3)] == ["0", "1", "2"]
    assert len(rank_plans(scored)) == 6
