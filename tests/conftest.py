"""
Shared fixtures for SparkSave tests.
"""
import pytest

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.usage import AggregatedStats, UsageDataPoint, UsageProfile


@pytest.fixture
def make_plan():
    """Factory for candidate plans with sensible defaults."""
    def _make(plan_id="plan-1", **overrides):
        data = {
            "plan_id": plan_id,
            "supplier_name": "Example Energy",
            "rate_per_kwh": 0.10,
            "contract_type": "fixed",
        }
        data.update(overrides)
        return CandidatePlan(**data)
    return _make


@pytest.fixture
def baseline_profile():
    """$2400/year for 12000 kWh, $200/month on average."""
    return UsageProfile(
        aggregated_stats=AggregatedStats(
            total_kwh=12000,
            total_cost=2400,
            average_monthly_kwh=1000,
            average_monthly_cost=200,
        )
    )


@pytest.fixture
def monthly_points():
    """A year of monthly usage with a summer peak."""
    kwh = [900, 850, 800, 750, 900, 1200, 1500, 1450, 1100, 850, 800, 900]
    return [
        UsageDataPoint(timestamp=f"2025-{month:02d}", kwh=value, cost=value * 0.2)
        for month, value in enumerate(kwh, start=1)
    ]


@pytest.fixture
def neutral_preferences():
    return Preferences()
