"""
Baseline Calculator - Current annual cost and consumption of a household.

Usage data arrives in inconsistent shapes, so each figure is resolved in three
tiers: the provided aggregate, then raw points annualized by their count, then
the monthly average times twelve.
"""

import logging

from sparksave.core.domain.errors import InvalidUsageDataError
from sparksave.core.domain.recommendation import Baseline
from sparksave.core.domain.usage import UsageProfile

logger = logging.getLogger(__name__)

MONTHS_PER_YEAR = 12


def _annualize(total: float, point_values: list[float], monthly_average: float) -> float:
    if total:
        return total
    summed = sum(point_values)
    if summed > 0:
        return (summed / len(point_values)) * MONTHS_PER_YEAR
    return monthly_average * MONTHS_PER_YEAR


def calculate_baseline(profile: UsageProfile) -> Baseline:
    """
    Resolve the annual cost and annual kWh used as the comparison point.

    Args:
        profile: Usage history for this run

    Returns:
        Baseline with strictly positive figures

    Raises:
        InvalidUsageDataError: if either figure resolves to zero or less
    """
    stats = profile.aggregated_stats
    points = profile.data_points

    current_annual_cost = _annualize(
        stats.total_cost,
        [p.cost or 0.0 for p in points],
        stats.average_monthly_cost,
    )
    annual_kwh = _annualize(
        stats.total_kwh,
        [p.kwh for p in points],
        stats.average_monthly_kwh,
    )

    if current_annual_cost <= 0 or annual_kwh <= 0:
        logger.warning(
            f"Unusable baseline: annual cost={current_annual_cost}, annual kWh={annual_kwh}"
        )
        raise InvalidUsageDataError()

    return Baseline(current_annual_cost=current_annual_cost, annual_kwh=annual_kwh)
