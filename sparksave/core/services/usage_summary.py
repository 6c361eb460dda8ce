"""
Usage Summarizer - Aggregates and seasonal patterns from raw usage points.
"""

import statistics

from sparksave.core.domain.errors import InvalidUsageDataError
from sparksave.core.domain.usage import AggregatedStats, UsageDataPoint, UsagePattern, UsageProfile

# Relative change between the two halves of the history that still counts as stable
TREND_TOLERANCE = 0.05
PEAK_FACTOR = 1.1
LOW_FACTOR = 0.9


def summarize_usage(points: list[UsageDataPoint]) -> AggregatedStats:
    """Totals, per-point averages and the peak period. Empty input gives zeros."""
    if not points:
        return AggregatedStats()

    total_kwh = sum(p.kwh for p in points)
    total_cost = sum(p.cost or 0.0 for p in points)
    peak = max(points, key=lambda p: p.kwh)  # first maximum wins

    return AggregatedStats(
        total_kwh=total_kwh,
        total_cost=total_cost,
        average_monthly_kwh=total_kwh / len(points),
        average_monthly_cost=total_cost / len(points),
        peak_month=peak.timestamp,
        peak_month_kwh=peak.kwh,
    )


def with_aggregates(profile: UsageProfile) -> UsageProfile:
    """Return the profile, filling all-zero aggregates from its points."""
    stats = profile.aggregated_stats
    if stats.total_kwh or stats.total_cost or not profile.data_points:
        return profile
    return profile.model_copy(update={"aggregated_stats": summarize_usage(profile.data_points)})


def _usage_trend(values: list[float]) -> str:
    if len(values) < 2:
        return "stable"
    half = len(values) // 2
    earlier = statistics.fmean(values[:half])
    later = statistics.fmean(values[-half:])
    if earlier == 0:
        return "increasing" if later > 0 else "stable"
    change = (later - earlier) / earlier
    if change > TREND_TOLERANCE:
        return "increasing"
    if change < -TREND_TOLERANCE:
        return "decreasing"
    return "stable"


def derive_usage_pattern(points: list[UsageDataPoint]) -> UsagePattern:
    """
    Seasonal summary of a usage history.

    Args:
        points: Usage points in chronological order

    Returns:
        UsagePattern with seasonal variation (coefficient of variation),
        trend, and the periods well above or below the mean

    Raises:
        InvalidUsageDataError: if there are no points
    """
    if not points:
        raise InvalidUsageDataError("Cannot derive a usage pattern without usage data points.")

    stats = summarize_usage(points)
    values = [p.kwh for p in points]
    mean = stats.average_monthly_kwh
    variation = statistics.pstdev(values) / mean if mean > 0 else 0.0

    return UsagePattern(
        average_monthly_kwh=mean,
        peak_month=stats.peak_month,
        peak_month_kwh=stats.peak_month_kwh,
        seasonal_variation=variation,
        usage_trend=_usage_trend(values),
        peak_usage_months=[p.timestamp for p in points if p.kwh > mean * PEAK_FACTOR],
        low_usage_months=[p.timestamp for p in points if p.kwh < mean * LOW_FACTOR],
    )
