"""
Usage Domain Model - A household's consumption history for one evaluation run.

Wire shapes use camelCase (as produced by the bill-reading and usage-upload
collaborators); Python attributes are snake_case.
"""

from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class UsageDataPoint(BaseModel):
    """One billing period (usually a month) of consumption."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    timestamp: str
    kwh: float = Field(ge=0)
    cost: float | None = Field(default=None, ge=0)
    period_start: str | None = None
    period_end: str | None = None


class AggregatedStats(BaseModel):
    """Pre-computed totals. Any field may be zero when the source had no aggregate."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    total_kwh: float = 0.0
    total_cost: float = 0.0
    average_monthly_kwh: float = 0.0
    average_monthly_cost: float = 0.0
    peak_month: str = Field(
        default="",
        validation_alias=AliasChoices("peakMonth", "peakMonthLabel", "peak_month"),
    )
    peak_month_kwh: float = 0.0


class UsageProfile(BaseModel):
    """
    Consumption history used as the baseline for plan comparison.

    Immutable for the duration of one scoring pass.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    data_points: list[UsageDataPoint] = Field(
        default_factory=list,
        validation_alias=AliasChoices("usageDataPoints", "dataPoints", "data_points"),
        serialization_alias="usageDataPoints",
    )
    aggregated_stats: AggregatedStats = Field(default_factory=AggregatedStats)


class UsagePattern(BaseModel):
    """Seasonal summary of a usage history, kept in the memory bank."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    average_monthly_kwh: float
    peak_month: str
    peak_month_kwh: float
    seasonal_variation: float = 0.0
    usage_trend: Literal["increasing", "decreasing", "stable"] = "stable"
    peak_usage_months: list[str] = Field(default_factory=list)
    low_usage_months: list[str] = Field(default_factory=list)
