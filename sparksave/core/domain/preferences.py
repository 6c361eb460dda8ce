"""
Preferences Domain Model - User weighting and hard constraints for one run.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

ContractType = Literal["fixed", "variable", "indexed", "hybrid"]
CostSavingsPriority = Literal["high", "medium", "low"]


class BudgetConstraints(BaseModel):
    """Hard caps on projected plan cost. Unset caps are not enforced."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    max_monthly_cost: float | None = Field(default=None, ge=0)
    max_annual_cost: float | None = Field(default=None, ge=0)


class Preferences(BaseModel):
    """User preferences driving the scoring weights and risk rules."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    cost_savings_priority: CostSavingsPriority = "medium"
    flexibility_preference: int = Field(default=12, ge=0)  # months
    renewable_energy_preference: int = Field(default=0, ge=0, le=100)  # percent
    supplier_rating_preference: float = Field(default=0.0, ge=0, le=5)
    contract_type_preference: ContractType | None = None
    early_termination_fee_tolerance: float = Field(default=0.0, ge=0)
    budget_constraints: BudgetConstraints | None = None
    sustainability_goals: list[str] = Field(default_factory=list)
