"""
Plan Domain Model - One energy supply offer from the plan catalog.
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from sparksave.core.domain.preferences import ContractType


class CandidatePlan(BaseModel):
    """
    A candidate supply plan.

    Numeric fields are validated on construction; a negative rate or fee is a
    data-integrity error and is rejected rather than coerced.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    # --- Identity ---
    plan_id: str
    supplier_name: str
    plan_name: str = ""

    # --- Pricing ---
    rate_per_kwh: float = Field(gt=0)
    monthly_fee: float | None = Field(default=None, ge=0)

    # --- Contract terms ---
    contract_type: ContractType
    contract_length_months: int | None = Field(
        default=None,
        ge=0,
        validation_alias=AliasChoices("contractLengthMonths", "contractLength", "contract_length_months"),
    )
    early_termination_fee: float | None = Field(default=None, ge=0)

    # --- Quality ---
    renewable_percentage: float | None = Field(default=None, ge=0, le=100)
    supplier_rating: float | None = Field(default=None, ge=0, le=5)

    # --- Catalog placement ---
    state: str | None = None
    utility_territory: str | None = None
