"""
PlanCatalog Port - Interface for loading and refreshing candidate plans.

Implementations can be file-based (YAML) or database-backed (MongoDB).
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sparksave.core.domain.plan import CandidatePlan


class PlanCatalog(ABC):
    """
    Abstract interface for the energy plan catalog.

    Implementations:
    - YamlPlanCatalog: File-based catalog
    - MongoPlanCatalog: Database-backed catalog
    """

    @abstractmethod
    async def list_plans(self, state: str | None = None) -> list["CandidatePlan"]:
        """
        List catalog plans, in catalog order.

        Args:
            state: Optional state code; plans without a state are always included

        Returns:
            List of CandidatePlan objects
        """
        ...

    @abstractmethod
    async def get_plan(self, plan_id: str) -> "CandidatePlan | None":
        """
        Get a specific plan by id.

        Returns:
            CandidatePlan if found, None otherwise
        """
        ...

    @abstractmethod
    async def save_plans(self, plans: list["CandidatePlan"]) -> int:
        """
        Insert or replace plans by plan_id.

        Returns:
            Number of plans written
        """
        ...

    async def close(self) -> None:
        """Release connections held by the catalog. No-op by default."""
        return None


def matches_state(plan: "CandidatePlan", state: str | None) -> bool:
    """Whether a plan is offered in ``state``. Nationwide plans match every state."""
    if state is None or plan.state is None:
        return True
    return plan.state.upper() == state.upper()
