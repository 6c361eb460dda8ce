"""
YAML Plan Catalog Adapter - File-based plan catalog.

Loads plan definitions from a YAML file of the form::

    plans:
      - planId: tx-fixed-12
        supplierName: Example Energy
        ratePerKwh: 0.11
        contractType: fixed
"""

import logging
from pathlib import Path

import yaml

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.ports.plan_catalog import PlanCatalog, matches_state

logger = logging.getLogger(__name__)


class YamlPlanCatalog(PlanCatalog):
    """
    Plan catalog that reads plans from a YAML file.
    """

    def __init__(self, catalog_path: str | Path):
        self.catalog_path = Path(catalog_path)
        self._plans: dict[str, CandidatePlan] = {}
        self._loaded = False

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self._load_plans()
            self._loaded = True

    def _load_plans(self) -> None:
        if not self.catalog_path.exists():
            logger.warning(f"Plan catalog file {self.catalog_path} not found")
            return

        with open(self.catalog_path) as f:
            data = yaml.safe_load(f) or {}

        for plan_data in data.get("plans", []):
            try:
                plan = CandidatePlan.model_validate(plan_data)
                self._plans[plan.plan_id] = plan
            except Exception as e:
                logger.error(f"Skipping invalid catalog plan {plan_data.get('planId', '?')}: {e}")

    async def list_plans(self, state: str | None = None) -> list[CandidatePlan]:
        self._ensure_loaded()
        return [p for p in self._plans.values() if matches_state(p, state)]

    async def get_plan(self, plan_id: str) -> CandidatePlan | None:
        self._ensure_loaded()
        return self._plans.get(plan_id)

    async def save_plans(self, plans: list[CandidatePlan]) -> int:
        self._ensure_loaded()
        for plan in plans:
            self._plans[plan.plan_id] = plan
        await self._save_to_file()
        return len(plans)

    async def _save_to_file(self) -> None:
        plans_data = [
            p.model_dump(mode="json", by_alias=True, exclude_none=True)
            for p in self._plans.values()
        ]

        with open(self.catalog_path, "w") as f:
            yaml.dump({"plans": plans_data}, f, default_flow_style=False, sort_keys=False)
