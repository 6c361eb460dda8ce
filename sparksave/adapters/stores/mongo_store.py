import logging
import time
from datetime import datetime, timezone

from motor.motor_asyncio import AsyncIOMotorClient

from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import Recommendation, RecommendationHistoryEntry
from sparksave.core.domain.settings import SystemSettings
from sparksave.core.domain.usage import UsagePattern, UsageProfile
from sparksave.core.ports.memory_bank import ProfileStore, RecommendationHistoryStore
from sparksave.core.ports.plan_catalog import PlanCatalog, matches_state

logger = logging.getLogger(__name__)


def _strip_id(doc: dict) -> dict:
    doc = dict(doc)
    doc.pop("_id", None)
    return doc


class MongoPlanCatalog(PlanCatalog):
    """
    MongoDB-backed implementation of PlanCatalog.
    Stores plans as camelCase documents keyed by planId.
    """

    def __init__(self, settings: SystemSettings):
        self.settings = settings
        self.client = AsyncIOMotorClient(settings.mongo_url)
        self.db = self.client[settings.mongo_db_name]
        self.collection = self.db["plans"]

    async def list_plans(self, state: str | None = None) -> list[CandidatePlan]:
        """List catalog plans in insertion order."""
        plans = []
        async for doc in self.collection.find():
            try:
                plan = CandidatePlan.model_validate(_strip_id(doc))
            except Exception as e:
                logger.error(f"Failed to parse plan document: {e}")
                continue
            if matches_state(plan, state):
                plans.append(plan)
        return plans

    async def get_plan(self, plan_id: str) -> CandidatePlan | None:
        doc = await self.collection.find_one({"planId": plan_id})
        if not doc:
            return None
        try:
            return CandidatePlan.model_validate(_strip_id(doc))
        except Exception as e:
            logger.error(f"Failed to parse plan '{plan_id}': {e}")
            return None

    async def save_plans(self, plans: list[CandidatePlan]) -> int:
        """Upsert plans by planId."""
        for plan in plans:
            data = plan.model_dump(mode="json", by_alias=True, exclude_none=True)
            await self.collection.replace_one({"planId": plan.plan_id}, data, upsert=True)
        return len(plans)

    async def close(self) -> None:
        self.client.close()


class MongoMemoryBank(ProfileStore, RecommendationHistoryStore):
    """
    MongoDB-backed memory bank: usage data, preferences, usage patterns and
    recommendation history, one collection each, all keyed by userId.
    """

    def __init__(self, settings: SystemSettings):
        self.settings = settings
        self.client = AsyncIOMotorClient(settings.mongo_url)
        self.db = self.client[settings.mongo_db_name]
        self.usage = self.db["usage_data"]
        self.preferences = self.db["preferences"]
        self.patterns = self.db["usage_patterns"]
        self.history = self.db["recommendation_history"]

    async def close(self) -> None:
        self.client.close()

    async def get_usage_profile(self, user_id: str) -> UsageProfile | None:
        """Most recently updated usage document for the user."""
        doc = await self.usage.find_one({"userId": user_id}, sort=[("updatedAt", -1)])
        if not doc:
            return None
        try:
            return UsageProfile.model_validate(_strip_id(doc))
        except Exception as e:
            logger.error(f"Failed to parse usage data for '{user_id}': {e}")
            return None

    async def get_preferences(self, user_id: str) -> Preferences | None:
        doc = await self.preferences.find_one({"userId": user_id})
        if not doc:
            return None
        try:
            return Preferences.model_validate(_strip_id(doc))
        except Exception as e:
            logger.error(f"Failed to parse preferences for '{user_id}': {e}")
            return None

    async def list_usage_patterns(self, user_id: str) -> list[UsagePattern]:
        patterns = []
        async for doc in self.patterns.find({"userId": user_id}):
            try:
                patterns.append(UsagePattern.model_validate(_strip_id(doc)))
            except Exception as e:
                logger.error(f"Failed to parse usage pattern document: {e}")
        return patterns

    async def save_usage_pattern(self, user_id: str, pattern: UsagePattern) -> str:
        now = datetime.now(timezone.utc).isoformat()
        pattern_id = f"pattern-{int(time.time() * 1000)}"
        data = pattern.model_dump(by_alias=True)
        data.update({"userId": user_id, "patternId": pattern_id, "createdAt": now, "updatedAt": now})
        await self.patterns.insert_one(data)
        return pattern_id

    async def save_recommendations(
        self,
        user_id: str,
        recommendations: list[Recommendation],
    ) -> list[RecommendationHistoryEntry]:
        """Insert one history document per recommendation; failed inserts are skipped."""
        stamp = int(time.time() * 1000)
        saved = []
        for rec in recommendations:
            entry = RecommendationHistoryEntry(
                user_id=user_id,
                recommendation_id=f"rec-{stamp}-{rec.rank}",
                plan_id=rec.plan_id,
                rank=rec.rank,
                projected_savings=rec.projected_savings,
                explanation=rec.explanation,
            )
            try:
                await self.history.insert_one(entry.model_dump(by_alias=True))
                saved.append(entry)
            except Exception as e:
                logger.warning(f"Failed to store recommendation history for {rec.plan_id}: {e}")
        return saved

    async def list_history(self, user_id: str, limit: int = 10) -> list[RecommendationHistoryEntry]:
        cursor = self.history.find({"userId": user_id}).sort("createdAt", -1).limit(limit)
        docs = await cursor.to_list(length=limit)
        entries = []
        for doc in docs:
            try:
                entries.append(RecommendationHistoryEntry.model_validate(_strip_id(doc)))
            except Exception as e:
                logger.error(f"Failed to parse history document: {e}")
        return entries
