"""
Recommendation Service - Wires the engine to the catalog and the memory bank.

The engine's result depends only on scoring and ranking. Memory-bank reads
for explainer context and history writes are best-effort: their failures are
logged and never change the response.
"""

import asyncio
import logging

from sparksave.core.domain.errors import MissingUserDataError, StoreNotConfiguredError
from sparksave.core.domain.plan import CandidatePlan
from sparksave.core.domain.preferences import Preferences
from sparksave.core.domain.recommendation import (
    RankedRecommendations,
    RecommendationHistoryEntry,
)
from sparksave.core.domain.usage import UsagePattern, UsageProfile
from sparksave.core.ports.memory_bank import ProfileStore, RecommendationHistoryStore
from sparksave.core.ports.plan_catalog import PlanCatalog
from sparksave.core.services.engine import RecommendationEngine
from sparksave.core.services.explanations import ExplanationContext
from sparksave.core.services.usage_summary import derive_usage_pattern

logger = logging.getLogger(__name__)

HISTORY_CONTEXT_LIMIT = 5


class RecommendationService:
    """
    Service that runs a recommendation request end to end.
    """

    def __init__(
        self,
        engine: RecommendationEngine,
        catalog: PlanCatalog | None = None,
        profiles: ProfileStore | None = None,
        history: RecommendationHistoryStore | None = None,
    ):
        """
        Args:
            engine: Core scoring/ranking engine
            catalog: Port to the plan catalog
            profiles: Port to stored usage, preferences and patterns
            history: Port to the recommendation history
        """
        self.engine = engine
        self.catalog = catalog
        self.profiles = profiles
        self.history = history

    async def close(self) -> None:
        """Close the explainer and every configured store. A store used for both roles is closed once."""
        await self.engine.close()
        closed: list[object] = []
        for store in (self.catalog, self.profiles, self.history):
            if store is None or any(store is seen for seen in closed):
                continue
            closed.append(store)
            await store.close()

    async def recommend(
        self,
        profile: UsageProfile,
        preferences: Preferences,
        plans: list[CandidatePlan],
        user_id: str | None = None,
        top_n: int | None = None,
    ) -> RankedRecommendations:
        """
        Recommend plans from inputs supplied by the caller.

        History is not written here; call record_history afterwards.
        """
        context = await self._load_context(user_id, profile)
        return await self.engine.recommend(profile, preferences, plans, top_n=top_n, context=context)

    async def recommend_for_user(
        self,
        user_id: str,
        state: str | None = None,
        top_n: int | None = None,
    ) -> RankedRecommendations:
        """
        Recommend plans using the stored usage and preferences of a user.

        Raises:
            StoreNotConfiguredError: if no memory bank or plan catalog is configured
            MissingUserDataError: if the user has no stored usage or preferences
        """
        if self.profiles is None or self.catalog is None:
            raise StoreNotConfiguredError()

        profile = await self.profiles.get_usage_profile(user_id)
        if profile is None:
            raise MissingUserDataError(f"No usage data found for user '{user_id}'. Please add usage data first.")

        preferences = await self.profiles.get_preferences(user_id)
        if preferences is None:
            raise MissingUserDataError(f"No preferences found for user '{user_id}'. Please set preferences first.")

        plans = await self.catalog.list_plans(state=state)
        logger.info(f"Loaded {len(plans)} catalog plans for user '{user_id}' (state={state})")

        return await self.recommend(profile, preferences, plans, user_id=user_id, top_n=top_n)

    async def record_history(
        self,
        user_id: str,
        result: RankedRecommendations,
    ) -> list[RecommendationHistoryEntry]:
        """Persist recommendations to the history store. Failures are logged, not raised."""
        if self.history is None or not result.recommendations:
            return []
        try:
            entries = await self.history.save_recommendations(user_id, result.recommendations)
            logger.info(f"Stored {len(entries)} recommendations in history for user '{user_id}'")
            return entries
        except Exception as e:
            logger.warning(f"Failed to store recommendation history for user '{user_id}': {e}")
            return []

    async def list_history(self, user_id: str, limit: int = 10) -> list[RecommendationHistoryEntry]:
        if self.history is None:
            return []
        return await self.history.list_history(user_id, limit=limit)

    async def analyze_usage(self, user_id: str, profile: UsageProfile) -> tuple[UsagePattern, str | None]:
        """
        Derive a usage pattern and store it in the memory bank when one is configured.

        Returns:
            The pattern and its stored id (None when not stored)
        """
        pattern = derive_usage_pattern(profile.data_points)
        if self.profiles is None:
            return pattern, None
        pattern_id = await self.profiles.save_usage_pattern(user_id, pattern)
        logger.info(f"Stored usage pattern '{pattern_id}' for user '{user_id}'")
        return pattern, pattern_id

    async def _load_context(self, user_id: str | None, profile: UsageProfile) -> ExplanationContext:
        patterns: list[UsagePattern] = []
        recent: list[RecommendationHistoryEntry] = []

        if user_id and (self.profiles is not None or self.history is not None):
            patterns_result, history_result = await asyncio.gather(
                self._fetch_patterns(user_id),
                self._fetch_history(user_id),
                return_exceptions=True,
            )
            if isinstance(patterns_result, Exception):
                logger.warning(f"Failed to fetch usage patterns for '{user_id}': {patterns_result}")
            else:
                patterns = patterns_result
            if isinstance(history_result, Exception):
                logger.warning(f"Failed to fetch recommendation history for '{user_id}': {history_result}")
            else:
                recent = history_result[:HISTORY_CONTEXT_LIMIT]

        if not patterns and profile.data_points:
            patterns = [derive_usage_pattern(profile.data_points)]

        return ExplanationContext(usage_patterns=patterns, recent_history=recent)

    async def _fetch_patterns(self, user_id: str) -> list[UsagePattern]:
        if self.profiles is None:
            return []
        return await self.profiles.list_usage_patterns(user_id)

    async def _fetch_history(self, user_id: str) -> list[RecommendationHistoryEntry]:
        if self.history is None:
            return []
        return await self.history.list_history(user_id, limit=HISTORY_CONTEXT_LIMIT)
