"""
Memory Bank Ports - Interfaces for per-user inputs and recommendation history.

The recommendation engine never talks to these directly; the recommendation
service reads inputs through ProfileStore and writes best-effort history
through RecommendationHistoryStore.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sparksave.core.domain.preferences import Preferences
    from sparksave.core.domain.recommendation import (
        Recommendation,
        RecommendationHistoryEntry,
    )
    from sparksave.core.domain.usage import UsagePattern, UsageProfile


class ProfileStore(ABC):
    """Read access to a user's usage history, preferences and usage patterns."""

    @abstractmethod
    async def get_usage_profile(self, user_id: str) -> "UsageProfile | None":
        """
        Get the most recent usage profile for a user.

        Returns:
            UsageProfile if found, None otherwise
        """
        ...

    @abstractmethod
    async def get_preferences(self, user_id: str) -> "Preferences | None":
        """
        Get a user's preferences.

        Returns:
            Preferences if found, None otherwise
        """
        ...

    @abstractmethod
    async def list_usage_patterns(self, user_id: str) -> list["UsagePattern"]:
        """List stored usage patterns for a user."""
        ...

    @abstractmethod
    async def save_usage_pattern(self, user_id: str, pattern: "UsagePattern") -> str:
        """
        Store a usage pattern.

        Returns:
            The new pattern id
        """
        ...

    async def close(self) -> None:
        """Release connections held by the store. No-op by default."""
        return None


class RecommendationHistoryStore(ABC):
    """History of recommendations shown to a user."""

    @abstractmethod
    async def save_recommendations(
        self,
        user_id: str,
        recommendations: list["Recommendation"],
    ) -> list["RecommendationHistoryEntry"]:
        """
        Persist recommendations.

        Returns:
            The entries that were written
        """
        ...

    @abstractmethod
    async def list_history(self, user_id: str, limit: int = 10) -> list["RecommendationHistoryEntry"]:
        """
        List a user's recent recommendations, most recent first.
        """
        ...

    async def close(self) -> None:
        return None
