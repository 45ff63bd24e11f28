"""Service wiring the affinity profile, interaction tracking and ranking together."""
import logging
from datetime import datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from tvbingefriend_personalization_service.config import get_profile_key, get_ranking_limit
from tvbingefriend_personalization_service.models import AffinityProfile
from tvbingefriend_personalization_service.services.interaction_tracker import InteractionTracker
from tvbingefriend_personalization_service.services.preference_store import PreferenceStore
from tvbingefriend_personalization_service.services.ranking_engine import RankingEngine
from tvbingefriend_personalization_service.storage import KeyValueBackend, create_backend

logger = logging.getLogger(__name__)


def merge_candidate_pools(
        pools: Iterable[Iterable[Mapping[str, Any]]],
        require_field: Optional[str] = "backdrop_path"
) -> list[Mapping[str, Any]]:
    """
    Concatenate several catalog result lists into one candidate pool.

    Args:
        pools: Result lists, e.g. trending, popular movies, popular TV
        require_field: Keep only items where this field is truthy (None keeps all)

    Returns:
        Items in pool order; duplicates are left for ranking to resolve
    """
    merged: list[Mapping[str, Any]] = []
    for pool in pools:
        for item in pool or []:
            if not isinstance(item, Mapping):
                continue
            if require_field and not item.get(require_field):
                continue
            merged.append(item)
    return merged


class PersonalizationService:
    """
    Personalized ordering of catalog items for one visitor.
    Reads and updates the visitor's affinity profile through a PreferenceStore.
    """

    def __init__(
            self,
            store: Optional[PreferenceStore] = None,
            ranking_engine: Optional[RankingEngine] = None,
            backend: Optional[KeyValueBackend] = None,
            profile_key: Optional[str] = None,
            limit: Optional[int] = None
    ):
        """
        Initialize the personalization service.

        Args:
            store: Preference store (built from backend/profile_key if None)
            ranking_engine: Ranking engine (built with the configured limit if None)
            backend: Persistence backend (from config if None)
            profile_key: Slot name (from config if None)
            limit: Default shortlist size (from config if None)
        """
        if store is None:
            store = PreferenceStore(
                backend if backend is not None else create_backend(),
                key=profile_key or get_profile_key()
            )
        if ranking_engine is None:
            ranking_engine = RankingEngine(limit=get_ranking_limit() if limit is None else limit)

        self.store = store
        self.ranking_engine = ranking_engine
        self.tracker = InteractionTracker(store)

        logger.info(
            f"Initialized PersonalizationService (profile: {store.key}, limit: {ranking_engine.limit})"
        )

    def recommend(
            self,
            items: Sequence[Mapping[str, Any]],
            limit: Optional[int] = None,
            now: Optional[datetime] = None
    ) -> list[dict[str, Any]]:
        """
        Get the personalized shortlist for a candidate pool.

        Args:
            items: Candidate pool
            limit: Shortlist size (default: engine limit)
            now: Evaluation instant (default: current UTC time)

        Returns:
            Ranked items, each with an ``ai_score``
        """
        return self.ranking_engine.rank(items, self.store.load(), limit=limit, now=now)

    def record_interaction(self, item: Mapping[str, Any]) -> None:
        """Record that the visitor opened ``item``."""
        self.tracker.record_interaction(item)

    def get_profile(self) -> AffinityProfile:
        return self.store.load()

    def get_stats(self, top_n: int = 5) -> dict:
        """Get a summary of the visitor's affinity profile."""
        profile = self.store.load()

        top_genres = sorted(profile.genre_affinity.items(), key=lambda kv: (-kv[1], kv[0]))[:top_n]

        return {
            "profile_key": self.store.key,
            "total_interactions": sum(profile.media_affinity.values()),
            "media_affinity": dict(profile.media_affinity),
            "top_genres": [
                {"genre_id": genre_id, "count": count}
                for genre_id, count in top_genres
            ],
            "ranking_limit": self.ranking_engine.limit,
        }
