"""Turns "open details" actions into affinity profile updates."""
import logging
from typing import Any, Mapping

from tvbingefriend_personalization_service.models import AffinityProfile, Candidate
from tvbingefriend_personalization_service.services.preference_store import PreferenceStore

logger = logging.getLogger(__name__)


def apply_interaction(profile: AffinityProfile, item: Mapping[str, Any]) -> AffinityProfile:
    """
    Return a copy of ``profile`` with one interaction on ``item`` counted.

    The item's media kind gains one; each genre id gains one per occurrence.
    """
    candidate = Candidate.from_item(item)
    updated = profile.copy()

    updated.media_affinity[candidate.media_kind] = updated.media_count(candidate.media_kind) + 1
    for genre_id in candidate.genre_ids:
        updated.genre_affinity[genre_id] = updated.genre_count(genre_id) + 1

    return updated


class InteractionTracker:
    """Records which catalog items a visitor chooses to open."""

    def __init__(self, store: PreferenceStore):
        self.store = store

    def record_interaction(self, item: Mapping[str, Any]) -> None:
        """
        Count one "open details" action on ``item`` in the stored profile.

        Never raises for storage problems; an unpersisted update stays
        visible through the store for the rest of the session.
        """
        profile = apply_interaction(self.store.load(), item)
        persisted = self.store.save(profile)

        logger.debug(f"Recorded interaction with item {item.get('id')}")
        if not persisted:
            logger.warning("Interaction recorded for this session only; profile was not persisted")
