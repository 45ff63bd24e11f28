"""Service classes"""

from .interaction_tracker import InteractionTracker, apply_interaction
from .personalization_service import PersonalizationService, merge_candidate_pools
from .preference_store import PreferenceStore
from .ranking_engine import RankingEngine, RankingWeights, ScoreBreakdown, rank

__all__ = [
    "InteractionTracker",
    "PersonalizationService",
    "PreferenceStore",
    "RankingEngine",
    "RankingWeights",
    "ScoreBreakdown",
    "apply_interaction",
    "merge_candidate_pools",
    "rank",
]
