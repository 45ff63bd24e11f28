"""Data models"""

from tvbingefriend_personalization_service.models.base import Base
from tvbingefriend_personalization_service.models.candidate import Candidate, MediaKind, infer_media_kind
from tvbingefriend_personalization_service.models.preference_record import PreferenceRecord
from tvbingefriend_personalization_service.models.profile import AffinityProfile, ProfileFormatError

__all__ = [
    "AffinityProfile",
    "Base",
    "Candidate",
    "MediaKind",
    "PreferenceRecord",
    "ProfileFormatError",
    "infer_media_kind",
]
