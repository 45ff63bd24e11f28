"""Repository classes"""

from tvbingefriend_personalization_service.repos.preference_repository import PreferenceRepository

__all__ = [
    "PreferenceRepository",
]
