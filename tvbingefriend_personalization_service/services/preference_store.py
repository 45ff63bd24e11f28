"""Read/write access to the persisted affinity profile."""
import json
import logging

from tvbingefriend_personalization_service.config import DEFAULT_PROFILE_KEY
from tvbingefriend_personalization_service.models import AffinityProfile, ProfileFormatError
from tvbingefriend_personalization_service.storage import KeyValueBackend, StorageError

logger = logging.getLogger(__name__)


class PreferenceStore:
    """
    Owns the affinity profile slot in a key-value backend.

    ``load`` always returns a profile and ``save`` always returns a bool:
    storage problems degrade to an empty profile or an unpersisted save and
    are never raised to the caller.

    A slot that could not be read or parsed is never overwritten. Until a
    later read succeeds, ``save`` keeps the profile for the session only.
    """

    def __init__(self, backend: KeyValueBackend, key: str = DEFAULT_PROFILE_KEY):
        """
        Initialize the store.

        Args:
            backend: Persistence backend holding the slot
            key: Slot name
        """
        self.backend = backend
        self.key = key

        # Last profile handed to save(); served by load() while unpersisted
        self._session_profile: AffinityProfile | None = None
        self._unpersisted = False
        # Set when the slot exists but its content is unknown
        self._degraded = False

    @property
    def has_unpersisted_changes(self) -> bool:
        return self._unpersisted

    @property
    def is_degraded(self) -> bool:
        return self._degraded

    def load(self) -> AffinityProfile:
        """
        Read the persisted profile.

        Returns:
            The stored profile, or a fresh empty one if the slot is empty,
            unreadable or malformed
        """
        if self._unpersisted and not self._degraded and self._session_profile is not None:
            return self._session_profile.copy()

        try:
            raw = self.backend.read(self.key)
        except StorageError as e:
            logger.warning(f"Preference storage unavailable, using empty profile: {e}")
            return self._degrade()

        if not raw:
            logger.debug(f"No stored profile under {self.key}")
            profile = AffinityProfile.empty()
        else:
            try:
                profile = AffinityProfile.from_dict(json.loads(raw))
            except json.JSONDecodeError as e:
                logger.warning(f"Stored profile under {self.key} is not valid JSON, using empty profile: {e}")
                return self._degrade()
            except ProfileFormatError as e:
                logger.warning(f"Stored profile under {self.key} is malformed, using empty profile: {e}")
                return self._degrade()

        if self._degraded:
            logger.info(f"Preference slot {self.key} readable again; dropping session-only changes")
            self._degraded = False
            self._unpersisted = False
            self._session_profile = None

        return profile

    def _degrade(self) -> AffinityProfile:
        self._degraded = True
        if self._session_profile is not None:
            return self._session_profile.copy()
        return AffinityProfile.empty()

    def save(self, profile: AffinityProfile) -> bool:
        """
        Serialize and write the profile.

        Args:
            profile: Profile to persist

        Returns:
            True if the profile was persisted
        """
        self._session_profile = profile.copy()

        if self._degraded:
            logger.warning(f"Not overwriting unreadable profile under {self.key}; keeping it for this session")
            self._unpersisted = True
            return False

        try:
            payload = json.dumps(profile.to_dict(), sort_keys=True)
            self.backend.write(self.key, payload)
        except (StorageError, TypeError, ValueError) as e:
            logger.warning(f"Failed to persist profile under {self.key}; keeping it for this session: {e}")
            self._unpersisted = True
            return False

        self._unpersisted = False
        return True
