"""Repository for persisted affinity profile slots."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from tvbingefriend_personalization_service.models import PreferenceRecord

logger = logging.getLogger(__name__)


class PreferenceRepository:
    """
    Repository for persisted affinity profile slots.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_payload(self, profile_key: str) -> str | None:
        """
        Get the serialized profile stored under a key.

        Args:
            profile_key: Slot name

        Returns:
            Serialized payload, or None if the slot is empty
        """
        record = (
            self.db.query(PreferenceRecord)
            .filter(PreferenceRecord.profile_key == profile_key)
            .first()
        )
        return record.payload if record else None  # type: ignore[return-value]

    def store_payload(self, profile_key: str, payload: str) -> PreferenceRecord:
        """
        Store or replace the serialized profile under a key.

        Args:
            profile_key: Slot name
            payload: Serialized profile

        Returns:
            PreferenceRecord object
        """
        existing = (
            self.db.query(PreferenceRecord)
            .filter(PreferenceRecord.profile_key == profile_key)
            .first()
        )

        if existing:
            existing.payload = payload  # type: ignore[assignment]
            existing.updated_at = datetime.now(UTC)  # type: ignore[assignment]
            record = existing
        else:
            record = PreferenceRecord(
                profile_key=profile_key,
                payload=payload,
                updated_at=datetime.now(UTC),
            )
            self.db.add(record)

        self.db.commit()
        self.db.refresh(record)

        logger.debug(f"Stored preference payload for {profile_key}")
        return record

    def count_profiles(self) -> int:
        """Count stored profile slots."""
        return self.db.query(PreferenceRecord).count()
