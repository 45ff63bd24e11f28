"""Persisted affinity profile slot"""
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text

from tvbingefriend_personalization_service.models.base import Base


class PreferenceRecord(Base):
    """One named persistence slot holding a serialized affinity profile."""

    __tablename__ = "preference_profiles"

    profile_key = Column(String(255), primary_key=True)
    payload = Column(Text, nullable=False)

    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    def __repr__(self):
        return f"<PreferenceRecord(profile_key='{self.profile_key}', updated_at={self.updated_at})>"
