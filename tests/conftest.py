"""Shared test fixtures and configuration for pytest."""
import json
from datetime import UTC, datetime
from typing import Dict, List
from unittest.mock import Mock

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from tvbingefriend_personalization_service.models.base import Base
from tvbingefriend_personalization_service.models.preference_record import PreferenceRecord  # noqa: F401
from tvbingefriend_personalization_service.models.profile import AffinityProfile
from tvbingefriend_personalization_service.services.preference_store import PreferenceStore
from tvbingefriend_personalization_service.storage.backends import InMemoryBackend, StorageError


# ===== Database Fixtures =====

@pytest.fixture(scope="function")
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope="function")
def test_session_factory(test_db_engine):
    """Session factory bound to the in-memory test database."""
    return sessionmaker(bind=test_db_engine)


@pytest.fixture(scope="function")
def test_db_session(test_session_factory):
    """Create a database session for testing."""
    session = test_session_factory()
    yield session
    session.close()


# ===== Time Fixtures =====

@pytest.fixture
def fixed_now() -> datetime:
    """Evaluation instant used by ranking tests."""
    return datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def today(fixed_now) -> str:
    """fixed_now as a catalog date string."""
    return fixed_now.date().isoformat()


# ===== Sample Data Fixtures =====

@pytest.fixture
def empty_profile() -> AffinityProfile:
    """Profile of a visitor with no recorded interactions."""
    return AffinityProfile.empty()


@pytest.fixture
def sample_profile() -> AffinityProfile:
    """Profile of a visitor who mostly opens TV dramas."""
    return AffinityProfile(media_affinity={"tv": 3}, genre_affinity={18: 2})


@pytest.fixture
def sample_tv_item(today) -> Dict:
    """TV result as returned by the catalog API."""
    return {
        "id": 1,
        "name": "A",
        "media_type": "tv",
        "genre_ids": [18],
        "popularity": 10,
        "vote_average": 7,
        "first_air_date": today,
        "backdrop_path": "/a.jpg",
    }


@pytest.fixture
def sample_movie_item() -> Dict:
    """Movie result from a popular-movies page (no explicit media_type)."""
    return {
        "id": 2,
        "title": "B",
        "popularity": 50,
        "vote_average": 5,
        "release_date": "2001-01-01",
        "backdrop_path": "/b.jpg",
    }


@pytest.fixture
def sample_items(sample_tv_item, sample_movie_item) -> List[Dict]:
    """Candidate pool from the end-to-end ranking example."""
    return [sample_tv_item, sample_movie_item]


# ===== Storage Fixtures =====

class FailingBackend:
    """Backend whose reads and/or writes always fail."""

    def __init__(self, fail_reads: bool = True, fail_writes: bool = True, stored: str | None = None):
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.stored = stored
        self.write_attempts = 0

    def read(self, key: str) -> str | None:
        if self.fail_reads:
            raise StorageError("storage disabled")
        return self.stored

    def write(self, key: str, value: str) -> None:
        self.write_attempts += 1
        if self.fail_writes:
            raise StorageError("quota exceeded")
        self.stored = value


@pytest.fixture
def memory_backend() -> InMemoryBackend:
    """Empty in-memory backend."""
    return InMemoryBackend()


@pytest.fixture
def failing_backend() -> FailingBackend:
    """Backend that fails every read and write."""
    return FailingBackend()


@pytest.fixture
def write_failing_backend() -> FailingBackend:
    """Backend that reads normally but fails every write."""
    return FailingBackend(fail_reads=False, fail_writes=True)


@pytest.fixture
def preference_store(memory_backend) -> PreferenceStore:
    """PreferenceStore over an empty in-memory backend."""
    return PreferenceStore(memory_backend)


@pytest.fixture
def stored_profile_payload() -> str:
    """Serialized profile as the browser front end writes it."""
    return json.dumps({"media": {"tv": 3, "movie": 1}, "genres": {"18": 2, "35": 1}})


@pytest.fixture
def mock_blob_storage_client():
    """Mock BlobStorageClient."""
    mock = Mock()
    mock.upload_text.return_value = True
    mock.download_text.return_value = None
    mock.file_exists.return_value = True
    mock.delete_file.return_value = True
    return mock


# ===== Configuration Fixtures =====

@pytest.fixture
def isolated_config(monkeypatch, tmp_path):
    """Clear personalization settings and hide any local.settings.json."""
    for key in (
        "DATABASE_URL",
        "AZURE_STORAGE_CONNECTION_STRING",
        "STORAGE_CONTAINER_NAME",
        "USE_BLOB_STORAGE",
        "PREFERENCE_BACKEND",
        "PREFERENCE_DATA_DIR",
        "PREFERENCE_PROFILE_KEY",
        "RANKING_LIMIT",
    ):
        monkeypatch.delenv(key, raising=False)

    import tvbingefriend_personalization_service.config as config_module

    fake_module_file = tmp_path / "pkg" / "config.py"
    real_path = config_module.Path
    monkeypatch.setattr(
        config_module,
        "Path",
        lambda value: real_path(fake_module_file) if value == config_module.__file__ else real_path(value),
    )
    return tmp_path


# ===== Script Fixtures =====

@pytest.fixture
def mock_sys_argv(monkeypatch):
    """Mock sys.argv for script testing."""
    def _mock_argv(args):
        monkeypatch.setattr('sys.argv', args)
    return _mock_argv
