"""Key-value persistence backends for the affinity profile slot."""

import logging
import os
import tempfile
from pathlib import Path
from typing import Callable, Protocol

from azure.core.exceptions import AzureError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from tvbingefriend_personalization_service.config import (
    get_preference_backend,
    get_preference_data_dir,
)
from tvbingefriend_personalization_service.repos import PreferenceRepository
from tvbingefriend_personalization_service.storage.blob_storage import (
    BlobStorageClient,
    get_blob_client,
)

logger = logging.getLogger(__name__)

BACKEND_KINDS = ("memory", "file", "database", "blob")


class StorageError(Exception):
    """Raised when a backend cannot read or write a slot."""


class KeyValueBackend(Protocol):
    """Named string slots. Reads of an unknown key return None."""

    def read(self, key: str) -> str | None:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class InMemoryBackend:
    """Process-local slots; nothing survives the process."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._slots: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self._slots.get(key)

    def write(self, key: str, value: str) -> None:
        self._slots[key] = value


class LocalFileBackend:
    """One ``<key>.json`` file per slot under a local directory."""

    def __init__(self, directory: Path | None = None):
        self.directory = Path(directory) if directory is not None else get_preference_data_dir()

    def _path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        path = self._path_for(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            raise StorageError(f"Failed to read {path}: {e}") from e
        except UnicodeDecodeError as e:
            raise StorageError(f"{path} is not valid UTF-8: {e}") from e

    def write(self, key: str, value: str) -> None:
        path = self._path_for(key)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            # Replace the slot in one step so a crash never leaves half a file
            fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Failed to write {path}: {e}") from e


class DatabaseBackend:
    """Slots stored as rows of the ``preference_profiles`` table."""

    def __init__(self, session_factory: Callable[[], Session] | None = None):
        if session_factory is None:
            from tvbingefriend_personalization_service.models.database import SessionLocal, create_tables

            try:
                create_tables()
            except SQLAlchemyError as e:
                logger.warning(f"Could not create preference table: {e}")
            session_factory = SessionLocal
        self.session_factory = session_factory

    def read(self, key: str) -> str | None:
        db = self.session_factory()
        try:
            return PreferenceRepository(db).get_payload(key)
        except SQLAlchemyError as e:
            raise StorageError(f"Failed to read preference slot {key}: {e}") from e
        finally:
            db.close()

    def write(self, key: str, value: str) -> None:
        db = self.session_factory()
        try:
            PreferenceRepository(db).store_payload(key, value)
        except SQLAlchemyError as e:
            db.rollback()
            raise StorageError(f"Failed to write preference slot {key}: {e}") from e
        finally:
            db.close()


class BlobBackend:
    """Slots stored as ``<prefix>/<key>.json`` blobs."""

    def __init__(self, blob_client: BlobStorageClient | None = None, prefix: str = "preferences"):
        self.blob_client = blob_client if blob_client is not None else get_blob_client()
        self.prefix = prefix

    def _blob_name(self, key: str) -> str:
        return f"{self.prefix}/{key}.json" if self.prefix else f"{key}.json"

    def read(self, key: str) -> str | None:
        blob_name = self._blob_name(key)
        try:
            return self.blob_client.download_text(blob_name)
        except (AzureError, ValueError) as e:
            raise StorageError(f"Failed to download {blob_name}: {e}") from e

    def write(self, key: str, value: str) -> None:
        blob_name = self._blob_name(key)
        if not self.blob_client.upload_text(blob_name, value):
            raise StorageError(f"Failed to upload {blob_name}")


def create_backend(kind: str | None = None) -> KeyValueBackend:
    """
    Factory function to build the configured persistence backend.

    Args:
        kind: Backend name (from config if None)

    Returns:
        KeyValueBackend instance

    Raises:
        ValueError: If the backend name is unknown
    """
    if kind is None:
        kind = get_preference_backend()
    kind = kind.strip().lower()

    if kind == "memory":
        backend: KeyValueBackend = InMemoryBackend()
    elif kind == "file":
        backend = LocalFileBackend()
    elif kind == "database":
        backend = DatabaseBackend()
    elif kind == "blob":
        backend = BlobBackend()
    else:
        raise ValueError(f"Unknown preference backend {kind!r}; expected one of {', '.join(BACKEND_KINDS)}")

    logger.info(f"Using {kind} preference backend")
    return backend
