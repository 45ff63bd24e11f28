"""Persistence backends"""

from tvbingefriend_personalization_service.storage.backends import (
    BlobBackend,
    DatabaseBackend,
    InMemoryBackend,
    KeyValueBackend,
    LocalFileBackend,
    StorageError,
    create_backend,
)
from tvbingefriend_personalization_service.storage.blob_storage import BlobStorageClient, get_blob_client

__all__ = [
    "BlobBackend",
    "BlobStorageClient",
    "DatabaseBackend",
    "InMemoryBackend",
    "KeyValueBackend",
    "LocalFileBackend",
    "StorageError",
    "create_backend",
    "get_blob_client",
]
