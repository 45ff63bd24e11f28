"""Blob storage client wrapper for personalization data."""

import logging

from azure.core.exceptions import ResourceNotFoundError
from azure.storage.blob import BlobServiceClient

from tvbingefriend_personalization_service.config import (
    get_azure_storage_connection_string,
    get_storage_container_name,
)

logger = logging.getLogger(__name__)


class BlobStorageClient:
    """
    Wrapper for Azure Blob Storage operations specific to personalization data.
    Uses the azure-storage-blob SDK.
    """

    def __init__(self, connection_string: str | None = None, container_name: str | None = None):
        """
        Initialize blob storage client.

        Args:
            connection_string: Azure Storage connection string (from config if None)
            container_name: Container name for personalization data (from config if None)
        """
        if connection_string is None:
            connection_string = get_azure_storage_connection_string()
        if connection_string is None:
            raise ValueError(
                "AZURE_STORAGE_CONNECTION_STRING is not configured. "
                "Set the AZURE_STORAGE_CONNECTION_STRING environment variable."
            )

        if container_name is None:
            container_name = get_storage_container_name()

        self.container_name = container_name

        service_client = BlobServiceClient.from_connection_string(connection_string)
        self.container_client = service_client.get_container_client(container_name)

        logger.info(f"Initialized BlobStorageClient for container: {container_name}")

    def upload_text(self, blob_name: str, text: str) -> bool:
        """
        Upload a text document to blob storage, replacing any existing blob.

        Args:
            blob_name: Blob name (path in storage)
            text: Document body

        Returns:
            True if successful
        """
        try:
            blob_client = self.container_client.get_blob_client(blob_name)
            blob_client.upload_blob(text.encode("utf-8"), overwrite=True)
            logger.info(f"✓ Uploaded {blob_name} ({len(text)} chars)")
            return True
        except Exception as e:
            logger.error(f"Failed to upload {blob_name}: {e}")
            return False

    def download_text(self, blob_name: str) -> str | None:
        """
        Download a text document from blob storage.

        Args:
            blob_name: Blob name (path in storage)

        Returns:
            Document body, or None if the blob does not exist

        Raises:
            AzureError: If the blob exists but could not be read
            UnicodeDecodeError: If the blob is not valid UTF-8
        """
        try:
            blob_client = self.container_client.get_blob_client(blob_name)
            return blob_client.download_blob(encoding="utf-8").readall()
        except ResourceNotFoundError:
            logger.debug(f"Blob {blob_name} does not exist")
            return None
        except Exception as e:
            logger.error(f"Failed to download {blob_name}: {e}")
            raise

    def file_exists(self, blob_name: str) -> bool:
        """
        Check if a blob exists.

        Args:
            blob_name: Blob name to check

        Returns:
            True if exists
        """
        try:
            blob_client = self.container_client.get_blob_client(blob_name)
            return blob_client.exists()
        except Exception as e:
            logger.error(f"Error checking if {blob_name} exists: {e}")
            return False

    def delete_file(self, blob_name: str) -> bool:
        """
        Delete a blob.

        Args:
            blob_name: Blob name to delete

        Returns:
            True if successful
        """
        try:
            logger.info(f"Deleting {blob_name}...")
            blob_client = self.container_client.get_blob_client(blob_name)
            blob_client.delete_blob()
            logger.info(f"✓ Deleted {blob_name}")
            return True
        except Exception as e:
            logger.error(f"Failed to delete {blob_name}: {e}")
            return False


def get_blob_client(
    connection_string: str | None = None, container_name: str | None = None
) -> BlobStorageClient:
    """
    Factory function to get a blob storage client.

    Args:
        connection_string: Azure Storage connection string (from config if None)
        container_name: Container name (from config if None)

    Returns:
        BlobStorageClient instance
    """
    return BlobStorageClient(connection_string=connection_string, container_name=container_name)
