"""Object storage port.

Files never pass through the API: clients upload and download directly
against presigned URLs. The backend only hands out URLs and deletes objects.
"""

from abc import ABC, abstractmethod


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class ObjectStoragePort(ABC):
    """Presigned-URL access to an S3-compatible bucket."""

    @abstractmethod
    def generate_upload_url(self, storage_key: str, content_type: str, expires_in_seconds: int) -> str:
        """Presigned PUT URL for storage_key."""
        pass

    @abstractmethod
    def generate_download_url(self, storage_key: str, expires_in_seconds: int) -> str:
        """Presigned GET URL.

        Raises:
            FileNotFoundError: Object does not exist
        """
        pass

    @abstractmethod
    def file_exists(self, storage_key: str) -> bool:
        pass

    @abstractmethod
    def delete_file(self, storage_key: str) -> bool:
        """Returns False if the object did not exist."""
        pass
