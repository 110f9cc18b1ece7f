"""
Storage Interface
=================

Abstract base class defining the contract for media file storage.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import BinaryIO, Optional


@dataclass
class StorageFile:
    """
    A stored file.

    Attributes:
        key: Path of the file inside the storage backend
        url: URL the file can be fetched from
        size: File size in bytes
        content_type: MIME type of the file
        bucket: Bucket name for object stores
    """

    key: str
    url: str
    size: int
    content_type: str
    bucket: Optional[str] = None


class StorageInterface(ABC):
    """
    Abstract interface for file storage operations.

    Concrete implementations:
        - LocalStorageAdapter: files under MEDIA_ROOT
        - S3StorageAdapter: AWS S3 / MinIO through django-storages
    """

    @abstractmethod
    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        """
        Store ``file`` under ``path``.

        Raises:
            StorageException: If the backend rejects the write
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> bool:
        """
        Remove a stored file.

        Returns:
            True if a file was removed, False if nothing was stored under ``key``

        Raises:
            StorageException: If the backend fails
        """
        pass

    @abstractmethod
    def get_url(self, key: str) -> str:
        """URL for a stored key (public or signed depending on the backend)."""
        pass

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass


class StorageException(Exception):
    """Base exception for storage operations."""

    pass
