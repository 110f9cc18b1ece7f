"""
Django Storage Adapters
=======================

StorageInterface implementations on top of Django's storage API, so the same
code path serves local development (FileSystemStorage) and production
(S3Boto3Storage from django-storages).
"""

import logging
from typing import BinaryIO, Optional

from django.conf import settings
from django.core.files.storage import FileSystemStorage, Storage
from storages.backends.s3boto3 import S3Boto3Storage

from .interface import StorageException, StorageFile, StorageInterface

logger = logging.getLogger(__name__)


class DjangoStorageAdapter(StorageInterface):
    """Wraps any ``django.core.files.storage.Storage``."""

    def __init__(self, storage: Storage, bucket: Optional[str] = None):
        self.storage = storage
        self.bucket = bucket

    def upload(self, file: BinaryIO, path: str, content_type: str) -> StorageFile:
        try:
            saved_path = self.storage.save(path, file)
            size = self.storage.size(saved_path)
            url = self.storage.url(saved_path)
        except Exception as e:
            logger.error(f"Failed to store {path}: {e}")
            raise StorageException(f"Upload failed: {e}") from e

        logger.info(f"Stored file {saved_path} ({size} bytes)")
        return StorageFile(key=saved_path, url=url, size=size, content_type=content_type, bucket=self.bucket)

    def delete(self, key: str) -> bool:
        try:
            if not self.storage.exists(key):
                logger.warning(f"File not found, cannot delete: {key}")
                return False
            self.storage.delete(key)
        except Exception as e:
            logger.error(f"Failed to delete {key}: {e}")
            raise StorageException(f"Deletion failed: {e}") from e

        logger.info(f"Deleted file {key}")
        return True

    def get_url(self, key: str) -> str:
        try:
            return self.storage.url(key)
        except Exception as e:
            raise StorageException(f"URL generation failed for {key}: {e}") from e

    def exists(self, key: str) -> bool:
        try:
            return self.storage.exists(key)
        except Exception as e:
            raise StorageException(f"Existence check failed for {key}: {e}") from e


class LocalStorageAdapter(DjangoStorageAdapter):
    """Files under ``MEDIA_ROOT``, served from ``MEDIA_URL``."""

    def __init__(self):
        super().__init__(FileSystemStorage(location=settings.MEDIA_ROOT, base_url=settings.MEDIA_URL))


class S3StorageAdapter(DjangoStorageAdapter):
    """
    AWS S3 storage using django-storages.

    Configuration (in settings.py):
        AWS_ACCESS_KEY_ID, AWS_SECRET_ACCESS_KEY: Credentials
        AWS_STORAGE_BUCKET_NAME: Bucket name
        AWS_S3_REGION_NAME: AWS region
        AWS_S3_ENDPOINT_URL: Custom endpoint for MinIO (optional)
        AWS_S3_CUSTOM_DOMAIN: CDN domain (optional)
        AWS_QUERYSTRING_AUTH: Return signed URLs
    """

    def __init__(self):
        super().__init__(S3Boto3Storage(), bucket=getattr(settings, "AWS_STORAGE_BUCKET_NAME", None))
