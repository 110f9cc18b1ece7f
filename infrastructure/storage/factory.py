"""
Storage Factory
===============

Factory pattern for creating storage backends based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .django_adapter import LocalStorageAdapter, S3StorageAdapter
from .interface import StorageInterface

logger = logging.getLogger(__name__)

StorageBackend = Literal["local", "s3"]


class StorageFactory:
    """
    Factory for creating storage backends.

    Usage:
        # In settings.py
        STORAGE_BACKEND = 's3'  # or 'local'

        # In your code
        storage = StorageFactory.create()
    """

    @staticmethod
    def create(backend: StorageBackend | None = None) -> StorageInterface:
        """
        Create a storage backend instance.

        Raises:
            ValueError: If backend type is invalid
        """
        backend_type = backend or getattr(settings, "STORAGE_BACKEND", "local")

        logger.info(f"Creating storage backend: {backend_type}")

        if backend_type == "local":
            return LocalStorageAdapter()
        if backend_type == "s3":
            return S3StorageAdapter()
        raise ValueError(f"Invalid storage backend: {backend_type}. Must be 'local' or 's3'")
