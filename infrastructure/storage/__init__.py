"""
Storage Abstraction Layer
==========================

Provides a unified interface for media file storage (local filesystem or S3).
"""

from .django_adapter import DjangoStorageAdapter, LocalStorageAdapter, S3StorageAdapter
from .factory import StorageFactory
from .interface import StorageException, StorageFile, StorageInterface

__all__ = [
    "StorageInterface",
    "StorageFile",
    "StorageException",
    "DjangoStorageAdapter",
    "LocalStorageAdapter",
    "S3StorageAdapter",
    "StorageFactory",
]
