"""
Storage Infrastructure Tests
=============================

Unit tests for the storage abstraction layer.
"""

import shutil
import tempfile
from io import BytesIO
from unittest.mock import MagicMock, patch

from django.core.files.base import ContentFile
from django.test import TestCase, override_settings

from infrastructure.storage import (
    DjangoStorageAdapter,
    LocalStorageAdapter,
    S3StorageAdapter,
    StorageException,
    StorageFactory,
    StorageFile,
    StorageInterface,
)


class StorageInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            StorageInterface()


class LocalStorageAdapterTest(TestCase):
    def setUp(self):
        self.media_root = tempfile.mkdtemp()
        self.override = override_settings(MEDIA_ROOT=self.media_root, MEDIA_URL="/media/")
        self.override.enable()
        self.adapter = LocalStorageAdapter()

    def tearDown(self):
        self.override.disable()
        shutil.rmtree(self.media_root, ignore_errors=True)

    def test_upload_and_delete_roundtrip(self):
        stored = self.adapter.upload(ContentFile(b"png bytes"), "projects/abc/image.png", "image/png")

        self.assertIsInstance(stored, StorageFile)
        self.assertEqual(stored.key, "projects/abc/image.png")
        self.assertEqual(stored.size, len(b"png bytes"))
        self.assertEqual(stored.url, "/media/projects/abc/image.png")
        self.assertTrue(self.adapter.exists(stored.key))

        self.assertTrue(self.adapter.delete(stored.key))
        self.assertFalse(self.adapter.exists(stored.key))

    def test_delete_missing_file_returns_false(self):
        self.assertFalse(self.adapter.delete("projects/missing.png"))


@override_settings(AWS_STORAGE_BUCKET_NAME="test-bucket")
class S3StorageAdapterTest(TestCase):
    @patch("infrastructure.storage.django_adapter.S3Boto3Storage")
    def test_upload_file_success(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.save.return_value = "projects/abc/cover.jpg"
        mock_storage.size.return_value = 15
        mock_storage.url.return_value = "https://test-bucket.s3.amazonaws.com/projects/abc/cover.jpg"

        adapter = S3StorageAdapter()
        result = adapter.upload(BytesIO(b"S3 test content"), "projects/abc/cover.jpg", "image/jpeg")

        self.assertEqual(result.key, "projects/abc/cover.jpg")
        self.assertIn("s3.amazonaws.com", result.url)
        self.assertEqual(result.bucket, "test-bucket")
        self.assertEqual(result.content_type, "image/jpeg")

    @patch("infrastructure.storage.django_adapter.S3Boto3Storage")
    def test_upload_failure_raises_storage_exception(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.save.side_effect = OSError("connection reset")

        adapter = S3StorageAdapter()
        with self.assertRaises(StorageException):
            adapter.upload(BytesIO(b"data"), "projects/abc/cover.jpg", "image/jpeg")

    @patch("infrastructure.storage.django_adapter.S3Boto3Storage")
    def test_delete_existing_file(self, mock_storage_class):
        mock_storage = MagicMock()
        mock_storage_class.return_value = mock_storage
        mock_storage.exists.return_value = True

        self.assertTrue(S3StorageAdapter().delete("projects/abc/cover.jpg"))
        mock_storage.delete.assert_called_once_with("projects/abc/cover.jpg")


class DjangoStorageAdapterTest(TestCase):
    def test_get_url_wraps_backend_errors(self):
        storage = MagicMock()
        storage.url.side_effect = ValueError("bad key")

        with self.assertRaises(StorageException):
            DjangoStorageAdapter(storage).get_url("projects/x.png")


class StorageFactoryTest(TestCase):
    @override_settings(STORAGE_BACKEND="local")
    def test_create_local_from_settings(self):
        self.assertIsInstance(StorageFactory.create(), LocalStorageAdapter)

    @patch("infrastructure.storage.django_adapter.S3Boto3Storage")
    def test_create_s3_explicitly(self, mock_storage_class):
        self.assertIsInstance(StorageFactory.create("s3"), S3StorageAdapter)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            StorageFactory.create("ftp")
