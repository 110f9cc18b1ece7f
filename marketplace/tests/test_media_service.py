from io import BytesIO
from unittest.mock import MagicMock

from django.core.files.uploadedfile import SimpleUploadedFile
from django.test import TestCase, override_settings
from PIL import Image

from infrastructure.storage import StorageException, StorageFile, StorageInterface
from marketplace.catalog.domain.services import ProjectMediaService
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import ProjectFactory, SellerFactory, UserFactory
from utils.rbac import Caller


def png_upload(name="screenshot.png", size=(8, 8)):
    buffer = BytesIO()
    Image.new("RGB", size, color=(40, 120, 200)).save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


def stored(file, path, content_type):
    return StorageFile(key=path, url=f"/media/{path}", size=10, content_type=content_type)


class ProjectMediaServiceTest(TestCase):
    def setUp(self):
        self.owner = SellerFactory()
        self.caller = Caller.for_user(self.owner)
        self.storage = MagicMock(spec=StorageInterface)
        self.storage.upload.side_effect = stored
        self.service = ProjectMediaService(storage=self.storage)

    def test_upload_appends_keys(self):
        project = ProjectFactory(owner=self.owner, media=["projects/old.png"])

        result = self.service.upload_media(self.caller, project.id, [png_upload(), png_upload("b.png")])

        self.assertTrue(result.ok)
        self.assertEqual(len(result.value.media), 3)
        for key in result.value.media[1:]:
            self.assertTrue(key.startswith(f"projects/{project.pk}/"))
            self.assertTrue(key.endswith(".png"))
        self.assertEqual(self.storage.upload.call_count, 2)

    def test_no_files(self):
        project = ProjectFactory(owner=self.owner)

        result = self.service.upload_media(self.caller, project.id, [])

        self.assertEqual(result.error, ErrorCodes.MEDIA_REJECTED)

    def test_too_many_files_per_request(self):
        project = ProjectFactory(owner=self.owner)

        result = self.service.upload_media(self.caller, project.id, [png_upload() for _ in range(6)])

        self.assertEqual(result.error, ErrorCodes.MEDIA_REJECTED)
        self.storage.upload.assert_not_called()

    def test_project_capacity(self):
        project = ProjectFactory(owner=self.owner, media=[f"projects/{i}.png" for i in range(9)])

        result = self.service.upload_media(self.caller, project.id, [png_upload(), png_upload()])

        self.assertEqual(result.error, ErrorCodes.MEDIA_REJECTED)

    def test_wrong_content_type(self):
        project = ProjectFactory(owner=self.owner)
        upload = SimpleUploadedFile("notes.pdf", b"%PDF-1.4", content_type="application/pdf")

        result = self.service.upload_media(self.caller, project.id, [upload])

        self.assertEqual(result.error, ErrorCodes.MEDIA_REJECTED)
        self.assertEqual(result.errors[0]["field"], "notes.pdf")

    def test_bytes_that_are_not_an_image(self):
        project = ProjectFactory(owner=self.owner)
        upload = SimpleUploadedFile("fake.png", b"definitely not a png", content_type="image/png")

        result = self.service.upload_media(self.caller, project.id, [upload])

        self.assertEqual(result.error, ErrorCodes.MEDIA_REJECTED)

    @override_settings(
        PROJECT_MEDIA={
            "MAX_FILES_PER_UPLOAD": 5,
            "MAX_FILES_PER_PROJECT": 10,
            "MAX_FILE_SIZE": 16,
            "ALLOWED_CONTENT_TYPES": ["image/png"],
        }
    )
    def test_file_too_large(self):
        service = ProjectMediaService(storage=self.storage)
        project = ProjectFactory(owner=self.owner)

        result = service.upload_media(self.caller, project.id, [png_upload()])

        self.assertEqual(result.error, ErrorCodes.MEDIA_REJECTED)

    def test_non_owner(self):
        project = ProjectFactory(owner=self.owner)

        result = self.service.upload_media(Caller.for_user(UserFactory()), project.id, [png_upload()])

        self.assertEqual(result.error, ErrorCodes.NOT_PROJECT_OWNER)

    def test_submitted_project_is_locked(self):
        project = ProjectFactory(owner=self.owner, submitted=True)

        result = self.service.upload_media(self.caller, project.id, [png_upload()])

        self.assertEqual(result.error, ErrorCodes.INVALID_STATUS_TRANSITION)

    def test_storage_failure_discards_partial_upload(self):
        project = ProjectFactory(owner=self.owner)
        self.storage.upload.side_effect = [
            StorageFile(key="projects/first.png", url="/media/projects/first.png", size=1, content_type="image/png"),
            StorageException("bucket unavailable"),
        ]

        result = self.service.upload_media(self.caller, project.id, [png_upload(), png_upload("b.png")])

        self.assertEqual(result.error, ErrorCodes.STORAGE_ERROR)
        self.storage.delete.assert_called_once_with("projects/first.png")
        project.refresh_from_db()
        self.assertEqual(project.media, [])
