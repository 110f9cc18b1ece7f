"""
ProjectMediaService - image uploads attached to a project.

Files go to the configured storage backend under ``projects/<project id>/``
and only their keys are kept on the project.
"""

import os
import uuid
from typing import Dict, List

from django.conf import settings
from django.db import transaction
from django.utils import timezone
from PIL import Image, UnidentifiedImageError

from infrastructure.storage import StorageException, StorageInterface
from marketplace.catalog.domain.models import Project
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import Caller

from .lifecycle_service import EDITABLE_STATUSES

EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


class ProjectMediaService(BaseService):
    def __init__(self, storage: StorageInterface):
        super().__init__()
        self.storage = storage
        self.config = settings.PROJECT_MEDIA

    @BaseService.log_performance
    def upload_media(self, caller: Caller, project_id, files: List) -> ServiceResult[Project]:
        if not files:
            return service_err(
                ErrorCodes.MEDIA_REJECTED, "No files provided", errors=[{"field": "media", "message": "Required."}]
            )
        if len(files) > self.config["MAX_FILES_PER_UPLOAD"]:
            return service_err(
                ErrorCodes.MEDIA_REJECTED,
                f"At most {self.config['MAX_FILES_PER_UPLOAD']} files can be uploaded at once",
            )

        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")

        if not caller.owns(project.owner_id):
            return service_err(ErrorCodes.NOT_PROJECT_OWNER, "Only the project owner can upload media")
        if project.status not in EDITABLE_STATUSES:
            return service_err(
                ErrorCodes.INVALID_STATUS_TRANSITION,
                f"Cannot upload media to a project in {project.status} status",
            )
        if len(project.media or []) + len(files) > self.config["MAX_FILES_PER_PROJECT"]:
            return service_err(
                ErrorCodes.MEDIA_REJECTED,
                f"A project can hold at most {self.config['MAX_FILES_PER_PROJECT']} media files",
            )

        errors = [error for f in files for error in self._validate(f)]
        if errors:
            return service_err(ErrorCodes.MEDIA_REJECTED, "One or more files were rejected", errors=errors)

        uploaded: List[str] = []
        try:
            for f in files:
                key = f"projects/{project.pk}/{uuid.uuid4().hex}{EXTENSIONS[f.content_type]}"
                stored = self.storage.upload(f, key, f.content_type)
                uploaded.append(stored.key)
        except StorageException as e:
            self.logger.error(f"Media upload for project {project.pk} failed: {e}")
            self._discard(uploaded)
            return service_err(ErrorCodes.STORAGE_ERROR, "Could not store the uploaded files")

        with transaction.atomic():
            locked = Project.objects.select_for_update().get(pk=project.pk)
            if locked.status not in EDITABLE_STATUSES:
                transaction.on_commit(lambda: self._discard(uploaded))
                return service_err(
                    ErrorCodes.INVALID_STATUS_TRANSITION,
                    f"Cannot upload media to a project in {locked.status} status",
                )
            locked.media = list(locked.media or []) + uploaded
            locked.updated_at = timezone.now()
            locked.save(update_fields=["media", "updated_at"])

        self.logger.info(f"Stored {len(uploaded)} media files for project {project.pk}")
        return service_ok(locked)

    def _validate(self, upload) -> List[Dict[str, str]]:
        name = os.path.basename(getattr(upload, "name", "file"))
        content_type = getattr(upload, "content_type", None)
        if content_type not in self.config["ALLOWED_CONTENT_TYPES"]:
            return [{"field": name, "message": f"Unsupported file type '{content_type}'"}]
        if upload.size > self.config["MAX_FILE_SIZE"]:
            limit_mb = self.config["MAX_FILE_SIZE"] // (1024 * 1024)
            return [{"field": name, "message": f"File exceeds the {limit_mb}MB limit"}]
        try:
            Image.open(upload).verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            return [{"field": name, "message": "File is not a valid image"}]
        finally:
            upload.seek(0)
        return []

    def _discard(self, keys: List[str]) -> None:
        for key in keys:
            try:
                self.storage.delete(key)
            except StorageException as e:
                self.logger.warning(f"Could not remove orphaned media {key}: {e}")
