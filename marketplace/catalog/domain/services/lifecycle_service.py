"""
ProjectLifecycleService - project authoring and review state machine.

    (create) -> draft --submit--> submitted --approve--> approved
                 ^                    |
                 |                 reject
                edit                  v
                 +-------------- rejected

Every status change is a conditional UPDATE keyed on the current status, so
two concurrent reviewers (or an edit racing an approval) cannot both win.
"""

from typing import Any, Dict, Iterable, Optional

from django.db import transaction
from django.utils import timezone

from infrastructure.storage import StorageException
from marketplace.catalog.domain.models import Project, ProjectStatus
from marketplace.filters import ProjectFilter
from marketplace.infra.observability.metrics import project_transitions_total
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import Caller

from .pagination import paginate
from .visibility import visibility_filter

EDITABLE_STATUSES = (ProjectStatus.DRAFT, ProjectStatus.REJECTED)
SUBMITTABLE_STATUSES = (ProjectStatus.DRAFT, ProjectStatus.REJECTED)
REVIEWABLE_STATUSES = (ProjectStatus.SUBMITTED,)

EDITABLE_FIELDS = ("title", "description", "category", "price", "delivery_time")


class ProjectLifecycleService(BaseService):
    """
    Create, read, edit, submit, review and delete projects.

    All operations take an explicit ``Caller``; the service never looks at
    request state.
    """

    def __init__(self, notification_service=None, storage=None):
        super().__init__()
        self.notification_service = notification_service
        self.storage = storage

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def get_project(self, caller: Caller, project_id) -> ServiceResult[Project]:
        project = (
            Project.objects.select_related("owner", "reviewed_by", "sold_to")
            .filter(visibility_filter(caller))
            .filter(pk=project_id)
            .first()
        )
        if project is None:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")
        return service_ok(project)

    @BaseService.log_performance
    def list_projects(
        self, caller: Caller, filters: Optional[Dict[str, Any]] = None, page: Any = 1, limit: Any = 10
    ) -> ServiceResult[Dict[str, Any]]:
        filters = dict(filters or {})
        try:
            queryset = Project.objects.select_related("owner").filter(
                visibility_filter(caller, filters.pop("status", None))
            )
        except ValueError as e:
            return service_err(ErrorCodes.INVALID_INPUT, str(e), errors=[{"field": "status", "message": str(e)}])

        filterset = ProjectFilter(filters, queryset=queryset)
        if not filterset.is_valid():
            return service_err(
                ErrorCodes.INVALID_INPUT,
                "Invalid filter parameters",
                errors=[{"field": f, "message": str(m[0])} for f, m in filterset.errors.items()],
            )
        return service_ok(paginate(filterset.qs, page, limit))

    # ------------------------------------------------------------------
    # Owner actions
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_project(self, caller: Caller, data: Dict[str, Any]) -> ServiceResult[Project]:
        if not caller.is_authenticated:
            return service_err(ErrorCodes.AUTHENTICATION_REQUIRED, "Authentication required")

        fields = {key: data[key] for key in EDITABLE_FIELDS if key in data}
        project = Project.objects.create(
            owner_id=caller.user_id,
            status=ProjectStatus.DRAFT,
            rejection_reason=None,
            **fields,
        )
        project_transitions_total.labels(action="create", outcome="ok").inc()
        self.logger.info(f"Project {project.id} created by {caller.user_id}")
        return service_ok(project)

    @BaseService.log_performance
    def edit_project(self, caller: Caller, project_id, data: Dict[str, Any]) -> ServiceResult[Project]:
        """
        Apply field changes while the project is a draft or was rejected.

        Editing a rejected project returns it to draft and clears the
        rejection reason.
        """
        result = self._load_owned(caller, project_id, "edit")
        if not result.ok:
            return result
        project = result.value

        changes = {key: data[key] for key in EDITABLE_FIELDS if key in data}
        return self._transition(
            project,
            action="edit",
            allowed=EDITABLE_STATUSES,
            status=ProjectStatus.DRAFT,
            rejection_reason=None,
            **changes,
        )

    @BaseService.log_performance
    def submit_project(self, caller: Caller, project_id) -> ServiceResult[Project]:
        result = self._load_owned(caller, project_id, "submit")
        if not result.ok:
            return result

        return self._transition(
            result.value,
            action="submit",
            allowed=SUBMITTABLE_STATUSES,
            status=ProjectStatus.SUBMITTED,
            submitted_at=timezone.now(),
            rejection_reason=None,
        )

    @BaseService.log_performance
    def delete_project(self, caller: Caller, project_id) -> ServiceResult[None]:
        """
        Remove a project.

        Admins may delete anything. Owners cannot delete a project that is
        waiting for review or has already been sold.
        """
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")

        if not caller.is_admin and not caller.owns(project.owner_id):
            return service_err(ErrorCodes.NOT_PROJECT_OWNER, "Only the owner or an admin can delete this project")

        queryset = Project.objects.filter(pk=project.pk)
        if not caller.is_admin:
            if project.sold_to_id is not None:
                return service_err(ErrorCodes.PROJECT_SOLD, "Sold projects cannot be deleted")
            if project.status == ProjectStatus.SUBMITTED:
                return service_err(
                    ErrorCodes.PROJECT_UNDER_REVIEW, "Projects under review cannot be deleted by their owner"
                )
            queryset = queryset.filter(sold_to__isnull=True).exclude(status=ProjectStatus.SUBMITTED)

        media = list(project.media or [])
        with transaction.atomic():
            deleted, _ = queryset.delete()
            if not deleted:
                return service_err(ErrorCodes.INVALID_STATUS_TRANSITION, "Project changed state; retry the delete")
            if media and self.storage is not None:
                transaction.on_commit(lambda: self._purge_media(media))

        project_transitions_total.labels(action="delete", outcome="ok").inc()
        self.logger.info(f"Project {project_id} deleted by {caller.user_id} (admin={caller.is_admin})")
        return service_ok(None)

    # ------------------------------------------------------------------
    # Admin review
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def approve_project(self, caller: Caller, project_id) -> ServiceResult[Project]:
        result = self._load_for_review(caller, project_id, "approve")
        if not result.ok:
            return result

        result = self._transition(
            result.value,
            action="approve",
            allowed=REVIEWABLE_STATUSES,
            status=ProjectStatus.APPROVED,
            reviewed_by_id=caller.user_id,
            reviewed_at=timezone.now(),
            rejection_reason=None,
        )
        if result.ok:
            self._notify_owner(
                result.value,
                "success",
                f'Your project "{result.value.title}" was approved and can now be listed for sale.',
                subject="Your project was approved",
            )
        return result

    @BaseService.log_performance
    def reject_project(self, caller: Caller, project_id, reason: str) -> ServiceResult[Project]:
        reason = (reason or "").strip()
        if not reason:
            return service_err(
                ErrorCodes.VALIDATION_ERROR,
                "A rejection reason is required",
                errors=[{"field": "reason", "message": "This field may not be blank."}],
            )

        result = self._load_for_review(caller, project_id, "reject")
        if not result.ok:
            return result

        result = self._transition(
            result.value,
            action="reject",
            allowed=REVIEWABLE_STATUSES,
            status=ProjectStatus.REJECTED,
            reviewed_by_id=caller.user_id,
            reviewed_at=timezone.now(),
            rejection_reason=reason,
        )
        if result.ok:
            self._notify_owner(
                result.value,
                "warning",
                f'Your project "{result.value.title}" was rejected: {reason}',
                subject="Your project needs changes",
            )
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_owned(self, caller: Caller, project_id, action: str) -> ServiceResult[Project]:
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")
        if not caller.owns(project.owner_id):
            project_transitions_total.labels(action=action, outcome="forbidden").inc()
            return service_err(ErrorCodes.NOT_PROJECT_OWNER, f"Only the project owner can {action} this project")
        return service_ok(project)

    def _load_for_review(self, caller: Caller, project_id, action: str) -> ServiceResult[Project]:
        if not caller.is_admin:
            project_transitions_total.labels(action=action, outcome="forbidden").inc()
            return service_err(ErrorCodes.PERMISSION_DENIED, f"Only admins can {action} projects")
        try:
            return service_ok(Project.objects.get(pk=project_id))
        except Project.DoesNotExist:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")

    def _transition(self, project: Project, action: str, allowed: Iterable[str], **changes) -> ServiceResult[Project]:
        allowed = tuple(allowed)
        if project.status not in allowed:
            return self._conflict(project.status, action, allowed)

        changes["updated_at"] = timezone.now()
        updated = Project.objects.filter(pk=project.pk, status__in=allowed).update(**changes)
        if not updated:
            # Lost a race: somebody moved or deleted the project since we read it
            current = Project.objects.filter(pk=project.pk).values_list("status", flat=True).first()
            if current is None:
                return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project.pk} not found")
            return self._conflict(current, action, allowed)

        project.refresh_from_db()
        project_transitions_total.labels(action=action, outcome="ok").inc()
        self.logger.info(f"Project {project.pk}: {action} -> {project.status}")
        return service_ok(project)

    @staticmethod
    def _conflict(current: str, action: str, allowed: Iterable[str]) -> ServiceResult:
        project_transitions_total.labels(action=action, outcome="conflict").inc()
        return service_err(
            ErrorCodes.INVALID_STATUS_TRANSITION,
            f"Cannot {action} project in {current} status. Allowed statuses: {', '.join(allowed)}.",
        )

    def _notify_owner(self, project: Project, kind: str, message: str, subject: str) -> None:
        if self.notification_service is None:
            return
        self.notification_service.notify_on_commit(
            recipient_id=project.owner_id,
            kind=kind,
            message=message,
            related_id=project.pk,
            email_subject=subject,
        )

    def _purge_media(self, keys) -> None:
        for key in keys:
            try:
                self.storage.delete(key)
            except StorageException as e:
                self.logger.warning(f"Could not delete media {key}: {e}")
