"""
ListingService - marketplace listings and direct purchases.

A listing is an approved project with ``is_for_sale=True``. Listing, unlisting
and purchasing are single conditional UPDATEs: the WHERE clause carries the
precondition, so the database decides which of several concurrent callers
wins and the losers see zero affected rows.
"""

from typing import Any, Dict, Optional

from django.db import transaction
from django.db.models import Count
from django.utils import timezone

from marketplace.catalog.domain.models import Project, ProjectCategory, ProjectStatus
from marketplace.filters import ProjectFilter
from marketplace.infra.observability.metrics import listing_changes_total, purchases_total
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from utils.rbac import Caller

from .pagination import paginate

SORT_FIELDS = {
    "createdAt": "created_at",
    "price": "price",
    "title": "title",
}
SORT_ORDERS = ("asc", "desc")

LISTING_FIELDS = ("title", "description", "price", "delivery_time")


class ListingService(BaseService):
    def __init__(self, notification_service=None):
        super().__init__()
        self.notification_service = notification_service

    # ------------------------------------------------------------------
    # Browse
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def browse(
        self,
        filters: Optional[Dict[str, Any]] = None,
        sort_by: Optional[str] = None,
        order: Optional[str] = None,
        page: Any = 1,
        limit: Any = 10,
    ) -> ServiceResult[Dict[str, Any]]:
        """
        Public catalogue of purchasable projects.

        Only approved, listed and unsold projects are ever returned, whatever
        the filters say.
        """
        sort_by = sort_by or "createdAt"
        order = (order or "desc").lower()
        if sort_by not in SORT_FIELDS:
            return service_err(
                ErrorCodes.INVALID_INPUT,
                f"Cannot sort by '{sort_by}'",
                errors=[{"field": "sortBy", "message": f"Must be one of: {', '.join(SORT_FIELDS)}"}],
            )
        if order not in SORT_ORDERS:
            return service_err(
                ErrorCodes.INVALID_INPUT,
                f"Invalid sort order '{order}'",
                errors=[{"field": "order", "message": "Must be 'asc' or 'desc'"}],
            )

        filterset = ProjectFilter(filters or {}, queryset=Project.objects.listed().select_related("owner"))
        if not filterset.is_valid():
            return service_err(
                ErrorCodes.INVALID_INPUT,
                "Invalid filter parameters",
                errors=[{"field": f, "message": str(m[0])} for f, m in filterset.errors.items()],
            )

        field = SORT_FIELDS[sort_by]
        ordering = field if order == "asc" else f"-{field}"
        # Secondary key keeps pagination stable across equal sort values
        queryset = filterset.qs.order_by(ordering, "-id")
        return service_ok(paginate(queryset, page, limit))

    @BaseService.log_performance
    def get_listing(self, project_id) -> ServiceResult[Project]:
        project = Project.objects.listed().select_related("owner").filter(pk=project_id).first()
        if project is None:
            return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {project_id} not found")
        return service_ok(project)

    def list_categories(self) -> ServiceResult:
        """Every project category with the number of projects listed in it."""
        counts = dict(
            Project.objects.listed().order_by().values("category").annotate(count=Count("id")).values_list("category", "count")
        )
        return service_ok(
            [
                {"value": value, "label": label, "listedCount": counts.get(value, 0)}
                for value, label in ProjectCategory.choices
            ]
        )

    # ------------------------------------------------------------------
    # Owner actions
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_listing(self, caller: Caller, project_id) -> ServiceResult[Project]:
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")

        if not caller.owns(project.owner_id):
            return service_err(ErrorCodes.NOT_PROJECT_OWNER, "Only the project owner can list it for sale")
        if project.sold_to_id is not None:
            return service_err(ErrorCodes.ALREADY_SOLD, "This project has already been sold")
        if project.is_for_sale:
            return service_err(ErrorCodes.ALREADY_LISTED, "This project is already listed for sale")
        if project.status != ProjectStatus.APPROVED:
            return service_err(
                ErrorCodes.INVALID_STATUS_TRANSITION,
                f"Cannot list project in {project.status} status. Only approved projects can be listed.",
            )

        updated = Project.objects.filter(
            pk=project.pk,
            owner_id=caller.user_id,
            status=ProjectStatus.APPROVED,
            is_for_sale=False,
            sold_to__isnull=True,
        ).update(is_for_sale=True, updated_at=timezone.now())
        if not updated:
            return service_err(ErrorCodes.ALREADY_LISTED, "This project was listed or sold concurrently")

        project.refresh_from_db()
        listing_changes_total.labels(action="list").inc()
        self.logger.info(f"Project {project.pk} listed for sale by {caller.user_id}")
        return service_ok(project)

    @BaseService.log_performance
    def update_listing(self, caller: Caller, project_id, data: Dict[str, Any]) -> ServiceResult[Project]:
        """Change the commercial fields of an active listing; status and ownership stay untouched."""
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {project_id} not found")

        if not caller.owns(project.owner_id):
            return service_err(ErrorCodes.NOT_PROJECT_OWNER, "Only the project owner can update this listing")

        changes = {key: data[key] for key in LISTING_FIELDS if key in data}
        changes["updated_at"] = timezone.now()
        updated = Project.objects.filter(pk=project.pk, is_for_sale=True, sold_to__isnull=True).update(**changes)
        if not updated:
            return service_err(ErrorCodes.NOT_LISTED, "Only active, unsold listings can be updated")

        project.refresh_from_db()
        listing_changes_total.labels(action="update").inc()
        return service_ok(project)

    @BaseService.log_performance
    def unlist(self, caller: Caller, project_id) -> ServiceResult[Project]:
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {project_id} not found")

        if not caller.is_admin and not caller.owns(project.owner_id):
            return service_err(ErrorCodes.NOT_PROJECT_OWNER, "Only the owner or an admin can remove this listing")

        updated = Project.objects.filter(pk=project.pk, is_for_sale=True).update(
            is_for_sale=False, updated_at=timezone.now()
        )
        if not updated:
            return service_err(ErrorCodes.NOT_LISTED, "This project is not listed for sale")

        project.refresh_from_db()
        listing_changes_total.labels(action="unlist").inc()
        self.logger.info(f"Project {project.pk} unlisted by {caller.user_id} (admin={caller.is_admin})")
        return service_ok(project)

    # ------------------------------------------------------------------
    # Purchase
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def purchase(self, caller: Caller, project_id) -> ServiceResult[Project]:
        """
        Sell a listed project to ``caller`` without going through the gateway.

        The sale is one UPDATE guarded on ``is_for_sale`` and ``sold_to``; of
        any number of concurrent buyers exactly one sees an affected row.
        """
        if not caller.is_authenticated:
            return service_err(ErrorCodes.AUTHENTICATION_REQUIRED, "Authentication required")

        project = self._load_for_purchase(project_id)
        if project is None:
            return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {project_id} not found")
        if caller.owns(project.owner_id):
            purchases_total.labels(outcome="self_purchase").inc()
            return service_err(ErrorCodes.SELF_PURCHASE, "You cannot purchase your own project")
        if project.sold_to_id is not None:
            purchases_total.labels(outcome="conflict").inc()
            return service_err(ErrorCodes.ALREADY_SOLD, "This project has already been sold")
        if not project.is_for_sale:
            purchases_total.labels(outcome="conflict").inc()
            return service_err(ErrorCodes.NOT_FOR_SALE, "This project is not for sale")

        with transaction.atomic():
            claimed = mark_project_sold(project.pk, caller.user_id)
            if not claimed:
                purchases_total.labels(outcome="conflict").inc()
                return service_err(ErrorCodes.ALREADY_SOLD, "This project has already been sold")
            self._notify_sale(project, caller.user_id)

        project.refresh_from_db()
        purchases_total.labels(outcome="ok").inc()
        self.logger.info(f"Project {project.pk} purchased by {caller.user_id}")
        return service_ok(project)

    def _load_for_purchase(self, project_id) -> Optional[Project]:
        return Project.objects.filter(pk=project_id).first()

    def _notify_sale(self, project: Project, buyer_id) -> None:
        if self.notification_service is None:
            return
        self.notification_service.notify_on_commit(
            recipient_id=project.owner_id,
            kind="order_status",
            message=f'Your project "{project.title}" has been sold.',
            related_id=project.pk,
            email_subject="You made a sale",
        )
        self.notification_service.notify_on_commit(
            recipient_id=buyer_id,
            kind="success",
            message=f'You purchased "{project.title}".',
            related_id=project.pk,
        )


def mark_project_sold(project_id, buyer_id) -> bool:
    """
    Conditionally transfer a listed project to ``buyer_id``.

    Shared by the direct purchase path and payment finalisation. Returns False
    when the project is no longer purchasable (already sold, unlisted, owned
    by the buyer); the caller decides what that means.
    """
    now = timezone.now()
    updated = (
        Project.objects.filter(
            pk=project_id,
            status=ProjectStatus.APPROVED,
            is_for_sale=True,
            sold_to__isnull=True,
        )
        .exclude(owner_id=buyer_id)
        .update(sold_to_id=buyer_id, sold_at=now, is_for_sale=False, updated_at=now)
    )
    return updated == 1
