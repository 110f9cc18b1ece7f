"""
ReviewService - ratings left by buyers on projects they purchased.
"""

from typing import Any, Dict

from django.db import IntegrityError, transaction
from django.db.models import Avg

from marketplace.catalog.domain.models import Project, Review
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from payment_system.models import Order, OrderStatus
from utils.rbac import Caller

from .pagination import paginate


class ReviewService(BaseService):
    @BaseService.log_performance
    def list_reviews(self, project_id, page: Any = 1, limit: Any = 10) -> ServiceResult[Dict[str, Any]]:
        if not Project.objects.filter(pk=project_id).exists():
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")

        queryset = Review.objects.filter(project_id=project_id).select_related("reviewer")
        data = paginate(queryset, page, limit)
        summary = queryset.aggregate(average=Avg("rating"))
        data["averageRating"] = round(float(summary["average"]), 2) if summary["average"] is not None else None
        return service_ok(data)

    @BaseService.log_performance
    def create_review(self, caller: Caller, project_id, rating: int, comment: str = "") -> ServiceResult[Review]:
        try:
            project = Project.objects.get(pk=project_id)
        except Project.DoesNotExist:
            return service_err(ErrorCodes.PROJECT_NOT_FOUND, f"Project {project_id} not found")

        if caller.owns(project.owner_id):
            return service_err(ErrorCodes.PERMISSION_DENIED, "You cannot review your own project")
        if not self.has_purchased(caller, project):
            return service_err(ErrorCodes.PURCHASE_REQUIRED, "Only buyers of this project can review it")

        try:
            with transaction.atomic():
                review = Review.objects.create(
                    project=project, reviewer_id=caller.user_id, rating=rating, comment=comment or ""
                )
        except IntegrityError:
            return service_err(ErrorCodes.REVIEW_EXISTS, "You have already reviewed this project")

        self.logger.info(f"Review {review.id} created on project {project.pk}")
        return service_ok(review)

    @BaseService.log_performance
    def update_review(self, caller: Caller, review_id, data: Dict[str, Any]) -> ServiceResult[Review]:
        try:
            review = Review.objects.select_related("reviewer").get(pk=review_id)
        except Review.DoesNotExist:
            return service_err(ErrorCodes.REVIEW_NOT_FOUND, f"Review {review_id} not found")

        if not caller.owns(review.reviewer_id):
            return service_err(ErrorCodes.NOT_REVIEW_OWNER, "Only the author can edit this review")

        update_fields = ["updated_at"]
        for field in ("rating", "comment"):
            if field in data:
                setattr(review, field, data[field])
                update_fields.append(field)
        review.save(update_fields=update_fields)
        return service_ok(review)

    @BaseService.log_performance
    def delete_review(self, caller: Caller, review_id) -> ServiceResult[None]:
        try:
            review = Review.objects.get(pk=review_id)
        except Review.DoesNotExist:
            return service_err(ErrorCodes.REVIEW_NOT_FOUND, f"Review {review_id} not found")

        if not caller.is_admin and not caller.owns(review.reviewer_id):
            return service_err(ErrorCodes.NOT_REVIEW_OWNER, "Only the author or an admin can delete this review")

        review.delete()
        return service_ok(None)

    @staticmethod
    def has_purchased(caller: Caller, project: Project) -> bool:
        if not caller.is_authenticated:
            return False
        if caller.owns(project.sold_to_id):
            return True
        return Order.objects.filter(buyer_id=caller.user_id, project_id=project.pk, status=OrderStatus.PAID).exists()
