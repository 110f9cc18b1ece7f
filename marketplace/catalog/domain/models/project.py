import uuid

from django.conf import settings
from django.core.validators import MaxValueValidator, MinLengthValidator, MinValueValidator
from django.db import models
from django.db.models import Q


class ProjectStatus(models.TextChoices):
    DRAFT = "draft", "Draft"
    SUBMITTED = "submitted", "Submitted"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class ProjectCategory(models.TextChoices):
    WEB_DEVELOPMENT = "web-development", "Web Development"
    MOBILE_DEVELOPMENT = "mobile-development", "Mobile Development"
    DESIGN = "design", "Design"
    MARKETING = "marketing", "Marketing"
    WRITING = "writing", "Writing"
    DATA_SCIENCE = "data-science", "Data Science"
    OTHER = "other", "Other"


class ProjectQuerySet(models.QuerySet):
    def listed(self):
        """Projects currently purchasable on the marketplace."""
        return self.filter(status=ProjectStatus.APPROVED, is_for_sale=True, sold_to__isnull=True)


class Project(models.Model):
    """
    A sellable piece of work authored by ``owner``.

    ``status``, ``is_for_sale``, ``sold_to`` and the review fields are written
    only by the lifecycle and listing services.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    owner = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="projects")

    title = models.CharField(max_length=200, validators=[MinLengthValidator(3)])
    description = models.TextField(max_length=5000, validators=[MinLengthValidator(10)])
    category = models.CharField(max_length=32, choices=ProjectCategory.choices, db_index=True)
    price = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    delivery_time = models.PositiveSmallIntegerField(
        help_text="Estimated delivery in days", validators=[MinValueValidator(1), MaxValueValidator(365)]
    )
    media = models.JSONField(default=list, blank=True, help_text="Storage keys of uploaded images")

    status = models.CharField(
        max_length=16, choices=ProjectStatus.choices, default=ProjectStatus.DRAFT, db_index=True
    )
    rejection_reason = models.TextField(null=True, blank=True)
    submitted_at = models.DateTimeField(null=True, blank=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_projects",
    )
    reviewed_at = models.DateTimeField(null=True, blank=True)

    is_for_sale = models.BooleanField(default=False)
    sold_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="purchased_projects",
    )
    sold_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ProjectQuerySet.as_manager()

    class Meta:
        app_label = "marketplace"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "is_for_sale"], name="project_status_sale_idx"),
            models.Index(fields=["owner", "status"], name="project_owner_status_idx"),
            models.Index(fields=["-created_at"], name="project_created_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(is_for_sale=False) | (Q(status="approved") & Q(sold_to__isnull=True)),
                name="project_listing_requires_approved_unsold",
            ),
            models.CheckConstraint(
                condition=Q(sold_to__isnull=True) | (Q(is_for_sale=False) & Q(status="approved")),
                name="project_sale_requires_approved_unlisted",
            ),
            models.CheckConstraint(condition=Q(price__gte=0), name="project_price_non_negative"),
        ]

    def __str__(self):
        return f"{self.title} ({self.status})"

    @property
    def is_sold(self) -> bool:
        return self.sold_to_id is not None

    @property
    def is_available(self) -> bool:
        return self.status == ProjectStatus.APPROVED and self.is_for_sale and self.sold_to_id is None
