import uuid

from django.conf import settings
from django.db import models
from django.db.models import Q


class OrderStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


# States from which a payment attempt may start
PAYABLE_STATUSES = (OrderStatus.PENDING, OrderStatus.FAILED)
OPEN_STATUSES = (OrderStatus.PENDING, OrderStatus.PROCESSING)


class Order(models.Model):
    """
    A buyer's intent to purchase one project through the payment gateway.

    ``amount`` is copied from the project price when the order is created and
    never taken from the client. ``status`` and ``transaction_id`` are written
    only by the payment service and the stale-order sweeper.

    ``approved_transaction_id`` is set as soon as the gateway approves a charge,
    so an order whose settlement failed is settled on retry without charging
    the card again.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    buyer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="orders")
    project = models.ForeignKey(
        "marketplace.Project", on_delete=models.SET_NULL, null=True, blank=True, related_name="orders"
    )
    project_title = models.CharField(max_length=200, help_text="Project title at the time of ordering")

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    currency = models.CharField(max_length=3, default="USD")
    status = models.CharField(
        max_length=16, choices=OrderStatus.choices, default=OrderStatus.PENDING, db_index=True
    )
    transaction_id = models.CharField(max_length=128, unique=True, null=True, blank=True)
    approved_transaction_id = models.CharField(
        max_length=128, null=True, blank=True, help_text="Gateway reference of an approved charge not yet settled"
    )

    billing_details = models.JSONField(default=dict, blank=True)
    gateway_logs = models.JSONField(default=list, blank=True, help_text="Sanitised gateway responses")

    paid_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "payment_system"
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["buyer", "status"], name="order_buyer_status_idx"),
            models.Index(fields=["project", "status"], name="order_project_status_idx"),
            models.Index(fields=["status", "updated_at"], name="order_status_updated_idx"),
        ]
        constraints = [
            models.CheckConstraint(condition=Q(amount__gte=0), name="order_amount_non_negative"),
            models.CheckConstraint(
                condition=~Q(status="paid") | Q(transaction_id__isnull=False),
                name="order_paid_requires_transaction",
            ),
            models.UniqueConstraint(
                fields=["buyer", "project"],
                condition=Q(status__in=["pending", "processing"]),
                name="order_one_open_per_buyer_project",
            ),
        ]

    def __str__(self):
        return f"Order {self.id} - {self.project_title} ${self.amount} [{self.status}]"

    @property
    def is_paid(self) -> bool:
        return self.status == OrderStatus.PAID
