from rest_framework import serializers

from payment_system.models import Order
from utils.serializers import StrictSerializer


class BillingDetailsSerializer(StrictSerializer):
    name = serializers.CharField(max_length=128)
    email = serializers.EmailField()
    address = serializers.CharField(max_length=255)
    city = serializers.CharField(max_length=128)
    zip = serializers.CharField(max_length=32)
    country = serializers.CharField(max_length=64)


class OrderSerializer(serializers.ModelSerializer):
    """Read-only order representation; status and settlement fields are never client-writable."""

    buyerId = serializers.UUIDField(source="buyer_id", read_only=True)
    projectId = serializers.UUIDField(source="project_id", read_only=True, allow_null=True)
    projectTitle = serializers.CharField(source="project_title", read_only=True)
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, coerce_to_string=False, read_only=True)
    transactionId = serializers.CharField(source="transaction_id", read_only=True, allow_null=True)
    billingDetails = serializers.JSONField(source="billing_details", read_only=True)
    paidAt = serializers.DateTimeField(source="paid_at", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "buyerId",
            "projectId",
            "projectTitle",
            "amount",
            "currency",
            "status",
            "transactionId",
            "billingDetails",
            "paidAt",
            "createdAt",
            "updatedAt",
        ]
        read_only_fields = fields


class CreateOrderRequestSerializer(StrictSerializer):
    """The amount is always taken from the project price."""

    projectId = serializers.UUIDField()
    billingDetails = BillingDetailsSerializer(required=False)


class ExecutePaymentRequestSerializer(StrictSerializer):
    orderId = serializers.UUIDField()
    token = serializers.CharField(max_length=255, trim_whitespace=True)
    billingDetails = BillingDetailsSerializer(required=False)
