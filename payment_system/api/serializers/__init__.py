from .payment_serializers import (
    BillingDetailsSerializer,
    CreateOrderRequestSerializer,
    ExecutePaymentRequestSerializer,
    OrderSerializer,
)


__all__ = [
    "BillingDetailsSerializer",
    "CreateOrderRequestSerializer",
    "ExecutePaymentRequestSerializer",
    "OrderSerializer",
]
