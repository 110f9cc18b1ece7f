from .payment_views import (
    ExecutePaymentAPIView,
    InstantNotificationAPIView,
    OrderDetailAPIView,
    OrderListCreateAPIView,
)


__all__ = [
    "OrderListCreateAPIView",
    "OrderDetailAPIView",
    "ExecutePaymentAPIView",
    "InstantNotificationAPIView",
]
