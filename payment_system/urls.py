from django.urls import path

from .api.views import ExecutePaymentAPIView, InstantNotificationAPIView, OrderDetailAPIView, OrderListCreateAPIView

app_name = "payment_system"

urlpatterns = [
    path("orders/", OrderListCreateAPIView.as_view(), name="order-list"),
    path("orders/<uuid:pk>/", OrderDetailAPIView.as_view(), name="order-detail"),
    path("pay/", ExecutePaymentAPIView.as_view(), name="pay"),
    path("ins/", InstantNotificationAPIView.as_view(), name="ins"),
]
