from django.urls import path

from .api.views import (
    NotificationListAPIView,
    NotificationReadAllAPIView,
    NotificationReadAPIView,
    NotificationSendAPIView,
)

app_name = "notifications"

urlpatterns = [
    path("", NotificationListAPIView.as_view(), name="notification-list"),
    path("read-all/", NotificationReadAllAPIView.as_view(), name="notification-read-all"),
    path("send/", NotificationSendAPIView.as_view(), name="notification-send"),
    path("<uuid:pk>/read/", NotificationReadAPIView.as_view(), name="notification-read"),
]
