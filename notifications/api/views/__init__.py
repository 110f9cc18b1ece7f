from .notification_views import (
    NotificationListAPIView,
    NotificationReadAllAPIView,
    NotificationReadAPIView,
    NotificationSendAPIView,
)


__all__ = [
    "NotificationListAPIView",
    "NotificationReadAPIView",
    "NotificationReadAllAPIView",
    "NotificationSendAPIView",
]
