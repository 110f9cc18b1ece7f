from .notification_serializers import (
    NotificationListSerializer,
    NotificationSerializer,
    SendNotificationRequestSerializer,
)


__all__ = ["NotificationSerializer", "NotificationListSerializer", "SendNotificationRequestSerializer"]
