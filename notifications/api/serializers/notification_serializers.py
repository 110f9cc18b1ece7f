from rest_framework import serializers

from notifications.models import Notification, NotificationType
from utils.serializers import StrictSerializer


class NotificationSerializer(serializers.ModelSerializer):
    recipientId = serializers.UUIDField(source="recipient_id", read_only=True)
    relatedId = serializers.UUIDField(source="related_id", read_only=True, allow_null=True)
    isRead = serializers.BooleanField(source="is_read", read_only=True)
    readAt = serializers.DateTimeField(source="read_at", read_only=True, allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)

    class Meta:
        model = Notification
        fields = ["id", "recipientId", "type", "message", "relatedId", "isRead", "readAt", "createdAt"]
        read_only_fields = fields


class NotificationListSerializer(serializers.Serializer):
    count = serializers.IntegerField()
    unreadCount = serializers.IntegerField()
    results = NotificationSerializer(many=True)


class SendNotificationRequestSerializer(StrictSerializer):
    recipientId = serializers.UUIDField()
    message = serializers.CharField(max_length=1000, trim_whitespace=True)
    type = serializers.ChoiceField(choices=NotificationType.choices, default=NotificationType.INFO)
    relatedId = serializers.UUIDField(required=False, allow_null=True)
