from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from infrastructure.container import container
from notifications.api.serializers import (
    NotificationListSerializer,
    NotificationSerializer,
    SendNotificationRequestSerializer,
)
from utils.rbac import Caller
from utils.responses import error_response, success_response
from utils.serializers import ErrorResponseSerializer


class NotificationListAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_list",
        summary="List my notifications",
        description="The caller's 50 most recent notifications, newest first, plus the unread count.",
        responses={200: OpenApiResponse(response=NotificationListSerializer, description="Notifications")},
        tags=["Notifications"],
    )
    def get(self, request):
        result = container.notification_service().list_mine(Caller.from_request(request))
        if not result.ok:
            return error_response(result)
        return success_response(
            NotificationSerializer(result.value["results"], many=True).data,
            count=result.value["count"],
            unreadCount=result.value["unreadCount"],
        )


class NotificationReadAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_mark_read",
        summary="Mark a notification as read",
        request=None,
        responses={
            200: OpenApiResponse(response=NotificationSerializer, description="Notification marked read"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Not found or not yours"),
        },
        tags=["Notifications"],
    )
    def put(self, request, pk):
        result = container.notification_service().mark_read(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(NotificationSerializer(result.value).data)


class NotificationReadAllAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_mark_all_read",
        summary="Mark all my notifications as read",
        request=None,
        responses={200: OpenApiResponse(description="Number of notifications updated")},
        tags=["Notifications"],
    )
    def put(self, request):
        result = container.notification_service().mark_all_read(Caller.from_request(request))
        if not result.ok:
            return error_response(result)
        return success_response(result.value, "All notifications marked as read")


class NotificationSendAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="notifications_send",
        summary="Send a notification to a user (admin)",
        request=SendNotificationRequestSerializer,
        responses={
            201: OpenApiResponse(response=NotificationSerializer, description="Notification sent"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin only"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Recipient not found"),
        },
        tags=["Notifications - Admin"],
    )
    def post(self, request):
        serializer = SendNotificationRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = container.notification_service().send(
            Caller.from_request(request),
            recipient_id=data["recipientId"],
            message=data["message"],
            kind=data["type"],
            related_id=data.get("relatedId"),
        )
        if not result.ok:
            return error_response(result)
        return success_response(
            NotificationSerializer(result.value).data, "Notification sent successfully", status.HTTP_201_CREATED
        )
