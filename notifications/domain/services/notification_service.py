"""
NotificationService - in-app notifications and their email copies.
"""

from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.db import transaction
from django.utils import timezone

from infrastructure.email import EmailException, EmailMessage, EmailServiceInterface
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from notifications.domain.models import Notification, NotificationType
from utils.rbac import Caller

User = get_user_model()

RECENT_LIMIT = 50


class NotificationService(BaseService):
    def __init__(self, email_service: Optional[EmailServiceInterface] = None):
        super().__init__()
        self.email_service = email_service

    # ------------------------------------------------------------------
    # Producers
    # ------------------------------------------------------------------

    def notify(self, recipient_id, kind: str, message: str, related_id=None) -> Notification:
        notification = Notification.objects.create(
            recipient_id=recipient_id, type=kind, message=message, related_id=related_id
        )
        self.logger.debug(f"Notification {notification.id} ({kind}) created for {recipient_id}")
        return notification

    def notify_on_commit(
        self, recipient_id, kind: str, message: str, related_id=None, email_subject: Optional[str] = None
    ) -> None:
        """
        Deliver once the surrounding transaction commits.

        Nothing is recorded when the transaction rolls back. A failing
        delivery is logged by Django and does not affect other callbacks.
        """

        def deliver():
            self.notify(recipient_id, kind, message, related_id)
            if email_subject:
                self._email(recipient_id, email_subject, message)

        transaction.on_commit(deliver, robust=True)

    def _email(self, recipient_id, subject: str, body: str) -> None:
        if self.email_service is None:
            return
        email = User.objects.filter(pk=recipient_id).values_list("email", flat=True).first()
        if not email:
            return
        try:
            self.email_service.send(EmailMessage(subject=subject, body=body, to=[email]))
        except EmailException as e:
            self.logger.warning(f"Notification email to {recipient_id} failed: {e}")

    # ------------------------------------------------------------------
    # Recipient actions
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def list_mine(self, caller: Caller) -> ServiceResult[Dict[str, Any]]:
        queryset = Notification.objects.filter(recipient_id=caller.user_id)
        recent = list(queryset.order_by("-created_at")[:RECENT_LIMIT])
        return service_ok(
            {
                "results": recent,
                "count": len(recent),
                "unreadCount": queryset.filter(is_read=False).count(),
            }
        )

    @BaseService.log_performance
    def mark_read(self, caller: Caller, notification_id) -> ServiceResult[Notification]:
        notification = Notification.objects.filter(pk=notification_id, recipient_id=caller.user_id).first()
        if notification is None:
            return service_err(ErrorCodes.NOTIFICATION_NOT_FOUND, f"Notification {notification_id} not found")

        if not notification.is_read:
            notification.is_read = True
            notification.read_at = timezone.now()
            notification.save(update_fields=["is_read", "read_at"])
        return service_ok(notification)

    @BaseService.log_performance
    def mark_all_read(self, caller: Caller) -> ServiceResult[Dict[str, int]]:
        updated = Notification.objects.filter(recipient_id=caller.user_id, is_read=False).update(
            is_read=True, read_at=timezone.now()
        )
        return service_ok({"updated": updated})

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def send(
        self, caller: Caller, recipient_id, message: str, kind: str = NotificationType.INFO, related_id=None
    ) -> ServiceResult[Notification]:
        if not caller.is_admin:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only admins can send notifications")
        if not User.objects.filter(pk=recipient_id).exists():
            return service_err(ErrorCodes.RECIPIENT_NOT_FOUND, f"User {recipient_id} not found")

        notification = self.notify(recipient_id, kind, message, related_id)
        self.logger.info(f"Admin {caller.user_id} sent notification {notification.id} to {recipient_id}")
        return service_ok(notification)
