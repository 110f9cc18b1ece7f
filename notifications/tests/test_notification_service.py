from unittest.mock import MagicMock

from django.test import TestCase

from infrastructure.email import EmailException, MockEmailService
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import AdminFactory, NotificationFactory, UserFactory
from notifications.domain.services import NotificationService
from notifications.models import Notification, NotificationType
from utils.rbac import Caller


class NotificationServiceTest(TestCase):
    def setUp(self):
        self.email = MockEmailService()
        self.service = NotificationService(email_service=self.email)
        self.user = UserFactory(email="reader@example.com")
        self.caller = Caller.for_user(self.user)

    def test_notify_on_commit_delivers_after_commit(self):
        with self.captureOnCommitCallbacks(execute=True) as callbacks:
            self.service.notify_on_commit(
                self.user.id, NotificationType.PROJECT_UPDATE, "Approved", email_subject="Project approved"
            )
            self.assertFalse(Notification.objects.exists())

        self.assertEqual(len(callbacks), 1)
        self.assertEqual(Notification.objects.get().type, NotificationType.PROJECT_UPDATE)
        self.assertEqual(self.email.get_last_message().to, ["reader@example.com"])
        self.assertEqual(self.email.get_last_message().subject, "Project approved")

    def test_notify_on_commit_without_subject_sends_no_email(self):
        with self.captureOnCommitCallbacks(execute=True):
            self.service.notify_on_commit(self.user.id, NotificationType.INFO, "Hello")

        self.assertEqual(Notification.objects.count(), 1)
        self.assertEqual(self.email.sent_messages, [])

    def test_email_failure_keeps_the_notification(self):
        failing = MagicMock()
        failing.send.side_effect = EmailException("SMTP down")
        service = NotificationService(email_service=failing)

        with self.captureOnCommitCallbacks(execute=True):
            service.notify_on_commit(self.user.id, NotificationType.INFO, "Hello", email_subject="Hi")

        self.assertEqual(Notification.objects.count(), 1)
        failing.send.assert_called_once()

    def test_list_mine_counts_unread(self):
        NotificationFactory.create_batch(2, recipient=self.user)
        NotificationFactory(recipient=self.user, is_read=True)
        NotificationFactory()

        data = self.service.list_mine(self.caller).value

        self.assertEqual(data["count"], 3)
        self.assertEqual(data["unreadCount"], 2)

    def test_mark_read_is_idempotent(self):
        notification = NotificationFactory(recipient=self.user)

        first = self.service.mark_read(self.caller, notification.id).value
        read_at = first.read_at
        second = self.service.mark_read(self.caller, notification.id).value

        self.assertTrue(second.is_read)
        self.assertEqual(second.read_at, read_at)

    def test_mark_read_of_someone_elses_notification(self):
        notification = NotificationFactory()

        result = self.service.mark_read(self.caller, notification.id)

        self.assertEqual(result.error, ErrorCodes.NOTIFICATION_NOT_FOUND)
        notification.refresh_from_db()
        self.assertFalse(notification.is_read)

    def test_mark_all_read(self):
        NotificationFactory.create_batch(3, recipient=self.user)
        other = NotificationFactory()

        result = self.service.mark_all_read(self.caller)

        self.assertEqual(result.value, {"updated": 3})
        self.assertFalse(Notification.objects.filter(recipient=self.user, is_read=False).exists())
        other.refresh_from_db()
        self.assertFalse(other.is_read)

    def test_send_requires_admin(self):
        result = self.service.send(self.caller, UserFactory().id, "Hi")

        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)

    def test_send_to_unknown_user(self):
        result = self.service.send(
            Caller.for_user(AdminFactory()), "00000000-0000-0000-0000-000000000000", "Hi"
        )

        self.assertEqual(result.error, ErrorCodes.RECIPIENT_NOT_FOUND)

    def test_admin_send(self):
        result = self.service.send(Caller.for_user(AdminFactory()), self.user.id, "Maintenance tonight", "warning")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.recipient_id, self.user.id)
        self.assertEqual(result.value.type, "warning")
