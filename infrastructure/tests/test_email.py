"""
Email Infrastructure Tests
===========================
"""

from unittest.mock import patch

from django.core import mail
from django.test import TestCase, override_settings

from infrastructure.email import (
    EmailException,
    EmailFactory,
    EmailMessage,
    EmailServiceInterface,
    MockEmailService,
    SMTPEmailService,
)


class EmailServiceInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            EmailServiceInterface()


class MockEmailServiceTest(TestCase):
    def setUp(self):
        self.service = MockEmailService()

    def test_send_records_message(self):
        message = EmailMessage(subject="Project approved", body="Your project is live.", to=["dev@example.com"])

        self.assertTrue(self.service.send(message))
        self.assertEqual(len(self.service.sent_messages), 1)
        self.assertIs(self.service.get_last_message(), message)

    def test_send_bulk_counts_accepted(self):
        messages = [EmailMessage(subject=f"S{i}", body="b", to=[f"u{i}@example.com"]) for i in range(3)]

        self.assertEqual(self.service.send_bulk(messages), 3)

    def test_clear_sent_messages(self):
        self.service.send(EmailMessage(subject="s", body="b", to=["a@example.com"]))
        self.service.clear_sent_messages()

        self.assertIsNone(self.service.get_last_message())


@override_settings(EMAIL_BACKEND="django.core.mail.backends.locmem.EmailBackend", DEFAULT_FROM_EMAIL="shop@codemart.dev")
class SMTPEmailServiceTest(TestCase):
    def test_send_uses_django_backend(self):
        service = SMTPEmailService()
        sent = service.send(
            EmailMessage(subject="You made a sale", body="Plain", to=["seller@example.com"], html_body="<p>Sold</p>")
        )

        self.assertTrue(sent)
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].from_email, "shop@codemart.dev")
        self.assertEqual(mail.outbox[0].alternatives[0][1], "text/html")

    @patch("infrastructure.email.smtp_service.EmailMultiAlternatives.send", side_effect=OSError("SMTP down"))
    def test_backend_failure_raises_email_exception(self, _send):
        with self.assertRaises(EmailException):
            SMTPEmailService().send(EmailMessage(subject="s", body="b", to=["x@example.com"]))


class EmailFactoryTest(TestCase):
    @override_settings(EMAIL_SERVICE_BACKEND="mock")
    def test_create_mock_from_settings(self):
        self.assertIsInstance(EmailFactory.create(), MockEmailService)

    def test_create_smtp_explicitly(self):
        self.assertIsInstance(EmailFactory.create("smtp"), SMTPEmailService)

    def test_invalid_backend(self):
        with self.assertRaises(ValueError):
            EmailFactory.create("carrier-pigeon")
