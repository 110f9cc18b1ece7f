"""
SMTP Email Service
==================

EmailServiceInterface on top of Django's configured email backend.
"""

import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives

from .interface import EmailException, EmailMessage, EmailServiceInterface

logger = logging.getLogger(__name__)


class SMTPEmailService(EmailServiceInterface):
    """
    Django email backend implementation.

    Configuration (in settings.py):
        EMAIL_BACKEND: Django email backend class
        EMAIL_HOST, EMAIL_PORT: SMTP server
        EMAIL_HOST_USER, EMAIL_HOST_PASSWORD: SMTP credentials
        EMAIL_USE_TLS: Use TLS encryption
        DEFAULT_FROM_EMAIL: Default sender address
    """

    def __init__(self):
        self.default_from = getattr(settings, "DEFAULT_FROM_EMAIL", "noreply@codemart.dev")

    def send(self, message: EmailMessage) -> bool:
        email = EmailMultiAlternatives(
            subject=message.subject,
            body=message.body,
            from_email=message.from_email or self.default_from,
            to=message.to,
        )
        if message.html_body:
            email.attach_alternative(message.html_body, "text/html")

        try:
            sent = email.send(fail_silently=False) > 0
        except Exception as e:
            logger.error(f"Failed to send email to {message.to}: {e}")
            raise EmailException(f"Email send failed: {e}") from e

        if sent:
            logger.info(f"Email sent to {message.to}")
        else:
            logger.warning(f"Email backend accepted nothing for {message.to}")
        return sent
