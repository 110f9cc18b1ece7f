from .payment_service import PaymentService
from .webhook_service import WebhookService


__all__ = ["PaymentService", "WebhookService"]
