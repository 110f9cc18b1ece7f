"""
WebhookService - 2Checkout Instant Notification Service (INS) handling.

Only ``INVOICE_STATUS_CHANGED`` with ``invoice_status=deposited`` changes
state, and it goes through the same settlement path as a direct charge.
Every verified notification is acknowledged, so the gateway stops resending
messages that can never succeed.
"""

import uuid
from typing import Any, Mapping

from django.utils import timezone

from infrastructure.observability.tracing import get_tracer
from infrastructure.payments import InvalidSignatureError, PaymentProviderInterface
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from payment_system.domain.exceptions import FinalizationConflict
from payment_system.domain.models import Order
from payment_system.infra.observability.metrics import webhook_events_total
from utils.logging_utils import sanitize_payload

from .payment_service import PaymentService

tracer = get_tracer(__name__)

SETTLEMENT_MESSAGE = "INVOICE_STATUS_CHANGED"
SETTLED_INVOICE_STATUS = "deposited"


def ins_acknowledgement() -> str:
    return f"<EPAYMENT>{timezone.now().strftime('%Y%m%d%H%M%S')}</EPAYMENT>"


class WebhookService(BaseService):
    def __init__(self, payment_provider: PaymentProviderInterface, payment_service: PaymentService):
        super().__init__()
        self.payment_provider = payment_provider
        self.payment_service = payment_service

    @BaseService.log_performance
    def handle_ins(self, params: Mapping[str, Any]) -> ServiceResult[str]:
        """
        Process one INS notification.

        Returns the acknowledgement body on success, INVALID_SIGNATURE when
        the hash does not verify (nothing is changed in that case).
        """
        message_type = params.get("message_type")
        with tracer.start_as_current_span("payment.webhook.ins") as span:
            span.set_attribute("ins.message_type", str(message_type))

            try:
                self.payment_provider.verify_notification(params)
            except InvalidSignatureError as e:
                webhook_events_total.labels(result="invalid_signature").inc()
                self.logger.warning(f"Rejected INS {message_type} (sale {params.get('sale_id')}): {e.message}")
                return service_err(ErrorCodes.INVALID_SIGNATURE, "Invalid notification signature")

            if message_type != SETTLEMENT_MESSAGE or params.get("invoice_status") != SETTLED_INVOICE_STATUS:
                webhook_events_total.labels(result="ignored").inc()
                self.logger.info(f"INS {message_type}/{params.get('invoice_status')} acknowledged without action")
                return service_ok(ins_acknowledgement())

            order_id = params.get("vendor_order_id")
            try:
                uuid.UUID(str(order_id))
            except ValueError:
                webhook_events_total.labels(result="unknown_order").inc()
                self.logger.warning(f"INS references malformed order id {order_id!r}")
                return service_ok(ins_acknowledgement())

            payload = sanitize_payload(dict(params))
            try:
                _, changed = self.payment_service.finalize_order_payment(
                    order_id, str(params.get("sale_id")), payload, source="ins"
                )
            except Order.DoesNotExist:
                webhook_events_total.labels(result="unknown_order").inc()
                self.logger.warning(f"INS settlement for unknown order {order_id}")
                return service_ok(ins_acknowledgement())
            except FinalizationConflict as e:
                webhook_events_total.labels(result="conflict").inc()
                self.logger.error(f"INS settlement for order {order_id} could not transfer the project: {e.message}")
                return service_ok(ins_acknowledgement())

            webhook_events_total.labels(result="settled" if changed else "duplicate").inc()
            span.set_attribute("ins.changed", changed)
            return service_ok(ins_acknowledgement())
