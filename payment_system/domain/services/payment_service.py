"""
PaymentService - orders, gateway charges and settlement.

Flow:
    1. ``create_order`` snapshots the project price into a pending order.
    2. ``execute_payment`` moves the order to processing with a conditional
       update, charges the gateway outside any transaction, then settles.
    3. ``finalize_order_payment`` is the single settlement path, shared with
       the INS webhook: it locks the order, transfers the project and marks the
       order paid in one transaction.

Orders left in processing are returned to failed by the stale-order sweeper,
so a payment attempt can always be retried. An approved charge is recorded on
the order before settlement; a retry settles with that reference instead of
charging the card again.
"""

import time
from datetime import timedelta
from typing import Any, Dict, Optional, Tuple

from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone

from infrastructure.observability.tracing import get_tracer
from infrastructure.payments import (
    ChargeResult,
    PaymentDeclinedError,
    PaymentGatewayError,
    PaymentProviderInterface,
)
from marketplace.catalog.domain.models import Project
from marketplace.catalog.domain.services.listing_service import mark_project_sold
from marketplace.catalog.domain.services.pagination import paginate
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from payment_system.domain.exceptions import FinalizationConflict
from payment_system.domain.models import OPEN_STATUSES, PAYABLE_STATUSES, Order, OrderStatus
from payment_system.infra.observability.metrics import (
    gateway_latency_seconds,
    payment_attempts_total,
    payment_volume_total,
    stale_orders_expired_total,
)
from utils.logging_utils import sanitize_payload
from utils.rbac import Caller

tracer = get_tracer(__name__)


def gateway_log_entry(event: str, payload: Optional[Dict[str, Any]] = None, **extra) -> Dict[str, Any]:
    """Entry appended to ``Order.gateway_logs``; payloads are always sanitised."""
    entry = {"event": event, "at": timezone.now().isoformat(), "payload": sanitize_payload(payload or {})}
    entry.update(extra)
    return entry


class PaymentService(BaseService):
    """
    Service for orders and payment execution.

    Dependencies:
    - PaymentProviderInterface: the card gateway (2Checkout)
    - NotificationService: optional; buyer/owner notifications after commit
    """

    def __init__(self, payment_provider: PaymentProviderInterface, notification_service=None):
        super().__init__()
        self.payment_provider = payment_provider
        self.notification_service = notification_service

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def create_order(
        self, caller: Caller, project_id, billing_details: Optional[Dict[str, Any]] = None
    ) -> ServiceResult[Tuple[Order, bool]]:
        """
        Create a pending order for a listed project.

        Returns ``(order, created)``. An open order for the same buyer and
        project is reused instead of creating a duplicate, as is a failed order
        still holding an approved charge.
        """
        project = Project.objects.filter(pk=project_id).first()
        if project is None:
            return service_err(ErrorCodes.LISTING_NOT_FOUND, f"Listing {project_id} not found")
        if caller.owns(project.owner_id):
            return service_err(ErrorCodes.SELF_PURCHASE, "You cannot purchase your own project")
        if project.sold_to_id is not None:
            return service_err(ErrorCodes.ALREADY_SOLD, "This project has already been sold")
        if not project.is_available:
            return service_err(ErrorCodes.NOT_FOR_SALE, "This project is not for sale")

        existing = self._reusable_order(caller.user_id, project.pk)
        if existing is not None:
            self.logger.info(f"Reusing order {existing.id} ({existing.status}) for buyer {caller.user_id}")
            return service_ok((existing, False))

        try:
            with transaction.atomic():
                order = Order.objects.create(
                    buyer_id=caller.user_id,
                    project=project,
                    project_title=project.title,
                    amount=project.price,
                    currency=getattr(settings, "PAYMENT_CURRENCY", "USD"),
                    billing_details=billing_details or {},
                )
        except IntegrityError:
            # A concurrent checkout opened the order first
            existing = self._reusable_order(caller.user_id, project.pk)
            if existing is None:
                raise
            return service_ok((existing, False))
        self.logger.info(f"Order {order.id} created for project {project.pk} by {caller.user_id} (${order.amount})")
        return service_ok((order, True))

    @staticmethod
    def _reusable_order(buyer_id, project_id) -> Optional[Order]:
        return (
            Order.objects.filter(buyer_id=buyer_id, project_id=project_id)
            .filter(
                Q(status__in=OPEN_STATUSES)
                | Q(status=OrderStatus.FAILED, approved_transaction_id__isnull=False)
            )
            .order_by("-created_at")
            .first()
        )

    @BaseService.log_performance
    def list_orders(self, caller: Caller, status: Optional[str] = None, page: Any = 1, limit: Any = 10):
        """The caller's orders; admins see every order."""
        queryset = Order.objects.select_related("buyer")
        if not caller.is_admin:
            queryset = queryset.filter(buyer_id=caller.user_id)
        if status:
            if status not in OrderStatus.values:
                return service_err(
                    ErrorCodes.INVALID_INPUT,
                    f"Unknown order status '{status}'",
                    errors=[{"field": "status", "message": f"Must be one of: {', '.join(OrderStatus.values)}"}],
                )
            queryset = queryset.filter(status=status)
        return service_ok(paginate(queryset.order_by("-created_at", "-id"), page, limit))

    @BaseService.log_performance
    def get_order(self, caller: Caller, order_id) -> ServiceResult[Order]:
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
        if not caller.is_admin and not caller.owns(order.buyer_id):
            return service_err(ErrorCodes.NOT_ORDER_OWNER, "You can only view your own orders")
        return service_ok(order)

    # ------------------------------------------------------------------
    # Payment execution
    # ------------------------------------------------------------------

    @BaseService.log_performance
    def execute_payment(
        self, caller: Caller, order_id, token: str, billing_details: Optional[Dict[str, Any]] = None
    ) -> ServiceResult[Order]:
        with tracer.start_as_current_span("payment.execute") as span:
            span.set_attribute("order.id", str(order_id))

            order = Order.objects.select_related("project").filter(pk=order_id).first()
            if order is None:
                return service_err(ErrorCodes.ORDER_NOT_FOUND, f"Order {order_id} not found")
            if not caller.owns(order.buyer_id):
                return service_err(ErrorCodes.NOT_ORDER_OWNER, "You can only pay for your own orders")
            if order.status == OrderStatus.PAID:
                return service_err(ErrorCodes.ORDER_ALREADY_PAID, "This order has already been paid")
            if order.status not in PAYABLE_STATUSES:
                return service_err(
                    ErrorCodes.PAYMENT_IN_PROGRESS, f"Cannot pay an order in {order.status} status"
                )

            project = order.project
            if project is None or project.sold_to_id is not None:
                return service_err(ErrorCodes.ALREADY_SOLD, "This project has already been sold")
            if not project.is_available:
                return service_err(ErrorCodes.NOT_FOR_SALE, "This project is no longer for sale")

            billing = billing_details or order.billing_details or {}
            try:
                with transaction.atomic():
                    claimed = Order.objects.filter(pk=order.pk, status__in=PAYABLE_STATUSES).update(
                        status=OrderStatus.PROCESSING, billing_details=billing, updated_at=timezone.now()
                    )
            except IntegrityError:
                payment_attempts_total.labels(outcome="in_progress").inc()
                return service_err(
                    ErrorCodes.PAYMENT_IN_PROGRESS, "Another order for this project is already being paid"
                )
            if not claimed:
                payment_attempts_total.labels(outcome="in_progress").inc()
                return service_err(ErrorCodes.PAYMENT_IN_PROGRESS, "A payment for this order is already in progress")

            if order.approved_transaction_id:
                self.logger.info(
                    f"Order {order.pk} already approved as {order.approved_transaction_id}; settling without a new charge"
                )
                span.set_attribute("payment.retry_settlement", True)
                charge = ChargeResult(transaction_id=order.approved_transaction_id, raw={})
                source = "retry"
            else:
                try:
                    charge = self._charge(order, token, billing)
                except PaymentDeclinedError as e:
                    span.set_attribute("payment.outcome", "declined")
                    self._mark_failed(order.pk, gateway_log_entry("declined", e.raw, message=e.message))
                    self._notify_failure(order)
                    payment_attempts_total.labels(outcome="declined").inc()
                    return service_err(ErrorCodes.PAYMENT_DECLINED, e.message)
                except PaymentGatewayError as e:
                    span.set_attribute("payment.outcome", "gateway_error")
                    span.record_exception(e)
                    self._mark_failed(order.pk, gateway_log_entry("gateway_error", e.raw, message=e.message))
                    self._notify_failure(order)
                    payment_attempts_total.labels(outcome="gateway_error").inc()
                    return service_err(
                        ErrorCodes.GATEWAY_ERROR, "Payment gateway unavailable, please try again later"
                    )
                source = "charge"

            try:
                if source == "charge":
                    self._record_approval(order.pk, charge.transaction_id)
                paid_order, _ = self.finalize_order_payment(order.pk, charge.transaction_id, charge.raw, source=source)
            except FinalizationConflict as e:
                self.logger.error(
                    f"Order {order.pk} approved as {charge.transaction_id} but could not be settled: {e.message}"
                )
                self._mark_failed(order.pk, self._awaiting_settlement(charge, e.message))
                payment_attempts_total.labels(outcome="conflict").inc()
                return service_err(
                    ErrorCodes.ALREADY_SOLD,
                    "The project was sold before your payment settled. The charge will be reviewed.",
                )
            except DatabaseError as e:
                self.logger.error(
                    f"Order {order.pk} approved as {charge.transaction_id} but settlement failed: {e}", exc_info=True
                )
                self._mark_failed(order.pk, self._awaiting_settlement(charge, "settlement failed"))
                payment_attempts_total.labels(outcome="settlement_error").inc()
                return service_err(ErrorCodes.INTERNAL_ERROR, f"Settlement of order {order.pk} failed: {e}")

            span.set_attribute("payment.outcome", "approved")
            payment_attempts_total.labels(outcome="approved").inc()
            return service_ok(paid_order)

    def _charge(self, order: Order, token: str, billing: Dict[str, Any]) -> ChargeResult:
        started = time.perf_counter()
        try:
            return self.payment_provider.charge(
                order_id=str(order.pk),
                amount=order.amount,
                currency=order.currency,
                token=token,
                billing_details=billing,
            )
        finally:
            gateway_latency_seconds.observe(time.perf_counter() - started)

    def _record_approval(self, order_id, transaction_id: str) -> None:
        Order.objects.filter(pk=order_id, status=OrderStatus.PROCESSING).update(
            approved_transaction_id=transaction_id, updated_at=timezone.now()
        )

    @staticmethod
    def _awaiting_settlement(charge: ChargeResult, reason: str) -> Dict[str, Any]:
        return gateway_log_entry(
            "approved_awaiting_settlement", charge.raw, transaction_id=charge.transaction_id, reason=reason
        )

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def finalize_order_payment(
        self, order_id, transaction_id: str, payload: Optional[Dict[str, Any]] = None, source: str = "charge"
    ) -> Tuple[Order, bool]:
        """
        Settle an approved payment.

        Returns ``(order, changed)``; ``changed`` is False when the order was
        already paid or has been refunded. Raises ``Order.DoesNotExist`` for
        unknown orders and ``FinalizationConflict`` when the project can no
        longer go to this buyer. Either way nothing is written.
        """
        with tracer.start_as_current_span("payment.finalize") as span:
            span.set_attribute("order.id", str(order_id))
            span.set_attribute("payment.source", source)

            with transaction.atomic():
                order = Order.objects.select_for_update().get(pk=order_id)
                if order.status in (OrderStatus.PAID, OrderStatus.REFUNDED):
                    self.logger.info(f"Order {order.pk} already {order.status}; {source} settlement ignored")
                    return order, False

                if order.project_id is None:
                    raise FinalizationConflict(order.pk, "Project no longer exists")
                if not mark_project_sold(order.project_id, order.buyer_id):
                    raise FinalizationConflict(order.pk, f"Project {order.project_id} is no longer available")

                now = timezone.now()
                order.status = OrderStatus.PAID
                order.transaction_id = transaction_id
                order.paid_at = now
                order.updated_at = now
                order.gateway_logs = list(order.gateway_logs or []) + [
                    gateway_log_entry(f"{source}_settled", payload, transaction_id=transaction_id)
                ]
                order.save(update_fields=["status", "transaction_id", "paid_at", "updated_at", "gateway_logs"])

                self._notify_sale(order)

        payment_volume_total.labels(currency=order.currency, status="paid").inc(float(order.amount))
        self.logger.info(f"Order {order.pk} paid ({transaction_id}) via {source}")
        return order, True

    def _mark_failed(self, order_id, log_entry: Dict[str, Any]) -> Optional[Order]:
        with transaction.atomic():
            order = Order.objects.select_for_update().filter(pk=order_id, status=OrderStatus.PROCESSING).first()
            if order is None:
                return None
            order.status = OrderStatus.FAILED
            order.updated_at = timezone.now()
            order.gateway_logs = list(order.gateway_logs or []) + [log_entry]
            order.save(update_fields=["status", "updated_at", "gateway_logs"])
        self.logger.info(f"Order {order_id} marked failed ({log_entry['event']})")
        return order

    # ------------------------------------------------------------------
    # Housekeeping
    # ------------------------------------------------------------------

    def expire_stale_processing_orders(self, timeout_minutes: Optional[int] = None) -> int:
        """
        Move orders stuck in processing past the timeout back to failed.

        Each order gets a ``stale_expired`` log entry and the buyer is told the
        payment can be retried. Returns the number of orders expired.
        """
        minutes = timeout_minutes or getattr(settings, "PAYMENT_PROCESSING_TIMEOUT_MINUTES", 15)
        cutoff = timezone.now() - timedelta(minutes=minutes)
        stale_ids = list(
            Order.objects.filter(status=OrderStatus.PROCESSING, updated_at__lt=cutoff).values_list("pk", flat=True)
        )

        expired = 0
        for order_id in stale_ids:
            order = self._mark_failed(order_id, gateway_log_entry("stale_expired", timeout_minutes=minutes))
            if order is None:
                continue
            expired += 1
            self._notify_failure(order)

        if expired:
            stale_orders_expired_total.inc(expired)
            self.logger.warning(f"Expired {expired} orders stuck in processing for over {minutes} minutes")
        return expired

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def _notify_sale(self, order: Order) -> None:
        if self.notification_service is None:
            return
        owner_id = Project.objects.filter(pk=order.project_id).values_list("owner_id", flat=True).first()
        if owner_id is not None:
            self.notification_service.notify_on_commit(
                recipient_id=owner_id,
                kind="order_status",
                message=f'Your project "{order.project_title}" has been sold.',
                related_id=order.pk,
                email_subject="You made a sale",
            )
        self.notification_service.notify_on_commit(
            recipient_id=order.buyer_id,
            kind="success",
            message=f'Payment received for "{order.project_title}".',
            related_id=order.pk,
            email_subject="Payment confirmation",
        )

    def _notify_failure(self, order: Order) -> None:
        if self.notification_service is None:
            return
        self.notification_service.notify_on_commit(
            recipient_id=order.buyer_id,
            kind="error",
            message=f'Payment for "{order.project_title}" failed. You can try again.',
            related_id=order.pk,
        )
