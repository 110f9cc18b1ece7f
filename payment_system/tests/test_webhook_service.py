from unittest.mock import MagicMock

from django.test import TestCase

from infrastructure.payments import ChargeResult, TwoCheckoutProvider
from infrastructure.payments.twocheckout_provider import compute_ins_hash
from marketplace.models import Project
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import OrderFactory, ProjectFactory, UserFactory
from payment_system.domain.services import PaymentService, WebhookService
from payment_system.models import Order, OrderStatus
from utils.rbac import Caller

VENDOR_ID = "901234567"


def ins_params(order_id, sale_id="250335346812", invoice_id="250335346821", secret="tango", **overrides):
    params = {
        "message_type": "INVOICE_STATUS_CHANGED",
        "invoice_status": "deposited",
        "vendor_id": VENDOR_ID,
        "sale_id": sale_id,
        "invoice_id": invoice_id,
        "vendor_order_id": str(order_id),
        "customer_email": "buyer@example.com",
    }
    params["md5_hash"] = compute_ins_hash(sale_id, VENDOR_ID, invoice_id, secret)
    params.update(overrides)
    return params


class WebhookServiceTest(TestCase):
    def setUp(self):
        provider = TwoCheckoutProvider()
        self.payment_service = PaymentService(payment_provider=MagicMock(), notification_service=None)
        self.service = WebhookService(payment_provider=provider, payment_service=self.payment_service)

        self.buyer = UserFactory()
        self.project = ProjectFactory(listed=True)
        self.order = OrderFactory(buyer=self.buyer, project=self.project, status=OrderStatus.PROCESSING)

    def test_deposited_invoice_settles_the_order(self):
        result = self.service.handle_ins(ins_params(self.order.pk))

        self.assertTrue(result.ok)
        self.assertRegex(result.value, r"^<EPAYMENT>\d{14}</EPAYMENT>$")
        self.order.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PAID)
        self.assertEqual(self.order.transaction_id, "250335346812")
        self.assertEqual(self.order.gateway_logs[-1]["event"], "ins_settled")
        self.assertEqual(self.project.sold_to_id, self.buyer.id)

    def test_duplicate_notification_changes_nothing(self):
        self.service.handle_ins(ins_params(self.order.pk))
        self.order.refresh_from_db()
        paid_at = self.order.paid_at

        result = self.service.handle_ins(ins_params(self.order.pk))

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.assertEqual(self.order.paid_at, paid_at)
        self.assertEqual(len(self.order.gateway_logs), 1)

    def test_bad_hash_is_rejected_without_side_effects(self):
        result = self.service.handle_ins(ins_params(self.order.pk, secret="foxtrot"))

        self.assertFalse(result.ok)
        self.assertEqual(result.error, ErrorCodes.INVALID_SIGNATURE)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PROCESSING)
        self.assertIsNone(Project.objects.get(pk=self.project.pk).sold_to_id)

    def test_missing_hash_is_rejected(self):
        params = ins_params(self.order.pk)
        del params["md5_hash"]

        self.assertEqual(self.service.handle_ins(params).error, ErrorCodes.INVALID_SIGNATURE)

    def test_other_messages_are_acknowledged_without_action(self):
        result = self.service.handle_ins(ins_params(self.order.pk, message_type="FRAUD_STATUS_CHANGED"))

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PROCESSING)

    def test_non_deposited_status_is_acknowledged_without_action(self):
        result = self.service.handle_ins(ins_params(self.order.pk, invoice_status="pending"))

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PROCESSING)

    def test_unknown_order_is_acknowledged(self):
        result = self.service.handle_ins(ins_params("00000000-0000-0000-0000-000000000000"))

        self.assertTrue(result.ok)

    def test_malformed_order_id_is_acknowledged(self):
        result = self.service.handle_ins(ins_params("order-42"))

        self.assertTrue(result.ok)

    def test_conflict_is_acknowledged_and_order_untouched(self):
        Project.objects.filter(pk=self.project.pk).update(is_for_sale=False, sold_to=UserFactory())

        result = self.service.handle_ins(ins_params(self.order.pk))

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PROCESSING)

    def test_settles_order_failed_after_an_approved_charge(self):
        Order.objects.filter(pk=self.order.pk).update(
            status=OrderStatus.FAILED,
            approved_transaction_id="250335346812",
            gateway_logs=[{"event": "approved_awaiting_settlement", "transaction_id": "250335346812"}],
        )

        result = self.service.handle_ins(ins_params(self.order.pk))

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.project.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.PAID)
        self.assertEqual(self.order.transaction_id, "250335346812")
        self.assertEqual(
            [entry["event"] for entry in self.order.gateway_logs], ["approved_awaiting_settlement", "ins_settled"]
        )
        self.assertEqual(self.project.sold_to_id, self.buyer.id)

    def test_refunded_order_is_acknowledged_and_left_refunded(self):
        Order.objects.filter(pk=self.order.pk).update(status=OrderStatus.REFUNDED, transaction_id="250335346812")

        result = self.service.handle_ins(ins_params(self.order.pk))

        self.assertTrue(result.ok)
        self.order.refresh_from_db()
        self.assertEqual(self.order.status, OrderStatus.REFUNDED)
        self.assertIsNone(Project.objects.get(pk=self.project.pk).sold_to_id)

    def test_notification_arriving_during_the_charge_settles_once(self):
        project = ProjectFactory(listed=True)
        order = OrderFactory(buyer=self.buyer, project=project)
        provider = MagicMock()
        payment_service = PaymentService(payment_provider=provider, notification_service=None)
        webhook_service = WebhookService(payment_provider=TwoCheckoutProvider(), payment_service=payment_service)
        ins_results = []

        def charge_while_ins_arrives(**kwargs):
            ins_results.append(webhook_service.handle_ins(ins_params(order.pk, sale_id="250335346899")))
            return ChargeResult(transaction_id="250335346899", raw={})

        provider.charge.side_effect = charge_while_ins_arrives

        result = payment_service.execute_payment(Caller.for_user(self.buyer), order.pk, "tok")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.status, OrderStatus.PAID)
        self.assertTrue(ins_results[0].ok)
        order.refresh_from_db()
        project.refresh_from_db()
        self.assertEqual(order.transaction_id, "250335346899")
        self.assertEqual([entry["event"] for entry in order.gateway_logs], ["ins_settled"])
        self.assertEqual(project.sold_to_id, self.buyer.id)
