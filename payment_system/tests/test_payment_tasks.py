from datetime import timedelta

import pytest
from django.test import TestCase
from django.utils import timezone

from marketplace.tests.factories import OrderFactory
from payment_system.models import Order, OrderStatus
from payment_system.Tasks.payment_tasks import expire_stale_processing_orders


@pytest.mark.unit
class ExpireStaleOrdersTaskTest(TestCase):
    def test_sweep_reports_expired_orders(self):
        order = OrderFactory(status=OrderStatus.PROCESSING)
        Order.objects.filter(pk=order.pk).update(updated_at=timezone.now() - timedelta(minutes=30))

        result = expire_stale_processing_orders.apply(kwargs={"timeout_minutes": 10}).get()

        self.assertEqual(result, {"success": True, "expired": 1, "timeout_minutes": 10})
        self.assertEqual(Order.objects.get(pk=order.pk).status, OrderStatus.FAILED)

    def test_default_timeout_comes_from_settings(self):
        with self.settings(PAYMENT_PROCESSING_TIMEOUT_MINUTES=45):
            result = expire_stale_processing_orders.apply().get()

        self.assertEqual(result["timeout_minutes"], 45)
        self.assertEqual(result["expired"], 0)
