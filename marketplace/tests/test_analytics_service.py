from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.utils import timezone

from marketplace.catalog.domain.services import AnalyticsService
from marketplace.models import Project, ProjectCategory
from marketplace.tests.factories import AdminFactory, OrderFactory, ProjectFactory, SellerFactory, UserFactory
from payment_system.models import OrderStatus

User = get_user_model()


def record_sale(price, paid_at=None, **project_kwargs):
    """A sold project together with its paid order."""
    buyer = UserFactory()
    project = ProjectFactory(approved=True, sold_to=buyer, price=Decimal(price), **project_kwargs)
    return OrderFactory(buyer=buyer, project=project, paid=True, paid_at=paid_at or timezone.now())


class AnalyticsServiceTest(TestCase):
    def setUp(self):
        self.service = AnalyticsService()

    def test_dashboard_counts_only_paid_orders(self):
        record_sale("100.00")
        record_sale("50.00")
        OrderFactory()
        OrderFactory(status=OrderStatus.FAILED)

        stats = self.service.dashboard().value

        self.assertEqual(stats["totalRevenue"], Decimal("150.00"))
        self.assertEqual(stats["totalSales"], 2)
        self.assertEqual(stats["totalUsers"], User.objects.count())
        self.assertEqual(stats["totalProjects"], Project.objects.count())

    def test_dashboard_without_sales(self):
        stats = self.service.dashboard().value

        self.assertEqual(stats["totalRevenue"], Decimal("0.00"))
        self.assertEqual(stats["totalSales"], 0)

    def test_project_stats(self):
        cheap = record_sale("50.00")
        pricey = record_sale("100.00")
        ProjectFactory(category=ProjectCategory.DESIGN)

        stats = self.service.project_stats().value

        self.assertEqual(stats["byCategory"]["web-development"], 2)
        self.assertEqual(stats["byCategory"]["design"], 1)
        self.assertEqual(stats["byCategory"]["other"], 0)
        self.assertEqual(stats["byStatus"]["approved"], 2)
        self.assertEqual(stats["byStatus"]["draft"], 1)
        self.assertEqual(
            [row["projectId"] for row in stats["topSelling"]], [pricey.project_id, cheap.project_id]
        )
        self.assertEqual(stats["topSelling"][0]["salesCount"], 1)
        self.assertEqual(stats["topSelling"][0]["totalRevenue"], Decimal("100.00"))
        self.assertEqual(stats["topSelling"][0]["title"], pricey.project.title)

    def test_user_stats(self):
        UserFactory()
        SellerFactory()
        AdminFactory()
        veteran = UserFactory()
        User.objects.filter(pk=veteran.pk).update(date_joined=timezone.now() - timedelta(days=40))

        stats = self.service.user_stats().value

        self.assertEqual(stats["byRole"], {"buyer": 2, "seller": 1, "admin": 1})
        self.assertEqual(stats["newUsersLast30Days"], 3)

    def test_sales_stats(self):
        now = timezone.now()
        today = record_sale("100.00", paid_at=now)
        earlier = record_sale("50.00", paid_at=now - timedelta(days=2))
        record_sale("70.00", paid_at=now - timedelta(days=40))

        stats = self.service.sales_stats().value

        trend = stats["revenueTrend"]
        self.assertEqual(
            [point["date"] for point in trend],
            [timezone.localtime(earlier.paid_at).date(), timezone.localtime(today.paid_at).date()],
        )
        self.assertEqual([point["amount"] for point in trend], [Decimal("50.00"), Decimal("100.00")])
        self.assertEqual(len(stats["recentTransactions"]), 3)
        latest = stats["recentTransactions"][0]
        self.assertEqual(latest["orderId"], today.pk)
        self.assertEqual(latest["buyerEmail"], today.buyer.email)
        self.assertEqual(latest["transactionId"], today.transaction_id)
