from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.tests.factories import AdminFactory, OrderFactory, ProjectFactory, UserFactory


class AnalyticsViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = AdminFactory()
        buyer = UserFactory()
        project = ProjectFactory(approved=True, sold_to=buyer, price=Decimal("80.00"))
        self.sale = OrderFactory(buyer=buyer, project=project, paid=True)

    def test_admin_reads_every_report(self):
        self.client.force_authenticate(user=self.admin)

        response = self.client.get(reverse("analytics:dashboard"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Decimal(response.data["data"]["totalRevenue"]), Decimal("80.00"))
        self.assertEqual(response.data["data"]["totalSales"], 1)

        response = self.client.get(reverse("analytics:projects"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["topSelling"][0]["projectId"], str(self.sale.project_id))

        response = self.client.get(reverse("analytics:users"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["byRole"]["admin"], 1)

        response = self.client.get(reverse("analytics:sales"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(
            response.data["data"]["revenueTrend"][0]["date"],
            timezone.localtime(self.sale.paid_at).date().isoformat(),
        )
        self.assertEqual(response.data["data"]["recentTransactions"][0]["orderId"], str(self.sale.pk))

    def test_non_admin_is_forbidden(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(reverse("analytics:dashboard"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_is_unauthorized(self):
        response = self.client.get(reverse("analytics:sales"))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


class CategoryViewIntegrationTest(TestCase):
    def test_categories_with_listed_counts(self):
        ProjectFactory(listed=True, category="design")
        ProjectFactory(listed=True, category="design")
        ProjectFactory(category="design")

        response = APIClient().get(reverse("marketplace:category-list"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        categories = {row["value"]: row for row in response.data["data"]}
        self.assertEqual(len(categories), 7)
        self.assertEqual(categories["design"]["listedCount"], 2)
        self.assertEqual(categories["design"]["label"], "Design")
        self.assertEqual(categories["writing"]["listedCount"], 0)
