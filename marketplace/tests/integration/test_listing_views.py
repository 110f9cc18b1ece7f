from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Project
from marketplace.tests.factories import AdminFactory, ProjectFactory, SellerFactory, UserFactory


class ListingViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = SellerFactory()
        self.buyer_a = UserFactory()
        self.buyer_b = UserFactory()
        self.list_url = reverse("marketplace:listing-list")

    def test_list_purchase_and_conflicting_purchase_scenario(self):
        project = ProjectFactory(owner=self.owner, approved=True)

        self.client.force_authenticate(user=self.owner)
        response = self.client.post(self.list_url, {"projectId": str(project.id)}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertTrue(response.data["data"]["isForSale"])

        buy_url = reverse("marketplace:listing-buy", args=[project.id])
        self.client.force_authenticate(user=self.buyer_a)
        with self.captureOnCommitCallbacks(execute=True):
            response = self.client.post(buy_url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)

        self.client.force_authenticate(user=self.buyer_b)
        response = self.client.post(buy_url)
        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(response.data["success"])

        project.refresh_from_db()
        self.assertEqual(project.sold_to_id, self.buyer_a.id)
        self.assertFalse(project.is_for_sale)

    def test_list_twice_is_a_conflict(self):
        project = ProjectFactory(owner=self.owner, listed=True)
        self.client.force_authenticate(user=self.owner)

        response = self.client.post(self.list_url, {"projectId": str(project.id)}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "already_listed")

    def test_self_purchase_is_a_bad_request(self):
        project = ProjectFactory(owner=self.owner, listed=True)
        self.client.force_authenticate(user=self.owner)

        response = self.client.post(reverse("marketplace:listing-buy", args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["error"], "self_purchase")

    def test_purchase_requires_authentication(self):
        project = ProjectFactory(owner=self.owner, listed=True)

        response = self.client.post(reverse("marketplace:listing-buy", args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_browse_is_public_and_excludes_unlisted(self):
        listed = ProjectFactory(owner=self.owner, listed=True)
        ProjectFactory(owner=self.owner, approved=True)

        response = self.client.get(self.list_url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["id"] for item in response.data["data"]], [str(listed.id)])
        self.assertEqual(response.data["total"], 1)

    def test_search_with_sort(self):
        ProjectFactory(listed=True, title="Budget tracker", price=Decimal("30.00"))
        ProjectFactory(listed=True, title="Budget planner", price=Decimal("10.00"))
        ProjectFactory(listed=True, title="Weather app", price=Decimal("20.00"))

        response = self.client.get(
            reverse("marketplace:listing-search"), {"search": "budget", "sortBy": "price", "order": "asc"}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([item["title"] for item in response.data["data"]], ["Budget planner", "Budget tracker"])

    def test_unknown_sort_is_a_validation_error(self):
        response = self.client.get(self.list_url, {"sortBy": "rating"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["errors"][0]["field"], "sortBy")

    def test_detail_hides_unlisted_project(self):
        project = ProjectFactory(owner=self.owner, approved=True)

        response = self.client.get(reverse("marketplace:listing-detail", args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_update_listing_rejects_immutable_fields(self):
        project = ProjectFactory(owner=self.owner, listed=True)
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(
            reverse("marketplace:listing-detail", args=[project.id]),
            {"price": "60.00", "soldTo": str(self.buyer_a.id)},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        project.refresh_from_db()
        self.assertIsNone(project.sold_to_id)

    def test_update_listing_price(self):
        project = ProjectFactory(owner=self.owner, listed=True)
        self.client.force_authenticate(user=self.owner)

        response = self.client.put(
            reverse("marketplace:listing-detail", args=[project.id]), {"price": "60.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["price"], Decimal("60.00"))

    def test_admin_unlists(self):
        project = ProjectFactory(owner=self.owner, listed=True)
        self.client.force_authenticate(user=AdminFactory())

        response = self.client.delete(reverse("marketplace:listing-detail", args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Project.objects.get(pk=project.pk).is_for_sale)

    def test_unlist_unlisted_is_a_conflict(self):
        project = ProjectFactory(owner=self.owner, approved=True)
        self.client.force_authenticate(user=self.owner)

        response = self.client.delete(reverse("marketplace:listing-detail", args=[project.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
