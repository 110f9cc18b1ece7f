from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from marketplace.models import Review
from marketplace.tests.factories import ProjectFactory, ReviewFactory, SellerFactory, UserFactory


class ReviewViewIntegrationTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = SellerFactory()
        self.buyer = UserFactory()
        self.other = UserFactory()
        self.project = ProjectFactory(owner=self.owner, approved=True, sold_to=self.buyer)
        self.create_url = reverse("reviews:review-create")

    def test_buyer_creates_review(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            self.create_url, {"projectId": str(self.project.id), "rating": 5, "comment": "Great"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["data"]["projectId"], str(self.project.id))
        self.assertEqual(Review.objects.count(), 1)

    def test_non_buyer_is_forbidden(self):
        self.client.force_authenticate(user=self.other)

        response = self.client.post(self.create_url, {"projectId": str(self.project.id), "rating": 4}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["error"], "purchase_required")

    def test_duplicate_review_is_a_conflict(self):
        ReviewFactory(project=self.project, reviewer=self.buyer)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url, {"projectId": str(self.project.id), "rating": 4}, format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_rating_out_of_range(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(self.create_url, {"projectId": str(self.project.id), "rating": 6}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_list_with_average(self):
        ReviewFactory(project=self.project, reviewer=self.buyer, rating=4)

        response = self.client.get(reverse("reviews:project-reviews", args=[self.project.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["total"], 1)
        self.assertEqual(response.data["averageRating"], 4.0)

    def test_update_and_delete_by_author(self):
        review = ReviewFactory(project=self.project, reviewer=self.buyer, rating=2)
        url = reverse("reviews:review-detail", args=[review.id])
        self.client.force_authenticate(user=self.buyer)

        response = self.client.put(url, {"rating": 4}, format="json")
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["data"]["rating"], 4)

        response = self.client.delete(url)
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(Review.objects.filter(pk=review.pk).exists())

    def test_update_by_other_user_is_forbidden(self):
        review = ReviewFactory(project=self.project, reviewer=self.buyer)
        self.client.force_authenticate(user=self.other)

        response = self.client.put(reverse("reviews:review-detail", args=[review.id]), {"rating": 1}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
