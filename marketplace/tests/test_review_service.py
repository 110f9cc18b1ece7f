from django.test import TestCase

from marketplace.catalog.domain.services import ReviewService
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import (
    AdminFactory,
    OrderFactory,
    ProjectFactory,
    ReviewFactory,
    SellerFactory,
    UserFactory,
)
from utils.rbac import Caller


class ReviewServiceTest(TestCase):
    def setUp(self):
        self.service = ReviewService()
        self.owner = SellerFactory()
        self.buyer = UserFactory()
        self.project = ProjectFactory(owner=self.owner, approved=True, sold_to=self.buyer)

    def test_buyer_can_review(self):
        result = self.service.create_review(Caller.for_user(self.buyer), self.project.id, 4, "Clean code")

        self.assertTrue(result.ok)
        self.assertEqual(result.value.rating, 4)

    def test_paid_order_counts_as_purchase(self):
        listed = ProjectFactory(owner=self.owner, listed=True)
        payer = UserFactory()
        OrderFactory(buyer=payer, project=listed, paid=True)

        result = self.service.create_review(Caller.for_user(payer), listed.id, 5)

        self.assertTrue(result.ok)

    def test_pending_order_does_not_count(self):
        listed = ProjectFactory(owner=self.owner, listed=True)
        shopper = UserFactory()
        OrderFactory(buyer=shopper, project=listed)

        result = self.service.create_review(Caller.for_user(shopper), listed.id, 5)

        self.assertEqual(result.error, ErrorCodes.PURCHASE_REQUIRED)
        self.assertEqual(result.category, "forbidden")

    def test_non_buyer_cannot_review(self):
        result = self.service.create_review(Caller.for_user(UserFactory()), self.project.id, 3)

        self.assertEqual(result.error, ErrorCodes.PURCHASE_REQUIRED)

    def test_owner_cannot_review_own_project(self):
        result = self.service.create_review(Caller.for_user(self.owner), self.project.id, 5)

        self.assertEqual(result.error, ErrorCodes.PERMISSION_DENIED)

    def test_duplicate_review_is_a_conflict(self):
        ReviewFactory(project=self.project, reviewer=self.buyer)

        result = self.service.create_review(Caller.for_user(self.buyer), self.project.id, 2)

        self.assertEqual(result.error, ErrorCodes.REVIEW_EXISTS)
        self.assertEqual(result.category, "conflict")

    def test_list_reviews_includes_average(self):
        ReviewFactory(project=self.project, reviewer=self.buyer, rating=5)
        ReviewFactory(project=self.project, reviewer=UserFactory(), rating=2)

        page = self.service.list_reviews(self.project.id).value

        self.assertEqual(page["total"], 2)
        self.assertEqual(page["averageRating"], 3.5)

    def test_list_reviews_unknown_project(self):
        result = self.service.list_reviews("00000000-0000-0000-0000-000000000000")

        self.assertEqual(result.error, ErrorCodes.PROJECT_NOT_FOUND)

    def test_only_author_updates(self):
        review = ReviewFactory(project=self.project, reviewer=self.buyer, rating=5)

        denied = self.service.update_review(Caller.for_user(self.owner), review.id, {"rating": 1})
        allowed = self.service.update_review(Caller.for_user(self.buyer), review.id, {"rating": 3})

        self.assertEqual(denied.error, ErrorCodes.NOT_REVIEW_OWNER)
        self.assertTrue(allowed.ok)
        self.assertEqual(allowed.value.rating, 3)

    def test_admin_can_delete(self):
        review = ReviewFactory(project=self.project, reviewer=self.buyer)

        result = self.service.delete_review(Caller.for_user(AdminFactory()), review.id)

        self.assertTrue(result.ok)
