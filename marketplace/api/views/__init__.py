from .analytics_views import (
    DashboardAnalyticsView,
    ProjectAnalyticsView,
    SalesAnalyticsView,
    UserAnalyticsView,
)
from .listing_views import (
    CategoryListAPIView,
    ListingDetailAPIView,
    ListingListCreateAPIView,
    ListingPurchaseAPIView,
    ListingSearchAPIView,
)
from .project_views import ProjectViewSet
from .review_views import ProjectReviewListAPIView, ReviewCreateAPIView, ReviewDetailAPIView

__all__ = [
    "DashboardAnalyticsView",
    "ProjectAnalyticsView",
    "UserAnalyticsView",
    "SalesAnalyticsView",
    "CategoryListAPIView",
    "ProjectViewSet",
    "ListingListCreateAPIView",
    "ListingSearchAPIView",
    "ListingDetailAPIView",
    "ListingPurchaseAPIView",
    "ProjectReviewListAPIView",
    "ReviewCreateAPIView",
    "ReviewDetailAPIView",
]
