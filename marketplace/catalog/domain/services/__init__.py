from .analytics_service import AnalyticsService
from .lifecycle_service import ProjectLifecycleService
from .listing_service import ListingService, mark_project_sold
from .media_service import ProjectMediaService
from .review_service import ReviewService
from .visibility import visibility_filter


__all__ = [
    "AnalyticsService",
    "ProjectLifecycleService",
    "ListingService",
    "ProjectMediaService",
    "ReviewService",
    "mark_project_sold",
    "visibility_filter",
]
