from .analytics_serializers import (
    CategorySerializer,
    DashboardSerializer,
    ProjectStatsSerializer,
    SalesStatsSerializer,
    UserStatsSerializer,
)
from .listing_serializers import CreateListingSerializer, ListingSerializer, UpdateListingSerializer
from .project_serializers import (
    PaginatedProjectsSerializer,
    ProjectCreateSerializer,
    ProjectSerializer,
    ProjectUpdateSerializer,
    RejectProjectSerializer,
    UserSummarySerializer,
)
from .review_serializers import CreateReviewSerializer, ReviewSerializer, UpdateReviewSerializer


__all__ = [
    "ProjectSerializer",
    "ProjectCreateSerializer",
    "ProjectUpdateSerializer",
    "RejectProjectSerializer",
    "PaginatedProjectsSerializer",
    "UserSummarySerializer",
    "ListingSerializer",
    "CreateListingSerializer",
    "UpdateListingSerializer",
    "ReviewSerializer",
    "CreateReviewSerializer",
    "UpdateReviewSerializer",
    "DashboardSerializer",
    "ProjectStatsSerializer",
    "UserStatsSerializer",
    "SalesStatsSerializer",
    "CategorySerializer",
]
