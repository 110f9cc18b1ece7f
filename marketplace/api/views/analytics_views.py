from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.api.serializers import (
    DashboardSerializer,
    ProjectStatsSerializer,
    SalesStatsSerializer,
    UserStatsSerializer,
)
from marketplace.permissions import IsAdminRole
from utils.responses import error_response, success_response
from utils.serializers import ErrorResponseSerializer

ADMIN_ONLY = OpenApiResponse(response=ErrorResponseSerializer, description="Admin only")


class AnalyticsAPIView(APIView):
    """
    Base view for the admin analytics reports.
    Subclasses name the service report and the serializer that renders it.
    """

    permission_classes = [IsAuthenticated, IsAdminRole]
    report = None
    serializer_class = None

    def get(self, request):
        result = getattr(container.analytics_service(), self.report)()
        if not result.ok:
            return error_response(result)
        return success_response(self.serializer_class(result.value).data)


class DashboardAnalyticsView(AnalyticsAPIView):
    report = "dashboard"
    serializer_class = DashboardSerializer

    @extend_schema(
        operation_id="analytics_dashboard",
        summary="Platform totals (admin)",
        description="User and project counts plus revenue and number of sales from paid orders.",
        responses={200: DashboardSerializer, 403: ADMIN_ONLY},
        tags=["Analytics"],
    )
    def get(self, request):
        return super().get(request)


class ProjectAnalyticsView(AnalyticsAPIView):
    report = "project_stats"
    serializer_class = ProjectStatsSerializer

    @extend_schema(
        operation_id="analytics_projects",
        summary="Project statistics (admin)",
        description="Counts by category and status, and the five best-selling projects.",
        responses={200: ProjectStatsSerializer, 403: ADMIN_ONLY},
        tags=["Analytics"],
    )
    def get(self, request):
        return super().get(request)


class UserAnalyticsView(AnalyticsAPIView):
    report = "user_stats"
    serializer_class = UserStatsSerializer

    @extend_schema(
        operation_id="analytics_users",
        summary="User statistics (admin)",
        responses={200: UserStatsSerializer, 403: ADMIN_ONLY},
        tags=["Analytics"],
    )
    def get(self, request):
        return super().get(request)


class SalesAnalyticsView(AnalyticsAPIView):
    report = "sales_stats"
    serializer_class = SalesStatsSerializer

    @extend_schema(
        operation_id="analytics_sales",
        summary="Sales statistics (admin)",
        description="Daily revenue of paid orders over the last 30 days and the ten most recent sales.",
        responses={200: SalesStatsSerializer, 403: ADMIN_ONLY},
        tags=["Analytics"],
    )
    def get(self, request):
        return super().get(request)
