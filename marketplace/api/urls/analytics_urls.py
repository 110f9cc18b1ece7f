from django.urls import path

from marketplace.api.views import (
    DashboardAnalyticsView,
    ProjectAnalyticsView,
    SalesAnalyticsView,
    UserAnalyticsView,
)

app_name = "analytics"

urlpatterns = [
    path("dashboard/", DashboardAnalyticsView.as_view(), name="dashboard"),
    path("projects/", ProjectAnalyticsView.as_view(), name="projects"),
    path("users/", UserAnalyticsView.as_view(), name="users"),
    path("sales/", SalesAnalyticsView.as_view(), name="sales"),
]
