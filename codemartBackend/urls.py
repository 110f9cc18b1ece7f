"""
URL configuration for the Codemart backend.

Every API route lives under ``/api/``; the OpenAPI schema and Swagger UI are
served next to them.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from marketplace.api.views.prometheus_metrics import prometheus_metrics

urlpatterns = [
    path("admin/", admin.site.urls),
    # API Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    # API endpoints
    path("api/auth/", include("authentication.urls", namespace="authentication")),
    path("api/projects/", include("marketplace.api.urls.project_urls", namespace="projects")),
    path("api/marketplace/", include("marketplace.api.urls.listing_urls", namespace="marketplace")),
    path("api/reviews/", include("marketplace.api.urls.review_urls", namespace="reviews")),
    path("api/analytics/", include("marketplace.api.urls.analytics_urls", namespace="analytics")),
    path("api/payments/", include("payment_system.urls", namespace="payment_system")),
    path("api/notifications/", include("notifications.urls", namespace="notifications")),
    path("metrics", prometheus_metrics, name="prometheus-metrics"),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
