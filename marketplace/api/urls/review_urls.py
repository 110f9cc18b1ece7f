from django.urls import path

from marketplace.api.views import ProjectReviewListAPIView, ReviewCreateAPIView, ReviewDetailAPIView

app_name = "reviews"

urlpatterns = [
    path("", ReviewCreateAPIView.as_view(), name="review-create"),
    path("project/<uuid:project_id>/", ProjectReviewListAPIView.as_view(), name="project-reviews"),
    path("<uuid:pk>/", ReviewDetailAPIView.as_view(), name="review-detail"),
]
