from django.urls import path

from marketplace.api.views import (
    CategoryListAPIView,
    ListingDetailAPIView,
    ListingListCreateAPIView,
    ListingPurchaseAPIView,
    ListingSearchAPIView,
)

app_name = "marketplace"

urlpatterns = [
    path("", ListingListCreateAPIView.as_view(), name="listing-list"),
    path("search/", ListingSearchAPIView.as_view(), name="listing-search"),
    path("categories/", CategoryListAPIView.as_view(), name="category-list"),
    path("<uuid:pk>/", ListingDetailAPIView.as_view(), name="listing-detail"),
    path("<uuid:pk>/buy/", ListingPurchaseAPIView.as_view(), name="listing-buy"),
]
