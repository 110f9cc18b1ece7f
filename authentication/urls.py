from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.api.views import LoginAPIView, MeAPIView, RegisterAPIView, UserAdminAPIView, UserListAPIView

app_name = "authentication"

urlpatterns = [
    path("register/", RegisterAPIView.as_view(), name="register"),
    path("login/", LoginAPIView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    path("me/", MeAPIView.as_view(), name="me"),
    path("users/", UserListAPIView.as_view(), name="user-list"),
    path("users/<uuid:pk>/", UserAdminAPIView.as_view(), name="user-detail"),
]
