from .auth_views import LoginAPIView, MeAPIView, RegisterAPIView, UserAdminAPIView, UserListAPIView


__all__ = ["RegisterAPIView", "LoginAPIView", "MeAPIView", "UserListAPIView", "UserAdminAPIView"]
