from .auth_serializers import (
    AdminUserUpdateSerializer,
    AuthResponseSerializer,
    LoginRequestSerializer,
    ProfileUpdateSerializer,
    RegisterRequestSerializer,
    UserDeleteSerializer,
    UserSerializer,
)
from .jwt_serializers import CodemartRefreshToken


__all__ = [
    "UserSerializer",
    "RegisterRequestSerializer",
    "LoginRequestSerializer",
    "ProfileUpdateSerializer",
    "AdminUserUpdateSerializer",
    "UserDeleteSerializer",
    "AuthResponseSerializer",
    "CodemartRefreshToken",
]
