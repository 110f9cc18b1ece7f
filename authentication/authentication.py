import logging

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication

logger = logging.getLogger(__name__)


class BlockAwareJWTAuthentication(JWTAuthentication):
    """
    Bearer-token authentication that refuses blocked accounts.

    Missing, malformed or expired tokens surface as 401 through simplejwt.
    A valid token belonging to a blocked user is answered with 403.
    """

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if getattr(user, "is_blocked", False):
            logger.warning(f"Blocked user {user.pk} attempted an authenticated request")
            raise exceptions.PermissionDenied("Your account has been blocked. Contact support.")
        return user
