from rest_framework_simplejwt.tokens import RefreshToken


class CodemartRefreshToken(RefreshToken):
    """Refresh token carrying the user's role and email as claims."""

    @classmethod
    def for_user(cls, user):
        token = super().for_user(user)
        token["role"] = user.role
        token["email"] = user.email
        return token
