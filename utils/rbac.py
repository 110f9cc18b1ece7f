import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from django.core.exceptions import PermissionDenied

# Canonical role names
ROLE_BUYER = "buyer"
ROLE_SELLER = "seller"
ROLE_ADMIN = "admin"

ROLES = (ROLE_BUYER, ROLE_SELLER, ROLE_ADMIN)

logger = logging.getLogger(__name__)


def is_admin(user) -> bool:
    """Admin check shared by views and services."""
    if not getattr(user, "is_authenticated", False):
        return False
    return bool(getattr(user, "is_superuser", False) or getattr(user, "role", None) == ROLE_ADMIN)


def has_role(user, role: str) -> bool:
    if role == ROLE_ADMIN:
        return is_admin(user)
    return getattr(user, "is_authenticated", False) and getattr(user, "role", None) == role


def has_any_role(user, roles: Iterable[str]) -> bool:
    return any(has_role(user, r) for r in roles)


def require_role(user, roles: Iterable[str]):
    """Raise PermissionDenied unless the user has one of the roles."""
    roles = list(roles)
    if not has_any_role(user, roles):
        logger.warning("RBAC denial: user_id=%s required=%s", getattr(user, "id", None), roles)
        raise PermissionDenied("Insufficient role to access this resource.")


@dataclass(frozen=True)
class Caller:
    """
    Identity of whoever invokes a domain operation.

    Services receive this value explicitly instead of reaching for the request
    user, which keeps them callable from views, tasks and tests alike.
    """

    user_id: Optional[UUID] = None
    role: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "Caller":
        return cls()

    @classmethod
    def for_user(cls, user) -> "Caller":
        if user is None or not getattr(user, "is_authenticated", False):
            return cls.anonymous()
        role = ROLE_ADMIN if is_admin(user) else getattr(user, "role", ROLE_BUYER)
        return cls(user_id=user.pk, role=role)

    @classmethod
    def from_request(cls, request) -> "Caller":
        return cls.for_user(getattr(request, "user", None))

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def owns(self, owner_id) -> bool:
        return self.is_authenticated and owner_id is not None and str(owner_id) == str(self.user_id)
