"""
AuthService - account registration, login and admin account management.
"""

from typing import Any, Dict, Optional

from django.contrib.auth import authenticate, get_user_model
from django.contrib.auth.models import update_last_login
from django.db import IntegrityError, transaction

from authentication.api.serializers.jwt_serializers import CodemartRefreshToken
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, service_err, service_ok
from payment_system.models import OrderStatus
from utils.rbac import ROLE_ADMIN, ROLE_BUYER, ROLE_SELLER, Caller

User = get_user_model()

SELF_ASSIGNABLE_ROLES = (ROLE_BUYER, ROLE_SELLER)


class AuthService(BaseService):
    """Authentication and account administration."""

    @BaseService.log_performance
    def register(self, name: str, email: str, password: str, role: str = ROLE_BUYER) -> ServiceResult:
        if role not in SELF_ASSIGNABLE_ROLES:
            return service_err(ErrorCodes.INVALID_INPUT, f"Role '{role}' cannot be self-assigned")

        email = User.objects.normalize_email(email).lower()
        if User.objects.filter(email__iexact=email).exists():
            return service_err(ErrorCodes.EMAIL_TAKEN, "An account with this email already exists")

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=email,
                    email=email,
                    password=password,
                    name=name.strip(),
                    role=role,
                )
        except IntegrityError:
            # Two concurrent signups with the same address
            return service_err(ErrorCodes.EMAIL_TAKEN, "An account with this email already exists")

        self.logger.info(f"Registered user {user.id} with role {role}")
        return service_ok({"user": user, **self._issue_tokens(user)})

    @BaseService.log_performance
    def login(self, email: str, password: str, request=None) -> ServiceResult:
        user = authenticate(request, email=(email or "").lower(), password=password)
        if user is None:
            return service_err(ErrorCodes.INVALID_CREDENTIALS, "Invalid email or password")

        if user.is_blocked:
            self.logger.warning(f"Blocked user {user.id} attempted to log in")
            return service_err(ErrorCodes.ACCOUNT_BLOCKED, "Your account has been blocked. Contact support.")

        update_last_login(None, user)
        return service_ok({"user": user, **self._issue_tokens(user)})

    @BaseService.log_performance
    def update_profile(self, caller: Caller, data: Dict[str, Any]) -> ServiceResult:
        try:
            user = User.objects.get(pk=caller.user_id)
        except User.DoesNotExist:
            return service_err(ErrorCodes.USER_NOT_FOUND, "User not found")

        if "name" in data:
            user.name = data["name"].strip()
        user.save(update_fields=["name"])
        return service_ok(user)

    @BaseService.log_performance
    def update_user(self, caller: Caller, user_id, role: Optional[str] = None, is_blocked: Optional[bool] = None):
        """Admin-only change of another account's role or blocked flag."""
        if not caller.is_admin:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only admins can manage users")

        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return service_err(ErrorCodes.USER_NOT_FOUND, f"User {user_id} not found")

        if caller.owns(user.pk) and is_blocked:
            return service_err(ErrorCodes.INVALID_INPUT, "Admins cannot block themselves")

        update_fields = []
        if role is not None:
            if role not in (ROLE_BUYER, ROLE_SELLER, ROLE_ADMIN):
                return service_err(ErrorCodes.INVALID_INPUT, f"Unknown role '{role}'")
            user.role = role
            update_fields.append("role")
        if is_blocked is not None:
            user.is_blocked = is_blocked
            update_fields.append("is_blocked")

        if update_fields:
            user.save(update_fields=update_fields)
            self.logger.info(f"Admin {caller.user_id} updated user {user.id}: {update_fields}")
        return service_ok(user)

    @BaseService.log_performance
    def delete_user(self, caller: Caller, user_id, confirm: bool = False) -> ServiceResult:
        """
        Permanently delete an account along with its projects and orders.

        Admins may delete any account, everyone else only their own. Deleting
        your own account must be confirmed explicitly. Accounts with a payment
        in flight are kept until the attempt resolves.
        """
        try:
            user = User.objects.get(pk=user_id)
        except User.DoesNotExist:
            return service_err(ErrorCodes.USER_NOT_FOUND, f"User {user_id} not found")

        is_self = caller.owns(user.pk)
        if not caller.is_admin and not is_self:
            return service_err(ErrorCodes.PERMISSION_DENIED, "You can only delete your own account")
        if is_self and not confirm:
            return service_err(
                ErrorCodes.INVALID_INPUT,
                "Confirm account deletion with confirm: true",
                errors=[{"field": "confirm", "message": "Must be true to delete your own account"}],
            )
        if user.orders.filter(status=OrderStatus.PROCESSING).exists():
            return service_err(ErrorCodes.PAYMENT_IN_PROGRESS, "This account has a payment in progress")

        user.delete()
        self.logger.info(f"User {user_id} deleted by {caller.user_id}")
        return service_ok()

    def list_users(self, caller: Caller, role: Optional[str] = None) -> ServiceResult:
        if not caller.is_admin:
            return service_err(ErrorCodes.PERMISSION_DENIED, "Only admins can list users")
        queryset = User.objects.all()
        if role:
            queryset = queryset.filter(role=role)
        return service_ok(queryset)

    @staticmethod
    def _issue_tokens(user) -> Dict[str, str]:
        refresh = CodemartRefreshToken.for_user(user)
        return {"access": str(refresh.access_token), "refresh": str(refresh)}
