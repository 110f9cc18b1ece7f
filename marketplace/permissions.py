from rest_framework import permissions

from utils.rbac import is_admin


class IsAdminRole(permissions.BasePermission):
    """
    Allows access only to admins (superusers or users with the admin role).
    """

    message = "Admin role required."

    def has_permission(self, request, view):
        return is_admin(request.user)
