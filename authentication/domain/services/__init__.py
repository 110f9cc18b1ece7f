"""
Business logic services for authentication.

Services encapsulate business rules and coordinate between
infrastructure and domain models.
"""

from .auth_service import AuthService


__all__ = ["AuthService"]
