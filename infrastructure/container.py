"""
Dependency Injection Container
================================

Simple service locator for infrastructure adapters and the domain services
built on them.

Usage:
    from infrastructure.container import container

    storage = container.storage()
    result = container.listing_service().purchase(caller, project_id)
"""

import logging
from typing import Optional

from .email import EmailFactory, EmailServiceInterface
from .payments import PaymentFactory, PaymentProviderInterface
from .storage import StorageFactory, StorageInterface

logger = logging.getLogger(__name__)


class ServiceContainer:
    """
    Service container for infrastructure dependencies.

    Instances are created lazily and cached. Domain services are imported
    inside their accessors so the container can be imported before Django's
    app registry is ready.
    """

    _instance: Optional["ServiceContainer"] = None
    _initialized: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        if not self._initialized:
            self._clear()
            self._initialized = True
            logger.info("Service container initialized")

    def _clear(self):
        self._storage: Optional[StorageInterface] = None
        self._email: Optional[EmailServiceInterface] = None
        self._payment: Optional[PaymentProviderInterface] = None

        # Domain services
        self._auth_service = None
        self._notification_service = None
        self._lifecycle_service = None
        self._listing_service = None
        self._media_service = None
        self._review_service = None
        self._analytics_service = None
        self._payment_service = None
        self._webhook_service = None

    # ------------------------------------------------------------------
    # Infrastructure
    # ------------------------------------------------------------------

    def storage(self) -> StorageInterface:
        if self._storage is None:
            self._storage = StorageFactory.create()
            logger.debug(f"Created storage service: {type(self._storage).__name__}")
        return self._storage

    def email(self, backend: Optional[str] = None) -> EmailServiceInterface:
        """
        Get email service instance.

        Args:
            backend: 'smtp' or 'mock'. If None, uses settings
        """
        if self._email is None or backend is not None:
            self._email = EmailFactory.create(backend)
            logger.debug(f"Created email service: {type(self._email).__name__}")
        return self._email

    def payment(self, backend: Optional[str] = None) -> PaymentProviderInterface:
        """
        Get payment gateway instance.

        Args:
            backend: Gateway type ('twocheckout'). If None, uses settings
        """
        if self._payment is None or backend is not None:
            self._payment = PaymentFactory.create(backend)
            logger.debug(f"Created payment service: {type(self._payment).__name__}")
        return self._payment

    # ------------------------------------------------------------------
    # Domain services
    # ------------------------------------------------------------------

    def auth_service(self):
        if self._auth_service is None:
            from authentication.domain.services.auth_service import AuthService

            self._auth_service = AuthService()
        return self._auth_service

    def notification_service(self):
        if self._notification_service is None:
            from notifications.domain.services.notification_service import NotificationService

            self._notification_service = NotificationService(email_service=self.email())
        return self._notification_service

    def lifecycle_service(self):
        if self._lifecycle_service is None:
            from marketplace.catalog.domain.services import ProjectLifecycleService

            self._lifecycle_service = ProjectLifecycleService(
                notification_service=self.notification_service(), storage=self.storage()
            )
        return self._lifecycle_service

    def listing_service(self):
        if self._listing_service is None:
            from marketplace.catalog.domain.services import ListingService

            self._listing_service = ListingService(notification_service=self.notification_service())
        return self._listing_service

    def media_service(self):
        if self._media_service is None:
            from marketplace.catalog.domain.services import ProjectMediaService

            self._media_service = ProjectMediaService(storage=self.storage())
        return self._media_service

    def review_service(self):
        if self._review_service is None:
            from marketplace.catalog.domain.services import ReviewService

            self._review_service = ReviewService()
        return self._review_service

    def analytics_service(self):
        if self._analytics_service is None:
            from marketplace.catalog.domain.services import AnalyticsService

            self._analytics_service = AnalyticsService()
        return self._analytics_service

    def payment_service(self):
        if self._payment_service is None:
            from payment_system.domain.services.payment_service import PaymentService

            self._payment_service = PaymentService(
                payment_provider=self.payment(), notification_service=self.notification_service()
            )
        return self._payment_service

    def webhook_service(self):
        if self._webhook_service is None:
            from payment_system.domain.services.webhook_service import WebhookService

            self._webhook_service = WebhookService(
                payment_provider=self.payment(), payment_service=self.payment_service()
            )
        return self._webhook_service

    def reset(self):
        """Drop every cached instance (used between tests)."""
        self._clear()
        logger.info("Service container reset")


# Global singleton instance
container = ServiceContainer()
