"""
Service Container Tests
========================
"""

from django.test import TestCase, override_settings

from infrastructure.container import ServiceContainer, container
from infrastructure.email import MockEmailService
from infrastructure.payments import TwoCheckoutProvider
from infrastructure.storage import LocalStorageAdapter
from marketplace.catalog.domain.services import ListingService, ProjectLifecycleService
from notifications.domain.services.notification_service import NotificationService
from payment_system.domain.services import PaymentService, WebhookService


class ServiceContainerTest(TestCase):
    def setUp(self):
        container.reset()

    def test_container_is_singleton(self):
        self.assertIs(ServiceContainer(), ServiceContainer())
        self.assertIs(ServiceContainer(), container)

    @override_settings(STORAGE_BACKEND="local")
    def test_storage_is_cached(self):
        storage = container.storage()

        self.assertIsInstance(storage, LocalStorageAdapter)
        self.assertIs(storage, container.storage())

    @override_settings(EMAIL_SERVICE_BACKEND="mock")
    def test_email_is_cached(self):
        email = container.email()

        self.assertIsInstance(email, MockEmailService)
        self.assertIs(email, container.email())

    def test_explicit_backend_replaces_cached_instance(self):
        first = container.email("mock")
        second = container.email("mock")

        self.assertIsNot(first, second)
        self.assertIs(container.email(), second)

    def test_payment_provider(self):
        self.assertIsInstance(container.payment(), TwoCheckoutProvider)

    def test_domain_services_share_adapters(self):
        notifications = container.notification_service()
        lifecycle = container.lifecycle_service()
        listing = container.listing_service()
        payments = container.payment_service()
        webhooks = container.webhook_service()

        self.assertIsInstance(notifications, NotificationService)
        self.assertIsInstance(lifecycle, ProjectLifecycleService)
        self.assertIsInstance(listing, ListingService)
        self.assertIsInstance(payments, PaymentService)
        self.assertIsInstance(webhooks, WebhookService)

        self.assertIs(notifications.email_service, container.email())
        self.assertIs(lifecycle.notification_service, notifications)
        self.assertIs(payments.payment_provider, container.payment())
        self.assertIs(webhooks.payment_service, payments)

    def test_reset_drops_instances(self):
        storage = container.storage()
        service = container.review_service()

        container.reset()

        self.assertIsNot(storage, container.storage())
        self.assertIsNot(service, container.review_service())
