import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        """Initialize OpenTelemetry tracing once the app registry is ready."""
        from django.conf import settings

        from infrastructure.observability.tracing import setup_tracing

        setup_tracing(
            service_name=getattr(settings, "OTEL_SERVICE_NAME", "codemart-backend"),
            enable=getattr(settings, "OTEL_ENABLED", False),
        )
