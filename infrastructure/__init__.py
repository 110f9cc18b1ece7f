"""
Infrastructure Package
======================

Abstraction layers for external dependencies.

Modules:
    - storage: Media storage (local filesystem, S3)
    - email: Outgoing email (SMTP, mock)
    - payments: Payment gateway (2Checkout)
    - observability: OpenTelemetry tracing
    - container: Service locator wiring infrastructure into domain services
"""
