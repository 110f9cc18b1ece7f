"""Task module picked up by Celery autodiscovery."""

from payment_system.Tasks.payment_tasks import expire_stale_processing_orders  # noqa: F401
