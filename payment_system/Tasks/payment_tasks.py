"""
Payment System Celery Tasks

- Stale order sweep: orders left in ``processing`` by a crashed worker or a
  lost gateway response are returned to ``failed`` so the buyer can retry.
"""

import logging

from celery import shared_task
from django.conf import settings
from django.db import DatabaseError

logger = logging.getLogger(__name__)


@shared_task(bind=True, max_retries=3, queue="payment_tasks", name="payment_system.expire_stale_processing_orders")
def expire_stale_processing_orders(self, timeout_minutes=None):
    """
    Move orders stuck in processing past the timeout to failed.

    Args:
        timeout_minutes (int): Override for PAYMENT_PROCESSING_TIMEOUT_MINUTES

    Returns:
        dict: Number of orders expired
    """
    from infrastructure.container import container

    minutes = timeout_minutes or settings.PAYMENT_PROCESSING_TIMEOUT_MINUTES
    try:
        expired = container.payment_service().expire_stale_processing_orders(minutes)
    except DatabaseError as exc:
        logger.error(f"Stale order sweep failed: {exc}")
        raise self.retry(exc=exc, countdown=60)

    logger.info(f"Stale order sweep complete: {expired} orders expired")
    return {"success": True, "expired": expired, "timeout_minutes": minutes}
