"""
Payment System Tasks Package

Celery task definitions for payment housekeeping.
"""

from .payment_tasks import expire_stale_processing_orders

__all__ = ["expire_stale_processing_orders"]
