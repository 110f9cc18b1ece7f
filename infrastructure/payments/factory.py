"""
Payment Provider Factory
=========================

Factory pattern for creating payment provider instances based on configuration.
"""

import logging
from typing import Literal

from django.conf import settings

from .interface import PaymentProviderInterface
from .twocheckout_provider import TwoCheckoutProvider

logger = logging.getLogger(__name__)

PaymentBackend = Literal["twocheckout"]


class PaymentFactory:
    """
    Factory for creating payment provider instances.

    Usage:
        # In settings.py
        PAYMENT_PROVIDER = 'twocheckout'

        # In your code
        payment_provider = PaymentFactory.create()
    """

    @staticmethod
    def create(backend: PaymentBackend | None = None) -> PaymentProviderInterface:
        """
        Create a payment provider instance.

        Args:
            backend: Payment backend type. If None, reads settings.PAYMENT_PROVIDER

        Raises:
            ValueError: If backend type is invalid
        """
        backend_type = backend or getattr(settings, "PAYMENT_PROVIDER", "twocheckout")

        logger.info(f"Creating payment provider: {backend_type}")

        if backend_type == "twocheckout":
            return TwoCheckoutProvider()
        raise ValueError(f"Invalid payment provider: {backend_type}. Currently only 'twocheckout' is supported")
