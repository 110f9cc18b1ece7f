"""
Payment Gateway Abstraction Layer
==================================

Provides a unified interface for charging card tokens and verifying gateway
notifications.
"""

from .factory import PaymentFactory
from .interface import (
    ChargeResult,
    InvalidSignatureError,
    PaymentDeclinedError,
    PaymentException,
    PaymentGatewayError,
    PaymentProviderInterface,
)
from .twocheckout_provider import TwoCheckoutProvider

__all__ = [
    "PaymentProviderInterface",
    "ChargeResult",
    "PaymentException",
    "PaymentDeclinedError",
    "PaymentGatewayError",
    "InvalidSignatureError",
    "TwoCheckoutProvider",
    "PaymentFactory",
]
