"""
Payment Gateway Interface
==========================

Abstract base class defining the contract for charging a card token and
verifying gateway notifications. The payment service only ever talks to this
interface, so tests can substitute a fake gateway.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional


@dataclass
class ChargeResult:
    """
    An approved authorization.

    Attributes:
        transaction_id: Gateway transaction identifier
        order_number: Gateway-side order number, when the gateway issues one
        raw: Response payload as returned by the gateway (unsanitised)
        sandbox: True when no network call was made
    """

    transaction_id: str
    order_number: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict)
    sandbox: bool = False


class PaymentException(Exception):
    """Base exception for gateway operations."""

    def __init__(self, message: str, raw: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.raw = raw or {}


class PaymentDeclinedError(PaymentException):
    """The gateway answered and refused the charge."""


class PaymentGatewayError(PaymentException):
    """The gateway could not be reached or answered with something unusable."""


class InvalidSignatureError(PaymentException):
    """A notification failed hash verification."""


class PaymentProviderInterface(ABC):
    """
    Abstract interface for payment gateway operations.

    Concrete implementations:
        - TwoCheckoutProvider: 2Checkout (Verifone) token authorization + INS
    """

    @property
    @abstractmethod
    def sandbox(self) -> bool:
        """Whether the provider talks to the gateway's sandbox."""
        pass

    @abstractmethod
    def charge(
        self,
        order_id: str,
        amount: Decimal,
        currency: str,
        token: str,
        billing_details: Optional[Dict[str, Any]] = None,
    ) -> ChargeResult:
        """
        Authorize ``amount`` against a client-side card token.

        Args:
            order_id: Merchant order reference sent to the gateway
            amount: Amount in major currency units
            currency: ISO currency code
            token: One-time card token produced by the gateway's JS library
            billing_details: Billing address snapshot

        Returns:
            ChargeResult for an approved charge

        Raises:
            PaymentDeclinedError: If the gateway declined the charge
            PaymentGatewayError: On network errors, timeouts or malformed responses
        """
        pass

    @abstractmethod
    def verify_notification(self, params: Mapping[str, Any]) -> None:
        """
        Check the hash of an asynchronous gateway notification.

        Raises:
            InvalidSignatureError: If the hash is missing or does not match
        """
        pass
