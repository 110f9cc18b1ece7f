"""
2Checkout Payment Provider
===========================

Concrete implementation of PaymentProviderInterface for 2Checkout (Verifone)
token authorization and INS notifications.
"""

import hashlib
import hmac
import logging
import time
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional

import requests
from django.conf import settings

from infrastructure.observability.tracing import add_span_attributes, get_tracer
from utils.logging_utils import sanitize_payload

from .interface import (
    ChargeResult,
    InvalidSignatureError,
    PaymentDeclinedError,
    PaymentGatewayError,
    PaymentProviderInterface,
)

logger = logging.getLogger(__name__)
tracer = get_tracer(__name__)

SANDBOX_HOST = "https://sandbox.2checkout.com"
LIVE_HOST = "https://www.2checkout.com"


class TwoCheckoutProvider(PaymentProviderInterface):
    """
    2Checkout payment provider implementation.

    Configuration (in settings.py):
        TWOCHECKOUT_SELLER_ID: Merchant account number
        TWOCHECKOUT_PRIVATE_KEY: API private key
        TWOCHECKOUT_SECRET_WORD: INS secret word used for hash verification
        PAYMENT_SANDBOX: Use the sandbox host and accept the sandbox token
        PAYMENT_SANDBOX_TOKEN: Token that is approved without a network call
        PAYMENT_GATEWAY_TIMEOUT: Request timeout in seconds
    """

    def __init__(self):
        self.seller_id = getattr(settings, "TWOCHECKOUT_SELLER_ID", "")
        self.private_key = getattr(settings, "TWOCHECKOUT_PRIVATE_KEY", "")
        self.secret_word = getattr(settings, "TWOCHECKOUT_SECRET_WORD", "")
        self._sandbox = getattr(settings, "PAYMENT_SANDBOX", True)
        self.sandbox_token = getattr(settings, "PAYMENT_SANDBOX_TOKEN", "9012930219301")
        self.timeout = getattr(settings, "PAYMENT_GATEWAY_TIMEOUT", 15)

        if not self.seller_id or not self.private_key:
            logger.warning("2Checkout credentials (TWOCHECKOUT_SELLER_ID or TWOCHECKOUT_PRIVATE_KEY) not configured")
        if not self.secret_word:
            logger.warning("TWOCHECKOUT_SECRET_WORD not configured; INS notifications will be rejected")

    @property
    def sandbox(self) -> bool:
        return self._sandbox

    @property
    def endpoint(self) -> str:
        host = SANDBOX_HOST if self._sandbox else LIVE_HOST
        return f"{host}/checkout/api/1/{self.seller_id}/rs/authService"

    def charge(
        self,
        order_id: str,
        amount: Decimal,
        currency: str,
        token: str,
        billing_details: Optional[Dict[str, Any]] = None,
    ) -> ChargeResult:
        if self._sandbox and token == self.sandbox_token:
            logger.info(f"Sandbox charge approved for order {order_id}")
            return ChargeResult(
                transaction_id=f"sandbox_txn_{order_id}",
                order_number=f"sandbox_order_{order_id}",
                raw={"responseCode": "APPROVED", "responseMsg": "Sandbox simulation"},
                sandbox=True,
            )

        payload = {
            "sellerId": self.seller_id,
            "privateKey": self.private_key,
            "merchantOrderId": str(order_id),
            "token": token,
            "currency": currency,
            "total": f"{Decimal(amount):.2f}",
            "billingAddr": self._billing_address(billing_details or {}),
        }

        with tracer.start_as_current_span("twocheckout.authorize") as span:
            add_span_attributes(span, order_id=order_id, sandbox=self._sandbox)
            started = time.time()
            try:
                response = requests.post(
                    self.endpoint,
                    json=payload,
                    headers={"Accept": "application/json", "Content-Type": "application/json"},
                    timeout=self.timeout,
                )
            except requests.Timeout as e:
                logger.error(f"2Checkout authorization timed out for order {order_id}")
                raise PaymentGatewayError("Payment gateway timed out") from e
            except requests.RequestException as e:
                logger.error(f"2Checkout authorization request failed for order {order_id}: {e}")
                raise PaymentGatewayError("Payment gateway unavailable") from e
            finally:
                add_span_attributes(span, gateway_ms=int((time.time() - started) * 1000))

            try:
                data = response.json()
            except ValueError as e:
                logger.error(f"2Checkout returned a non-JSON body (HTTP {response.status_code}) for order {order_id}")
                raise PaymentGatewayError("Malformed response from payment gateway") from e

        if not isinstance(data, dict):
            raise PaymentGatewayError("Malformed response from payment gateway")

        logger.debug(f"2Checkout response for order {order_id}: {sanitize_payload(data)}")
        return self._parse_authorization(order_id, data)

    def _parse_authorization(self, order_id: str, data: Dict[str, Any]) -> ChargeResult:
        result = data.get("response") or {}
        exception = data.get("exception") or {}

        if result.get("responseCode") == "APPROVED" and result.get("transactionId"):
            return ChargeResult(
                transaction_id=str(result["transactionId"]),
                order_number=str(result.get("orderNumber") or "") or None,
                raw=data,
            )

        if exception:
            message = exception.get("errorMsg") or "Payment authorization failed"
            logger.info(f"2Checkout declined order {order_id}: {exception.get('errorCode')} {message}")
            raise PaymentDeclinedError(message, raw=data)

        if result:
            message = result.get("responseMsg") or "Card was declined or review needed"
            logger.info(f"2Checkout declined order {order_id}: {result.get('responseCode')}")
            raise PaymentDeclinedError(message, raw=data)

        raise PaymentGatewayError("Malformed response from payment gateway", raw=data)

    @staticmethod
    def _billing_address(details: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": details.get("name", ""),
            "email": details.get("email", ""),
            "addrLine1": details.get("address", ""),
            "city": details.get("city", ""),
            "zipCode": details.get("zip", ""),
            "country": details.get("country", ""),
        }

    def verify_notification(self, params: Mapping[str, Any]) -> None:
        """
        Verify an INS notification hash.

        2Checkout signs INS messages with
        ``UPPER(MD5(sale_id + vendor_id + invoice_id + secret_word))``.
        """
        received = str(params.get("md5_hash") or "")
        if not received or not self.secret_word:
            raise InvalidSignatureError("Missing notification hash")

        source = "".join(
            str(params.get(key) or "") for key in ("sale_id", "vendor_id", "invoice_id")
        ) + self.secret_word
        expected = hashlib.md5(source.encode("utf-8")).hexdigest().upper()

        if not hmac.compare_digest(expected, received.upper()):
            raise InvalidSignatureError("Notification hash mismatch")


def compute_ins_hash(sale_id: str, vendor_id: str, invoice_id: str, secret_word: str) -> str:
    """Hash 2Checkout attaches to INS notifications; used to build test fixtures."""
    return hashlib.md5(f"{sale_id}{vendor_id}{invoice_id}{secret_word}".encode("utf-8")).hexdigest().upper()
