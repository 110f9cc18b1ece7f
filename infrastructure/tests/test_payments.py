"""
Payment Gateway Infrastructure Tests
=====================================

The 2Checkout provider is exercised with ``requests.post`` patched out.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import requests
from django.test import TestCase, override_settings

from infrastructure.payments import (
    ChargeResult,
    InvalidSignatureError,
    PaymentDeclinedError,
    PaymentFactory,
    PaymentGatewayError,
    PaymentProviderInterface,
    TwoCheckoutProvider,
)
from infrastructure.payments.twocheckout_provider import compute_ins_hash

POST = "infrastructure.payments.twocheckout_provider.requests.post"


def gateway_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    return response


class PaymentProviderInterfaceTest(TestCase):
    def test_interface_is_abstract(self):
        with self.assertRaises(TypeError):
            PaymentProviderInterface()


@override_settings(
    PAYMENT_SANDBOX=True,
    PAYMENT_SANDBOX_TOKEN="9012930219301",
    TWOCHECKOUT_SELLER_ID="901234567",
    TWOCHECKOUT_PRIVATE_KEY="test-private-key",
    TWOCHECKOUT_SECRET_WORD="tango",
)
class TwoCheckoutChargeTest(TestCase):
    def setUp(self):
        self.provider = TwoCheckoutProvider()

    @patch(POST)
    def test_sandbox_token_is_approved_without_network(self, mock_post):
        result = self.provider.charge("order-1", Decimal("49.00"), "USD", "9012930219301")

        self.assertIsInstance(result, ChargeResult)
        self.assertTrue(result.sandbox)
        self.assertEqual(result.transaction_id, "sandbox_txn_order-1")
        mock_post.assert_not_called()

    @patch(POST)
    def test_approved_authorization(self, mock_post):
        mock_post.return_value = gateway_response(
            {"response": {"responseCode": "APPROVED", "transactionId": "4093715837", "orderNumber": "9093"}}
        )

        result = self.provider.charge("order-2", Decimal("10"), "USD", "real-token", {"name": "Ada", "zip": "1000"})

        self.assertEqual(result.transaction_id, "4093715837")
        self.assertEqual(result.order_number, "9093")
        self.assertFalse(result.sandbox)

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], "https://sandbox.2checkout.com/checkout/api/1/901234567/rs/authService")
        self.assertEqual(kwargs["json"]["total"], "10.00")
        self.assertEqual(kwargs["json"]["merchantOrderId"], "order-2")
        self.assertEqual(kwargs["json"]["billingAddr"]["zipCode"], "1000")

    @patch(POST)
    def test_exception_block_is_a_decline(self, mock_post):
        mock_post.return_value = gateway_response(
            {"exception": {"errorCode": "607", "errorMsg": "Payment Authorization Failed"}}, status_code=400
        )

        with self.assertRaises(PaymentDeclinedError) as ctx:
            self.provider.charge("order-3", Decimal("10"), "USD", "bad-card")

        self.assertEqual(ctx.exception.message, "Payment Authorization Failed")

    @patch(POST)
    def test_non_approved_response_is_a_decline(self, mock_post):
        mock_post.return_value = gateway_response({"response": {"responseCode": "PENDING", "responseMsg": "Review"}})

        with self.assertRaises(PaymentDeclinedError):
            self.provider.charge("order-4", Decimal("10"), "USD", "token")

    @patch(POST, side_effect=requests.Timeout("read timed out"))
    def test_timeout_is_a_gateway_error(self, _post):
        with self.assertRaises(PaymentGatewayError):
            self.provider.charge("order-5", Decimal("10"), "USD", "token")

    @patch(POST, side_effect=requests.ConnectionError("refused"))
    def test_connection_error_is_a_gateway_error(self, _post):
        with self.assertRaises(PaymentGatewayError):
            self.provider.charge("order-6", Decimal("10"), "USD", "token")

    @patch(POST)
    def test_non_json_body_is_a_gateway_error(self, mock_post):
        response = gateway_response(None, status_code=502)
        response.json.side_effect = ValueError("No JSON")
        mock_post.return_value = response

        with self.assertRaises(PaymentGatewayError):
            self.provider.charge("order-7", Decimal("10"), "USD", "token")

    @patch(POST)
    def test_empty_payload_is_a_gateway_error(self, mock_post):
        mock_post.return_value = gateway_response({})

        with self.assertRaises(PaymentGatewayError):
            self.provider.charge("order-8", Decimal("10"), "USD", "token")

    @override_settings(PAYMENT_SANDBOX=False)
    @patch(POST)
    def test_live_mode_ignores_sandbox_token(self, mock_post):
        provider = TwoCheckoutProvider()
        mock_post.return_value = gateway_response({"response": {"responseCode": "APPROVED", "transactionId": "77"}})

        result = provider.charge("order-9", Decimal("10"), "USD", "9012930219301")

        self.assertEqual(result.transaction_id, "77")
        self.assertTrue(mock_post.call_args[0][0].startswith("https://www.2checkout.com/"))


@override_settings(TWOCHECKOUT_SECRET_WORD="tango")
class TwoCheckoutNotificationTest(TestCase):
    def setUp(self):
        self.provider = TwoCheckoutProvider()
        self.params = {"sale_id": "250335346812", "vendor_id": "901234567", "invoice_id": "250335346821"}

    def test_valid_hash_passes(self):
        params = dict(self.params, md5_hash=compute_ins_hash(*self.params.values(), "tango"))

        self.provider.verify_notification(params)

    def test_lowercase_hash_passes(self):
        params = dict(self.params, md5_hash=compute_ins_hash(*self.params.values(), "tango").lower())

        self.provider.verify_notification(params)

    def test_wrong_secret_fails(self):
        params = dict(self.params, md5_hash=compute_ins_hash(*self.params.values(), "foxtrot"))

        with self.assertRaises(InvalidSignatureError):
            self.provider.verify_notification(params)

    def test_missing_hash_fails(self):
        with self.assertRaises(InvalidSignatureError):
            self.provider.verify_notification(self.params)


class PaymentFactoryTest(TestCase):
    def test_create_twocheckout(self):
        self.assertIsInstance(PaymentFactory.create("twocheckout"), TwoCheckoutProvider)

    def test_invalid_provider(self):
        with self.assertRaises(ValueError):
            PaymentFactory.create("stripe")
