import logging

from django.http import HttpResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.views import APIView

from infrastructure.container import container
from payment_system.api.serializers import (
    CreateOrderRequestSerializer,
    ExecutePaymentRequestSerializer,
    OrderSerializer,
)
from utils.rbac import Caller
from utils.responses import error_response, paginated_response, success_response
from utils.serializers import ErrorResponseSerializer

logger = logging.getLogger(__name__)


class OrderListCreateAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="payment_orders_list",
        summary="List my orders",
        description="The caller's orders, newest first. Admins see every order.",
        parameters=[
            OpenApiParameter(name="status", type=str, description="pending, processing, paid, failed or refunded"),
            OpenApiParameter(name="page", type=int, description="Page number (default 1)"),
            OpenApiParameter(name="limit", type=int, description="Page size (default 10, max 100)"),
        ],
        responses={200: OpenApiResponse(response=OrderSerializer(many=True), description="Orders")},
        tags=["Payments"],
    )
    def get(self, request):
        params = request.query_params
        result = container.payment_service().list_orders(
            Caller.from_request(request), params.get("status"), params.get("page"), params.get("limit")
        )
        if not result.ok:
            return error_response(result)
        return paginated_response(result.value, OrderSerializer)

    @extend_schema(
        operation_id="payment_orders_create",
        summary="Create an order for a listed project",
        description="""
        **What it receives:**
        - `projectId`: the listed project to buy
        - `billingDetails` (optional): name, email, address, city, zip, country

        The amount is copied from the project price. An existing pending or processing
        order for the same project is returned with 200 instead of creating a duplicate.
        """,
        request=CreateOrderRequestSerializer,
        responses={
            201: OpenApiResponse(response=OrderSerializer, description="Order created"),
            200: OpenApiResponse(response=OrderSerializer, description="Existing open order returned"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error or self-purchase"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Project not available"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = CreateOrderRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.payment_service().create_order(
            Caller.from_request(request),
            serializer.validated_data["projectId"],
            serializer.validated_data.get("billingDetails"),
        )
        if not result.ok:
            return error_response(result)

        order, created = result.value
        if created:
            return success_response(OrderSerializer(order).data, "Order created", status.HTTP_201_CREATED)
        return success_response(OrderSerializer(order).data, "Existing open order returned")


class OrderDetailAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="payment_orders_retrieve",
        summary="Get one of my orders",
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Order"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
        },
        tags=["Payments"],
    )
    def get(self, request, pk):
        result = container.payment_service().get_order(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(OrderSerializer(result.value).data)


class ExecutePaymentAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="payment_execute",
        summary="Pay for an order with a card token",
        description="""
        **What it receives:**
        - `orderId`: a pending or previously failed order of the caller
        - `token`: one-time card token from the gateway's client library
        - `billingDetails` (optional): overrides the details stored on the order

        **Outcomes:**
        - 200: payment approved, project transferred, order `paid`
        - 402: card declined (the order is `failed` and can be retried)
        - 409: order already paid, payment in progress, or project no longer available
        - 502: the gateway could not be reached
        """,
        request=ExecutePaymentRequestSerializer,
        responses={
            200: OpenApiResponse(response=OrderSerializer, description="Payment approved"),
            402: OpenApiResponse(response=ErrorResponseSerializer, description="Payment declined"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your order"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Order not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Conflict"),
            502: OpenApiResponse(response=ErrorResponseSerializer, description="Gateway unavailable"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = ExecutePaymentRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = container.payment_service().execute_payment(
            Caller.from_request(request), data["orderId"], data["token"], data.get("billingDetails")
        )
        if not result.ok:
            return error_response(result)
        return success_response(OrderSerializer(result.value).data, "Payment successful")


class InstantNotificationAPIView(APIView):
    """2Checkout INS endpoint; authenticated by the notification hash, not by JWT."""

    authentication_classes = []
    permission_classes = [permissions.AllowAny]
    parser_classes = [FormParser, MultiPartParser]
    throttle_classes = []

    @extend_schema(
        operation_id="payment_ins_webhook",
        summary="2Checkout Instant Notification Service",
        description="""
        Form-encoded notification from the gateway. The `md5_hash` field must equal
        `UPPER(MD5(sale_id + vendor_id + invoice_id + secret word))`.

        `INVOICE_STATUS_CHANGED` with `invoice_status=deposited` settles the order named
        by `vendor_order_id`. Every other verified message is acknowledged without effect.
        """,
        request={"application/x-www-form-urlencoded": {"type": "object"}},
        responses={
            200: OpenApiResponse(description="`<EPAYMENT>YYYYMMDDhhmmss</EPAYMENT>` acknowledgement"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid signature"),
        },
        tags=["Payments - Webhooks"],
    )
    def post(self, request):
        params = {key: request.data.get(key) for key in request.data.keys()}
        result = container.webhook_service().handle_ins(params)
        if not result.ok:
            return error_response(result)
        return HttpResponse(result.value, content_type="text/plain", status=status.HTTP_200_OK)
