import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.api.serializers import (
    CategorySerializer,
    CreateListingSerializer,
    ListingSerializer,
    UpdateListingSerializer,
)
from utils.rbac import Caller
from utils.responses import error_response, paginated_response, success_response
from utils.serializers import ErrorResponseSerializer

logger = logging.getLogger(__name__)

BROWSE_PARAMETERS = [
    OpenApiParameter(name="category", type=str, description="Project category"),
    OpenApiParameter(name="minPrice", type=float, description="Minimum price"),
    OpenApiParameter(name="maxPrice", type=float, description="Maximum price"),
    OpenApiParameter(name="search", type=str, description="Case-insensitive title/description search"),
    OpenApiParameter(name="sortBy", type=str, description="createdAt (default), price or title"),
    OpenApiParameter(name="order", type=str, description="asc or desc (default)"),
    OpenApiParameter(name="page", type=int, description="Page number (default 1)"),
    OpenApiParameter(name="limit", type=int, description="Page size (default 10, max 100)"),
]


def browse_listings(request):
    params = request.query_params
    result = container.listing_service().browse(
        filters=params,
        sort_by=params.get("sortBy"),
        order=params.get("order"),
        page=params.get("page"),
        limit=params.get("limit"),
    )
    if not result.ok:
        return error_response(result)
    return paginated_response(result.value, ListingSerializer)


class ListingListCreateAPIView(APIView):
    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    @extend_schema(
        operation_id="marketplace_browse",
        summary="Browse listed projects",
        description="Approved, listed and unsold projects only.",
        parameters=BROWSE_PARAMETERS,
        responses={
            200: OpenApiResponse(response=ListingSerializer(many=True), description="Listings"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid sort or filter"),
        },
        tags=["Marketplace"],
    )
    def get(self, request):
        return browse_listings(request)

    @extend_schema(
        operation_id="marketplace_list_project",
        summary="List an approved project for sale",
        request=CreateListingSerializer,
        responses={
            201: OpenApiResponse(response=ListingSerializer, description="Project listed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Project not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Already listed, sold or not approved"),
        },
        tags=["Marketplace"],
    )
    def post(self, request):
        serializer = CreateListingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.listing_service().create_listing(
            Caller.from_request(request), serializer.validated_data["projectId"]
        )
        if not result.ok:
            return error_response(result)
        return success_response(ListingSerializer(result.value).data, "Project listed for sale", status.HTTP_201_CREATED)


class ListingSearchAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="marketplace_search",
        summary="Search listed projects",
        description="Same filters, sorting and pagination as browsing.",
        parameters=BROWSE_PARAMETERS,
        responses={
            200: OpenApiResponse(response=ListingSerializer(many=True), description="Listings"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid sort or filter"),
        },
        tags=["Marketplace"],
    )
    def get(self, request):
        return browse_listings(request)


class CategoryListAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="marketplace_categories",
        summary="Project categories",
        description="Every category with the number of projects currently listed in it.",
        responses={200: OpenApiResponse(response=CategorySerializer(many=True), description="Categories")},
        tags=["Marketplace"],
    )
    def get(self, request):
        result = container.listing_service().list_categories()
        if not result.ok:
            return error_response(result)
        return success_response(CategorySerializer(result.value, many=True).data)


class ListingDetailAPIView(APIView):
    def get_permissions(self):
        if self.request.method == "GET":
            return [permissions.AllowAny()]
        return [permissions.IsAuthenticated()]

    @extend_schema(
        operation_id="marketplace_listing_detail",
        summary="Get a listing",
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Listing"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Not listed"),
        },
        tags=["Marketplace"],
    )
    def get(self, request, pk):
        result = container.listing_service().get_listing(pk)
        if not result.ok:
            return error_response(result)
        return success_response(ListingSerializer(result.value).data)

    @extend_schema(
        operation_id="marketplace_listing_update",
        summary="Update a listing",
        description="Only title, description, price and deliveryTime can change, and only while listed and unsold.",
        request=UpdateListingSerializer,
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Listing updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Not listed"),
        },
        tags=["Marketplace"],
    )
    def put(self, request, pk):
        serializer = UpdateListingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.listing_service().update_listing(Caller.from_request(request), pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return success_response(ListingSerializer(result.value).data, "Listing updated")

    @extend_schema(
        operation_id="marketplace_unlist",
        summary="Remove a listing",
        description="Owner or admin. The project stays approved and can be listed again.",
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Listing removed"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Not listed"),
        },
        tags=["Marketplace"],
    )
    def delete(self, request, pk):
        result = container.listing_service().unlist(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(ListingSerializer(result.value).data, "Listing removed")


class ListingPurchaseAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="marketplace_buy",
        summary="Buy a listed project",
        description="""
        Direct transfer without the payment gateway. When several buyers race for the
        same listing exactly one succeeds; the others get 409.
        """,
        request=None,
        responses={
            200: OpenApiResponse(response=ListingSerializer, description="Project purchased"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Own project"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Listing not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Sold or not for sale"),
        },
        tags=["Marketplace"],
    )
    def post(self, request, pk):
        result = container.listing_service().purchase(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(ListingSerializer(result.value).data, "Purchase completed")
