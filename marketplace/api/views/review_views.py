from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.api.serializers import CreateReviewSerializer, ReviewSerializer, UpdateReviewSerializer
from utils.rbac import Caller
from utils.responses import error_response, paginated_response, success_response
from utils.serializers import ErrorResponseSerializer


class ProjectReviewListAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="reviews_list_for_project",
        summary="Reviews of a project",
        description="Paginated, newest first, with `averageRating` beside the page counters.",
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default 1)"),
            OpenApiParameter(name="limit", type=int, description="Page size (default 10, max 100)"),
        ],
        responses={
            200: OpenApiResponse(response=ReviewSerializer(many=True), description="Reviews"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Project not found"),
        },
        tags=["Reviews"],
    )
    def get(self, request, project_id):
        params = request.query_params
        result = container.review_service().list_reviews(project_id, params.get("page"), params.get("limit"))
        if not result.ok:
            return error_response(result)
        return paginated_response(result.value, ReviewSerializer, averageRating=result.value["averageRating"])


class ReviewCreateAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="reviews_create",
        summary="Review a purchased project",
        request=CreateReviewSerializer,
        responses={
            201: OpenApiResponse(response=ReviewSerializer, description="Review created"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Project not purchased"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Project not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Already reviewed"),
        },
        tags=["Reviews"],
    )
    def post(self, request):
        serializer = CreateReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        result = container.review_service().create_review(
            Caller.from_request(request), data["projectId"], data["rating"], data.get("comment", "")
        )
        if not result.ok:
            return error_response(result)
        return success_response(ReviewSerializer(result.value).data, "Review created", status.HTTP_201_CREATED)


class ReviewDetailAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="reviews_update",
        summary="Edit my review",
        request=UpdateReviewSerializer,
        responses={
            200: OpenApiResponse(response=ReviewSerializer, description="Review updated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the author"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Reviews"],
    )
    def put(self, request, pk):
        serializer = UpdateReviewSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.review_service().update_review(Caller.from_request(request), pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return success_response(ReviewSerializer(result.value).data, "Review updated")

    @extend_schema(
        operation_id="reviews_delete",
        summary="Delete a review",
        description="The author or an admin.",
        responses={
            200: OpenApiResponse(description="Review deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Review not found"),
        },
        tags=["Reviews"],
    )
    def delete(self, request, pk):
        result = container.review_service().delete_review(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(message="Review deleted")
