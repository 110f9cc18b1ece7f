import logging

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated

from infrastructure.container import container
from marketplace.api.serializers import (
    PaginatedProjectsSerializer,
    ProjectCreateSerializer,
    ProjectSerializer,
    ProjectUpdateSerializer,
    RejectProjectSerializer,
)
from marketplace.permissions import IsAdminRole
from utils.rbac import Caller
from utils.responses import error_response, paginated_response, success_response
from utils.serializers import ErrorResponseSerializer

logger = logging.getLogger(__name__)

PROJECT_FILTER_PARAMS = ("status", "category", "minPrice", "maxPrice", "search")


class ProjectViewSet(viewsets.ViewSet):
    """
    Projects and their review lifecycle.

    Thin router over ProjectLifecycleService: views validate input, build the
    Caller and translate the ServiceResult into the response envelope.
    """

    lookup_value_regex = "[0-9a-f-]{36}"

    def get_permissions(self):
        if self.action in ("list", "retrieve"):
            return [AllowAny()]
        if self.action in ("approve", "reject"):
            return [IsAuthenticated(), IsAdminRole()]
        return [IsAuthenticated()]

    def get_service(self):
        return container.lifecycle_service()

    @extend_schema(
        operation_id="projects_list",
        summary="List projects visible to the caller",
        description="""
        Anonymous callers see approved projects only. Authenticated users see approved
        projects plus their own, and `status` filters only their own. Admins see everything.
        """,
        parameters=[
            OpenApiParameter(name="status", type=str, description="draft, submitted, approved or rejected"),
            OpenApiParameter(name="category", type=str, description="Project category"),
            OpenApiParameter(name="minPrice", type=float, description="Minimum price"),
            OpenApiParameter(name="maxPrice", type=float, description="Maximum price"),
            OpenApiParameter(name="search", type=str, description="Case-insensitive title/description search"),
            OpenApiParameter(name="page", type=int, description="Page number (default 1)"),
            OpenApiParameter(name="limit", type=int, description="Page size (default 10, max 100)"),
        ],
        responses={
            200: OpenApiResponse(response=PaginatedProjectsSerializer, description="Projects"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter"),
        },
        tags=["Projects"],
    )
    def list(self, request):
        params = request.query_params
        filters = {key: params.get(key) for key in PROJECT_FILTER_PARAMS if params.get(key) not in (None, "")}
        result = self.get_service().list_projects(
            Caller.from_request(request), filters, params.get("page"), params.get("limit")
        )
        if not result.ok:
            return error_response(result)
        return paginated_response(result.value, ProjectSerializer)

    @extend_schema(
        operation_id="projects_retrieve",
        summary="Get a project",
        description="Hidden projects (another user's draft, for example) read as 404.",
        responses={
            200: OpenApiResponse(response=ProjectSerializer, description="Project"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Not found"),
        },
        tags=["Projects"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_project(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data)

    @extend_schema(
        operation_id="projects_create",
        summary="Create a project",
        description="New projects start as `draft` and belong to the caller.",
        request=ProjectCreateSerializer,
        responses={
            201: OpenApiResponse(response=ProjectSerializer, description="Project created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
        },
        tags=["Projects"],
    )
    def create(self, request):
        serializer = ProjectCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_service().create_project(Caller.from_request(request), serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data, "Project created", status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="projects_update",
        summary="Edit a draft or rejected project",
        description="Editing a rejected project returns it to `draft` and clears the rejection reason.",
        request=ProjectUpdateSerializer,
        responses={
            200: OpenApiResponse(response=ProjectSerializer, description="Project updated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Project not editable in its status"),
        },
        tags=["Projects"],
    )
    def update(self, request, pk=None):
        serializer = ProjectUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_service().edit_project(Caller.from_request(request), pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data, "Project updated")

    @extend_schema(
        operation_id="projects_delete",
        summary="Delete a project",
        description="Owners cannot delete sold projects or projects under review; admins can delete any project.",
        responses={
            200: OpenApiResponse(description="Project deleted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Project sold or under review"),
        },
        tags=["Projects"],
    )
    def destroy(self, request, pk=None):
        result = self.get_service().delete_project(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(message="Project deleted")

    @extend_schema(
        operation_id="projects_submit",
        summary="Submit a project for review",
        request=None,
        responses={
            200: OpenApiResponse(response=ProjectSerializer, description="Project submitted"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status transition"),
        },
        tags=["Projects"],
    )
    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        result = self.get_service().submit_project(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data, "Project submitted for review")

    @extend_schema(
        operation_id="projects_approve",
        summary="Approve a submitted project (admin)",
        request=None,
        responses={
            200: OpenApiResponse(response=ProjectSerializer, description="Project approved"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin only"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status transition"),
        },
        tags=["Projects - Review"],
    )
    @action(detail=True, methods=["put"])
    def approve(self, request, pk=None):
        result = self.get_service().approve_project(Caller.from_request(request), pk)
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data, "Project approved")

    @extend_schema(
        operation_id="projects_reject",
        summary="Reject a submitted project (admin)",
        request=RejectProjectSerializer,
        responses={
            200: OpenApiResponse(response=ProjectSerializer, description="Project rejected"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Reason missing"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin only"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid status transition"),
        },
        tags=["Projects - Review"],
    )
    @action(detail=True, methods=["put"])
    def reject(self, request, pk=None):
        serializer = RejectProjectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = self.get_service().reject_project(
            Caller.from_request(request), pk, serializer.validated_data["reason"]
        )
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data, "Project rejected")

    @extend_schema(
        operation_id="projects_media_upload",
        summary="Upload images for a project",
        description="""
        Multipart upload with one or more `media` files (at most 5 per request,
        10 MB each, jpeg/png/gif/webp). A project holds at most 10 images and
        accepts uploads only while in `draft` or `rejected`.
        """,
        request={
            "multipart/form-data": {
                "type": "object",
                "properties": {"media": {"type": "array", "items": {"type": "string", "format": "binary"}}},
            }
        },
        responses={
            200: OpenApiResponse(response=ProjectSerializer, description="Media stored"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Files rejected"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not the owner"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Project not editable"),
        },
        tags=["Projects"],
    )
    @action(detail=True, methods=["post"], parser_classes=[MultiPartParser, FormParser])
    def media(self, request, pk=None):
        result = container.media_service().upload_media(
            Caller.from_request(request), pk, request.FILES.getlist("media")
        )
        if not result.ok:
            return error_response(result)
        return success_response(ProjectSerializer(result.value).data, "Media uploaded")
