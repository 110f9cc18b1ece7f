from drf_spectacular.utils import OpenApiExample, OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.views import APIView

from authentication.api.serializers import (
    AdminUserUpdateSerializer,
    AuthResponseSerializer,
    LoginRequestSerializer,
    ProfileUpdateSerializer,
    RegisterRequestSerializer,
    UserDeleteSerializer,
    UserSerializer,
)
from infrastructure.container import container
from utils.rbac import Caller
from utils.responses import error_response, success_response
from utils.serializers import ErrorResponseSerializer


def _auth_payload(value):
    return {"user": UserSerializer(value["user"]).data, "access": value["access"], "refresh": value["refresh"]}


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register a new account",
        description="""
        **What it receives:**
        - `name`, `email`, `password`
        - `role` (optional): `buyer` (default) or `seller`; `admin` cannot be self-assigned

        **What it returns:**
        - The created user plus an access/refresh token pair
        """,
        request=RegisterRequestSerializer,
        responses={
            201: OpenApiResponse(response=AuthResponseSerializer, description="Account created"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Email already registered"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = RegisterRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.auth_service().register(**serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return success_response(_auth_payload(result.value), "Registration successful", status.HTTP_201_CREATED)


class LoginAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_login",
        summary="Login with email and password",
        description="""
        Authenticates the user and stamps `lastLogin`.

        Access tokens carry `role` and `email` claims. Blocked accounts are refused with 403.
        """,
        request=LoginRequestSerializer,
        responses={
            200: OpenApiResponse(
                response=AuthResponseSerializer,
                description="Login successful",
                examples=[
                    OpenApiExample(
                        "Successful Login",
                        value={
                            "success": True,
                            "message": "Login successful",
                            "data": {
                                "access": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                                "refresh": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                                "user": {"id": "123e4567-e89b-12d3-a456-426614174000", "role": "buyer"},
                            },
                        },
                    )
                ],
            ),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid credentials"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Account blocked"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = LoginRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.auth_service().login(
            serializer.validated_data["email"], serializer.validated_data["password"], request
        )
        if not result.ok:
            return error_response(result)
        return success_response(_auth_payload(result.value), "Login successful")


class MeAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_me",
        summary="Get the current user's profile",
        responses={200: OpenApiResponse(response=UserSerializer, description="Current user")},
        tags=["Authentication"],
    )
    def get(self, request):
        return success_response(UserSerializer(request.user).data)

    @extend_schema(
        operation_id="auth_me_update",
        summary="Update the current user's profile",
        request=ProfileUpdateSerializer,
        responses={
            200: OpenApiResponse(response=UserSerializer, description="Profile updated"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
        },
        tags=["Authentication"],
    )
    def put(self, request):
        serializer = ProfileUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.auth_service().update_profile(Caller.from_request(request), serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return success_response(UserSerializer(result.value).data, "Profile updated")


class UserListAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_users_list",
        summary="List users (admin)",
        parameters=[OpenApiParameter(name="role", type=str, description="Filter by role")],
        responses={
            200: OpenApiResponse(response=UserSerializer(many=True), description="Users"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin only"),
        },
        tags=["Authentication - Admin"],
    )
    def get(self, request):
        result = container.auth_service().list_users(Caller.from_request(request), request.query_params.get("role"))
        if not result.ok:
            return error_response(result)
        users = result.value
        return success_response(UserSerializer(users, many=True).data, count=users.count())


class UserAdminAPIView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_users_update",
        summary="Change a user's role or blocked flag (admin)",
        request=AdminUserUpdateSerializer,
        responses={
            200: OpenApiResponse(response=UserSerializer, description="User updated"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Admin only"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
        },
        tags=["Authentication - Admin"],
    )
    def put(self, request, pk):
        serializer = AdminUserUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.auth_service().update_user(
            Caller.from_request(request),
            pk,
            role=serializer.validated_data.get("role"),
            is_blocked=serializer.validated_data.get("isBlocked"),
        )
        if not result.ok:
            return error_response(result)
        return success_response(UserSerializer(result.value).data, "User updated")

    @extend_schema(
        operation_id="auth_users_delete",
        summary="Delete an account",
        description="""
        Admins may delete any account. Other users may only delete their own,
        and deleting your own account requires `{"confirm": true}` in the body.
        """,
        request=UserDeleteSerializer,
        responses={
            200: OpenApiResponse(description="User deleted"),
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Confirmation missing"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed"),
            404: OpenApiResponse(response=ErrorResponseSerializer, description="User not found"),
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Payment in progress"),
        },
        tags=["Authentication - Admin"],
    )
    def delete(self, request, pk):
        serializer = UserDeleteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = container.auth_service().delete_user(
            Caller.from_request(request), pk, confirm=serializer.validated_data["confirm"]
        )
        if not result.ok:
            return error_response(result)
        return success_response(message="User deleted successfully")
