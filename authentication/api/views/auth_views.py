from drf_spectacular.utils import OpenApiExample, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import LoginSerializer, UserRegistrationSerializer, UserSerializer
from authentication.api.serializers.response_serializers import (
    ErrorResponseSerializer,
    LoginResponseSerializer,
    RegisterResponseSerializer,
    ValidationErrorResponseSerializer,
)
from authentication.domain.services.auth_service import AuthService


# Dependency Injection Helper
def get_auth_service():
    """Factory to get AuthService instance."""
    return AuthService()


class LoginAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_login",
        summary="Login with email and password",
        description="Authenticate with email and password and receive a JWT pair carrying role and language claims.",
        request=LoginSerializer,
        responses={
            200: OpenApiResponse(
                response=LoginResponseSerializer,
                description="Login successful",
                examples=[
                    OpenApiExample(
                        "Successful Login",
                        value={
                            "message": "Login successful",
                            "access": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "refresh": "eyJhbGciOiJIUzI1NiIsInR5cCI6IkpXVCJ9...",
                            "user": {
                                "id": "123e4567-e89b-12d3-a456-426614174000",
                                "email": "buyer@example.com",
                                "username": "buyer1",
                                "role": "buyer",
                                "language": "ar",
                            },
                        },
                    )
                ],
            ),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Missing fields"),
            401: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid credentials"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = get_auth_service().login(
            serializer.validated_data["email"], serializer.validated_data["password"], request
        )
        if not result.success:
            return Response({"detail": result.error}, status=status.HTTP_401_UNAUTHORIZED)

        return Response(
            {
                "message": result.message,
                **result.tokens(),
                "user": UserSerializer(result.user).data,
            },
            status=status.HTTP_200_OK,
        )


class RegisterAPIView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="auth_register",
        summary="Register new user account",
        description="""
        Create a buyer or seller account. The account is active immediately and
        the response carries a JWT pair, like login.
        """,
        request=UserRegistrationSerializer,
        responses={
            201: OpenApiResponse(response=RegisterResponseSerializer, description="Registration successful"),
            400: OpenApiResponse(response=ValidationErrorResponseSerializer, description="Validation errors"),
        },
        tags=["Authentication"],
    )
    def post(self, request):
        serializer = UserRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = get_auth_service().register(
            email=data["email"],
            username=data["username"],
            password=data["password"],
            role=data["role"],
            language=data["language"],
            full_name=data.get("full_name", ""),
            request=request,
        )
        if not result.success:
            body = dict(result.errors) if result.errors else {"detail": result.error}
            return Response(body, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "message": result.message,
                **result.tokens(),
                "user": UserSerializer(result.user).data,
            },
            status=status.HTTP_201_CREATED,
        )
