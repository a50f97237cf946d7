from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import ProfileUpdateSerializer, UserSerializer
from authentication.api.serializers.response_serializers import (
    ErrorResponseSerializer,
    ProfileUpdateResponseSerializer,
)
from authentication.domain.services.profile_service import ProfileService


def get_profile_service():
    return ProfileService()


class ProfileView(APIView):
    """Current user's account and profile"""

    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="auth_profile_get",
        summary="Get my profile",
        responses={200: UserSerializer},
        tags=["Profile"],
    )
    def get(self, request):
        result = get_profile_service().get_profile(request.user)
        return Response(UserSerializer(result.data["user"]).data)

    @extend_schema(
        operation_id="auth_profile_update",
        summary="Update my profile",
        description="Partial update. Vendor fields (categories, availability, crew size...) are seller only.",
        request=ProfileUpdateSerializer,
        responses={
            200: ProfileUpdateResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Seller-only fields"),
        },
        tags=["Profile"],
    )
    def patch(self, request):
        serializer = ProfileUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = get_profile_service().update_profile(request.user, serializer.validated_data)
        if not result.success:
            if result.error == "Access denied":
                return Response({"detail": result.message, **result.data}, status=status.HTTP_403_FORBIDDEN)
            if result.error == "Validation error":
                return Response(result.data, status=status.HTTP_400_BAD_REQUEST)
            return Response({"detail": result.message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        request.user.refresh_from_db()
        return Response(
            {
                "message": result.message,
                "updated_fields": result.data["updated_fields"],
                "user": UserSerializer(request.user).data,
            }
        )
