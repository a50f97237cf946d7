from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema, inline_serializer
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response, page_params
from marketplace.api.serializers import ErrorResponseSerializer

from .serializers import NotificationListResponseSerializer, NotificationSerializer


class NotificationViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self):
        return container.notification_service()

    @extend_schema(
        operation_id="notifications_list",
        summary="My notifications, newest first",
        parameters=[
            OpenApiParameter(name="unread", type=bool, description="Only unread notifications"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={200: NotificationListResponseSerializer},
        tags=["Notifications"],
    )
    def list(self, request):
        unread_only = request.query_params.get("unread", "").lower() in ("1", "true", "yes")
        page, page_size = page_params(request)
        result = self.get_service().list_notifications(request.user, unread_only, page, page_size)
        if not result.ok:
            return error_response(result)

        response_data = result.value
        response_data["results"] = NotificationSerializer(
            result.value["results"], many=True, context={"request": request}
        ).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="notifications_unread_count",
        summary="Number of unread notifications",
        responses={200: inline_serializer("UnreadCount", {"unread_count": serializers.IntegerField()})},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["get"])
    def unread_count(self, request):
        result = self.get_service().unread_count(request.user)
        if not result.ok:
            return error_response(result)
        return Response({"unread_count": result.value}, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="notifications_mark_read",
        summary="Mark one notification read",
        request=None,
        responses={
            200: NotificationSerializer,
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Not your notification"),
            404: ErrorResponseSerializer,
        },
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = self.get_service().mark_read(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(NotificationSerializer(result.value, context={"request": request}).data)

    @extend_schema(
        operation_id="notifications_mark_all_read",
        summary="Mark all my notifications read",
        request=None,
        responses={200: inline_serializer("MarkedRead", {"updated": serializers.IntegerField()})},
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"])
    def read_all(self, request):
        result = self.get_service().mark_all_read(request.user)
        if not result.ok:
            return error_response(result)
        return Response({"updated": result.value}, status=status.HTTP_200_OK)
