from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.messaging.api.serializers import MessageCreateSerializer, NegotiationMessageSerializer

THREAD_PARAMETER = OpenApiParameter(
    name="thread_type", type=str, location=OpenApiParameter.PATH, enum=["quote", "booking"]
)


class ThreadMessagesView(APIView):
    """Negotiation thread on a quote or a booking, between its buyer and seller"""

    permission_classes = [permissions.IsAuthenticated]

    def get_service(self):
        return container.message_service()

    @extend_schema(
        operation_id="messages_list",
        summary="Messages on a thread",
        description="Oldest first. Messages sent to the caller are marked read.",
        parameters=[THREAD_PARAMETER],
        responses={
            200: NegotiationMessageSerializer(many=True),
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Messages"],
    )
    def get(self, request, thread_type, thread_id):
        result = self.get_service().list_messages(request.user, thread_type, thread_id)
        if not result.ok:
            return error_response(result)
        return Response(NegotiationMessageSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="messages_post",
        summary="Post a message on a thread",
        parameters=[THREAD_PARAMETER],
        request=MessageCreateSerializer,
        responses={201: NegotiationMessageSerializer, 400: ErrorResponseSerializer, 403: ErrorResponseSerializer},
        tags=["Marketplace - Messages"],
    )
    def post(self, request, thread_type, thread_id):
        serializer = MessageCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().post_message(
            request.user, thread_type, thread_id, serializer.validated_data["content"]
        )
        if not result.ok:
            return error_response(result)
        return Response(NegotiationMessageSerializer(result.value).data, status=status.HTTP_201_CREATED)
