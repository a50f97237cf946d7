from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import BuyerRequired, SellerRequired
from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.bookings.api.serializers import (
    BookingCreateSerializer,
    BookingSerializer,
    BuyerCounterSerializer,
    DeclineReasonSerializer,
    SellerCounterSerializer,
    SellerResponseSerializer,
)
from marketplace.bookings.domain.services import BookingService

TRANSITION_RESPONSES = {
    200: BookingSerializer,
    400: ErrorResponseSerializer,
    403: OpenApiResponse(response=ErrorResponseSerializer, description="Not a party to this booking"),
    404: ErrorResponseSerializer,
    409: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed in the current status"),
}
STATUS_PARAMETER = OpenApiParameter(name="status", type=str, description="Filter by booking status")


class BookingViewSet(viewsets.ViewSet):
    """
    Direct bookings: a buyer asks one seller for a job, the seller accepts,
    declines or counters, and the buyer answers a counter. Accepting opens
    a contract.
    """

    permission_classes = [IsAuthenticated]

    def get_service(self) -> BookingService:
        return container.booking_service()

    def get_permissions(self):
        if self.action in ["create", "accept_counter", "decline_counter", "buyer_counter", "cancel"]:
            return [IsAuthenticated(), BuyerRequired()]
        elif self.action in ["seller", "accept", "decline", "counter"]:
            return [IsAuthenticated(), SellerRequired()]
        return super().get_permissions()

    def _respond(self, result, success_status=status.HTTP_200_OK):
        if not result.ok:
            return error_response(result)
        return Response(BookingSerializer(result.value).data, status=success_status)

    @extend_schema(
        operation_id="bookings_list",
        summary="List bookings I sent (as buyer)",
        parameters=[STATUS_PARAMETER],
        responses={200: BookingSerializer(many=True)},
        tags=["Marketplace - Bookings"],
    )
    def list(self, request):
        result = self.get_service().list_buyer_bookings(request.user, request.query_params.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(BookingSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="bookings_seller_list",
        summary="List bookings I received (as seller)",
        parameters=[STATUS_PARAMETER],
        responses={200: BookingSerializer(many=True)},
        tags=["Marketplace - Bookings"],
    )
    @action(detail=False, methods=["get"])
    def seller(self, request):
        result = self.get_service().list_seller_bookings(request.user, request.query_params.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(BookingSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="bookings_create",
        summary="Book a seller directly",
        description="""
        **What it receives:**
        - `seller_id`, `service_category`, `job_description` (10-5000 chars)
        - Optional proposed dates, time slot, budget range and location

        **What it returns:**
        - The pending booking; the seller is notified
        """,
        request=BookingCreateSerializer,
        responses={
            201: BookingSerializer,
            400: ErrorResponseSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer, description="Seller not found"),
        },
        tags=["Marketplace - Bookings"],
    )
    def create(self, request):
        serializer = BookingCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        result = self.get_service().create_booking(request.user, serializer.validated_data)
        return self._respond(result, status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="bookings_retrieve",
        summary="Get a booking",
        responses={200: BookingSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - Bookings"],
    )
    def retrieve(self, request, pk=None):
        return self._respond(self.get_service().get_booking(request.user, pk))

    # ------------------------------------------------------------------
    # Seller side
    # ------------------------------------------------------------------

    @extend_schema(
        operation_id="bookings_accept",
        summary="Accept a booking",
        description="Accepts the booking as proposed (or the buyer's counter) and opens a contract.",
        request=SellerResponseSerializer,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):
        serializer = SellerResponseSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(self.get_service().accept_booking(request.user, pk, serializer.validated_data["response"]))

    @extend_schema(
        operation_id="bookings_decline",
        summary="Decline a booking",
        request=DeclineReasonSerializer,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def decline(self, request, pk=None):
        serializer = DeclineReasonSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(self.get_service().decline_booking(request.user, pk, serializer.validated_data["reason"]))

    @extend_schema(
        operation_id="bookings_counter",
        summary="Counter a booking",
        description="Seller proposes other dates, a price estimate or a deposit.",
        request=SellerCounterSerializer,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def counter(self, request, pk=None):
        serializer = SellerCounterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        data = serializer.validated_data
        return self._respond(
            self.get_service().counter_booking(request.user, pk, dict(data["proposal"]), data["response"])
        )

    # ------------------------------------------------------------------
    # Buyer side
    # ------------------------------------------------------------------

    @extend_schema(
        operation_id="bookings_accept_counter",
        summary="Accept the seller's counter proposal",
        description="Applies the counter terms and opens a contract.",
        request=None,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def accept_counter(self, request, pk=None):
        return self._respond(self.get_service().accept_counter(request.user, pk))

    @extend_schema(
        operation_id="bookings_decline_counter",
        summary="Decline the seller's counter proposal",
        request=None,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def decline_counter(self, request, pk=None):
        return self._respond(self.get_service().decline_counter(request.user, pk))

    @extend_schema(
        operation_id="bookings_buyer_counter",
        summary="Answer a counter with my own proposal",
        request=BuyerCounterSerializer,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def buyer_counter(self, request, pk=None):
        serializer = BuyerCounterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
        return self._respond(
            self.get_service().buyer_counter(request.user, pk, dict(serializer.validated_data["proposal"]))
        )

    @extend_schema(
        operation_id="bookings_cancel",
        summary="Cancel a booking",
        description="Any open contract for the booking is cancelled too.",
        request=None,
        responses=TRANSITION_RESPONSES,
        tags=["Marketplace - Bookings"],
    )
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        return self._respond(self.get_service().cancel_booking(request.user, pk))
