from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import SellerRequired
from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer, HistoryResponseSerializer, JourneyResponseSerializer
from marketplace.bookings.api.serializers import BookingSerializer
from marketplace.requests.api.serializers import MaintenanceRequestSerializer


def get_history_service():
    return container.history_service()


class BuyerHistoryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="history_buyer",
        summary="My history as a buyer",
        description="""
        Requests, bookings and declined or expired quotes, bucketed into
        `completed`, `rejected` and `active`, with bilingual status labels,
        the counterpart, the resolved price and the review given.
        """,
        responses={200: HistoryResponseSerializer},
        tags=["Marketplace - History"],
    )
    def get(self, request):
        result = get_history_service().buyer_history(request.user)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)


class SellerHistoryView(APIView):
    permission_classes = [permissions.IsAuthenticated, SellerRequired]

    @extend_schema(
        operation_id="history_seller",
        summary="My history as a seller",
        responses={200: HistoryResponseSerializer},
        tags=["Marketplace - History"],
    )
    def get(self, request):
        result = get_history_service().seller_history(request.user)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)


class BuyerOverviewView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="history_buyer_overview",
        summary="Open requests and pending bookings",
        description="Requests split into `open` and `in_review`, bookings into `sent` and `reviewed`.",
        responses={200: None},
        tags=["Marketplace - History"],
    )
    def get(self, request):
        result = get_history_service().buyer_overview(request.user)
        if not result.ok:
            return error_response(result)

        groups = result.value
        return Response(
            {
                "open": MaintenanceRequestSerializer(groups["open"], many=True).data,
                "in_review": MaintenanceRequestSerializer(groups["in_review"], many=True).data,
                "sent": BookingSerializer(groups["sent"], many=True).data,
                "reviewed": BookingSerializer(groups["reviewed"], many=True).data,
            },
            status=status.HTTP_200_OK,
        )


class JourneyView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="history_journey",
        summary="Stages of a deal on its way to an active contract",
        parameters=[
            OpenApiParameter(name="flow", type=str, location=OpenApiParameter.PATH, enum=["quote", "booking"]),
            OpenApiParameter(name="language", type=str, description="en (default) | ar"),
        ],
        responses={200: JourneyResponseSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - History"],
    )
    def get(self, request, flow, object_id):
        language = request.query_params.get("language") or getattr(request.user, "language", "en")
        result = get_history_service().journey(request.user, flow, object_id, language)
        if not result.ok:
            return error_response(result)
        return Response(result.value, status=status.HTTP_200_OK)
