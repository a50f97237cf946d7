from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import BuyerRequired, SellerRequired
from infrastructure.container import container
from marketplace.api.errors import error_response, page_params
from marketplace.api.serializers import ErrorResponseSerializer, PaginatedResponseSerializer
from marketplace.requests.api.serializers import (
    MaintenanceRequestSerializer,
    MaintenanceRequestWriteSerializer,
    QuoteSerializer,
)
from marketplace.requests.domain.services import RequestService

PAGE_PARAMETERS = [
    OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
    OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20, max: 100)"),
]


class MaintenanceRequestViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> RequestService:
        return container.request_service()

    def get_permissions(self):
        if self.action in ["create", "update", "partial_update", "cancel"]:
            return [IsAuthenticated(), BuyerRequired()]
        elif self.action in ["feed"]:
            return [IsAuthenticated(), SellerRequired()]
        return super().get_permissions()

    @extend_schema(
        operation_id="requests_list",
        summary="List my maintenance requests",
        description="""
        **What it receives:**
        - Optional status filter (query param)
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Paginated requests posted by the current user, newest first, with their quote counts
        """,
        parameters=[OpenApiParameter(name="status", type=str, description="Filter by request status")]
        + PAGE_PARAMETERS,
        responses={200: PaginatedResponseSerializer, 500: ErrorResponseSerializer},
        tags=["Marketplace - Requests"],
    )
    def list(self, request):
        page, page_size = page_params(request)
        result = self.get_service().list_buyer_requests(
            request.user, request.query_params.get("status"), page, page_size
        )
        if not result.ok:
            return error_response(result)

        response_data = result.value
        response_data["results"] = MaintenanceRequestSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_create",
        summary="Post a maintenance request",
        description="""
        **What it receives:**
        - `title` (5-200 chars), `description` (20-5000 chars), `category`
        - Optional urgency, location, city, preferred start date, budget range and photo URLs

        **What it returns:**
        - The new request in `open` status, visible on the sellers' feed
        """,
        request=MaintenanceRequestWriteSerializer,
        responses={
            201: MaintenanceRequestSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Validation error"),
        },
        tags=["Marketplace - Requests"],
    )
    def create(self, request):
        serializer = MaintenanceRequestWriteSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().create_request(request.user, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(MaintenanceRequestSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="requests_retrieve",
        summary="Get a maintenance request",
        description="Visible to its buyer, to the assigned seller and, while open, to any seller.",
        responses={200: MaintenanceRequestSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - Requests"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_request(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(MaintenanceRequestSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_update",
        summary="Edit an open maintenance request",
        request=MaintenanceRequestWriteSerializer,
        responses={
            200: MaintenanceRequestSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Request is no longer open"),
        },
        tags=["Marketplace - Requests"],
    )
    def partial_update(self, request, pk=None):
        serializer = MaintenanceRequestWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().update_request(request.user, pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(MaintenanceRequestSerializer(result.value).data, status=status.HTTP_200_OK)

    def update(self, request, pk=None):
        return self.partial_update(request, pk)

    @extend_schema(
        operation_id="requests_cancel",
        summary="Cancel a maintenance request",
        description="Pending quotes on the request are declined.",
        request=None,
        responses={
            200: MaintenanceRequestSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Cannot cancel in this status"),
        },
        tags=["Marketplace - Requests"],
    )
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        result = self.get_service().cancel_request(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(MaintenanceRequestSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_feed",
        summary="Open requests for sellers",
        description="""
        **What it receives:**
        - Optional `category` and `city` filters
        - Pagination parameters (page, page_size)

        **What it returns:**
        - Open requests from other users, each with `has_quoted` for the current seller
        """,
        parameters=[
            OpenApiParameter(name="category", type=str, description="Category key"),
            OpenApiParameter(name="city", type=str, description="City (case insensitive)"),
        ]
        + PAGE_PARAMETERS,
        responses={200: PaginatedResponseSerializer, 403: ErrorResponseSerializer},
        tags=["Marketplace - Requests"],
    )
    @action(detail=False, methods=["get"])
    def feed(self, request):
        page, page_size = page_params(request)
        result = self.get_service().marketplace_feed(
            request.user,
            request.query_params.get("category"),
            request.query_params.get("city"),
            page,
            page_size,
        )
        if not result.ok:
            return error_response(result)

        response_data = result.value
        response_data["results"] = MaintenanceRequestSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="requests_quotes_list",
        summary="Quotes received on a request",
        description="Buyer only. Each quote carries `expired` once another quote on the request was accepted.",
        responses={200: QuoteSerializer(many=True), 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - Requests"],
    )
    @action(detail=True, methods=["get"])
    def quotes(self, request, pk=None):
        result = container.quote_service().list_request_quotes(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

