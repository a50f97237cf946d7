from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import serializers, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from authentication.permissions import BuyerRequired, SellerRequired
from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ErrorResponseSerializer
from marketplace.contracts.api.serializers import ContractSerializer
from marketplace.requests.api.serializers import (
    QuoteAcceptSerializer,
    QuoteDeclineSerializer,
    QuoteNegotiateSerializer,
    QuoteRevisionSerializer,
    QuoteSerializer,
    QuoteWriteSerializer,
)
from marketplace.requests.domain.services import QuoteService


class QuoteCreateSerializer(QuoteWriteSerializer):
    request_id = serializers.UUIDField()


class QuoteViewSet(viewsets.ViewSet):
    permission_classes = [IsAuthenticated]

    def get_service(self) -> QuoteService:
        return container.quote_service()

    def get_permissions(self):
        if self.action in ["create", "update", "partial_update"]:
            return [IsAuthenticated(), SellerRequired()]
        elif self.action in ["accept", "decline", "negotiate", "request_revision"]:
            return [IsAuthenticated(), BuyerRequired()]
        return super().get_permissions()

    @extend_schema(
        operation_id="quotes_list",
        summary="List my quotes (as seller)",
        parameters=[OpenApiParameter(name="status", type=str, description="Filter by quote status")],
        responses={200: QuoteSerializer(many=True)},
        tags=["Marketplace - Quotes"],
    )
    def list(self, request):
        result = self.get_service().list_seller_quotes(request.user, request.query_params.get("status"))
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="quotes_create",
        summary="Submit a quote on an open request",
        description="""
        **What it receives:**
        - `request_id`, `price` (> 0), `proposal` (20-10000 chars)
        - Optional duration, start date, labor and material costs, attachment URLs

        **What it returns:**
        - The pending quote; the buyer is notified
        """,
        request=QuoteCreateSerializer,
        responses={
            201: QuoteSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Already quoted or request closed"),
        },
        tags=["Marketplace - Quotes"],
    )
    def create(self, request):
        serializer = QuoteCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = dict(serializer.validated_data)
        request_id = data.pop("request_id")
        result = self.get_service().submit_quote(request.user, request_id, data)
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="quotes_retrieve",
        summary="Get a quote",
        description="Visible to the seller who sent it and the buyer of the request.",
        responses={
            200: QuoteSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Quotes"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_quote(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="quotes_update",
        summary="Revise a quote",
        description="Seller only, while the quote is pending or under negotiation. Keeps the previous terms.",
        request=QuoteWriteSerializer,
        responses={
            200: QuoteSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=["Marketplace - Quotes"],
    )
    def partial_update(self, request, pk=None):
        serializer = QuoteWriteSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().edit_quote(request.user, pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value).data, status=status.HTTP_200_OK)

    def update(self, request, pk=None):
        return self.partial_update(request, pk)

    @extend_schema(
        operation_id="quotes_accept",
        summary="Accept a quote",
        description="""
        **What it receives:**
        - Optional `language_mode` for the contract (dual, english_only, arabic_only)

        **What it returns:**
        - The contract created for the quote, awaiting the buyer's signature.
          The request is assigned once both parties have signed.
        """,
        request=QuoteAcceptSerializer,
        responses={
            201: ContractSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Quote cannot be accepted"),
        },
        tags=["Marketplace - Quotes"],
    )
    @action(detail=True, methods=["post"])
    def accept(self, request, pk=None):
        serializer = QuoteAcceptSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().accept_quote(request.user, pk, serializer.validated_data["language_mode"])
        if not result.ok:
            return error_response(result)
        return Response(ContractSerializer(result.value).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="quotes_decline",
        summary="Decline a quote",
        request=QuoteDeclineSerializer,
        responses={
            200: QuoteSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=["Marketplace - Quotes"],
    )
    @action(detail=True, methods=["post"])
    def decline(self, request, pk=None):
        serializer = QuoteDeclineSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().decline_quote(request.user, pk, serializer.validated_data["reason"])
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="quotes_negotiate",
        summary="Counter a quote",
        description="Buyer proposes a price and/or duration; the message is posted on the quote thread.",
        request=QuoteNegotiateSerializer,
        responses={
            200: QuoteSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=["Marketplace - Quotes"],
    )
    @action(detail=True, methods=["post"])
    def negotiate(self, request, pk=None):
        serializer = QuoteNegotiateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = self.get_service().negotiate_quote(
            request.user, pk, price=data.get("price"), duration=data["duration"], message=data["message"]
        )
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="quotes_request_revision",
        summary="Ask the seller to revise a quote",
        request=QuoteRevisionSerializer,
        responses={
            200: QuoteSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=["Marketplace - Quotes"],
    )
    @action(detail=True, methods=["post"])
    def request_revision(self, request, pk=None):
        serializer = QuoteRevisionSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().request_revision(request.user, pk, serializer.validated_data["message"])
        if not result.ok:
            return error_response(result)
        return Response(QuoteSerializer(result.value).data, status=status.HTTP_200_OK)
