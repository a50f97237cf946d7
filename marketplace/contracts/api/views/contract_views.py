from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ContractDocumentResponseSerializer, ErrorResponseSerializer
from marketplace.contracts.api.serializers import (
    ContractDetailSerializer,
    ContractSerializer,
    ContractTermsUpdateSerializer,
)
from marketplace.contracts.domain.services import ContractService


def client_ip(request):
    forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.META.get("REMOTE_ADDR")


class ContractViewSet(viewsets.ViewSet):
    """Contracts are created by accepting a quote or a booking; only their parties can see them."""

    permission_classes = [IsAuthenticated]

    def get_service(self) -> ContractService:
        return container.contract_service()

    @extend_schema(
        operation_id="contracts_list",
        summary="List my contracts",
        parameters=[OpenApiParameter(name="role", type=str, description="buyer | seller (default: both)")],
        responses={200: ContractSerializer(many=True)},
        tags=["Marketplace - Contracts"],
    )
    def list(self, request):
        result = self.get_service().list_contracts(request.user, request.query_params.get("role"))
        if not result.ok:
            return error_response(result)
        return Response(ContractSerializer(result.value, many=True).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="contracts_retrieve",
        summary="Get a contract with its signatures",
        responses={200: ContractDetailSerializer, 403: ErrorResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - Contracts"],
    )
    def retrieve(self, request, pk=None):
        result = self.get_service().get_contract(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(ContractDetailSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="contracts_sign",
        summary="Sign a contract",
        description="""
        **What it receives:**
        - Authentication token of the buyer or the seller

        **What it returns:**
        - The contract. The buyer signs first; the seller's signature executes it,
          which assigns the request or accepts the booking.
        """,
        request=None,
        responses={
            200: ContractSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Already signed or wrong turn"),
        },
        tags=["Marketplace - Contracts"],
    )
    @action(detail=True, methods=["post"])
    def sign(self, request, pk=None):
        result = self.get_service().sign(request.user, pk, ip_address=client_ip(request))
        if not result.ok:
            return error_response(result)
        return Response(ContractSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="contracts_withdraw_signature",
        summary="Withdraw the buyer's signature",
        description="Only until the seller has signed.",
        request=None,
        responses={
            200: ContractSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=["Marketplace - Contracts"],
    )
    @action(detail=True, methods=["post"])
    def withdraw_signature(self, request, pk=None):
        result = self.get_service().withdraw_signature(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(ContractSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="contracts_update_terms",
        summary="Change binding terms",
        description="""
        **What it receives:**
        - Any of start/completion dates, warranty days, escrow flag, access hours,
          payment schedule (deposit/progress/completion adding up to 100) and language mode

        **What it returns:**
        - The contract with its version bumped. Allowed only before anyone signed.
        """,
        request=ContractTermsUpdateSerializer,
        responses={
            200: ContractSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: ErrorResponseSerializer,
        },
        tags=["Marketplace - Contracts"],
    )
    @action(detail=True, methods=["patch"])
    def terms(self, request, pk=None):
        serializer = ContractTermsUpdateSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = self.get_service().update_terms(request.user, pk, serializer.validated_data)
        if not result.ok:
            return error_response(result)
        return Response(ContractSerializer(result.value).data, status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="contracts_document",
        summary="Render the contract document",
        description="Renders the bilingual HTML, stores it with its SHA-256 hash and records a version.",
        request=None,
        responses={
            200: ContractDocumentResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=["Marketplace - Contracts"],
    )
    @action(detail=True, methods=["post"])
    def document(self, request, pk=None):
        result = self.get_service().generate_document(request.user, pk)
        if not result.ok:
            return error_response(result)

        contract = result.value["contract"]
        return Response(
            {
                "contract_id": str(contract.id),
                "version": contract.version,
                "html": result.value["html"],
                "content_hash": result.value["content_hash"],
            },
            status=status.HTTP_200_OK,
        )
