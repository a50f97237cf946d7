from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.api.serializers import MockVendorRequestSerializer, VendorReviewSerializer, VendorSerializer
from authentication.api.serializers.response_serializers import (
    ErrorResponseSerializer,
    MockVendorResponseSerializer,
    VendorListResponseSerializer,
)
from authentication.domain.services.mock_vendor_service import MockVendorService
from authentication.permissions import AdminRequired, BuyerRequired
from infrastructure.container import container
from marketplace.api.errors import error_response, page_params


FILTER_PARAMS = ("category", "city", "min_rating", "verified", "availability", "search")


def get_vendor_service():
    return container.vendor_service()


def get_mock_vendor_service():
    return MockVendorService()


class VendorListView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="vendors_discover",
        summary="Discover vendors",
        description="Discoverable sellers ordered by rating, completed projects and response time.",
        parameters=[
            OpenApiParameter(name="category", type=str, description="Service category key"),
            OpenApiParameter(name="city", type=str, description="City (case insensitive)"),
            OpenApiParameter(name="min_rating", type=float, description="Minimum seller rating"),
            OpenApiParameter(name="verified", type=bool, description="Only verified vendors"),
            OpenApiParameter(name="availability", type=str, description="accepting_requests | busy | fully_booked"),
            OpenApiParameter(name="search", type=str, description="Free text over names, company and bio"),
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={
            200: VendorListResponseSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer, description="Invalid filter"),
        },
        tags=["Vendors"],
    )
    def get(self, request):
        filters = {key: request.query_params[key] for key in FILTER_PARAMS if key in request.query_params}
        page, page_size = page_params(request)
        user = request.user if request.user.is_authenticated else None

        result = get_vendor_service().discover(filters, user=user, page=page, page_size=page_size)
        if not result.ok:
            return error_response(result)

        response_data = result.value
        response_data["results"] = VendorSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)


class VendorDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="vendors_retrieve",
        summary="Vendor details with the three latest reviews",
        responses={200: VendorSerializer, 404: ErrorResponseSerializer},
        tags=["Vendors"],
    )
    def get(self, request, pk):
        user = request.user if request.user.is_authenticated else None
        result = get_vendor_service().get_vendor(pk, user=user)
        if not result.ok:
            return error_response(result)

        data = VendorSerializer(result.value["vendor"], context={"is_saved": result.value["is_saved"]}).data
        data["recent_reviews"] = VendorReviewSerializer(result.value["recent_reviews"], many=True).data
        return Response(data)


class VendorSaveView(APIView):
    permission_classes = [permissions.IsAuthenticated, BuyerRequired]

    @extend_schema(
        operation_id="vendors_save",
        summary="Save a vendor",
        description="Idempotent: saving an already saved vendor returns 200.",
        request=None,
        responses={
            200: VendorSerializer,
            201: VendorSerializer,
            400: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
        },
        tags=["Vendors"],
    )
    def post(self, request, pk):
        service = get_vendor_service()
        already_saved = request.user.saved_vendors.filter(vendor_id=pk).exists()
        result = service.save_vendor(request.user, pk)
        if not result.ok:
            return error_response(result)

        data = VendorSerializer(result.value.vendor, context={"is_saved": True}).data
        return Response(data, status=status.HTTP_200_OK if already_saved else status.HTTP_201_CREATED)

    @extend_schema(
        operation_id="vendors_unsave",
        summary="Remove a vendor from my saved list",
        request=None,
        responses={204: None, 404: ErrorResponseSerializer},
        tags=["Vendors"],
    )
    def delete(self, request, pk):
        result = get_vendor_service().unsave_vendor(request.user, pk)
        if not result.ok:
            return error_response(result)
        return Response(status=status.HTTP_204_NO_CONTENT)


class SavedVendorListView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    @extend_schema(
        operation_id="vendors_saved_list",
        summary="My saved vendors",
        responses={200: VendorSerializer(many=True)},
        tags=["Vendors"],
    )
    def get(self, request):
        result = get_vendor_service().list_saved_vendors(request.user)
        if not result.ok:
            return error_response(result)
        return Response(VendorSerializer(result.value, many=True, context={"is_saved": True}).data)


class MockVendorGenerateView(APIView):
    permission_classes = [permissions.IsAuthenticated, AdminRequired]

    @extend_schema(
        operation_id="vendors_generate_mock",
        summary="Regenerate mock vendors",
        description="Deletes every system generated vendor, then creates 5 companies plus `count` regular vendors.",
        request=MockVendorRequestSerializer,
        responses={
            200: MockVendorResponseSerializer,
            400: OpenApiResponse(description="Invalid count"),
            403: OpenApiResponse(response=ErrorResponseSerializer, description="Staff only"),
        },
        tags=["Vendors - Admin"],
    )
    def post(self, request):
        serializer = MockVendorRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = get_mock_vendor_service().generate(count=serializer.validated_data["count"])
        if not result.success:
            return Response({"detail": result.message}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(result.data, status=status.HTTP_200_OK)

