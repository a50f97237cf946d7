from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import permissions, status
from rest_framework.response import Response
from rest_framework.views import APIView

from authentication.permissions import BuyerRequired
from infrastructure.container import container
from marketplace.api.errors import error_response, page_params
from marketplace.api.serializers import ErrorResponseSerializer, SellerReviewListResponseSerializer
from marketplace.reviews.api.serializers import ReviewCreateSerializer, SellerReviewSerializer


def get_review_service():
    return container.review_service()


class ReviewCreateView(APIView):
    permission_classes = [permissions.IsAuthenticated, BuyerRequired]

    @extend_schema(
        operation_id="reviews_create",
        summary="Review a seller after a completed job",
        description="""
        **What it receives:**
        - `seller_id`, `rating` (1-5), optional `review_text` (max 2000 chars)
        - The job: `request_id`, `booking_id` or `contract_id`

        **What it returns:**
        - The review; the seller's rating and review count are recomputed
        """,
        request=ReviewCreateSerializer,
        responses={
            201: SellerReviewSerializer,
            400: ErrorResponseSerializer,
            403: ErrorResponseSerializer,
            404: ErrorResponseSerializer,
            409: OpenApiResponse(response=ErrorResponseSerializer, description="Job not completed or already reviewed"),
        },
        tags=["Marketplace - Reviews"],
    )
    def post(self, request):
        serializer = ReviewCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = get_review_service().create_review(
            request.user,
            data["seller_id"],
            data["rating"],
            review_text=data["review_text"],
            request_id=data.get("request_id"),
            booking_id=data.get("booking_id"),
            contract_id=data.get("contract_id"),
        )
        if not result.ok:
            return error_response(result)
        return Response(SellerReviewSerializer(result.value).data, status=status.HTTP_201_CREATED)


class SellerReviewListView(APIView):
    permission_classes = [permissions.AllowAny]

    @extend_schema(
        operation_id="reviews_seller_list",
        summary="Reviews of a seller",
        description="Paginated reviews with the average rating and a 1-5 star distribution.",
        parameters=[
            OpenApiParameter(name="page", type=int, description="Page number (default: 1)"),
            OpenApiParameter(name="page_size", type=int, description="Items per page (default: 20)"),
        ],
        responses={200: SellerReviewListResponseSerializer, 404: ErrorResponseSerializer},
        tags=["Marketplace - Reviews"],
    )
    def get(self, request, seller_id):
        page, page_size = page_params(request)
        result = get_review_service().list_seller_reviews(seller_id, page, page_size)
        if not result.ok:
            return error_response(result)

        response_data = result.value
        response_data["results"] = SellerReviewSerializer(result.value["results"], many=True).data
        return Response(response_data, status=status.HTTP_200_OK)
