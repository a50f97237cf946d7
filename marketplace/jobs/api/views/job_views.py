from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status, viewsets
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from infrastructure.container import container
from marketplace.api.errors import error_response
from marketplace.api.serializers import ActiveJobsResponseSerializer, ErrorResponseSerializer
from marketplace.bookings.api.serializers import BookingSerializer
from marketplace.domain.lifecycle import REQUEST
from marketplace.jobs.domain.services import CompletionService
from marketplace.requests.api.serializers import MaintenanceRequestSerializer

KIND_PARAMETER = OpenApiParameter(
    name="kind", type=str, location=OpenApiParameter.PATH, enum=["request", "booking"], description="Job kind"
)
COMPLETION_RESPONSES = {
    200: OpenApiResponse(description="The request or booking after the change"),
    400: OpenApiResponse(response=ErrorResponseSerializer, description="Unknown job kind"),
    403: ErrorResponseSerializer,
    404: ErrorResponseSerializer,
    409: OpenApiResponse(response=ErrorResponseSerializer, description="Not allowed in the current status"),
}


def serialize_job(kind, job):
    if kind == REQUEST:
        return MaintenanceRequestSerializer(job).data
    return BookingSerializer(job).data


class JobViewSet(viewsets.ViewSet):
    """
    Running executed requests and bookings to completion. The job is done
    once the seller marked it complete and the buyer confirmed; the warranty
    starts from the buyer's confirmation.
    """

    permission_classes = [IsAuthenticated]

    def get_service(self) -> CompletionService:
        return container.completion_service()

    def _respond(self, kind, result):
        if not result.ok:
            return error_response(result)
        return Response(serialize_job(kind, result.value), status=status.HTTP_200_OK)

    @extend_schema(
        operation_id="jobs_active",
        summary="My jobs in progress",
        parameters=[OpenApiParameter(name="role", type=str, description="seller (default) | buyer")],
        responses={200: ActiveJobsResponseSerializer},
        tags=["Marketplace - Jobs"],
    )
    def list(self, request):
        role = "buyer" if request.query_params.get("role") == "buyer" else "seller"
        result = self.get_service().list_active_jobs(request.user, role)
        if not result.ok:
            return error_response(result)
        return Response(
            {
                "requests": MaintenanceRequestSerializer(result.value["requests"], many=True).data,
                "bookings": BookingSerializer(result.value["bookings"], many=True).data,
            },
            status=status.HTTP_200_OK,
        )

    @extend_schema(
        operation_id="jobs_start",
        summary="Start work on a job",
        parameters=[KIND_PARAMETER],
        request=None,
        responses=COMPLETION_RESPONSES,
        tags=["Marketplace - Jobs"],
    )
    def start(self, request, kind=None, pk=None):
        return self._respond(kind, self.get_service().start_job(request.user, kind, pk))

    @extend_schema(
        operation_id="jobs_seller_complete",
        summary="Seller marks the job complete",
        description="The buyer is asked to confirm; unconfirmed jobs get reminders and are auto-closed after a week.",
        parameters=[KIND_PARAMETER],
        request=None,
        responses=COMPLETION_RESPONSES,
        tags=["Marketplace - Jobs"],
    )
    def seller_complete(self, request, kind=None, pk=None):
        return self._respond(kind, self.get_service().seller_mark_complete(request.user, kind, pk))

    @extend_schema(
        operation_id="jobs_buyer_confirm",
        summary="Buyer confirms the job is complete",
        description="With the seller's mark in, this completes the job and starts the warranty.",
        parameters=[KIND_PARAMETER],
        request=None,
        responses=COMPLETION_RESPONSES,
        tags=["Marketplace - Jobs"],
    )
    def buyer_confirm(self, request, kind=None, pk=None):
        return self._respond(kind, self.get_service().buyer_confirm_complete(request.user, kind, pk))
