from django.http import HttpResponse
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny


@api_view(["GET"])
@permission_classes([AllowAny])
def marketplace_prometheus_metrics(request):
    """
    Prometheus exposition of the process registry: marketplace counters
    (quotes, bookings, contracts, jobs, nudges, notifications) and the
    authentication ones share it.
    """
    return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
