from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .api.views import label_views, prometheus_metrics
from .bookings.api.views.booking_views import BookingViewSet
from .contracts.api.views.contract_views import ContractViewSet
from .history.api.views.history_views import BuyerHistoryView, BuyerOverviewView, JourneyView, SellerHistoryView
from .jobs.api.views.job_views import JobViewSet
from .messaging.api.views.message_views import ThreadMessagesView
from .requests.api.views.quote_views import QuoteViewSet
from .requests.api.views.request_views import MaintenanceRequestViewSet
from .reviews.api.views.review_views import ReviewCreateView, SellerReviewListView

# Create the main router
router = DefaultRouter()
router.register(r"requests", MaintenanceRequestViewSet, basename="request")
router.register(r"quotes", QuoteViewSet, basename="quote")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"contracts", ContractViewSet, basename="contract")

app_name = "marketplace"

JOB_KINDS = "<str:kind>/<uuid:pk>"

urlpatterns = [
    # Jobs (requests and bookings share the completion flow)
    path("jobs/", JobViewSet.as_view({"get": "list"}), name="job-list"),
    path(f"jobs/{JOB_KINDS}/start/", JobViewSet.as_view({"post": "start"}), name="job-start"),
    path(
        f"jobs/{JOB_KINDS}/seller_complete/",
        JobViewSet.as_view({"post": "seller_complete"}),
        name="job-seller-complete",
    ),
    path(f"jobs/{JOB_KINDS}/buyer_confirm/", JobViewSet.as_view({"post": "buyer_confirm"}), name="job-buyer-confirm"),
    # Reviews
    path("reviews/", ReviewCreateView.as_view(), name="review-create"),
    path("sellers/<uuid:seller_id>/reviews/", SellerReviewListView.as_view(), name="seller-reviews"),
    # Negotiation threads
    path("messages/<str:thread_type>/<uuid:thread_id>/", ThreadMessagesView.as_view(), name="thread-messages"),
    # History
    path("history/buyer/", BuyerHistoryView.as_view(), name="history-buyer"),
    path("history/seller/", SellerHistoryView.as_view(), name="history-seller"),
    path("history/overview/", BuyerOverviewView.as_view(), name="history-overview"),
    path("history/journey/<str:flow>/<uuid:object_id>/", JourneyView.as_view(), name="history-journey"),
    # Reference data and metrics
    path("labels/", label_views.labels, name="labels"),
    path("metrics/", prometheus_metrics.marketplace_prometheus_metrics, name="marketplace-metrics"),
    # Main API routes
    path("", include(router.urls)),
]
