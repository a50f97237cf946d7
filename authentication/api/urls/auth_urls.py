from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.api.views import (
    LoginAPIView,
    MockVendorGenerateView,
    ProfileView,
    RegisterAPIView,
    SavedVendorListView,
    VendorDetailView,
    VendorListView,
    VendorSaveView,
    health_views,
)


urlpatterns = [
    # Auth
    path("register/", RegisterAPIView.as_view(), name="register"),
    path("login/", LoginAPIView.as_view(), name="login"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
    # Profile
    path("profile/", ProfileView.as_view(), name="profile"),
    # Vendors
    path("vendors/", VendorListView.as_view(), name="vendor_list"),
    path("vendors/<uuid:pk>/", VendorDetailView.as_view(), name="vendor_detail"),
    path("vendors/<uuid:pk>/save/", VendorSaveView.as_view(), name="vendor_save"),
    path("saved-vendors/", SavedVendorListView.as_view(), name="saved_vendors"),
    path("admin/mock-vendors/", MockVendorGenerateView.as_view(), name="generate_mock_vendors"),
    # Kubernetes health probes
    path("health/live/", health_views.health_live, name="health_live"),
    path("health/ready/", health_views.health_ready, name="health_ready"),
]
