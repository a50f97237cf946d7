from .auth_views import LoginAPIView, RegisterAPIView
from .profile_views import ProfileView
from .vendor_views import (
    MockVendorGenerateView,
    SavedVendorListView,
    VendorDetailView,
    VendorListView,
    VendorSaveView,
)


__all__ = [
    "LoginAPIView",
    "RegisterAPIView",
    "ProfileView",
    "VendorListView",
    "VendorDetailView",
    "VendorSaveView",
    "SavedVendorListView",
    "MockVendorGenerateView",
]
