from .auth_serializers import LoginSerializer, MockVendorRequestSerializer, UserRegistrationSerializer, UserSerializer
from .jwt_serializers import CustomRefreshToken, CustomTokenObtainPairSerializer
from .profile_serializers import (
    ProfileSerializer,
    ProfileUpdateSerializer,
    PublicProfileSerializer,
    VendorReviewSerializer,
    VendorSerializer,
)


__all__ = [
    "UserSerializer",
    "LoginSerializer",
    "UserRegistrationSerializer",
    "MockVendorRequestSerializer",
    "CustomRefreshToken",
    "CustomTokenObtainPairSerializer",
    "ProfileSerializer",
    "ProfileUpdateSerializer",
    "PublicProfileSerializer",
    "VendorReviewSerializer",
    "VendorSerializer",
]
