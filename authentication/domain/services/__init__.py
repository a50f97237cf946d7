"""
Business logic services for authentication.

Services encapsulate business rules and coordinate between
infrastructure and domain models.
"""

from .auth_service import AuthService
from .mock_vendor_service import MockVendorService
from .profile_service import ProfileService
from .results import LoginResult, RegisterResult, Result
from .vendor_service import VendorService


__all__ = [
    "AuthService",
    "ProfileService",
    "VendorService",
    "MockVendorService",
    "LoginResult",
    "RegisterResult",
    "Result",
]
