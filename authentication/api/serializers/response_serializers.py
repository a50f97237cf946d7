"""
Response Serializers for API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

from .auth_serializers import UserSerializer
from .profile_serializers import VendorSerializer


# ===== Authentication Response Serializers =====


class LoginResponseSerializer(serializers.Serializer):
    """Response for successful login"""

    message = serializers.CharField(help_text="Success message")
    access = serializers.CharField(help_text="JWT access token")
    refresh = serializers.CharField(help_text="JWT refresh token")
    user = UserSerializer(help_text="User details")


class RegisterResponseSerializer(LoginResponseSerializer):
    """Response for successful registration; the new user is logged in right away"""


# ===== Profile and Vendor Response Serializers =====


class ProfileUpdateResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    updated_fields = serializers.ListField(child=serializers.CharField())
    user = UserSerializer()


class VendorListResponseSerializer(serializers.Serializer):
    results = VendorSerializer(many=True)
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()


class MockVendorResponseSerializer(serializers.Serializer):
    deleted = serializers.IntegerField()
    created = serializers.IntegerField()
    companies = serializers.IntegerField()
    regular = serializers.IntegerField()
    errors = serializers.IntegerField()
    samples = serializers.ListField(child=serializers.DictField())
    error_details = serializers.ListField(child=serializers.DictField())


# ===== Error Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Generic error response"""

    detail = serializers.CharField(help_text="Error message")


class ValidationErrorResponseSerializer(serializers.Serializer):
    """Field validation errors, keyed by field name"""

    field_name = serializers.ListField(child=serializers.CharField(), help_text="List of errors for this field")
