from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from authentication.domain.models import CustomUser

from .profile_serializers import ProfileSerializer


class UserSerializer(serializers.ModelSerializer):
    profile = ProfileSerializer(read_only=True)
    display_name = serializers.CharField(read_only=True)
    is_seller = serializers.SerializerMethodField()
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = CustomUser
        fields = (
            "id",
            "username",
            "email",
            "display_name",
            "date_joined",
            "language",
            "role",
            "is_seller",
            "is_admin",
            "profile",
        )
        read_only_fields = fields

    def get_is_seller(self, obj):
        return obj.is_seller()

    def get_is_admin(self, obj):
        return obj.is_admin()


class UserRegistrationSerializer(serializers.Serializer):
    """Validates the signup form; the account itself is created by AuthService.register"""

    email = serializers.EmailField()
    username = serializers.CharField(max_length=150)
    password = serializers.CharField(write_only=True, validators=[validate_password])
    password_confirm = serializers.CharField(write_only=True)
    role = serializers.ChoiceField(choices=(("buyer", "Buyer"), ("seller", "Seller")), default="buyer")
    language = serializers.ChoiceField(choices=CustomUser.LANGUAGE_CHOICES, default="en")
    full_name = serializers.CharField(max_length=150, required=False, allow_blank=True, default="")

    def validate_email(self, value):
        if CustomUser.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("A user with this email already exists.")
        return value.lower()

    def validate(self, attrs):
        if attrs["password"] != attrs["password_confirm"]:
            raise serializers.ValidationError("Password fields didn't match.")
        return attrs


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, style={"input_type": "password"})


class MockVendorRequestSerializer(serializers.Serializer):
    count = serializers.IntegerField(min_value=0, max_value=1000, default=100)
