"""
AuthService - Core Authentication Business Logic.

Keeps registration and login out of the views so they can be tested and reused.
Accounts are active as soon as they are created; tokens are issued on both
register and login.
"""

import logging
from typing import Optional

from django.contrib.auth import authenticate, get_user_model
from django.db import IntegrityError, transaction

from authentication.api.serializers.jwt_serializers import CustomRefreshToken
from authentication.domain.events import EventDispatcher
from authentication.infra.observability.metrics import (
    jwt_generation_total,
    login_duration,
    record_login_attempt,
    record_registration_attempt,
)
from utils.logging_utils import mask_value

from .results import LoginResult, RegisterResult


User = get_user_model()
logger = logging.getLogger(__name__)

SELF_SERVICE_ROLES = ("buyer", "seller")


class AuthService:
    """
    Authentication service encapsulating all auth business logic.

    Handles registration, password login and token issuance.
    """

    def register(
        self,
        email: str,
        username: str,
        password: str,
        role: str = "buyer",
        language: str = "en",
        full_name: str = "",
        request=None,
    ) -> RegisterResult:
        """
        Register a new buyer or seller and log them in.

        Business Logic:
        1. Only buyer and seller may be self-assigned
        2. Email and username must be unused
        3. Create user and fill the profile created for it
        4. Issue JWT tokens

        Returns:
            RegisterResult with user and tokens
        """
        if role not in SELF_SERVICE_ROLES:
            record_registration_attempt(False, reason="invalid_role")
            return RegisterResult(
                success=False,
                error="Invalid role.",
                errors={"role": "Choose buyer or seller."},
                message="Registration failed.",
            )

        email = (email or "").strip().lower()
        errors = {}
        if User.objects.filter(email__iexact=email).exists():
            errors["email"] = "A user with this email already exists."
        if User.objects.filter(username=username).exists():
            errors["username"] = "A user with this username already exists."
        if errors:
            record_registration_attempt(False, reason="already_exists")
            return RegisterResult(
                success=False, error="Account already exists.", errors=errors, message="Registration failed."
            )

        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    username=username,
                    email=email,
                    password=password,
                    role=role,
                    language=language or "en",
                )
                if full_name:
                    profile = user.profile
                    profile.full_name = full_name
                    profile.original_language = user.language
                    if user.language == "ar":
                        profile.full_name_ar = full_name
                    else:
                        profile.full_name_en = full_name
                    profile.save()
        except IntegrityError:
            record_registration_attempt(False, reason="already_exists")
            return RegisterResult(success=False, error="Account already exists.", message="Registration failed.")
        except Exception as e:
            logger.exception(f"Registration error for email {mask_value(email)}: {e}")
            record_registration_attempt(False, reason="internal_error")
            return RegisterResult(success=False, error=str(e), message="Registration failed. Please try again.")

        record_registration_attempt(True)
        EventDispatcher.dispatch_user_registered(user, ip_address=self._get_client_ip(request))

        tokens = self._generate_login_tokens(user)
        return RegisterResult(
            success=True,
            user=user,
            access_token=tokens.access_token,
            refresh_token=tokens.refresh_token,
            message="Registration successful!",
        )

    @login_duration.time()
    def login(self, email: str, password: str, request=None) -> LoginResult:
        """
        Authenticate user with email/password.

        Returns:
            LoginResult with authentication status and tokens
        """
        try:
            if not email or not password:
                return LoginResult(success=False, error="Email and password are required.")

            try:
                existing = User.objects.get(email__iexact=email.strip())
            except User.DoesNotExist:
                record_login_attempt(False, reason="user_not_found")
                EventDispatcher.dispatch_user_login_failed(
                    email=email, reason="user_not_found", ip_address=self._get_client_ip(request)
                )
                return LoginResult(success=False, error="No account found with this email address.")

            if not existing.is_active:
                record_login_attempt(False, reason="account_disabled")
                return LoginResult(success=False, error="This account is disabled.")

            user = authenticate(request, username=existing.email, password=password)
            if not user:
                record_login_attempt(False, reason="wrong_password")
                EventDispatcher.dispatch_user_login_failed(
                    email=email, reason="wrong_password", ip_address=self._get_client_ip(request)
                )
                return LoginResult(success=False, error="Incorrect password. Please try again.")

            record_login_attempt(True)
            EventDispatcher.dispatch_user_login_successful(user=user, ip_address=self._get_client_ip(request))
            return self._generate_login_tokens(user)

        except Exception as e:
            logger.exception(f"Login error for email {mask_value(email)}: {e}")
            return LoginResult(success=False, error="An unexpected error occurred. Please try again later.")

    def _generate_login_tokens(self, user) -> LoginResult:
        """Generate JWT tokens for successful login."""
        try:
            refresh = CustomRefreshToken.for_user(user)
            jwt_generation_total.labels(token_type="refresh").inc()
            return LoginResult(
                success=True,
                user=user,
                access_token=str(refresh.access_token),
                refresh_token=str(refresh),
                message="Login successful",
            )
        except Exception as e:
            logger.exception(f"Token generation failed for user {user.id}: {e}")
            return LoginResult(success=False, error="Failed to generate authentication tokens.")

    def _get_client_ip(self, request) -> Optional[str]:
        if request is None:
            return None
        forwarded = request.META.get("HTTP_X_FORWARDED_FOR")
        if forwarded:
            return forwarded.split(",")[0].strip()
        return request.META.get("REMOTE_ADDR")
