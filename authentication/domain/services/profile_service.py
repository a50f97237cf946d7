"""
ProfileService - Profile Management Business Logic.

Reads and updates the current user's profile. Vendor fields (categories,
availability, crew size, experience) are only writable by sellers; reputation
fields (rating, review count, completed projects, verification) are never
writable through this service.
"""

import logging
from typing import Any, Dict

from authentication.domain.events import EventDispatcher
from authentication.infra.observability.metrics import profile_updates_total
from authentication.models import Profile
from marketplace.domain.categories import ALL_CATEGORIES

from .results import Result


logger = logging.getLogger(__name__)

PERSONAL_FIELDS = (
    "full_name",
    "full_name_en",
    "full_name_ar",
    "original_language",
    "phone",
    "city",
    "bio",
    "bio_en",
    "bio_ar",
)
SELLER_FIELDS = (
    "company_name",
    "company_name_en",
    "company_name_ar",
    "service_categories",
    "years_of_experience",
    "response_time_hours",
    "availability_status",
    "crew_size_range",
    "discoverable",
)
USER_FIELDS = ("language",)


class ProfileService:
    """
    Profile management service encapsulating profile business logic.
    """

    def get_profile(self, user) -> Result:
        profile, _ = Profile.objects.get_or_create(user=user)
        return Result(success=True, message="Profile loaded.", data={"user": user, "profile": profile})

    def _validate(self, profile_data: Dict[str, Any]) -> Dict[str, str]:
        errors = {}
        categories = profile_data.get("service_categories")
        if categories is not None:
            if not isinstance(categories, list):
                errors["service_categories"] = "Must be a list of category keys."
            else:
                unknown = [key for key in categories if key not in ALL_CATEGORIES]
                if unknown:
                    errors["service_categories"] = f"Unknown categories: {', '.join(map(str, unknown))}"

        for field, choices in (
            ("availability_status", Profile.AVAILABILITY_CHOICES),
            ("crew_size_range", Profile.CREW_SIZE_CHOICES),
        ):
            if field in profile_data and profile_data[field] not in dict(choices):
                errors[field] = f"Invalid value '{profile_data[field]}'."

        for field in ("original_language", "language"):
            if field in profile_data and profile_data[field] not in ("en", "ar"):
                errors[field] = "Language must be 'en' or 'ar'."

        for field in ("years_of_experience", "response_time_hours"):
            if field in profile_data:
                try:
                    if int(profile_data[field]) < 0:
                        errors[field] = "Must be zero or more."
                except (TypeError, ValueError):
                    errors[field] = "Must be a whole number."
        return errors

    def update_profile(self, user, profile_data: Dict[str, Any]) -> Result:
        """
        Update user profile with permission checks.

        Business Logic:
        1. Vendor fields are only accepted from sellers
        2. Values are validated against categories and choice lists
        3. Personal and vendor fields go to the profile, language to the user

        Returns:
            Result with update status
        """
        try:
            if not user.is_seller():
                restricted_updates = [field for field in SELLER_FIELDS if field in profile_data]
                if restricted_updates:
                    logger.warning(f"User {user.id} attempted to update seller fields: {restricted_updates}")
                    return Result(
                        success=False,
                        message="Vendor fields can only be updated by sellers.",
                        error="Access denied",
                        data={"restricted_fields": restricted_updates},
                    )

            errors = self._validate(profile_data)
            if errors:
                return Result(success=False, message="Invalid profile data.", error="Validation error", data=errors)

            profile, _ = Profile.objects.get_or_create(user=user)
            updated_fields = []

            for field, value in profile_data.items():
                if field in PERSONAL_FIELDS or field in SELLER_FIELDS:
                    setattr(profile, field, value)
                    updated_fields.append(field)
                elif field in USER_FIELDS:
                    setattr(user, field, value)
                    user.save(update_fields=[field])
                    updated_fields.append(field)
                else:
                    logger.warning(f"Ignored profile field update: {field}")

            profile.save()
            profile_updates_total.inc()

            logger.info(f"Profile updated for user {user.id}. Updated fields: {updated_fields}")
            EventDispatcher.dispatch_profile_updated(user=user, updated_fields=updated_fields)

            return Result(
                success=True,
                message="Profile updated successfully.",
                data={"updated_fields": updated_fields, "profile": profile},
            )

        except Exception as e:
            logger.exception(f"Profile update error for user {user.id}: {e}")
            return Result(success=False, message="Failed to update profile.", error=str(e))
