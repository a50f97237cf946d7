from authentication.domain.models.profile import Profile, SavedVendor
from authentication.domain.models.user import CustomUser


__all__ = [
    "CustomUser",
    "Profile",
    "SavedVendor",
]
