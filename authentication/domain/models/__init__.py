from .profile import Profile, SavedVendor
from .user import CustomUser


__all__ = ["CustomUser", "Profile", "SavedVendor"]
