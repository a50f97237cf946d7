from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.tokens import RefreshToken


def _add_claims(token, user):
    token["role"] = user.role
    token["is_seller"] = user.is_seller()
    token["is_admin"] = user.is_admin()
    token["language"] = user.language
    return token


class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """JWT serializer that puts the user's role and language in the token"""

    @classmethod
    def get_token(cls, user):
        return _add_claims(super().get_token(user), user)


class CustomRefreshToken(RefreshToken):
    """Refresh token carrying the same custom claims"""

    @classmethod
    def for_user(cls, user):
        token = cls()
        token["user_id"] = str(user.id)
        return _add_claims(token, user)
