from rest_framework import serializers


class PartySerializer(serializers.Serializer):
    """Buyer or seller as shown on the other party's screens"""

    id = serializers.UUIDField(read_only=True)
    display_name = serializers.CharField(read_only=True)
    company_name = serializers.SerializerMethodField()
    seller_rating = serializers.SerializerMethodField()
    verified = serializers.SerializerMethodField()

    def _profile(self, obj):
        return getattr(obj, "profile", None)

    def get_company_name(self, obj):
        profile = self._profile(obj)
        return (profile.company_name or "") if profile else ""

    def get_seller_rating(self, obj):
        profile = self._profile(obj)
        return float(profile.seller_rating) if profile and profile.seller_rating is not None else None

    def get_verified(self, obj):
        profile = self._profile(obj)
        return bool(profile and profile.verified_seller)
