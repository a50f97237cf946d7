from rest_framework import serializers

from .models import Notification


class NotificationSerializer(serializers.ModelSerializer):
    """Notification with title and message in the reader's language"""

    localized_title = serializers.SerializerMethodField()
    localized_message = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = [
            "id",
            "notification_type",
            "title",
            "message",
            "title_ar",
            "message_ar",
            "localized_title",
            "localized_message",
            "content_id",
            "is_read",
            "read_at",
            "created_at",
        ]
        read_only_fields = fields

    def _language(self):
        request = self.context.get("request")
        user = getattr(request, "user", None)
        return getattr(user, "language", "en") or "en"

    def get_localized_title(self, obj):
        return obj.localized(self._language())["title"]

    def get_localized_message(self, obj):
        return obj.localized(self._language())["message"]


class NotificationListResponseSerializer(serializers.Serializer):
    results = NotificationSerializer(many=True)
    count = serializers.IntegerField()
    page = serializers.IntegerField()
    page_size = serializers.IntegerField()
    num_pages = serializers.IntegerField()
