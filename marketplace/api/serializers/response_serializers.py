"""
Response Serializers for Marketplace API Documentation

These serializers define the structure of API responses for OpenAPI schema generation.
They are NOT used for data validation, only for documentation in Swagger/ReDoc.
"""

from rest_framework import serializers

# ===== Common Response Serializers =====


class ErrorResponseSerializer(serializers.Serializer):
    """Standard error response"""

    detail = serializers.CharField(help_text="Human-readable error message")
    code = serializers.CharField(help_text="Error code identifier", required=False)


class SuccessResponseSerializer(serializers.Serializer):
    """Generic success response"""

    message = serializers.CharField(help_text="Success message")


class PaginatedResponseSerializer(serializers.Serializer):
    """Shape shared by every paginated list"""

    count = serializers.IntegerField(help_text="Total number of items")
    page = serializers.IntegerField(help_text="Current page number")
    page_size = serializers.IntegerField(help_text="Items per page")
    num_pages = serializers.IntegerField(help_text="Total number of pages")
    results = serializers.ListField(child=serializers.DictField(), help_text="Items on this page")


# ===== History Response Serializers =====


class HistoryItemSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=["request", "booking", "quote"])
    id = serializers.UUIDField()
    title = serializers.CharField()
    category = serializers.CharField()
    status = serializers.CharField()
    status_label = serializers.DictField(help_text="{'en': ..., 'ar': ...}")
    counterpart = serializers.DictField(allow_null=True)
    price = serializers.CharField()
    contract_id = serializers.UUIDField(allow_null=True)
    review = serializers.IntegerField(allow_null=True, help_text="Rating the buyer gave, if reviewed")
    waiting_for_seller = serializers.BooleanField()
    waiting_for_buyer = serializers.BooleanField()
    expired = serializers.BooleanField()


class HistoryResponseSerializer(serializers.Serializer):
    completed = HistoryItemSerializer(many=True)
    rejected = HistoryItemSerializer(many=True)
    active = HistoryItemSerializer(many=True)
    counts = serializers.DictField(child=serializers.IntegerField())


class JourneyResponseSerializer(serializers.Serializer):
    flow = serializers.ChoiceField(choices=["quote", "booking"])
    role = serializers.ChoiceField(choices=["buyer", "seller"])
    stages = serializers.ListField(child=serializers.DictField())
    current_index = serializers.IntegerField()
    contract_id = serializers.UUIDField(allow_null=True)


# ===== Review Response Serializers =====


class SellerReviewListResponseSerializer(PaginatedResponseSerializer):
    average_rating = serializers.FloatField(allow_null=True)
    distribution = serializers.DictField(child=serializers.IntegerField(), help_text="Count per star, '1'..'5'")


# ===== Contract Response Serializers =====


class ContractDocumentResponseSerializer(serializers.Serializer):
    contract_id = serializers.UUIDField()
    version = serializers.IntegerField()
    html = serializers.CharField()
    content_hash = serializers.CharField()


# ===== Jobs Response Serializers =====


class ActiveJobsResponseSerializer(serializers.Serializer):
    requests = serializers.ListField(child=serializers.DictField())
    bookings = serializers.ListField(child=serializers.DictField())
