from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from marketplace.domain.categories import categories_payload
from marketplace.domain.lifecycle import all_labels


@extend_schema(
    operation_id="marketplace_labels",
    summary="Status labels and service categories",
    description="Bilingual labels for every request, quote, booking and contract status, plus the category list.",
    parameters=[OpenApiParameter(name="language", type=str, description="Language of category labels (en | ar)")],
    responses={200: None},
    tags=["Marketplace - Reference"],
)
@api_view(["GET"])
@permission_classes([AllowAny])
def labels(request):
    language = "ar" if request.query_params.get("language") == "ar" else "en"
    return Response({"statuses": all_labels(), "categories": categories_payload(language)})
