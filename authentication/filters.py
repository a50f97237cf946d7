import django_filters
from django.contrib.auth import get_user_model
from django.db.models import Q

from authentication.models import Profile
from marketplace.domain.categories import CATEGORY_CHOICES

User = get_user_model()


class VendorFilter(django_filters.FilterSet):
    """
    Filter for vendor discovery over seller users and their profiles
    """

    category = django_filters.ChoiceFilter(choices=CATEGORY_CHOICES, method="filter_category")
    city = django_filters.CharFilter(field_name="profile__city", lookup_expr="iexact")
    min_rating = django_filters.NumberFilter(field_name="profile__seller_rating", lookup_expr="gte")
    verified = django_filters.BooleanFilter(method="filter_verified")
    availability = django_filters.ChoiceFilter(
        field_name="profile__availability_status", choices=Profile.AVAILABILITY_CHOICES
    )

    # Search in names, company names and bios, both languages
    search = django_filters.CharFilter(method="filter_search")

    class Meta:
        model = User
        fields = ["category", "city", "min_rating", "verified", "availability", "search"]

    def filter_category(self, queryset, name, value):
        """service_categories is a JSON list; matched in Python so SQLite and PostgreSQL agree"""
        if not value:
            return queryset
        vendor_ids = [
            vendor_id
            for vendor_id, categories in queryset.values_list("id", "profile__service_categories")
            if value in (categories or [])
        ]
        return queryset.filter(id__in=vendor_ids)

    def filter_verified(self, queryset, name, value):
        if value:
            return queryset.filter(profile__verified_seller=True)
        return queryset

    def filter_search(self, queryset, name, value):
        """Search across multiple fields"""
        if not value:
            return queryset
        value = value.strip()
        query = Q()
        for field in (
            "full_name",
            "full_name_en",
            "full_name_ar",
            "company_name",
            "company_name_en",
            "company_name_ar",
            "bio",
            "bio_en",
            "bio_ar",
        ):
            query |= Q(**{f"profile__{field}__icontains": value})
        return queryset.filter(query)
