from django.conf import settings

HOME_CATEGORIES = {
    "ac_repair": {"en": "AC Repair", "ar": "صيانة المكيفات"},
    "plumbing": {"en": "Plumbing", "ar": "سباكة"},
    "electrical": {"en": "Electrical", "ar": "كهرباء"},
    "painting": {"en": "Painting", "ar": "دهانات"},
    "cleaning": {"en": "Cleaning", "ar": "تنظيف"},
    "handyman": {"en": "Handyman", "ar": "صيانة عامة"},
    "appliances": {"en": "Appliances", "ar": "الأجهزة المنزلية"},
    "landscaping_home": {"en": "Landscaping", "ar": "تنسيق الحدائق"},
    "others_home": {"en": "Other Home Services", "ar": "خدمات منزلية أخرى"},
}

PROJECT_CATEGORIES = {
    "fitout": {"en": "Fit-out", "ar": "تشطيبات"},
    "tiling": {"en": "Tiling", "ar": "تبليط"},
    "gypsum": {"en": "Gypsum", "ar": "جبس"},
    "carpentry": {"en": "Carpentry", "ar": "نجارة"},
    "mep": {"en": "MEP", "ar": "أعمال الكهروميكانيك"},
    "waterproofing": {"en": "Waterproofing", "ar": "العزل المائي"},
    "landscaping_commercial": {"en": "Commercial Landscaping", "ar": "تنسيق حدائق تجارية"},
    "renovation": {"en": "Renovation", "ar": "ترميم"},
    "others_project": {"en": "Other Projects", "ar": "مشاريع أخرى"},
}

ALPHA_CATEGORIES = ("plumbing", "electrical", "painting")

ALL_CATEGORIES = {**HOME_CATEGORIES, **PROJECT_CATEGORIES}
CATEGORY_CHOICES = [(key, labels["en"]) for key, labels in ALL_CATEGORIES.items()]


def category_label(key: str, language: str = "en") -> str:
    labels = ALL_CATEGORIES.get(key)
    if not labels:
        return key
    return labels["ar" if language == "ar" else "en"]


def is_category_allowed(key: str) -> bool:
    """Known category, restricted to the alpha set when the alpha switch is on."""
    if key not in ALL_CATEGORIES:
        return False
    alpha_only = getattr(settings, "MAINTMENA", {}).get("ALPHA_CATEGORIES_ONLY", False)
    return not alpha_only or key in ALPHA_CATEGORIES


def categories_payload(language: str = "en") -> dict:
    return {
        "home": [{"key": key, "label": category_label(key, language)} for key in HOME_CATEGORIES],
        "project": [{"key": key, "label": category_label(key, language)} for key in PROJECT_CATEGORIES],
        "alpha": list(ALPHA_CATEGORIES),
    }
