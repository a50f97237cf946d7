"""
MockVendorService - seeds the vendor directory with system generated sellers.

Every run replaces the previous batch: existing ``system_generated`` vendors
are deleted, then five Arabic company vendors and ``count`` regular vendors
are created. Pass a seeded ``random.Random`` for reproducible output.
"""

import logging
import random
import uuid
from decimal import Decimal
from typing import Dict, List, Optional, Set

from django.contrib.auth import get_user_model
from django.db import transaction

from authentication.infra.observability.metrics import mock_vendors_generated
from authentication.models import Profile

from .mock_vendor_data import (
    ARABIC_BIO_EN,
    AVAILABILITY_STATUSES,
    BIO_KEYWORDS,
    BIO_TEMPLATES,
    COMPANY_BIO_EN,
    COMPANY_VENDORS,
    CREW_SIZES,
    ENGLISH_BIO_AR,
    ENGLISH_TRANSLITERATIONS,
    FEMALE_FIRST_NAMES,
    LAST_NAMES,
    MALE_FIRST_NAMES,
    PROFESSIONS,
    VENDOR_CATEGORIES,
)
from .results import Result


User = get_user_model()
logger = logging.getLogger(__name__)

SAMPLE_SIZE = 10
ERROR_DETAIL_SIZE = 5


class MockVendorService:
    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()
        self._used_bios: Set[str] = set()

    # ===== Random helpers =====

    def select_weighted(self, pool: Dict[str, List[str]]) -> str:
        roll = self.rng.random()
        if roll < 0.4:
            return self.rng.choice(pool["very_common"])
        if roll < 0.7:
            return self.rng.choice(pool["common"])
        if roll < 0.9:
            return self.rng.choice(pool["medium"])
        return self.rng.choice(pool["rare"])

    def _pick_bio(self, pool_key: str) -> Optional[str]:
        """Draw a bio nobody in this run has used yet."""
        pool = BIO_TEMPLATES.get(pool_key, BIO_TEMPLATES["handyman"])
        available = [bio for bio in pool if bio not in self._used_bios]
        if not available:
            return None
        bio = self.rng.choice(available)
        self._used_bios.add(bio)
        return bio

    def _rating(self) -> Decimal:
        roll = self.rng.random()
        if roll < 0.3:
            value = 0.0
        elif roll < 0.7:
            value = round(2.5 + self.rng.random() * 1.7, 1)
        elif roll < 0.9:
            value = round(4.3 + self.rng.random() * 0.6, 1)
        else:
            value = 5.0
        return Decimal(str(value))

    def _completed_projects(self) -> int:
        roll = self.rng.random()
        if roll < 0.4:
            return self.rng.randint(0, 3)
        if roll < 0.75:
            return self.rng.randint(4, 15)
        if roll < 0.95:
            return self.rng.randint(16, 40)
        return self.rng.randint(41, 100)

    def _common_fields(self) -> Dict:
        phone = None
        if self.rng.random() < 0.6:
            phone = f"+966{self.rng.randint(500000000, 1399999999)}"
        return {
            "phone": phone,
            "seller_rating": self._rating(),
            "verified_seller": self.rng.random() < 0.25,
            "completed_projects": self._completed_projects(),
            "years_of_experience": self.rng.randint(1, 20),
            "response_time_hours": self.rng.randint(1, 48),
            "availability_status": self.rng.choice(AVAILABILITY_STATUSES),
            "crew_size_range": self.rng.choice(CREW_SIZES),
            "discoverable": True,
            "system_generated": True,
        }

    # ===== Vendor builders =====

    def build_company_vendor(self, name: str) -> Dict:
        categories = list(COMPANY_VENDORS.get(name, ["handyman"]))
        data = {
            "full_name": name,
            "full_name_ar": name,
            "full_name_en": name,
            "original_language": "ar",
            "company_name": name,
            "company_name_ar": name,
            "company_name_en": name,
            "bio": None,
            "bio_ar": None,
            "bio_en": None,
            "service_categories": categories,
        }
        if self.rng.random() < 0.3:
            bio = self._pick_bio(categories[0])
            if bio:
                data.update(bio=bio, bio_ar=bio, bio_en=COMPANY_BIO_EN)
        data.update(self._common_fields())
        return data

    def build_regular_vendor(self) -> Dict:
        is_male = self.rng.random() < 0.95
        name_format = self.rng.random()
        is_full_name = name_format < 0.50
        is_profession_name = name_format >= 0.95
        is_english = self.rng.random() < 0.30

        first_name = self.select_weighted(MALE_FIRST_NAMES) if is_male else self.rng.choice(FEMALE_FIRST_NAMES)
        categories: List[str] = []

        if is_full_name:
            last_name = self.select_weighted(LAST_NAMES)
            full_name_ar = f"{first_name} {last_name}"
            if is_english:
                first_en = ENGLISH_TRANSLITERATIONS.get(first_name, first_name)
                last_en = ENGLISH_TRANSLITERATIONS.get(last_name, last_name)
                full_name = full_name_en = f"{first_en} {last_en}"
            else:
                full_name = full_name_en = full_name_ar
        elif is_profession_name:
            # Profession names are Arabic only
            profession = self.rng.choice(list(PROFESSIONS))
            full_name = full_name_ar = full_name_en = f"{first_name} {profession}"
            categories.append(PROFESSIONS[profession])
        elif is_english:
            full_name = full_name_en = ENGLISH_TRANSLITERATIONS.get(first_name, first_name)
            full_name_ar = first_name
        else:
            full_name = full_name_ar = full_name_en = first_name

        original_language = "en" if is_english else "ar"
        bio = bio_ar = bio_en = None

        if self.rng.random() < 0.3:
            bio_category = categories[0] if categories else self.rng.choice(VENDOR_CATEGORIES)
            bio = self._pick_bio(bio_category if original_language == "ar" else "general_en")
            if bio:
                if original_language == "ar":
                    bio_ar, bio_en = bio, ARABIC_BIO_EN
                else:
                    bio_ar, bio_en = ENGLISH_BIO_AR, bio
                categories.extend(category for keyword, category in BIO_KEYWORDS if keyword in bio)

        if not categories:
            categories = self.rng.sample(VENDOR_CATEGORIES, self.rng.randint(1, 3))

        data = {
            "full_name": full_name,
            "full_name_ar": full_name_ar,
            "full_name_en": full_name_en,
            "original_language": original_language,
            "company_name": None,
            "company_name_ar": None,
            "company_name_en": None,
            "bio": bio,
            "bio_ar": bio_ar,
            "bio_en": bio_en,
            "service_categories": list(dict.fromkeys(categories)),
        }
        data.update(self._common_fields())
        return data

    # ===== Persistence =====

    def delete_existing(self) -> int:
        queryset = User.objects.filter(profile__system_generated=True)
        count = queryset.count()
        queryset.delete()
        if count:
            logger.info(f"Deleted {count} existing system generated vendors")
        return count

    def _create_vendor(self, data: Dict) -> User:
        handle = f"mockvendor-{uuid.uuid4().hex[:16]}"
        with transaction.atomic():
            user = User.objects.create_user(
                username=handle,
                email=f"{handle}@maintmena.local",
                password=None,
                role="seller",
                language=data["original_language"],
            )
            Profile.objects.filter(user=user).update(**data)
        return user

    def generate(self, count: int = 100) -> Result:
        """
        Replace the system generated vendors.

        Returns:
            Result whose data holds created, companies, regular, errors,
            samples (first created vendors) and error_details
        """
        self._used_bios.clear()
        deleted = self.delete_existing()
        created: List[Dict] = []
        errors: List[Dict] = []

        batches = [("company", self.build_company_vendor, name) for name in COMPANY_VENDORS]
        batches += [("regular", self.build_regular_vendor, None) for _ in range(max(int(count), 0))]

        for index, (kind, build, name) in enumerate(batches):
            try:
                data = build(name) if name else build()
                user = self._create_vendor(data)
            except Exception as e:
                logger.error(f"Failed to create {kind} vendor {index}: {e}", exc_info=True)
                errors.append({"index": index, "type": kind, "error": str(e)})
                continue

            mock_vendors_generated.labels(kind=kind).inc()
            created.append(
                {"id": str(user.id), "name": data["full_name"], "type": kind, "rating": float(data["seller_rating"])}
            )

        companies = sum(1 for vendor in created if vendor["type"] == "company")
        summary = {
            "deleted": deleted,
            "created": len(created),
            "companies": companies,
            "regular": len(created) - companies,
            "errors": len(errors),
            "samples": created[:SAMPLE_SIZE],
            "error_details": errors[:ERROR_DETAIL_SIZE],
        }
        logger.info(
            f"Created {summary['created']} vendors ({companies} companies, {summary['regular']} regular), "
            f"{summary['errors']} errors"
        )
        return Result(success=True, message=f"Generated {summary['created']} vendors.", data=summary)
