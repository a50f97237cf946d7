import random
from decimal import Decimal

import pytest

from authentication.domain.services.mock_vendor_data import (
    AVAILABILITY_STATUSES,
    COMPANY_VENDORS,
    CREW_SIZES,
    VENDOR_CATEGORIES,
)
from authentication.domain.services.mock_vendor_service import MockVendorService
from marketplace.domain.categories import ALL_CATEGORIES


@pytest.mark.unit
class TestMockVendorBuilders:
    def setup_method(self):
        self.service = MockVendorService(rng=random.Random(42))

    def test_same_seed_same_vendors(self):
        other = MockVendorService(rng=random.Random(42))

        assert [self.service.build_regular_vendor() for _ in range(5)] == [
            other.build_regular_vendor() for _ in range(5)
        ]

    def test_company_vendor_uses_its_categories(self):
        name = "السباكة السريعة"
        data = self.service.build_company_vendor(name)

        assert data["company_name"] == name
        assert data["service_categories"] == COMPANY_VENDORS[name]
        assert data["system_generated"] is True
        assert data["discoverable"] is True

    def test_regular_vendor_fields_are_valid(self):
        for _ in range(200):
            data = self.service.build_regular_vendor()

            assert data["full_name"]
            assert data["original_language"] in ("en", "ar")
            assert data["company_name"] is None
            assert 1 <= len(data["service_categories"]) <= 4
            assert all(category in ALL_CATEGORIES for category in data["service_categories"])
            assert len(set(data["service_categories"])) == len(data["service_categories"])
            assert Decimal("0") <= data["seller_rating"] <= Decimal("5")
            assert data["availability_status"] in AVAILABILITY_STATUSES
            assert data["crew_size_range"] in CREW_SIZES
            assert 1 <= data["response_time_hours"] <= 48

    def test_bios_are_not_reused(self):
        bios = [self.service._pick_bio("plumbing") for _ in range(50)]
        drawn = [bio for bio in bios if bio]

        assert len(drawn) == len(set(drawn))

    def test_rating_distribution_covers_new_and_top_sellers(self):
        ratings = {self.service._rating() for _ in range(500)}

        assert Decimal("0.0") in ratings
        assert Decimal("5.0") in ratings

    def test_vendor_categories_are_known(self):
        assert set(VENDOR_CATEGORIES) <= set(ALL_CATEGORIES)
