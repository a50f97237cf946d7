from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import SavedVendor
from infrastructure.container import container
from marketplace.tests.factories import SellerFactory, SellerReviewFactory, UserFactory


class VendorDiscoveryTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.url = reverse("vendor_list")
        self.top = SellerFactory(
            profile_data={"seller_rating": Decimal("4.8"), "verified_seller": True, "company_name": "Rapid Pipes"}
        )
        self.middle = SellerFactory(
            profile_data={"seller_rating": Decimal("4.1"), "city": "Jeddah", "service_categories": ["painting"]}
        )
        self.busy = SellerFactory(profile_data={"seller_rating": Decimal("3.0"), "availability_status": "busy"})
        SellerFactory(profile_data={"discoverable": False})
        UserFactory()

    def ids(self, response):
        return [row["id"] for row in response.data["results"]]

    def test_lists_discoverable_sellers_best_first(self):
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(self.ids(response), [str(self.top.id), str(self.middle.id), str(self.busy.id)])
        self.assertEqual(response.data["count"], 3)

    def test_filter_by_category(self):
        response = self.client.get(self.url, {"category": "painting"})

        self.assertEqual(self.ids(response), [str(self.middle.id)])

    def test_filter_by_city_ignores_case(self):
        response = self.client.get(self.url, {"city": "jeddah"})

        self.assertEqual(self.ids(response), [str(self.middle.id)])

    def test_filter_by_rating_and_verification(self):
        self.assertEqual(self.ids(self.client.get(self.url, {"min_rating": "4"})), [str(self.top.id), str(self.middle.id)])
        self.assertEqual(self.ids(self.client.get(self.url, {"verified": "true"})), [str(self.top.id)])

    def test_filter_by_availability(self):
        response = self.client.get(self.url, {"availability": "busy"})

        self.assertEqual(self.ids(response), [str(self.busy.id)])

    def test_search_company_name(self):
        response = self.client.get(self.url, {"search": "rapid"})

        self.assertEqual(self.ids(response), [str(self.top.id)])

    def test_unknown_category_is_bad_request(self):
        response = self.client.get(self.url, {"category": "rocketry"})

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_saved_flag_for_signed_in_buyer(self):
        buyer = UserFactory()
        SavedVendor.objects.create(buyer=buyer, vendor=self.middle)
        self.client.force_authenticate(user=buyer)

        response = self.client.get(self.url)

        saved = {row["id"]: row["is_saved"] for row in response.data["results"]}
        self.assertTrue(saved[str(self.middle.id)])
        self.assertFalse(saved[str(self.top.id)])


class VendorDetailTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.seller = SellerFactory()

    def test_detail_has_latest_three_reviews(self):
        for _ in range(4):
            SellerReviewFactory(seller=self.seller)

        response = self.client.get(reverse("vendor_detail", args=[self.seller.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data["recent_reviews"]), 3)
        self.assertFalse(response.data["is_saved"])

    def test_hidden_vendor_is_not_found(self):
        hidden = SellerFactory(profile_data={"discoverable": False})

        response = self.client.get(reverse("vendor_detail", args=[hidden.id]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class SavedVendorTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.buyer)
        self.url = reverse("vendor_save", args=[self.seller.id])

    def test_save_is_idempotent(self):
        first = self.client.post(self.url)
        second = self.client.post(self.url)

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertTrue(second.data["is_saved"])
        self.assertEqual(SavedVendor.objects.filter(buyer=self.buyer).count(), 1)
        self.assertEqual(self.bus.event_types().count("vendor.saved"), 1)

    def test_unsave(self):
        self.client.post(self.url)

        response = self.client.delete(self.url)

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(SavedVendor.objects.exists())

    def test_saved_list(self):
        other = SellerFactory()
        self.client.post(self.url)
        self.client.post(reverse("vendor_save", args=[other.id]))

        response = self.client.get(reverse("saved_vendors"))

        self.assertEqual({row["id"] for row in response.data}, {str(self.seller.id), str(other.id)})
        self.assertTrue(all(row["is_saved"] for row in response.data))

    def test_sellers_cannot_save(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.post(self.url)

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_vendor(self):
        response = self.client.post(reverse("vendor_save", args=["6f1c2d3e-4b5a-4c6d-8e7f-9a0b1c2d3e4f"]))

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
