import random
from io import StringIO

from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.domain.services.mock_vendor_data import COMPANY_VENDORS
from authentication.domain.services.mock_vendor_service import MockVendorService
from authentication.models import Profile
from marketplace.tests.factories import AdminFactory, SellerFactory, UserFactory


User = get_user_model()


class MockVendorServiceTest(TestCase):
    def test_generate_creates_companies_and_regular_vendors(self):
        result = MockVendorService(rng=random.Random(7)).generate(count=12)

        self.assertTrue(result.success)
        self.assertEqual(result.data["created"], 12 + len(COMPANY_VENDORS))
        self.assertEqual(result.data["companies"], len(COMPANY_VENDORS))
        self.assertEqual(result.data["regular"], 12)
        self.assertEqual(result.data["errors"], 0)
        self.assertEqual(len(result.data["samples"]), 10)
        self.assertEqual(Profile.objects.filter(system_generated=True).count(), 17)
        self.assertFalse(User.objects.filter(profile__system_generated=True).exclude(role="seller").exists())

    def test_generate_replaces_previous_batch(self):
        real_seller = SellerFactory()
        service = MockVendorService(rng=random.Random(1))
        service.generate(count=3)

        result = service.generate(count=2)

        self.assertEqual(result.data["deleted"], 3 + len(COMPANY_VENDORS))
        self.assertEqual(Profile.objects.filter(system_generated=True).count(), 2 + len(COMPANY_VENDORS))
        self.assertTrue(User.objects.filter(id=real_seller.id).exists())

    def test_generated_vendors_cannot_log_in(self):
        MockVendorService(rng=random.Random(3)).generate(count=1)
        vendor = User.objects.filter(profile__system_generated=True).first()

        self.assertFalse(vendor.has_usable_password())


class GenerateMockVendorsCommandTest(TestCase):
    def test_command_prints_summary(self):
        out = StringIO()
        call_command("generate_mock_vendors", "--count", "4", "--seed", "11", stdout=out)

        output = out.getvalue()
        self.assertIn("Created", output)
        self.assertEqual(Profile.objects.filter(system_generated=True).count(), 4 + len(COMPANY_VENDORS))

    def test_command_rejects_out_of_range_count(self):
        with self.assertRaises(CommandError):
            call_command("generate_mock_vendors", "--count", "5000", stdout=StringIO())


class MockVendorEndpointTest(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.url = reverse("generate_mock_vendors")

    def test_admin_can_generate(self):
        self.client.force_authenticate(user=AdminFactory())

        response = self.client.post(self.url, {"count": 2}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(Profile.objects.filter(system_generated=True).count(), 2 + len(COMPANY_VENDORS))

    def test_buyer_is_forbidden(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(self.url, {"count": 2}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
