from unittest.mock import Mock, patch

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import AccessToken

from infrastructure.container import container
from marketplace.tests.factories import SellerFactory, UserFactory


User = get_user_model()
PASSWORD = "Str0ng-Passw0rd!"


class RegisterViewTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.url = reverse("register")

    def payload(self, **overrides):
        data = {
            "email": "Sara@Example.com",
            "username": "sara",
            "password": PASSWORD,
            "password_confirm": PASSWORD,
            "role": "seller",
            "language": "ar",
            "full_name": "سارة",
        }
        data.update(overrides)
        return data

    def test_register_returns_tokens_with_role_claims(self):
        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["user"]["email"], "sara@example.com")
        token = AccessToken(response.data["access"])
        self.assertEqual(token["role"], "seller")
        self.assertTrue(token["is_seller"])
        self.assertEqual(token["language"], "ar")

        user = User.objects.get(email="sara@example.com")
        self.assertEqual(user.profile.full_name_ar, "سارة")

    def test_admin_role_cannot_be_self_assigned(self):
        response = self.client.post(self.url, self.payload(role="admin"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(User.objects.exists())

    def test_password_mismatch(self):
        response = self.client.post(self.url, self.payload(password_confirm="something-else"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_duplicate_email(self):
        UserFactory(email="sara@example.com")

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("email", response.data)

    def test_duplicate_username(self):
        UserFactory(username="sara")

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("username", response.data)


class LoginViewTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.url = reverse("login")
        self.user = UserFactory(email="omar@example.com", password=PASSWORD)

    def test_login_success(self):
        response = self.client.post(self.url, {"email": "OMAR@example.com", "password": PASSWORD}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["user"]["id"], str(self.user.id))
        self.assertIn("refresh", response.data)

    def test_wrong_password(self):
        response = self.client.post(self.url, {"email": "omar@example.com", "password": "nope-nope"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_unknown_email(self):
        response = self.client.post(self.url, {"email": "nobody@example.com", "password": PASSWORD}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_disabled_account(self):
        self.user.is_active = False
        self.user.save()

        response = self.client.post(self.url, {"email": "omar@example.com", "password": PASSWORD}, format="json")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_refresh_token(self):
        refresh = self.client.post(self.url, {"email": "omar@example.com", "password": PASSWORD}, format="json").data[
            "refresh"
        ]

        response = self.client.post(reverse("token_refresh"), {"refresh": refresh}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("access", response.data)


class ProfileViewTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.url = reverse("profile")

    def test_get_profile(self):
        user = UserFactory()
        self.client.force_authenticate(user=user)

        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["id"], str(user.id))
        self.assertIn("profile", response.data)

    def test_buyer_updates_personal_fields_and_language(self):
        user = UserFactory()
        self.client.force_authenticate(user=user)

        response = self.client.patch(self.url, {"city": "Dammam", "language": "ar"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertCountEqual(response.data["updated_fields"], ["city", "language"])
        user.refresh_from_db()
        self.assertEqual(user.language, "ar")
        self.assertEqual(user.profile.city, "Dammam")

    def test_buyer_cannot_set_vendor_fields(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.patch(self.url, {"service_categories": ["plumbing"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.data["restricted_fields"], ["service_categories"])

    def test_seller_updates_vendor_fields(self):
        seller = SellerFactory()
        self.client.force_authenticate(user=seller)

        response = self.client.patch(
            self.url, {"service_categories": ["ac_repair", "painting"], "availability_status": "busy"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        seller.profile.refresh_from_db()
        self.assertEqual(seller.profile.service_categories, ["ac_repair", "painting"])
        self.assertEqual(seller.profile.availability_status, "busy")

    def test_unknown_category_is_rejected(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.patch(self.url, {"service_categories": ["rocketry"]}, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class HealthViewTest(TestCase):
    def test_liveness(self):
        response = APIClient().get(reverse("health_live"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_readiness_reports_each_dependency(self):
        container.configure_for_testing()

        response = APIClient().get(reverse("health_ready"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.json()["checks"], {"database": True, "cache": True, "event_bus": True})

    def test_not_ready_when_a_check_fails(self):
        container.configure_for_testing()
        broken = Mock(side_effect=ConnectionError("redis down"))

        with patch.dict("authentication.api.views.health_views.READINESS_CHECKS", {"cache": broken}):
            response = APIClient().get(reverse("health_ready"))

        self.assertEqual(response.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertFalse(response.json()["checks"]["cache"])
