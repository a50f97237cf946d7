from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import Contract, MaintenanceRequest, QuoteSubmission
from marketplace.tests.factories import (
    ContractFactory,
    MaintenanceRequestFactory,
    QuoteFactory,
    SellerFactory,
    UserFactory,
)


class RequestCreateTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.client.force_authenticate(user=self.buyer)
        self.url = reverse("marketplace:request-list")

    def payload(self, **overrides):
        data = {
            "title": "Water heater not working",
            "description": "The water heater trips the breaker as soon as it switches on.",
            "category": "electrical",
            "city": "Dammam",
            "estimated_budget_min": "100.00",
            "estimated_budget_max": "300.00",
        }
        data.update(overrides)
        return data

    def test_create(self):
        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        request = MaintenanceRequest.objects.get(id=response.data["id"])
        self.assertEqual(request.buyer, self.buyer)
        self.assertEqual(request.urgency, "medium")

    def test_short_title(self):
        response = self.client.post(self.url, self.payload(title="Fix"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_short_description(self):
        response = self.client.post(self.url, self.payload(description="Broken heater"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_budget_min_above_max(self):
        response = self.client.post(
            self.url, self.payload(estimated_budget_min="500.00", estimated_budget_max="100.00"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "validation_error")

    @override_settings(MAINTMENA={"ALPHA_CATEGORIES_ONLY": True})
    def test_category_outside_alpha_set(self):
        response = self.client.post(self.url, self.payload(category="carpentry"), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_sellers_cannot_post_requests(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class RequestLifecycleTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.request = MaintenanceRequestFactory(buyer=self.buyer)
        self.client.force_authenticate(user=self.buyer)

    def test_edit_while_open(self):
        response = self.client.patch(
            reverse("marketplace:request-detail", args=[self.request.id]), {"urgency": "high"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["urgency"], "high")

    def test_edit_after_assignment_is_conflict(self):
        MaintenanceRequest.objects.filter(id=self.request.id).update(status="assigned")

        response = self.client.patch(
            reverse("marketplace:request-detail", args=[self.request.id]), {"urgency": "high"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_only_owner_edits(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.patch(
            reverse("marketplace:request-detail", args=[self.request.id]), {"urgency": "high"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_cancel_rejects_quotes_and_cancels_contracts(self):
        quote = QuoteFactory(request=self.request)
        contract = ContractFactory(quote=QuoteFactory(request=self.request, status="accepted"))

        response = self.client.post(reverse("marketplace:request-cancel", args=[self.request.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(QuoteSubmission.objects.get(id=quote.id).status, "rejected")
        self.assertEqual(Contract.objects.get(id=contract.id).status, "cancelled")

    def test_cancel_after_execution_is_conflict(self):
        quote = QuoteFactory(request=self.request, status="accepted")
        contract = ContractFactory(quote=quote, status="executed")
        MaintenanceRequest.objects.filter(id=self.request.id).update(status="assigned", assigned_seller=quote.seller)

        response = self.client.post(reverse("marketplace:request-cancel", args=[self.request.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "invalid_state")
        self.assertEqual(MaintenanceRequest.objects.get(id=self.request.id).status, "assigned")
        self.assertEqual(Contract.objects.get(id=contract.id).status, "executed")
        self.assertEqual(QuoteSubmission.objects.get(id=quote.id).status, "accepted")

    def test_cancel_twice_is_conflict(self):
        self.client.post(reverse("marketplace:request-cancel", args=[self.request.id]))

        response = self.client.post(reverse("marketplace:request-cancel", args=[self.request.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_list_own_requests_with_status_filter(self):
        MaintenanceRequestFactory(buyer=self.buyer, status="cancelled")
        MaintenanceRequestFactory()

        response = self.client.get(reverse("marketplace:request-list"), {"status": "open"})

        self.assertEqual([row["id"] for row in response.data["results"]], [str(self.request.id)])


class RequestVisibilityTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.request = MaintenanceRequestFactory()

    def test_any_seller_reads_open_request(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.get(reverse("marketplace:request-detail", args=[self.request.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_other_buyer_cannot_read(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(reverse("marketplace:request-detail", args=[self.request.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_feed_filters_and_flags_quoted(self):
        seller = SellerFactory()
        MaintenanceRequestFactory(category="painting")
        MaintenanceRequestFactory(status="assigned")
        QuoteFactory(request=self.request, seller=seller)
        self.client.force_authenticate(user=seller)

        response = self.client.get(reverse("marketplace:request-feed"), {"category": "plumbing"})

        self.assertEqual(len(response.data["results"]), 1)
        self.assertTrue(response.data["results"][0]["has_quoted"])
        self.assertEqual(response.data["results"][0]["quote_count"], 1)

    def test_buyers_cannot_see_feed(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(reverse("marketplace:request-feed"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
