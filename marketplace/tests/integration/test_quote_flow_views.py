from datetime import timedelta

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from authentication.models import Profile
from infrastructure.container import container
from marketplace.models import Contract, MaintenanceRequest, NegotiationMessage, QuoteSubmission, SellerReview
from marketplace.tests.factories import MaintenanceRequestFactory, QuoteFactory, SellerFactory, UserFactory
from notifications.models import Notification


PROPOSAL = "Replace the corroded trap, reseal every joint and pressure test the line."


class QuoteFlowIntegrationTest(TestCase):
    """A request from posting to a reviewed, warrantied job, through the API."""

    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()

    def as_user(self, user):
        self.client.force_authenticate(user=user)
        return self.client

    def test_full_request_lifecycle(self):
        # Buyer posts a request
        response = self.as_user(self.buyer).post(
            reverse("marketplace:request-list"),
            {
                "title": "Kitchen sink leaking",
                "description": "Water pools under the sink cabinet every time the tap runs.",
                "category": "plumbing",
                "urgency": "high",
                "city": "Riyadh",
            },
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        request_id = response.data["id"]
        self.assertEqual(response.data["status"], "open")

        # Seller finds it on the feed and quotes
        response = self.as_user(self.seller).get(reverse("marketplace:request-feed"))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["results"][0]["has_quoted"], False)

        response = self.as_user(self.seller).post(
            reverse("marketplace:quote-list"),
            {"request_id": request_id, "price": "450.00", "estimated_duration": "2 days", "proposal": PROPOSAL},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        quote_id = response.data["id"]
        self.assertTrue(Notification.objects.filter(user=self.buyer, notification_type="quote_submitted").exists())

        # Buyer accepts: a contract awaits signatures, the request stays open
        response = self.as_user(self.buyer).post(
            reverse("marketplace:quote-accept", args=[quote_id]), {"language_mode": "dual"}, format="json"
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        contract_id = response.data["id"]
        self.assertEqual(response.data["status"], "pending_buyer")
        self.assertEqual(MaintenanceRequest.objects.get(id=request_id).status, "open")

        response = self.as_user(self.buyer).post(reverse("marketplace:contract-sign", args=[contract_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "pending_seller")

        response = self.as_user(self.seller).post(reverse("marketplace:contract-sign", args=[contract_id]))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "executed")

        job = MaintenanceRequest.objects.get(id=request_id)
        self.assertEqual(job.status, "assigned")
        self.assertEqual(job.assigned_seller, self.seller)

        # Work starts and both sides mark it done
        job_args = ["request", request_id]
        response = self.as_user(self.seller).post(reverse("marketplace:job-start", args=job_args))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "in_progress")

        response = self.as_user(self.seller).post(reverse("marketplace:job-seller-complete", args=job_args))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "in_progress")

        response = self.as_user(self.buyer).post(reverse("marketplace:job-buyer-confirm", args=job_args))
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "completed")

        job.refresh_from_db()
        contract = Contract.objects.get(id=contract_id)
        self.assertEqual(contract.status, "completed")
        self.assertEqual(job.warranty_expires_at, job.buyer_completion_date + timedelta(days=90))
        self.assertEqual(Profile.objects.get(user=self.seller).completed_projects, 1)

        # Buyer reviews the seller
        response = self.as_user(self.buyer).post(
            reverse("marketplace:review-create"),
            {"seller_id": str(self.seller.id), "request_id": request_id, "rating": 4, "review_text": "Tidy work"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        profile = Profile.objects.get(user=self.seller)
        self.assertEqual(str(profile.seller_rating), "4.0")
        self.assertEqual(profile.review_count, 1)

        self.assertEqual(
            [event for event in self.bus.event_types() if event.startswith(("contract", "job", "review"))],
            ["contract.signed", "contract.signed", "contract.executed", "job.seller_completed", "job.completed",
             "review.created"],
        )


class QuoteViewsTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.request = MaintenanceRequestFactory(buyer=self.buyer)

    def test_duplicate_quote_is_conflict(self):
        QuoteFactory(request=self.request, seller=self.seller)
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            reverse("marketplace:quote-list"),
            {"request_id": str(self.request.id), "price": "300.00", "proposal": PROPOSAL},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_quote")

    def test_buyer_cannot_quote(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.post(
            reverse("marketplace:quote-list"),
            {"request_id": str(self.request.id), "price": "300.00", "proposal": PROPOSAL},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_short_proposal_is_rejected(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(
            reverse("marketplace:quote-list"),
            {"request_id": str(self.request.id), "price": "300.00", "proposal": "Cheap fix"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_negotiate_posts_message_and_notifies_seller(self):
        quote = QuoteFactory(request=self.request, seller=self.seller)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("marketplace:quote-negotiate", args=[quote.id]),
            {"price": "350.00", "message": "Could you do it for 350?"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "negotiating")
        self.assertTrue(NegotiationMessage.objects.filter(sender=self.buyer).exists())
        self.assertTrue(Notification.objects.filter(user=self.seller, notification_type="quote_negotiation").exists())

    def test_revision_then_edit_returns_to_pending(self):
        quote = QuoteFactory(request=self.request, seller=self.seller, price="500.00")
        self.client.force_authenticate(user=self.buyer)
        response = self.client.post(
            reverse("marketplace:quote-request-revision", args=[quote.id]),
            {"message": "Please include materials."},
            format="json",
        )
        self.assertEqual(response.data["status"], "revision_requested")

        self.client.force_authenticate(user=self.seller)
        response = self.client.patch(
            reverse("marketplace:quote-detail", args=[quote.id]), {"price": "560.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "pending")
        quote.refresh_from_db()
        self.assertEqual(str(quote.previous_price), "500.00")

    def test_only_author_can_edit(self):
        quote = QuoteFactory(request=self.request, seller=self.seller)
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.patch(
            reverse("marketplace:quote-detail", args=[quote.id]), {"price": "1.00"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_decline(self):
        quote = QuoteFactory(request=self.request, seller=self.seller)
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("marketplace:quote-decline", args=[quote.id]), {"reason": "Over budget"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "rejected")
        self.assertIn("quote.declined", self.bus.event_types())

    def test_switching_accepted_quote_cancels_unsigned_contract(self):
        first = QuoteFactory(request=self.request, seller=self.seller)
        second = QuoteFactory(request=self.request, seller=SellerFactory())
        self.client.force_authenticate(user=self.buyer)

        first_contract = self.client.post(reverse("marketplace:quote-accept", args=[first.id])).data
        self.client.post(reverse("marketplace:quote-accept", args=[second.id]))

        self.assertEqual(Contract.objects.get(id=first_contract["id"]).status, "cancelled")
        first.refresh_from_db()
        self.assertEqual(first.status, "pending")
        self.assertEqual(QuoteSubmission.objects.get(id=second.id).status, "accepted")

    def test_accept_twice_returns_same_contract(self):
        quote = QuoteFactory(request=self.request, seller=self.seller)
        self.client.force_authenticate(user=self.buyer)

        first = self.client.post(reverse("marketplace:quote-accept", args=[quote.id]))
        second = self.client.post(reverse("marketplace:quote-accept", args=[quote.id]))

        self.assertEqual(first.data["id"], second.data["id"])
        self.assertEqual(Contract.objects.filter(quote=quote).count(), 1)

    def test_request_quotes_flag_expired(self):
        accepted = QuoteFactory(request=self.request, seller=self.seller, status="accepted")
        other = QuoteFactory(request=self.request, seller=SellerFactory())
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(reverse("marketplace:request-quotes", args=[self.request.id]))

        expired = {row["id"]: row["expired"] for row in response.data}
        self.assertFalse(expired[str(accepted.id)])
        self.assertTrue(expired[str(other.id)])

    def test_review_before_completion_is_conflict(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.post(
            reverse("marketplace:review-create"),
            {"seller_id": str(self.seller.id), "request_id": str(self.request.id), "rating": 5},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertFalse(SellerReview.objects.exists())
