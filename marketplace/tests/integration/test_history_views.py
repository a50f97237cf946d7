from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import NegotiationMessage
from marketplace.tests.factories import (
    BookingFactory,
    ContractFactory,
    MaintenanceRequestFactory,
    QuoteFactory,
    SellerFactory,
    SellerReviewFactory,
    UserFactory,
)


class BuyerHistoryTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.buyer)

    def test_buckets(self):
        done = MaintenanceRequestFactory(
            buyer=self.buyer,
            assigned_seller=self.seller,
            status="completed",
            buyer_marked_complete=True,
            seller_marked_complete=True,
            buyer_completion_date=timezone.now(),
        )
        SellerReviewFactory(seller=self.seller, buyer=self.buyer, request=done, rating=5)
        BookingFactory(buyer=self.buyer, seller=self.seller, status="declined")
        active = BookingFactory(buyer=self.buyer, seller=self.seller, final_agreed_price="750.00")

        response = self.client.get(reverse("marketplace:history-buyer"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["counts"], {"completed": 1, "rejected": 1, "active": 1})
        self.assertEqual(response.data["completed"][0]["review"], 5)
        self.assertEqual(response.data["active"][0]["id"], str(active.id))
        self.assertEqual(response.data["active"][0]["price"], "750.00")

    def test_expired_quote_is_listed_as_rejected(self):
        request = MaintenanceRequestFactory(buyer=self.buyer)
        QuoteFactory(request=request, status="accepted")
        expired = QuoteFactory(request=request)

        response = self.client.get(reverse("marketplace:history-buyer"))

        quotes = [item for item in response.data["rejected"] if item["kind"] == "quote"]
        self.assertEqual([item["id"] for item in quotes], [str(expired.id)])
        self.assertTrue(quotes[0]["expired"])

    def test_buyer_confirmed_job_waits_for_seller(self):
        MaintenanceRequestFactory(
            buyer=self.buyer, assigned_seller=self.seller, status="in_progress", buyer_marked_complete=True
        )

        response = self.client.get(reverse("marketplace:history-buyer"))

        self.assertTrue(response.data["completed"][0]["waiting_for_seller"])


class SellerHistoryTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.seller)

    def test_seller_waits_for_buyer(self):
        MaintenanceRequestFactory(assigned_seller=self.seller, status="in_progress", seller_marked_complete=True)
        QuoteFactory(seller=self.seller, status="rejected")

        response = self.client.get(reverse("marketplace:history-seller"))

        self.assertEqual(response.data["counts"], {"completed": 0, "rejected": 1, "active": 1})
        self.assertTrue(response.data["active"][0]["waiting_for_buyer"])

    def test_buyers_are_forbidden(self):
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(reverse("marketplace:history-seller"))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class OverviewAndJourneyTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.client.force_authenticate(user=self.buyer)

    def test_overview_groups(self):
        open_request = MaintenanceRequestFactory(buyer=self.buyer)
        in_review = MaintenanceRequestFactory(buyer=self.buyer)
        QuoteFactory(request=in_review, status="negotiating")
        sent = BookingFactory(buyer=self.buyer)
        reviewed = BookingFactory(buyer=self.buyer, status="counter_proposed")

        response = self.client.get(reverse("marketplace:history-overview"))

        self.assertEqual([row["id"] for row in response.data["open"]], [str(open_request.id)])
        self.assertEqual([row["id"] for row in response.data["in_review"]], [str(in_review.id)])
        self.assertEqual([row["id"] for row in response.data["sent"]], [str(sent.id)])
        self.assertEqual([row["id"] for row in response.data["reviewed"]], [str(reviewed.id)])

    def test_quote_journey_after_buyer_signature(self):
        contract = ContractFactory(
            quote=QuoteFactory(request=MaintenanceRequestFactory(buyer=self.buyer), status="accepted"),
            status="pending_seller",
            signed_at_buyer=timezone.now(),
        )

        response = self.client.get(
            reverse("marketplace:history-journey", args=["quote", contract.quote_id]), {"language": "ar"}
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["role"], "buyer")
        self.assertEqual(response.data["current_index"], 2)
        self.assertEqual(response.data["stages"][2]["label"], "قمت بالتوقيع")
        self.assertEqual(response.data["contract_id"], str(contract.id))

    def test_booking_journey_for_seller(self):
        booking = BookingFactory(buyer=self.buyer, status="contract_pending")
        self.client.force_authenticate(user=booking.seller)

        response = self.client.get(reverse("marketplace:history-journey", args=["booking", booking.id]))

        self.assertEqual(response.data["role"], "seller")
        self.assertEqual(response.data["current_index"], 1)
        self.assertEqual(response.data["stages"][0]["label"], "Booking Received")

    def test_journey_for_outsider(self):
        booking = BookingFactory()

        response = self.client.get(reverse("marketplace:history-journey", args=["booking", booking.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_flow(self):
        booking = BookingFactory(buyer=self.buyer)

        response = self.client.get(reverse("marketplace:history-journey", args=["lease", booking.id]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class ThreadMessagesTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.quote = QuoteFactory()
        self.buyer = self.quote.request.buyer
        self.seller = self.quote.seller
        self.url = reverse("marketplace:thread-messages", args=["quote", self.quote.id])

    def test_post_and_read(self):
        self.client.force_authenticate(user=self.buyer)
        response = self.client.post(self.url, {"content": "Can you start Sunday?"}, format="json")
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)

        self.client.force_authenticate(user=self.seller)
        response = self.client.get(self.url)

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([row["content"] for row in response.data], ["Can you start Sunday?"])
        message = NegotiationMessage.objects.get()
        self.assertEqual(message.recipient, self.seller)
        self.assertTrue(message.is_read)

    def test_outsider_cannot_post(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.post(self.url, {"content": "Hello"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_thread_type(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(reverse("marketplace:thread-messages", args=["order", self.quote.id]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_booking_thread(self):
        booking = BookingFactory()
        self.client.force_authenticate(user=booking.seller)

        response = self.client.post(
            reverse("marketplace:thread-messages", args=["booking", booking.id]), {"content": "On my way"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(NegotiationMessage.objects.get().recipient, booking.buyer)


class SellerReviewListTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.seller = SellerFactory()

    def test_average_and_distribution(self):
        for rating in (5, 5, 4, 2):
            SellerReviewFactory(seller=self.seller, rating=rating)

        response = self.client.get(reverse("marketplace:seller-reviews", args=[self.seller.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 4)
        self.assertEqual(response.data["average_rating"], 4.0)
        self.assertEqual(response.data["distribution"], {"1": 0, "2": 1, "3": 0, "4": 1, "5": 2})

    def test_no_reviews(self):
        response = self.client.get(reverse("marketplace:seller-reviews", args=[self.seller.id]))

        self.assertIsNone(response.data["average_rating"])
        self.assertEqual(response.data["results"], [])

    def test_unknown_seller(self):
        response = self.client.get(
            reverse("marketplace:seller-reviews", args=["6f1c2d3e-4b5a-4c6d-8e7f-9a0b1c2d3e4f"])
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class ActiveJobsTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.seller = SellerFactory()
        self.assigned = MaintenanceRequestFactory(assigned_seller=self.seller, status="assigned")
        self.booking = BookingFactory(seller=self.seller, status="in_progress")
        MaintenanceRequestFactory(assigned_seller=self.seller, status="completed")
        BookingFactory(seller=self.seller)

    def test_seller_jobs(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.get(reverse("marketplace:job-list"))

        self.assertEqual([row["id"] for row in response.data["requests"]], [str(self.assigned.id)])
        self.assertEqual([row["id"] for row in response.data["bookings"]], [str(self.booking.id)])

    def test_buyer_jobs(self):
        self.client.force_authenticate(user=self.assigned.buyer)

        response = self.client.get(reverse("marketplace:job-list"), {"role": "buyer"})

        self.assertEqual([row["id"] for row in response.data["requests"]], [str(self.assigned.id)])
        self.assertEqual(response.data["bookings"], [])

    def test_start_needs_assigned_seller(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.post(reverse("marketplace:job-start", args=["request", self.assigned.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_unknown_job_kind(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.post(reverse("marketplace:job-start", args=["order", self.assigned.id]))

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LabelsTest(TestCase):
    def test_labels_in_arabic(self):
        response = APIClient().get(reverse("marketplace:labels"), {"language": "ar"})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn("statuses", response.data)
        self.assertIn("categories", response.data)
