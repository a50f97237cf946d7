from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import BookingRequest, Contract, NegotiationMessage
from marketplace.tests.factories import BookingFactory, SellerFactory, UserFactory
from notifications.models import Notification


class BookingCreateTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.buyer)
        self.url = reverse("marketplace:booking-list")

    def payload(self, **overrides):
        data = {
            "seller_id": str(self.seller.id),
            "service_category": "electrical",
            "job_description": "Rewire the living room sockets and add two outlets.",
            "proposed_start_date": "2026-11-01",
            "proposed_end_date": "2026-11-03",
            "location_city": "Jeddah",
        }
        data.update(overrides)
        return data

    def test_create_booking(self):
        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data["status"], "pending")
        self.assertEqual(response.data["seller"]["id"], str(self.seller.id))
        self.assertIn("booking.created", self.bus.event_types())
        self.assertTrue(Notification.objects.filter(user=self.seller, notification_type="booking_created").exists())

    def test_unknown_seller_is_not_found(self):
        response = self.client.post(
            self.url, self.payload(seller_id="8b3c1f0e-5c44-4a77-9f6e-1d2a3b4c5d6e"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)

    def test_booking_a_buyer_is_rejected(self):
        response = self.client.post(self.url, self.payload(seller_id=str(UserFactory().id)), format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data["code"], "validation_error")

    def test_end_before_start_is_rejected(self):
        response = self.client.post(
            self.url, self.payload(proposed_start_date="2026-11-05", proposed_end_date="2026-11-01"), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(BookingRequest.objects.exists())

    def test_sellers_cannot_send_bookings(self):
        self.client.force_authenticate(user=SellerFactory())

        response = self.client.post(self.url, self.payload(), format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)


class BookingNegotiationTest(TestCase):
    def setUp(self):
        self.bus = container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.booking = BookingFactory(buyer=self.buyer, seller=self.seller)

    def as_user(self, user):
        self.client.force_authenticate(user=user)
        return self.client

    def test_accept_opens_contract(self):
        response = self.as_user(self.seller).post(
            reverse("marketplace:booking-accept", args=[self.booking.id]), {"response": "See you Sunday"}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "contract_pending")
        contract = Contract.objects.get(booking=self.booking)
        self.assertEqual(contract.status, "pending_buyer")
        self.assertEqual(contract.flow, "booking")
        self.assertTrue(Notification.objects.filter(user=self.buyer, notification_type="booking_accepted").exists())

    def test_only_the_booked_seller_can_answer(self):
        response = self.as_user(SellerFactory()).post(reverse("marketplace:booking-accept", args=[self.booking.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_decline(self):
        response = self.as_user(self.seller).post(
            reverse("marketplace:booking-decline", args=[self.booking.id]), {"reason": "Fully booked"}, format="json"
        )

        self.assertEqual(response.data["status"], "declined")
        self.assertEqual(response.data["seller_response"], "Fully booked")

    def test_counter_then_accept_counter(self):
        response = self.as_user(self.seller).post(
            reverse("marketplace:booking-counter", args=[self.booking.id]),
            {"proposal": {"price_estimate": "400.00", "proposed_start_date": "2026-11-10"}, "response": "Next week"},
            format="json",
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "counter_proposed")
        self.assertEqual(response.data["seller_counter_proposal"]["price_estimate"], "400.00")
        self.assertTrue(NegotiationMessage.objects.filter(message_type="counter_offer", sender=self.seller).exists())

        response = self.as_user(self.buyer).post(reverse("marketplace:booking-accept-counter", args=[self.booking.id]))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["status"], "contract_pending")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.final_agreed_price, Decimal("400.00"))
        self.assertEqual(str(self.booking.proposed_start_date), "2026-11-10")
        self.assertTrue(Contract.objects.filter(booking=self.booking).exists())

    def test_decline_counter_cancels(self):
        BookingRequest.objects.filter(id=self.booking.id).update(
            status="counter_proposed", seller_counter_proposal={"price_estimate": "900.00"}
        )

        response = self.as_user(self.buyer).post(
            reverse("marketplace:booking-decline-counter", args=[self.booking.id])
        )

        self.assertEqual(response.data["status"], "cancelled")

    def test_accept_counter_without_counter_is_conflict(self):
        response = self.as_user(self.buyer).post(reverse("marketplace:booking-accept-counter", args=[self.booking.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)

    def test_buyer_counter_then_seller_accepts_its_terms(self):
        BookingRequest.objects.filter(id=self.booking.id).update(
            status="counter_proposed", seller_counter_proposal={"price_estimate": "900.00"}
        )

        response = self.as_user(self.buyer).post(
            reverse("marketplace:booking-buyer-counter", args=[self.booking.id]),
            {"proposal": {"price_estimate": "650.00", "notes": "Meet me halfway"}},
            format="json",
        )
        self.assertEqual(response.data["status"], "buyer_countered")
        self.assertTrue(
            Notification.objects.filter(user=self.seller, notification_type="booking_countered").exists()
        )

        response = self.as_user(self.seller).post(reverse("marketplace:booking-accept", args=[self.booking.id]))

        self.assertEqual(response.data["status"], "contract_pending")
        self.booking.refresh_from_db()
        self.assertEqual(self.booking.final_agreed_price, Decimal("650.00"))

    def test_counter_with_bad_dates_is_rejected(self):
        response = self.as_user(self.seller).post(
            reverse("marketplace:booking-counter", args=[self.booking.id]),
            {"proposal": {"proposed_start_date": "2026-11-10", "proposed_end_date": "2026-11-01"}},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cancel_cancels_unsigned_contract(self):
        self.as_user(self.seller).post(reverse("marketplace:booking-accept", args=[self.booking.id]))

        response = self.as_user(self.buyer).post(reverse("marketplace:booking-cancel", args=[self.booking.id]))

        self.assertEqual(response.data["status"], "cancelled")
        self.assertEqual(Contract.objects.get(booking=self.booking).status, "cancelled")

    def test_cancel_after_execution_is_conflict(self):
        BookingRequest.objects.filter(id=self.booking.id).update(status="accepted")

        response = self.as_user(self.buyer).post(reverse("marketplace:booking-cancel", args=[self.booking.id]))

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)


class BookingListTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        BookingFactory(buyer=self.buyer, seller=self.seller)
        BookingFactory(buyer=self.buyer, seller=self.seller, status="declined")
        BookingFactory(seller=self.seller)

    def test_buyer_sees_own_bookings(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(reverse("marketplace:booking-list"))

        self.assertEqual(len(response.data), 2)

    def test_buyer_filters_by_status(self):
        self.client.force_authenticate(user=self.buyer)

        response = self.client.get(reverse("marketplace:booking-list"), {"status": "declined"})

        self.assertEqual([row["status"] for row in response.data], ["declined"])

    def test_seller_inbox(self):
        self.client.force_authenticate(user=self.seller)

        response = self.client.get(reverse("marketplace:booking-seller"))

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.data), 3)

    def test_outsider_cannot_read_booking(self):
        booking = BookingFactory()
        self.client.force_authenticate(user=UserFactory())

        response = self.client.get(reverse("marketplace:booking-detail", args=[booking.id]))

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
