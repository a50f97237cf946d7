import uuid
from unittest.mock import patch

from django.db import IntegrityError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from infrastructure.container import container
from marketplace.models import SellerReview
from marketplace.tests.factories import (
    BookingFactory,
    ContractFactory,
    MaintenanceRequestFactory,
    QuoteFactory,
    SellerFactory,
    UserFactory,
)


class ReviewCreateTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.client = APIClient()
        self.buyer = UserFactory()
        self.seller = SellerFactory()
        self.client.force_authenticate(user=self.buyer)
        self.url = reverse("marketplace:review-create")

        self.finished = MaintenanceRequestFactory(buyer=self.buyer, status="completed", assigned_seller=self.seller)
        self.finished_contract = ContractFactory(
            quote=QuoteFactory(request=self.finished, seller=self.seller, status="accepted"), status="completed"
        )
        self.ongoing = MaintenanceRequestFactory(buyer=self.buyer, status="assigned", assigned_seller=self.seller)
        self.ongoing_contract = ContractFactory(
            quote=QuoteFactory(request=self.ongoing, seller=self.seller, status="accepted"), status="executed"
        )

    def review(self, **fields):
        payload = {"seller_id": str(self.seller.id), "rating": 5}
        payload.update({key: str(value) for key, value in fields.items()})
        return self.client.post(self.url, payload, format="json")

    def test_review_through_contract_only(self):
        response = self.review(contract_id=self.finished_contract.id)

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        review = SellerReview.objects.get()
        self.assertEqual(review.request, self.finished)
        self.assertEqual(review.contract, self.finished_contract)

    def test_second_review_for_same_job_is_conflict(self):
        self.assertEqual(self.review(request_id=self.finished.id).status_code, status.HTTP_201_CREATED)

        response = self.review(request_id=self.finished.id)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_review")
        self.assertEqual(SellerReview.objects.count(), 1)

    def test_concurrent_duplicate_is_conflict(self):
        with patch.object(SellerReview.objects, "create", side_effect=IntegrityError("unique_review_per_request")):
            response = self.review(request_id=self.finished.id)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "duplicate_review")

    def test_contract_from_another_job_is_rejected(self):
        response = self.review(request_id=self.ongoing.id, contract_id=self.finished_contract.id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(SellerReview.objects.exists())

    def test_contract_of_another_buyer_is_rejected(self):
        other_request = MaintenanceRequestFactory(status="completed", assigned_seller=self.seller)
        other_contract = ContractFactory(
            quote=QuoteFactory(request=other_request, seller=self.seller, status="accepted"), status="completed"
        )

        response = self.review(contract_id=other_contract.id)

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(SellerReview.objects.exists())

    def test_unfinished_job_through_its_own_contract_is_conflict(self):
        response = self.review(contract_id=self.ongoing_contract.id)

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["code"], "job_not_completed")


class ReviewServiceLookupTest(TestCase):
    def setUp(self):
        container.configure_for_testing()
        self.service = container.review_service()
        self.buyer = UserFactory()
        self.seller = SellerFactory()

    def test_malformed_booking_id_reports_booking_not_found(self):
        result = self.service.create_review(self.buyer, self.seller.id, 4, booking_id="not-a-uuid")

        self.assertFalse(result.ok)
        self.assertEqual(result.error, "booking_not_found")

    def test_unknown_booking_reports_booking_not_found(self):
        result = self.service.create_review(self.buyer, self.seller.id, 4, booking_id=uuid.uuid4())

        self.assertEqual(result.error, "booking_not_found")

    def test_contract_for_other_booking_is_rejected(self):
        booking = BookingFactory(buyer=self.buyer, seller=self.seller, status="completed")
        other = BookingFactory(buyer=self.buyer, seller=self.seller, status="completed")
        contract = ContractFactory(
            quote=None,
            request=None,
            booking=other,
            buyer=self.buyer,
            seller=self.seller,
            status="completed",
            metadata={},
        )

        result = self.service.create_review(
            self.buyer, self.seller.id, 4, booking_id=booking.id, contract_id=contract.id
        )

        self.assertEqual(result.error, "validation_error")
