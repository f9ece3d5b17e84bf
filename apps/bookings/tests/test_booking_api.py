"""Integration tests for booking API endpoints."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from unittest import mock

from django.apps import apps
from django.db import DatabaseError
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from apps.bookings.models import Booking
from apps.campaigns.models import Availability, Campaign


class BookingAPITests(APITestCase):
    """Covers creation, over-booking, validation and the error envelope."""

    def setUp(self) -> None:
        apps.get_app_config("campaigns").cache.invalidate_all()
        self.campaign = Campaign.objects.create(
            date=date(2026, 11, 16),
            time="09:00-17:00",
            name="Cardiff Central gateline screens",
            location="Cardiff",
            slots_available=5,
            number_adverts=4,
            price=Decimal("89.99"),
        )
        self.list_url = reverse("booking-list")

    def _payload(self, slots: int = 2, **overrides) -> dict:
        payload = {
            "campaignId": self.campaign.pk,
            "customerName": "Gareth Jones",
            "customerEmail": "gareth@example.com",
            "customerPhone": "029 2000 0000",
            "slotsRequired": slots,
        }
        payload.update(overrides)
        return payload

    def test_create_booking(self) -> None:
        response = self.client.post(self.list_url, self._payload(slots=2), format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED, response.data)
        self.assertTrue(response.data["success"])
        self.assertIn("timestamp", response.data)
        booking = response.data["booking"]
        self.assertEqual(booking["campaignId"], self.campaign.pk)
        self.assertEqual(booking["slotsRequired"], 2)
        self.assertEqual(booking["status"], "pending")
        self.assertEqual(booking["paymentStatus"], "pending")
        # 179.98 - 10% = 161.982, + VAT = 194.3784
        self.assertEqual(booking["totalPrice"], "194.38")

        self.campaign.refresh_from_db()
        self.assertEqual(self.campaign.slots_available, 3)
        self.assertEqual(self.campaign.availability, Availability.LIMITED)

    def test_booking_scenario_until_full(self) -> None:
        first = self.client.post(self.list_url, self._payload(slots=2), format="json")
        second = self.client.post(self.list_url, self._payload(slots=3), format="json")
        third = self.client.post(self.list_url, self._payload(slots=1), format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_201_CREATED)
        self.assertEqual(third.status_code, status.HTTP_409_CONFLICT, third.data)
        self.assertEqual(third.data["code"], "insufficient_availability")
        self.assertEqual(third.data["remaining"], 0)

        self.campaign.refresh_from_db()
        self.assertEqual(self.campaign.availability, Availability.FULL)
        self.assertEqual(Booking.objects.count(), 2)

    def test_over_booking_returns_conflict_envelope(self) -> None:
        response = self.client.post(self.list_url, self._payload(slots=7), format="json")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.data["error"], "Cannot book 7 slots: only 5 slots remain")
        self.assertEqual(response.data["remaining"], 5)
        self.assertIn("requestId", response.data)
        self.assertEqual(response["Cache-Control"], "no-store")

    def test_validation_failure_is_unprocessable(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(slots=0, customerPhone="abc"),
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        self.assertEqual(response.data["code"], "validation_failed")
        self.assertIn("slotsRequired", response.data["details"])
        self.assertIn("customerPhone", response.data["details"])

    def test_missing_required_fields(self) -> None:
        response = self.client.post(self.list_url, {}, format="json")

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)
        for field in ("campaignId", "customerName", "customerEmail", "customerPhone", "slotsRequired"):
            self.assertIn(field, response.data["details"])

    def test_unknown_campaign_is_not_found(self) -> None:
        response = self.client.post(
            self.list_url, self._payload(campaignId=self.campaign.pk + 1000), format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "campaign_not_found")

    def test_persistence_failure_is_compensated(self) -> None:
        workflow = apps.get_app_config("bookings").workflow
        with mock.patch.object(workflow.repository, "add", side_effect=DatabaseError("locked")):
            response = self.client.post(self.list_url, self._payload(slots=3), format="json")

        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertEqual(response.data["code"], "persistence_failed")
        self.campaign.refresh_from_db()
        self.assertEqual(self.campaign.slots_available, 5)
        self.assertEqual(self.campaign.availability, Availability.AVAILABLE)

    def test_request_id_is_echoed(self) -> None:
        response = self.client.post(
            self.list_url,
            self._payload(slots=9),
            format="json",
            HTTP_X_REQUEST_ID="req-42",
        )

        self.assertEqual(response.data["requestId"], "req-42")
        self.assertEqual(response["X-Request-ID"], "req-42")

    def test_listing_reflects_booking_after_cached_read(self) -> None:
        campaigns_url = reverse("campaign-list")
        before = self.client.get(campaigns_url)
        self.assertEqual(before.data["campaigns"][0]["slotsAvailable"], 5)

        self.client.post(self.list_url, self._payload(slots=2), format="json")

        after = self.client.get(campaigns_url)
        self.assertEqual(after.data["campaigns"][0]["slotsAvailable"], 3)
        self.assertEqual(after.data["campaigns"][0]["availability"], "limited")

    def test_quote(self) -> None:
        response = self.client.post(
            reverse("booking-quote"),
            {"items": [{"campaignId": self.campaign.pk, "slotsRequired": 4}]},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK, response.data)
        pricing = response.data["pricing"]
        self.assertEqual(pricing["subtotal"], "359.96")
        self.assertEqual(pricing["discountPercentage"], "0.15")
        self.assertEqual(pricing["totalSlots"], 4)
        self.assertEqual(pricing["totalAdverts"], 16)
        self.campaign.refresh_from_db()
        self.assertEqual(self.campaign.slots_available, 5)

    def test_customer_bookings_lookup_is_case_insensitive(self) -> None:
        self.client.post(self.list_url, self._payload(slots=1), format="json")
        self.client.post(self.list_url, self._payload(slots=1), format="json")

        response = self.client.get(
            reverse("booking-customer", kwargs={"email": "Gareth@Example.com"})
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data["count"], 2)

    def test_customer_lookup_rejects_bad_email(self) -> None:
        response = self.client.get(reverse("booking-customer", kwargs={"email": "nobody"}))

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_payment_and_contract_confirm_booking(self) -> None:
        created = self.client.post(self.list_url, self._payload(slots=1), format="json")
        booking_id = created.data["booking"]["id"]

        paid = self.client.post(
            reverse("booking-payment", kwargs={"pk": booking_id}),
            {"paymentStatus": "paid", "paymentReference": "ch_9001"},
            format="json",
        )
        self.assertEqual(paid.status_code, status.HTTP_200_OK, paid.data)
        self.assertEqual(paid.data["booking"]["status"], "pending")

        signed = self.client.post(
            reverse("booking-contract", kwargs={"pk": booking_id}),
            {"contractSigned": True},
            format="json",
        )
        self.assertEqual(signed.data["booking"]["status"], "confirmed")
        self.assertTrue(signed.data["booking"]["contractSigned"])

    def test_invalid_payment_status(self) -> None:
        created = self.client.post(self.list_url, self._payload(slots=1), format="json")

        response = self.client.post(
            reverse("booking-payment", kwargs={"pk": created.data["booking"]["id"]}),
            {"paymentStatus": "maybe"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_422_UNPROCESSABLE_ENTITY)

    def test_payment_for_unknown_booking(self) -> None:
        response = self.client.post(
            reverse("booking-payment", kwargs={"pk": 987654}),
            {"paymentStatus": "paid"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data["code"], "booking_not_found")
