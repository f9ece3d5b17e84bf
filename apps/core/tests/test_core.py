"""Tests for the health check, request ids and the error envelope."""

from __future__ import annotations

from unittest import mock

from django.db.utils import OperationalError
from django.test import RequestFactory, TestCase

from apps.bookings.domain.errors import BookingFailure
from apps.core.responses import error_response, failure_response


class HealthCheckTests(TestCase):
    def test_healthy(self) -> None:
        response = self.client.get("/healthz")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json(), {"status": "healthy", "database": "connected"})

    def test_unhealthy_when_database_unreachable(self) -> None:
        with mock.patch("apps.core.views.connection") as fake_connection:
            fake_connection.cursor.side_effect = OperationalError("no such host")
            response = self.client.get("/healthz")

        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()["status"], "unhealthy")

    def test_only_get_is_allowed(self) -> None:
        self.assertEqual(self.client.post("/healthz").status_code, 405)

    def test_request_id_is_generated(self) -> None:
        response = self.client.get("/healthz")

        self.assertEqual(len(response["X-Request-ID"]), 32)


class ErrorEnvelopeTests(TestCase):
    def setUp(self) -> None:
        self.request = RequestFactory().get("/")
        self.request.request_id = "abc123"

    def test_envelope_shape(self) -> None:
        response = error_response(self.request, "Nope", "validation_failed", 422, details={"x": ["bad"]})

        self.assertEqual(response.status_code, 422)
        self.assertEqual(response["Cache-Control"], "no-store")
        self.assertEqual(response.data["error"], "Nope")
        self.assertEqual(response.data["code"], "validation_failed")
        self.assertEqual(response.data["details"], {"x": ["bad"]})
        self.assertEqual(response.data["requestId"], "abc123")
        self.assertIn("timestamp", response.data)

    def test_failure_response_carries_remaining(self) -> None:
        failure = BookingFailure.insufficient_availability(campaign_id=3, requested=2, remaining=1)

        response = failure_response(self.request, failure)

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data["remaining"], 1)
        self.assertEqual(response.data["campaignId"], 3)
        self.assertEqual(response.data["error"], "Cannot book 2 slots: only 1 slot remains")
        self.assertNotIn("details", response.data)
