"""API views for analytics.

Aggregated inventory and booking metrics. The summary is derived data, so
it is served from the bounded lookup cache and dropped whenever a booking
changes the numbers.
"""

from __future__ import annotations

from decimal import Decimal

from django.apps import apps as django_apps  # type: ignore
from django.db import models  # type: ignore
from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.models import AnalyticsEvent, Booking
from apps.campaigns.cache import ANALYTICS_KEY_PREFIX
from apps.campaigns.models import Availability, Campaign
from apps.core.responses import utc_timestamp

SUMMARY_KEY = f"{ANALYTICS_KEY_PREFIX}summary"


def build_summary() -> dict:
    campaigns = Campaign.objects.aggregate(
        total=models.Count("id"),
        slots_available=models.Sum("slots_available"),
    )
    by_availability = dict(
        Campaign.objects.values_list("availability").order_by().annotate(n=models.Count("id"))
    )

    bookings = Booking.objects.all()
    booking_totals = bookings.aggregate(
        total=models.Count("id"),
        slots_booked=models.Sum("slots_required"),
    )
    revenue = (
        bookings.exclude(status=Booking.Status.CANCELLED)
        .aggregate(total=models.Sum("total_price"))
        .get("total")
        or Decimal("0.00")
    )
    by_status = dict(bookings.values_list("status").order_by().annotate(n=models.Count("id")))
    by_payment = dict(bookings.values_list("payment_status").order_by().annotate(n=models.Count("id")))

    return {
        "campaigns": {
            "total": campaigns["total"],
            "slotsAvailable": campaigns["slots_available"] or 0,
            "byAvailability": {
                choice: by_availability.get(choice, 0) for choice in Availability.values
            },
        },
        "bookings": {
            "total": booking_totals["total"],
            "slotsBooked": booking_totals["slots_booked"] or 0,
            "revenue": str(revenue),
            "byStatus": {choice: by_status.get(choice, 0) for choice in Booking.Status.values},
            "byPaymentStatus": {
                choice: by_payment.get(choice, 0) for choice in Booking.PaymentStatus.values
            },
        },
        "events": AnalyticsEvent.objects.count(),
    }


class AnalyticsSummaryView(APIView):
    """Platform-wide campaign and booking statistics."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, format=None):  # type: ignore
        cache = django_apps.get_app_config("campaigns").cache
        summary = cache.get_or_set_lru(SUMMARY_KEY, build_summary)
        return Response({"summary": summary, "cache": cache.stats(), "timestamp": utc_timestamp()})
