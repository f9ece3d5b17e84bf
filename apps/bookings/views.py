"""API views for the booking domain."""

from __future__ import annotations

from django.apps import apps as django_apps  # type: ignore
from django.conf import settings  # type: ignore
from django.utils.module_loading import import_string  # type: ignore
from rest_framework import serializers, status, viewsets  # type: ignore
from rest_framework.decorators import action  # type: ignore
from rest_framework.response import Response  # type: ignore

from apps.core.responses import error_response, failure_response, utc_timestamp

from .domain.errors import BookingFailure, PersistenceFailed
from .serializers import BookingSerializer


def _workflow():
    return django_apps.get_app_config("bookings").workflow


class BookingViewSet(viewsets.ViewSet):
    """Create bookings, price carts and record payment/contract progress."""

    lookup_value_regex = r"\d+"

    def get_permissions(self):  # type: ignore
        classes = getattr(
            settings,
            "BOOKING_API_PERMISSION_CLASSES",
            ["rest_framework.permissions.AllowAny"],
        )
        return [import_string(path)() for path in classes]

    def _booking_response(self, booking, status_code=status.HTTP_200_OK) -> Response:
        return Response(
            {
                "success": True,
                "booking": BookingSerializer(booking).data,
                "timestamp": utc_timestamp(),
            },
            status=status_code,
        )

    def create(self, request, *args, **kwargs):  # type: ignore
        try:
            outcome = _workflow().create_booking(request.data)
        except PersistenceFailed as exc:
            return error_response(
                request,
                str(exc),
                exc.kind.value,
                status.HTTP_500_INTERNAL_SERVER_ERROR,
                campaignId=exc.campaign_id,
            )
        if isinstance(outcome, BookingFailure):
            return failure_response(request, outcome)
        return self._booking_response(outcome, status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def quote(self, request):  # type: ignore
        outcome = _workflow().quote(request.data)
        if isinstance(outcome, BookingFailure):
            return failure_response(request, outcome)
        return Response({"pricing": outcome.to_dict(), "timestamp": utc_timestamp()})

    @action(detail=False, methods=["get"], url_path=r"customer/(?P<email>[^/]+)")
    def customer(self, request, email=None):  # type: ignore
        try:
            email = serializers.EmailField(max_length=254).run_validation(email)
        except serializers.ValidationError as exc:
            return failure_response(
                request, BookingFailure.validation({"email": [str(e) for e in exc.detail]})
            )
        bookings = _workflow().repository.for_customer(email)
        return Response(
            {
                "bookings": BookingSerializer(bookings, many=True).data,
                "count": len(bookings),
                "timestamp": utc_timestamp(),
            }
        )

    @action(detail=True, methods=["post"])
    def payment(self, request, pk=None):  # type: ignore
        outcome = _workflow().update_payment(int(pk), request.data)
        if isinstance(outcome, BookingFailure):
            return failure_response(request, outcome)
        return self._booking_response(outcome)

    @action(detail=True, methods=["post"])
    def contract(self, request, pk=None):  # type: ignore
        outcome = _workflow().update_contract(int(pk), request.data)
        if isinstance(outcome, BookingFailure):
            return failure_response(request, outcome)
        return self._booking_response(outcome)
