"""Persistence for bookings."""

from __future__ import annotations

from decimal import Decimal
from typing import List, Optional

from django.db import transaction  # type: ignore

from .models import Booking


class BookingRepository:
    """Thin wrapper around the Booking table used by the booking workflow."""

    def add(
        self,
        *,
        campaign_id: int,
        customer_name: str,
        customer_email: str,
        customer_phone: str,
        slots_required: int,
        total_price: Decimal,
        company: str = "",
        requirements: str = "",
    ) -> Booking:
        """Insert a pending booking in its own transaction."""
        with transaction.atomic():
            return Booking.objects.create(
                campaign_id=campaign_id,
                customer_name=customer_name,
                customer_email=customer_email,
                customer_phone=customer_phone,
                company=company,
                slots_required=slots_required,
                requirements=requirements,
                total_price=total_price,
                status=Booking.Status.PENDING,
                payment_status=Booking.PaymentStatus.PENDING,
            )

    def get(self, booking_id: int) -> Optional[Booking]:
        return Booking.objects.filter(pk=booking_id).first()

    def for_customer(self, email: str) -> List[Booking]:
        return list(
            Booking.objects.filter(customer_email=email.strip().lower()).select_related("campaign")
        )
