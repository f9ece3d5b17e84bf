"""Booking domain models."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MaxValueValidator, MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

MIN_SLOTS_PER_BOOKING = 1
MAX_SLOTS_PER_BOOKING = 20


class Booking(models.Model):
    """A customer's reservation of slots on one campaign."""

    class Status(models.TextChoices):
        PENDING = "pending", _("Pending")
        CONFIRMED = "confirmed", _("Confirmed")
        CANCELLED = "cancelled", _("Cancelled")

    class PaymentStatus(models.TextChoices):
        PENDING = "pending", _("Pending")
        PAID = "paid", _("Paid")
        FAILED = "failed", _("Failed")
        REFUNDED = "refunded", _("Refunded")

    campaign = models.ForeignKey(
        "campaigns.Campaign",
        on_delete=models.PROTECT,
        related_name="bookings",
    )
    customer_name = models.CharField(max_length=100)
    customer_email = models.EmailField(max_length=254, db_index=True)
    customer_phone = models.CharField(max_length=20)
    company = models.CharField(max_length=200, blank=True)
    slots_required = models.PositiveSmallIntegerField(
        validators=[
            MinValueValidator(MIN_SLOTS_PER_BOOKING),
            MaxValueValidator(MAX_SLOTS_PER_BOOKING),
        ]
    )
    requirements = models.TextField(max_length=1000, blank=True)
    total_price = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text=_("Price including discount and VAT, fixed at booking time."),
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.PENDING,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )
    payment_reference = models.CharField(max_length=255, blank=True)
    contract_signed = models.BooleanField(default=False)
    contract_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Booking")
        verbose_name_plural = _("Bookings")
        ordering = ["-created_at", "-id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(
                    slots_required__gte=MIN_SLOTS_PER_BOOKING,
                    slots_required__lte=MAX_SLOTS_PER_BOOKING,
                ),
                name="booking_slots_in_range",
            ),
        ]
        indexes = [
            models.Index(fields=["campaign", "status"], name="booking_campaign_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Booking #{self.pk} for campaign {self.campaign_id}"

    def save(self, *args, **kwargs):  # type: ignore
        self.customer_email = (self.customer_email or "").strip().lower()
        super().save(*args, **kwargs)

    def _sync_status(self) -> None:
        if self.payment_status == self.PaymentStatus.REFUNDED:
            self.status = self.Status.CANCELLED
        elif (
            self.status == self.Status.PENDING
            and self.payment_status == self.PaymentStatus.PAID
            and self.contract_signed
        ):
            self.status = self.Status.CONFIRMED

    def mark_payment(self, payment_status: str, reference: str = "") -> None:
        self.payment_status = payment_status
        if reference:
            self.payment_reference = reference
        self._sync_status()
        self.save(update_fields=["payment_status", "payment_reference", "status", "updated_at"])

    def mark_contract(self, signed: bool, contract_url: str = "") -> None:
        self.contract_signed = signed
        if contract_url:
            self.contract_url = contract_url
        self._sync_status()
        self.save(update_fields=["contract_signed", "contract_url", "status", "updated_at"])


class AnalyticsEvent(models.Model):
    """Append-only record of something that happened on the booking path."""

    event_type = models.CharField(max_length=50, db_index=True)
    payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = _("Analytics event")
        verbose_name_plural = _("Analytics events")
        ordering = ["-created_at", "-id"]

    def __str__(self) -> str:
        return f"{self.event_type} at {self.created_at:%d/%m/%Y %H:%M}"
