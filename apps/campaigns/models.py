"""Campaign inventory models."""

from __future__ import annotations

from decimal import Decimal

from django.core.validators import MinValueValidator  # type: ignore
from django.db import models  # type: ignore
from django.utils.translation import gettext_lazy as _  # type: ignore

# Availability thresholds: 0 -> full, 1..LIMITED_MAX_SLOTS -> limited,
# anything above -> available.
FULL_SLOTS = 0
LIMITED_MAX_SLOTS = 4


class Availability(models.TextChoices):
    AVAILABLE = "available", _("Available")
    LIMITED = "limited", _("Limited")
    FULL = "full", _("Full")

    @classmethod
    def for_slots(cls, slots_available: int) -> "Availability":
        """Derive the availability label from the remaining slot count."""
        if slots_available <= FULL_SLOTS:
            return cls.FULL
        if slots_available <= LIMITED_MAX_SLOTS:
            return cls.LIMITED
        return cls.AVAILABLE


class Campaign(models.Model):
    """A time-boxed advertising opportunity with a finite number of slots."""

    date = models.DateField()
    time = models.CharField(
        max_length=20,
        help_text=_("Time window, e.g. 09:00-17:00."),
    )
    name = models.CharField(max_length=200)
    location = models.CharField(max_length=200, blank=True)
    slots_available = models.PositiveIntegerField(default=0)
    number_adverts = models.PositiveIntegerField(
        default=0,
        help_text=_("Adverts carried by each slot."),
    )
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
        help_text=_("Price per slot in GBP."),
    )
    availability = models.CharField(
        max_length=20,
        choices=Availability.choices,
        default=Availability.AVAILABLE,
    )
    icon_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = _("Campaign")
        verbose_name_plural = _("Campaigns")
        ordering = ["date", "time", "id"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(slots_available__gte=0),
                name="campaign_slots_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["date", "location"], name="campaign_date_location_idx"),
            models.Index(fields=["availability"], name="campaign_availability_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.date:%d/%m/%Y} {self.time})"

    def save(self, *args, **kwargs):  # type: ignore
        self.availability = Availability.for_slots(self.slots_available)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "slots_available" in update_fields:
            kwargs["update_fields"] = set(update_fields) | {"availability"}
        super().save(*args, **kwargs)
