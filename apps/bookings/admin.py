"""Admin registration for bookings."""

from __future__ import annotations

from django.contrib import admin

from .models import AnalyticsEvent, Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "campaign",
        "customer_name",
        "customer_email",
        "slots_required",
        "total_price",
        "status",
        "payment_status",
        "contract_signed",
        "created_at",
    )
    list_filter = ("status", "payment_status", "contract_signed")
    search_fields = ("customer_name", "customer_email", "company", "campaign__name")
    list_select_related = ("campaign",)
    # Slots were reserved against this campaign; the pairing cannot change.
    readonly_fields = (
        "campaign",
        "slots_required",
        "total_price",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):  # type: ignore
        return False


@admin.register(AnalyticsEvent)
class AnalyticsEventAdmin(admin.ModelAdmin):
    list_display = ("event_type", "created_at")
    list_filter = ("event_type",)
    readonly_fields = ("event_type", "payload", "created_at")
