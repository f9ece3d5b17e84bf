"""Admin registration for campaign inventory."""

from __future__ import annotations

from django.apps import apps as django_apps
from django.contrib import admin

from .models import Campaign


@admin.register(Campaign)
class CampaignAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "date",
        "time",
        "location",
        "slots_available",
        "availability",
        "number_adverts",
        "price",
    )
    list_filter = ("availability", "location", "date")
    search_fields = ("name", "location")
    readonly_fields = ("availability", "created_at", "updated_at")
    date_hierarchy = "date"

    def save_model(self, request, obj, form, change):  # type: ignore
        super().save_model(request, obj, form, change)
        django_apps.get_app_config("campaigns").cache.invalidate_campaign(obj.pk)
