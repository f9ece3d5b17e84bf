"""Serializers for the campaigns API."""

from __future__ import annotations

from rest_framework import serializers  # type: ignore

from .models import Availability, Campaign


class CampaignSerializer(serializers.ModelSerializer):
    slotsAvailable = serializers.IntegerField(source="slots_available", read_only=True)
    numberAdverts = serializers.IntegerField(source="number_adverts", read_only=True)
    iconUrl = serializers.CharField(source="icon_url", read_only=True)

    class Meta:
        model = Campaign
        fields = [
            "id",
            "date",
            "time",
            "name",
            "location",
            "slotsAvailable",
            "numberAdverts",
            "price",
            "availability",
            "iconUrl",
        ]
        read_only_fields = fields


class CampaignQuerySerializer(serializers.Serializer):
    """Query-string filters for the campaign listing."""

    location = serializers.CharField(required=False, allow_blank=False, max_length=200)
    availability = serializers.ChoiceField(choices=Availability.choices, required=False)
    limit = serializers.IntegerField(required=False, min_value=1, max_value=1000)
    offset = serializers.IntegerField(required=False, min_value=0, default=0)
