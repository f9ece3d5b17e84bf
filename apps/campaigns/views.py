"""Campaign API views."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Iterator, List, Optional

from django.apps import apps as django_apps  # type: ignore
from django.conf import settings  # type: ignore
from django.core.serializers.json import DjangoJSONEncoder  # type: ignore
from django.http import StreamingHttpResponse  # type: ignore
from django.views.decorators.http import require_http_methods  # type: ignore
from rest_framework import permissions  # type: ignore
from rest_framework.response import Response  # type: ignore
from rest_framework.views import APIView  # type: ignore

from apps.bookings.domain.errors import BookingFailure
from apps.core.responses import error_response, failure_response, utc_timestamp
from shared.application.broadcaster import ChangeBroadcaster, Subscription, SubscriptionClosed

from .cache import campaign_key
from .models import Campaign
from .serializers import CampaignQuerySerializer, CampaignSerializer

logger = logging.getLogger(__name__)


def _campaigns_config():
    return django_apps.get_app_config("campaigns")


def build_campaign_list() -> List[Dict[str, Any]]:
    return [dict(item) for item in CampaignSerializer(Campaign.objects.all(), many=True).data]


def build_campaign_detail(campaign_id: int) -> Optional[Dict[str, Any]]:
    campaign = Campaign.objects.filter(pk=campaign_id).first()
    if campaign is None:
        return None
    return dict(CampaignSerializer(campaign).data)


def filter_campaigns(
    campaigns: List[Dict[str, Any]],
    location: Optional[str] = None,
    availability: Optional[str] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Dict[str, Any]]:
    """Apply listing filters to the cached, already serialised campaigns."""
    if location:
        needle = location.lower()
        campaigns = [c for c in campaigns if needle in (c.get("location") or "").lower()]
    if availability:
        campaigns = [c for c in campaigns if c.get("availability") == availability]
    end = offset + limit if limit is not None else None
    return campaigns[offset:end]


class CampaignListView(APIView):
    """List campaigns, served from the short-lived campaign cache."""

    permission_classes = [permissions.AllowAny]

    def get(self, request, format=None):  # type: ignore
        query = CampaignQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return error_response(
                request,
                "Invalid query parameters",
                "validation_failed",
                400,
                details=query.errors,
            )

        cache = _campaigns_config().cache
        campaigns = cache.get_or_set_campaigns(build_campaign_list)
        campaigns = filter_campaigns(campaigns, **query.validated_data)
        return Response(
            {
                "campaigns": campaigns,
                "count": len(campaigns),
                "timestamp": utc_timestamp(),
            }
        )


class CampaignDetailView(APIView):
    permission_classes = [permissions.AllowAny]

    def get(self, request, pk: int, format=None):  # type: ignore
        cache = _campaigns_config().cache
        campaign = cache.get_or_set(campaign_key(pk), lambda: build_campaign_detail(pk))
        if campaign is None:
            return failure_response(request, BookingFailure.campaign_not_found(pk))
        return Response({"campaign": campaign, "timestamp": utc_timestamp()})


def format_sse(message: Dict[str, Any]) -> str:
    payload = json.dumps(message, cls=DjangoJSONEncoder)
    return f"event: {message['type']}\ndata: {payload}\n\n"


def event_stream(
    broadcaster: ChangeBroadcaster,
    subscription: Subscription,
    keepalive: float,
) -> Iterator[str]:
    """Yield SSE frames for one subscriber until it is closed or dropped."""
    try:
        yield format_sse(
            broadcaster.build_message(
                "connection",
                {"status": "connected", "subscriberId": subscription.id},
            )
        )
        while True:
            try:
                message = subscription.get(timeout=keepalive)
            except SubscriptionClosed:
                break
            if message is None:
                yield ": keepalive\n\n"
                continue
            yield format_sse(message)
    finally:
        broadcaster.unsubscribe(subscription)


@require_http_methods(["GET"])
def campaign_stream(request):
    """Server-Sent Events channel for booking and availability changes."""
    broadcaster = _campaigns_config().broadcaster
    subscription = broadcaster.subscribe()
    keepalive = getattr(settings, "BROADCAST_KEEPALIVE_SECONDS", 15)

    response = StreamingHttpResponse(
        event_stream(broadcaster, subscription, keepalive),
        content_type="text/event-stream",
    )
    response["Cache-Control"] = "no-cache"
    response["X-Accel-Buffering"] = "no"
    return response
