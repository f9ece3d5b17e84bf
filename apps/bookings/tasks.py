"""Celery tasks for the booking domain."""

from __future__ import annotations

import logging

from celery import shared_task  # type: ignore

from .models import AnalyticsEvent

logger = logging.getLogger(__name__)


@shared_task(name="bookings.track_analytics_event", ignore_result=True)
def track_analytics_event(event_type: str, payload: dict) -> int:
    """Persist one analytics event outside the booking request."""

    event = AnalyticsEvent.objects.create(event_type=event_type, payload=payload or {})
    logger.debug(f"Tracked analytics event {event_type} (#{event.pk})")
    return event.pk
