"""
Booking Event Handlers

Side effects of a committed booking. Each handler is registered on the
MessageBus; a failing handler is logged by the bus and never undoes the
booking.
"""

import logging

from shared.application.broadcaster import ChangeBroadcaster
from shared.application.message_bus import MessageBus
from apps.bookings.domain.events import AvailabilityChanged, BookingCreated
from apps.bookings.tasks import track_analytics_event

logger = logging.getLogger(__name__)

BOOKING_MESSAGE = "booking"
AVAILABILITY_MESSAGE = "availability"


def make_booking_broadcaster(broadcaster: ChangeBroadcaster):
    def broadcast_booking_created(event: BookingCreated) -> None:
        """Push a "booking" message to every connected listener."""
        broadcaster.publish(
            BOOKING_MESSAGE,
            {
                "campaignId": event.campaign_id,
                "bookingId": event.booking_id,
                "slotsBooked": event.slots_booked,
            },
        )

    return broadcast_booking_created


def make_availability_broadcaster(broadcaster: ChangeBroadcaster):
    def broadcast_availability_changed(event: AvailabilityChanged) -> None:
        """Push an "availability" message to every connected listener."""
        broadcaster.publish(
            AVAILABILITY_MESSAGE,
            {
                "campaignId": event.campaign_id,
                "availability": event.availability,
                "slotsAvailable": event.slots_available,
            },
        )

    return broadcast_availability_changed


def track_booking_created(event: BookingCreated) -> None:
    track_analytics_event.delay("booking_created", event.payload())


def track_availability_changed(event: AvailabilityChanged) -> None:
    track_analytics_event.delay("availability_changed", event.payload())


def register_booking_handlers(bus: MessageBus, broadcaster: ChangeBroadcaster) -> MessageBus:
    """Wire booking events to the push channel and analytics."""
    bus.register_event_handler(BookingCreated, make_booking_broadcaster(broadcaster))
    bus.register_event_handler(BookingCreated, track_booking_created)
    bus.register_event_handler(AvailabilityChanged, make_availability_broadcaster(broadcaster))
    bus.register_event_handler(AvailabilityChanged, track_availability_changed)
    logger.info("Registered booking event handlers")
    return bus
