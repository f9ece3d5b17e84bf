"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
They are published only after the reservation and the booking row have
both been committed.
"""

from dataclasses import dataclass

from shared.domain.base import DomainEvent


@dataclass(frozen=True)
class BookingCreated(DomainEvent):
    """
    Event: A new booking was created

    Triggers:
    - Push a "booking" message to connected listeners
    - Record a booking_created analytics event
    """
    campaign_id: int
    booking_id: int
    slots_booked: int


@dataclass(frozen=True)
class AvailabilityChanged(DomainEvent):
    """
    Event: A campaign's remaining slot count changed

    Triggers:
    - Push an "availability" message to connected listeners
    """
    campaign_id: int
    slots_available: int
    availability: str
