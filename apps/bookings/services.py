"""Domain services for slot reservation.

The AvailabilityStore is the only writer of `Campaign.slots_available` and
`Campaign.availability` on the booking path. Every mutation is a single
conditional UPDATE so that the check and the decrement happen at write time.
"""

from __future__ import annotations

import logging
import threading
import weakref
from dataclasses import dataclass
from typing import Dict, Optional, Union

from django.db import transaction  # type: ignore
from django.db.models import Case, CharField, F, Value, When  # type: ignore
from django.utils import timezone  # type: ignore

from apps.campaigns.models import FULL_SLOTS, LIMITED_MAX_SLOTS, Availability, Campaign

from .domain.errors import BookingFailure
from .models import MAX_SLOTS_PER_BOOKING, MIN_SLOTS_PER_BOOKING

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reservation:
    """Outcome of a successful reserve (or release) call."""

    campaign_id: int
    slots_reserved: int
    slots_available: int
    availability: str


def _availability_after(delta: int) -> Case:
    """Availability label for `slots_available + delta`, evaluated on the pre-update row."""

    return Case(
        When(slots_available__lte=FULL_SLOTS - delta, then=Value(Availability.FULL.value)),
        When(slots_available__lte=LIMITED_MAX_SLOTS - delta, then=Value(Availability.LIMITED.value)),
        default=Value(Availability.AVAILABLE.value),
        output_field=CharField(),
    )


def is_valid_slot_count(slots: object) -> bool:
    return (
        isinstance(slots, int)
        and not isinstance(slots, bool)
        and MIN_SLOTS_PER_BOOKING <= slots <= MAX_SLOTS_PER_BOOKING
    )


class AvailabilityStore:
    """
    Authoritative slot counts for campaigns

    Strategy:
    1. Conditional UPDATE ... WHERE slots_available >= n (check at write time)
    2. Availability label recomputed in the same statement
    3. Per-campaign lock so reservations in one process queue up instead of
       contending for the row

    Campaigns never share a lock, so different campaigns reserve in parallel.
    Locks are kept only while in use, so idle campaigns cost nothing.
    """

    def __init__(self):
        self._locks: "weakref.WeakValueDictionary[int, threading.Lock]" = weakref.WeakValueDictionary()
        self._locks_guard = threading.Lock()

    def _lock_for(self, campaign_id: int) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(campaign_id)
            if lock is None:
                lock = self._locks[campaign_id] = threading.Lock()
            return lock

    def get(self, campaign_id: int) -> Optional[Campaign]:
        """Read a campaign straight from the database."""

        return Campaign.objects.filter(pk=campaign_id).first()

    def _apply_delta(self, campaign_id: int, delta: int, guard: Dict[str, int]):
        with self._lock_for(campaign_id):
            with transaction.atomic():
                # availability is assigned first: MySQL evaluates SET clauses left to right.
                updated = Campaign.objects.filter(pk=campaign_id, **guard).update(
                    availability=_availability_after(delta),
                    slots_available=F("slots_available") + delta,
                    updated_at=timezone.now(),
                )
                row = (
                    Campaign.objects.filter(pk=campaign_id)
                    .values("slots_available", "availability")
                    .first()
                )
        return updated, row

    def reserve(self, campaign_id: int, slots_required: int) -> Union[Reservation, BookingFailure]:
        """
        Atomically take `slots_required` slots from a campaign

        Returns a Reservation with the new count and label, or a
        BookingFailure (CampaignNotFound / InsufficientAvailability).
        Never reserves partially and never retries.
        """

        if not is_valid_slot_count(slots_required):
            return BookingFailure.validation(
                {
                    "slotsRequired": [
                        f"Must be a whole number between {MIN_SLOTS_PER_BOOKING} "
                        f"and {MAX_SLOTS_PER_BOOKING}."
                    ]
                }
            )

        updated, row = self._apply_delta(
            campaign_id,
            -slots_required,
            {"slots_available__gte": slots_required},
        )

        if row is None:
            logger.info(f"Reservation rejected: campaign {campaign_id} not found")
            return BookingFailure.campaign_not_found(campaign_id)

        if not updated:
            logger.info(
                f"Reservation rejected: campaign {campaign_id} has "
                f"{row['slots_available']} slots, {slots_required} requested"
            )
            return BookingFailure.insufficient_availability(
                campaign_id, slots_required, row["slots_available"]
            )

        logger.info(
            f"Reserved {slots_required} slots on campaign {campaign_id} "
            f"(remaining={row['slots_available']}, availability={row['availability']})"
        )
        return Reservation(
            campaign_id=campaign_id,
            slots_reserved=slots_required,
            slots_available=row["slots_available"],
            availability=row["availability"],
        )

    def release(self, campaign_id: int, slots: int) -> Optional[Reservation]:
        """
        Return previously reserved slots to a campaign

        Compensation for a reservation whose booking could not be stored.
        Returns None when the campaign no longer exists.
        """

        updated, row = self._apply_delta(campaign_id, slots, {})

        if not updated or row is None:
            logger.error(f"Could not release {slots} slots: campaign {campaign_id} not found")
            return None

        logger.warning(
            f"Released {slots} slots on campaign {campaign_id} "
            f"(remaining={row['slots_available']}, availability={row['availability']})"
        )
        return Reservation(
            campaign_id=campaign_id,
            slots_reserved=-slots,
            slots_available=row["slots_available"],
            availability=row["availability"],
        )
