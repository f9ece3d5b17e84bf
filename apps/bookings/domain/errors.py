"""
Booking Failure Taxonomy

Expected business outcomes (bad input, unknown campaign, not enough slots)
are returned as BookingFailure values. Only infrastructure faults raise.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional


class FailureKind(str, Enum):
    VALIDATION_FAILED = "validation_failed"
    CAMPAIGN_NOT_FOUND = "campaign_not_found"
    BOOKING_NOT_FOUND = "booking_not_found"
    INSUFFICIENT_AVAILABILITY = "insufficient_availability"
    PERSISTENCE_FAILED = "persistence_failed"
    BROADCAST_FAILED = "broadcast_failed"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]


_HTTP_STATUS = {
    FailureKind.VALIDATION_FAILED: 422,
    FailureKind.CAMPAIGN_NOT_FOUND: 404,
    FailureKind.BOOKING_NOT_FOUND: 404,
    FailureKind.INSUFFICIENT_AVAILABILITY: 409,
    FailureKind.PERSISTENCE_FAILED: 500,
    FailureKind.BROADCAST_FAILED: 500,
}


@dataclass(frozen=True)
class BookingFailure:
    """Why a booking (or a reservation) did not go through."""

    kind: FailureKind
    message: str
    campaign_id: Optional[int] = None
    remaining: Optional[int] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def validation(cls, details: Dict[str, Any], message: str = "Validation failed") -> "BookingFailure":
        return cls(FailureKind.VALIDATION_FAILED, message, details=details)

    @classmethod
    def campaign_not_found(cls, campaign_id: int) -> "BookingFailure":
        return cls(
            FailureKind.CAMPAIGN_NOT_FOUND,
            f"Campaign {campaign_id} not found",
            campaign_id=campaign_id,
        )

    @classmethod
    def booking_not_found(cls, booking_id: int) -> "BookingFailure":
        return cls(FailureKind.BOOKING_NOT_FOUND, f"Booking {booking_id} not found")

    @classmethod
    def insufficient_availability(
        cls, campaign_id: int, requested: int, remaining: int
    ) -> "BookingFailure":
        slot_word = "slot remains" if remaining == 1 else "slots remain"
        return cls(
            FailureKind.INSUFFICIENT_AVAILABILITY,
            f"Cannot book {requested} slots: only {remaining} {slot_word}",
            campaign_id=campaign_id,
            remaining=remaining,
        )

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"error": self.message, "code": self.kind.value}
        if self.campaign_id is not None:
            data["campaignId"] = self.campaign_id
        if self.remaining is not None:
            data["remaining"] = self.remaining
        if self.details:
            data["details"] = self.details
        return data


class BookingError(Exception):
    """Base class for unexpected faults on the booking path."""


class PersistenceFailed(BookingError):
    """The booking row could not be written; the reservation was compensated."""

    kind = FailureKind.PERSISTENCE_FAILED

    def __init__(self, message: str, *, campaign_id: int, compensated: bool):
        super().__init__(message)
        self.campaign_id = campaign_id
        self.compensated = compensated
