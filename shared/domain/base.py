"""
Base Domain Classes

This module provides the building blocks shared by the booking domain:
- ValueObject: Immutable objects compared by value
- DomainEvent: Events that represent something that happened
"""

from abc import ABC
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from uuid import UUID, uuid4


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects

    Value objects are immutable and have no identity.
    Two value objects are equal if all their attributes are equal.
    """
    pass


@dataclass(frozen=True)
class DomainEvent:
    """
    Base class for domain events

    Domain events represent something that happened in the domain.
    Subclasses declare their payload as keyword-only fields.
    """
    event_id: UUID = field(default_factory=uuid4, kw_only=True)
    occurred_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc), kw_only=True
    )

    def payload(self) -> dict:
        """Event-specific fields, without the envelope metadata"""
        data = asdict(self)
        data.pop('event_id')
        data.pop('occurred_at')
        return data

    def to_dict(self) -> dict:
        """Convert event to dictionary for serialization"""
        return {
            'event_id': str(self.event_id),
            'event_type': self.__class__.__name__,
            'occurred_at': self.occurred_at.isoformat(),
            'payload': self.payload(),
        }
