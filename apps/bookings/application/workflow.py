"""
Booking Workflow

The use cases of the booking domain. A booking goes through:

1. Structural validation of the request
2. Pricing (bulk discount + VAT)
3. Atomic slot reservation
4. Persisting the booking (compensated by releasing the slots on failure)
5. Cache invalidation for the campaign
6. Publishing BookingCreated / AvailabilityChanged

Steps short-circuit on the first failure. Expected failures come back as
BookingFailure values; only a failed insert raises (PersistenceFailed).
"""

from typing import Any, List, Mapping, Union
import logging


from shared.application.message_bus import MessageBus
from apps.bookings.domain.errors import BookingFailure, PersistenceFailed
from apps.bookings.domain.events import AvailabilityChanged, BookingCreated
from apps.bookings.domain.pricing import CartItem, PricingBreakdown, price
from apps.bookings.models import Booking
from apps.bookings.repositories import BookingRepository
from apps.bookings.serializers import (
    BookingRequestSerializer,
    ContractUpdateSerializer,
    PaymentUpdateSerializer,
    QuoteSerializer,
    flatten_errors,
)
from apps.bookings.services import AvailabilityStore
from apps.campaigns.cache import ANALYTICS_KEY_PREFIX, CacheLayer

logger = logging.getLogger(__name__)


class BookingWorkflow:
    """
    Orchestrates booking creation and the later payment/contract updates

    Collaborators are passed in explicitly so tests can swap any of them.
    """

    def __init__(
        self,
        store: AvailabilityStore,
        repository: BookingRepository,
        cache: CacheLayer,
        bus: MessageBus,
    ):
        self.store = store
        self.repository = repository
        self.cache = cache
        self.bus = bus

    # ===== Create =====

    def create_booking(self, data: Mapping[str, Any]) -> Union[Booking, BookingFailure]:
        """
        Create a booking from a camelCase request body

        Returns: the persisted Booking, or a BookingFailure

        Raises:
            PersistenceFailed: the booking row could not be written; the
            reserved slots have been released
        """
        serializer = BookingRequestSerializer(data=data)
        if not serializer.is_valid():
            return BookingFailure.validation(flatten_errors(serializer.errors))
        request = serializer.validated_data

        campaign_id = request["campaign_id"]
        slots_required = request["slots_required"]

        campaign = self.store.get(campaign_id)
        if campaign is None:
            return BookingFailure.campaign_not_found(campaign_id)

        breakdown = price(
            [
                CartItem(
                    campaign_id=campaign.pk,
                    slots_required=slots_required,
                    price_per_slot=campaign.price,
                    adverts_per_slot=campaign.number_adverts,
                )
            ]
        )

        reservation = self.store.reserve(campaign_id, slots_required)
        if isinstance(reservation, BookingFailure):
            return reservation

        try:
            booking = self.repository.add(
                campaign_id=campaign_id,
                customer_name=request["customer_name"],
                customer_email=request["customer_email"],
                customer_phone=request["customer_phone"],
                company=request["company"],
                slots_required=slots_required,
                requirements=request["requirements"],
                total_price=breakdown.total,
            )
        except Exception as exc:
            # InterfaceError is not a DatabaseError; every insert failure releases the slots.
            released = self.store.release(campaign_id, slots_required)
            logger.error(
                f"Booking insert failed for campaign {campaign_id}; "
                f"released {slots_required} slots (compensated={released is not None})",
                exc_info=True,
            )
            raise PersistenceFailed(
                "Booking could not be saved",
                campaign_id=campaign_id,
                compensated=released is not None,
            ) from exc

        logger.info(
            f"Created booking {booking.pk}: {slots_required} slots on campaign {campaign_id}, "
            f"total {breakdown.total}"
        )

        self.cache.invalidate_campaign(campaign_id)

        failures = self.bus.publish_events(
            [
                BookingCreated(
                    campaign_id=campaign_id,
                    booking_id=booking.pk,
                    slots_booked=slots_required,
                ),
                AvailabilityChanged(
                    campaign_id=campaign_id,
                    slots_available=reservation.slots_available,
                    availability=reservation.availability,
                ),
            ]
        )
        if failures:
            logger.warning(
                f"{failures} event handler(s) failed for booking {booking.pk}; booking kept"
            )

        return booking

    # ===== Quote =====

    def quote(self, data: Mapping[str, Any]) -> Union[PricingBreakdown, BookingFailure]:
        """Price a multi-campaign cart without reserving anything."""
        serializer = QuoteSerializer(data=data)
        if not serializer.is_valid():
            return BookingFailure.validation(flatten_errors(serializer.errors))

        items: List[CartItem] = []
        for line in serializer.validated_data["items"]:
            campaign = self.store.get(line["campaign_id"])
            if campaign is None:
                return BookingFailure.campaign_not_found(line["campaign_id"])
            items.append(
                CartItem(
                    campaign_id=campaign.pk,
                    slots_required=line["slots_required"],
                    price_per_slot=campaign.price,
                    adverts_per_slot=campaign.number_adverts,
                )
            )
        return price(items)

    # ===== Payment / contract =====

    def update_payment(self, booking_id: int, data: Mapping[str, Any]) -> Union[Booking, BookingFailure]:
        serializer = PaymentUpdateSerializer(data=data)
        if not serializer.is_valid():
            return BookingFailure.validation(flatten_errors(serializer.errors))

        booking = self.repository.get(booking_id)
        if booking is None:
            return BookingFailure.booking_not_found(booking_id)

        booking.mark_payment(
            serializer.validated_data["payment_status"],
            serializer.validated_data["payment_reference"],
        )
        logger.info(
            f"Booking {booking.pk} payment -> {booking.payment_status} (status={booking.status})"
        )
        self.cache.invalidate_pattern(ANALYTICS_KEY_PREFIX)
        return booking

    def update_contract(self, booking_id: int, data: Mapping[str, Any]) -> Union[Booking, BookingFailure]:
        serializer = ContractUpdateSerializer(data=data)
        if not serializer.is_valid():
            return BookingFailure.validation(flatten_errors(serializer.errors))

        booking = self.repository.get(booking_id)
        if booking is None:
            return BookingFailure.booking_not_found(booking_id)

        booking.mark_contract(
            serializer.validated_data["contract_signed"],
            serializer.validated_data["contract_url"],
        )
        logger.info(
            f"Booking {booking.pk} contract signed={booking.contract_signed} (status={booking.status})"
        )
        self.cache.invalidate_pattern(ANALYTICS_KEY_PREFIX)
        return booking
