"""Tests for atomic slot reservation."""

from __future__ import annotations

import threading
from datetime import date
from decimal import Decimal

from django.db import connection
from django.test import TestCase, TransactionTestCase

from apps.bookings.domain.errors import BookingFailure, FailureKind
from apps.bookings.services import AvailabilityStore, Reservation
from apps.campaigns.models import Availability, Campaign


def make_campaign(slots: int, **overrides) -> Campaign:
    fields = {
        "date": date(2026, 11, 2),
        "time": "09:00-17:00",
        "name": "Bristol Temple Meads digital screens",
        "location": "Bristol",
        "slots_available": slots,
        "number_adverts": 4,
        "price": Decimal("89.99"),
    }
    fields.update(overrides)
    return Campaign.objects.create(**fields)


class AvailabilityStoreTests(TestCase):
    def setUp(self) -> None:
        self.store = AvailabilityStore()

    def test_booking_scenario_walks_through_every_label(self) -> None:
        campaign = make_campaign(5)
        self.assertEqual(campaign.availability, Availability.AVAILABLE)

        first = self.store.reserve(campaign.pk, 2)
        self.assertIsInstance(first, Reservation)
        self.assertEqual(first.slots_available, 3)
        self.assertEqual(first.availability, Availability.LIMITED)

        second = self.store.reserve(campaign.pk, 3)
        self.assertEqual(second.slots_available, 0)
        self.assertEqual(second.availability, Availability.FULL)

        third = self.store.reserve(campaign.pk, 1)
        self.assertIsInstance(third, BookingFailure)
        self.assertEqual(third.kind, FailureKind.INSUFFICIENT_AVAILABILITY)
        self.assertEqual(third.remaining, 0)

        campaign.refresh_from_db()
        self.assertEqual(campaign.slots_available, 0)
        self.assertEqual(campaign.availability, Availability.FULL)

    def test_rejects_more_than_remaining_without_partial_reservation(self) -> None:
        campaign = make_campaign(3)

        outcome = self.store.reserve(campaign.pk, 4)

        self.assertEqual(outcome.kind, FailureKind.INSUFFICIENT_AVAILABILITY)
        self.assertEqual(outcome.remaining, 3)
        self.assertIn("only 3 slots remain", outcome.message)
        campaign.refresh_from_db()
        self.assertEqual(campaign.slots_available, 3)

    def test_label_matches_thresholds_after_each_reservation(self) -> None:
        campaign = make_campaign(12)
        for _ in range(12):
            reservation = self.store.reserve(campaign.pk, 1)
            self.assertEqual(
                reservation.availability,
                Availability.for_slots(reservation.slots_available),
            )
            campaign.refresh_from_db()
            self.assertEqual(campaign.availability, Availability.for_slots(campaign.slots_available))

    def test_boundary_between_available_and_limited(self) -> None:
        campaign = make_campaign(6)

        self.assertEqual(self.store.reserve(campaign.pk, 1).availability, Availability.AVAILABLE)
        self.assertEqual(self.store.reserve(campaign.pk, 1).availability, Availability.LIMITED)

    def test_unknown_campaign(self) -> None:
        outcome = self.store.reserve(999_999, 1)

        self.assertEqual(outcome.kind, FailureKind.CAMPAIGN_NOT_FOUND)
        self.assertEqual(outcome.campaign_id, 999_999)

    def test_slot_count_out_of_range_is_a_validation_failure(self) -> None:
        campaign = make_campaign(30)

        for bad in (0, 21, -1, True):
            outcome = self.store.reserve(campaign.pk, bad)
            self.assertEqual(outcome.kind, FailureKind.VALIDATION_FAILED, bad)

        campaign.refresh_from_db()
        self.assertEqual(campaign.slots_available, 30)

    def test_release_restores_count_and_label(self) -> None:
        campaign = make_campaign(5)
        self.store.reserve(campaign.pk, 5)

        released = self.store.release(campaign.pk, 5)

        self.assertEqual(released.slots_available, 5)
        self.assertEqual(released.availability, Availability.AVAILABLE)
        campaign.refresh_from_db()
        self.assertEqual(campaign.slots_available, 5)
        self.assertEqual(campaign.availability, Availability.AVAILABLE)

    def test_release_on_missing_campaign_returns_none(self) -> None:
        self.assertIsNone(self.store.release(999_999, 2))

    def test_idle_campaign_locks_are_dropped(self) -> None:
        campaigns = [make_campaign(3, name=f"Screen {n}") for n in range(5)]

        for campaign in campaigns:
            self.store.reserve(campaign.pk, 1)

        self.assertEqual(len(self.store._locks), 0)

    def test_get_reads_the_database(self) -> None:
        campaign = make_campaign(8)
        Campaign.objects.filter(pk=campaign.pk).update(slots_available=2)

        self.assertEqual(self.store.get(campaign.pk).slots_available, 2)
        self.assertIsNone(self.store.get(999_999))


class ConcurrentReservationTests(TransactionTestCase):
    """Reservations racing from several threads, each on its own connection."""

    def _race(self, store, campaign_id, requests):
        """Run `requests` concurrently; `store` may be a zero-arg factory for one store per thread."""
        barrier = threading.Barrier(len(requests))
        outcomes = [None] * len(requests)

        def worker(index, slots):
            try:
                barrier.wait()
                worker_store = store() if callable(store) else store
                outcomes[index] = worker_store.reserve(campaign_id, slots)
            finally:
                connection.close()

        threads = [
            threading.Thread(target=worker, args=(index, slots))
            for index, slots in enumerate(requests)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)
        return outcomes

    def test_only_k_of_m_requests_win_the_last_slots(self) -> None:
        campaign = make_campaign(5)
        store = AvailabilityStore()

        outcomes = self._race(store, campaign.pk, [1] * 12)

        winners = [o for o in outcomes if isinstance(o, Reservation)]
        losers = [o for o in outcomes if isinstance(o, BookingFailure)]
        self.assertEqual(len(winners), 5)
        self.assertEqual(len(losers), 7)
        for loser in losers:
            self.assertEqual(loser.kind, FailureKind.INSUFFICIENT_AVAILABILITY)

        campaign.refresh_from_db()
        self.assertEqual(campaign.slots_available, 0)
        self.assertEqual(campaign.availability, Availability.FULL)

    def test_database_guard_alone_prevents_overselling(self) -> None:
        campaign = make_campaign(5)

        # A separate store per thread means no shared in-process lock, as with
        # several worker processes.
        outcomes = self._race(AvailabilityStore, campaign.pk, [1] * 12)

        winners = [o for o in outcomes if isinstance(o, Reservation)]
        losers = [o for o in outcomes if isinstance(o, BookingFailure)]
        self.assertEqual(len(winners), 5)
        self.assertEqual(len(losers), 7)
        for loser in losers:
            self.assertEqual(loser.kind, FailureKind.INSUFFICIENT_AVAILABILITY)

        campaign.refresh_from_db()
        self.assertEqual(campaign.slots_available, 0)
        self.assertEqual(campaign.availability, Availability.FULL)

    def test_slots_are_conserved_under_mixed_requests(self) -> None:
        campaign = make_campaign(20)
        store = AvailabilityStore()
        requests = [3, 5, 2, 7, 4, 1, 6, 2]

        outcomes = self._race(store, campaign.pk, requests)

        reserved = sum(o.slots_reserved for o in outcomes if isinstance(o, Reservation))
        campaign.refresh_from_db()
        self.assertGreaterEqual(campaign.slots_available, 0)
        self.assertEqual(reserved + campaign.slots_available, 20)
        self.assertEqual(campaign.availability, Availability.for_slots(campaign.slots_available))

    def test_different_campaigns_do_not_interfere(self) -> None:
        first = make_campaign(2, name="Leeds station")
        second = make_campaign(2, name="York station")
        store = AvailabilityStore()

        barrier = threading.Barrier(4)
        results = []
        lock = threading.Lock()

        def worker(campaign_id):
            try:
                barrier.wait()
                outcome = store.reserve(campaign_id, 1)
                with lock:
                    results.append(outcome)
            finally:
                connection.close()

        threads = [
            threading.Thread(target=worker, args=(cid,))
            for cid in (first.pk, first.pk, second.pk, second.pk)
        ]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join(timeout=30)

        self.assertEqual(len(results), 4)
        self.assertTrue(all(isinstance(r, Reservation) for r in results))
        first.refresh_from_db()
        second.refresh_from_db()
        self.assertEqual(first.slots_available, 0)
        self.assertEqual(second.slots_available, 0)
