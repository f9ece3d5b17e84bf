"""
Change Broadcaster

Fans out real-time change messages ("booking", "availability") to every
connected subscriber. Delivery is at-most-once and never blocks the
publisher: each subscriber owns a bounded queue and a subscriber whose queue
is full is dropped.
"""

from __future__ import annotations

import logging
import queue
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

logger = logging.getLogger(__name__)

_CLOSED = object()


class SubscriptionClosed(Exception):
    """Raised by Subscription.get() once the subscription has ended."""


class Subscription:
    """Handle for one connected listener."""

    def __init__(self, maxsize: int):
        self.id = uuid4().hex
        self._queue: queue.Queue = queue.Queue(maxsize=maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def offer(self, message: Dict[str, Any]) -> bool:
        """Enqueue without blocking; False when closed or full."""
        if self.closed:
            return False
        try:
            self._queue.put_nowait(message)
        except queue.Full:
            return False
        return True

    def get(self, timeout: Optional[float] = None) -> Optional[Dict[str, Any]]:
        """
        Next message for this subscriber.

        Returns None when nothing arrived within `timeout` seconds.
        Raises SubscriptionClosed after the subscription has been closed
        and its buffered messages are drained.
        """
        try:
            item = self._queue.get(timeout=timeout)
        except queue.Empty:
            if self.closed:
                raise SubscriptionClosed(self.id)
            return None
        if item is _CLOSED:
            raise SubscriptionClosed(self.id)
        return item

    def close(self) -> None:
        if self.closed:
            return
        self._closed.set()
        try:
            self._queue.put_nowait(_CLOSED)
        except queue.Full:
            # The reader notices `closed` on its next timeout.
            pass

    def __repr__(self):
        return f"Subscription(id={self.id}, closed={self.closed})"


class ChangeBroadcaster:
    """
    Best-effort fan-out to the current set of subscribers

    Usage:
        subscription = broadcaster.subscribe()
        broadcaster.publish("booking", {"campaignId": 1, "bookingId": 7, "slotsBooked": 2})
        message = subscription.get(timeout=15)
        broadcaster.unsubscribe(subscription)
    """

    def __init__(self, queue_size: int = 100):
        self.queue_size = queue_size
        self._subscribers: Dict[str, Subscription] = {}
        self._lock = threading.Lock()
        # Serialises fan-out so each subscriber sees publish order.
        self._publish_lock = threading.Lock()

    def subscribe(self, maxsize: Optional[int] = None) -> Subscription:
        subscription = Subscription(maxsize or self.queue_size)
        with self._lock:
            self._subscribers[subscription.id] = subscription
        logger.info(f"Subscriber {subscription.id} connected ({self.subscriber_count} total)")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> bool:
        with self._lock:
            removed = self._subscribers.pop(subscription.id, None)
        subscription.close()
        if removed is not None:
            logger.info(f"Subscriber {subscription.id} disconnected")
        return removed is not None

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    @staticmethod
    def build_message(message_type: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "type": message_type,
            "data": payload,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    def publish(self, message_type: str, payload: Dict[str, Any]) -> int:
        """
        Deliver a message to every connected subscriber

        Returns the number of subscribers the message was queued for.
        Subscribers that cannot accept it are dropped.
        """
        message = self.build_message(message_type, payload)
        dropped: List[Subscription] = []
        delivered = 0

        with self._publish_lock:
            with self._lock:
                subscribers = list(self._subscribers.values())
            for subscription in subscribers:
                if subscription.offer(message):
                    delivered += 1
                else:
                    dropped.append(subscription)

        for subscription in dropped:
            logger.warning(f"Dropping slow subscriber {subscription.id}")
            self.unsubscribe(subscription)

        logger.debug(f"Published {message_type} to {delivered} subscribers")
        return delivered

    def close(self) -> None:
        with self._lock:
            subscribers = list(self._subscribers.values())
            self._subscribers.clear()
        for subscription in subscribers:
            subscription.close()
