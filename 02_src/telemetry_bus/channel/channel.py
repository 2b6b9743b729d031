"""Single-kind broadcast channel."""

import asyncio
import threading
import weakref
from typing import Generic, TypeVar

from ..errors import ClosedChannelError
from ..logging_config import get_logger
from .listener import Listener, RecordHandler
from .subscription import Subscription

logger = get_logger(__name__)

T = TypeVar("T")


class Channel(Generic[T]):
    """
    Broadcast primitive for one record kind.

    ``publish`` hands the record to every subscription registered at call
    time and returns immediately. There is no replay: a subscription only
    sees records published after it was created. Registry changes and
    fan-out are serialized by one lock, so every subscriber observes the
    same publish order.

    Subscriptions are held weakly: a handle dropped without ``cancel()`` is
    pruned once it is garbage collected. Running listeners are held until
    their task finishes.
    """

    def __init__(self, name: str, buffer_size: int = 0):
        self._name = name
        self._buffer_size = buffer_size
        self._lock = threading.Lock()
        self._subscriptions: weakref.WeakValueDictionary[str, Subscription[T]] = (
            weakref.WeakValueDictionary()
        )
        self._listeners: set[Listener[T]] = set()
        self._closed = False

    @property
    def name(self) -> str:
        return self._name

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscriptions)

    def subscribe(self) -> Subscription[T]:
        """Register a new subscriber and return its handle."""
        with self._lock:
            if self._closed:
                raise ClosedChannelError(self._name)
            subscription: Subscription[T] = Subscription(
                self._name, self._unsubscribe, self._buffer_size
            )
            self._subscriptions[subscription.id] = subscription
        logger.debug("Subscriber %s joined channel %s", subscription.id, self._name)
        return subscription

    def listen(self, handler: RecordHandler, name: str | None = None) -> Listener[T]:
        """Subscribe a handler called for every record. Requires a running loop."""
        asyncio.get_running_loop()
        listener: Listener[T] = Listener(self.subscribe(), handler, name)
        listener.start()
        self._listeners.add(listener)
        listener.add_done_callback(self._listeners.discard)
        return listener

    def publish(self, record: T) -> None:
        """Deliver a record to every current subscriber."""
        failed: list[Subscription[T]] = []
        with self._lock:
            if self._closed:
                raise ClosedChannelError(self._name)
            for subscription in list(self._subscriptions.values()):
                try:
                    subscription._deliver(record)
                except Exception as e:
                    logger.error(
                        "Delivery to subscriber %s on channel %s failed: %s",
                        subscription.id,
                        self._name,
                        e,
                    )
                    failed.append(subscription)
                    subscription._fail(e)
            for subscription in failed:
                self._subscriptions.pop(subscription.id, None)

    def close(self) -> None:
        """Stop accepting records and end every subscription. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            subscriptions = list(self._subscriptions.values())
            self._subscriptions.clear()
        for subscription in subscriptions:
            subscription._end()
        logger.info("Channel %s closed (%d subscribers ended)", self._name, len(subscriptions))

    def _unsubscribe(self, subscription: Subscription[T]) -> None:
        with self._lock:
            self._subscriptions.pop(subscription.id, None)
        logger.debug("Subscriber %s left channel %s", subscription.id, self._name)
