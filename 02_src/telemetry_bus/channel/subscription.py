"""Per-subscriber delivery handle."""

import asyncio
import threading
import uuid
from collections import deque
from typing import Callable, Generic, TypeVar

from ..logging_config import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None


def _wake(waiter: asyncio.Future) -> None:
    if not waiter.done():
        waiter.set_result(None)


class Subscription(Generic[T]):
    """
    One subscriber's ordered view of a channel.

    Records published after the subscription was created are buffered here
    in publish order and consumed with ``async for``. Iteration ends when
    the channel closes or the subscription is cancelled; records buffered
    before that point are still yielded.

    With a positive ``buffer_size`` the buffer is bounded and the oldest
    record is dropped when it is full. The producer never waits.

    The channel only holds the handle weakly. Keep a reference for as long
    as records are wanted, and call ``cancel()`` (or use ``async with``) to
    stop receiving them deterministically.
    """

    def __init__(
        self,
        channel_name: str,
        on_cancel: Callable[["Subscription[T]"], None],
        buffer_size: int = 0,
    ):
        self.id = str(uuid.uuid4())
        self._channel_name = channel_name
        self._on_cancel = on_cancel
        self._buffer: deque[T] = deque(maxlen=buffer_size or None)
        self._lock = threading.Lock()
        self._waiter: asyncio.Future | None = None
        self._closed = False
        self._dropped = 0
        self._error: BaseException | None = None

    @property
    def channel_name(self) -> str:
        """Name of the channel this subscription belongs to."""
        return self._channel_name

    @property
    def closed(self) -> bool:
        """True once the subscription receives no further records."""
        return self._closed

    @property
    def dropped(self) -> int:
        """Records discarded because the buffer was full."""
        return self._dropped

    @property
    def error(self) -> BaseException | None:
        """Delivery failure that ended this subscription, if any."""
        return self._error

    def cancel(self) -> None:
        """Unsubscribe. Idempotent."""
        if self._closed:
            return
        self._on_cancel(self)
        self._end()

    def drain(self) -> list[T]:
        """Return and remove every buffered record without waiting."""
        with self._lock:
            records = list(self._buffer)
            self._buffer.clear()
        return records

    # Channel side

    def _deliver(self, record: T) -> None:
        with self._lock:
            if self._closed:
                return
            if self._buffer.maxlen is not None and len(self._buffer) == self._buffer.maxlen:
                self._dropped += 1
                logger.warning(
                    "Subscriber %s on channel %s is full, dropping oldest record",
                    self.id,
                    self._channel_name,
                )
            self._buffer.append(record)
            waiter = self._waiter
        if waiter is not None:
            self._notify(waiter)

    def _end(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            waiter = self._waiter
        if waiter is not None:
            self._notify(waiter)

    def _fail(self, exc: BaseException) -> None:
        self._error = exc
        self._end()

    @staticmethod
    def _notify(waiter: asyncio.Future) -> None:
        loop = waiter.get_loop()
        if _running_loop() is loop:
            _wake(waiter)
        else:
            loop.call_soon_threadsafe(_wake, waiter)

    # Consumer side

    def __aiter__(self) -> "Subscription[T]":
        return self

    async def __anext__(self) -> T:
        while True:
            with self._lock:
                if self._buffer:
                    return self._buffer.popleft()
                if self._closed:
                    raise StopAsyncIteration
                if self._waiter is not None:
                    raise RuntimeError("Subscription is already being consumed")
                waiter = asyncio.get_running_loop().create_future()
                self._waiter = waiter
            try:
                await waiter
            finally:
                with self._lock:
                    self._waiter = None

    async def __aenter__(self) -> "Subscription[T]":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.cancel()
