"""Callback-style consumer on top of a Subscription."""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generic, TypeVar, Union

from ..logging_config import get_logger
from .subscription import Subscription

logger = get_logger(__name__)

T = TypeVar("T")

RecordHandler = Callable[[Any], Union[Awaitable[None], None]]


class Listener(Generic[T]):
    """Runs a handler for every record of a subscription in a background task."""

    def __init__(self, subscription: Subscription[T], handler: RecordHandler, name: str | None = None):
        self._subscription = subscription
        self._handler = handler
        self._name = name or getattr(handler, "__qualname__", repr(handler))
        self._errors: list[Exception] = []
        self._task: asyncio.Task | None = None

    @property
    def name(self) -> str:
        """Listener name used in logs."""
        return self._name

    @property
    def errors(self) -> list[Exception]:
        """Exceptions raised by the handler so far."""
        return list(self._errors)

    @property
    def running(self) -> bool:
        """True while the background task is alive."""
        return self._task is not None and not self._task.done()

    @property
    def subscription(self) -> Subscription[T]:
        return self._subscription

    def start(self) -> None:
        """Start consuming. Requires a running event loop."""
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._run(), name=f"listener:{self._name}")

    def add_done_callback(self, callback: Callable[["Listener[T]"], None]) -> None:
        """Call ``callback(self)`` once the background task has finished."""
        if self._task is None:
            raise RuntimeError("Listener not started")
        self._task.add_done_callback(lambda _task: callback(self))

    async def stop(self) -> None:
        """Unsubscribe and wait for buffered records to be handled."""
        self._subscription.cancel()
        if self._task is not None:
            await self._task

    async def _run(self) -> None:
        async for record in self._subscription:
            try:
                result = self._handler(record)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error(
                    "Error in handler %s on channel %s: %s",
                    self._name,
                    self._subscription.channel_name,
                    e,
                )
                self._errors.append(e)
