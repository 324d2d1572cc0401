"""Push-based live sequences consumed as async iterators."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")

_CLOSED: Any = object()


class Subscription(Generic[T]):
    """A single subscriber's view of a live, infinite sequence.

    Values are queued in delivery order and read with ``async for`` or
    ``await subscription.next()``. ``close()`` stops future deliveries to this
    subscriber only; iteration then ends.
    """

    def __init__(self, on_close: Callable[[Subscription[T]], None] | None = None) -> None:
        self._queue: asyncio.Queue[Any] = asyncio.Queue()
        self._on_close = on_close
        self._closed = False

    def push(self, value: T) -> None:
        if self._closed:
            return
        self._queue.put_nowait(value)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._queue.put_nowait(_CLOSED)
        if self._on_close is not None:
            self._on_close(self)

    async def next(self, timeout: float | None = None) -> T:
        """Wait for the next value; raises ``StopAsyncIteration`` once closed."""
        if self._closed:
            raise StopAsyncIteration
        if timeout is None:
            item = await self._queue.get()
        else:
            item = await asyncio.wait_for(self._queue.get(), timeout)
        if item is _CLOSED or self._closed:
            raise StopAsyncIteration
        return item

    def pending(self) -> int:
        """Number of values delivered but not yet read."""
        return self._queue.qsize()

    def __aiter__(self) -> Subscription[T]:
        return self

    async def __anext__(self) -> T:
        return await self.next()

    async def __aenter__(self) -> Subscription[T]:
        return self

    async def __aexit__(self, *_exc: object) -> None:
        self.close()


class Broadcaster(Generic[T]):
    """Fan-out of published values to every open subscription."""

    def __init__(self) -> None:
        self._subscribers: list[Subscription[T]] = []

    def subscribe(self, current: T) -> Subscription[T]:
        """Open a subscription that first receives ``current``, then future values."""
        subscription: Subscription[T] = Subscription(on_close=self._discard)
        subscription.push(current)
        self._subscribers.append(subscription)
        return subscription

    def publish(self, value: T) -> None:
        for subscription in list(self._subscribers):
            subscription.push(value)

    def _discard(self, subscription: Subscription[T]) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)


__all__ = ["Broadcaster", "Subscription"]
