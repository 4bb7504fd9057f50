"""
State Stream - Snapshot Fan-out

⚡ Live Updates:
The stream delivers every snapshot the processor emits to everyone watching.
Two ways to watch:

- subscribe(): async iterator with a private queue, one per view
- listen(callback): synchronous callback, called in publish order

Subscriptions are not restartable and see only what is published after
they were created. Errors in one listener never affect the others.
"""

import asyncio
import logging
import uuid
from typing import Callable, Dict, List, Optional

from ..core.snapshot import Snapshot

logger = logging.getLogger(__name__)

Listener = Callable[[Snapshot], None]

_CLOSED = object()


class SubscriptionClosedError(Exception):
    """Raised when reading from a subscription that has been closed"""
    pass


class StateSubscription:
    """
    A single subscriber's view of the stream.

    Iterate with ``async for``; iteration stops when the subscription or the
    whole stream is closed.
    """

    def __init__(self, stream: "StateStream", subscription_id: str):
        self.subscription_id = subscription_id
        self._stream = stream
        self._queue: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self.delivered = 0

    def _deliver(self, snapshot: Snapshot) -> None:
        if not self._closed:
            self._queue.put_nowait(snapshot)

    def _end(self) -> None:
        if not self._closed:
            self._closed = True
            self._queue.put_nowait(_CLOSED)

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        """Snapshots delivered but not read yet."""
        size = self._queue.qsize()
        # a closed subscription always holds exactly one end marker
        return size - 1 if self._closed and size else size

    async def get(self) -> Snapshot:
        """
        Wait for the next snapshot.

        Raises:
            SubscriptionClosedError: If the subscription ended
        """
        item = await self._queue.get()
        if item is _CLOSED:
            # keep the marker for any other waiter
            self._queue.put_nowait(_CLOSED)
            raise SubscriptionClosedError(f"Subscription {self.subscription_id} is closed")
        self.delivered += 1
        return item

    def unsubscribe(self) -> None:
        """Stop receiving snapshots."""
        self._stream._remove(self.subscription_id)
        self._end()

    async def aclose(self) -> None:
        self.unsubscribe()

    def __aiter__(self) -> "StateSubscription":
        return self

    async def __anext__(self) -> Snapshot:
        try:
            return await self.get()
        except SubscriptionClosedError:
            raise StopAsyncIteration

    async def __aenter__(self) -> "StateSubscription":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        self.unsubscribe()


class StateStream:
    """Broadcasts snapshots to subscriptions and listeners."""

    def __init__(self):
        self._subscriptions: Dict[str, StateSubscription] = {}
        self._listeners: List[Listener] = []
        self._closed = False
        self.published = 0

    def subscribe(self, initial: Optional[Snapshot] = None) -> StateSubscription:
        """
        Create a new subscription.

        Args:
            initial: Snapshot delivered first, before anything published later

        Raises:
            SubscriptionClosedError: If the stream is closed
        """
        if self._closed:
            raise SubscriptionClosedError("State stream is closed")
        subscription = StateSubscription(self, uuid.uuid4().hex)
        if initial is not None:
            subscription._deliver(initial)
        self._subscriptions[subscription.subscription_id] = subscription
        logger.debug(f"Subscription {subscription.subscription_id} opened")
        return subscription

    def listen(self, callback: Listener) -> Callable[[], None]:
        """
        Register a synchronous listener.

        Returns:
            Function that removes the listener again
        """
        self._listeners.append(callback)

        def unlisten():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unlisten

    def publish(self, snapshot: Snapshot) -> None:
        """Deliver ``snapshot`` to every subscription and listener."""
        if self._closed:
            return
        self.published += 1
        for subscription in list(self._subscriptions.values()):
            subscription._deliver(snapshot)
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.warning(f"State listener {listener!r} failed: {e}")

    def close(self) -> None:
        """End all subscriptions and drop all listeners."""
        if self._closed:
            return
        self._closed = True
        for subscription in list(self._subscriptions.values()):
            subscription._end()
        self._subscriptions.clear()
        self._listeners.clear()

    def _remove(self, subscription_id: str) -> None:
        if self._subscriptions.pop(subscription_id, None) is not None:
            logger.debug(f"Subscription {subscription_id} closed")

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)
