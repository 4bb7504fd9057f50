"""
Event Processor - Serialized Event → State Coordination

🎯 The heart of starbloc:
The processor owns the current snapshot and the reducer registry. For every
event it:

1. emits the current snapshot with ``loading=True``
2. looks up the reducer for the event's kind
3. relays every snapshot the reducer yields, in order
4. emits a closing snapshot with ``loading=False``

The last snapshot a reducer yields is held back one step and becomes the
closing snapshot, so a single-step reducer produces exactly two emissions.
Events are processed one at a time, in submission order, by a single worker
task. The closing snapshot is emitted even when the reducer raises.
"""

import asyncio
import logging
import time
from typing import Any, Callable, Dict, Generic, List, Mapping, Optional, Tuple, TypeVar, Union

from ..core.events import Event
from ..core.snapshot import Snapshot
from ..infrastructure.configuration import ProcessorConfig
from .reducers import ReducerRegistry
from .stream import Listener, StateStream, StateSubscription

S = TypeVar("S", bound=Snapshot)

ErrorHandler = Callable[[Event, BaseException], Any]


class ProcessorError(Exception):
    """Base exception for processor errors"""
    pass

class ProcessorClosedError(ProcessorError):
    """Raised when submitting to a processor that has been closed"""
    pass

class ReducerError(ProcessorError):
    """Raised to dispatch() callers when the reducer for their event failed"""

    def __init__(self, event: Event, original: BaseException, snapshots: Optional[List[Snapshot]] = None):
        super().__init__(f"Reducer for {event} failed: {original}")
        self.event = event
        self.original = original
        self.__cause__ = original
        self.snapshots = list(snapshots or [])


class EventProcessor(Generic[S]):
    """
    Generic event processor.

    Example:
        >>> processor = EventProcessor(CounterState(), reducers.registry())
        >>> subscription = processor.subscribe()
        >>> processor.submit(CounterEvent.increment())
        >>> async for state in subscription:
        ...     render(state)
    """

    def __init__(
        self,
        initial_state: S,
        registry: Union[ReducerRegistry, Mapping],
        *,
        error_handler: Optional[ErrorHandler] = None,
        config: Optional[ProcessorConfig] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self.registry = registry if isinstance(registry, ReducerRegistry) else ReducerRegistry(registry)
        self.config = config or ProcessorConfig()
        self.error_handler = error_handler
        self.logger = logger or logging.getLogger(__name__)

        self._state: S = initial_state.with_dispatcher(self.submit)
        self._stream = StateStream()
        self._queue: Optional[asyncio.Queue] = None
        self._worker: Optional[asyncio.Task] = None
        self._closed = False

        self._metrics = {
            "events_submitted": 0,
            "events_processed": 0,
            "events_unhandled": 0,
            "reducer_failures": 0,
            "snapshots_emitted": 0,
            "total_processing_time_ms": 0.0,
        }

    # ------------------------------------------------------------------ #
    # Event sink

    def submit(self, event: Event) -> None:
        """
        Queue ``event`` for processing and return immediately.

        Raises:
            ProcessorClosedError: If the processor has been closed
            ProcessorError: Without a running event loop, or when the queue is full
        """
        self._enqueue(event, None)

    async def dispatch(self, event: Event) -> List[S]:
        """
        Queue ``event`` and wait until it has been processed.

        Returns:
            The snapshots emitted for this event, in order

        Raises:
            ReducerError: If the reducer failed (after the closing snapshot was emitted)
        """
        future = asyncio.get_running_loop().create_future()
        self._enqueue(event, future)
        return await future

    def _enqueue(self, event: Event, future: Optional[asyncio.Future]) -> None:
        if self._closed:
            raise ProcessorClosedError("Event processor is closed")
        self._ensure_started()
        try:
            self._queue.put_nowait((event, future))
        except asyncio.QueueFull:
            raise ProcessorError(
                f"Event queue is full ({self.config.max_pending_events} pending), dropping {event}"
            ) from None
        self._record("events_submitted")
        self.logger.debug(f"Queued {event}")

    # ------------------------------------------------------------------ #
    # Lifecycle

    def _ensure_started(self) -> None:
        if self._worker is not None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            raise ProcessorError("EventProcessor needs a running event loop") from None
        self._queue = asyncio.Queue(maxsize=self.config.max_pending_events)
        self._worker = loop.create_task(self._run(), name=f"{type(self).__name__}-worker")
        self.logger.info(f"{type(self).__name__} started with {self.registry!r}")

    async def start(self) -> None:
        """Start the worker task on the running loop."""
        if self._closed:
            raise ProcessorClosedError("Event processor is closed")
        self._ensure_started()

    async def drain(self) -> None:
        """Wait until every queued event has been processed."""
        if self._queue is not None and not self._closed:
            await self._queue.join()

    async def close(self, drain: bool = True) -> None:
        """
        Stop processing and end all subscriptions.

        Args:
            drain: Process already queued events first
        """
        if self._closed:
            return
        if drain:
            await self.drain()
        self._closed = True

        if self._worker is not None:
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass

        # Fail anyone still waiting on dispatch()
        while self._queue is not None and not self._queue.empty():
            event, future = self._queue.get_nowait()
            if future is not None and not future.done():
                future.set_exception(ProcessorClosedError(f"Processor closed before {event} was processed"))

        self._stream.close()
        self.logger.info(f"{type(self).__name__} closed")

    @property
    def closed(self) -> bool:
        return self._closed

    async def __aenter__(self) -> "EventProcessor[S]":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close(drain=exc_type is None)

    # ------------------------------------------------------------------ #
    # Processing

    async def _run(self) -> None:
        while True:
            event, future = await self._queue.get()
            try:
                emitted, error = await self._process(event)
            except asyncio.CancelledError:
                if future is not None and not future.done():
                    future.set_exception(ProcessorClosedError(f"Processor closed while processing {event}"))
                raise
            except Exception as e:
                # the worker outlives any single event
                self.logger.exception(f"Processing {event} failed: {e}")
                emitted, error = [], e
            finally:
                self._queue.task_done()

            if future is not None and not future.done():
                if error is not None:
                    future.set_exception(ReducerError(event, error, emitted))
                else:
                    future.set_result(emitted)

    async def _process(self, event: Event) -> Tuple[List[S], Optional[BaseException]]:
        started = time.perf_counter()
        emitted: List[S] = []
        error: Optional[BaseException] = None
        pending: Optional[S] = None

        self._emit(self._state.evolve(loading=True), emitted)

        try:
            handler = self.registry.lookup(event.kind)
            if handler is None:
                self._record("events_unhandled")
                self.logger.warning(f"Unhandled event {event}: no reducer registered for '{event.name}'")
            else:
                async for produced in handler(event, self._state):
                    if not isinstance(produced, Snapshot):
                        raise TypeError(f"Reducer for '{event.name}' yielded {type(produced).__name__}, expected a snapshot")
                    # model_copy and model_construct skip validation
                    produced = produced.evolve()
                    if pending is not None:
                        self._emit(pending, emitted)
                    pending = produced
        except Exception as e:
            error = e
            self._report_failure(event, e)
        finally:
            self._emit(self._closing_snapshot(event, pending), emitted)

            elapsed_ms = (time.perf_counter() - started) * 1000
            self._record("events_processed")
            self._record("total_processing_time_ms", elapsed_ms)
            self.logger.debug(f"Processed {event} in {elapsed_ms:.2f}ms ({len(emitted)} snapshots)")

        return emitted, error

    def _closing_snapshot(self, event: Event, pending: Optional[S]) -> S:
        if pending is not None:
            try:
                return pending.evolve(loading=False)
            except Exception as e:
                self.logger.exception(f"Could not close {event} from the reducer output: {e}")
        return self._state.evolve(loading=False)

    def _emit(self, snapshot: S, emitted: List[S]) -> None:
        if snapshot.dispatcher != self.submit:
            snapshot = snapshot.with_dispatcher(self.submit)
        self._state = snapshot
        emitted.append(snapshot)
        self._record("snapshots_emitted")
        self._stream.publish(snapshot)

    def _record(self, name: str, amount: float = 1) -> None:
        if self.config.enable_metrics:
            self._metrics[name] += amount

    def _report_failure(self, event: Event, error: BaseException) -> None:
        self._record("reducer_failures")
        self.logger.exception(f"Reducer for {event} failed: {error}")
        if self.error_handler is None:
            return
        try:
            self.error_handler(event, error)
        except Exception as e:
            self.logger.exception(f"Error handler failed while reporting {event}: {e}")

    # ------------------------------------------------------------------ #
    # State access

    @property
    def current_state(self) -> S:
        """Latest emitted snapshot."""
        return self._state

    def subscribe(self) -> StateSubscription:
        """Subscribe to future snapshots."""
        initial = self._state if self.config.replay_latest else None
        return self._stream.subscribe(initial=initial)

    def states(self) -> StateSubscription:
        """Alias of subscribe(), reads naturally in ``async for``."""
        return self.subscribe()

    def listen(self, callback: Listener) -> Callable[[], None]:
        """Call ``callback`` with every future snapshot. Returns an unsubscribe function."""
        return self._stream.listen(callback)

    @property
    def pending_events(self) -> int:
        return self._queue.qsize() if self._queue is not None else 0

    def get_metrics(self) -> Dict[str, Any]:
        """Processing metrics summary"""
        metrics = dict(self._metrics)
        processed = metrics["events_processed"]
        metrics["average_processing_time_ms"] = (
            metrics["total_processing_time_ms"] / processed if processed > 0 else 0.0
        )
        metrics["pending_events"] = self.pending_events
        metrics["subscribers"] = self._stream.subscriber_count
        return metrics


__all__ = [
    "EventProcessor", "ErrorHandler",
    "ProcessorError", "ProcessorClosedError", "ReducerError",
]
