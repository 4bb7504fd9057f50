"""
FastHTML Connector

Exposes an event processor to a browser view:

- POST {prefix}/{kind}  submit an event, stream the snapshots it produced
- GET  {prefix}         current snapshot as JSON
- GET  {prefix}/live    long-lived stream of every future snapshot

Snapshots travel as Datastar ``merge_signals`` server-sent events, so the
page only has to bind its elements to the signal names.
"""

import asyncio
import logging
from typing import AsyncIterator, Callable, Iterable, Optional

from datastar_py import SSE_HEADERS
from datastar_py import ServerSentEventGenerator as SSE
from fasthtml.common import JSONResponse, StreamingResponse

from ..core.events import Event
from ..core.snapshot import Snapshot
from ..events.processor import EventProcessor, ProcessorError, ReducerError
from ..events.stream import SubscriptionClosedError

logger = logging.getLogger(__name__)

EventParser = Callable[[str], Event]


def snapshot_event(snapshot: Snapshot) -> str:
    """Format one snapshot as a Datastar merge-signals SSE event."""
    return SSE.merge_signals(snapshot.signals())


async def snapshot_stream(snapshots: Iterable[Snapshot], error: Optional[str] = None) -> AsyncIterator[str]:
    for snapshot in snapshots:
        yield snapshot_event(snapshot)
    if error:
        yield SSE.merge_signals({"error": error})


async def live_stream(processor: EventProcessor, heartbeat: float = 15.0) -> AsyncIterator[str]:
    """
    Current snapshot, then every future one, until the processor closes.

    Sends an SSE comment every ``heartbeat`` seconds of silence to keep
    proxies from dropping the connection.
    """
    subscription = processor.subscribe()
    try:
        yield snapshot_event(processor.current_state)
        while True:
            try:
                snapshot = await asyncio.wait_for(subscription.get(), timeout=heartbeat)
            except asyncio.TimeoutError:
                yield ": heartbeat\n\n"
                continue
            except SubscriptionClosedError:
                return
            yield snapshot_event(snapshot)
    finally:
        subscription.unsubscribe()


def register_processor_routes(
    router,
    processor: EventProcessor,
    parse_event: EventParser,
    prefix: str = "/counter",
    heartbeat: float = 15.0,
) -> None:
    """
    Register the connector routes.

    Args:
        router: FastHTML route decorator (``app.route`` or ``rt``)
        processor: Processor the routes talk to
        parse_event: Turns the ``{kind}`` path segment into an event, raising ValueError if unknown
        prefix: Path prefix for all routes
        heartbeat: Seconds between keep-alive comments on the live stream
    """
    prefix = "/" + prefix.strip("/")

    async def live_state():
        return StreamingResponse(
            live_stream(processor, heartbeat),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    async def current_state():
        return JSONResponse(processor.current_state.signals())

    async def submit_event(kind: str):
        try:
            event = parse_event(kind)
        except ValueError as e:
            return JSONResponse({"error": str(e)}, status_code=404)

        error = None
        try:
            snapshots = await processor.dispatch(event)
        except ReducerError as e:
            # Loading was still switched off; send what was emitted plus the error
            snapshots, error = e.snapshots, str(e.original)
        except ProcessorError as e:
            # closed processor or full queue
            return JSONResponse({"error": str(e)}, status_code=503)

        logger.debug(f"{event} produced {len(snapshots)} snapshots")
        return StreamingResponse(
            snapshot_stream(snapshots, error),
            media_type="text/event-stream",
            headers=SSE_HEADERS,
        )

    router(f"{prefix}/live", methods=["get"])(live_state)
    router(prefix, methods=["get"])(current_state)
    router(f"{prefix}/{{kind}}", methods=["post"])(submit_event)
