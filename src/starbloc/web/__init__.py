"""
Web - connects event processors to browser views over HTTP + SSE.
"""

from .connector import live_stream, register_processor_routes, snapshot_event, snapshot_stream

__all__ = [
    "register_processor_routes",
    "snapshot_event",
    "snapshot_stream",
    "live_stream",
]
