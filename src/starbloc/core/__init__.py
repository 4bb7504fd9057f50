"""
starbloc Core Module

Domain primitives with no knowledge of processing or transport:
immutable snapshots, their builders, and events.
"""

from .events import Event
from .snapshot import Dispatcher, Snapshot, SnapshotBuilder

__all__ = [
    "Event",
    "Dispatcher",
    "Snapshot",
    "SnapshotBuilder",
]
