"""
Reducer Registry

Read-only lookup table from event kind to reducer. A reducer is an async
generator function ``handler(event, state)`` that yields one or more
replacement snapshots. Lookup is a plain dictionary access on the event's
enumerated kind.
"""

import inspect
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType
from typing import AsyncIterator, Callable, Iterator, List, Optional

from ..core.events import Event
from ..core.snapshot import Snapshot

Reducer = Callable[[Event, Snapshot], AsyncIterator[Snapshot]]


class ReducerRegistry(Mapping):
    """
    Immutable mapping of event kind -> reducer.

    Built once, when the owning processor is constructed. Missing kinds are
    not an error here; the processor decides what an unhandled event means.
    """

    def __init__(self, handlers: Optional[Mapping] = None):
        handlers = dict(handlers or {})
        for kind, handler in handlers.items():
            if not isinstance(kind, Enum):
                raise TypeError(f"Reducer keys must be enum members, got {kind!r}")
            if not inspect.isasyncgenfunction(handler):
                raise TypeError(
                    f"Reducer for {kind} must be an async generator function, got {handler!r}"
                )
        self._handlers = MappingProxyType(handlers)

    def __getitem__(self, kind: Enum) -> Reducer:
        return self._handlers[kind]

    def __iter__(self) -> Iterator[Enum]:
        return iter(self._handlers)

    def __len__(self) -> int:
        return len(self._handlers)

    def lookup(self, kind: Enum) -> Optional[Reducer]:
        """Reducer for ``kind``, or None if nothing is registered."""
        return self._handlers.get(kind)

    @property
    def kinds(self) -> List[Enum]:
        return list(self._handlers)

    def __repr__(self) -> str:
        names = ", ".join(str(k.value) for k in self._handlers)
        return f"ReducerRegistry([{names}])"
