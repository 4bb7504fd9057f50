"""
State Snapshots

Immutable state values handed from the event processor to the view.

A snapshot is a frozen pydantic model. It is never changed in place: every
update produces a new instance, either through a structural ``evolve`` call
or through a ``SnapshotBuilder`` staging object (copy-on-write).

Every snapshot also carries a ``dispatcher`` - a callable the view uses to
submit new events without holding a reference to the processor itself.
"""

from typing import Any, Callable, Dict, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

S = TypeVar("S", bound="Snapshot")

Dispatcher = Callable[[Any], None]


class Snapshot(BaseModel):
    """Base class for all state snapshots."""
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    loading: bool = False
    dispatcher: Optional[Dispatcher] = Field(default=None, exclude=True, repr=False)

    def field_values(self) -> Dict[str, Any]:
        """All field values, dispatcher included, as a fresh dict."""
        return {name: getattr(self, name) for name in type(self).model_fields}

    def evolve(self: S, **changes: Any) -> S:
        """
        Return a new snapshot with the named fields replaced.

        Args:
            **changes: Field names mapped to their new values

        Raises:
            ValueError: If a name is not a field of this snapshot
        """
        unknown = set(changes) - set(type(self).model_fields)
        if unknown:
            raise ValueError(f"Unknown fields for {type(self).__name__}: {sorted(unknown)}")
        values = self.field_values()
        values.update(changes)
        return type(self)(**values)

    def with_dispatcher(self: S, dispatcher: Optional[Dispatcher]) -> S:
        """Same snapshot, different dispatcher."""
        return self.evolve(dispatcher=dispatcher)

    def to_builder(self) -> "SnapshotBuilder":
        """Mutable staging object pre-populated with this snapshot's values."""
        return SnapshotBuilder(self)

    def rebuild(self: S, updates: Callable[["SnapshotBuilder"], Any]) -> S:
        """Apply ``updates`` to a fresh builder and build the result."""
        builder = self.to_builder()
        updates(builder)
        return builder.build()

    def signals(self) -> Dict[str, Any]:
        """Serializable view of the snapshot (dispatcher excluded)."""
        return self.model_dump()

    def dispatch(self, event: Any) -> None:
        """Submit ``event`` through the attached dispatcher."""
        if self.dispatcher is None:
            raise RuntimeError(f"{type(self).__name__} has no dispatcher attached")
        self.dispatcher(event)


class SnapshotBuilder:
    """
    Copy-on-write staging object for a snapshot.

    Holds its own copy of the source values, so staging changes here never
    reach the source snapshot or anything built earlier.

    Example:
        >>> builder = state.to_builder()
        >>> builder.counter_value = 5
        >>> new_state = builder.build()
    """

    def __init__(self, source: Snapshot):
        object.__setattr__(self, "_snapshot_type", type(source))
        object.__setattr__(self, "_values", source.field_values())

    def __getattr__(self, name: str) -> Any:
        values = object.__getattribute__(self, "_values")
        if name in values:
            return values[name]
        raise AttributeError(f"{self._snapshot_type.__name__} has no field '{name}'")

    def __setattr__(self, name: str, value: Any) -> None:
        if name not in self._values:
            raise AttributeError(f"{self._snapshot_type.__name__} has no field '{name}'")
        self._values[name] = value

    def build(self) -> Snapshot:
        """Create a new frozen snapshot from the staged values."""
        return self._snapshot_type(**dict(self._values))

    def __repr__(self) -> str:
        staged = {k: v for k, v in self._values.items() if k != "dispatcher"}
        return f"SnapshotBuilder({self._snapshot_type.__name__}, {staged})"
