"""
Counter State

The observable condition of the counter: its value and whether a reducer is
currently running.
"""

from ..core.snapshot import Snapshot


class CounterState(Snapshot):
    """Immutable counter snapshot."""

    counter_value: int = 0

    @classmethod
    def initial(cls) -> "CounterState":
        return cls(counter_value=0, loading=False)

    def __str__(self) -> str:
        return f"CounterState(counter_value={self.counter_value}, loading={self.loading})"
