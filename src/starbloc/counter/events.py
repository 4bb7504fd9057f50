"""
Counter Events

The closed set of commands the counter view can send.
"""

from dataclasses import dataclass
from enum import Enum

from ..core.events import Event


class CounterEventKind(str, Enum):
    """All counter commands."""
    INCREMENT = "increment"
    RESET = "reset"


@dataclass(frozen=True)
class CounterEvent(Event):
    """A counter command. Carries no payload."""
    kind: CounterEventKind

    @classmethod
    def increment(cls) -> "CounterEvent":
        return cls(kind=CounterEventKind.INCREMENT)

    @classmethod
    def reset(cls) -> "CounterEvent":
        return cls(kind=CounterEventKind.RESET)

    @classmethod
    def parse(cls, name: str) -> "CounterEvent":
        """
        Build an event from its kind name (e.g. "increment").

        Raises:
            ValueError: If ``name`` is not a counter event kind
        """
        try:
            kind = CounterEventKind(name.strip().lower())
        except ValueError:
            valid = ", ".join(k.value for k in CounterEventKind)
            raise ValueError(f"Unknown counter event '{name}' (expected one of: {valid})") from None
        return cls(kind=kind)
