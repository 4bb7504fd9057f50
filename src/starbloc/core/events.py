"""
Events - Immutable Commands from the View

An event describes a user intent. It carries an enumerated ``kind`` that the
processor uses to pick a reducer; the id and timestamp exist only for
tracing.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict


@dataclass(frozen=True)
class Event:
    """
    Immutable event submitted to an event processor.

    Attributes:
        kind: Enumerated event kind, used for reducer lookup
        event_id: Unique id for logging/tracing
        created_at: When the event was created
    """
    kind: Enum
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: datetime = field(default_factory=datetime.now)

    @property
    def name(self) -> str:
        return str(self.kind.value)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize for logging."""
        return {
            "kind": self.name,
            "event_id": self.event_id,
            "created_at": self.created_at.isoformat(),
        }

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.name}, id={self.event_id[:8]})"
