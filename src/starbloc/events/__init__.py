"""
Events - Event-Driven State Transitions

🚀 Event → Reducer → State:
- reducers: read-only registry of event kind -> async reducer
- processor: serialized processing with loading toggles
- stream: fan-out of emitted snapshots to subscribers
"""

from .processor import (
    ErrorHandler, EventProcessor, ProcessorClosedError, ProcessorError, ReducerError,
)
from .reducers import Reducer, ReducerRegistry
from .stream import StateStream, StateSubscription, SubscriptionClosedError

__all__ = [
    "EventProcessor", "ErrorHandler",
    "ProcessorError", "ProcessorClosedError", "ReducerError",
    "Reducer", "ReducerRegistry",
    "StateStream", "StateSubscription", "SubscriptionClosedError",
]
