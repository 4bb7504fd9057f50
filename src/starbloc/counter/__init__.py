"""
Counter - the demo domain.

State, events, data provider and reducers for a counter that can be
incremented and reset.
"""

from .events import CounterEvent, CounterEventKind
from .provider import CounterDataProvider
from .reducers import CounterReducers, build_counter_processor
from .state import CounterState

__all__ = [
    "CounterEvent", "CounterEventKind",
    "CounterDataProvider",
    "CounterReducers", "build_counter_processor",
    "CounterState",
]
