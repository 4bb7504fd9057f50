"""
starbloc - Event → Reducer → State for Python

An event-driven state container in the BLoC style: views submit immutable
events, a processor looks up the reducer for each event kind, and every
resulting immutable snapshot is streamed back to the views, wrapped in
loading toggles.

Quick Start:
    from starbloc import CounterEvent, build_counter_processor

    async with build_counter_processor() as processor:
        snapshots = await processor.dispatch(CounterEvent.increment())
        # [CounterState(counter_value=0, loading=True),
        #  CounterState(counter_value=1, loading=False)]
"""

from .core import Event, Snapshot, SnapshotBuilder
from .counter import (
    CounterDataProvider, CounterEvent, CounterEventKind, CounterReducers,
    CounterState, build_counter_processor,
)
from .events import (
    EventProcessor, ProcessorClosedError, ProcessorError, ReducerError,
    ReducerRegistry, StateStream, StateSubscription, SubscriptionClosedError,
)
from .infrastructure import (
    ApplicationConfig, Environment, LoggingConfig, ProcessorConfig, WebConfig,
    setup_logging,
)

__version__ = "0.1.0"

__all__ = [
    # 🎯 Core
    "Event", "Snapshot", "SnapshotBuilder",

    # 🚀 Processing
    "EventProcessor", "ReducerRegistry",
    "StateStream", "StateSubscription",
    "ProcessorError", "ProcessorClosedError", "ReducerError", "SubscriptionClosedError",

    # 🔢 Counter domain
    "CounterState", "CounterEvent", "CounterEventKind",
    "CounterDataProvider", "CounterReducers", "build_counter_processor",

    # 🔧 Configuration
    "ApplicationConfig", "Environment", "ProcessorConfig", "WebConfig",
    "LoggingConfig", "setup_logging",
]
