"""
Counter Reducers

One reducer per counter event kind. Each yields exactly one replacement
snapshot with ``counter_value`` computed by the data provider and every other
field unchanged.
"""

import logging
from typing import AsyncIterator, Optional

from ..events.processor import ErrorHandler, EventProcessor
from ..events.reducers import ReducerRegistry
from ..infrastructure.configuration import ProcessorConfig
from .events import CounterEvent, CounterEventKind
from .provider import CounterDataProvider
from .state import CounterState


class CounterReducers:
    """Reducers for the counter, bound to a data provider."""

    def __init__(self, provider: Optional[CounterDataProvider] = None):
        self.provider = provider or CounterDataProvider()

    async def on_increment(self, event: CounterEvent, state: CounterState) -> AsyncIterator[CounterState]:
        yield state.evolve(counter_value=self.provider.increment(state.counter_value))

    async def on_reset(self, event: CounterEvent, state: CounterState) -> AsyncIterator[CounterState]:
        yield state.evolve(counter_value=self.provider.reset())

    def registry(self) -> ReducerRegistry:
        return ReducerRegistry({
            CounterEventKind.INCREMENT: self.on_increment,
            CounterEventKind.RESET: self.on_reset,
        })


def build_counter_processor(
    provider: Optional[CounterDataProvider] = None,
    *,
    initial_state: Optional[CounterState] = None,
    error_handler: Optional[ErrorHandler] = None,
    config: Optional[ProcessorConfig] = None,
    logger: Optional[logging.Logger] = None,
) -> EventProcessor[CounterState]:
    """Wire the standard counter processor."""
    return EventProcessor(
        initial_state or CounterState.initial(),
        CounterReducers(provider).registry(),
        error_handler=error_handler,
        config=config,
        logger=logger,
    )
