"""
Shared fixtures for the starbloc test suite.
"""

from typing import Iterable, List, Tuple

import pytest
import pytest_asyncio

from starbloc import CounterDataProvider, CounterState, build_counter_processor


def values(snapshots: Iterable[CounterState]) -> List[Tuple[int, bool]]:
    """(counter_value, loading) pairs, the part of a snapshot tests care about."""
    return [(s.counter_value, s.loading) for s in snapshots]


class ExplodingProvider(CounterDataProvider):
    """Provider whose increment always fails."""

    def increment(self, current_value: int) -> int:
        raise RuntimeError("boom")


@pytest.fixture
def initial_state() -> CounterState:
    return CounterState.initial()


@pytest_asyncio.fixture
async def processor():
    """A started counter processor, closed after the test."""
    processor = build_counter_processor()
    await processor.start()
    yield processor
    await processor.close(drain=False)
