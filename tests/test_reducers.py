"""
Reducer registry, counter reducers and the data provider.
"""

import pytest

from starbloc import (
    CounterDataProvider, CounterEvent, CounterEventKind, CounterReducers, CounterState,
    ReducerRegistry,
)


async def collect(agen):
    return [item async for item in agen]


class TestCounterDataProvider:
    def test_increment(self):
        provider = CounterDataProvider()
        assert provider.increment(0) == 1
        assert provider.increment(41) == 42
        assert provider.increment(-1) == 0

    def test_reset(self):
        assert CounterDataProvider().reset() == 0


class TestReducerRegistry:
    def test_lookup_by_kind(self):
        reducers = CounterReducers()
        registry = reducers.registry()

        assert registry.lookup(CounterEventKind.INCREMENT) == reducers.on_increment
        assert registry.lookup(CounterEventKind.RESET) == reducers.on_reset
        assert set(registry.kinds) == {CounterEventKind.INCREMENT, CounterEventKind.RESET}
        assert len(registry) == 2

    def test_missing_kind_returns_none(self):
        reducers = CounterReducers()
        registry = ReducerRegistry({CounterEventKind.INCREMENT: reducers.on_increment})
        assert registry.lookup(CounterEventKind.RESET) is None
        assert CounterEventKind.RESET not in registry

    def test_registry_is_read_only(self):
        registry = CounterReducers().registry()
        with pytest.raises(TypeError):
            registry[CounterEventKind.RESET] = None

    def test_source_dict_changes_do_not_leak_in(self):
        reducers = CounterReducers()
        handlers = {CounterEventKind.INCREMENT: reducers.on_increment}
        registry = ReducerRegistry(handlers)
        handlers[CounterEventKind.RESET] = reducers.on_reset
        assert registry.lookup(CounterEventKind.RESET) is None

    def test_rejects_plain_functions(self):
        def not_a_generator(event, state):
            return state

        with pytest.raises(TypeError, match="async generator"):
            ReducerRegistry({CounterEventKind.INCREMENT: not_a_generator})

    def test_rejects_non_enum_keys(self):
        with pytest.raises(TypeError, match="enum"):
            ReducerRegistry({"increment": CounterReducers().on_increment})

    def test_empty_registry(self):
        registry = ReducerRegistry()
        assert len(registry) == 0
        assert "[]" in repr(registry)


class TestCounterReducers:
    @pytest.mark.asyncio
    async def test_increment_yields_one_snapshot(self):
        state = CounterState(counter_value=3, loading=True)
        produced = await collect(CounterReducers().on_increment(CounterEvent.increment(), state))

        assert len(produced) == 1
        assert produced[0].counter_value == 4
        assert produced[0].loading is True

    @pytest.mark.asyncio
    async def test_reset_yields_zero(self):
        state = CounterState(counter_value=57, loading=True)
        produced = await collect(CounterReducers().on_reset(CounterEvent.reset(), state))

        assert [s.counter_value for s in produced] == [0]

    @pytest.mark.asyncio
    async def test_reducers_use_the_provider(self):
        class StepProvider(CounterDataProvider):
            def increment(self, current_value: int) -> int:
                return current_value + 5

        reducers = CounterReducers(StepProvider())
        produced = await collect(reducers.on_increment(CounterEvent.increment(), CounterState()))
        assert produced[0].counter_value == 5


class TestCounterEvent:
    def test_factories(self):
        assert CounterEvent.increment().kind is CounterEventKind.INCREMENT
        assert CounterEvent.reset().kind is CounterEventKind.RESET

    def test_events_are_immutable(self):
        event = CounterEvent.increment()
        with pytest.raises(AttributeError):
            event.kind = CounterEventKind.RESET

    def test_kind_is_required(self):
        with pytest.raises(TypeError):
            CounterEvent()

    def test_each_event_gets_its_own_id(self):
        assert CounterEvent.increment().event_id != CounterEvent.increment().event_id

    def test_parse(self):
        assert CounterEvent.parse("increment").kind is CounterEventKind.INCREMENT
        assert CounterEvent.parse(" RESET ").kind is CounterEventKind.RESET
        with pytest.raises(ValueError, match="decrement"):
            CounterEvent.parse("decrement")

    def test_to_dict(self):
        data = CounterEvent.reset().to_dict()
        assert data["kind"] == "reset"
        assert len(data["event_id"]) == 32
