"""
Counter Data Provider

Primitive counter operations, kept behind a small class so reducers do not
care where the value actually lives. Subclass to change the arithmetic.
"""


class CounterDataProvider:
    """Pure counter arithmetic. No I/O, no failure modes."""

    def increment(self, current_value: int) -> int:
        return current_value + 1

    def reset(self) -> int:
        return 0
