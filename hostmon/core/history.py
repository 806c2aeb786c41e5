"""Fixed-capacity rolling history of percentage readings."""
from collections import deque
from typing import Tuple

DEFAULT_CAPACITY = 60


class MetricHistory:
    """FIFO ring buffer; once full, each append evicts the oldest value.

    Not thread-safe on its own - HistoryStore serializes writers.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY):
        if capacity <= 0:
            raise ValueError(f"History capacity must be positive, got {capacity}")
        self._values = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._values.maxlen

    def append(self, value: float):
        self._values.append(value)

    def clear(self):
        self._values.clear()

    def as_tuple(self) -> Tuple[float, ...]:
        """Values oldest first."""
        return tuple(self._values)
