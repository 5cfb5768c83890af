import sys
from collections import OrderedDict
from collections.abc import Hashable
from typing import Generic, TypeVar

V = TypeVar("V")


class ScoreCache(Generic[V]):
    """
    Bounded LRU memo for ``(method, text)`` scores.

    Not thread-safe; every worker owns its own instance. The cache keeps a
    rough byte estimate of its keys, which workers use as their memory
    pressure signal.
    """

    def __init__(self, max_entries: int = 50_000, memory_limit_bytes: int | None = None):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.memory_limit_bytes = memory_limit_bytes
        self._data: OrderedDict[Hashable, V] = OrderedDict()
        self._bytes = 0
        self.hits = 0
        self.misses = 0
        self.evictions = 0

    def get(self, key: Hashable) -> V | None:
        value = self._data.get(key)
        if value is None:
            self.misses += 1
            return None
        self._data.move_to_end(key)
        self.hits += 1
        return value

    def put(self, key: Hashable, value: V) -> None:
        if key in self._data:
            self._data.move_to_end(key)
            self._data[key] = value
            return

        self._data[key] = value
        self._bytes += _estimate_size(key)
        while len(self._data) > self.max_entries:
            old_key, _ = self._data.popitem(last=False)
            self._bytes -= _estimate_size(old_key)
            self.evictions += 1

    def clear(self) -> None:
        self._data.clear()
        self._bytes = 0

    @property
    def approx_bytes(self) -> int:
        return self._bytes

    @property
    def over_memory_limit(self) -> bool:
        return self.memory_limit_bytes is not None and self._bytes > self.memory_limit_bytes

    def __len__(self) -> int:
        return len(self._data)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._data


def _estimate_size(key: Hashable) -> int:
    if isinstance(key, tuple):
        return sum(sys.getsizeof(part) for part in key)
    return sys.getsizeof(key)
