"""
Bounded TTL cache injected into services that memoize lookups.

Replaces module-level memo dictionaries: each instance owns its state, so
tests and separate application instances never share stale entries.
"""
import threading
import time
from collections import OrderedDict
from typing import Any, Callable, Hashable, Optional

_MISSING = object()


class TTLCache:
     """
     Thread-safe mapping with a maximum size and a per-entry time-to-live.

     When full, the oldest inserted entry is evicted first. Expired entries
     are dropped lazily on access.
     """

     def __init__(
          self,
          max_entries: int = 500,
          ttl_seconds: float = 60.0,
          clock: Callable[[], float] = time.monotonic,
     ):
          if max_entries < 1:
               raise ValueError("max_entries must be at least 1")
          if ttl_seconds <= 0:
               raise ValueError("ttl_seconds must be positive")
          self.max_entries = max_entries
          self.ttl_seconds = ttl_seconds
          self._clock = clock
          self._data: "OrderedDict[Hashable, tuple[float, Any]]" = OrderedDict()
          self._lock = threading.Lock()

     def get(self, key: Hashable, default: Optional[Any] = None) -> Any:
          with self._lock:
               item = self._data.get(key, _MISSING)
               if item is _MISSING:
                    return default
               stored_at, value = item
               if self._clock() - stored_at >= self.ttl_seconds:
                    del self._data[key]
                    return default
               return value

     def set(self, key: Hashable, value: Any) -> None:
          with self._lock:
               if key in self._data:
                    del self._data[key]
               elif len(self._data) >= self.max_entries:
                    self._data.popitem(last=False)
               self._data[key] = (self._clock(), value)

     def invalidate(self, key: Hashable) -> None:
          with self._lock:
               self._data.pop(key, None)

     def clear(self) -> None:
          with self._lock:
               self._data.clear()

     def __len__(self) -> int:
          with self._lock:
               return len(self._data)

     def __contains__(self, key: Hashable) -> bool:
          return self.get(key, _MISSING) is not _MISSING
