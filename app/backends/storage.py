"""Key-value storage ports.

A ``StoragePort`` is the injected replacement for browser-style global
storage: a flat namespace of string keys holding JSON values. The session
manager gets two of them (a durable cache and a session-scoped one) and the
key-value record store keeps its collections in one.
"""

import json
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterator, Optional


class StoragePort(ABC):
    """Read / write / clear access to JSON values by key"""

    @abstractmethod
    def read(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def write(self, key: str, value: Any) -> None:
        ...

    @abstractmethod
    def remove(self, key: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...

    @abstractmethod
    def keys(self) -> Iterator[str]:
        ...


class MemoryStorage(StoragePort):
    """
    Process-local storage. Values are held serialized so callers never share
    mutable state with the store, the same way a browser storage area
    behaves.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.write(key, value)

    def read(self, key: str, default: Any = None) -> Any:
        raw = self._data.get(key)
        if raw is None:
            return default
        return json.loads(raw)

    def write(self, key: str, value: Any) -> None:
        self._data[key] = json.dumps(value, ensure_ascii=False)

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def __contains__(self, key: str) -> bool:
        return key in self._data
