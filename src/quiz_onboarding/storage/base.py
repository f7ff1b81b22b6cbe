"""
Base protocol for key-value persistence

The progress store only needs get/set/remove on a handful of keys.
Implementations must survive process restarts unless stated otherwise.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional


class KeyValueStore(ABC):
    """
    Abstract key-value store.

    Values are JSON-compatible (str, int, list, dict). Reading a missing key
    returns None rather than raising.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        """
        Read a value.

        Raises:
            StorageFailure: If the underlying storage is unreadable
        """
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        """
        Write a value.

        Raises:
            StorageFailure: If the value could not be written
        """
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error."""
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class MemoryKeyValueStore(KeyValueStore):
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: Optional[dict] = None):
        self.data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self.data.get(key)

    def set(self, key: str, value: Any) -> None:
        self.data[key] = value

    def remove(self, key: str) -> None:
        self.data.pop(key, None)
