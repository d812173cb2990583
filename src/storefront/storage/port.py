"""Local storage port (abstract interface).

A durable key-value slot on the shopper's device, modelled after the browser
``localStorage`` API. The cart mirrors itself into one key; adapters decide
where the bytes live (a data directory on disk, or process memory for tests).
"""

from abc import ABC, abstractmethod


class PersistenceError(Exception):
    """Reading from or writing to local storage failed."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class LocalStorage(ABC):
    """Abstract local key-value storage."""

    @abstractmethod
    def get_item(self, key: str) -> str | None:
        """Return the stored value, or None if the key was never written."""
        ...

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete ``key``. Deleting a missing key is not an error."""
        ...
