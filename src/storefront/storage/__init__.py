"""Local storage factory.

Provides build_storage() to pick an implementation from settings:
- FileLocalStorage for a real client (one file per key in the data directory)
- MemoryLocalStorage for development and testing
"""

from storefront.config import Settings
from storefront.storage.fake_adapter import MemoryLocalStorage
from storefront.storage.file_adapter import FileLocalStorage
from storefront.storage.port import LocalStorage, PersistenceError

__all__ = ["FileLocalStorage", "LocalStorage", "MemoryLocalStorage", "PersistenceError", "build_storage"]


def build_storage(settings: Settings) -> LocalStorage:
    """Return the local storage configured in ``settings``."""
    if settings.storage_backend == "memory":
        return MemoryLocalStorage()
    return FileLocalStorage(settings.data_dir)
