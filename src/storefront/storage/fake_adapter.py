"""In-memory local storage for development and testing.

Keeps raw string values in a dict, so tests can plant corrupt payloads
directly, and can be configured at runtime to fail reads or writes the way
a full disk or a revoked permission would.
"""

from storefront.storage.port import LocalStorage, PersistenceError


class MemoryLocalStorage(LocalStorage):
    """Configurable in-memory local storage."""

    def __init__(self, items: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(items or {})
        self.fail_reads: bool = False
        self.fail_writes: bool = False
        self.failure_reason: str = "Storage quota exceeded"
        self.calls: list[dict] = []

    def configure(
        self,
        fail_reads: bool = False,
        fail_writes: bool = False,
        failure_reason: str = "Storage quota exceeded",
    ) -> None:
        """Configure storage behavior at runtime."""
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes
        self.failure_reason = failure_reason

    def get_item(self, key: str) -> str | None:
        self.calls.append({"method": "get_item", "key": key})
        if self.fail_reads:
            raise PersistenceError(self.failure_reason, key=key)
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.calls.append({"method": "set_item", "key": key, "value": value})
        if self.fail_writes:
            raise PersistenceError(self.failure_reason, key=key)
        self.items[key] = value

    def remove_item(self, key: str) -> None:
        self.calls.append({"method": "remove_item", "key": key})
        if self.fail_writes:
            raise PersistenceError(self.failure_reason, key=key)
        self.items.pop(key, None)
