"""Key-value store interface."""

from typing import Protocol


class KeyValueStore(Protocol):
    """Interface for a durable string-valued key-value store."""

    def get(self, key: str) -> str | None:
        """Read the value stored under a key. Returns None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Write/overwrite the value stored under a key."""
        ...
