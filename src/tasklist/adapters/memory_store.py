"""In-memory key-value storage adapter."""


class MemoryStore:
    """
    Dict-backed key-value storage.

    Implements KeyValueStore protocol. Nothing survives the process; useful
    for tests and throwaway sessions.
    """

    def __init__(self, entries: dict[str, str] | None = None):
        self.entries: dict[str, str] = dict(entries or {})

    def get(self, key: str) -> str | None:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value
