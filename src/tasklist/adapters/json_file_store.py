"""File-based key-value storage adapter."""

import json
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStore:
    """
    JSON file key-value storage.

    Implements KeyValueStore protocol. All entries live in one JSON object
    file mapping keys to string values, like browser local storage.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def _read_all(self) -> dict:
        """Read every entry. A missing or unreadable file is an empty store."""
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Ignoring unreadable store file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring store file {self.path}: expected a JSON object")
            return {}
        return data

    def get(self, key: str) -> str | None:
        """Read the value stored under a key. Returns None if absent."""
        value = self._read_all().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Write/overwrite the value stored under a key."""
        entries = self._read_all()
        entries[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries, indent=2))
        logger.debug(f"Wrote {key!r} to {self.path}")
