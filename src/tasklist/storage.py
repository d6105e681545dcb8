"""Task persistence - serializes the task collection into a key-value store."""

import json
import logging

from .core.tasks import Priority, Task
from .ports.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "tasks"


class PersistenceError(Exception):
    """Raised when the task collection cannot be written."""

    pass


def task_to_record(task: Task) -> dict:
    """Minimal field set needed to rebuild a task."""
    return {
        "text": task.text,
        "completed": task.completed,
        "priority": task.priority.value,
        "timestamp": task.timestamp,
    }


def task_from_record(data: dict) -> Task | None:
    """
    Rebuild a task from a stored record.

    Returns None for records that cannot hold a task (no usable text).
    Legacy records without a recognised priority default to medium.
    """
    text = data.get("text")
    if not isinstance(text, str) or not text.strip():
        return None

    try:
        priority = Priority(data.get("priority"))
    except ValueError:
        logger.debug(f"Defaulting priority for stored task {text!r}")
        priority = Priority.MEDIUM

    timestamp = data.get("timestamp")
    return Task(
        text=text.strip(),
        priority=priority,
        timestamp=timestamp if isinstance(timestamp, str) else "",
        completed=data.get("completed") is True,
    )


def dump_tasks(tasks: list[Task]) -> str:
    """Serialize the whole collection to a JSON array."""
    return json.dumps([task_to_record(t) for t in tasks])


def parse_tasks(raw: str | None) -> list[Task]:
    """
    Parse a stored JSON array back into tasks.

    Missing or malformed data yields an empty list, never an error.
    Loaded tasks are numbered 1..n in stored order.
    """
    if raw is None:
        return []

    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning(f"Stored tasks are not valid JSON, starting empty: {e}")
        return []

    if not isinstance(data, list):
        logger.warning("Stored tasks are not a JSON array, starting empty")
        return []

    tasks = []
    for item in data:
        task = task_from_record(item) if isinstance(item, dict) else None
        if task is None:
            logger.warning(f"Skipping unusable stored task: {item!r}")
            continue
        task.id = len(tasks) + 1
        tasks.append(task)
    return tasks


class TaskStorage:
    """
    Persistence adapter for the task collection.

    Every save writes the complete collection under one key (overwrite
    semantics, no deltas).
    """

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def save(self, tasks: list[Task]) -> None:
        """Write the full collection, replacing whatever was stored."""
        try:
            self.store.set(self.key, dump_tasks(tasks))
        except OSError as e:
            logger.error(f"Failed to save tasks: {e}")
            raise PersistenceError(f"Could not save tasks: {e}") from e
        logger.debug(f"Saved {len(tasks)} task(s)")

    def load(self) -> list[Task]:
        """Read the collection back. Returns [] if nothing usable is stored."""
        try:
            raw = self.store.get(self.key)
        except OSError as e:
            logger.warning(f"Failed to read stored tasks, starting empty: {e}")
            return []
        tasks = parse_tasks(raw)
        logger.debug(f"Loaded {len(tasks)} task(s)")
        return tasks
