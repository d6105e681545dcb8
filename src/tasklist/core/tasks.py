"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

DEFAULT_TIMESTAMP_FORMAT = "%x, %X"


class ValidationError(ValueError):
    """Raised when user input cannot produce a valid task."""

    pass


class Priority(Enum):
    """Task priority, as offered by the priority selector."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: "Priority | str") -> "Priority":
        """Coerce a selector value to a Priority."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown priority: {value!r}") from None


class TaskFilter(Enum):
    """View-only predicate selecting which tasks are displayed."""

    ALL = "all"
    ACTIVE = "active"
    COMPLETED = "completed"

    @classmethod
    def parse(cls, value: "TaskFilter | str") -> "TaskFilter":
        """Coerce a filter control value to a TaskFilter."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown filter: {value!r}") from None

    def matches(self, task: "Task") -> bool:
        match self:
            case TaskFilter.ACTIVE:
                return not task.completed
            case TaskFilter.COMPLETED:
                return task.completed
            case _:
                return True


@dataclass
class Task:
    """
    A single to-do entry.

    `id` is session-local: it identifies the task for toggle/delete/edit
    but is neither persisted nor part of equality.
    """

    text: str
    priority: Priority = Priority.MEDIUM
    timestamp: str = ""
    completed: bool = False
    id: int = field(default=0, compare=False)


def normalize_text(text: str | None, message: str = "Please enter a task!") -> str:
    """Trim task text, rejecting anything that ends up empty."""
    cleaned = (text or "").strip()
    if not cleaned:
        raise ValidationError(message)
    return cleaned


def format_timestamp(moment: datetime, fmt: str = DEFAULT_TIMESTAMP_FORMAT) -> str:
    """Render a creation time as a locale-appropriate string."""
    return moment.strftime(fmt)


def filter_tasks(tasks: list[Task], task_filter: TaskFilter) -> list[Task]:
    """
    Tasks visible under a filter, in collection order.

    Pure function - no I/O.
    """
    return [t for t in tasks if task_filter.matches(t)]


def clear_completed(tasks: list[Task]) -> tuple[list[Task], list[Task]]:
    """
    Split tasks into survivors and completed ones.

    Returns: (remaining, removed), both in original relative order.
    Pure function - no I/O.
    """
    remaining = [t for t in tasks if not t.completed]
    removed = [t for t in tasks if t.completed]
    return remaining, removed


def find_task(tasks: list[Task], task_id: int) -> Task | None:
    """Look up a task by id. Returns None if it is no longer present."""
    return next((t for t in tasks if t.id == task_id), None)
