"""Functional core - pure business logic with no I/O."""

from .tasks import (
    Priority,
    Task,
    TaskFilter,
    ValidationError,
    clear_completed,
    filter_tasks,
    find_task,
    format_timestamp,
    normalize_text,
)
from .view import TaskRow, format_meta, render_rows, visible_rows

__all__ = [
    # Tasks
    "Priority",
    "Task",
    "TaskFilter",
    "ValidationError",
    "clear_completed",
    "filter_tasks",
    "find_task",
    "format_timestamp",
    "normalize_text",
    # View
    "TaskRow",
    "format_meta",
    "render_rows",
    "visible_rows",
]
