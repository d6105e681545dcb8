"""Pure view rendering - materializes task state into display rows."""

from dataclasses import dataclass

from .tasks import Priority, Task, TaskFilter


@dataclass(frozen=True)
class TaskRow:
    """One displayed task row, with its visibility under the active filter."""

    id: int
    text: str
    meta: str
    priority: Priority
    completed: bool
    visible: bool
    editing: bool = False


def format_meta(task: Task) -> str:
    """Secondary line shown under the task text."""
    return f"Added: {task.timestamp} | Priority: {task.priority.value}"


def render_rows(
    tasks: list[Task],
    task_filter: TaskFilter,
    editing_id: int | None = None,
) -> list[TaskRow]:
    """
    Build display rows for every task, in insertion order.

    Filtered-out tasks still get a row with visible=False; visibility is a
    display toggle only. Pure function - no I/O, tasks are not mutated.
    """
    return [
        TaskRow(
            id=t.id,
            text=t.text,
            meta=format_meta(t),
            priority=t.priority,
            completed=t.completed,
            visible=task_filter.matches(t),
            editing=editing_id is not None and t.id == editing_id,
        )
        for t in tasks
    ]


def visible_rows(rows: list[TaskRow]) -> list[TaskRow]:
    return [r for r in rows if r.visible]
