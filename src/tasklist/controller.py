"""Task list controller - owns the task collection and the active filter.

Every operation mutates the in-memory collection, persists the whole of it,
and re-renders the filtered view, as one unit.
"""

import logging
from datetime import datetime
from typing import Callable

from .core.tasks import (
    DEFAULT_TIMESTAMP_FORMAT,
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
from .core.view import TaskRow, render_rows
from .ports.presenter import Presenter
from .storage import PersistenceError, TaskStorage

logger = logging.getLogger(__name__)

EMPTY_EDIT_MESSAGE = "Task cannot be empty. Reverting to original text."


class TaskListController:
    """
    Mediates between the task storage and the presenter.

    The only component allowed to change the task collection or the
    filter. One instance per session.
    """

    def __init__(
        self,
        storage: TaskStorage,
        presenter: Presenter | None = None,
        clock: Callable[[], datetime] = datetime.now,
        timestamp_format: str = DEFAULT_TIMESTAMP_FORMAT,
        task_filter: TaskFilter = TaskFilter.ALL,
    ):
        self.storage = storage
        self.presenter = presenter
        self.clock = clock
        self.timestamp_format = timestamp_format
        self._filter = task_filter
        self._tasks: list[Task] = storage.load()
        self._next_id = max((t.id for t in self._tasks), default=0) + 1
        self._edit_session: "EditSession | None" = None

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the collection, in display order."""
        return list(self._tasks)

    @property
    def filter(self) -> TaskFilter:
        return self._filter

    @property
    def editing_id(self) -> int | None:
        if self._edit_session is None:
            return None
        return self._edit_session.task_id

    # ============== Operations ==============

    def add(self, text: str, priority: Priority | str = Priority.MEDIUM) -> Task:
        """Append a new task, then reset the caller's input."""
        cleaned = normalize_text(text)
        level = Priority.parse(priority)

        task = Task(
            text=cleaned,
            priority=level,
            timestamp=format_timestamp(self.clock(), self.timestamp_format),
            id=self._next_id,
        )
        self._commit(lambda: self._tasks.append(task))
        self._next_id += 1
        logger.debug(f"Added task {task.id}: {task.text!r} ({level.value})")

        if self.presenter is not None:
            self.presenter.reset_input()
        return task

    def toggle_complete(self, task_id: int) -> bool:
        """Flip a task's completed flag. Returns False for a stale id."""
        task = self._resolve(task_id)
        if task is None:
            return False

        def flip():
            task.completed = not task.completed

        self._commit(flip)
        logger.debug(f"Task {task_id} completed={task.completed}")
        return True

    def delete(self, task_id: int) -> bool:
        """Remove a task. Deleting an already-removed id is a no-op."""
        task = self._resolve(task_id)
        if task is None:
            return False
        self._commit(lambda: self._tasks.remove(task))
        if self.editing_id == task_id:
            self._edit_session.cancel()
        logger.debug(f"Deleted task {task_id}")
        return True

    def edit(self, task_id: int, new_text: str) -> bool:
        """
        Replace a task's text in place.

        Raises ValidationError (leaving the task untouched, nothing written)
        if the new text is empty. Returns False for a stale id.
        """
        cleaned = normalize_text(new_text, EMPTY_EDIT_MESSAGE)
        task = self._resolve(task_id)
        if task is None:
            return False

        def replace():
            task.text = cleaned

        self._commit(replace)
        logger.debug(f"Edited task {task_id}: {cleaned!r}")
        return True

    def set_priority(self, task_id: int, priority: Priority | str) -> bool:
        """Change a task's priority. Returns False for a stale id."""
        level = Priority.parse(priority)
        task = self._resolve(task_id)
        if task is None:
            return False

        def change():
            task.priority = level

        self._commit(change)
        logger.debug(f"Task {task_id} priority={level.value}")
        return True

    def clear_completed(self) -> int:
        """Remove every completed task in one batch. Returns how many."""
        remaining, removed = clear_completed(self._tasks)
        if not removed:
            self.render()
            return 0

        def replace_all():
            self._tasks[:] = remaining

        self._commit(replace_all)
        if self.editing_id in {t.id for t in removed}:
            self._edit_session.cancel()
        logger.debug(f"Cleared {len(removed)} completed task(s)")
        return len(removed)

    def set_filter(self, task_filter: TaskFilter | str) -> TaskFilter:
        """Change which tasks are shown. The collection is not touched."""
        self._filter = TaskFilter.parse(task_filter)
        self.render()
        return self._filter

    # ============== View ==============

    def render(self) -> list[TaskRow]:
        """Re-render the current view and return its rows."""
        rows = render_rows(self._tasks, self._filter, self.editing_id)
        if self.presenter is not None:
            self.presenter.render(rows, self._filter)
        return rows

    def visible(self) -> list[Task]:
        """Tasks visible under the current filter."""
        return filter_tasks(self._tasks, self._filter)

    # ============== Editing ==============

    def begin_edit(self, task_id: int) -> "EditSession | None":
        """
        Open the modal editor for one task.

        Any session already open is committed first, as when focus moves
        to another field. Returns None for a stale id.
        """
        if self._edit_session is not None:
            self._edit_session.blur()

        task = self._resolve(task_id)
        if task is None:
            return None

        self._edit_session = EditSession(self, task_id, task.text)
        self.render()
        return self._edit_session

    def _end_edit(self, session: "EditSession") -> None:
        if self._edit_session is session:
            self._edit_session = None

    # ============== Internals ==============

    def _resolve(self, task_id: int) -> Task | None:
        task = find_task(self._tasks, task_id)
        if task is None:
            logger.debug(f"Ignoring stale task reference {task_id}")
        return task

    def _commit(self, mutate: Callable[[], None]) -> None:
        """Apply a mutation, persist, re-render. Roll back if the write fails."""
        snapshot = [(t, t.text, t.priority, t.completed) for t in self._tasks]
        mutate()
        try:
            self.storage.save(self._tasks)
        except PersistenceError:
            self._tasks[:] = [t for t, *_ in snapshot]
            for task, text, priority, completed in snapshot:
                task.text, task.priority, task.completed = text, priority, completed
            raise
        self.render()


class EditSession:
    """
    In-place edit of a single task.

    Confirm (Enter) and blur (focus loss) both commit; whichever comes
    first wins and the other becomes a no-op.
    """

    def __init__(self, controller: TaskListController, task_id: int, original_text: str):
        self.controller = controller
        self.task_id = task_id
        self.original_text = original_text
        self.value = original_text
        self.closed = False

    def update(self, text: str) -> None:
        """Track the editable field's current contents."""
        self.value = text

    def confirm(self, text: str | None = None) -> bool:
        """Commit via the confirm keystroke."""
        if text is not None:
            self.update(text)
        return self._commit()

    def blur(self) -> bool:
        """Commit because the field lost focus."""
        return self._commit()

    def cancel(self) -> None:
        """Close without committing."""
        if self.closed:
            return
        self.closed = True
        self.controller._end_edit(self)

    def _commit(self) -> bool:
        """Returns True if the task text was changed."""
        if self.closed:
            return False
        self.closed = True
        self.controller._end_edit(self)

        try:
            changed = self.controller.edit(self.task_id, self.value)
        except ValidationError as e:
            logger.debug(f"Rejected empty edit for task {self.task_id}")
            if self.controller.presenter is not None:
                self.controller.presenter.alert(str(e))
            self.value = self.original_text
            self.controller.render()
            return False

        if not changed:
            # Task vanished while editing; nothing to restore.
            self.controller.render()
        return changed
