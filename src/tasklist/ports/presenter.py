"""Presentation layer interface."""

from typing import Protocol

from tasklist.core.tasks import TaskFilter
from tasklist.core.view import TaskRow


class Presenter(Protocol):
    """Interface the controller drives to update what the user sees."""

    def render(self, rows: list[TaskRow], task_filter: TaskFilter) -> None:
        """Display rows, honouring each row's visibility."""
        ...

    def reset_input(self) -> None:
        """Clear the new-task input and reset the priority selector."""
        ...

    def alert(self, message: str) -> None:
        """Show a message the user must acknowledge."""
        ...
