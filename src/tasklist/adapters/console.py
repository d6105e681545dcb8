"""Console presentation adapter - renders task rows with click."""

import click

from tasklist.core.tasks import Priority, TaskFilter
from tasklist.core.view import TaskRow, visible_rows

PRIORITY_COLORS = {
    Priority.HIGH: "red",
    Priority.MEDIUM: "yellow",
    Priority.LOW: "green",
}


class ConsolePresenter:
    """
    Terminal presenter.

    Implements Presenter protocol. Holds the session's input state (the
    priority selector) since a terminal has no form widgets of its own.
    """

    def __init__(self, show_filters: bool = True):
        self.show_filters = show_filters
        self.selected_priority = Priority.MEDIUM

    def render(self, rows: list[TaskRow], task_filter: TaskFilter) -> None:
        """Print the visible rows under the active filter."""
        if self.show_filters:
            click.echo(format_filter_bar(task_filter))

        shown = visible_rows(rows)
        if not shown:
            click.echo(empty_message(task_filter))
            return

        for row in shown:
            click.echo(format_row(row))
            click.echo(f"      {click.style(row.meta, dim=True)}")

    def reset_input(self) -> None:
        """Put the priority selector back to its default."""
        self.selected_priority = Priority.MEDIUM

    def alert(self, message: str) -> None:
        click.echo(click.style(message, fg="red"), err=True)


def format_filter_bar(task_filter: TaskFilter) -> str:
    """Filter controls, with the active one highlighted."""
    labels = []
    for f in TaskFilter:
        label = f.value.capitalize()
        if f is task_filter:
            labels.append(click.style(f"[{label}]", bold=True))
        else:
            labels.append(f" {label} ")
    return " ".join(labels)


def format_row(row: TaskRow) -> str:
    """Single-line task display: id, checkbox, priority marker, text."""
    check = "[x]" if row.completed else "[ ]"
    marker = click.style(f"{row.priority.value[0].upper()}", fg=PRIORITY_COLORS[row.priority])
    if row.editing:
        text = click.style(f"{row.text} (editing)", underline=True)
    elif row.completed:
        text = click.style(row.text, dim=True, strikethrough=True)
    else:
        text = row.text
    return f"{row.id:>3}. {check} {marker} {text}"


def empty_message(task_filter: TaskFilter) -> str:
    match task_filter:
        case TaskFilter.ACTIVE:
            return "No active tasks."
        case TaskFilter.COMPLETED:
            return "No completed tasks."
        case _:
            return "No tasks yet."
