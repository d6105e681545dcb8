"""tasklist CLI - a small persistent task list."""

import json
import locale
import logging
import sys

import click

from .adapters.console import ConsolePresenter
from .adapters.json_file_store import JsonFileStore
from .config import load_config
from .controller import TaskListController
from .core.tasks import Priority, TaskFilter, ValidationError
from .storage import PersistenceError, TaskStorage, task_to_record

logger = logging.getLogger(__name__)

PRIORITY_CHOICES = [p.value for p in Priority]
FILTER_CHOICES = [f.value for f in TaskFilter]

SHELL_HELP = """\
Commands:
  add TEXT               Add a task with the selected priority
  priority LEVEL         Select the priority for the next add (low/medium/high)
  priority ID LEVEL      Change a task's priority
  toggle ID              Mark a task complete / not complete
  edit ID [TEXT]         Edit a task's text (prompts if TEXT is omitted)
  delete ID              Delete a task
  filter all|active|completed
  clear                  Clear completed tasks
  list                   Show tasks again
  help                   Show this help
  quit                   Leave the session"""


def build_controller(presenter: ConsolePresenter | None = None) -> TaskListController:
    """Wire storage and presenter from configuration."""
    config = load_config()
    storage = TaskStorage(JsonFileStore(config.storage_path))
    return TaskListController(
        storage,
        presenter=presenter,
        timestamp_format=config.timestamp_format,
    )


def _fail(e: Exception) -> None:
    click.echo(f"Error: {e}", err=True)
    sys.exit(1)


def _stale(task_id: int) -> None:
    click.echo(f"No task {task_id}.", err=True)


@click.group()
@click.version_option()
@click.option("--debug", is_flag=True, help="Enable debug logging")
def main(debug: bool):
    """tasklist - Add, complete, edit and filter tasks."""
    if debug:
        logging.basicConfig(
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            level=logging.DEBUG,
        )

    # Render timestamps in the user's locale.
    try:
        locale.setlocale(locale.LC_TIME, "")
    except locale.Error as e:
        logger.debug(f"Keeping default LC_TIME: {e}")


@main.command()
@click.argument("text", nargs=-1)
@click.option(
    "--priority", "-p",
    type=click.Choice(PRIORITY_CHOICES, case_sensitive=False),
    default=Priority.MEDIUM.value,
    help="Task priority",
)
def add(text: tuple[str, ...], priority: str):
    """Add a task."""
    controller = build_controller(ConsolePresenter(show_filters=False))
    try:
        controller.add(" ".join(text), priority)
    except (ValidationError, PersistenceError) as e:
        _fail(e)


@main.command("list")
@click.option(
    "--filter", "-f", "task_filter",
    type=click.Choice(FILTER_CHOICES, case_sensitive=False),
    default=TaskFilter.ALL.value,
    help="Which tasks to show",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(task_filter: str, as_json: bool):
    """List tasks."""
    if as_json:
        controller = build_controller()
        controller.set_filter(task_filter)
        click.echo(
            json.dumps(
                [{"id": t.id, **task_to_record(t)} for t in controller.visible()],
                indent=2,
            )
        )
        return

    controller = build_controller(ConsolePresenter())
    controller.set_filter(task_filter)


@main.command()
@click.argument("task_id", type=int)
def toggle(task_id: int):
    """Mark a task complete, or not complete again."""
    controller = build_controller(ConsolePresenter(show_filters=False))
    try:
        if not controller.toggle_complete(task_id):
            _stale(task_id)
    except PersistenceError as e:
        _fail(e)


@main.command()
@click.argument("task_id", type=int)
def delete(task_id: int):
    """Delete a task."""
    controller = build_controller(ConsolePresenter(show_filters=False))
    try:
        if not controller.delete(task_id):
            _stale(task_id)
    except PersistenceError as e:
        _fail(e)


@main.command()
@click.argument("task_id", type=int)
@click.argument("text", nargs=-1)
def edit(task_id: int, text: tuple[str, ...]):
    """Replace a task's text."""
    controller = build_controller(ConsolePresenter(show_filters=False))
    try:
        if not controller.edit(task_id, " ".join(text)):
            _stale(task_id)
    except (ValidationError, PersistenceError) as e:
        _fail(e)


@main.command("priority")
@click.argument("task_id", type=int)
@click.argument("level", type=click.Choice(PRIORITY_CHOICES, case_sensitive=False))
def set_priority(task_id: int, level: str):
    """Change a task's priority."""
    controller = build_controller(ConsolePresenter(show_filters=False))
    try:
        if not controller.set_priority(task_id, level):
            _stale(task_id)
    except (ValidationError, PersistenceError) as e:
        _fail(e)


@main.command("clear-completed")
def clear_completed():
    """Remove all completed tasks."""
    controller = build_controller(ConsolePresenter(show_filters=False))
    try:
        removed = controller.clear_completed()
    except PersistenceError as e:
        _fail(e)
    click.echo(f"Cleared {removed} completed task(s).")


@main.command()
def shell():
    """Interactive session that keeps the filter between commands."""
    presenter = ConsolePresenter()
    controller = build_controller(presenter)
    controller.render()
    click.echo("Type 'help' for commands, 'quit' to exit.")

    while True:
        try:
            line = click.prompt(
                f"[{presenter.selected_priority.value}]",
                prompt_suffix="> ",
                default="",
                show_default=False,
            )
        except click.Abort:
            click.echo()
            break
        if not run_shell_command(controller, presenter, line):
            break

    click.echo("Goodbye.")


def run_shell_command(
    controller: TaskListController,
    presenter: ConsolePresenter,
    line: str,
) -> bool:
    """Run one shell command. Returns False when the session should end."""
    parts = line.strip().split(maxsplit=1)
    if not parts:
        return True
    command = parts[0].lower()
    rest = parts[1] if len(parts) > 1 else ""

    try:
        match command:
            case "quit" | "exit" | "q":
                return False
            case "help" | "?":
                click.echo(SHELL_HELP)
            case "list" | "ls":
                controller.render()
            case "add" | "a":
                controller.add(rest, presenter.selected_priority)
            case "priority" | "p":
                _shell_priority(controller, presenter, rest)
            case "toggle" | "t" | "done":
                _with_task_id(rest, controller.toggle_complete)
            case "delete" | "rm":
                _with_task_id(rest, controller.delete)
            case "edit" | "e":
                _shell_edit(controller, rest)
            case "filter" | "f":
                controller.set_filter(rest or TaskFilter.ALL.value)
            case "clear":
                removed = controller.clear_completed()
                click.echo(f"Cleared {removed} completed task(s).")
            case _:
                presenter.alert(f"Unknown command: {command}. Type 'help'.")
    except (ValidationError, PersistenceError) as e:
        presenter.alert(str(e))
    return True


def _parse_id(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ValidationError(f"Expected a task number, got {value!r}") from None


def _with_task_id(rest: str, operation) -> None:
    task_id = _parse_id(rest.strip())
    if not operation(task_id):
        _stale(task_id)


def _shell_priority(controller: TaskListController, presenter: ConsolePresenter, rest: str) -> None:
    args = rest.split()
    match args:
        case [level]:
            presenter.selected_priority = Priority.parse(level)
            click.echo(f"Priority for new tasks: {presenter.selected_priority.value}")
        case [task_id, level]:
            if not controller.set_priority(_parse_id(task_id), level):
                _stale(int(task_id))
        case _:
            raise ValidationError("Usage: priority LEVEL | priority ID LEVEL")


def _shell_edit(controller: TaskListController, rest: str) -> None:
    id_part, _, text = rest.strip().partition(" ")
    task_id = _parse_id(id_part)

    session = controller.begin_edit(task_id)
    if session is None:
        _stale(task_id)
        return

    if text:
        session.confirm(text)
        return

    try:
        click.echo(f"Current: {session.original_text}")
        new_text = click.prompt("Edit", default="", show_default=False)
    except click.Abort:
        # Leaving the field without Enter still commits, like losing focus.
        session.blur()
        return
    session.confirm(new_text)
