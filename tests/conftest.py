"""Shared fixtures and fakes for tasklist tests."""

from datetime import datetime

import pytest

from tasklist.adapters.memory_store import MemoryStore
from tasklist.controller import TaskListController
from tasklist.core.tasks import TaskFilter
from tasklist.core.view import TaskRow
from tasklist.storage import TaskStorage

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


class RecordingPresenter:
    """Presenter fake that remembers everything the controller asked of it."""

    def __init__(self):
        self.renders: list[tuple[list[TaskRow], TaskFilter]] = []
        self.resets = 0
        self.alerts: list[str] = []

    def render(self, rows: list[TaskRow], task_filter: TaskFilter) -> None:
        self.renders.append((rows, task_filter))

    def reset_input(self) -> None:
        self.resets += 1

    def alert(self, message: str) -> None:
        self.alerts.append(message)

    @property
    def last_visible_texts(self) -> list[str]:
        rows, _ = self.renders[-1]
        return [r.text for r in rows if r.visible]


class CountingStore(MemoryStore):
    """MemoryStore that counts writes and can be told to fail them."""

    def __init__(self, entries: dict[str, str] | None = None):
        super().__init__(entries)
        self.writes = 0
        self.fail_writes = False

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        super().set(key, value)


@pytest.fixture
def now():
    return datetime(2025, 1, 15, 9, 30)


@pytest.fixture
def store():
    return CountingStore()


@pytest.fixture
def presenter():
    return RecordingPresenter()


@pytest.fixture
def make_controller(store, presenter, now):
    """Build a controller over the shared store, as a fresh session would."""

    def _make(**kwargs) -> TaskListController:
        return TaskListController(
            TaskStorage(store),
            presenter=kwargs.pop("presenter", presenter),
            clock=lambda: now,
            timestamp_format=TIMESTAMP_FORMAT,
            **kwargs,
        )

    return _make


@pytest.fixture
def controller(make_controller):
    return make_controller()
