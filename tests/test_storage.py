"""Tests for task persistence and the key-value store adapters."""

import json
import logging

import pytest

from tasklist.adapters.json_file_store import JsonFileStore
from tasklist.adapters.memory_store import MemoryStore
from tasklist.core.tasks import Priority, Task
from tasklist.storage import (
    PersistenceError,
    TaskStorage,
    dump_tasks,
    parse_tasks,
    task_from_record,
)


@pytest.fixture
def tasks():
    return [
        Task(text="Buy milk", priority=Priority.HIGH, timestamp="1/15/2025, 9:30:00 AM", completed=True),
        Task(text="Call bank", priority=Priority.LOW, timestamp="1/15/2025, 9:31:00 AM"),
        Task(text="Pay rent", timestamp="1/16/2025, 8:00:00 AM"),
    ]


class TestRoundTrip:
    def test_save_then_load_reproduces_collection(self, tasks):
        storage = TaskStorage(MemoryStore())
        storage.save(tasks)
        assert storage.load() == tasks

    def test_empty_collection(self):
        storage = TaskStorage(MemoryStore())
        storage.save([])
        assert storage.load() == []

    def test_text_with_quotes_and_unicode(self):
        storage = TaskStorage(MemoryStore())
        tasks = [Task(text='Say "hi" to Zoë <b>now</b>', timestamp="t")]
        storage.save(tasks)
        assert storage.load() == tasks

    def test_loaded_ids_follow_stored_order(self, tasks):
        storage = TaskStorage(MemoryStore())
        storage.save(tasks)
        assert [t.id for t in storage.load()] == [1, 2, 3]


class TestSave:
    def test_layout(self, tasks):
        store = MemoryStore()
        TaskStorage(store).save(tasks[:1])
        assert json.loads(store.entries["tasks"]) == [
            {
                "text": "Buy milk",
                "completed": True,
                "priority": "high",
                "timestamp": "1/15/2025, 9:30:00 AM",
            }
        ]

    def test_overwrites(self, tasks):
        store = MemoryStore()
        storage = TaskStorage(store)
        storage.save(tasks)
        storage.save(tasks[1:2])
        assert [r["text"] for r in json.loads(store.entries["tasks"])] == ["Call bank"]

    def test_ids_are_not_persisted(self):
        data = json.loads(dump_tasks([Task(text="x", id=42)]))
        assert "id" not in data[0]

    def test_custom_key(self, tasks):
        store = MemoryStore()
        TaskStorage(store, key="other").save(tasks)
        assert "other" in store.entries
        assert "tasks" not in store.entries

    def test_store_failure_raises_persistence_error(self, tasks):
        class BrokenStore(MemoryStore):
            def set(self, key, value):
                raise OSError("read-only file system")

        with pytest.raises(PersistenceError, match="read-only"):
            TaskStorage(BrokenStore()).save(tasks)


class TestLoad:
    def test_missing_key(self):
        assert TaskStorage(MemoryStore()).load() == []

    @pytest.mark.parametrize("raw", ["not json", "{", '{"text": "x"}', "42", "null", '"tasks"'])
    def test_corrupt_data_is_treated_as_absent(self, raw):
        store = MemoryStore({"tasks": raw})
        assert TaskStorage(store).load() == []

    def test_corrupt_data_is_logged(self, caplog):
        store = MemoryStore({"tasks": "not json"})
        with caplog.at_level(logging.WARNING, logger="tasklist.storage"):
            TaskStorage(store).load()
        assert "not valid JSON" in caplog.text

    def test_store_read_failure_is_treated_as_absent(self):
        class BrokenStore(MemoryStore):
            def get(self, key):
                raise OSError("permission denied")

        assert TaskStorage(BrokenStore()).load() == []


class TestLegacyRecords:
    def test_missing_priority_defaults_to_medium(self):
        task = task_from_record({"text": "Old", "completed": False, "timestamp": "t"})
        assert task.priority is Priority.MEDIUM

    def test_unknown_priority_defaults_to_medium(self):
        task = task_from_record({"text": "Old", "priority": "urgent"})
        assert task.priority is Priority.MEDIUM

    def test_missing_completed_and_timestamp(self):
        task = task_from_record({"text": "Old", "priority": "low"})
        assert task == Task(text="Old", priority=Priority.LOW, timestamp="", completed=False)

    def test_truthy_non_bool_completed_is_not_completed(self):
        assert task_from_record({"text": "Old", "completed": "yes"}).completed is False

    @pytest.mark.parametrize("record", [{}, {"text": ""}, {"text": "   "}, {"text": 5}])
    def test_records_without_text_are_unusable(self, record):
        assert task_from_record(record) is None

    def test_parse_skips_unusable_records(self):
        raw = json.dumps([{"text": "Keep"}, "junk", {"text": ""}, {"text": "Also keep"}])
        tasks = parse_tasks(raw)
        assert [t.text for t in tasks] == ["Keep", "Also keep"]
        assert [t.id for t in tasks] == [1, 2]


class TestJsonFileStore:
    def test_missing_file(self, tmp_path):
        store = JsonFileStore(tmp_path / "storage.json")
        assert store.get("tasks") is None

    def test_set_creates_file_and_parents(self, tmp_path):
        path = tmp_path / "nested" / "storage.json"
        JsonFileStore(path).set("tasks", "[]")
        assert json.loads(path.read_text()) == {"tasks": "[]"}

    def test_keeps_other_keys(self, tmp_path):
        path = tmp_path / "storage.json"
        store = JsonFileStore(path)
        store.set("theme", "dark")
        store.set("tasks", "[]")
        assert store.get("theme") == "dark"
        assert store.get("tasks") == "[]"

    def test_keeps_non_string_entries_on_write(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text(json.dumps({"count": 3, "theme": "dark"}))
        store = JsonFileStore(path)
        assert store.get("count") is None
        store.set("tasks", "[]")
        assert json.loads(path.read_text()) == {"count": 3, "theme": "dark", "tasks": "[]"}

    def test_corrupt_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("{oops")
        store = JsonFileStore(path)
        assert store.get("tasks") is None
        store.set("tasks", "[]")
        assert store.get("tasks") == "[]"

    def test_non_object_file_reads_as_empty(self, tmp_path):
        path = tmp_path / "storage.json"
        path.write_text("[1, 2]")
        assert JsonFileStore(path).get("tasks") is None

    def test_round_trip_through_file(self, tmp_path, tasks):
        path = tmp_path / "storage.json"
        TaskStorage(JsonFileStore(path)).save(tasks)
        assert TaskStorage(JsonFileStore(path)).load() == tasks


class TestMemoryStore:
    def test_get_set(self):
        store = MemoryStore()
        assert store.get("tasks") is None
        store.set("tasks", "[]")
        assert store.get("tasks") == "[]"

    def test_initial_entries_are_copied(self):
        entries = {"tasks": "[]"}
        store = MemoryStore(entries)
        store.set("tasks", "[1]")
        assert entries == {"tasks": "[]"}
