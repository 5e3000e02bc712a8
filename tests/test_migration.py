"""Unit tests for the data migrations."""

import pendulum
import pytest
from yaml import safe_load

from todosync import configuration
from todosync.migrate import registry
from todosync.migrate.migrate import run_required_migrations
from todosync.migrate.migrations.migration_1_convert_legacy_todos import (
    convert_legacy_todo,
    is_legacy_todo,
)
from todosync.repository.local_state import LocalState
from todosync.repository.migrate import MIGRATE_REPO

LEGACY_TODOS = """\
- id: 1714550400000
  text: Buy milk
  date: "2024-05-01"
  urgency: 2
  completed: false
  createdAt: "2024-04-01T08:00:00Z"
  comments:
    - id: 1714550400001
      text: oat
      createdAt: "2024-04-01T09:00:00Z"
- id: 1714550400002
  text: Call the bank
  date: sometime next week
  completed: true
  createdAt: "2024-04-02T08:00:00Z"
"""


class TestConvertLegacyTodo:
    def test_detects_legacy_layout(self):
        assert is_legacy_todo({"id": 1, "text": "x"})
        assert not is_legacy_todo({"id": {"state": "pending", "value": "1"}, "title": "x"})

    def test_free_text_due_date_is_dropped(self):
        converted = convert_legacy_todo({"id": 1, "text": "x", "date": "after lunch"})
        assert converted["due_date"] is None
        assert converted["title"] == "x"


class TestMigration1:
    def test_converts_legacy_todos_once(self):
        state_dir = configuration.DATA_STATE_DIR
        state_dir.mkdir(parents=True, exist_ok=True)
        (state_dir / "todos.yaml").write_text(LEGACY_TODOS)

        assert run_required_migrations() == [1]
        assert MIGRATE_REPO.get_version() == 1
        assert [m["name"] for m in MIGRATE_REPO.get_applied()] == ["convert legacy todos"]

        state = LocalState()
        state.mount()
        first, second = state.todos.value
        assert first["id"] == {"state": "pending", "value": "1714550400000"}
        assert first["title"] == "Buy milk"
        assert first["due_date"] == pendulum.datetime(2024, 5, 1, tz="UTC")
        assert first["urgency"] == 2.0
        assert first["user_id"] == "local"
        assert first["comments"][0]["todo_id"] == first["id"]
        assert second["due_date"] is None
        assert second["completed"] is True

        assert run_required_migrations() == []

    def test_fresh_install_has_nothing_to_convert(self):
        assert run_required_migrations() == [1]
        assert not (configuration.DATA_STATE_DIR / "todos.yaml").exists()


class TestMigrationBookkeeping:
    def test_history_is_written_to_disk(self):
        run_required_migrations()

        saved = safe_load(configuration.DATA_MIGRATE_PATH.read_text())
        assert saved["version"] == 1
        assert saved["applied"][0]["version"] == 1
        assert saved["applied"][0]["name"] == "convert legacy todos"

    def test_version_only_file_is_understood(self):
        configuration.DATA_MIGRATE_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.DATA_MIGRATE_PATH.write_text("version: 1\n")

        assert run_required_migrations() == []
        assert MIGRATE_REPO.get_applied() == []

    def test_recording_an_older_version_is_refused(self):
        MIGRATE_REPO.record(3, "third")
        with pytest.raises(ValueError):
            MIGRATE_REPO.record(2, "second")

    def test_failed_migration_keeps_earlier_ones(self, monkeypatch):
        def broken() -> None:
            raise RuntimeError("disk full")

        monkeypatch.setitem(registry.MIGRATIONS, 99, registry.Migration(99, "broken", broken))

        with pytest.raises(RuntimeError):
            run_required_migrations()

        MIGRATE_REPO.reset()
        assert MIGRATE_REPO.get_version() == 1

    def test_conflicting_registration_is_refused(self):
        with pytest.raises(ValueError):
            registry.migration(1, "something else")(lambda: None)
