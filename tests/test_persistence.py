"""Unit tests for the durable per-device store and the file repositories."""

import pendulum
import pytest

from conftest import make_comment, make_todo, make_workspace
from todosync import configuration
from todosync.errors import UnknownIdError
from todosync.repository.configuration import CONFIGURATION_REPO
from todosync.repository.id_map import ID_MAP_REPO
from todosync.repository.local_state import LocalState
from todosync.repository.persistent_value import PersistentValue
from todosync.repository.session import SESSION_REPO
from todosync.repository.serialize import convert_bool_for_deserialization


class TestPersistentValue:
    def test_mount_without_file_keeps_default_and_persists_it(self):
        value = PersistentValue("flag", False)
        assert value.mount() is False
        assert value.is_mounted
        assert value.path.is_file()

    def test_set_is_written_through(self):
        value = PersistentValue("flag", False, deserialize=convert_bool_for_deserialization)
        value.mount()
        value.set(True)

        reloaded = PersistentValue("flag", False, deserialize=convert_bool_for_deserialization)
        assert reloaded.mount() is True

    def test_corrupt_file_falls_back_to_default(self):
        path = configuration.DATA_STATE_DIR / "flag.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("value: [unclosed")

        value = PersistentValue("flag", False, deserialize=convert_bool_for_deserialization)
        assert value.mount() is False
        # The default has been written back over the corrupt file
        assert PersistentValue("flag", True, deserialize=convert_bool_for_deserialization).mount() is False

    def test_wrong_type_falls_back_to_default(self):
        path = configuration.DATA_STATE_DIR / "flag.yaml"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("value: maybe\n")
        value = PersistentValue("flag", False, deserialize=convert_bool_for_deserialization)
        assert value.mount() is False

    def test_none_is_storable(self):
        value: PersistentValue[str | None] = PersistentValue("selected", "x")
        value.mount()
        value.set(None)
        assert PersistentValue("selected", "x").mount() is None

    def test_clear_resets_and_removes_file(self):
        value = PersistentValue("flag", False)
        value.mount()
        value.set(True)
        value.clear()
        assert value.value is False
        assert not value.path.exists()


class TestLocalState:
    def test_todos_round_trip_through_yaml(self):
        due = pendulum.datetime(2024, 4, 2, 12, 30, tz="UTC")
        todo = make_todo("a", "Call mum", due_date=due, urgency=2.5)
        todo["comments"] = [make_comment("c1", "a"), make_comment("p1", "a", pending=True)]

        state = LocalState()
        state.mount()
        state.todos.set([todo, make_todo("p", pending=True)])

        reloaded = LocalState()
        reloaded.mount()
        assert reloaded.todos.value[0] == todo
        assert reloaded.todos.value[1]["id"] == {"state": "pending", "value": "p"}

    def test_one_corrupt_value_does_not_affect_the_others(self):
        state = LocalState()
        state.mount()
        state.is_table_view.set(True)
        state.todos.set([make_todo("a")])
        (configuration.DATA_STATE_DIR / "todos.yaml").write_text("value: [{title: 1}]\n")

        reloaded = LocalState()
        reloaded.mount()
        assert reloaded.todos.value == []
        assert reloaded.is_table_view.value is True

    def test_clear_user_data_keeps_view_preferences(self):
        state = LocalState()
        state.mount()
        state.show_completed.set(True)
        state.todos.set([make_todo("a")])
        state.workspaces.set([make_workspace("ws-1", "Personal")])
        state.selected_workspace.set("ws-1")

        state.clear_user_data()

        reloaded = LocalState()
        reloaded.mount()
        assert reloaded.todos.value == []
        assert reloaded.workspaces.value == []
        assert reloaded.selected_workspace.value is None
        assert reloaded.show_completed.value is True


class TestConfigurationRepository:
    def test_defaults_without_file(self):
        config = CONFIGURATION_REPO.get_config()
        assert config["api_base_url"] == "http://localhost:3000"
        assert config["sync_interval_seconds"] == 60

    def test_update_and_flush(self):
        CONFIGURATION_REPO.update_config(api_base_url="https://todo.example.com/", log_level="info")
        CONFIGURATION_REPO.flush()
        CONFIGURATION_REPO.reset()
        config = CONFIGURATION_REPO.get_config()
        assert config["api_base_url"] == "https://todo.example.com"
        assert config["log_level"] == "INFO"

    def test_missing_keys_are_filled(self):
        configuration.APP_CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        configuration.APP_CONFIG_PATH.write_text("sync_interval_seconds: 5\n")
        config = CONFIGURATION_REPO.get_config()
        assert config["sync_interval_seconds"] == 5
        assert config["request_timeout_seconds"] == 10.0

    def test_environment_overrides_base_url(self, monkeypatch):
        monkeypatch.setenv(configuration.API_BASE_URL_ENV, "https://staging.example.com")
        assert CONFIGURATION_REPO.get_api_base_url() == "https://staging.example.com"


class TestIdMapRepository:
    def test_associate_is_stable(self):
        first = ID_MAP_REPO.associate_id("todos", "committed:a")
        second = ID_MAP_REPO.associate_id("todos", "committed:b")
        assert (first, second) == (1, 2)
        assert ID_MAP_REPO.associate_id("todos", "committed:a") == 1
        assert ID_MAP_REPO.get_real_id("todos", 2) == "committed:b"

    def test_unknown_id(self):
        with pytest.raises(UnknownIdError):
            ID_MAP_REPO.get_real_id("todos", 42)

    def test_flush_and_clear(self):
        ID_MAP_REPO.associate_id("workspaces", "ws-1")
        ID_MAP_REPO.flush()
        ID_MAP_REPO.reset()
        assert ID_MAP_REPO.get_real_id("workspaces", 1) == "ws-1"
        ID_MAP_REPO.clear_ids()
        with pytest.raises(UnknownIdError):
            ID_MAP_REPO.get_real_id("workspaces", 1)

    def test_unknown_entity_type(self):
        with pytest.raises(TypeError):
            ID_MAP_REPO.associate_id("goals", "x")


class TestSessionRepository:
    def test_save_load_delete(self, session):
        assert SESSION_REPO.get_session() is None
        SESSION_REPO.save_session(session)
        assert SESSION_REPO.get_session() == session
        SESSION_REPO.delete_session()
        assert SESSION_REPO.get_session() is None
