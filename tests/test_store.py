"""Unit tests for todosync.sync.store - the reducer and the single-writer store."""

import pendulum
import pytest

from conftest import BASE_TIME, make_comment, make_todo
from todosync.model.action import ActionType
from todosync.model.todo_id import committed_id
from todosync.sync.store import TodoStore, reduce

LATER = BASE_TIME.add(minutes=5)


class TestReduce:
    def test_add_appends(self):
        todos = [make_todo("a")]
        result = reduce(todos, {"action_type": ActionType.ADD_TODO, "todo": make_todo("b")})
        assert [todo["id"]["value"] for todo in result] == ["a", "b"]
        assert len(todos) == 1

    def test_commit_replaces_in_place_and_carries_comments(self):
        pending = make_todo("p1", "Draft", pending=True)
        pending["comments"] = [make_comment("c1", "p1", pending=True)]
        server = make_todo("srv-1", "Draft")
        todos = [make_todo("a"), pending, make_todo("b")]

        result = reduce(
            todos,
            {"action_type": ActionType.COMMIT_TODO, "pending_id": pending["id"], "todo": server},
        )

        assert [todo["id"]["value"] for todo in result] == ["a", "srv-1", "b"]
        assert result[1]["id"] == committed_id("srv-1")
        assert result[1]["comments"][0]["todo_id"] == committed_id("srv-1")

    def test_commit_keeps_edits_made_after_submission(self):
        submitted = make_todo("p1", "Draft", pending=True)
        edited = {
            **submitted,
            "completed": True,
            "due_date": pendulum.datetime(2024, 6, 1, tz="UTC"),
            "updated_at": LATER,
        }
        server = make_todo("srv-1", "Draft")

        result = reduce(
            [edited],
            {
                "action_type": ActionType.COMMIT_TODO,
                "pending_id": submitted["id"],
                "todo": server,
                "submitted": submitted,
            },
        )

        assert result[0]["id"] == committed_id("srv-1")
        assert result[0]["completed"] is True
        assert result[0]["due_date"] == pendulum.datetime(2024, 6, 1, tz="UTC")
        assert result[0]["updated_at"] == LATER

    def test_commit_without_edits_takes_server_record(self):
        submitted = make_todo("p1", "Draft", pending=True)
        server = make_todo("srv-1", "Draft", updated_at=LATER)

        result = reduce(
            [submitted],
            {
                "action_type": ActionType.COMMIT_TODO,
                "pending_id": submitted["id"],
                "todo": server,
                "submitted": submitted,
            },
        )

        assert result[0]["updated_at"] == LATER
        assert result[0]["completed"] is False

    def test_commit_of_missing_pending_todo_is_a_no_op(self):
        todos = [make_todo("a")]
        result = reduce(
            todos,
            {
                "action_type": ActionType.COMMIT_TODO,
                "pending_id": {"state": "pending", "value": "gone"},
                "todo": make_todo("srv-1"),
            },
        )
        assert result == todos

    def test_pending_and_committed_ids_never_match(self):
        todos = [make_todo("x", pending=True)]
        result = reduce(todos, {"action_type": ActionType.REMOVE_TODO, "todo_id": committed_id("x")})
        assert len(result) == 1

    def test_restore_only_when_absent(self):
        todo = make_todo("a")
        assert len(reduce([todo], {"action_type": ActionType.RESTORE_TODO, "todo": todo})) == 1
        assert len(reduce([], {"action_type": ActionType.RESTORE_TODO, "todo": todo})) == 1

    def test_set_completed_stamps_updated_at(self):
        result = reduce(
            [make_todo("a")],
            {
                "action_type": ActionType.SET_COMPLETED,
                "todo_id": committed_id("a"),
                "completed": True,
                "updated_at": LATER,
            },
        )
        assert result[0]["completed"] is True
        assert result[0]["updated_at"] == LATER

    def test_revert_restores_updated_at_only_if_still_optimistic(self):
        optimistic = make_todo("a", completed=True, updated_at=LATER)
        action = {
            "action_type": ActionType.REVERT_FIELDS,
            "todo_id": committed_id("a"),
            "fields": {"completed": False},
            "optimistic_updated_at": LATER,
            "previous_updated_at": BASE_TIME,
        }
        reverted = reduce([optimistic], action)
        assert reverted[0]["completed"] is False
        assert reverted[0]["updated_at"] == BASE_TIME

        touched_since = make_todo("a", completed=True, updated_at=LATER.add(minutes=1))
        assert reduce([touched_since], action)[0]["updated_at"] == LATER.add(minutes=1)

    def test_revert_is_idempotent(self):
        todo = make_todo("a", completed=True, updated_at=LATER)
        action = {
            "action_type": ActionType.REVERT_FIELDS,
            "todo_id": committed_id("a"),
            "fields": {"completed": False},
            "optimistic_updated_at": LATER,
            "previous_updated_at": BASE_TIME,
        }
        once = reduce([todo], action)
        assert reduce(once, action) == once

    def test_replace_keeps_unconfirmed_comments(self):
        local = make_todo("a", comments=[make_comment("p", "a", pending=True)])
        server = make_todo("a", completed=True, comments=[make_comment("c1", "a")])
        result = reduce(
            [local],
            {"action_type": ActionType.REPLACE_TODO, "todo_id": committed_id("a"), "todo": server},
        )
        assert result[0]["completed"] is True
        assert [comment["id"]["value"] for comment in result[0]["comments"]] == ["c1", "p"]

    def test_comment_lifecycle(self):
        todos = [make_todo("a")]
        pending = make_comment("p", "a", pending=True)
        todos = reduce(
            todos,
            {"action_type": ActionType.ADD_COMMENT, "todo_id": committed_id("a"), "comment": pending},
        )
        todos = reduce(
            todos,
            {
                "action_type": ActionType.COMMIT_COMMENT,
                "todo_id": committed_id("a"),
                "pending_id": pending["id"],
                "comment": make_comment("c1", "a"),
            },
        )
        assert todos[0]["comments"][0]["id"] == committed_id("c1")

        todos = reduce(
            todos,
            {
                "action_type": ActionType.REMOVE_COMMENT,
                "todo_id": committed_id("a"),
                "comment_id": committed_id("c1"),
            },
        )
        assert todos[0]["comments"] == []

    def test_restore_comment_at_index(self):
        todo = make_todo("a", comments=[make_comment("c1", "a"), make_comment("c3", "a")])
        result = reduce(
            [todo],
            {
                "action_type": ActionType.RESTORE_COMMENT,
                "todo_id": committed_id("a"),
                "comment": make_comment("c2", "a"),
                "index": 1,
            },
        )
        assert [comment["id"]["value"] for comment in result[0]["comments"]] == ["c1", "c2", "c3"]

    def test_replace_all(self):
        result = reduce(
            [make_todo("a")], {"action_type": ActionType.REPLACE_ALL, "todos": [make_todo("b")]}
        )
        assert [todo["id"]["value"] for todo in result] == ["b"]

    def test_unknown_action_raises(self):
        with pytest.raises(ValueError):
            reduce([], {"action_type": "bogus"})  # type: ignore[typeddict-item]


class TestTodoStore:
    def test_dispatch_notifies_subscribers_with_a_copy(self):
        store = TodoStore()
        seen: list[int] = []
        store.subscribe(lambda todos: seen.append(len(todos)))
        store.dispatch({"action_type": ActionType.ADD_TODO, "todo": make_todo("a")})
        assert seen == [1]

    def test_unsubscribe(self):
        store = TodoStore()
        seen: list[int] = []
        unsubscribe = store.subscribe(lambda todos: seen.append(len(todos)))
        unsubscribe()
        store.dispatch({"action_type": ActionType.ADD_TODO, "todo": make_todo("a")})
        assert seen == []

    def test_reads_are_copies(self):
        store = TodoStore([make_todo("a")])
        store.todos[0]["title"] = "changed"
        todo = store.get_todo(committed_id("a"))
        assert todo is not None
        todo["completed"] = True
        assert store.todos[0]["title"] == "Buy milk"
        assert store.todos[0]["completed"] is False

    def test_get_missing_todo(self):
        assert TodoStore().get_todo(committed_id("nope")) is None

    def test_due_dates_survive(self):
        due = pendulum.datetime(2024, 5, 1, tz="UTC")
        store = TodoStore([make_todo("a", due_date=due)])
        assert store.todos[0]["due_date"] == due
