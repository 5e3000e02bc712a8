"""Unit tests for todosync.sync.fingerprint - content matching of todos."""

import pendulum

from conftest import make_todo
from todosync.sync.fingerprint import ContentFingerprintMatcher, fingerprint, format_urgency


class TestFingerprint:
    def test_title_is_trimmed_and_lowercased(self):
        left = make_todo("a", "  Buy Milk ")
        right = make_todo("b", "buy milk")
        assert fingerprint(left) == fingerprint(right)

    def test_missing_urgency_matches_urgency_one(self):
        assert fingerprint(make_todo("a", urgency=None)) == fingerprint(make_todo("b", urgency=1))

    def test_integer_and_float_urgency_match(self):
        assert format_urgency(2) == format_urgency(2.0) == "2"
        assert format_urgency(2.5) == "2.5"

    def test_due_date_is_part_of_the_key(self):
        due = pendulum.datetime(2024, 3, 1, tz="UTC")
        assert fingerprint(make_todo("a", due_date=due)) != fingerprint(make_todo("b"))

    def test_completion_and_id_are_ignored(self):
        left = make_todo("a", completed=True)
        right = make_todo("b", pending=True)
        assert fingerprint(left) == fingerprint(right)

    def test_key_layout(self):
        due = pendulum.datetime(2024, 3, 1, tz="UTC")
        todo = make_todo("a", "Pay Rent", due_date=due, urgency=3.5)
        assert fingerprint(todo) == "pay rent_2024-03-01T00:00:00+00:00_3.5"


class TestMatcherIndex:
    def test_later_todo_wins_on_collision(self):
        first = make_todo("a", "Same")
        second = make_todo("b", "same")
        index = ContentFingerprintMatcher().index([first, second])
        assert len(index) == 1
        assert index[fingerprint(first)]["id"]["value"] == "b"
