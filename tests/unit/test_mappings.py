"""Tests for the merge and omit helpers."""

from chartlang.core.ir import Transition
from chartlang.core.mappings import TRANSIENT_EVENT, merge_transitions, omit


class TestMergeTransitions:
    def test_named_keys_overwrite(self) -> None:
        merged = merge_transitions([{"GO": 1}, {"STOP": 2}, {"GO": 3}])

        assert merged == {"GO": 3, "STOP": 2}
        assert list(merged) == ["GO", "STOP"]

    def test_transient_key_accumulates(self) -> None:
        first = Transition(target="a", cond="x")
        second = Transition(target="b", cond="y")

        merged = merge_transitions([{TRANSIENT_EVENT: first}, {"GO": "c"}, {TRANSIENT_EVENT: second}])

        assert merged == {TRANSIENT_EVENT: [first, second], "GO": "c"}

    def test_single_transient_becomes_list(self) -> None:
        assert merge_transitions([{"": "a"}]) == {"": ["a"]}

    def test_empty(self) -> None:
        assert merge_transitions([]) == {}


class TestOmit:
    def test_removes_named_keys(self) -> None:
        source = {"type": "transition", "GO": "b", "STOP": "c"}

        assert omit(["type"], source) == {"GO": "b", "STOP": "c"}
        assert source == {"type": "transition", "GO": "b", "STOP": "c"}

    def test_missing_keys_are_ignored(self) -> None:
        assert omit({"nope"}, {"a": 1}) == {"a": 1}
