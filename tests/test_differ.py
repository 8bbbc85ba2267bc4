"""Tests for the structural differ."""

from __future__ import annotations

import copy

import pytest
from pydantic import ValidationError

from confimpact.diff.differ import deep_equal, diff
from confimpact.diff.models import ChangeKind, ChangeRecord


def _as_set(changes: list[ChangeRecord]) -> set[tuple[str, str]]:
    return {(c.kind.value, c.path) for c in changes}


DOCUMENTS = [
    {},
    {"a": 1},
    {"a": {"b": {"c": [1, 2, {"d": None}]}}, "e": True},
    {"service": {"port": 80, "hosts": ["a", "b"]}, "debug": False},
    {"service": {"port": "80", "replicas": 3}, "debug": None},
]


class TestDiffScenarios:
    def test_added_key(self):
        changes = diff({"a": 1}, {"a": 1, "b": 2})
        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.ADDED
        assert changes[0].path == "b"
        assert changes[0].new_value == 2
        assert changes[0].value == 2

    def test_removed_key(self):
        changes = diff({"secret": "x"}, {})
        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.REMOVED
        assert changes[0].path == "secret"
        assert changes[0].old_value == "x"
        assert changes[0].value == "x"

    def test_nested_modification_path(self):
        changes = diff({"db": {"host": "a"}}, {"db": {"host": "b"}})
        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.MODIFIED
        assert changes[0].path == "db.host"
        assert changes[0].old_value == "a"
        assert changes[0].new_value == "b"
        assert changes[0].key == "host"

    def test_no_record_for_parent_mapping(self):
        changes = diff({"db": {"host": "a", "port": 1}}, {"db": {"host": "b", "port": 1}})
        assert [c.path for c in changes] == ["db.host"]

    def test_lists_are_opaque(self):
        changes = diff({"tags": [1, 2]}, {"tags": [2, 1]})
        assert len(changes) == 1
        assert changes[0].path == "tags"
        assert changes[0].kind == ChangeKind.MODIFIED

    def test_equal_lists_produce_nothing(self):
        assert diff({"tags": [{"a": 1}]}, {"tags": [{"a": 1}]}) == []

    def test_mapping_replaced_by_scalar(self):
        changes = diff({"db": {"host": "a"}}, {"db": "sqlite://"})
        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.MODIFIED
        assert changes[0].path == "db"

    def test_null_is_a_value_not_absence(self):
        changes = diff({"a": None}, {"a": 1})
        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.MODIFIED

    def test_key_present_with_null_vs_absent(self):
        changes = diff({}, {"a": None})
        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.ADDED
        assert changes[0].new_value is None

    def test_bool_vs_number_differs(self):
        changes = diff({"a": True}, {"a": 1})
        assert len(changes) == 1

    def test_int_vs_float_same_value(self):
        assert diff({"a": 1}, {"a": 1.0}) == []

    def test_full_config(self, config_docs):
        changes = diff(*config_docs)
        assert _as_set(changes) == {
            ("modified", "version"),
            ("modified", "enabled"),
            ("modified", "database.host"),
            ("modified", "database.port"),
            ("modified", "database.timeout"),
            ("modified", "database.pool.max_size"),
            ("removed", "api_key"),
            ("modified", "features"),
            ("modified", "log_level"),
            ("added", "cache_ttl"),
        }

    def test_records_are_immutable(self):
        change = diff({"a": 1}, {"a": 2})[0]
        with pytest.raises(ValidationError):
            change.path = "b"


class TestDiffProperties:
    @pytest.mark.parametrize("doc", DOCUMENTS)
    def test_identical_documents(self, doc):
        assert diff(doc, copy.deepcopy(doc)) == []

    @pytest.mark.parametrize("a", DOCUMENTS)
    @pytest.mark.parametrize("b", DOCUMENTS)
    def test_symmetry(self, a, b):
        forward = diff(a, b)
        backward = diff(b, a)
        added = {c.path for c in forward if c.kind == ChangeKind.ADDED}
        removed = {c.path for c in forward if c.kind == ChangeKind.REMOVED}
        assert added == {c.path for c in backward if c.kind == ChangeKind.REMOVED}
        assert removed == {c.path for c in backward if c.kind == ChangeKind.ADDED}

    @pytest.mark.parametrize("a", DOCUMENTS)
    @pytest.mark.parametrize("b", DOCUMENTS)
    def test_modified_values_differ(self, a, b):
        for change in diff(a, b):
            if change.kind == ChangeKind.MODIFIED:
                assert not deep_equal(change.old_value, change.new_value)

    @pytest.mark.parametrize("a", DOCUMENTS)
    @pytest.mark.parametrize("b", DOCUMENTS)
    def test_paths_unique(self, a, b):
        paths = [c.path for c in diff(a, b)]
        assert len(paths) == len(set(paths))


class TestDeepEqual:
    def test_scalars(self):
        assert deep_equal("a", "a")
        assert not deep_equal("1", 1)
        assert deep_equal(None, None)
        assert not deep_equal(None, 0)

    def test_booleans_are_not_numbers(self):
        assert not deep_equal(True, 1)
        assert not deep_equal(0, False)
        assert deep_equal(False, False)

    def test_mapping_order_ignored(self):
        assert deep_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_list_order_matters(self):
        assert not deep_equal([1, 2], [2, 1])

    def test_nested(self):
        assert deep_equal({"a": [{"b": 1.0}]}, {"a": [{"b": 1}]})
        assert not deep_equal({"a": [{"b": True}]}, {"a": [{"b": 1}]})
