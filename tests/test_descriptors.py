"""Tests for column and action descriptors."""

import pytest

from sms_tables.core.descriptors import (
    Action,
    BulkAction,
    Column,
    PerRowActions,
    StaticActions,
    as_action_source,
    as_bulk_action,
    build_columns,
)


def _noop(*args):
    return None


class TestBuildColumns:
    def test_dicts_become_columns(self, people_columns):
        columns = build_columns(people_columns)
        assert [c.key for c in columns] == ["name", "age"]
        assert all(isinstance(c, Column) for c in columns)

    def test_defaults(self):
        column = build_columns([{"key": "name"}])[0]
        assert column.sortable is True
        assert column.filterable is True
        assert column.title == "name"

    def test_duplicate_keys_rejected(self):
        with pytest.raises(ValueError, match="Duplicate column key 'name'"):
            build_columns([{"key": "name"}, Column("name", "Again")])

    def test_unknown_field_rejected(self):
        with pytest.raises(ValueError, match="Unknown Column field"):
            build_columns([{"key": "name", "width": 40}])

    def test_empty(self):
        assert build_columns(None) == []


class TestAction:
    def test_static_flags(self):
        action = Action("Edit", _noop, disabled=True)
        assert action.is_disabled({}) is True
        assert action.is_hidden({}) is False

    def test_predicate_flags(self):
        action = Action(
            "Archive",
            _noop,
            hidden=lambda row: row["archived"],
            disabled=lambda row: row["locked"],
        )
        assert action.is_hidden({"archived": True, "locked": False})
        assert not action.is_disabled({"archived": True, "locked": False})

    @pytest.mark.parametrize(
        "label,icon",
        [
            ("View", ":material/visibility:"),
            ("Edit student", ":material/edit:"),
            ("Delete", ":material/delete:"),
            ("Promote", None),
        ],
    )
    def test_icon_inferred_from_label(self, label, icon):
        assert Action(label, _noop).resolved_icon() == icon

    def test_explicit_icon_wins(self):
        assert Action("Delete", _noop, icon=":material/block:").resolved_icon() == (
            ":material/block:"
        )


class TestActionSource:
    def test_none_is_empty_static(self):
        source = as_action_source(None)
        assert isinstance(source, StaticActions)
        assert not source

    def test_list_of_dicts(self):
        source = as_action_source([{"label": "View", "on_click": _noop}])
        assert isinstance(source, StaticActions)
        assert [a.label for a in source.resolve({"id": 1})] == ["View"]

    def test_callable_is_per_row(self):
        def factory(row):
            if row["archived"]:
                return []
            return [{"label": "Archive", "on_click": _noop}]

        source = as_action_source(factory)
        assert isinstance(source, PerRowActions)
        assert source.resolve({"archived": True}) == []
        assert source.resolve({"archived": False})[0].label == "Archive"

    def test_factory_returning_none(self):
        assert as_action_source(lambda row: None).resolve({}) == []


class TestBulkAction:
    def test_from_dict(self):
        bulk = as_bulk_action({"label": "Email", "on_click": _noop, "class_name": "x"})
        assert isinstance(bulk, BulkAction)
        assert bulk.class_name == "x"
