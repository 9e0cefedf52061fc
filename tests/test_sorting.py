"""Tests for the sort stage and its mixed-type ordering."""

import datetime

import pytest

from sms_tables.preprocessing.sorting import next_sort, sort_rows, sort_value_key


class TestSortRows:
    """Tests for sort_rows()."""

    def test_no_key_keeps_order(self, people_rows):
        assert sort_rows(people_rows, None) == people_rows

    def test_ascending(self, people_rows):
        rows = sort_rows(people_rows, "age", "asc")
        assert [row["age"] for row in rows] == [25, 30, 40]

    def test_descending(self, people_rows):
        rows = sort_rows(people_rows, "age", "desc")
        assert [row["age"] for row in rows] == [40, 30, 25]

    def test_direction_toggle_reverses(self, student_rows):
        asc = sort_rows(student_rows, "profile.firstName", "asc")
        desc = sort_rows(student_rows, "profile.firstName", "desc")
        assert desc == list(reversed(asc))

    def test_monotonic_on_nested_path(self, student_rows):
        rows = sort_rows(student_rows, "profile.firstName", "asc")
        names = [row["profile"]["firstName"] for row in rows]
        assert all(a <= b for a, b in zip(names, names[1:]))

    def test_input_not_modified(self, people_rows):
        original = list(people_rows)
        sort_rows(people_rows, "age", "desc")
        assert people_rows == original

    def test_invalid_direction(self, people_rows):
        with pytest.raises(ValueError, match="asc"):
            sort_rows(people_rows, "age", "up")


class TestMixedTypeOrder:
    """Pins the total order used for columns mixing value types."""

    def test_absent_values_last_ascending(self, student_rows):
        rows = sort_rows(student_rows, "grade", "asc")
        assert [row["grade"] for row in rows] == [78, 85, 91, None]

    def test_absent_values_first_descending(self, student_rows):
        rows = sort_rows(student_rows, "grade", "desc")
        assert [row["grade"] for row in rows] == [None, 91, 85, 78]

    def test_missing_nested_path_ranks_as_absent(self, student_rows):
        rows = sort_rows(student_rows, "class.name", "asc")
        assert rows[-1]["id"] == "s4"

    def test_numbers_before_strings(self):
        rows = [{"v": "10"}, {"v": 9}, {"v": "apple"}, {"v": 2.5}]
        assert [r["v"] for r in sort_rows(rows, "v")] == [2.5, 9, "10", "apple"]

    def test_strings_compare_as_text(self):
        rows = [{"v": "9"}, {"v": "10"}]
        assert [r["v"] for r in sort_rows(rows, "v")] == ["10", "9"]

    def test_booleans_rank_with_numbers(self):
        assert sort_value_key(True)[0] == sort_value_key(3)[0]

    def test_dates_and_datetimes_together(self):
        rows = [
            {"v": datetime.datetime(2024, 1, 15, 9, 30)},
            {"v": datetime.date(2024, 1, 10)},
            {"v": datetime.date(2024, 2, 1)},
        ]
        ordered = [r["v"] for r in sort_rows(rows, "v")]
        assert ordered == [
            datetime.date(2024, 1, 10),
            datetime.datetime(2024, 1, 15, 9, 30),
            datetime.date(2024, 2, 1),
        ]

    def test_nan_ranks_as_absent(self):
        rows = [{"v": float("nan")}, {"v": 1.0}]
        assert sort_rows(rows, "v")[0]["v"] == 1.0

    def test_other_values_after_dates(self):
        rows = [{"v": ("x",)}, {"v": datetime.date(2024, 1, 1)}, {"v": None}, {"v": 1}]
        kinds = [type(r["v"]).__name__ for r in sort_rows(rows, "v")]
        assert kinds == ["int", "date", "tuple", "NoneType"]


class TestNextSort:
    """Tests for the header click protocol."""

    def test_first_click_sorts_ascending(self):
        assert next_sort(None, "asc", "name") == ("name", "asc")

    def test_same_column_flips(self):
        assert next_sort("name", "asc", "name") == ("name", "desc")
        assert next_sort("name", "desc", "name") == ("name", "asc")

    def test_other_column_resets_to_ascending(self):
        assert next_sort("name", "desc", "age") == ("age", "asc")
