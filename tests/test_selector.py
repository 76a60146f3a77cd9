"""Tests for word selection by position and by day of year."""

from datetime import datetime

import pytest
import pytz

from wotd.errors import EmptyCollectionError, InvalidPositionError
from wotd.selector import (
    current_day_of_year,
    offset_for_position,
    select_by_day_of_year,
    select_by_position,
)

ABC = ["A", "B", "C"]


class TestSelectByPosition:
    @pytest.mark.parametrize(
        "position, expected",
        [(1, "A"), (2, "B"), (3, "C"), (4, "A"), (5, "B"), (6, "C"), (7, "A")],
    )
    def test_three_entries_cycle(self, position, expected):
        assert select_by_position(ABC, position) == expected

    def test_positions_in_range_map_directly(self):
        entries = list(range(10, 20))
        for p in range(1, len(entries) + 1):
            assert select_by_position(entries, p) == entries[p - 1]

    def test_wraps_like_an_in_range_position(self):
        entries = list("abcdefg")
        n = len(entries)
        for p in range(n + 1, 5 * n + 3):
            assert select_by_position(entries, p) == select_by_position(entries, ((p - 1) % n) + 1)

    def test_length_is_last_element(self):
        entries = list(range(366))
        assert select_by_position(entries, 366) == entries[-1]

    def test_length_plus_one_is_first_element(self):
        entries = list(range(366))
        assert select_by_position(entries, 367) == entries[0]

    def test_exact_multiple_is_last_element(self):
        entries = list(range(100))
        assert select_by_position(entries, 200) == entries[-1]
        assert select_by_position(entries, 300) == entries[-1]

    def test_single_element_always_selected(self):
        for p in (1, 2, 3, 365, 366, 10_000):
            assert select_by_position(["only"], p) == "only"

    def test_empty_collection_fails(self):
        with pytest.raises(EmptyCollectionError) as excinfo:
            select_by_position([], 3)
        assert excinfo.value.status_code == 500

    @pytest.mark.parametrize("position", [0, -1, -5])
    def test_non_positive_position_is_rejected(self, position):
        with pytest.raises(InvalidPositionError) as excinfo:
            select_by_position(ABC, position)
        assert excinfo.value.status_code == 400
        assert excinfo.value.context["requested_index"] == position

    def test_empty_collection_checked_before_position(self):
        with pytest.raises(EmptyCollectionError):
            select_by_position([], 0)

    def test_input_is_not_mutated(self):
        entries = ["x", "y"]
        select_by_position(entries, 5)
        assert entries == ["x", "y"]


class TestSelectByDayOfYear:
    def test_same_rule_as_position(self):
        entries = list(range(1, 31))
        for day in range(1, 367):
            assert select_by_day_of_year(entries, day) == select_by_position(entries, day)

    def test_full_dictionary_day_maps_to_same_index(self):
        entries = list(range(1, 367))
        assert select_by_day_of_year(entries, 1) == 1
        assert select_by_day_of_year(entries, 59) == 59
        assert select_by_day_of_year(entries, 366) == 366

    def test_short_dictionary_last_day_of_year(self):
        # 366 is a multiple of 183, so the last word is used
        entries = list(range(183))
        assert select_by_day_of_year(entries, 366) == entries[-1]

    def test_empty_collection_fails(self):
        with pytest.raises(EmptyCollectionError):
            select_by_day_of_year([], 100)

    def test_zero_day_is_rejected(self):
        with pytest.raises(InvalidPositionError):
            select_by_day_of_year(ABC, 0)


class TestOffset:
    def test_offsets(self):
        assert [offset_for_position(3, p) for p in range(1, 8)] == [0, 1, 2, 0, 1, 2, 0]


class TestCurrentDayOfYear:
    def test_uses_configured_timezone(self):
        # 31 Dec 12:00 UTC is already 1 Jan in Auckland
        now = datetime(2023, 12, 31, 12, 0)
        assert current_day_of_year("UTC", now) == 365
        assert current_day_of_year("Pacific/Auckland", now) == 1

    def test_leap_year_has_day_366(self):
        now = pytz.utc.localize(datetime(2024, 12, 31, 6, 0))
        assert current_day_of_year("UTC", now) == 366

    def test_defaults_to_now(self):
        assert 1 <= current_day_of_year("UTC") <= 366
