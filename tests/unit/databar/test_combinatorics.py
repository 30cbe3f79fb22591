"""Unit-тесты для combinatorics.py."""

from __future__ import annotations

import pytest

from src.databar.combinatorics import (
    combinations,
    value_from_widths,
    widths_from_value,
)


class TestCombinations:
    @pytest.mark.parametrize(
        "n, r, expected",
        [
            (16, 3, 560),
            (5, 0, 1),
            (5, 5, 1),
            (10, 3, 120),
            (7, 6, 7),
        ],
    )
    def test_values(self, n: int, r: int, expected: int) -> None:
        assert combinations(n, r) == expected


class TestWidthsFromValue:
    def test_first_pattern(self) -> None:
        assert widths_from_value(0, 8, 4, 5) == [1, 1, 1, 5]

    @pytest.mark.parametrize(
        "n, elements, max_width, exclude, count",
        [
            # outer sign, odd subset of group 0 and even subset of group 4
            (12, 4, 8, False, 161),
            (12, 4, 8, True, 126),
            # inner sign, even subset of group 0
            (10, 4, 7, False, 84),
            # expanded sign, odd subset of group 0
            (12, 4, 7, True, 87),
            # limited check sign halves
            (8, 6, 3, False, 21),
        ],
    )
    def test_bijection(
        self, n: int, elements: int, max_width: int, exclude: bool, count: int
    ) -> None:
        seen = set()
        for value in range(count):
            widths = widths_from_value(value, n, elements, max_width, exclude)
            assert len(widths) == elements
            assert sum(widths) == n
            assert all(1 <= w <= max_width for w in widths)
            assert value_from_widths(widths, max_width, exclude) == value
            seen.add(tuple(widths))
        assert len(seen) == count

    def test_inverse_of_known_pattern(self) -> None:
        assert value_from_widths([1, 1, 1, 5], 5) == 0
