"""Unit-тесты для signs.py: таблицы групп и ширины знаков."""

from __future__ import annotations

from typing import Callable, List

import pytest

from src.databar.exceptions import EncodingInvariantError
from src.databar.signs import (
    EXPANDED_FINDERS,
    EXPANDED_TABLE,
    INNER_TABLE,
    LIMITED_CHECK_SERIES,
    LIMITED_TABLE,
    OMNI_FINDERS,
    OUTER_TABLE,
    expanded_sign,
    inner_sign,
    interleave,
    limited_check_sign,
    limited_sign,
    outer_sign,
)


def _boundaries(table) -> List[int]:
    values: List[int] = []
    for group in table.groups:
        values.extend([group.g_sum, group.upper])
    return values


class TestSignWidths:
    @pytest.mark.parametrize(
        "table, sign, elements, modules",
        [
            (OUTER_TABLE, outer_sign, 8, 16),
            (INNER_TABLE, inner_sign, 8, 15),
            (EXPANDED_TABLE, expanded_sign, 8, 17),
            (LIMITED_TABLE, limited_sign, 14, 26),
        ],
    )
    def test_group_boundaries(
        self, table, sign: Callable[[int], List[int]], elements: int, modules: int
    ) -> None:
        for value in _boundaries(table):
            widths = sign(value)
            assert len(widths) == elements
            assert sum(widths) == modules
            assert all(w >= 1 for w in widths)

    def test_groups_are_contiguous(self) -> None:
        for table in (OUTER_TABLE, INNER_TABLE, EXPANDED_TABLE, LIMITED_TABLE):
            assert table.groups[0].g_sum == 0
            for previous, group in zip(table.groups, table.groups[1:]):
                assert group.g_sum == previous.upper + 1

    def test_group_sizes_match_subset_counts(self) -> None:
        for table in (OUTER_TABLE, INNER_TABLE, EXPANDED_TABLE, LIMITED_TABLE):
            for group in table.groups:
                assert group.upper - group.g_sum + 1 == group.t_odd * group.t_even

    def test_distinct_values_give_distinct_signs(self) -> None:
        patterns = {tuple(outer_sign(v)) for v in range(0, 2841, 7)}
        assert len(patterns) == len(range(0, 2841, 7))

    @pytest.mark.parametrize("value", [-1, 2841])
    def test_out_of_range(self, value: int) -> None:
        with pytest.raises(EncodingInvariantError, match="out of range"):
            outer_sign(value)

    def test_interleave(self) -> None:
        assert interleave([1, 2], [3, 4]) == [1, 3, 2, 4]


class TestFinders:
    def test_omni_finders(self) -> None:
        assert len(OMNI_FINDERS) == 9
        assert all(sum(f) == 15 and len(f) == 5 for f in OMNI_FINDERS)

    def test_expanded_finders(self) -> None:
        assert len(EXPANDED_FINDERS) == 6
        assert all(sum(f) == 15 and len(f) == 5 for f in EXPANDED_FINDERS)


class TestLimitedCheckSign:
    def test_series_length(self) -> None:
        assert len(LIMITED_CHECK_SERIES) == 89
        assert len(set(LIMITED_CHECK_SERIES)) == 89

    @pytest.mark.parametrize("checksum", [0, 1, 43, 44, 88])
    def test_shape(self, checksum: int) -> None:
        widths = limited_check_sign(checksum)
        assert len(widths) == 14
        assert sum(widths) == 18
        assert widths[-2:] == [1, 1]
