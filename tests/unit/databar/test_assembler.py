"""Unit-тесты для assembler.py: сборка знаков и шаблонов поиска."""

from __future__ import annotations

import pytest

from src.databar import checksum
from src.databar.assembler import (
    EXPANDED_FINDER_ORDER,
    OmniSigns,
    assemble_expanded,
    assemble_limited,
    assemble_omni,
    finder_order,
    finder_widths,
)
from src.databar.ai import parse_element_string
from src.databar.compaction import build_binary_string
from src.databar.exceptions import EncodingInvariantError
from src.databar.signs import OMNI_FINDERS, expanded_sign


@pytest.fixture
def omni_signs() -> OmniSigns:
    return assemble_omni("00123456789012")


class TestOmnidirectional:
    def test_linear_sequence(self, omni_signs: OmniSigns) -> None:
        widths = omni_signs.linear()
        assert len(widths) == 46
        assert sum(widths) == 96
        assert widths[:2] == [1, 1]
        assert widths[-2:] == [1, 1]

    def test_rows_of_stacked_symbol(self, omni_signs: OmniSigns) -> None:
        upper = omni_signs.upper_row()
        lower = omni_signs.lower_row()
        assert len(upper) == len(lower) == 25
        assert sum(upper) == sum(lower) == 50

    def test_rows_hold_same_elements_as_linear(self, omni_signs: OmniSigns) -> None:
        upper = omni_signs.upper_row()
        lower = omni_signs.lower_row()
        assert upper[:-2] + lower[2:] == omni_signs.linear()

    def test_checksum_selects_finders(self, omni_signs: OmniSigns) -> None:
        left, right = checksum.finder_indices(omni_signs.checksum)
        assert omni_signs.left_finder == OMNI_FINDERS[left]
        assert omni_signs.right_finder == OMNI_FINDERS[right]
        assert 0 <= omni_signs.checksum <= 80

    def test_checksum_recomputes(self, omni_signs: OmniSigns) -> None:
        signs = (
            omni_signs.outer_left,
            omni_signs.inner_left,
            omni_signs.outer_right,
            omni_signs.inner_right,
        )
        assert checksum.omni_checksum(signs) == omni_signs.checksum

    def test_deterministic(self) -> None:
        assert assemble_omni("09999999999999") == assemble_omni("09999999999999")

    @pytest.mark.parametrize("value", ["00000000000000", "09999999999999", "01000000000000"])
    def test_extreme_values(self, value: str) -> None:
        assert len(assemble_omni(value).linear()) == 46


class TestLimited:
    @pytest.mark.parametrize("value", ["00123456789012", "01501234567890", "00000000000000", "01999999999999"])
    def test_sequence(self, value: str) -> None:
        widths = assemble_limited(value)
        assert len(widths) == 47
        assert sum(widths) == 79
        assert widths[:2] == [1, 1]
        assert widths[-3:] == [1, 1, 5]


class TestExpandedFinders:
    def test_order_table_shape(self) -> None:
        assert len(EXPANDED_FINDER_ORDER) == 10
        for row, order in enumerate(EXPANDED_FINDER_ORDER):
            assert len(order) == row + 2
            assert order[0] == 1

    @pytest.mark.parametrize(
        "data_signs, order",
        [
            (3, (1, -1)),
            (4, (1, -2, 2)),
            (5, (1, -2, 2)),
            (6, (1, -3, 2, -4)),
            (20, (1, -1, 2, -2, 3, -4, 4, -5, 5, -6, 6)),
            (21, (1, -1, 2, -2, 3, -4, 4, -5, 5, -6, 6)),
        ],
    )
    def test_finder_order(self, data_signs: int, order: tuple) -> None:
        assert finder_order(data_signs) == order

    @pytest.mark.parametrize("data_signs", [0, 2, 22])
    def test_finder_order_out_of_range(self, data_signs: int) -> None:
        with pytest.raises(EncodingInvariantError, match="3 to 21"):
            finder_order(data_signs)

    @pytest.mark.parametrize(
        "sequence",
        [
            "A1 A2",
            "A1 B2 B1",
            "A1 C2 B1 D2",
            "A1 E2 B1 D2 C1",
            "A1 E2 B1 D2 D1 F2",
            "A1 E2 B1 D2 E1 F2 F1",
            "A1 A2 B1 B2 C1 C2 D1 D2",
            "A1 A2 B1 B2 C1 C2 D1 E2 E1",
            "A1 A2 B1 B2 C1 C2 D1 E2 F1 F2",
            "A1 A2 B1 B2 C1 D2 D1 E2 E1 F2 F1",
        ],
    )
    def test_order_table_follows_letter_sequences(self, sequence: str) -> None:
        # letter A..F is finder value 1..6, suffix 2 marks the mirrored form
        codes = tuple(
            (ord(item[0]) - ord("A") + 1) * (1 if item[1] == "1" else -1)
            for item in sequence.split()
        )
        assert codes in EXPANDED_FINDER_ORDER
        assert EXPANDED_FINDER_ORDER[len(codes) - 2] == codes

    def test_mirrored_finder(self) -> None:
        assert finder_widths(2) == [3, 6, 4, 1, 1]
        assert finder_widths(-2) == [1, 1, 4, 6, 3]


class TestExpanded:
    def test_three_codewords(self) -> None:
        signs = assemble_expanded([0, 1, 2])
        assert signs.finder_order == (1, -1)
        assert signs.data_sign_count == 3
        widths = signs.linear()
        assert len(widths) == 46
        assert sum(widths) == 102

    def test_check_value_includes_sign_count(self) -> None:
        signs = assemble_expanded([0, 1, 2, 3])
        assert signs.finder_order == (1, -2, 2)
        assert len(signs.signs) == 5
        assert sum(signs.linear()) == 4 + 17 * 5 + 15 * 3

    def test_odd_signs_are_mirrored(self) -> None:
        signs = assemble_expanded([5, 6, 7])
        assert signs.sign_widths(1) == list(reversed(signs.signs[1]))
        assert signs.sign_widths(2) == list(signs.signs[2])

    def test_too_few_codewords(self) -> None:
        with pytest.raises(EncodingInvariantError):
            assemble_expanded([0, 1])

    def test_gtin_of_zeros_reference(self) -> None:
        # "(01)00000000000000": codewords of the GTIN method, check value 387
        signs = assemble_expanded([1536, 0, 0, 0])
        assert signs.finder_order == (1, -2, 2)
        assert signs.signs[0] == tuple(expanded_sign(387))
        assert signs.signs[0] == (1, 4, 1, 1, 4, 1, 4, 1)

    def test_twenty_codeword_check_character(self) -> None:
        # eleven finders, with D2 left of the tenth data sign
        codewords = build_binary_string(parse_element_string("(91)" + "ab" * 15)).codewords
        assert len(codewords) == 20
        signs = assemble_expanded(codewords)
        assert signs.finder_order == (1, -1, 2, -2, 3, -4, 4, -5, 5, -6, 6)
        assert signs.signs[0] == tuple(expanded_sign(3704))
