"""Unit-тесты для ai.py: таблица AI и разбор строки элементов."""

from __future__ import annotations

import pytest

from src.databar.ai import (
    FNC1,
    Element,
    bracket_element_string,
    caption_text,
    data_stream,
    is_predefined_length,
    lookup_ai,
    parse_element_string,
)
from src.databar.exceptions import InvalidValueError, UnsupportedAIError


class TestLookup:
    @pytest.mark.parametrize("ai", ["01", "10", "3103", "3202", "3922", "420", "8200", "91"])
    def test_known(self, ai: str) -> None:
        assert lookup_ai(ai) is not None

    @pytest.mark.parametrize("ai", ["05", "310", "31030", "999"])
    def test_unknown(self, ai: str) -> None:
        assert lookup_ai(ai) is None

    def test_predefined_length(self) -> None:
        assert is_predefined_length("01")
        assert is_predefined_length("3103")
        assert not is_predefined_length("10")
        assert not is_predefined_length("420")

    def test_two_part_format(self) -> None:
        definition = lookup_ai("253")
        assert definition is not None
        assert definition.accepts("1234567890123ABC")
        assert not definition.accepts("12345678901")
        assert definition.max_data_length == 30


class TestParseElementString:
    def test_parses_elements(self) -> None:
        elements = parse_element_string("(01)98898765432106(3202)012345(15)991231")
        assert elements == [
            Element("01", "98898765432106"),
            Element("3202", "012345"),
            Element("15", "991231"),
        ]

    @pytest.mark.parametrize("value", ["", "01)123", "(01", "abc", "(01)(02)", "((01))1"])
    def test_malformed(self, value: str) -> None:
        with pytest.raises(InvalidValueError):
            parse_element_string(value)

    def test_unsupported_ai(self) -> None:
        with pytest.raises(UnsupportedAIError, match=r"\(05\)"):
            parse_element_string("(05)123")

    def test_wrong_check_digit(self) -> None:
        with pytest.raises(InvalidValueError, match="check digit"):
            parse_element_string("(01)90012345678907")

    def test_format_mismatch(self) -> None:
        with pytest.raises(InvalidValueError, match="does not match"):
            parse_element_string("(3103)12345")

    def test_unencodable_characters(self) -> None:
        with pytest.raises(InvalidValueError, match="cannot be encoded"):
            parse_element_string("(10)AB#C")

    def test_too_many_characters(self) -> None:
        with pytest.raises(InvalidValueError, match="exceeds"):
            parse_element_string("(21)" + "1" * 20 + "(22)" + "2" * 20 + "(10)" + "3" * 20 + "(420)" + "4" * 20)

    def test_too_many_alphanumeric_characters(self) -> None:
        with pytest.raises(InvalidValueError, match="exceeds"):
            parse_element_string("(21)" + "A" * 20 + "(22)" + "B" * 20 + "(10)" + "C" * 2)

    def test_limits_accepted(self) -> None:
        elements = parse_element_string("(21)" + "A" * 20 + "(22)" + "B" * 20 + "(10)1")
        assert len(elements) == 3


class TestDataStream:
    def test_fnc1_after_variable_length_elements(self) -> None:
        elements = parse_element_string("(10)ABC(21)XYZ")
        assert data_stream(elements) == "10ABC" + FNC1 + "21XYZ"

    def test_no_fnc1_after_predefined_length(self) -> None:
        elements = parse_element_string("(01)90012345678908(3103)001234")
        assert data_stream(elements) == "01900123456789083103001234"

    def test_caption(self) -> None:
        value = "(01)90012345678908(10)ABC"
        assert caption_text(parse_element_string(value)) == value


class TestBracketElementString:
    def test_inserts_brackets(self) -> None:
        raw = "0199312650999998|91ZLE0001|4201890"
        assert bracket_element_string(raw) == "(01)99312650999998(91)ZLE0001(420)1890"

    def test_fixed_length_without_separator(self) -> None:
        assert bracket_element_string("01900123456789083103001234") == (
            "(01)90012345678908(3103)001234"
        )

    def test_unknown_ai(self) -> None:
        with pytest.raises(InvalidValueError, match="Cannot find AI"):
            bracket_element_string("05123")
