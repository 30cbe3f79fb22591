"""Unit-тесты для gtin.py."""

from __future__ import annotations

import pytest

from src.databar.exceptions import InvalidValueError
from src.databar.gtin import (
    check_limited_indicator,
    gtin_encoded_value,
    is_gtin,
    normalize_gtin,
    strip_ai_prefix,
)


class TestNormalizeGtin:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("(01)01234567890128", "01234567890128"),
            ("01234567890128", "01234567890128"),
            ("0123456789012", "01234567890128"),
            ("123456789012", "01234567890128"),
            ("9001234567890", "90012345678908"),
            ("5", "00000000000055"),
        ],
    )
    def test_normalization(self, value: str, expected: str) -> None:
        assert normalize_gtin(value) == expected

    def test_checksum_mandatory_verifies_short_values(self) -> None:
        assert normalize_gtin("1234567890128", checksum_mandatory=True) == "01234567890128"
        with pytest.raises(InvalidValueError, match="check digit"):
            normalize_gtin("1234567890127", checksum_mandatory=True)

    @pytest.mark.parametrize(
        "value, message",
        [
            ("", "1 to 14 digits"),
            ("(01)", "1 to 14 digits"),
            ("123456789012345", "1 to 14 digits"),
            ("01234A67890128", "only digits"),
            ("01234567890127", "check digit"),
        ],
    )
    def test_rejects(self, value: str, message: str) -> None:
        with pytest.raises(InvalidValueError, match=message):
            normalize_gtin(value)

    def test_is_gtin(self) -> None:
        assert is_gtin("01234567890128")
        assert not is_gtin("01234567890129")

    def test_strip_ai_prefix(self) -> None:
        assert strip_ai_prefix("(01)123") == "123"
        assert strip_ai_prefix("(02)123") == "(02)123"


class TestEncodedValue:
    def test_drawn_value_drops_check_digit(self) -> None:
        assert gtin_encoded_value("01234567890128") == "00123456789012"

    def test_caption(self) -> None:
        assert gtin_encoded_value("01234567890128", for_caption=True) == "(01)01234567890128"


class TestLimitedIndicator:
    @pytest.mark.parametrize("gtin", ["01234567890128", "15012345678907"])
    def test_accepts_zero_and_one(self, gtin: str) -> None:
        check_limited_indicator(gtin)

    def test_rejects_higher_indicator(self) -> None:
        with pytest.raises(InvalidValueError, match="indicator digit 0 or 1"):
            check_limited_indicator("25012345678905")
