import logging
from dataclasses import fields

import pytest

from src.databar.exceptions import InvalidValueError
from src.model.barcodegen import Barcode
from src.model.enums import DataBarVariant


def test_barcode_minimal() -> None:
    b = Barcode(variant=DataBarVariant.OMNIDIRECTIONAL, data="0123456789012")
    assert b.variant == DataBarVariant.OMNIDIRECTIONAL
    assert b.data == "0123456789012"
    assert b.options == {}


def test_barcode_full_fields_round_trip() -> None:
    b = Barcode(
        variant=DataBarVariant.EXPANDED_STACKED,
        data="(01)90012345678908(3103)001234",
        caption="Weight 1.234 kg",
        options={"segments_per_row": 2, "bar_height": 40},
        validation_state="ok",
    )
    d = b.to_dict()
    assert d["variant"] == "expanded_stacked"
    assert d["schema_version"] == Barcode.schema_version
    b2 = Barcode.from_dict(d)
    assert b2 == b


def test_barcode_fields_are_symbol_only() -> None:
    assert [f.name for f in fields(Barcode)] == [
        "variant",
        "data",
        "caption",
        "options",
        "validation_state",
        "validation_error_message",
    ]
    d = Barcode(variant=DataBarVariant.LIMITED, data="1501234567890").to_dict()
    assert "position" not in d
    assert "metadata" not in d


def test_from_dict_schema_mismatch_warns(caplog: pytest.LogCaptureFixture) -> None:
    d = Barcode(variant=DataBarVariant.LIMITED, data="1501234567890").to_dict()
    d["schema_version"] = "0.9"
    with caplog.at_level(logging.WARNING):
        b = Barcode.from_dict(d)
    assert b.variant is DataBarVariant.LIMITED
    assert "Schema version mismatch" in caplog.text


def test_barcode_str() -> None:
    b = Barcode(variant=DataBarVariant.EXPANDED, data="(01)90012345678908(3103)001234")
    assert str(b) == "Barcode(expanded, data=(01)900123456789...)"


@pytest.mark.parametrize(
    "variant, data",
    [
        (DataBarVariant.OMNIDIRECTIONAL, "0123456789012"),
        (DataBarVariant.TRUNCATED, "(01)01234567890128"),
        (DataBarVariant.STACKED, "0123456789012"),
        (DataBarVariant.STACKED_OMNIDIRECTIONAL, "0123456789012"),
        (DataBarVariant.LIMITED, "1501234567890"),
        (DataBarVariant.EXPANDED, "(01)90012345678908(3103)001234"),
        (DataBarVariant.EXPANDED_STACKED, "(10)ABC123(21)xyz"),
    ],
)
def test_validate_ok(variant: DataBarVariant, data: str) -> None:
    b = Barcode(variant=variant, data=data)
    assert b.validate() is True
    assert b.validation_state == "ok"
    assert b.validation_error_message is None


def test_validate_records_error() -> None:
    b = Barcode(variant=DataBarVariant.LIMITED, data="2501234567890")
    assert b.validate(record_error=True) is False
    assert b.validation_state == "invalid"
    assert "indicator digit" in (b.validation_error_message or "")


def test_validate_raises_without_record() -> None:
    b = Barcode(variant=DataBarVariant.OMNIDIRECTIONAL, data="01234567890129")
    with pytest.raises(InvalidValueError, match="check digit"):
        b.validate()
    assert b.validation_state == "invalid"


@pytest.mark.parametrize(
    "kwargs, message",
    [
        ({"data": "   "}, "non-empty"),
        ({"data": "0123456789012", "options": {"segments_per_row": 2}}, "not allowed"),
        ({"data": "0123456789012", "options": {"foreground": "red"}}, "not allowed"),
        ({"data": "0123456789012", "options": {"module_width": 0}}, "module_width"),
    ],
)
def test_validate_field_errors(kwargs: dict, message: str) -> None:
    b = Barcode(variant=DataBarVariant.OMNIDIRECTIONAL, **kwargs)
    with pytest.raises(ValueError, match=message):
        b.validate()


def test_supported_matrix() -> None:
    manifest = Barcode.supported_matrix()
    assert set(manifest) == {v.value for v in DataBarVariant}
    assert manifest["expanded"]["input"] == "element_string"
    assert manifest["limited"]["input"] == "gtin"
    assert "segments_per_row" in manifest["expanded_stacked"]["options_allowlist"]
    assert "segments_per_row" not in manifest["expanded"]["options_allowlist"]
    assert manifest["truncated"]["max_height"] == 33


def test_encode_uses_options() -> None:
    b = Barcode(
        variant=DataBarVariant.OMNIDIRECTIONAL,
        data="0123456789012",
        options={"module_width": 2, "bar_height": 40},
    )
    symbol = b.encode()
    assert symbol.width == 192
    assert symbol.height_modules == 40


def test_human_readable() -> None:
    b = Barcode(variant=DataBarVariant.OMNIDIRECTIONAL, data="0123456789012")
    assert b.human_readable() == "(01)01234567890128"
    b.caption = "custom"
    assert b.human_readable() == "custom"


def test_render() -> None:
    b = Barcode(variant=DataBarVariant.STACKED, data="0123456789012")
    img = b.render_image({"quiet_zone": 0})
    assert img.size == (50, 13)
    assert b.render_bytes().startswith(b"\x89PNG")
