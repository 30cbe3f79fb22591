from io import BytesIO

import pytest
from PIL import Image

from src.databar import encode, render_bytes, render_image
from src.databar.config import EncodeOptions
from src.model.enums import DataBarVariant


class TestRenderImage:
    """Pillow preview of encoded symbols."""

    @pytest.fixture
    def omni_symbol(self):
        return encode("0123456789012", DataBarVariant.OMNIDIRECTIONAL)

    def test_size_includes_quiet_zone(self, omni_symbol) -> None:
        img = render_image(omni_symbol)
        assert img.size == (98, 35)
        assert img.mode == "RGB"

    def test_custom_quiet_zone_and_module_width(self) -> None:
        symbol = encode(
            "0123456789012", DataBarVariant.OMNIDIRECTIONAL, EncodeOptions(module_width=2)
        )
        img = render_image(symbol, {"quiet_zone": 5})
        assert img.size == (96 * 2 + 20, 33 * 2 + 20)

    def test_bars_are_drawn(self, omni_symbol) -> None:
        img = render_image(omni_symbol, {"quiet_zone": 0})
        # guard: one light module, then one dark module
        assert img.getpixel((0, 0)) == (255, 255, 255)
        assert img.getpixel((1, 0)) == (0, 0, 0)
        assert img.getpixel((1, 32)) == (0, 0, 0)

    def test_quiet_zone_is_light(self, omni_symbol) -> None:
        img = render_image(omni_symbol, {"quiet_zone": 3})
        assert img.getpixel((0, 0)) == (255, 255, 255)
        assert img.getpixel((4, 3)) == (0, 0, 0)

    def test_stacked_rows(self) -> None:
        symbol = encode("0123456789012", DataBarVariant.STACKED)
        img = render_image(symbol, {"quiet_zone": 0})
        assert img.size == (50, 13)
        # lower row starts with a bar
        assert img.getpixel((0, 12)) == (0, 0, 0)
        assert img.getpixel((0, 0)) == (255, 255, 255)

    def test_bilevel_mode(self, omni_symbol) -> None:
        img = render_image(omni_symbol, {"mode": "1"})
        assert img.mode == "1"

    def test_invalid_mode(self, omni_symbol) -> None:
        with pytest.raises(ValueError, match="Unsupported image mode"):
            render_image(omni_symbol, {"mode": "CMYK"})

    def test_negative_quiet_zone(self, omni_symbol) -> None:
        with pytest.raises(ValueError, match="quiet_zone"):
            render_image(omni_symbol, {"quiet_zone": -1})


class TestRenderBytes:
    def test_png(self) -> None:
        symbol = encode("(01)90012345678908(3103)001234", DataBarVariant.EXPANDED_STACKED)
        data = render_bytes(symbol)
        assert data.startswith(b"\x89PNG")
        img = Image.open(BytesIO(data))
        assert img.size == (symbol.width + 2, symbol.height + 2)

    def test_other_format(self) -> None:
        symbol = encode("1501234567890", DataBarVariant.LIMITED)
        data = render_bytes(symbol, format="BMP")
        assert data.startswith(b"BM")


def test_module_docstring() -> None:
    from src.databar import render

    assert render.__doc__
    assert render.__doc__.lstrip().startswith("RU:")
    assert "EN:" in render.__doc__
