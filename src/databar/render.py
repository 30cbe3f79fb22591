"""
RU: Растеризация символа GS1 DataBar в изображение Pillow.
EN: Rasterization of a GS1 DataBar symbol into a Pillow image.

Each row of the symbol is drawn as dark rectangles scaled by the module
width, inside a light quiet zone. PNG and the other Pillow formats come
out of :func:`render_bytes`.
"""

from __future__ import annotations

import logging
from io import BytesIO
from typing import Optional, TypedDict

from PIL import Image, ImageDraw

from src.databar.layout import Symbol

logger = logging.getLogger(__name__)

__all__ = [
    "RenderOptions",
    "render_image",
    "render_bytes",
]


class RenderOptions(TypedDict, total=False):
    """
    Типобезопасные опции предпросмотра символа.

    Example:
        >>> options: RenderOptions = {"quiet_zone": 2, "mode": "1"}
        >>> img = render_image(symbol, options)
    """

    quiet_zone: int  # Пустая зона вокруг символа (в модулях)
    mode: str  # Режим Pillow: "RGB" или "1"


_DEFAULTS: RenderOptions = {
    "quiet_zone": 1,
    "mode": "RGB",
}

_DARK = {"RGB": (0, 0, 0), "L": 0, "1": 0}
_LIGHT = {"RGB": (255, 255, 255), "L": 255, "1": 1}


def render_image(symbol: Symbol, options: Optional[RenderOptions] = None) -> Image.Image:
    """
    Рендеринг символа в изображение Pillow.

    Каждый ряд рисуется прямоугольниками тёмных пробегов; высота ряда и
    ширина модуля берутся из символа.

    Args:
        symbol: Результат :func:`src.databar.encode`.
        options: Пустая зона и режим изображения.

    Returns:
        PIL Image объект.

    Raises:
        ValueError: Неподдерживаемый режим или отрицательная пустая зона.
    """
    opts: RenderOptions = {**_DEFAULTS, **(options or {})}
    mode = opts["mode"]
    if mode not in _DARK:
        raise ValueError(f"Unsupported image mode: {mode!r}")
    if opts["quiet_zone"] < 0:
        raise ValueError("quiet_zone must be >= 0")

    module = symbol.module_width
    margin = opts["quiet_zone"] * module
    width = symbol.width + 2 * margin
    height = symbol.height + 2 * margin
    logger.debug(
        "Rendering %s preview %dx%d px (mode=%s)", symbol.variant.value, width, height, mode
    )

    img = Image.new(mode, (width, height), color=_LIGHT[mode])
    draw = ImageDraw.Draw(img)
    y = margin
    for row in symbol.rows:
        row_height = row.height * module
        x = margin
        for run in row.runs:
            run_width = run.modules * module
            if run.is_bar:
                draw.rectangle(
                    [x, y, x + run_width - 1, y + row_height - 1], fill=_DARK[mode]
                )
            x += run_width
        y += row_height
    return img


def render_bytes(
    symbol: Symbol,
    format: str = "PNG",
    options: Optional[RenderOptions] = None,
) -> bytes:
    img = render_image(symbol, options)
    buf = BytesIO()
    img.save(buf, format=format)
    buf.seek(0)
    return buf.read()
