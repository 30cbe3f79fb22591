"""
databar

Кодировщик штрихкодов семейства GS1 DataBar (ISO/IEC 24724).

- Omnidirectional, Truncated, Stacked, Stacked Omnidirectional и Limited для GTIN.
- Expanded и Expanded Stacked для строк элементов с Application Identifier.
- Результат: :class:`Symbol` из рядов пробегов (модули, штрих/пробел).

Public API:
    - encode: кодирование значения в символ (function)
    - validate: проверка, можно ли закодировать значение (function)
    - encoded_value: значение в символе или в подписи (function)
    - EncodeOptions: параметры кодирования (frozen dataclass)
    - Symbol, SymbolRow, Run: модель результата
    - DataBarError, InvalidValueError, UnsupportedAIError, EncodingInvariantError
    - render_image, render_bytes, RenderOptions: предпросмотр через Pillow

Примеры:
    >>> from src.databar import encode, render_bytes
    >>> from src.model.enums import DataBarVariant
    >>> symbol = encode("(01)90012345678908(3103)001234", DataBarVariant.EXPANDED)
    >>> png = render_bytes(symbol)

Зависимости:
    Pillow
"""

from src.databar.config import EncodeOptions, VariantGeometry, geometry_for
from src.databar.encoder import encode, encoded_value, validate
from src.databar.exceptions import (
    DataBarError,
    EncodingInvariantError,
    InvalidValueError,
    UnsupportedAIError,
)
from src.databar.layout import Run, Symbol, SymbolRow
from src.databar.render import RenderOptions, render_bytes, render_image

__all__ = [
    "encode",
    "validate",
    "encoded_value",
    "EncodeOptions",
    "VariantGeometry",
    "geometry_for",
    "Symbol",
    "SymbolRow",
    "Run",
    "DataBarError",
    "InvalidValueError",
    "UnsupportedAIError",
    "EncodingInvariantError",
    "RenderOptions",
    "render_image",
    "render_bytes",
]
