# -*- coding: utf-8 -*-
"""
RU: Параметры кодирования и геометрия вариантов GS1 DataBar.
EN: Encoding options and per-variant geometry of GS1 DataBar symbols.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Optional

from src.databar.exceptions import InvalidValueError
from src.model.enums import DataBarVariant

logger = logging.getLogger(__name__)

MIN_SEGMENTS_PER_ROW: Final[int] = 2
MAX_SEGMENTS_PER_ROW: Final[int] = 22


@dataclass(frozen=True)
class EncodeOptions:
    """
    Options of a single encode call.

    Attributes:
        module_width: Pixels (or other units) per narrow module.
        bar_height: Data row height in modules; ``None`` selects the
            variant default. Clamped to the variant range.
        segments_per_row: Expanded Stacked only, even number 2..22.
        checksum_mandatory: Treat the last GTIN digit as a check digit
            whatever the input length.

    Examples:
        >>> EncodeOptions().segments_per_row
        4
        >>> EncodeOptions(segments_per_row=3)
        Traceback (most recent call last):
        ...
        InvalidValueError: ...
    """

    module_width: int = 1
    bar_height: Optional[int] = None
    segments_per_row: int = 4
    checksum_mandatory: bool = False

    def __post_init__(self) -> None:
        """Validate parameters."""
        if self.module_width < 1:
            raise InvalidValueError(
                "module_width must be >= 1", context={"module_width": self.module_width}
            )
        if self.bar_height is not None and self.bar_height < 1:
            raise InvalidValueError(
                "bar_height must be >= 1", context={"bar_height": self.bar_height}
            )
        if (
            self.segments_per_row % 2 != 0
            or not MIN_SEGMENTS_PER_ROW <= self.segments_per_row <= MAX_SEGMENTS_PER_ROW
        ):
            raise InvalidValueError(
                "segments_per_row must be an even number between 2 and 22",
                context={"segments_per_row": self.segments_per_row},
            )


@dataclass(frozen=True)
class VariantGeometry:
    """
    Fixed geometry of one variant.

    Attributes:
        display_name: English symbology name.
        min_height: Smallest data row height in modules.
        default_height: Height used when no bar height is requested.
        max_height: Largest data row height, ``None`` when unbounded.
        modulus: Checksum modulus of the variant.
        element_count: Elements of the linear width sequence, ``None`` for
            variants whose length depends on the data.
    """

    display_name: str
    min_height: int
    default_height: int
    max_height: Optional[int]
    modulus: int
    element_count: Optional[int]

    def clamp_height(self, requested: Optional[int]) -> int:
        """Return the requested data row height limited to the variant range."""
        if requested is None:
            return self.default_height
        height = max(requested, self.min_height)
        if self.max_height is not None:
            height = min(height, self.max_height)
        if height != requested:
            logger.warning(
                "%s: bar height %d clamped to %d", self.display_name, requested, height
            )
        return height


VARIANT_GEOMETRY: Final[dict[DataBarVariant, VariantGeometry]] = {
    DataBarVariant.OMNIDIRECTIONAL: VariantGeometry(
        display_name="GS1 DataBar Omnidirectional",
        min_height=33,
        default_height=33,
        max_height=None,
        modulus=79,
        element_count=46,
    ),
    DataBarVariant.TRUNCATED: VariantGeometry(
        display_name="GS1 DataBar Truncated",
        min_height=13,
        default_height=13,
        max_height=33,
        modulus=79,
        element_count=46,
    ),
    # upper 5X and lower 7X rows, height is fixed
    DataBarVariant.STACKED: VariantGeometry(
        display_name="GS1 DataBar Stacked",
        min_height=5,
        default_height=5,
        max_height=5,
        modulus=79,
        element_count=50,
    ),
    # total height including the three separator rows
    DataBarVariant.STACKED_OMNIDIRECTIONAL: VariantGeometry(
        display_name="GS1 DataBar Stacked Omnidirectional",
        min_height=69,
        default_height=69,
        max_height=None,
        modulus=79,
        element_count=50,
    ),
    DataBarVariant.LIMITED: VariantGeometry(
        display_name="GS1 DataBar Limited",
        min_height=10,
        default_height=10,
        max_height=None,
        modulus=89,
        element_count=47,
    ),
    DataBarVariant.EXPANDED: VariantGeometry(
        display_name="GS1 DataBar Expanded",
        min_height=34,
        default_height=34,
        max_height=None,
        modulus=211,
        element_count=None,
    ),
    DataBarVariant.EXPANDED_STACKED: VariantGeometry(
        display_name="GS1 DataBar Expanded Stacked",
        min_height=34,
        default_height=34,
        max_height=None,
        modulus=211,
        element_count=None,
    ),
}


def geometry_for(variant: DataBarVariant) -> VariantGeometry:
    return VARIANT_GEOMETRY[variant]


__all__ = [
    "EncodeOptions",
    "VariantGeometry",
    "VARIANT_GEOMETRY",
    "geometry_for",
    "MIN_SEGMENTS_PER_ROW",
    "MAX_SEGMENTS_PER_ROW",
]
