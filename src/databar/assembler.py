"""
RU: Сборка знаков, шаблонов поиска и ограничителей в последовательности ширин.
EN: Assembly of signs, finder and guard patterns into width sequences.

Bars and spaces alternate; a linear sequence always starts with a space
(bars at odd element indices).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, List, Sequence, Tuple

from src.databar import checksum
from src.databar.exceptions import EncodingInvariantError
from src.databar.signs import (
    EXPANDED_FINDERS,
    GUARD,
    LIMITED_RIGHT_GUARD,
    OMNI_FINDERS,
    expanded_sign,
    inner_sign,
    limited_check_sign,
    limited_sign,
    outer_sign,
)

logger = logging.getLogger(__name__)

__all__ = [
    "OMNI_HALF_DIVISOR",
    "OMNI_INNER_DIVISOR",
    "LIMITED_DIVISOR",
    "OMNI_ELEMENT_COUNT",
    "STACKED_ROW_ELEMENTS",
    "STACKED_ROW_MODULES",
    "LIMITED_ELEMENT_COUNT",
    "EXPANDED_FINDER_ORDER",
    "OmniSigns",
    "ExpandedSigns",
    "assemble_omni",
    "assemble_limited",
    "assemble_expanded",
    "finder_order",
]

OMNI_HALF_DIVISOR: Final[int] = 4537077
OMNI_INNER_DIVISOR: Final[int] = 1597
LIMITED_DIVISOR: Final[int] = 2013571

OMNI_ELEMENT_COUNT: Final[int] = 46
STACKED_ROW_ELEMENTS: Final[int] = 25
STACKED_ROW_MODULES: Final[int] = 50
LIMITED_ELEMENT_COUNT: Final[int] = 47

# finder sequence per symbol size: k is pattern k (A=1), -k its mirror
EXPANDED_FINDER_ORDER: Final[Tuple[Tuple[int, ...], ...]] = (
    (1, -1),
    (1, -2, 2),
    (1, -3, 2, -4),
    (1, -5, 2, -4, 3),
    (1, -5, 2, -4, 4, -6),
    (1, -5, 2, -4, 5, -6, 6),
    (1, -1, 2, -2, 3, -3, 4, -4),
    (1, -1, 2, -2, 3, -3, 4, -5, 5),
    (1, -1, 2, -2, 3, -3, 4, -5, 6, -6),
    (1, -1, 2, -2, 3, -4, 4, -5, 5, -6, 6),
)

MIN_EXPANDED_DATA_SIGNS: Final[int] = 3
MAX_EXPANDED_DATA_SIGNS: Final[int] = 21


def _reversed(widths: Sequence[int]) -> List[int]:
    return list(reversed(widths))


def _expect_length(widths: Sequence[int], expected: int, what: str) -> None:
    if len(widths) != expected:
        logger.error("%s has %d elements, expected %d", what, len(widths), expected)
        raise EncodingInvariantError(
            f"{what} has a wrong number of elements",
            context={"elements": len(widths), "expected": expected},
        )


# ==============================================================================
# OMNIDIRECTIONAL FAMILY
# ==============================================================================


@dataclass(frozen=True)
class OmniSigns:
    """
    Four data signs of an Omnidirectional family symbol and their checksum.

    Attributes:
        outer_left: Sign 1 (16 modules), read left to right.
        inner_left: Sign 2 (15 modules), drawn mirrored.
        outer_right: Sign 3 (16 modules), drawn mirrored.
        inner_right: Sign 4 (15 modules), read left to right.
        checksum: Adjusted mod-79 checksum.
    """

    outer_left: Tuple[int, ...]
    inner_left: Tuple[int, ...]
    outer_right: Tuple[int, ...]
    inner_right: Tuple[int, ...]
    checksum: int

    @property
    def left_finder_index(self) -> int:
        return checksum.finder_indices(self.checksum)[0]

    @property
    def right_finder_index(self) -> int:
        return checksum.finder_indices(self.checksum)[1]

    @property
    def left_finder(self) -> Tuple[int, ...]:
        return OMNI_FINDERS[self.left_finder_index]

    @property
    def right_finder(self) -> Tuple[int, ...]:
        return OMNI_FINDERS[self.right_finder_index]

    def upper_row(self) -> List[int]:
        """Left half with guards: guard, sign 1, left finder, sign 2 mirrored, guard."""
        row = [
            *GUARD,
            *self.outer_left,
            *self.left_finder,
            *_reversed(self.inner_left),
            *GUARD,
        ]
        _expect_length(row, STACKED_ROW_ELEMENTS, "Stacked upper row")
        return row

    def lower_row(self) -> List[int]:
        """Right half with guards; drawn starting with a bar."""
        row = [
            *GUARD,
            *self.inner_right,
            *_reversed(self.right_finder),
            *_reversed(self.outer_right),
            *GUARD,
        ]
        _expect_length(row, STACKED_ROW_ELEMENTS, "Stacked lower row")
        return row

    def linear(self) -> List[int]:
        widths = [
            *GUARD,
            *self.outer_left,
            *self.left_finder,
            *_reversed(self.inner_left),
            *self.inner_right,
            *_reversed(self.right_finder),
            *_reversed(self.outer_right),
            *GUARD,
        ]
        _expect_length(widths, OMNI_ELEMENT_COUNT, "Omnidirectional symbol")
        return widths


def assemble_omni(drawn_value: str) -> OmniSigns:
    """
    Split the drawn value (linkage flag + 13 GTIN digits) into four signs.

    Example:
        >>> signs = assemble_omni("00123456789012")
        >>> len(signs.linear())
        46
    """
    value = int(drawn_value)
    left, right = divmod(value, OMNI_HALF_DIVISOR)
    d1, d2 = divmod(left, OMNI_INNER_DIVISOR)
    d3, d4 = divmod(right, OMNI_INNER_DIVISOR)

    s1 = outer_sign(d1)
    s2 = inner_sign(d2)
    s3 = outer_sign(d3)
    s4 = inner_sign(d4)
    check = checksum.omni_checksum((s1, s2, s3, s4))
    logger.debug("Omnidirectional values %d/%d/%d/%d, checksum %d", d1, d2, d3, d4, check)
    return OmniSigns(tuple(s1), tuple(s2), tuple(s3), tuple(s4), check)


# ==============================================================================
# LIMITED
# ==============================================================================


def assemble_limited(drawn_value: str) -> List[int]:
    """Guard, left sign, check sign, right sign, right guard (47 elements)."""
    left, right = divmod(int(drawn_value), LIMITED_DIVISOR)
    left_sign = limited_sign(left)
    right_sign = limited_sign(right)
    check = checksum.limited_checksum(left_sign, right_sign)
    logger.debug("Limited values %d/%d, checksum %d", left, right, check)

    widths = [
        *GUARD,
        *left_sign,
        *limited_check_sign(check),
        *right_sign,
        *LIMITED_RIGHT_GUARD,
    ]
    _expect_length(widths, LIMITED_ELEMENT_COUNT, "Limited symbol")
    return widths


# ==============================================================================
# EXPANDED FAMILY
# ==============================================================================


def finder_order(data_sign_count: int) -> Tuple[int, ...]:
    """Finder pattern sequence for a symbol with ``data_sign_count`` data signs."""
    if not MIN_EXPANDED_DATA_SIGNS <= data_sign_count <= MAX_EXPANDED_DATA_SIGNS:
        raise EncodingInvariantError(
            "Expanded symbol must have 3 to 21 data signs",
            context={"data_signs": data_sign_count},
        )
    if data_sign_count % 2 == 0:
        row = (data_sign_count - 2) // 2
    else:
        row = (data_sign_count - 3) // 2
    return EXPANDED_FINDER_ORDER[row]


def finder_widths(code: int) -> List[int]:
    """Widths of finder ``code``; a negative code gives the mirrored pattern."""
    pattern = EXPANDED_FINDERS[abs(code) - 1]
    return list(pattern) if code > 0 else _reversed(pattern)


@dataclass(frozen=True)
class ExpandedSigns:
    """
    Signs of an Expanded symbol in reading order.

    Attributes:
        signs: Check sign followed by the data signs (8 widths each).
        finder_order: Finder codes; finder ``i`` follows sign ``2*i``.
    """

    signs: Tuple[Tuple[int, ...], ...]
    finder_order: Tuple[int, ...]

    @property
    def data_sign_count(self) -> int:
        return len(self.signs) - 1

    def sign_widths(self, index: int) -> List[int]:
        """Sign ``index`` as drawn: even signs forward, odd signs mirrored."""
        sign = self.signs[index]
        return list(sign) if index % 2 == 0 else _reversed(sign)

    def finder_after(self, index: int) -> Tuple[int, List[int]]:
        """Finder code and widths following even sign ``index``."""
        code = self.finder_order[index // 2]
        return code, finder_widths(code)

    def linear(self) -> List[int]:
        widths: List[int] = list(GUARD)
        for index in range(len(self.signs)):
            widths.extend(self.sign_widths(index))
            if index % 2 == 0:
                widths.extend(self.finder_after(index)[1])
        widths.extend(GUARD)
        finders = (len(self.signs) + 1) // 2
        _expect_length(
            widths, 2 * len(GUARD) + 8 * len(self.signs) + 5 * finders, "Expanded symbol"
        )
        return widths


def assemble_expanded(codewords: Sequence[int]) -> ExpandedSigns:
    """
    Turn 12-bit data codewords into signs and prepend the check sign.

    Example:
        >>> assemble_expanded([0, 1, 2]).finder_order
        (1, -1)
    """
    order = finder_order(len(codewords))
    data = [expanded_sign(value) for value in codewords]
    check_value = checksum.EXPANDED_MODULUS * (len(codewords) - 3) + checksum.expanded_checksum(
        data, order
    )
    logger.debug("Expanded: %d data signs, check value %d", len(codewords), check_value)
    signs = (tuple(expanded_sign(check_value)),) + tuple(tuple(sign) for sign in data)
    return ExpandedSigns(signs, order)
