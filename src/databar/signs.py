"""
RU: Таблицы групп знаков и перевод значения знака в ширины элементов.
EN: Sign group tables and sign value -> element widths conversion.

Every sign is split into an odd and an even subset: the group row gives the
value range, the group base ``g_sum``, the module count of each subset, the
widest element allowed and the number of subsets on the other side
(``t_odd``/``t_even``) used to split the value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, List, Sequence, Tuple

from src.databar.combinatorics import widths_from_value
from src.databar.exceptions import EncodingInvariantError

logger = logging.getLogger(__name__)

__all__ = [
    "SignGroup",
    "SignTable",
    "OUTER_TABLE",
    "INNER_TABLE",
    "LIMITED_TABLE",
    "EXPANDED_TABLE",
    "OMNI_FINDERS",
    "EXPANDED_FINDERS",
    "GUARD",
    "LIMITED_RIGHT_GUARD",
    "LIMITED_CHECK_SERIES",
    "outer_sign",
    "inner_sign",
    "limited_sign",
    "expanded_sign",
    "limited_check_sign",
    "interleave",
]


@dataclass(frozen=True)
class SignGroup:
    upper: int
    g_sum: int
    n_odd: int
    n_even: int
    widest_odd: int
    widest_even: int
    t_odd: int
    t_even: int


@dataclass(frozen=True)
class SignTable:
    """
    Group rows of one sign structure.

    Attributes:
        name: Structure name used in error messages.
        elements: Elements per subset (4 for (n,4) signs, 7 for Limited).
        groups: Rows ordered by ``upper``.
        odd_first: Value is split as ``odd = v // t_even`` when set,
            ``even = v // t_odd`` otherwise.
        exclude_odd: All-wide exclusion for the odd subset.
        exclude_even: All-wide exclusion for the even subset.
    """

    name: str
    elements: int
    groups: Tuple[SignGroup, ...]
    odd_first: bool
    exclude_odd: bool
    exclude_even: bool

    @property
    def max_value(self) -> int:
        return self.groups[-1].upper

    def widths(self, value: int) -> List[int]:
        """Interleaved odd/even widths of the sign that carries ``value``."""
        for group in self.groups:
            if value <= group.upper:
                break
        else:
            group = None
        if group is None or value < 0:
            logger.error("%s sign value %d out of range", self.name, value)
            raise EncodingInvariantError(
                f"{self.name} sign value out of range",
                context={"value": value, "max": self.max_value},
            )

        offset = value - group.g_sum
        if self.odd_first:
            v_odd, v_even = divmod(offset, group.t_even)
        else:
            v_even, v_odd = divmod(offset, group.t_odd)
        odd = widths_from_value(
            v_odd, group.n_odd, self.elements, group.widest_odd, self.exclude_odd
        )
        even = widths_from_value(
            v_even, group.n_even, self.elements, group.widest_even, self.exclude_even
        )
        return interleave(odd, even)


def interleave(odd: Sequence[int], even: Sequence[int]) -> List[int]:
    """``[odd0, even0, odd1, even1, ...]``"""
    result: List[int] = []
    for odd_width, even_width in zip(odd, even):
        result.append(odd_width)
        result.append(even_width)
    return result


def _groups(*rows: Tuple[int, ...]) -> Tuple[SignGroup, ...]:
    return tuple(SignGroup(*row) for row in rows)


# (16,4) outer signs of the Omnidirectional family
OUTER_TABLE: Final[SignTable] = SignTable(
    name="Outer",
    elements=4,
    groups=_groups(
        (160, 0, 12, 4, 8, 1, 161, 1),
        (960, 161, 10, 6, 6, 3, 80, 10),
        (2014, 961, 8, 8, 4, 5, 31, 34),
        (2714, 2015, 6, 10, 3, 6, 10, 70),
        (2840, 2715, 4, 12, 1, 8, 1, 126),
    ),
    odd_first=True,
    exclude_odd=False,
    exclude_even=True,
)

# (15,4) inner signs of the Omnidirectional family
INNER_TABLE: Final[SignTable] = SignTable(
    name="Inner",
    elements=4,
    groups=_groups(
        (335, 0, 5, 10, 2, 7, 4, 84),
        (1035, 336, 7, 8, 4, 5, 20, 35),
        (1515, 1036, 9, 6, 6, 3, 48, 10),
        (1596, 1516, 11, 4, 8, 1, 81, 1),
    ),
    odd_first=False,
    exclude_odd=True,
    exclude_even=False,
)

# (26,7) data signs of Limited
LIMITED_TABLE: Final[SignTable] = SignTable(
    name="Limited",
    elements=7,
    groups=_groups(
        (183063, 0, 17, 9, 6, 3, 6538, 28),
        (820063, 183064, 13, 13, 5, 4, 875, 728),
        (1000775, 820064, 9, 17, 3, 6, 28, 6454),
        (1491020, 1000776, 15, 11, 5, 4, 2415, 203),
        (1979844, 1491021, 11, 15, 4, 5, 203, 2408),
        (1996938, 1979845, 19, 7, 8, 1, 17094, 1),
        (2013570, 1996939, 7, 19, 1, 8, 1, 16632),
    ),
    odd_first=True,
    exclude_odd=False,
    exclude_even=True,
)

# (17,4) signs of the Expanded family
EXPANDED_TABLE: Final[SignTable] = SignTable(
    name="Expanded",
    elements=4,
    groups=_groups(
        (347, 0, 12, 5, 7, 2, 87, 4),
        (1387, 348, 10, 7, 5, 4, 52, 20),
        (2947, 1388, 8, 9, 4, 5, 30, 52),
        (3987, 2948, 6, 11, 3, 6, 10, 104),
        (4191, 3988, 4, 13, 1, 8, 1, 204),
    ),
    odd_first=True,
    exclude_odd=True,
    exclude_even=False,
)

OMNI_FINDERS: Final[Tuple[Tuple[int, ...], ...]] = (
    (3, 8, 2, 1, 1),
    (3, 5, 5, 1, 1),
    (3, 3, 7, 1, 1),
    (3, 1, 9, 1, 1),
    (2, 7, 4, 1, 1),
    (2, 5, 6, 1, 1),
    (2, 3, 8, 1, 1),
    (1, 5, 7, 1, 1),
    (1, 3, 9, 1, 1),
)

# A..F
EXPANDED_FINDERS: Final[Tuple[Tuple[int, ...], ...]] = (
    (1, 8, 4, 1, 1),
    (3, 6, 4, 1, 1),
    (3, 4, 6, 1, 1),
    (3, 2, 8, 1, 1),
    (2, 6, 5, 1, 1),
    (2, 2, 9, 1, 1),
)

GUARD: Final[Tuple[int, ...]] = (1, 1)
LIMITED_RIGHT_GUARD: Final[Tuple[int, ...]] = (1, 1, 5)

# space value * 21 + bar value of the check sign, indexed by the mod-89 checksum
LIMITED_CHECK_SERIES: Final[Tuple[int, ...]] = (
    *range(44),
    45, 52, 57, 63, 64, 65, 66, 73, 74, 75, 76, 77, 78, 79, 82,
    126, 127, 128, 129, 130, 132, 141, 142, 143, 144, 145, 146,
    210, 211, 212, 213, 214, 215, 216, 217, 220,
    316, 317, 318, 319, 320, 322, 323, 326, 337,
)


def outer_sign(value: int) -> List[int]:
    return OUTER_TABLE.widths(value)


def inner_sign(value: int) -> List[int]:
    return INNER_TABLE.widths(value)


def limited_sign(value: int) -> List[int]:
    return LIMITED_TABLE.widths(value)


def expanded_sign(value: int) -> List[int]:
    return EXPANDED_TABLE.widths(value)


def limited_check_sign(checksum: int) -> List[int]:
    """
    Check sign of a Limited symbol: 6 space/bar pairs of 18 modules
    followed by ``[1, 1]``.
    """
    series = LIMITED_CHECK_SERIES[checksum]
    space = widths_from_value(series // 21, 8, 6, 3, exclude_all_wide=False)
    bar = widths_from_value(series % 21, 8, 6, 3, exclude_all_wide=False)
    return interleave(space, bar) + [1, 1]
