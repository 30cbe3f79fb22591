"""
RU: Комбинаторика RSS: число сочетаний и перевод значения знака в ширины элементов.
EN: RSS combinatorics: combinations and value <-> element widths mapping.

Both conversions follow the enumeration order of the ISO/IEC 24724
Annex B routines.
"""

from __future__ import annotations

from typing import List, Sequence

__all__ = [
    "combinations",
    "widths_from_value",
    "value_from_widths",
]


def combinations(n: int, r: int) -> int:
    """
    Number of combinations of ``r`` items selected from ``n``.

    Multiplies and divides alternately so that intermediate values stay
    small. Returns 1 when ``n < r``, same as the reference implementation.

    Examples:
        >>> combinations(16, 3)
        560
        >>> combinations(5, 0)
        1
    """
    if n - r > r:
        min_denom, max_denom = r, n - r
    else:
        min_denom, max_denom = n - r, r

    value = 1
    j = 1
    for i in range(n, max_denom, -1):
        value *= i
        if j <= min_denom:
            value //= j
            j += 1
    while j <= min_denom:
        value //= j
        j += 1
    return value


def _subset_count(
    n: int,
    width: int,
    elements: int,
    position: int,
    max_width: int,
    narrow_seen: bool,
    exclude_all_wide: bool,
) -> int:
    """Count width patterns that start with ``width`` at ``position``."""
    remaining = elements - position
    count = combinations(n - width - 1, remaining - 2)

    # patterns without any single-module element
    if (
        exclude_all_wide
        and not narrow_seen
        and width > 1
        and n - width - (remaining - 1) >= remaining - 1
    ):
        count -= combinations(n - width - remaining, remaining - 2)

    # patterns with an element wider than max_width
    if remaining - 1 > 1:
        too_wide = 0
        widest = n - width - (remaining - 2)
        while widest > max_width:
            too_wide += combinations(n - width - widest - 1, remaining - 3)
            widest -= 1
        count -= too_wide * (remaining - 1)
    elif n - width > max_width:
        count -= 1
    return count


def widths_from_value(
    value: int,
    n: int,
    elements: int,
    max_width: int,
    exclude_all_wide: bool = False,
) -> List[int]:
    """
    Map ``value`` to ``elements`` widths summing to ``n`` modules.

    Args:
        value: Index of the pattern in enumeration order.
        n: Total number of modules.
        elements: Number of widths to produce.
        max_width: Widest element allowed.
        exclude_all_wide: Skip patterns that have no single-module element.

    Returns:
        List of widths, each in ``[1, max_width]``.

    Example:
        >>> widths_from_value(0, 8, 4, 5)
        [1, 1, 1, 5]
    """
    widths: List[int] = []
    narrow_seen = False
    for position in range(elements - 1):
        width = 1
        while True:
            count = _subset_count(
                n, width, elements, position, max_width, narrow_seen, exclude_all_wide
            )
            value -= count
            if value < 0:
                break
            width += 1
        value += count
        n -= width
        widths.append(width)
        narrow_seen = narrow_seen or width == 1
    widths.append(n)
    return widths


def value_from_widths(
    widths: Sequence[int],
    max_width: int,
    exclude_all_wide: bool = False,
) -> int:
    """Inverse of :func:`widths_from_value`."""
    elements = len(widths)
    n = sum(widths)
    value = 0
    narrow_seen = False
    for position in range(elements - 1):
        for width in range(1, widths[position]):
            value += _subset_count(
                n, width, elements, position, max_width, narrow_seen, exclude_all_wide
            )
        n -= widths[position]
        narrow_seen = narrow_seen or widths[position] == 1
    return value
