"""
RU: Контрольные суммы GS1 DataBar (mod 79, 89, 211) и контрольная цифра GTIN (mod 10).
EN: GS1 DataBar checksums (mod 79, 89, 211) and the GTIN mod-10 check digit.

Weight tables are the ISO/IEC 24724 values ``3**x % modulus`` laid out per
sign position.
"""

from __future__ import annotations

import logging
from typing import Final, Sequence, Tuple

from src.databar.exceptions import EncodingInvariantError, InvalidValueError

logger = logging.getLogger(__name__)

__all__ = [
    "OMNI_MODULUS",
    "LIMITED_MODULUS",
    "EXPANDED_MODULUS",
    "gtin_check_digit",
    "weighted_sum",
    "adjust_omni_checksum",
    "omni_checksum",
    "finder_indices",
    "limited_checksum",
    "expanded_weight_row",
    "expanded_checksum",
]

OMNI_MODULUS: Final[int] = 79
LIMITED_MODULUS: Final[int] = 89
EXPANDED_MODULUS: Final[int] = 211

# 3**x % 79, one row per sign (outer 1, inner 1, outer 2, inner 2)
OMNI_WEIGHTS: Final[Tuple[Tuple[int, ...], ...]] = (
    (1, 3, 9, 27, 2, 6, 18, 54),
    (4, 12, 36, 29, 8, 24, 72, 58),
    (16, 48, 65, 37, 32, 17, 51, 74),
    (64, 34, 23, 69, 49, 68, 46, 59),
)

# 3**x % 89, one row per data sign (left, right)
LIMITED_WEIGHTS: Final[Tuple[Tuple[int, ...], ...]] = (
    (1, 3, 9, 27, 81, 65, 17, 51, 64, 14, 42, 37, 22, 66),
    (20, 60, 2, 6, 18, 54, 73, 41, 34, 13, 39, 28, 84, 74),
)

# 3**x % 211; row 0 is right of A1, then left/right of A2, B1, B2, ...
EXPANDED_WEIGHTS: Final[Tuple[Tuple[int, ...], ...]] = (
    (1, 3, 9, 27, 81, 32, 96, 77),
    (20, 60, 180, 118, 143, 7, 21, 63),
    (189, 145, 13, 39, 117, 140, 209, 205),
    (193, 157, 49, 147, 19, 57, 171, 91),
    (62, 186, 136, 197, 169, 85, 44, 132),
    (185, 133, 188, 142, 4, 12, 36, 108),
    (113, 128, 173, 97, 80, 29, 87, 50),
    (150, 28, 84, 41, 123, 158, 52, 156),
    (46, 138, 203, 187, 139, 206, 196, 166),
    (76, 17, 51, 153, 37, 111, 122, 155),
    (43, 129, 176, 106, 107, 110, 119, 146),
    (16, 48, 144, 10, 30, 90, 59, 177),
    (109, 116, 137, 200, 178, 112, 125, 164),
    (70, 210, 208, 202, 184, 130, 179, 115),
    (134, 191, 151, 31, 93, 68, 204, 190),
    (148, 22, 66, 198, 172, 94, 71, 2),
    (6, 18, 54, 162, 64, 192, 154, 40),
    (120, 149, 25, 75, 14, 42, 126, 167),
    (79, 26, 78, 23, 69, 207, 199, 175),
    (103, 98, 83, 38, 114, 131, 182, 124),
    (161, 61, 183, 127, 170, 88, 53, 159),
    (55, 165, 73, 8, 24, 72, 5, 15),
    (45, 135, 194, 160, 58, 174, 100, 89),
)


def gtin_check_digit(body: str) -> str:
    """
    Calculate the GS1 mod-10 check digit.

    Weights alternate 3, 1 starting from the rightmost digit; the check
    digit brings the sum up to the next multiple of ten.

    Args:
        body: Digits without the check digit (any length).

    Returns:
        Single check digit as string.

    Raises:
        InvalidValueError: If ``body`` contains non-digit characters.

    Example:
        >>> gtin_check_digit("0123456789012")
        '8'
    """
    if not body.isdigit() and body != "":
        logger.error("Check digit requested for non-numeric value %r", body)
        raise InvalidValueError(
            "GTIN must contain only digits", context={"value": body}
        )
    total = sum(
        int(digit) * (3 if i % 2 == 0 else 1) for i, digit in enumerate(reversed(body))
    )
    return str((10 - total % 10) % 10)


def weighted_sum(widths: Sequence[int], weights: Sequence[int]) -> int:
    if len(widths) != len(weights):
        raise EncodingInvariantError(
            "Sign and weight row differ in length",
            context={"sign": len(widths), "weights": len(weights)},
        )
    return sum(width * weight for width, weight in zip(widths, weights))


def adjust_omni_checksum(residue: int) -> int:
    """Skip the two reserved finder combinations (residues shifted past 8 and 72)."""
    if residue >= 8:
        residue += 1
    if residue >= 72:
        residue += 1
    return residue


def omni_checksum(signs: Sequence[Sequence[int]]) -> int:
    """
    Adjusted mod-79 checksum of the four RSS-14 signs.

    Args:
        signs: Outer 1, inner 1, outer 2, inner 2 widths (8 each).
    """
    if len(signs) != len(OMNI_WEIGHTS):
        raise EncodingInvariantError(
            "Omnidirectional checksum needs four signs",
            context={"signs": len(signs)},
        )
    total = sum(weighted_sum(sign, weights) for sign, weights in zip(signs, OMNI_WEIGHTS))
    return adjust_omni_checksum(total % OMNI_MODULUS)


def finder_indices(checksum: int) -> Tuple[int, int]:
    """Left and right finder pattern indices for an adjusted checksum."""
    return checksum // 9, checksum % 9


def limited_checksum(left: Sequence[int], right: Sequence[int]) -> int:
    total = weighted_sum(left, LIMITED_WEIGHTS[0]) + weighted_sum(
        right, LIMITED_WEIGHTS[1]
    )
    return total % LIMITED_MODULUS


def expanded_weight_row(finder: int, left_of_finder: bool) -> int:
    """
    Row of :data:`EXPANDED_WEIGHTS` for a sign next to ``finder``.

    ``finder`` is a signed code of the ordering table: ``k`` for the normal
    pattern, ``-k`` for its mirrored form.
    """
    if left_of_finder:
        return 4 * finder - 5 if finder > 0 else -4 * finder - 3
    return 4 * finder - 4 if finder > 0 else -4 * finder - 2


def expanded_checksum(signs: Sequence[Sequence[int]], finder_order: Sequence[int]) -> int:
    """
    Mod-211 checksum over the data signs of an Expanded symbol.

    Args:
        signs: Data sign widths (8 each), check sign excluded.
        finder_order: Finder codes of the symbol, starting with A1.
    """
    total = weighted_sum(signs[0], EXPANDED_WEIGHTS[0])
    for i in range(1, len(signs)):
        if i % 2 != 0:
            row = expanded_weight_row(finder_order[(i + 1) // 2], left_of_finder=True)
        else:
            row = expanded_weight_row(finder_order[i // 2], left_of_finder=False)
        total += weighted_sum(signs[i], EXPANDED_WEIGHTS[row])
    return total % EXPANDED_MODULUS
