"""
RU: Нормализация GTIN для вариантов Omnidirectional, Stacked и Limited.
EN: GTIN normalization for the Omnidirectional, Stacked and Limited variants.
"""

from __future__ import annotations

import logging
from typing import Final

from src.databar.checksum import gtin_check_digit
from src.databar.exceptions import InvalidValueError

logger = logging.getLogger(__name__)

__all__ = [
    "GTIN_AI_PREFIX",
    "GTIN_LENGTH",
    "LINKAGE_FLAG",
    "strip_ai_prefix",
    "is_gtin",
    "normalize_gtin",
    "gtin_encoded_value",
    "check_limited_indicator",
]

GTIN_AI_PREFIX: Final[str] = "(01)"
GTIN_LENGTH: Final[int] = 14
# 0 while no 2D composite component is printed above the symbol
LINKAGE_FLAG: Final[str] = "0"


def strip_ai_prefix(value: str) -> str:
    """Remove a leading ``(01)`` marker if present."""
    if value.startswith(GTIN_AI_PREFIX):
        return value[len(GTIN_AI_PREFIX) :]
    return value


def _has_valid_check_digit(digits: str) -> bool:
    return digits[-1] == gtin_check_digit(digits[:-1])


def normalize_gtin(value: str, checksum_mandatory: bool = False) -> str:
    """
    Normalize a GTIN value to 14 digits including the check digit.

    A 14-digit value must carry a valid check digit. Shorter values are
    padded to 13 digits and get their check digit appended, unless
    ``checksum_mandatory`` is set: then the last digit of a value of any
    length is verified as the check digit.

    Args:
        value: 1..14 digits, optionally prefixed with ``(01)``.
        checksum_mandatory: Always treat the last digit as check digit.

    Returns:
        GTIN-14 string.

    Raises:
        InvalidValueError: Empty, too long, non-numeric value or wrong check digit.

    Examples:
        >>> normalize_gtin("(01)01234567890128")
        '01234567890128'
        >>> normalize_gtin("123456789012")
        '01234567890128'
    """
    gtin = strip_ai_prefix(value)
    if not gtin or len(gtin) > GTIN_LENGTH:
        logger.error("GTIN length out of range: %r", value)
        raise InvalidValueError(
            "GTIN must contain 1 to 14 digits", context={"value": value}
        )
    if not gtin.isdigit():
        logger.error("GTIN contains non-digit characters: %r", value)
        raise InvalidValueError(
            "GTIN must contain only digits", context={"value": value}
        )

    if checksum_mandatory or len(gtin) == GTIN_LENGTH:
        if not _has_valid_check_digit(gtin):
            logger.error("Wrong GTIN check digit: %r", value)
            raise InvalidValueError(
                "Wrong GTIN check digit",
                context={"value": value, "expected": gtin_check_digit(gtin[:-1])},
            )
        return gtin.zfill(GTIN_LENGTH)

    body = gtin.zfill(GTIN_LENGTH - 1)
    return body + gtin_check_digit(body)


def is_gtin(value: str, checksum_mandatory: bool = False) -> bool:
    """Predicate form of :func:`normalize_gtin`."""
    try:
        normalize_gtin(value, checksum_mandatory)
    except InvalidValueError:
        return False
    return True


def gtin_encoded_value(gtin14: str, for_caption: bool = False) -> str:
    """
    Value drawn into the symbol, or shown under it.

    The drawn value is the linkage flag followed by the first 13 digits
    (the check digit is implied by the symbol checksum). The caption is
    ``(01)`` followed by the complete GTIN-14.
    """
    if for_caption:
        return GTIN_AI_PREFIX + gtin14
    return LINKAGE_FLAG + gtin14[:-1]


def check_limited_indicator(gtin14: str) -> None:
    """GS1 DataBar Limited encodes only GTINs with indicator digit 0 or 1."""
    if gtin14[0] not in "01":
        logger.error("Limited indicator digit %s not allowed", gtin14[0])
        raise InvalidValueError(
            "GS1 DataBar Limited requires indicator digit 0 or 1",
            context={"gtin": gtin14},
        )
