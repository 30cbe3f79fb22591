"""
RU: Упаковка данных GS1 DataBar Expanded в битовую строку.
EN: GS1 DataBar Expanded data compaction into a bit string.

The binary string is ``linkage flag + encoding method + fixed fields +
general purpose field + padding``. Fixed fields cover the common
GTIN/weight/price/date shapes; everything else goes through the general
purpose field, a three-mode state machine (numeric, alphanumeric,
ISO/IEC 646).

The state machine is written as pure step functions over an immutable
:class:`CompactionState`; the end mode and the number of trailing latch
bits are returned in :class:`CompactionResult`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Final, List, Optional, Sequence, Tuple

from src.databar.ai import (
    ALPHANUMERIC_PUNCTUATION,
    FNC1,
    ISO646_PUNCTUATION,
    Element,
    data_stream,
)
from src.databar.exceptions import EncodingInvariantError, InvalidValueError
from src.model.enums import CompactionMode, EncodingMethod

logger = logging.getLogger(__name__)

__all__ = [
    "CODEWORD_BITS",
    "MAX_DATA_CODEWORDS",
    "MIN_DATA_CODEWORDS",
    "CompactionState",
    "CompactionResult",
    "ExpandedPayload",
    "padded_length",
    "compact_general",
    "variable_length_bits",
    "select_method",
    "build_binary_string",
]

CODEWORD_BITS: Final[int] = 12
MIN_DATA_CODEWORDS: Final[int] = 3
MAX_DATA_CODEWORDS: Final[int] = 21
LINKAGE_FLAG: Final[str] = "0"

LATCH_NUMERIC: Final[str] = "000"
LATCH_ALPHANUMERIC_FROM_NUMERIC: Final[str] = "0000"
LATCH_ALPHANUMERIC_FROM_ISO646: Final[str] = "00100"
LATCH_ISO646: Final[str] = "00100"
ENCODED_FNC1: Final[str] = "01111"
PAD_PATTERN: Final[str] = "00100"
NUMERIC_FNC1: Final[int] = 10

_ALPHANUMERIC_CHARS: Final[str] = (
    "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ" + ALPHANUMERIC_PUNCTUATION
)


# ==============================================================================
# STATE
# ==============================================================================


@dataclass(frozen=True)
class CompactionState:
    """Mode of the general purpose field and the next character to encode."""

    mode: CompactionMode = CompactionMode.NUMERIC
    position: int = 0


@dataclass(frozen=True)
class CompactionResult:
    """
    Output of :func:`compact_general`.

    Attributes:
        bits: Padded bit string (prefix included), multiple of 12 bits.
        end_mode: Mode after the last data character and padding.
        fixup_count: Zeros of the alphanumeric latch written while padding
            from numeric mode (0..4).
    """

    bits: str
    end_mode: CompactionMode
    fixup_count: int = 0

    @property
    def codeword_count(self) -> int:
        return len(self.bits) // CODEWORD_BITS


@dataclass(frozen=True)
class ExpandedPayload:
    """Complete binary string of an Expanded symbol and the method that built it."""

    method: EncodingMethod
    bits: str

    @property
    def codewords(self) -> List[int]:
        return [
            int(self.bits[i : i + CODEWORD_BITS], 2)
            for i in range(0, len(self.bits), CODEWORD_BITS)
        ]


# ==============================================================================
# CHARACTER ENCODINGS
# ==============================================================================


def _is_digit(ch: str) -> bool:
    return "0" <= ch <= "9"


def _is_numeric(text: str) -> bool:
    return all(_is_digit(ch) or ch == FNC1 for ch in text)


def _is_alphanumeric(text: str) -> bool:
    return all(ch in _ALPHANUMERIC_CHARS for ch in text)


def _bits(value: int, width: int) -> str:
    return format(value, f"0{width}b")


def _numeric_value(ch: str) -> int:
    return NUMERIC_FNC1 if ch == FNC1 else int(ch)


def _is_numeric_pair(first: str, second: str) -> bool:
    if _is_digit(first):
        return _is_digit(second) or second == FNC1
    return first == FNC1 and _is_digit(second)


def encode_numeric_pair(first: str, second: str) -> str:
    """Two digits (or digit and FNC1) as ``11*d1 + d2 + 8`` in 7 bits."""
    if not _is_numeric_pair(first, second):
        raise EncodingInvariantError(
            "Characters cannot be numerically encoded",
            context={"first": first, "second": second},
        )
    return _bits(11 * _numeric_value(first) + _numeric_value(second) + 8, 7)


def encode_alphanumeric(ch: str) -> str:
    if _is_digit(ch):
        return _bits(int(ch) + 5, 5)
    if "A" <= ch <= "Z":
        return _bits(ord(ch) - 33, 6)
    if ch == FNC1:
        return ENCODED_FNC1
    index = ALPHANUMERIC_PUNCTUATION.find(ch)
    if index < 0:
        raise EncodingInvariantError(
            "Character cannot be alphanumerically encoded", context={"char": ch}
        )
    return _bits(index + 58, 6)


def encode_iso646(ch: str) -> str:
    if _is_digit(ch):
        return _bits(int(ch) + 5, 5)
    if "A" <= ch <= "Z":
        return _bits(ord(ch) - 1, 7)
    if "a" <= ch <= "z":
        return _bits(ord(ch) - 7, 7)
    if ch == FNC1:
        return ENCODED_FNC1
    index = ISO646_PUNCTUATION.find(ch)
    if index < 0:
        raise EncodingInvariantError(
            "Character cannot be encoded in ISO/IEC 646 mode", context={"char": ch}
        )
    return _bits(index + 232, 8)


# ==============================================================================
# STEP FUNCTIONS
# ==============================================================================

Step = Callable[[str, CompactionState, int, Optional[int]], Tuple[str, CompactionState]]


def _leaves_single_sign(bit_length: int, segments_per_row: Optional[int]) -> bool:
    """Would ``bit_length`` whole bits end with a lone sign in the last stacked row."""
    if segments_per_row is None:
        return False
    return (bit_length // CODEWORD_BITS + 1) % segments_per_row == 1


def padded_length(bit_length: int, segments_per_row: Optional[int] = None) -> int:
    """
    Length of the binary string once padded.

    Whole codewords, at least three of them, plus one more codeword when a
    stacked symbol would otherwise end with a single sign in its last row.

    Examples:
        >>> padded_length(20)
        36
        >>> padded_length(47, segments_per_row=2)
        60
    """
    target = max(
        -(-bit_length // CODEWORD_BITS) * CODEWORD_BITS,
        MIN_DATA_CODEWORDS * CODEWORD_BITS,
    )
    if _leaves_single_sign(target, segments_per_row):
        target += CODEWORD_BITS
    return target


def _numeric_step(
    data: str, state: CompactionState, bit_length: int, segments_per_row: Optional[int]
) -> Tuple[str, CompactionState]:
    i = state.position
    if i + 1 < len(data):
        if _is_numeric_pair(data[i], data[i + 1]):
            return encode_numeric_pair(data[i], data[i + 1]), CompactionState(
                CompactionMode.NUMERIC, i + 2
            )
        return LATCH_ALPHANUMERIC_FROM_NUMERIC, CompactionState(
            CompactionMode.ALPHANUMERIC, i
        )

    # last character
    if not _is_digit(data[i]):
        return LATCH_ALPHANUMERIC_FROM_NUMERIC, CompactionState(
            CompactionMode.ALPHANUMERIC, i
        )
    # the 4-bit form is only readable when nothing follows it
    remainder = padded_length(bit_length, segments_per_row) - bit_length
    if 4 <= remainder < 7:
        bits = _bits(int(data[i]) + 1, 4)
    else:
        bits = encode_numeric_pair(data[i], FNC1)
    return bits, CompactionState(CompactionMode.NUMERIC, i + 1)


def _alphanumeric_step(
    data: str, state: CompactionState, bit_length: int, segments_per_row: Optional[int]
) -> Tuple[str, CompactionState]:
    i = state.position
    remaining = len(data) - i
    if remaining >= 6 and _is_numeric(data[i : i + 6]):
        return LATCH_NUMERIC, CompactionState(CompactionMode.NUMERIC, i)
    if remaining > 3 and _is_numeric(data[i:]):
        return LATCH_NUMERIC, CompactionState(CompactionMode.NUMERIC, i)

    ch = data[i]
    if ch == FNC1:
        return ENCODED_FNC1, CompactionState(CompactionMode.NUMERIC, i + 1)
    if ch in _ALPHANUMERIC_CHARS:
        return encode_alphanumeric(ch), CompactionState(CompactionMode.ALPHANUMERIC, i + 1)
    return LATCH_ISO646, CompactionState(CompactionMode.ISO646, i)


def _iso646_step(
    data: str, state: CompactionState, bit_length: int, segments_per_row: Optional[int]
) -> Tuple[str, CompactionState]:
    i = state.position
    remaining = len(data) - i
    if (
        remaining > 3
        and _is_numeric(data[i : i + 4])
        and _is_alphanumeric(data[i + 4 : i + 14])
    ):
        return LATCH_NUMERIC, CompactionState(CompactionMode.NUMERIC, i)
    if remaining > 4 and _is_alphanumeric(data[i : i + 15]):
        return LATCH_ALPHANUMERIC_FROM_ISO646, CompactionState(
            CompactionMode.ALPHANUMERIC, i
        )

    ch = data[i]
    if ch == FNC1:
        return ENCODED_FNC1, CompactionState(CompactionMode.NUMERIC, i + 1)
    return encode_iso646(ch), CompactionState(CompactionMode.ISO646, i + 1)


_STEPS: Final[Dict[CompactionMode, Step]] = {
    CompactionMode.NUMERIC: _numeric_step,
    CompactionMode.ALPHANUMERIC: _alphanumeric_step,
    CompactionMode.ISO646: _iso646_step,
}


def _pad(
    bits: str, mode: CompactionMode, segments_per_row: Optional[int] = None
) -> CompactionResult:
    """Pad in one pass up to :func:`padded_length`; the ``00100`` cycle never restarts."""
    target = padded_length(len(bits), segments_per_row)
    pad = target - len(bits)
    if pad == 0:
        return CompactionResult(bits, mode, 0)
    if pad >= CODEWORD_BITS:
        logger.debug("Padding %d bits to %d", len(bits), target)

    fixup = 0
    if mode is CompactionMode.NUMERIC:
        fixup = min(pad, len(LATCH_ALPHANUMERIC_FROM_NUMERIC))
        bits += "0" * fixup
        mode = CompactionMode.ALPHANUMERIC
        pad -= fixup
    bits += "".join(PAD_PATTERN[j % len(PAD_PATTERN)] for j in range(pad))
    return CompactionResult(bits, mode, fixup)


def compact_general(
    data: str, prefix: str = "", segments_per_row: Optional[int] = None
) -> CompactionResult:
    """
    Encode ``data`` in the general purpose field after ``prefix`` and pad.

    Args:
        data: AI digits and data without brackets, FNC1 as ``\\x1d``.
        prefix: Bits already written (linkage flag, method, fixed fields).
        segments_per_row: Segments per row of an Expanded Stacked symbol,
            ``None`` for a single row.

    Returns:
        :class:`CompactionResult` with the prefix included in ``bits``.

    Example:
        >>> result = compact_general("1234", prefix="000000")
        >>> len(result.bits), result.end_mode.value, result.fixup_count
        (36, 'alphanumeric', 4)
    """
    chunks = [prefix]
    bit_length = len(prefix)
    state = CompactionState()
    while state.position < len(data):
        emitted, state = _STEPS[state.mode](data, state, bit_length, segments_per_row)
        chunks.append(emitted)
        bit_length += len(emitted)
    return _pad("".join(chunks), state.mode, segments_per_row)


# ==============================================================================
# ENCODING METHODS
# ==============================================================================


def variable_length_bits(bit_length: int) -> str:
    """
    Two bits after the method: ``1`` when the data codeword count is even,
    then ``1`` when there are more than 13 data codewords.
    """
    codewords = bit_length // CODEWORD_BITS
    first = "1" if codewords % 2 == 0 else "0"
    second = "1" if codewords > 13 else "0"
    return first + second


def _pack(digits: str, groups: Sequence[int], widths: Sequence[int]) -> str:
    """Pack consecutive digit groups as binary numbers of fixed widths."""
    if sum(groups) != len(digits):
        raise EncodingInvariantError(
            "Fixed field length mismatch",
            context={"digits": len(digits), "expected": sum(groups)},
        )
    chunks: List[str] = []
    start = 0
    for size, width in zip(groups, widths):
        chunks.append(_bits(int(digits[start : start + size]), width))
        start += size
    return "".join(chunks)


def _gtin_body(elements: Sequence[Element]) -> str:
    """12 GTIN digits after the indicator digit 9, check digit dropped."""
    return elements[0].data[1:13]


def _weight_date_method(weight_ai: str, date_ai: str) -> Optional[EncodingMethod]:
    family = {"310": 0, "320": 1}.get(weight_ai[:3])
    date_bits = {"11": "00", "13": "01", "15": "10", "17": "11"}.get(date_ai)
    if family is None or date_bits is None:
        return None
    return EncodingMethod("0111" + date_bits + str(family))


def _valid_date(yymmdd: str) -> bool:
    return 1 <= int(yymmdd[2:4]) <= 12 and int(yymmdd[4:6]) <= 31


def select_method(elements: Sequence[Element]) -> EncodingMethod:
    """
    Choose the encoding method for parsed elements.

    Fixed-field methods need AI 01 with indicator digit 9 followed by
    exactly the weight/price (and date) elements, with values that fit
    their fields. Otherwise AI 01 first selects :attr:`EncodingMethod.GTIN`
    and anything else :attr:`EncodingMethod.GENERAL`.
    """
    if not elements or elements[0].ai != "01":
        return EncodingMethod.GENERAL
    first = elements[0]
    if first.data[0] != "9" or len(elements) not in (2, 3):
        return EncodingMethod.GTIN

    second = elements[1]
    if len(elements) == 2:
        if second.ai == "3103" and int(second.data) <= 32767:
            return EncodingMethod.WEIGHT_3103
        if second.ai in ("3202", "3203") and int(second.data) <= 9999:
            return EncodingMethod.WEIGHT_3202_3203
        if second.ai[:3] == "392" and int(second.ai[3]) <= 3:
            return EncodingMethod.PRICE_392X
        if second.ai[:3] == "393" and int(second.ai[3]) <= 3:
            return EncodingMethod.PRICE_393X
        return EncodingMethod.GTIN

    third = elements[2]
    method = _weight_date_method(second.ai, third.ai)
    if method is not None and int(second.data) <= 99999 and _valid_date(third.data):
        return method
    return EncodingMethod.GTIN


def _fixed_prefix(method: EncodingMethod) -> str:
    prefix = LINKAGE_FLAG + method.value
    if method.has_variable_length_field:
        prefix += "00"
    return prefix


def _encode_fields(
    method: EncodingMethod,
    elements: Sequence[Element],
    segments_per_row: Optional[int],
) -> CompactionResult:
    prefix = _fixed_prefix(method)

    if method is EncodingMethod.GENERAL:
        return compact_general(data_stream(elements), prefix, segments_per_row)

    if method is EncodingMethod.GTIN:
        prefix += _pack(elements[0].data[:13], (1, 3, 3, 3, 3), (4, 10, 10, 10, 10))
        return compact_general(data_stream(elements[1:]), prefix, segments_per_row)

    body = _gtin_body(elements)
    second = elements[1]

    if method is EncodingMethod.WEIGHT_3103:
        bits = prefix + _pack(body + second.data, (3, 3, 3, 3, 6), (10, 10, 10, 10, 15))
        return _pad(bits, CompactionMode.ALPHANUMERIC, segments_per_row)

    if method is EncodingMethod.WEIGHT_3202_3203:
        weight = int(second.data) + (10000 if second.ai == "3203" else 0)
        bits = prefix + _pack(
            body + f"{weight:06d}", (3, 3, 3, 3, 6), (10, 10, 10, 10, 15)
        )
        return _pad(bits, CompactionMode.ALPHANUMERIC, segments_per_row)

    if method is EncodingMethod.PRICE_392X:
        prefix += _pack(body + second.ai[3], (3, 3, 3, 3, 1), (10, 10, 10, 10, 2))
        return compact_general(second.data, prefix, segments_per_row)

    if method is EncodingMethod.PRICE_393X:
        prefix += _pack(
            body + second.ai[3] + second.data[:3],
            (3, 3, 3, 3, 1, 3),
            (10, 10, 10, 10, 2, 10),
        )
        return compact_general(second.data[3:], prefix, segments_per_row)

    if method.is_weight_and_date:
        weight = second.ai[3] + second.data[1:]
        date = elements[2].data
        day_number = int(date[0:2]) * 384 + (int(date[2:4]) - 1) * 32 + int(date[4:6])
        bits = (
            prefix
            + _pack(body + weight, (3, 3, 3, 3, 6), (10, 10, 10, 10, 20))
            + _bits(day_number, 16)
        )
        return _pad(bits, CompactionMode.ALPHANUMERIC, segments_per_row)

    raise EncodingInvariantError(
        "Unknown encoding method", context={"method": method.value}
    )


def _set_variable_length_bits(bits: str, method: EncodingMethod) -> str:
    if not method.has_variable_length_field:
        return bits
    position = len(LINKAGE_FLAG) + len(method.value)
    return bits[:position] + variable_length_bits(len(bits)) + bits[position + 2 :]


def build_binary_string(
    elements: Sequence[Element], segments_per_row: Optional[int] = None
) -> ExpandedPayload:
    """
    Build the complete binary string of an Expanded symbol.

    Args:
        elements: Parsed and validated elements.
        segments_per_row: Segments per row for Expanded Stacked, ``None``
            for single-row Expanded.

    Raises:
        InvalidValueError: Data needs more than 21 data codewords.
    """
    method = select_method(elements)
    bits = _set_variable_length_bits(
        _encode_fields(method, elements, segments_per_row).bits, method
    )
    codewords = len(bits) // CODEWORD_BITS
    if codewords > MAX_DATA_CODEWORDS:
        logger.error("Data needs %d codewords, at most %d fit", codewords, MAX_DATA_CODEWORDS)
        raise InvalidValueError(
            "Data does not fit into GS1 DataBar Expanded",
            context={"codewords": codewords, "max": MAX_DATA_CODEWORDS},
        )
    if len(bits) % CODEWORD_BITS != 0:
        raise EncodingInvariantError(
            "Binary string is not a whole number of codewords",
            context={"bits": len(bits)},
        )
    logger.debug("Encoding method %s, %d data codewords", method.value, codewords)
    return ExpandedPayload(method, bits)
