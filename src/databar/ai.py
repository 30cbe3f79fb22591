"""
RU: Таблица Application Identifier и разбор строки элементов ``(AI)data...``.
EN: Application Identifier table and ``(AI)data...`` element string parser.

Key GS1 rules used by the Expanded variants:
- Predefined-length AIs (first two digits in :data:`PREDEFINED_LENGTH_PREFIXES`)
  never need a separator.
- Every other element is followed by FNC1 unless it is the last one.
- FNC1 travels through the data stream as ``\\x1d`` (ASCII 29).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final, FrozenSet, List, Optional, Sequence, Tuple

from src.databar.checksum import gtin_check_digit
from src.databar.exceptions import InvalidValueError, UnsupportedAIError

logger = logging.getLogger(__name__)

__all__ = [
    "FNC1",
    "MAX_NUMERIC_CHARS",
    "MAX_ALPHANUMERIC_CHARS",
    "ISO646_PUNCTUATION",
    "ALPHANUMERIC_PUNCTUATION",
    "PREDEFINED_LENGTH_PREFIXES",
    "AIDataType",
    "AIFormat",
    "AIDefinition",
    "Element",
    "AI_TABLE",
    "lookup_ai",
    "is_predefined_length",
    "parse_element_string",
    "bracket_element_string",
    "data_stream",
    "caption_text",
]

FNC1: Final[str] = "\x1d"
MAX_NUMERIC_CHARS: Final[int] = 74
MAX_ALPHANUMERIC_CHARS: Final[int] = 41

ALPHANUMERIC_PUNCTUATION: Final[str] = "*,-./"
ISO646_PUNCTUATION: Final[str] = "!\"%&'()*+,-./:;<=>?_ "

_DIGITS: Final[FrozenSet[str]] = frozenset("0123456789")
_UPPER: Final[FrozenSet[str]] = frozenset("ABCDEFGHIJKLMNOPQRSTUVWXYZ")
_LOWER: Final[FrozenSet[str]] = frozenset("abcdefghijklmnopqrstuvwxyz")
# brackets delimit AIs in the element string, so they are not accepted as data
_DATA_CHARS: Final[FrozenSet[str]] = (
    _DIGITS | _UPPER | _LOWER | frozenset(ISO646_PUNCTUATION) - frozenset("()")
)

PREDEFINED_LENGTH_PREFIXES: Final[FrozenSet[str]] = frozenset(
    {
        "00", "01", "02", "03", "04",
        "11", "12", "13", "14", "15", "16", "17", "18", "19",
        "20",
        "31", "32", "33", "34", "35", "36",
        "41",
    }
)

_ELEMENT_STRING_RE: Final[re.Pattern[str]] = re.compile(r"(?:\([^()]*\)[^()]*)+")
_ELEMENT_RE: Final[re.Pattern[str]] = re.compile(r"\(([^()]*)\)([^()]*)")
_AI_RE: Final[re.Pattern[str]] = re.compile(r"\d{2,4}")


class AIDataType(str, Enum):
    NUMERIC = "n"
    ALPHANUMERIC = "an"


@dataclass(frozen=True)
class AIFormat:
    """One data component of an AI: type and length range."""

    data_type: AIDataType
    min_length: int
    max_length: int

    def accepts(self, text: str) -> bool:
        if not self.min_length <= len(text) <= self.max_length:
            return False
        if self.data_type is AIDataType.NUMERIC:
            return text.isdigit()
        return all(ch in _DATA_CHARS for ch in text)


@dataclass(frozen=True)
class AIDefinition:
    """
    Table entry: ``prefix`` matches the start of the AI, ``length`` is the
    full AI length (``"310"`` with length 4 covers 3100..3109).
    """

    prefix: str
    length: int
    formats: Tuple[AIFormat, ...]

    def matches(self, ai: str) -> bool:
        return len(ai) == self.length and ai.startswith(self.prefix)

    @property
    def max_data_length(self) -> int:
        return sum(fmt.max_length for fmt in self.formats)

    def accepts(self, data: str) -> bool:
        """Check ``data`` against the formats (a fixed first part, then the rest)."""
        if len(self.formats) == 1:
            return self.formats[0].accepts(data)
        head, tail = self.formats
        return head.accepts(data[: head.max_length]) and tail.accepts(
            data[head.max_length :]
        )


def _n(length: int, max_length: Optional[int] = None) -> AIFormat:
    return AIFormat(AIDataType.NUMERIC, length, max_length or length)


def _an(min_length: int, max_length: int) -> AIFormat:
    return AIFormat(AIDataType.ALPHANUMERIC, min_length, max_length)


def _ai(prefix: str, length: int, *formats: AIFormat) -> AIDefinition:
    return AIDefinition(prefix, length, tuple(formats))


# GS1 General Specifications, section 3 (subset)
AI_TABLE: Final[Tuple[AIDefinition, ...]] = (
    _ai("00", 2, _n(18)),
    _ai("01", 2, _n(14)),
    _ai("02", 2, _n(14)),
    _ai("10", 2, _an(1, 20)),
    _ai("11", 2, _n(6)),
    _ai("12", 2, _n(6)),
    _ai("13", 2, _n(6)),
    _ai("15", 2, _n(6)),
    _ai("17", 2, _n(6)),
    _ai("20", 2, _n(2)),
    _ai("21", 2, _an(1, 20)),
    _ai("22", 2, _an(1, 29)),
    _ai("240", 3, _an(1, 30)),
    _ai("241", 3, _an(1, 30)),
    _ai("242", 3, _n(1, 6)),
    _ai("250", 3, _an(1, 30)),
    _ai("251", 3, _an(1, 30)),
    _ai("253", 3, _n(13), _an(1, 17)),
    _ai("254", 3, _an(1, 20)),
    _ai("30", 2, _n(1, 8)),
    _ai("310", 4, _n(6)),
    _ai("311", 4, _n(6)),
    _ai("312", 4, _n(6)),
    _ai("313", 4, _n(6)),
    _ai("314", 4, _n(6)),
    _ai("315", 4, _n(6)),
    _ai("316", 4, _n(6)),
    _ai("32", 4, _n(6)),
    _ai("330", 4, _n(6)),
    _ai("331", 4, _n(6)),
    _ai("332", 4, _n(6)),
    _ai("333", 4, _n(6)),
    _ai("334", 4, _n(6)),
    _ai("335", 4, _n(6)),
    _ai("336", 4, _n(6)),
    _ai("337", 4, _n(6)),
    _ai("34", 4, _n(6)),
    _ai("350", 4, _n(6)),
    _ai("351", 4, _n(6)),
    _ai("352", 4, _n(6)),
    _ai("353", 4, _n(6)),
    _ai("354", 4, _n(6)),
    _ai("355", 4, _n(6)),
    _ai("356", 4, _n(6)),
    _ai("357", 4, _n(6)),
    _ai("36", 4, _n(6)),
    _ai("37", 2, _n(1, 8)),
    _ai("390", 4, _n(1, 15)),
    _ai("391", 4, _n(4, 18)),
    _ai("392", 4, _n(1, 15)),
    _ai("393", 4, _n(4, 18)),
    _ai("400", 3, _an(1, 30)),
    _ai("401", 3, _an(1, 30)),
    _ai("402", 3, _n(17)),
    _ai("403", 3, _an(1, 30)),
    _ai("410", 3, _n(13)),
    _ai("411", 3, _n(13)),
    _ai("412", 3, _n(13)),
    _ai("413", 3, _n(13)),
    _ai("414", 3, _n(13)),
    _ai("415", 3, _n(13)),
    _ai("420", 3, _an(1, 20)),
    _ai("421", 3, _n(4, 12)),
    _ai("422", 3, _n(3)),
    _ai("423", 3, _n(4, 15)),
    _ai("424", 3, _n(3)),
    _ai("425", 3, _n(3)),
    _ai("426", 3, _n(3)),
    _ai("7001", 4, _n(13)),
    _ai("7002", 4, _an(1, 30)),
    _ai("7003", 4, _n(10)),
    _ai("7004", 4, _n(1, 4)),
    _ai("703", 4, _n(3), _an(1, 27)),
    _ai("8001", 4, _n(14)),
    _ai("8002", 4, _an(1, 20)),
    _ai("8003", 4, _n(14), _an(1, 16)),
    _ai("8004", 4, _an(1, 30)),
    _ai("8005", 4, _n(6)),
    _ai("8006", 4, _n(18)),
    _ai("8007", 4, _an(1, 30)),
    _ai("8008", 4, _n(9, 12)),
    _ai("8018", 4, _n(18)),
    _ai("8020", 4, _an(1, 25)),
    _ai("8100", 4, _n(6)),
    _ai("8101", 4, _n(10)),
    _ai("8102", 4, _n(2)),
    _ai("8110", 4, _an(1, 70)),
    _ai("8200", 4, _an(1, 70)),
    _ai("9", 2, _an(1, 30)),
)


@dataclass(frozen=True)
class Element:
    """One ``(AI)data`` pair of an element string."""

    ai: str
    data: str

    @property
    def is_predefined_length(self) -> bool:
        return is_predefined_length(self.ai)

    @property
    def bracketed(self) -> str:
        return f"({self.ai}){self.data}"


def lookup_ai(ai: str) -> Optional[AIDefinition]:
    for definition in AI_TABLE:
        if definition.matches(ai):
            return definition
    return None


def is_predefined_length(ai: str) -> bool:
    return ai[:2] in PREDEFINED_LENGTH_PREFIXES


def _validate_element(element: Element) -> None:
    if not _AI_RE.fullmatch(element.ai):
        logger.error("Malformed AI %r", element.ai)
        raise InvalidValueError(
            "AI must contain 2 to 4 digits", context={"ai": element.ai}
        )
    definition = lookup_ai(element.ai)
    if definition is None:
        logger.error("Unknown AI %s", element.ai)
        raise UnsupportedAIError(element.ai)
    if not element.data:
        raise InvalidValueError("Empty AI data", context={"ai": element.ai})

    bad = sorted({ch for ch in element.data if ch not in _DATA_CHARS})
    if bad:
        logger.error("AI %s data has characters %r outside the encodable set", element.ai, bad)
        raise InvalidValueError(
            "Characters cannot be encoded",
            context={"ai": element.ai, "characters": "".join(bad)},
        )
    if not definition.accepts(element.data):
        logger.error("AI %s data %r does not match its format", element.ai, element.data)
        raise InvalidValueError(
            "AI data does not match the AI format",
            context={"ai": element.ai, "data": element.data},
        )
    if element.ai == "01" and element.data[-1] != gtin_check_digit(element.data[:-1]):
        logger.error("Wrong GTIN check digit in AI 01: %s", element.data)
        raise InvalidValueError(
            "Wrong GTIN check digit", context={"ai": "01", "data": element.data}
        )


def _check_capacity(elements: Sequence[Element]) -> None:
    text = "".join(element.ai + element.data for element in elements)
    non_digits = sum(1 for ch in text if not ch.isdigit())
    if len(text) > MAX_NUMERIC_CHARS or non_digits > MAX_ALPHANUMERIC_CHARS:
        logger.error(
            "Element string too long: %d characters, %d non-numeric",
            len(text),
            non_digits,
        )
        raise InvalidValueError(
            "Element string exceeds 74 numeric or 41 alphanumeric characters",
            context={"characters": len(text), "non_numeric": non_digits},
        )


def parse_element_string(value: str) -> List[Element]:
    """
    Parse and validate a bracketed AI element string.

    Args:
        value: String like ``(01)98898765432106(3202)012345(15)991231``.

    Returns:
        Elements in input order.

    Raises:
        InvalidValueError: Malformed brackets, empty AI or data, data that
            does not fit the AI format, wrong GTIN check digit or too long
            element string.
        UnsupportedAIError: AI missing from :data:`AI_TABLE`.

    Example:
        >>> [e.ai for e in parse_element_string("(01)90012345678908(3103)001234")]
        ['01', '3103']
    """
    if not value or not _ELEMENT_STRING_RE.fullmatch(value):
        logger.error("Malformed AI element string %r", value)
        raise InvalidValueError(
            "Malformed AI element string, expected (AI)data(AI)data...",
            context={"value": value},
        )
    elements = [Element(ai, data) for ai, data in _ELEMENT_RE.findall(value)]
    for element in elements:
        _validate_element(element)
    _check_capacity(elements)
    return elements


def _match_definition(raw: str, index: int) -> Optional[AIDefinition]:
    for definition in AI_TABLE:
        if raw.startswith(definition.prefix, index):
            return definition
    return None


def bracket_element_string(raw: str, separator: str = "|") -> str:
    """
    Insert AI brackets into an unbracketed element string.

    Variable-length data runs up to ``separator`` (or its maximum length);
    the separator itself is dropped.

    Example:
        >>> bracket_element_string("0199312650999998|91ZLE0001|4201890")
        '(01)99312650999998(91)ZLE0001(420)1890'
    """
    parts: List[str] = []
    i = 0
    while i < len(raw):
        if raw[i] == separator:
            i += 1
            continue
        definition = _match_definition(raw, i)
        if definition is None or i + definition.length > len(raw):
            logger.error("No AI matches %r at position %d", raw[i:], i)
            raise InvalidValueError(
                "Cannot find AI in element string", context={"position": i}
            )
        parts.append("(" + raw[i : i + definition.length] + ")")
        i += definition.length
        stop = raw.find(separator, i)
        if stop < 0:
            stop = len(raw)
        for fmt in definition.formats:
            end = min(i + fmt.max_length, stop)
            if fmt.min_length == fmt.max_length and end - i < fmt.min_length:
                raise InvalidValueError(
                    "AI data is shorter than its fixed length",
                    context={"ai": parts[-1], "length": end - i},
                )
            parts.append(raw[i:end])
            i = end
    return "".join(parts)


def data_stream(elements: Sequence[Element]) -> str:
    """AI digits and data without brackets, FNC1 after variable-length elements."""
    chunks: List[str] = []
    last = len(elements) - 1
    for index, element in enumerate(elements):
        chunks.append(element.ai + element.data)
        if index < last and not element.is_predefined_length:
            chunks.append(FNC1)
    return "".join(chunks)


def caption_text(elements: Sequence[Element]) -> str:
    return "".join(element.bracketed for element in elements)
