"""
model/enums.py

(Краткое RU: Перечисления семейства штрихкодов GS1 DataBar и режимов упаковки данных.)

EN: Domain enums for the GS1 DataBar encoder (ISO/IEC 24724).
NO encoding logic here!

- Only the seven DataBar symbologies (RSS-14 family, Limited, Expanded family).
- Compaction modes of the Expanded general purpose data field.
- Encoding methods of the Expanded compressed data fields.

See Also:
    - ISO/IEC 24724:2011, GS1 General Specifications section 5.5
    - src/databar (for encoding logic)
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Final, FrozenSet, Literal

_logger: Final[logging.Logger] = logging.getLogger(__name__)

# === DOMAINS ===


class DataBarVariant(str, Enum):
    OMNIDIRECTIONAL = "omnidirectional"
    TRUNCATED = "truncated"
    STACKED = "stacked"
    STACKED_OMNIDIRECTIONAL = "stacked_omnidirectional"
    LIMITED = "limited"
    EXPANDED = "expanded"
    EXPANDED_STACKED = "expanded_stacked"

    @property
    def is_expanded(self) -> bool:
        """Variants fed with AI element strings instead of a bare GTIN."""
        return self in _EXPANDED_VARIANTS

    @property
    def is_gtin_based(self) -> bool:
        return not self.is_expanded

    @property
    def is_stacked(self) -> bool:
        return self in _STACKED_VARIANTS

    @property
    def is_omnidirectional_family(self) -> bool:
        """Variants built from two outer and two inner RSS-14 signs."""
        return self in _OMNI_FAMILY

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        names_ru = {
            self.OMNIDIRECTIONAL: "GS1 DataBar всенаправленный",
            self.TRUNCATED: "GS1 DataBar усечённый",
            self.STACKED: "GS1 DataBar многоярусный",
            self.STACKED_OMNIDIRECTIONAL: "GS1 DataBar многоярусный всенаправленный",
            self.LIMITED: "GS1 DataBar ограниченный",
            self.EXPANDED: "GS1 DataBar расширенный",
            self.EXPANDED_STACKED: "GS1 DataBar расширенный многоярусный",
        }
        names_en = {
            self.OMNIDIRECTIONAL: "GS1 DataBar Omnidirectional",
            self.TRUNCATED: "GS1 DataBar Truncated",
            self.STACKED: "GS1 DataBar Stacked",
            self.STACKED_OMNIDIRECTIONAL: "GS1 DataBar Stacked Omnidirectional",
            self.LIMITED: "GS1 DataBar Limited",
            self.EXPANDED: "GS1 DataBar Expanded",
            self.EXPANDED_STACKED: "GS1 DataBar Expanded Stacked",
        }
        return (
            names_ru.get(self, self.value)
            if lang == "ru"
            else names_en.get(self, self.value)
        )


_EXPANDED_VARIANTS: Final[FrozenSet[DataBarVariant]] = frozenset(
    {DataBarVariant.EXPANDED, DataBarVariant.EXPANDED_STACKED}
)
_STACKED_VARIANTS: Final[FrozenSet[DataBarVariant]] = frozenset(
    {
        DataBarVariant.STACKED,
        DataBarVariant.STACKED_OMNIDIRECTIONAL,
        DataBarVariant.EXPANDED_STACKED,
    }
)
_OMNI_FAMILY: Final[FrozenSet[DataBarVariant]] = frozenset(
    {
        DataBarVariant.OMNIDIRECTIONAL,
        DataBarVariant.TRUNCATED,
        DataBarVariant.STACKED,
        DataBarVariant.STACKED_OMNIDIRECTIONAL,
    }
)


class CompactionMode(str, Enum):
    """Current mode of the Expanded general purpose data field."""

    NUMERIC = "numeric"
    ALPHANUMERIC = "alphanumeric"
    ISO646 = "iso646"

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        names_ru = {
            self.NUMERIC: "Цифровой",
            self.ALPHANUMERIC: "Буквенно-цифровой",
            self.ISO646: "ISO/IEC 646",
        }
        return names_ru[self] if lang == "ru" else self.value


class EncodingMethod(str, Enum):
    """Encoding method field of an Expanded symbol (value is the bit pattern)."""

    GENERAL = "00"
    GTIN = "1"
    WEIGHT_3103 = "0100"
    WEIGHT_3202_3203 = "0101"
    PRICE_392X = "01100"
    PRICE_393X = "01101"
    WEIGHT_310X_11 = "0111000"
    WEIGHT_320X_11 = "0111001"
    WEIGHT_310X_13 = "0111010"
    WEIGHT_320X_13 = "0111011"
    WEIGHT_310X_15 = "0111100"
    WEIGHT_320X_15 = "0111101"
    WEIGHT_310X_17 = "0111110"
    WEIGHT_320X_17 = "0111111"

    @property
    def has_variable_length_field(self) -> bool:
        """Methods whose prefix is followed by the two variable-length bits."""
        return self in {
            EncodingMethod.GENERAL,
            EncodingMethod.GTIN,
            EncodingMethod.PRICE_392X,
            EncodingMethod.PRICE_393X,
        }

    @property
    def is_weight_and_date(self) -> bool:
        return self.value.startswith("0111")

    def localized_name(self, lang: Literal["ru", "en"] = "ru") -> str:
        return self.value
