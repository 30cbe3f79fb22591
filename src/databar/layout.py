"""
RU: Компоновка строк символа: данные, разделители, многоярусные варианты.
EN: Symbol row layout: data rows, separator patterns and stacked variants.

Output contract of the encoder: a :class:`Symbol` made of rows of
``(modules, is_bar)`` runs. Every row starts at module 0; a separator that
begins further right starts with a light run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from src.databar.assembler import (
    STACKED_ROW_MODULES,
    ExpandedSigns,
    OmniSigns,
)
from src.databar.exceptions import EncodingInvariantError
from src.databar.signs import GUARD
from src.model.enums import DataBarVariant

logger = logging.getLogger(__name__)

__all__ = [
    "Run",
    "SymbolRow",
    "Symbol",
    "modules_from_widths",
    "runs_from_widths",
    "runs_from_modules",
    "compose_linear",
    "compose_stacked",
    "compose_stacked_omni",
    "compose_expanded_stacked",
]

STACKED_UPPER_HEIGHT = 5
STACKED_LOWER_HEIGHT = 7
SEPARATOR_HEIGHT = 1
# over finder value 3 the finder part of the lower separator holds one dark
# module, over the start of the three-module finder bar
_FINDER_VALUE_3 = (3, 1, 9, 1, 1)
_FINDER_VALUE_3_DARK_MODULE = 29


# ==============================================================================
# MODEL
# ==============================================================================


@dataclass(frozen=True)
class Run:
    modules: int
    is_bar: bool


@dataclass(frozen=True)
class SymbolRow:
    """
    One horizontal row of a symbol.

    Attributes:
        runs: Alternating light/dark runs from module 0.
        height: Row height in modules.
        is_separator: Separator pattern row between data rows.
    """

    runs: Tuple[Run, ...]
    height: int
    is_separator: bool = False

    @property
    def modules(self) -> int:
        return sum(run.modules for run in self.runs)

    def module_colors(self) -> List[int]:
        """1 for every dark module, 0 for every light one."""
        colors: List[int] = []
        for run in self.runs:
            colors.extend([1 if run.is_bar else 0] * run.modules)
        return colors


@dataclass(frozen=True)
class Symbol:
    """
    Encoded symbol.

    Attributes:
        variant: Symbology variant.
        rows: Rows top to bottom.
        module_width: Pixels (or other units) per module.
        text: Human readable text (caption value).
    """

    variant: DataBarVariant
    rows: Tuple[SymbolRow, ...]
    module_width: int = 1
    text: str = ""

    @property
    def width_modules(self) -> int:
        return max((row.modules for row in self.rows), default=0)

    @property
    def height_modules(self) -> int:
        return sum(row.height for row in self.rows)

    @property
    def width(self) -> int:
        return self.width_modules * self.module_width

    @property
    def height(self) -> int:
        return self.height_modules * self.module_width

    @property
    def data_rows(self) -> List[SymbolRow]:
        return [row for row in self.rows if not row.is_separator]

    def widths(self) -> List[int]:
        """Element widths of a single-row symbol."""
        if len(self.rows) != 1:
            raise ValueError("widths() is defined for single-row symbols only")
        return [run.modules for run in self.rows[0].runs]


# ==============================================================================
# CONVERSIONS
# ==============================================================================


def modules_from_widths(widths: Iterable[int], first_is_bar: bool = False) -> List[int]:
    colors: List[int] = []
    is_bar = first_is_bar
    for width in widths:
        colors.extend([1 if is_bar else 0] * width)
        is_bar = not is_bar
    return colors


def runs_from_widths(widths: Iterable[int], first_is_bar: bool = False) -> Tuple[Run, ...]:
    runs: List[Run] = []
    is_bar = first_is_bar
    for width in widths:
        runs.append(Run(width, is_bar))
        is_bar = not is_bar
    return tuple(runs)


def runs_from_modules(colors: Sequence[int]) -> Tuple[Run, ...]:
    """Collapse per-module colors into runs."""
    runs: List[Run] = []
    for color in colors:
        is_bar = color == 1
        if runs and runs[-1].is_bar == is_bar:
            runs[-1] = Run(runs[-1].modules + 1, is_bar)
        else:
            runs.append(Run(1, is_bar))
    return tuple(runs)


def _separator_row(colors: Sequence[int]) -> SymbolRow:
    return SymbolRow(runs_from_modules(colors), SEPARATOR_HEIGHT, is_separator=True)


# ==============================================================================
# LINEAR
# ==============================================================================


def compose_linear(widths: Sequence[int], height: int) -> Tuple[SymbolRow, ...]:
    return (SymbolRow(runs_from_widths(widths), height),)


# ==============================================================================
# STACKED / STACKED OMNIDIRECTIONAL
# ==============================================================================


def _stacked_rows(signs: OmniSigns) -> Tuple[List[int], List[int]]:
    upper = modules_from_widths(signs.upper_row(), first_is_bar=False)
    lower = modules_from_widths(signs.lower_row(), first_is_bar=True)
    if len(upper) != STACKED_ROW_MODULES or len(lower) != STACKED_ROW_MODULES:
        raise EncodingInvariantError(
            "Stacked row must have 50 modules",
            context={"upper": len(upper), "lower": len(lower)},
        )
    return upper, lower


def compose_stacked(signs: OmniSigns) -> Tuple[SymbolRow, ...]:
    """
    GS1 DataBar Stacked: 5X upper row, 1X separator, 7X lower row.

    Separator modules 4..45 complement the rows where both rows agree and
    alternate where they differ; module 3 is light.
    """
    upper, lower = _stacked_rows(signs)
    separator = [0] * STACKED_ROW_MODULES
    for i in range(4, STACKED_ROW_MODULES - 4):
        if upper[i] == lower[i]:
            separator[i] = 1 - upper[i]
        else:
            separator[i] = 1 - separator[i - 1]
    return (
        SymbolRow(runs_from_modules(upper), STACKED_UPPER_HEIGHT),
        _separator_row(separator),
        SymbolRow(runs_from_modules(lower), STACKED_LOWER_HEIGHT),
    )


def _omni_separator(row: Sequence[int], finder_value_3: bool = False) -> List[int]:
    separator = [0] * STACKED_ROW_MODULES
    for i in range(4, STACKED_ROW_MODULES - 4):
        if 18 <= i <= 30:
            if finder_value_3:
                separator[i] = int(i == _FINDER_VALUE_3_DARK_MODULE)
            elif row[i] == 1:
                separator[i] = 0
            else:
                separator[i] = 1 - separator[i - 1]
        else:
            separator[i] = 1 - row[i]
    return separator


def compose_stacked_omni(signs: OmniSigns, total_height: int) -> Tuple[SymbolRow, ...]:
    """
    GS1 DataBar Stacked Omnidirectional: two data rows of
    ``round((H - 3) / 2)`` modules and three separator rows.
    """
    upper, lower = _stacked_rows(signs)
    row_height = round((total_height - 3) / 2)
    middle = [
        1 if 4 < i < STACKED_ROW_MODULES - 4 and i % 2 == 1 else 0
        for i in range(STACKED_ROW_MODULES)
    ]
    finder_value_3 = signs.right_finder == _FINDER_VALUE_3
    return (
        SymbolRow(runs_from_modules(upper), row_height),
        _separator_row(_omni_separator(upper)),
        _separator_row(middle),
        _separator_row(_omni_separator(lower, finder_value_3)),
        SymbolRow(runs_from_modules(lower), row_height),
    )


# ==============================================================================
# EXPANDED STACKED
# ==============================================================================


def _sign_separator(widths: Sequence[int], first_space: bool) -> List[int]:
    colors: List[int] = []
    for position, width in enumerate(widths):
        dark = (position % 2 == 1) if first_space else (position % 2 == 0)
        colors.extend([1 if dark else 0] * width)
    return colors


def _finder_separator(
    widths: Sequence[int], first_space: bool, previous: List[int]
) -> List[int]:
    """Light over finder bars; over finder spaces the modules alternate."""
    colors: List[int] = []
    for position, width in enumerate(widths):
        alternate = (position % 2 == 1) if first_space else (position % 2 == 0)
        for _ in range(width):
            if alternate:
                last = colors[-1] if colors else (previous[-1] if previous else 0)
                colors.append(1 - last)
            else:
                colors.append(0)
    return colors


@dataclass
class _ExpandedRow:
    widths: List[int]
    separator: List[int]
    odd_row: bool
    flip: bool


def _build_expanded_row(
    signs: ExpandedSigns,
    first_index: int,
    last_index: int,
    odd_row: bool,
    inversion: bool,
) -> Tuple[_ExpandedRow, int]:
    widths: List[int] = list(GUARD)
    separator = _sign_separator(GUARD, not odd_row)
    finder_count = 0

    def first_space() -> bool:
        parity = len(widths) % 2 != 0
        return parity if inversion else parity != odd_row

    for index in range(first_index, last_index):
        sign = signs.sign_widths(index)
        separator.extend(_sign_separator(sign, first_space()))
        widths.extend(sign)
        if index % 2 == 0:
            _, finder = signs.finder_after(index)
            separator.extend(_finder_separator(finder, first_space(), separator))
            widths.extend(finder)
            finder_count += 1

    widths.extend(GUARD)
    separator.extend(_sign_separator(GUARD, not odd_row))
    for i in range(4):
        separator[i] = 0
        separator[-1 - i] = 0
    return _ExpandedRow(widths, separator, odd_row, odd_row and inversion), finder_count


def compose_expanded_stacked(
    signs: ExpandedSigns, segments_per_row: int, row_height: int
) -> Tuple[SymbolRow, ...]:
    """
    GS1 DataBar Expanded Stacked rows.

    Rows hold ``segments_per_row`` signs. When ``segments_per_row / 2`` is
    even (and more than 2 segments per row) odd rows are mirrored. Between
    two data rows come the lower row's separator, an alternating middle
    row and the next row's separator.
    """
    total = len(signs.signs)
    row_count = -(-total // segments_per_row)
    inversion = segments_per_row > 2 and (segments_per_row // 2) % 2 == 0

    built: List[_ExpandedRow] = []
    for k in range(row_count):
        first = k * segments_per_row
        last = min(first + segments_per_row, total)
        row, finder_count = _build_expanded_row(
            signs, first, last, odd_row=k % 2 == 1, inversion=inversion
        )
        if k == row_count - 1 and finder_count % 2 == 1 and row.flip:
            # mirrored last row with an odd finder count is drawn forward, one module to the right
            row.separator.insert(0, 0)
            row.widths[0] += 1
            row.odd_row = False
            row.flip = False
            logger.debug("Last row of %d shifted by one module", row_count)
        built.append(row)

    rows: List[SymbolRow] = []
    for k, row in enumerate(built):
        widths = list(reversed(row.widths)) if row.flip else row.widths
        separator = list(reversed(row.separator)) if row.flip else row.separator
        if k > 0:
            rows.append(_separator_row(separator))
        rows.append(SymbolRow(runs_from_widths(widths, first_is_bar=row.odd_row), row_height))
        if k < row_count - 1:
            rows.append(_separator_row(separator))
            length = len(separator)
            middle = [1 if i % 2 == 1 and 3 < i < length - 4 else 0 for i in range(length)]
            rows.append(_separator_row(middle))
    return tuple(rows)
