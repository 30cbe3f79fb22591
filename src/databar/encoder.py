"""
RU: Публичный интерфейс кодировщика GS1 DataBar.
EN: Public GS1 DataBar encoder API.

Example:
    >>> from src.databar import encode
    >>> from src.model.enums import DataBarVariant
    >>> symbol = encode("(01)01234567890128", DataBarVariant.OMNIDIRECTIONAL)
    >>> symbol.width_modules, symbol.height_modules
    (96, 33)
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple, Union

from src.databar.ai import Element, caption_text, data_stream, parse_element_string
from src.databar.assembler import assemble_expanded, assemble_limited, assemble_omni
from src.databar.compaction import build_binary_string
from src.databar.config import MAX_SEGMENTS_PER_ROW, EncodeOptions, geometry_for
from src.databar.exceptions import EncodingInvariantError, InvalidValueError
from src.databar.gtin import check_limited_indicator, gtin_encoded_value, normalize_gtin
from src.databar.layout import (
    Symbol,
    SymbolRow,
    compose_expanded_stacked,
    compose_linear,
    compose_stacked,
    compose_stacked_omni,
)
from src.model.enums import DataBarVariant

logger = logging.getLogger(__name__)

__all__ = ["encode", "validate", "encoded_value"]

VariantLike = Union[DataBarVariant, str]


def _coerce_variant(variant: VariantLike) -> DataBarVariant:
    try:
        return DataBarVariant(variant)
    except ValueError:
        logger.error("Unknown DataBar variant %r", variant)
        raise InvalidValueError(
            "Unknown GS1 DataBar variant", context={"variant": variant}
        ) from None


def _normalized_gtin(value: str, variant: DataBarVariant, checksum_mandatory: bool) -> str:
    try:
        gtin14 = normalize_gtin(value, checksum_mandatory)
        if variant is DataBarVariant.LIMITED:
            check_limited_indicator(gtin14)
    except InvalidValueError as exc:
        exc.variant = variant.value
        raise
    return gtin14


def _parsed_elements(value: str, variant: DataBarVariant) -> List[Element]:
    try:
        return parse_element_string(value)
    except InvalidValueError as exc:
        exc.variant = variant.value
        raise


def _stacking(variant: DataBarVariant, options: EncodeOptions) -> Optional[int]:
    """Segments per row that affect compaction, ``None`` for a single row."""
    if variant is not DataBarVariant.EXPANDED_STACKED:
        return None
    if options.segments_per_row >= MAX_SEGMENTS_PER_ROW:
        return None
    return options.segments_per_row


def _check_elements(rows: Tuple[SymbolRow, ...], variant: DataBarVariant) -> None:
    expected = geometry_for(variant).element_count
    actual = sum(len(row.runs) for row in rows if not row.is_separator)
    if expected is not None and actual != expected:
        raise EncodingInvariantError(
            "Assembled symbol has a wrong number of elements",
            variant=variant.value,
            context={"elements": actual, "expected": expected},
        )


def _gtin_rows(
    gtin14: str, variant: DataBarVariant, options: EncodeOptions
) -> Tuple[SymbolRow, ...]:
    geometry = geometry_for(variant)
    drawn = gtin_encoded_value(gtin14)
    if variant is DataBarVariant.LIMITED:
        return compose_linear(assemble_limited(drawn), geometry.clamp_height(options.bar_height))

    signs = assemble_omni(drawn)
    if variant is DataBarVariant.STACKED:
        if options.bar_height is not None:
            logger.warning("GS1 DataBar Stacked has fixed row heights, bar_height ignored")
        return compose_stacked(signs)
    if variant is DataBarVariant.STACKED_OMNIDIRECTIONAL:
        return compose_stacked_omni(signs, geometry.clamp_height(options.bar_height))
    return compose_linear(signs.linear(), geometry.clamp_height(options.bar_height))


def _expanded_rows(
    elements: List[Element], variant: DataBarVariant, options: EncodeOptions
) -> Tuple[SymbolRow, ...]:
    height = geometry_for(variant).clamp_height(options.bar_height)
    try:
        payload = build_binary_string(elements, _stacking(variant, options))
    except InvalidValueError as exc:
        exc.variant = variant.value
        raise
    signs = assemble_expanded(payload.codewords)
    if variant is DataBarVariant.EXPANDED_STACKED:
        return compose_expanded_stacked(signs, options.segments_per_row, height)
    return compose_linear(signs.linear(), height)


def encode(
    value: str,
    variant: VariantLike,
    options: Optional[EncodeOptions] = None,
) -> Symbol:
    """
    Encode ``value`` as a GS1 DataBar symbol.

    Args:
        value: GTIN (up to 14 digits, optional ``(01)`` prefix) for the
            Omnidirectional family and Limited; bracketed AI element string
            for the Expanded variants.
        variant: Target symbology.
        options: Module width, bar height, segments per row and checksum mode.

    Returns:
        :class:`Symbol` with rows of runs, pixel width and height.

    Raises:
        InvalidValueError: Value cannot be encoded by ``variant``.
        EncodingInvariantError: Internal consistency failure.
    """
    options = options or EncodeOptions()
    databar_variant = _coerce_variant(variant)
    logger.debug("Encoding %r as %s", value, databar_variant.value)

    if databar_variant.is_gtin_based:
        gtin14 = _normalized_gtin(value, databar_variant, options.checksum_mandatory)
        rows = _gtin_rows(gtin14, databar_variant, options)
        text = gtin_encoded_value(gtin14, for_caption=True)
    else:
        elements = _parsed_elements(value, databar_variant)
        rows = _expanded_rows(elements, databar_variant, options)
        text = caption_text(elements)

    _check_elements(rows, databar_variant)
    symbol = Symbol(databar_variant, rows, options.module_width, text)
    logger.debug(
        "Encoded %s: %d rows, %dx%d modules",
        databar_variant.value,
        len(rows),
        symbol.width_modules,
        symbol.height_modules,
    )
    return symbol


def validate(value: str, variant: VariantLike, checksum_mandatory: bool = False) -> bool:
    """
    Check whether ``value`` can be encoded by ``variant``.

    Input problems give ``False``; internal invariant failures propagate.
    """
    try:
        encode(value, variant, EncodeOptions(checksum_mandatory=checksum_mandatory))
    except InvalidValueError as exc:
        logger.info("Value rejected: %s", exc)
        return False
    return True


def encoded_value(
    value: str,
    variant: VariantLike,
    for_caption: bool = False,
    checksum_mandatory: bool = False,
) -> str:
    """
    Value as drawn into the symbol, or as shown in the caption.

    GTIN variants draw the linkage flag and 13 digits and caption
    ``(01)`` + GTIN-14. Expanded variants draw the AI data stream with FNC1
    (``\\x1d``) after variable-length elements and caption the bracketed
    element string.

    Examples:
        >>> encoded_value("0123456789012", "omnidirectional")
        '00123456789012'
        >>> encoded_value("0123456789012", "omnidirectional", for_caption=True)
        '(01)01234567890128'
    """
    databar_variant = _coerce_variant(variant)
    if databar_variant.is_gtin_based:
        gtin14 = _normalized_gtin(value, databar_variant, checksum_mandatory)
        return gtin_encoded_value(gtin14, for_caption)
    elements = _parsed_elements(value, databar_variant)
    return caption_text(elements) if for_caption else data_stream(elements)
