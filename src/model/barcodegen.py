# RU: Домейн-модель штрихкода GS1 DataBar с fail-fast валидацией, manifest вариантов/опций и опциональным error recording.
# EN: Domain GS1 DataBar barcode model with fail-fast validation, variant/option manifest, and optional error recording.

import logging
from dataclasses import asdict, dataclass, field, fields
from typing import Any, ClassVar, Dict, FrozenSet, Optional

from PIL import Image

from src.databar.config import VARIANT_GEOMETRY, EncodeOptions
from src.databar.encoder import encode, encoded_value
from src.databar.layout import Symbol
from src.databar.render import RenderOptions, render_bytes, render_image

from .enums import DataBarVariant

logger = logging.getLogger(__name__)

_ENCODE_OPTION_KEYS: FrozenSet[str] = frozenset(f.name for f in fields(EncodeOptions))


@dataclass
class Barcode:
    """
    Domain-level dataclass for a GS1 DataBar symbol with:
        - Multi-layer validation (fields, option allowlist, full encode)
        - Manifest: input kind, option allowlist and height range per variant
        - API-friendly: errors recordable instead of throwing

    Examples (integration):
        bc = Barcode(variant=DataBarVariant.LIMITED, data="1501234567890")
        ok = bc.validate(record_error=True)
        if not ok:
            print(bc.validation_error_message)
        png = bc.render_bytes()
        manifest = Barcode.supported_matrix()
    """

    schema_version: ClassVar[str] = "1.0"

    variant: DataBarVariant
    data: str
    caption: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    validation_state: Optional[str] = None
    validation_error_message: Optional[str] = None

    @classmethod
    def supported_matrix(cls) -> Dict[str, Dict[str, Any]]:
        """
        Returns the manifest: for each variant, its input kind, allowed
        options and bar height range. Used for API autodocs.
        """
        result: Dict[str, Dict[str, Any]] = {}
        for variant, geometry in VARIANT_GEOMETRY.items():
            allowlist = set(_ENCODE_OPTION_KEYS)
            if variant is not DataBarVariant.EXPANDED_STACKED:
                allowlist.discard("segments_per_row")
            result[variant.value] = {
                "display_name": geometry.display_name,
                "input": "element_string" if variant.is_expanded else "gtin",
                "options_allowlist": sorted(allowlist),
                "min_height": geometry.min_height,
                "max_height": geometry.max_height,
            }
        return result

    def _validate_options(self, allowlist: set[str]) -> None:
        for k in self.options:
            if k not in allowlist:
                raise ValueError(
                    f"Option '{k}' not allowed for variant {self.variant.value}"
                )

    def encode_options(self) -> EncodeOptions:
        return EncodeOptions(**self.options)

    def validate(self, record_error: bool = False) -> bool:
        """
        Validates the barcode object:
        - Field validation
        - Option allowlist validation from manifest
        - Full encode (fail fast)
        - If record_error: on error, sets self.validation_error_message instead of raising

        Returns: True if ok, False if error (when record_error)
        Raises: ValueError (InvalidValueError) if error and not record_error
        """
        logger.info("Validating Barcode: variant=%r data=%r", self.variant, self.data)
        try:
            if not isinstance(self.variant, DataBarVariant):
                raise ValueError(f"Invalid variant: {self.variant}")
            if not isinstance(self.data, str) or not self.data.strip():
                raise ValueError("Data must be a non-empty string")

            manifest = self.supported_matrix()[self.variant.value]
            self._validate_options(set(manifest["options_allowlist"]))
            encode(self.data, self.variant, self.encode_options())

            self.validation_state = "ok"
            self.validation_error_message = None
            return True
        except (ValueError, TypeError) as ex:
            msg: str = str(ex)
            logger.warning("Barcode validation error: %s", msg)
            self.validation_state = "invalid"
            self.validation_error_message = msg
            if record_error:
                return False
            raise

    def encode(self) -> Symbol:
        return encode(self.data, self.variant, self.encode_options())

    def human_readable(self) -> str:
        """Caption text: explicit caption, or the bracketed encoded value."""
        if self.caption is not None:
            return self.caption
        return encoded_value(
            self.data,
            self.variant,
            for_caption=True,
            checksum_mandatory=bool(self.options.get("checksum_mandatory", False)),
        )

    def render_image(self, options: Optional[RenderOptions] = None) -> Image.Image:
        return render_image(self.encode(), options)

    def render_bytes(
        self, format: str = "PNG", options: Optional[RenderOptions] = None
    ) -> bytes:
        return render_bytes(self.encode(), format, options)

    def to_dict(self) -> Dict[str, Any]:
        dct: Dict[str, Any] = asdict(self)
        dct["variant"] = self.variant.value
        dct["schema_version"] = self.schema_version
        return dct

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Barcode":
        d = dict(d)
        if "schema_version" in d and d["schema_version"] != cls.schema_version:
            logger.warning(
                "Schema version mismatch (expected %s, got %s)",
                cls.schema_version,
                d["schema_version"],
            )
        d.pop("schema_version", None)
        d["variant"] = DataBarVariant(d["variant"])
        return cls(**d)

    def __str__(self) -> str:
        datashow: str = self.data[:16] + ("..." if len(self.data) > 16 else "")
        return f"Barcode({self.variant.value}, data={datashow})"
