"""Decoded filament record produced by a tag scan."""

import dataclasses
import math
import re
import struct
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from spooltag.config import DEFAULT_EMPTY_SPOOL_WEIGHT, DEFAULT_SPOOL_WEIGHT, MANUFACTURER
from spooltag.library.matching import FilamentCatalogEntry

COLOR_FROM_CATALOG = "from catalog"
COLOR_APPROXIMATE = "approximate"

_NON_ALNUM = re.compile(r"[^a-zA-Z0-9]")


def _single_precision_str(value: float) -> str:
    """Shortest decimal text that reads back as the same 32-bit float."""
    if not math.isfinite(value):
        return str(value)
    packed = struct.pack("<f", value)
    for digits in range(1, 10):
        text = f"{value:.{digits}g}"
        if struct.pack("<f", float(text)) == packed:
            break
    if "e" not in text and "." not in text:
        text += ".0"
    return text


@dataclass(frozen=True)
class DecodedFilamentRecord:
    """
    Filament attributes decoded from one tag scan.

    Instances are immutable; later stages (catalog selection, weighing,
    inventory sync) produce copies through ``with_changes``.
    """

    uid: str
    tray_uid: str
    filament_type: str
    detailed_filament_type: str
    color_bytes: bytes
    color_hex: str
    color_name: str
    color_name_detail: str
    spool_weight: int = DEFAULT_SPOOL_WEIGHT
    filament_diameter: float = 0.0
    filament_length: int = 0
    production_datetime: Optional[datetime] = None
    possible_matches: tuple[tuple[FilamentCatalogEntry, int], ...] = ()

    # Filled in after decoding
    vendor_name: str = MANUFACTURER
    vendor_id: Optional[int] = None
    catalog_id: Optional[str] = None
    filament_density: Optional[float] = None
    filament_id: Optional[int] = None
    spool_id: Optional[int] = None
    empty_weight: int = DEFAULT_EMPTY_SPOOL_WEIGHT
    actual_weight: Optional[int] = None

    def with_changes(self, **changes) -> "DecodedFilamentRecord":
        """Return a copy with the given fields replaced."""
        return dataclasses.replace(self, **changes)

    @property
    def rgb(self) -> str:
        return self.color_hex[:6]

    @property
    def default_filament_id(self) -> str:
        """Synthetic catalog id built from vendor, type, colour, weight and diameter."""
        parts = [
            self.vendor_name,
            self.detailed_filament_type,
            self.color_name,
            str(self.spool_weight),
            _single_precision_str(self.filament_diameter),
        ]
        cleaned = [_NON_ALNUM.sub("", p) for p in parts if p is not None]
        return "_".join(p for p in cleaned if p).lower()

    @property
    def effective_catalog_id(self) -> str:
        return self.catalog_id or self.default_filament_id

    @property
    def used_weight(self) -> int:
        if self.actual_weight is None:
            return 0
        return self.spool_weight + self.empty_weight - self.actual_weight

    @property
    def percent_remaining(self) -> int:
        if self.actual_weight is None or not self.spool_weight:
            return 100
        # Integer division truncating toward zero
        return int((self.actual_weight - self.empty_weight) * 100 / self.spool_weight)

    @property
    def remaining_filament_length(self) -> int:
        return int(self.percent_remaining * self.filament_length / 100)

    @property
    def computed_filament_density(self) -> Optional[float]:
        """Density in g/cm³ from weight, length (m) and diameter (mm)."""
        if not self.filament_length or not self.filament_diameter:
            return None
        radius_cm = self.filament_diameter / 10 / 2
        return self.spool_weight / (self.filament_length * 100 * math.pi * radius_cm ** 2)

    def to_dict(self) -> dict:
        """Serialize to a JSON-compatible dict."""
        return {
            "uid": self.uid,
            "tray_uid": self.tray_uid,
            "filament_type": self.filament_type,
            "detailed_filament_type": self.detailed_filament_type,
            "color_bytes": self.color_bytes.hex().upper(),
            "color_hex": self.color_hex,
            "color_name": self.color_name,
            "color_name_detail": self.color_name_detail,
            "spool_weight": self.spool_weight,
            "filament_diameter": self.filament_diameter,
            "filament_length": self.filament_length,
            "production_datetime": (
                self.production_datetime.isoformat() if self.production_datetime else None
            ),
            "possible_matches": [
                {"entry": entry.to_dict(), "score": score}
                for entry, score in self.possible_matches
            ],
            "vendor_name": self.vendor_name,
            "vendor_id": self.vendor_id,
            "catalog_id": self.catalog_id,
            "default_filament_id": self.default_filament_id,
            "filament_density": self.filament_density,
            "filament_id": self.filament_id,
            "spool_id": self.spool_id,
            "empty_weight": self.empty_weight,
            "actual_weight": self.actual_weight,
            "percent_remaining": self.percent_remaining,
        }
