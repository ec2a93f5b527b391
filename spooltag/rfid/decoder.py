"""
Spool tag record decoding: fixed block layout to DecodedFilamentRecord.

Based on community reverse-engineering from:
https://github.com/Bambu-Research-Group/RFID-Tag-Guide/blob/main/BambuLabRfid.md

Field map (block, offset within block, length):
  Block 2  [0:16]  filament type (short), e.g. "PLA"
  Block 4  [0:16]  detailed filament type, e.g. "PLA Basic"
  Block 5  [0:4]   colour RGBA
  Block 5  [4:6]   spool weight in grams (uint16)
  Block 5  [8:12]  filament diameter in mm (float32)
  Block 9  [0:16]  tray UID
  Block 12 [0:16]  production datetime "yyyy_MM_dd_HH_mm"
  Block 14 [4:6]   filament length in meters (uint16)
"""

import logging
from typing import Iterable, Optional

from spooltag import config
from spooltag.library.matching import FilamentCatalogEntry, filter_by_color, rank_by_similarity
from spooltag.spool.models import COLOR_APPROXIMATE, COLOR_FROM_CATALOG, DecodedFilamentRecord

from .colors import color_name_from_bytes
from .dump_parser import uid_from_dump
from .errors import InsufficientDataError
from .fields import read_bytes, read_datetime, read_float, read_hex, read_string, read_uint
from .mifare import BYTES_PER_BLOCK

logger = logging.getLogger(__name__)

# Blocks 0-4 must be present before any field is touched
MIN_DUMP_SIZE = 5 * BYTES_PER_BLOCK


def decode(data: bytes, uid: str, catalog: Iterable[FilamentCatalogEntry] = (), *,
           vendor_name: Optional[str] = None,
           diameter_round: Optional[int] = None) -> DecodedFilamentRecord:
    """
    Decode a tag dump and match its colour against a filament catalog.

    Args:
        data: Raw tag bytes, block 0 first.
        uid: Tag UID as a hex string.
        catalog: Reference entries used to name the colour.
        vendor_name: Vendor stored on the record (defaults to the configured manufacturer).
        diameter_round: Decimal places for the filament diameter, None for no rounding.

    Raises:
        InsufficientDataError: The dump is shorter than 80 bytes.
        DecodeError: A field is out of range or malformed.
    """
    if len(data) < MIN_DUMP_SIZE:
        raise InsufficientDataError(
            f"Insufficient data in tag dump: {len(data)} bytes, need at least {MIN_DUMP_SIZE}"
        )

    tray_uid = read_hex(data, 9, 0, 16)
    color_bytes = read_bytes(data, 5, 0, 4)
    filament_type = read_string(data, 2, 0, 16)
    color_hex = read_hex(data, 5, 0, 4)
    detailed_filament_type = read_string(data, 4, 0, 16)
    spool_weight = read_uint(data, 5, 4)
    filament_diameter = read_float(data, 5, 8, 4, frac_round=diameter_round)
    filament_length = read_uint(data, 14, 4)
    production_datetime = read_datetime(data, 12, 0)

    rgb = color_hex[:6]
    exact = filter_by_color(catalog, rgb)
    possible_matches = rank_by_similarity(detailed_filament_type, exact)

    if possible_matches:
        color_name = possible_matches[0][0].name
    else:
        color_name = color_name_from_bytes(color_bytes)
    color_name_detail = COLOR_FROM_CATALOG if exact else COLOR_APPROXIMATE

    logger.info(
        f"Decoded tag {uid}: {detailed_filament_type or filament_type} #{rgb} "
        f"({color_name}, {color_name_detail}, {len(possible_matches)} catalog matches)"
    )

    return DecodedFilamentRecord(
        uid=uid,
        tray_uid=tray_uid,
        filament_type=filament_type,
        detailed_filament_type=detailed_filament_type,
        color_bytes=color_bytes,
        color_hex=color_hex,
        color_name=color_name,
        color_name_detail=color_name_detail,
        spool_weight=spool_weight,
        filament_diameter=filament_diameter,
        filament_length=filament_length,
        production_datetime=production_datetime,
        possible_matches=tuple(possible_matches),
        vendor_name=vendor_name or config.MANUFACTURER,
    )


def decode_dump(data: bytes, catalog: Iterable[FilamentCatalogEntry] = (), **kwargs) -> DecodedFilamentRecord:
    """Decode a full dump, taking the UID from block 0."""
    return decode(data, uid_from_dump(data).hex().upper(), catalog, **kwargs)
