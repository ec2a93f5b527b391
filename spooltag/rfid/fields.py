"""
Fixed-offset field extraction from a raw tag dump.

Every function addresses the dump by (block number, offset within the block,
length); the absolute position is ``block * 16 + offset``. All multi-byte
numeric values on the tag are little endian.
"""

import math
import re
import struct
from datetime import datetime
from typing import Optional

from .errors import (
    InvalidDateTimeError, OutOfBoundsError, UnsupportedWidthError,
)
from .mifare import BYTES_PER_BLOCK

DATETIME_FORMAT = "%Y_%m_%d_%H_%M"
# Every component zero-padded, e.g. "2024_03_15_10_30"
_DATETIME_RE = re.compile(r"\d{4}_\d{2}_\d{2}_\d{2}_\d{2}")

_UINT_FORMATS = {2: "<H", 4: "<I"}
_FLOAT_FORMATS = {4: "<f", 8: "<d"}


def read_bytes(data: bytes, block: int, offset: int, length: int) -> bytes:
    """Return a copy of ``length`` bytes starting at (block, offset)."""
    start = block * BYTES_PER_BLOCK + offset
    end = start + length
    if start < 0 or length < 0 or end > len(data):
        raise OutOfBoundsError(
            f"Field at block {block} offset {offset} length {length} "
            f"is outside a {len(data)}-byte dump"
        )
    return bytes(data[start:end])


def read_hex(data: bytes, block: int, offset: int, length: int) -> str:
    """Uppercase hex, two characters per byte, no separator."""
    return read_bytes(data, block, offset, length).hex().upper()


def read_string(data: bytes, block: int, offset: int, length: int) -> str:
    """UTF-8 text with the NUL padding removed."""
    raw = read_bytes(data, block, offset, length)
    return raw.decode("utf-8", errors="replace").replace("\x00", "")


def read_uint(data: bytes, block: int, offset: int, length: int = 2) -> int:
    """Little-endian unsigned integer of 2 or 4 bytes."""
    fmt = _UINT_FORMATS.get(length)
    if fmt is None:
        raise UnsupportedWidthError(f"Unsupported length {length} for unsigned number extraction")
    return struct.unpack(fmt, read_bytes(data, block, offset, length))[0]


def round_half_up(value: float, digits: int) -> float:
    if not math.isfinite(value):
        return value
    scale = 10 ** digits
    return math.floor(value * scale + 0.5) / scale


def to_single(value: float) -> float:
    """Narrow a double to the nearest single-precision value."""
    try:
        return struct.unpack("<f", struct.pack("<f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def read_float(data: bytes, block: int, offset: int, length: int = 8,
               frac_round: Optional[int] = None) -> float:
    """
    Little-endian IEEE-754 value of 4 or 8 bytes.

    Doubles are narrowed to single precision. When ``frac_round`` is given the
    value is rounded half-up to that many decimal places.
    """
    fmt = _FLOAT_FORMATS.get(length)
    if fmt is None:
        raise UnsupportedWidthError(f"Unsupported length {length} for floating point extraction")
    value = struct.unpack(fmt, read_bytes(data, block, offset, length))[0]
    if frac_round is not None:
        value = round_half_up(value, frac_round)
    return to_single(value)


def read_datetime(data: bytes, block: int, offset: int, length: int = 16) -> datetime:
    """Parse a ``yyyy_MM_dd_HH_mm`` text field."""
    text = read_string(data, block, offset, length)
    if not _DATETIME_RE.fullmatch(text):
        raise InvalidDateTimeError(f"Invalid production datetime {text!r}")
    try:
        return datetime.strptime(text, DATETIME_FORMAT)
    except ValueError as e:
        raise InvalidDateTimeError(f"Invalid production datetime {text!r}: {e}") from e
