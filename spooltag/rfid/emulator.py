"""
In-memory MIFARE Classic tag backed by a dump.

Lets captured dumps go through the same authenticated read path as a
physical tag: each sector only opens with the Key A stored in its trailer.
"""

import logging
from typing import Optional

from spooltag.crypto.kdf import derive_keys

from .mifare import (
    BYTES_PER_BLOCK, KEY_A_LENGTH, block_count_in_sector, block_to_byte_offset,
    build_sector_trailer, parse_sector_trailer, sector_count_for_size,
    sector_to_block, sector_trailer_block,
)
from .reader import TagHandle

logger = logging.getLogger(__name__)


class EmulatedTag(TagHandle):
    """A tag handle serving blocks from a full dump."""

    def __init__(self, uid: Optional[bytes], dump: bytes, fail_on_read: Optional[int] = None,
                 fail_on_connect: bool = False):
        self._uid = uid
        self._dump = bytes(dump)
        self._sector_count = sector_count_for_size(len(self._dump))
        self._fail_on_read = fail_on_read
        self._fail_on_connect = fail_on_connect
        self._authenticated: Optional[int] = None
        self.connected = False
        self.closed = False
        self.auth_attempts: list[int] = []
        self.reads: list[int] = []

    @classmethod
    def with_derived_keys(cls, uid: bytes, dump: bytes, **kwargs) -> "EmulatedTag":
        """Build a tag whose sector trailers hold the keys derived from ``uid``."""
        data = bytearray(dump)
        sector_count = sector_count_for_size(len(data))
        for sector, key in enumerate(derive_keys(uid, sector_count)):
            start = block_to_byte_offset(sector_trailer_block(sector))
            data[start:start + BYTES_PER_BLOCK] = build_sector_trailer(key)
        return cls(uid, bytes(data), **kwargs)

    @property
    def sector_count(self) -> int:
        return self._sector_count

    def get_uid(self) -> Optional[bytes]:
        return self._uid

    def connect(self) -> None:
        if self._fail_on_connect:
            raise ConnectionError("Tag was lost")
        self.connected = True

    def _trailer(self, sector: int) -> dict:
        start = block_to_byte_offset(sector_trailer_block(sector))
        return parse_sector_trailer(self._dump[start:start + BYTES_PER_BLOCK])

    def authenticate_sector_with_key_a(self, sector: int, key: bytes) -> bool:
        self._require_connected()
        self.auth_attempts.append(sector)
        if self._trailer(sector)["key_a"] == key:
            self._authenticated = sector
            return True
        logger.debug(f"Emulated tag rejected key for sector {sector}")
        self._authenticated = None
        return False

    def get_block_count_in_sector(self, sector: int) -> int:
        return block_count_in_sector(sector)

    def sector_to_block(self, sector: int) -> int:
        return sector_to_block(sector)

    def read_block(self, block: int) -> bytes:
        self._require_connected()
        if self._fail_on_read == block:
            raise OSError(f"Transceive failed on block {block}")
        sector = self._authenticated
        if sector is None or not sector_to_block(sector) <= block <= sector_trailer_block(sector):
            raise OSError(f"Block {block} is not in the authenticated sector")
        self.reads.append(block)
        start = block_to_byte_offset(block)
        data = self._dump[start:start + BYTES_PER_BLOCK]
        if block == sector_trailer_block(sector):
            # Key A never reads back
            data = bytes(KEY_A_LENGTH) + data[KEY_A_LENGTH:]
        return data

    def close(self) -> None:
        self.connected = False
        self.closed = True

    def _require_connected(self):
        if not self.connected:
            raise OSError("Tag is not connected")
