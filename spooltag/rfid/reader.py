"""
Authenticated MIFARE Classic tag reading.

``read_tag`` derives the per-sector keys from the tag UID, authenticates
every sector with Key A and copies each block into one contiguous buffer.
Any failure aborts the whole read; no partial dump is ever returned. Retrying
(e.g. asking the user to hold the spool still) is up to the caller.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from spooltag.crypto.tag_auth import get_sector_auths

from .errors import AuthenticationError, MissingUidError, TagIOError
from .mifare import BYTES_PER_BLOCK

logger = logging.getLogger(__name__)


class TagHandle(ABC):
    """
    Low-level access to one MIFARE Classic tag in the reader field.

    Implementations wrap a concrete reader (PN532, phone NFC bridge, an
    emulated dump). Transport failures are raised as ``OSError``.
    """

    @property
    @abstractmethod
    def sector_count(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def get_uid(self) -> Optional[bytes]:
        raise NotImplementedError

    @abstractmethod
    def connect(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def authenticate_sector_with_key_a(self, sector: int, key: bytes) -> bool:
        raise NotImplementedError

    @abstractmethod
    def get_block_count_in_sector(self, sector: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def sector_to_block(self, sector: int) -> int:
        raise NotImplementedError

    @abstractmethod
    def read_block(self, block: int) -> bytes:
        raise NotImplementedError

    @abstractmethod
    def close(self) -> None:
        raise NotImplementedError


def read_tag(handle: TagHandle) -> tuple[str, bytes]:
    """
    Read every sector of a tag.

    Returns:
        (uid as uppercase hex, raw tag bytes)

    Raises:
        MissingUidError: The tag reported no UID.
        AuthenticationError: A sector rejected its derived key.
        TagIOError: Connecting or reading a block failed.
    """
    uid = handle.get_uid()
    if not uid:
        raise MissingUidError()
    uid_hex = uid.hex().upper()
    logger.info(f"Processing tag UID: {uid_hex}")

    sector_count = handle.sector_count
    auths = get_sector_auths(uid, sector_count)
    for auth in auths:
        logger.debug(f"Derived Key A for sector {auth.sector}: {auth.key_hex}")

    try:
        try:
            handle.connect()
        except OSError as e:
            logger.error(f"Error connecting to tag {uid_hex}: {e}")
            raise TagIOError(f"Error connecting to tag: {e}") from e

        tag_data = bytearray()
        for auth in auths:
            sector = auth.sector
            try:
                authenticated = handle.authenticate_sector_with_key_a(sector, auth.key)
            except OSError as e:
                logger.error(f"Error authenticating sector {sector} of tag {uid_hex}: {e}")
                raise TagIOError(f"Error authenticating sector {sector}: {e}") from e
            if not authenticated:
                logger.error(f"Authentication failed for sector {sector} of tag {uid_hex}")
                raise AuthenticationError(sector)

            first_block = handle.sector_to_block(sector)
            for i in range(handle.get_block_count_in_sector(sector)):
                block = first_block + i
                try:
                    block_data = handle.read_block(block)
                except OSError as e:
                    logger.error(f"Error reading block {block} of tag {uid_hex}: {e}")
                    raise TagIOError(f"Error reading block {block}: {e}") from e
                if len(block_data) != BYTES_PER_BLOCK:
                    raise TagIOError(
                        f"Block {block} returned {len(block_data)} bytes, expected {BYTES_PER_BLOCK}"
                    )
                end = (block + 1) * BYTES_PER_BLOCK
                if len(tag_data) < end:
                    tag_data.extend(bytes(end - len(tag_data)))
                tag_data[block * BYTES_PER_BLOCK:end] = block_data
    finally:
        handle.close()

    logger.info(f"Read {len(tag_data)} bytes from tag {uid_hex}")
    return uid_hex, bytes(tag_data)
