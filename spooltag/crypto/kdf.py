"""
HKDF-SHA256 key derivation for filament spool MIFARE Classic tags.

Every sector of a spool tag is protected with its own 6-byte Key A. The keys
are derived from the tag UID with HKDF-SHA256, a fixed 16-byte master secret
and the context string "RFID-A\\0". The UID is the input keying material and
the master secret is the salt; this is the arrangement that reproduces the
keys of tags already in circulation.

Reference: https://github.com/Bambu-Research-Group/RFID-Tag-Guide
"""

from Crypto.Hash import SHA256
from Crypto.Protocol.KDF import HKDF

# Hardcoded master key discovered by the community
MASTER_KEY = bytes([
    0x9A, 0x75, 0x9C, 0xF2, 0xC4, 0xF7, 0xCA, 0xFF,
    0x22, 0x2C, 0xB9, 0x76, 0x9B, 0x41, 0xBC, 0x96,
])

# HKDF context string (null-terminated)
CONTEXT = b"RFID-A\x00"

# Sector count of a MIFARE Classic 1K tag
DEFAULT_SECTOR_COUNT = 16

# Each MIFARE key is 6 bytes
KEY_LENGTH = 6


def derive_keys(uid: bytes, sector_count: int = DEFAULT_SECTOR_COUNT) -> list[bytes]:
    """
    Derive one Key A per sector from a tag UID.

    Args:
        uid: The tag UID as bytes (4 or 7 bytes for MIFARE Classic).
        sector_count: Number of sectors on the tag.

    Returns:
        A list of ``sector_count`` keys, each 6 bytes, in sector order.
    """
    raw = HKDF(
        master=uid,
        key_len=KEY_LENGTH * sector_count,
        salt=MASTER_KEY,
        hashmod=SHA256,
        context=CONTEXT,
    )
    return [raw[i * KEY_LENGTH:(i + 1) * KEY_LENGTH] for i in range(sector_count)]

