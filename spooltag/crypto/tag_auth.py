"""
Sector authentication helpers for MIFARE Classic tags.

Bundles derived keys with their sector numbers, either for the tag reader or
for handing the key set to an external NFC reader as JSON.
"""

from dataclasses import dataclass

from .kdf import DEFAULT_SECTOR_COUNT, derive_keys


@dataclass(frozen=True)
class SectorAuth:
    """Authentication data for a single MIFARE Classic sector."""
    sector: int
    key: bytes

    @property
    def key_hex(self) -> str:
        return self.key.hex().upper()


def get_sector_auths(uid: bytes, sector_count: int = DEFAULT_SECTOR_COUNT) -> list[SectorAuth]:
    """
    Get authentication data for every sector of a tag.

    Args:
        uid: The tag UID as bytes.
        sector_count: Number of sectors on the tag.

    Returns:
        List of SectorAuth objects with derived keys.
    """
    keys = derive_keys(uid, sector_count)
    return [SectorAuth(sector=i, key=k) for i, k in enumerate(keys)]


def get_auth_payload(uid: bytes, sector_count: int = DEFAULT_SECTOR_COUNT) -> dict:
    """
    Build a JSON-serializable auth payload for an external reader.

    Returns:
        Dict with the uid and the list of hex keys, in sector order.
    """
    return {
        "uid": uid.hex().upper(),
        "keys": [auth.key_hex for auth in get_sector_auths(uid, sector_count)],
    }
