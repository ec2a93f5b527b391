"""
MIFARE Classic constants and structure definitions.

A MIFARE Classic 1K tag has:
- 16 sectors (0-15)
- 4 blocks per sector (64 blocks total, numbered 0-63)
- 16 bytes per block (1024 bytes total)
- Block 0: manufacturer data (read-only, contains UID)
- Last block of each sector (3, 7, 11, ...): sector trailer (Key A + access bits + Key B)

The 4K variant adds 8 large sectors of 16 blocks after the first 32 sectors.
"""

# Tag geometry
NUM_SECTORS = 16
BLOCKS_PER_SECTOR = 4
BYTES_PER_BLOCK = 16
TOTAL_BLOCKS = NUM_SECTORS * BLOCKS_PER_SECTOR  # 64
TOTAL_BYTES = TOTAL_BLOCKS * BYTES_PER_BLOCK  # 1024

# 4K layout: sectors 32+ hold 16 blocks each
SMALL_SECTOR_COUNT_4K = 32
BLOCKS_PER_LARGE_SECTOR = 16

# Sector trailer layout within a 16-byte block
KEY_A_OFFSET = 0
KEY_A_LENGTH = 6
ACCESS_BITS_OFFSET = 6
ACCESS_BITS_LENGTH = 4
KEY_B_OFFSET = 10
KEY_B_LENGTH = 6

# Transport configuration access bits (FF0780) followed by the user byte
DEFAULT_ACCESS_BITS = bytes([0xFF, 0x07, 0x80, 0x69])
DEFAULT_KEY_B = bytes([0xFF] * 6)


def block_count_in_sector(sector: int) -> int:
    """Return the number of blocks in a sector."""
    if sector < SMALL_SECTOR_COUNT_4K:
        return BLOCKS_PER_SECTOR
    return BLOCKS_PER_LARGE_SECTOR


def sector_to_block(sector: int) -> int:
    """Return the first block number for a given sector."""
    if sector < SMALL_SECTOR_COUNT_4K:
        return sector * BLOCKS_PER_SECTOR
    return (SMALL_SECTOR_COUNT_4K * BLOCKS_PER_SECTOR
            + (sector - SMALL_SECTOR_COUNT_4K) * BLOCKS_PER_LARGE_SECTOR)


def block_to_sector(block: int) -> int:
    """Return the sector number for a given block."""
    small_blocks = SMALL_SECTOR_COUNT_4K * BLOCKS_PER_SECTOR
    if block < small_blocks:
        return block // BLOCKS_PER_SECTOR
    return SMALL_SECTOR_COUNT_4K + (block - small_blocks) // BLOCKS_PER_LARGE_SECTOR


def sector_trailer_block(sector: int) -> int:
    """Return the sector trailer block number for a given sector."""
    return sector_to_block(sector) + block_count_in_sector(sector) - 1


def is_sector_trailer(block: int) -> bool:
    """Check if a block number is a sector trailer."""
    return sector_trailer_block(block_to_sector(block)) == block


def sector_count_for_size(size: int) -> int:
    """Return how many sectors a dump of ``size`` bytes spans."""
    if size % BYTES_PER_BLOCK:
        raise ValueError(f"Dump size must be a multiple of {BYTES_PER_BLOCK}, got {size}")
    blocks = size // BYTES_PER_BLOCK
    sectors = 0
    while blocks > 0:
        blocks -= block_count_in_sector(sectors)
        sectors += 1
    if blocks < 0:
        raise ValueError(f"Dump size {size} does not end on a sector boundary")
    return sectors


def block_to_byte_offset(block: int) -> int:
    """Return the byte offset in a full dump for a given block."""
    return block * BYTES_PER_BLOCK


def parse_sector_trailer(data: bytes) -> dict:
    """
    Parse a 16-byte sector trailer block.

    Returns dict with key_a, access_bits, and key_b as bytes.
    """
    if len(data) != BYTES_PER_BLOCK:
        raise ValueError(f"Sector trailer must be {BYTES_PER_BLOCK} bytes, got {len(data)}")
    return {
        "key_a": data[KEY_A_OFFSET:KEY_A_OFFSET + KEY_A_LENGTH],
        "access_bits": data[ACCESS_BITS_OFFSET:ACCESS_BITS_OFFSET + ACCESS_BITS_LENGTH],
        "key_b": data[KEY_B_OFFSET:KEY_B_OFFSET + KEY_B_LENGTH],
    }


def build_sector_trailer(key_a: bytes, key_b: bytes = DEFAULT_KEY_B,
                         access_bits: bytes = DEFAULT_ACCESS_BITS) -> bytes:
    """Build a 16-byte sector trailer block."""
    if len(key_a) != KEY_A_LENGTH or len(key_b) != KEY_B_LENGTH:
        raise ValueError("MIFARE keys must be 6 bytes")
    if len(access_bits) != ACCESS_BITS_LENGTH:
        raise ValueError(f"Access bits must be {ACCESS_BITS_LENGTH} bytes")
    return key_a + access_bits + key_b
