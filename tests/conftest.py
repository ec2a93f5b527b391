"""Shared synthetic tag dumps."""

import struct

import pytest

from spooltag.rfid.mifare import TOTAL_BLOCKS

TEST_UID = bytes.fromhex("7AD43F1C")
TRAY_UID = bytes.fromhex("0123456789ABCDEF0123456789ABCDEF")


def make_test_blocks() -> list[bytearray]:
    """Create a 64-block tag dump with known values."""
    blocks = [bytearray(16) for _ in range(TOTAL_BLOCKS)]

    # Block 0: UID + manufacturer data
    blocks[0][0:4] = TEST_UID
    blocks[0][4:6] = b"\x88\x04"

    # Block 2: Filament type (short)
    blocks[2][0:3] = b"PLA"

    # Block 4: Detailed filament type
    blocks[4][0:9] = b"PLA Basic"

    # Block 5: Color (RGBA, orange) + weight + padding + diameter
    blocks[5][0:4] = bytes([0xFF, 0x6A, 0x13, 0xFF])
    blocks[5][4:6] = struct.pack("<H", 1000)
    blocks[5][8:12] = struct.pack("<f", 1.75)

    # Block 9: Tray UID
    blocks[9][0:16] = TRAY_UID

    # Block 12: Production datetime
    blocks[12][0:16] = b"2024_03_15_10_30"

    # Block 14: Filament length (bytes 4-5)
    blocks[14][4:6] = struct.pack("<H", 330)

    return blocks


def make_test_dump() -> bytes:
    return b"".join(bytes(b) for b in make_test_blocks())


@pytest.fixture
def tag_dump() -> bytes:
    return make_test_dump()
