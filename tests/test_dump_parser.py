"""Tests for loading captured tag dumps."""

import base64
import json

import pytest

from spooltag.rfid.dump_parser import (
    load_base64, load_binary, load_hex, load_hex_blocks, load_json_dump,
    load_proxmark3_dump, uid_from_dump,
)
from spooltag.rfid.errors import OutOfBoundsError
from spooltag.rfid.mifare import BYTES_PER_BLOCK, TOTAL_BLOCKS, TOTAL_BYTES


def make_binary_dump() -> bytes:
    """Create a minimal 1024-byte dump."""
    data = bytearray(TOTAL_BYTES)
    data[0:4] = bytes.fromhex("DEADBEEF")
    return bytes(data)


def split_blocks(data: bytes) -> list[bytes]:
    return [data[i * BYTES_PER_BLOCK:(i + 1) * BYTES_PER_BLOCK] for i in range(TOTAL_BLOCKS)]


class TestLoadBinary:
    def test_valid_binary(self):
        data = make_binary_dump()
        assert load_binary(data) == data

    def test_accepts_bytearray(self):
        assert isinstance(load_binary(bytearray(32)), bytes)

    def test_misaligned_raises(self):
        with pytest.raises(ValueError):
            load_binary(bytes(100))

    def test_empty_raises(self):
        with pytest.raises(ValueError):
            load_binary(b"")


class TestLoadHex:
    def test_valid_hex(self):
        data = make_binary_dump()
        assert load_hex(data.hex()) == data

    def test_hex_with_whitespace(self):
        data = make_binary_dump()
        hex_str = data.hex()
        spaced = " ".join(hex_str[i:i + 2] for i in range(0, len(hex_str), 2))
        assert load_hex(spaced.replace(" 00 00", "\n00 00", 3)) == data

    def test_invalid_hex_raises(self):
        with pytest.raises(ValueError):
            load_hex("zz" * 16)


class TestLoadBase64:
    def test_valid_base64(self):
        data = make_binary_dump()
        assert load_base64(base64.b64encode(data).decode()) == data

    def test_invalid_base64_raises(self):
        with pytest.raises(ValueError):
            load_base64("not base64!")


class TestLoadHexBlocks:
    def test_valid_hex_blocks(self):
        data = make_binary_dump()
        assert load_hex_blocks([b.hex() for b in split_blocks(data)]) == data

    def test_short_block_raises(self):
        with pytest.raises(ValueError):
            load_hex_blocks(["00" * 8])


class TestProxmark3Dump:
    def make_dump_text(self, data: bytes) -> list[str]:
        lines = []
        for i, block in enumerate(split_blocks(data)):
            hex_bytes = " ".join(f"{b:02X}" for b in block)
            lines.append(f"Block {i:02d}: {hex_bytes}")
        return lines

    def test_valid_dump(self):
        data = make_binary_dump()
        assert load_proxmark3_dump("\n".join(self.make_dump_text(data))) == data

    def test_dump_with_comments(self):
        data = make_binary_dump()
        lines = ["# Proxmark3 dump", ""] + self.make_dump_text(data)
        assert load_proxmark3_dump("\n".join(lines)) == data

    def test_incomplete_dump_raises(self):
        with pytest.raises(ValueError):
            load_proxmark3_dump("Block 00: " + " ".join(["00"] * 16))


class TestJsonDump:
    def test_blocks_object(self):
        data = make_binary_dump()
        dump = {"blocks": {str(i): b.hex().upper() for i, b in enumerate(split_blocks(data))}}
        assert load_json_dump(json.dumps(dump)) == data

    def test_missing_blocks_are_zero_filled(self):
        dump = {"blocks": {"0": "DEADBEEF" + "00" * 12}}
        assert load_json_dump(dump) == make_binary_dump()

    def test_top_level_array_raises(self):
        with pytest.raises(ValueError):
            load_json_dump("[]")

    def test_non_string_block_raises(self):
        with pytest.raises(ValueError):
            load_json_dump({"blocks": {"0": 5}})

    def test_missing_blocks_object_raises(self):
        with pytest.raises(ValueError):
            load_json_dump({"uid": "DEADBEEF"})


class TestUidFromDump:
    def test_uid(self):
        assert uid_from_dump(make_binary_dump()) == bytes.fromhex("DEADBEEF")

    def test_too_short(self):
        with pytest.raises(OutOfBoundsError):
            uid_from_dump(b"\x01\x02")
