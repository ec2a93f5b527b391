"""
Tag dump loading: converts captured dumps from other tools to raw tag bytes.

Supports multiple input formats:
- Raw binary dump (any whole number of blocks, usually 1024 bytes)
- Hex string dump
- Base64 string dump
- Block-by-block hex list
- Proxmark3 text dump
- Community JSON dump ({"blocks": {"0": "<hex>", ...}})
"""

import base64
import binascii
import json
from typing import Union

from .errors import OutOfBoundsError
from .mifare import BYTES_PER_BLOCK, TOTAL_BLOCKS


def load_binary(data: bytes) -> bytes:
    """Validate a raw binary dump."""
    if not data or len(data) % BYTES_PER_BLOCK:
        raise ValueError(f"Dump must be a non-empty multiple of {BYTES_PER_BLOCK} bytes, got {len(data)}")
    return bytes(data)


def load_hex(hex_string: str) -> bytes:
    """Load a hex-encoded dump; whitespace is ignored."""
    clean = "".join(hex_string.split())
    return load_binary(bytes.fromhex(clean))


def load_base64(b64_string: str) -> bytes:
    try:
        data = base64.b64decode(b64_string, validate=True)
    except binascii.Error as e:
        raise ValueError(f"Invalid base64 dump: {e}") from e
    return load_binary(data)


def load_hex_blocks(hex_blocks: list[str]) -> bytes:
    """Load a list of hex-encoded 16-byte blocks."""
    blocks = [bytes.fromhex(h) for h in hex_blocks]
    for i, block in enumerate(blocks):
        if len(block) != BYTES_PER_BLOCK:
            raise ValueError(f"Block {i} must be {BYTES_PER_BLOCK} bytes, got {len(block)}")
    return load_binary(b"".join(blocks))


def load_proxmark3_dump(dump_text: str) -> bytes:
    """
    Load a Proxmark3 text dump.

    Expected format (one block per line):
    Block 00: AA BB CC DD EE FF 00 11 22 33 44 55 66 77 88 99
    Block 01: ...
    """
    blocks = []
    for line in dump_text.strip().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        # Extract hex data after the colon
        if ":" in line:
            hex_part = line.split(":", 1)[1].strip()
        else:
            hex_part = line
        hex_clean = hex_part.replace(" ", "")
        if len(hex_clean) == BYTES_PER_BLOCK * 2:
            blocks.append(bytes.fromhex(hex_clean))

    if len(blocks) != TOTAL_BLOCKS:
        raise ValueError(
            f"Proxmark3 dump should have {TOTAL_BLOCKS} blocks, found {len(blocks)}"
        )
    return b"".join(blocks)


def load_json_dump(dump: Union[str, dict]) -> bytes:
    """Load a community JSON dump; blocks missing from the file are zero-filled."""
    data = json.loads(dump) if isinstance(dump, str) else dump
    if not isinstance(data, dict):
        raise ValueError(f"JSON dump must be an object, got {type(data).__name__}")
    blocks_dict = data.get("blocks")
    if not isinstance(blocks_dict, dict):
        raise ValueError("JSON dump has no 'blocks' object")
    blocks = []
    for i in range(TOTAL_BLOCKS):
        hex_block = blocks_dict.get(str(i), "00" * BYTES_PER_BLOCK)
        if not isinstance(hex_block, str):
            raise ValueError(f"Block {i} must be a hex string, got {type(hex_block).__name__}")
        block = bytes.fromhex(hex_block)
        if len(block) != BYTES_PER_BLOCK:
            raise ValueError(f"Block {i} must be {BYTES_PER_BLOCK} bytes, got {len(block)}")
        blocks.append(block)
    return b"".join(blocks)


def uid_from_dump(data: bytes) -> bytes:
    """Return the 4-byte UID stored at the start of block 0."""
    if len(data) < 4:
        raise OutOfBoundsError(f"Dump of {len(data)} bytes has no UID")
    return bytes(data[0:4])
