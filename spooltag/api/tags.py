"""API routes for spool tag operations: key derivation and dump decoding."""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel, Field

from spooltag.crypto.kdf import DEFAULT_SECTOR_COUNT
from spooltag.crypto.tag_auth import get_auth_payload
from spooltag.library.catalog import filament_catalog
from spooltag.rfid.decoder import decode
from spooltag.rfid.dump_parser import (
    load_base64, load_binary, load_hex, load_hex_blocks, load_json_dump,
    load_proxmark3_dump, uid_from_dump,
)
from spooltag.rfid.errors import DecodeError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/tags", tags=["tags"])


# ──────────────────────────────────────────────
# Request models
# ──────────────────────────────────────────────

class DeriveKeysRequest(BaseModel):
    uid: str  # Hex string e.g. "7AD43F1C"
    sector_count: int = Field(DEFAULT_SECTOR_COUNT, ge=1, le=40)


class DecodeHexRequest(BaseModel):
    hex_data: str
    uid: Optional[str] = None  # Defaults to the UID stored in block 0


class DecodeProxmarkRequest(BaseModel):
    dump_text: str
    uid: Optional[str] = None


class DecodeBase64Request(BaseModel):
    base64_data: str
    uid: Optional[str] = None


class DecodeBlocksRequest(BaseModel):
    blocks: list[str]  # One hex string per 16-byte block, block 0 first
    uid: Optional[str] = None


def _decode_response(data: bytes, uid: Optional[str]) -> dict:
    """Decode against the loaded catalog, mapping decode failures to HTTP 400."""
    try:
        uid_hex = uid.upper() if uid else uid_from_dump(data).hex().upper()
        record = decode(data, uid_hex, filament_catalog.entries)
    except DecodeError as e:
        logger.warning(f"Tag dump rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    return record.to_dict()


# ──────────────────────────────────────────────
# Routes
# ──────────────────────────────────────────────

@router.post("/derive-keys")
async def derive_keys_endpoint(req: DeriveKeysRequest):
    """Derive the sector keys of a tag UID."""
    try:
        uid = bytes.fromhex(req.uid)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid UID: {e}")
    if not uid:
        raise HTTPException(status_code=400, detail="UID is empty")
    return get_auth_payload(uid, req.sector_count)


@router.post("/decode/hex")
async def decode_hex(req: DecodeHexRequest):
    """Decode a hex-encoded tag dump into a filament record."""
    try:
        data = load_hex(req.hex_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _decode_response(data, req.uid)


@router.post("/decode/base64")
async def decode_base64(req: DecodeBase64Request):
    """Decode a base64-encoded tag dump into a filament record."""
    try:
        data = load_base64(req.base64_data)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _decode_response(data, req.uid)


@router.post("/decode/blocks")
async def decode_blocks(req: DecodeBlocksRequest):
    """Decode a list of hex-encoded blocks into a filament record."""
    try:
        data = load_hex_blocks(req.blocks)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _decode_response(data, req.uid)


@router.post("/decode/proxmark")
async def decode_proxmark(req: DecodeProxmarkRequest):
    """Decode a Proxmark3 text dump into a filament record."""
    try:
        data = load_proxmark3_dump(req.dump_text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _decode_response(data, req.uid)


@router.post("/decode/file")
async def decode_file(file: UploadFile = File(...)):
    """Decode an uploaded tag dump file (raw binary, or a JSON dump when named .json)."""
    content = await file.read()
    try:
        if (file.filename or "").lower().endswith(".json"):
            data = load_json_dump(content.decode("utf-8"))
        else:
            data = load_binary(content)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _decode_response(data, None)
