"""API routes for the reference filament catalog."""

from typing import Optional

import httpx
from fastapi import APIRouter, HTTPException, Query

from spooltag.library.catalog import filament_catalog

router = APIRouter(prefix="/api/catalog", tags=["catalog"])


@router.get("/status")
async def catalog_status():
    """Check if the catalog is loaded."""
    return {
        "loaded": filament_catalog.is_loaded,
        "total": len(filament_catalog.entries),
        "manufacturer": filament_catalog.manufacturer,
    }


@router.post("/refresh")
async def refresh_catalog():
    """Refresh the catalog from SpoolmanDB."""
    try:
        await filament_catalog.load(force_refresh=True)
    except (httpx.HTTPError, ValueError) as e:
        raise HTTPException(status_code=502, detail=f"Failed to load catalog: {e}")
    return {"total": len(filament_catalog.entries)}


@router.get("/search")
async def search_catalog(query: Optional[str] = Query(None), color_hex: Optional[str] = Query(None)):
    """Search catalog entries by text and/or exact colour."""
    results = filament_catalog.search(query=query, color_hex=color_hex)
    return {
        "results": [e.to_dict() for e in results],
        "count": len(results),
    }


@router.get("/entries/{entry_id}")
async def get_catalog_entry(entry_id: str):
    """Get one catalog entry by its SpoolmanDB id."""
    entry = filament_catalog.get(entry_id)
    if not entry:
        raise HTTPException(status_code=404, detail="Catalog entry not found")
    return entry.to_dict()
