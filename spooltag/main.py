"""
SpoolTag: filament spool RFID tag decoder.

FastAPI backend providing APIs for:
- HKDF key derivation for MIFARE Classic sector authentication
- Tag dump decoding into filament records (material, colour, weight, length, date)
- Reference filament catalog (SpoolmanDB) used to name tag colours
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI

from spooltag.api import catalog, tags
from spooltag.library.catalog import filament_catalog

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load the filament catalog on startup."""
    logger.info("Starting SpoolTag...")
    try:
        await filament_catalog.load()
    except (httpx.HTTPError, ValueError) as e:
        # Decoding still works, colours are named from the palette only
        logger.warning(f"Filament catalog unavailable: {e}")
    yield
    logger.info("Shutting down SpoolTag")


app = FastAPI(
    title="SpoolTag",
    description="Filament spool RFID tag decoder",
    version="1.0.0",
    lifespan=lifespan,
)

# Include API routers
app.include_router(tags.router)
app.include_router(catalog.router)
