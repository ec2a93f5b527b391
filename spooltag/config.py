"""Application configuration."""

import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
PROJECT_DIR = BASE_DIR.parent

# Reference filament catalog (SpoolmanDB)
SPOOLMAN_DB_FILAMENTS_URL = os.getenv(
    "SPOOLMAN_DB_FILAMENTS_URL", "https://donkie.github.io/SpoolmanDB/filaments.json"
)
CATALOG_CACHE_DIR = Path(os.getenv("CATALOG_CACHE_DIR", str(PROJECT_DIR / "catalog_cache")))
CATALOG_TIMEOUT = float(os.getenv("CATALOG_TIMEOUT", "30"))

# Manufacturer used to filter the catalog and as the default vendor of a scanned spool
MANUFACTURER = os.getenv("SPOOLTAG_MANUFACTURER", "Bambu Lab")

# Spool weights in grams
DEFAULT_SPOOL_WEIGHT = 1000
DEFAULT_EMPTY_SPOOL_WEIGHT = int(os.getenv("DEFAULT_EMPTY_SPOOL_WEIGHT", "250"))
