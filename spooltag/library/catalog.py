"""
Filament Catalog: fetches and caches the reference filament list used to
name tag colours.

Source: SpoolmanDB, https://github.com/Donkie/SpoolmanDB
Published as one JSON array of filament records, e.g.

    {"id": "bambulab_pla_basic_jadewhite_1000_175_n", "manufacturer": "Bambu Lab",
     "name": "Jade White", "material": "PLA", "density": 1.26,
     "spool_weight": 250, "color_hex": "FFFFFF", "translucent": false, "glow": false, ...}
"""

import json
import logging
from pathlib import Path
from typing import Iterable, Optional

import aiofiles
import httpx

from spooltag import config

from .matching import FilamentCatalogEntry, normalize_hex

logger = logging.getLogger(__name__)

CACHE_FILE_NAME = "filaments.json"


def parse_catalog(records: Iterable[dict], manufacturer: str) -> list[FilamentCatalogEntry]:
    """
    Keep the records of one manufacturer that carry an id and a colour.

    Translucent records published as white are stored as black, so a clear
    spool does not claim the tag colour of an opaque white one.
    """
    entries = []
    for record in records:
        if not isinstance(record, dict) or record.get("id") is None:
            logger.debug(f"Skipping catalog record without an id: {record!r}")
            continue
        color_hex = record.get("color_hex")
        if record.get("manufacturer") != manufacturer or not isinstance(color_hex, str):
            continue
        translucent = bool(record.get("translucent", False))
        color_hex = normalize_hex(color_hex)
        if color_hex == "FFFFFF" and translucent:
            color_hex = "000000"
        try:
            entries.append(FilamentCatalogEntry(
                id=str(record["id"]),
                name=str(record.get("name") or ""),
                material=str(record.get("material") or ""),
                empty_spool_weight=int(record.get("spool_weight") or 0),
                color_hex=color_hex,
                translucent=translucent,
                glow=bool(record.get("glow", False)),
                density=float(record.get("density") or 0.0),
            ))
        except (TypeError, ValueError) as e:
            logger.warning(f"Skipping malformed catalog record {record['id']}: {e}")
    return entries


def _records_from_json(text: str) -> list:
    records = json.loads(text)
    if not isinstance(records, list):
        raise ValueError(f"Catalog must be a JSON array, got {type(records).__name__}")
    return records


class FilamentCatalog:
    """Loads the reference catalog from SpoolmanDB (or the local cache) and searches it."""

    def __init__(self, url: Optional[str] = None, manufacturer: Optional[str] = None,
                 cache_dir: Optional[Path] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.url = url or config.SPOOLMAN_DB_FILAMENTS_URL
        self.manufacturer = manufacturer or config.MANUFACTURER
        self.cache_dir = Path(cache_dir or config.CATALOG_CACHE_DIR)
        self._transport = transport
        self._entries: list[FilamentCatalogEntry] = []
        self._loaded = False

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def entries(self) -> list[FilamentCatalogEntry]:
        return list(self._entries)

    @property
    def cache_file(self) -> Path:
        return self.cache_dir / CACHE_FILE_NAME

    async def load(self, force_refresh: bool = False):
        """
        Load the catalog from the local cache, or from SpoolmanDB when there
        is no usable cache or a refresh is forced.
        """
        if not force_refresh and self.cache_file.exists():
            try:
                async with aiofiles.open(str(self.cache_file), "r") as f:
                    records = _records_from_json(await f.read())
                self._set_entries(parse_catalog(records, self.manufacturer))
                logger.info(f"Loaded {len(self._entries)} catalog entries from cache")
                return
            except (OSError, ValueError) as e:
                logger.warning(f"Cache load failed, fetching from {self.url}: {e}")

        async with httpx.AsyncClient(transport=self._transport) as client:
            resp = await client.get(self.url, timeout=config.CATALOG_TIMEOUT)
            resp.raise_for_status()
            records = _records_from_json(resp.text)

        self._set_entries(parse_catalog(records, self.manufacturer))

        self.cache_dir.mkdir(parents=True, exist_ok=True)
        async with aiofiles.open(str(self.cache_file), "w") as f:
            await f.write(json.dumps(records))

        logger.info(
            f"Indexed {len(self._entries)} {self.manufacturer} filaments "
            f"out of {len(records)} records from {self.url}"
        )

    def _set_entries(self, entries: list[FilamentCatalogEntry]):
        self._entries = entries
        self._loaded = True

    def get(self, entry_id: str) -> Optional[FilamentCatalogEntry]:
        for e in self._entries:
            if e.id == entry_id:
                return e
        return None

    def search(self, query: Optional[str] = None,
               color_hex: Optional[str] = None) -> list[FilamentCatalogEntry]:
        """Search the catalog with optional filters."""
        results = self._entries

        if color_hex:
            target = normalize_hex(color_hex)
            results = [e for e in results if e.color_hex == target]
        if query:
            q = query.lower()
            results = [e for e in results
                       if q in e.name.lower()
                       or q in e.material.lower()
                       or q in e.id.lower()]

        return list(results)


# Global singleton
filament_catalog = FilamentCatalog()
