"""Copy-producing updates applied to a decoded record after a scan."""

import logging
from typing import Optional

from spooltag.library.matching import FilamentCatalogEntry

from .models import DecodedFilamentRecord

logger = logging.getLogger(__name__)


def apply_catalog_selection(record: DecodedFilamentRecord,
                            entry: FilamentCatalogEntry) -> DecodedFilamentRecord:
    """Link a record to the catalog entry the user picked."""
    logger.debug(f"Linking tag {record.uid} to catalog entry {entry.id}")
    return record.with_changes(
        catalog_id=entry.id,
        empty_weight=entry.empty_spool_weight,
        color_name=entry.name,
        filament_density=entry.density,
    )


def assign_default_catalog_id(record: DecodedFilamentRecord) -> DecodedFilamentRecord:
    """Pin the synthetic catalog id when no entry was selected."""
    return record.with_changes(catalog_id=record.effective_catalog_id)


def apply_weight(record: DecodedFilamentRecord, weight: int) -> DecodedFilamentRecord:
    """Record the measured gross weight (spool plus filament) in grams."""
    if weight < 0:
        raise ValueError(f"Weight must not be negative, got {weight}")
    return record.with_changes(actual_weight=weight)


def apply_vendor(record: DecodedFilamentRecord, vendor_name: str,
                 vendor_id: Optional[int] = None) -> DecodedFilamentRecord:
    return record.with_changes(vendor_name=vendor_name, vendor_id=vendor_id)
