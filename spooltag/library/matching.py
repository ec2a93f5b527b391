"""
Catalog entries and colour/name matching against a decoded tag.

A catalog entry is only a candidate for a tag when its hex colour equals the
tag colour exactly; candidates are then ranked by token (Jaccard) similarity
between the tag's detailed filament type and the entry descriptor.
"""

import math
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class FilamentCatalogEntry:
    """A reference filament product, e.g. one SpoolmanDB record."""
    id: str
    name: str
    material: str
    empty_spool_weight: int = 0
    color_hex: Optional[str] = None
    translucent: bool = False
    glow: bool = False
    density: float = 0.0

    @property
    def descriptor(self) -> str:
        return catalog_descriptor(self)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "material": self.material,
            "empty_spool_weight": self.empty_spool_weight,
            "color_hex": self.color_hex,
            "translucent": self.translucent,
            "glow": self.glow,
            "density": self.density,
        }


def normalize_hex(color_hex: str) -> str:
    return color_hex.strip().lstrip("#").upper()


def catalog_descriptor(entry: FilamentCatalogEntry) -> str:
    """Text compared against the tag's detailed filament type."""
    suffix = " translucent" if entry.translucent else ""
    return f"{entry.material} {entry.name}{suffix}"


def jaccard_similarity(a: str, b: str) -> float:
    """Ratio of shared lower-cased whitespace tokens to all tokens."""
    tokens_a = set(a.lower().split())
    tokens_b = set(b.lower().split())
    union = tokens_a | tokens_b
    if not union:
        return 0.0
    return len(tokens_a & tokens_b) / len(union)


def similarity_score(a: str, b: str) -> int:
    """Jaccard similarity as an integer percentage, rounded half-up."""
    return math.floor(jaccard_similarity(a, b) * 100 + 0.5)


def filter_by_color(catalog: Iterable[FilamentCatalogEntry], rgb: str) -> list[FilamentCatalogEntry]:
    """Entries whose colour is exactly ``rgb``, in catalog order."""
    target = normalize_hex(rgb)
    return [e for e in catalog if e.color_hex is not None and normalize_hex(e.color_hex) == target]


def rank_by_similarity(target: str, entries: Iterable[FilamentCatalogEntry]
                       ) -> list[tuple[FilamentCatalogEntry, int]]:
    """
    Score every entry against ``target`` and sort best first.

    Entries scoring 0 are dropped. Equal scores keep their input order.
    """
    scored = [(e, similarity_score(target, e.descriptor)) for e in entries]
    scored = [pair for pair in scored if pair[1] > 0]
    return sorted(scored, key=lambda pair: pair[1], reverse=True)
