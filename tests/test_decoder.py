"""Tests for decoding a tag dump into a filament record."""

import struct
from datetime import datetime

import pytest

from spooltag.library.matching import FilamentCatalogEntry
from spooltag.rfid.decoder import decode, decode_dump
from spooltag.rfid.errors import (
    InsufficientDataError, InvalidDateTimeError, OutOfBoundsError,
)
from spooltag.spool.models import COLOR_APPROXIMATE, COLOR_FROM_CATALOG

from conftest import TRAY_UID, make_test_blocks, make_test_dump


def catalog_entry(id, name, material="PLA", color_hex="FF6A13", translucent=False):
    return FilamentCatalogEntry(id=id, name=name, material=material,
                                empty_spool_weight=250, color_hex=color_hex,
                                translucent=translucent, density=1.24)


class TestDecodeFields:
    def test_all_fields_with_empty_catalog(self, tag_dump):
        record = decode(tag_dump, "7AD43F1C", [])

        assert record.uid == "7AD43F1C"
        assert record.tray_uid == TRAY_UID.hex().upper()
        assert record.filament_type == "PLA"
        assert record.detailed_filament_type == "PLA Basic"
        assert record.color_bytes == bytes([0xFF, 0x6A, 0x13, 0xFF])
        assert record.color_hex == "FF6A13FF"
        assert record.rgb == "FF6A13"
        assert record.spool_weight == 1000
        assert record.filament_diameter == 1.75
        assert record.filament_length == 330
        assert record.production_datetime == datetime(2024, 3, 15, 10, 30)
        assert record.color_name == "Orange"
        assert record.color_name_detail == COLOR_APPROXIMATE
        assert record.possible_matches == ()

    def test_linkage_fields_unset(self, tag_dump):
        record = decode(tag_dump, "7AD43F1C")
        assert record.catalog_id is None
        assert record.vendor_id is None
        assert record.filament_density is None
        assert record.filament_id is None
        assert record.vendor_name == "Bambu Lab"

    def test_vendor_name_override(self, tag_dump):
        record = decode(tag_dump, "7AD43F1C", vendor_name="Acme")
        assert record.vendor_name == "Acme"

    def test_diameter_rounding(self):
        blocks = make_test_blocks()
        blocks[5][8:12] = struct.pack("<f", 1.7512)
        data = b"".join(bytes(b) for b in blocks)

        assert decode(data, "00").filament_diameter != pytest.approx(1.75, abs=1e-6)
        assert decode(data, "00", diameter_round=2).filament_diameter == 1.75

    def test_minimal_dump_reaching_block_14(self, tag_dump):
        record = decode(tag_dump[:240], "7AD43F1C")
        assert record.filament_length == 330

    def test_decode_dump_takes_uid_from_block_0(self, tag_dump):
        assert decode_dump(tag_dump).uid == "7AD43F1C"


class TestDecodeSizeGuard:
    def test_79_bytes_is_insufficient(self, tag_dump):
        with pytest.raises(InsufficientDataError):
            decode(tag_dump[:79], "7AD43F1C")

    def test_80_bytes_passes_size_guard(self, tag_dump):
        # Later fields live past block 4, so the read fails on bounds instead
        with pytest.raises(OutOfBoundsError):
            decode(tag_dump[:80], "7AD43F1C")

    def test_empty(self):
        with pytest.raises(InsufficientDataError):
            decode(b"", "7AD43F1C")

    def test_blank_datetime_fails(self):
        blocks = make_test_blocks()
        blocks[12] = bytearray(16)
        data = b"".join(bytes(b) for b in blocks)
        with pytest.raises(InvalidDateTimeError):
            decode(data, "7AD43F1C")


class TestDecodeCatalogMatching:
    def test_catalog_match_names_the_color(self, tag_dump):
        catalog = [
            catalog_entry("orange", "Orange"),
            catalog_entry("other", "Orange", material="PETG"),
            catalog_entry("red", "Red", color_hex="C12E1F"),
        ]
        record = decode(tag_dump, "7AD43F1C", catalog)

        assert record.color_name == "Orange"
        assert record.color_name_detail == COLOR_FROM_CATALOG
        assert [(e.id, s) for e, s in record.possible_matches] == [("orange", 33)]

    def test_best_ranked_entry_wins(self, tag_dump):
        catalog = [
            catalog_entry("a", "Sunrise"),
            catalog_entry("b", "Basic Sunset"),
        ]
        record = decode(tag_dump, "7AD43F1C", catalog)
        assert record.color_name == "Basic Sunset"
        assert [e.id for e, _ in record.possible_matches] == ["b", "a"]

    def test_hex_match_without_similarity_falls_back_to_palette(self, tag_dump):
        catalog = [catalog_entry("x", "Sunset", material="PETG")]
        record = decode(tag_dump, "7AD43F1C", catalog)

        assert record.possible_matches == ()
        assert record.color_name == "Orange"
        assert record.color_name_detail == COLOR_FROM_CATALOG

    def test_close_but_not_exact_color_is_approximate(self, tag_dump):
        catalog = [catalog_entry("x", "Orange", color_hex="FF6A14")]
        record = decode(tag_dump, "7AD43F1C", catalog)
        assert record.color_name_detail == COLOR_APPROXIMATE
        assert record.possible_matches == ()

    def test_catalog_is_not_modified(self, tag_dump):
        catalog = [catalog_entry("orange", "Orange")]
        decode(tag_dump, "7AD43F1C", catalog)
        assert catalog == [catalog_entry("orange", "Orange")]

    def test_generator_catalog(self, tag_dump):
        record = decode(tag_dump, "7AD43F1C", (e for e in [catalog_entry("orange", "Orange")]))
        assert record.color_name_detail == COLOR_FROM_CATALOG


def test_full_dump_has_no_side_effects():
    data = make_test_dump()
    decode(data, "7AD43F1C")
    assert data == make_test_dump()
