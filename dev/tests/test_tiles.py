"""
Park Migrator - Tile Decoder Tests

One hand-packed record per element variant, checked field by field, plus
the verbatim cases: padding slots, corrupt markers and reserved tags.

Can be run standalone: python test_tiles.py
"""

import sys
from pathlib import Path

TESTS_DIR = Path(__file__).parent
sys.path.insert(0, str(TESTS_DIR.parent.parent / "src"))
sys.path.insert(0, str(TESTS_DIR))

from test_api import TestResults, section
from park_builder import tile_record, surface_record, PADDING_RECORD

from parkmigrator.errors import FormatError
from parkmigrator.formats.s6.layout import TILE_ARRAY_SIZE, MAX_TILE_ELEMENTS
from parkmigrator.formats.s6.records import RawTileRecord
from parkmigrator.formats.s6.tile_decoder import decode_tile, decode_tile_array, TILE_DECODERS
from parkmigrator.world.tile_elements import (
    TileElementType, SurfaceElement, PathElement, TrackElement, SmallSceneryElement,
    EntranceElement, WallElement, LargeSceneryElement, BannerElement, RawTileElement,
    EntranceType, OwnershipType, is_decoded,
)


def check_fields(results, label: str, element, expected: dict):
    for name, value in expected.items():
        actual = getattr(element, name)
        results.record(f"{label}.{name}", actual == value, f"got {actual!r}, expected {value!r}")


def test_surface(results):
    section("SURFACE")
    element = decode_tile(tile_record(0xC1, 0x80, 14, 16, 0x45, 0x62, 7, 0x23))
    results.record("Surface variant", isinstance(element, SurfaceElement), type(element).__name__)
    check_fields(results, "surface", element, {
        'direction': 1,
        'flags': 0x80,
        'base_height': 14,
        'clearance_height': 16,
        'slope': 5,
        'surface_style': 11,
        'edge_style': 10,
        'grass_length': 7,
        'ownership': OwnershipType.OWNED,
        'park_fences': 3,
        'water_height': 2,
        'has_track_that_needs_water': True,
        'is_last_for_tile': True,
    })


def test_path(results):
    section("PATH")
    element = decode_tile(tile_record(0x47, 0x00, 4, 8, 0x3D, 0xA5, 0x9C, 12))
    results.record("Path variant", isinstance(element, PathElement), type(element).__name__)
    check_fields(results, "path", element, {
        'direction': 3,
        'entry_index': 3,
        'queue_banner_direction': 1,
        'is_sloped': True,
        'slope_direction': 1,
        'ride_index': 12,
        'station_index': 2,
        'is_wide': True,
        'is_queue': True,
        'has_queue_banner': True,
        'edges': 0x0C,
        'corners': 9,
        'addition': 5,
        'addition_is_ghost': True,
        'addition_status': 12,
    })


def test_track(results):
    section("TRACK")
    element = decode_tile(tile_record(0x8A, 0x00, 10, 12, 42, 0xB3, 0x5E, 7))
    results.record("Track variant", isinstance(element, TrackElement), type(element).__name__)
    check_fields(results, "track", element, {
        'direction': 2,
        'track_type': 42,
        'sequence_index': 3,
        'ride_index': 7,
        'colour_scheme': 2,
        'station_index': 3,
        'has_chain': True,
        'has_cable_lift': True,
        'is_inverted': True,
        'brake_booster_speed': 22,
        'has_green_light': True,
        'seat_rotation': 5,
        'maze_entry': 0x5EB3,
        'photo_timeout': 11,
    })


def test_small_scenery(results):
    section("SMALL SCENERY")
    element = decode_tile(tile_record(0x8C, 0x00, 6, 10, 20, 9, 0x2A, 0xE5))
    results.record("Small scenery variant", isinstance(element, SmallSceneryElement), type(element).__name__)
    check_fields(results, "small_scenery", element, {
        'entry_index': 20,
        'age': 9,
        'quadrant': 2,
        'primary_colour': 0x0A,
        'secondary_colour': 5,
        'needs_supports': True,
    })


def test_entrance(results):
    section("ENTRANCE")
    element = decode_tile(tile_record(0x10, 0x00, 14, 16, 1, 0x32, 4, 9))
    results.record("Entrance variant", isinstance(element, EntranceElement), type(element).__name__)
    check_fields(results, "entrance", element, {
        'entrance_type': EntranceType.RIDE_EXIT,
        'ride_index': 9,
        'station_index': 3,
        'sequence_index': 2,
        'path_type': 4,
    })


def test_wall(results):
    section("WALL")
    element = decode_tile(tile_record(0xD4, 0x60, 8, 12, 33, 0x11, 0xE9, 0x7C))
    results.record("Wall variant", isinstance(element, WallElement), type(element).__name__)
    check_fields(results, "wall", element, {
        'entry_index': 33,
        'slope': 3,
        'primary_colour': 0x09,
        'secondary_colour': 0x1F,
        'tertiary_colour': 0x11,
        'animation_frame': 15,
        'banner_index': 0x11,
        'is_across_track': True,
        'animation_is_backwards': True,
    })


def test_large_scenery(results):
    section("LARGE SCENERY")
    element = decode_tile(tile_record(0x58, 0x00, 8, 20, 0x23, 0x15, 0xA3, 0x64))
    results.record("Large scenery variant", isinstance(element, LargeSceneryElement), type(element).__name__)
    check_fields(results, "large_scenery", element, {
        'entry_index': 0x123,
        'sequence_index': 5,
        'primary_colour': 3,
        'secondary_colour': 4,
        'banner_index': 0x6B,
    })


def test_banner(results):
    section("BANNER")
    element = decode_tile(tile_record(0x1C, 0x10, 8, 10, 17, 3, 0xF5, 0))
    results.record("Banner variant", isinstance(element, BannerElement), type(element).__name__)
    check_fields(results, "banner", element, {
        'banner_index': 17,
        'position': 3,
        'allowed_edges': 5,
        'is_ghost': True,
    })


def test_verbatim_records(results):
    section("VERBATIM RECORDS")

    padding = tile_record(0x04, 0x80, 0xFF, 0xFF, 1, 2, 3, 4)
    element = decode_tile(padding)
    results.record("Padding slot kept raw", isinstance(element, RawTileElement), type(element).__name__)
    results.record("Padding bytes unchanged", element.to_bytes() == padding, "")

    for tag in (8, 14, 15):
        record = tile_record(tag << 2, 0x00, 10, 10, 0xDE, 0xAD, 0xBE, 0xEF)
        element = decode_tile(record)
        results.record(f"Tag {tag} copied verbatim",
                       isinstance(element, RawTileElement) and element.to_bytes() == record, "")

    record = tile_record(TileElementType.CORRUPT << 2, 0x00, 3, 3)
    results.record("Corrupt marker not decoded", not is_decoded(decode_tile(record)), "")

    for tag in range(9, 14):
        record = tile_record(tag << 2, 0x80, 10, 10, 1, 2, 3, 4)
        element = decode_tile(record)
        results.record(f"Reserved tag {tag} passes through",
                       isinstance(element, RawTileElement) and element.element_type == tag, "")

    record = RawTileRecord(surface_record())
    results.record("Accepts RawTileRecord", isinstance(decode_tile(record), SurfaceElement), "")


def test_decode_errors(results):
    section("DECODE ERRORS")

    results.expect_error("Short record rejected", FormatError, decode_tile, b'\x00' * 7)

    removed = TILE_DECODERS.pop(TileElementType.BANNER)
    try:
        results.expect_error("Unregistered type rejected", FormatError,
                             decode_tile, tile_record(0x1C, 0, 8, 10))
    finally:
        TILE_DECODERS[TileElementType.BANNER] = removed


def test_tile_array(results):
    section("TILE ARRAY")

    first = surface_record(OwnershipType.AVAILABLE)
    data = first + PADDING_RECORD * (MAX_TILE_ELEMENTS - 1)
    elements = decode_tile_array(data)
    results.record("Element count equals capacity", len(elements) == MAX_TILE_ELEMENTS, f"got {len(elements)}")
    results.record("Slot order preserved",
                   isinstance(elements[0], SurfaceElement) and elements[0].ownership == OwnershipType.AVAILABLE, "")
    results.record("Trailing padding raw", isinstance(elements[-1], RawTileElement), "")
    results.expect_error("Wrong array size rejected", FormatError, decode_tile_array, data[:-8])
    results.expect_error("Oversized array rejected", FormatError, decode_tile_array, data + PADDING_RECORD)
    results.record("Array size constant", TILE_ARRAY_SIZE == MAX_TILE_ELEMENTS * 8, "")


def run_all_tests(results):
    test_surface(results)
    test_path(results)
    test_track(results)
    test_small_scenery(results)
    test_entrance(results)
    test_wall(results)
    test_large_scenery(results)
    test_banner(results)
    test_verbatim_records(results)
    test_decode_errors(results)
    test_tile_array(results)
    return results.passed, results.failed, results.skipped


if __name__ == "__main__":
    results = TestResults()
    run_all_tests(results)
    sys.exit(0 if results.summary("TILE TEST SUMMARY") else 1)
