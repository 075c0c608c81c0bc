"""
Park Migrator - Research Bitmap and Money Tests

Can be run standalone: python test_research.py
"""

import sys
from pathlib import Path

TESTS_DIR = Path(__file__).parent
sys.path.insert(0, str(TESTS_DIR.parent.parent / "src"))
sys.path.insert(0, str(TESTS_DIR))

from test_api import TestResults, section

from parkmigrator.formats.s6.records import RawResearchBitmap
import parkmigrator.importer as importer_package
from parkmigrator.importer import field_migrator
from parkmigrator.importer.field_migrator import decrypt_money, MONEY_ENCRYPTION_KEY
from parkmigrator.importer.research import decode_bitmap, import_researched_items, is_bit_set
from parkmigrator.world.state import ResearchInventedSet, RIDE_TYPE_COUNT, MAX_SCENERY_ITEMS

from park_builder import encrypt_money


def test_bitmap(results):
    section("RESEARCH BITMAP")

    bitmap = RawResearchBitmap()
    bitmap.ride_types[0] = 1 << 5
    invented = ResearchInventedSet()
    invented.ride_types = [True] * RIDE_TYPE_COUNT
    import_researched_items(bitmap, invented)

    results.record("Bit 5 marks ride type 5", invented.ride_types[5], "")
    results.record("Only ride type 5 invented",
                   [i for i, v in enumerate(invented.ride_types) if v] == [5],
                   f"got {[i for i, v in enumerate(invented.ride_types) if v]}")
    results.record("Previous flags cleared", invented.count() == (1, 0, 0), f"got {invented.count()}")

    bitmap = RawResearchBitmap()
    bitmap.scenery_items[55] = 0x80000000
    bitmap.ride_entries[1] = 1
    import_researched_items(bitmap, invented)
    results.record("Last scenery item", invented.scenery_items[MAX_SCENERY_ITEMS - 1], "")
    results.record("Ride entry 32 from second word", invented.ride_entries[32], "")
    results.record("Counts per group", invented.count() == (0, 1, 1), f"got {invented.count()}")

    results.record("is_bit_set crosses words", is_bit_set([0, 4], 34), "")
    results.record("decode_bitmap length", len(decode_bitmap([0] * 3, 91)) == 91, "")
    results.expect_error("Bitmap too small", ValueError, decode_bitmap, [0], 33)


def test_money(results):
    section("MONEY OBFUSCATION")

    for value in (10000, -2500, -0x80000000):
        stored = encrypt_money(value)
        results.record(f"Cash {value} survives", decrypt_money(stored) == value,
                       f"got {decrypt_money(stored)}")

    # The bare key decodes to zero
    results.record("Key decrypts to zero", decrypt_money(MONEY_ENCRYPTION_KEY) == 0, "")
    results.record("Unsigned stored value accepted",
                   decrypt_money(encrypt_money(-1) & 0xFFFFFFFF) == -1, "")
    results.record("Importer exposes no money encoder",
                   not hasattr(importer_package, "encrypt_money") and not hasattr(field_migrator, "encrypt_money"), "")


def run_all_tests(results):
    test_bitmap(results)
    test_money(results)
    return results.passed, results.failed, results.skipped


if __name__ == "__main__":
    results = TestResults()
    run_all_tests(results)
    sys.exit(0 if results.summary("RESEARCH TEST SUMMARY") else 1)
