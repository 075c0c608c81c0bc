"""
Park Migrator - Repair Pass Tests

Builds small worlds by hand and checks each repair step in isolation, then
the pass as a whole.

Can be run standalone: python test_repair.py
"""

import sys
from pathlib import Path

TESTS_DIR = Path(__file__).parent
sys.path.insert(0, str(TESTS_DIR.parent.parent / "src"))
sys.path.insert(0, str(TESTS_DIR))

from test_api import TestResults, section

from parkmigrator.importer.repair import (
    strip_ghost_flags, count_remaining_land_rights, determine_ride_entrance_and_exit_locations,
    recompute_ride_riders, run_repair_pass,
)
from parkmigrator.world.rides import Ride
from parkmigrator.world.sprites import (
    Sprite, SpriteIdentifier, SpriteList, PeepState, SPRITE_INDEX_NULL, NUM_SPRITE_LISTS,
    fix_sprite_list_cycles, fix_quadrant_cycles, fix_disjoint_sprites,
)
from parkmigrator.world.state import WorldState
from parkmigrator.world.tile_elements import (
    SurfaceElement, EntranceElement, RawTileElement, OwnershipType, EntranceType, TileElementFlag,
)

LAST = TileElementFlag.LAST_TILE


def null_sprites(count: int):
    return [Sprite() for _ in range(count)]


def peep(state: int, ride: int) -> Sprite:
    return Sprite(sprite_identifier=SpriteIdentifier.PEEP, peep_state=state, peep_current_ride=ride)


def test_sprite_list_cycles(results):
    section("SPRITE LIST CYCLES")

    sprites = null_sprites(5)
    heads = [SPRITE_INDEX_NULL] * NUM_SPRITE_LISTS
    heads[SpriteList.PEEP] = 0
    sprites[0].next, sprites[1].next, sprites[2].next = 1, 2, 0
    heads[SpriteList.MISC] = 99

    fixed = fix_sprite_list_cycles(sprites, heads)
    results.record("Two defects fixed", fixed == 2, f"got {fixed}")
    results.record("Cycle cut at the revisiting link", sprites[2].next == SPRITE_INDEX_NULL, "")
    results.record("Rest of list intact", sprites[0].next == 1 and sprites[1].next == 2, "")
    results.record("Out-of-range head cleared", heads[SpriteList.MISC] == SPRITE_INDEX_NULL, "")
    results.record("Second pass finds nothing", fix_sprite_list_cycles(sprites, heads) == 0, "")


def test_quadrant_cycles(results):
    section("SPATIAL CHAIN CYCLES")

    sprites = null_sprites(6)
    sprites[0].next_in_quadrant = 1
    sprites[1].next_in_quadrant = 2
    sprites[3].next_in_quadrant = 4
    sprites[4].next_in_quadrant = 3
    sprites[5].next_in_quadrant = 5

    fixed = fix_quadrant_cycles(sprites)
    results.record("Two cycles cut", fixed == 2, f"got {fixed}")
    results.record("Acyclic chain untouched", sprites[0].next_in_quadrant == 1 and sprites[1].next_in_quadrant == 2, "")
    results.record("Loop 3-4 broken", sprites[4].next_in_quadrant == SPRITE_INDEX_NULL, "")
    results.record("Self loop broken", sprites[5].next_in_quadrant == SPRITE_INDEX_NULL, "")

    sprites = null_sprites(3)
    sprites[0].next_in_quadrant = 2
    sprites[1].next_in_quadrant = 2
    results.record("Shared tail is not a cycle", fix_quadrant_cycles(sprites) == 0, "")


def test_disjoint_sprites(results):
    section("DISJOINT SPRITES")

    sprites = null_sprites(5)
    sprites[3] = peep(PeepState.WALKING, 0)
    heads = [SPRITE_INDEX_NULL] * NUM_SPRITE_LISTS
    heads[SpriteList.FREE] = 0
    sprites[0].next = 1

    relinked = fix_disjoint_sprites(sprites, heads)
    results.record("Unreachable null sprites relinked", relinked == 2, f"got {relinked}")
    results.record("Appended to free list tail", sprites[1].next == 2 and sprites[2].next == 4, "")
    results.record("Back links set", sprites[2].previous == 1 and sprites[4].previous == 2, "")
    results.record("Tail terminated", sprites[4].next == SPRITE_INDEX_NULL, "")
    results.record("Guest left alone", sprites[3].next == SPRITE_INDEX_NULL, "")

    sprites = null_sprites(3)
    heads = [SPRITE_INDEX_NULL] * NUM_SPRITE_LISTS
    fix_disjoint_sprites(sprites, heads)
    results.record("Empty free list gets a head", heads[SpriteList.FREE] == 0, f"got {heads[SpriteList.FREE]}")


def test_riders(results):
    section("RIDE RIDERS")

    world = WorldState(max_sprites=6)
    world.rides[0] = Ride(id=0, type=1, num_riders=42)
    world.rides[3] = Ride(id=3, type=1, num_riders=5)
    world.sprites[0] = peep(PeepState.ON_RIDE, 0)
    world.sprites[1] = peep(PeepState.ENTERING_RIDE, 0)
    world.sprites[2] = peep(PeepState.WALKING, 0)
    world.sprites[3] = peep(PeepState.ON_RIDE, 3)
    world.sprites[4] = Sprite(peep_state=PeepState.ON_RIDE, peep_current_ride=3)

    total = recompute_ride_riders(world)
    results.record("Riders counted", total == 3, f"got {total}")
    results.record("Stored count replaced", world.rides[0].num_riders == 2, f"got {world.rides[0].num_riders}")
    results.record("Non-guest sprites ignored", world.rides[3].num_riders == 1, f"got {world.rides[3].num_riders}")


def test_ghost_strip(results):
    section("GHOST FLAGS")

    raw = bytes((0x00, 0x90, 0xFF, 0xFF, 0, 0, 0, 0))
    world = WorldState()
    world.set_tile_elements([
        SurfaceElement(flags=LAST | TileElementFlag.GHOST),
        SurfaceElement(flags=LAST),
        RawTileElement(raw),
    ])
    stripped = strip_ghost_flags(world)
    results.record("One ghost stripped", stripped == 1, f"got {stripped}")
    results.record("Flag cleared, last-tile kept", world.tile_elements[0].flags == LAST, "")
    results.record("Verbatim record untouched", world.tile_elements[2].to_bytes() == raw, "")


def test_land_rights(results):
    section("LAND RIGHTS")

    world = WorldState()
    world.set_tile_elements([
        SurfaceElement(flags=LAST, ownership=OwnershipType.AVAILABLE),
        SurfaceElement(flags=LAST, ownership=OwnershipType.CONSTRUCTION_RIGHTS_AVAILABLE),
        SurfaceElement(flags=LAST, ownership=OwnershipType.OWNED),
        SurfaceElement(flags=LAST, ownership=OwnershipType.CONSTRUCTION_RIGHTS_AVAILABLE
                       | OwnershipType.CONSTRUCTION_RIGHTS_OWNED),
        SurfaceElement(flags=LAST, ownership=OwnershipType.AVAILABLE | OwnershipType.OWNED),
    ])
    land, construction = count_remaining_land_rights(world)
    results.record("Land for sale", land == 1, f"got {land}")
    results.record("Construction rights for sale", construction == 1, f"got {construction}")
    results.record("Stored on park", world.park.land_rights_for_sale == 1
                   and world.park.construction_rights_for_sale == 1, "")

    # Owned land still carrying the for-sale bit is not for sale
    world = WorldState()
    world.set_tile_elements([SurfaceElement(flags=LAST, ownership=OwnershipType.AVAILABLE | OwnershipType.OWNED)])
    counts = count_remaining_land_rights(world)
    results.record("Owned and available counts nothing", counts == (0, 0), f"got {counts}")


def test_entrance_locations(results):
    section("RIDE ENTRANCES")

    world = WorldState()
    world.set_tile_elements([
        SurfaceElement(),
        EntranceElement(flags=LAST, entrance_type=EntranceType.RIDE_ENTRANCE, ride_index=2, station_index=0),
        SurfaceElement(),
        EntranceElement(flags=LAST, entrance_type=EntranceType.RIDE_EXIT, ride_index=2, station_index=0),
        SurfaceElement(),
        EntranceElement(flags=LAST, entrance_type=EntranceType.RIDE_ENTRANCE, ride_index=4, station_index=0),
    ])
    ride = Ride(id=2, type=1)
    ride.stations[0].entrance = (5, 5)
    ride.stations[1].entrance = (7, 7)
    world.rides[2] = ride
    other = Ride(id=4, type=1)
    other.stations[0].entrance = (2, 0)
    world.rides[4] = other

    changed = determine_ride_entrance_and_exit_locations(world)
    results.record("Three locations changed", changed == 3, f"got {changed}")
    results.record("Entrance moved to map element", ride.stations[0].entrance == (0, 0), f"got {ride.stations[0].entrance}")
    results.record("Exit found from map", ride.stations[0].exit == (1, 0), f"got {ride.stations[0].exit}")
    results.record("Dangling entrance cleared", ride.stations[1].entrance is None, "")
    results.record("Correct entrance kept", other.stations[0].entrance == (2, 0), "")


def test_repair_pass(results):
    section("REPAIR PASS")

    world = WorldState(max_sprites=8)
    world.set_tile_elements([SurfaceElement(flags=LAST | TileElementFlag.GHOST, ownership=OwnershipType.AVAILABLE)])
    world.scenario.name = b'Caf\xe9'
    world.user_strings = None

    report = run_repair_pass(world)
    results.record("Failing step recorded", report.failed_steps == ['convert_strings'], f"got {report.failed_steps}")
    results.record("Report not clean", not report.clean, "")
    results.record("Later steps still ran", report.land_rights_for_sale == 1 and report.disjoint_sprites == 8,
                   f"land {report.land_rights_for_sale}, disjoint {report.disjoint_sprites}")
    results.record("Earlier steps ran", report.ghosts_stripped == 1 and report.tiles_indexed == 1, "")


def run_all_tests(results):
    test_sprite_list_cycles(results)
    test_quadrant_cycles(results)
    test_disjoint_sprites(results)
    test_riders(results)
    test_ghost_strip(results)
    test_land_rights(results)
    test_entrance_locations(results)
    test_repair_pass(results)
    return results.passed, results.failed, results.skipped


if __name__ == "__main__":
    results = TestResults()
    run_all_tests(results)
    sys.exit(0 if results.summary("REPAIR TEST SUMMARY") else 1)
