"""
Park Migrator - End-to-End Import Tests

Imports synthetic parks from park_builder through the full pipeline: load,
chunk reading, migration, fixups and the repair pass.

Can be run standalone: python test_importer.py
"""

import io
import sys
import json
import tempfile
from contextlib import redirect_stdout
from pathlib import Path

TESTS_DIR = Path(__file__).parent
sys.path.insert(0, str(TESTS_DIR.parent.parent / "src"))
sys.path.insert(0, str(TESTS_DIR))

from test_api import TestResults, section
from park_builder import ParkSpec, PeepSpec, build_park, write_park

from parkmigrator.config import ImportConfig
from parkmigrator.errors import (
    FormatError, ChecksumError, UnsupportedFormatError, TruncatedDataError, AssetResolutionError,
)
from parkmigrator.formats.s6.layout import SAVED_GAME_LAYOUT, SCENARIO_LAYOUT
from parkmigrator.importer.loader import (
    load_park_file, FILE_CONTAINS_INVALID_DATA, UNSUPPORTED_CLASSIC_PARK, REQUIRED_OBJECTS_MISSING,
)
from parkmigrator.importer.objects import InMemoryObjectRepository
from parkmigrator.importer.s6_importer import S6Importer, ImportState
from parkmigrator.world.sprites import PeepState, SpriteList
from parkmigrator.world.state import WorldState, PeepSpawn, ParkEntrance
from parkmigrator.world.tile_elements import OwnershipType


def saved_game_spec() -> ParkSpec:
    return ParkSpec(
        cash=10000,
        guests_in_park=12,
        park_rating=650,
        peep_spawns=[(100, 100, 5, 1)],
        park_entrances=[(640, 320, 14, 2)],
        rides={0: 1},
        peeps=[PeepSpec(5, PeepState.ON_RIDE, 0)],
        researched_ride_types=[1 << 5] + [0] * 7,
        news_types=[1, 2, 12, 3],
    )


def test_minimal_park(results):
    section("MINIMAL PARK")

    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(build_park())
    world = WorldState()
    report = importer.import_park(world)

    surface = world.get_surface_element(0, 0)
    results.record("Single owned surface", surface is not None and surface.ownership == OwnershipType.OWNED, "")
    results.record("Padding tiles have no surface", world.get_surface_element(1, 0) is None, "")
    results.record("Spawn rescaled", world.park.peep_spawns == [PeepSpawn(100, 100, 80, 1)],
                   f"got {world.park.peep_spawns}")
    results.record("No rides", not list(world.iter_rides()), "")
    results.record("No riders counted", report.riders_counted == 0, f"got {report.riders_counted}")


def test_saved_game(results):
    section("SAVED GAME")

    with tempfile.TemporaryDirectory() as tmp:
        path = write_park(tmp, "park.sv6", saved_game_spec())
        importer = S6Importer(InMemoryObjectRepository(), ImportConfig())
        result = importer.load(path)
        results.record("Saved game layout", result.layout is SAVED_GAME_LAYOUT, result.layout.name)
        results.record("Header read state", importer.state == ImportState.HEADER_READ, importer.state.name)
        results.record("No scenario info block", result.scenario_info is None, "")

        world = WorldState()
        report = importer.import_park(world)

    results.record("Import done", importer.state == ImportState.DONE, importer.state.name)
    results.record("Repair pass clean", report.clean, f"failed {report.failed_steps}")
    results.record("Map size", world.map_size == 150, f"got {world.map_size}")
    results.record("Cash decrypted", world.finance.cash == 10000, f"got {world.finance.cash}")
    results.record("Guests in park", world.park.guests_in_park == 12, "")
    results.record("Park rating", world.park.rating == 650, "")
    results.record("Peep spawn height scaled, undefined dropped",
                   world.park.peep_spawns == [PeepSpawn(100, 100, 80, 1)], f"got {world.park.peep_spawns}")
    results.record("Null park entrances skipped",
                   world.park.entrances == [ParkEntrance(640, 320, 14, 2)], f"got {world.park.entrances}")

    surface = world.get_surface_element(0, 0)
    results.record("Owned surface at origin",
                   surface is not None and surface.ownership == OwnershipType.OWNED, "")
    results.record("Every map tile indexed", report.tiles_indexed == 256 * 256, f"got {report.tiles_indexed}")
    results.record("No land for sale", world.park.land_rights_for_sale == 0, "")

    rides = list(world.iter_rides())
    results.record("One ride migrated", len(rides) == 1 and rides[0].id == 0, f"got {len(rides)}")
    results.record("Riders recounted", rides[0].num_riders == 1, f"got {rides[0].num_riders}")
    results.record("Unset station entrance is None", rides[0].stations[0].entrance is None, "")

    results.record("Research bit 5 only",
                   [i for i, v in enumerate(world.research.invented.ride_types) if v] == [5], "")
    results.record("Free list intact", report.disjoint_sprites == 0 and report.sprite_list_links_cut == 0, "")
    results.record("Free count", world.sprite_lists_count[SpriteList.FREE] == 10000,
                   f"got {world.sprite_lists_count[SpriteList.FREE]}")

    results.record("Scenario name transcoded", world.scenario.name == "Test Park", f"got {world.scenario.name!r}")
    results.record("Date migrated", world.scenario.current_day == 3 and world.scenario.srand == (1, 2), "")

    news_types = [item.type for item in world.news_items[:5]]
    results.record("News stops at invalid type", news_types == [1, 2, 0, 0, 0], f"got {news_types}")


def test_scenario(results):
    section("SCENARIO")

    spec = ParkSpec(scenario=True, scenario_filename=b"Embedded Name.SC6", info_name=b"Caf\xe9 Park")
    with tempfile.TemporaryDirectory() as tmp:
        path = write_park(tmp, "My Scenario.SC6", spec)
        importer = S6Importer(InMemoryObjectRepository())
        result = importer.load(path)
        world = WorldState()
        importer.import_park(world)

    results.record("Scenario layout", result.layout is SCENARIO_LAYOUT, result.layout.name)
    results.record("Info block read", result.scenario_info is not None and result.scenario_info.category == 2, "")
    results.record("Info name transcoded", world.scenario.info_name == "Café Park", f"got {world.scenario.info_name!r}")
    results.record("Editor step", world.scenario.editor_step == 4, "")
    results.record("File name from path", world.scenario.filename == "My Scenario.SC6", f"got {world.scenario.filename!r}")
    results.record("Embedded name kept", world.scenario.embedded_filename == "Embedded Name.SC6", "")
    results.record("Spawns from first slice", world.park.peep_spawns == [PeepSpawn(100, 100, 80, 1)], "")
    results.record("Cash from last slice", world.finance.cash == 10000, f"got {world.finance.cash}")
    results.record("Map size from last slice", world.map_size == 150, "")
    results.record("Owned surface", world.get_surface_element(0, 0).ownership == OwnershipType.OWNED, "")


def test_quirk_applied(results):
    section("QUIRK DURING IMPORT")

    spec = ParkSpec(scenario=True, scenario_filename=b"Amity Airfield.SC6", peep_spawns=[(1200, 1280, 6, 1)])
    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(build_park(spec), is_scenario=True, path="amity.sc6")
    world = WorldState()
    importer.import_park(world)
    results.record("Fixup keyed on embedded name", world.park.peep_spawns[0].y == 1296,
                   f"got {world.park.peep_spawns}")
    results.record("Real file name used", world.scenario.filename == "amity.sc6", "")

    # Fixups address stored spawn slots; an unused slot 0 is not skipped over
    spec = ParkSpec(scenario=True, scenario_filename=b"Amity Airfield.SC6",
                    peep_spawns=[(0xFFFF, 0, 0, 0), (1200, 1280, 6, 1)])
    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(build_park(spec), is_scenario=True)
    world = WorldState()
    importer.import_park(world)
    results.record("Slot 1 spawn not moved", world.park.peep_spawns == [PeepSpawn(1200, 1280, 96, 1)],
                   f"got {world.park.peep_spawns}")

    spec = ParkSpec(scenario=True, scenario_filename=b"Great Wall of China Tourism Enhancement.SC6",
                    peep_spawns=[(0xFFFF, 0, 0, 0), (300, 300, 4, 2)])
    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(build_park(spec), is_scenario=True)
    world = WorldState()
    importer.import_park(world)
    results.record("Slot 1 spawn removed with slot 0 unused", world.park.peep_spawns == [],
                   f"got {world.park.peep_spawns}")


def test_rejections(results):
    section("REJECTED FILES")

    scenario_bytes = build_park(ParkSpec(scenario=True))
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "park.sv6"
        path.write_bytes(scenario_bytes)
        importer = S6Importer(InMemoryObjectRepository())
        results.expect_error("Scenario in .sv6 rejected", FormatError, importer.load, path)
        results.record("Importer failed", importer.state == ImportState.FAILED, importer.state.name)
        results.expect_error("Unknown extension rejected", FormatError,
                             S6Importer(InMemoryObjectRepository()).load, Path(tmp) / "park.td6")

    results.expect_error("Scenario bytes as saved game", FormatError,
                         S6Importer(InMemoryObjectRepository()).load_from_stream, scenario_bytes, False)

    try:
        S6Importer(InMemoryObjectRepository()).load_from_stream(build_park(ParkSpec(classic_flag=0x0F)))
        results.record("Classic variant rejected", False, "nothing raised")
    except UnsupportedFormatError as e:
        results.record("Classic variant rejected", e.classic_flag == 0x0F, f"flag {e.classic_flag}")

    bad_scenario = build_park(ParkSpec(scenario=True), valid_checksum=False)
    results.expect_error("Bad scenario checksum rejected", ChecksumError,
                         S6Importer(InMemoryObjectRepository()).load_from_stream, bad_scenario)

    config = ImportConfig(allow_loading_with_incorrect_checksum=True)
    importer = S6Importer(InMemoryObjectRepository(), config)
    importer.load_from_stream(bad_scenario)
    importer.import_park(WorldState())
    results.record("Bad checksum allowed by config", importer.state == ImportState.DONE, importer.state.name)

    bad_saved_game = build_park(ParkSpec(), valid_checksum=False)
    importer = S6Importer(InMemoryObjectRepository())
    result = importer.load_from_stream(bad_saved_game, is_scenario=False)
    world = WorldState()
    importer.import_park(world)
    results.record("Saved game trailer not enforced",
                   result.layout is SAVED_GAME_LAYOUT and importer.state == ImportState.DONE, importer.state.name)
    results.record("Saved game with bad trailer migrated", world.finance.cash == 10000, f"got {world.finance.cash}")

    truncated = bad_saved_game[:len(bad_saved_game) // 2]
    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(truncated)
    results.expect_error("Truncated stream", TruncatedDataError, importer.import_park, WorldState())
    results.record("Truncation marks failure", importer.error_kind == "TruncatedDataError", f"got {importer.error_kind}")


def test_importer_states(results):
    section("IMPORTER STATES")

    data = build_park(ParkSpec())
    importer = S6Importer(InMemoryObjectRepository())
    results.expect_error("import before load", ValueError, importer.import_park, WorldState())

    importer.load_from_stream(io.BytesIO(data))
    results.expect_error("Second load rejected", ValueError, importer.load_from_stream, data)
    importer.import_park(WorldState())
    results.expect_error("Second import rejected", ValueError, importer.import_park, WorldState())
    results.record("Details not provided", importer.get_details() is None, "")


def test_sprite_capacity(results):
    section("SPRITE CAPACITY")

    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(build_park())
    world = WorldState(max_sprites=12000)
    report = importer.import_park(world)
    free = world.sprite_lists_count[SpriteList.FREE]
    results.record("Extra slots counted as free", free == 12000, f"got {free}")
    results.record("Extra slots linked into free list", report.disjoint_sprites == 2000,
                   f"got {report.disjoint_sprites}")

    importer = S6Importer(InMemoryObjectRepository())
    importer.load_from_stream(build_park())
    results.expect_error("World smaller than park rejected", ValueError,
                         importer.import_park, WorldState(max_sprites=9000))
    results.record("Undersized world marks failure", importer.state == ImportState.FAILED, importer.state.name)


def test_objects(results):
    section("OBJECTS")

    data = build_park(ParkSpec(required_objects=[b"TOILETS", b"SCGTREES"],
                                packed_objects=[(b"CUSTOM1", b"object data")]))

    repository = InMemoryObjectRepository(known=["TOILETS"])
    try:
        S6Importer(repository).load_from_stream(data)
        results.record("Missing object reported", False, "nothing raised")
    except AssetResolutionError as e:
        results.record("Missing object reported", len(e.missing) == 1 and "SCGTREES" in e.missing[0], f"got {e.missing}")
    results.record("Packed object exported", repository.packed.get(("CUSTOM1", 0)) == b"object data",
                   f"got {list(repository.packed)}")

    repository = InMemoryObjectRepository(known=["TOILETS", "SCGTREES"])
    result = S6Importer(repository).load_from_stream(data)
    results.record("Required identifiers", result.required_identifiers == ["TOILETS", "SCGTREES"],
                   f"got {result.required_identifiers}")
    results.record("Objects resolved", len(repository.loaded) == 2, "")

    result = S6Importer(InMemoryObjectRepository(), ImportConfig(skip_object_check=True)).load_from_stream(data)
    results.record("Object check skipped", len(result.required_identifiers) == 2, "")


def test_loader(results):
    section("LOADER OUTCOMES")

    with tempfile.TemporaryDirectory() as tmp:
        good = write_park(tmp, "good.sv6", ParkSpec())
        bad = write_park(tmp, "bad.sc6", ParkSpec(scenario=True), valid_checksum=False)
        bad_saved_game = write_park(tmp, "bad.sv6", ParkSpec(), valid_checksum=False)
        classic = write_park(tmp, "classic.sv6", ParkSpec(classic_flag=0x0F))
        needs = write_park(tmp, "needs.sv6", ParkSpec(required_objects=[b"RCT2TOYS"]))
        repository = InMemoryObjectRepository()

        outcome = load_park_file(good, WorldState(), repository)
        results.record("Good park loads", outcome.success and outcome.report is not None, outcome.message)

        outcome = load_park_file(bad, WorldState(), repository)
        results.record("Bad checksum outcome", outcome.error == FILE_CONTAINS_INVALID_DATA, f"got {outcome.error}")
        results.record("Error kind named", outcome.error_kind == "ChecksumError", f"got {outcome.error_kind}")

        outcome = load_park_file(bad_saved_game, WorldState(), repository)
        results.record("Saved game with bad trailer loads", outcome.success, outcome.message)

        outcome = load_park_file(classic, WorldState(), repository)
        results.record("Classic outcome", outcome.error == UNSUPPORTED_CLASSIC_PARK, f"got {outcome.error}")

        outcome = load_park_file(needs, WorldState(), repository)
        results.record("Missing objects outcome", outcome.error == REQUIRED_OBJECTS_MISSING
                       and len(outcome.missing_objects) == 1, f"got {outcome.error} {outcome.missing_objects}")

        outcome = load_park_file(Path(tmp) / "absent.sv6", WorldState(), repository)
        results.record("Missing file reported", not outcome.success, "")


def test_cli(results):
    section("CLI")

    from parkmigrator.cli import main
    from PIL import Image

    with tempfile.TemporaryDirectory() as tmp:
        path = write_park(tmp, "park.sv6", saved_game_spec())

        buffer = io.StringIO()
        with redirect_stdout(buffer):
            main(["--format", "json", "import", str(path)])
        data = json.loads(buffer.getvalue())
        results.record("CLI import json", data["map_size"] == 150 and data["cash"] == 10000, f"got {data}")
        results.record("CLI rides", data["rides"] == 1, "")

        buffer = io.StringIO()
        with redirect_stdout(buffer):
            main(["--format", "json", "inspect", str(path)])
        data = json.loads(buffer.getvalue())
        results.record("CLI inspect", data["type"] == "saved_game" and data["required_objects"] == [], f"got {data}")

        output = Path(tmp) / "out" / "map.png"
        with redirect_stdout(io.StringIO()):
            main(["minimap", str(path), str(output), "--scale", "1"])
        results.record("Minimap written", output.exists(), "")
        if output.exists():
            with Image.open(output) as image:
                results.record("Minimap one pixel per tile", image.size == (150, 150), f"got {image.size}")


def run_all_tests(results):
    test_minimal_park(results)
    test_saved_game(results)
    test_scenario(results)
    test_quirk_applied(results)
    test_rejections(results)
    test_importer_states(results)
    test_sprite_capacity(results)
    test_objects(results)
    test_loader(results)
    test_cli(results)
    return results.passed, results.failed, results.skipped


if __name__ == "__main__":
    results = TestResults()
    run_all_tests(results)
    sys.exit(0 if results.summary("IMPORT TEST SUMMARY") else 1)
