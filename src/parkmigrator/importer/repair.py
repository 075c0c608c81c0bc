"""
Post-import repair pass.

Runs after migration to rebuild derived data and patch defects that legacy
saves are known to carry. Each step is independent: a failing step is logged
and the pass moves on, so the pass never fails an import.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
import logging

from ..formats.sawyer.encoding import decode_legacy_string
from ..world.state import WorldState, MAXIMUM_MAP_SIZE_TECHNICAL
from ..world.tile_elements import (
    TileElementFlag, OwnershipType, EntranceElement, EntranceType,
)
from ..world.sprites import fix_sprite_list_cycles, fix_quadrant_cycles, fix_disjoint_sprites

logger = logging.getLogger(__name__)


@dataclass
class RepairReport:
    """Counts gathered by one repair pass."""
    ghosts_stripped: int = 0
    tiles_indexed: int = 0
    strings_converted: int = 0
    land_rights_for_sale: int = 0
    construction_rights_for_sale: int = 0
    entrances_relocated: int = 0
    sprite_list_links_cut: int = 0
    quadrant_links_cut: int = 0
    disjoint_sprites: int = 0
    riders_counted: int = 0
    failed_steps: List[str] = field(default_factory=list)

    @property
    def clean(self) -> bool:
        return not self.failed_steps


def strip_ghost_flags(world: WorldState) -> int:
    """Clear the ghost flag on decoded elements. Verbatim records are left alone."""
    stripped = 0
    for element in world.iter_decoded_elements():
        if element.flags & TileElementFlag.GHOST:
            element.flags &= ~TileElementFlag.GHOST
            stripped += 1
    return stripped


def _convert(value):
    if isinstance(value, (bytes, bytearray)):
        return decode_legacy_string(bytes(value)), True
    return value, False


def convert_strings(world: WorldState) -> int:
    """Transcode any legacy byte strings still held by the world."""
    converted = 0
    scenario = world.scenario
    for name in ('name', 'details', 'completed_by'):
        value, changed = _convert(getattr(scenario, name))
        setattr(scenario, name, value)
        converted += changed

    for i, text in enumerate(world.user_strings):
        world.user_strings[i], changed = _convert(text)
        converted += changed

    for item in world.news_items:
        item.text, changed = _convert(item.text)
        converted += changed
    return converted


def count_remaining_land_rights(world: WorldState) -> Tuple[int, int]:
    """Count surfaces still for sale as land or as construction rights."""
    land = 0
    construction = 0
    size = min(world.map_size, MAXIMUM_MAP_SIZE_TECHNICAL)
    for y in range(size):
        for x in range(size):
            surface = world.get_surface_element(x, y)
            if surface is None:
                continue
            if (surface.ownership & OwnershipType.AVAILABLE
                    and not surface.ownership & OwnershipType.OWNED):
                land += 1
            elif (surface.ownership & OwnershipType.CONSTRUCTION_RIGHTS_AVAILABLE
                  and not surface.ownership & OwnershipType.CONSTRUCTION_RIGHTS_OWNED):
                construction += 1
    world.park.land_rights_for_sale = land
    world.park.construction_rights_for_sale = construction
    return land, construction


def _find_ride_entrances(world: WorldState) -> Dict[Tuple[int, int, int], Tuple[int, int]]:
    """Map (ride, station, entrance type) to the first tile holding such an element."""
    found: Dict[Tuple[int, int, int], Tuple[int, int]] = {}
    for x, y, elements in world.iter_tiles():
        for element in elements:
            if not isinstance(element, EntranceElement):
                continue
            if element.entrance_type not in (EntranceType.RIDE_ENTRANCE, EntranceType.RIDE_EXIT):
                continue
            key = (element.ride_index, element.station_index, element.entrance_type)
            found.setdefault(key, (x, y))
    return found


def determine_ride_entrance_and_exit_locations(world: WorldState) -> int:
    """
    Check every station's entrance and exit against the map. Locations with
    no matching element are replaced by the first match found, or cleared.
    Returns the number of locations changed.
    """
    found = _find_ride_entrances(world)
    changed = 0
    for ride in world.iter_rides():
        for station_index, station in enumerate(ride.stations):
            for attr, kind in (('entrance', EntranceType.RIDE_ENTRANCE), ('exit', EntranceType.RIDE_EXIT)):
                actual: Optional[Tuple[int, int]] = found.get((ride.id, station_index, kind))
                stored = getattr(station, attr)
                if stored is not None and stored == actual:
                    continue
                if stored is not None and _has_entrance_at(world, stored, ride.id, station_index, kind):
                    continue
                if stored != actual:
                    logger.warning(f"Ride {ride.id} station {station_index} {attr}: {stored} -> {actual}")
                    setattr(station, attr, actual)
                    changed += 1
    return changed


def _has_entrance_at(world: WorldState, location, ride_index: int, station_index: int, kind: int) -> bool:
    x, y = location
    for element in world.get_tile_elements_at(x, y):
        if (isinstance(element, EntranceElement) and element.entrance_type == kind
                and element.ride_index == ride_index and element.station_index == station_index):
            return True
    return False


def recompute_ride_riders(world: WorldState) -> int:
    """Count guests on or entering each ride; the stored counter drifts."""
    riders = Counter(
        sprite.peep_current_ride for sprite in world.sprites if sprite.is_on_ride
    )
    for ride in world.iter_rides():
        ride.num_riders = riders.get(ride.id, 0)
    return sum(riders.values())


def run_repair_pass(world: WorldState) -> RepairReport:
    report = RepairReport()

    def step(name, func):
        try:
            func()
        except Exception:
            logger.exception(f"Repair step '{name}' failed, continuing")
            report.failed_steps.append(name)

    def strip():
        report.ghosts_stripped = strip_ghost_flags(world)

    def index_tiles():
        report.tiles_indexed = world.update_tile_pointers()

    def strings():
        report.strings_converted = convert_strings(world)

    def land_rights():
        report.land_rights_for_sale, report.construction_rights_for_sale = count_remaining_land_rights(world)

    def entrances():
        report.entrances_relocated = determine_ride_entrance_and_exit_locations(world)

    def sprite_lists():
        report.sprite_list_links_cut = fix_sprite_list_cycles(world.sprites, world.sprite_lists_head)

    def quadrants():
        report.quadrant_links_cut = fix_quadrant_cycles(world.sprites)

    def disjoint():
        report.disjoint_sprites = fix_disjoint_sprites(world.sprites, world.sprite_lists_head)

    def riders():
        report.riders_counted = recompute_ride_riders(world)

    step('strip_ghost_flags', strip)
    step('update_tile_pointers', index_tiles)
    step('convert_strings', strings)
    step('count_remaining_land_rights', land_rights)
    step('determine_ride_entrance_and_exit_locations', entrances)
    step('fix_sprite_list_cycles', sprite_lists)
    step('fix_quadrant_cycles', quadrants)
    step('fix_disjoint_sprites', disjoint)
    step('recompute_ride_riders', riders)

    logger.info(
        f"Repair pass: {report.ghosts_stripped} ghosts stripped, {report.tiles_indexed} tiles indexed, "
        f"{report.sprite_list_links_cut + report.quadrant_links_cut} sprite links cut, "
        f"{report.disjoint_sprites} disjoint sprites, {len(report.failed_steps)} failed steps"
    )
    return report
