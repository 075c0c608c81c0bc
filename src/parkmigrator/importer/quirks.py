"""
Quirk Fixup Table - per-file corrections for known broken scenarios

Each entry maps an exact file name to a function that edits the already
migrated WorldState. Lookup is exact string match; no match does nothing.
"""

from typing import Callable, Dict, Iterable, Optional, Tuple
import logging

from ..world.state import WorldState, PeepSpawn
from ..world.tile_elements import OwnershipType

logger = logging.getLogger(__name__)


QuirkFunc = Callable[[WorldState], None]


class QuirkTable:
    """Registry of filename-keyed fixups."""

    def __init__(self):
        self._quirks: Dict[str, QuirkFunc] = {}

    def register(self, *filenames: str):
        """Decorator: register func for each of the given file names."""
        def decorator(func: QuirkFunc) -> QuirkFunc:
            for name in filenames:
                if name in self._quirks:
                    raise ValueError(f"Quirk already registered for '{name}'")
                self._quirks[name] = func
            return func
        return decorator

    def add(self, filename: str, func: QuirkFunc):
        self.register(filename)(func)

    def lookup(self, filename: str) -> Optional[QuirkFunc]:
        return self._quirks.get(filename)

    def apply(self, filename: str, world: WorldState) -> bool:
        """Run the fixup for filename. Returns True when one was applied."""
        func = self.lookup(filename)
        if func is None:
            return False
        logger.info(f"Applying fixup '{func.__name__}' for '{filename}'")
        func(world)
        return True

    def __contains__(self, filename: str) -> bool:
        return filename in self._quirks

    def __len__(self) -> int:
        return len(self._quirks)

    def filenames(self) -> Iterable[str]:
        return sorted(self._quirks)


DEFAULT_QUIRKS = QuirkTable()


# Many expansion scenarios embed a wrong file name, so both spellings are listed.

@DEFAULT_QUIRKS.register("WW South America - Rio Carnival.SC6", "South America - Rio Carnival.SC6")
def fix_rio_carnival_spawns(world: WorldState):
    # The first spawn is wrong and the second is right but unreachable
    world.park.peep_spawns = [PeepSpawn(2160, 3167, 96, 1)]


@DEFAULT_QUIRKS.register("Great Wall of China Tourism Enhancement.SC6",
                         "Asia - Great Wall of China Tourism Enhancement.SC6")
def fix_great_wall_spawns(world: WorldState):
    world.park.peep_spawns = world.park.peep_spawns[:1]


@DEFAULT_QUIRKS.register("Amity Airfield.SC6")
def fix_amity_airfield_spawn(world: WorldState):
    # Guests entered from the tile corner
    if world.park.peep_spawns:
        world.park.peep_spawns[0].y = 1296


EUROPEAN_CULTURAL_FESTIVAL_TILES: Tuple[Tuple[int, int], ...] = (
    (67, 94), (68, 94), (69, 94),
    (58, 24), (58, 25), (58, 26), (58, 27), (58, 28), (58, 29), (58, 30), (58, 31), (58, 32),
    (26, 44), (26, 45),
    (32, 79), (32, 80), (32, 81),
)


@DEFAULT_QUIRKS.register("Europe - European Cultural Festival.SC6")
def fix_european_cultural_festival_ownership(world: WorldState):
    # Unowned gaps break pathfinding between the park areas
    changed = world.set_ownership(EUROPEAN_CULTURAL_FESTIVAL_TILES, OwnershipType.OWNED)
    logger.debug(f"Set ownership on {changed} tiles")
