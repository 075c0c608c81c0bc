"""
Tile Elements - named-field map records

Each map feature is one of eight variants. Decoded variants carry explicit
fields; RawTileElement keeps the original 8 bytes for padding slots and
corrupt markers that must survive untouched.
"""

from dataclasses import dataclass
from enum import IntEnum


TILE_ELEMENT_SIZE = 8
BASE_HEIGHT_SENTINEL = 0xFF


class TileElementType(IntEnum):
    """Element type as stored in bits 2-5 of the type byte."""
    SURFACE = 0
    PATH = 1
    TRACK = 2
    SMALL_SCENERY = 3
    ENTRANCE = 4
    WALL = 5
    LARGE_SCENERY = 6
    BANNER = 7
    CORRUPT = 8


# Legacy marker tags (bits 2-5 of the type byte) copied verbatim
PASSTHROUGH_TYPES = frozenset({8, 14, 15})
RESERVED_TYPES = frozenset(range(9, 14))


class TileElementFlag:
    GHOST = 0x10
    BROKEN = 0x20
    LAST_TILE = 0x80


class OwnershipType:
    UNOWNED = 0x00
    CONSTRUCTION_RIGHTS_OWNED = 0x10
    OWNED = 0x20
    CONSTRUCTION_RIGHTS_AVAILABLE = 0x40
    AVAILABLE = 0x80


class EntranceType(IntEnum):
    RIDE_ENTRANCE = 0
    RIDE_EXIT = 1
    PARK_ENTRANCE = 2


@dataclass
class TileElement:
    """Fields common to every decoded variant."""
    direction: int = 0
    flags: int = 0
    base_height: int = 0
    clearance_height: int = 0

    element_type = None

    @property
    def is_ghost(self) -> bool:
        return bool(self.flags & TileElementFlag.GHOST)

    @property
    def is_last_for_tile(self) -> bool:
        return bool(self.flags & TileElementFlag.LAST_TILE)


@dataclass
class SurfaceElement(TileElement):
    element_type = TileElementType.SURFACE
    slope: int = 0
    surface_style: int = 0
    edge_style: int = 0
    grass_length: int = 0
    ownership: int = 0
    park_fences: int = 0
    water_height: int = 0
    has_track_that_needs_water: bool = False


@dataclass
class PathElement(TileElement):
    element_type = TileElementType.PATH
    entry_index: int = 0
    queue_banner_direction: int = 0
    is_sloped: bool = False
    slope_direction: int = 0
    ride_index: int = 0
    station_index: int = 0
    is_wide: bool = False
    is_queue: bool = False
    has_queue_banner: bool = False
    edges: int = 0
    corners: int = 0
    addition: int = 0
    addition_is_ghost: bool = False
    addition_status: int = 0


@dataclass
class TrackElement(TileElement):
    element_type = TileElementType.TRACK
    track_type: int = 0
    sequence_index: int = 0
    ride_index: int = 0
    colour_scheme: int = 0
    station_index: int = 0
    has_chain: bool = False
    has_cable_lift: bool = False
    is_inverted: bool = False
    brake_booster_speed: int = 0
    has_green_light: bool = False
    seat_rotation: int = 0
    maze_entry: int = 0
    photo_timeout: int = 0


@dataclass
class SmallSceneryElement(TileElement):
    element_type = TileElementType.SMALL_SCENERY
    entry_index: int = 0
    age: int = 0
    quadrant: int = 0
    primary_colour: int = 0
    secondary_colour: int = 0
    needs_supports: bool = False


@dataclass
class EntranceElement(TileElement):
    element_type = TileElementType.ENTRANCE
    entrance_type: int = 0
    ride_index: int = 0
    station_index: int = 0
    sequence_index: int = 0
    path_type: int = 0


@dataclass
class WallElement(TileElement):
    element_type = TileElementType.WALL
    entry_index: int = 0
    slope: int = 0
    primary_colour: int = 0
    secondary_colour: int = 0
    tertiary_colour: int = 0
    animation_frame: int = 0
    banner_index: int = 0
    is_across_track: bool = False
    animation_is_backwards: bool = False


@dataclass
class LargeSceneryElement(TileElement):
    element_type = TileElementType.LARGE_SCENERY
    entry_index: int = 0
    sequence_index: int = 0
    primary_colour: int = 0
    secondary_colour: int = 0
    banner_index: int = 0


@dataclass
class BannerElement(TileElement):
    element_type = TileElementType.BANNER
    banner_index: int = 0
    position: int = 0
    allowed_edges: int = 0


@dataclass
class RawTileElement:
    """Verbatim copy of a record that is not decoded."""
    raw: bytes = bytes(TILE_ELEMENT_SIZE)

    @property
    def element_type(self) -> int:
        return (self.raw[0] & 0x3C) >> 2

    @property
    def direction(self) -> int:
        return self.raw[0] & 0x03

    @property
    def flags(self) -> int:
        return self.raw[1]

    @property
    def base_height(self) -> int:
        return self.raw[2]

    @property
    def clearance_height(self) -> int:
        return self.raw[3]

    @property
    def is_ghost(self) -> bool:
        return bool(self.flags & TileElementFlag.GHOST)

    @property
    def is_last_for_tile(self) -> bool:
        return bool(self.flags & TileElementFlag.LAST_TILE)

    def to_bytes(self) -> bytes:
        return bytes(self.raw)


def is_decoded(element) -> bool:
    """True for a named-field variant, False for a verbatim record."""
    return isinstance(element, TileElement)
