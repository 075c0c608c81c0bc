"""
Bitfield Tile Decoder

Turns one raw 8-byte map record into a named-field TileElement. The type
byte selects one of eight extraction routines, registered with
@register_tile_decoder. Padding slots (base height 0xFF), legacy corrupt
markers and reserved tags are copied verbatim as RawTileElement.

Byte layout:
  0: type (bits 0-1 direction, bits 2-5 element type, 6-7 variant specific)
  1: flags
  2: base height
  3: clearance height
  4-7: variant specific
"""

from typing import Callable, Dict, List
import logging

from ...errors import FormatError
from ...world.tile_elements import (
    TileElementType, PASSTHROUGH_TYPES, RESERVED_TYPES, BASE_HEIGHT_SENTINEL,
    TILE_ELEMENT_SIZE, RawTileElement, SurfaceElement, PathElement, TrackElement,
    SmallSceneryElement, EntranceElement, WallElement, LargeSceneryElement,
    BannerElement,
)
from .records import RawTileRecord
from .layout import TILE_ARRAY_SIZE

logger = logging.getLogger(__name__)


TILE_DECODERS: Dict[int, Callable] = {}


def register_tile_decoder(element_type: int):
    """Decorator to register the extraction routine for one element type."""
    def decorator(func):
        TILE_DECODERS[element_type] = func
        return func
    return decorator


def _common(raw: bytes) -> dict:
    return {
        'direction': raw[0] & 0x03,
        'flags': raw[1],
        'base_height': raw[2],
        'clearance_height': raw[3],
    }


@register_tile_decoder(TileElementType.SURFACE)
def decode_surface(raw: bytes) -> SurfaceElement:
    t, b4, b5, b6, b7 = raw[0], raw[4], raw[5], raw[6], raw[7]
    return SurfaceElement(
        **_common(raw),
        slope=b4 & 0x1F,
        surface_style=(b5 >> 5) | ((t & 0x01) << 3),
        edge_style=(b4 >> 5) | (((t >> 7) & 0x01) << 3),
        grass_length=b6,
        ownership=b7 & 0xF0,
        park_fences=b7 & 0x0F,
        water_height=b5 & 0x1F,
        has_track_that_needs_water=bool(t & 0x40),
    )


@register_tile_decoder(TileElementType.PATH)
def decode_path(raw: bytes) -> PathElement:
    t, b4, b5, b6, b7 = raw[0], raw[4], raw[5], raw[6], raw[7]
    return PathElement(
        **_common(raw),
        entry_index=b4 >> 4,
        queue_banner_direction=t >> 6,
        is_sloped=bool(b4 & 0x04),
        slope_direction=b4 & 0x03,
        ride_index=b7,
        station_index=(b5 & 0x70) >> 4,
        is_wide=bool(t & 0x02),
        is_queue=bool(t & 0x01),
        has_queue_banner=bool(b4 & 0x08),
        edges=b6 & 0x0F,
        corners=b6 >> 4,
        addition=b5 & 0x0F,
        addition_is_ghost=bool(b5 & 0x80),
        addition_status=b7,
    )


@register_tile_decoder(TileElementType.TRACK)
def decode_track(raw: bytes) -> TrackElement:
    t, b4, b5, b6, b7 = raw[0], raw[4], raw[5], raw[6], raw[7]
    return TrackElement(
        **_common(raw),
        track_type=b4,
        sequence_index=b5 & 0x0F,
        ride_index=b7,
        colour_scheme=b6 & 0x03,
        station_index=(b5 & 0x70) >> 4,
        has_chain=bool(t & 0x80),
        has_cable_lift=bool(b6 & 0x08),
        is_inverted=bool(b6 & 0x04),
        brake_booster_speed=(b5 >> 4) << 1,
        has_green_light=bool(b5 & 0x80),
        seat_rotation=b6 >> 4,
        maze_entry=b5 | (b6 << 8),
        photo_timeout=b5 >> 4,
    )


@register_tile_decoder(TileElementType.SMALL_SCENERY)
def decode_small_scenery(raw: bytes) -> SmallSceneryElement:
    t, b4, b5, b6, b7 = raw[0], raw[4], raw[5], raw[6], raw[7]
    return SmallSceneryElement(
        **_common(raw),
        entry_index=b4,
        age=b5,
        quadrant=t >> 6,
        primary_colour=b6 & 0x1F,
        secondary_colour=b7 & 0x1F,
        needs_supports=bool(b6 & 0x20),
    )


@register_tile_decoder(TileElementType.ENTRANCE)
def decode_entrance(raw: bytes) -> EntranceElement:
    b4, b5, b6, b7 = raw[4], raw[5], raw[6], raw[7]
    return EntranceElement(
        **_common(raw),
        entrance_type=b4,
        ride_index=b7,
        station_index=(b5 & 0x70) >> 4,
        sequence_index=b5 & 0x0F,
        path_type=b6,
    )


@register_tile_decoder(TileElementType.WALL)
def decode_wall(raw: bytes) -> WallElement:
    t, flags, b4, b5, b6, b7 = raw[0], raw[1], raw[4], raw[5], raw[6], raw[7]
    return WallElement(
        **_common(raw),
        entry_index=b4,
        slope=t >> 6,
        primary_colour=b6 & 0x1F,
        secondary_colour=(b6 >> 5) | ((flags & 0x60) >> 2),
        tertiary_colour=b5 & 0x1F,
        animation_frame=(b7 >> 3) & 0x0F,
        banner_index=b5,
        is_across_track=bool(b7 & 0x04),
        animation_is_backwards=bool(b7 & 0x40),
    )


@register_tile_decoder(TileElementType.LARGE_SCENERY)
def decode_large_scenery(raw: bytes) -> LargeSceneryElement:
    t, b4, b5, b6, b7 = raw[0], raw[4], raw[5], raw[6], raw[7]
    word = b4 | (b5 << 8)
    return LargeSceneryElement(
        **_common(raw),
        entry_index=word & 0x3FF,
        sequence_index=word >> 10,
        primary_colour=b6 & 0x1F,
        secondary_colour=b7 & 0x1F,
        banner_index=(t & 0xC0) | ((b6 & 0xE0) >> 2) | ((b7 & 0xE0) >> 5),
    )


@register_tile_decoder(TileElementType.BANNER)
def decode_banner(raw: bytes) -> BannerElement:
    return BannerElement(
        **_common(raw),
        banner_index=raw[4],
        position=raw[5],
        allowed_edges=raw[6] & 0x0F,
    )


def decode_tile(record):
    """
    Decode one raw record.

    Args:
        record: RawTileRecord or 8 raw bytes

    Returns:
        A TileElement variant, or RawTileElement for records that are copied
        verbatim.

    Raises:
        FormatError: no routine is registered for the record's type tag
    """
    raw = record.raw if isinstance(record, RawTileRecord) else bytes(record)
    if len(raw) != TILE_ELEMENT_SIZE:
        raise FormatError(f"Tile record is {len(raw)} bytes, expected {TILE_ELEMENT_SIZE}")

    if raw[2] == BASE_HEIGHT_SENTINEL:
        return RawTileElement(raw)

    element_type = (raw[0] & 0x3C) >> 2
    if element_type in PASSTHROUGH_TYPES:
        return RawTileElement(raw)
    if element_type in RESERVED_TYPES:
        logger.warning(f"Reserved tile element type {element_type}, copying verbatim")
        return RawTileElement(raw)

    decoder = TILE_DECODERS.get(element_type)
    if decoder is None:
        raise FormatError(f"No decoder registered for tile element type {element_type}")
    return decoder(raw)


def decode_tile_array(data: bytes) -> List:
    """Decode the full tile array chunk, preserving slot order."""
    if len(data) != TILE_ARRAY_SIZE:
        raise FormatError(f"Tile array is {len(data)} bytes, expected {TILE_ARRAY_SIZE}")
    elements = [
        decode_tile(data[i:i + TILE_ELEMENT_SIZE])
        for i in range(0, TILE_ARRAY_SIZE, TILE_ELEMENT_SIZE)
    ]
    logger.debug(f"Decoded {len(elements)} tile records")
    return elements
