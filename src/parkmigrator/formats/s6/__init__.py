"""S6 park format - header, layouts, raw records and the tile decoder."""
from .layout import (
    RawHeader, RawScenarioInfo, ObjectEntry, ParkType, ParkLayout, ChunkSlot,
    SAVED_GAME_LAYOUT, SCENARIO_LAYOUT, SAVED_GAME_STATE_CHUNKS, SCENARIO_STATE_CHUNKS,
    GAME_STATE_SIZE, TILE_ARRAY_SIZE, OBJECT_TABLE_SIZE, DATE_BLOCK_SIZE, MAX_TILE_ELEMENTS,
    read_object_table, layout_for_extension, select_layout,
)
from .records import (
    RawTileRecord, RawRideRecord, RawPeepSpawnRecord, RawNewsItemRecord, RawResearchBitmap,
    RawAward, RawBanner, RawResearchItem, RawMapAnimation, RawSprite,
)
from .game_state import RawGameState, RawDate
from .tile_decoder import decode_tile, decode_tile_array, register_tile_decoder, TILE_DECODERS

__all__ = [
    'RawHeader', 'RawScenarioInfo', 'ObjectEntry', 'ParkType', 'ParkLayout', 'ChunkSlot',
    'SAVED_GAME_LAYOUT', 'SCENARIO_LAYOUT', 'SAVED_GAME_STATE_CHUNKS', 'SCENARIO_STATE_CHUNKS',
    'GAME_STATE_SIZE', 'TILE_ARRAY_SIZE', 'OBJECT_TABLE_SIZE', 'DATE_BLOCK_SIZE', 'MAX_TILE_ELEMENTS',
    'read_object_table', 'layout_for_extension', 'select_layout',
    'RawTileRecord', 'RawRideRecord', 'RawPeepSpawnRecord', 'RawNewsItemRecord', 'RawResearchBitmap',
    'RawAward', 'RawBanner', 'RawResearchItem', 'RawMapAnimation', 'RawSprite',
    'RawGameState', 'RawDate',
    'decode_tile', 'decode_tile_array', 'register_tile_decoder', 'TILE_DECODERS',
]
