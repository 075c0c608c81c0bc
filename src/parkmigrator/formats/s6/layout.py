"""
S6 Park Layouts - header, scenario info, object table and chunk sequences

Structure (both layouts):
  - Header chunk (32 bytes)
  - Scenario info chunk (408 bytes, scenarios only)
  - Packed objects (object entry + chunk, repeated header.num_packed_objects times)
  - Object table chunk (721 x 16 bytes)
  - Date chunk (16 bytes)
  - Tile element chunk (0x30000 x 8 bytes)
  - Game state chunks (one chunk for saved games, eight for scenarios)

Saved games store the game state block as a single chunk. Scenarios store
eight slices of it and leave the remainder (research bitmaps, finance history
and so on) out of the file. The slice sizes and offsets are the literal values
of the format; no formula relates them to the saved-game size.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import PurePath
from typing import List, Optional, Tuple
import logging

from ...errors import FormatError, UnsupportedFormatError
from ...utils.binary import IoBuffer

logger = logging.getLogger(__name__)


HEADER_SIZE = 32
SCENARIO_INFO_SIZE = 408
OBJECT_ENTRY_SIZE = 16
OBJECT_ENTRY_COUNT = 721
OBJECT_TABLE_SIZE = 11536
DATE_BLOCK_SIZE = 16
TILE_ELEMENT_SIZE = 8
MAX_TILE_ELEMENTS = 0x30000
TILE_ARRAY_SIZE = 1572864
GAME_STATE_SIZE = 3048816

CLASSIC_FLAG_UNSUPPORTED = 0x0F
OBJECT_ENTRY_EMPTY = 0xFFFFFFFF


class ParkType(IntEnum):
    """Header type tag."""
    SAVED_GAME = 0
    SCENARIO = 1


@dataclass
class RawHeader:
    """File header (first chunk)."""
    type: int = 0
    classic_flag: int = 0
    num_packed_objects: int = 0
    version: int = 0
    magic_number: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawHeader':
        header = cls(
            type=io.read_uint8(),
            classic_flag=io.read_uint8(),
            num_packed_objects=io.read_uint16(),
            version=io.read_uint32(),
            magic_number=io.read_uint32(),
        )
        io.skip(20)
        return header


@dataclass
class ObjectEntry:
    """Reference to an external object definition."""
    flags: int = OBJECT_ENTRY_EMPTY
    name: str = ""
    checksum: int = 0

    @property
    def is_empty(self) -> bool:
        return self.flags == OBJECT_ENTRY_EMPTY

    @property
    def identifier(self) -> str:
        return self.name.rstrip(' \0')

    @classmethod
    def read(cls, io: IoBuffer) -> 'ObjectEntry':
        return cls(
            flags=io.read_uint32(),
            name=io.read_cstring(8, trim_null=False),
            checksum=io.read_uint32(),
        )

    def __str__(self) -> str:
        return f"{self.identifier} ({self.flags:08X}/{self.checksum:08X})"


@dataclass
class RawScenarioInfo:
    """Scenario description block (scenario files only)."""
    editor_step: int = 0
    category: int = 0
    objective_type: int = 0
    objective_arg_1: int = 0
    objective_arg_2: int = 0
    objective_arg_3: int = 0
    name: bytes = b""
    details: bytes = b""
    entry: ObjectEntry = field(default_factory=ObjectEntry)

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawScenarioInfo':
        info = cls()
        info.editor_step = io.read_uint8()
        info.category = io.read_uint8()
        info.objective_type = io.read_uint8()
        info.objective_arg_1 = io.read_uint8()
        info.objective_arg_2 = io.read_int32()
        info.objective_arg_3 = io.read_int16()
        io.skip(62)
        info.name = io.read_raw_string(64)
        info.details = io.read_raw_string(256)
        info.entry = ObjectEntry.read(io)
        return info


def read_object_table(data: bytes) -> List[ObjectEntry]:
    """Decode the object table chunk."""
    io = IoBuffer.from_bytes(data)
    return [ObjectEntry.read(io) for _ in range(OBJECT_ENTRY_COUNT)]


@dataclass(frozen=True)
class ChunkSlot:
    """One game-state chunk: where it lands in the state block and how big it is."""
    name: str
    offset: int
    size: int


SAVED_GAME_STATE_CHUNKS: Tuple[ChunkSlot, ...] = (
    ChunkSlot("game_state", 0, 3048816),
)

SCENARIO_STATE_CHUNKS: Tuple[ChunkSlot, ...] = (
    ChunkSlot("sprites", 0, 2560076),
    ChunkSlot("guests_in_park", 2561164, 4),
    ChunkSlot("last_guests_in_park", 2562064, 8),
    ChunkSlot("park_rating", 2562296, 2),
    ChunkSlot("active_research_types", 2562362, 1082),
    ChunkSlot("current_expenditure", 2563956, 16),
    ChunkSlot("park_value", 2564484, 4),
    ChunkSlot("completed_company_value", 2565000, 483816),
)


@dataclass(frozen=True)
class ParkLayout:
    """Chunk sequence of one file variant."""
    park_type: ParkType
    name: str
    extension: str
    has_scenario_info: bool
    state_chunks: Tuple[ChunkSlot, ...]


SAVED_GAME_LAYOUT = ParkLayout(ParkType.SAVED_GAME, "saved game", ".sv6", False, SAVED_GAME_STATE_CHUNKS)
SCENARIO_LAYOUT = ParkLayout(ParkType.SCENARIO, "scenario", ".sc6", True, SCENARIO_STATE_CHUNKS)

LAYOUTS = {
    ParkType.SAVED_GAME: SAVED_GAME_LAYOUT,
    ParkType.SCENARIO: SCENARIO_LAYOUT,
}


def layout_for_extension(path) -> ParkLayout:
    """Pick the layout from a file extension (case-insensitive)."""
    extension = PurePath(str(path)).suffix.lower()
    for layout in LAYOUTS.values():
        if layout.extension == extension:
            return layout
    raise FormatError(f"Invalid park extension: '{extension}'")


def select_layout(header: RawHeader, expected: Optional[ParkLayout] = None) -> ParkLayout:
    """
    Pick the layout named by the header type tag.

    Raises:
        UnsupportedFormatError: unknown type tag or classic compressed variant
        FormatError: the header disagrees with the expected layout
    """
    if header.classic_flag == CLASSIC_FLAG_UNSUPPORTED:
        raise UnsupportedFormatError(
            f"Unsupported classic park variant (classic_flag = {header.classic_flag:#04x})",
            classic_flag=header.classic_flag,
        )
    try:
        layout = LAYOUTS[ParkType(header.type)]
    except ValueError:
        raise UnsupportedFormatError(f"Unknown park type tag {header.type}")

    if expected is not None and layout is not expected:
        raise FormatError(f"Park is not a {expected.name}.")
    logger.debug(f"Selected {layout.name} layout (classic_flag = {header.classic_flag:#04x})")
    return layout
