"""
S6 Importer - loads .sc6 scenarios and .sv6 saved games into a WorldState

Import is two-phase:
  1. load(path) reads the header, scenario info, packed objects and object
     table, and reports the objects the park needs.
  2. import_park(world) reads the remaining chunks, migrates them into the
     world, applies per-file fixups and runs the repair pass.

Progress is tracked as a forward-only ImportState. Any error moves the
importer to FAILED and is re-raised; the world must then be treated as
invalid.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union, BinaryIO
import logging

from ..config import ImportConfig
from ..errors import ParkImportError
from ..formats.sawyer.chunk_reader import ChunkReader
from ..formats.sawyer.checksum import verify_checksum
from ..formats.s6.layout import (
    RawHeader, RawScenarioInfo, ObjectEntry, ParkLayout, SAVED_GAME_LAYOUT, SCENARIO_LAYOUT,
    HEADER_SIZE, SCENARIO_INFO_SIZE, OBJECT_TABLE_SIZE, DATE_BLOCK_SIZE, TILE_ARRAY_SIZE,
    GAME_STATE_SIZE, read_object_table, layout_for_extension, select_layout,
)
from ..formats.s6.game_state import RawGameState, RawDate
from ..formats.s6.tile_decoder import decode_tile_array
from ..utils.binary import IoBuffer
from ..world.state import WorldState
from .field_migrator import FieldMigrator, drop_undefined_peep_spawns
from .objects import ObjectRepository
from .quirks import QuirkTable, DEFAULT_QUIRKS
from .repair import RepairReport, run_repair_pass
from .research import import_researched_items

logger = logging.getLogger(__name__)


class ImportState(Enum):
    IDLE = 0
    HEADER_READ = 1
    CHUNKS_LOADED = 2
    MIGRATED = 3
    REPAIRED = 4
    DONE = 5
    FAILED = 6


@dataclass
class LoadResult:
    """Outcome of the load phase."""
    layout: ParkLayout
    header: RawHeader
    required_objects: List[ObjectEntry] = field(default_factory=list)
    scenario_info: Optional[RawScenarioInfo] = None

    @property
    def required_identifiers(self) -> List[str]:
        return [entry.identifier for entry in self.required_objects if not entry.is_empty]


class S6Importer:
    """
    Importer for one park file.

    Usage:
        importer = S6Importer(repository, ImportConfig())
        result = importer.load("park.sv6")
        report = importer.import_park(world)
    """

    def __init__(self, object_repository: ObjectRepository,
                 config: Optional[ImportConfig] = None,
                 quirk_table: QuirkTable = DEFAULT_QUIRKS):
        self.object_repository = object_repository
        self.config = config or ImportConfig()
        self.quirk_table = quirk_table

        self.state = ImportState.IDLE
        self.error_kind: Optional[str] = None
        self.path = ""
        self.layout: Optional[ParkLayout] = None
        self.header: Optional[RawHeader] = None
        self.scenario_info: Optional[RawScenarioInfo] = None
        self.objects: List[ObjectEntry] = []
        self.game_state: Optional[RawGameState] = None
        self._reader: Optional[ChunkReader] = None

    # -- state -------------------------------------------------------------

    def _advance(self, new_state: ImportState):
        if new_state.value <= self.state.value:
            raise ValueError(f"Cannot move importer from {self.state.name} to {new_state.name}")
        logger.debug(f"Import state {self.state.name} -> {new_state.name}")
        self.state = new_state

    def _fail(self, error: Exception):
        self.state = ImportState.FAILED
        self.error_kind = type(error).__name__
        logger.error(f"Import of '{self.path}' failed: {self.error_kind}: {error}")

    # -- load phase --------------------------------------------------------

    def load(self, path) -> LoadResult:
        """Load a park file, picking the layout from its extension."""
        self.path = str(path)
        try:
            layout = layout_for_extension(path)
            io = IoBuffer.from_file(str(path))
        except (ParkImportError, OSError) as e:
            self._fail(e)
            raise
        return self._load(io, layout)

    def load_saved_game(self, path) -> LoadResult:
        self.path = str(path)
        return self._load(IoBuffer.from_file(str(path)), SAVED_GAME_LAYOUT)

    def load_scenario(self, path) -> LoadResult:
        self.path = str(path)
        return self._load(IoBuffer.from_file(str(path)), SCENARIO_LAYOUT)

    def load_from_stream(self, stream: Union[bytes, bytearray, BinaryIO],
                         is_scenario: Optional[bool] = None, path: str = "") -> LoadResult:
        """
        Load from bytes or a binary stream.

        Args:
            is_scenario: expected layout; None accepts whatever the header says
            path: file name used for the scenario file name field
        """
        self.path = path
        data = bytes(stream) if isinstance(stream, (bytes, bytearray)) else stream.read()
        expected = None if is_scenario is None else (SCENARIO_LAYOUT if is_scenario else SAVED_GAME_LAYOUT)
        return self._load(IoBuffer.from_bytes(data), expected)

    def _load(self, io: IoBuffer, expected: Optional[ParkLayout]) -> LoadResult:
        if self.state != ImportState.IDLE:
            raise ValueError(f"Importer already used (state {self.state.name})")
        try:
            reader = ChunkReader(io)
            header = RawHeader.read(IoBuffer.from_bytes(reader.read_chunk_exact(HEADER_SIZE)))
            layout = select_layout(header, expected)
            # Only scenarios are held to their trailer; saved games load regardless
            if layout.has_scenario_info and not self.config.allow_loading_with_incorrect_checksum:
                verify_checksum(io)
            self.header, self.layout, self._reader = header, layout, reader
            self._advance(ImportState.HEADER_READ)

            if layout.has_scenario_info:
                info_data = reader.read_chunk_exact(SCENARIO_INFO_SIZE)
                self.scenario_info = RawScenarioInfo.read(IoBuffer.from_bytes(info_data))

            for _ in range(header.num_packed_objects):
                entry = ObjectEntry.read(io)
                self.object_repository.export_packed_object(entry, reader.read_chunk())

            self.objects = read_object_table(reader.read_chunk_exact(OBJECT_TABLE_SIZE))
            result = LoadResult(layout, header, list(self.objects), self.scenario_info)

            if not self.config.skip_object_check:
                self.object_repository.load_objects(result.required_objects)
        except Exception as e:
            self._fail(e)
            raise

        logger.info(f"Loaded {layout.name} '{self.path}': {header.num_packed_objects} packed objects, "
                    f"{len(result.required_identifiers)} required objects")
        return result

    # -- import phase ------------------------------------------------------

    def import_park(self, world: WorldState) -> RepairReport:
        """Read the remaining chunks and migrate them into world."""
        if self.state != ImportState.HEADER_READ:
            raise ValueError(f"import_park() needs a loaded park (state {self.state.name})")
        try:
            reader = self._reader
            date = RawDate.from_bytes(reader.read_chunk_exact(DATE_BLOCK_SIZE))
            tiles = reader.read_chunk_exact(TILE_ARRAY_SIZE)
            block = bytearray(GAME_STATE_SIZE)
            for slot in self.layout.state_chunks:
                reader.read_chunk_into(block, slot.size, slot.offset)
                logger.debug(f"Chunk '{slot.name}': {slot.size} bytes at {slot.offset}")
            self._advance(ImportState.CHUNKS_LOADED)

            raw = RawGameState.from_bytes(block)
            self.game_state = raw
            world.init_all(raw.map_size)
            FieldMigrator(world).migrate(raw, date, self.scenario_info, self.layout, self.path)
            world.set_tile_elements(decode_tile_array(tiles))
            import_researched_items(raw.research_bitmap, world.research.invented)
            self.quirk_table.apply(world.scenario.embedded_filename, world)
            drop_undefined_peep_spawns(world)
            self._advance(ImportState.MIGRATED)
        except Exception as e:
            self._fail(e)
            raise

        report = run_repair_pass(world)
        self._advance(ImportState.REPAIRED)
        self._advance(ImportState.DONE)
        return report

    def get_details(self):
        """Scenario index details are not provided for this format."""
        return None


def import_park_file(path, world: WorldState, object_repository: ObjectRepository,
                     config: Optional[ImportConfig] = None) -> RepairReport:
    """Load and import in one call; errors propagate."""
    importer = S6Importer(object_repository, config)
    importer.load(Path(path))
    return importer.import_park(world)
