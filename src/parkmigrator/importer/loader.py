"""
Caller-level park loading.

load_park_file() never raises for a bad park: every error is logged and
reported through LoadOutcome so front ends can show a message.
"""

from dataclasses import dataclass, field
from typing import List, Optional
import logging

from ..config import ImportConfig
from ..errors import (
    ParkImportError, FormatError, ChecksumError, UnsupportedFormatError,
    TruncatedDataError, AssetResolutionError,
)
from ..world.state import WorldState
from .objects import ObjectRepository
from .repair import RepairReport
from .s6_importer import S6Importer

logger = logging.getLogger(__name__)


FILE_CONTAINS_INVALID_DATA = "FILE_CONTAINS_INVALID_DATA"
GAME_SAVE_FAILED = "GAME_SAVE_FAILED"
UNSUPPORTED_CLASSIC_PARK = "UNSUPPORTED_RCTC_FLAG"
REQUIRED_OBJECTS_MISSING = "REQUIRED_OBJECTS_MISSING"


@dataclass
class LoadOutcome:
    success: bool
    error: Optional[str] = None
    message: str = ""
    error_kind: Optional[str] = None
    missing_objects: List[str] = field(default_factory=list)
    report: Optional[RepairReport] = None


def _error_id(error: Exception) -> str:
    if isinstance(error, UnsupportedFormatError):
        return UNSUPPORTED_CLASSIC_PARK
    if isinstance(error, AssetResolutionError):
        return REQUIRED_OBJECTS_MISSING
    if isinstance(error, (FormatError, ChecksumError, TruncatedDataError)):
        return FILE_CONTAINS_INVALID_DATA
    return GAME_SAVE_FAILED


def load_park_file(path, world: WorldState, repository: ObjectRepository,
                   config: Optional[ImportConfig] = None) -> LoadOutcome:
    """Load and import a park, reporting failure instead of raising."""
    importer = S6Importer(repository, config)
    try:
        importer.load(path)
        report = importer.import_park(world)
    except (ParkImportError, OSError, ValueError) as e:
        error_id = _error_id(e)
        logger.error(f"Failed to load '{path}': {error_id}: {e}")
        missing = e.missing if isinstance(e, AssetResolutionError) else []
        return LoadOutcome(False, error_id, str(e), type(e).__name__, missing)

    logger.info(f"Loaded '{path}'")
    return LoadOutcome(True, report=report)
