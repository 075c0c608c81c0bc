"""
parkmigrator - load legacy .sc6 / .sv6 parks into an in-memory world model.
"""
from .config import ImportConfig
from .errors import (
    ParkImportError, FormatError, ChecksumError, UnsupportedFormatError,
    TruncatedDataError, AssetResolutionError,
)
from .importer import S6Importer, ImportState, LoadResult, load_park_file, LoadOutcome
from .importer import ObjectRepository, InMemoryObjectRepository
from .world import WorldState

__version__ = "1.0.0"

__all__ = [
    'ImportConfig',
    'ParkImportError', 'FormatError', 'ChecksumError', 'UnsupportedFormatError',
    'TruncatedDataError', 'AssetResolutionError',
    'S6Importer', 'ImportState', 'LoadResult', 'load_park_file', 'LoadOutcome',
    'ObjectRepository', 'InMemoryObjectRepository',
    'WorldState',
]
