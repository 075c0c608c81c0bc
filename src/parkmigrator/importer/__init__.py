"""Importer - migrates legacy park files into a WorldState."""
from .s6_importer import S6Importer, ImportState, LoadResult, import_park_file
from .loader import load_park_file, LoadOutcome, FILE_CONTAINS_INVALID_DATA, GAME_SAVE_FAILED
from .objects import ObjectRepository, InMemoryObjectRepository
from .quirks import QuirkTable, DEFAULT_QUIRKS
from .field_migrator import FieldMigrator, FieldMapping, GAME_STATE_FIELD_MAP, decrypt_money, drop_undefined_peep_spawns
from .research import import_researched_items, decode_bitmap
from .repair import run_repair_pass, RepairReport

__all__ = [
    'S6Importer', 'ImportState', 'LoadResult', 'import_park_file',
    'load_park_file', 'LoadOutcome', 'FILE_CONTAINS_INVALID_DATA', 'GAME_SAVE_FAILED',
    'ObjectRepository', 'InMemoryObjectRepository',
    'QuirkTable', 'DEFAULT_QUIRKS',
    'FieldMigrator', 'FieldMapping', 'GAME_STATE_FIELD_MAP', 'decrypt_money', 'drop_undefined_peep_spawns',
    'import_researched_items', 'decode_bitmap',
    'run_repair_pass', 'RepairReport',
]
