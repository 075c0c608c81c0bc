"""
Object repository interface.

The importer hands packed object data to the repository and reports the
object table back to the caller; resolving entries to definitions is the
repository's job.
"""

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Tuple
import logging

from ..errors import AssetResolutionError
from ..formats.s6.layout import ObjectEntry

logger = logging.getLogger(__name__)


class ObjectRepository(ABC):

    @abstractmethod
    def export_packed_object(self, entry: ObjectEntry, data: bytes):
        """Store an object definition embedded in the park file."""

    @abstractmethod
    def load_objects(self, entries: Iterable[ObjectEntry]):
        """
        Resolve the given entries.

        Raises:
            AssetResolutionError: one or more entries could not be resolved
        """


class InMemoryObjectRepository(ObjectRepository):
    """Repository backed by a dict keyed on (identifier, checksum)."""

    def __init__(self, known: Iterable[str] = ()):
        self.known = set(known)
        self.packed: Dict[Tuple[str, int], bytes] = {}
        self.loaded: List[ObjectEntry] = []

    def export_packed_object(self, entry: ObjectEntry, data: bytes):
        key = (entry.identifier, entry.checksum)
        if key in self.packed:
            logger.debug(f"Packed object {entry} already exported")
            return
        self.packed[key] = data
        self.known.add(entry.identifier)
        logger.debug(f"Exported packed object {entry} ({len(data)} bytes)")

    def load_objects(self, entries: Iterable[ObjectEntry]):
        wanted = [e for e in entries if not e.is_empty]
        missing = [e for e in wanted if e.identifier not in self.known]
        if missing:
            raise AssetResolutionError(
                f"{len(missing)} required objects not found",
                missing=[str(e) for e in missing],
            )
        self.loaded = wanted
