"""Research bitmap decoding: 32 invented flags per stored word."""

from typing import List
import logging

from ..formats.s6.records import RawResearchBitmap
from ..world.state import (
    ResearchInventedSet, RIDE_TYPE_COUNT, MAX_RIDE_OBJECTS, MAX_SCENERY_ITEMS,
)

logger = logging.getLogger(__name__)


def is_bit_set(words: List[int], index: int) -> bool:
    return bool(words[index >> 5] & (1 << (index & 31)))


def decode_bitmap(words: List[int], count: int) -> List[bool]:
    """Expand count flags from the word array."""
    if count > len(words) * 32:
        raise ValueError(f"Bitmap of {len(words)} words cannot hold {count} flags")
    return [is_bit_set(words, i) for i in range(count)]


def import_researched_items(bitmap: RawResearchBitmap, invented: ResearchInventedSet):
    """Mark everything not invented, then set the flags present in the bitmap."""
    invented.reset()
    invented.ride_types = decode_bitmap(bitmap.ride_types, RIDE_TYPE_COUNT)
    invented.ride_entries = decode_bitmap(bitmap.ride_entries, MAX_RIDE_OBJECTS)
    invented.scenery_items = decode_bitmap(bitmap.scenery_items, MAX_SCENERY_ITEMS)

    ride_types, ride_entries, scenery = invented.count()
    logger.debug(f"Invented: {ride_types} ride types, {ride_entries} ride entries, {scenery} scenery items")
