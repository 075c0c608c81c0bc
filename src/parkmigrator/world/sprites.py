"""
Sprite slots and the linked structures threaded through them.

Sprites are chained two ways: doubly linked per-kind lists (next/previous,
heads kept by the world) and singly linked spatial chains (next_in_quadrant).
Legacy saves sometimes contain cycles in either; the helpers here cut them.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Set
import logging

logger = logging.getLogger(__name__)


SPRITE_INDEX_NULL = 0xFFFF
SPRITE_SIZE = 256


class SpriteIdentifier(IntEnum):
    VEHICLE = 0
    PEEP = 1
    MISC = 2
    LITTER = 3
    NULL = 255


class SpriteList(IntEnum):
    FREE = 0
    TRAIN_HEAD = 1
    PEEP = 2
    MISC = 3
    LITTER = 4
    UNKNOWN = 5


NUM_SPRITE_LISTS = 6


class PeepState(IntEnum):
    FALLING = 0
    ONE = 1
    QUEUING_FRONT = 2
    ON_RIDE = 3
    LEAVING_RIDE = 4
    WALKING = 5
    QUEUING = 6
    ENTERING_RIDE = 7


@dataclass
class Sprite:
    """One entity slot: common header plus the guest fields the importer reads."""
    sprite_identifier: int = SpriteIdentifier.NULL
    type: int = 0
    next_in_quadrant: int = SPRITE_INDEX_NULL
    next: int = SPRITE_INDEX_NULL
    previous: int = SPRITE_INDEX_NULL
    linked_list_index: int = SpriteList.FREE
    sprite_index: int = 0
    flags: int = 0
    x: int = 0
    y: int = 0
    z: int = 0
    peep_state: int = 0
    peep_current_ride: int = 0
    raw: bytes = bytes(SPRITE_SIZE)

    @property
    def is_null(self) -> bool:
        return self.sprite_identifier == SpriteIdentifier.NULL

    @property
    def is_peep(self) -> bool:
        return self.sprite_identifier == SpriteIdentifier.PEEP

    @property
    def is_on_ride(self) -> bool:
        return self.is_peep and self.peep_state in (PeepState.ON_RIDE, PeepState.ENTERING_RIDE)


def _valid(index: int, sprites: List[Sprite]) -> bool:
    return 0 <= index < len(sprites)


def fix_sprite_list_cycles(sprites: List[Sprite], heads: List[int]) -> int:
    """
    Walk each list from its head and cut the link that revisits a sprite or
    points outside the array. Returns the number of links cut.
    """
    fixed = 0
    for list_index, head in enumerate(heads):
        if head == SPRITE_INDEX_NULL:
            continue
        if not _valid(head, sprites):
            logger.error(f"Sprite list {list_index} head {head} out of range, clearing")
            heads[list_index] = SPRITE_INDEX_NULL
            fixed += 1
            continue

        seen: Set[int] = {head}
        current = head
        while True:
            following = sprites[current].next
            if following == SPRITE_INDEX_NULL:
                break
            if not _valid(following, sprites) or following in seen:
                logger.error(f"Sprite list {list_index}: cut link {current} -> {following}")
                sprites[current].next = SPRITE_INDEX_NULL
                fixed += 1
                break
            seen.add(following)
            current = following
    return fixed


def fix_quadrant_cycles(sprites: List[Sprite]) -> int:
    """
    Cut cycles in the next_in_quadrant chains. Each chain is walked once;
    sprites are white (unvisited), grey (on the current walk) or black (done).
    """
    WHITE, GREY, BLACK = 0, 1, 2
    colour = [WHITE] * len(sprites)
    fixed = 0

    for start in range(len(sprites)):
        if colour[start] != WHITE:
            continue
        path = []
        current = start
        while True:
            colour[current] = GREY
            path.append(current)
            following = sprites[current].next_in_quadrant
            if following == SPRITE_INDEX_NULL:
                break
            if not _valid(following, sprites) or colour[following] == GREY:
                sprites[current].next_in_quadrant = SPRITE_INDEX_NULL
                fixed += 1
                break
            if colour[following] == BLACK:
                break
            current = following
        for index in path:
            colour[index] = BLACK

    if fixed:
        logger.error(f"Cut {fixed} cycles in spatial sprite chains")
    return fixed


def fix_disjoint_sprites(sprites: List[Sprite], heads: List[int]) -> int:
    """
    Append null sprites that are not reachable from the free list to its
    tail. Returns the number of sprites relinked.

    The free count is not touched; it already includes the slots beyond the
    legacy capacity.
    """
    free_head = heads[SpriteList.FREE]
    reachable: Set[int] = set()
    tail = SPRITE_INDEX_NULL
    current = free_head
    while current != SPRITE_INDEX_NULL and _valid(current, sprites) and current not in reachable:
        reachable.add(current)
        tail = current
        current = sprites[current].next

    relinked = 0
    for index, sprite in enumerate(sprites):
        if not sprite.is_null or index in reachable:
            continue
        sprite.linked_list_index = SpriteList.FREE
        sprite.previous = tail
        sprite.next = SPRITE_INDEX_NULL
        if tail == SPRITE_INDEX_NULL:
            heads[SpriteList.FREE] = index
        else:
            sprites[tail].next = index
        tail = index
        reachable.add(index)
        relinked += 1

    if relinked:
        logger.error(f"Fixed {relinked} disjoint null sprites")
    return relinked
