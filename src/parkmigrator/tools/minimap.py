"""
Minimap export - renders an imported map to PNG for quick inspection.

One pixel per tile (scaled up on export). Colour shows what the tile's
surface says: owned land, land for sale, water, or plain terrain shaded by
height.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional
import logging

import numpy as np
from PIL import Image

from ..world.state import WorldState, MAXIMUM_MAP_SIZE_TECHNICAL
from ..world.tile_elements import OwnershipType, SurfaceElement

logger = logging.getLogger(__name__)


COLOUR_VOID = (0, 0, 0)
COLOUR_OWNED = (64, 160, 64)
COLOUR_CONSTRUCTION_OWNED = (112, 176, 96)
COLOUR_FOR_SALE = (200, 180, 80)
COLOUR_WATER = (48, 96, 200)
COLOUR_UNOWNED = (96, 96, 96)


@dataclass
class MinimapResult:
    success: bool
    message: str
    data: Dict[str, Any] = field(default_factory=dict)
    output_path: Optional[str] = None


def surface_colour(surface: SurfaceElement):
    if surface.water_height > 0 and surface.water_height * 2 > surface.base_height:
        return COLOUR_WATER
    if surface.ownership & OwnershipType.OWNED:
        base = COLOUR_OWNED
    elif surface.ownership & OwnershipType.CONSTRUCTION_RIGHTS_OWNED:
        base = COLOUR_CONSTRUCTION_OWNED
    elif surface.ownership & (OwnershipType.AVAILABLE | OwnershipType.CONSTRUCTION_RIGHTS_AVAILABLE):
        base = COLOUR_FOR_SALE
    else:
        base = COLOUR_UNOWNED
    # Brighten with height, base heights run 0-254
    shade = 0.6 + 0.4 * min(surface.base_height, 128) / 128
    return tuple(min(255, int(c * shade)) for c in base)


def render_minimap(world: WorldState) -> np.ndarray:
    """Return an (N, N, 3) uint8 array, row = y, column = x."""
    size = min(max(world.map_size, 1), MAXIMUM_MAP_SIZE_TECHNICAL)
    pixels = np.zeros((size, size, 3), dtype=np.uint8)
    pixels[:, :] = COLOUR_VOID
    for y in range(size):
        for x in range(size):
            surface = world.get_surface_element(x, y)
            if surface is not None:
                pixels[y, x] = surface_colour(surface)
    return pixels


def ownership_counts(world: WorldState) -> Dict[str, int]:
    """Count surfaces by ownership class."""
    size = min(world.map_size, MAXIMUM_MAP_SIZE_TECHNICAL)
    values = np.array([
        surface.ownership
        for y in range(size) for x in range(size)
        for surface in [world.get_surface_element(x, y)] if surface is not None
    ], dtype=np.uint8)
    return {
        'owned': int(np.count_nonzero(values & OwnershipType.OWNED)),
        'construction_rights_owned': int(np.count_nonzero(values & OwnershipType.CONSTRUCTION_RIGHTS_OWNED)),
        'for_sale': int(np.count_nonzero(values & OwnershipType.AVAILABLE)),
        'construction_rights_for_sale': int(np.count_nonzero(values & OwnershipType.CONSTRUCTION_RIGHTS_AVAILABLE)),
        'surfaces': int(values.size),
    }


def export_minimap(world: WorldState, output_path, scale: int = 2) -> MinimapResult:
    """Render world to a PNG file."""
    if scale < 1:
        return MinimapResult(False, f"Invalid scale {scale}")

    pixels = render_minimap(world)
    if scale > 1:
        pixels = np.repeat(np.repeat(pixels, scale, axis=0), scale, axis=1)

    image = Image.fromarray(pixels)
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)
    image.save(output, 'PNG')
    logger.info(f"Wrote minimap {image.width}x{image.height} to {output}")

    return MinimapResult(
        True,
        f"Exported minimap to {output.name}",
        data={'size': (image.width, image.height), 'scale': scale, **ownership_counts(world)},
        output_path=str(output),
    )
