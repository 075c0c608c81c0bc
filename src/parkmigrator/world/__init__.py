"""World model - destination entities populated by the importer."""
from .tile_elements import (
    TileElementType, TileElementFlag, OwnershipType, EntranceType, TileElement,
    SurfaceElement, PathElement, TrackElement, SmallSceneryElement, EntranceElement,
    WallElement, LargeSceneryElement, BannerElement, RawTileElement, is_decoded,
)
from .rides import Ride, RideStation, VehicleColour, TrackColour, RIDE_TYPE_NULL
from .sprites import Sprite, SpriteIdentifier, SpriteList, PeepState, SPRITE_INDEX_NULL
from .state import (
    WorldState, PeepSpawn, ParkEntrance, Award, Banner, ResearchItem, MapAnimation,
    NewsItem, ResearchInventedSet, ParkState, FinanceState, ResearchState,
    ClimateState, WeatherState, ScenarioInfo, SavedView,
)

__all__ = [
    'TileElementType', 'TileElementFlag', 'OwnershipType', 'EntranceType', 'TileElement',
    'SurfaceElement', 'PathElement', 'TrackElement', 'SmallSceneryElement', 'EntranceElement',
    'WallElement', 'LargeSceneryElement', 'BannerElement', 'RawTileElement', 'is_decoded',
    'Ride', 'RideStation', 'VehicleColour', 'TrackColour', 'RIDE_TYPE_NULL',
    'Sprite', 'SpriteIdentifier', 'SpriteList', 'PeepState', 'SPRITE_INDEX_NULL',
    'WorldState', 'PeepSpawn', 'ParkEntrance', 'Award', 'Banner', 'ResearchItem', 'MapAnimation',
    'NewsItem', 'ResearchInventedSet', 'ParkState', 'FinanceState', 'ResearchState',
    'ClimateState', 'WeatherState', 'ScenarioInfo', 'SavedView',
]
