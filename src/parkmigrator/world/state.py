"""
World State - destination container for an imported park

A WorldState is owned by the caller and passed explicitly to the importer.
init_all(map_size) resets it to an empty park; the importer then overwrites
every group in place.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple, Union
import logging

from .tile_elements import SurfaceElement, OwnershipType, is_decoded
from .rides import Ride, MAX_RIDES
from .sprites import Sprite, SPRITE_INDEX_NULL, NUM_SPRITE_LISTS

logger = logging.getLogger(__name__)


MAXIMUM_MAP_SIZE_TECHNICAL = 256
MAX_TILE_ELEMENTS = 0x30000
DEFAULT_MAX_SPRITES = 10000
DEFAULT_MAP_SIZE = 150
MAX_RIDE_OBJECTS = 128
RIDE_TYPE_COUNT = 91
MAX_SCENERY_ITEMS = 1792
MAX_NEWS_ITEMS = 61
NEWS_ITEM_NULL = 0
NEWS_TYPE_COUNT = 10


@dataclass
class PeepSpawn:
    x: int = 0
    y: int = 0
    z: int = 0
    direction: int = 0


@dataclass
class ParkEntrance:
    x: int = 0
    y: int = 0
    z: int = 0
    direction: int = 0


@dataclass
class Award:
    time: int = 0
    type: int = 0


@dataclass
class Banner:
    type: int = 0
    flags: int = 0
    string_idx: int = 0
    colour: int = 0
    text_colour: int = 0
    x: int = 0
    y: int = 0


@dataclass
class ResearchItem:
    raw_value: int = 0
    category: int = 0


@dataclass
class MapAnimation:
    base_z: int = 0
    type: int = 0
    x: int = 0
    y: int = 0


@dataclass
class NewsItem:
    type: int = NEWS_ITEM_NULL
    flags: int = 0
    assoc: int = 0
    ticks: int = 0
    month_year: int = 0
    day: int = 0
    text: Union[str, bytes] = ""

    @property
    def is_null(self) -> bool:
        return self.type == NEWS_ITEM_NULL


@dataclass
class ResearchInventedSet:
    """Per-item invented flags."""
    ride_types: List[bool] = field(default_factory=lambda: [False] * RIDE_TYPE_COUNT)
    ride_entries: List[bool] = field(default_factory=lambda: [False] * MAX_RIDE_OBJECTS)
    scenery_items: List[bool] = field(default_factory=lambda: [False] * MAX_SCENERY_ITEMS)

    def reset(self):
        self.ride_types = [False] * RIDE_TYPE_COUNT
        self.ride_entries = [False] * MAX_RIDE_OBJECTS
        self.scenery_items = [False] * MAX_SCENERY_ITEMS

    def count(self) -> Tuple[int, int, int]:
        return (sum(self.ride_types), sum(self.ride_entries), sum(self.scenery_items))


@dataclass
class ParkState:
    name: int = 0
    name_args: int = 0
    flags: int = 0
    entrance_fee: int = 0
    rating: int = 0
    rating_history: List[int] = field(default_factory=list)
    rating_casualty_penalty: int = 0
    rating_warning_days: int = 0
    guests_in_park: int = 0
    guests_heading_for_park: int = 0
    last_guests_in_park: int = 0
    guests_in_park_history: List[int] = field(default_factory=list)
    guest_change_modifier: int = 0
    guest_generation_probability: int = 0
    guest_initial_cash: int = 0
    guest_initial_happiness: int = 0
    guest_initial_hunger: int = 0
    guest_initial_thirst: int = 0
    suggested_max_guests: int = 0
    size: int = 0
    value: int = 0
    value_history: List[int] = field(default_factory=list)
    company_value: int = 0
    total_admissions: int = 0
    income_from_admissions: int = 0
    total_ride_value_for_money: int = 0
    land_price: int = 0
    construction_rights_price: int = 0
    land_rights_for_sale: int = 0
    construction_rights_for_sale: int = 0
    same_price_throughout: int = 0
    last_entrance_style: int = 0
    handyman_colour: int = 0
    mechanic_colour: int = 0
    security_colour: int = 0
    staff_modes: List[int] = field(default_factory=list)
    patrol_areas: List[int] = field(default_factory=list)
    campaign_weeks_left: List[int] = field(default_factory=list)
    campaign_ride_index: List[int] = field(default_factory=list)
    peep_warning_throttle: List[int] = field(default_factory=list)
    awards: List[Award] = field(default_factory=list)
    entrances: List[ParkEntrance] = field(default_factory=list)
    peep_spawns: List[PeepSpawn] = field(default_factory=list)
    next_guest_index: int = 0


@dataclass
class FinanceState:
    cash: int = 0
    initial_cash: int = 0
    loan: int = 0
    max_loan: int = 0
    interest_rate: int = 0
    expenditure_table: List[List[int]] = field(default_factory=list)
    current_expenditure: int = 0
    current_profit: int = 0
    weekly_profit_average_dividend: int = 0
    weekly_profit_average_divisor: int = 0
    weekly_profit_history: List[int] = field(default_factory=list)
    balance_history: List[int] = field(default_factory=list)
    historical_profit: int = 0


@dataclass
class ResearchState:
    invented: ResearchInventedSet = field(default_factory=ResearchInventedSet)
    items: List[ResearchItem] = field(default_factory=list)
    funding_level: int = 0
    priorities: int = 0
    progress_stage: int = 0
    progress: int = 0
    last_item_subject: int = 0
    next_item: int = 0
    next_category: int = 0
    expected_day: int = 0
    expected_month: int = 0


@dataclass
class WeatherState:
    weather: int = 0
    temperature: int = 0
    weather_effect: int = 0
    weather_gloom: int = 0
    rain_level: int = 0


@dataclass
class ClimateState:
    climate: int = 0
    update_timer: int = 0
    current: WeatherState = field(default_factory=WeatherState)
    next: WeatherState = field(default_factory=WeatherState)


@dataclass
class ScenarioInfo:
    """
    Scenario strings and objective.

    info_name and info_details come from the scenario info block; name,
    details and completed_by from the game state, held as legacy bytes until
    the repair pass converts them.
    """
    info_name: str = ""
    info_details: str = ""
    name: Union[str, bytes] = ""
    details: Union[str, bytes] = ""
    filename: str = ""
    embedded_filename: str = ""
    editor_step: int = 0
    category: int = 0
    objective_type: int = 0
    objective_year: int = 0
    objective_currency: int = 0
    objective_guests: int = 0
    completed_company_value: int = 0
    completed_company_value_record: int = 0
    completed_by: Union[str, bytes] = ""
    elapsed_months: int = 0
    current_day: int = 0
    ticks: int = 0
    srand: Tuple[int, int] = (0, 0)
    game_ticks: int = 0
    expansion_packs: bytes = b""


@dataclass
class SavedView:
    age: int = 0
    x: int = 0
    y: int = 0
    zoom: int = 0
    rotation: int = 0


class WorldState:
    """
    In-memory park: map, rides, sprites and the park-wide groups.

    Tile pointers index tile_elements by (y * 256 + x) and are rebuilt by
    update_tile_pointers() after the tile array is replaced.
    """

    def __init__(self, max_sprites: int = DEFAULT_MAX_SPRITES):
        self.max_sprites = max_sprites
        self.init_all(DEFAULT_MAP_SIZE)

    def init_all(self, map_size: int):
        """Reset every group to an empty park of the given size."""
        self.map_size = map_size
        self.map_size_units = (map_size - 1) * 32
        self.map_size_minus_2 = (map_size * 32) - 2
        self.map_max_xy = self.map_size_units - 1
        self.tile_elements: List = []
        self.tile_pointers: List[Optional[int]] = []
        self.next_free_tile_element_index = 0

        self.park = ParkState()
        self.finance = FinanceState()
        self.research = ResearchState()
        self.climate = ClimateState()
        self.scenario = ScenarioInfo()
        self.saved_view = SavedView()

        self.rides: List[Optional[Ride]] = [None] * MAX_RIDES
        self.sprites: List[Sprite] = [Sprite() for _ in range(self.max_sprites)]
        self.sprite_lists_head: List[int] = [SPRITE_INDEX_NULL] * NUM_SPRITE_LISTS
        self.sprite_lists_count: List[int] = [0] * NUM_SPRITE_LISTS

        self.banners: List[Banner] = []
        self.user_strings: List = []
        self.map_animations: List[MapAnimation] = []
        self.num_map_animations = 0
        self.news_items: List[NewsItem] = [NewsItem() for _ in range(MAX_NEWS_ITEMS)]
        self.ride_ratings_calc_data = b""
        self.ride_measurements: List[bytes] = []
        self.grass_and_scenery_tilepos = 0
        self.wide_path_tile_loop = (0, 0)
        self.map_base_z = 0
        self.game_version = 0
        logger.debug(f"World reset: map size {map_size}, {self.max_sprites} sprite slots")

    # -- rides -------------------------------------------------------------

    def get_ride(self, index: int) -> Optional[Ride]:
        if 0 <= index < len(self.rides):
            return self.rides[index]
        return None

    def iter_rides(self):
        for ride in self.rides:
            if ride is not None:
                yield ride

    # -- map ---------------------------------------------------------------

    def set_tile_elements(self, elements: List):
        if len(elements) > MAX_TILE_ELEMENTS:
            raise ValueError(f"Tile element array holds {MAX_TILE_ELEMENTS} elements, got {len(elements)}")
        self.tile_elements = list(elements)
        self.tile_pointers = []

    def update_tile_pointers(self) -> int:
        """
        Point every map tile at its first element, walking the array in row
        order and advancing past each element flagged last-for-tile.

        Returns the number of tiles assigned. Tiles past the end of the array
        keep a None pointer.
        """
        total = MAXIMUM_MAP_SIZE_TECHNICAL * MAXIMUM_MAP_SIZE_TECHNICAL
        pointers: List[Optional[int]] = [None] * total
        index = 0
        count = len(self.tile_elements)
        for tile in range(total):
            if index >= count:
                logger.warning(f"Tile array exhausted after {tile} of {total} tiles")
                break
            pointers[tile] = index
            while index < count and not self.tile_elements[index].is_last_for_tile:
                index += 1
            index += 1
        self.tile_pointers = pointers
        self.next_free_tile_element_index = min(index, count)
        return sum(1 for p in pointers if p is not None)

    def get_tile_elements_at(self, x: int, y: int) -> List:
        """All elements of tile (x, y) in stored order."""
        if not (0 <= x < MAXIMUM_MAP_SIZE_TECHNICAL and 0 <= y < MAXIMUM_MAP_SIZE_TECHNICAL):
            return []
        if not self.tile_pointers:
            self.update_tile_pointers()
        index = self.tile_pointers[y * MAXIMUM_MAP_SIZE_TECHNICAL + x]
        if index is None:
            return []
        return self._elements_from(index)

    def _elements_from(self, index: int) -> List:
        elements = []
        while index < len(self.tile_elements):
            element = self.tile_elements[index]
            elements.append(element)
            if element.is_last_for_tile:
                break
            index += 1
        return elements

    def iter_tiles(self):
        """Yield (x, y, elements) for every tile with a pointer."""
        if not self.tile_pointers:
            self.update_tile_pointers()
        for tile, index in enumerate(self.tile_pointers):
            if index is None:
                continue
            y, x = divmod(tile, MAXIMUM_MAP_SIZE_TECHNICAL)
            yield x, y, self._elements_from(index)

    def get_surface_element(self, x: int, y: int) -> Optional[SurfaceElement]:
        for element in self.get_tile_elements_at(x, y):
            if isinstance(element, SurfaceElement):
                return element
        return None

    def iter_decoded_elements(self):
        for element in self.tile_elements:
            if is_decoded(element):
                yield element

    def set_ownership(self, tiles, ownership: int = OwnershipType.OWNED) -> int:
        """Set surface ownership on a list of (x, y) tiles. Returns tiles changed."""
        changed = 0
        for x, y in tiles:
            surface = self.get_surface_element(x, y)
            if surface is None:
                logger.warning(f"No surface element at ({x}, {y})")
                continue
            surface.ownership = ownership
            changed += 1
        return changed
