"""
S6 Game State Block - the 3 048 816 byte record following the tile array

The block is read front to back with one cursor. Offsets noted in comments
are relative to the start of the block; the reader checks that it consumed
exactly GAME_STATE_SIZE bytes.
"""

from dataclasses import dataclass, field
from typing import List
import logging

from ...errors import FormatError
from ...utils.binary import IoBuffer
from .layout import GAME_STATE_SIZE, DATE_BLOCK_SIZE
from .records import (
    RawSprite, RawPeepSpawnRecord, RawAward, RawBanner, RawResearchItem,
    RawMapAnimation, RawNewsItemRecord, RawRideRecord, RawResearchBitmap,
)

logger = logging.getLogger(__name__)


RCT2_MAX_SPRITES = 10000
NUM_SPRITE_LISTS = 6
MAX_PEEP_SPAWNS = 2
EXPENDITURE_TABLE_MONTH_COUNT = 16
EXPENDITURE_TYPE_COUNT = 14
HISTORY_SIZE = 32
FINANCE_HISTORY_SIZE = 128
MAX_CAMPAIGNS = 20
MAX_CAMPAIGN_RIDES = 22
MAX_AWARDS = 4
MAX_RESEARCH_ITEMS = 500
MAX_PARK_ENTRANCES = 4
MAX_BANNERS = 250
MAX_USER_STRINGS = 1024
USER_STRING_SIZE = 32
MAX_RIDES = 255
MAX_ANIMATED_OBJECTS = 2000
RIDE_RATINGS_CALC_DATA_SIZE = 76
RIDE_MEASUREMENT_SIZE = 19212
MAX_RIDE_MEASUREMENTS = 8
PATROL_AREA_WORDS = 26112
STAFF_MODE_COUNT = 204
NEWS_ITEM_COUNT = 61
PEEP_PREFERENCE_WARNING_COUNT = 16


@dataclass
class RawDate:
    """Date block chunk."""
    elapsed_months: int = 0
    current_day: int = 0
    scenario_ticks: int = 0
    scenario_srand_0: int = 0
    scenario_srand_1: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawDate':
        date = cls(
            elapsed_months=io.read_uint16(),
            current_day=io.read_uint16(),
            scenario_ticks=io.read_uint32(),
            scenario_srand_0=io.read_uint32(),
            scenario_srand_1=io.read_uint32(),
        )
        return date

    @classmethod
    def from_bytes(cls, data: bytes) -> 'RawDate':
        if len(data) != DATE_BLOCK_SIZE:
            raise FormatError(f"Date block is {len(data)} bytes, expected {DATE_BLOCK_SIZE}")
        return cls.read(IoBuffer.from_bytes(data))


@dataclass
class RawGameState:
    """Everything after the tile array, in file order."""
    next_free_tile_element_pointer_index: int = 0
    sprites: List[RawSprite] = field(default_factory=list)
    sprite_lists_head: List[int] = field(default_factory=list)
    sprite_lists_count: List[int] = field(default_factory=list)

    # Park
    park_name: int = 0
    park_name_args: int = 0
    initial_cash: int = 0
    current_loan: int = 0
    park_flags: int = 0
    park_entrance_fee: int = 0
    rct1_park_entrance_x: int = 0
    rct1_park_entrance_y: int = 0
    rct1_park_entrance_z: int = 0
    peep_spawns: List[RawPeepSpawnRecord] = field(default_factory=list)
    guest_count_change_modifier: int = 0
    current_research_level: int = 0

    # Research bitmaps
    researched_ride_types: List[int] = field(default_factory=list)
    researched_ride_entries: List[int] = field(default_factory=list)
    researched_track_types_a: List[int] = field(default_factory=list)
    researched_track_types_b: List[int] = field(default_factory=list)
    researched_scenery_items: List[int] = field(default_factory=list)

    guests_in_park: int = 0
    guests_heading_for_park: int = 0
    expenditure_table: List[List[int]] = field(default_factory=list)
    last_guests_in_park: int = 0
    handyman_colour: int = 0
    mechanic_colour: int = 0
    security_colour: int = 0

    park_rating: int = 0
    park_rating_history: List[int] = field(default_factory=list)
    guests_in_park_history: List[int] = field(default_factory=list)

    active_research_types: int = 0
    research_progress_stage: int = 0
    last_researched_item_subject: int = 0
    next_research_item: int = 0
    research_progress: int = 0
    next_research_category: int = 0
    next_research_expected_day: int = 0
    next_research_expected_month: int = 0
    guest_initial_happiness: int = 0
    park_size: int = 0
    guest_generation_probability: int = 0
    total_ride_value_for_money: int = 0
    maximum_loan: int = 0
    guest_initial_cash: int = 0
    guest_initial_hunger: int = 0
    guest_initial_thirst: int = 0
    objective_type: int = 0
    objective_year: int = 0
    objective_currency: int = 0
    objective_guests: int = 0
    campaign_weeks_left: List[int] = field(default_factory=list)
    campaign_ride_index: List[int] = field(default_factory=list)

    balance_history: List[int] = field(default_factory=list)
    current_expenditure: int = 0
    current_profit: int = 0
    weekly_profit_average_dividend: int = 0
    weekly_profit_average_divisor: int = 0
    weekly_profit_history: List[int] = field(default_factory=list)
    park_value: int = 0
    park_value_history: List[int] = field(default_factory=list)

    completed_company_value: int = 0
    total_admissions: int = 0
    income_from_admissions: int = 0
    company_value: int = 0
    peep_warning_throttle: List[int] = field(default_factory=list)
    awards: List[RawAward] = field(default_factory=list)
    land_price: int = 0
    construction_rights_price: int = 0
    cd_key: int = 0
    game_version_number: int = 0
    completed_company_value_record: int = 0
    loan_hash: int = 0
    ride_count: int = 0
    historical_profit: int = 0
    scenario_completed_name: bytes = b""
    cash: int = 0
    park_rating_casualty_penalty: int = 0
    map_size_units: int = 0
    map_size_minus_2: int = 0
    map_size: int = 0
    map_max_xy: int = 0
    same_price_throughout: int = 0
    suggested_max_guests: int = 0
    park_rating_warning_days: int = 0
    last_entrance_style: int = 0
    rct1_water_colour: int = 0
    research_items: List[RawResearchItem] = field(default_factory=list)
    map_base_z: int = 0
    scenario_name: bytes = b""
    scenario_description: bytes = b""
    current_interest_rate: int = 0
    same_price_throughout_extended: int = 0
    park_entrance_x: List[int] = field(default_factory=list)
    park_entrance_y: List[int] = field(default_factory=list)
    park_entrance_z: List[int] = field(default_factory=list)
    park_entrance_direction: List[int] = field(default_factory=list)
    scenario_filename: bytes = b""
    saved_expansion_pack_names: bytes = b""
    banners: List[RawBanner] = field(default_factory=list)
    custom_strings: List[bytes] = field(default_factory=list)
    game_ticks_1: int = 0
    rides: List[RawRideRecord] = field(default_factory=list)
    saved_age: int = 0
    saved_view_x: int = 0
    saved_view_y: int = 0
    saved_view_zoom: int = 0
    saved_view_rotation: int = 0
    map_animations: List[RawMapAnimation] = field(default_factory=list)
    num_map_animations: int = 0
    ride_ratings_calc_data: bytes = b""
    ride_measurements: List[bytes] = field(default_factory=list)
    next_guest_index: int = 0
    grass_and_scenery_tilepos: int = 0
    patrol_areas: List[int] = field(default_factory=list)
    staff_modes: List[int] = field(default_factory=list)
    byte_13CA740: int = 0
    climate: int = 0
    climate_update_timer: int = 0
    current_weather: int = 0
    next_weather: int = 0
    temperature: int = 0
    next_temperature: int = 0
    current_weather_effect: int = 0
    next_weather_effect: int = 0
    current_weather_gloom: int = 0
    next_weather_gloom: int = 0
    current_rain_level: int = 0
    next_rain_level: int = 0
    news_items: List[RawNewsItemRecord] = field(default_factory=list)
    rct1_scenario_flags: int = 0
    wide_path_tile_loop_x: int = 0
    wide_path_tile_loop_y: int = 0

    @property
    def research_bitmap(self) -> RawResearchBitmap:
        return RawResearchBitmap(
            ride_types=list(self.researched_ride_types),
            ride_entries=list(self.researched_ride_entries),
            scenery_items=list(self.researched_scenery_items),
        )

    @classmethod
    def from_bytes(cls, data) -> 'RawGameState':
        if len(data) != GAME_STATE_SIZE:
            raise FormatError(f"Game state block is {len(data)} bytes, expected {GAME_STATE_SIZE}")
        return cls.read(IoBuffer.from_bytes(bytes(data)))

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawGameState':
        start = io.position
        s = cls()

        s.next_free_tile_element_pointer_index = io.read_uint32()          # 0
        s.sprites = [RawSprite.read(io) for _ in range(RCT2_MAX_SPRITES)]  # 4
        s.sprite_lists_head = io.read_array('H', NUM_SPRITE_LISTS)         # 2560004
        s.sprite_lists_count = io.read_array('H', NUM_SPRITE_LISTS)
        s.park_name = io.read_uint16()                                     # 2560028
        io.skip(2)
        s.park_name_args = io.read_uint32()
        s.initial_cash = io.read_int32()
        s.current_loan = io.read_int32()
        s.park_flags = io.read_uint32()
        s.park_entrance_fee = io.read_int16()                              # 2560048
        s.rct1_park_entrance_x = io.read_uint16()
        s.rct1_park_entrance_y = io.read_uint16()
        io.skip(2)
        s.rct1_park_entrance_z = io.read_uint8()
        io.skip(1)
        s.peep_spawns = [RawPeepSpawnRecord.read(io) for _ in range(MAX_PEEP_SPAWNS)]  # 2560058
        s.guest_count_change_modifier = io.read_uint8()                    # 2560070
        s.current_research_level = io.read_uint8()
        io.skip(4)
        s.researched_ride_types = io.read_array('I', 8)                    # 2560076
        s.researched_ride_entries = io.read_array('I', 8)
        s.researched_track_types_a = io.read_array('I', 128)
        s.researched_track_types_b = io.read_array('I', 128)

        s.guests_in_park = io.read_uint16()                                # 2561164
        s.guests_heading_for_park = io.read_uint16()
        s.expenditure_table = [
            io.read_array('i', EXPENDITURE_TYPE_COUNT)
            for _ in range(EXPENDITURE_TABLE_MONTH_COUNT)
        ]
        s.last_guests_in_park = io.read_uint16()                           # 2562064
        io.skip(3)
        s.handyman_colour = io.read_uint8()
        s.mechanic_colour = io.read_uint8()
        s.security_colour = io.read_uint8()
        s.researched_scenery_items = io.read_array('I', 56)                # 2562072

        s.park_rating = io.read_uint16()                                   # 2562296
        s.park_rating_history = io.read_array('B', HISTORY_SIZE)
        s.guests_in_park_history = io.read_array('B', HISTORY_SIZE)

        s.active_research_types = io.read_uint8()                          # 2562362
        s.research_progress_stage = io.read_uint8()
        s.last_researched_item_subject = io.read_uint32()
        io.skip(1000)
        s.next_research_item = io.read_uint32()
        s.research_progress = io.read_uint16()
        s.next_research_category = io.read_uint8()
        s.next_research_expected_day = io.read_uint8()
        s.next_research_expected_month = io.read_uint8()
        s.guest_initial_happiness = io.read_uint8()
        s.park_size = io.read_uint16()
        s.guest_generation_probability = io.read_uint16()
        s.total_ride_value_for_money = io.read_uint16()
        s.maximum_loan = io.read_int32()
        s.guest_initial_cash = io.read_int16()
        s.guest_initial_hunger = io.read_uint8()
        s.guest_initial_thirst = io.read_uint8()
        s.objective_type = io.read_uint8()
        s.objective_year = io.read_uint8()
        io.skip(2)
        s.objective_currency = io.read_int32()
        s.objective_guests = io.read_uint16()
        s.campaign_weeks_left = io.read_array('B', MAX_CAMPAIGNS)
        s.campaign_ride_index = io.read_array('B', MAX_CAMPAIGN_RIDES)

        s.balance_history = io.read_array('i', FINANCE_HISTORY_SIZE)       # 2563444
        s.current_expenditure = io.read_int32()                            # 2563956
        s.current_profit = io.read_int32()
        s.weekly_profit_average_dividend = io.read_uint32()
        s.weekly_profit_average_divisor = io.read_uint16()
        io.skip(2)
        s.weekly_profit_history = io.read_array('i', FINANCE_HISTORY_SIZE) # 2563972
        s.park_value = io.read_int32()                                     # 2564484
        s.park_value_history = io.read_array('i', FINANCE_HISTORY_SIZE)

        s.completed_company_value = io.read_int32()                        # 2565000
        s.total_admissions = io.read_uint32()
        s.income_from_admissions = io.read_int32()
        s.company_value = io.read_int32()
        s.peep_warning_throttle = io.read_array('B', PEEP_PREFERENCE_WARNING_COUNT)
        s.awards = [RawAward.read(io) for _ in range(MAX_AWARDS)]
        s.land_price = io.read_int16()
        s.construction_rights_price = io.read_int16()
        io.skip(4)  # unused word + padding
        s.cd_key = io.read_uint32()
        io.skip(64)
        s.game_version_number = io.read_uint32()
        s.completed_company_value_record = io.read_int32()
        s.loan_hash = io.read_uint32()
        s.ride_count = io.read_uint16()
        io.skip(6)
        s.historical_profit = io.read_int32()
        io.skip(4)
        s.scenario_completed_name = io.read_raw_string(32)
        s.cash = io.read_int32()
        io.skip(50)
        s.park_rating_casualty_penalty = io.read_uint16()
        s.map_size_units = io.read_uint16()
        s.map_size_minus_2 = io.read_uint16()
        s.map_size = io.read_uint16()
        s.map_max_xy = io.read_uint16()
        s.same_price_throughout = io.read_uint32()
        s.suggested_max_guests = io.read_uint16()
        s.park_rating_warning_days = io.read_uint16()
        s.last_entrance_style = io.read_uint8()
        s.rct1_water_colour = io.read_uint8()
        io.skip(2)
        s.research_items = [RawResearchItem.read(io) for _ in range(MAX_RESEARCH_ITEMS)]
        s.map_base_z = io.read_uint16()
        s.scenario_name = io.read_raw_string(64)
        s.scenario_description = io.read_raw_string(256)
        s.current_interest_rate = io.read_uint8()
        io.skip(1)
        s.same_price_throughout_extended = io.read_uint32()
        s.park_entrance_x = io.read_array('h', MAX_PARK_ENTRANCES)
        s.park_entrance_y = io.read_array('h', MAX_PARK_ENTRANCES)
        s.park_entrance_z = io.read_array('h', MAX_PARK_ENTRANCES)
        s.park_entrance_direction = io.read_array('B', MAX_PARK_ENTRANCES)
        s.scenario_filename = io.read_raw_string(256)
        s.saved_expansion_pack_names = io.read_bytes(3256)
        s.banners = [RawBanner.read(io) for _ in range(MAX_BANNERS)]
        s.custom_strings = [io.read_raw_string(USER_STRING_SIZE) for _ in range(MAX_USER_STRINGS)]
        s.game_ticks_1 = io.read_uint32()
        s.rides = [RawRideRecord.read(io) for _ in range(MAX_RIDES)]
        s.saved_age = io.read_uint16()
        s.saved_view_x = io.read_int16()
        s.saved_view_y = io.read_int16()
        s.saved_view_zoom = io.read_uint8()
        s.saved_view_rotation = io.read_uint8()
        s.map_animations = [RawMapAnimation.read(io) for _ in range(MAX_ANIMATED_OBJECTS)]
        s.num_map_animations = io.read_uint16()
        io.skip(2)
        s.ride_ratings_calc_data = io.read_bytes(RIDE_RATINGS_CALC_DATA_SIZE)
        io.skip(60)
        s.ride_measurements = [io.read_bytes(RIDE_MEASUREMENT_SIZE) for _ in range(MAX_RIDE_MEASUREMENTS)]
        s.next_guest_index = io.read_uint32()
        s.grass_and_scenery_tilepos = io.read_uint16()
        s.patrol_areas = io.read_array('I', PATROL_AREA_WORDS)
        s.staff_modes = io.read_array('B', STAFF_MODE_COUNT)
        io.skip(2)
        s.byte_13CA740 = io.read_uint8()
        io.skip(5)
        s.climate = io.read_uint8()
        io.skip(1)
        s.climate_update_timer = io.read_uint16()
        s.current_weather = io.read_uint8()
        s.next_weather = io.read_uint8()
        s.temperature = io.read_uint8()
        s.next_temperature = io.read_uint8()
        s.current_weather_effect = io.read_uint8()
        s.next_weather_effect = io.read_uint8()
        s.current_weather_gloom = io.read_uint8()
        s.next_weather_gloom = io.read_uint8()
        s.current_rain_level = io.read_uint8()
        s.next_rain_level = io.read_uint8()
        s.news_items = [RawNewsItemRecord.read(io) for _ in range(NEWS_ITEM_COUNT)]
        io.skip(64)
        s.rct1_scenario_flags = io.read_uint32()
        s.wide_path_tile_loop_x = io.read_uint16()
        s.wide_path_tile_loop_y = io.read_uint16()
        io.skip(432)

        consumed = io.position - start
        if consumed != GAME_STATE_SIZE:
            raise FormatError(f"Game state read {consumed} bytes, expected {GAME_STATE_SIZE}")
        logger.debug(f"Game state: {len(s.rides)} ride slots, {len(s.sprites)} sprite slots")
        return s
