"""
S6 Raw Records - fixed-size substructures of the game state block

Each record mirrors the historical byte layout and is read with an explicit
little-endian cursor. Records are transient: they exist only for the duration
of one import call.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

from ...errors import FormatError
from ...utils.binary import IoBuffer


XY8_UNDEFINED = (0xFF, 0xFF)
PEEP_SPAWN_UNDEFINED = 0xFFFF
RIDE_TYPE_NULL = 255

SPRITE_SIZE = 256
RIDE_RECORD_SIZE = 0x260
NEWS_ITEM_SIZE = 268
NEWS_TEXT_SIZE = 256

MAX_CARS_PER_TRAIN = 32
MAX_VEHICLES_PER_RIDE = 32
MAX_STATIONS_PER_RIDE = 4
CUSTOMER_HISTORY_SIZE = 10
DOWNTIME_HISTORY_SIZE = 8
NUM_COLOUR_SCHEMES = 4


def read_xy8(io: IoBuffer) -> Tuple[int, int]:
    """Read a packed byte coordinate pair."""
    return (io.read_uint8(), io.read_uint8())


@dataclass
class RawTileRecord:
    """One 8-byte map element as stored on disk."""
    raw: bytes = bytes(8)

    @property
    def type_byte(self) -> int:
        return self.raw[0]

    @property
    def element_type(self) -> int:
        return (self.raw[0] & 0x3C) >> 2

    @property
    def direction(self) -> int:
        return self.raw[0] & 0x03

    @property
    def flags(self) -> int:
        return self.raw[1]

    @property
    def base_height(self) -> int:
        return self.raw[2]

    @property
    def clearance_height(self) -> int:
        return self.raw[3]


@dataclass
class RawPeepSpawnRecord:
    """Guest entry point."""
    x: int = PEEP_SPAWN_UNDEFINED
    y: int = 0
    z: int = 0
    direction: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawPeepSpawnRecord':
        return cls(io.read_uint16(), io.read_uint16(), io.read_uint8(), io.read_uint8())


@dataclass
class RawAward:
    time: int = 0
    type: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawAward':
        return cls(io.read_uint16(), io.read_uint16())


@dataclass
class RawBanner:
    type: int = 0
    flags: int = 0
    string_idx: int = 0
    colour: int = 0
    text_colour: int = 0
    x: int = 0
    y: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawBanner':
        return cls(
            type=io.read_uint8(),
            flags=io.read_uint8(),
            string_idx=io.read_uint16(),
            colour=io.read_uint8(),
            text_colour=io.read_uint8(),
            x=io.read_uint8(),
            y=io.read_uint8(),
        )


@dataclass
class RawResearchItem:
    raw_value: int = 0
    category: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawResearchItem':
        return cls(io.read_uint32(), io.read_uint8())


@dataclass
class RawMapAnimation:
    base_z: int = 0
    type: int = 0
    x: int = 0
    y: int = 0

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawMapAnimation':
        return cls(io.read_uint8(), io.read_uint8(), io.read_uint16(), io.read_uint16())


@dataclass
class RawNewsItemRecord:
    """News ticker entry (268 bytes)."""
    type: int = 0
    flags: int = 0
    assoc: int = 0
    ticks: int = 0
    month_year: int = 0
    day: int = 0
    text: bytes = b""

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawNewsItemRecord':
        item = cls()
        item.type = io.read_uint8()
        item.flags = io.read_uint8()
        item.assoc = io.read_uint32()
        item.ticks = io.read_uint16()
        item.month_year = io.read_uint16()
        item.day = io.read_uint8()
        io.skip(1)
        item.text = io.read_raw_string(NEWS_TEXT_SIZE)
        return item


@dataclass
class RawSprite:
    """
    One 256-byte sprite slot.

    Only the common header and the guest fields the importer needs are
    decoded; the full slot is kept in raw.
    """
    raw: bytes = bytes(SPRITE_SIZE)
    sprite_identifier: int = 0xFF
    type: int = 0
    next_in_quadrant: int = 0xFFFF
    next: int = 0xFFFF
    previous: int = 0xFFFF
    linked_list_type_offset: int = 0
    sprite_index: int = 0
    flags: int = 0
    x: int = 0
    y: int = 0
    z: int = 0

    PEEP_STATE_OFFSET = 0x2B
    PEEP_CURRENT_RIDE_OFFSET = 0x6C

    @property
    def peep_state(self) -> int:
        return self.raw[self.PEEP_STATE_OFFSET]

    @property
    def peep_current_ride(self) -> int:
        return self.raw[self.PEEP_CURRENT_RIDE_OFFSET]

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawSprite':
        raw = io.read_bytes(SPRITE_SIZE)
        s = IoBuffer.from_bytes(raw)
        sprite = cls(raw=raw)
        sprite.sprite_identifier = s.read_uint8()
        sprite.type = s.read_uint8()
        sprite.next_in_quadrant = s.read_uint16()
        sprite.next = s.read_uint16()
        sprite.previous = s.read_uint16()
        sprite.linked_list_type_offset = s.read_uint8()
        s.skip(1)  # sprite_height_negative
        sprite.sprite_index = s.read_uint16()
        sprite.flags = s.read_uint16()
        sprite.x = s.read_int16()
        sprite.y = s.read_int16()
        sprite.z = s.read_int16()
        return sprite


@dataclass
class RawResearchBitmap:
    """Invented bit arrays, 32 items per word."""
    ride_types: List[int] = field(default_factory=lambda: [0] * 8)
    ride_entries: List[int] = field(default_factory=lambda: [0] * 8)
    scenery_items: List[int] = field(default_factory=lambda: [0] * 56)


@dataclass
class RawRideRecord:
    """
    Ride slot (0x260 bytes).
    Offsets in comments are relative to the start of the record.
    """
    type: int = RIDE_TYPE_NULL
    subtype: int = 0
    mode: int = 0
    colour_scheme_type: int = 0
    vehicle_colours: List[Tuple[int, int]] = field(default_factory=list)
    status: int = 0
    name: int = 0
    name_arguments: int = 0
    overall_view: Tuple[int, int] = XY8_UNDEFINED
    station_starts: List[Tuple[int, int]] = field(default_factory=list)
    station_heights: List[int] = field(default_factory=list)
    station_length: List[int] = field(default_factory=list)
    station_depart: List[int] = field(default_factory=list)
    train_at_station: List[int] = field(default_factory=list)
    entrances: List[Tuple[int, int]] = field(default_factory=list)
    exits: List[Tuple[int, int]] = field(default_factory=list)
    last_peep_in_queue: List[int] = field(default_factory=list)
    vehicles: List[int] = field(default_factory=list)
    depart_flags: int = 0
    num_stations: int = 0
    num_vehicles: int = 0
    num_cars_per_train: int = 0
    proposed_num_vehicles: int = 0
    proposed_num_cars_per_train: int = 0
    max_trains: int = 0
    min_max_cars_per_train: int = 0
    min_waiting_time: int = 0
    max_waiting_time: int = 0
    operation_option: int = 0
    boat_hire_return_direction: int = 0
    boat_hire_return_position: Tuple[int, int] = XY8_UNDEFINED
    measurement_index: int = 0
    special_track_elements: int = 0
    max_speed: int = 0
    average_speed: int = 0
    current_test_segment: int = 0
    average_speed_test_timeout: int = 0
    length: List[int] = field(default_factory=list)
    time: List[int] = field(default_factory=list)
    max_positive_vertical_g: int = 0
    max_negative_vertical_g: int = 0
    max_lateral_g: int = 0
    previous_vertical_g: int = 0
    previous_lateral_g: int = 0
    testing_flags: int = 0
    cur_test_track_location: Tuple[int, int] = XY8_UNDEFINED
    turn_count_default: int = 0
    turn_count_banked: int = 0
    turn_count_sloped: int = 0
    inversions: int = 0
    drops: int = 0
    start_drop_height: int = 0
    highest_drop_height: int = 0
    sheltered_length: int = 0
    var_11C: int = 0
    num_sheltered_sections: int = 0
    cur_test_track_z: int = 0
    cur_num_customers: int = 0
    num_customers_timeout: int = 0
    num_customers: List[int] = field(default_factory=list)
    price: int = 0
    chairlift_bullwheel_location: List[Tuple[int, int]] = field(default_factory=list)
    chairlift_bullwheel_z: List[int] = field(default_factory=list)
    excitement: int = 0
    intensity: int = 0
    nausea: int = 0
    value: int = 0
    chairlift_bullwheel_rotation: int = 0
    satisfaction: int = 0
    satisfaction_time_out: int = 0
    satisfaction_next: int = 0
    window_invalidate_flags: int = 0
    total_customers: int = 0
    total_profit: int = 0
    popularity: int = 0
    popularity_time_out: int = 0
    popularity_next: int = 0
    num_riders: int = 0
    music_tune_id: int = 0
    slide_in_use: int = 0
    slide_peep: int = 0
    slide_peep_t_shirt_colour: int = 0
    spiral_slide_progress: int = 0
    build_date: int = 0
    upkeep_cost: int = 0
    race_winner: int = 0
    music_position: int = 0
    breakdown_reason_pending: int = 0
    mechanic_status: int = 0
    mechanic: int = 0
    inspection_station: int = 0
    broken_vehicle: int = 0
    broken_car: int = 0
    breakdown_reason: int = 0
    price_secondary: int = 0
    reliability: int = 0
    unreliability_factor: int = 0
    downtime: int = 0
    inspection_interval: int = 0
    last_inspection: int = 0
    downtime_history: List[int] = field(default_factory=list)
    no_primary_items_sold: int = 0
    no_secondary_items_sold: int = 0
    breakdown_sound_modifier: int = 0
    not_fixed_timeout: int = 0
    last_crash_type: int = 0
    connected_message_throttle: int = 0
    income_per_hour: int = 0
    profit: int = 0
    queue_time: List[int] = field(default_factory=list)
    track_colour_main: List[int] = field(default_factory=list)
    track_colour_additional: List[int] = field(default_factory=list)
    track_colour_supports: List[int] = field(default_factory=list)
    music: int = 0
    entrance_style: int = 0
    vehicle_change_timeout: int = 0
    num_block_brakes: int = 0
    lift_hill_speed: int = 0
    guests_favourite: int = 0
    lifecycle_flags: int = 0
    vehicle_colours_extended: List[int] = field(default_factory=list)
    total_air_time: int = 0
    current_test_station: int = 0
    num_circuits: int = 0
    cable_lift_x: int = 0
    cable_lift_y: int = 0
    cable_lift_z: int = 0
    cable_lift: int = 0
    queue_length: List[int] = field(default_factory=list)

    @classmethod
    def read(cls, io: IoBuffer) -> 'RawRideRecord':
        start = io.position
        r = cls()
        r.type = io.read_uint8()                                                # 0x000
        r.subtype = io.read_uint8()
        io.skip(2)
        r.mode = io.read_uint8()                                                # 0x004
        r.colour_scheme_type = io.read_uint8()
        r.vehicle_colours = [read_xy8(io) for _ in range(MAX_CARS_PER_TRAIN)]   # 0x006
        io.skip(3)
        r.status = io.read_uint8()                                              # 0x049
        r.name = io.read_uint16()
        r.name_arguments = io.read_uint32()
        r.overall_view = read_xy8(io)                                           # 0x050
        r.station_starts = [read_xy8(io) for _ in range(MAX_STATIONS_PER_RIDE)]
        r.station_heights = io.read_array('B', MAX_STATIONS_PER_RIDE)           # 0x05A
        r.station_length = io.read_array('B', MAX_STATIONS_PER_RIDE)
        r.station_depart = io.read_array('B', MAX_STATIONS_PER_RIDE)
        r.train_at_station = io.read_array('B', MAX_STATIONS_PER_RIDE)
        r.entrances = [read_xy8(io) for _ in range(MAX_STATIONS_PER_RIDE)]      # 0x06A
        r.exits = [read_xy8(io) for _ in range(MAX_STATIONS_PER_RIDE)]
        r.last_peep_in_queue = io.read_array('H', MAX_STATIONS_PER_RIDE)        # 0x07A
        io.skip(4)
        r.vehicles = io.read_array('H', MAX_VEHICLES_PER_RIDE)                  # 0x086
        r.depart_flags = io.read_uint8()                                        # 0x0C6
        r.num_stations = io.read_uint8()
        r.num_vehicles = io.read_uint8()
        r.num_cars_per_train = io.read_uint8()
        r.proposed_num_vehicles = io.read_uint8()
        r.proposed_num_cars_per_train = io.read_uint8()
        r.max_trains = io.read_uint8()
        r.min_max_cars_per_train = io.read_uint8()
        r.min_waiting_time = io.read_uint8()
        r.max_waiting_time = io.read_uint8()
        r.operation_option = io.read_uint8()                                    # 0x0D0
        r.boat_hire_return_direction = io.read_uint8()
        r.boat_hire_return_position = read_xy8(io)
        r.measurement_index = io.read_uint8()                                   # 0x0D4
        r.special_track_elements = io.read_uint8()
        io.skip(2)
        r.max_speed = io.read_int32()                                           # 0x0D8
        r.average_speed = io.read_int32()
        r.current_test_segment = io.read_uint8()                                # 0x0E0
        r.average_speed_test_timeout = io.read_uint8()
        io.skip(2)
        r.length = io.read_array('i', MAX_STATIONS_PER_RIDE)                    # 0x0E4
        r.time = io.read_array('H', MAX_STATIONS_PER_RIDE)                      # 0x0F4
        r.max_positive_vertical_g = io.read_int16()                             # 0x0FC
        r.max_negative_vertical_g = io.read_int16()
        r.max_lateral_g = io.read_int16()
        r.previous_vertical_g = io.read_int16()
        r.previous_lateral_g = io.read_int16()
        io.skip(2)
        r.testing_flags = io.read_uint32()                                      # 0x108
        r.cur_test_track_location = read_xy8(io)
        r.turn_count_default = io.read_uint16()                                 # 0x10E
        r.turn_count_banked = io.read_uint16()
        r.turn_count_sloped = io.read_uint16()
        r.inversions = io.read_uint8()                                          # 0x114
        r.drops = io.read_uint8()
        r.start_drop_height = io.read_uint8()
        r.highest_drop_height = io.read_uint8()
        r.sheltered_length = io.read_int32()                                    # 0x118
        r.var_11C = io.read_uint16()
        r.num_sheltered_sections = io.read_uint8()
        r.cur_test_track_z = io.read_uint8()
        r.cur_num_customers = io.read_uint16()                                  # 0x120
        r.num_customers_timeout = io.read_uint16()
        r.num_customers = io.read_array('H', CUSTOMER_HISTORY_SIZE)             # 0x124
        r.price = io.read_int16()                                               # 0x138
        r.chairlift_bullwheel_location = [read_xy8(io) for _ in range(2)]
        r.chairlift_bullwheel_z = io.read_array('B', 2)                         # 0x13E
        r.excitement = io.read_int16()                                          # 0x140
        r.intensity = io.read_int16()
        r.nausea = io.read_int16()
        r.value = io.read_uint16()                                              # 0x146
        r.chairlift_bullwheel_rotation = io.read_uint16()
        r.satisfaction = io.read_uint8()                                        # 0x14A
        r.satisfaction_time_out = io.read_uint8()
        r.satisfaction_next = io.read_uint8()
        r.window_invalidate_flags = io.read_uint8()
        io.skip(2)
        r.total_customers = io.read_uint32()                                    # 0x150
        r.total_profit = io.read_int32()
        r.popularity = io.read_uint8()                                          # 0x158
        r.popularity_time_out = io.read_uint8()
        r.popularity_next = io.read_uint8()
        r.num_riders = io.read_uint8()
        r.music_tune_id = io.read_uint8()                                       # 0x15C
        r.slide_in_use = io.read_uint8()
        r.slide_peep = io.read_uint16()
        io.skip(14)
        r.slide_peep_t_shirt_colour = io.read_uint8()                           # 0x16E
        io.skip(7)
        r.spiral_slide_progress = io.read_uint8()                               # 0x176
        io.skip(9)
        r.build_date = io.read_int16()                                          # 0x180
        r.upkeep_cost = io.read_int16()
        r.race_winner = io.read_uint16()
        io.skip(2)
        r.music_position = io.read_uint32()                                     # 0x188
        r.breakdown_reason_pending = io.read_uint8()
        r.mechanic_status = io.read_uint8()
        r.mechanic = io.read_uint16()
        r.inspection_station = io.read_uint8()                                  # 0x190
        r.broken_vehicle = io.read_uint8()
        r.broken_car = io.read_uint8()
        r.breakdown_reason = io.read_uint8()
        r.price_secondary = io.read_int16()                                     # 0x194
        r.reliability = io.read_uint16()
        r.unreliability_factor = io.read_uint8()                                # 0x198
        r.downtime = io.read_uint8()
        r.inspection_interval = io.read_uint8()
        r.last_inspection = io.read_uint8()
        r.downtime_history = io.read_array('B', DOWNTIME_HISTORY_SIZE)          # 0x19C
        r.no_primary_items_sold = io.read_uint32()                              # 0x1A4
        r.no_secondary_items_sold = io.read_uint32()
        r.breakdown_sound_modifier = io.read_uint8()                            # 0x1AC
        r.not_fixed_timeout = io.read_uint8()
        r.last_crash_type = io.read_uint8()
        r.connected_message_throttle = io.read_uint8()
        r.income_per_hour = io.read_int32()                                     # 0x1B0
        r.profit = io.read_int32()
        r.queue_time = io.read_array('B', MAX_STATIONS_PER_RIDE)                # 0x1B8
        r.track_colour_main = io.read_array('B', NUM_COLOUR_SCHEMES)
        r.track_colour_additional = io.read_array('B', NUM_COLOUR_SCHEMES)
        r.track_colour_supports = io.read_array('B', NUM_COLOUR_SCHEMES)
        r.music = io.read_uint8()                                               # 0x1C8
        r.entrance_style = io.read_uint8()
        r.vehicle_change_timeout = io.read_uint16()
        r.num_block_brakes = io.read_uint8()                                    # 0x1CC
        r.lift_hill_speed = io.read_uint8()
        r.guests_favourite = io.read_uint16()
        r.lifecycle_flags = io.read_uint32()                                    # 0x1D0
        r.vehicle_colours_extended = io.read_array('B', MAX_CARS_PER_TRAIN)
        r.total_air_time = io.read_uint16()                                     # 0x1F4
        r.current_test_station = io.read_uint8()
        r.num_circuits = io.read_uint8()
        r.cable_lift_x = io.read_int16()                                        # 0x1F8
        r.cable_lift_y = io.read_int16()
        r.cable_lift_z = io.read_uint8()
        io.skip(1)
        r.cable_lift = io.read_uint16()                                         # 0x1FE
        r.queue_length = io.read_array('H', MAX_STATIONS_PER_RIDE)              # 0x200
        io.skip(0x58)

        if io.position - start != RIDE_RECORD_SIZE:
            raise FormatError(f"Ride record read {io.position - start} bytes, expected {RIDE_RECORD_SIZE}")
        return r
