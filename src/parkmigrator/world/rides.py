"""
Ride entities.

Station coordinates are tile coordinates; None marks an unset location.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


RIDE_TYPE_NULL = 255
MAX_RIDES = 255
MAX_STATIONS = 4
MAX_CARS_PER_TRAIN = 32
NUM_COLOUR_SCHEMES = 4

TileCoords = Tuple[int, int]


@dataclass
class VehicleColour:
    body: int = 0
    trim: int = 0
    ternary: int = 0


@dataclass
class TrackColour:
    main: int = 0
    additional: int = 0
    supports: int = 0


@dataclass
class RideStation:
    start: Optional[TileCoords] = None
    height: int = 0
    length: int = 0
    depart: int = 0
    train_at_station: int = 0
    entrance: Optional[TileCoords] = None
    exit: Optional[TileCoords] = None
    last_peep_in_queue: int = 0xFFFF
    segment_length: int = 0
    segment_time: int = 0
    queue_time: int = 0
    queue_length: int = 0


@dataclass
class Ride:
    id: int = 0
    type: int = RIDE_TYPE_NULL
    subtype: int = 0
    mode: int = 0
    colour_scheme_type: int = 0
    status: int = 0
    name: int = 0
    name_arguments: int = 0
    overall_view: Optional[TileCoords] = None
    stations: List[RideStation] = field(default_factory=lambda: [RideStation() for _ in range(MAX_STATIONS)])
    vehicles: List[int] = field(default_factory=list)
    vehicle_colours: List[VehicleColour] = field(default_factory=list)
    track_colours: List[TrackColour] = field(default_factory=list)

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
    boat_hire_return_position: Optional[TileCoords] = None
    measurement_index: int = 0
    special_track_elements: int = 0

    # Test results
    max_speed: int = 0
    average_speed: int = 0
    current_test_segment: int = 0
    average_speed_test_timeout: int = 0
    max_positive_vertical_g: int = 0
    max_negative_vertical_g: int = 0
    max_lateral_g: int = 0
    previous_vertical_g: int = 0
    previous_lateral_g: int = 0
    testing_flags: int = 0
    cur_test_track_location: Optional[TileCoords] = None
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
    total_air_time: int = 0
    current_test_station: int = 0

    # Customers and ratings
    cur_num_customers: int = 0
    num_customers_timeout: int = 0
    num_customers: List[int] = field(default_factory=list)
    price: int = 0
    price_secondary: int = 0
    excitement: int = 0
    intensity: int = 0
    nausea: int = 0
    value: int = 0
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
    guests_favourite: int = 0
    income_per_hour: int = 0
    profit: int = 0
    no_primary_items_sold: int = 0
    no_secondary_items_sold: int = 0

    # Chairlift, slides, music
    chairlift_bullwheel_location: List[Optional[TileCoords]] = field(default_factory=list)
    chairlift_bullwheel_z: List[int] = field(default_factory=list)
    chairlift_bullwheel_rotation: int = 0
    music_tune_id: int = 0
    slide_in_use: int = 0
    slide_peep: int = 0
    slide_peep_t_shirt_colour: int = 0
    spiral_slide_progress: int = 0
    music: int = 0
    music_position: int = 0

    # Maintenance
    build_date: int = 0
    upkeep_cost: int = 0
    race_winner: int = 0
    breakdown_reason_pending: int = 0
    mechanic_status: int = 0
    mechanic: int = 0
    inspection_station: int = 0
    broken_vehicle: int = 0
    broken_car: int = 0
    breakdown_reason: int = 0
    reliability: int = 0
    unreliability_factor: int = 0
    downtime: int = 0
    inspection_interval: int = 0
    last_inspection: int = 0
    downtime_history: List[int] = field(default_factory=list)
    breakdown_sound_modifier: int = 0
    not_fixed_timeout: int = 0
    last_crash_type: int = 0
    connected_message_throttle: int = 0

    entrance_style: int = 0
    vehicle_change_timeout: int = 0
    num_block_brakes: int = 0
    lift_hill_speed: int = 0
    lifecycle_flags: int = 0
    num_circuits: int = 0
    cable_lift_x: int = 0
    cable_lift_y: int = 0
    cable_lift_z: int = 0
    cable_lift: int = 0

    @property
    def is_null(self) -> bool:
        return self.type == RIDE_TYPE_NULL

    def clear_entrances_and_exits(self):
        for station in self.stations:
            station.entrance = None
            station.exit = None
