"""
Ride migration: raw 0x260-byte ride slots to Ride entities.

Plain scalars that keep their name are listed in RIDE_SCALAR_FIELDS and
copied as-is; stations, colours and coordinate pairs are rebuilt.
"""

from typing import List, Optional, Tuple
import logging

from ..formats.s6.records import RawRideRecord, XY8_UNDEFINED, RIDE_TYPE_NULL
from ..world.rides import (
    Ride, RideStation, VehicleColour, TrackColour, MAX_STATIONS, NUM_COLOUR_SCHEMES,
)

logger = logging.getLogger(__name__)


RIDE_SCALAR_FIELDS = (
    'type', 'subtype', 'mode', 'colour_scheme_type', 'status', 'name', 'name_arguments',
    'depart_flags', 'num_stations', 'num_vehicles', 'num_cars_per_train',
    'proposed_num_vehicles', 'proposed_num_cars_per_train', 'max_trains',
    'min_max_cars_per_train', 'min_waiting_time', 'max_waiting_time', 'operation_option',
    'boat_hire_return_direction', 'measurement_index', 'special_track_elements',
    'max_speed', 'average_speed', 'current_test_segment', 'average_speed_test_timeout',
    'max_positive_vertical_g', 'max_negative_vertical_g', 'max_lateral_g',
    'previous_vertical_g', 'previous_lateral_g', 'testing_flags',
    'turn_count_default', 'turn_count_banked', 'turn_count_sloped', 'inversions', 'drops',
    'start_drop_height', 'highest_drop_height', 'sheltered_length', 'var_11C',
    'num_sheltered_sections', 'cur_test_track_z', 'cur_num_customers', 'num_customers_timeout',
    'price', 'price_secondary', 'excitement', 'intensity', 'nausea', 'value',
    'chairlift_bullwheel_rotation', 'satisfaction', 'satisfaction_time_out', 'satisfaction_next',
    'window_invalidate_flags', 'total_customers', 'total_profit', 'popularity',
    'popularity_time_out', 'popularity_next', 'num_riders', 'music_tune_id', 'slide_in_use',
    'slide_peep', 'slide_peep_t_shirt_colour', 'spiral_slide_progress', 'build_date',
    'upkeep_cost', 'race_winner', 'music_position', 'breakdown_reason_pending',
    'mechanic_status', 'mechanic', 'inspection_station', 'broken_vehicle', 'broken_car',
    'breakdown_reason', 'reliability', 'unreliability_factor', 'downtime',
    'inspection_interval', 'last_inspection', 'no_primary_items_sold', 'no_secondary_items_sold',
    'breakdown_sound_modifier', 'not_fixed_timeout', 'last_crash_type',
    'connected_message_throttle', 'income_per_hour', 'profit', 'music', 'entrance_style',
    'vehicle_change_timeout', 'num_block_brakes', 'lift_hill_speed', 'guests_favourite',
    'lifecycle_flags', 'total_air_time', 'current_test_station', 'num_circuits',
    'cable_lift_x', 'cable_lift_y', 'cable_lift_z', 'cable_lift',
)

RIDE_LIST_FIELDS = (
    'vehicles', 'num_customers', 'chairlift_bullwheel_z', 'downtime_history',
)


def xy8_or_none(value: Tuple[int, int]) -> Optional[Tuple[int, int]]:
    """Packed byte coordinates, with the undefined marker mapped to None."""
    return None if tuple(value) == XY8_UNDEFINED else (value[0], value[1])


def migrate_station(src: RawRideRecord, index: int) -> RideStation:
    # Heights are stored in the destination's native units; no rescale.
    return RideStation(
        start=xy8_or_none(src.station_starts[index]),
        height=src.station_heights[index],
        length=src.station_length[index],
        depart=src.station_depart[index],
        train_at_station=src.train_at_station[index],
        entrance=xy8_or_none(src.entrances[index]),
        exit=xy8_or_none(src.exits[index]),
        last_peep_in_queue=src.last_peep_in_queue[index],
        segment_length=src.length[index],
        segment_time=src.time[index],
        queue_time=src.queue_time[index],
        queue_length=src.queue_length[index],
    )


def migrate_ride(src: RawRideRecord, index: int) -> Ride:
    """Build a Ride from one occupied raw slot."""
    ride = Ride(id=index)
    for name in RIDE_SCALAR_FIELDS:
        setattr(ride, name, getattr(src, name))
    for name in RIDE_LIST_FIELDS:
        setattr(ride, name, list(getattr(src, name)))

    ride.overall_view = xy8_or_none(src.overall_view)
    ride.boat_hire_return_position = xy8_or_none(src.boat_hire_return_position)
    ride.cur_test_track_location = xy8_or_none(src.cur_test_track_location)
    ride.chairlift_bullwheel_location = [xy8_or_none(loc) for loc in src.chairlift_bullwheel_location]
    ride.stations = [migrate_station(src, i) for i in range(MAX_STATIONS)]

    ride.vehicle_colours = [
        VehicleColour(body=body, trim=trim, ternary=src.vehicle_colours_extended[i])
        for i, (body, trim) in enumerate(src.vehicle_colours)
    ]
    ride.track_colours = [
        TrackColour(
            main=src.track_colour_main[i],
            additional=src.track_colour_additional[i],
            supports=src.track_colour_supports[i],
        )
        for i in range(NUM_COLOUR_SCHEMES)
    ]
    return ride


def migrate_rides(raw_rides: List[RawRideRecord]) -> List[Optional[Ride]]:
    """Migrate every slot; empty slots stay None."""
    rides: List[Optional[Ride]] = []
    for index, src in enumerate(raw_rides):
        if src.type == RIDE_TYPE_NULL:
            rides.append(None)
            continue
        rides.append(migrate_ride(src, index))
    logger.debug(f"Migrated {sum(1 for r in rides if r is not None)} rides")
    return rides
