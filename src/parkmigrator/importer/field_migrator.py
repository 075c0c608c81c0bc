"""
Field Migrator - raw game state to WorldState

Most values move across unchanged under a new name; those are listed in
GAME_STATE_FIELD_MAP as (raw attribute, destination path) pairs. Values that
need a unit change, decryption, transcoding or a rebuilt structure are
handled by the FieldMigrator methods.
"""

from dataclasses import dataclass
from pathlib import PurePath
from typing import Callable, Optional, Tuple
import logging

from ..formats.s6.game_state import RawGameState, RawDate, RCT2_MAX_SPRITES
from ..formats.s6.layout import RawScenarioInfo, ParkLayout, ParkType
from ..formats.s6.records import PEEP_SPAWN_UNDEFINED
from ..formats.sawyer.encoding import contains_colour_code, rct2_to_unicode
from ..world.sprites import Sprite, SpriteList
from ..world.state import (
    WorldState, PeepSpawn, ParkEntrance, Award, Banner, ResearchItem, MapAnimation,
    NewsItem, NEWS_ITEM_NULL, NEWS_TYPE_COUNT,
)
from .ride_migrator import migrate_rides

logger = logging.getLogger(__name__)


MONEY_ENCRYPTION_KEY = 0xF4EC9621
LOCATION_NULL = -32768
PEEP_SPAWN_HEIGHT_SCALE = 16


def _ror32(value: int, shift: int) -> int:
    return ((value >> shift) | (value << (32 - shift))) & 0xFFFFFFFF


def _to_int32(value: int) -> int:
    return value - 0x100000000 if value & 0x80000000 else value


def decrypt_money(value: int) -> int:
    """Undo the cash obfuscation: rotate right 13 after the key XOR."""
    return _to_int32(_ror32((value & 0xFFFFFFFF) ^ MONEY_ENCRYPTION_KEY, 13))


@dataclass(frozen=True)
class FieldMapping:
    """One raw attribute copied to a dotted destination path."""
    source: str
    target: str
    convert: Optional[Callable] = None


GAME_STATE_FIELD_MAP: Tuple[FieldMapping, ...] = (
    FieldMapping('next_free_tile_element_pointer_index', 'next_free_tile_element_index'),

    FieldMapping('park_name', 'park.name'),
    FieldMapping('park_name_args', 'park.name_args'),
    FieldMapping('park_flags', 'park.flags'),
    FieldMapping('park_entrance_fee', 'park.entrance_fee'),
    FieldMapping('guest_count_change_modifier', 'park.guest_change_modifier'),
    FieldMapping('guests_in_park', 'park.guests_in_park'),
    FieldMapping('guests_heading_for_park', 'park.guests_heading_for_park'),
    FieldMapping('last_guests_in_park', 'park.last_guests_in_park'),
    FieldMapping('handyman_colour', 'park.handyman_colour'),
    FieldMapping('mechanic_colour', 'park.mechanic_colour'),
    FieldMapping('security_colour', 'park.security_colour'),
    FieldMapping('park_rating', 'park.rating'),
    FieldMapping('park_rating_history', 'park.rating_history', list),
    FieldMapping('guests_in_park_history', 'park.guests_in_park_history', list),
    FieldMapping('guest_initial_happiness', 'park.guest_initial_happiness'),
    FieldMapping('park_size', 'park.size'),
    FieldMapping('guest_generation_probability', 'park.guest_generation_probability'),
    FieldMapping('total_ride_value_for_money', 'park.total_ride_value_for_money'),
    FieldMapping('guest_initial_cash', 'park.guest_initial_cash'),
    FieldMapping('guest_initial_hunger', 'park.guest_initial_hunger'),
    FieldMapping('guest_initial_thirst', 'park.guest_initial_thirst'),
    FieldMapping('campaign_weeks_left', 'park.campaign_weeks_left', list),
    FieldMapping('campaign_ride_index', 'park.campaign_ride_index', list),
    FieldMapping('park_value', 'park.value'),
    FieldMapping('park_value_history', 'park.value_history', list),
    FieldMapping('total_admissions', 'park.total_admissions'),
    FieldMapping('income_from_admissions', 'park.income_from_admissions'),
    FieldMapping('company_value', 'park.company_value'),
    FieldMapping('peep_warning_throttle', 'park.peep_warning_throttle', list),
    FieldMapping('land_price', 'park.land_price'),
    FieldMapping('construction_rights_price', 'park.construction_rights_price'),
    FieldMapping('park_rating_casualty_penalty', 'park.rating_casualty_penalty'),
    FieldMapping('same_price_throughout', 'park.same_price_throughout'),
    FieldMapping('suggested_max_guests', 'park.suggested_max_guests'),
    FieldMapping('park_rating_warning_days', 'park.rating_warning_days'),
    FieldMapping('last_entrance_style', 'park.last_entrance_style'),
    FieldMapping('staff_modes', 'park.staff_modes', list),
    FieldMapping('patrol_areas', 'park.patrol_areas', list),
    FieldMapping('next_guest_index', 'park.next_guest_index'),

    FieldMapping('initial_cash', 'finance.initial_cash'),
    FieldMapping('current_loan', 'finance.loan'),
    FieldMapping('maximum_loan', 'finance.max_loan'),
    FieldMapping('current_interest_rate', 'finance.interest_rate'),
    FieldMapping('current_expenditure', 'finance.current_expenditure'),
    FieldMapping('current_profit', 'finance.current_profit'),
    FieldMapping('weekly_profit_average_dividend', 'finance.weekly_profit_average_dividend'),
    FieldMapping('weekly_profit_average_divisor', 'finance.weekly_profit_average_divisor'),
    FieldMapping('weekly_profit_history', 'finance.weekly_profit_history', list),
    FieldMapping('balance_history', 'finance.balance_history', list),
    FieldMapping('historical_profit', 'finance.historical_profit'),
    FieldMapping('expenditure_table', 'finance.expenditure_table', lambda rows: [list(r) for r in rows]),

    FieldMapping('current_research_level', 'research.funding_level'),
    FieldMapping('active_research_types', 'research.priorities'),
    FieldMapping('research_progress_stage', 'research.progress_stage'),
    FieldMapping('last_researched_item_subject', 'research.last_item_subject'),
    FieldMapping('next_research_item', 'research.next_item'),
    FieldMapping('research_progress', 'research.progress'),
    FieldMapping('next_research_category', 'research.next_category'),
    FieldMapping('next_research_expected_day', 'research.expected_day'),
    FieldMapping('next_research_expected_month', 'research.expected_month'),

    FieldMapping('objective_type', 'scenario.objective_type'),
    FieldMapping('objective_year', 'scenario.objective_year'),
    FieldMapping('objective_currency', 'scenario.objective_currency'),
    FieldMapping('objective_guests', 'scenario.objective_guests'),
    FieldMapping('completed_company_value', 'scenario.completed_company_value'),
    FieldMapping('completed_company_value_record', 'scenario.completed_company_value_record'),
    FieldMapping('scenario_completed_name', 'scenario.completed_by'),
    FieldMapping('scenario_name', 'scenario.name'),
    FieldMapping('scenario_description', 'scenario.details'),
    FieldMapping('game_ticks_1', 'scenario.game_ticks'),
    FieldMapping('saved_expansion_pack_names', 'scenario.expansion_packs'),

    FieldMapping('climate', 'climate.climate'),
    FieldMapping('climate_update_timer', 'climate.update_timer'),
    FieldMapping('current_weather', 'climate.current.weather'),
    FieldMapping('temperature', 'climate.current.temperature'),
    FieldMapping('current_weather_effect', 'climate.current.weather_effect'),
    FieldMapping('current_weather_gloom', 'climate.current.weather_gloom'),
    FieldMapping('current_rain_level', 'climate.current.rain_level'),
    FieldMapping('next_weather', 'climate.next.weather'),
    FieldMapping('next_temperature', 'climate.next.temperature'),
    FieldMapping('next_weather_effect', 'climate.next.weather_effect'),
    FieldMapping('next_weather_gloom', 'climate.next.weather_gloom'),
    FieldMapping('next_rain_level', 'climate.next.rain_level'),

    FieldMapping('saved_age', 'saved_view.age'),
    FieldMapping('saved_view_x', 'saved_view.x'),
    FieldMapping('saved_view_y', 'saved_view.y'),
    FieldMapping('saved_view_zoom', 'saved_view.zoom'),
    FieldMapping('saved_view_rotation', 'saved_view.rotation'),

    FieldMapping('map_size_units', 'map_size_units'),
    FieldMapping('map_size_minus_2', 'map_size_minus_2'),
    FieldMapping('map_max_xy', 'map_max_xy'),
    FieldMapping('map_base_z', 'map_base_z'),
    FieldMapping('game_version_number', 'game_version'),
    FieldMapping('ride_ratings_calc_data', 'ride_ratings_calc_data'),
    FieldMapping('ride_measurements', 'ride_measurements', list),
    FieldMapping('grass_and_scenery_tilepos', 'grass_and_scenery_tilepos'),
    FieldMapping('custom_strings', 'user_strings', list),
)


def set_path(target, path: str, value):
    """Assign value to a dotted attribute path below target."""
    *parents, name = path.split('.')
    for parent in parents:
        target = getattr(target, parent)
    setattr(target, name, value)


def apply_field_map(raw, world, mappings=GAME_STATE_FIELD_MAP):
    for mapping in mappings:
        value = getattr(raw, mapping.source)
        if mapping.convert is not None:
            value = mapping.convert(value)
        set_path(world, mapping.target, value)


def transcode_scenario_text(name: bytes, details: bytes) -> Tuple[str, str]:
    """
    Decode the info block strings. If either holds a colour code already in
    UTF-8 form, both were written as UTF-8 and are taken verbatim.
    """
    if contains_colour_code(name) or contains_colour_code(details):
        return name.decode('utf-8', errors='replace'), details.decode('utf-8', errors='replace')
    return rct2_to_unicode(name), rct2_to_unicode(details)


def drop_undefined_peep_spawns(world: WorldState) -> int:
    """Remove spawn slots whose x is the unused marker. Returns how many were dropped."""
    spawns = world.park.peep_spawns
    world.park.peep_spawns = [spawn for spawn in spawns if spawn.x != PEEP_SPAWN_UNDEFINED]
    return len(spawns) - len(world.park.peep_spawns)


class FieldMigrator:
    """
    Copies a raw game state into a freshly reset WorldState.

    Usage:
        world.init_all(raw.map_size)
        FieldMigrator(world).migrate(raw, date, info, layout, path)

    Peep spawns keep their stored slots; call drop_undefined_peep_spawns()
    once per-file fixups have run.
    """

    def __init__(self, world: WorldState):
        self.world = world

    def migrate(self, raw: RawGameState, date: RawDate,
                info: Optional[RawScenarioInfo], layout: ParkLayout, path: str = ""):
        apply_field_map(raw, self.world)
        self.migrate_date(date)
        self.migrate_scenario_info(info)
        self.migrate_scenario_filename(raw, layout, path)
        self.migrate_sprites(raw)
        self.migrate_peep_spawns(raw)
        self.world.finance.cash = decrypt_money(raw.cash)
        self.migrate_park_entrances(raw)
        self.migrate_awards(raw)
        self.migrate_research_items(raw)
        self.migrate_banners(raw)
        self.migrate_map_animations(raw)
        self.migrate_news(raw)
        self.world.rides = migrate_rides(raw.rides)
        self.world.wide_path_tile_loop = (raw.wide_path_tile_loop_x, raw.wide_path_tile_loop_y)
        logger.info(f"Migrated park state: {len(self.world.park.peep_spawns)} spawn slots, "
                    f"{len(self.world.park.entrances)} entrances, cash {self.world.finance.cash}")

    def migrate_date(self, date: RawDate):
        scenario = self.world.scenario
        scenario.elapsed_months = date.elapsed_months
        scenario.current_day = date.current_day
        scenario.ticks = date.scenario_ticks
        scenario.srand = (date.scenario_srand_0, date.scenario_srand_1)

    def migrate_scenario_info(self, info: Optional[RawScenarioInfo]):
        if info is None:
            return
        scenario = self.world.scenario
        scenario.info_name, scenario.info_details = transcode_scenario_text(info.name, info.details)
        scenario.editor_step = info.editor_step
        scenario.category = info.category

    def migrate_scenario_filename(self, raw: RawGameState, layout: ParkLayout, path: str):
        embedded = raw.scenario_filename.decode('latin-1')
        self.world.scenario.embedded_filename = embedded
        # Some expansion scenarios embed the wrong name; trust the real one
        if layout.park_type == ParkType.SCENARIO and path:
            self.world.scenario.filename = PurePath(str(path)).name
        else:
            self.world.scenario.filename = embedded

    def migrate_sprites(self, raw: RawGameState):
        world = self.world
        if world.max_sprites < len(raw.sprites):
            raise ValueError(f"World holds {world.max_sprites} sprites, park has {len(raw.sprites)}")
        for index, src in enumerate(raw.sprites):
            world.sprites[index] = Sprite(
                sprite_identifier=src.sprite_identifier,
                type=src.type,
                next_in_quadrant=src.next_in_quadrant,
                next=src.next,
                previous=src.previous,
                linked_list_index=src.linked_list_type_offset // 2,
                sprite_index=src.sprite_index,
                flags=src.flags,
                x=src.x,
                y=src.y,
                z=src.z,
                peep_state=src.peep_state,
                peep_current_ride=src.peep_current_ride,
                raw=src.raw,
            )
        world.sprite_lists_head = list(raw.sprite_lists_head)
        world.sprite_lists_count = list(raw.sprite_lists_count)
        world.sprite_lists_count[SpriteList.FREE] += world.max_sprites - RCT2_MAX_SPRITES

    def migrate_peep_spawns(self, raw: RawGameState):
        # Every stored slot is kept, undefined ones included, so fixups see slot indices as saved
        self.world.park.peep_spawns = [
            PeepSpawn(spawn.x, spawn.y, spawn.z * PEEP_SPAWN_HEIGHT_SCALE, spawn.direction)
            for spawn in raw.peep_spawns
        ]

    def migrate_park_entrances(self, raw: RawGameState):
        entrances = []
        for i, x in enumerate(raw.park_entrance_x):
            if x == LOCATION_NULL:
                continue
            entrances.append(ParkEntrance(
                x=x,
                y=raw.park_entrance_y[i],
                z=raw.park_entrance_z[i],
                direction=raw.park_entrance_direction[i],
            ))
        self.world.park.entrances = entrances

    def migrate_awards(self, raw: RawGameState):
        self.world.park.awards = [Award(a.time, a.type) for a in raw.awards]

    def migrate_research_items(self, raw: RawGameState):
        self.world.research.items = [ResearchItem(r.raw_value, r.category) for r in raw.research_items]

    def migrate_banners(self, raw: RawGameState):
        self.world.banners = [
            Banner(b.type, b.flags, b.string_idx, b.colour, b.text_colour, b.x, b.y)
            for b in raw.banners
        ]

    def migrate_map_animations(self, raw: RawGameState):
        self.world.map_animations = [
            MapAnimation(a.base_z, a.type, a.x, a.y) for a in raw.map_animations
        ]
        self.world.num_map_animations = raw.num_map_animations

    def migrate_news(self, raw: RawGameState):
        items = self.world.news_items
        for i, src in enumerate(raw.news_items):
            if src.type >= NEWS_TYPE_COUNT:
                logger.error(f"Invalid news type {src.type:#x} for news item {i}, ignoring remaining news items")
                items[i] = NewsItem(type=NEWS_ITEM_NULL)
                break
            items[i] = NewsItem(
                type=src.type,
                flags=src.flags,
                assoc=src.assoc,
                ticks=src.ticks,
                month_year=src.month_year,
                day=src.day,
                text=src.text,
            )
