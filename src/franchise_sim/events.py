from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping

from .config import (
    MAX_EVENTS_PER_SEASON,
    MIN_POPULATION,
    STADIUM_QUALITY_MAX,
    STADIUM_QUALITY_MIN,
    TIER_EVENT_MULTIPLIERS,
)
from .models import SimulationInputError, validate_tier

logger = logging.getLogger(__name__)

EVENT_TYPES = {"economic", "team", "city", "story"}
MODIFIER_KEYS = frozenset({"attendance_modifier", "revenue_modifier", "merchandise_modifier"})
DELTA_KEYS = frozenset(
    {"pride_change", "population_change", "stadium_quality_change", "morale_change", "maintenance_cost"}
)


@dataclass(slots=True, frozen=True)
class NarrativeEvent:
    key: str
    event_type: str
    title: str
    description: str
    effects: Mapping[str, float] = field(default_factory=dict, hash=False)
    duration_years: int | None = None

    def __post_init__(self) -> None:
        if self.event_type not in EVENT_TYPES:
            raise SimulationInputError(f"Unknown event type {self.event_type!r}.")
        unknown = set(self.effects) - MODIFIER_KEYS - DELTA_KEYS
        if unknown:
            raise SimulationInputError(f"Event {self.key!r} has unknown effect keys: {sorted(unknown)}.")
        object.__setattr__(self, "effects", MappingProxyType(dict(self.effects)))


def _catalog(*events: NarrativeEvent) -> Mapping[str, NarrativeEvent]:
    return MappingProxyType({event.key: event for event in events})


ECONOMIC_EVENTS = _catalog(
    NarrativeEvent(
        key="factory_closure",
        event_type="economic",
        title="Factory Closure Rocks City",
        description=(
            "The largest employer in town has announced layoffs, hitting the local economy hard. "
            "Fans are tightening their belts, and attendance is expected to drop."
        ),
        effects={"attendance_modifier": 0.85, "pride_change": -5, "population_change": -500},
        duration_years=2,
    ),
    NarrativeEvent(
        key="economic_boom",
        event_type="economic",
        title="New Business Opens Downtown",
        description=(
            "A major company has chosen our city for their new headquarters! "
            "Jobs are flowing in and the economy is booming."
        ),
        effects={
            "attendance_modifier": 1.10,
            "pride_change": 5,
            "population_change": 1000,
            "revenue_modifier": 1.05,
        },
        duration_years=3,
    ),
    NarrativeEvent(
        key="recession_warning",
        event_type="economic",
        title="Economic Uncertainty Looms",
        description=(
            "Local economists are warning of a potential downturn. "
            "Discretionary spending is already showing signs of decline."
        ),
        effects={"merchandise_modifier": 0.90, "attendance_modifier": 0.95},
        duration_years=1,
    ),
)

TEAM_EVENTS = _catalog(
    NarrativeEvent(
        key="city_fever",
        event_type="team",
        title="City Catches Baseball Fever!",
        description=(
            "The team's winning ways have captured the city's imagination! "
            "Merchandise is flying off the shelves and everyone is talking about the team."
        ),
        effects={"merchandise_modifier": 1.25, "pride_change": 10, "attendance_modifier": 1.15},
        duration_years=1,
    ),
    NarrativeEvent(
        key="playoff_push",
        event_type="team",
        title="Playoff Push Ignites Fanbase",
        description=(
            "With a playoff berth on the line, the city has rallied behind the team. "
            "Late-season attendance is through the roof!"
        ),
        effects={"attendance_modifier": 1.20, "merchandise_modifier": 1.15, "pride_change": 8},
        duration_years=1,
    ),
    NarrativeEvent(
        key="losing_skid",
        event_type="team",
        title="Fans Growing Restless",
        description=(
            "A disappointing season has fans questioning the direction of the franchise. "
            "Attendance has started to slip."
        ),
        effects={"attendance_modifier": 0.90, "pride_change": -8, "morale_change": -10},
        duration_years=1,
    ),
    NarrativeEvent(
        key="star_breakout",
        event_type="team",
        title="Homegrown Star Emerges",
        description=(
            "A player from our own development system has broken out into stardom! "
            "The whole city is talking about our future."
        ),
        effects={"pride_change": 12, "merchandise_modifier": 1.20, "morale_change": 15},
        duration_years=1,
    ),
)

CITY_EVENTS = _catalog(
    NarrativeEvent(
        key="stadium_decay",
        event_type="city",
        title="Stadium Shows Its Age",
        description=(
            "Maintenance crews have reported significant wear on stadium infrastructure. "
            "Immediate repairs are needed to keep the facility safe."
        ),
        effects={"stadium_quality_change": -8, "maintenance_cost": 50000, "attendance_modifier": 0.95},
        duration_years=0,  # one-time
    ),
    NarrativeEvent(
        key="stadium_renovation",
        event_type="city",
        title="Stadium Renovation Complete",
        description=(
            "The recently completed stadium upgrades have fans buzzing! "
            "New amenities and improved sightlines are drawing praise."
        ),
        effects={"stadium_quality_change": 15, "attendance_modifier": 1.10, "pride_change": 5},
        duration_years=2,
    ),
    NarrativeEvent(
        key="community_day",
        event_type="city",
        title="Community Appreciation Day Success",
        description=(
            "The team's community outreach program has strengthened ties with local residents. "
            "Goodwill is at an all-time high."
        ),
        effects={"pride_change": 8, "attendance_modifier": 1.05},
        duration_years=1,
    ),
)

STORY_EVENTS = _catalog(
    NarrativeEvent(
        key="dynasty_building",
        event_type="story",
        title="A Dynasty in the Making",
        description=(
            "Sports writers are calling this the start of something special. "
            "Multiple winning seasons have put the franchise on the national radar."
        ),
        effects={"pride_change": 15, "merchandise_modifier": 1.30, "attendance_modifier": 1.15},
        duration_years=2,
    ),
    NarrativeEvent(
        key="dark_days",
        event_type="story",
        title="Dark Days for the Franchise",
        description=(
            "Years of losing have taken their toll. "
            "The few remaining loyal fans wonder if better days will ever come."
        ),
        effects={"pride_change": -15, "attendance_modifier": 0.80, "morale_change": -15},
        duration_years=1,
    ),
    NarrativeEvent(
        key="turnaround_begins",
        event_type="story",
        title="The Turnaround Begins",
        description=(
            "After years of struggle, there's finally hope. "
            "This winning season has renewed faith in the franchise's future."
        ),
        effects={"pride_change": 12, "morale_change": 20, "attendance_modifier": 1.10},
        duration_years=1,
    ),
)

EVENT_CATALOG: Mapping[str, NarrativeEvent] = MappingProxyType(
    {**ECONOMIC_EVENTS, **TEAM_EVENTS, **CITY_EVENTS, **STORY_EVENTS}
)


def get_event(key: str) -> NarrativeEvent:
    event = EVENT_CATALOG.get(key)
    if event is None:
        raise SimulationInputError(f"Unknown narrative event {key!r}.")
    return event


@dataclass(slots=True)
class GameState:
    tier: str
    year: int = 1
    wins: int = 0
    losses: int = 0
    win_percentage: float = 0.0
    made_playoffs: bool = False
    won_division: bool = False
    population: int = 50000
    unemployment_rate: float = 7.0
    team_pride: float = 50.0
    median_income: float = 45000.0
    stadium_quality: float = 50.0
    reserves: float = 0.0
    total_attendance: int = 0
    stadium_capacity: int = 0
    consecutive_winning_seasons: int = 0
    consecutive_division_titles: int = 0

    def __post_init__(self) -> None:
        validate_tier(self.tier)


@dataclass(slots=True)
class EventEffectsSummary:
    new_pride: float
    new_population: int
    new_stadium_quality: float
    attendance_multiplier: float = 1.0
    revenue_multiplier: float = 1.0
    merchandise_multiplier: float = 1.0
    total_maintenance_cost: float = 0.0
    morale_change: float = 0.0

    def to_dict(self) -> dict:
        return {
            "new_pride": self.new_pride,
            "new_population": self.new_population,
            "new_stadium_quality": self.new_stadium_quality,
            "attendance_multiplier": self.attendance_multiplier,
            "revenue_multiplier": self.revenue_multiplier,
            "merchandise_multiplier": self.merchandise_multiplier,
            "total_maintenance_cost": self.total_maintenance_cost,
            "morale_change": self.morale_change,
        }


def _stadium_decay_chance(state: GameState) -> float:
    return 0.15 if state.stadium_quality < 40 else 0.05


# (event key, chance of firing or None when the gate is closed), in evaluation order.
TRIGGERS: tuple[tuple[str, Callable[[GameState], float | None]], ...] = (
    ("factory_closure", lambda s: 0.40 if s.unemployment_rate > 12 else None),
    ("economic_boom", lambda s: 0.25 if s.unemployment_rate < 6 and s.team_pride > 60 else None),
    ("recession_warning", lambda s: 0.20 if 8 < s.unemployment_rate <= 12 else None),
    ("city_fever", lambda s: 0.30 + (s.win_percentage - 0.600) * 2 if s.win_percentage > 0.600 else None),
    ("playoff_push", lambda s: 0.50 if s.made_playoffs and s.win_percentage > 0.550 else None),
    ("losing_skid", lambda s: 0.35 if s.win_percentage < 0.400 else None),
    ("star_breakout", lambda s: 0.15 if s.win_percentage > 0.550 and s.team_pride > 50 else None),
    ("stadium_decay", _stadium_decay_chance),
    (
        "stadium_renovation",
        lambda s: 0.10 if s.reserves > 200000 and 40 <= s.stadium_quality < 70 else None,
    ),
    ("community_day", lambda s: 0.20 if 45 < s.team_pride < 75 else None),
    ("dynasty_building", lambda s: 0.40 if s.consecutive_winning_seasons >= 3 else None),
    ("dark_days", lambda s: 0.30 if s.win_percentage < 0.350 and s.team_pride < 30 else None),
    ("turnaround_begins", lambda s: 0.35 if s.win_percentage > 0.500 and s.team_pride < 40 else None),
)


def check_for_events(game_state: GameState, rng: random.Random | None = None) -> list[NarrativeEvent]:
    rng = rng or random.Random()
    fired: list[NarrativeEvent] = []
    for key, chance_for in TRIGGERS:
        chance = chance_for(game_state)
        if chance is None:
            continue
        if rng.random() < chance:
            fired.append(EVENT_CATALOG[key])
    selected = fired[:MAX_EVENTS_PER_SEASON]
    if selected:
        logger.info("Year %d events: %s", game_state.year, ", ".join(e.title for e in selected))
    return selected


def get_tier_event_multiplier(tier: str) -> float:
    return TIER_EVENT_MULTIPLIERS[validate_tier(tier)]


def check_for_events_with_tier(game_state: GameState, rng: random.Random | None = None) -> list[NarrativeEvent]:
    # Second pass: each fired event survives with probability equal to the tier multiplier.
    rng = rng or random.Random()
    multiplier = get_tier_event_multiplier(game_state.tier)
    events = check_for_events(game_state, rng)
    kept = [event for event in events if rng.random() < multiplier]
    if len(kept) < len(events):
        logger.debug("Tier %s filter dropped %d event(s)", game_state.tier, len(events) - len(kept))
    return kept


def combine_modifiers(events: Iterable[NarrativeEvent], key: str) -> float:
    if key not in MODIFIER_KEYS:
        raise SimulationInputError(f"{key!r} is not a modifier key.")
    combined = 1.0
    for event in events:
        value = event.effects.get(key)
        if value is not None:
            combined *= value
    return combined


def sum_changes(events: Iterable[NarrativeEvent], key: str) -> float:
    if key not in DELTA_KEYS:
        raise SimulationInputError(f"{key!r} is not a delta key.")
    total = 0
    for event in events:
        value = event.effects.get(key)
        if value is not None:
            total += value
    return total


def apply_event_effects(game_state: GameState, events: Iterable[NarrativeEvent]) -> EventEffectsSummary:
    events = list(events)
    pride = game_state.team_pride + sum_changes(events, "pride_change")
    population = game_state.population + sum_changes(events, "population_change")
    stadium_quality = game_state.stadium_quality + sum_changes(events, "stadium_quality_change")
    return EventEffectsSummary(
        new_pride=max(0, min(100, pride)),
        new_population=max(MIN_POPULATION, population),
        new_stadium_quality=max(STADIUM_QUALITY_MIN, min(STADIUM_QUALITY_MAX, stadium_quality)),
        attendance_multiplier=combine_modifiers(events, "attendance_modifier"),
        revenue_multiplier=combine_modifiers(events, "revenue_modifier"),
        merchandise_multiplier=combine_modifiers(events, "merchandise_modifier"),
        total_maintenance_cost=sum_changes(events, "maintenance_cost"),
        morale_change=sum_changes(events, "morale_change"),
    )


def serialize_event(event: NarrativeEvent) -> dict:
    return {
        "key": event.key,
        "type": event.event_type,
        "title": event.title,
        "description": event.description,
        "effects": dict(event.effects),
        "duration_years": event.duration_years,
    }
