from __future__ import annotations

from dataclasses import dataclass, field
from typing import Mapping

TIER_ORDER: tuple[str, ...] = ("LOW_A", "HIGH_A", "DOUBLE_A", "TRIPLE_A", "MLB")
PLAYER_TYPES = {"HITTER", "PITCHER"}
WORK_ETHICS = {"poor", "average", "excellent"}

HITTER_POSITIONS = {"C", "1B", "2B", "3B", "SS", "LF", "CF", "RF", "DH"}
PITCHER_POSITIONS = {"SP", "RP"}


class SimulationInputError(ValueError):
    """Raised when the caller hands the engines malformed input."""


def validate_tier(tier: str) -> str:
    if tier not in TIER_ORDER:
        raise SimulationInputError(f"Unknown tier {tier!r}; expected one of {', '.join(TIER_ORDER)}.")
    return tier


def tier_rank(tier: str) -> int:
    return TIER_ORDER.index(validate_tier(tier))


def next_tier(tier: str) -> str | None:
    rank = tier_rank(tier)
    if rank + 1 >= len(TIER_ORDER):
        return None
    return TIER_ORDER[rank + 1]


@dataclass(slots=True, frozen=True)
class TierConfig:
    tier: str
    name: str
    rating_min: int
    rating_max: int
    stadium_capacity: int = 0
    season_length: int = 140

    @property
    def midpoint(self) -> float:
        return (self.rating_min + self.rating_max) / 2

    def contains(self, rating: float) -> bool:
        return self.rating_min <= rating <= self.rating_max


def get_tier_config(tier_configs: Mapping[str, TierConfig], tier: str) -> TierConfig:
    config = tier_configs.get(tier)
    if config is None:
        raise SimulationInputError(f"No tier configuration for {tier!r}.")
    return config


@dataclass(slots=True)
class HiddenTraits:
    work_ethic: str = "average"
    injury_prone: bool = False

    def __post_init__(self) -> None:
        if self.work_ethic not in WORK_ETHICS:
            raise SimulationInputError(f"Unknown work ethic {self.work_ethic!r}.")


@dataclass(slots=True)
class Player:
    player_id: str
    age: int
    current_rating: int
    potential: int
    tier: str
    player_type: str = "HITTER"
    hidden_traits: HiddenTraits = field(default_factory=HiddenTraits)
    morale: int = 50
    confidence: int = 50
    is_injured: bool = False
    injury_games_remaining: int = 0
    games_played: int = 0
    years_at_tier: int = 0
    name: str = ""
    position: str = ""

    def __post_init__(self) -> None:
        validate_tier(self.tier)
        if self.player_type not in PLAYER_TYPES:
            raise SimulationInputError(f"{self.player_id} has unknown player type {self.player_type!r}.")
        if self.position and self.position not in HITTER_POSITIONS | PITCHER_POSITIONS:
            raise SimulationInputError(f"{self.player_id} has unknown position {self.position!r}.")

    @property
    def is_pitcher(self) -> bool:
        return self.player_type == "PITCHER"


@dataclass(slots=True, frozen=True)
class CoachingStaff:
    hitting: float = 50.0
    pitching: float = 50.0
    development: float = 50.0

    def relevant_skill(self, player_type: str) -> float:
        return self.pitching if player_type == "PITCHER" else self.hitting


@dataclass(slots=True, frozen=True)
class AITeam:
    team_id: str
    city: str
    name: str
    base_strength: float = 50.0
    variance_multiplier: float = 1.0

    @property
    def full_name(self) -> str:
        return f"{self.city} {self.name}"


@dataclass(slots=True)
class PlayoffTeam:
    team_id: str
    name: str
    seed: int
    wins: int = 0
    losses: int = 0
    win_pct: float = 0.0

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "name": self.name,
            "seed": self.seed,
            "wins": self.wins,
            "losses": self.losses,
            "win_pct": self.win_pct,
        }
