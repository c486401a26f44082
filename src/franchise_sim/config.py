"""Static simulation configuration constants."""

from __future__ import annotations

from .models import AITeam, TierConfig


TIER_CONFIGS: dict[str, TierConfig] = {
    "LOW_A": TierConfig(
        tier="LOW_A", name="Low-A", rating_min=30, rating_max=55,
        stadium_capacity=2500, season_length=132,
    ),
    "HIGH_A": TierConfig(
        tier="HIGH_A", name="High-A", rating_min=40, rating_max=65,
        stadium_capacity=5000, season_length=132,
    ),
    "DOUBLE_A": TierConfig(
        tier="DOUBLE_A", name="Double-A", rating_min=50, rating_max=72,
        stadium_capacity=10000, season_length=138,
    ),
    "TRIPLE_A": TierConfig(
        tier="TRIPLE_A", name="Triple-A", rating_min=60, rating_max=80,
        stadium_capacity=18000, season_length=144,
    ),
    "MLB": TierConfig(
        tier="MLB", name="MLB", rating_min=70, rating_max=85,
        stadium_capacity=42000, season_length=162,
    ),
}

# Player development.
RATING_MIN = 20
RATING_MAX = 80
BASE_GROWTH_MULTIPLIER = 0.15
AGE_YOUNG_THRESHOLD = 24
AGE_YOUNG_MODIFIER = 1.2
AGE_OLD_THRESHOLD = 28
AGE_OLD_MODIFIER = 0.7
COACHING_MODIFIER_RANGE = 3.0
PLAYING_TIME_MODIFIER_RANGE = 1.5
TIER_APPROPRIATENESS_RANGE = 2.0
TIER_SWEET_SPOT_DISTANCE = 10
TIER_GAP_FOR_FULL_PENALTY = 10
INJURY_PENALTY = -3.0
RANDOM_VARIANCE_PCT = 0.20
MIN_GROWTH = -5.0
MAX_GROWTH = 5.0
DEFAULT_EXPECTED_GAMES = 140

WORK_ETHIC_MODIFIERS: dict[str, float] = {
    "poor": -2.0,
    "average": 0.0,
    "excellent": 2.0,
}

PROMOTION_RATING_CUSHION = 10
PROMOTION_MIN_YEARS_AT_TIER = 1
PROMOTION_MIN_MORALE = 40
PROMOTION_VETERAN_AGE = 23

INJURY_CHANCE_PRONE = 0.20
INJURY_GAMES_MIN = 30
INJURY_GAMES_MAX = 60

RETIREMENT_AGE = 35
RETIREMENT_CHANCE_PER_YEAR = 0.15
DECLINE_AGE = 32
DECLINE_PER_YEAR = 0.5

# Playoffs.
PLAYER_TEAM_ID = "player"
PLAYOFF_TEAMS = 4
SERIES_WINS_NEEDED = 3
MAX_GAMES_IN_SERIES = 5
# Higher seed (team1) hosts games 1, 2 and 5.
TEAM1_HOME_GAMES = frozenset({1, 2, 5})
HOME_FIELD_BONUS = 5.0
GAME_WIN_PROB_MIN = 0.30
GAME_WIN_PROB_MAX = 0.70
PLAYOFF_ATTENDANCE_BOOST = 1.15
INNINGS = 9
AI_WIN_PCT_BASE = 0.35
AI_WIN_PCT_SPAN = 0.35
AI_WIN_PCT_MIN = 0.25
AI_WIN_PCT_MAX = 0.75

# Narrative events.
MAX_EVENTS_PER_SEASON = 3
TIER_EVENT_MULTIPLIERS: dict[str, float] = {
    "LOW_A": 0.7,
    "HIGH_A": 0.85,
    "DOUBLE_A": 1.0,
    "TRIPLE_A": 1.15,
    "MLB": 1.5,
}
MIN_POPULATION = 1000
STADIUM_QUALITY_MIN = 10
STADIUM_QUALITY_MAX = 100

DEFAULT_AI_TEAMS: tuple[AITeam, ...] = (
    AITeam(team_id="steel-city-hammers", city="Steel City", name="Hammers", base_strength=52, variance_multiplier=1.0),
    AITeam(team_id="river-city-rapids", city="River City", name="Rapids", base_strength=48, variance_multiplier=1.3),
    AITeam(team_id="canyon-town-coyotes", city="Canyon Town", name="Coyotes", base_strength=45, variance_multiplier=1.4),
    AITeam(team_id="port-city-sailors", city="Port City", name="Sailors", base_strength=50, variance_multiplier=0.8),
    AITeam(team_id="forest-city-foresters", city="Forest City", name="Foresters", base_strength=51, variance_multiplier=0.7),
    AITeam(team_id="valley-town-vultures", city="Valley Town", name="Vultures", base_strength=49, variance_multiplier=0.75),
    AITeam(team_id="coaltown-miners", city="Coaltown", name="Miners", base_strength=47, variance_multiplier=1.0),
    AITeam(team_id="mountain-town-mountaineers", city="Mountain Town", name="Mountaineers", base_strength=48, variance_multiplier=1.0),
    AITeam(team_id="desert-springs-scorpions", city="Desert Springs", name="Scorpions", base_strength=46, variance_multiplier=1.0),
    AITeam(team_id="lakeside-lakers", city="Lakeside", name="Lakers", base_strength=50, variance_multiplier=1.2),
    AITeam(team_id="bay-city-buccaneers", city="Bay City", name="Buccaneers", base_strength=53, variance_multiplier=0.9),
    AITeam(team_id="prairie-plains-pioneers", city="Prairie Plains", name="Pioneers", base_strength=49, variance_multiplier=1.0),
    AITeam(team_id="summit-heights-hawks", city="Summit Heights", name="Hawks", base_strength=47, variance_multiplier=1.1),
)
