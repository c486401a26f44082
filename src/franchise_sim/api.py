from __future__ import annotations

import logging
import random
from dataclasses import asdict
from typing import Any, Callable, TypeVar

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from .app import build_default_ai_teams
from .config import DEFAULT_EXPECTED_GAMES, TIER_CONFIGS
from .development import (
    age_player,
    calculate_growth,
    check_promotion_readiness,
    simulate_injury,
)
from .events import (
    GameState,
    apply_event_effects,
    check_for_events,
    check_for_events_with_tier,
    get_event,
    serialize_event,
)
from .models import (
    AITeam,
    CoachingStaff,
    HiddenTraits,
    Player,
    PlayoffTeam,
    SimulationInputError,
    get_tier_config,
    next_tier,
)
from .playoffs import (
    PlayoffSeries,
    generate_playoff_bracket,
    simulate_full_playoffs,
    simulate_next_series_game,
    simulate_playoff_series,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HiddenTraitsSelection(BaseModel):
    work_ethic: str = "average"
    injury_prone: bool = False


class PlayerSelection(BaseModel):
    player_id: str
    age: int
    current_rating: int
    potential: int
    tier: str
    player_type: str = "HITTER"
    hidden_traits: HiddenTraitsSelection = HiddenTraitsSelection()
    morale: int = 50
    confidence: int = 50
    is_injured: bool = False
    games_played: int = 0
    years_at_tier: int = 0
    name: str = ""
    position: str = ""

    def to_player(self) -> Player:
        return Player(
            player_id=self.player_id,
            age=self.age,
            current_rating=self.current_rating,
            potential=self.potential,
            tier=self.tier,
            player_type=self.player_type,
            hidden_traits=HiddenTraits(
                work_ethic=self.hidden_traits.work_ethic,
                injury_prone=self.hidden_traits.injury_prone,
            ),
            morale=self.morale,
            confidence=self.confidence,
            is_injured=self.is_injured,
            games_played=self.games_played,
            years_at_tier=self.years_at_tier,
            name=self.name,
            position=self.position,
        )


class CoachingSelection(BaseModel):
    hitting: float = 50.0
    pitching: float = 50.0
    development: float = 50.0


class GrowthSelection(BaseModel):
    players: list[PlayerSelection]
    coaching: CoachingSelection = CoachingSelection()
    expected_games: int = DEFAULT_EXPECTED_GAMES
    seed: int | None = None


class PromotionSelection(BaseModel):
    player: PlayerSelection
    next_tier: str | None = None
    previous_year_rating: int | None = None


class PlayerRollSelection(BaseModel):
    player: PlayerSelection
    seed: int | None = None


class AITeamSelection(BaseModel):
    team_id: str
    city: str
    name: str
    base_strength: float = 50.0
    variance_multiplier: float = 1.0


class BracketSelection(BaseModel):
    team_name: str
    wins: int
    losses: int
    year: int = 0
    ai_teams: list[AITeamSelection] | None = None
    simulate: bool = False
    stadium_capacity: int | None = None
    tier: str = "LOW_A"
    seed: int | None = None


class PlayoffTeamSelection(BaseModel):
    team_id: str
    name: str
    seed: int
    wins: int = 0
    losses: int = 0
    win_pct: float = 0.5


class SeriesSelection(BaseModel):
    round: str = "semifinals"
    series_number: int = 1
    team1: PlayoffTeamSelection
    team2: PlayoffTeamSelection
    team1_wins: int = 0
    team2_wins: int = 0
    stadium_capacity: int
    seed: int | None = None

    def to_series(self) -> PlayoffSeries:
        return PlayoffSeries(
            round=self.round,
            series_number=self.series_number,
            team1=PlayoffTeam(**self.team1.model_dump()),
            team2=PlayoffTeam(**self.team2.model_dump()),
            team1_wins=self.team1_wins,
            team2_wins=self.team2_wins,
            status="in_progress" if self.team1_wins or self.team2_wins else "pending",
        )


class GameStateSelection(BaseModel):
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

    def to_game_state(self) -> GameState:
        return GameState(**self.model_dump())


class EventsCheckSelection(BaseModel):
    game_state: GameStateSelection
    apply_tier_filter: bool = True
    seed: int | None = None


class EventsApplySelection(BaseModel):
    game_state: GameStateSelection
    event_keys: list[str] = []


def _run(call: Callable[[], T]) -> T:
    try:
        return call()
    except SimulationInputError as exc:
        logger.warning("Rejected request: %s", exc)
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _growth(payload: GrowthSelection) -> dict[str, Any]:
    rng = random.Random(payload.seed)
    coaching = CoachingStaff(**payload.coaching.model_dump())
    results = []
    for selection in payload.players:
        player = selection.to_player()
        result = calculate_growth(
            player, coaching, player.games_played, TIER_CONFIGS, expected_games=payload.expected_games, rng=rng
        )
        results.append(asdict(result))
    return {"ok": True, "results": results}


def _promotion(payload: PromotionSelection) -> dict[str, Any]:
    player = payload.player.to_player()
    target = payload.next_tier or next_tier(player.tier)
    if target is None:
        raise SimulationInputError(f"{player.player_id} is already at the top tier.")
    readiness = check_promotion_readiness(player, target, TIER_CONFIGS, payload.previous_year_rating)
    return {
        "ok": True,
        "next_tier": target,
        "is_ready": readiness.is_ready,
        "reasons": readiness.reasons,
        "risks": readiness.risks,
    }


def _bracket(payload: BracketSelection) -> dict[str, Any]:
    rng = random.Random(payload.seed)
    if payload.ai_teams is None:
        ai_teams = build_default_ai_teams()
    else:
        ai_teams = [AITeam(**team.model_dump()) for team in payload.ai_teams]
    bracket, standings = generate_playoff_bracket(
        payload.team_name, payload.wins, payload.losses, ai_teams, year=payload.year, rng=rng
    )
    if payload.simulate:
        capacity = payload.stadium_capacity
        if capacity is None:
            capacity = get_tier_config(TIER_CONFIGS, payload.tier).stadium_capacity
        simulate_full_playoffs(bracket, capacity, rng=rng)
    return {
        "ok": True,
        "standings": [s.to_dict() for s in standings],
        "bracket": bracket.to_dict(),
    }


def _check_events(payload: EventsCheckSelection) -> dict[str, Any]:
    rng = random.Random(payload.seed)
    state = payload.game_state.to_game_state()
    check = check_for_events_with_tier if payload.apply_tier_filter else check_for_events
    fired = check(state, rng=rng)
    return {
        "ok": True,
        "events": [serialize_event(event) for event in fired],
        "effects": apply_event_effects(state, fired).to_dict(),
    }


def _apply_events(payload: EventsApplySelection) -> dict[str, Any]:
    state = payload.game_state.to_game_state()
    events = [get_event(key) for key in payload.event_keys]
    return {
        "ok": True,
        "events": [serialize_event(event) for event in events],
        "effects": apply_event_effects(state, events).to_dict(),
    }


app = FastAPI(title="Franchise Sim API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/api/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/api/development/growth")
def growth(payload: GrowthSelection) -> dict[str, Any]:
    return _run(lambda: _growth(payload))


@app.post("/api/development/promotion-readiness")
def promotion_readiness(payload: PromotionSelection) -> dict[str, Any]:
    return _run(lambda: _promotion(payload))


@app.post("/api/development/injury")
def injury(payload: PlayerRollSelection) -> dict[str, Any]:
    def roll() -> dict[str, Any]:
        result = simulate_injury(payload.player.to_player(), rng=random.Random(payload.seed))
        return {"ok": True, "is_injured": result.is_injured, "games_lost": result.games_lost}

    return _run(roll)


@app.post("/api/development/age")
def age(payload: PlayerRollSelection) -> dict[str, Any]:
    def roll() -> dict[str, Any]:
        result = age_player(payload.player.to_player(), rng=random.Random(payload.seed))
        return {
            "ok": True,
            "new_age": result.new_age,
            "is_retiring": result.is_retiring,
            "decline_modifier": result.decline_modifier,
            "retirement_chance": result.retirement_chance,
        }

    return _run(roll)


@app.post("/api/playoffs/bracket")
def playoff_bracket(payload: BracketSelection) -> dict[str, Any]:
    return _run(lambda: _bracket(payload))


@app.post("/api/playoffs/series/next-game")
def series_next_game(payload: SeriesSelection) -> dict[str, Any]:
    def play() -> dict[str, Any]:
        result = simulate_next_series_game(
            payload.to_series(), payload.stadium_capacity, rng=random.Random(payload.seed)
        )
        return {"ok": True, **result.to_dict()}

    return _run(play)


@app.post("/api/playoffs/series/simulate")
def series_simulate(payload: SeriesSelection) -> dict[str, Any]:
    def play() -> dict[str, Any]:
        result = simulate_playoff_series(
            payload.to_series(), payload.stadium_capacity, rng=random.Random(payload.seed)
        )
        return {"ok": True, **result.to_dict()}

    return _run(play)


@app.post("/api/events/check")
def events_check(payload: EventsCheckSelection) -> dict[str, Any]:
    return _run(lambda: _check_events(payload))


@app.post("/api/events/apply")
def events_apply(payload: EventsApplySelection) -> dict[str, Any]:
    return _run(lambda: _apply_events(payload))
