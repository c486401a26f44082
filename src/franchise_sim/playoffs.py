from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Sequence

from .config import (
    AI_WIN_PCT_BASE,
    AI_WIN_PCT_MAX,
    AI_WIN_PCT_MIN,
    AI_WIN_PCT_SPAN,
    MAX_GAMES_IN_SERIES,
    PLAYER_TEAM_ID,
    PLAYOFF_TEAMS,
    SERIES_WINS_NEEDED,
    TEAM1_HOME_GAMES,
)
from .engine import PlayoffGameResult, simulate_playoff_game
from .models import AITeam, PlayoffTeam, SimulationInputError

logger = logging.getLogger(__name__)

BRACKET_STATUSES = ("pending", "semifinals", "finals", "complete")
SERIES_STATUSES = {"pending", "in_progress", "complete"}
ROUNDS = {"semifinals", "finals"}


@dataclass(slots=True)
class PlayoffStanding:
    team_id: str
    team_name: str
    wins: int
    losses: int
    win_pct: float
    is_player: bool = False

    def to_dict(self) -> dict:
        return {
            "team_id": self.team_id,
            "team_name": self.team_name,
            "wins": self.wins,
            "losses": self.losses,
            "win_pct": self.win_pct,
            "is_player": self.is_player,
        }


@dataclass(slots=True)
class PlayoffSeries:
    round: str
    series_number: int
    team1: PlayoffTeam
    team2: PlayoffTeam
    team1_wins: int = 0
    team2_wins: int = 0
    status: str = "pending"
    winner_id: str | None = None
    winner_name: str | None = None
    games: list[PlayoffGameResult] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.round not in ROUNDS:
            raise SimulationInputError(f"Unknown playoff round {self.round!r}.")
        if self.status not in SERIES_STATUSES:
            raise SimulationInputError(f"Unknown series status {self.status!r}.")

    @property
    def is_complete(self) -> bool:
        return self.status == "complete"

    @property
    def games_played(self) -> int:
        return self.team1_wins + self.team2_wins

    def winner_team(self) -> PlayoffTeam | None:
        if self.winner_id is None:
            return None
        if self.winner_id == self.team1.team_id:
            return self.team1
        if self.winner_id == self.team2.team_id:
            return self.team2
        raise SimulationInputError(f"Series winner {self.winner_id!r} is not in the series.")

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "series_number": self.series_number,
            "team1": self.team1.to_dict(),
            "team2": self.team2.to_dict(),
            "team1_wins": self.team1_wins,
            "team2_wins": self.team2_wins,
            "status": self.status,
            "winner_id": self.winner_id,
            "winner_name": self.winner_name,
            "games": [g.to_dict() for g in self.games],
        }


@dataclass(slots=True)
class PlayoffBracket:
    semifinals: list[PlayoffSeries]
    finals: PlayoffSeries | None = None
    status: str = "pending"
    champion_team_id: str | None = None
    champion_team_name: str | None = None
    year: int = 0

    def to_dict(self) -> dict:
        return {
            "year": self.year,
            "status": self.status,
            "champion_team_id": self.champion_team_id,
            "champion_team_name": self.champion_team_name,
            "semifinals": [s.to_dict() for s in self.semifinals],
            "finals": self.finals.to_dict() if self.finals is not None else None,
        }


@dataclass(slots=True)
class SeriesResult:
    winner_id: str
    winner_name: str
    team1_wins: int
    team2_wins: int
    games: list[PlayoffGameResult] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "winner_id": self.winner_id,
            "winner_name": self.winner_name,
            "team1_wins": self.team1_wins,
            "team2_wins": self.team2_wins,
            "games": [g.to_dict() for g in self.games],
        }


@dataclass(slots=True)
class NextGameResult:
    game: PlayoffGameResult
    new_team1_wins: int
    new_team2_wins: int
    is_series_complete: bool
    winner_id: str | None = None
    winner_name: str | None = None

    def to_dict(self) -> dict:
        return {
            "game": self.game.to_dict(),
            "new_team1_wins": self.new_team1_wins,
            "new_team2_wins": self.new_team2_wins,
            "is_series_complete": self.is_series_complete,
            "winner_id": self.winner_id,
            "winner_name": self.winner_name,
        }


def _ai_win_pct(team: AITeam, rng: random.Random) -> float:
    base = AI_WIN_PCT_BASE + (team.base_strength / 100) * AI_WIN_PCT_SPAN
    variance = (rng.random() - 0.5) * team.variance_multiplier * 0.2
    return max(AI_WIN_PCT_MIN, min(AI_WIN_PCT_MAX, base + variance))


def rank_league_standings(
    player_team_name: str,
    player_wins: int,
    player_losses: int,
    ai_teams: Sequence[AITeam],
    rng: random.Random | None = None,
) -> list[PlayoffStanding]:
    total_games = player_wins + player_losses
    if player_wins < 0 or player_losses < 0 or total_games <= 0:
        raise SimulationInputError(
            f"Season record {player_wins}-{player_losses} has no games to rank."
        )
    rng = rng or random.Random()

    standings = [
        PlayoffStanding(
            team_id=PLAYER_TEAM_ID,
            team_name=player_team_name,
            wins=player_wins,
            losses=player_losses,
            win_pct=player_wins / total_games,
            is_player=True,
        )
    ]
    for team in ai_teams:
        win_pct = _ai_win_pct(team, rng)
        wins = math.floor(win_pct * total_games + 0.5)
        standings.append(
            PlayoffStanding(
                team_id=team.team_id,
                team_name=team.full_name,
                wins=wins,
                losses=total_games - wins,
                win_pct=win_pct,
            )
        )
    # Stable sort keeps the player ahead of AI teams on equal percentages.
    return sorted(standings, key=lambda s: s.win_pct, reverse=True)


def generate_playoff_standings(
    player_team_name: str,
    player_wins: int,
    player_losses: int,
    ai_teams: Sequence[AITeam],
    rng: random.Random | None = None,
) -> list[PlayoffStanding]:
    if len(ai_teams) < PLAYOFF_TEAMS - 1:
        raise SimulationInputError(
            f"Need at least {PLAYOFF_TEAMS - 1} AI teams to fill the playoffs, got {len(ai_teams)}."
        )
    ranked = rank_league_standings(player_team_name, player_wins, player_losses, ai_teams, rng)
    qualifiers = ranked[:PLAYOFF_TEAMS]
    if not any(s.is_player for s in qualifiers):
        player = next(s for s in ranked if s.is_player)
        qualifiers = ranked[: PLAYOFF_TEAMS - 1] + [player]
    return qualifiers


def _playoff_team(standing: PlayoffStanding, seed: int) -> PlayoffTeam:
    return PlayoffTeam(
        team_id=standing.team_id,
        name=standing.team_name,
        seed=seed,
        wins=standing.wins,
        losses=standing.losses,
        win_pct=standing.win_pct,
    )


def bracket_from_standings(standings: Sequence[PlayoffStanding], year: int = 0) -> PlayoffBracket:
    if len(standings) != PLAYOFF_TEAMS:
        raise SimulationInputError(f"A bracket needs exactly {PLAYOFF_TEAMS} standings, got {len(standings)}.")
    seeds = [_playoff_team(standing, seed) for seed, standing in enumerate(standings, start=1)]
    return PlayoffBracket(
        semifinals=[
            PlayoffSeries(round="semifinals", series_number=1, team1=seeds[0], team2=seeds[3]),
            PlayoffSeries(round="semifinals", series_number=2, team1=seeds[1], team2=seeds[2]),
        ],
        status="semifinals",
        year=year,
    )


def generate_playoff_bracket(
    player_team_name: str,
    player_wins: int,
    player_losses: int,
    ai_teams: Sequence[AITeam],
    year: int = 0,
    rng: random.Random | None = None,
) -> tuple[PlayoffBracket, list[PlayoffStanding]]:
    standings = generate_playoff_standings(player_team_name, player_wins, player_losses, ai_teams, rng)
    bracket = bracket_from_standings(standings, year=year)
    logger.info(
        "Playoff bracket %d: %s",
        year,
        ", ".join(f"{seed}. {s.team_name}" for seed, s in enumerate(standings, start=1)),
    )
    return bracket, standings


def series_home_team(game_number: int, team1: PlayoffTeam, team2: PlayoffTeam) -> PlayoffTeam:
    if not 1 <= game_number <= MAX_GAMES_IN_SERIES:
        raise SimulationInputError(f"Game number {game_number} is outside a best-of-{MAX_GAMES_IN_SERIES}.")
    return team1 if game_number in TEAM1_HOME_GAMES else team2


def _matchup(series: PlayoffSeries, game_number: int) -> tuple[PlayoffTeam, PlayoffTeam]:
    home = series_home_team(game_number, series.team1, series.team2)
    away = series.team2 if home is series.team1 else series.team1
    return home, away


def _series_winner(series: PlayoffSeries, team1_wins: int, team2_wins: int) -> PlayoffTeam | None:
    if team1_wins >= SERIES_WINS_NEEDED:
        return series.team1
    if team2_wins >= SERIES_WINS_NEEDED:
        return series.team2
    return None


def simulate_playoff_series(
    series: PlayoffSeries,
    stadium_capacity: int,
    rng: random.Random | None = None,
) -> SeriesResult:
    rng = rng or random.Random()
    games: list[PlayoffGameResult] = []
    team1_wins = series.team1_wins
    team2_wins = series.team2_wins
    game_number = team1_wins + team2_wins + 1

    while (
        team1_wins < SERIES_WINS_NEEDED
        and team2_wins < SERIES_WINS_NEEDED
        and game_number <= MAX_GAMES_IN_SERIES
    ):
        home, away = _matchup(series, game_number)
        game = simulate_playoff_game(home, away, game_number, stadium_capacity, rng)
        games.append(game)
        if game.winner_id == series.team1.team_id:
            team1_wins += 1
        else:
            team2_wins += 1
        game_number += 1

    winner = _series_winner(series, team1_wins, team2_wins) or series.team2
    logger.info(
        "%s series %d: %s wins %d-%d",
        series.round.capitalize(),
        series.series_number,
        winner.name,
        max(team1_wins, team2_wins),
        min(team1_wins, team2_wins),
    )
    return SeriesResult(
        winner_id=winner.team_id,
        winner_name=winner.name,
        team1_wins=team1_wins,
        team2_wins=team2_wins,
        games=games,
    )


def simulate_next_series_game(
    series: PlayoffSeries,
    stadium_capacity: int,
    rng: random.Random | None = None,
) -> NextGameResult:
    if _series_winner(series, series.team1_wins, series.team2_wins) is not None:
        raise SimulationInputError(f"Series {series.series_number} is already decided.")
    game_number = series.games_played + 1
    home, away = _matchup(series, game_number)
    game = simulate_playoff_game(home, away, game_number, stadium_capacity, rng)

    new_team1_wins = series.team1_wins + (1 if game.winner_id == series.team1.team_id else 0)
    new_team2_wins = series.team2_wins + (1 if game.winner_id == series.team2.team_id else 0)
    winner = _series_winner(series, new_team1_wins, new_team2_wins)
    return NextGameResult(
        game=game,
        new_team1_wins=new_team1_wins,
        new_team2_wins=new_team2_wins,
        is_series_complete=winner is not None,
        winner_id=winner.team_id if winner else None,
        winner_name=winner.name if winner else None,
    )


def _close_if_decided(series: PlayoffSeries) -> None:
    winner = _series_winner(series, series.team1_wins, series.team2_wins)
    if winner is None:
        series.status = "in_progress" if series.games else "pending"
        return
    series.status = "complete"
    series.winner_id = winner.team_id
    series.winner_name = winner.name


def record_series_game(series: PlayoffSeries, game: PlayoffGameResult) -> PlayoffSeries:
    if series.is_complete:
        raise SimulationInputError(f"Series {series.series_number} is already complete.")
    if game.winner_id == series.team1.team_id:
        series.team1_wins += 1
    elif game.winner_id == series.team2.team_id:
        series.team2_wins += 1
    else:
        raise SimulationInputError(f"Game winner {game.winner_id!r} is not in series {series.series_number}.")
    series.games.append(game)
    _close_if_decided(series)
    return series


def apply_series_result(series: PlayoffSeries, result: SeriesResult) -> PlayoffSeries:
    series.games.extend(result.games)
    series.team1_wins = result.team1_wins
    series.team2_wins = result.team2_wins
    _close_if_decided(series)
    return series


def generate_finals_series(winner_a: PlayoffTeam, winner_b: PlayoffTeam) -> PlayoffSeries:
    # Lower seed number is the better seed and gets home field.
    team1, team2 = (winner_a, winner_b) if winner_a.seed < winner_b.seed else (winner_b, winner_a)
    return PlayoffSeries(
        round="finals",
        series_number=1,
        team1=PlayoffTeam(team_id=team1.team_id, name=team1.name, seed=team1.seed, win_pct=team1.win_pct),
        team2=PlayoffTeam(team_id=team2.team_id, name=team2.name, seed=team2.seed, win_pct=team2.win_pct),
    )


def _decided_winner(series: PlayoffSeries) -> PlayoffTeam:
    winner = series.winner_team()
    if winner is None:
        raise SimulationInputError(f"Completed {series.round} series {series.series_number} has no winner.")
    return winner


def advance_bracket(bracket: PlayoffBracket) -> PlayoffBracket:
    if bracket.status not in BRACKET_STATUSES:
        raise SimulationInputError(f"Unknown bracket status {bracket.status!r}.")
    if len(bracket.semifinals) != 2:
        raise SimulationInputError(f"A bracket needs two semifinal series, got {len(bracket.semifinals)}.")

    if bracket.status == "pending":
        bracket.status = "semifinals"

    if bracket.status == "semifinals" and all(s.is_complete for s in bracket.semifinals):
        first, second = bracket.semifinals
        bracket.finals = generate_finals_series(_decided_winner(first), _decided_winner(second))
        bracket.status = "finals"

    if bracket.status == "finals":
        if bracket.finals is None:
            raise SimulationInputError("Bracket is in the finals but has no finals series.")
        if bracket.finals.is_complete:
            champion = _decided_winner(bracket.finals)
            bracket.champion_team_id = champion.team_id
            bracket.champion_team_name = champion.name
            bracket.status = "complete"
            logger.info("%d champion: %s", bracket.year, champion.name)

    return bracket


def simulate_full_playoffs(
    bracket: PlayoffBracket,
    stadium_capacity: int,
    rng: random.Random | None = None,
) -> PlayoffBracket:
    rng = rng or random.Random()
    advance_bracket(bracket)
    while bracket.status != "complete":
        if bracket.status == "semifinals":
            pending = [s for s in bracket.semifinals if not s.is_complete]
        else:
            pending = [bracket.finals] if bracket.finals is not None else []
        for series in pending:
            apply_series_result(series, simulate_playoff_series(series, stadium_capacity, rng))
        advance_bracket(bracket)
    return bracket


def did_player_make_playoffs(standings: Sequence[PlayoffStanding]) -> bool:
    return any(s.is_player for s in standings[:PLAYOFF_TEAMS])


def get_player_seed(standings: Sequence[PlayoffStanding]) -> int | None:
    for seed, standing in enumerate(standings[:PLAYOFF_TEAMS], start=1):
        if standing.is_player:
            return seed
    return None


def are_playoffs_complete(bracket: PlayoffBracket) -> bool:
    return bracket.status == "complete" and bracket.champion_team_id is not None


def did_player_win_championship(bracket: PlayoffBracket) -> bool:
    return bracket.champion_team_id == PLAYER_TEAM_ID
