from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field

from .config import (
    GAME_WIN_PROB_MAX,
    GAME_WIN_PROB_MIN,
    HOME_FIELD_BONUS,
    INNINGS,
    PLAYOFF_ATTENDANCE_BOOST,
)
from .models import PlayoffTeam, SimulationInputError

logger = logging.getLogger(__name__)

# Playoff crowds: 85-100% of capacity before the playoff boost.
BASE_ATTENDANCE_PCT = 0.85
ATTENDANCE_SPREAD_PCT = 0.15
LATE_INNING_START = 6


@dataclass(slots=True)
class PlayoffGameResult:
    game_number: int
    home_team_id: str
    away_team_id: str
    home_score: int
    away_score: int
    winner_id: str
    home_line_score: list[int] = field(default_factory=list)
    away_line_score: list[int] = field(default_factory=list)
    attendance: int = 0

    def to_dict(self) -> dict:
        return {
            "game_number": self.game_number,
            "home_team_id": self.home_team_id,
            "away_team_id": self.away_team_id,
            "home_score": self.home_score,
            "away_score": self.away_score,
            "winner_id": self.winner_id,
            "home_line_score": list(self.home_line_score),
            "away_line_score": list(self.away_line_score),
            "attendance": self.attendance,
        }


def _team_strength(team: PlayoffTeam, home: bool) -> float:
    strength = team.win_pct * 100
    if home:
        strength += HOME_FIELD_BONUS
    return strength


def _base_runs(strength: float) -> int:
    return 3 + math.floor(strength / 25)


def _generate_line_score(total_runs: int, rng: random.Random, innings: int = INNINGS) -> list[int]:
    line_score = [0] * innings
    remaining = total_runs
    while remaining > 0:
        inning = math.floor(rng.random() * innings)
        # Late innings get an extra chance to take the run.
        if inning >= LATE_INNING_START and rng.random() > 0.5:
            line_score[inning] += 1
            remaining -= 1
        elif rng.random() > 0.3:
            line_score[inning] += 1
            remaining -= 1
    return line_score


def _attendance(stadium_capacity: int, rng: random.Random) -> int:
    base = math.floor(stadium_capacity * (BASE_ATTENDANCE_PCT + rng.random() * ATTENDANCE_SPREAD_PCT))
    return min(stadium_capacity, math.floor(base * PLAYOFF_ATTENDANCE_BOOST))


def simulate_playoff_game(
    home: PlayoffTeam,
    away: PlayoffTeam,
    game_number: int,
    stadium_capacity: int,
    rng: random.Random | None = None,
) -> PlayoffGameResult:
    if stadium_capacity < 0:
        raise SimulationInputError(f"Stadium capacity must be non-negative, got {stadium_capacity}.")
    rng = rng or random.Random()

    home_strength = _team_strength(home, home=True)
    away_strength = _team_strength(away, home=False)
    win_prob = 0.5 + (home_strength - away_strength) / 100
    win_prob = max(GAME_WIN_PROB_MIN, min(GAME_WIN_PROB_MAX, win_prob))

    home_wins = rng.random() < win_prob

    if home_wins:
        home_score = _base_runs(home_strength) + math.floor(rng.random() * 4)
        away_score = max(0, home_score - 1 - math.floor(rng.random() * 3))
    else:
        away_score = _base_runs(away_strength) + math.floor(rng.random() * 4)
        home_score = max(0, away_score - 1 - math.floor(rng.random() * 3))

    # No ties in the playoffs.
    if home_score == away_score:
        if home_wins:
            home_score += 1
        else:
            away_score += 1

    winner_id = home.team_id if home_score > away_score else away.team_id
    home_line_score = _generate_line_score(home_score, rng)
    away_line_score = _generate_line_score(away_score, rng)
    attendance = _attendance(stadium_capacity, rng)

    logger.debug(
        "Playoff game %d: %s %d @ %s %d (attendance %d)",
        game_number,
        away.name,
        away_score,
        home.name,
        home_score,
        attendance,
    )
    return PlayoffGameResult(
        game_number=game_number,
        home_team_id=home.team_id,
        away_team_id=away.team_id,
        home_score=home_score,
        away_score=away_score,
        winner_id=winner_id,
        home_line_score=home_line_score,
        away_line_score=away_line_score,
        attendance=attendance,
    )
