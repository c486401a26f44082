import random

import pytest

from franchise_sim.engine import _attendance, simulate_playoff_game
from franchise_sim.models import PlayoffTeam, SimulationInputError


def _team(team_id: str, win_pct: float, seed: int = 1) -> PlayoffTeam:
    return PlayoffTeam(team_id=team_id, name=team_id.title(), seed=seed, wins=0, losses=0, win_pct=win_pct)


def test_playoff_games_never_tie() -> None:
    rng = random.Random(2024)
    home = _team("home", 0.52)
    away = _team("away", 0.61, seed=2)
    for game_number in range(1, 301):
        game = simulate_playoff_game(home, away, game_number % 5 + 1, 10000, rng=rng)
        assert game.home_score != game.away_score
        expected = home.team_id if game.home_score > game.away_score else away.team_id
        assert game.winner_id == expected


def test_line_scores_add_up() -> None:
    rng = random.Random(77)
    for _ in range(100):
        game = simulate_playoff_game(_team("a", 0.6), _team("b", 0.45, seed=4), 1, 5000, rng=rng)
        assert len(game.home_line_score) == 9
        assert len(game.away_line_score) == 9
        assert sum(game.home_line_score) == game.home_score
        assert sum(game.away_line_score) == game.away_score
        assert all(runs >= 0 for runs in game.home_line_score + game.away_line_score)


def test_attendance_never_exceeds_capacity() -> None:
    rng = random.Random(5)
    for capacity in (0, 2500, 18000, 42000):
        for _ in range(50):
            game = simulate_playoff_game(_team("a", 0.5), _team("b", 0.5, seed=2), 2, capacity, rng=rng)
            assert 0 <= game.attendance <= capacity


def test_win_probability_is_clamped(scripted) -> None:
    strong = _team("strong", 1.0)
    weak = _team("weak", 0.0, seed=4)
    assert simulate_playoff_game(strong, weak, 1, 1000, rng=scripted([0.69])).winner_id == "strong"
    assert simulate_playoff_game(strong, weak, 1, 1000, rng=scripted([0.71])).winner_id == "weak"


def test_scripted_game_scores(scripted) -> None:
    home = _team("home", 0.60)
    away = _team("away", 0.60, seed=2)
    # Home wins the roll, scores 3 + 65 // 25 = 5, away trails by one.
    game = simulate_playoff_game(home, away, 1, 4000, rng=scripted([0.0, 0.0, 0.0]))
    assert game.home_score == 5
    assert game.away_score == 4
    assert game.winner_id == "home"


def test_negative_capacity_is_rejected() -> None:
    with pytest.raises(SimulationInputError):
        simulate_playoff_game(_team("a", 0.5), _team("b", 0.5, seed=2), 1, -1, rng=random.Random(1))


def test_playoff_attendance_boost(scripted) -> None:
    # 85% floor crowd, then the 1.15 playoff boost.
    assert _attendance(10000, scripted([0.0])) == 9775
    assert _attendance(10000, scripted([0.999])) == 10000
    assert _attendance(0, scripted([0.5])) == 0


def test_game_attendance_is_last_draw(scripted) -> None:
    # Win roll, two score draws, then 5 runs for home and 4 for away placed in
    # inning 1 on one draw pair each, then attendance.
    draws = [0.0, 0.0, 0.0] + [0.0, 0.9] * 9 + [0.0]
    game = simulate_playoff_game(_team("home", 0.60), _team("away", 0.60, seed=2), 1, 10000, rng=scripted(draws))
    assert game.home_line_score[0] == 5
    assert game.away_line_score[0] == 4
    assert game.attendance == 9775
