import random

import pytest

from franchise_sim.config import DEFAULT_AI_TEAMS, PLAYER_TEAM_ID
from franchise_sim.engine import PlayoffGameResult
from franchise_sim.models import AITeam, PlayoffTeam, SimulationInputError
from franchise_sim.playoffs import (
    PlayoffSeries,
    advance_bracket,
    apply_series_result,
    are_playoffs_complete,
    did_player_make_playoffs,
    did_player_win_championship,
    generate_finals_series,
    generate_playoff_bracket,
    generate_playoff_standings,
    get_player_seed,
    rank_league_standings,
    record_series_game,
    series_home_team,
    simulate_full_playoffs,
    simulate_next_series_game,
    simulate_playoff_series,
)


def _team(team_id: str, seed: int, win_pct: float = 0.5) -> PlayoffTeam:
    return PlayoffTeam(team_id=team_id, name=team_id.title(), seed=seed, wins=0, losses=0, win_pct=win_pct)


def _series(team1_win_pct: float = 0.5, team2_win_pct: float = 0.5, **overrides) -> PlayoffSeries:
    kwargs = {
        "round": "semifinals",
        "series_number": 1,
        "team1": _team("alpha", 1, team1_win_pct),
        "team2": _team("omega", 4, team2_win_pct),
    }
    kwargs.update(overrides)
    return PlayoffSeries(**kwargs)


def _game(winner_id: str, game_number: int = 1) -> PlayoffGameResult:
    return PlayoffGameResult(
        game_number=game_number,
        home_team_id="alpha",
        away_team_id="omega",
        home_score=3 if winner_id == "alpha" else 1,
        away_score=1 if winner_id == "alpha" else 3,
        winner_id=winner_id,
    )


def test_standings_always_four_sorted_with_player() -> None:
    for seed in range(40):
        for wins, losses in ((10, 122), (66, 66), (120, 12)):
            standings = generate_playoff_standings(
                "Home Town Heroes", wins, losses, DEFAULT_AI_TEAMS, rng=random.Random(seed)
            )
            assert len(standings) == 4
            pcts = [s.win_pct for s in standings]
            assert pcts == sorted(pcts, reverse=True)
            assert did_player_make_playoffs(standings)


def test_bad_record_takes_last_berth_and_great_record_is_top_seed() -> None:
    bad = generate_playoff_standings("Heroes", 10, 122, DEFAULT_AI_TEAMS, rng=random.Random(1))
    assert get_player_seed(bad) == 4
    assert bad[3].team_id == PLAYER_TEAM_ID

    great = generate_playoff_standings("Heroes", 120, 12, DEFAULT_AI_TEAMS, rng=random.Random(1))
    assert get_player_seed(great) == 1


def test_ai_half_wins_round_up(scripted) -> None:
    # Weakest team at the 0.25 floor over a 2-game season: 0.5 wins -> 1.
    weak = [AITeam(team_id=f"ai{i}", city="Nowhere", name=f"Team {i}", base_strength=0.0) for i in range(3)]
    table = rank_league_standings("Heroes", 1, 1, weak, rng=scripted(fallback=0.0))
    for standing in table[1:]:
        assert standing.win_pct == 0.25
        assert (standing.wins, standing.losses) == (1, 1)


def test_full_table_keeps_every_team() -> None:
    table = rank_league_standings("Heroes", 10, 122, DEFAULT_AI_TEAMS, rng=random.Random(8))
    assert len(table) == len(DEFAULT_AI_TEAMS) + 1
    assert table[-1].is_player
    assert did_player_make_playoffs(table) is False
    assert get_player_seed(table) is None
    for standing in table:
        assert standing.wins + standing.losses == 132


def test_ai_win_pct_is_clamped(scripted) -> None:
    juggernaut = AITeam(team_id="j", city="Big", name="Juggernauts", base_strength=100, variance_multiplier=10)
    table = rank_league_standings("Heroes", 50, 50, [juggernaut], rng=scripted([0.999]))
    assert table[0].team_id == "j"
    assert table[0].win_pct == 0.75
    assert table[0].wins == 75


def test_standings_reject_malformed_input() -> None:
    with pytest.raises(SimulationInputError):
        rank_league_standings("Heroes", 0, 0, DEFAULT_AI_TEAMS)
    with pytest.raises(SimulationInputError):
        generate_playoff_standings("Heroes", 70, 62, DEFAULT_AI_TEAMS[:2])


def test_bracket_seeds_one_v_four_and_two_v_three() -> None:
    bracket, standings = generate_playoff_bracket("Heroes", 80, 52, DEFAULT_AI_TEAMS, year=3, rng=random.Random(4))
    first, second = bracket.semifinals
    assert bracket.status == "semifinals"
    assert bracket.finals is None
    assert bracket.year == 3
    assert (first.team1.seed, first.team2.seed) == (1, 4)
    assert (second.team1.seed, second.team2.seed) == (2, 3)
    assert first.team1.team_id == standings[0].team_id
    assert first.team2.team_id == standings[3].team_id
    assert first.status == "pending" and second.status == "pending"


def test_home_field_pattern() -> None:
    team1 = _team("alpha", 1)
    team2 = _team("omega", 4)
    homes = [series_home_team(n, team1, team2).team_id for n in range(1, 6)]
    assert homes == ["alpha", "alpha", "omega", "omega", "alpha"]
    with pytest.raises(SimulationInputError):
        series_home_team(6, team1, team2)


def test_three_game_sweep(scripted) -> None:
    series = _series(0.7, 0.3)
    result = simulate_playoff_series(series, 5000, rng=scripted(fallback=0.5))
    assert len(result.games) == 3
    assert result.team1_wins == 3
    assert result.team2_wins == 0
    assert result.winner_id == "alpha"
    assert [g.home_team_id for g in result.games] == ["alpha", "alpha", "omega"]


def test_series_always_terminates_with_one_winner() -> None:
    rng = random.Random(99)
    for _ in range(200):
        result = simulate_playoff_series(_series(0.55, 0.48), 8000, rng=rng)
        assert 3 <= len(result.games) <= 5
        assert max(result.team1_wins, result.team2_wins) == 3
        assert min(result.team1_wins, result.team2_wins) < 3
        assert [g.game_number for g in result.games] == list(range(1, len(result.games) + 1))


def test_series_resumes_from_current_count() -> None:
    series = _series(team1_wins=2, team2_wins=1, status="in_progress")
    result = simulate_playoff_series(series, 3000, rng=random.Random(6))
    assert result.games[0].game_number == 4
    assert result.team1_wins + result.team2_wins == 3 + len(result.games)
    assert series.games == []


def test_next_game_plays_deciding_game_five() -> None:
    series = _series(team1_wins=2, team2_wins=2, status="in_progress")
    outcome = simulate_next_series_game(series, 3000, rng=random.Random(3))
    assert outcome.game.game_number == 5
    assert outcome.game.home_team_id == "alpha"
    assert outcome.is_series_complete is True
    assert outcome.winner_id in {"alpha", "omega"}
    assert outcome.new_team1_wins + outcome.new_team2_wins == 5


def test_next_game_reports_open_series() -> None:
    outcome = simulate_next_series_game(_series(), 3000, rng=random.Random(3))
    assert outcome.game.game_number == 1
    assert outcome.is_series_complete is False
    assert outcome.winner_id is None


def test_next_game_rejects_decided_series() -> None:
    with pytest.raises(SimulationInputError):
        simulate_next_series_game(_series(team1_wins=3), 3000, rng=random.Random(3))


def test_record_series_game_moves_status_forward() -> None:
    series = _series()
    record_series_game(series, _game("alpha", 1))
    assert series.status == "in_progress"
    record_series_game(series, _game("alpha", 2))
    record_series_game(series, _game("alpha", 3))
    assert series.status == "complete"
    assert series.winner_id == "alpha"
    assert series.winner_name == "Alpha"
    with pytest.raises(SimulationInputError):
        record_series_game(series, _game("alpha", 4))


def test_record_series_game_rejects_outsider() -> None:
    with pytest.raises(SimulationInputError):
        record_series_game(_series(), _game("stranger"))


def test_apply_series_result_completes_series() -> None:
    series = _series()
    result = simulate_playoff_series(series, 3000, rng=random.Random(11))
    apply_series_result(series, result)
    assert series.is_complete
    assert series.winner_id == result.winner_id
    assert len(series.games) == len(result.games)


def test_finals_gives_better_seed_home_field() -> None:
    finals = generate_finals_series(_team("four", 4, 0.6), _team("two", 2, 0.55))
    assert finals.round == "finals"
    assert finals.team1.team_id == "two"
    assert finals.team2.team_id == "four"
    assert finals.team1.win_pct == 0.55
    assert finals.status == "pending"


def test_advance_waits_for_both_semifinals() -> None:
    bracket, _ = generate_playoff_bracket("Heroes", 80, 52, DEFAULT_AI_TEAMS, rng=random.Random(2))
    bracket.status = "pending"
    advance_bracket(bracket)
    assert bracket.status == "semifinals"

    first = bracket.semifinals[0]
    apply_series_result(first, simulate_playoff_series(first, 2500, rng=random.Random(2)))
    advance_bracket(bracket)
    assert bracket.status == "semifinals"
    assert bracket.finals is None


def test_full_playoffs_crown_a_champion() -> None:
    bracket, standings = generate_playoff_bracket("Heroes", 80, 52, DEFAULT_AI_TEAMS, rng=random.Random(5))
    simulate_full_playoffs(bracket, 2500, rng=random.Random(5))
    assert are_playoffs_complete(bracket)
    assert bracket.finals is not None
    assert bracket.finals.team1.seed < bracket.finals.team2.seed
    semifinal_winners = {s.winner_id for s in bracket.semifinals}
    assert {bracket.finals.team1.team_id, bracket.finals.team2.team_id} == semifinal_winners
    assert bracket.champion_team_id == bracket.finals.winner_id
    assert did_player_win_championship(bracket) == (bracket.champion_team_id == PLAYER_TEAM_ID)

    advance_bracket(bracket)
    assert bracket.status == "complete"


def test_player_championship_query() -> None:
    bracket, _ = generate_playoff_bracket("Heroes", 80, 52, DEFAULT_AI_TEAMS, rng=random.Random(5))
    assert are_playoffs_complete(bracket) is False
    bracket.status = "complete"
    bracket.champion_team_id = PLAYER_TEAM_ID
    assert did_player_win_championship(bracket)
