import logging
import random

import pytest

from franchise_sim.app import (
    _build_parser,
    build_default_ai_teams,
    build_default_game_state,
    build_default_roster,
    format_standings,
    main,
)
from franchise_sim.config import TIER_CONFIGS
from franchise_sim.development import calculate_roster_growth
from franchise_sim.events import apply_event_effects, check_for_events_with_tier, serialize_event
from franchise_sim.logging_config import LOG_FILENAME, setup_logging
from franchise_sim.models import CoachingStaff
from franchise_sim.playoffs import generate_playoff_bracket, simulate_full_playoffs


def test_default_roster_shape() -> None:
    roster = build_default_roster("LOW_A")
    assert len(roster) == 26
    assert sum(1 for p in roster if p.is_pitcher) == 13
    assert len({p.player_id for p in roster}) == 26
    assert len({p.name for p in roster}) == 26
    for player in roster:
        assert 20 <= player.current_rating <= player.potential <= 80
        assert player.tier == "LOW_A"


def test_default_roster_is_deterministic() -> None:
    first = [(p.name, p.current_rating, p.potential) for p in build_default_roster("DOUBLE_A")]
    second = [(p.name, p.current_rating, p.potential) for p in build_default_roster("DOUBLE_A")]
    assert first == second


def test_format_standings_marks_player() -> None:
    _, standings = generate_playoff_bracket("Heroes", 90, 42, build_default_ai_teams(), rng=random.Random(1))
    text = format_standings(standings)
    assert "Heroes" in text
    assert "*" in text
    assert len(text.splitlines()) == 5


@pytest.mark.parametrize("command", ["growth", "playoffs", "events"])
def test_cli_commands_run(command, capsys) -> None:
    assert main(["--seed", "3", command]) == 0
    assert capsys.readouterr().out.strip()


def test_cli_playoffs_prints_champion(capsys) -> None:
    main(["--seed", "11", "playoffs", "--wins", "85", "--losses", "47"])
    out = capsys.readouterr().out
    assert "Champion:" in out
    assert "Finals 1" in out


def test_cli_rejects_empty_season_record(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["playoffs", "--wins", "0", "--losses", "0"])
    assert excinfo.value.code == 2
    assert "0-0" in capsys.readouterr().err


def test_serve_command_runs_api(monkeypatch) -> None:
    args = _build_parser().parse_args(["serve", "--port", "9100"])
    assert (args.command, args.host, args.port) == ("serve", "127.0.0.1", 9100)

    calls = []
    monkeypatch.setattr("franchise_sim.app.uvicorn.run", lambda target, **kwargs: calls.append((target, kwargs)))
    assert main(["serve", "--host", "0.0.0.0"]) == 0
    assert calls == [("franchise_sim.api:app", {"host": "0.0.0.0", "port": 8000, "log_config": None})]


def test_setup_logging_writes_rotating_file(tmp_path) -> None:
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    root.handlers.clear()
    try:
        setup_logging("DEBUG", tmp_path / "logs")
        logging.getLogger("franchise_sim.test").debug("season start")
        for handler in root.handlers:
            handler.flush()
        log_file = tmp_path / "logs" / LOG_FILENAME
        assert log_file.exists()
        assert "season start" in log_file.read_text(encoding="utf-8")
        assert root.level == logging.DEBUG
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


@pytest.mark.regression
def test_seeded_season_is_reproducible() -> None:
    def season(seed: int) -> dict:
        rng = random.Random(seed)
        roster = build_default_roster("HIGH_A")
        growth = calculate_roster_growth(roster, CoachingStaff(60, 55, 50), TIER_CONFIGS, rng=rng)
        bracket, _ = generate_playoff_bracket("Heroes", 78, 54, build_default_ai_teams(), year=2, rng=rng)
        simulate_full_playoffs(bracket, TIER_CONFIGS["HIGH_A"].stadium_capacity, rng=rng)
        state = build_default_game_state("HIGH_A", 78, 54, year=2)
        events = check_for_events_with_tier(state, rng=rng)
        return {
            "growth": [(g.player_id, g.new_rating) for g in growth],
            "bracket": bracket.to_dict(),
            "events": [serialize_event(e) for e in events],
            "effects": apply_event_effects(state, events).to_dict(),
        }

    assert season(2026) == season(2026)
