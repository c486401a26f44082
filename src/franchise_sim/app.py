from __future__ import annotations

import argparse
import random
from typing import Iterable, Sequence

import uvicorn

from .config import DEFAULT_AI_TEAMS, TIER_CONFIGS
from .development import GrowthResult, calculate_roster_growth
from .events import EventEffectsSummary, GameState, NarrativeEvent, apply_event_effects, check_for_events_with_tier
from .logging_config import setup_logging
from .models import TIER_ORDER, AITeam, CoachingStaff, HiddenTraits, Player, SimulationInputError, get_tier_config
from .names import NameGenerator
from .playoffs import (
    PlayoffBracket,
    PlayoffSeries,
    PlayoffStanding,
    did_player_win_championship,
    generate_playoff_bracket,
    get_player_seed,
    simulate_full_playoffs,
)

HITTER_SLOTS = ["C", "C", "1B", "2B", "3B", "SS", "SS", "LF", "CF", "CF", "RF", "DH", "1B"]
PITCHER_SLOTS = ["SP", "SP", "SP", "SP", "SP", "RP", "RP", "RP", "RP", "RP", "RP", "RP", "RP"]

# (weight, low, high) share of the tier band a prospect's potential lands in.
POTENTIAL_PLAN: tuple[tuple[float, float, float], ...] = (
    (0.10, 0.85, 1.00),
    (0.30, 0.65, 0.85),
    (0.60, 0.40, 0.65),
)
WORK_ETHIC_WEIGHTS: tuple[tuple[str, float], ...] = (("poor", 0.2), ("average", 0.6), ("excellent", 0.2))


def _sample_potential(rng: random.Random) -> float:
    roll = rng.random()
    cumulative = 0.0
    for weight, low, high in POTENTIAL_PLAN:
        cumulative += weight
        if roll <= cumulative:
            return rng.uniform(low, high)
    return rng.uniform(POTENTIAL_PLAN[-1][1], POTENTIAL_PLAN[-1][2])


def _sample_work_ethic(rng: random.Random) -> str:
    roll = rng.random()
    cumulative = 0.0
    for ethic, weight in WORK_ETHIC_WEIGHTS:
        cumulative += weight
        if roll <= cumulative:
            return ethic
    return "average"


def build_default_roster(tier: str = "LOW_A", seed: int = 7) -> list[Player]:
    tier_config = get_tier_config(TIER_CONFIGS, tier)
    rng = random.Random(f"roster:{tier}:{seed}")
    name_gen = NameGenerator(seed=seed)
    roster: list[Player] = []
    slots = [("HITTER", pos) for pos in HITTER_SLOTS] + [("PITCHER", pos) for pos in PITCHER_SLOTS]
    for idx, (player_type, position) in enumerate(slots, start=1):
        current = rng.randint(tier_config.rating_min - 5, tier_config.rating_min + 10)
        ceiling = 80 - current
        potential = current + int(round(ceiling * _sample_potential(rng)))
        roster.append(
            Player(
                player_id=f"p{idx:03d}",
                name=name_gen.next_name(),
                position=position,
                age=rng.randint(19, 27),
                current_rating=max(20, min(80, current)),
                potential=max(20, min(80, potential)),
                tier=tier,
                player_type=player_type,
                hidden_traits=HiddenTraits(
                    work_ethic=_sample_work_ethic(rng),
                    injury_prone=rng.random() < 0.15,
                ),
                morale=rng.randint(40, 75),
                games_played=rng.randint(60, tier_config.season_length),
                years_at_tier=rng.randint(0, 2),
            )
        )
    return roster


def build_default_coaching_staff() -> CoachingStaff:
    return CoachingStaff(hitting=55.0, pitching=50.0, development=45.0)


def build_default_ai_teams() -> list[AITeam]:
    return list(DEFAULT_AI_TEAMS)


def build_default_game_state(tier: str = "LOW_A", wins: int = 72, losses: int = 60, year: int = 1) -> GameState:
    tier_config = get_tier_config(TIER_CONFIGS, tier)
    games = wins + losses
    return GameState(
        tier=tier,
        year=year,
        wins=wins,
        losses=losses,
        win_percentage=wins / games if games else 0.0,
        population=50000,
        unemployment_rate=7.5,
        team_pride=50.0,
        stadium_quality=45.0,
        reserves=250000.0,
        stadium_capacity=tier_config.stadium_capacity,
    )


def format_growth_report(players: Iterable[Player], results: Iterable[GrowthResult]) -> str:
    by_id = {player.player_id: player for player in players}
    lines = ["Player                Pos Age  Old  New  Chg   Base   Age  Coach  Time  Tier  Ethic  Inj"]
    for result in sorted(results, key=lambda r: r.rating_change, reverse=True):
        player = by_id.get(result.player_id)
        name = player.name if player else result.player_id
        position = player.position if player else ""
        age = player.age if player else 0
        lines.append(
            f"{name:<21} {position:<3} {age:>3} {result.previous_rating:>4} {result.new_rating:>4}"
            f" {result.rating_change:>+4} {result.base_growth:>6.2f} {result.age_modifier:>5.2f}"
            f" {result.coaching_modifier:>6.2f} {result.playing_time_modifier:>5.2f}"
            f" {result.tier_appropriateness_modifier:>5.2f} {result.work_ethic_modifier:>6.2f}"
            f" {result.injury_modifier:>4.1f}"
        )
    return "\n".join(lines)


def format_standings(standings: Sequence[PlayoffStanding]) -> str:
    lines = ["Seed Team                          W    L   Pct"]
    for seed, standing in enumerate(standings, start=1):
        marker = "*" if standing.is_player else " "
        lines.append(
            f"{seed:>4} {standing.team_name:<28}{marker} {standing.wins:>3} {standing.losses:>4}"
            f" {standing.win_pct:.3f}"
        )
    return "\n".join(lines)


def _format_series(series: PlayoffSeries) -> list[str]:
    lines = [
        f"{series.round.capitalize()} {series.series_number}: ({series.team1.seed}) {series.team1.name}"
        f" vs ({series.team2.seed}) {series.team2.name}  [{series.team1_wins}-{series.team2_wins}]"
    ]
    for game in series.games:
        lines.append(
            f"  Game {game.game_number}: {game.away_team_id} {game.away_score} @ {game.home_team_id}"
            f" {game.home_score}  ({game.attendance:,} fans)"
        )
    if series.winner_name:
        lines.append(f"  Winner: {series.winner_name}")
    return lines


def format_bracket(bracket: PlayoffBracket) -> str:
    lines = [f"Playoffs {bracket.year} ({bracket.status})"]
    for series in bracket.semifinals:
        lines.extend(_format_series(series))
    if bracket.finals is not None:
        lines.extend(_format_series(bracket.finals))
    if bracket.champion_team_name:
        lines.append(f"Champion: {bracket.champion_team_name}")
    return "\n".join(lines)


def format_events(events: Sequence[NarrativeEvent], summary: EventEffectsSummary) -> str:
    if not events:
        lines = ["A quiet year: no headlines."]
    else:
        lines = [f"[{event.event_type}] {event.title}: {event.description}" for event in events]
    lines.append(
        f"Pride {summary.new_pride:.0f}, population {summary.new_population:,},"
        f" stadium {summary.new_stadium_quality:.0f}, attendance x{summary.attendance_multiplier:.2f},"
        f" revenue x{summary.revenue_multiplier:.2f}, merchandise x{summary.merchandise_multiplier:.2f},"
        f" maintenance ${summary.total_maintenance_cost:,.0f}, morale {summary.morale_change:+.0f}"
    )
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="franchise-sim", description="Run one season engine on default data.")
    parser.add_argument("--seed", type=int, default=None, help="Seed for reproducible results")
    parser.add_argument("--log-level", default=None, help="Overrides FRANCHISE_SIM_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    growth = sub.add_parser("growth", help="Develop the default roster for one season")
    growth.add_argument("--tier", choices=TIER_ORDER, default="LOW_A")

    playoffs = sub.add_parser("playoffs", help="Seed and play a four-team playoff")
    playoffs.add_argument("--team-name", default="Home Town Heroes")
    playoffs.add_argument("--wins", type=int, default=80)
    playoffs.add_argument("--losses", type=int, default=52)
    playoffs.add_argument("--tier", choices=TIER_ORDER, default="LOW_A")

    events = sub.add_parser("events", help="Roll the season's narrative events")
    events.add_argument("--tier", choices=TIER_ORDER, default="LOW_A")
    events.add_argument("--wins", type=int, default=72)
    events.add_argument("--losses", type=int, default=60)

    serve = sub.add_parser("serve", help="Serve the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    setup_logging(args.log_level)

    if args.command == "serve":
        # log_config=None keeps the handlers installed above.
        uvicorn.run("franchise_sim.api:app", host=args.host, port=args.port, log_config=None)
        return 0

    try:
        _run_command(args)
    except SimulationInputError as exc:
        parser.error(str(exc))
    return 0


def _run_command(args: argparse.Namespace) -> None:
    rng = random.Random(args.seed)

    if args.command == "growth":
        roster = build_default_roster(args.tier)
        results = calculate_roster_growth(roster, build_default_coaching_staff(), TIER_CONFIGS, rng=rng)
        print(format_growth_report(roster, results))
    elif args.command == "playoffs":
        bracket, standings = generate_playoff_bracket(
            args.team_name, args.wins, args.losses, build_default_ai_teams(), rng=rng
        )
        print(format_standings(standings))
        capacity = get_tier_config(TIER_CONFIGS, args.tier).stadium_capacity
        simulate_full_playoffs(bracket, capacity, rng=rng)
        print(format_bracket(bracket))
        if did_player_win_championship(bracket):
            print(f"{args.team_name} win it all as the No. {get_player_seed(standings)} seed!")
    else:
        state = build_default_game_state(args.tier, args.wins, args.losses)
        fired = check_for_events_with_tier(state, rng=rng)
        print(format_events(fired, apply_event_effects(state, fired)))


if __name__ == "__main__":
    raise SystemExit(main())
