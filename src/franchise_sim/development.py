from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass, field, replace
from typing import Iterable, Mapping

from .config import (
    AGE_OLD_MODIFIER,
    AGE_OLD_THRESHOLD,
    AGE_YOUNG_MODIFIER,
    AGE_YOUNG_THRESHOLD,
    BASE_GROWTH_MULTIPLIER,
    COACHING_MODIFIER_RANGE,
    DECLINE_AGE,
    DECLINE_PER_YEAR,
    DEFAULT_EXPECTED_GAMES,
    INJURY_CHANCE_PRONE,
    INJURY_GAMES_MAX,
    INJURY_GAMES_MIN,
    INJURY_PENALTY,
    MAX_GROWTH,
    MIN_GROWTH,
    PLAYING_TIME_MODIFIER_RANGE,
    PROMOTION_MIN_MORALE,
    PROMOTION_MIN_YEARS_AT_TIER,
    PROMOTION_RATING_CUSHION,
    PROMOTION_VETERAN_AGE,
    RANDOM_VARIANCE_PCT,
    RATING_MAX,
    RATING_MIN,
    RETIREMENT_AGE,
    RETIREMENT_CHANCE_PER_YEAR,
    TIER_APPROPRIATENESS_RANGE,
    TIER_GAP_FOR_FULL_PENALTY,
    TIER_SWEET_SPOT_DISTANCE,
    WORK_ETHIC_MODIFIERS,
)
from .models import CoachingStaff, Player, TierConfig, get_tier_config

logger = logging.getLogger(__name__)

SKILL_MIDPOINT = 50.0
SKILL_HALF_SPAN = 30.0


@dataclass(slots=True)
class GrowthResult:
    player_id: str
    previous_rating: int
    new_rating: int
    rating_change: int
    base_growth: float
    age_modifier: float
    coaching_modifier: float
    playing_time_modifier: float
    tier_appropriateness_modifier: float
    work_ethic_modifier: float
    injury_modifier: float
    pre_variance_total: float
    random_variance: float


@dataclass(slots=True)
class PromotionReadiness:
    is_ready: bool
    reasons: list[str] = field(default_factory=list)
    risks: list[str] = field(default_factory=list)


@dataclass(slots=True, frozen=True)
class PromotionEffects:
    confidence_change: int
    morale_change: int
    potential_change: int


@dataclass(slots=True, frozen=True)
class InjuryResult:
    is_injured: bool
    games_lost: int = 0


@dataclass(slots=True, frozen=True)
class AgingResult:
    new_age: int
    is_retiring: bool
    decline_modifier: float
    retirement_chance: float = 0.0


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def _sign(value: float) -> int:
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def age_modifier(age: int) -> float:
    if age < AGE_YOUNG_THRESHOLD:
        return AGE_YOUNG_MODIFIER
    if age > AGE_OLD_THRESHOLD:
        return AGE_OLD_MODIFIER
    return 1.0


def coaching_modifier(coaching: CoachingStaff, player_type: str) -> float:
    # 20 skill -> -3, 50 -> 0, 80 -> +3
    avg_skill = coaching.relevant_skill(player_type) * 0.5 + coaching.development * 0.5
    return (avg_skill - SKILL_MIDPOINT) / SKILL_HALF_SPAN * COACHING_MODIFIER_RANGE


def playing_time_modifier(games_played: int, expected_games: int = DEFAULT_EXPECTED_GAMES) -> float:
    if expected_games == 0:
        return 0.0
    playing_time_pct = games_played / expected_games
    return (playing_time_pct - 0.5) * 2 * PLAYING_TIME_MODIFIER_RANGE


def tier_appropriateness_modifier(current_rating: float, tier_config: TierConfig) -> float:
    if tier_config.contains(current_rating):
        if abs(current_rating - tier_config.midpoint) <= TIER_SWEET_SPOT_DISTANCE:
            return TIER_APPROPRIATENESS_RANGE
        return TIER_APPROPRIATENESS_RANGE * 0.5

    if current_rating < tier_config.rating_min:
        # Promoted too early: the bigger the gap the harsher the penalty.
        gap = tier_config.rating_min - current_rating
        return -TIER_APPROPRIATENESS_RANGE * min(1.0, gap / TIER_GAP_FOR_FULL_PENALTY)

    # Held back too long.
    gap = current_rating - tier_config.rating_max
    return -TIER_APPROPRIATENESS_RANGE * 0.5 * min(1.0, gap / TIER_GAP_FOR_FULL_PENALTY)


def work_ethic_modifier(work_ethic: str) -> float:
    return WORK_ETHIC_MODIFIERS[work_ethic]


def calculate_growth(
    player: Player,
    coaching: CoachingStaff,
    games_played_this_season: int,
    tier_configs: Mapping[str, TierConfig],
    expected_games: int = DEFAULT_EXPECTED_GAMES,
    rng: random.Random | None = None,
) -> GrowthResult:
    rng = rng or random.Random()
    tier_config = get_tier_config(tier_configs, player.tier)

    base_growth = (player.potential - player.current_rating) * BASE_GROWTH_MULTIPLIER
    age_mod = age_modifier(player.age)
    coaching_mod = coaching_modifier(coaching, player.player_type)
    playing_time_mod = playing_time_modifier(games_played_this_season, expected_games)
    tier_mod = tier_appropriateness_modifier(player.current_rating, tier_config)
    work_ethic_mod = work_ethic_modifier(player.hidden_traits.work_ethic)
    injury_mod = INJURY_PENALTY if player.is_injured else 0.0

    total = base_growth * age_mod + coaching_mod + playing_time_mod + tier_mod + work_ethic_mod + injury_mod

    # Variance scales the magnitude only, so it never flips the direction of growth.
    variance = (rng.random() * 2 - 1) * RANDOM_VARIANCE_PCT
    varied = abs(total) * (1 + variance) * _sign(total)
    delta = _clamp(varied, MIN_GROWTH, MAX_GROWTH)

    # Halves round up, not to even.
    new_rating = int(_clamp(math.floor(player.current_rating + delta + 0.5), RATING_MIN, RATING_MAX))
    result = GrowthResult(
        player_id=player.player_id,
        previous_rating=player.current_rating,
        new_rating=new_rating,
        rating_change=new_rating - player.current_rating,
        base_growth=base_growth,
        age_modifier=age_mod,
        coaching_modifier=coaching_mod,
        playing_time_modifier=playing_time_mod,
        tier_appropriateness_modifier=tier_mod,
        work_ethic_modifier=work_ethic_mod,
        injury_modifier=injury_mod,
        pre_variance_total=total,
        random_variance=delta - total,
    )
    logger.debug(
        "Growth %s: %d -> %d (pre-variance %.2f, delta %.2f)",
        player.player_id,
        result.previous_rating,
        result.new_rating,
        total,
        delta,
    )
    return result


def calculate_roster_growth(
    players: Iterable[Player],
    coaching: CoachingStaff,
    tier_configs: Mapping[str, TierConfig],
    rng: random.Random | None = None,
) -> list[GrowthResult]:
    rng = rng or random.Random()
    results = [
        calculate_growth(player, coaching, player.games_played, tier_configs, rng=rng)
        for player in players
    ]
    logger.info(
        "Roster growth for %d players (net change %+d)",
        len(results),
        sum(r.rating_change for r in results),
    )
    return results


def check_promotion_readiness(
    player: Player,
    next_tier: str,
    tier_configs: Mapping[str, TierConfig],
    previous_year_rating: int | None = None,
) -> PromotionReadiness:
    reasons: list[str] = []
    risks: list[str] = []

    threshold = get_tier_config(tier_configs, next_tier).rating_min + PROMOTION_RATING_CUSHION
    rating_ready = player.current_rating >= threshold
    if rating_ready:
        reasons.append(f"Rating ({player.current_rating}) meets threshold ({threshold})")
    else:
        risks.append(f"Rating ({player.current_rating}) below threshold ({threshold})")

    time_ready = player.years_at_tier >= PROMOTION_MIN_YEARS_AT_TIER
    if time_ready:
        reasons.append(f"Has spent {player.years_at_tier} year(s) at current tier")
    else:
        risks.append("Has not spent a full year at current tier")

    morale_ready = player.morale > PROMOTION_MIN_MORALE
    if morale_ready:
        reasons.append(f"Morale ({player.morale}) is healthy")
    else:
        risks.append(f"Low morale ({player.morale}) may affect performance")

    improved = previous_year_rating is not None and player.current_rating > previous_year_rating
    veteran = player.age > PROMOTION_VETERAN_AGE
    if improved:
        reasons.append("Showed improvement this season")
    elif veteran:
        reasons.append(f"Age ({player.age}) indicates readiness")
    else:
        risks.append("No clear improvement and still young")

    return PromotionReadiness(
        is_ready=rating_ready and time_ready and morale_ready and (improved or veteran),
        reasons=reasons,
        risks=risks,
    )


def early_promotion_effects() -> PromotionEffects:
    # Rushed players lose ceiling permanently.
    return PromotionEffects(confidence_change=-20, morale_change=-20, potential_change=-5)


def late_promotion_effects() -> PromotionEffects:
    return PromotionEffects(confidence_change=-10, morale_change=-20, potential_change=0)


def ideal_promotion_effects() -> PromotionEffects:
    return PromotionEffects(confidence_change=10, morale_change=15, potential_change=0)


def apply_promotion_effects(player: Player, effects: PromotionEffects) -> Player:
    return replace(
        player,
        confidence=int(_clamp(player.confidence + effects.confidence_change, 0, 100)),
        morale=int(_clamp(player.morale + effects.morale_change, 0, 100)),
        potential=int(_clamp(player.potential + effects.potential_change, RATING_MIN, RATING_MAX)),
    )


def simulate_injury(player: Player, rng: random.Random | None = None) -> InjuryResult:
    if not player.hidden_traits.injury_prone:
        return InjuryResult(is_injured=False)
    rng = rng or random.Random()
    if rng.random() >= INJURY_CHANCE_PRONE:
        return InjuryResult(is_injured=False)
    span = INJURY_GAMES_MAX - INJURY_GAMES_MIN + 1
    games_lost = INJURY_GAMES_MIN + int(rng.random() * span)
    logger.debug("Injury %s: out %d games", player.player_id, games_lost)
    return InjuryResult(is_injured=True, games_lost=games_lost)


def apply_injury(player: Player, result: InjuryResult) -> Player:
    if not result.is_injured:
        return player
    # A new injury never shortens one already being served.
    return replace(
        player,
        is_injured=True,
        injury_games_remaining=max(player.injury_games_remaining, result.games_lost),
    )


def age_player(player: Player, rng: random.Random | None = None) -> AgingResult:
    new_age = player.age + 1

    retirement_chance = 0.0
    is_retiring = False
    if new_age > RETIREMENT_AGE:
        rng = rng or random.Random()
        retirement_chance = _clamp((new_age - RETIREMENT_AGE) * RETIREMENT_CHANCE_PER_YEAR, 0.0, 1.0)
        is_retiring = rng.random() < retirement_chance

    decline = 0.0
    if new_age > DECLINE_AGE:
        decline = -(new_age - DECLINE_AGE) * DECLINE_PER_YEAR

    if is_retiring:
        logger.info("%s retires at age %d", player.player_id, new_age)
    return AgingResult(
        new_age=new_age,
        is_retiring=is_retiring,
        decline_modifier=decline,
        retirement_chance=retirement_chance,
    )
