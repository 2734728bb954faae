"""Automated bidder valuation.

Turns a player's previous-season line into the most an automated
participant is willing to pay, given its aggression level, the league
size and its own budget.
"""

import logging
import math
import random
from typing import Dict, Optional

from src.valuation_engine import config as cfg
from src.valuation_engine.models import ValuationResult

logger = logging.getLogger(__name__)


def evaluate_contribution(stat: float, peak: float, curve: float, turn: float) -> float:
    """Grade a stat on a logistic S-curve.

    Rises sharply around ``turn`` and saturates at ``peak``; ``curve``
    sets the steepness. Elite contributors are paid more than
    proportionally while marginal ones grade close to zero.
    """
    return peak / (1 + math.exp(-curve * (stat - turn)))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


class AutomatedBidValuator:
    """Prices players for automated participants.

    Deterministic for a given ``rng`` seed: the only randomness is the
    small jitter on each bidder's aggression ceiling.

    Bidders are duck-typed: anything with ``aggression``, ``max_bid()``
    and ``is_roster_full()`` works.
    """

    def __init__(self, league_size: int, rng: Optional[random.Random] = None):
        if league_size < 1:
            raise ValueError(f"league_size must be positive, got {league_size}")
        self.league_size = league_size
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def determine_value(self, player, bidder, is_nominator: bool = False) -> int:
        """Whole-dollar bid ceiling in [0, bidder.max_bid()]."""
        return self.evaluate(player, bidder, is_nominator).value

    def evaluate(self, player, bidder, is_nominator: bool = False) -> ValuationResult:
        """Full valuation with the intermediate grades kept for inspection."""
        max_bid = bidder.max_bid()
        if bidder.is_roster_full():
            return ValuationResult(
                player_id=player.player_id,
                league_aggression=0,
                aggression_ceiling=0.0,
                max_bid=max_bid,
                value=0,
            )

        league_aggression = self.league_aggression(bidder.aggression)
        jitter = self.rng.randint(0, cfg.JITTER_MAX) - cfg.JITTER_OFFSET
        ceiling = max(0.0, league_aggression + jitter)

        grades = self.grade_player(player)
        adjustments = self._efficiency_adjustments(player, grades)
        adjustments += self._defensive_bonus(player, grades)

        score = sum(grades.values()) + adjustments
        if score <= cfg.LOW_SCORE_CUTOFF:
            score /= cfg.LOW_SCORE_DIVISOR

        if player.tos <= cfg.GOOD_TOS and score >= cfg.LOW_TURNOVER_MIN_SCORE:
            score += cfg.LOW_TURNOVER_BONUS
            adjustments += cfg.LOW_TURNOVER_BONUS

        reliability = 1.0
        if player.games < cfg.MIN_RELIABLE_GAMES:
            reliability = cfg.UNRELIABLE_MULTIPLIER
            score *= reliability

        if is_nominator and score < cfg.NOMINATOR_FLOOR:
            score = cfg.NOMINATOR_FLOOR

        worth = _round_half_up(min(score, ceiling))
        value = max(0, min(worth, max_bid))

        logger.debug(
            "Valued %s at $%d (score=%.2f, ceiling=%.2f, max_bid=%d)",
            player.name, value, score, ceiling, max_bid,
        )

        return ValuationResult(
            player_id=player.player_id,
            league_aggression=league_aggression,
            aggression_ceiling=ceiling,
            grades=grades,
            adjustments=adjustments,
            raw_score=score,
            reliability_multiplier=reliability,
            max_bid=max_bid,
            value=value,
        )

    def league_aggression(self, aggression: int) -> int:
        """Aggression level adjusted for league size.

        Formula::

            round((0.04911 * n)^2 - 0.3964 * n + aggression * multiplier)

        The quadratic term pulls the baseline back up for very large
        leagues after the linear term has lowered it.
        """
        n = self.league_size
        multiplier = 1.0
        if aggression < cfg.LOW_AGGRESSION_CUTOFF and n <= cfg.LEAGUE_SIZE_PIVOT:
            multiplier = cfg.LOW_AGGRESSION_BASE + cfg.LOW_AGGRESSION_SLOPE * (
                n / cfg.LEAGUE_SIZE_PIVOT
            )
        elif n <= cfg.LEAGUE_SIZE_PIVOT:
            multiplier = cfg.STANDARD_LEAGUE_MULTIPLIER
        elif n >= cfg.LARGE_LEAGUE_SIZE and aggression > cfg.LOW_AGGRESSION_CUTOFF:
            multiplier = cfg.LARGE_LEAGUE_MULTIPLIER

        return _round_half_up(
            (cfg.LEAGUE_QUADRATIC_COEF * n) ** 2
            - cfg.LEAGUE_LINEAR_COEF * n
            + aggression * multiplier
        )

    def grade_player(self, player) -> Dict[str, float]:
        """Per-category grades before bonuses and penalties."""
        curves = cfg.CONTRIBUTION_CURVES
        grades: Dict[str, float] = {}

        grades["ppg"] = evaluate_contribution(player.ppg, *curves["ppg"])
        grades["apg"] = cfg.ASSIST_WEIGHT * evaluate_contribution(player.apg, *curves["apg"])

        rebounds = evaluate_contribution(player.rpg, *curves["rpg"])
        if rebounds < cfg.REBOUND_MIN_GRADE:
            grades["rpg"] = 0.0
        elif rebounds < cfg.REBOUND_ELITE_GRADE:
            grades["rpg"] = cfg.REBOUND_WEIGHT * rebounds / 3
        else:
            grades["rpg"] = cfg.REBOUND_WEIGHT * rebounds

        ft = min(
            cfg.FT_GRADE_CEILING,
            cfg.FT_GRADE_CEILING - cfg.FT_GRADE_SLOPE * (cfg.GOOD_FT_PCT - player.ft_pct),
        )
        grades["ft_pct"] = ft * evaluate_contribution(player.fta, *curves["fta_volume"])

        fg = min(
            cfg.FG_GRADE_CEILING,
            cfg.FG_GRADE_CEILING - cfg.FG_GRADE_SLOPE * (cfg.GOOD_FG_PCT - player.fg_pct),
        )
        if player.fga <= cfg.FGA_VOLUME_CUTOFF:
            fg *= evaluate_contribution(player.fga, *curves["fga_volume"])
        grades["fg_pct"] = fg

        if player.three_p >= cfg.THREE_P_ELITE:
            grades["three_p"] = cfg.THREE_P_ELITE_WEIGHT * evaluate_contribution(
                player.three_p, *curves["three_p_elite"]
            )
        else:
            grades["three_p"] = evaluate_contribution(player.three_p, *curves["three_p"])

        return grades

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _efficiency_adjustments(player, grades: Dict[str, float]) -> float:
        """Flat bonuses for efficient volume shooters, penalties for bricklayers."""
        total = 0.0

        ft = grades["ft_pct"]
        if ft > cfg.FT_STRONG_GRADE and player.fta >= cfg.HIGH_VOLUME_FTA:
            total += cfg.EFFICIENCY_BONUS
        elif ft < cfg.FT_POOR_GRADE and player.fta > cfg.HIGH_VOLUME_FTA:
            total -= cfg.HIGH_VOLUME_INEFFICIENCY_PENALTY
        elif ft < cfg.FT_WEAK_GRADE:
            total -= cfg.INEFFICIENCY_PENALTY

        fg = grades["fg_pct"]
        if (fg >= cfg.FG_GRADE_CEILING and player.fga > cfg.HIGH_VOLUME_FGA) or (
            player.fg_pct >= cfg.ELITE_FG_PCT and player.fga >= cfg.ELITE_FG_MIN_FGA
        ):
            total += cfg.EFFICIENCY_BONUS
        elif fg < cfg.FG_POOR_GRADE and player.fga > cfg.HIGH_VOLUME_FGA:
            total -= cfg.HIGH_VOLUME_INEFFICIENCY_PENALTY
        elif fg < cfg.FG_WEAK_GRADE and player.fga > cfg.FG_WEAK_MIN_FGA:
            total -= cfg.INEFFICIENCY_PENALTY

        return total

    @staticmethod
    def _defensive_bonus(player, grades: Dict[str, float]) -> float:
        """Tiered steal/block bonuses scaled by the player's core grade share."""
        core_share = (grades["ppg"] + grades["apg"] + grades["rpg"]) / cfg.CORE_GRADE_DIVISOR
        total = 0.0

        for threshold, bonus in cfg.STEAL_TIERS:
            if player.spg >= threshold:
                total += bonus * max(cfg.STEAL_SCALE_FLOOR, core_share)
                break

        if player.bpg >= cfg.BLOCK_ELITE:
            # Elite bonus is at least the top scaled tier
            top_tier = cfg.BLOCK_TIERS[0][1] * max(cfg.BLOCK_SCALE_FLOOR, core_share)
            total += max(cfg.BLOCK_ELITE_BONUS, top_tier)
        else:
            for threshold, bonus in cfg.BLOCK_TIERS:
                if player.bpg >= threshold:
                    total += bonus * max(cfg.BLOCK_SCALE_FLOOR, core_share)
                    break

        return total
