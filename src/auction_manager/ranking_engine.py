"""Head-to-head standings across the nine stat categories."""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

import pandas as pd

from src.auction_manager.config import LOWER_IS_BETTER_CATEGORIES, STAT_CATEGORIES

logger = logging.getLogger(__name__)


@dataclass
class Standing:
    """One participant's place in the head-to-head table."""

    participant_id: int
    name: str
    h2h_points: int
    rank: int
    categories: Dict[str, float] = field(default_factory=dict)


class HeadToHeadRanker:
    """Ranks rosters by simulated head-to-head category wins.

    Every ordered pair of distinct participants is compared in each
    category; a strict win scores one point. Turnovers count as a win
    for the lower total. Ties in total points keep the input order.
    """

    def __init__(self, categories=STAT_CATEGORIES):
        self.categories = tuple(categories)

    def category_wins(self, team_stats, opponent_stats) -> int:
        """Categories in which ``team_stats`` strictly beats ``opponent_stats``."""
        wins = 0
        for category in self.categories:
            ours = team_stats.category_value(category)
            theirs = opponent_stats.category_value(category)
            if category in LOWER_IS_BETTER_CATEGORIES:
                if ours < theirs:
                    wins += 1
            elif ours > theirs:
                wins += 1
        return wins

    def head_to_head_points(self, participants) -> Dict[int, int]:
        """Total category wins per participant id, summed over all opponents."""
        points = {}
        for team in participants:
            total = 0
            for opponent in participants:
                if opponent is team:
                    continue
                total += self.category_wins(team.cumulative_stats, opponent.cumulative_stats)
            points[team.participant_id] = total
        return points

    def rank(self, participants) -> List[Standing]:
        """Sort participants by head-to-head points and assign 1-based ranks."""
        points = self.head_to_head_points(participants)
        ordered = sorted(
            participants, key=lambda p: points[p.participant_id], reverse=True
        )
        standings = [
            Standing(
                participant_id=p.participant_id,
                name=p.name,
                h2h_points=points[p.participant_id],
                rank=position,
                categories=p.cumulative_stats.categories(),
            )
            for position, p in enumerate(ordered, start=1)
        ]
        if standings:
            logger.debug(
                "Standings leader: %s (%d pts)", standings[0].name, standings[0].h2h_points
            )
        return standings

    @staticmethod
    def to_dataframe(standings: List[Standing]) -> pd.DataFrame:
        """Standings as a display table, one row per participant in rank order."""
        rows = []
        for s in standings:
            row = {"rank": s.rank, "name": s.name, "h2h_points": s.h2h_points}
            row.update(s.categories)
            rows.append(row)
        columns = ["rank", "name", "h2h_points", *STAT_CATEGORIES]
        return pd.DataFrame(rows, columns=columns)
