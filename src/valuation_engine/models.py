"""Data models for the valuation engine."""

from dataclasses import dataclass, field
from typing import Dict


@dataclass
class ValuationResult:
    """How an automated bidder priced a single player."""

    player_id: str
    league_aggression: int
    aggression_ceiling: float  # league aggression plus jitter, floored at 0
    grades: Dict[str, float] = field(default_factory=dict)
    adjustments: float = 0.0  # efficiency, defensive and turnover bonuses/penalties
    raw_score: float = 0.0
    reliability_multiplier: float = 1.0
    max_bid: int = 0
    value: int = 0  # final whole-dollar bid ceiling
