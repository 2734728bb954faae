"""Participant data model - budget, roster and running team stats."""

from dataclasses import dataclass, field
from typing import Dict, List

from src.auction_manager.auction_rules import AuctionError, InvalidBid
from src.auction_manager.config import (
    AGGRESSION_LEVELS,
    ROSTER_SIZE,
    STAT_CATEGORIES,
    TOTAL_BUDGET,
)
from src.data_pipeline.player_catalog import Player


@dataclass
class RosterEntry:
    """A won player and the price paid."""

    player: Player
    winning_bid: int


@dataclass
class CumulativeStats:
    """Summed per-game stats for a roster.

    Shooting percentages are rebuilt from accumulated makes and attempts
    rather than averaged, and are reported on the 0-100 scale.
    """

    fg_pct: float = 0.0
    ft_pct: float = 0.0
    ppg: float = 0.0
    apg: float = 0.0
    rpg: float = 0.0
    three_p: float = 0.0
    spg: float = 0.0
    bpg: float = 0.0
    tos: float = 0.0
    fga: float = 0.0
    fgm: float = 0.0
    fta: float = 0.0
    ftm: float = 0.0

    def add_player(self, player: Player):
        """Fold one player's per-game line into the totals."""
        self.ppg += player.ppg
        self.apg += player.apg
        self.rpg += player.rpg
        self.three_p += player.three_p
        self.spg += player.spg
        self.bpg += player.bpg
        self.tos += player.tos

        # Makes stay fractional so per-player rounding never compounds
        self.fga += player.fga
        self.fgm += player.fga * player.fg_pct
        self.fta += player.fta
        self.ftm += player.fta * player.ft_pct

        self.fg_pct = self._percentage(self.fgm, self.fga)
        self.ft_pct = self._percentage(self.ftm, self.fta)

    @staticmethod
    def _percentage(makes: float, attempts: float) -> float:
        return (makes / attempts) * 100 if attempts > 0 else 0.0

    def category_value(self, category: str) -> float:
        return getattr(self, category)

    def categories(self) -> Dict[str, float]:
        """The nine head-to-head category values."""
        return {cat: self.category_value(cat) for cat in STAT_CATEGORIES}


@dataclass
class Participant:
    """A league member bidding in the auction, human or automated."""

    participant_id: int
    name: str
    is_automated: bool = False
    aggression: int = AGGRESSION_LEVELS[0]
    budget: int = TOTAL_BUDGET
    roster_size: int = ROSTER_SIZE
    amount_spent: int = 0
    current_bid: int = 0
    roster: List[RosterEntry] = field(default_factory=list)
    cumulative_stats: CumulativeStats = field(default_factory=CumulativeStats)

    @property
    def players_remaining(self) -> int:
        """Unfilled roster slots."""
        return self.roster_size - len(self.roster)

    @property
    def remaining_budget(self) -> int:
        return self.budget - self.amount_spent

    def is_roster_full(self) -> bool:
        return self.players_remaining <= 0

    def max_bid(self) -> int:
        """Largest legal bid, holding back $1 for every other open slot.

        A full roster can only bid 0.
        """
        if self.is_roster_full():
            return 0
        return max(0, self.budget - self.amount_spent - self.players_remaining)

    def place_bid(self, amount: int):
        """Record a bid for the active nomination.

        Raises:
            InvalidBid: If amount is not an integer in [0, max_bid()].
                ``current_bid`` is left unchanged.
        """
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidBid(f"{self.name}: bid must be a whole dollar amount, got {amount!r}")
        ceiling = self.max_bid()
        if amount < 0 or amount > ceiling:
            raise InvalidBid(
                f"{self.name}: bid ${amount} outside legal range [0, {ceiling}]"
            )
        self.current_bid = amount

    def award_player(self, player: Player, winning_amount: int):
        """Charge the winning bid and add the player to the roster."""
        if self.is_roster_full():
            raise AuctionError(f"{self.name} cannot win {player.name}: roster is full")
        if winning_amount < 0 or winning_amount > self.remaining_budget:
            raise AuctionError(
                f"{self.name} cannot pay ${winning_amount} "
                f"with ${self.remaining_budget} remaining"
            )
        self.amount_spent += winning_amount
        self.roster.append(RosterEntry(player=player, winning_bid=winning_amount))
        self.cumulative_stats.add_player(player)

    def reset_bid(self):
        """Clear the transient bid between nominations."""
        self.current_bid = 0

    def has_player(self, player_id: str) -> bool:
        return any(entry.player.player_id == player_id for entry in self.roster)
