"""Auction state data models - single source of truth for a running auction."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Set
import uuid

from src.auction_manager.config import (
    AUTOMATED_RESPONSE_DELAY,
    BIDDING_TIME,
    MAX_LEAGUE_SIZE,
    MIN_LEAGUE_SIZE,
    NOMINATION_TIME,
    PHASE_ABORTED,
    PHASE_COMPLETE,
    PHASE_NOMINATION,
    ROSTER_SIZE,
    TOTAL_BUDGET,
)
from src.auction_manager.participant import Participant
from src.auction_manager.ranking_engine import Standing
from src.data_pipeline.player_catalog import PlayerCatalog


@dataclass
class AuctionSettings:
    """Auction-wide constants, fixed once the auction starts."""

    league_size: int
    roster_size: int = ROSTER_SIZE
    total_budget: int = TOTAL_BUDGET
    nomination_time: float = NOMINATION_TIME
    bidding_time: float = BIDDING_TIME
    automated_response_delay: float = AUTOMATED_RESPONSE_DELAY
    seed: Optional[int] = None

    def __post_init__(self):
        if not MIN_LEAGUE_SIZE <= self.league_size <= MAX_LEAGUE_SIZE:
            raise ValueError(
                f"league_size must be between {MIN_LEAGUE_SIZE} and "
                f"{MAX_LEAGUE_SIZE}, got {self.league_size}"
            )
        if self.roster_size < 1:
            raise ValueError(f"roster_size must be positive, got {self.roster_size}")
        if self.total_budget < self.roster_size:
            raise ValueError(
                f"total_budget (${self.total_budget}) must cover $1 for each "
                f"of the {self.roster_size} roster slots"
            )
        for name in ("nomination_time", "bidding_time", "automated_response_delay"):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} cannot be negative")

    def total_nominations(self) -> int:
        """Nominations needed to fill every roster."""
        return self.roster_size * self.league_size


@dataclass
class NominationRecord:
    """Outcome of one resolved nomination."""

    nomination_number: int
    round: int
    nominator_id: int
    player_id: str
    winner_id: int
    winning_bid: int
    timestamp: str

    @classmethod
    def create(
        cls,
        nomination_number: int,
        round: int,
        nominator_id: int,
        player_id: str,
        winner_id: int,
        winning_bid: int,
    ):
        return cls(
            nomination_number=nomination_number,
            round=round,
            nominator_id=nominator_id,
            player_id=player_id,
            winner_id=winner_id,
            winning_bid=winning_bid,
            timestamp=datetime.now().isoformat(),
        )


@dataclass
class AuctionState:
    """Complete auction state, read by presentation callbacks."""

    auction_id: str
    settings: AuctionSettings
    participants: List[Participant]
    catalog: PlayerCatalog
    started_at: str
    current_round: int = 1
    nominator_index: int = 0
    nomination_number: int = 1
    phase: str = PHASE_NOMINATION
    active_player_id: Optional[str] = None
    active_bidder_id: Optional[int] = None
    nominated_ids: Set[str] = field(default_factory=set)
    history: List[NominationRecord] = field(default_factory=list)
    standings: List[Standing] = field(default_factory=list)
    is_complete: bool = False
    completed_at: Optional[str] = None

    @classmethod
    def create_new(
        cls,
        settings: AuctionSettings,
        participants: List[Participant],
        catalog: PlayerCatalog,
    ) -> "AuctionState":
        """Factory method for a fresh auction in nomination order."""
        if len(participants) != settings.league_size:
            raise ValueError(
                f"participants length ({len(participants)}) must match "
                f"league_size ({settings.league_size})"
            )
        ids = [p.participant_id for p in participants]
        if len(set(ids)) != len(ids):
            raise ValueError(f"Participant ids must be unique, got {ids}")
        if len(catalog) < settings.total_nominations():
            raise ValueError(
                f"Catalog has {len(catalog)} players but the auction needs "
                f"{settings.total_nominations()} nominations"
            )

        return cls(
            auction_id=str(uuid.uuid4()),
            settings=settings,
            participants=participants,
            catalog=catalog,
            started_at=datetime.now().isoformat(),
        )

    def current_nominator(self) -> Participant:
        """Get the participant whose turn it is to nominate."""
        return self.participants[self.nominator_index]

    def is_nominated(self, player_id: str) -> bool:
        return player_id in self.nominated_ids

    def default_nomination(self) -> Optional[str]:
        """First un-nominated player in catalog order, or None if exhausted."""
        for pid in self.catalog.player_ids:
            if pid not in self.nominated_ids:
                return pid
        return None

    def mark_nominated(self, player_id: str):
        self.nominated_ids.add(player_id)
        self.active_player_id = player_id

    def release_nomination(self, player_id: str):
        """Return an unsold player to the pool."""
        self.nominated_ids.discard(player_id)
        if self.active_player_id == player_id:
            self.active_player_id = None

    def bid_order(self) -> List[Participant]:
        """Nominator first, then everyone else in nomination order (wrapping)."""
        n = len(self.participants)
        return [
            self.participants[(self.nominator_index + offset) % n]
            for offset in range(n)
        ]

    def reset_all_bids(self):
        for participant in self.participants:
            participant.reset_bid()

    def advance_to_next_nomination(self):
        """Move to the next nominator, rolling the round after the last one."""
        if self.is_complete:
            return

        self.nomination_number += 1
        self.active_player_id = None
        self.active_bidder_id = None
        self.nominator_index = (self.nominator_index + 1) % len(self.participants)
        if (
            self.nominator_index == 0
            and self.nomination_number <= self.settings.total_nominations()
        ):
            self.current_round += 1

    def check_if_complete(self) -> bool:
        """Check if the auction has run every nomination."""
        self.is_complete = (
            self.nomination_number > self.settings.total_nominations()
            or all(p.is_roster_full() for p in self.participants)
        )

        if self.is_complete and not self.completed_at:
            self.completed_at = datetime.now().isoformat()
            self.phase = PHASE_COMPLETE

        return self.is_complete

    def mark_aborted(self):
        self.phase = PHASE_ABORTED
        self.active_bidder_id = None
