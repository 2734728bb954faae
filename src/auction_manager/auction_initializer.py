"""Auction initialization - assembles the league and nomination order."""

import logging
import random
from pathlib import Path
from typing import List, Optional

from src.auction_manager.auction_state import AuctionSettings, AuctionState
from src.auction_manager.config import AGGRESSION_LEVELS
from src.auction_manager.participant import Participant
from src.data_pipeline.config import DEFAULT_CATALOG_FILE
from src.data_pipeline.player_catalog import PlayerCatalog

logger = logging.getLogger(__name__)


class AuctionInitializer:
    """Handles creation of new auction instances."""

    def __init__(self, data_path: Optional[Path] = None):
        self.data_path = Path(data_path) if data_path is not None else DEFAULT_CATALOG_FILE

    def create_auction(
        self,
        league_size: int,
        human_count: int = 0,
        catalog: Optional[PlayerCatalog] = None,
        seed: Optional[int] = None,
        **setting_overrides,
    ) -> AuctionState:
        """
        Create a new auction.

        Args:
            league_size: Number of participants (2-20)
            human_count: How many of them are human-controlled
            catalog: Player catalog; loaded from ``data_path`` when omitted
            seed: Seed for aggression levels, nomination order, bot
                jitter and tie-breaks
            **setting_overrides: Any other :class:`AuctionSettings` field
                (roster_size, total_budget, bidding_time, ...)

        Returns:
            AuctionState ready for :class:`AuctionEngine`
        """
        if human_count < 0 or human_count > league_size:
            raise ValueError(
                f"human_count ({human_count}) must be between 0 and {league_size}"
            )

        settings = AuctionSettings(league_size=league_size, seed=seed, **setting_overrides)
        if catalog is None:
            catalog = PlayerCatalog.load(self.data_path)

        rng = random.Random(seed)
        participants = self.build_participants(settings, human_count, rng)
        rng.shuffle(participants)

        auction_state = AuctionState.create_new(
            settings=settings,
            participants=participants,
            catalog=catalog,
        )

        logger.info(
            "Created auction %s: %d participants (%d human), $%d budget, "
            "%d roster slots, %d players available",
            auction_state.auction_id,
            league_size,
            human_count,
            settings.total_budget,
            settings.roster_size,
            len(catalog),
        )
        logger.info(
            "Nomination order: %s", ", ".join(p.name for p in participants)
        )

        return auction_state

    @staticmethod
    def build_participants(
        settings: AuctionSettings, human_count: int, rng: random.Random
    ) -> List[Participant]:
        """Humans first, then bots, each with a randomly assigned aggression."""
        participants = []
        for i in range(settings.league_size):
            is_automated = i >= human_count
            name = f"Bot {i - human_count + 1}" if is_automated else f"Player {i + 1}"
            participants.append(
                Participant(
                    participant_id=i,
                    name=name,
                    is_automated=is_automated,
                    aggression=rng.choice(AGGRESSION_LEVELS),
                    budget=settings.total_budget,
                    roster_size=settings.roster_size,
                )
            )
        return participants
