"""Auction engine - runs nominations and bidding rounds to completion."""

import logging
import random
from typing import Dict, List, Optional

import pandas as pd

from src.auction_manager.auction_rules import (
    AuctionAborted,
    AuctionError,
    AuctionRules,
    InvalidBid,
    InvalidNomination,
    UnknownPlayer,
)
from src.auction_manager.auction_state import AuctionState, NominationRecord
from src.auction_manager.config import (
    ACTION_BID,
    ACTION_NOMINATION,
    DEFAULT_OPENING_BID,
    PHASE_BIDDING,
    PHASE_NOMINATION,
    PHASE_RESOLVED,
)
from src.auction_manager.input_channel import HumanInputChannel
from src.auction_manager.listeners import AuctionListener, LoggingAuctionListener
from src.auction_manager.participant import Participant
from src.auction_manager.ranking_engine import HeadToHeadRanker, Standing
from src.auction_manager.scheduler import CooperativeScheduler
from src.data_pipeline.player_catalog import Player
from src.valuation_engine.bid_valuator import AutomatedBidValuator

logger = logging.getLogger(__name__)


class AuctionEngine:
    """Main controller for the auction.

    Each nomination runs three phases in strict order:

    * **Nomination** - the current nominator picks an un-nominated
      player. Automated nominators and lapsed human windows take the
      first remaining player in catalog order.
    * **Bidding** - the nominator opens, then every other participant
      bids once in nomination order. Automated bids come from
      :class:`AutomatedBidValuator`; lapsed human windows keep their
      previous bid (the nominator's defaults to $1).
    * **Resolution** - the highest bid wins, ties broken uniformly at
      random so no seat in the order is favoured. Every bid is then
      reset and standings are re-ranked.

    Presentation code observes through an :class:`AuctionListener` and
    submits human actions through :attr:`input_channel`.
    """

    def __init__(
        self,
        auction_state: AuctionState,
        listener: Optional[AuctionListener] = None,
        scheduler: Optional[CooperativeScheduler] = None,
        rng: Optional[random.Random] = None,
        valuator: Optional[AutomatedBidValuator] = None,
    ):
        self.auction_state = auction_state
        self.settings = auction_state.settings
        self.rules = AuctionRules(auction_state)
        self.listener = listener or LoggingAuctionListener()
        self.scheduler = scheduler or CooperativeScheduler()
        self.input_channel = HumanInputChannel(self.scheduler)
        self.rng = rng or random.Random(self.settings.seed)
        self.valuator = valuator or AutomatedBidValuator(
            self.settings.league_size, rng=self.rng
        )
        self.ranker = HeadToHeadRanker()

    # ------------------------------------------------------------------
    # Driving the auction
    # ------------------------------------------------------------------

    def run(self) -> List[Standing]:
        """Run nominations until every roster is full.

        Returns:
            Final standings.

        Raises:
            UnknownPlayer: If a nominated id is missing from the catalog.
            AuctionAborted: If :meth:`abort` was called mid-auction.
        """
        logger.info(
            "Auction %s starting: %d participants, %d nominations",
            self.auction_state.auction_id,
            len(self.auction_state.participants),
            self.settings.total_nominations(),
        )
        while not self.auction_state.is_complete:
            self.run_nomination()
        return self.auction_state.standings

    def run_nomination(self) -> NominationRecord:
        """Run one full nomination: choose, bid, resolve.

        A failure other than an abort (for example a listener raising)
        rolls the nomination back so the same nominator can retry it.

        Raises:
            AuctionError: If the auction is already complete, or any
                failure that aborts the current step.
        """
        state = self.auction_state
        if state.is_complete:
            raise AuctionError("Auction is already complete")

        try:
            player = self._nomination_phase()
            self._bidding_phase(player)
            return self._resolve(player)
        except (UnknownPlayer, AuctionAborted) as e:
            state.reset_all_bids()
            state.mark_aborted()
            logger.error("Auction %s aborted: %s", state.auction_id, e)
            raise
        except Exception:
            self._roll_back()
            logger.exception(
                "Nomination %d failed; rolled back", state.nomination_number
            )
            raise

    def _roll_back(self):
        """Undo an unresolved nomination after an unexpected failure."""
        state = self.auction_state
        state.reset_all_bids()
        state.active_bidder_id = None
        player_id = state.active_player_id
        if player_id is not None and not any(
            p.has_player(player_id) for p in state.participants
        ):
            state.release_nomination(player_id)
        if not state.is_complete:
            state.phase = PHASE_NOMINATION

    def abort(self):
        """Tear down early; the pending wait raises AuctionAborted."""
        logger.warning("Abort requested for auction %s", self.auction_state.auction_id)
        self.scheduler.abort()

    @property
    def is_complete(self) -> bool:
        return self.auction_state.is_complete

    # ------------------------------------------------------------------
    # Nomination
    # ------------------------------------------------------------------

    def _nomination_phase(self) -> Player:
        state = self.auction_state
        nominator = state.current_nominator()
        state.phase = PHASE_NOMINATION
        state.active_bidder_id = nominator.participant_id

        if nominator.is_automated:
            self.listener.on_phase_changed(state)
            player_id = state.default_nomination()
        else:
            window = self.scheduler.open_window(
                ACTION_NOMINATION,
                nominator.participant_id,
                lambda pid: self._accept_nomination(nominator, pid),
            )
            try:
                self.listener.on_phase_changed(state)
                player_id = self.scheduler.await_window(
                    window, self.settings.nomination_time
                )
            finally:
                self.scheduler.release(window)
            if player_id is None:
                player_id = state.default_nomination()
                logger.info(
                    "%s did not nominate in time; defaulting to %s",
                    nominator.name, player_id,
                )

        if player_id is None:
            raise AuctionError("No players left to nominate")

        return self.nominate(nominator, player_id)

    def _accept_nomination(self, nominator: Participant, player_id) -> bool:
        is_valid, error_msg = self.rules.validate_nomination(
            nominator.participant_id, player_id
        )
        if not is_valid:
            logger.warning("Invalid nomination attempted: %s", error_msg)
        return is_valid

    def nominate(self, nominator: Participant, player_id: str) -> Player:
        """Resolve ``player_id`` and take it out of the pool.

        Raises:
            UnknownPlayer: If the catalog has no such player.
            InvalidNomination: If the player was already nominated.
        """
        player = self.auction_state.catalog.find_by_id(player_id)
        if player is None:
            raise UnknownPlayer(f"Player {player_id} not found in player catalog")
        if self.auction_state.is_nominated(player_id):
            raise InvalidNomination(f"{player.name} has already been nominated")

        self.auction_state.mark_nominated(player_id)
        logger.info(
            "Nomination %d (Rd %d): %s nominates %s (%s)",
            self.auction_state.nomination_number,
            self.auction_state.current_round,
            nominator.name,
            player.name,
            player.position,
        )
        self.listener.on_player_nominated(player, nominator)
        return player

    # ------------------------------------------------------------------
    # Bidding
    # ------------------------------------------------------------------

    def _bidding_phase(self, player: Player):
        state = self.auction_state
        state.phase = PHASE_BIDDING

        for position, bidder in enumerate(state.bid_order()):
            is_nominator = position == 0
            if bidder.is_roster_full():
                logger.debug("%s has a full roster; skipping", bidder.name)
                continue

            state.active_bidder_id = bidder.participant_id
            if bidder.is_automated:
                self._automated_bid(bidder, player, is_nominator)
            else:
                self._human_bid(bidder, is_nominator)

        state.active_bidder_id = None

    def _automated_bid(self, bidder: Participant, player: Player, is_nominator: bool):
        self.listener.on_phase_changed(self.auction_state)
        self.scheduler.pause(self.settings.automated_response_delay)
        value = self.valuator.determine_value(player, bidder, is_nominator)
        self._try_bid(bidder, min(max(value, 0), bidder.max_bid()))

    def _human_bid(self, bidder: Participant, is_nominator: bool):
        window = self.scheduler.open_window(
            ACTION_BID,
            bidder.participant_id,
            lambda amount: self._try_bid(bidder, amount),
        )
        try:
            self.listener.on_phase_changed(self.auction_state)
            amount = self.scheduler.await_window(window, self.settings.bidding_time)
        finally:
            self.scheduler.release(window)
        if amount is not None:
            return

        # Window lapsed: nominator opens at the default, others stand pat
        fallback = DEFAULT_OPENING_BID if is_nominator else bidder.current_bid
        logger.info("%s did not bid in time; bidding $%d", bidder.name, fallback)
        self._try_bid(bidder, fallback)

    def _try_bid(self, bidder: Participant, amount) -> bool:
        """Place a bid, treating an illegal amount as a pass."""
        try:
            bidder.place_bid(amount)
        except InvalidBid as e:
            logger.warning("Bid not accepted: %s (keeping $%d)", e, bidder.current_bid)
            return False
        logger.debug("%s bids $%d", bidder.name, amount)
        self.listener.on_bid_updated(bidder, amount)
        return True

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    def select_winner(self) -> Participant:
        """Highest bidder among participants with an open roster slot.

        Ties are broken uniformly at random with the engine's RNG.
        """
        candidates = [
            p for p in self.auction_state.participants if not p.is_roster_full()
        ]
        if not candidates:
            raise AuctionError("No participant has an open roster slot")

        highest = max(p.current_bid for p in candidates)
        tied = [p for p in candidates if p.current_bid == highest]
        return tied[self.rng.randrange(len(tied))]

    def _resolve(self, player: Player) -> NominationRecord:
        state = self.auction_state
        state.phase = PHASE_RESOLVED
        nominator = state.current_nominator()

        try:
            winner = self.select_winner()
            amount = winner.current_bid
            winner.award_player(player, amount)
        finally:
            state.reset_all_bids()

        record = NominationRecord.create(
            nomination_number=state.nomination_number,
            round=state.current_round,
            nominator_id=nominator.participant_id,
            player_id=player.player_id,
            winner_id=winner.participant_id,
            winning_bid=amount,
        )
        state.history.append(record)

        logger.info(
            "Nomination %d (Rd %d): %s wins %s for $%d",
            record.nomination_number,
            record.round,
            winner.name,
            player.name,
            amount,
        )

        # State is settled before listeners see it
        state.standings = self.ranker.rank(state.participants)
        state.advance_to_next_nomination()
        is_complete = state.check_if_complete()
        if is_complete:
            logger.info("Auction %s complete", state.auction_id)

        self.listener.on_nomination_resolved(winner, player, amount)
        self.listener.on_standings_updated(state.standings)
        if is_complete:
            self.listener.on_auction_complete(state.standings)

        return record

    # ------------------------------------------------------------------
    # Results
    # ------------------------------------------------------------------

    def standings_frame(self) -> pd.DataFrame:
        """Current standings as a display table."""
        return self.ranker.to_dataframe(self.auction_state.standings)

    def get_auction_summary(self) -> Dict:
        """Generate summary of auction results.

        Returns dict with "error" key if the auction is not yet complete.
        """
        state = self.auction_state
        if not state.is_complete:
            return {"error": "Auction not complete"}

        ranks = {s.participant_id: s.rank for s in state.standings}
        summary = {
            "auction_id": state.auction_id,
            "completed_at": state.completed_at,
            "total_nominations": len(state.history),
            "participants": [],
        }

        for participant in state.participants:
            summary["participants"].append(
                {
                    "participant_id": participant.participant_id,
                    "name": participant.name,
                    "is_automated": participant.is_automated,
                    "rank": ranks.get(participant.participant_id),
                    "spent": participant.amount_spent,
                    "remaining_budget": participant.remaining_budget,
                    "roster": [
                        {
                            "player_id": entry.player.player_id,
                            "name": entry.player.name,
                            "position": entry.player.position,
                            "winning_bid": entry.winning_bid,
                        }
                        for entry in participant.roster
                    ],
                    "cumulative_stats": {
                        cat: round(value, 2)
                        for cat, value in participant.cumulative_stats.categories().items()
                    },
                }
            )

        return summary
