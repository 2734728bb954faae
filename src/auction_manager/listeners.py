"""Presentation callbacks fired by the auction engine.

Renderers subclass :class:`AuctionListener` and override what they need.
Callbacks are fire-and-forget: return values are ignored and listeners
must not mutate the state they are handed.
"""

import logging
from typing import List

logger = logging.getLogger(__name__)


class AuctionListener:
    """No-op base for presentation callbacks."""

    def on_phase_changed(self, state):
        """Nomination or bidding phase started, or the active bidder changed."""

    def on_player_nominated(self, player, nominator):
        pass

    def on_bid_updated(self, participant, amount: int):
        pass

    def on_nomination_resolved(self, winner, player, amount: int):
        pass

    def on_standings_updated(self, standings: List):
        pass

    def on_auction_complete(self, standings: List):
        pass


class LoggingAuctionListener(AuctionListener):
    """Writes every engine event to the log."""

    def on_phase_changed(self, state):
        logger.debug(
            "Round %d, nomination %d: %s (bidder=%s)",
            state.current_round,
            state.nomination_number,
            state.phase,
            state.active_bidder_id,
        )

    def on_player_nominated(self, player, nominator):
        logger.info(
            "%s nominates %s (%s, %s)",
            nominator.name, player.name, player.position, player.team,
        )

    def on_bid_updated(self, participant, amount: int):
        logger.debug("%s bids $%d", participant.name, amount)

    def on_nomination_resolved(self, winner, player, amount: int):
        logger.info(
            "%s wins %s for $%d ($%d left, %d slots open)",
            winner.name, player.name, amount,
            winner.remaining_budget, winner.players_remaining,
        )

    def on_standings_updated(self, standings: List):
        if standings:
            leader = standings[0]
            logger.debug("Standings leader: %s (%d pts)", leader.name, leader.h2h_points)

    def on_auction_complete(self, standings: List):
        for s in standings:
            logger.info("Final #%d %s - %d h2h points", s.rank, s.name, s.h2h_points)


class CompositeListener(AuctionListener):
    """Fans each callback out to several listeners in order."""

    def __init__(self, listeners):
        self.listeners = list(listeners)

    def on_phase_changed(self, state):
        for listener in self.listeners:
            listener.on_phase_changed(state)

    def on_player_nominated(self, player, nominator):
        for listener in self.listeners:
            listener.on_player_nominated(player, nominator)

    def on_bid_updated(self, participant, amount: int):
        for listener in self.listeners:
            listener.on_bid_updated(participant, amount)

    def on_nomination_resolved(self, winner, player, amount: int):
        for listener in self.listeners:
            listener.on_nomination_resolved(winner, player, amount)

    def on_standings_updated(self, standings: List):
        for listener in self.listeners:
            listener.on_standings_updated(standings)

    def on_auction_complete(self, standings: List):
        for listener in self.listeners:
            listener.on_auction_complete(standings)
