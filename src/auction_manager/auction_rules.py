"""Auction error taxonomy and nomination legality checks."""

from typing import TYPE_CHECKING, Optional, Tuple

if TYPE_CHECKING:
    from src.auction_manager.auction_state import AuctionState


class AuctionError(Exception):
    """Base class for auction failures."""

    pass


class InvalidBid(AuctionError):
    """A bid outside [0, max_bid()]. Recovered locally as a pass."""

    pass


class InvalidNomination(AuctionError):
    """A nomination of an unknown or already-nominated player."""

    pass


class UnknownPlayer(AuctionError):
    """A player id the catalog cannot resolve. Fatal for the current step."""

    pass


class AuctionAborted(AuctionError):
    """Raised out of a pending wait when the auction is torn down."""

    pass


class AuctionRules:
    """Enforces nomination rules against the auction state."""

    def __init__(self, auction_state: "AuctionState"):
        self.auction_state = auction_state

    def validate_nomination(
        self, participant_id: int, player_id: str
    ) -> Tuple[bool, Optional[str]]:
        """
        Validate a nomination.

        Returns:
            (is_valid, error_message) - (True, None) if valid
        """
        state = self.auction_state

        # Check 1: Is it this participant's turn to nominate?
        nominator = state.current_nominator()
        if participant_id != nominator.participant_id:
            return (
                False,
                f"Not participant {participant_id}'s nomination "
                f"(current: {nominator.participant_id})",
            )

        # Check 2: Does the player exist?
        if player_id not in state.catalog:
            return False, f"Player {player_id} not found in player catalog"

        # Check 3: Already nominated?
        if state.is_nominated(player_id):
            name = state.catalog.find_by_id(player_id).name
            return False, f"{name} has already been nominated"

        return True, None
