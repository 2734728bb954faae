"""Submission channel for human participants."""

import logging

from src.auction_manager.config import ACTION_BID, ACTION_NOMINATION
from src.auction_manager.scheduler import CooperativeScheduler

logger = logging.getLogger(__name__)


class HumanInputChannel:
    """Routes human nominations and bids into the open window.

    A submission only counts while a window is open for that exact
    participant and action. Anything else is ignored and reported as
    ``False``. Safe to call from a UI thread or from a listener callback.
    """

    def __init__(self, scheduler: CooperativeScheduler):
        self.scheduler = scheduler

    def _offer(self, action: str, participant_id: int, value) -> bool:
        window = self.scheduler.active_window
        if window is None or not window.is_open:
            logger.warning(
                "Ignored %s from participant %s: no window open", action, participant_id
            )
            return False
        if window.action != action or window.participant_id != participant_id:
            logger.warning(
                "Ignored %s from participant %s: window is %s for participant %s",
                action, participant_id, window.action, window.participant_id,
            )
            return False

        accepted = window.offer(value)
        if not accepted:
            logger.warning(
                "Rejected %s %r from participant %s", action, value, participant_id
            )
        return accepted

    def submit_nomination(self, participant_id: int, player_id: str) -> bool:
        """Nominate ``player_id``. True if the nomination was accepted."""
        return self._offer(ACTION_NOMINATION, participant_id, player_id)

    def submit_bid(self, participant_id: int, amount: int) -> bool:
        """Bid ``amount``. True if the bid was accepted."""
        return self._offer(ACTION_BID, participant_id, amount)
