"""Cooperative scheduling for the auction's timed waits.

The engine runs one action at a time. Whenever it needs to wait - for a
human nomination or bid, or for the automated-response delay - it opens
exactly one :class:`TimedWait` on the scheduler and blocks on it until a
submission resolves it, its timeout lapses, or the auction is aborted.
"""

import logging
import threading
from typing import Any, Callable, Optional

from src.auction_manager.auction_rules import AuctionAborted, AuctionError
from src.auction_manager.config import ACTION_DELAY

logger = logging.getLogger(__name__)


class TimedWait:
    """A single cancelable wait for one participant's pending action.

    ``accept`` decides whether an offered value resolves the wait; a
    rejected offer leaves the window open.
    """

    def __init__(
        self,
        action: str,
        participant_id: Optional[int],
        accept: Callable[[Any], bool],
    ):
        self.action = action
        self.participant_id = participant_id
        self._accept = accept
        self._cond = threading.Condition()
        self._value: Any = None
        self._resolved = False
        self._closed = False
        self._cancelled = False

    @property
    def is_open(self) -> bool:
        with self._cond:
            return not self._closed

    def offer(self, value) -> bool:
        """Try to resolve the wait with ``value``. True if accepted."""
        with self._cond:
            if self._closed:
                return False
            if not self._accept(value):
                return False
            self._value = value
            self._resolved = True
            self._closed = True
            self._cond.notify_all()
            return True

    def cancel(self):
        with self._cond:
            if self._closed and not self._cancelled:
                return
            self._cancelled = True
            self._closed = True
            self._cond.notify_all()

    def close(self):
        """Refuse further offers. A pending wait returns what it has."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def wait(self, timeout: float):
        """Block until resolved, cancelled or expired.

        Returns:
            The accepted value, or None when the window expired.

        Raises:
            AuctionAborted: If the wait was cancelled.
        """
        with self._cond:
            self._cond.wait_for(lambda: self._closed, timeout=timeout)
            # Expiry closes the window so late offers are refused
            self._closed = True
            if self._cancelled:
                raise AuctionAborted(
                    f"Wait for {self.action} (participant {self.participant_id}) cancelled"
                )
            return self._value if self._resolved else None


class CooperativeScheduler:
    """Owns the one outstanding timed wait."""

    def __init__(self):
        self._lock = threading.Lock()
        self._active: Optional[TimedWait] = None
        self._aborted = False

    @property
    def active_window(self) -> Optional[TimedWait]:
        with self._lock:
            return self._active

    @property
    def is_aborted(self) -> bool:
        with self._lock:
            return self._aborted

    def open_window(
        self,
        action: str,
        participant_id: Optional[int],
        accept: Callable[[Any], bool],
    ) -> TimedWait:
        """Open the next wait. Submissions may resolve it before it is awaited."""
        with self._lock:
            if self._aborted:
                raise AuctionAborted("Auction has been aborted")
            if self._active is not None:
                raise AuctionError(
                    f"Cannot open {action} window: "
                    f"{self._active.action} window still pending"
                )
            wait = TimedWait(action, participant_id, accept)
            self._active = wait
        logger.debug("Opened %s window for participant %s", action, participant_id)
        return wait

    def await_window(self, wait: TimedWait, timeout: float):
        """Block on ``wait``; returns the accepted value or None on expiry."""
        try:
            value = wait.wait(timeout)
        finally:
            with self._lock:
                if self._active is wait:
                    self._active = None
        if value is None:
            logger.debug(
                "%s window for participant %s expired after %.2fs",
                wait.action, wait.participant_id, timeout,
            )
        return value

    def release(self, wait: TimedWait):
        """Close ``wait`` and free the slot, whether or not it was awaited.

        Safe to call more than once.
        """
        wait.close()
        with self._lock:
            if self._active is wait:
                self._active = None

    def pause(self, delay: float):
        """Automated-response delay; cancelled by :meth:`abort`."""
        if delay <= 0:
            if self.is_aborted:
                raise AuctionAborted("Auction has been aborted")
            return
        wait = self.open_window(ACTION_DELAY, None, lambda _value: False)
        self.await_window(wait, delay)

    def abort(self):
        """Cancel the outstanding wait and refuse any further ones."""
        with self._lock:
            self._aborted = True
            active = self._active
        if active is not None:
            active.cancel()
        logger.info("Scheduler aborted")
