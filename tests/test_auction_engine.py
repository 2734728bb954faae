"""Tests for the auction engine state machine."""

import random
import threading
from collections import Counter

import pytest

from src.auction_manager.auction_engine import AuctionEngine
from src.auction_manager.auction_initializer import AuctionInitializer
from src.auction_manager.auction_rules import AuctionAborted, AuctionError, UnknownPlayer
from src.auction_manager.auction_state import AuctionSettings, AuctionState
from src.auction_manager.config import (
    PHASE_ABORTED,
    PHASE_BIDDING,
    PHASE_COMPLETE,
    PHASE_NOMINATION,
)
from src.auction_manager.listeners import AuctionListener
from src.auction_manager.participant import Participant


# ── Helpers ──────────────────────────────────────────────────────────

class ScriptedListener(AuctionListener):
    """Plays human moves from a script as soon as their window opens.

    ``nominations`` and ``bids`` map participant id to a queue of
    submissions. Every submission's result is kept in ``results``.
    """

    def __init__(self, nominations=None, bids=None):
        self.channel = None
        self.nominations = nominations or {}
        self.bids = bids or {}
        self.results = []
        self.events = []
        self.bid_updates = []

    def on_phase_changed(self, state):
        pid = state.active_bidder_id
        if state.phase == PHASE_NOMINATION and self.nominations.get(pid):
            player_id = self.nominations[pid].pop(0)
            self.results.append((pid, player_id, self.channel.submit_nomination(pid, player_id)))
        elif state.phase == PHASE_BIDDING and self.bids.get(pid):
            amount = self.bids[pid].pop(0)
            self.results.append((pid, amount, self.channel.submit_bid(pid, amount)))

    def on_player_nominated(self, player, nominator):
        self.events.append(("nominated", player.player_id, nominator.participant_id))

    def on_bid_updated(self, participant, amount):
        self.bid_updates.append((participant.participant_id, amount))

    def on_nomination_resolved(self, winner, player, amount):
        self.events.append(("resolved", player.player_id, winner.participant_id, amount))

    def on_standings_updated(self, standings):
        self.events.append(("standings", len(standings)))

    def on_auction_complete(self, standings):
        self.events.append(("complete", len(standings)))


def _make_human_engine(catalog, listener, n=2, roster_size=1, budget=200, timeout=0.05):
    settings = AuctionSettings(
        league_size=n,
        roster_size=roster_size,
        total_budget=budget,
        nomination_time=timeout,
        bidding_time=timeout,
        automated_response_delay=0,
        seed=1,
    )
    participants = [
        Participant(
            participant_id=i,
            name=f"P{i + 1}",
            budget=budget,
            roster_size=roster_size,
        )
        for i in range(n)
    ]
    state = AuctionState.create_new(settings, participants, catalog)
    engine = AuctionEngine(state, listener=listener)
    listener.channel = engine.input_channel
    return engine


def _make_bot_engine(catalog, seed=11, league_size=4, roster_size=3, budget=20, listener=None):
    state = AuctionInitializer().create_auction(
        league_size=league_size,
        catalog=catalog,
        seed=seed,
        roster_size=roster_size,
        total_budget=budget,
        automated_response_delay=0,
    )
    return AuctionEngine(state, listener=listener)


# ── Human Scenario ───────────────────────────────────────────────────

class TestHumanNomination:
    def test_two_human_auction(self, catalog):
        listener = ScriptedListener(nominations={0: ["1"]}, bids={0: [5], 1: [8]})
        engine = _make_human_engine(catalog, listener)
        state = engine.auction_state
        p1, p2 = state.participants

        record = engine.run_nomination()

        assert record.player_id == "1"
        assert record.winner_id == 1
        assert record.winning_bid == 8
        assert p2.amount_spent == 8
        assert len(p2.roster) == 1
        assert p1.amount_spent == 0
        assert all(ok for _, _, ok in listener.results)
        # Bids reset once the nomination resolves
        assert p1.current_bid == 0 and p2.current_bid == 0

        # P2 is full: P1 takes the second nomination unopposed
        engine.run()
        assert state.is_complete
        assert state.phase == PHASE_COMPLETE
        assert len(p1.roster) == 1
        assert len(state.history) == 2

    def test_nomination_timeout_takes_first_available(self, catalog):
        listener = ScriptedListener(bids={0: [2]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)
        engine.auction_state.mark_nominated("1")

        record = engine.run_nomination()
        assert record.player_id == "2"

    def test_invalid_nomination_rejected_then_defaults(self, catalog):
        listener = ScriptedListener(nominations={0: ["ghost"]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)

        record = engine.run_nomination()
        assert listener.results == [(0, "ghost", False)]
        assert record.player_id == "1"

    def test_already_nominated_player_rejected(self, catalog):
        listener = ScriptedListener(nominations={0: ["4"]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)
        engine.auction_state.mark_nominated("4")

        engine.run_nomination()
        assert listener.results[0] == (0, "4", False)


class TestHumanBidding:
    def test_nominator_timeout_opens_at_one_dollar(self, catalog):
        listener = ScriptedListener(nominations={0: ["3"]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)

        record = engine.run_nomination()
        assert record.winner_id == 0
        assert record.winning_bid == 1
        assert (0, 1) in listener.bid_updates
        assert (1, 0) in listener.bid_updates

    def test_illegal_bid_rejected_and_previous_kept(self, catalog):
        listener = ScriptedListener(nominations={0: ["3"]}, bids={0: [3], 1: [500]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)

        record = engine.run_nomination()
        assert (1, 500, False) in listener.results
        assert (1, 500) not in listener.bid_updates
        assert record.winner_id == 0
        assert record.winning_bid == 3

    def test_submission_for_other_participant_ignored(self, catalog):
        class Meddler(ScriptedListener):
            def on_phase_changed(self, state):
                if state.phase == PHASE_BIDDING and state.active_bidder_id == 0:
                    self.results.append(self.channel.submit_bid(1, 10))
                super().on_phase_changed(state)

        listener = Meddler(nominations={0: ["3"]}, bids={0: [2]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)

        record = engine.run_nomination()
        assert listener.results[1] is False
        assert record.winning_bid == 2

    def test_full_roster_skipped_in_bidding(self, catalog):
        listener = ScriptedListener(nominations={1: ["9"]}, bids={0: [4], 1: [1]})
        engine = _make_human_engine(catalog, listener, n=2, roster_size=1, timeout=0.02)
        state = engine.auction_state
        state.participants[0].award_player(catalog.find_by_id("1"), 4)
        state.mark_nominated("1")
        state.nominator_index = 1

        record = engine.run_nomination()
        assert record.winner_id == 1
        assert all(pid != 0 for pid, _ in listener.bid_updates)


# ── Automated Auction ────────────────────────────────────────────────

class TestAutomatedAuction:
    def test_every_roster_filled(self, catalog):
        engine = _make_bot_engine(catalog)
        standings = engine.run()
        state = engine.auction_state

        assert state.is_complete
        assert len(state.history) == 12
        assert len(standings) == 4
        for p in state.participants:
            assert len(p.roster) == 3
            assert p.amount_spent <= p.budget
            assert p.current_bid == 0

    def test_each_player_won_once(self, catalog):
        engine = _make_bot_engine(catalog)
        engine.run()
        won = [
            entry.player.player_id
            for p in engine.auction_state.participants
            for entry in p.roster
        ]
        assert len(won) == len(set(won))
        assert set(won) == {r.player_id for r in engine.auction_state.history}
        assert set(won) == engine.auction_state.nominated_ids

    def test_budget_never_exceeded_during_bidding(self, catalog):
        violations = []

        class BudgetWatcher(AuctionListener):
            def on_bid_updated(self, participant, amount):
                if participant.amount_spent + participant.current_bid > participant.budget:
                    violations.append(participant.name)

        engine = _make_bot_engine(catalog, listener=BudgetWatcher())
        engine.run()
        assert violations == []

    def test_nominations_rotate_through_rounds(self, catalog):
        engine = _make_bot_engine(catalog)
        engine.run()
        history = engine.auction_state.history
        order = [p.participant_id for p in engine.auction_state.participants]

        assert [r.nomination_number for r in history] == list(range(1, 13))
        assert [r.round for r in history] == [1] * 4 + [2] * 4 + [3] * 4
        assert [r.nominator_id for r in history] == order * 3

    def test_same_seed_same_auction(self, catalog):
        def outcome(seed):
            engine = _make_bot_engine(catalog, seed=seed)
            engine.run()
            return [(r.player_id, r.winner_id, r.winning_bid) for r in engine.auction_state.history]

        assert outcome(5) == outcome(5)

    def test_listener_event_order(self, catalog):
        listener = ScriptedListener()
        engine = _make_bot_engine(catalog, league_size=2, roster_size=1, listener=listener)
        engine.run()

        kinds = [e[0] for e in listener.events]
        assert kinds == [
            "nominated", "resolved", "standings",
            "nominated", "resolved", "standings",
            "complete",
        ]

    def test_run_nomination_after_complete_raises(self, catalog):
        engine = _make_bot_engine(catalog, league_size=2, roster_size=1)
        engine.run()
        assert engine.is_complete
        with pytest.raises(AuctionError, match="already complete"):
            engine.run_nomination()


# ── Winner Selection ─────────────────────────────────────────────────

class TestSelectWinner:
    def _tied_engine(self, catalog, seed):
        engine = _make_bot_engine(catalog, league_size=3, roster_size=2)
        engine.rng = random.Random(seed)
        for p in engine.auction_state.participants:
            p.place_bid(10)
        return engine

    def test_highest_bid_wins(self, catalog):
        engine = _make_bot_engine(catalog, league_size=3, roster_size=2)
        bids = [3, 9, 4]
        for p, amount in zip(engine.auction_state.participants, bids):
            p.place_bid(amount)
        assert engine.select_winner().current_bid == 9

    def test_tie_break_reproducible(self, catalog):
        a = self._tied_engine(catalog, seed=42)
        b = self._tied_engine(catalog, seed=42)
        picks_a = [a.select_winner().participant_id for _ in range(20)]
        picks_b = [b.select_winner().participant_id for _ in range(20)]
        assert picks_a == picks_b

    def test_tie_break_is_uniform(self, catalog):
        engine = self._tied_engine(catalog, seed=0)
        counts = Counter(engine.select_winner().participant_id for _ in range(3000))
        assert len(counts) == 3
        for count in counts.values():
            assert 850 < count < 1150

    def test_full_roster_cannot_win(self, catalog):
        engine = _make_bot_engine(catalog, league_size=3, roster_size=1)
        full = engine.auction_state.participants[0]
        full.award_player(catalog.find_by_id("1"), 5)
        for _ in range(50):
            assert engine.select_winner() is not full


# ── Failure Paths ────────────────────────────────────────────────────

class TestAbort:
    def test_unknown_player_aborts(self, catalog, monkeypatch):
        engine = _make_bot_engine(catalog)
        state = engine.auction_state
        monkeypatch.setattr(state, "default_nomination", lambda: "ghost")

        with pytest.raises(UnknownPlayer):
            engine.run_nomination()
        assert state.phase == PHASE_ABORTED
        assert state.history == []

    def test_abort_during_human_wait(self, catalog):
        listener = ScriptedListener()
        engine = _make_human_engine(catalog, listener, timeout=5.0)
        timer = threading.Timer(0.05, engine.abort)
        timer.start()
        try:
            with pytest.raises(AuctionAborted):
                engine.run()
        finally:
            timer.cancel()

        state = engine.auction_state
        assert state.phase == PHASE_ABORTED
        assert not state.is_complete
        assert all(p.current_bid == 0 for p in state.participants)


# ── Listener Failures ────────────────────────────────────────────────

class TestListenerFailure:
    def test_failure_mid_bidding_rolls_back(self, catalog):
        class FailsOnSecondBidder(ScriptedListener):
            fail = True

            def on_phase_changed(self, state):
                if self.fail and state.phase == PHASE_BIDDING and state.active_bidder_id == 1:
                    raise RuntimeError("renderer crashed")
                super().on_phase_changed(state)

        listener = FailsOnSecondBidder(nominations={0: ["1"]}, bids={0: [5]})
        engine = _make_human_engine(catalog, listener, timeout=0.02)
        state = engine.auction_state

        with pytest.raises(RuntimeError, match="renderer crashed"):
            engine.run_nomination()

        assert [p.current_bid for p in state.participants] == [0, 0]
        assert engine.scheduler.active_window is None
        assert not state.is_nominated("1")
        assert all(len(p.roster) == 0 for p in state.participants)
        assert state.phase == PHASE_NOMINATION
        assert state.history == []

        # Same nominator retries the same player
        listener.fail = False
        listener.nominations = {0: ["1"]}
        listener.bids = {0: [5], 1: [8]}
        record = engine.run_nomination()
        assert record.player_id == "1"
        assert record.winner_id == 1
        assert record.winning_bid == 8

    def test_failure_on_nomination_returns_player(self, catalog):
        class FailsOnFirstNomination(AuctionListener):
            failed = False

            def on_player_nominated(self, player, nominator):
                if not self.failed:
                    self.failed = True
                    raise RuntimeError("ticker down")

        engine = _make_bot_engine(catalog, listener=FailsOnFirstNomination())
        state = engine.auction_state
        first = state.default_nomination()

        with pytest.raises(RuntimeError):
            engine.run_nomination()

        assert not state.is_nominated(first)
        assert state.nomination_number == 1
        assert state.phase == PHASE_NOMINATION

        record = engine.run_nomination()
        assert record.player_id == first

    def test_failure_after_award_keeps_sale(self, catalog):
        class FailsOnFirstResolution(AuctionListener):
            failed = False

            def on_nomination_resolved(self, winner, player, amount):
                if not self.failed:
                    self.failed = True
                    raise RuntimeError("scoreboard offline")

        engine = _make_bot_engine(
            catalog, league_size=2, roster_size=2, listener=FailsOnFirstResolution()
        )
        state = engine.auction_state

        with pytest.raises(RuntimeError):
            engine.run_nomination()

        assert len(state.history) == 1
        sold = state.history[0].player_id
        assert state.is_nominated(sold)
        assert state.nomination_number == 2
        assert state.phase == PHASE_NOMINATION
        assert all(p.current_bid == 0 for p in state.participants)

        engine.run()
        assert state.is_complete
        assert len(state.history) == 4
        assert all(len(p.roster) == 2 for p in state.participants)


# ── Results ──────────────────────────────────────────────────────────

class TestSummary:
    def test_incomplete_auction(self, catalog):
        engine = _make_bot_engine(catalog)
        assert engine.get_auction_summary() == {"error": "Auction not complete"}

    def test_complete_auction(self, catalog):
        engine = _make_bot_engine(catalog)
        engine.run()
        summary = engine.get_auction_summary()

        assert summary["total_nominations"] == 12
        assert len(summary["participants"]) == 4
        ranks = sorted(p["rank"] for p in summary["participants"])
        assert ranks == [1, 2, 3, 4]
        for entry in summary["participants"]:
            assert len(entry["roster"]) == 3
            assert entry["spent"] + entry["remaining_budget"] == 20
            assert set(entry["cumulative_stats"]) >= {"ppg", "fg_pct", "tos"}

    def test_standings_frame(self, catalog):
        engine = _make_bot_engine(catalog)
        engine.run()
        df = engine.standings_frame()
        assert list(df["rank"]) == [1, 2, 3, 4]
        assert df["h2h_points"].is_monotonic_decreasing
