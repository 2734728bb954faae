from src.auction_manager.auction_engine import AuctionEngine
from src.auction_manager.auction_initializer import AuctionInitializer
from src.auction_manager.auction_rules import (
    AuctionAborted,
    AuctionError,
    AuctionRules,
    InvalidBid,
    InvalidNomination,
    UnknownPlayer,
)
from src.auction_manager.auction_state import (
    AuctionSettings,
    AuctionState,
    NominationRecord,
)
from src.auction_manager.input_channel import HumanInputChannel
from src.auction_manager.listeners import (
    AuctionListener,
    CompositeListener,
    LoggingAuctionListener,
)
from src.auction_manager.participant import CumulativeStats, Participant, RosterEntry
from src.auction_manager.ranking_engine import HeadToHeadRanker, Standing
from src.auction_manager.scheduler import CooperativeScheduler, TimedWait

__all__ = [
    "AuctionAborted",
    "AuctionEngine",
    "AuctionError",
    "AuctionInitializer",
    "AuctionListener",
    "AuctionRules",
    "AuctionSettings",
    "AuctionState",
    "CompositeListener",
    "CooperativeScheduler",
    "CumulativeStats",
    "HeadToHeadRanker",
    "HumanInputChannel",
    "InvalidBid",
    "InvalidNomination",
    "LoggingAuctionListener",
    "NominationRecord",
    "Participant",
    "RosterEntry",
    "Standing",
    "TimedWait",
    "UnknownPlayer",
]
