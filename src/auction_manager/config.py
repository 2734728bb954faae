# Default auction settings
ROSTER_SIZE = 13
TOTAL_BUDGET = 200
NOMINATION_TIME = 20.0  # seconds
BIDDING_TIME = 20.0  # seconds
AUTOMATED_RESPONSE_DELAY = 0.4  # seconds

# League size bounds
MIN_LEAGUE_SIZE = 2
MAX_LEAGUE_SIZE = 20

# Approximate ceiling an automated bidder will pay for any one player
AGGRESSION_LEVELS = (43, 55, 65, 72)

# Opening bid a nominator is assumed to make when their window lapses
DEFAULT_OPENING_BID = 1

# Head-to-head scoring categories, in display order
STAT_CATEGORIES = (
    "fg_pct", "ft_pct", "ppg", "apg", "rpg", "three_p", "spg", "bpg", "tos",
)
LOWER_IS_BETTER_CATEGORIES = {"tos"}

# Auction phases
PHASE_NOMINATION = "nomination_pending"
PHASE_BIDDING = "bidding_open"
PHASE_RESOLVED = "round_resolved"
PHASE_COMPLETE = "auction_complete"
PHASE_ABORTED = "auction_aborted"

# Pending-action kinds for timed windows
ACTION_NOMINATION = "nomination"
ACTION_BID = "bid"
ACTION_DELAY = "delay"
