# League/aggression baseline
LEAGUE_SIZE_PIVOT = 12  # leagues at or below this size count as "standard"
LARGE_LEAGUE_SIZE = 16
LOW_AGGRESSION_CUTOFF = 55
LOW_AGGRESSION_BASE = 1.05
LOW_AGGRESSION_SLOPE = 0.39
STANDARD_LEAGUE_MULTIPLIER = 1.1
LARGE_LEAGUE_MULTIPLIER = 0.87
LEAGUE_QUADRATIC_COEF = 0.04911
LEAGUE_LINEAR_COEF = 0.3964

# Per-bidder random jitter on the aggression ceiling: randint(0, MAX) - OFFSET
JITTER_MAX = 8
JITTER_OFFSET = 3.3

# Logistic contribution curves: stat -> (peak, steepness, turn)
CONTRIBUTION_CURVES = {
    "ppg": (20.0, 0.3, 17.5),
    "apg": (12.0, 0.7, 4.0),
    "rpg": (12.0, 0.7, 5.0),
    "three_p_elite": (6.0, 0.6, 0.0),
    "three_p": (0.8, 0.6, 0.4),
    "fta_volume": (1.0, 0.8, 3.0),
    "fga_volume": (1.0, 0.25, 6.0),
}

ASSIST_WEIGHT = 1.5
REBOUND_WEIGHT = 1.5
REBOUND_MIN_GRADE = 3.0  # grades below this are worth nothing
REBOUND_ELITE_GRADE = 5.0  # grades below this are cut to a third
THREE_P_ELITE = 0.8
THREE_P_ELITE_WEIGHT = 1.333

# Scoring/playmaking/rebounding share used to scale defensive bonuses
CORE_GRADE_DIVISOR = 30.0

# Free throws (fractional percentages)
GOOD_FT_PCT = 0.87
FT_GRADE_CEILING = 8.0
FT_GRADE_SLOPE = 40.0
HIGH_VOLUME_FTA = 3.5
FT_STRONG_GRADE = 6.5
FT_POOR_GRADE = 3.0
FT_WEAK_GRADE = 3.2

# Field goals (fractional percentages)
GOOD_FG_PCT = 0.55
FG_GRADE_CEILING = 10.0
FG_GRADE_SLOPE = 50.0
FGA_VOLUME_CUTOFF = 10.0  # at or below, the FG grade is scaled by volume
HIGH_VOLUME_FGA = 9.8
ELITE_FG_PCT = 0.57
ELITE_FG_MIN_FGA = 7.0
FG_POOR_GRADE = 8.0
FG_WEAK_GRADE = 8.5
FG_WEAK_MIN_FGA = 5.0

EFFICIENCY_BONUS = 2.0
HIGH_VOLUME_INEFFICIENCY_PENALTY = 4.0
INEFFICIENCY_PENALTY = 2.0

# Defensive tiers: (threshold, bonus), checked highest first and scaled by
# max(floor, core grade share)
STEAL_TIERS = [(1.68, 6.0), (1.4, 4.2), (1.0, 2.0), (0.7, 1.2)]
STEAL_SCALE_FLOOR = 0.5
BLOCK_ELITE = 3.0
BLOCK_ELITE_BONUS = 8.0  # unscaled
BLOCK_TIERS = [(2.0, 5.0), (1.5, 4.0), (1.15, 3.0), (0.75, 1.4)]
BLOCK_SCALE_FLOOR = 0.7

# Score shaping
LOW_SCORE_CUTOFF = 9.0  # scores at or below are divided by LOW_SCORE_DIVISOR
LOW_SCORE_DIVISOR = 15.0
GOOD_TOS = 1.5
LOW_TURNOVER_MIN_SCORE = 10.0
LOW_TURNOVER_BONUS = 1.0

# Availability
MIN_RELIABLE_GAMES = 55
UNRELIABLE_MULTIPLIER = 0.8

NOMINATOR_FLOOR = 1
