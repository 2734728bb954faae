from pathlib import Path

# Base project directory
PROJECT_ROOT = Path(__file__).parent.parent.parent

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
DEFAULT_CATALOG_FILE = DATA_DIR / "players.json"

SUPPORTED_SUFFIXES = {".json", ".csv"}

# Raw export column -> canonical column
COLUMN_ALIASES = {
    "id": "player_id",
    "player": "name",
    "pos": "position",
    "gp": "games",
    "g": "games",
    "3pm": "three_p",
    "fg%": "fg_pct",
    "ft%": "ft_pct",
    "to": "tos",
    "tov": "tos",
    "stl": "spg",
    "blk": "bpg",
}

# Per-game counting stats plus attempt volume and availability
COUNTING_COLUMNS = [
    "ppg", "apg", "rpg", "spg", "bpg", "tos", "three_p", "fga", "fta", "games",
]

PERCENT_COLUMNS = ["fg_pct", "ft_pct"]

REQUIRED_COLUMNS = ["player_id", "name", "position"]

VALID_POSITIONS = ("PG", "SG", "SF", "PF", "C")

# Team code used by stat exports for a traded player's combined line
COMBINED_TEAM_CODES = {"TOT", "2TM", "3TM", "4TM"}
