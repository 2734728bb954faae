"""Run a fully automated auction and print the final standings.

Usage:
    python -m src.auction_manager.run_auction <catalog_path> [league_size] [seed]

Examples:
    python -m src.auction_manager.run_auction data/players.json
    python -m src.auction_manager.run_auction data/players.csv 12 7
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from src.auction_manager.auction_engine import AuctionEngine
from src.auction_manager.auction_initializer import AuctionInitializer
from src.logging_config import setup_logging

logger = logging.getLogger(__name__)

DEFAULT_LEAGUE_SIZE = 10


def run_simulation(
    catalog_path: Path,
    league_size: int = DEFAULT_LEAGUE_SIZE,
    seed: Optional[int] = None,
) -> AuctionEngine:
    """Run an all-bot auction with no response delays.

    Returns:
        The finished engine; its state holds rosters and standings.
    """
    initializer = AuctionInitializer(catalog_path)
    state = initializer.create_auction(
        league_size=league_size,
        human_count=0,
        seed=seed,
        automated_response_delay=0.0,
    )
    engine = AuctionEngine(state)
    engine.run()
    return engine


if __name__ == "__main__":
    setup_logging()

    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)

    catalog_path = Path(sys.argv[1])
    league_size = int(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_LEAGUE_SIZE
    seed = int(sys.argv[3]) if len(sys.argv) > 3 else None

    try:
        engine = run_simulation(catalog_path, league_size, seed)
        print(engine.standings_frame().round(2).to_string(index=False))
    except Exception:
        logger.exception("Auction simulation failed")
        sys.exit(1)
