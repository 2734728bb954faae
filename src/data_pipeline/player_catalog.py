"""Read-only player catalog consumed by the auction engine."""

import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Iterator, List, Optional

import pandas as pd

from src.data_pipeline.cleaning import StatsCleaner
from src.data_pipeline.ingestion import PlayerDataIngester

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Player:
    """One player's previous-season per-game line.

    ``fg_pct`` and ``ft_pct`` are fractions in [0, 1].
    """

    player_id: str
    name: str
    position: str  # PG, SG, SF, PF or C
    team: Optional[str] = None
    ppg: float = 0.0
    apg: float = 0.0
    rpg: float = 0.0
    spg: float = 0.0
    bpg: float = 0.0
    tos: float = 0.0
    three_p: float = 0.0
    fg_pct: float = 0.0
    ft_pct: float = 0.0
    fga: float = 0.0
    fta: float = 0.0
    games: int = 0

    @classmethod
    def from_record(cls, record: Dict) -> "Player":
        """Build a Player from a cleaned record, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in record.items() if k in known}
        if values.get("team") is not None and pd.isna(values["team"]):
            values["team"] = None
        if "games" in values:
            values["games"] = int(values["games"])
        return cls(**values)


class PlayerCatalog:
    """Ordered, id-indexed collection of players.

    Iteration follows catalog order, which is the order the default
    nomination policy walks.
    """

    def __init__(self, players: List[Player]):
        self._order: List[str] = []
        self._by_id: Dict[str, Player] = {}
        for player in players:
            if player.player_id in self._by_id:
                raise ValueError(f"Duplicate player id in catalog: {player.player_id}")
            self._by_id[player.player_id] = player
            self._order.append(player.player_id)

    @classmethod
    def from_records(cls, records: List[Dict]) -> "PlayerCatalog":
        return cls([Player.from_record(r) for r in records])

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "PlayerCatalog":
        """Build a catalog from a DataFrame already run through StatsCleaner."""
        return cls.from_records(df.to_dict(orient="records"))

    @classmethod
    def load(cls, data_path: Path) -> "PlayerCatalog":
        """Ingest, clean and index a player dataset file."""
        raw = PlayerDataIngester(data_path).read()
        cleaned = StatsCleaner().clean(raw)
        catalog = cls.from_dataframe(cleaned)
        logger.info("Player catalog ready: %d players", len(catalog))
        return catalog

    def find_by_id(self, player_id: str) -> Optional[Player]:
        """Return the player with this id, or None when absent."""
        return self._by_id.get(player_id)

    @property
    def player_ids(self) -> List[str]:
        return list(self._order)

    def __contains__(self, player_id) -> bool:
        return player_id in self._by_id

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[Player]:
        for player_id in self._order:
            yield self._by_id[player_id]
