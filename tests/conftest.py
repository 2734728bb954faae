"""Shared fixtures for the auction test suite."""

import json

import pytest

from src.data_pipeline.player_catalog import Player, PlayerCatalog

POSITIONS = ["PG", "SG", "SF", "PF", "C"]


def _player_record(i: int) -> dict:
    """A plausible, slowly declining stat line for catalog slot ``i``."""
    return {
        "id": i + 1,
        "player": f"Player {i + 1}",
        "pos": POSITIONS[i % len(POSITIONS)],
        "team": "TST",
        "ppg": max(2.0, 28.0 - i * 0.5),
        "apg": max(0.5, 8.0 - i * 0.15),
        "rpg": max(1.0, 10.0 - i * 0.2),
        "spg": max(0.2, 1.8 - i * 0.03),
        "bpg": max(0.1, 1.5 - i * 0.03),
        "tos": max(0.5, 3.0 - i * 0.05),
        "three_p": max(0.0, 2.5 - i * 0.05),
        "fg_pct": 0.47,
        "ft_pct": 0.80,
        "fga": max(3.0, 18.0 - i * 0.3),
        "fta": max(1.0, 6.0 - i * 0.1),
        "games": 70,
    }


# ------------------------------------------------------------------
# Lightweight factories – cheap to construct, no I/O
# ------------------------------------------------------------------

@pytest.fixture
def player_records():
    """Raw-export style records (``id``/``player``/``pos`` labels)."""
    return [_player_record(i) for i in range(40)]


@pytest.fixture
def catalog():
    """40-player catalog with ids "1".."40" in catalog order."""
    players = []
    for i in range(40):
        rec = _player_record(i)
        players.append(
            Player(
                player_id=str(rec["id"]),
                name=rec["player"],
                position=rec["pos"],
                team=rec["team"],
                ppg=rec["ppg"],
                apg=rec["apg"],
                rpg=rec["rpg"],
                spg=rec["spg"],
                bpg=rec["bpg"],
                tos=rec["tos"],
                three_p=rec["three_p"],
                fg_pct=rec["fg_pct"],
                ft_pct=rec["ft_pct"],
                fga=rec["fga"],
                fta=rec["fta"],
                games=rec["games"],
            )
        )
    return PlayerCatalog(players)


# ------------------------------------------------------------------
# File fixtures
# ------------------------------------------------------------------

@pytest.fixture
def catalog_json(tmp_path, player_records):
    """JSON export on disk in the ``{"players": [...]}`` shape."""
    path = tmp_path / "players.json"
    path.write_text(json.dumps({"players": player_records}), encoding="utf-8")
    return path
