"""Data cleaning for raw player stat exports.

Brings an ingested DataFrame to the catalog's canonical shape:
- Rename export column labels (``player``, ``pos``, ``fg%`` ...) to catalog names
- Base position from multi-position strings (PG-SG -> PG)
- Shooting percentages on the fractional 0-1 scale
- One row per player when a traded player is listed once per team
"""

import logging
import re
from typing import Optional

import pandas as pd

from src.data_pipeline.config import (
    COLUMN_ALIASES,
    COMBINED_TEAM_CODES,
    COUNTING_COLUMNS,
    PERCENT_COLUMNS,
    REQUIRED_COLUMNS,
    VALID_POSITIONS,
)

logger = logging.getLogger(__name__)

# Regex: leading position letters, anything after (e.g. "-SG", "/SF") ignored
_POS_PATTERN = re.compile(r"^\s*([A-Za-z]+)")


class StatsCleaner:
    """Cleans and standardizes a raw player stat DataFrame."""

    # ------------------------------------------------------------------
    # Value helpers
    # ------------------------------------------------------------------
    @staticmethod
    def extract_base_position(pos_str) -> Optional[str]:
        """Extract the primary position.

        Examples:
            "PG"    -> "PG"
            "PG-SG" -> "PG"
            "c"     -> "C"
            "G"     -> None
        """
        if pos_str is None or pd.isna(pos_str):
            return None
        m = _POS_PATTERN.match(str(pos_str))
        if not m:
            return None
        letters = m.group(1).upper()
        return letters if letters in VALID_POSITIONS else None

    @staticmethod
    def normalize_player_id(value) -> Optional[str]:
        """Render an id as a string, collapsing float ids like 12.0 to "12"."""
        if value is None or pd.isna(value):
            return None
        if isinstance(value, float) and value.is_integer():
            return str(int(value))
        text = str(value).strip()
        return text or None

    @staticmethod
    def to_fraction(values: pd.Series) -> pd.Series:
        """Bring a shooting percentage column to the 0-1 scale.

        The scale is read off the whole column: any value above 1 marks
        it as percent-scale (55.0 -> 0.55) and every value is divided.
        Missing values become 0.
        """
        numeric = pd.to_numeric(values, errors="coerce")
        if numeric.max() > 1.0:
            numeric = numeric / 100.0
        return numeric.fillna(0.0)

    # ------------------------------------------------------------------
    # DataFrame-level cleaning
    # ------------------------------------------------------------------
    def rename_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        """Map export column labels onto catalog column names."""
        renames = {}
        for col in df.columns:
            target = COLUMN_ALIASES.get(col)
            # First alias wins when an export carries two (e.g. "g" and "gp")
            if target and target not in df.columns and target not in renames.values():
                renames[col] = target
        return df.rename(columns=renames)

    def coerce_stats(self, df: pd.DataFrame) -> pd.DataFrame:
        """Numeric stat columns, missing values as 0, percentages as fractions."""
        out = df.copy()
        for col in COUNTING_COLUMNS:
            if col not in out.columns:
                logger.warning("Stat column '%s' missing; defaulting to 0", col)
                out[col] = 0.0
            out[col] = pd.to_numeric(out[col], errors="coerce").fillna(0.0)

        for col in PERCENT_COLUMNS:
            if col not in out.columns:
                logger.warning("Stat column '%s' missing; defaulting to 0", col)
                out[col] = 0.0
            out[col] = self.to_fraction(out[col])

        return out

    def deduplicate_traded_players(self, df: pd.DataFrame) -> pd.DataFrame:
        """Keep one row per player id.

        Stat exports list a traded player once per team plus a combined
        line. The combined line wins when present, otherwise the row with
        the most games played.
        """
        if not df["player_id"].duplicated().any():
            return df

        out = df.copy()
        if "team" in out.columns:
            out["_combined"] = out["team"].isin(COMBINED_TEAM_CODES)
        else:
            out["_combined"] = False
        out["_order"] = range(len(out))

        best = (
            out.sort_values(["_combined", "games"], ascending=[False, False])
            .drop_duplicates(subset="player_id", keep="first")
            .sort_values("_order")
        )
        dropped = len(out) - len(best)
        logger.info("Collapsed %d per-team rows for traded players", dropped)
        return best.drop(columns=["_combined", "_order"]).reset_index(drop=True)

    def clean(self, df: pd.DataFrame) -> pd.DataFrame:
        """Run every cleaning step and return the catalog-ready DataFrame.

        Row order is preserved: it becomes the catalog order that the
        default nomination policy walks.

        Raises:
            ValueError: If a required column (id, name, position) is missing.
        """
        out = self.rename_columns(df)

        missing = [col for col in REQUIRED_COLUMNS if col not in out.columns]
        if missing:
            raise ValueError(f"Player data missing required columns: {missing}")

        out["player_id"] = out["player_id"].apply(self.normalize_player_id)
        out["position"] = out["position"].apply(self.extract_base_position)
        out["name"] = out["name"].apply(
            lambda n: " ".join(str(n).split()) if n is not None and not pd.isna(n) else None
        )

        invalid = out["player_id"].isna() | out["name"].isna() | out["position"].isna()
        if invalid.any():
            logger.warning(
                "Dropping %d rows with no id, name or recognized position",
                int(invalid.sum()),
            )
            out = out[~invalid]

        out = self.coerce_stats(out.reset_index(drop=True))
        out = self.deduplicate_traded_players(out)

        logger.info("Cleaned player data: %d players", len(out))
        return out
