"""Player dataset ingestion.

Reads the season stat export that seeds the player catalog. Two shapes
are accepted:
- JSON: a list of player records, or an object with a ``players`` list
- CSV: one row per player (or per player-team stint)

Column names are lower-cased and stripped here; renaming and numeric
coercion happen in :mod:`src.data_pipeline.cleaning`.
"""

import json
import logging
from pathlib import Path

import pandas as pd

from src.data_pipeline.config import SUPPORTED_SUFFIXES

logger = logging.getLogger(__name__)


class IngestionError(Exception):
    """Raised when the player dataset cannot be read."""


def _parse_numeric(value):
    """Parse a numeric string that may contain commas or a trailing '%'."""
    if pd.isna(value):
        return value
    if isinstance(value, (int, float)):
        return float(value)
    s = str(value).replace(",", "").strip().strip('"').rstrip("%")
    if s == "" or s == "-":
        return float("nan")
    try:
        return float(s)
    except ValueError:
        return float("nan")


class PlayerDataIngester:
    """Loads a raw player dataset into a pandas DataFrame."""

    def __init__(self, data_path: Path):
        self.data_path = Path(data_path)

    def _resolve_path(self) -> Path:
        if not self.data_path.exists():
            raise FileNotFoundError(f"Player data file not found: {self.data_path}")
        suffix = self.data_path.suffix.lower()
        if suffix not in SUPPORTED_SUFFIXES:
            raise IngestionError(
                f"Unsupported player data format '{suffix}'. "
                f"Expected one of: {sorted(SUPPORTED_SUFFIXES)}"
            )
        return self.data_path

    # ------------------------------------------------------------------
    # Readers
    # ------------------------------------------------------------------
    def read_json(self, filepath: Path) -> pd.DataFrame:
        """Read a JSON export (bare list or ``{"players": [...]}``)."""
        with open(filepath, "r", encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise IngestionError(f"Malformed JSON in {filepath.name}: {e}") from e

        if isinstance(data, dict):
            if "players" not in data:
                raise IngestionError(
                    f"{filepath.name} has no 'players' list at the top level"
                )
            data = data["players"]

        if not isinstance(data, list):
            raise IngestionError(f"{filepath.name} does not contain a list of players")

        return pd.DataFrame.from_records(data)

    def read_csv(self, filepath: Path) -> pd.DataFrame:
        """Read a CSV export, tolerating quoted and comma-formatted numbers."""
        try:
            df = pd.read_csv(filepath, quotechar='"', dtype=str)
        except (pd.errors.ParserError, pd.errors.EmptyDataError) as e:
            raise IngestionError(f"Failed to parse {filepath.name}: {e}") from e
        return df

    def read(self) -> pd.DataFrame:
        """Read the dataset and normalize column labels.

        Returns:
            DataFrame with lower-cased, stripped column names. Numeric
            looking strings are parsed to floats; other columns are
            left as stripped strings.

        Raises:
            FileNotFoundError: If the data file does not exist.
            IngestionError: If the file cannot be parsed.
        """
        filepath = self._resolve_path()
        logger.info("Reading player data: %s", filepath.name)

        if filepath.suffix.lower() == ".json":
            df = self.read_json(filepath)
        else:
            df = self.read_csv(filepath)

        df.columns = [str(c).strip().lower() for c in df.columns]

        for col in df.select_dtypes(include=["object", "string"]).columns:
            stripped = df[col].astype("string").str.strip().str.strip('"')
            parsed = stripped.apply(_parse_numeric)
            # Only convert columns where every non-blank value is numeric
            non_blank = stripped.notna() & (stripped != "")
            if non_blank.any() and parsed[non_blank].notna().all():
                df[col] = pd.to_numeric(parsed, errors="coerce")
            else:
                df[col] = stripped.astype(object).where(stripped.notna(), None)

        logger.info("Loaded %d raw player rows", len(df))
        return df
