"""Download, load and join the holiday episode tables.

The episode table holds one row per IMDb episode whose title mentions a
holiday; the genre table holds one row per (episode, genre) pair. Joining
them yields a table where multi-genre episodes repeat once per genre, which
is exactly what genre-level statistics need and exactly what episode-level
statistics must avoid. ``EpisodeTables`` exposes both views of the one
joined table so callers never de-duplicate ad hoc.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property
from pathlib import Path
from typing import Iterable

import numpy as np
import pandas as pd
import requests
from loguru import logger

from .config import (
    EPISODES_PATH,
    EPISODES_URL,
    GENRES_PATH,
    GENRES_URL,
    HOLIDAY_FLAGS,
    ID_COLUMN,
    NUMERIC_COLUMNS,
    RATING_COLUMNS,
    RATING_LIMITS,
    REQUIRED_EPISODE_COLUMNS,
    REQUIRED_GENRE_COLUMNS,
)
from .errors import MissingInputFieldError

_TRUTHY = {"true", "t", "1", "yes"}


def download_dataset(url: str, destination: Path) -> Path:
    """Download a source table if it is not already cached."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    if destination.exists():
        logger.info(f"Reusing cached table at {destination}")
        return destination

    logger.info(f"Downloading {url}")
    response = requests.get(url, timeout=60)
    response.raise_for_status()
    destination.write_bytes(response.content)
    logger.info(f"Saved table to {destination}")
    return destination


def download_sources(
    episodes_path: Path = EPISODES_PATH, genres_path: Path = GENRES_PATH
) -> tuple[Path, Path]:
    return (
        download_dataset(EPISODES_URL, episodes_path),
        download_dataset(GENRES_URL, genres_path),
    )


def require_columns(df: pd.DataFrame, columns: Iterable[str], table: str) -> None:
    """Raise ``MissingInputFieldError`` if any of ``columns`` is absent."""

    missing = set(columns) - set(df.columns)
    if missing:
        raise MissingInputFieldError(table, missing)


def _to_flag(value: object) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    return str(value).strip().lower() in _TRUTHY


def _clean_label(value: object) -> object:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return np.nan


def _drop_missing_ids(df: pd.DataFrame, table: str) -> pd.DataFrame:
    identified = df.dropna(subset=[ID_COLUMN]).copy()
    dropped = len(df) - len(identified)
    if dropped:
        logger.warning(f"Dropping {dropped} {table} rows without a {ID_COLUMN}")
    identified[ID_COLUMN] = identified[ID_COLUMN].astype(str)
    return identified


def _mask_invalid(series: pd.Series, valid: pd.Series, column: str) -> pd.Series:
    """Blank out values failing ``valid`` so each analysis filters them locally."""

    invalid = series.notna() & ~valid
    if invalid.any():
        logger.warning(f"Treating {int(invalid.sum())} out-of-range {column} values as missing")
    return series.where(~invalid)


def clean_episodes(episodes: pd.DataFrame) -> pd.DataFrame:
    """Validate the episode table and coerce its numeric and flag columns.

    Ratings outside ``RATING_LIMITS`` and negative vote counts become
    missing values.
    """

    require_columns(episodes, REQUIRED_EPISODE_COLUMNS, "episode")
    cleaned = _drop_missing_ids(episodes, "episode")
    for column in NUMERIC_COLUMNS:
        cleaned[column] = pd.to_numeric(cleaned[column], errors="coerce")
    low, high = RATING_LIMITS
    for column in RATING_COLUMNS:
        cleaned[column] = _mask_invalid(cleaned[column], cleaned[column].between(low, high), column)
    cleaned["num_votes"] = _mask_invalid(cleaned["num_votes"], cleaned["num_votes"] >= 0, "num_votes")
    for flag in HOLIDAY_FLAGS:
        cleaned[flag] = cleaned[flag].map(_to_flag).astype(bool)
    return cleaned


def clean_genres(genres: pd.DataFrame) -> pd.DataFrame:
    """Validate the genre table and normalise blank labels to missing."""

    require_columns(genres, REQUIRED_GENRE_COLUMNS, "genre")
    cleaned = _drop_missing_ids(genres.loc[:, list(REQUIRED_GENRE_COLUMNS)], "genre")
    cleaned["genres"] = cleaned["genres"].map(_clean_label)
    return cleaned


def load_tables(episodes_path: Path = EPISODES_PATH, genres_path: Path = GENRES_PATH) -> tuple[pd.DataFrame, pd.DataFrame]:
    """Read both source CSV files into cleaned DataFrames."""

    episodes = clean_episodes(pd.read_csv(episodes_path))
    genres = clean_genres(pd.read_csv(genres_path))
    logger.info(f"Loaded {len(episodes)} episodes and {len(genres)} genre labels")
    return episodes, genres


def join_datasets(episodes: pd.DataFrame, genres: pd.DataFrame) -> pd.DataFrame:
    """Left-join genre labels onto episodes.

    The genre table's ``genres`` becomes ``main_genre`` and the episode
    table's multi-value ``genres`` becomes ``genre_combi``. Episodes without a
    genre row are kept with a missing ``main_genre``; episodes with several
    genre rows appear once per row.
    """

    require_columns(episodes, (ID_COLUMN, "genres"), "episode")
    require_columns(genres, REQUIRED_GENRE_COLUMNS, "genre")

    left = episodes.rename(columns={"genres": "genre_combi"})
    right = genres.loc[:, list(REQUIRED_GENRE_COLUMNS)].rename(columns={"genres": "main_genre"})
    return left.merge(right, on=ID_COLUMN, how="left").reset_index(drop=True)


def add_decades(df: pd.DataFrame, year_column: str = "year") -> pd.DataFrame:
    """Return a copy of ``df`` with ``decade_start`` and ``decade`` label columns."""

    labelled = df.copy()
    years = pd.to_numeric(labelled[year_column], errors="coerce")
    start = (np.floor(years / 10) * 10).astype("Int64")
    labelled["decade_start"] = start
    labelled["decade"] = [
        None if pd.isna(value) else f"{int(value)}-{int(value) + 9}" for value in start
    ]
    return labelled


@dataclass(frozen=True)
class EpisodeTables:
    """One joined table seen at episode level and at genre level."""

    joined: pd.DataFrame

    @classmethod
    def from_sources(cls, episodes: pd.DataFrame, genres: pd.DataFrame) -> "EpisodeTables":
        return cls(join_datasets(clean_episodes(episodes), clean_genres(genres)))

    @cached_property
    def episodes(self) -> pd.DataFrame:
        """One row per distinct episode (first genre row kept)."""

        return self.joined.drop_duplicates(subset=ID_COLUMN, keep="first").reset_index(drop=True)

    @property
    def genre_rows(self) -> pd.DataFrame:
        """One row per episode-genre pair."""

        return self.joined
