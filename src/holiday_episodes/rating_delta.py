"""Holiday episode ratings relative to their parent series."""

from __future__ import annotations

import numpy as np
import pandas as pd

from .config import ID_COLUMN, TOP_K

ABOVE_SERIES = "Above series"
BELOW_SERIES = "Below series"


def compute_rating_diff(df: pd.DataFrame) -> pd.DataFrame:
    """Return rows with both ratings plus ``rating_diff`` (episode minus series)."""

    rated = df.dropna(subset=["average_rating", "parent_average_rating"]).copy()
    rated["rating_diff"] = rated["average_rating"] - rated["parent_average_rating"]
    return rated


def genre_rating_delta(genre_rows: pd.DataFrame) -> pd.DataFrame:
    """Mean rating difference per genre, ordered from most negative to most positive."""

    rated = compute_rating_diff(genre_rows).dropna(subset=["main_genre"])
    delta = (
        rated.groupby("main_genre")
        .agg(mean_diff=("rating_diff", "mean"), n_episodes=(ID_COLUMN, "nunique"))
        .reset_index()
        .rename(columns={"main_genre": "genre"})
    )
    delta["direction"] = np.where(delta["mean_diff"] >= 0, ABOVE_SERIES, BELOW_SERIES)
    return delta.sort_values(["mean_diff", "genre"], kind="stable").reset_index(drop=True)


def top_rating_deltas(episodes: pd.DataFrame, k: int = TOP_K) -> pd.DataFrame:
    """Episodes that most outperform their parent series."""

    rated = compute_rating_diff(episodes)
    columns = [
        ID_COLUMN,
        "primary_title",
        "parent_primary_title",
        "average_rating",
        "parent_average_rating",
        "rating_diff",
    ]
    return (
        rated.sort_values("rating_diff", ascending=False, kind="stable")
        .head(k)
        .loc[:, columns]
        .reset_index(drop=True)
    )
