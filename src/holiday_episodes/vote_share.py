"""Per-decade share of audience votes by genre.

An episode carrying three genres appears on three genre rows. Summing raw
``num_votes`` by genre would count its audience three times, so each row
gets ``num_votes / n_genres`` instead and the weighted rows of one episode
add back up to its original vote count.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
import pandas as pd
from loguru import logger

from .config import ID_COLUMN, OTHER_GENRE, VOTE_SHARE_GENRES
from .data import add_decades


def weight_votes(genre_rows: pd.DataFrame) -> pd.DataFrame:
    """Split each episode's votes evenly across its genre rows."""

    usable = genre_rows.dropna(subset=["main_genre", "num_votes", "year"])
    usable = usable.loc[usable["num_votes"] >= 0]
    dropped = len(genre_rows) - len(usable)
    if dropped:
        logger.debug(f"Vote share ignores {dropped} rows without genre, valid votes or year")

    weighted = add_decades(usable)
    weighted["n_genres"] = weighted.groupby(ID_COLUMN)[ID_COLUMN].transform("size")
    weighted["weighted_votes"] = weighted["num_votes"] / weighted["n_genres"]
    return weighted


def compute_vote_share(
    genre_rows: pd.DataFrame, featured: Sequence[str] = VOTE_SHARE_GENRES
) -> pd.DataFrame:
    """Return each featured genre's (and ``Other``'s) share of votes per decade.

    Genres outside ``featured`` are folded into ``Other`` before summing, so
    the proportions of every decade add up to one. A decade whose weighted
    votes total zero gets NaN proportions.
    """

    weighted = weight_votes(genre_rows)
    weighted["genre"] = weighted["main_genre"].where(
        weighted["main_genre"].isin(featured), OTHER_GENRE
    )

    totals = (
        weighted.groupby(["decade_start", "decade", "genre"], observed=True)["weighted_votes"]
        .sum()
        .rename("total_votes")
        .reset_index()
    )
    decade_totals = totals.groupby("decade_start")["total_votes"].transform("sum")
    totals["proportion"] = totals["total_votes"] / decade_totals.where(decade_totals != 0, np.nan)

    totals["genre"] = pd.Categorical(totals["genre"], categories=genre_order(featured), ordered=True)
    totals = totals.sort_values(["decade_start", "genre"]).reset_index(drop=True)
    totals["genre"] = totals["genre"].astype(str)
    totals["decade_start"] = totals["decade_start"].astype(int)
    return totals


def genre_order(featured: Sequence[str] = VOTE_SHARE_GENRES) -> list[str]:
    return [genre for genre in featured if genre != OTHER_GENRE] + [OTHER_GENRE]


def decade_shares(
    vote_share: pd.DataFrame, featured: Sequence[str] = VOTE_SHARE_GENRES
) -> pd.DataFrame:
    """Pivot vote share rows into a decade by genre proportion matrix."""

    matrix = vote_share.pivot(index="decade", columns="genre", values="proportion")
    columns = [genre for genre in genre_order(featured) if genre in matrix.columns]
    return matrix.reindex(columns=columns).fillna(0.0)
