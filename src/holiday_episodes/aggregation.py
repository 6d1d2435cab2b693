"""Grouped aggregates, top-K rankings and summary tables."""

from __future__ import annotations

import pandas as pd

from .config import HOLIDAY_FLAGS, ID_COLUMN, TOP_K
from .data import EpisodeTables

AGGREGATIONS = ("mean", "count", "sum", "size")


def group_aggregate(df: pd.DataFrame, key: str, value: str, how: str = "mean") -> pd.Series:
    """Aggregate ``value`` per ``key`` with groups in encounter order.

    ``mean`` and ``sum`` skip missing values, ``count`` counts non-missing
    values and ``size`` counts rows. Rows whose key is missing are dropped.
    """

    if how not in AGGREGATIONS:
        raise ValueError(f"Unsupported aggregation '{how}', expected one of {AGGREGATIONS}")

    grouped = df.groupby(key, sort=False, dropna=True, observed=True)[value]
    if how == "size":
        return grouped.size()
    return grouped.agg(how)


def top_k(
    df: pd.DataFrame, key: str, value: str, how: str = "mean", k: int = TOP_K
) -> pd.Series:
    """Return the ``k`` groups with the largest aggregate, ties in encounter order."""

    aggregated = group_aggregate(df, key, value, how).dropna()
    return aggregated.sort_values(ascending=False, kind="stable").head(k)


def top_genre_comparison(genre_rows: pd.DataFrame, k: int = TOP_K) -> pd.DataFrame:
    """Rank genres by mean votes, mean rating and production count side by side."""

    rankings = {
        "by_votes": top_k(genre_rows, "main_genre", "num_votes", "mean", k),
        "by_rating": top_k(genre_rows, "main_genre", "average_rating", "mean", k),
        "by_count": top_k(genre_rows, "main_genre", ID_COLUMN, "count", k),
    }
    comparison = pd.DataFrame(
        {name: pd.Series(ranking.index.tolist(), dtype=object) for name, ranking in rankings.items()}
    )
    comparison.insert(0, "rank", range(1, len(comparison) + 1))
    return comparison


def top_episodes(episodes: pd.DataFrame, by: str = "average_rating", k: int = TOP_K) -> pd.DataFrame:
    """Return the ``k`` highest ranked episodes by ``by`` (rows missing it excluded)."""

    if by not in {"average_rating", "num_votes"}:
        raise ValueError(f"Cannot rank episodes by '{by}'")

    columns = [
        ID_COLUMN,
        "primary_title",
        "parent_primary_title",
        "year",
        "average_rating",
        "num_votes",
    ]
    ranked = episodes.loc[episodes[by].notna(), columns]
    return ranked.sort_values(by, ascending=False, kind="stable").head(k).reset_index(drop=True)


def summary_statistics(tables: EpisodeTables) -> pd.DataFrame:
    """Return the headline dataset counts as a ``metric``/``value`` table."""

    episodes = tables.episodes
    genre_rows = tables.genre_rows
    years = episodes["year"].dropna()

    metrics: dict[str, object] = {
        "Episodes": episodes[ID_COLUMN].nunique(),
        "Parent series": episodes["parent_tconst"].nunique(),
        "Genres": genre_rows["main_genre"].nunique(),
        "Earliest year": int(years.min()) if not years.empty else None,
        "Latest year": int(years.max()) if not years.empty else None,
    }
    for flag in HOLIDAY_FLAGS:
        label = "Generic holiday episodes" if flag == "holiday" else f"{flag.capitalize()} episodes"
        metrics[label] = int(episodes[flag].sum())
    metrics["Total votes"] = int(episodes["num_votes"].sum())

    return pd.DataFrame({"metric": list(metrics), "value": list(metrics.values())})
