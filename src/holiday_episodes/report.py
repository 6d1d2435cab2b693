"""Markdown report for the holiday episode analysis."""

from __future__ import annotations

from numbers import Integral, Real
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd
from loguru import logger

from .config import EPISODES_URL, GENRES_URL

if TYPE_CHECKING:
    from .pipeline import AnalysisResults


def _format_value(value: object) -> str:
    if value is None or (isinstance(value, Real) and pd.isna(value)):
        return "-"
    if isinstance(value, Integral):
        return f"{int(value):,}"
    if isinstance(value, Real):
        return f"{float(value):,.2f}"
    return str(value)


def _episode_table(episodes: pd.DataFrame) -> list[str]:
    lines = [
        "| Episode | Series | Year | Rating | Votes |",
        "| --- | --- | ---: | ---: | ---: |",
    ]
    for _, row in episodes.iterrows():
        year = "-" if pd.isna(row["year"]) else f"{int(row['year'])}"
        votes = "-" if pd.isna(row["num_votes"]) else f"{int(row['num_votes']):,}"
        rating = "-" if pd.isna(row["average_rating"]) else f"{row['average_rating']:.1f}"
        lines.append(
            f"| {row['primary_title']} | {row['parent_primary_title']} | {year} | {rating} | {votes} |"
        )
    return lines


def create_report(results: AnalysisResults, chart_paths: dict[str, Path], output_path: Path) -> None:
    """Write a Markdown report summarizing the analysis."""

    output_path.parent.mkdir(parents=True, exist_ok=True)

    report_lines = [
        "# Holiday TV episodes analysis",
        "",
        "## Dataset",
        f"* Episodes: [{EPISODES_URL}]({EPISODES_URL})",
        f"* Genres: [{GENRES_URL}]({GENRES_URL})",
        "",
        "| Metric | Value |",
        "| --- | ---: |",
    ]
    for _, row in results.summary.iterrows():
        report_lines.append(f"| {row['metric']} | {_format_value(row['value'])} |")

    report_lines.extend(["", "## Key findings"])

    latest = results.vote_share.dropna(subset=["proportion"])
    if not latest.empty:
        last_decade = latest["decade_start"].max()
        decade_rows = latest.loc[latest["decade_start"] == last_decade]
        leader = decade_rows.sort_values("proportion", ascending=False, kind="stable").iloc[0]
        report_lines.append(
            f"- **{leader['genre']} leads the audience in {leader['decade']}.** It draws"
            f" {leader['proportion']:.0%} of that decade's weighted votes."
        )
    for _, spot in results.density.sweet_spots.iterrows():
        report_lines.append(
            f"- **{spot['genre']} sweet spot.** Episodes cluster around {spot['runtime']:.0f} minutes"
            f" and a {spot['rating']:.1f} rating (n={int(spot['n_episodes'])})."
        )
    if not results.rating_delta.empty:
        best = results.rating_delta.iloc[-1]
        worst = results.rating_delta.iloc[0]
        report_lines.append(
            f"- **Holiday uplift is genre dependent.** {best['genre']} episodes rate {best['mean_diff']:+.2f}"
            f" against their series while {worst['genre']} episodes rate {worst['mean_diff']:+.2f}."
        )

    report_lines.extend(
        [
            "",
            "## Top genres",
            "",
            "| Rank | By mean votes | By mean rating | By episode count |",
            "| ---: | --- | --- | --- |",
        ]
    )
    for _, row in results.top_genres.iterrows():
        report_lines.append(
            f"| {row['rank']} | {_format_value(row['by_votes'])} | {_format_value(row['by_rating'])} |"
            f" {_format_value(row['by_count'])} |"
        )

    report_lines.extend(["", "## Highest rated episodes", ""])
    report_lines.extend(_episode_table(results.top_rated))
    report_lines.extend(["", "## Most voted episodes", ""])
    report_lines.extend(_episode_table(results.top_voted))

    report_lines.extend(
        [
            "",
            "## Rating difference vs. parent series",
            "",
            "| Genre | Mean difference | Episodes |",
            "| --- | ---: | ---: |",
        ]
    )
    for _, row in results.rating_delta.sort_values("mean_diff", ascending=False).iterrows():
        report_lines.append(f"| {row['genre']} | {row['mean_diff']:+.2f} | {int(row['n_episodes'])} |")

    report_lines.extend(
        [
            "",
            "### Episodes that most outshine their series",
            "",
            "| Episode | Series | Episode rating | Series rating | Difference |",
            "| --- | --- | ---: | ---: | ---: |",
        ]
    )
    for _, row in results.top_deltas.iterrows():
        report_lines.append(
            f"| {row['primary_title']} | {row['parent_primary_title']} | {row['average_rating']:.1f} |"
            f" {row['parent_average_rating']:.1f} | {row['rating_diff']:+.1f} |"
        )

    if chart_paths:
        report_lines.extend(["", "## Charts", ""])
        for title, path in chart_paths.items():
            relative = (Path("..") / path.parent.name / path.name).as_posix()
            report_lines.append(f"![{title}]({relative})")

    report_lines.append("")

    output_path.write_text("\n".join(report_lines), encoding="utf-8")
    logger.info(f"Wrote report to {output_path}")
