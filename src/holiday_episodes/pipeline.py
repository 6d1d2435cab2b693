"""End-to-end holiday episode analysis.

``run_analysis`` computes every output table from the joined data without
touching the filesystem. ``main`` downloads the TidyTuesday tables, runs the
analysis and only then writes charts and the Markdown report, so a failure
anywhere in the computation leaves no partial artefacts behind.
"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import pandas as pd
import seaborn as sns
from loguru import logger

from .aggregation import summary_statistics, top_episodes, top_genre_comparison
from .charts import generate_density_chart, generate_rating_delta_chart, generate_vote_share_chart
from .config import CHARTS_DIR, DENSITY_TOP_K, EPISODES_PATH, GENRES_PATH, RAW_DIR, REPORTS_DIR, TOP_K
from .data import EpisodeTables, download_sources, join_datasets, load_tables
from .density import DensityAnalysis, analyze_top_genres
from .rating_delta import genre_rating_delta, top_rating_deltas
from .report import create_report
from .vote_share import compute_vote_share


@dataclass
class AnalysisResults:
    summary: pd.DataFrame
    top_genres: pd.DataFrame
    top_rated: pd.DataFrame
    top_voted: pd.DataFrame
    vote_share: pd.DataFrame
    density: DensityAnalysis
    rating_delta: pd.DataFrame
    top_deltas: pd.DataFrame


def run_analysis(tables: EpisodeTables, top_k: int = TOP_K, density_top_k: int = DENSITY_TOP_K) -> AnalysisResults:
    """Compute every summary table and plot-ready frame."""

    episodes = tables.episodes
    genre_rows = tables.genre_rows
    logger.info(f"Analysing {len(episodes)} episodes across {len(genre_rows)} genre rows")

    return AnalysisResults(
        summary=summary_statistics(tables),
        top_genres=top_genre_comparison(genre_rows, k=top_k),
        top_rated=top_episodes(episodes, by="average_rating", k=top_k),
        top_voted=top_episodes(episodes, by="num_votes", k=top_k),
        vote_share=compute_vote_share(genre_rows),
        density=analyze_top_genres(genre_rows, k=density_top_k),
        rating_delta=genre_rating_delta(genre_rows),
        top_deltas=top_rating_deltas(episodes, k=top_k),
    )


def _is_empty(data: pd.DataFrame | DensityAnalysis) -> bool:
    if isinstance(data, DensityAnalysis):
        return data.sweet_spots.empty
    return data.empty


def write_outputs(results: AnalysisResults, charts_dir: Path, reports_dir: Path) -> dict[str, Path]:
    """Render the charts and the report; returns the chart paths by title."""

    sns.set_theme(style="whitegrid", context="talk")
    charts_dir.mkdir(parents=True, exist_ok=True)

    charts = [
        ("Vote share by decade", "genre_vote_share.png", generate_vote_share_chart, results.vote_share),
        (
            "Runtime and rating sweet spots",
            "runtime_rating_sweet_spots.png",
            generate_density_chart,
            results.density,
        ),
        (
            "Rating difference vs. parent series",
            "rating_vs_series.png",
            generate_rating_delta_chart,
            results.rating_delta,
        ),
    ]

    chart_paths: dict[str, Path] = {}
    for title, filename, draw, data in charts:
        if _is_empty(data):
            logger.warning(f"Nothing to plot for '{title}', skipping chart")
            continue
        path = charts_dir / filename
        draw(data, path)
        chart_paths[title] = path

    create_report(results, chart_paths, reports_dir / "insights.md")
    return chart_paths


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Analyse TidyTuesday holiday TV episodes.")
    parser.add_argument("--data-dir", type=Path, default=RAW_DIR, help="Directory holding the source CSV files")
    parser.add_argument("--charts-dir", type=Path, default=CHARTS_DIR, help="Directory to save charts")
    parser.add_argument("--reports-dir", type=Path, default=REPORTS_DIR, help="Directory to save the report")
    parser.add_argument("--top-k", type=int, default=TOP_K, help="Length of ranked tables")
    parser.add_argument(
        "--density-top-k", type=int, default=DENSITY_TOP_K, help="Number of genres to estimate densities for"
    )
    parser.add_argument(
        "--offline", action="store_true", help="Use the CSV files in --data-dir without downloading"
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)

    episodes_path = args.data_dir / EPISODES_PATH.name
    genres_path = args.data_dir / GENRES_PATH.name
    if not args.offline:
        download_sources(episodes_path, genres_path)

    episodes, genres = load_tables(episodes_path, genres_path)
    tables = EpisodeTables(join_datasets(episodes, genres))
    results = run_analysis(tables, top_k=args.top_k, density_top_k=args.density_top_k)
    write_outputs(results, args.charts_dir, args.reports_dir)

    logger.info(f"Analysis complete. Charts available in {args.charts_dir}")


if __name__ == "__main__":
    main()
