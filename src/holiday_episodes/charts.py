"""Matplotlib/seaborn charts for the three analyses."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import matplotlib.pyplot as plt
import pandas as pd
import seaborn as sns
from loguru import logger

from .config import OTHER_GENRE
from .density import DensityAnalysis
from .rating_delta import ABOVE_SERIES, BELOW_SERIES
from .vote_share import decade_shares

DIRECTION_COLORS = {ABOVE_SERIES: "#2e7d32", BELOW_SERIES: "#c62828"}
OTHER_COLOR = "#bdbdbd"


def _save_figure(fig: plt.Figure, path: Path, bbox_inches: Optional[str] = None) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    if bbox_inches is None:
        fig.tight_layout()
    fig.savefig(path, dpi=300, bbox_inches=bbox_inches)
    plt.close(fig)
    logger.info(f"Saved chart to {path}")


def generate_vote_share_chart(vote_share: pd.DataFrame, output_path: Path) -> None:
    """Plot each decade's vote share as stacked proportion bars."""

    matrix = decade_shares(vote_share)
    if matrix.empty:
        raise ValueError("No vote share rows to plot")

    featured = [genre for genre in matrix.columns if genre != OTHER_GENRE]
    colors = list(sns.color_palette("viridis", len(featured))) if featured else []
    if OTHER_GENRE in matrix.columns:
        colors.append(OTHER_COLOR)

    fig, ax = plt.subplots(figsize=(11, 7))
    matrix.plot(kind="bar", stacked=True, color=colors, width=0.85, edgecolor="white", ax=ax)
    ax.set_xlabel("Decade")
    ax.set_ylabel("Share of weighted votes")
    ax.set_ylim(0, 1)
    ax.set_title("Which genres hold the holiday audience, decade by decade")
    ax.tick_params(axis="x", rotation=45)
    ax.legend(title="Genre", bbox_to_anchor=(1.02, 1), loc="upper left", fontsize=10)

    _save_figure(fig, output_path)


def generate_density_chart(analysis: DensityAnalysis, output_path: Path) -> None:
    """Draw one runtime/rating heat map per genre with its sweet spot marked."""

    genres = analysis.genres
    if not genres:
        raise ValueError("No genre had enough episodes for a density estimate")

    fig, axes = plt.subplots(
        1, len(genres), figsize=(5 * len(genres), 5.5), sharex=True, sharey=True, squeeze=False
    )
    for ax, (_, spot) in zip(axes[0], analysis.sweet_spots.iterrows()):
        cells = analysis.surface.loc[analysis.surface["genre"] == spot["genre"]]
        mesh = ax.scatter(
            cells["runtime"],
            cells["rating"],
            c=cells["density"],
            cmap="magma_r",
            vmin=0,
            vmax=1,
            s=6,
            marker="s",
            linewidths=0,
        )
        ax.scatter(spot["runtime"], spot["rating"], marker="x", s=120, color="#1f4e79", linewidths=2.5)
        ax.annotate(
            f"{spot['runtime']:.0f} min\n{spot['rating']:.1f}",
            (spot["runtime"], spot["rating"]),
            xytext=(10, 10),
            textcoords="offset points",
            fontsize=10,
            fontweight="bold",
            color="#1f4e79",
        )
        ax.set_title(f"{spot['genre']} (n={int(spot['n_episodes'])})", fontsize=13)
        ax.set_xlabel("Runtime (minutes)")
    axes[0][0].set_ylabel("IMDb rating")

    cbar = fig.colorbar(mesh, ax=axes[0].tolist(), shrink=0.8)
    cbar.set_label("Relative density")
    fig.suptitle("Runtime and rating sweet spots by genre")

    # shared colorbar spans every facet, which tight_layout cannot place
    _save_figure(fig, output_path, bbox_inches="tight")


def generate_rating_delta_chart(delta: pd.DataFrame, output_path: Path) -> None:
    """Diverging bars of mean episode-minus-series rating per genre."""

    if delta.empty:
        raise ValueError("No genres with both episode and series ratings")

    colors = [DIRECTION_COLORS[direction] for direction in delta["direction"]]

    fig, ax = plt.subplots(figsize=(10, max(4, 0.4 * len(delta))))
    bars = ax.barh(delta["genre"], delta["mean_diff"], color=colors)
    ax.axvline(0, color="black", linewidth=1)
    ax.set_xlabel("Mean rating difference vs. parent series")
    ax.set_ylabel("")
    ax.set_title("Do holiday episodes beat their series average?")

    for bar, count in zip(bars, delta["n_episodes"]):
        width = bar.get_width()
        ax.text(
            width + (0.02 if width >= 0 else -0.02),
            bar.get_y() + bar.get_height() / 2,
            f"n={int(count)}",
            va="center",
            ha="left" if width >= 0 else "right",
            fontsize=9,
            color="dimgray",
        )

    _save_figure(fig, output_path)
