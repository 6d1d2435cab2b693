"""Paths, data sources and analysis parameters."""

from __future__ import annotations

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent
RAW_DIR = BASE_DIR / "data" / "raw"
CHARTS_DIR = BASE_DIR / "charts"
REPORTS_DIR = BASE_DIR / "reports"

TIDYTUESDAY_URL = (
    "https://raw.githubusercontent.com/rfordatascience/tidytuesday/master/data/2023/2023-12-19"
)
EPISODES_URL = f"{TIDYTUESDAY_URL}/holiday_episodes.csv"
GENRES_URL = f"{TIDYTUESDAY_URL}/holiday_episode_genres.csv"
EPISODES_PATH = RAW_DIR / "holiday_episodes.csv"
GENRES_PATH = RAW_DIR / "holiday_episode_genres.csv"

ID_COLUMN = "tconst"
HOLIDAY_FLAGS = ("christmas", "hanukkah", "kwanzaa", "holiday")

REQUIRED_EPISODE_COLUMNS = (
    ID_COLUMN,
    "parent_tconst",
    "primary_title",
    "year",
    "runtime_minutes",
    "genres",
    "average_rating",
    "num_votes",
    "parent_primary_title",
    "parent_average_rating",
    *HOLIDAY_FLAGS,
)
REQUIRED_GENRE_COLUMNS = (ID_COLUMN, "genres")

NUMERIC_COLUMNS = (
    "year",
    "runtime_minutes",
    "average_rating",
    "num_votes",
    "parent_average_rating",
)
RATING_COLUMNS = ("average_rating", "parent_average_rating")

VOTE_SHARE_GENRES = ("Animation", "Comedy", "Family", "Drama", "Sci-Fi", "Western")
OTHER_GENRE = "Other"

TOP_K = 10
DENSITY_TOP_K = 5
DENSITY_GRID_SIZE = 200
RUNTIME_LIMITS = (0.0, 250.0)
RATING_LIMITS = (0.0, 10.0)
MIN_DENSITY_SAMPLE = 10
DENSITY_DISPLAY_THRESHOLD = 0.02
