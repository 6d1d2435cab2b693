import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest

from holiday_episodes.data import EpisodeTables


def make_episode(tconst, genres, year=2005, runtime=30.0, rating=7.5, votes=50, parent_rating=7.0, **extra):
    row = {
        "tconst": tconst,
        "parent_tconst": f"p{tconst}",
        "primary_title": f"A {tconst} Christmas",
        "year": year,
        "runtime_minutes": runtime,
        "genres": genres,
        "average_rating": rating,
        "num_votes": votes,
        "parent_primary_title": f"Series {tconst}",
        "parent_average_rating": parent_rating,
        "christmas": "TRUE",
        "hanukkah": "FALSE",
        "kwanzaa": "FALSE",
        "holiday": "FALSE",
    }
    row.update(extra)
    return row


@pytest.fixture
def raw_tables():
    episodes = [
        make_episode("tt0001", "Comedy,Drama", year=1995, rating=9.1, votes=100, parent_rating=8.4),
        make_episode("tt0002", "Horror", year=1995, votes=20, hanukkah="TRUE"),
        make_episode("tt0003", "Comedy", year=1949, votes=None),
        make_episode("tt0004", "Western", year=2023, runtime=None, votes=10, parent_rating=None),
        make_episode("tt0005", None, year=2010, votes=5),
    ]
    genres = [
        ("tt0001", "Comedy"),
        ("tt0001", "Drama"),
        ("tt0002", "Horror"),
        ("tt0003", "Comedy"),
        ("tt0004", "Western"),
    ]

    for i in range(15):
        tconst = f"tt1{i:03d}"
        episodes.append(
            make_episode(
                tconst,
                "Comedy",
                year=1990 + i,
                runtime=22.0 + (i % 5) * 2,
                rating=7.0 + (i % 4) * 0.3,
                votes=40 + i,
                parent_rating=6.8,
            )
        )
        genres.append((tconst, "Comedy"))

    for i in range(12):
        tconst = f"tt2{i:03d}"
        episodes.append(
            make_episode(
                tconst,
                "Drama",
                year=2000 + i,
                runtime=44.0 + (i % 3) * 3,
                rating=8.0 + (i % 5) * 0.2,
                votes=60 + i,
                parent_rating=8.5,
                kwanzaa="TRUE" if i == 0 else "FALSE",
            )
        )
        genres.append((tconst, "Drama"))

    for i in range(3):
        tconst = f"tt3{i:03d}"
        episodes.append(
            make_episode(tconst, "Sport", year=2015, runtime=60.0 + i, rating=6.0 + i, votes=5000)
        )
        genres.append((tconst, "Sport"))

    return pd.DataFrame(episodes), pd.DataFrame(genres, columns=["tconst", "genres"])


@pytest.fixture
def tables(raw_tables):
    episodes, genres = raw_tables
    return EpisodeTables.from_sources(episodes, genres)
