import numpy as np
import pandas as pd
import pytest

from holiday_episodes.density import (
    analyze_genre,
    analyze_top_genres,
    estimate_density,
    find_sweet_spot,
    genre_sample,
)
from holiday_episodes.errors import InsufficientSampleError

RUNTIME = np.array([22, 24, 26, 28, 30, 22, 24, 26, 28, 30, 45, 25], dtype=float)
RATING = np.array([7.0, 7.3, 7.6, 7.9, 7.0, 7.3, 7.6, 7.9, 7.0, 7.3, 8.5, 6.9])


def test_surface_covers_fixed_grid():
    surface = estimate_density(RUNTIME, RATING, grid_size=50)
    assert len(surface) == 50 * 50
    assert surface["runtime"].min() == 0 and surface["runtime"].max() == 250
    assert surface["rating"].min() == 0 and surface["rating"].max() == 10
    assert surface["runtime"].is_monotonic_increasing


def test_sweet_spot_is_the_normalised_maximum():
    surface = estimate_density(RUNTIME, RATING)
    spot = find_sweet_spot(surface)
    assert spot["density"] == 1.0
    assert surface["density"].max() == 1.0
    assert (surface["density"] >= 0).all()
    assert 0 <= spot["runtime"] <= 250
    assert 0 <= spot["rating"] <= 10
    assert 15 < spot["runtime"] < 40


def test_estimate_is_deterministic():
    first = estimate_density(RUNTIME, RATING, grid_size=60)
    second = estimate_density(RUNTIME, RATING, grid_size=60)
    pd.testing.assert_frame_equal(first, second)


def test_too_few_points_raise():
    with pytest.raises(InsufficientSampleError):
        estimate_density(RUNTIME[:9], RATING[:9])


def test_collinear_sample_raises():
    with pytest.raises(InsufficientSampleError):
        estimate_density(np.full(12, 30.0), np.full(12, 7.5))


def test_ties_resolve_to_lowest_runtime_then_rating():
    surface = pd.DataFrame(
        {
            "runtime": [0.0, 10.0, 10.0, 20.0],
            "rating": [5.0, 2.0, 3.0, 1.0],
            "density": [0.5, 1.0, 1.0, 1.0],
        }
    )
    spot = find_sweet_spot(surface)
    assert (spot["runtime"], spot["rating"]) == (10.0, 2.0)


def test_genre_sample_drops_non_finite_rows(tables):
    sample = genre_sample(tables.genre_rows, "Western")
    assert sample.empty
    assert len(genre_sample(tables.genre_rows, "Comedy")) == 17


def test_display_surface_drops_faint_cells(tables):
    surface, spot = analyze_genre(tables.genre_rows, "Comedy")
    assert (surface["density"] > 0.02).all()
    assert (surface["genre"] == "Comedy").all()
    assert spot["density"] == 1.0
    assert spot["n_episodes"] == 17
    assert len(surface) < 200 * 200


def test_top_genres_skip_small_samples(tables):
    analysis = analyze_top_genres(tables.genre_rows, k=5)
    assert analysis.genres == ["Drama", "Comedy"]
    assert "Sport" not in set(analysis.surface["genre"])
    assert set(analysis.surface["genre"]) == {"Drama", "Comedy"}
    assert analysis.surface["density"].max() <= 1.0
    assert (analysis.sweet_spots["density"] == 1.0).all()


def test_top_genres_with_nothing_to_estimate():
    genre_rows = pd.DataFrame(
        {
            "tconst": ["a", "b", "c"],
            "main_genre": ["Sport"] * 3,
            "runtime_minutes": [60.0, 61.0, 62.0],
            "average_rating": [6.0, 7.0, 8.0],
            "num_votes": [10, 20, 30],
        }
    )
    analysis = analyze_top_genres(genre_rows)
    assert analysis.surface.empty
    assert analysis.sweet_spots.empty
    assert analysis.surface.columns.tolist() == ["runtime", "rating", "density", "genre"]
