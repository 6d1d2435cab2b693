import pandas as pd
import pytest

from holiday_episodes.data import EpisodeTables
from holiday_episodes.errors import MissingInputFieldError
from holiday_episodes.pipeline import main, run_analysis, write_outputs


def _frames(results):
    return {
        "summary": results.summary,
        "top_genres": results.top_genres,
        "top_rated": results.top_rated,
        "top_voted": results.top_voted,
        "vote_share": results.vote_share,
        "surface": results.density.surface,
        "sweet_spots": results.density.sweet_spots,
        "rating_delta": results.rating_delta,
        "top_deltas": results.top_deltas,
    }


def test_run_analysis_is_repeatable(raw_tables):
    episodes, genres = raw_tables
    first = _frames(run_analysis(EpisodeTables.from_sources(episodes, genres)))
    second = _frames(run_analysis(EpisodeTables.from_sources(episodes, genres)))
    for name, frame in first.items():
        pd.testing.assert_frame_equal(frame, second[name], check_exact=True, obj=name)


def test_write_outputs_renders_charts_and_report(tables, tmp_path):
    results = run_analysis(tables)
    charts = write_outputs(results, tmp_path / "charts", tmp_path / "reports")

    assert len(charts) == 3
    for path in charts.values():
        assert path.exists() and path.stat().st_size > 0

    report = (tmp_path / "reports" / "insights.md").read_text(encoding="utf-8")
    assert "# Holiday TV episodes analysis" in report
    assert "Comedy sweet spot" in report
    assert "Sport sweet spot" not in report
    assert "../charts/genre_vote_share.png" in report


def test_main_runs_offline(raw_tables, tmp_path):
    episodes, genres = raw_tables
    data_dir = tmp_path / "raw"
    data_dir.mkdir()
    episodes.to_csv(data_dir / "holiday_episodes.csv", index=False)
    genres.to_csv(data_dir / "holiday_episode_genres.csv", index=False)

    main(
        [
            "--offline",
            "--data-dir",
            str(data_dir),
            "--charts-dir",
            str(tmp_path / "charts"),
            "--reports-dir",
            str(tmp_path / "reports"),
        ]
    )

    assert (tmp_path / "reports" / "insights.md").exists()
    assert (tmp_path / "charts" / "runtime_rating_sweet_spots.png").exists()


def test_main_fails_before_writing_on_bad_schema(raw_tables, tmp_path):
    episodes, genres = raw_tables
    data_dir = tmp_path / "raw"
    data_dir.mkdir()
    episodes.drop(columns=["parent_average_rating"]).to_csv(data_dir / "holiday_episodes.csv", index=False)
    genres.to_csv(data_dir / "holiday_episode_genres.csv", index=False)

    with pytest.raises(MissingInputFieldError):
        main(
            [
                "--offline",
                "--data-dir",
                str(data_dir),
                "--charts-dir",
                str(tmp_path / "charts"),
                "--reports-dir",
                str(tmp_path / "reports"),
            ]
        )

    assert not (tmp_path / "charts").exists()
    assert not (tmp_path / "reports").exists()
