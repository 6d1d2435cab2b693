import matplotlib.pyplot as plt

from holiday_episodes.charts import _save_figure, generate_density_chart
from holiday_episodes.density import analyze_top_genres


def test_save_figure_closes_and_writes(tmp_path):
    fig, ax = plt.subplots()
    ax.plot([0, 1], [0, 1])
    path = tmp_path / "nested" / "line.png"
    _save_figure(fig, path, bbox_inches="tight")
    assert path.exists() and path.stat().st_size > 0
    assert not plt.fignum_exists(fig.number)


def test_density_chart_is_saved(tables, tmp_path):
    analysis = analyze_top_genres(tables.genre_rows)
    path = tmp_path / "charts" / "sweet_spots.png"
    generate_density_chart(analysis, path)
    assert path.exists() and path.stat().st_size > 0
