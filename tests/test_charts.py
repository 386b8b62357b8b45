from dashboard_core.charts import TOKEN_HEX, priority_chart, sprint_charts, sprint_status_chart, team_progress_chart, to_vega_spec
from dashboard_core.defaults import default_priorities, default_segments, default_teams
from dashboard_core.models import COLOR_SUCCESS


def test_sprint_status_chart_maps_color_tokens_to_hex():
    spec = to_vega_spec(sprint_status_chart(default_segments()))
    assert spec["mark"]["type"] == "arc"
    scale = spec["encoding"]["color"]["scale"]
    assert scale["domain"] == ["Done", "To-Do", "In Progress"]
    assert scale["range"][0] == TOKEN_HEX[COLOR_SUCCESS]


def test_priority_and_team_charts_are_vega_lite_specs():
    priority_spec = to_vega_spec(priority_chart(default_priorities()))
    team_spec = to_vega_spec(team_progress_chart(default_teams()))
    assert priority_spec["$schema"].startswith("https://vega.github.io/schema/vega-lite/")
    assert priority_spec["encoding"]["y"]["stack"] == "zero"
    assert team_spec["encoding"]["x"]["field"] == "completion"


def test_sprint_charts_skip_empty_views():
    charts = sprint_charts(default_segments(), [], default_teams())
    assert set(charts) == {"sprint_status", "team_progress"}
