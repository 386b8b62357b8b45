from __future__ import annotations

from typing import Any, Dict, List

import altair as alt

from dashboard_core.metrics_priority import crosstab_frame
from dashboard_core.metrics_sprint import segments_frame
from dashboard_core.metrics_team import teams_frame
from dashboard_core.models import COLOR_DANGER, COLOR_INFO, COLOR_SUCCESS, COLOR_WARNING, PriorityCrossTab, StatusSegment, TeamCapacity

alt.data_transformers.disable_max_rows()

# Vega cannot resolve CSS custom properties.
TOKEN_HEX = {
    COLOR_SUCCESS: "#16a34a",
    COLOR_INFO: "#2563eb",
    COLOR_WARNING: "#f59e0b",
    COLOR_DANGER: "#dc2626",
}
BUCKET_TITLES = {"done": "Done", "in_progress": "In Progress", "todo": "To-Do"}
BUCKET_COLORS = [TOKEN_HEX[COLOR_SUCCESS], TOKEN_HEX[COLOR_INFO], TOKEN_HEX[COLOR_WARNING]]


def to_vega_spec(chart: alt.Chart) -> Dict[str, Any]:
    """Convert an Altair chart into a Vega-Lite spec dict (JSON-serializable)."""
    return chart.to_dict()


def sprint_status_chart(segments: List[StatusSegment]) -> alt.Chart:
    df = segments_frame(segments)
    df["hex"] = df["color"].map(lambda c: TOKEN_HEX.get(c, c))
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=55)
        .encode(
            theta=alt.Theta("percentage:Q"),
            color=alt.Color(
                "label:N",
                scale=alt.Scale(domain=df["label"].tolist(), range=df["hex"].tolist()),
                legend=alt.Legend(title=None),
            ),
            tooltip=["label", alt.Tooltip("percentage:Q", format="d", title="%")],
        )
        .properties(height=220, width=220)
    )


def priority_chart(priorities: List[PriorityCrossTab]) -> alt.Chart:
    df = crosstab_frame(priorities)
    df["status"] = df["bucket"].map(BUCKET_TITLES)
    return (
        alt.Chart(df)
        .mark_bar()
        .encode(
            x=alt.X("label:N", title=None, sort=[p.label for p in priorities]),
            y=alt.Y("count:Q", stack="zero", title="Tasks"),
            color=alt.Color(
                "status:N",
                scale=alt.Scale(domain=list(BUCKET_TITLES.values()), range=BUCKET_COLORS),
                legend=alt.Legend(title=None, orient="bottom"),
            ),
            tooltip=["label", "status", alt.Tooltip("count:Q", format=",")],
        )
        .properties(height=240)
    )


def team_progress_chart(teams: List[TeamCapacity]) -> alt.Chart:
    df = teams_frame(teams)
    return (
        alt.Chart(df)
        .mark_bar(color=TOKEN_HEX[COLOR_INFO], cornerRadiusEnd=4)
        .encode(
            x=alt.X("completion:Q", title="Completion %", scale=alt.Scale(domain=[0, 100])),
            y=alt.Y("name:N", title=None, sort=[t.name for t in teams]),
            tooltip=["name", "completed", "total", alt.Tooltip("completion:Q", format="d", title="%")],
        )
        .properties(height=40 * max(1, len(teams)))
    )


def sprint_charts(segments: List[StatusSegment], priorities: List[PriorityCrossTab], teams: List[TeamCapacity]) -> Dict[str, Any]:
    charts: Dict[str, Any] = {}
    if segments:
        charts["sprint_status"] = to_vega_spec(sprint_status_chart(segments))
    if priorities:
        charts["task_priority"] = to_vega_spec(priority_chart(priorities))
    if teams:
        charts["team_progress"] = to_vega_spec(team_progress_chart(teams))
    return charts
