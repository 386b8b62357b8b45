from __future__ import annotations

from typing import Any, List, Mapping, Optional, Tuple

import pandas as pd

from dashboard_core.classify import is_status_bucket
from dashboard_core.coerce import as_number, as_text, clamp_non_negative_int, pick_number, pick_text
from dashboard_core.models import StatusCategory, TeamCapacity
from dashboard_core.search import deep_search, is_wrapper
from dashboard_core.tasks import aggregate_tasks, tasks_frame

NAME_KEYS = ("name", "team", "teamName", "team_name", "label", "squad", "group")
POINTS_KEYS = (
    "points",
    "completed",
    "completedPoints",
    "completed_points",
    "completedUnits",
    "completed_units",
    "done",
    "donePoints",
    "done_points",
)
TOTAL_KEYS = (
    "total",
    "totalPoints",
    "total_points",
    "totalUnits",
    "total_units",
    "capacity",
    "planned",
    "committed",
    "storyPoints",
    "story_points",
)
PERCENT_KEYS = ("percentage", "percent", "pct", "progress", "completion", "completionRate", "completion_rate")


def _is_team_name(name: str) -> bool:
    """Status buckets and metric fields are not teams."""
    if name.lower().startswith("total") or name in POINTS_KEYS + TOTAL_KEYS + PERCENT_KEYS:
        return False
    return not is_status_bucket(name)


def reconcile_capacity(
    points: Optional[float],
    total: Optional[float],
    percentage: Optional[float],
) -> Optional[Tuple[int, int]]:
    """Derive the missing member of (points, total, percentage); total is clamped >= points."""
    if points is not None and total is not None:
        pass
    elif points is not None and percentage is not None:
        total = points / percentage * 100 if percentage > 0 else points
    elif total is not None and percentage is not None:
        points = percentage / 100 * total
    elif percentage is not None:
        points, total = percentage, 100.0
    elif points is not None:
        total = points
    elif total is not None:
        points = 0.0
    else:
        return None
    done = clamp_non_negative_int(points)
    return done, max(clamp_non_negative_int(total), done)


def _teams_from_tasks(payload: Any) -> Optional[List[TeamCapacity]]:
    tasks = aggregate_tasks(payload)
    if not tasks:
        return None
    df = tasks_frame(tasks)
    # A task without an estimate still counts as one unit of work.
    df["weight"] = df["story_points"].where(df["story_points"] > 0, 1)
    df["done_weight"] = df["weight"].where(df["status_category"] == StatusCategory.DONE.value, 0)
    grouped = (
        df.groupby("team_label", sort=False)
        .agg(completed=("done_weight", "sum"), total=("weight", "sum"))
        .reset_index()
    )
    return [
        TeamCapacity(name=str(row.team_label), completed_units=int(row.completed), total_units=int(row.total))
        for row in grouped.itertuples(index=False)
    ]


def _team_from_record(name: str, record: Any) -> Optional[TeamCapacity]:
    if isinstance(record, Mapping):
        reconciled = reconcile_capacity(
            pick_number(record, POINTS_KEYS),
            pick_number(record, TOTAL_KEYS),
            pick_number(record, PERCENT_KEYS),
        )
    else:
        # A bare number keyed by team is read as a completion percentage.
        reconciled = reconcile_capacity(None, None, as_number(record))
    if reconciled is None:
        return None
    done, total = reconciled
    return TeamCapacity(name=name, completed_units=done, total_units=total)


def _parse_team_entries(entries: List[Any]) -> Optional[List[TeamCapacity]]:
    teams: List[TeamCapacity] = []
    for entry in entries:
        name = pick_text(entry, NAME_KEYS)
        if name is None or not _is_team_name(name):
            continue
        team = _team_from_record(name, entry)
        if team is not None:
            teams.append(team)
    return teams or None


def _parse_keyed_teams(payload: Mapping[str, Any]) -> Optional[List[TeamCapacity]]:
    if is_wrapper(payload):
        return None
    teams: List[TeamCapacity] = []
    for key, value in payload.items():
        name = as_text(key)
        if name is None or not _is_team_name(name):
            continue
        if not isinstance(value, Mapping) and as_number(value) is None:
            continue
        team = _team_from_record(name, value)
        if team is not None:
            teams.append(team)
    return teams or None


def parse_team_capacity(payload: Any) -> Optional[List[TeamCapacity]]:
    if isinstance(payload, list):
        return _parse_team_entries(payload)
    if isinstance(payload, Mapping):
        return _parse_keyed_teams(payload)
    return None


def build_team_capacity(payload: Any) -> Optional[List[TeamCapacity]]:
    teams = _teams_from_tasks(payload)
    if teams:
        return teams
    return deep_search(payload, parse_team_capacity)


def teams_frame(teams: List[TeamCapacity]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"name": t.name, "completed": t.completed_units, "total": t.total_units, "completion": t.completion}
            for t in teams
        ],
        columns=["name", "completed", "total", "completion"],
    )
