from __future__ import annotations

import logging
import re
from dataclasses import asdict
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

import pandas as pd

from dashboard_core.classify import UNSPECIFIED, classify_priority, classify_status
from dashboard_core.coerce import as_text, clamp_non_negative_int, normalize_label, pick_number, pick_value
from dashboard_core.models import NormalizedTask, StatusCategory

logger = logging.getLogger(__name__)

TASK_LIST_KEYS = ("tasks", "items", "data", "results", "records")
MAX_NESTING = 3
UNASSIGNED_TEAM = "Unassigned"

STATUS_KEYS = (
    "status",
    "state",
    "statusName",
    "status_name",
    "taskStatus",
    "task_status",
    "statusCategory",
    "status_category",
    "column",
    "stage",
)
PRIORITY_KEYS = ("priority", "priorityName", "priority_name", "priorityLevel", "priority_level", "importance")
TEAM_KEYS = ("team", "teamName", "team_name", "squad", "group", "component", "department")
POINTS_KEYS = (
    "storyPoints",
    "story_points",
    "storyPoint",
    "story_point",
    "points",
    "estimate",
    "sp",
    "customfield_10016",
)
# Pre-aggregated entries such as {"status": "Done", "count": 4} are not tasks.
AGGREGATE_KEYS = (
    "count",
    "percentage",
    "percent",
    "pct",
    "share",
    "taskCount",
    "task_count",
    "total",
    "value",
    "number",
)

# Jira statusCategory.key values
JIRA_CATEGORY_KEYS = {
    "done": StatusCategory.DONE,
    "indeterminate": StatusCategory.IN_PROGRESS,
    "new": StatusCategory.TODO,
}
_NAME_KEYS = ("name", "value", "displayName", "label")
_LABEL_SEPARATORS = re.compile(r"[_\-]")


def _named(value: Any) -> Any:
    """Unwrap {'name': 'Done'}-style objects to their display text."""
    if isinstance(value, Mapping):
        for key in _NAME_KEYS:
            text = as_text(value.get(key))
            if text is not None:
                return text
        return None
    if isinstance(value, list):
        for item in value:
            named = _named(item)
            if named is not None:
                return named
        return None
    return value


def _flatten_record(record: Mapping[str, Any]) -> Dict[str, Any]:
    flat: Dict[str, Any] = dict(record)
    fields = record.get("fields")
    if isinstance(fields, Mapping):
        for key, value in fields.items():
            flat.setdefault(key, value)
    return flat


def _jira_category(status: Any) -> Optional[StatusCategory]:
    if not isinstance(status, Mapping):
        return None
    category = status.get("statusCategory")
    key = category.get("key") if isinstance(category, Mapping) else category
    return JIRA_CATEGORY_KEYS.get(str(key).lower()) if key is not None else None


def team_label(text: str) -> str:
    """Keep 'QA' and 'DevOps' as written; tidy 'platform_core' or 'frontend'."""
    tidy = " ".join(text.split())
    if _LABEL_SEPARATORS.search(tidy) or tidy.islower():
        return normalize_label(tidy)
    return tidy


def normalize_task(record: Any) -> Optional[NormalizedTask]:
    """Coerce one raw task record; None when the record is not a task."""
    if not isinstance(record, Mapping):
        return None
    flat = _flatten_record(record)
    raw_status = pick_value(flat, STATUS_KEYS)
    status_text = _named(raw_status)
    if as_text(status_text) is None:
        return None
    if pick_number(flat, AGGREGATE_KEYS) is not None:
        return None

    category, label = classify_status(status_text)
    jira_category = _jira_category(raw_status)
    if jira_category is not None and category is StatusCategory.OTHER:
        category = jira_category

    priority = classify_priority(_named(pick_value(flat, PRIORITY_KEYS)))
    team_text = as_text(_named(pick_value(flat, TEAM_KEYS)))
    team = team_label(team_text) if team_text else UNASSIGNED_TEAM
    points = pick_number(flat, POINTS_KEYS)

    return NormalizedTask(
        status_category=category,
        status_label=label,
        priority_label=priority or UNSPECIFIED,
        team_label=team or UNASSIGNED_TEAM,
        story_points=clamp_non_negative_int(points),
    )


def find_record_list(
    payload: Any,
    keys: Sequence[str] = TASK_LIST_KEYS,
    _depth: int = 0,
) -> Optional[List[Any]]:
    """Locate the record array: the payload itself, or the first candidate key holding one."""
    if isinstance(payload, list):
        return payload if payload else None
    if not isinstance(payload, Mapping) or _depth >= MAX_NESTING:
        return None
    for key in keys:
        value = payload.get(key)
        if isinstance(value, list) and value:
            return value
        if isinstance(value, Mapping):
            nested = find_record_list(value, keys, _depth + 1)
            if nested:
                return nested
    return None


def aggregate_tasks(payload: Any) -> Optional[List[NormalizedTask]]:
    records = find_record_list(payload)
    if not records:
        return None
    tasks: List[NormalizedTask] = []
    for record in records:
        task = normalize_task(record)
        if task is None:
            continue
        tasks.append(task)
    dropped = len(records) - len(tasks)
    if dropped and tasks:
        logger.debug("dropped %d of %d task records", dropped, len(records))
    return tasks or None


def tasks_frame(tasks: Iterable[NormalizedTask]) -> pd.DataFrame:
    rows = [asdict(t) for t in tasks]
    df = pd.DataFrame(
        rows,
        columns=["status_category", "status_label", "priority_label", "team_label", "story_points"],
    )
    if not df.empty:
        df["status_category"] = df["status_category"].map(lambda c: StatusCategory(c).value)
        df["story_points"] = pd.to_numeric(df["story_points"], errors="coerce").fillna(0).astype(int)
    return df
