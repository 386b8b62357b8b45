from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from dashboard_core.classify import classify_priority, classify_status, priority_rank
from dashboard_core.coerce import as_text, clamp_non_negative_int, pick_number, pick_text
from dashboard_core.models import PriorityCounts, PriorityCrossTab, StatusCategory
from dashboard_core.search import deep_search, is_wrapper
from dashboard_core.tasks import aggregate_tasks, tasks_frame

BUCKETS = ("done", "in_progress", "todo")
CATEGORY_BUCKETS = {
    StatusCategory.DONE.value: "done",
    StatusCategory.IN_PROGRESS.value: "in_progress",
    StatusCategory.TODO.value: "todo",
    # Neither finished nor queued: counted as work in flight.
    StatusCategory.OTHER.value: "in_progress",
}

LABEL_KEYS = ("label", "priority", "name", "level", "title")
STATUS_KEYS = ("status", "state", "category")
COUNT_KEYS = ("count", "total", "value", "tasks")
BUCKET_KEYS = {
    "done": ("done", "completed", "complete", "closed", "resolved"),
    "in_progress": ("inProgress", "in_progress", "inprogress", "progress", "wip", "active", "doing"),
    "todo": ("todo", "toDo", "to_do", "backlog", "pending", "open"),
}


def _ordered(labels: List[str]) -> List[str]:
    return sorted(labels, key=lambda label: (priority_rank(label), labels.index(label)))


def _crosstab_from_tasks(payload: Any) -> Optional[List[PriorityCrossTab]]:
    tasks = aggregate_tasks(payload)
    if not tasks:
        return None
    df = tasks_frame(tasks)
    df["bucket"] = df["status_category"].map(CATEGORY_BUCKETS).fillna("in_progress")
    table = pd.crosstab(df["priority_label"], df["bucket"]).reindex(columns=list(BUCKETS), fill_value=0)
    labels = _ordered(list(dict.fromkeys(df["priority_label"].tolist())))
    return [
        PriorityCrossTab(
            label=label,
            counts=PriorityCounts(
                done=int(table.at[label, "done"]),
                in_progress=int(table.at[label, "in_progress"]),
                todo=int(table.at[label, "todo"]),
            ),
        )
        for label in labels
    ]


def _bucket_counts(record: Any) -> Optional[Dict[str, int]]:
    source = record.get("counts") if isinstance(record, Mapping) and isinstance(record.get("counts"), Mapping) else record
    found: Dict[str, int] = {}
    for bucket, keys in BUCKET_KEYS.items():
        value = pick_number(source, keys)
        if value is not None:
            found[bucket] = clamp_non_negative_int(value)
    return found or None


def _accumulate(rows: Dict[str, Dict[str, int]], label: str, counts: Dict[str, int]) -> None:
    row = rows.setdefault(label, {bucket: 0 for bucket in BUCKETS})
    for bucket, value in counts.items():
        row[bucket] += value


def _to_crosstab(rows: Dict[str, Dict[str, int]]) -> Optional[List[PriorityCrossTab]]:
    if not rows:
        return None
    return [
        PriorityCrossTab(label=label, counts=PriorityCounts(**rows[label]))
        for label in _ordered(list(rows.keys()))
    ]


def _parse_priority_entries(entries: List[Any]) -> Optional[List[PriorityCrossTab]]:
    rows: Dict[str, Dict[str, int]] = {}
    for entry in entries:
        label = pick_text(entry, LABEL_KEYS)
        if label is None:
            continue
        counts = _bucket_counts(entry)
        if counts is None:
            # Long format: one entry per (priority, status) pair.
            status = pick_text(entry, STATUS_KEYS)
            count = pick_number(entry, COUNT_KEYS)
            if status is None or count is None:
                continue
            category, _ = classify_status(status)
            counts = {CATEGORY_BUCKETS[category.value]: clamp_non_negative_int(count)}
        _accumulate(rows, classify_priority(label), counts)
    return _to_crosstab(rows)


def _parse_keyed_priorities(payload: Mapping[str, Any]) -> Optional[List[PriorityCrossTab]]:
    if is_wrapper(payload):
        return None
    rows: Dict[str, Dict[str, int]] = {}
    for key, value in payload.items():
        name = as_text(key)
        if name is None or not isinstance(value, Mapping):
            continue
        counts = _bucket_counts(value)
        if counts is None:
            continue
        _accumulate(rows, classify_priority(name), counts)
    return _to_crosstab(rows)


def parse_priority_crosstab(payload: Any) -> Optional[List[PriorityCrossTab]]:
    if isinstance(payload, list):
        return _parse_priority_entries(payload)
    if isinstance(payload, Mapping):
        return _parse_keyed_priorities(payload)
    return None


def build_priority_crosstab(payload: Any) -> Optional[List[PriorityCrossTab]]:
    crosstab = _crosstab_from_tasks(payload)
    if crosstab:
        return crosstab
    return deep_search(payload, parse_priority_crosstab)


def crosstab_frame(priorities: List[PriorityCrossTab]) -> pd.DataFrame:
    """Long-format frame: one row per (priority, bucket)."""
    rows = [
        {"label": p.label, "bucket": bucket, "count": getattr(p.counts, bucket)}
        for p in priorities
        for bucket in BUCKETS
    ]
    return pd.DataFrame(rows, columns=["label", "bucket", "count"])
