from __future__ import annotations

import math
from typing import Any, Dict, List, Mapping, Optional

import pandas as pd

from dashboard_core.classify import classify_status, status_color
from dashboard_core.coerce import (
    as_number,
    as_text,
    clamp_non_negative_int,
    clamp_percent,
    pick_number,
    pick_text,
)
from dashboard_core.models import StatusCategory, StatusSegment
from dashboard_core.search import deep_search, is_wrapper
from dashboard_core.tasks import aggregate_tasks, tasks_frame

LABEL_KEYS = ("label", "status", "name", "state", "category", "title")
PERCENT_KEYS = ("percentage", "percent", "pct", "share")
COUNT_KEYS = ("count", "total", "tasks", "taskCount", "task_count", "value", "number")
COLOR_KEYS = ("color", "colour", "tone")
# Keyed objects carrying one of these describe a record, not a status breakdown.
RECORD_KEYS = ("id", "key", "name", "title", "team", "teamName", "team_name", "assignee")
METRIC_KEYS = frozenset(
    ("sprint", "sprintid", "sprintnumber", "id", "capacity", "points", "velocity", "storypoints", "completion")
)


def _shares(counts: List[int], *, balance: bool) -> List[int]:
    """Percent share per count.

    Shares are rounded independently and may drift to 99 or 101. ``balance``
    forces an exact 100 by largest remainder; wider drift is always corrected.
    """
    total = sum(counts)
    if total <= 0:
        return [0 for _ in counts]
    raw = [100.0 * c / total for c in counts]
    rounded = [clamp_percent(r) for r in raw]
    if not balance and abs(sum(rounded) - 100) <= 1:
        return rounded
    floors = [math.floor(r) for r in raw]
    missing = 100 - sum(floors)
    order = sorted(range(len(raw)), key=lambda i: raw[i] - floors[i], reverse=True)
    for i in order[:missing]:
        floors[i] += 1
    return floors


def _segments_from_tasks(payload: Any, *, balance: bool) -> Optional[List[StatusSegment]]:
    tasks = aggregate_tasks(payload)
    if not tasks:
        return None
    df = tasks_frame(tasks)
    grouped = (
        df.groupby("status_label", sort=False)
        .size()
        .reset_index(name="count")
        .sort_values("count", ascending=False, kind="stable")
    )
    counts = [int(c) for c in grouped["count"].tolist()]
    shares = _shares(counts, balance=balance)
    return [
        StatusSegment(label=str(label), percentage=pct, color=status_color(label), count=count)
        for label, count, pct in zip(grouped["status_label"].tolist(), counts, shares)
    ]


def _parse_segment_entries(entries: List[Any], *, balance: bool) -> Optional[List[StatusSegment]]:
    parsed: List[Dict[str, Any]] = []
    for entry in entries:
        label = pick_text(entry, LABEL_KEYS)
        if label is None:
            continue
        pct = pick_number(entry, PERCENT_KEYS)
        count = pick_number(entry, COUNT_KEYS)
        if pct is None and count is None:
            continue
        parsed.append(
            {
                "label": label,
                "pct": pct,
                "count": clamp_non_negative_int(count) if count is not None else None,
                "color": pick_text(entry, COLOR_KEYS),
            }
        )
    if not parsed:
        return None

    # Percentages given only as counts are shares of the summed counts.
    shares = _shares([p["count"] or 0 for p in parsed], balance=balance)
    segments: List[StatusSegment] = []
    for p, share in zip(parsed, shares):
        pct = clamp_percent(p["pct"]) if p["pct"] is not None else share
        segments.append(
            StatusSegment(
                label=p["label"],
                percentage=pct,
                color=p["color"] or status_color(p["label"]),
                count=p["count"],
            )
        )
    return segments


def _parse_keyed_segments(payload: Mapping[str, Any], *, balance: bool) -> Optional[List[StatusSegment]]:
    if is_wrapper(payload) or pick_text(payload, RECORD_KEYS) is not None:
        return None
    entries: List[Dict[str, Any]] = []
    for key, value in payload.items():
        name = as_text(key)
        if name is None or name.lower().startswith("total") or name.lower() in METRIC_KEYS:
            continue
        category, label = classify_status(name)
        if category is StatusCategory.OTHER:
            # Custom buckets must say what they count.
            if isinstance(value, Mapping) and (
                pick_number(value, COUNT_KEYS) is not None or pick_number(value, PERCENT_KEYS) is not None
            ):
                entries.append({**value, "label": label})
        elif as_number(value) is not None:
            entries.append({"label": label, "count": value})
        elif isinstance(value, Mapping):
            entries.append({**value, "label": label})
    return _parse_segment_entries(entries, balance=balance) if entries else None


def parse_status_segments(payload: Any, *, balance: bool = False) -> Optional[List[StatusSegment]]:
    """Parse a pre-aggregated shape: entry array first, then bucket-keyed object."""
    if isinstance(payload, list):
        return _parse_segment_entries(payload, balance=balance)
    if isinstance(payload, Mapping):
        return _parse_keyed_segments(payload, balance=balance)
    return None


def build_status_segments(payload: Any, *, balance: bool = False) -> Optional[List[StatusSegment]]:
    segments = _segments_from_tasks(payload, balance=balance)
    if segments:
        return segments
    return deep_search(payload, lambda value: parse_status_segments(value, balance=balance))


def segments_frame(segments: List[StatusSegment]) -> pd.DataFrame:
    return pd.DataFrame(
        [{"label": s.label, "percentage": s.percentage, "color": s.color, "count": s.count} for s in segments],
        columns=["label", "percentage", "color", "count"],
    )
