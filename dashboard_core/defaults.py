"""Illustrative view-models shown when a payload cannot be fetched or parsed.

Blocked and overdue lists default to empty: "nothing to show" rather than "unknown".
"""

from __future__ import annotations

from typing import List

from dashboard_core.models import (
    COLOR_INFO,
    COLOR_SUCCESS,
    COLOR_WARNING,
    FlaggedItem,
    PriorityCounts,
    PriorityCrossTab,
    StatsCounter,
    StatusSegment,
    TeamCapacity,
)


def default_stats() -> List[StatsCounter]:
    return [
        StatsCounter(icon="✅", title="Completed Today", value=12, subtitle="Logged today", variant="success"),
        StatsCounter(icon="🔁", title="Updated Today", value=8, subtitle="Tasks updated"),
        StatsCounter(icon="🆕", title="Created Today", value=5, subtitle="New tasks added", variant="info"),
        StatsCounter(icon="⚠️", title="Overdue", value=3, subtitle="Needs attention", variant="danger"),
    ]


def default_segments() -> List[StatusSegment]:
    return [
        StatusSegment(label="Done", percentage=63, color=COLOR_SUCCESS),
        StatusSegment(label="To-Do", percentage=25, color=COLOR_WARNING),
        StatusSegment(label="In Progress", percentage=12, color=COLOR_INFO),
    ]


def default_priorities() -> List[PriorityCrossTab]:
    return [
        PriorityCrossTab(label="High", counts=PriorityCounts(done=10, in_progress=6, todo=2)),
        PriorityCrossTab(label="Medium", counts=PriorityCounts(done=8, in_progress=9, todo=4)),
        PriorityCrossTab(label="Low", counts=PriorityCounts(done=6, in_progress=5, todo=7)),
    ]


def default_teams() -> List[TeamCapacity]:
    return [
        TeamCapacity(name="Backend", completed_units=40, total_units=50),
        TeamCapacity(name="Frontend", completed_units=34, total_units=40),
        TeamCapacity(name="QA", completed_units=18, total_units=25),
        TeamCapacity(name="DevOps", completed_units=12, total_units=20),
    ]


def default_flagged_items() -> List[FlaggedItem]:
    return []
