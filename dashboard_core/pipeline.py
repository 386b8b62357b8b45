"""Payload -> view-model per dashboard family, with defaults substituted on a miss."""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Optional, TypeVar

from dashboard_core.defaults import (
    default_flagged_items,
    default_priorities,
    default_segments,
    default_stats,
    default_teams,
)
from dashboard_core.metrics_issues import build_blocked_items, build_overdue_items
from dashboard_core.metrics_priority import build_priority_crosstab
from dashboard_core.metrics_sprint import build_status_segments
from dashboard_core.metrics_stats import build_stats
from dashboard_core.metrics_team import build_team_capacity
from dashboard_core.models import FlaggedItem, SprintOverview, StatsCounter

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _build_or_default(name: str, builder: Callable[[Any], Optional[T]], payload: Any, default: Callable[[], T]) -> T:
    try:
        result = builder(payload)
    except Exception:
        logger.exception("%s builder failed", name)
        result = None
    if not result:
        if payload is not None:
            logger.info("%s payload not recognised; using default", name)
        return default()
    return result


def normalize_stats(payload: Any) -> List[StatsCounter]:
    return _build_or_default("stats", build_stats, payload, default_stats)


def normalize_sprint(payload: Any, *, balance: bool = False) -> SprintOverview:
    """The sprint-tasks payload feeds the status, priority and team views."""
    return SprintOverview(
        segments=_build_or_default(
            "sprint_status",
            lambda p: build_status_segments(p, balance=balance),
            payload,
            default_segments,
        ),
        priorities=_build_or_default("task_priority", build_priority_crosstab, payload, default_priorities),
        teams=_build_or_default("team_progress", build_team_capacity, payload, default_teams),
    )


def normalize_blocked(payload: Any) -> List[FlaggedItem]:
    return _build_or_default("blocked_items", build_blocked_items, payload, default_flagged_items)


def normalize_overdue(payload: Any) -> List[FlaggedItem]:
    return _build_or_default("overdue_items", build_overdue_items, payload, default_flagged_items)
