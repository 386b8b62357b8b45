from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping, Optional, Tuple, Union

from dashboard_core.coerce import as_number_or_text, pick_text, pick_value
from dashboard_core.models import STATS_VARIANTS, StatsCounter
from dashboard_core.search import deep_search

DEFAULT_ICON = "📊"

TITLE_KEYS = ("title", "label", "name", "metric")
VALUE_KEYS = ("value", "count", "total", "amount")
SUBTITLE_KEYS = ("subtitle", "description", "caption")
ICON_KEYS = ("icon", "emoji")
VARIANT_KEYS = ("variant", "tone", "type")


@dataclass(frozen=True)
class CounterDefinition:
    icon: str
    title: str
    subtitle: str
    variant: str
    keys: Tuple[str, ...]
    keywords: Tuple[str, ...]


COUNTERS: Tuple[CounterDefinition, ...] = (
    CounterDefinition(
        "✅",
        "Completed Today",
        "Logged today",
        "success",
        ("completedToday", "completed_today", "completed", "doneToday", "done_today", "done"),
        ("complete", "done", "closed", "resolved"),
    ),
    CounterDefinition(
        "🔁",
        "Updated Today",
        "Tasks updated",
        "default",
        ("updatedToday", "updated_today", "updated", "modifiedToday", "modified_today"),
        ("update", "modif", "changed"),
    ),
    CounterDefinition(
        "🆕",
        "Created Today",
        "New tasks added",
        "info",
        ("createdToday", "created_today", "created", "newToday", "new_today", "new"),
        ("create", "new", "added"),
    ),
    CounterDefinition(
        "⚠️",
        "Overdue",
        "Needs attention",
        "danger",
        ("overdue", "overdueCount", "overdue_count", "overdueTasks", "overdue_tasks", "late"),
        ("overdue", "late", "blocked"),
    ),
)


def _display_value(value: Any) -> Optional[Union[int, float, str]]:
    coerced = as_number_or_text(value)
    if isinstance(coerced, float) and coerced.is_integer():
        return int(coerced)
    return coerced


def _match_definition(title: str) -> Optional[CounterDefinition]:
    lower = title.lower()
    for definition in COUNTERS:
        if any(k in lower for k in definition.keywords):
            return definition
    return None


def _counter_from_entry(entry: Any) -> Optional[StatsCounter]:
    title = pick_text(entry, TITLE_KEYS)
    value = _display_value(pick_value(entry, VALUE_KEYS))
    if title is None or value is None:
        return None
    definition = _match_definition(title)
    variant = pick_text(entry, VARIANT_KEYS)
    if variant not in STATS_VARIANTS:
        variant = definition.variant if definition else "default"
    return StatsCounter(
        icon=pick_text(entry, ICON_KEYS) or (definition.icon if definition else DEFAULT_ICON),
        title=title,
        value=value,
        subtitle=pick_text(entry, SUBTITLE_KEYS) or (definition.subtitle if definition else None),
        variant=variant,
    )


def _parse_stat_entries(entries: List[Any]) -> Optional[List[StatsCounter]]:
    counters = [c for c in (_counter_from_entry(e) for e in entries) if c is not None]
    return counters or None


def _parse_keyed_stats(payload: Mapping[str, Any]) -> Optional[List[StatsCounter]]:
    counters: List[StatsCounter] = []
    for definition in COUNTERS:
        value = _display_value(pick_value(payload, definition.keys))
        if value is None:
            continue
        counters.append(
            StatsCounter(
                icon=definition.icon,
                title=definition.title,
                value=value,
                subtitle=definition.subtitle,
                variant=definition.variant,
            )
        )
    return counters or None


def parse_stats(payload: Any) -> Optional[List[StatsCounter]]:
    if isinstance(payload, list):
        return _parse_stat_entries(payload)
    if isinstance(payload, Mapping):
        return _parse_keyed_stats(payload)
    return None


def build_stats(payload: Any) -> Optional[List[StatsCounter]]:
    """Summary counters from a task-summary payload; None when nothing is recognised."""
    return deep_search(payload, parse_stats)
