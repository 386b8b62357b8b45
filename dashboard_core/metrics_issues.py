from __future__ import annotations

from typing import Any, List, Mapping, Optional, Sequence, Set

from dashboard_core.classify import classify_severity
from dashboard_core.coerce import as_text, normalize_label, pick_id, pick_number, pick_text, pick_value
from dashboard_core.models import FlaggedItem
from dashboard_core.search import deep_search
from dashboard_core.tasks import TASK_LIST_KEYS, find_record_list

META_SEPARATOR = " • "
UNTITLED = "Untitled task"

BLOCKED_LIST_KEYS = TASK_LIST_KEYS + ("issues", "blocked", "blockedItems", "blocked_items")
OVERDUE_LIST_KEYS = TASK_LIST_KEYS + ("issues", "overdue", "overdueItems", "overdue_items")

ID_KEYS = ("id", "key", "taskId", "task_id", "issueKey", "issue_key", "ticket", "number")
TITLE_KEYS = ("title", "summary", "name", "task", "taskName", "task_name", "subject")
DESCRIPTION_KEYS = (
    "description",
    "details",
    "reason",
    "blockedReason",
    "blocked_reason",
    "blocker",
    "note",
    "notes",
    "comment",
)
SEVERITY_KEYS = ("severity", "priority", "risk", "level", "impact", "urgency")
WAITING_ON_KEYS = (
    "waitingOn",
    "waiting_on",
    "blockedBy",
    "blocked_by",
    "dependency",
    "dependsOn",
    "depends_on",
)
DUE_KEYS = ("dueDate", "due_date", "due", "deadline", "dueOn", "due_on")
DAYS_OVERDUE_KEYS = ("daysOverdue", "days_overdue", "overdueDays", "overdue_days", "daysLate", "days_late")
ASSIGNEE_KEYS = ("assignee", "owner", "responsible", "lead", "contact")
_NAME_KEYS = ("name", "displayName", "value", "label", "key")


def _text(record: Mapping[str, Any], keys: Sequence[str]) -> Optional[str]:
    """pick_text that also unwraps {'displayName': ...} style objects."""
    text = pick_text(record, keys)
    if text is not None:
        return text
    value = pick_value(record, keys)
    if isinstance(value, Mapping):
        return pick_text(value, _NAME_KEYS)
    if isinstance(value, list):
        names = [as_text(v) or (pick_text(v, _NAME_KEYS) if isinstance(v, Mapping) else None) for v in value]
        joined = ", ".join(n for n in names if n)
        return joined or None
    return None


def _days_phrase(days: float) -> str:
    n = int(days) if float(days).is_integer() else days
    return f"Overdue by {n} day" if n == 1 else f"Overdue by {n} days"


def compose_meta(record: Any) -> Optional[str]:
    """Join waiting-on, due date, days overdue and owner, skipping absent parts."""
    if not isinstance(record, Mapping):
        return None
    parts: List[str] = []
    waiting_on = _text(record, WAITING_ON_KEYS)
    if waiting_on:
        parts.append(f"Waiting on: {waiting_on}")
    due = _text(record, DUE_KEYS)
    if due:
        parts.append(f"Due: {due}")
    days = pick_number(record, DAYS_OVERDUE_KEYS)
    if days is not None and days > 0:
        parts.append(_days_phrase(days))
    assignee = _text(record, ASSIGNEE_KEYS)
    if assignee:
        parts.append(f"Owner: {assignee}")
    return META_SEPARATOR.join(parts) or None


def _severity(record: Mapping[str, Any], default: str) -> str:
    value = pick_value(record, SEVERITY_KEYS)
    if isinstance(value, Mapping):
        value = pick_text(value, _NAME_KEYS)
    return classify_severity(value, default)


def _unique_id(candidate: str, seen: Set[str]) -> str:
    out = candidate
    n = 2
    while out in seen:
        out = f"{candidate}-{n}"
        n += 1
    seen.add(out)
    return out


def _flagged_item(record: Any, position: int, default_severity: str, key_id: Optional[str] = None) -> Optional[FlaggedItem]:
    if isinstance(record, str):
        title = as_text(record)
        if title is None:
            return None
        return FlaggedItem(id=key_id or f"#{position}", title=title, severity=default_severity)
    if not isinstance(record, Mapping):
        return None
    fields = record.get("fields")
    if isinstance(fields, Mapping):
        record = {**fields, **{k: v for k, v in record.items() if k != "fields"}}
    item_id = pick_id(record, ID_KEYS) or key_id
    title = _text(record, TITLE_KEYS)
    description = _text(record, DESCRIPTION_KEYS)
    if item_id is None and title is None and description is None:
        return None
    return FlaggedItem(
        id=item_id or f"#{position}",
        title=title or UNTITLED,
        description=description,
        severity=_severity(record, default_severity),
        meta=compose_meta(record),
    )


def _parse_item_list(records: List[Any], default_severity: str) -> Optional[List[FlaggedItem]]:
    items: List[FlaggedItem] = []
    seen: Set[str] = set()
    for position, record in enumerate(records, start=1):
        item = _flagged_item(record, position, default_severity)
        if item is None:
            continue
        items.append(
            FlaggedItem(
                id=_unique_id(item.id, seen),
                title=item.title,
                description=item.description,
                severity=item.severity,
                meta=item.meta,
            )
        )
    return items or None


def _parse_keyed_items(payload: Mapping[str, Any], default_severity: str) -> Optional[List[FlaggedItem]]:
    """{'PROJ-12': {...}, 'PROJ-19': {...}}: keys are item ids."""
    items: List[FlaggedItem] = []
    seen: Set[str] = set()
    for position, (key, value) in enumerate(payload.items(), start=1):
        if not isinstance(value, Mapping):
            continue
        item = _flagged_item(value, position, default_severity, key_id=as_text(key))
        if item is None or item.title == UNTITLED and item.description is None:
            continue
        items.append(
            FlaggedItem(
                id=_unique_id(item.id, seen),
                title=item.title,
                description=item.description,
                severity=item.severity,
                meta=item.meta,
            )
        )
    return items or None


def parse_flagged_items(payload: Any, *, default_severity: str = "medium") -> Optional[List[FlaggedItem]]:
    if isinstance(payload, list):
        return _parse_item_list(payload, default_severity)
    if isinstance(payload, Mapping):
        return _parse_keyed_items(payload, default_severity)
    return None


def build_flagged_items(
    payload: Any,
    *,
    default_severity: str = "medium",
    list_keys: Sequence[str] = TASK_LIST_KEYS,
) -> Optional[List[FlaggedItem]]:
    records = find_record_list(payload, list_keys)
    if records:
        items = _parse_item_list(records, default_severity)
        if items:
            return items
    return deep_search(payload, lambda value: parse_flagged_items(value, default_severity=default_severity))


def build_blocked_items(payload: Any) -> Optional[List[FlaggedItem]]:
    return build_flagged_items(payload, default_severity="high", list_keys=BLOCKED_LIST_KEYS)


def build_overdue_items(payload: Any) -> Optional[List[FlaggedItem]]:
    return build_flagged_items(payload, default_severity="medium", list_keys=OVERDUE_LIST_KEYS)


def severity_counts(items: List[FlaggedItem]) -> Mapping[str, int]:
    counts = {"high": 0, "medium": 0, "low": 0}
    for item in items:
        counts[item.severity] = counts.get(item.severity, 0) + 1
    return counts


def format_severity(severity: str) -> str:
    return {"high": "HIGH", "medium": "MED", "low": "LOW"}.get(severity, normalize_label(severity).upper())
