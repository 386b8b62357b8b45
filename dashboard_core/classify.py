from __future__ import annotations

import re
from typing import Any, Optional, Tuple

from dashboard_core.coerce import as_number, as_text, normalize_label
from dashboard_core.models import COLOR_INFO, COLOR_SUCCESS, COLOR_WARNING, SEVERITIES, StatusCategory

UNSPECIFIED = "Unspecified"

DONE_KEYWORDS = ("done", "complete", "closed", "resolved")
IN_PROGRESS_KEYWORDS = ("progress", "wip", "active", "doing")
TODO_KEYWORDS = ("todo", "backlog", "pending", "queued", "blocked", "awaiting")

STATUS_LABELS = {
    StatusCategory.DONE: "Done",
    StatusCategory.IN_PROGRESS: "In Progress",
    StatusCategory.TODO: "To-Do",
}

# Ordered: first matching group wins.
SEVERITY_KEYWORDS: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("high", ("critical", "blocker", "urgent", "high", "p0", "p1", "major")),
    ("medium", ("medium", "p2", "moderate")),
    ("low", ("low", "minor", "p3", "p4", "trivial")),
    ("high", ("overdue", "late")),
)

PRIORITY_CODES = {"p0": "High", "p1": "High", "p2": "Medium", "p3": "Low", "p4": "Low"}
PRIORITY_ORDER = ("Highest", "Critical", "Blocker", "High", "Medium", "Low", "Lowest")

_SEPARATORS = re.compile(r"[\s_\-/]+")
# Compact spellings of the bucket names themselves: "In Progress", "to_do", "DONE".
_BUCKET_NAMES = frozenset(
    DONE_KEYWORDS
    + IN_PROGRESS_KEYWORDS
    + TODO_KEYWORDS
    + ("completed", "inprogress", "open", "new", "indeterminate")
)


def _contains_any(text: str, keywords: Tuple[str, ...]) -> bool:
    compact = _SEPARATORS.sub("", text)
    return any(k in text or k in compact for k in keywords)


def classify_status(text: Any) -> Tuple[StatusCategory, str]:
    """Map a free-text status to (category, display label)."""
    raw = as_text(text)
    if raw is None:
        return StatusCategory.OTHER, UNSPECIFIED
    lower = raw.lower()
    if _contains_any(lower, DONE_KEYWORDS):
        category = StatusCategory.DONE
    elif _contains_any(lower, IN_PROGRESS_KEYWORDS):
        category = StatusCategory.IN_PROGRESS
    elif _contains_any(lower, TODO_KEYWORDS):
        category = StatusCategory.TODO
    else:
        return StatusCategory.OTHER, normalize_label(raw) or UNSPECIFIED
    return category, STATUS_LABELS[category]


def is_status_bucket(text: Any) -> bool:
    """True when the whole text names a status bucket, not merely contains a keyword."""
    raw = as_text(text)
    return raw is not None and _SEPARATORS.sub("", raw.lower()) in _BUCKET_NAMES


def status_color(text: Any) -> str:
    lower = (as_text(text) or "").lower()
    if _contains_any(lower, DONE_KEYWORDS):
        return COLOR_SUCCESS
    if _contains_any(lower, TODO_KEYWORDS):
        return COLOR_WARNING
    return COLOR_INFO


def _severity_from_number(number: float) -> str:
    if number >= 3:
        return "high"
    if number <= 1:
        return "low"
    return "medium"


def classify_severity(value: Any, default: str = "medium") -> str:
    """Never fails: unrecognised input falls back to ``default``, not to a fixed level."""
    if default not in SEVERITIES:
        default = "medium"
    if isinstance(value, bool):
        return "high" if value else default
    if isinstance(value, (int, float)):
        number = as_number(value)
        return _severity_from_number(number) if number is not None else default
    text = as_text(value)
    if text is None:
        return default
    number = as_number(text)
    if number is not None:
        return _severity_from_number(number)
    lower = text.lower()
    for severity, keywords in SEVERITY_KEYWORDS:
        if _contains_any(lower, keywords):
            return severity
    return default


def classify_priority(value: Any) -> str:
    if isinstance(value, bool):
        return UNSPECIFIED
    number = as_number(value)
    if number is not None:
        if number <= 0:
            return "Highest"
        if number <= 1:
            return "High"
        if number <= 2:
            return "Medium"
        return "Low"
    text = as_text(value)
    if text is None:
        return UNSPECIFIED
    code = PRIORITY_CODES.get(text.lower())
    if code:
        return code
    return normalize_label(text) or UNSPECIFIED


def priority_rank(label: Optional[str]) -> int:
    if label in PRIORITY_ORDER:
        return PRIORITY_ORDER.index(label)
    if label == UNSPECIFIED:
        return len(PRIORITY_ORDER) + 1
    return len(PRIORITY_ORDER)
