from __future__ import annotations

import math
import re
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Iterable, Mapping, Optional, Union

_NUMERIC_TEXT = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
_LABEL_SEPARATORS = re.compile(r"[_\-]+")
_WHITESPACE = re.compile(r"\s+")


def as_number(value: Any) -> Optional[float]:
    """Return a finite float for numbers or numeric-looking text, else None."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        out = float(value)
        return out if math.isfinite(out) else None
    if isinstance(value, str):
        s = value.strip().replace(",", "")
        if s.endswith("%"):
            s = s[:-1].strip()
        if not s or not _NUMERIC_TEXT.match(s):
            return None
        out = float(s)
        return out if math.isfinite(out) else None
    return None


def as_text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    s = value.strip()
    return s or None


def as_number_or_text(value: Any) -> Optional[Union[float, str]]:
    number = as_number(value)
    if number is not None:
        return number
    return as_text(value)


def normalize_label(text: str) -> str:
    """'in_progress' / 'in-progress' / ' in   progress ' -> 'In Progress'."""
    s = _LABEL_SEPARATORS.sub(" ", text or "")
    s = _WHITESPACE.sub(" ", s).strip()
    return " ".join(word[:1].upper() + word[1:].lower() for word in s.split(" ") if word)


def round_half_up(value: float) -> int:
    try:
        return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))
    except (InvalidOperation, ValueError):
        return int(math.floor(value + 0.5))


def clamp_percent(value: Any) -> int:
    number = as_number(value)
    if number is None:
        return 0
    if number >= 100:
        return 100
    return max(0, round_half_up(number))


def clamp_non_negative_int(value: Any) -> int:
    number = as_number(value)
    if number is None:
        return 0
    return max(0, round_half_up(number))


# ---------------- Record extractors ----------------
def pick_value(record: Any, keys: Iterable[str]) -> Any:
    """First alias whose raw value is present (not None, not blank text)."""
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        if value is None:
            continue
        if isinstance(value, str) and not value.strip():
            continue
        return value
    return None


def pick_text(record: Any, keys: Iterable[str]) -> Optional[str]:
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        text = as_text(record.get(key))
        if text is not None:
            return text
    return None


def pick_number(record: Any, keys: Iterable[str]) -> Optional[float]:
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        number = as_number(record.get(key))
        if number is not None:
            return number
    return None


def pick_id(record: Any, keys: Iterable[str]) -> Optional[str]:
    """Like pick_text, but integral numeric ids are accepted and rendered without '.0'."""
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        text = as_text(value)
        if text is not None:
            return text
        number = as_number(value) if not isinstance(value, str) else None
        if number is not None:
            return str(int(number)) if number.is_integer() else str(number)
    return None
