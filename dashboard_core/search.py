from __future__ import annotations

from typing import Any, Callable, Mapping, Optional, TypeVar

T = TypeVar("T")

DEFAULT_MAX_DEPTH = 3


def deep_search(
    value: Any,
    builder: Callable[[Any], Optional[T]],
    max_depth: int = DEFAULT_MAX_DEPTH,
    _depth: int = 0,
) -> Optional[T]:
    """Depth-first search for the first sub-tree ``builder`` can parse.

    The builder is tried on ``value`` itself, then on each list element or
    mapping value (insertion order) one level deeper. Empty results count as
    misses. Nothing below ``max_depth`` is visited.
    """
    if _depth > max_depth:
        return None
    result = builder(value)
    if result:
        return result
    if isinstance(value, Mapping):
        children = list(value.values())
    elif isinstance(value, list):
        children = value
    else:
        return None
    for child in children:
        found = deep_search(child, builder, max_depth, _depth + 1)
        if found:
            return found
    return None


def is_wrapper(value: Any) -> bool:
    """Objects holding an array member wrap the real payload rather than naming buckets."""
    return isinstance(value, Mapping) and any(isinstance(v, list) for v in value.values())
