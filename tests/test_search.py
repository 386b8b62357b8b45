from dashboard_core.metrics_sprint import parse_status_segments
from dashboard_core.search import deep_search, is_wrapper


def test_deep_search_finds_array_at_depth_three():
    payload = {"a": {"b": {"c": [{"label": "Done", "percentage": 100}]}}}
    segments = deep_search(payload, parse_status_segments)
    assert segments is not None
    assert segments[0].label == "Done"
    assert segments[0].percentage == 100


def test_deep_search_gives_up_past_max_depth():
    payload = {"a": {"b": {"c": {"d": [{"label": "Done", "percentage": 100}]}}}}
    assert deep_search(payload, parse_status_segments) is None
    assert deep_search(payload, parse_status_segments, max_depth=4) is not None


def test_deep_search_returns_first_match_in_insertion_order():
    seen = []

    def builder(value):
        seen.append(value)
        return value if value in ("first", "second") else None

    assert deep_search({"x": ["first"], "y": "second"}, builder) == "first"
    assert "second" not in seen


def test_deep_search_treats_empty_results_as_misses():
    assert deep_search({"a": []}, lambda v: v if isinstance(v, list) else None) is None


def test_is_wrapper():
    assert is_wrapper({"data": [1], "meta": "x"})
    assert not is_wrapper({"done": 4, "todo": 2})
    assert not is_wrapper([1, 2])
