import pytest

from dashboard_core.metrics_sprint import build_status_segments
from dashboard_core.models import COLOR_INFO, COLOR_SUCCESS, COLOR_WARNING


def _tasks(*statuses):
    return {"tasks": [{"status": s, "title": f"task {i}"} for i, s in enumerate(statuses)]}


def test_segments_from_task_list_share_per_status():
    segments = build_status_segments(_tasks("Done", "Done", "Done", "In Progress", "Backlog", "To Do"))
    assert [(s.label, s.percentage, s.count) for s in segments] == [
        ("Done", 50, 3),
        ("To-Do", 33, 2),
        ("In Progress", 17, 1),
    ]
    assert [s.color for s in segments] == [COLOR_SUCCESS, COLOR_WARNING, COLOR_INFO]


@pytest.mark.parametrize(
    "statuses",
    [
        ("Done", "In Progress", "To Do"),
        ("Done", "Done", "In Progress", "Blocked", "Review", "Review", "QA"),
        ("Done",) * 7 + ("In Progress",) * 5 + ("Backlog",) * 3,
        ("Done", "In Progress", "To Do", "Review", "QA", "Staging"),
        ("Done", "In Progress", "To Do", "Review", "QA", "Staging", "Design"),
    ],
)
def test_segment_percentages_sum_to_about_one_hundred(statuses):
    total = sum(s.percentage for s in build_status_segments(_tasks(*statuses)))
    assert 99 <= total <= 101


def test_balanced_segments_sum_to_exactly_one_hundred():
    segments = build_status_segments(_tasks("Done", "In Progress", "To Do"), balance=True)
    assert sum(s.percentage for s in segments) == 100
    unbalanced = build_status_segments(_tasks("Done", "In Progress", "To Do"))
    assert sum(s.percentage for s in unbalanced) == 99


def test_pre_aggregated_percentages_keep_counts_absent():
    payload = [
        {"label": "Done", "percentage": 63},
        {"label": "To-Do", "percentage": "25"},
        {"label": "In Progress", "percentage": 12, "color": "#123456"},
    ]
    segments = build_status_segments(payload)
    assert [(s.label, s.percentage, s.count) for s in segments] == [
        ("Done", 63, None),
        ("To-Do", 25, None),
        ("In Progress", 12, None),
    ]
    assert segments[2].color == "#123456"
    assert segments[1].color == COLOR_WARNING


def test_pre_aggregated_counts_become_shares():
    payload = {"result": {"breakdown": [{"status": "done", "count": 6}, {"status": "pending", "count": 2}]}}
    segments = build_status_segments(payload)
    assert [(s.label, s.percentage, s.count) for s in segments] == [("done", 75, 6), ("pending", 25, 2)]


def test_object_keyed_by_status():
    segments = build_status_segments({"done": 5, "inProgress": 3, "todo": 2, "total": 10})
    assert [(s.label, s.percentage, s.count) for s in segments] == [
        ("Done", 50, 5),
        ("In Progress", 30, 3),
        ("To-Do", 20, 2),
    ]


@pytest.mark.parametrize("payload", [None, {}, [], "oops", {"message": "no data"}, [1, 2, 3]])
def test_unrecognised_payloads_are_absent(payload):
    assert build_status_segments(payload) is None


def test_many_equal_segments_are_corrected_back_to_one_hundred():
    six = build_status_segments(_tasks("Done", "In Progress", "To Do", "Review", "QA", "Staging"))
    assert [s.percentage for s in six] == [17, 17, 17, 17, 16, 16]
    seven = build_status_segments(_tasks("Done", "In Progress", "To Do", "Review", "QA", "Staging", "Design"))
    assert [s.percentage for s in seven] == [15, 15, 14, 14, 14, 14, 14]


def test_minimal_status_only_records_are_tasks():
    segments = build_status_segments([{"status": "Done"}, {"status": "Done"}, {"status": "In Progress"}])
    assert [(s.label, s.percentage, s.count) for s in segments] == [("Done", 67, 2), ("In Progress", 33, 1)]


def test_sprint_number_is_not_a_status_bucket():
    segments = build_status_segments({"sprint": 12, "done": 6, "inProgress": 2, "todo": 2})
    assert [(s.label, s.percentage, s.count) for s in segments] == [
        ("Done", 60, 6),
        ("In Progress", 20, 2),
        ("To-Do", 20, 2),
    ]


def test_team_record_is_not_a_status_breakdown():
    assert build_status_segments({"team": "Backend", "completed": 40, "capacity": 50}) is None
    assert build_status_segments({"velocity": 30, "points": 12, "completion": 80}) is None


def test_custom_bucket_needs_a_count():
    segments = build_status_segments({"done": 3, "review": {"count": 1}, "qa": 2})
    assert [(s.label, s.percentage, s.count) for s in segments] == [("Done", 75, 3), ("Review", 25, 1)]
