from dashboard_core.metrics_issues import (
    META_SEPARATOR,
    build_blocked_items,
    build_flagged_items,
    build_overdue_items,
    compose_meta,
    format_severity,
    severity_counts,
)


def test_meta_lists_due_then_owner():
    meta = compose_meta({"assignee": "Amy", "dueDate": "2024-05-01"})
    assert meta == f"Due: 2024-05-01{META_SEPARATOR}Owner: Amy"


def test_meta_uses_fixed_order_and_skips_absent_fields():
    record = {
        "owner": {"displayName": "Lee"},
        "days_overdue": 1,
        "blockedBy": "API-7",
        "deadline": "",
    }
    assert compose_meta(record) == f"Waiting on: API-7{META_SEPARATOR}Overdue by 1 day{META_SEPARATOR}Owner: Lee"
    assert compose_meta({"daysOverdue": 4}) == "Overdue by 4 days"
    assert compose_meta({"title": "nothing else"}) is None


def test_blocked_items_from_wrapped_list():
    payload = {
        "blockedItems": [
            {"key": "SHOP-1", "summary": "Checkout fails", "reason": "Waiting for vendor", "priority": "Low"},
            {"title": "No id here", "waitingOn": "Design"},
            {"id": 42, "title": "Numeric id"},
        ]
    }
    items = build_blocked_items(payload)
    assert [i.id for i in items] == ["SHOP-1", "#2", "42"]
    assert items[0].description == "Waiting for vendor"
    assert items[0].severity == "low"
    assert items[1].severity == "high"
    assert items[1].meta == "Waiting on: Design"


def test_overdue_items_use_their_own_default_severity():
    payload = [{"id": "T-1", "title": "Write docs"}, {"id": "T-2", "title": "Ship", "status": "late"}]
    items = build_overdue_items(payload)
    assert [i.severity for i in items] == ["medium", "medium"]
    flagged = build_flagged_items([{"id": "T-3", "title": "Fix", "severity": "overdue"}])
    assert flagged[0].severity == "high"


def test_ids_stay_unique():
    items = build_flagged_items([{"id": "A", "title": "x"}, {"id": "A", "title": "y"}, {"id": "A", "title": "z"}])
    assert [i.id for i in items] == ["A", "A-2", "A-3"]


def test_deeply_wrapped_items_and_keyed_objects():
    payload = {"response": {"payload": {"PROJ-9": {"summary": "Stuck deploy", "severity": 3}}}}
    items = build_flagged_items(payload)
    assert len(items) == 1
    assert items[0].id == "PROJ-9"
    assert items[0].title == "Stuck deploy"
    assert items[0].severity == "high"


def test_nothing_to_show():
    assert build_blocked_items({"blockedItems": []}) is None
    assert build_overdue_items(None) is None


def test_severity_helpers():
    items = build_flagged_items([{"id": 1, "title": "a", "severity": "p1"}, {"id": 2, "title": "b"}])
    assert dict(severity_counts(items)) == {"high": 1, "medium": 1, "low": 0}
    assert format_severity("medium") == "MED"
